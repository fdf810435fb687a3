"""Identifiers for records created in the local cache."""

import random
import re
import time
from typing import Callable, Optional

BASE36_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# <PREFIX>-<base36 ms timestamp>-L<6 random base36 chars>
LOCAL_ID_PATTERN = re.compile(r"^[A-Z0-9]+-[0-9A-Z]+-L[0-9A-Z]{6}$")


def to_base36(value: int) -> str:
    """Encode a non-negative integer in upper-case base 36."""
    if value < 0:
        raise ValueError("base36 encoding needs a non-negative integer")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def is_local_id(value: str) -> bool:
    """True if the value has the shape of a locally generated id."""
    return bool(LOCAL_ID_PATTERN.match(value or ""))


class LocalIdGenerator:
    """
    Generates ids of the form ``MB-<timestamp>-L<suffix>``.

    The millisecond timestamp keeps ids roughly sortable; the random suffix
    makes collisions within the same millisecond astronomically unlikely,
    but uniqueness is probabilistic only.
    """

    def __init__(
        self,
        prefix: str = "MB",
        suffix_length: int = 6,
        clock: Optional[Callable[[], float]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.prefix = prefix.upper()
        self.suffix_length = suffix_length
        self._clock = clock or time.time
        self._rng = rng or random.SystemRandom()

    def generate(self) -> str:
        millis = int(self._clock() * 1000)
        suffix = "".join(self._rng.choice(BASE36_ALPHABET) for _ in range(self.suffix_length))
        return f"{self.prefix}-{to_base36(millis)}-L{suffix}"
