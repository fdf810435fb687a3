"""
Tagged results of submissions, lookups and listings.

Each service returns one of these instead of raising, so callers can branch
on exactly which backend served the request and why.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from mediblood.errors import AccessRestricted, RemoteError
from mediblood.models import Record

NOT_FOUND_MESSAGE = "Order not found."
OFFLINE_LISTING_NOTICE = "Showing offline/local orders (offline mode)."
FALLBACK_LISTING_NOTICE = "Showing offline/local orders (admin API unavailable)."
RESTRICTED_LISTING_MESSAGE = "Admin list is available only from the same computer (localhost)."


class RecordSource(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class RemoteFailure:
    """What went wrong talking to the remote store."""
    kind: str
    message: str
    status_code: Optional[int] = None
    demoted: bool = False

    @classmethod
    def from_error(cls, error: RemoteError, demoted: bool = False) -> "RemoteFailure":
        return cls(
            kind=type(error).__name__,
            message=error.message,
            status_code=error.status_code,
            demoted=demoted,
        )


@dataclass(frozen=True)
class RemoteSuccess:
    order_id: str


@dataclass(frozen=True)
class LocalSuccess:
    order_id: str
    record: Record
    remote_failure: Optional[RemoteFailure] = None


@dataclass(frozen=True)
class BothFailed:
    remote_failure: Optional[RemoteFailure]
    local_error: str

    @property
    def message(self) -> str:
        # The remote error is what the user was trying to reach
        if self.remote_failure is not None:
            return self.remote_failure.message
        return self.local_error


SubmissionOutcome = Union[RemoteSuccess, LocalSuccess, BothFailed]


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class RetrievalResult:
    status: LookupStatus
    record: Optional[Record] = None
    source: Optional[RecordSource] = None
    remote_failure: Optional[RemoteFailure] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @property
    def message(self) -> str:
        if self.found or self.status is LookupStatus.SKIPPED:
            return ""
        if self.remote_failure is not None and self.remote_failure.message:
            return self.remote_failure.message
        return NOT_FOUND_MESSAGE


class ListingSource(str, Enum):
    REMOTE = "remote"
    CACHE_OFFLINE = "cache_offline"
    CACHE_FALLBACK = "cache_fallback"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Listing:
    """Records from exactly one store, plus a notice explaining which one."""
    source: ListingSource
    records: List[Record] = field(default_factory=list)
    notice: str = ""
    remote_failure: Optional[RemoteFailure] = None

    @property
    def ok(self) -> bool:
        return self.source is not ListingSource.UNAVAILABLE

    @classmethod
    def unavailable(cls, error: RemoteError, failure: RemoteFailure) -> "Listing":
        if isinstance(error, AccessRestricted):
            notice = RESTRICTED_LISTING_MESSAGE
        else:
            notice = error.message or "Failed to load admin list."
        return cls(source=ListingSource.UNAVAILABLE, notice=notice, remote_failure=failure)
