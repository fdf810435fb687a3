"""Reachability tracking for the remote order store."""

import asyncio
from enum import Enum
from typing import Callable, List, Optional, Protocol

from loguru import logger


class ConnectionMode(str, Enum):
    """Which backend the session writes to and reads from."""
    ONLINE = "online"
    OFFLINE = "offline"


ModeListener = Callable[[ConnectionMode], None]


class HealthProbe(Protocol):
    async def health(self, timeout: Optional[float] = None) -> bool:
        ...


class ReachabilityMonitor:
    """
    Two-state ONLINE/OFFLINE tracker with a one-way latch.

    The initial state comes from a single health probe. Afterwards the
    monitor can only be demoted to OFFLINE, never promoted, until ``reset``
    starts a new session.
    """

    def __init__(self, listeners: Optional[List[ModeListener]] = None):
        """
        Initialize the monitor in OFFLINE mode.

        Args:
            listeners: Callbacks invoked with the new mode on every transition
        """
        self._mode = ConnectionMode.OFFLINE
        self._probed = False
        self._listeners: List[ModeListener] = list(listeners or [])
        self.demotion_reason: Optional[str] = None

    @property
    def mode(self) -> ConnectionMode:
        return self._mode

    @property
    def is_online(self) -> bool:
        return self._mode is ConnectionMode.ONLINE

    @property
    def probed(self) -> bool:
        return self._probed

    def add_listener(self, listener: ModeListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            try:
                listener(self._mode)
            except Exception as e:
                logger.error(f"Connection mode listener failed: {e}")

    async def probe(self, backend: HealthProbe, timeout: Optional[float] = None) -> ConnectionMode:
        """
        Determine the initial mode from one health check.

        Any failure, including a timeout, leaves the session OFFLINE. Only the
        first probe of a session has an effect.

        Args:
            backend: Object exposing an async ``health`` check
            timeout: Upper bound for the check in seconds

        Returns:
            ConnectionMode: The mode after probing
        """
        if self._probed:
            logger.debug("Reachability already probed this session; keeping current mode")
            return self._mode
        self._probed = True

        try:
            healthy = await asyncio.wait_for(backend.health(timeout=timeout), timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Health probe exceeded {timeout}s")
            healthy = False
        except Exception as e:
            logger.warning(f"Health probe failed: {e}")
            healthy = False

        self._mode = ConnectionMode.ONLINE if healthy else ConnectionMode.OFFLINE
        logger.info(f"Remote order store is {self._mode.value}")
        return self._mode

    def start_offline(self) -> ConnectionMode:
        """Skip probing entirely, e.g. when the backend is disabled."""
        self._probed = True
        self._mode = ConnectionMode.OFFLINE
        logger.info("Remote order store disabled; running offline")
        return self._mode

    def demote(self, reason: str = "") -> bool:
        """
        Latch the session to OFFLINE.

        Args:
            reason: Description of the failure that triggered the demotion

        Returns:
            True if this call changed the mode, False if already offline.
        """
        if not self.is_online:
            return False
        self._mode = ConnectionMode.OFFLINE
        self.demotion_reason = reason or None
        logger.warning(f"Switching to offline mode for the rest of the session: {reason or 'remote failure'}")
        self._notify()
        return True

    def reset(self) -> None:
        """Start a fresh session: OFFLINE and not yet probed."""
        self._mode = ConnectionMode.OFFLINE
        self._probed = False
        self.demotion_reason = None
