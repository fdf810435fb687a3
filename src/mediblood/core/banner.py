"""User-facing online/offline banner."""

from typing import Optional

from loguru import logger

from mediblood.core.reachability import ConnectionMode

ONLINE_MESSAGE = "Backend connected. Orders are saved on the server."
OFFLINE_MESSAGE = (
    "Offline demo mode: orders are saved only on this machine. "
    "Start the order server and set MEDIBLOOD_API_BASE_URL to enable the backend."
)


class StatusBanner:
    """Holds the banner text shown to the user and counts its updates."""

    def __init__(self):
        self.mode: Optional[ConnectionMode] = None
        self.message = ""
        self.updates = 0

    @property
    def ok(self) -> bool:
        return self.mode is ConnectionMode.ONLINE

    def update(self, mode: ConnectionMode) -> None:
        self.mode = mode
        self.message = ONLINE_MESSAGE if mode is ConnectionMode.ONLINE else OFFLINE_MESSAGE
        self.updates += 1
        logger.debug(f"Banner set to {mode.value}")
