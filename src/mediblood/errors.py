"""
Error types raised by the order desk.

Remote failures carry the HTTP status (when there was one) and know whether
they should demote the session to offline mode.
"""

from typing import Optional


class OrderDeskError(Exception):
    """Base class for all order desk errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class RemoteError(OrderDeskError):
    """A call to the remote order store failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)

    @property
    def demotes_connection(self) -> bool:
        """Whether this failure means the remote store should be treated as gone."""
        return self.status_code is None or self.status_code >= 500


class RemoteUnreachable(RemoteError):
    """Network failure or timeout talking to the remote store."""


class RemoteServerError(RemoteError):
    """The remote store answered with a 5xx status."""


class RemoteProtocolError(RemoteError):
    """The remote store answered with something we cannot interpret."""

    @property
    def demotes_connection(self) -> bool:
        return True


class RecordNotFound(RemoteError):
    """The remote store has no record with the requested id."""

    @property
    def demotes_connection(self) -> bool:
        return False


class AccessRestricted(RemoteError):
    """The remote store refused the caller based on its location (403)."""


class RemoteRequestError(RemoteError):
    """Any other 4xx answer from the remote store."""


class StorageUnavailable(OrderDeskError):
    """The local key-value medium could not be read or written."""


class DraftValidationError(OrderDeskError):
    """A collaborator rejected a draft before submission."""


class SubmissionFailed(OrderDeskError):
    """Neither the remote store nor the local cache accepted a submission."""
