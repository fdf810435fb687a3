"""Reachability, identifiers and result types shared by the services."""

from .banner import StatusBanner
from .identifiers import LocalIdGenerator, is_local_id
from .outcomes import (
    BothFailed,
    Listing,
    ListingSource,
    LocalSuccess,
    LookupStatus,
    RecordSource,
    RemoteFailure,
    RemoteSuccess,
    RetrievalResult,
    SubmissionOutcome,
)
from .reachability import ConnectionMode, ReachabilityMonitor

__all__ = [
    "BothFailed",
    "ConnectionMode",
    "Listing",
    "ListingSource",
    "LocalIdGenerator",
    "LocalSuccess",
    "LookupStatus",
    "ReachabilityMonitor",
    "RecordSource",
    "RemoteFailure",
    "RemoteSuccess",
    "RetrievalResult",
    "StatusBanner",
    "SubmissionOutcome",
    "is_local_id",
]
