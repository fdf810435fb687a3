"""Data models for orders and blood requests."""

from .records import (
    STATUS_PLACED,
    STATUS_REQUESTED,
    BloodRequest,
    Contact,
    LineItem,
    OrderDraft,
    Record,
    RecordKind,
    compute_total,
    utc_timestamp,
)

__all__ = [
    "STATUS_PLACED",
    "STATUS_REQUESTED",
    "BloodRequest",
    "Contact",
    "LineItem",
    "OrderDraft",
    "Record",
    "RecordKind",
    "compute_total",
    "utc_timestamp",
]
