"""
Record and draft models for medicine orders and blood requests.

Field names follow the wire format of the remote order store (camelCase),
while Python code uses snake_case attributes. Legacy wire values
(``type: medicine|blood``, ``customer``) are accepted on input.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RecordKind(str, Enum):
    """Kinds of records the desk can create."""
    COMMODITY = "commodity"
    BIOLOGICAL_REQUEST = "biological-request"


_LEGACY_KINDS = {
    "medicine": RecordKind.COMMODITY,
    "blood": RecordKind.BIOLOGICAL_REQUEST,
}

STATUS_PLACED = "Placed"
STATUS_REQUESTED = "Requested"


def _coerce_kind(value: Any) -> Any:
    if isinstance(value, str):
        return _LEGACY_KINDS.get(value.strip().lower(), value)
    return value


def _coerce_text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Contact(BaseModel):
    """Who placed the order and where to reach them."""
    model_config = ConfigDict(extra="allow")

    name: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""

    @field_validator("name", "phone", "address", "city", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return _coerce_text(value)


class LineItem(BaseModel):
    """One cart line of a medicine order."""
    model_config = ConfigDict(extra="allow")

    sku: str
    name: str = ""
    price: float = Field(ge=0)
    qty: int = Field(ge=1)

    @property
    def subtotal(self) -> float:
        return self.price * self.qty


class BloodRequest(BaseModel):
    """Structured payload of a blood request."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    blood_type: str = Field(default="", alias="bloodType")
    units: str = ""
    urgency: str = ""
    hospital: str = ""
    patient_name: str = Field(default="", alias="patientName")

    @field_validator("blood_type", "units", "urgency", "hospital", "patient_name", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return _coerce_text(value)


def compute_total(items: List[LineItem]) -> float:
    """Sum of price times quantity over the items, rounded to cents."""
    return round(sum(item.subtotal for item in items), 2)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class OrderDraft(BaseModel):
    """
    Normalized input to a submission.

    Exactly one of ``items`` (medicine orders) or ``request`` (blood requests)
    is expected; the collaborator building the draft is responsible for
    rejecting an empty cart.
    """
    model_config = ConfigDict(populate_by_name=True)

    kind: RecordKind = Field(validation_alias=AliasChoices("kind", "type"))
    contact: Contact = Field(
        default_factory=Contact, validation_alias=AliasChoices("contact", "customer")
    )
    items: Optional[List[LineItem]] = None
    request: Optional[BloodRequest] = None
    note: str = ""

    @field_validator("kind", mode="before")
    @classmethod
    def _kind(cls, value: Any) -> Any:
        return _coerce_kind(value)

    @field_validator("note", mode="before")
    @classmethod
    def _note(cls, value: Any) -> Any:
        return _coerce_text(value)

    @classmethod
    def medicine(
        cls,
        contact: Dict[str, Any],
        items: List[Dict[str, Any]],
        note: str = "",
    ) -> "OrderDraft":
        return cls(kind=RecordKind.COMMODITY, contact=contact, items=items, note=note)

    @classmethod
    def blood(
        cls,
        contact: Dict[str, Any],
        request: Dict[str, Any],
        note: str = "",
    ) -> "OrderDraft":
        return cls(kind=RecordKind.BIOLOGICAL_REQUEST, contact=contact, request=request, note=note)

    def to_wire(self) -> Dict[str, Any]:
        """Body sent as ``{"order": ...}`` to the remote store."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Record(BaseModel):
    """
    A persisted medicine order or blood request.

    Records are never mutated once created. Unknown fields sent by the remote
    store are kept so that re-serializing a record reproduces what was read.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    id: str
    created_at: str = Field(default="", alias="createdAt")
    kind: RecordKind = Field(validation_alias=AliasChoices("kind", "type"))
    status: str = ""
    contact: Contact = Field(
        default_factory=Contact, validation_alias=AliasChoices("contact", "customer")
    )
    note: str = ""
    items: Optional[List[LineItem]] = None
    total: Optional[float] = None
    request: Optional[BloodRequest] = None

    @field_validator("kind", mode="before")
    @classmethod
    def _kind(cls, value: Any) -> Any:
        return _coerce_kind(value)

    @field_validator("note", "status", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return _coerce_text(value)

    @classmethod
    def from_draft(cls, order_id: str, draft: OrderDraft, created_at: Optional[str] = None) -> "Record":
        """
        Build the record persisted for a draft.

        Args:
            order_id: Identifier assigned to the record
            draft: Submitted draft
            created_at: Creation timestamp, defaults to now

        Returns:
            Record: The new record with status and total filled in
        """
        created_at = created_at or utc_timestamp()
        if draft.kind is RecordKind.COMMODITY:
            items = list(draft.items or [])
            return cls(
                id=order_id,
                created_at=created_at,
                kind=draft.kind,
                status=STATUS_PLACED,
                contact=draft.contact,
                note=draft.note,
                items=items,
                total=compute_total(items),
            )
        return cls(
            id=order_id,
            created_at=created_at,
            kind=draft.kind,
            status=STATUS_REQUESTED,
            contact=draft.contact,
            note=draft.note,
            request=draft.request or BloodRequest(),
        )

    def to_wire(self) -> Dict[str, Any]:
        """Plain-JSON representation used by the local cache."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
