"""Data models for customer master records and the chat transcript."""
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from mdm_console.core.utils import clean_text, parse_timestamp

# Editable columns of the ``customers`` table, in display order.
DRAFT_FIELDS = (
    "name",
    "company",
    "gst_number",
    "pan_number",
    "address",
    "email_address",
    "phone_number",
)

# The assistant service is not consistent about key names in extracted data.
FIELD_ALIASES = {
    "customer_name": "name",
    "full_name": "name",
    "company_name": "company",
    "organization": "company",
    "gst": "gst_number",
    "gstin": "gst_number",
    "pan": "pan_number",
    "email": "email_address",
    "phone": "phone_number",
    "mobile": "phone_number",
}

UPPERCASE_FIELDS = {"gst_number", "pan_number"}


def canonical_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Map loose field names onto the store's column names.

    Canonical keys win over aliases when both are present.
    """

    resolved: Dict[str, Any] = {}
    for key, value in data.items():
        target = FIELD_ALIASES.get(key, key)
        if target in resolved and key != target:
            continue
        resolved[target] = value
    return resolved


@dataclass
class Customer:
    """A customer record as stored; ``id`` and ``created_at`` come from the store."""

    name: str
    id: Optional[Union[int, str]] = None
    company: Optional[str] = None
    gst_number: Optional[str] = None
    pan_number: Optional[str] = None
    address: Optional[str] = None
    email_address: Optional[str] = None
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Customer":
        """Build a customer from a store row or an assistant payload."""

        data = canonical_fields(row)
        created = data.get("created_at")
        if not isinstance(created, datetime):
            created = parse_timestamp(created)
        return cls(
            id=data.get("id"),
            name=clean_text(data.get("name")),
            company=clean_text(data.get("company")) or None,
            gst_number=clean_text(data.get("gst_number")) or None,
            pan_number=clean_text(data.get("pan_number")) or None,
            address=clean_text(data.get("address")) or None,
            email_address=clean_text(data.get("email_address")) or None,
            phone_number=clean_text(data.get("phone_number")) or None,
            created_at=created,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary representation."""

        return asdict(self)


@dataclass
class CustomerDraft:
    """Editable customer fields; never carries an identifier or timestamp."""

    name: str = ""
    company: str = ""
    gst_number: str = ""
    pan_number: str = ""
    address: str = ""
    email_address: str = ""
    phone_number: str = ""

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "CustomerDraft":
        """Prefill a draft from extracted card data or any customer-like mapping."""

        if not data:
            return cls()
        resolved = canonical_fields(data)
        values = {}
        for name in DRAFT_FIELDS:
            raw = resolved.get(name)
            values[name] = "" if raw is None else str(raw).strip()
        return cls(**values)

    def to_payload(self) -> Dict[str, str]:
        """Return trimmed, non-blank values ready to insert into the store."""

        payload: Dict[str, str] = {}
        for item in fields(self):
            value = (getattr(self, item.name) or "").strip()
            if not value:
                continue
            if item.name in UPPERCASE_FIELDS:
                value = value.upper()
            payload[item.name] = value
        return payload


@dataclass(frozen=True)
class PendingUpload:
    """A file staged in the chat input, waiting to be sent as a business card."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class ChatMessage:
    """One line of the chat transcript."""

    id: int
    text: str
    is_user: bool
    timestamp: str
    status: Optional[str] = None
    customer: Optional[Customer] = None
    candidates: Tuple[Customer, ...] = ()
    extracted: Optional[Mapping[str, Any]] = None
    image_preview: Optional[bytes] = field(default=None, repr=False)
