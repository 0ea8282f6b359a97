"""Field rules that keep customer drafts consistent before they reach the store."""
import re
from typing import Dict

from mdm_console.core.models import CustomerDraft

GST_PATTERN = re.compile(r"^\d{2}[A-Z]{5}\d{4}[A-Z][A-Z0-9]Z[A-Z0-9]$")
PAN_PATTERN = re.compile(r"^[A-Z]{5}\d{4}[A-Z]$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")
PHONE_SEPARATORS = re.compile(r"[\s\-()]")


def valid_gst(value: str) -> bool:
    return bool(GST_PATTERN.match(value.strip().upper()))


def valid_pan(value: str) -> bool:
    return bool(PAN_PATTERN.match(value.strip().upper()))


def valid_email(value: str) -> bool:
    """Exactly one ``@`` and at least one dot inside a non-empty domain label."""

    text = value.strip()
    if not EMAIL_PATTERN.match(text):
        return False
    domain = text.split("@", 1)[1]
    return "." in domain and all(part for part in domain.split("."))


def valid_phone(value: str) -> bool:
    """Accept 10-digit numbers, optionally prefixed with the 91 country code."""

    digits = PHONE_SEPARATORS.sub("", value.strip())
    if digits.startswith("+"):
        digits = digits[1:]
    if not digits.isdigit():
        return False
    return len(digits) == 10 or (len(digits) == 12 and digits.startswith("91"))


def validate_draft(draft: CustomerDraft) -> Dict[str, str]:
    """Return a mapping of field name to error message for a draft."""

    errors: Dict[str, str] = {}

    if not draft.name.strip():
        errors["name"] = "Customer name is required"

    # Optional fields are only checked when filled in.
    if draft.gst_number.strip() and not valid_gst(draft.gst_number):
        errors["gst_number"] = "GST number must look like 27AADCA0425P1Z7"
    if draft.pan_number.strip() and not valid_pan(draft.pan_number):
        errors["pan_number"] = "PAN must look like AADCA0425P"
    if draft.email_address.strip() and not valid_email(draft.email_address):
        errors["email_address"] = "Enter a valid email address"
    if draft.phone_number.strip() and not valid_phone(draft.phone_number):
        errors["phone_number"] = "Phone number must have 10 digits"

    return errors
