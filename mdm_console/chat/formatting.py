"""Texts the assistant side of the chat shows to the user."""
from typing import Any, Iterable, Mapping

from mdm_console.core.models import Customer, canonical_fields

WELCOME_TEXT = (
    "I'm here to help! Try something like 'Find customer Acme Corporation', "
    "upload a business card, or ask me about GST or customer onboarding."
)
NOT_FOUND_TEXT = "Sorry, I can't find it in my database. Please check the name or provide a GST number."
ONBOARDING_CHECKLIST_TEXT = (
    "This customer does not exist. To create a new customer, please have the following ready:\n\n"
    "• GST Number\n"
    "• PAN Number\n"
    "• Soft copies of ID Proofs"
)
CREATE_FROM_CARD_TEXT = "No existing customer matches this card. Would you like to create a new customer with these details?"
MULTIPLE_MATCHES_TEXT = "I found several customers that match. Select one to view its details:"
EXTRACTION_FAILED_TEXT = "I couldn't read the details from that card. Please try a clearer image."
GENERIC_ERROR_TEXT = "Something went wrong while processing your request."
FALLBACK_TEXT = (
    "I understand you're looking for information. Could you provide more details "
    "like a company name or GST number?"
)
OPEN_FORM_TEXT = "Sure, let's onboard a new customer. Fill in the form below."

DETAIL_LABELS = (
    ("name", "Name"),
    ("company", "Company"),
    ("gst_number", "GST"),
    ("pan_number", "PAN"),
    ("email_address", "Email"),
    ("phone_number", "Phone"),
    ("address", "Address"),
)

def customer_details(customer: Customer) -> str:
    """Render the non-empty fields of a customer, one per line."""

    lines = []
    for attribute, label in DETAIL_LABELS:
        value = getattr(customer, attribute)
        if value:
            lines.append(f"{label}: {value}")
    return "\n".join(lines)


def found_text(heading: str, customer: Customer) -> str:
    heading = heading.strip() or "Customer found:"
    return f"{heading}\n\n{customer_details(customer)}"


def extracted_summary(heading: str, extracted: Mapping[str, Any]) -> str:
    """List extracted card fields under a heading, skipping empty ones."""

    heading = heading.strip() or "I extracted these details from the card:"
    fields = canonical_fields(extracted)
    lines = []
    for key, label in DETAIL_LABELS:
        value = fields.get(key)
        if not value:
            continue
        lines.append(f"{label}: {value}")
    if not lines:
        return heading
    return heading + "\n\n" + "\n".join(lines)


def candidates_text(heading: str, candidates: Iterable[Customer]) -> str:
    heading = heading.strip() or MULTIPLE_MATCHES_TEXT
    lines = []
    for index, customer in enumerate(candidates, start=1):
        suffix = f" ({customer.gst_number})" if customer.gst_number else ""
        lines.append(f"{index}. {customer.name}{suffix}")
    return heading + "\n\n" + "\n".join(lines)


def extraction_failed_text(message: str, raw_text: str) -> str:
    text = message.strip() or EXTRACTION_FAILED_TEXT
    if raw_text:
        text += f"\n\nText read from the card:\n{raw_text}"
    return text


def error_text(detail: str) -> str:
    return f"Sorry, I ran into a problem: {detail}" if detail else GENERIC_ERROR_TEXT


def created_text(customer: Customer) -> str:
    return f"Customer '{customer.name}' has been created.\n\n{customer_details(customer)}"
