"""Typed views of the assistant service's status-keyed responses.

Each status maps to one variant carrying only the fields valid for it, so the
chat session never has to look up optional keys on a raw dictionary.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from mdm_console.core.models import Customer

logger = logging.getLogger(__name__)

FOUND_SINGLE = "found_single"
FOUND_MULTIPLE = "found_multiple"
DISAMBIGUATION_RESOLVED = "disambiguation_resolved"
EXISTING_CUSTOMER_CHAT = "existing_customer_chat"
NOT_FOUND = "not_found"
EXISTING_CUSTOMER_CARD = "existing_customer_card"
NEW_CUSTOMER_CARD = "new_customer_card"
EXTRACTION_FAILED_CARD = "extraction_failed_card"
ERROR = "error"
GREETING = "greeting"
ERROR_RESPONSE = "error_response"
UNKNOWN = "unknown"
# Local confirmation after the onboarding form saved a customer.
CUSTOMER_CREATED = "customer_created"

ERROR_STATUSES = frozenset({ERROR, ERROR_RESPONSE, EXTRACTION_FAILED_CARD})
CREATION_ELIGIBLE_STATUSES = frozenset({NOT_FOUND, NEW_CUSTOMER_CARD})


@dataclass(frozen=True)
class CustomerMatch:
    """A single customer resolved from a chat query."""

    status: str
    message: str
    customer: Customer


@dataclass(frozen=True)
class MultipleMatches:
    status: str
    message: str
    candidates: Tuple[Customer, ...]


@dataclass(frozen=True)
class NotFound:
    status: str
    message: str


@dataclass(frozen=True)
class CardMatch:
    """A business card that matched an existing customer."""

    status: str
    message: str
    customer: Customer


@dataclass(frozen=True)
class CardExtracted:
    """Fields read off a card that matched nobody."""

    status: str
    message: str
    extracted: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExtractionFailed:
    status: str
    message: str
    raw_text: str = ""


@dataclass(frozen=True)
class AssistantError:
    status: str
    message: str


@dataclass(frozen=True)
class Greeting:
    status: str
    message: str


@dataclass(frozen=True)
class Unknown:
    status: str
    message: str


AssistantResponse = Union[
    CustomerMatch,
    MultipleMatches,
    NotFound,
    CardMatch,
    CardExtracted,
    ExtractionFailed,
    AssistantError,
    Greeting,
    Unknown,
]


class MalformedResponse(ValueError):
    """Raised internally when a status arrives without the payload it needs."""


def _customer(value: Any) -> Customer:
    if not isinstance(value, Mapping) or not value.get("name"):
        raise MalformedResponse("customer payload missing")
    return Customer.from_row(value)


def _extracted(payload: Mapping[str, Any]) -> Dict[str, Any]:
    data = payload.get("extracted_data")
    if not isinstance(data, Mapping):
        raise MalformedResponse("extracted_data missing")
    return dict(data)


def _single(status: str, message: str, payload: Mapping[str, Any]) -> CustomerMatch:
    return CustomerMatch(status, message, _customer(payload.get("customer_data")))


def _multiple(status: str, message: str, payload: Mapping[str, Any]) -> MultipleMatches:
    raw = payload.get("customer_data")
    if not isinstance(raw, list):
        raw = payload.get("customers")
    if not isinstance(raw, list) or not raw:
        raise MalformedResponse("candidate list missing")
    return MultipleMatches(status, message, tuple(_customer(item) for item in raw))


def _card_match(status: str, message: str, payload: Mapping[str, Any]) -> CardMatch:
    return CardMatch(status, message, _customer(payload.get("matched_customer")))


def _card_extracted(status: str, message: str, payload: Mapping[str, Any]) -> CardExtracted:
    return CardExtracted(status, message, _extracted(payload))


def _extraction_failed(status: str, message: str, payload: Mapping[str, Any]) -> ExtractionFailed:
    raw_text = payload.get("raw_text")
    extracted = payload.get("extracted_data")
    if not raw_text and isinstance(extracted, Mapping):
        raw_text = extracted.get("raw_text")
    return ExtractionFailed(status, message, str(raw_text or "").strip())


VARIANTS: Dict[str, Callable[[str, str, Mapping[str, Any]], AssistantResponse]] = {
    FOUND_SINGLE: _single,
    DISAMBIGUATION_RESOLVED: _single,
    EXISTING_CUSTOMER_CHAT: _single,
    FOUND_MULTIPLE: _multiple,
    NOT_FOUND: lambda status, message, _: NotFound(status, message),
    EXISTING_CUSTOMER_CARD: _card_match,
    NEW_CUSTOMER_CARD: _card_extracted,
    EXTRACTION_FAILED_CARD: _extraction_failed,
    ERROR: lambda status, message, _: AssistantError(status, message),
    GREETING: lambda status, message, _: Greeting(status, message),
}


def parse_response(payload: Optional[Mapping[str, Any]]) -> AssistantResponse:
    """Turn a decoded JSON body into its status variant.

    Unrecognised statuses and statuses missing their payload degrade to
    ``Unknown`` so the transcript still shows the server's message.
    """

    if not isinstance(payload, Mapping):
        return Unknown(UNKNOWN, "")
    status = str(payload.get("status") or UNKNOWN)
    message = str(payload.get("message") or "")
    builder = VARIANTS.get(status)
    if builder is None:
        logger.info("Unrecognised assistant status %r", status)
        return Unknown(UNKNOWN, message)
    try:
        return builder(status, message, payload)
    except MalformedResponse as exc:
        logger.warning("Assistant status %s without usable payload: %s", status, exc)
        return Unknown(UNKNOWN, message)
