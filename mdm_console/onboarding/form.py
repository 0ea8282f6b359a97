"""Controller behind the new-customer onboarding form."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Optional

from mdm_console.core.errors import StoreUnavailable, ValidationError
from mdm_console.core.models import DRAFT_FIELDS, Customer, CustomerDraft
from mdm_console.core.validation import validate_draft

logger = logging.getLogger(__name__)

AUTO_CLOSE_SECONDS = 1.5

FIELD_LABELS = {
    "name": "Customer Name",
    "company": "Company",
    "gst_number": "GST Number",
    "pan_number": "PAN Number",
    "address": "Address",
    "email_address": "Email",
    "phone_number": "Phone",
}

FIELD_PLACEHOLDERS = {
    "name": "Enter full legal name",
    "company": "Company or trading name",
    "gst_number": "e.g. 27AADCA0425P1Z7",
    "pan_number": "e.g. AADCA0425P",
    "address": "Enter complete address",
    "email_address": "email@example.com",
    "phone_number": "+91 9876543210",
}


@dataclass(frozen=True)
class FormValidation:
    valid: bool
    field_errors: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SubmitOutcome:
    """Result of one submit attempt; exactly one of customer/error is set."""

    customer: Optional[Customer] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.customer is not None


class OnboardingForm:
    """Validate and save a customer draft, reporting the result as a banner.

    ``on_created`` receives the stored customer after a successful save; the
    console uses it to drop cached customer lists, counts and dashboard stats.
    """

    def __init__(
        self,
        store,
        prefill: Optional[CustomerDraft] = None,
        on_created: Optional[Callable[[Customer], None]] = None,
    ) -> None:
        self.store = store
        self.draft = replace(prefill) if prefill else CustomerDraft()
        self.on_created = on_created
        self.field_errors: Dict[str, str] = {}
        self.banner: Optional[tuple[str, str]] = None
        self.submitting = False
        self.closing = False
        self.closed = False
        self.created: Optional[Customer] = None

    def set_field(self, name: str, value: str) -> None:
        """Update one field and clear only that field's error."""

        if name not in DRAFT_FIELDS:
            raise KeyError(name)
        current = getattr(self.draft, name)
        value = value or ""
        if value != current:
            self.draft = replace(self.draft, **{name: value})
            self.field_errors.pop(name, None)

    def update(self, values: Dict[str, str]) -> None:
        for name, value in values.items():
            self.set_field(name, value)

    def validate(self) -> FormValidation:
        self.field_errors = validate_draft(self.draft)
        return FormValidation(valid=not self.field_errors, field_errors=dict(self.field_errors))

    def submit(self) -> SubmitOutcome:
        """Validate, then insert; failures leave the form open for another try."""

        if self.closed or self.submitting:
            return SubmitOutcome(error=ValidationError("Form is not accepting submissions"))

        validation = self.validate()
        if not validation.valid:
            self.banner = ("error", "Please fix the highlighted fields.")
            return SubmitOutcome(error=ValidationError("Invalid customer draft", validation.field_errors))

        self.submitting = True
        try:
            customer = self.store.create_customer(self.draft)
        except ValidationError as exc:
            logger.warning("Store rejected customer %r: %s", self.draft.name, exc)
            self.field_errors.update(exc.field_errors)
            self.banner = ("error", f"Could not create customer: {exc}")
            return SubmitOutcome(error=exc)
        except StoreUnavailable as exc:
            logger.warning("Store unavailable while creating %r: %s", self.draft.name, exc)
            self.banner = ("error", f"Customer store unavailable: {exc}")
            return SubmitOutcome(error=exc)
        finally:
            self.submitting = False

        self.created = customer
        self.banner = ("success", f"Customer '{customer.name}' created successfully.")
        self.closing = True
        if self.on_created:
            try:
                self.on_created(customer)
            except Exception:
                logger.exception("Post-create hook failed for customer %s", customer.id)
        return SubmitOutcome(customer=customer)

    def cancel(self) -> None:
        """Discard the draft without touching the store; repeated calls are no-ops."""

        if self.closed:
            return
        self.draft = CustomerDraft()
        self.field_errors = {}
        self.banner = None
        self.closed = True

    def finish(self) -> None:
        """Close after the success banner has been shown."""

        self.closing = False
        self.closed = True
