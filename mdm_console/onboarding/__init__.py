"""New customer onboarding."""
from mdm_console.onboarding.form import (
    AUTO_CLOSE_SECONDS,
    FIELD_LABELS,
    FormValidation,
    OnboardingForm,
    SubmitOutcome,
)

__all__ = ["AUTO_CLOSE_SECONDS", "FIELD_LABELS", "FormValidation", "OnboardingForm", "SubmitOutcome"]
