"""Master data management console: customer store, assistant chat and onboarding."""
from mdm_console.assistant import AssistantClient, ensure_jpeg, parse_response
from mdm_console.chat import ChatSession, ChatState
from mdm_console.core import (
    ChatMessage,
    ConversionError,
    Customer,
    CustomerDraft,
    PendingUpload,
    RemoteServiceError,
    Settings,
    StoreUnavailable,
    ValidationError,
    configure_logging,
    load_settings,
    validate_draft,
)
from mdm_console.onboarding import OnboardingForm
from mdm_console.store import CustomerStore, build_filter, compute_stats

__all__ = [
    "AssistantClient",
    "ChatMessage",
    "ChatSession",
    "ChatState",
    "ConversionError",
    "Customer",
    "CustomerDraft",
    "CustomerStore",
    "OnboardingForm",
    "PendingUpload",
    "RemoteServiceError",
    "Settings",
    "StoreUnavailable",
    "ValidationError",
    "build_filter",
    "compute_stats",
    "configure_logging",
    "ensure_jpeg",
    "load_settings",
    "parse_response",
    "validate_draft",
]
