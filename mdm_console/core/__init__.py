"""Core building blocks for the console package."""
from mdm_console.core.errors import (
    ConsoleError,
    ConversionError,
    RemoteServiceError,
    StoreUnavailable,
    ValidationError,
)
from mdm_console.core.logging import configure_logging
from mdm_console.core.models import ChatMessage, Customer, CustomerDraft, PendingUpload
from mdm_console.core.settings import Settings, load_settings
from mdm_console.core.validation import validate_draft

__all__ = [
    "ChatMessage",
    "ConsoleError",
    "ConversionError",
    "Customer",
    "CustomerDraft",
    "PendingUpload",
    "RemoteServiceError",
    "Settings",
    "StoreUnavailable",
    "ValidationError",
    "configure_logging",
    "load_settings",
    "validate_draft",
]
