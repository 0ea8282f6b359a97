"""Error taxonomy shared by the store client, assistant client and views."""
from __future__ import annotations

from typing import Dict, Optional


class ConsoleError(Exception):
    """Base class for every failure the console turns into a user message."""


class ValidationError(ConsoleError):
    """A customer field violated a client-side or store-side constraint."""

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.field_errors: Dict[str, str] = dict(field_errors or {})


class StoreUnavailable(ConsoleError):
    """The customer store could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteServiceError(ConsoleError):
    """The assistant service failed, timed out, or returned an unusable body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConversionError(ConsoleError):
    """An uploaded image could not be re-encoded as JPEG."""
