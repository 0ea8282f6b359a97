"""HTTP client for the assistant service that matches and extracts customers."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from mdm_console.assistant.responses import AssistantResponse, parse_response
from mdm_console.core.errors import RemoteServiceError
from mdm_console.core.models import PendingUpload

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/chat"
UPLOAD_PATH = "/api/upload-card"
CARD_FIELD = "card"


class AssistantClient:
    """Send chat text and card images to the assistant and parse its replies."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def send_chat(self, text: str) -> AssistantResponse:
        """Post free text and return the classified response."""

        return parse_response(self._post(CHAT_PATH, json={"message": text}))

    def upload_card(self, upload: PendingUpload) -> AssistantResponse:
        """Post a card image as multipart field ``card``."""

        files = {CARD_FIELD: (upload.filename, upload.content, upload.content_type)}
        return parse_response(self._post(UPLOAD_PATH, files=files))

    def _post(self, path: str, **kwargs: Any) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug("POST %s", url)
        try:
            response = self.session.post(url, timeout=self.timeout, **kwargs)
        except requests.Timeout as exc:
            logger.warning("Assistant request to %s timed out", path)
            raise RemoteServiceError(f"assistant timed out after {self.timeout:g}s") from exc
        except requests.RequestException as exc:
            logger.warning("Assistant request to %s failed: %s", path, exc)
            raise RemoteServiceError(f"could not reach assistant: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            message = None
            if isinstance(body, dict):
                message = body.get("message") or body.get("error")
            logger.warning("Assistant %s returned %s", path, response.status_code)
            raise RemoteServiceError(
                str(message) if message else f"server error {response.status_code}",
                status_code=response.status_code,
            )
        if not isinstance(body, dict):
            raise RemoteServiceError("assistant returned a malformed response", status_code=response.status_code)
        return body
