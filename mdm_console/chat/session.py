"""Chat-driven customer resolution: search, card upload, disambiguation, onboarding."""
from __future__ import annotations

import logging
import re
import time
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Set, Tuple

from mdm_console.assistant import responses as rs
from mdm_console.assistant.imaging import ensure_jpeg
from mdm_console.chat import formatting
from mdm_console.chat.transcript import Transcript
from mdm_console.core.errors import ConsoleError
from mdm_console.core.models import ChatMessage, Customer, CustomerDraft, PendingUpload

logger = logging.getLogger(__name__)

CREATE_COMMAND = re.compile(r"^\s*(?:please\s+)?(?:create|add|onboard)\b(?:\s+a)?(?:\s+new)?\s+customer\s*[.!]?\s*$", re.IGNORECASE)


class ChatState(str, Enum):
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"
    SHOWING_CREATE_PROMPT = "showing_create_prompt"
    SHOWING_ONBOARDING_FORM = "showing_onboarding_form"
    SHOWING_DISAMBIGUATION = "showing_disambiguation"


def is_create_command(text: str) -> bool:
    """True for explicit requests such as "create new customer"."""

    return bool(CREATE_COMMAND.match(text or ""))


class ChatSession:
    """One browser session's conversation with the assistant.

    At most one submission is in flight; while it is, or while the onboarding
    form is open, further submissions are refused. The state is derived from
    the flags and the latest message each time it is read, so it can never
    drift from what the transcript shows.
    """

    def __init__(
        self,
        assistant,
        follow_up_delay: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = datetime.now,
        convert: Callable[[PendingUpload], PendingUpload] = ensure_jpeg,
        greet: bool = True,
    ) -> None:
        self.assistant = assistant
        self.follow_up_delay = follow_up_delay
        self._sleep = sleep
        self._convert = convert
        self.transcript = Transcript(clock=clock)
        self.pending_upload: Optional[PendingUpload] = None
        self.loading = False
        self.form_open = False
        self.prefill: Optional[CustomerDraft] = None
        self.alive = True
        self._viewing: Optional[Tuple[int, int]] = None
        self._ticket = 0
        self._form_source: Optional[int] = None
        self._resolved: Set[int] = set()
        if greet:
            self.transcript.append(formatting.WELCOME_TEXT, status=rs.GREETING)

    @property
    def messages(self) -> Tuple[ChatMessage, ...]:
        return self.transcript.messages

    @property
    def input_disabled(self) -> bool:
        return self.loading or self.form_open or not self.alive

    @property
    def show_create_prompt(self) -> bool:
        """Offer "Create New Customer" only under the latest eligible assistant reply."""

        last = self.transcript.last
        if last is None or last.is_user or self.loading or self.form_open:
            return False
        if last.id in self._resolved:
            return False
        if last.status in rs.ERROR_STATUSES:
            return False
        return last.status in rs.CREATION_ELIGIBLE_STATUSES

    @property
    def state(self) -> ChatState:
        if self.loading:
            return ChatState.AWAITING_RESPONSE
        if self.form_open:
            return ChatState.SHOWING_ONBOARDING_FORM
        if self.show_create_prompt:
            return ChatState.SHOWING_CREATE_PROMPT
        last = self.transcript.last
        if last is not None and not last.is_user and last.candidates:
            return ChatState.SHOWING_DISAMBIGUATION
        return ChatState.IDLE

    def stage_upload(self, upload: PendingUpload) -> None:
        self.pending_upload = upload

    def clear_upload(self) -> None:
        self.pending_upload = None

    def submit(self, text: str = "") -> bool:
        """Send typed text or the staged card; returns False when nothing was sent."""

        if self.input_disabled:
            logger.info("Ignoring chat submission while %s", self.state.value)
            return False

        text = (text or "").strip()
        upload = self.pending_upload
        if not text and upload is None:
            return False

        if upload is not None:
            self.transcript.append(
                f"Uploaded business card: {upload.filename}",
                is_user=True,
                image_preview=upload.content,
            )
        else:
            self.transcript.append(text, is_user=True)
            if is_create_command(text):
                self.transcript.append(formatting.OPEN_FORM_TEXT)
                self.request_onboarding()
                return True

        self.loading = True
        self._ticket += 1
        ticket = self._ticket
        try:
            if upload is not None:
                # The staged file is consumed by this submission whatever happens next.
                self.pending_upload = None
                response = self.assistant.upload_card(self._convert(upload))
            else:
                response = self.assistant.send_chat(text)
        except ConsoleError as exc:
            self._fail(ticket, str(exc))
            return True
        except Exception as exc:
            logger.exception("Unexpected failure while talking to the assistant")
            self._fail(ticket, str(exc))
            return True

        self._apply(ticket, response)
        return True

    def _is_current(self, ticket: int) -> bool:
        if not self.alive or ticket != self._ticket:
            logger.info("Dropping late assistant response for a closed session")
            return False
        return True

    def _fail(self, ticket: int, detail: str) -> None:
        if not self._is_current(ticket):
            return
        logger.warning("Chat submission failed: %s", detail)
        self.pending_upload = None
        self.transcript.append(formatting.error_text(detail), status=rs.ERROR_RESPONSE)
        self.loading = False

    def _follow_up(self, ticket: int, text: str, **attrs) -> None:
        if self.follow_up_delay > 0:
            self._sleep(self.follow_up_delay)
        if self._is_current(ticket):
            self.transcript.append(text, **attrs)

    def _apply(self, ticket: int, response: rs.AssistantResponse) -> None:
        if not self._is_current(ticket):
            return
        append = self.transcript.append
        try:
            if isinstance(response, (rs.CustomerMatch, rs.CardMatch)):
                append(
                    formatting.found_text(response.message, response.customer),
                    status=response.status,
                    customer=response.customer,
                )
            elif isinstance(response, rs.MultipleMatches):
                append(
                    formatting.candidates_text(response.message, response.candidates),
                    status=response.status,
                    candidates=response.candidates,
                )
            elif isinstance(response, rs.NotFound):
                append(response.message or formatting.NOT_FOUND_TEXT, status=response.status)
                self._follow_up(ticket, formatting.ONBOARDING_CHECKLIST_TEXT, status=rs.NOT_FOUND)
            elif isinstance(response, rs.CardExtracted):
                append(
                    formatting.extracted_summary(response.message, response.extracted),
                    status=response.status,
                    extracted=response.extracted,
                )
                self._follow_up(ticket, formatting.CREATE_FROM_CARD_TEXT, status=rs.NEW_CUSTOMER_CARD)
            elif isinstance(response, rs.ExtractionFailed):
                append(formatting.extraction_failed_text(response.message, response.raw_text), status=response.status)
            elif isinstance(response, rs.AssistantError):
                append(response.message or formatting.GENERIC_ERROR_TEXT, status=response.status)
            elif isinstance(response, rs.Greeting):
                append(response.message or formatting.WELCOME_TEXT, status=response.status)
            else:
                append(response.message or formatting.FALLBACK_TEXT, status=rs.UNKNOWN)
        finally:
            self.loading = False
        logger.info("Assistant replied with %s", response.status)

    def request_onboarding(self) -> Optional[CustomerDraft]:
        """Open the onboarding form, prefilled from the latest extracted card data."""

        if self.loading or not self.alive:
            return None
        source = self.transcript.last_extracted
        self.prefill = CustomerDraft.from_mapping(source.extracted if source else None)
        last = self.transcript.last
        self._form_source = last.id if last else None
        self.form_open = True
        self._viewing = None
        logger.info("Onboarding form opened (prefilled=%s)", source is not None)
        return self.prefill

    def close_onboarding(self) -> None:
        """Close the form after cancel or a successful save; safe to call twice.

        The message the form was opened from counts as resolved, so its create
        prompt is not offered again.
        """

        if self._form_source is not None:
            self._resolved.add(self._form_source)
            self._form_source = None
        self.form_open = False
        self.prefill = None

    def record_created(self, customer: Customer) -> None:
        """Confirm a customer saved from the onboarding form."""

        if not self.alive:
            return
        self.transcript.append(formatting.created_text(customer), status=rs.CUSTOMER_CREATED, customer=customer)

    def view_candidate(self, message_id: int, index: int) -> Customer:
        """Select one candidate of a disambiguation list for a read-only detail view."""

        message = self.transcript.get(message_id)
        if message is None or not message.candidates:
            raise KeyError(f"message {message_id} has no candidates")
        customer = message.candidates[index]
        self._viewing = (message_id, index)
        return customer

    @property
    def viewing(self) -> Optional[Customer]:
        if self._viewing is None:
            return None
        message_id, index = self._viewing
        message = self.transcript.get(message_id)
        return message.candidates[index] if message else None

    def close_detail(self) -> None:
        self._viewing = None

    def close(self) -> None:
        """Discard the session; responses that arrive afterwards are ignored."""

        self.alive = False
        self.pending_upload = None
        self._viewing = None
