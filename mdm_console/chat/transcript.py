"""Append-only chat log with an index of the latest extracted card data."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterator, List, Mapping, Optional, Tuple

from mdm_console.core.models import ChatMessage, Customer

TIMESTAMP_FORMAT = "%I:%M %p"


class Transcript:
    """Ordered chat messages; ids are monotonic and messages are never replaced."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self._messages: List[ChatMessage] = []
        self._next_id = 1
        self._last_extracted: Optional[ChatMessage] = None

    def append(
        self,
        text: str,
        *,
        is_user: bool = False,
        status: Optional[str] = None,
        customer: Optional[Customer] = None,
        candidates: Tuple[Customer, ...] = (),
        extracted: Optional[Mapping[str, Any]] = None,
        image_preview: Optional[bytes] = None,
    ) -> ChatMessage:
        message = ChatMessage(
            id=self._next_id,
            text=text,
            is_user=is_user,
            timestamp=self._clock().strftime(TIMESTAMP_FORMAT),
            status=status,
            customer=customer,
            candidates=tuple(candidates),
            extracted=dict(extracted) if extracted is not None else None,
            image_preview=image_preview,
        )
        self._next_id += 1
        self._messages.append(message)
        if message.extracted:
            self._last_extracted = message
        return message

    @property
    def messages(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def last(self) -> Optional[ChatMessage]:
        return self._messages[-1] if self._messages else None

    @property
    def last_extracted(self) -> Optional[ChatMessage]:
        """Most recent message that carried extracted card fields."""

        return self._last_extracted

    def get(self, message_id: int) -> Optional[ChatMessage]:
        for message in self._messages:
            if message.id == message_id:
                return message
        return None

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(tuple(self._messages))

    def __len__(self) -> int:
        return len(self._messages)
