"""Customer search with interchangeable client-side and server-side backings."""
from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, List, Optional

from mdm_console.core.models import Customer
from mdm_console.store.client import SEARCH_COLUMNS, CustomerStore

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.3


def customer_matches(customer: Customer, term: Optional[str]) -> bool:
    """Case-insensitive substring match over every searchable column."""

    needle = (term or "").strip().lower()
    if not needle:
        return True
    return any(needle in (getattr(customer, column) or "").lower() for column in SEARCH_COLUMNS)


def _by_name(customers: Iterable[Customer]) -> List[Customer]:
    return sorted(customers, key=lambda customer: (customer.name or "").lower())


class ClientSideFilter:
    """Filter an already-fetched master list in memory."""

    strategy = "client"

    def __init__(self, customers: Iterable[Customer]) -> None:
        self.customers = _by_name(customers)

    def apply(self, term: Optional[str]) -> List[Customer]:
        return [customer for customer in self.customers if customer_matches(customer, term)]


class ServerSideFilter:
    """Delegate the same match to the store's ``ilike`` search."""

    strategy = "server"

    def __init__(self, store: CustomerStore) -> None:
        self.store = store

    def apply(self, term: Optional[str]) -> List[Customer]:
        # A literal "*" can only be sent as a wildcard, so recheck what comes back.
        rows = self.store.list_customers(term or None)
        return _by_name(customer for customer in rows if customer_matches(customer, term))


def build_filter(
    strategy: str,
    store: Optional[CustomerStore] = None,
    customers: Optional[Iterable[Customer]] = None,
):
    """Return the filter backing selected by a ``client``/``server`` strategy flag."""

    if strategy == "server":
        if store is None:
            raise ValueError("server-side filtering needs a store")
        return ServerSideFilter(store)
    if strategy == "client":
        if customers is None:
            if store is None:
                raise ValueError("client-side filtering needs customers or a store")
            customers = store.list_customers()
        return ClientSideFilter(customers)
    raise ValueError(f"Unknown filter strategy: {strategy}")


class SearchDebouncer:
    """Hold back a search term until typing has paused for ``delay`` seconds."""

    def __init__(
        self,
        delay: float = DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.delay = delay
        self.clock = clock
        self.sleep = sleep
        self.pending: Optional[str] = None
        self.applied: Optional[str] = None
        self.changed_at: float = 0.0

    def update(self, term: str) -> None:
        """Record the latest input; unchanged terms keep the original timer."""

        if term == self.pending:
            return
        self.pending = term
        self.changed_at = self.clock()

    def ready(self) -> Optional[str]:
        """Return the settled term once the delay has passed, else ``None``."""

        if self.pending is None:
            return None
        if self.clock() - self.changed_at < self.delay:
            return None
        self.applied = self.pending
        return self.applied

    def settle(self) -> Optional[str]:
        """Wait out the remaining delay and return the term to apply."""

        if self.pending is None:
            return self.applied
        remaining = self.delay - (self.clock() - self.changed_at)
        if remaining > 0:
            self.sleep(remaining)
        self.applied = self.pending
        return self.applied
