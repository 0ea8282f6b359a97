"""REST client for the hosted ``customers`` table."""
from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from mdm_console.core.errors import StoreUnavailable, ValidationError
from mdm_console.core.models import Customer, CustomerDraft
from mdm_console.store.stats import DashboardStats, compute_stats

logger = logging.getLogger(__name__)

TABLE = "customers"
SEARCH_COLUMNS = (
    "name",
    "company",
    "email_address",
    "phone_number",
    "gst_number",
    "pan_number",
    "address",
)
# Status codes the store uses for constraint and payload violations.
VALIDATION_STATUSES = {400, 409, 422}
LIKE_SPECIALS = re.compile(r"([\\%_])")


def _like_operand(term: str) -> str:
    """Quote a search term for a PostgREST ``ilike`` inside an ``or`` group.

    Two escaping layers apply: Postgres ``LIKE`` escapes for ``\\ % _``, then
    PostgREST's quoted-value escapes for ``\\`` and ``"``. PostgREST turns every
    ``*`` into ``%`` and offers no escape for it, so a literal ``*`` is sent as
    the single-character wildcard ``_`` and the caller narrows the rows.
    """

    pattern = LIKE_SPECIALS.sub(r"\\\1", term).replace("*", "_")
    quoted = pattern.replace("\\", "\\\\").replace('"', '\\"')
    return f'"*{quoted}*"'


def search_filter(term: str) -> str:
    """Build the ``or`` filter matching a term against every searchable column."""

    operand = _like_operand(term.strip())
    clauses = ",".join(f"{column}.ilike.{operand}" for column in SEARCH_COLUMNS)
    return f"({clauses})"


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or f"store error {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "details", "hint", "error"):
            if body.get(key):
                return str(body[key])
    return f"store error {response.status_code}"


class CustomerStore:
    """Read, search, count and insert customer rows over the store's REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def table_url(self) -> str:
        return f"{self.base_url}/rest/v1/{TABLE}"

    def _headers(self, **extra: str) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        headers.update(extra)
        return headers

    def _request(self, method: str, params: Dict[str, str], headers: Dict[str, str], **kwargs: Any) -> requests.Response:
        logger.debug("%s %s %s", method, self.table_url, params)
        try:
            response = self.session.request(
                method,
                self.table_url,
                params=params,
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            logger.warning("Customer store timed out after %ss", self.timeout)
            raise StoreUnavailable(f"Customer store timed out after {self.timeout:g}s") from exc
        except requests.RequestException as exc:
            logger.warning("Customer store unreachable: %s", exc)
            raise StoreUnavailable(f"Customer store unreachable: {exc}") from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("Customer store returned %s: %s", response.status_code, message)
            if response.status_code in VALIDATION_STATUSES and method == "POST":
                raise ValidationError(message)
            raise StoreUnavailable(message, status_code=response.status_code)
        return response

    def _rows(self, response: requests.Response) -> List[Dict[str, Any]]:
        try:
            body = response.json()
        except ValueError as exc:
            raise StoreUnavailable("Customer store returned malformed JSON") from exc
        if not isinstance(body, list):
            raise StoreUnavailable("Customer store returned an unexpected payload")
        return body

    def list_customers(self, search: Optional[str] = None) -> List[Customer]:
        """Return customers ordered by name, optionally filtered by a search term."""

        params = {"select": "*", "order": "name.asc"}
        if search and search.strip():
            params["or"] = search_filter(search)
        rows = self._rows(self._request("GET", params, self._headers()))
        return [Customer.from_row(row) for row in rows]

    def count_customers(self) -> int:
        """Return the exact number of customer rows."""

        response = self._request(
            "GET",
            {"select": "id"},
            self._headers(Prefer="count=exact", Range="0-0", **{"Range-Unit": "items"}),
        )
        content_range = response.headers.get("Content-Range", "")
        _, _, total = content_range.partition("/")
        try:
            return int(total)
        except ValueError:
            # Some proxies strip Content-Range; fall back to the rows returned.
            logger.debug("Missing Content-Range total (%r), counting rows", content_range)
            return len(self._rows(response))

    def create_customer(self, draft: CustomerDraft) -> Customer:
        """Insert a draft and return the stored record with its assigned id and timestamp."""

        payload = draft.to_payload()
        response = self._request(
            "POST",
            {"select": "*"},
            self._headers(Prefer="return=representation", **{"Content-Type": "application/json"}),
            json=[payload],
        )
        rows = self._rows(response)
        if not rows:
            raise StoreUnavailable("Customer store did not return the created record")
        customer = Customer.from_row(rows[0])
        logger.info("Created customer %s (%s)", customer.id, customer.name)
        return customer

    def fetch_stat_rows(self) -> List[Dict[str, Any]]:
        """Return only the columns the dashboard aggregates need."""

        return self._rows(self._request("GET", {"select": "company,created_at"}, self._headers()))

    def aggregate_stats(self, today: Optional[date] = None) -> DashboardStats:
        """Compute dashboard figures from the company and creation columns."""

        return compute_stats(self.fetch_stat_rows(), today=today)
