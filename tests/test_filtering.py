"""Tests that client-side and server-side search agree, plus the debouncer."""
import re

import pytest

from conftest import FakeResponse, FakeSession
from mdm_console.core.models import Customer
from mdm_console.store.client import CustomerStore
from mdm_console.store.filtering import (
    ClientSideFilter,
    SearchDebouncer,
    ServerSideFilter,
    build_filter,
    customer_matches,
)

CLAUSE = re.compile(r'(\w+)\.ilike\."((?:[^"\\]|\\.)*)"')

AWKWARD_ROWS = [
    {"id": 11, "name": "aXb Traders"},
    {"id": 12, "name": "a*b Labs"},
    {"id": 13, "name": "50% Off Store"},
    {"id": 14, "name": "5000 Club"},
    {"id": 15, "name": "a_b Exports"},
    {"id": 16, "name": "aab Foods"},
    {"id": 17, "name": "back\\slash Co"},
    {"id": 18, "name": 'Quo"te Inc'},
]


def _like_regex(value: str) -> "re.Pattern[str]":
    """Translate a Postgres LIKE pattern (escape character ``\\``) into a regex."""

    parts = []
    chars = iter(value)
    for char in chars:
        if char == "\\":
            parts.append(re.escape(next(chars, "\\")))
        elif char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def _ilike(raw: str) -> "re.Pattern[str]":
    # Quoted values drop the backslash before any character, then "*" becomes "%".
    value = re.sub(r"\\(.)", r"\1", raw, flags=re.DOTALL)
    return _like_regex(value.replace("*", "%"))


def _postgrest(rows):
    """Answer GET requests the way PostgREST evaluates an ``or`` of ``ilike`` clauses."""

    def reply(method, url, kwargs):
        params = kwargs["params"]
        matched = rows
        if "or" in params:
            clauses = [(column, _ilike(raw)) for column, raw in CLAUSE.findall(params["or"])]
            matched = [
                row
                for row in rows
                if any(pattern.fullmatch(str(row.get(column) or "")) for column, pattern in clauses)
            ]
        return FakeResponse(200, sorted(matched, key=lambda row: row["name"]))

    return reply


def _store(rows) -> CustomerStore:
    return CustomerStore("https://demo.supabase.co", "key", session=FakeSession(_postgrest(rows)))


@pytest.mark.parametrize("term", ["", "acme", "CORP", "9876", "aabcs", "mumbai", "group", "zzz", "globex"])
def test_client_and_server_filters_return_the_same_customers(sample_rows, sample_customers, term):
    store = _store(sample_rows)

    client_side = ClientSideFilter(sample_customers).apply(term)
    server_side = ServerSideFilter(store).apply(term)

    assert [c.id for c in client_side] == [c.id for c in server_side]


@pytest.mark.parametrize("term", ["a*b", "*", "50%", "%", "a_b", "_", "\\", "slash", 'quo"te'])
def test_wildcard_characters_are_searched_literally(term):
    customers = [Customer.from_row(row) for row in AWKWARD_ROWS]

    client_side = ClientSideFilter(customers).apply(term)
    server_side = ServerSideFilter(_store(AWKWARD_ROWS)).apply(term)

    assert client_side
    assert [c.id for c in client_side] == [c.id for c in server_side]


def test_store_search_escapes_like_metacharacters():
    store = _store(AWKWARD_ROWS)
    assert [c.name for c in store.list_customers("50%")] == ["50% Off Store"]
    assert [c.name for c in store.list_customers("a_b")] == ["a_b Exports"]
    assert [c.name for c in store.list_customers("\\")] == ["back\\slash Co"]


def test_results_are_sorted_case_insensitively(sample_customers):
    names = [c.name for c in ClientSideFilter(sample_customers).apply("")]
    assert names == ["Acme Corporation", "globex corporation", "Stark Industries", "Wayne Enterprises"]


def test_customer_matches_ignores_missing_fields(sample_customers):
    wayne = sample_customers[2]
    assert customer_matches(wayne, "delhi")
    assert not customer_matches(wayne, "@")
    assert customer_matches(wayne, "   ")


def test_build_filter_selects_backing(fake_store, sample_customers):
    assert isinstance(build_filter("server", store=fake_store), ServerSideFilter)
    assert isinstance(build_filter("client", customers=sample_customers), ClientSideFilter)
    assert len(build_filter("client", store=fake_store).apply("")) == 4
    with pytest.raises(ValueError):
        build_filter("server")
    with pytest.raises(ValueError):
        build_filter("fuzzy", store=fake_store)


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0
        self.slept = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.slept.append(seconds)
        self.now += seconds


def test_debouncer_waits_for_typing_to_pause():
    clock = FakeClock()
    debouncer = SearchDebouncer(delay=0.3, clock=clock, sleep=clock.sleep)

    debouncer.update("ac")
    clock.now += 0.2
    debouncer.update("acm")
    clock.now += 0.2
    assert debouncer.ready() is None
    clock.now += 0.15
    assert debouncer.ready() == "acm"
    assert debouncer.applied == "acm"


def test_repeating_the_same_term_keeps_the_timer():
    clock = FakeClock()
    debouncer = SearchDebouncer(delay=0.3, clock=clock, sleep=clock.sleep)

    debouncer.update("acme")
    clock.now += 0.2
    debouncer.update("acme")
    clock.now += 0.15
    assert debouncer.ready() == "acme"


def test_settle_sleeps_only_the_remaining_delay():
    clock = FakeClock()
    debouncer = SearchDebouncer(delay=0.3, clock=clock, sleep=clock.sleep)

    assert debouncer.settle() is None
    debouncer.update("wayne")
    clock.now += 0.1
    assert debouncer.settle() == "wayne"
    assert clock.slept == [pytest.approx(0.2)]
