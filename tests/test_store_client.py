"""Tests for the customer store REST client."""
import pytest
import requests

from conftest import FakeResponse, FakeSession
from mdm_console.core.errors import StoreUnavailable, ValidationError
from mdm_console.core.models import CustomerDraft
from mdm_console.store.client import CustomerStore, search_filter


def _store(*replies) -> CustomerStore:
    return CustomerStore("https://demo.supabase.co/", "anon-key", timeout=5, session=FakeSession(*replies))


def test_list_customers_requests_sorted_rows(sample_rows):
    store = _store(FakeResponse(200, sample_rows))
    customers = store.list_customers()

    call = store.session.last
    assert call["method"] == "GET"
    assert call["url"] == "https://demo.supabase.co/rest/v1/customers"
    assert call["params"] == {"select": "*", "order": "name.asc"}
    assert call["headers"]["apikey"] == "anon-key"
    assert call["headers"]["Authorization"] == "Bearer anon-key"
    assert call["timeout"] == 5
    assert [c.id for c in customers] == [1, 2, 3, 4]


def test_list_customers_with_search_adds_or_filter():
    store = _store(FakeResponse(200, []))
    store.list_customers("  acme ")
    assert store.session.last["params"]["or"] == search_filter("acme")


def test_search_filter_covers_every_column_and_escapes_wildcards():
    clause = search_filter('50%_"off"')
    assert clause.startswith("(name.ilike.") and clause.endswith(")")
    for column in ("company", "email_address", "phone_number", "gst_number", "pan_number", "address"):
        assert f"{column}.ilike." in clause
    # LIKE escapes are doubled because PostgREST unescapes quoted values first.
    assert r'"*50\\%\\_\"off\"*"' in clause
    assert search_filter("a*b").startswith('(name.ilike."*a_b*",')


def test_count_reads_content_range_total():
    store = _store(FakeResponse(200, [{"id": 1}], headers={"Content-Range": "0-0/1287"}))
    assert store.count_customers() == 1287
    headers = store.session.last["headers"]
    assert headers["Prefer"] == "count=exact"
    assert headers["Range"] == "0-0"


def test_count_falls_back_to_rows_without_total():
    store = _store(FakeResponse(200, [{"id": 1}, {"id": 2}], headers={"Content-Range": "0-1/*"}))
    assert store.count_customers() == 2


def test_create_customer_posts_payload_and_returns_stored_record():
    stored = {"id": 77, "name": "Initech", "gst_number": "27AADCA0425P1Z7", "created_at": "2026-10-18T10:00:00Z"}
    store = _store(FakeResponse(201, [stored]))
    customer = store.create_customer(CustomerDraft(name=" Initech ", gst_number="27aadca0425p1z7"))

    call = store.session.last
    assert call["method"] == "POST"
    assert call["json"] == [{"name": "Initech", "gst_number": "27AADCA0425P1Z7"}]
    assert call["headers"]["Prefer"] == "return=representation"
    assert customer.id == 77
    assert customer.created_at is not None


def test_create_conflict_raises_validation_error():
    store = _store(FakeResponse(409, {"message": 'duplicate key value violates unique constraint "customers_gst_number_key"'}))
    with pytest.raises(ValidationError, match="duplicate key"):
        store.create_customer(CustomerDraft(name="Initech"))


def test_read_errors_raise_store_unavailable():
    store = _store(FakeResponse(401, {"message": "Invalid API key"}))
    with pytest.raises(StoreUnavailable, match="Invalid API key") as info:
        store.list_customers()
    assert info.value.status_code == 401


def test_network_failures_raise_store_unavailable():
    with pytest.raises(StoreUnavailable, match="timed out"):
        _store(requests.Timeout()).list_customers()
    with pytest.raises(StoreUnavailable, match="unreachable"):
        _store(requests.ConnectionError("dns")).count_customers()


def test_malformed_bodies_raise_store_unavailable():
    with pytest.raises(StoreUnavailable, match="malformed JSON"):
        _store(FakeResponse(200, None, text="<html>")).list_customers()
    with pytest.raises(StoreUnavailable, match="unexpected payload"):
        _store(FakeResponse(200, {"rows": []})).list_customers()


def test_aggregate_stats_selects_only_needed_columns(sample_rows):
    store = _store(FakeResponse(200, [{"company": r["company"], "created_at": r["created_at"]} for r in sample_rows]))
    stats = store.aggregate_stats()
    assert store.session.last["params"] == {"select": "company,created_at"}
    assert stats.total == 4
