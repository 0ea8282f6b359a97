"""Cached services and read caches shared by every page of the console."""
from __future__ import annotations

import logging
from typing import List, Optional

import streamlit as st

from mdm_console.assistant.client import AssistantClient
from mdm_console.core.errors import StoreUnavailable
from mdm_console.core.models import Customer
from mdm_console.core.settings import Settings, load_settings
from mdm_console.store.client import CustomerStore
from mdm_console.store.stats import DashboardStats

logger = logging.getLogger(__name__)

MASTER_LIST_KEY = "customer_master_list"


@st.cache_resource(show_spinner=False)
def get_settings() -> Settings:
    return load_settings()


@st.cache_resource(show_spinner=False)
def get_store(store_url: str, store_key: str, timeout: float) -> CustomerStore:
    return CustomerStore(store_url, store_key, timeout=timeout)


@st.cache_resource(show_spinner=False)
def get_assistant(base_url: str, timeout: float) -> AssistantClient:
    return AssistantClient(base_url, timeout=timeout)


def current_store() -> Optional[CustomerStore]:
    """Return the store client, or ``None`` when credentials are not configured."""

    settings = get_settings()
    if not settings.store_configured:
        return None
    return get_store(settings.store_url, settings.store_key, settings.request_timeout)


def current_assistant() -> AssistantClient:
    settings = get_settings()
    return get_assistant(settings.assistant_base_url, settings.request_timeout)


@st.cache_data(show_spinner=False, ttl=300)
def cached_customers(_store: CustomerStore, store_url: str) -> List[Customer]:
    return _store.list_customers()


@st.cache_data(show_spinner=False, ttl=300)
def cached_customer_count(_store: CustomerStore, store_url: str) -> int:
    return _store.count_customers()


@st.cache_data(show_spinner=False, ttl=300)
def cached_dashboard_stats(_store: CustomerStore, store_url: str) -> DashboardStats:
    return _store.aggregate_stats()


def invalidate_customer_caches() -> None:
    """Drop the customer list, count and dashboard caches so the next read is fresh."""

    cached_customers.clear()
    cached_customer_count.clear()
    cached_dashboard_stats.clear()
    logger.info("Customer caches invalidated")


def master_list() -> List[Customer]:
    """Customers for the table: session copy first, else a (cached) store read."""

    if MASTER_LIST_KEY not in st.session_state:
        store = current_store()
        if store is None:
            return []
        st.session_state[MASTER_LIST_KEY] = list(cached_customers(store, store.base_url))
    return st.session_state[MASTER_LIST_KEY]


def record_created(customer: Customer) -> None:
    """After a save: invalidate read caches and mirror the record for immediate display."""

    invalidate_customer_caches()
    current = st.session_state.get(MASTER_LIST_KEY)
    if current is not None:
        st.session_state[MASTER_LIST_KEY] = sorted(
            [*current, customer], key=lambda item: (item.name or "").lower()
        )


def safe_customer_count() -> Optional[int]:
    store = current_store()
    if store is None:
        return None
    try:
        return cached_customer_count(store, store.base_url)
    except StoreUnavailable as exc:
        logger.warning("Customer count unavailable: %s", exc)
        return None


def safe_dashboard_stats() -> tuple[Optional[DashboardStats], Optional[str]]:
    store = current_store()
    if store is None:
        return None, "Customer store is not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY."
    try:
        return cached_dashboard_stats(store, store.base_url), None
    except StoreUnavailable as exc:
        logger.warning("Dashboard stats unavailable: %s", exc)
        return None, f"Could not load customer statistics: {exc}"
