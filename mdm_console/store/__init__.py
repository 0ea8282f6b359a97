"""Customer record store access, search and dashboard aggregates."""
from mdm_console.store.client import CustomerStore, search_filter
from mdm_console.store.filtering import (
    ClientSideFilter,
    SearchDebouncer,
    ServerSideFilter,
    build_filter,
    customer_matches,
)
from mdm_console.store.stats import DashboardStats, MonthlyPoint, compute_stats, growth_rate

__all__ = [
    "ClientSideFilter",
    "CustomerStore",
    "DashboardStats",
    "MonthlyPoint",
    "SearchDebouncer",
    "ServerSideFilter",
    "build_filter",
    "compute_stats",
    "customer_matches",
    "growth_rate",
    "search_filter",
]
