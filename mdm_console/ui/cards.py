"""Card payloads for the dashboard, kept free of Streamlit so they are testable."""
from dataclasses import dataclass
from typing import List, Optional

from mdm_console.store.stats import DashboardStats


@dataclass(frozen=True)
class DashboardCard:
    title: str
    source: str
    count: str
    trend: str
    new_count: str
    icon: str = "📁"
    live: bool = False


# Other source systems are shown for context only; their figures are static.
PLACEHOLDER_CARDS: List[DashboardCard] = [
    DashboardCard("Vendor Master", "SAP", "1,253", "+3%", "42", "📦"),
    DashboardCard("Material/Item Master", "SAP", "12,489", "+3%", "320", "📦"),
    DashboardCard("Equipment Master", "SAP", "854", "+2%", "26", "🛠️"),
    DashboardCard("Tax Code Master", "SAP", "124", "+5%", "6", "🧾"),
    DashboardCard("Employee Master", "DarwinBox", "2,879", "+5%", "135", "🧑‍💼"),
    DashboardCard("Role/Designation Master", "DarwinBox", "168", "+8%", "12", "🧑‍💼"),
    DashboardCard("Planning Manager", "TOS", "47", "+12%", "5", "📊"),
    DashboardCard("Cargo Master", "TOS", "1,495", "+4%", "63", "🚚"),
]


def format_count(value: int) -> str:
    return f"{value:,}"


def format_trend(rate: float) -> str:
    """Signed whole-percent trend, e.g. ``+3%`` or ``-1%``."""

    rounded = round(rate)
    sign = "+" if rounded >= 0 else "-"
    return f"{sign}{abs(rounded)}%"


def customer_master_card(stats: Optional[DashboardStats]) -> DashboardCard:
    """Build the live customer card; unavailable stats render as dashes."""

    if stats is None:
        return DashboardCard("Customer Master", "MDM", "—", "—", "—", "👥", live=True)
    return DashboardCard(
        title="Customer Master",
        source="MDM",
        count=format_count(stats.total),
        trend=format_trend(stats.growth_rate),
        new_count=format_count(stats.new_last_month),
        icon="👥",
        live=True,
    )


def dashboard_cards(stats: Optional[DashboardStats]) -> List[DashboardCard]:
    return [customer_master_card(stats), *PLACEHOLDER_CARDS]
