"""Master data dashboard: live customer card plus other source systems."""
from typing import List

import streamlit as st

from mdm_console.store.stats import DashboardStats
from mdm_console.ui import state
from mdm_console.ui.cards import DashboardCard, dashboard_cards

CARDS_PER_ROW = 3


def _render_card(container, card: DashboardCard) -> None:
    with container.container(border=True):
        head = st.columns([3, 2])
        head[0].markdown(f"**{card.title}**")
        head[1].caption(f"{card.source} {card.icon}")
        st.metric("Total", card.count, delta=card.trend if card.trend != "—" else None)
        st.caption(f"{card.new_count} new last month")


def _render_cards(cards: List[DashboardCard]) -> None:
    for start in range(0, len(cards), CARDS_PER_ROW):
        columns = st.columns(CARDS_PER_ROW)
        for column, card in zip(columns, cards[start : start + CARDS_PER_ROW]):
            _render_card(column, card)


def _render_customer_breakdown(stats: DashboardStats) -> None:
    """Company mix and six-month growth of the customer master."""

    st.markdown("### Customer master details")
    cols = st.columns(2)
    with cols[0]:
        st.caption("Customers per company")
        if stats.per_company:
            st.bar_chart(
                [{"Company": name, "Customers": count} for name, count in stats.per_company.items()],
                x="Company",
                y="Customers",
            )
        else:
            st.info("No customers yet.")
    with cols[1]:
        st.caption("New customers per month (last 6 months)")
        st.bar_chart(
            [{"Month": point.label, "New customers": point.new} for point in stats.monthly_growth],
            x="Month",
            y="New customers",
        )
        st.caption(f"Growth over the last month: {stats.growth_rate:.1f}%")


def render_dashboard() -> None:
    st.title("Master Data Dashboard")
    st.caption("Overview of key master data trends across systems")

    stats, problem = state.safe_dashboard_stats()
    if problem:
        st.warning(problem)

    _render_cards(dashboard_cards(stats))

    if stats is not None:
        _render_customer_breakdown(stats)
