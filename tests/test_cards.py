"""Tests for dashboard card payloads."""
from datetime import date

from mdm_console.store.stats import compute_stats
from mdm_console.ui.cards import PLACEHOLDER_CARDS, customer_master_card, dashboard_cards, format_trend


def test_customer_card_uses_live_stats(sample_rows):
    card = customer_master_card(compute_stats(sample_rows, today=date(2026, 10, 18)))
    assert card.count == "4"
    assert card.new_count == "1"
    assert card.trend == "+33%"
    assert card.live


def test_unavailable_stats_render_dashes():
    card = customer_master_card(None)
    assert card.count == "—"
    assert card.live


def test_dashboard_lists_customer_card_first():
    cards = dashboard_cards(None)
    assert cards[0].title == "Customer Master"
    assert cards[1:] == PLACEHOLDER_CARDS


def test_format_trend():
    assert format_trend(3.4) == "+3%"
    assert format_trend(0) == "+0%"
    assert format_trend(-1.6) == "-2%"
