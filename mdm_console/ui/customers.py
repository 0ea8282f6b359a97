"""Customer table with debounced search, detail view, onboarding and export."""
import logging
from pathlib import Path
from typing import List

import streamlit as st

from mdm_console.chat.formatting import customer_details
from mdm_console.core.errors import StoreUnavailable
from mdm_console.core.models import Customer
from mdm_console.onboarding.form import OnboardingForm
from mdm_console.reporting.sinks import excel_bytes, push_to_google_sheets, rows_to_csv_text
from mdm_console.reporting.templates import customers_to_rows
from mdm_console.store.filtering import SearchDebouncer, build_filter
from mdm_console.ui import state
from mdm_console.ui.onboarding import clear_form_widgets, render_onboarding_form

logger = logging.getLogger(__name__)

FORM_KEY = "customers_onboarding_form"
FORM_PREFIX = "customers_form"
DEBOUNCER_KEY = "customer_search_debouncer"
SELECTED_KEY = "customers_selected_id"


def _debouncer() -> SearchDebouncer:
    if DEBOUNCER_KEY not in st.session_state:
        st.session_state[DEBOUNCER_KEY] = SearchDebouncer()
    return st.session_state[DEBOUNCER_KEY]


def _filtered_customers(term: str) -> List[Customer]:
    """Apply the configured filter backing; both return the same rows for a term."""

    settings = state.get_settings()
    store = state.current_store()
    if settings.filter_strategy == "server":
        search = build_filter("server", store=store)
    else:
        search = build_filter("client", customers=state.master_list())
    return search.apply(term)


def _close_form() -> None:
    st.session_state.pop(FORM_KEY, None)
    clear_form_widgets(FORM_PREFIX)
    st.rerun()


def _render_export(customers: List[Customer]) -> None:
    settings = state.get_settings()
    rows = customers_to_rows(customers)
    with st.expander("Export", expanded=False):
        st.caption(f"{len(rows)} customer(s) in the current view.")
        cols = st.columns(3)
        cols[0].download_button(
            "Download CSV",
            data=rows_to_csv_text(rows),
            file_name="customers.csv",
            mime="text/csv",
            disabled=not rows,
        )
        cols[1].download_button(
            "Download Excel",
            data=excel_bytes(rows) if rows else b"",
            file_name="customers.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            disabled=not rows,
        )
        sheets_ready = bool(settings.sheets_spreadsheet_id and rows)
        if cols[2].button("Push to Google Sheets", disabled=not sheets_ready):
            account = Path(settings.service_account_file) if settings.service_account_file else None
            try:
                pushed = push_to_google_sheets(
                    rows,
                    spreadsheet_id=settings.sheets_spreadsheet_id,
                    worksheet_title=settings.sheets_worksheet,
                    service_account_path=account,
                )
                st.success(f"Pushed {pushed} customers to worksheet '{settings.sheets_worksheet}'.")
            except Exception as exc:
                logger.exception("Google Sheets export failed")
                st.error(f"Google Sheets sync failed: {exc}")
        if not settings.sheets_spreadsheet_id:
            st.caption("Set GOOGLE_SHEETS_SPREADSHEET_ID to enable Google Sheets export.")


def _render_detail(customers: List[Customer]) -> None:
    selected = st.session_state.get(SELECTED_KEY)
    customer = next((item for item in customers if item.id == selected), None)
    if customer is None:
        return
    with st.container(border=True):
        st.markdown(f"#### {customer.name}")
        st.text(customer_details(customer))
        if customer.created_at:
            st.caption(f"Created {customer.created_at:%Y-%m-%d %H:%M}")
        if st.button("Close", key="customers_close_detail"):
            st.session_state.pop(SELECTED_KEY, None)
            st.rerun()


def render_customers_page() -> None:
    head = st.columns([3, 1])
    head[0].title("Customers")
    store = state.current_store()
    if store is None:
        st.warning("Customer store is not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY.")
        return

    if head[1].button("➕ Add Customer", type="primary", disabled=FORM_KEY in st.session_state):
        clear_form_widgets(FORM_PREFIX)
        st.session_state[FORM_KEY] = OnboardingForm(store, on_created=state.record_created)

    form = st.session_state.get(FORM_KEY)
    if form is not None:
        render_onboarding_form(form, FORM_PREFIX, on_close=_close_form)

    raw_term = st.text_input("Search customers...", key="customer_search")
    debouncer = _debouncer()
    debouncer.update(raw_term)
    term = debouncer.ready() or debouncer.settle() or ""

    try:
        customers = _filtered_customers(term)
    except StoreUnavailable as exc:
        logger.warning("Customer list unavailable: %s", exc)
        st.error(f"Could not load customers: {exc}")
        return

    if not customers:
        st.info("No customers match the current search." if term else "No customers yet.")
        return

    table = [
        {
            "Name": customer.name,
            "Company": customer.company or "",
            "GST Number": customer.gst_number or "",
            "PAN Number": customer.pan_number or "",
            "Email": customer.email_address or "",
            "Phone": customer.phone_number or "",
            "Address": customer.address or "",
        }
        for customer in customers
    ]
    event = st.dataframe(
        table,
        use_container_width=True,
        hide_index=True,
        on_select="rerun",
        selection_mode="single-row",
        key="customers_table",
    )
    chosen = list(getattr(getattr(event, "selection", None), "rows", []) or [])
    if chosen:
        st.session_state[SELECTED_KEY] = customers[chosen[0]].id
    st.caption(f"Showing {len(customers)} customer(s)")

    _render_detail(customers)
    _render_export(customers)
