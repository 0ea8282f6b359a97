"""Streamlit entry point for the master data management console."""
from pathlib import Path

import streamlit as st

# Allow running via "streamlit run mdm_console/ui/app.py" without installing the package
# by ensuring the repository root is on ``sys.path``.
if __package__ in {None, ""}:
    import sys

    sys.path.append(str(Path(__file__).resolve().parents[2]))

from mdm_console.core.logging import configure_logging
from mdm_console.ui import state
from mdm_console.ui.chat import close_chat, render_chat_panel
from mdm_console.ui.customers import render_customers_page
from mdm_console.ui.dashboard import render_dashboard
from mdm_console.ui.placeholders import render_reports_page, render_settings_page, render_vendors_page

PAGES = {
    "Dashboard": ("🏠", render_dashboard),
    "Customers": ("👥", render_customers_page),
    "Vendors": ("📦", render_vendors_page),
    "Reports": ("📊", render_reports_page),
    "Settings": ("⚙️", render_settings_page),
}


def _page_label(name: str, customer_count: int | None) -> str:
    icon = PAGES[name][0]
    if name == "Customers" and customer_count is not None:
        return f"{icon} {name} ({customer_count:,})"
    return f"{icon} {name}"


def _sidebar() -> str:
    """Render navigation with the live customer badge and return the chosen page."""

    with st.sidebar:
        st.markdown("## MDMPlatform")
        count = state.safe_customer_count()
        page = st.radio(
            "Navigation",
            options=list(PAGES),
            format_func=lambda name: _page_label(name, count),
            key="nav_page",
            label_visibility="collapsed",
        )
        st.divider()
        chat_open = st.session_state.get("chat_open", False)
        if st.button("💬 Close assistant" if chat_open else "💬 Open assistant", use_container_width=True):
            if chat_open:
                close_chat()
            st.session_state["chat_open"] = not chat_open
            st.rerun()
    return page


def main() -> None:
    """Launch the console."""

    st.set_page_config(page_title="MDM Platform", page_icon="🗂️", layout="wide", initial_sidebar_state="expanded")
    configure_logging(state.get_settings().log_level)

    page = _sidebar()
    renderer = PAGES[page][1]

    if st.session_state.get("chat_open", False):
        main_col, chat_col = st.columns([3, 2], gap="large")
        with main_col:
            renderer()
        with chat_col:
            render_chat_panel()
    else:
        renderer()


if __name__ == "__main__":
    main()
