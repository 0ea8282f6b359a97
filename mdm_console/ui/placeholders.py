"""Vendors, Reports and Settings pages."""
import streamlit as st

from mdm_console.ui import state


def _placeholder(icon: str, title: str, blurb: str) -> None:
    st.markdown(f"<div style='text-align:center; font-size:3rem;'>{icon}</div>", unsafe_allow_html=True)
    st.markdown(f"<h2 style='text-align:center;'>{title}</h2>", unsafe_allow_html=True)
    st.markdown(f"<p style='text-align:center; color:gray;'>{blurb}</p>", unsafe_allow_html=True)


def render_vendors_page() -> None:
    _placeholder(
        "📦",
        "Vendor Management",
        "Manage vendor master data, onboarding and compliance across all connected systems.",
    )


def render_reports_page() -> None:
    _placeholder(
        "📊",
        "Reports & Analytics",
        "Access comprehensive reports and analytics on your master data across all systems "
        "to gain insights and make better decisions.",
    )


def render_settings_page() -> None:
    st.title("Settings")
    st.caption("Effective configuration. Values come from Streamlit secrets, secrets/mdm.env or the environment.")
    settings = state.get_settings()
    st.table([{"Setting": key, "Value": value} for key, value in settings.masked().items()])
    if st.button("Clear cached customer data"):
        state.invalidate_customer_caches()
        st.session_state.pop(state.MASTER_LIST_KEY, None)
        st.success("Customer caches cleared.")
