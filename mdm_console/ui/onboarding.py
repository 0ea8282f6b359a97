"""Streamlit rendering of the onboarding form controller."""
import time
from typing import Callable

import streamlit as st

from mdm_console.onboarding.form import AUTO_CLOSE_SECONDS, FIELD_LABELS, FIELD_PLACEHOLDERS, OnboardingForm

REQUIRED_FIELDS = {"name"}
ROWS = (
    ("gst_number", "pan_number"),
    ("name",),
    ("company",),
    ("address",),
    ("email_address", "phone_number"),
)


def _label(name: str) -> str:
    label = FIELD_LABELS[name]
    return f"{label} *" if name in REQUIRED_FIELDS else label


def _sync_field(form: OnboardingForm, widget_key: str, name: str) -> None:
    form.set_field(name, st.session_state.get(widget_key, ""))


def render_onboarding_form(form: OnboardingForm, key_prefix: str, on_close: Callable[[], None]) -> None:
    """Draw the form; ``on_close`` runs after cancel or once the success banner has shown."""

    with st.container(border=True):
        header_cols = st.columns([4, 1])
        header_cols[0].markdown("#### New Customer Onboarding")
        if header_cols[1].button("✖", key=f"{key_prefix}_close", help="Cancel", disabled=form.closing):
            form.cancel()
            on_close()
            return

        for row in ROWS:
            cols = st.columns(len(row))
            for col, name in zip(cols, row):
                widget_key = f"{key_prefix}_{name}"
                st.session_state.setdefault(widget_key, getattr(form.draft, name))
                widget = col.text_area if name == "address" else col.text_input
                widget(
                    _label(name),
                    key=widget_key,
                    placeholder=FIELD_PLACEHOLDERS[name],
                    disabled=form.closing,
                    on_change=_sync_field,
                    args=(form, widget_key, name),
                )
                if name in form.field_errors:
                    col.caption(f":red[{form.field_errors[name]}]")

        if form.banner:
            level, message = form.banner
            (st.success if level == "success" else st.error)(message)

        if form.closing:
            time.sleep(AUTO_CLOSE_SECONDS)
            form.finish()
            on_close()
            return

        action_cols = st.columns([1, 1, 3])
        if action_cols[0].button("Cancel", key=f"{key_prefix}_cancel"):
            form.cancel()
            on_close()
            return
        if action_cols[1].button("Create Customer", key=f"{key_prefix}_submit", type="primary"):
            for row in ROWS:
                for name in row:
                    _sync_field(form, f"{key_prefix}_{name}", name)
            with st.spinner("Creating customer..."):
                form.submit()
            st.rerun()


def clear_form_widgets(key_prefix: str) -> None:
    """Forget widget values so the next form opens with fresh prefill."""

    for row in ROWS:
        for name in row:
            st.session_state.pop(f"{key_prefix}_{name}", None)
