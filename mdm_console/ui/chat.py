"""Chat assistant panel: transcript, card upload, disambiguation and onboarding."""
import logging

import streamlit as st

from mdm_console.chat.formatting import customer_details
from mdm_console.chat.session import ChatSession
from mdm_console.core.models import ChatMessage, Customer, PendingUpload
from mdm_console.onboarding.form import OnboardingForm
from mdm_console.ui import state
from mdm_console.ui.onboarding import clear_form_widgets, render_onboarding_form

logger = logging.getLogger(__name__)

SESSION_KEY = "chat_session"
FORM_KEY = "chat_onboarding_form"
FORM_PREFIX = "chat_form"
CARD_TYPES = ["png", "jpg", "jpeg", "webp", "bmp", "gif", "tiff"]


def _session() -> ChatSession:
    if SESSION_KEY not in st.session_state:
        settings = state.get_settings()
        st.session_state[SESSION_KEY] = ChatSession(
            state.current_assistant(),
            follow_up_delay=settings.follow_up_delay,
        )
    return st.session_state[SESSION_KEY]


def close_chat() -> None:
    """Discard the conversation; a response still in flight will be ignored."""

    session = st.session_state.pop(SESSION_KEY, None)
    if session is not None:
        session.close()
    st.session_state.pop(FORM_KEY, None)
    clear_form_widgets(FORM_PREFIX)


def _render_message(session: ChatSession, message: ChatMessage) -> None:
    with st.chat_message("user" if message.is_user else "assistant"):
        if message.image_preview:
            st.image(message.image_preview, width=220)
        st.markdown(message.text.replace("\n", "  \n"))
        if message.candidates:
            for index, candidate in enumerate(message.candidates):
                cols = st.columns([4, 1])
                cols[0].write(f"{index + 1}. {candidate.name}")
                if cols[1].button("View", key=f"view_{message.id}_{index}"):
                    session.view_candidate(message.id, index)
        st.caption(message.timestamp)


def _render_detail(session: ChatSession) -> None:
    customer = session.viewing
    if customer is None:
        return
    with st.container(border=True):
        st.markdown(f"#### {customer.name}")
        st.text(customer_details(customer))
        if st.button("Close details", key="close_detail"):
            session.close_detail()
            st.rerun()


def _close_form() -> None:
    session = _session()
    session.close_onboarding()
    st.session_state.pop(FORM_KEY, None)
    clear_form_widgets(FORM_PREFIX)
    st.rerun()


def _render_form(session: ChatSession) -> None:
    form = st.session_state.get(FORM_KEY)
    if form is None:
        store = state.current_store()
        if store is None:
            st.warning("Customer store is not configured; onboarding is unavailable.")
            if st.button("Close", key="chat_form_unavailable"):
                session.close_onboarding()
                st.rerun()
            return

        def on_created(customer: Customer) -> None:
            state.record_created(customer)
            session.record_created(customer)

        form = OnboardingForm(store, prefill=session.prefill, on_created=on_created)
        st.session_state[FORM_KEY] = form
    render_onboarding_form(form, FORM_PREFIX, on_close=_close_form)


def render_chat_panel() -> None:
    """Draw the assistant panel and process at most one submission per rerun."""

    session = _session()

    header = st.columns([5, 1])
    header[0].markdown("### JIA Assistant")
    header[0].caption("Customer Database Assistant")
    if header[1].button("✖", key="chat_close", help="Close assistant"):
        close_chat()
        st.session_state["chat_open"] = False
        st.rerun()

    for message in session.messages:
        _render_message(session, message)

    _render_detail(session)

    if session.show_create_prompt:
        if st.button("Create New Customer", key="chat_create", type="primary"):
            session.request_onboarding()
            clear_form_widgets(FORM_PREFIX)
            st.rerun()

    if session.form_open:
        _render_form(session)

    upload_key = f"chat_card_upload_{st.session_state.get('chat_upload_nonce', 0)}"
    card = st.file_uploader(
        "Upload a business card",
        type=CARD_TYPES,
        key=upload_key,
        disabled=session.input_disabled,
    )
    if card is not None:
        session.stage_upload(PendingUpload(card.name, card.getvalue(), card.type or "application/octet-stream"))
    else:
        session.clear_upload()

    prompt = st.chat_input("Search for a customer...", disabled=session.input_disabled)
    send_card = session.pending_upload is not None and st.button("Send card", key="chat_send_card")
    if prompt or send_card:
        with st.spinner("Thinking..."):
            session.submit(prompt or "")
        # A fresh uploader key stops the same card from being staged again.
        st.session_state["chat_upload_nonce"] = st.session_state.get("chat_upload_nonce", 0) + 1
        st.rerun()
