"""Rider Desk tab - rider roster, wallets and payment reminders."""

import streamlit as st
from typing import List, Optional

from ..models.riders import Rider
from ..models.users import Viewer
from ..services.ai_service import AIService
from ..services.export_service import riders_dataframe
from ..services.lead_scoring import calculate_rider_score
from ..utils.phone import format_phone_for_whatsapp
from ..utils.whatsapp import (
    build_whatsapp_url,
    format_inr,
    generate_whatsapp_reminder,
    riders_with_negative_wallets,
)

HEALTH_ICONS = {"Excellent": "🟢", "At Risk": "🟡", "Critical": "🔴"}


def riders_for(viewer: Viewer, riders: List[Rider]) -> List[Rider]:
    """Admins see every rider; team leaders see their own."""
    visible = [rider for rider in riders if not rider.is_deleted]
    if viewer.is_admin:
        return visible
    return [rider for rider in visible if rider.team_leader_id == viewer.user_id]


def render_wallet_metrics(riders: List[Rider]):
    total = sum(rider.wallet_amount for rider in riders)
    dues = riders_with_negative_wallets(riders)
    outstanding = sum(abs(rider.wallet_amount) for rider in dues)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Riders", len(riders))
    with col2:
        st.metric("Active", sum(1 for rider in riders if rider.status == "active"))
    with col3:
        st.metric("Net Wallet", format_inr(total))
    with col4:
        st.metric("Outstanding Dues", format_inr(outstanding), f"{len(dues)} riders", delta_color="inverse")


def render_reminders(riders: List[Rider], ai: Optional[AIService]):
    """Negative-wallet riders with WhatsApp reminder links."""
    st.subheader("Payment Reminders")

    dues = sorted(riders_with_negative_wallets(riders), key=lambda r: r.wallet_amount)
    if not dues:
        st.success("No outstanding dues 🎉")
        return

    col1, col2 = st.columns(2)
    with col1:
        language = st.radio("Language", ["english", "hindi"], horizontal=True, key="reminder_language")
    with col2:
        use_ai = st.toggle(
            "AI-written reminders",
            value=False,
            disabled=ai is None,
            key="reminder_use_ai",
            help="Generate a unique message per rider instead of the fixed template"
        )

    for rider in dues:
        with st.expander(f"{rider.rider_name} · {format_inr(rider.wallet_amount)} · {rider.team_leader_name}"):
            if use_ai and ai is not None:
                message = ai.payment_reminder(rider, language)
            else:
                message = generate_whatsapp_reminder(rider, language)
            st.text_area("Message", value=message, height=160, key=f"reminder_{rider.id}")
            phone = format_phone_for_whatsapp(rider.mobile_number)
            st.link_button("Send on WhatsApp", build_whatsapp_url(phone, message))


def render_rider_desk(viewer: Viewer, riders: List[Rider], ai: Optional[AIService] = None):
    """
    Render the Rider Desk tab.

    Args:
        viewer: Current user; team leaders see their own riders
        riders: Every rider loaded from the backend
        ai: Assistant for AI-written reminders (None disables them)
    """
    st.header("Rider Desk")

    visible = riders_for(viewer, riders)
    if not visible:
        st.info("No riders assigned yet.")
        return

    render_wallet_metrics(visible)

    st.divider()

    search = st.text_input("Search riders", placeholder="Name, Triev ID or mobile", key="rider_search")
    term = search.strip().lower()
    if term:
        visible = [
            rider for rider in visible
            if term in rider.rider_name.lower() or term in rider.triev_id.lower() or term in rider.mobile_number
        ]

    df = riders_dataframe(visible)
    health = [calculate_rider_score(rider) for rider in visible]
    df["Health"] = [f"{HEALTH_ICONS[h['label']]} {h['score']}" for h in health]
    st.dataframe(df, use_container_width=True, hide_index=True)

    st.divider()

    render_reminders(visible, ai)
