"""Lead Board tab - category cards, filters, table and lead actions."""

import streamlit as st
from typing import List, Optional

from ..models.leads import EV_TYPES, LEAD_SOURCES, LEAD_STATUSES, LICENSE_TYPES, Lead
from ..models.riders import CLIENT_NAMES, Rider
from ..models.users import Viewer
from ..services.ai_service import AIService
from ..services.export_service import leads_dataframe, leads_to_csv
from ..services.lead_actions import LeadActions
from ..services.lead_classifier import (
    DUPLICATE,
    GENUINE,
    MATCH,
    ClassificationResult,
    summarize_for_viewer,
    working_set_for,
)
from ..services.lead_scoring import score_band
from ..services.supabase_store import BackendError

CATEGORY_ICONS = {GENUINE: "🟢", DUPLICATE: "🟠", MATCH: "🔵"}


def toggle_category(category: str):
    """Clicking the active card again clears the filter."""
    current = st.session_state.get("lead_category_filter")
    st.session_state["lead_category_filter"] = None if current == category else category


def render_category_cards(result: ClassificationResult, base: int):
    """Three stat cards with share of the working set; click to filter."""
    percentages = result.percentages(base)
    active = st.session_state.get("lead_category_filter")

    columns = st.columns(3)
    for column, (category, count) in zip(columns, [
        (GENUINE, result.genuine_count),
        (DUPLICATE, result.duplicate_count),
        (MATCH, result.match_count),
    ]):
        with column:
            st.metric(f"{CATEGORY_ICONS[category]} {category}", count, f"{percentages[category]}%", delta_color="off")
            st.button(
                "Clear filter" if active == category else f"Show {category}",
                key=f"card_{category}",
                on_click=toggle_category,
                args=(category,),
                use_container_width=True,
                type="primary" if active == category else "secondary",
            )


def render_insights(viewer: Viewer, result: ClassificationResult, base: int, ai: AIService):
    """On-demand assistant summary of the viewer's lead counts."""
    if st.button("✨ Fleet Insights", key="lead_board_insights"):
        stats = {
            "Leads": base,
            "Genuine leads": result.genuine_count,
            "Duplicate leads": result.duplicate_count,
            "Matched leads": result.match_count,
        }
        with st.spinner("Analyzing..."):
            st.session_state["lead_board_insight"] = ai.dashboard_insights(stats, viewer.role)

    insight = st.session_state.get("lead_board_insight")
    if insight:
        st.info(insight)


def apply_filters(leads: List[Lead], search: str, city: str, source: str, band: str) -> List[Lead]:
    term = search.strip().lower()
    filtered = []
    for lead in leads:
        if term and term not in lead.rider_name.lower() and term not in lead.mobile_number \
                and term != str(lead.lead_id or ""):
            continue
        if city != "All" and lead.city != city:
            continue
        if source != "All" and lead.source != source:
            continue
        if band != "All" and score_band(lead.score) != band:
            continue
        filtered.append(lead)
    return filtered


def render_new_lead_form(viewer: Viewer, actions: LeadActions, all_leads: List[Lead], riders: List[Rider]):
    with st.expander("➕ Add Lead"):
        with st.form("new_lead_form", clear_on_submit=True):
            col1, col2 = st.columns(2)
            with col1:
                rider_name = st.text_input("Rider Name")
                mobile = st.text_input("Mobile Number", help="10 digits or +91XXXXXXXXXX")
                city = st.text_input("City")
                source = st.selectbox("Source", LEAD_SOURCES)
            with col2:
                license_type = st.selectbox("Driving License", LICENSE_TYPES)
                ev_type = st.selectbox("EV Type Interested", EV_TYPES)
                client = st.selectbox("Client Interested", CLIENT_NAMES)
                current_ev = st.text_input("Current EV Using", value="None")
            remarks = st.text_area("Remarks", height=80)

            submitted = st.form_submit_button("Save Lead", type="primary")

        if submitted:
            form = {
                "rider_name": rider_name,
                "mobile_number": mobile,
                "city": city,
                "source": source,
                "driving_license": license_type,
                "ev_type_interested": ev_type,
                "client_interested": client,
                "current_ev_using": current_ev,
                "remarks": remarks,
            }
            try:
                lead = actions.create_lead(viewer, form, all_leads, riders)
            except ValueError as e:
                st.error(str(e))
            except BackendError as e:
                st.error(f"Could not save lead: {e}")
            else:
                st.toast(f"Lead saved as {lead.category} (score {lead.score})", icon="✅")
                st.rerun()


def render_lead_actions(
    viewer: Viewer,
    leads: List[Lead],
    all_leads: List[Lead],
    riders: List[Rider],
    actions: LeadActions,
    ai: Optional[AIService],
):
    """Status change, delete, rescore and AI recommendation for one lead."""
    st.subheader("Lead Actions")

    if not leads:
        st.caption("No leads match the current filters.")
        return

    by_label = {f"#{lead.lead_id or '-'} {lead.rider_name} ({lead.mobile_number})": lead for lead in leads}
    label = st.selectbox("Select lead", list(by_label.keys()), key="lead_action_select")
    lead = by_label[label]

    col1, col2, col3 = st.columns(3)

    with col1:
        new_status = st.selectbox("Change status to", actions.recommended_statuses(lead.status), key="lead_status_select")
        if st.button("Update Status", use_container_width=True):
            try:
                actions.change_status(viewer, lead, new_status)
                st.rerun()
            except BackendError as e:
                st.error(f"Status update failed: {e}")

    with col2:
        if st.button("🗑️ Delete Lead", use_container_width=True):
            try:
                actions.delete_leads(viewer, [lead.id])
                st.rerun()
            except BackendError as e:
                st.error(f"Delete failed: {e}")
        if viewer.is_admin and st.button("Delete Permanently", use_container_width=True):
            try:
                actions.purge_leads(viewer, [lead.id])
                st.rerun()
            except BackendError as e:
                st.error(f"Delete failed: {e}")

    with col3:
        if ai is not None and st.button("💡 AI Recommendation", use_container_width=True):
            with st.spinner("Thinking..."):
                st.info(ai.lead_recommendation(lead))

    if viewer.is_admin:
        st.divider()
        if st.button("Rescore All Leads", type="secondary"):
            try:
                written = actions.rescore_all(viewer, all_leads, riders)
                st.success(f"Rescored {written} lead(s)")
            except BackendError as e:
                st.error(f"Rescore failed: {e}")


def render_lead_board(
    viewer: Viewer,
    all_leads: List[Lead],
    riders: List[Rider],
    actions: LeadActions,
    ai: Optional[AIService] = None,
):
    """
    Render the Lead Board tab.

    Categories are recomputed from the freshly loaded leads and riders on
    every rerun; the stored category column is not used for the cards.

    Args:
        viewer: Current user; scopes the working set
        all_leads: Every lead loaded from the backend
        riders: Every rider loaded from the backend
        actions: Lead mutation service
        ai: Assistant used for insights and recommendations (None hides both)
    """
    st.header("Lead Board")

    working = working_set_for(viewer, all_leads)
    result = summarize_for_viewer(viewer, all_leads, riders)

    render_category_cards(result, len(working))
    if ai is not None:
        render_insights(viewer, result, len(working), ai)

    category = st.session_state.get("lead_category_filter")
    if category:
        st.caption(f"Showing {category} leads only")

    render_new_lead_form(viewer, actions, all_leads, riders)

    st.divider()

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        search = st.text_input("Search", placeholder="Name, mobile or lead #", key="lead_search")
    with col2:
        cities = sorted({lead.city for lead in working if lead.city})
        city = st.selectbox("City", ["All"] + cities, key="lead_city")
    with col3:
        source = st.selectbox("Source", ["All"] + list(LEAD_SOURCES), key="lead_source")
    with col4:
        band = st.selectbox("Score", ["All", "High", "Medium", "Low"], key="lead_band")

    visible = apply_filters(result.filter(working, category), search, city, source, band)

    tabs = st.tabs(["All"] + list(LEAD_STATUSES))
    for tab, status in zip(tabs, [None] + list(LEAD_STATUSES)):
        with tab:
            rows = visible if status is None else [lead for lead in visible if lead.status == status]
            if not rows:
                st.info("No leads to show.")
                continue
            st.dataframe(
                leads_dataframe(rows, result.categories),
                use_container_width=True,
                hide_index=True,
            )

    st.download_button(
        label="📥 Download CSV",
        data=leads_to_csv(visible, result.categories),
        file_name="leads.csv",
        mime="text/csv",
        type="secondary",
    )

    st.divider()

    render_lead_actions(viewer, visible, all_leads, riders, actions, ai)
