"""Sidebar component for connection status and viewer selection."""

import streamlit as st
from typing import Any, Dict, List

from ..models.users import SYSTEM_VIEWER, Viewer
from ..utils.settings import Settings


def render_sidebar(settings: Settings, users: List[Dict[str, Any]]) -> dict:
    """
    Render the sidebar with backend status, viewer picker and AI options.

    Args:
        settings: Loaded runtime settings
        users: Rows from the users table (may be empty when offline)

    Returns:
        dict with "viewer", "ai_api_key" and "use_mock"
    """
    with st.sidebar:
        st.header("System Config")

        if settings.has_backend:
            st.success("Backend connected")
        else:
            st.error("Set SUPABASE_URL and SUPABASE_KEY to connect")

        st.divider()

        st.subheader("Signed in as")

        viewers = [Viewer.from_db(user) for user in users] or [SYSTEM_VIEWER]
        labels = [f"{v.full_name} ({v.role})" for v in viewers]
        selected = st.selectbox(
            "User",
            options=range(len(viewers)),
            format_func=lambda i: labels[i],
            index=min(st.session_state.get("viewer_index", 0), len(viewers) - 1),
            key="viewer_select",
            help="Admins see every lead; team leaders see the leads they sourced"
        )
        st.session_state["viewer_index"] = selected
        viewer = viewers[selected]

        st.divider()

        st.subheader("Assistant")

        default_key = settings.ai_api_key or st.session_state.get("ai_api_key", "")
        ai_key = st.text_input(
            "AI API Key",
            type="password",
            value=default_key,
            key="ai_key_input",
            help="Used for lead scoring, reminders and support chat (auto-loaded from .env if present)"
        )
        if ai_key:
            st.session_state["ai_api_key"] = ai_key

        use_mock = st.toggle(
            "Use Mock Assistant",
            value=st.session_state.get("use_mock", not settings.has_ai),
            key="use_mock_toggle",
            help="Enable for UI testing without API calls"
        )
        st.session_state["use_mock"] = use_mock

        if use_mock:
            st.info("Mock mode: assistant replies are canned")
        elif not ai_key:
            st.warning("Enter an API key to use the live assistant")

        st.divider()

        if st.button("Refresh Data", type="secondary", use_container_width=True):
            st.rerun()

        return {
            "viewer": viewer,
            "ai_api_key": ai_key,
            "use_mock": use_mock,
        }
