"""Notifications tab - inbox and admin broadcast."""

import streamlit as st
from typing import Any, Dict, List

from ..models.users import Viewer
from ..services.notification_service import NotificationService
from ..services.supabase_store import BackendError, FleetStore

TYPE_ICONS = {
    "alert": "🚨",
    "warning": "⚠️",
    "success": "✅",
    "info": "ℹ️",
}


def render_inbox(viewer: Viewer, store: FleetStore):
    try:
        notifications = store.fetch_notifications(viewer.user_id)
    except BackendError as e:
        st.error(f"Could not load notifications: {e}")
        return

    unread = [n for n in notifications if not n.get("is_read")]
    st.caption(f"{len(unread)} unread of {len(notifications)}")

    if not notifications:
        st.info("You're all caught up.")
        return

    for notification in notifications:
        icon = TYPE_ICONS.get(notification.get("type"), "🔔")
        title = notification.get("title", "")
        with st.container(border=True):
            col1, col2 = st.columns([5, 1])
            with col1:
                weight = "" if notification.get("is_read") else "**"
                st.markdown(f"{icon} {weight}{title}{weight}")
                st.caption(notification.get("message", ""))
            with col2:
                if not notification.get("is_read") and st.button("Mark read", key=f"read_{notification.get('id')}"):
                    try:
                        store.mark_notification_read(notification["id"])
                        st.rerun()
                    except BackendError as e:
                        st.error(str(e))


def render_broadcast(users: List[Dict[str, Any]], notifications: NotificationService):
    st.subheader("Broadcast")

    with st.form("broadcast_form", clear_on_submit=True):
        title = st.text_input("Title")
        message = st.text_area("Message", height=100)
        audience = st.radio("Send to", ["Everyone", "Team Leaders", "Admins"], horizontal=True)
        priority = st.selectbox("Priority", ["medium", "high", "low"])
        submitted = st.form_submit_button("Send", type="primary")

    if not submitted:
        return
    if not title or not message:
        st.warning("Title and message are required")
        return

    role = {"Team Leaders": "teamLeader", "Admins": "admin"}.get(audience)
    user_ids = [str(u["id"]) for u in users if role is None or u.get("role") == role]

    if notifications.broadcast(user_ids, title, message, priority=priority, tags=[audience]):
        st.success(f"Sent to {len(user_ids)} user(s)")
    else:
        st.error("Broadcast failed")


def render_notifications(
    viewer: Viewer,
    store: FleetStore,
    notifications: NotificationService,
    users: List[Dict[str, Any]],
):
    """Render the Notifications tab."""
    st.header("Notifications")

    render_inbox(viewer, store)

    if viewer.is_admin:
        st.divider()
        render_broadcast(users, notifications)
