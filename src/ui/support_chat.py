"""Support Chat tab - conversation with the assistant and admins."""

import streamlit as st
from typing import Any, Dict, Optional

from ..models.users import Viewer
from ..services.chat_service import ChatService
from ..services.supabase_store import BackendError

AVATARS = {"user": "🧑", "admin": "🛠️", "ai": "🤖"}


def render_support_chat(viewer: Viewer, chat: ChatService, stats: Optional[Dict[str, Any]] = None):
    """
    Render the support chat.

    Args:
        viewer: Current user
        chat: Chat service
        stats: Live dashboard numbers handed to the assistant
    """
    st.header("Support Chat")

    try:
        session = chat.get_or_create_session(viewer.user_id)
        messages = chat.get_messages(session.id)
    except BackendError as e:
        st.error(f"Chat unavailable: {e}")
        return

    for message in messages:
        with st.chat_message(message.sender_role, avatar=AVATARS.get(message.sender_role)):
            if message.type == "image" and message.media_url:
                st.image(message.media_url)
            elif message.type == "file" and message.media_url:
                st.markdown(f"📎 [{message.file_name or 'attachment'}]({message.media_url})")
            if message.content:
                st.write(message.content)

    with st.expander("📎 Attach a file"):
        upload = st.file_uploader("Attachment", key="chat_upload", label_visibility="collapsed")
        if upload is not None and st.button("Send attachment"):
            try:
                url = chat.upload_attachment(upload.name, upload.getvalue())
                kind = "image" if (upload.type or "").startswith("image/") else "file"
                chat.send_message(session.id, viewer.user_id, "user", "", kind, url, upload.name)
                st.rerun()
            except BackendError as e:
                st.error(f"Upload failed: {e}")

    prompt = st.chat_input("Ask about leads, riders or wallets...")
    if prompt:
        try:
            sent = chat.send_message(session.id, viewer.user_id, "user", prompt)
            with st.spinner("Triev AI is typing..."):
                chat.reply_with_bot(session, viewer, messages + [sent], stats)
        except BackendError as e:
            st.error(f"Message failed: {e}")
            return
        st.rerun()
