"""Support chat sessions, messages, attachments and bot replies."""

import logging
import mimetypes
import time
import uuid
from typing import Any, Dict, List, Optional

from ..models.records import ChatMessage, ChatSession
from ..models.users import Viewer
from .ai_service import AIService
from .supabase_store import FleetStore

logger = logging.getLogger(__name__)

ATTACHMENT_BUCKET = "chat-attachments"

# Turns of history sent to the bot with each reply
HISTORY_WINDOW = 10


class ChatService:
    """Support chat between users, admins and the assistant."""

    def __init__(self, store: FleetStore, ai: AIService):
        self.store = store
        self.ai = ai

    def get_or_create_session(self, user_id: str) -> ChatSession:
        """Return the user's active session, opening one if none exists."""
        row = self.store.fetch_active_session(user_id)
        if row is None:
            row = self.store.create_session(user_id)
            logger.info(f"Opened chat session {row.get('id')} for {user_id}")
        return ChatSession.model_validate(row)

    def get_messages(self, session_id: str) -> List[ChatMessage]:
        return [ChatMessage.model_validate(row) for row in self.store.fetch_messages(session_id)]

    def send_message(
        self,
        session_id: str,
        sender_id: Optional[str],
        role: str,
        content: str,
        type: str = "text",
        media_url: Optional[str] = None,
        file_name: Optional[str] = None
    ) -> ChatMessage:
        """Store a message and bump the session timestamps."""
        message = ChatMessage(
            session_id=session_id,
            sender_id=sender_id,
            sender_role=role,
            content=content,
            type=type,
            media_url=media_url,
            file_name=file_name,
        )
        row = self.store.insert_message(message.model_dump(mode="json", exclude_none=True))
        self.store.touch_session(session_id)
        return ChatMessage.model_validate(row)

    def upload_attachment(self, file_name: str, content: bytes) -> str:
        """
        Upload a chat attachment.

        Returns:
            Public URL of the stored file
        """
        ext = file_name.rsplit(".", 1)[-1] if "." in file_name else "bin"
        path = f"uploads/{uuid.uuid4().hex[:12]}_{int(time.time() * 1000)}.{ext}"
        content_type = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
        return self.store.upload_file(ATTACHMENT_BUCKET, path, content, content_type)

    def reply_with_bot(
        self,
        session: ChatSession,
        viewer: Viewer,
        history: List[ChatMessage],
        stats: Optional[Dict[str, Any]] = None
    ) -> ChatMessage:
        """Answer the latest user message with the assistant and store the reply."""
        turns = [
            {"role": "user" if msg.sender_role == "user" else "ai", "content": msg.content}
            for msg in history
        ]
        if turns and turns[-1]["role"] == "user":
            latest = turns.pop()["content"]
        else:
            latest = ""

        reply = self.ai.chat_with_bot(latest, turns[-HISTORY_WINDOW:], viewer, stats)
        return self.send_message(session.id, None, "ai", reply)
