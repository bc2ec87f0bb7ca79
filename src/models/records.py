"""Models for notifications, activity logs, imports and support chat."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

NotificationPriority = Literal["low", "medium", "high"]
ImportType = Literal["rider", "wallet", "googleSheet"]
SenderRole = Literal["user", "admin", "ai"]
MessageType = Literal["text", "image", "file"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Notification(BaseModel):
    """A notification row addressed to one user."""

    user_id: str
    title: str
    message: str
    type: str = Field("info", description="system, riderAlert, walletAlert, leadAlert, info, warning, ...")
    priority: NotificationPriority = Field("medium")
    related_entity: Optional[Dict[str, Any]] = Field(None)
    is_read: bool = Field(False)
    created_at: datetime = Field(default_factory=utc_now)

    def to_db(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class ActivityLogEntry(BaseModel):
    """One audit trail entry."""

    user_id: str
    user_name: str
    user_role: str
    action_type: str
    target_type: str
    target_id: str
    details: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utc_now)
    is_deleted: bool = Field(False)

    def to_db(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class ImportRowError(BaseModel):
    """A failed or warned row from a bulk import."""

    row: int = Field(..., description="1-based spreadsheet row, header counted")
    identifier: str = Field(..., description="Name, code or mobile identifying the row")
    reason: str
    data: Optional[Dict[str, Any]] = Field(None)


class ImportSummary(BaseModel):
    """Outcome of a bulk import run."""

    total: int = 0
    success: int = 0
    failed: int = 0
    skipped: int = 0
    errors: List[ImportRowError] = Field(default_factory=list)

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "success"
        if self.success == 0:
            return "failed"
        return "partial"


class ChatSession(BaseModel):
    id: str
    user_id: str
    status: str = "active"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_message_at: Optional[datetime] = None


class ChatMessage(BaseModel):
    id: Optional[str] = None
    session_id: str
    sender_id: Optional[str] = Field(None, description="None for AI replies")
    sender_role: SenderRole = "user"
    content: str = ""
    type: MessageType = "text"
    media_url: Optional[str] = None
    file_name: Optional[str] = None
    is_read: bool = False
    created_at: Optional[datetime] = None
