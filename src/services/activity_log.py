"""Audit trail with automatic notification dispatch."""

import logging
from typing import Any, Dict, Optional

from ..models.records import ActivityLogEntry
from ..models.users import Viewer
from .notification_service import NotificationService
from .supabase_store import BackendError, FleetStore

logger = logging.getLogger(__name__)


def notification_type_for(action_type: str, details: str) -> str:
    """Derive the notification type from action and detail keywords."""
    action = action_type.lower()
    text = details.lower()

    if any(word in action for word in ("delete", "suspend", "ban")):
        return "alert"
    if any(word in action for word in ("create", "add", "success")):
        return "success"
    if any(word in action for word in ("update", "edit", "modify")):
        return "info"
    if any(word in action for word in ("warn", "fail")) or "error" in text or "failed" in text:
        return "warning"
    return "info"


class ActivityLogger:
    """Records user actions and tells the right people about them."""

    def __init__(self, store: FleetStore, notifications: NotificationService):
        self.store = store
        self.notifications = notifications

    def log(
        self,
        viewer: Viewer,
        action_type: str,
        target_type: str,
        target_id: str,
        details: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Write an activity entry, notify admins, and route rider events.

        Args:
            viewer: Who performed the action
            action_type: e.g. "leadCreated", "leadStatusChange", "bulkImport"
            target_type: rider, user, lead, request, report or system
            target_id: Identifier of the target ("multiple" for bulk actions)
            details: Human-readable summary
            metadata: Extra context; "team_leader_id" routes rider events

        Returns:
            True if the entry was stored
        """
        metadata = metadata or {}
        entry = ActivityLogEntry(
            user_id=viewer.user_id,
            user_name=viewer.full_name,
            user_role=viewer.role,
            action_type=action_type,
            target_type=target_type,
            target_id=str(target_id),
            details=details,
            metadata=metadata,
        )

        try:
            self.store.insert_activity_log(entry.to_db())
        except BackendError as e:
            logger.warning(f"Activity log write failed for {action_type}: {e}")
            return False

        notif_type = notification_type_for(action_type, details)

        self.notifications.notify_admins(
            f"System Activity: {action_type}",
            f"{details} (by {viewer.full_name})",
            notif_type,
        )

        team_leader_id = metadata.get("team_leader_id")
        if target_type == "rider" and team_leader_id:
            self.notifications.send(
                user_id=team_leader_id,
                title=f"Rider Update: {action_type}",
                message=details,
                type=notif_type,
                related_entity={"type": "rider", "id": str(target_id)},
            )

        return True
