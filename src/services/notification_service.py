"""Notification fan-out to admins, team leaders and broadcast lists."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..models.records import Notification
from .supabase_store import BackendError, FleetStore

logger = logging.getLogger(__name__)

BROADCAST_BATCH_SIZE = 100


class NotificationService:
    """
    Writes notification rows.

    Delivery is best-effort: a failed insert is logged and reported as
    False so the action that triggered it still completes.
    """

    def __init__(self, store: FleetStore):
        self.store = store

    def send(
        self,
        user_id: str,
        title: str,
        message: str,
        type: str = "info",
        priority: str = "medium",
        related_entity: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Send a notification to a single user."""
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            priority=priority,
            related_entity=related_entity,
        )
        try:
            self.store.insert_notifications([notification.to_db()])
        except BackendError as e:
            logger.warning(f"Failed to send notification to {user_id}: {e}")
            return False
        return True

    def notify_admins(
        self,
        title: str,
        message: str,
        type: str = "info",
        related_entity: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Send a high-priority notification to every admin."""
        try:
            admin_ids = self.store.fetch_admin_ids()
            if not admin_ids:
                return False

            rows = [
                Notification(
                    user_id=admin_id,
                    title=title,
                    message=message,
                    type=type,
                    priority="high",
                    related_entity=related_entity,
                ).to_db()
                for admin_id in admin_ids
            ]
            self.store.insert_notifications(rows)
        except BackendError as e:
            logger.warning(f"Failed to notify admins: {e}")
            return False
        return True

    def broadcast(
        self,
        user_ids: Sequence[str],
        title: str,
        message: str,
        type: str = "info",
        priority: str = "medium",
        tags: Optional[List[str]] = None,
        announcement_id: Optional[str] = None
    ) -> bool:
        """Send the same notification to many users in batches."""
        related = {"tags": tags or [], "announcementId": announcement_id}
        rows = [
            Notification(
                user_id=user_id,
                title=title,
                message=message,
                type=type,
                priority=priority,
                related_entity=related,
            ).to_db()
            for user_id in user_ids
        ]

        try:
            for start in range(0, len(rows), BROADCAST_BATCH_SIZE):
                self.store.insert_notifications(rows[start:start + BROADCAST_BATCH_SIZE])
        except BackendError as e:
            logger.warning(f"Broadcast failed: {e}")
            return False

        logger.info(f"Broadcast '{title}' to {len(rows)} users")
        return True
