"""Supabase-backed data access for leads, riders and supporting tables."""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from supabase import Client, create_client

from ..models.leads import Lead, LeadUpdate
from ..models.riders import Rider

logger = logging.getLogger(__name__)

# PostgREST caps responses at 1000 rows by default
PAGE_SIZE = 1000


class BackendError(Exception):
    """A Supabase query failed."""


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class FleetStore:
    """
    Thin wrapper over the Supabase tables the back-office uses.

    Every method either returns plain data or raises BackendError; callers
    decide whether a failure is fatal.
    """

    LEADS = "leads"
    RIDERS = "riders"
    USERS = "users"
    NOTIFICATIONS = "notifications"
    ACTIVITY_LOGS = "activity_logs"
    IMPORT_HISTORY = "import_history"
    CHAT_SESSIONS = "chat_sessions"
    CHAT_MESSAGES = "chat_messages"

    def __init__(self, client: Client):
        self.client = client

    @classmethod
    def connect(cls, url: str, key: str) -> "FleetStore":
        """Create a store from project credentials."""
        if not url or not key:
            raise BackendError("SUPABASE_URL and SUPABASE_KEY are required")
        return cls(create_client(url, key))

    def _execute(self, query: Any, action: str) -> List[Dict[str, Any]]:
        try:
            response = query.execute()
        except Exception as e:
            logger.error(f"Supabase {action} failed: {e}")
            raise BackendError(f"{action} failed: {e}") from e
        return response.data or []

    def _fetch_all(
        self,
        table: str,
        columns: str = "*",
        refine: Optional[Callable[[Any], Any]] = None
    ) -> List[Dict[str, Any]]:
        """Page through a table in PAGE_SIZE blocks."""
        rows: List[Dict[str, Any]] = []
        start = 0

        while True:
            query = self.client.table(table).select(columns)
            if refine is not None:
                query = refine(query)
            page = self._execute(query.range(start, start + PAGE_SIZE - 1), f"fetch {table}")
            rows.extend(page)
            if len(page) < PAGE_SIZE:
                break
            start += PAGE_SIZE

        return rows

    # --- Leads ---

    def fetch_leads(self, include_deleted: bool = False) -> List[Lead]:
        """All leads, newest first."""
        def refine(query):
            query = query.order("id", desc=True)
            if not include_deleted:
                query = query.is_("deleted_at", "null")
            return query

        rows = self._fetch_all(self.LEADS, refine=refine)
        logger.debug(f"Fetched {len(rows)} leads")
        return [Lead.from_db(row) for row in rows]

    def create_lead(self, payload: Dict[str, Any]) -> Lead:
        rows = self._execute(self.client.table(self.LEADS).insert(payload), "insert lead")
        if not rows:
            raise BackendError("insert lead returned no row")
        return Lead.from_db(rows[0])

    def update_lead(self, lead_id: str, fields: Dict[str, Any]) -> None:
        payload = {**fields, "updated_at": utc_now_iso()}
        self._execute(
            self.client.table(self.LEADS).update(payload).eq("id", lead_id),
            "update lead"
        )

    def soft_delete_leads(self, lead_ids: Sequence[str]) -> None:
        if not lead_ids:
            return
        self._execute(
            self.client.table(self.LEADS).update({"deleted_at": utc_now_iso()}).in_("id", list(lead_ids)),
            "soft delete leads"
        )

    def hard_delete_leads(self, lead_ids: Sequence[str]) -> None:
        if not lead_ids:
            return
        self._execute(
            self.client.table(self.LEADS).delete().in_("id", list(lead_ids)),
            "delete leads"
        )

    def apply_lead_updates(self, updates: Sequence[LeadUpdate]) -> int:
        """Write recomputed categories and scores; returns rows written."""
        for update in updates:
            self._execute(
                self.client.table(self.LEADS).update(update.to_db()).eq("id", update.id),
                "update lead score"
            )
        return len(updates)

    # --- Riders ---

    def fetch_riders(self) -> List[Rider]:
        rows = self._fetch_all(self.RIDERS, refine=lambda q: q.order("created_at", desc=True))
        logger.debug(f"Fetched {len(rows)} riders")
        return [Rider.from_db(row) for row in rows]

    def find_rider(
        self,
        triev_id: str = "",
        mobile: str = "",
        chassis: str = ""
    ) -> Optional[Dict[str, Any]]:
        """First rider matching any of the given identifiers."""
        conditions = []
        if triev_id:
            conditions.append(f"triev_id.eq.{triev_id}")
        if mobile:
            conditions.append(f"mobile_number.eq.{mobile}")
        if chassis:
            conditions.append(f"chassis_number.eq.{chassis}")
        if not conditions:
            return None

        rows = self._execute(
            self.client.table(self.RIDERS).select("id, rider_name").or_(",".join(conditions)).limit(1),
            "find rider"
        )
        return rows[0] if rows else None

    def find_rider_by(self, column: str, value: str) -> Optional[Dict[str, Any]]:
        rows = self._execute(
            self.client.table(self.RIDERS).select("id, rider_name").eq(column, value).limit(1),
            f"find rider by {column}"
        )
        return rows[0] if rows else None

    def insert_rider(self, payload: Dict[str, Any]) -> None:
        self._execute(
            self.client.table(self.RIDERS).insert({**payload, "created_at": utc_now_iso()}),
            "insert rider"
        )

    def update_rider(self, rider_id: str, payload: Dict[str, Any]) -> None:
        self._execute(
            self.client.table(self.RIDERS).update({**payload, "updated_at": utc_now_iso()}).eq("id", rider_id),
            "update rider"
        )

    # --- Users ---

    def fetch_users(self) -> List[Dict[str, Any]]:
        return self._execute(
            self.client.table(self.USERS).select("id, full_name, email, role"),
            "fetch users"
        )

    def fetch_admin_ids(self) -> List[str]:
        rows = self._execute(
            self.client.table(self.USERS).select("id").eq("role", "admin"),
            "fetch admins"
        )
        return [str(row["id"]) for row in rows]

    # --- Notifications / audit ---

    def insert_notifications(self, rows: List[Dict[str, Any]]) -> None:
        if rows:
            self._execute(self.client.table(self.NOTIFICATIONS).insert(rows), "insert notifications")

    def fetch_notifications(self, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        return self._execute(
            self.client.table(self.NOTIFICATIONS)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit),
            "fetch notifications"
        )

    def mark_notification_read(self, notification_id: str) -> None:
        self._execute(
            self.client.table(self.NOTIFICATIONS)
            .update({"is_read": True, "read_at": utc_now_iso()})
            .eq("id", notification_id),
            "mark notification read"
        )

    def insert_activity_log(self, row: Dict[str, Any]) -> None:
        self._execute(self.client.table(self.ACTIVITY_LOGS).insert(row), "insert activity log")

    def insert_import_history(self, row: Dict[str, Any]) -> None:
        self._execute(self.client.table(self.IMPORT_HISTORY).insert(row), "insert import history")

    # --- Support chat ---

    def fetch_active_session(self, user_id: str) -> Optional[Dict[str, Any]]:
        rows = self._execute(
            self.client.table(self.CHAT_SESSIONS)
            .select("*")
            .eq("user_id", user_id)
            .eq("status", "active")
            .order("updated_at", desc=True)
            .limit(1),
            "fetch chat session"
        )
        return rows[0] if rows else None

    def create_session(self, user_id: str) -> Dict[str, Any]:
        rows = self._execute(
            self.client.table(self.CHAT_SESSIONS).insert({"user_id": user_id, "status": "active"}),
            "create chat session"
        )
        if not rows:
            raise BackendError("create chat session returned no row")
        return rows[0]

    def fetch_messages(self, session_id: str) -> List[Dict[str, Any]]:
        return self._execute(
            self.client.table(self.CHAT_MESSAGES)
            .select("*")
            .eq("session_id", session_id)
            .order("created_at"),
            "fetch chat messages"
        )

    def insert_message(self, row: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._execute(self.client.table(self.CHAT_MESSAGES).insert(row), "insert chat message")
        return rows[0] if rows else row

    def touch_session(self, session_id: str) -> None:
        now = utc_now_iso()
        self._execute(
            self.client.table(self.CHAT_SESSIONS)
            .update({"updated_at": now, "last_message_at": now})
            .eq("id", session_id),
            "touch chat session"
        )

    def upload_file(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        """Upload to a storage bucket and return the public URL."""
        try:
            storage = self.client.storage.from_(bucket)
            storage.upload(path, content, {"content-type": content_type})
            return storage.get_public_url(path)
        except Exception as e:
            logger.error(f"Upload to {bucket}/{path} failed: {e}")
            raise BackendError(f"upload failed: {e}") from e
