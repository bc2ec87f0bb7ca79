"""Data models for the fleet back-office."""

from .leads import (
    Lead,
    LeadLocation,
    LeadUpdate,
    LEAD_STATUSES,
    LEAD_CATEGORIES,
    LEAD_SOURCES,
)
from .riders import Rider, CLIENT_NAMES, RIDER_STATUSES
from .users import Viewer, SYSTEM_VIEWER
from .records import (
    Notification,
    ActivityLogEntry,
    ImportRowError,
    ImportSummary,
    ChatSession,
    ChatMessage,
)

__all__ = [
    "Lead",
    "LeadLocation",
    "LeadUpdate",
    "LEAD_STATUSES",
    "LEAD_CATEGORIES",
    "LEAD_SOURCES",
    "Rider",
    "CLIENT_NAMES",
    "RIDER_STATUSES",
    "Viewer",
    "SYSTEM_VIEWER",
    "Notification",
    "ActivityLogEntry",
    "ImportRowError",
    "ImportSummary",
    "ChatSession",
    "ChatMessage",
]
