"""Backend, classification and assistant services."""

from .supabase_store import FleetStore, BackendError
from .lead_classifier import (
    ClassificationResult,
    classify_leads,
    working_set_for,
    summarize_for_viewer,
)
from .lead_scoring import score_lead, rescore_leads, score_band, calculate_rider_score
from .ai_service import AIService, MockAIService, AIServiceError
from .notification_service import NotificationService
from .activity_log import ActivityLogger
from .lead_actions import LeadActions
from .import_service import RiderImporter, WalletImporter, read_tabular, parse_currency
from .chat_service import ChatService

__all__ = [
    "FleetStore",
    "BackendError",
    "ClassificationResult",
    "classify_leads",
    "working_set_for",
    "summarize_for_viewer",
    "score_lead",
    "rescore_leads",
    "score_band",
    "calculate_rider_score",
    "AIService",
    "MockAIService",
    "AIServiceError",
    "NotificationService",
    "ActivityLogger",
    "LeadActions",
    "RiderImporter",
    "WalletImporter",
    "read_tabular",
    "parse_currency",
    "ChatService",
]
