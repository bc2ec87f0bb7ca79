"""Lead lifecycle actions: create, status change, delete, rescore."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..models.leads import LEAD_STATUSES, Lead
from ..models.riders import Rider
from ..models.users import Viewer
from ..utils.phone import format_phone_number, validate_phone_number
from .activity_log import ActivityLogger
from .ai_service import AIService
from .lead_classifier import (
    active_leads,
    build_lead_frequency,
    build_rider_set,
    categorize,
    mobile_key,
)
from .lead_scoring import rescore_leads, score_lead
from .supabase_store import FleetStore

logger = logging.getLogger(__name__)


class LeadActions:
    """Mutations on leads, each recorded in the activity log."""

    def __init__(
        self,
        store: FleetStore,
        activity: ActivityLogger,
        ai: Optional[AIService] = None
    ):
        self.store = store
        self.activity = activity
        self.ai = ai

    def create_lead(
        self,
        viewer: Viewer,
        form: Dict[str, Any],
        all_leads: Sequence[Lead],
        riders: Iterable[Rider]
    ) -> Lead:
        """
        Validate, categorize, score and insert a new lead.

        The stored category is computed against the current lead and rider
        populations with normalized numbers; rider match wins over duplicate.

        Raises:
            ValueError: The form fails validation
        """
        mobile = format_phone_number(str(form.get("mobile_number", "")).strip())
        if not validate_phone_number(mobile):
            raise ValueError("Invalid mobile number. Use +91XXXXXXXXXX")
        if not str(form.get("rider_name", "")).strip():
            raise ValueError("Rider name is required")

        draft = Lead.model_validate({
            **form,
            "id": "",
            "mobile_number": mobile,
            "created_by": viewer.user_id,
            "created_by_name": viewer.full_name,
            "status": "New",
        })

        population = active_leads(all_leads)
        frequency = build_lead_frequency([*population, draft])
        category = categorize(mobile_key(draft), build_rider_set(riders), frequency) or "Genuine"

        score = self.ai.score_lead(draft) if self.ai else score_lead(draft, category)
        draft = draft.model_copy(update={"category": category, "score": score})

        lead = self.store.create_lead(draft.to_db())
        logger.info(f"Lead {lead.id} created by {viewer.user_id} as {category} (score {score})")

        self.activity.log(
            viewer,
            "leadCreated",
            "lead",
            lead.id,
            f"New lead {lead.rider_name} ({category})",
            {"category": category, "score": score},
        )
        return lead

    def change_status(self, viewer: Viewer, lead: Lead, status: str) -> None:
        if status not in LEAD_STATUSES:
            raise ValueError(f"Unknown lead status: {status}")

        self.store.update_lead(lead.id, {"status": status})
        self.activity.log(
            viewer,
            "leadStatusChange",
            "lead",
            lead.id,
            f"Lead #{lead.lead_id} status {lead.status} -> {status}",
        )

    def delete_leads(self, viewer: Viewer, lead_ids: Sequence[str]) -> None:
        """Soft delete: rows stay in the backend with deleted_at set."""
        self.store.soft_delete_leads(lead_ids)
        self.activity.log(
            viewer,
            "leadDeleted",
            "lead",
            lead_ids[0] if len(lead_ids) == 1 else "multiple",
            f"Deleted {len(lead_ids)} lead(s)",
        )

    def purge_leads(self, viewer: Viewer, lead_ids: Sequence[str]) -> None:
        """Permanently remove leads. Admin only."""
        if not viewer.is_admin:
            raise PermissionError("Only admins can permanently delete leads")

        self.store.hard_delete_leads(lead_ids)
        self.activity.log(
            viewer,
            "leadPurged",
            "lead",
            lead_ids[0] if len(lead_ids) == 1 else "multiple",
            f"Permanently deleted {len(lead_ids)} lead(s)",
        )

    def rescore_all(
        self,
        viewer: Viewer,
        all_leads: Sequence[Lead],
        riders: Iterable[Rider]
    ) -> int:
        """
        Recompute and store categories and scores for every active lead.

        Returns:
            Number of leads written
        """
        population = active_leads(all_leads)
        updates = rescore_leads(population, riders)
        written = self.store.apply_lead_updates(updates)

        if written:
            self.activity.log(
                viewer,
                "leadsRescored",
                "lead",
                "multiple",
                f"Rescored {written} of {len(population)} leads",
            )
        return written

    @staticmethod
    def recommended_statuses(current: str) -> List[str]:
        return [status for status in LEAD_STATUSES if status != current]
