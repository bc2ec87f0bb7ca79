"""Deterministic lead and rider scoring."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..models.leads import Lead, LeadCategory, LeadUpdate
from ..models.riders import Rider
from .lead_classifier import DUPLICATE, MATCH, classify_leads

logger = logging.getLogger(__name__)

BASE_SCORE = 50
MATCH_BONUS = 40
DUPLICATE_PENALTY = 30
PERMANENT_LICENSE_BONUS = 10
CLIENT_INTEREST_BONUS = 5

HIGH_SCORE = 80
MEDIUM_SCORE = 50


def clamp_score(value: float) -> int:
    return int(max(0, min(100, value)))


def score_lead(lead: Lead, category: Optional[LeadCategory]) -> int:
    """
    Score a lead from its category and evaluation fields.

    Rules:
    - Base 50
    - Rider match +40, duplicate -30
    - Permanent licence +10
    - Any client of interest +5
    - Clamped to 0-100
    """
    score = BASE_SCORE

    if category == MATCH:
        score += MATCH_BONUS
    elif category == DUPLICATE:
        score -= DUPLICATE_PENALTY

    if lead.driving_license == "Permanent":
        score += PERMANENT_LICENSE_BONUS
    if lead.client_interested:
        score += CLIENT_INTEREST_BONUS

    return clamp_score(score)


def score_band(score: Optional[int]) -> str:
    """Bucket a score into High / Medium / Low; missing scores are Low."""
    value = score or 0
    if value >= HIGH_SCORE:
        return "High"
    if value >= MEDIUM_SCORE:
        return "Medium"
    return "Low"


def rescore_leads(
    leads: Sequence[Lead],
    riders: Iterable[Any],
    population: Optional[Iterable[Any]] = None
) -> List[LeadUpdate]:
    """
    Recompute category and score for each lead.

    Args:
        leads: Leads to rescore
        riders: Full rider population
        population: Leads used for duplicate counting (defaults to `leads`)

    Returns:
        Updates for leads whose stored category or score changed; leads
        without a usable mobile number are left untouched
    """
    result = classify_leads(leads, riders, population=population)
    updates: List[LeadUpdate] = []

    for lead in leads:
        category = result.category_for(lead)
        if category is None:
            continue

        score = score_lead(lead, category)
        if lead.category != category or lead.score != score:
            updates.append(LeadUpdate(id=lead.id, category=category, score=score))

    logger.info(f"Rescored {len(leads)} leads, {len(updates)} changed")
    return updates


def calculate_rider_score(rider: Rider) -> Dict[str, Any]:
    """
    Rider health score from status and wallet balance.

    Returns:
        Dict with "score" (0-100) and "label" (Excellent / At Risk / Critical)
    """
    score = 100

    if rider.status == "inactive":
        score -= 20
    elif rider.status == "deleted":
        score -= 50

    if rider.wallet_amount < 0:
        debt = abs(rider.wallet_amount)
        if debt > 5000:
            score -= 40
        elif debt > 2000:
            score -= 20
        else:
            score -= 10
    elif rider.wallet_amount > 500:
        score += 5

    score = clamp_score(score)

    if score < 50:
        label = "Critical"
    elif score < 80:
        label = "At Risk"
    else:
        label = "Excellent"

    return {"score": score, "label": label}
