"""Lead classification: genuine, duplicate, or existing-rider match."""

from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from ..models.leads import LeadCategory
from ..models.users import Viewer
from ..utils.phone import normalize_mobile

GENUINE: LeadCategory = "Genuine"
DUPLICATE: LeadCategory = "Duplicate"
MATCH: LeadCategory = "Match"


def _read(record: Any, *names: str) -> Any:
    """Read the first present field from a model or a plain dict."""
    for name in names:
        if isinstance(record, dict):
            value = record.get(name)
        else:
            value = getattr(record, name, None)
        if value is not None:
            return value
    return None


def mobile_key(record: Any) -> str:
    """Normalized mobile number of a lead or rider record ("" when absent)."""
    return normalize_mobile(_read(record, "mobile_number", "mobileNumber"))


def record_id(record: Any) -> str:
    value = _read(record, "id")
    return "" if value is None else str(value)


def _is_deleted(record: Any) -> bool:
    return bool(
        _read(record, "deleted_at", "deletedAt")
        or _read(record, "is_permanently_deleted")
    )


class ClassificationResult(BaseModel):
    """Per-lead categories plus the three aggregate counts."""

    categories: Dict[str, LeadCategory] = Field(
        default_factory=dict,
        description="Lead id -> category for every lead with a usable mobile number"
    )
    genuine_count: int = 0
    duplicate_count: int = 0
    match_count: int = 0

    @property
    def counts(self) -> Tuple[int, int, int]:
        """(genuine, duplicate, match)"""
        return self.genuine_count, self.duplicate_count, self.match_count

    @property
    def total(self) -> int:
        return self.genuine_count + self.duplicate_count + self.match_count

    def category_for(self, lead: Any) -> Optional[LeadCategory]:
        """Category of a lead, None when it was excluded."""
        return self.categories.get(record_id(lead))

    def filter(self, leads: Iterable[Any], category: Optional[LeadCategory]) -> List[Any]:
        """
        Keep the leads classified as `category`.

        A None category is "no filter" and returns every lead; excluded
        leads never match a concrete category.
        """
        if category is None:
            return list(leads)
        return [lead for lead in leads if self.category_for(lead) == category]

    def percentages(self, base: int) -> Dict[str, float]:
        """Share of each category against `base` records, rounded to 0.1."""
        denominator = base or 1
        return {
            GENUINE: round(self.genuine_count / denominator * 100, 1),
            DUPLICATE: round(self.duplicate_count / denominator * 100, 1),
            MATCH: round(self.match_count / denominator * 100, 1),
        }


def build_rider_set(riders: Iterable[Any]) -> set:
    """Set of normalized rider mobile numbers."""
    rider_set = set()
    for rider in riders:
        key = mobile_key(rider)
        if key:
            rider_set.add(key)
    return rider_set


def build_lead_frequency(leads: Iterable[Any]) -> Counter:
    """Normalized mobile number -> number of leads carrying it."""
    frequency: Counter = Counter()
    for lead in leads:
        key = mobile_key(lead)
        if key:
            frequency[key] += 1
    return frequency


def categorize(key: str, rider_set: set, lead_frequency: Counter) -> Optional[LeadCategory]:
    """
    Decide the category for one normalized number.

    Rider match wins over duplicate; empty keys are not classified.
    """
    if not key:
        return None
    if key in rider_set:
        return MATCH
    if lead_frequency[key] > 1:
        return DUPLICATE
    return GENUINE


def classify_leads(
    leads: Sequence[Any],
    riders: Iterable[Any],
    population: Optional[Iterable[Any]] = None
) -> ClassificationResult:
    """
    Classify a working set of leads against riders and the lead population.

    Rider numbers and lead frequencies are built once per call, so the whole
    run is linear in the number of leads and riders. Inputs are only read.

    Args:
        leads: Leads to classify (Lead models or row dicts)
        riders: The full rider population, regardless of viewer scope
        population: Every lead visible for duplicate counting; defaults to `leads`

    Returns:
        ClassificationResult with per-lead categories and aggregate counts
    """
    rider_set = build_rider_set(riders)
    lead_frequency = build_lead_frequency(leads if population is None else population)

    result = ClassificationResult()

    for lead in leads:
        category = categorize(mobile_key(lead), rider_set, lead_frequency)
        if category is None:
            continue

        result.categories[record_id(lead)] = category
        if category == MATCH:
            result.match_count += 1
        elif category == DUPLICATE:
            result.duplicate_count += 1
        else:
            result.genuine_count += 1

    return result


def active_leads(leads: Iterable[Any]) -> List[Any]:
    """Drop soft-deleted and permanently deleted leads."""
    return [lead for lead in leads if not _is_deleted(lead)]


def working_set_for(viewer: Viewer, leads: Iterable[Any]) -> List[Any]:
    """
    Leads the viewer owns.

    Admins own every active lead; team leaders own the active leads they
    created.
    """
    visible = active_leads(leads)
    if viewer.is_admin:
        return visible
    return [
        lead for lead in visible
        if str(_read(lead, "created_by", "createdBy") or "") == viewer.user_id
    ]


def summarize_for_viewer(
    viewer: Viewer,
    all_leads: Sequence[Any],
    riders: Iterable[Any]
) -> ClassificationResult:
    """
    Classify the viewer's working set.

    Duplicates are counted across every active lead, not only the viewer's
    own, so a number already sourced by another team still counts as a
    duplicate for this viewer.
    """
    population = active_leads(all_leads)
    return classify_leads(working_set_for(viewer, all_leads), riders, population=population)
