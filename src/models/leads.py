"""Pydantic models for sourced leads."""

from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

LeadStatus = Literal["New", "Convert", "Not Convert"]
LeadCategory = Literal["Genuine", "Duplicate", "Match"]
LicenseType = Literal["Permanent", "Learning", "No"]
EVTypeInterest = Literal["High Speed", "Low Speed"]

LEAD_STATUSES = ("New", "Convert", "Not Convert")
LEAD_CATEGORIES = ("Genuine", "Duplicate", "Match")
LICENSE_TYPES = ("Permanent", "Learning", "No")
EV_TYPES = ("High Speed", "Low Speed")
LEAD_SOURCES = ("Online", "Walking", "Field Sourcing", "Calling", "Referral", "Other")

# Fields written back to the leads table
DB_COLUMNS = (
    "lead_id",
    "rider_name",
    "mobile_number",
    "city",
    "location",
    "driving_license",
    "ev_type_interested",
    "client_interested",
    "expected_allotment_date",
    "current_ev_using",
    "source",
    "remarks",
    "status",
    "category",
    "created_by",
    "created_by_name",
    "created_at",
    "updated_at",
)


def _first(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first truthy value among the given keys."""
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return default


def _choice(value: Any, allowed: tuple, default: str) -> str:
    return value if value in allowed else default


class LeadLocation(BaseModel):
    """GPS capture taken when the lead was sourced."""

    lat: float = Field(0.0, description="Latitude")
    lng: float = Field(0.0, description="Longitude")
    accuracy: float = Field(0.0, description="Reported accuracy in metres")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the position was captured"
    )
    address: Optional[str] = Field(None, description="Reverse-geocoded address if available")


class Lead(BaseModel):
    """A prospective rider captured by a sourcing agent."""

    id: str = Field(..., description="Backend row identifier")
    lead_id: Optional[int] = Field(None, description="Auto-generated display sequence number")
    rider_name: str = Field("Unknown", description="Prospect name")
    mobile_number: str = Field("", description="Mobile number as captured")
    city: str = Field("", description="City of sourcing")
    location: LeadLocation = Field(default_factory=LeadLocation)

    # Evaluation
    driving_license: LicenseType = Field("No", description="Licence held by the prospect")
    ev_type_interested: EVTypeInterest = Field("High Speed", description="EV type of interest")
    client_interested: str = Field("Other", description="Delivery client of interest")
    expected_allotment_date: Optional[str] = Field(None, description="Expected vehicle allotment date")
    current_ev_using: str = Field("None", description="EV currently used (Zypp, Yulu, ...)")
    source: str = Field("Field Sourcing", description="Acquisition source")
    remarks: str = Field("", description="Free-text remarks")

    # System / auto-assigned
    status: LeadStatus = Field("New", description="Lifecycle status")
    category: LeadCategory = Field(
        "Genuine",
        description="Last stored classification; informational only"
    )
    score: Optional[int] = Field(None, ge=0, le=100, description="Lead score 0-100")

    # Metadata
    created_by: Optional[str] = Field(None, description="User id of the sourcing team leader")
    created_by_name: str = Field("Unknown", description="Display name of the creator")
    created_at: Optional[datetime] = Field(None)
    updated_at: Optional[datetime] = Field(None)
    deleted_at: Optional[datetime] = Field(None, description="Soft-delete marker")
    is_permanently_deleted: bool = Field(False)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None or self.is_permanently_deleted

    @classmethod
    def from_db(cls, data: Dict[str, Any]) -> "Lead":
        """
        Build a Lead from a backend row.

        The leads table has carried several column spellings over time
        (snake_case, camelCase and a few legacy names), so each field is
        looked up under every known alias before falling back to a default.

        Args:
            data: Row dict as returned by the backend

        Returns:
            Lead instance
        """
        location = data.get("location") or {}
        if not isinstance(location, dict):
            location = {}

        score = data.get("score")
        try:
            score = None if score is None else max(0, min(100, int(score)))
        except (TypeError, ValueError):
            score = None

        lead_id = _first(data, "lead_id", "leadId")
        try:
            lead_id = None if lead_id is None else int(lead_id)
        except (TypeError, ValueError):
            lead_id = None

        created_by = _first(data, "created_by", "createdBy")

        return cls(
            id=str(data.get("id") or ""),
            lead_id=lead_id,
            rider_name=_first(data, "rider_name", "riderName", "name", default="Unknown"),
            mobile_number=str(_first(data, "mobile_number", "mobileNumber", "phone", default="")),
            city=_first(data, "city", "job_location", default=""),
            location=LeadLocation.model_validate(location),
            driving_license=_choice(
                _first(data, "driving_license", "drivingLicense"), LICENSE_TYPES, "No"
            ),
            ev_type_interested=_choice(
                _first(data, "ev_type_interested", "evTypeInterested"), EV_TYPES, "High Speed"
            ),
            client_interested=_first(data, "client_interested", "clientInterested", default="Other"),
            expected_allotment_date=_first(data, "expected_allotment_date", "expectedAllotmentDate"),
            current_ev_using=_first(data, "current_ev_using", "currentEvUsing", default="None"),
            source=_first(data, "source", default="Field Sourcing"),
            remarks=_first(data, "remarks", "notes", default=""),
            status=_choice(data.get("status"), LEAD_STATUSES, "New"),
            category=_choice(
                _first(data, "category", "lead_category"), LEAD_CATEGORIES, "Genuine"
            ),
            score=score,
            created_by=str(created_by) if created_by else None,
            created_by_name=_first(data, "created_by_name", "createdByName", default="Unknown"),
            created_at=_first(data, "created_at", "createdAt"),
            updated_at=_first(data, "updated_at", "updatedAt"),
            deleted_at=_first(data, "deleted_at", "deletedAt"),
            is_permanently_deleted=bool(data.get("is_permanently_deleted", False)),
        )

    def to_db(self) -> Dict[str, Any]:
        """
        Build an insert/update payload with backend column names.

        Only populated fields are included; score is kept even when 0.
        """
        dumped = self.model_dump(mode="json")
        payload: Dict[str, Any] = {}

        for column in DB_COLUMNS:
            value = dumped.get(column)
            if value:
                payload[column] = value

        if self.score is not None:
            payload["score"] = self.score

        return payload


class LeadUpdate(BaseModel):
    """A recomputed category/score pair to write back for one lead."""

    id: str
    category: LeadCategory
    score: int = Field(..., ge=0, le=100)

    def to_db(self) -> Dict[str, Any]:
        return {"category": self.category, "score": self.score}
