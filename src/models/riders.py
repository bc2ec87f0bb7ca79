"""Pydantic models for onboarded riders."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

RiderStatus = Literal["active", "inactive", "deleted"]

CLIENT_NAMES: List[str] = [
    "Zomato", "Zepto", "Blinkit", "Uber", "Porter", "Rapido", "Swiggy", "FLK", "Other",
]

RIDER_STATUSES = ("active", "inactive", "deleted")


def is_valid_client(client: Any) -> bool:
    return client in CLIENT_NAMES


class Rider(BaseModel):
    """An onboarded, contracted vehicle operator."""

    id: str = Field(..., description="Backend row identifier")
    triev_id: str = Field("", description="Human-readable rider code (e.g. TR123)")
    rider_name: str = Field("Unknown", description="Rider full name")
    mobile_number: str = Field("", description="Mobile number as stored, not normalized")
    chassis_number: str = Field("", description="Allotted vehicle chassis number")
    client_name: str = Field("Other", description="Delivery client the rider works for")
    client_id: str = Field("", description="Rider's ID on the client platform")
    wallet_amount: float = Field(0.0, description="Wallet balance; negative means dues")
    allotment_date: Optional[datetime] = Field(None, description="Vehicle allotment date")
    remarks: str = Field("", description="Admin remarks")
    comments: str = Field("", description="Free-form notes")
    status: RiderStatus = Field("active", description="Lifecycle status")
    team_leader_id: Optional[str] = Field(None, description="Owning team leader user id")
    team_leader_name: str = Field("Unassigned", description="Owning team leader display name")
    created_at: Optional[datetime] = Field(None)
    updated_at: Optional[datetime] = Field(None)
    deleted_at: Optional[datetime] = Field(None, description="Soft-delete timestamp")

    @property
    def is_deleted(self) -> bool:
        return self.status == "deleted" or self.deleted_at is not None

    @property
    def has_dues(self) -> bool:
        return self.wallet_amount < 0

    @classmethod
    def from_db(cls, data: Dict[str, Any]) -> "Rider":
        """Build a Rider from a backend row (snake_case or camelCase keys)."""
        status = data.get("status") or "active"
        if status not in RIDER_STATUSES:
            status = "active"

        try:
            wallet = float(data.get("wallet_amount", data.get("walletAmount")) or 0)
        except (TypeError, ValueError):
            wallet = 0.0

        leader_id = data.get("team_leader_id") or data.get("teamLeaderId")

        return cls(
            id=str(data.get("id") or ""),
            triev_id=str(data.get("triev_id") or data.get("trievId") or ""),
            rider_name=data.get("rider_name") or data.get("riderName") or "Unknown",
            mobile_number=str(data.get("mobile_number") or data.get("mobileNumber") or ""),
            chassis_number=str(data.get("chassis_number") or data.get("chassisNumber") or ""),
            client_name=data.get("client_name") or data.get("clientName") or "Other",
            client_id=str(data.get("client_id") or data.get("clientId") or ""),
            wallet_amount=wallet,
            allotment_date=data.get("allotment_date") or data.get("allotmentDate") or None,
            remarks=data.get("remarks") or "",
            comments=data.get("comments") or "",
            status=status,
            team_leader_id=str(leader_id) if leader_id else None,
            team_leader_name=data.get("team_leader_name") or data.get("teamLeaderName") or "Unassigned",
            created_at=data.get("created_at") or data.get("createdAt"),
            updated_at=data.get("updated_at") or data.get("updatedAt"),
            deleted_at=data.get("deleted_at") or data.get("deletedAt"),
        )
