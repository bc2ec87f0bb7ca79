"""Viewer identity passed explicitly into scoped operations."""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

UserRole = Literal["admin", "teamLeader"]


class Viewer(BaseModel):
    """The signed-in user on whose behalf an operation runs."""

    user_id: str = Field(..., description="Backend user id")
    full_name: str = Field("System", description="Display name")
    role: UserRole = Field("teamLeader", description="admin sees everything; teamLeader sees own data")
    email: Optional[str] = Field(None)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @classmethod
    def from_db(cls, data: Dict[str, Any]) -> "Viewer":
        role = data.get("role")
        return cls(
            user_id=str(data.get("id") or ""),
            full_name=data.get("full_name") or data.get("fullName") or data.get("email") or "Unknown",
            role=role if role in ("admin", "teamLeader") else "teamLeader",
            email=data.get("email"),
        )


SYSTEM_VIEWER = Viewer(user_id="system", full_name="System", role="admin")
