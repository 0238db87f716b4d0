"""
app/schemas/user.py

Purpose: Public user representation

- Never exposes password or salt
- Renders the Mongo `_id` as a string
"""

from datetime import datetime
from typing import Optional, Dict, Any

from pydantic import BaseModel, ConfigDict, Field


class UserPublic(BaseModel):
    id: str = Field(..., alias="_id")
    name: str
    email: str
    phone: str
    email_verified: bool = False
    phone_verified: bool = False
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "UserPublic":
        return cls(**{**doc, "_id": str(doc["_id"])})

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class AuthResponse(BaseModel):
    """
    Body returned by register and login.
    """
    user: UserPublic
    token: str

    def to_json(self) -> Dict[str, Any]:
        return {"user": self.user.to_json(), "token": self.token}
