"""
Pydantic schemas for member profiles.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from riding_club.schemas.common import UtcDatetime


class UserProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=64)
    emergency_contact: Optional[str] = Field(None, max_length=255)
    emergency_phone: Optional[str] = Field(None, max_length=64)
    horse_name: Optional[str] = Field(None, max_length=255)
    membership_type: Optional[str] = Field(None, max_length=32)


class UserProfileRecord(BaseModel):
    id: str
    user_id: str
    display_name: str = ""
    email: str = ""
    phone: str = ""
    emergency_contact: str = ""
    emergency_phone: str = ""
    horse_name: str = ""
    membership_type: str = "member"
    status: Literal["pending", "approved", "rejected"] = "pending"
    approved_by: Optional[str] = None
    approved_at: Optional[UtcDatetime] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime

    model_config = {"from_attributes": True}
