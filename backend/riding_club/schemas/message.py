"""
Pydantic schemas for club notices.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from riding_club.schemas.common import UtcDatetime


class MessagePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


PRIORITY_RANK = {
    MessagePriority.HIGH: 3,
    MessagePriority.MEDIUM: 2,
    MessagePriority.LOW: 1,
}


class AdminMessageCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    priority: MessagePriority = MessagePriority.LOW
    is_active: bool = True


class AdminMessageUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    priority: Optional[MessagePriority] = None
    is_active: Optional[bool] = None


class AdminMessageRecord(BaseModel):
    id: str
    title: str
    content: str
    priority: MessagePriority
    is_active: bool
    created_by: str
    created_at: UtcDatetime
    updated_at: UtcDatetime

    model_config = {"from_attributes": True}
