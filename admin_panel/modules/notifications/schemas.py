from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from datetime import datetime

NOTIFICATION_TYPES = ["general", "alert", "promotion", "reminder"]
BROADCAST_TARGET = "all"

NotificationType = Literal["general", "alert", "promotion", "reminder"]


class NotificationCreate(BaseModel):
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    type: NotificationType = "general"
    user_id: Optional[str] = None

    @field_validator("title", "message", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("user_id", mode="before")
    @classmethod
    def broadcast_is_none(cls, v):
        if v in (None, "", BROADCAST_TARGET):
            return None
        return v


class NotificationResponse(BaseModel):
    id: int
    title: str
    message: str
    type: Optional[str] = "general"
    user_id: Optional[str] = None
    is_read: Optional[bool] = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def is_broadcast(self) -> bool:
        return self.user_id is None
