from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from datetime import datetime

AD_CATEGORIES = ["general", "health", "fitness", "nutrition", "product"]

AdCategory = Literal["general", "health", "fitness", "nutrition", "product"]


class AdCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = ""
    image_url: Optional[str] = ""
    action_url: Optional[str] = ""
    category: AdCategory = "general"
    is_active: bool = True

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class AdResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    action_url: Optional[str] = None
    category: Optional[str] = "general"
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
