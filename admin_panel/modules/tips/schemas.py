from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from datetime import datetime

TIP_CATEGORIES = ["health", "nutrition", "fitness", "mental", "product"]
TIP_ICON = "favorite"

TipCategory = Literal["health", "nutrition", "fitness", "mental", "product"]


class TipCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    category: TipCategory = "health"
    priority: int = Field(default=5, ge=1, le=10)
    image_url: Optional[str] = None
    is_active: bool = True

    @field_validator("title", "content", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("image_url", mode="before")
    @classmethod
    def blank_image_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class GeneratedTip(BaseModel):
    """One element of the AI response. Lenient where the model tends to drift."""
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    category: str = "health"
    priority: int = 5

    @field_validator("category", mode="before")
    @classmethod
    def known_category(cls, v):
        v = str(v or "").strip().lower()
        return v if v in TIP_CATEGORIES else "health"

    @field_validator("priority", mode="before")
    @classmethod
    def clamp_priority(cls, v):
        try:
            v = int(v)
        except (TypeError, ValueError):
            return 5
        return min(max(v, 1), 10)

    def to_create(self) -> TipCreate:
        return TipCreate(
            title=self.title,
            content=self.content,
            category=self.category,
            priority=self.priority,
            is_active=True,
        )


class TipResponse(BaseModel):
    id: int
    title: str
    content: str
    category: Optional[str] = "health"
    icon: Optional[str] = None
    image_url: Optional[str] = None
    priority: Optional[int] = 5
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
