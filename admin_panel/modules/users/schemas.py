from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class UserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    profile_image: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def display_name(self) -> str:
        return self.name or self.full_name or "User"

    @property
    def avatar(self) -> Optional[str]:
        return self.avatar_url or self.profile_image


class StepRecord(BaseModel):
    user_id: Optional[str] = None
    steps: Optional[int] = 0
    distance_meters: Optional[float] = 0
    calories_burned: Optional[float] = 0


class UserWithSteps(UserResponse):
    total_steps: int = 0
    total_calories: float = 0
    total_distance: float = 0


class UsersSummary(BaseModel):
    total_users: int = 0
    total_steps: int = 0
    total_calories: float = 0
    total_distance: float = 0
