from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class AdminCreate(BaseModel):
    """Add-admin form on the profile screen"""
    email: EmailStr
    password: str = Field(min_length=6)
    gemini_api_key: Optional[str] = None


class AdminBootstrap(BaseModel):
    """First-time setup form"""
    full_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)


class AdminProfileCreate(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: str = "admin"
    gemini_api_key: Optional[str] = None
    is_active: bool = True


class ApiKeyUpdate(BaseModel):
    gemini_api_key: Optional[str] = None


class AdminResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: Optional[str] = None
    gemini_api_key: Optional[str] = None
    is_active: Optional[bool] = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def has_api_key(self) -> bool:
        return bool(self.gemini_api_key)
