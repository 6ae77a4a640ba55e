"""
User schema for TradeJournal API

This module defines Pydantic models for user-related API interactions.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class RoleEnum(str, Enum):
    """User roles"""
    USER = "user"
    ADMIN = "admin"


class UserBase(BaseModel):
    """Base schema for user data"""
    email: EmailStr
    username: str
    full_name: Optional[str] = None
    is_active: bool = True


class UserCreate(UserBase):
    """Schema for user creation"""
    password: str

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v):
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long")
        return v


class UserUpdate(BaseModel):
    """Schema for user updates"""
    email: Optional[EmailStr] = None
    full_name: Optional[str] = None
    password: Optional[str] = None


class User(UserBase):
    """Schema for user data returned to API"""
    id: int
    role: RoleEnum = RoleEnum.USER
    created_at: datetime
    updated_at: datetime
    tradovate_demo_connected: bool = False
    tradovate_live_connected: bool = False
    tradovate_demo_expires_at: Optional[datetime] = None
    tradovate_live_expires_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_user(cls, user) -> "User":
        result = cls.model_validate(user)
        result.tradovate_demo_connected = bool(user.tradovate_demo_tokens)
        result.tradovate_live_connected = bool(user.tradovate_live_tokens)
        return result
