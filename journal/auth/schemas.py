"""Pydantic schemas for admin authentication and account management."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from journal.shared.schemas import CamelModel


class LoginRequest(BaseModel):
    """Login request schema."""
    email: str = ""
    password: str = ""


class LoginUser(BaseModel):
    email: str


class TokenResponse(BaseModel):
    """Token response schema."""
    token: str
    user: LoginUser


class AdminUserCreate(BaseModel):
    """Create admin request schema. Email shape is checked in the route."""
    email: str = ""
    password: str = ""


class AdminStatusUpdate(BaseModel):
    status: str = ""


class AdminUserResponse(CamelModel):
    id: str
    email: str
    role: str
    status: str
    created_at: Optional[datetime] = None


class AdminUserListResponse(BaseModel):
    users: List[AdminUserResponse]
