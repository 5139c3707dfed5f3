"""Pydantic schemas for contact API."""

from datetime import datetime
from typing import List, Optional, Any

from pydantic import BaseModel, field_validator

from journal.shared.schemas import CamelModel


class ContactRequest(BaseModel):
    """
    Schema for contact form submission.

    Fields are loosely typed on purpose: presence, email shape and
    sanitization are checked by the route so every failure is reported with
    the same message envelope.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = ""
    subject: Optional[str] = None
    message: Optional[str] = None

    @field_validator('name', 'email', 'phone', 'subject', 'message', mode='before')
    @classmethod
    def coerce_string(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, str):
            return v
        return str(v)


class ContactResponse(CamelModel):
    """Schema for contact form response."""
    success: bool
    message: str
    contact_id: Optional[str] = None


class ContactItem(CamelModel):
    id: str
    name: str
    email: str
    phone: str
    subject: str
    message: str
    ip_address: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None


class ContactListResponse(CamelModel):
    contacts: List[ContactItem]
    page: int
    limit: int
    total: int
    total_pages: int


class ContactStatusUpdate(BaseModel):
    status: Optional[str] = None


class ContactUpdateResponse(BaseModel):
    success: bool = True
    contact: ContactItem
