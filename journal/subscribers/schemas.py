"""Pydantic schemas for subscribers."""

from datetime import datetime
from typing import List, Optional, Any

from pydantic import BaseModel, field_validator

from journal.shared.schemas import CamelModel


class SubscribeRequest(BaseModel):
    """Email shape is checked in the route so the error uses the API envelope."""
    email: Optional[str] = None
    source: Optional[str] = None

    @field_validator('email', 'source', mode='before')
    @classmethod
    def coerce_string(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, str):
            return v
        return str(v)


class SubscriberItem(CamelModel):
    id: str
    email: str
    status: str
    source: str
    subscribed_at: Optional[datetime] = None


class SubscriberListResponse(CamelModel):
    items: List[SubscriberItem]
    page: int
    total_pages: int
    total: int


class SubscriberStatusUpdate(BaseModel):
    status: str = ""


class SubscriberResponse(CamelModel):
    id: str
    email: str
    status: str
    source: str
    created_at: Optional[datetime] = None


class BulkDeleteRequest(BaseModel):
    emails: Optional[List[str]] = None


class BulkDeleteResponse(BaseModel):
    deleted: int
