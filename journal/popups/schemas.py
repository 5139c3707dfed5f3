"""Pydantic schemas for popups and popup leads."""

from datetime import datetime
from typing import List, Optional, Any

from pydantic import BaseModel, field_validator

from journal.shared.schemas import CamelModel


class PopupPublic(CamelModel):
    """What the reader site needs to render the active popup."""
    id: str
    title: str
    description: str
    image_url: str
    image_caption: str
    pdf_title: str
    button_text: str
    delay_seconds: int


class ActivePopupResponse(BaseModel):
    popup: Optional[PopupPublic] = None


class PopupSubmitRequest(CamelModel):
    email: Optional[str] = None
    popup_id: Optional[str] = None

    @field_validator('email', 'popup_id', mode='before')
    @classmethod
    def coerce_string(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, str):
            return v
        return str(v)


class PopupSubmitResponse(CamelModel):
    success: bool
    message: str
    download_url: str
    pdf_title: str
    lead_id: str


class PopupCreate(CamelModel):
    name: Optional[str] = None
    title: Optional[str] = None
    description: str = ""
    image_url: str = ""
    image_caption: str = ""
    pdf_url: Optional[str] = None
    pdf_title: Optional[str] = None
    button_text: str = "Get Download Link"
    delay_seconds: int = 10
    active: bool = False


class PopupUpdate(CamelModel):
    name: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    image_caption: Optional[str] = None
    pdf_url: Optional[str] = None
    pdf_title: Optional[str] = None
    button_text: Optional[str] = None
    delay_seconds: Optional[int] = None
    active: Optional[bool] = None


class PopupAdmin(CamelModel):
    id: str
    name: str
    title: str
    description: str
    image_url: str
    image_caption: str
    pdf_url: str
    pdf_title: str
    button_text: str
    delay_seconds: int
    active: bool
    lead_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PopupListResponse(BaseModel):
    popups: List[PopupAdmin]


class PopupLeadItem(CamelModel):
    id: str
    email: str
    popup_config_id: str
    popup_name: str
    popup_title: str
    status: str
    ip_address: Optional[str] = None
    user_agent: str
    created_at: Optional[datetime] = None


class PopupLeadListResponse(CamelModel):
    leads: List[PopupLeadItem]
    page: int
    limit: int
    total: int
    total_pages: int
