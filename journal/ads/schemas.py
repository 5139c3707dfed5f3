"""Pydantic schemas for ads."""

from datetime import datetime
from typing import Optional, Any

from pydantic import field_validator, model_validator

from journal.shared.schemas import CamelModel

AD_TYPES = ("IMAGE_LINK", "EMBED_SNIPPET")


class AdPayload(CamelModel):
    """Create/update payload. Missing strings default to "" and ``active`` to True."""
    placement: str = ""
    size: str = ""
    type: str = ""
    image_url: str = ""
    href: str = ""
    alt: str = ""
    html: str = ""
    label: str = ""
    active: bool = True
    order: int = 0

    @field_validator('placement', 'size', 'type', 'image_url', 'href', 'alt', 'html', 'label', mode='before')
    @classmethod
    def coerce_string(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator('active', mode='before')
    @classmethod
    def coerce_active(cls, v: Any) -> bool:
        # Only an explicit false disables an ad
        return v is not False

    @field_validator('order', mode='before')
    @classmethod
    def coerce_order(cls, v: Any) -> int:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return 0
        return int(v)

    @model_validator(mode='after')
    def check_type_requirements(self):
        if not self.placement:
            raise ValueError("placement is required")
        if not self.type:
            raise ValueError("type is required")
        if self.type not in AD_TYPES:
            raise ValueError(f"type must be one of: {', '.join(AD_TYPES)}")
        if self.type == "IMAGE_LINK":
            if not self.image_url:
                raise ValueError("imageUrl is required for IMAGE_LINK")
            if not self.href:
                raise ValueError("href is required for IMAGE_LINK")
        if self.type == "EMBED_SNIPPET" and not self.html:
            raise ValueError("html is required for EMBED_SNIPPET")
        return self


class AdResponse(CamelModel):
    id: str
    placement: str
    size: str
    type: str
    image_url: str
    href: str
    alt: str
    html: str
    label: str
    active: bool
    order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AdSlotResponse(CamelModel):
    """Public shape of an ad picked for a page."""
    id: str
    placement: str
    size: str
    type: str
    image_url: str
    href: str
    alt: str
    html: str
    label: str
