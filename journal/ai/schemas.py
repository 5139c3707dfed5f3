"""Pydantic schemas for AI generation endpoints."""

from typing import Optional, Any

from journal.shared.schemas import CamelModel


class GenerateRequest(CamelModel):
    category: Optional[str] = None
    topic: Optional[Any] = None
    source_url: Optional[str] = None
    mode: str = "rewrite"


class GenerateResponse(CamelModel):
    slug: str
    status: str


class RegenerateImageResponse(CamelModel):
    image_url: str
    warning: Optional[str] = None
