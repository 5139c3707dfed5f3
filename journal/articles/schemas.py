"""Pydantic schemas for articles (admin and public)."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from journal.shared.schemas import CamelModel
from journal.ads.schemas import AdSlotResponse


class Category(BaseModel):
    slug: str
    name: str


class ArticleCreate(CamelModel):
    """Admin article create payload. ``slug`` is optional; derived from the title if missing."""
    slug: Optional[str] = None
    title: str = ""
    excerpt: str = ""
    dek: str = ""
    category: str = ""
    date: Optional[str] = None
    author: str = ""
    image_url: str = ""
    body_html: str = ""
    body_markdown: str = ""
    tags: List[str] = Field(default_factory=list)
    status: str = "draft"
    publish_at: Optional[datetime] = None
    featured: bool = False
    feature_order: int = 0


class ArticleUpdate(CamelModel):
    """Partial update; only fields present in the request body are written."""
    slug: Optional[str] = None
    title: Optional[str] = None
    excerpt: Optional[str] = None
    dek: Optional[str] = None
    category: Optional[str] = None
    date: Optional[str] = None
    author: Optional[str] = None
    image_url: Optional[str] = None
    body_html: Optional[str] = None
    body_markdown: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[str] = None
    publish_at: Optional[datetime] = None
    featured: Optional[bool] = None
    feature_order: Optional[int] = None


class ArticleResponse(CamelModel):
    id: str
    slug: str
    title: str
    excerpt: str = ""
    dek: str = ""
    category: str = ""
    date: Optional[str] = None
    author: str = ""
    image_url: str = ""
    body_html: str = ""
    body_markdown: str = ""
    tags: List[str] = Field(default_factory=list)
    status: str
    publish_at: Optional[datetime] = None
    featured: bool = False
    feature_order: int = 0
    ai_generated: bool = False
    ai_provider: Optional[str] = None
    source_url: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ArticleListItem(CamelModel):
    id: str
    slug: str
    title: str
    category: str
    date: Optional[str] = None
    status: str
    featured: bool
    feature_order: int
    image_url: str


class ArticleListResponse(CamelModel):
    items: List[ArticleListItem]
    page: int
    total: int
    total_pages: int


class ArchiveItem(CamelModel):
    headline: str
    slug: str
    category: str
    date: Optional[str] = None
    image_url: str


class ArchiveResponse(CamelModel):
    results: List[ArchiveItem]
    page: int
    total_pages: int


class AdGroups(BaseModel):
    sidebar: List[AdSlotResponse] = Field(default_factory=list)
    inline: List[AdSlotResponse] = Field(default_factory=list)


class HomepageResponse(BaseModel):
    categories: List[Category]
    latest: List[ArticleResponse]
    lead: Optional[ArticleResponse] = None
    daily: List[ArticleResponse]
    featured: List[ArticleResponse]
    tiles: List[ArticleResponse]
    ads: AdGroups


class CategoryPageResponse(CamelModel):
    category: Category
    articles: List[ArticleResponse]
    daily: List[ArticleResponse]
    page: int = 1
    total_pages: int = 1


class ArticlePageResponse(ArticleResponse):
    related: List[ArticleResponse] = Field(default_factory=list)
    ads: AdGroups = Field(default_factory=AdGroups)


class VersionResponse(BaseModel):
    app: str
    version: str
    commit: Optional[str] = None
    now: str
