"""Database models for articles."""

from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, JSON, Index
from datetime import datetime
import uuid

from journal.shared.database import Base

ARTICLE_STATUSES = ("draft", "scheduled", "published")


class Article(Base):
    """Published or draft article. ``slug`` is the public identifier."""
    __tablename__ = "articles"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    slug = Column(String, unique=True, nullable=False, index=True)
    title = Column(String, nullable=False, default="")
    excerpt = Column(Text, nullable=False, default="")
    dek = Column(Text, nullable=False, default="")
    category = Column(String, nullable=False, default="", index=True)
    date = Column(String, nullable=True)  # YYYY-MM-DD display date
    author = Column(String, nullable=False, default="")
    image_url = Column(String, nullable=False, default="")
    body_html = Column(Text, nullable=False, default="")
    body_markdown = Column(Text, nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)
    status = Column(String, nullable=False, default="draft", index=True)
    publish_at = Column(DateTime, nullable=True)
    featured = Column(Boolean, nullable=False, default=False)
    feature_order = Column(Integer, nullable=False, default=0)
    ai_generated = Column(Boolean, nullable=False, default=False)
    ai_provider = Column(String, nullable=True)
    source_url = Column(String, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_articles_status_created', 'status', 'created_at'),
    )
