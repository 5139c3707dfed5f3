"""Database models for ad slots."""

from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, Index
from datetime import datetime
import uuid

from journal.shared.database import Base


class Ad(Base):
    """An ad creative shown in a named placement."""
    __tablename__ = "ads"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    placement = Column(String, nullable=False, index=True)  # e.g. 'homepage-latest', 'article-inline'
    size = Column(String, nullable=False, default="")
    type = Column(String, nullable=False)  # 'IMAGE_LINK' or 'EMBED_SNIPPET'
    image_url = Column(String, nullable=False, default="")
    href = Column(String, nullable=False, default="")
    alt = Column(String, nullable=False, default="")
    html = Column(Text, nullable=False, default="")
    label = Column(String, nullable=False, default="")
    active = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_ads_placement_active_order', 'placement', 'active', 'order'),
    )
