"""Database models for newsletter subscribers."""

from sqlalchemy import Column, String, DateTime
from datetime import datetime
import uuid

from journal.shared.database import Base

SUBSCRIBER_STATUSES = ("active", "unsubscribed")


class Subscriber(Base):
    """Newsletter subscriber. One row per email address."""
    __tablename__ = "subscribers"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    source = Column(String, nullable=False, default="newsletter-form")
    status = Column(String, nullable=False, default="active")  # 'active' or 'unsubscribed'
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
