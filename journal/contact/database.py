"""Database models for contact form messages."""

from sqlalchemy import Column, String, DateTime, Text, Index
from datetime import datetime
import uuid

from journal.shared.database import Base

CONTACT_STATUSES = ("new", "read", "archived")


class ContactMessage(Base):
    """Contact form submission. Contacts are a log: every submission is a new row."""
    __tablename__ = "contacts"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=False, default="")
    subject = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    ip_address = Column(String, nullable=True)
    status = Column(String, nullable=False, default="new")  # 'new', 'read', 'archived'
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    __table_args__ = (
        Index('idx_contacts_status_created', 'status', 'created_at'),
    )
