"""Database models for lead-capture popups."""

from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from journal.shared.database import Base


class PopupConfig(Base):
    """A lead-capture popup offering a PDF download. At most one is active."""
    __tablename__ = "popup_configs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    image_url = Column(String, nullable=False, default="")
    image_caption = Column(String, nullable=False, default="")
    pdf_url = Column(String, nullable=False)
    pdf_title = Column(String, nullable=False)
    button_text = Column(String, nullable=False, default="Get Download Link")
    delay_seconds = Column(Integer, nullable=False, default=10)
    active = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    leads = relationship("PopupLead", back_populates="popup", cascade="all, delete-orphan")


class PopupLead(Base):
    """An email captured by a popup. Repeat submissions are kept for analytics."""
    __tablename__ = "popup_leads"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    popup_config_id = Column(String, ForeignKey("popup_configs.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String, nullable=False, index=True)
    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default="active")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    popup = relationship("PopupConfig", back_populates="leads")

    __table_args__ = (
        Index('idx_popup_leads_popup_email_created', 'popup_config_id', 'email', 'created_at'),
    )
