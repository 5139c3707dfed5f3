"""Database models for admin accounts."""

from sqlalchemy import Column, String, DateTime
from datetime import datetime
import uuid

from journal.shared.database import Base


class AdminUser(Base):
    """Admin console account."""
    __tablename__ = "admin_users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, default="admin", nullable=False)
    status = Column(String, default="active", nullable=False)  # 'active' or 'inactive'
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_login = Column(DateTime, nullable=True)


def count_active_admins(db) -> int:
    return db.query(AdminUser).filter(
        AdminUser.status == "active",
        AdminUser.role == "admin",
    ).count()
