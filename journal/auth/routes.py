"""Admin authentication routes: login and admin account management."""

import os
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from journal.shared.database import get_db
from journal.shared.errors import ApiError, ErrorKind, validation_error, not_found
from journal.shared.input_validation import validate_email, validate_password
from journal.shared.rate_limit import check_rate_limit, get_client_ip
from journal.auth.auth import hash_password, verify_password, create_access_token
from journal.auth.database import AdminUser, count_active_admins
from journal.auth.dependencies import get_current_admin
from journal.auth.schemas import (
    LoginRequest,
    LoginUser,
    TokenResponse,
    AdminUserCreate,
    AdminStatusUpdate,
    AdminUserResponse,
    AdminUserListResponse,
)
from journal.shared.schemas import OkResponse

router = APIRouter(prefix="/api/admin", tags=["admin-auth"])

LOGIN_MAX_ATTEMPTS = 10
LOGIN_WINDOW_SECONDS = 15 * 60
ADMIN_STATUSES = ("active", "inactive")


def ensure_admin(db: Session) -> None:
    """Seed the first admin account from ADMIN_EMAIL / ADMIN_PASSWORD if it doesn't exist."""
    admin_email = os.environ.get("ADMIN_EMAIL", "admin@example.com").strip().lower()
    admin_password = os.environ.get("ADMIN_PASSWORD")
    if not admin_password:
        logging.warning("ADMIN_PASSWORD not set, skipping admin seed")
        return

    existing = db.query(AdminUser).filter(AdminUser.email == admin_email).first()
    if existing:
        return

    db.add(AdminUser(
        email=admin_email,
        password_hash=hash_password(admin_password),
        role="admin",
        status="active",
    ))
    db.commit()
    logging.info(f"Seeded admin user {admin_email}")


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """Exchange admin credentials for a bearer token."""
    check_rate_limit(
        get_client_ip(request),
        "admin-login",
        max_requests=LOGIN_MAX_ATTEMPTS,
        window_seconds=LOGIN_WINDOW_SECONDS,
        message="Too many login attempts. Please try again later.",
    )

    email = (login_data.email or "").strip().lower()
    user = db.query(AdminUser).filter(AdminUser.email == email).first() if email else None
    if user is None:
        raise ApiError(ErrorKind.UNAUTHORIZED, "Invalid credentials")

    if user.status != "active":
        raise ApiError(ErrorKind.UNAUTHORIZED, "Account is inactive")

    if not verify_password(login_data.password, user.password_hash):
        logging.info(f"Failed admin login for {email}")
        raise ApiError(ErrorKind.UNAUTHORIZED, "Invalid credentials")

    user.last_login = datetime.utcnow()
    db.commit()

    token = create_access_token({"sub": user.id, "email": user.email})
    return TokenResponse(token=token, user=LoginUser(email=user.email))


@router.get("/users", response_model=AdminUserListResponse)
async def list_admin_users(
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    users = db.query(AdminUser).order_by(AdminUser.created_at.desc()).all()
    return AdminUserListResponse(users=[AdminUserResponse.model_validate(u) for u in users])


@router.post("/users", response_model=AdminUserResponse, status_code=status.HTTP_200_OK)
async def create_admin_user(
    payload: AdminUserCreate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Create another admin account."""
    if not payload.email or not payload.password:
        raise validation_error("Email and password are required")
    email = validate_email(payload.email, "Valid email required")
    validate_password(payload.password)

    if db.query(AdminUser).filter(AdminUser.email == email).first():
        raise validation_error("User with this email already exists")

    user = AdminUser(
        email=email,
        password_hash=hash_password(payload.password),
        role="admin",
        status="active",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logging.info(f"Admin {admin.email} created admin user {email}")
    return AdminUserResponse.model_validate(user)


@router.patch("/users/{user_id}/status", response_model=AdminUserResponse)
async def update_admin_status(
    user_id: str,
    payload: AdminStatusUpdate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Activate or deactivate an admin. The last active admin can't be deactivated."""
    if payload.status not in ADMIN_STATUSES:
        raise validation_error("Invalid status")

    user = db.query(AdminUser).filter(AdminUser.id == user_id).first()
    if user is None:
        raise not_found("User not found")

    if payload.status == "inactive" and user.status == "active" and count_active_admins(db) <= 1:
        raise validation_error("Cannot deactivate the last active admin")

    user.status = payload.status
    db.commit()
    db.refresh(user)
    return AdminUserResponse.model_validate(user)


@router.delete("/users/{user_id}", response_model=OkResponse)
async def delete_admin_user(
    user_id: str,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    user = db.query(AdminUser).filter(AdminUser.id == user_id).first()
    if user is None:
        raise not_found("User not found")

    if user.status == "active" and count_active_admins(db) <= 1:
        raise validation_error("Cannot delete the last active admin")

    db.delete(user)
    db.commit()
    return OkResponse()
