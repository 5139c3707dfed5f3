"""Authentication dependencies for admin routes."""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from journal.shared.database import get_db
from journal.shared.errors import ApiError, ErrorKind
from journal.auth.database import AdminUser
from journal.auth.auth import verify_token

# auto_error=False so a missing header reaches our own 401 with the error envelope
security = HTTPBearer(auto_error=False)

_BEARER = {"WWW-Authenticate": "Bearer"}


def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> AdminUser:
    """Get the current admin from the bearer JWT. Inactive accounts are rejected."""
    if credentials is None:
        raise ApiError(ErrorKind.UNAUTHORIZED, "Authentication required", headers=_BEARER)

    payload = verify_token(credentials.credentials)
    if payload is None:
        raise ApiError(ErrorKind.UNAUTHORIZED, "Invalid authentication credentials", headers=_BEARER)

    admin_id = payload.get("sub")
    if admin_id is None:
        raise ApiError(ErrorKind.UNAUTHORIZED, "Invalid token payload", headers=_BEARER)

    admin = db.query(AdminUser).filter(AdminUser.id == admin_id).first()
    if admin is None:
        raise ApiError(ErrorKind.UNAUTHORIZED, "User not found", headers=_BEARER)

    if admin.status != "active":
        raise ApiError(ErrorKind.FORBIDDEN, "Account is inactive")

    return admin
