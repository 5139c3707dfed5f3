"""Newsletter routes: public subscribe and admin subscriber management."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from journal.shared.database import get_db
from journal.shared.errors import validation_error, not_found, internal_error
from journal.shared.input_validation import validate_email, sanitize_text
from journal.shared.schemas import OkResponse, SuccessResponse
from journal.auth.database import AdminUser
from journal.auth.dependencies import get_current_admin
from journal.subscribers.database import Subscriber, SUBSCRIBER_STATUSES
from journal.subscribers.service import subscribe, SubscribeOutcome
from journal.subscribers.schemas import (
    SubscribeRequest,
    SubscriberItem,
    SubscriberListResponse,
    SubscriberStatusUpdate,
    SubscriberResponse,
    BulkDeleteRequest,
    BulkDeleteResponse,
)
from journal.articles.service import total_pages

public_router = APIRouter(prefix="/api/public", tags=["subscribers"])
admin_router = APIRouter(prefix="/api/admin/subscribers", tags=["subscribers"])

DEFAULT_SOURCE = "newsletter-form"
MAX_SOURCE_LENGTH = 100
PAGE_SIZE = 20

SUBSCRIBE_MESSAGES = {
    SubscribeOutcome.CREATED: "Subscribed successfully.",
    SubscribeOutcome.REACTIVATED: "Resubscribed successfully.",
    SubscribeOutcome.ALREADY_ACTIVE: "Already subscribed.",
}


@public_router.post("/subscribe", response_model=SuccessResponse)
async def subscribe_newsletter(
    payload: SubscribeRequest,
    db: Session = Depends(get_db)
):
    """Subscribe an email. Repeating the call for the same email never creates a second row."""
    email = validate_email(payload.email, "Valid email required.")
    source = sanitize_text(payload.source, max_length=MAX_SOURCE_LENGTH) or DEFAULT_SOURCE

    try:
        outcome = subscribe(db, email, source)
    except Exception as e:
        logging.error(f"Subscribe error: {str(e)}", exc_info=True)
        raise internal_error("Subscription failed.")

    return SuccessResponse(success=True, message=SUBSCRIBE_MESSAGES[outcome])


@admin_router.get("", response_model=SubscriberListResponse)
async def list_subscribers(
    page: int = Query(1, ge=1),
    q: str = Query(""),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    query = db.query(Subscriber)
    q = q.strip()
    if q:
        query = query.filter(Subscriber.email.ilike(f"%{q}%"))

    total = query.count()
    items = query.order_by(Subscriber.created_at.desc()).offset((page - 1) * PAGE_SIZE).limit(PAGE_SIZE).all()
    return SubscriberListResponse(
        items=[
            SubscriberItem(id=s.id, email=s.email, status=s.status, source=s.source, subscribed_at=s.created_at)
            for s in items
        ],
        page=page,
        total_pages=total_pages(total, PAGE_SIZE),
        total=total,
    )


@admin_router.post("/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_subscribers(
    payload: BulkDeleteRequest,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if payload.emails is None:
        raise validation_error("emails array required")
    emails = [e.strip().lower() for e in payload.emails if isinstance(e, str) and e.strip()]
    if not emails:
        return BulkDeleteResponse(deleted=0)

    deleted = db.query(Subscriber).filter(Subscriber.email.in_(emails)).delete(synchronize_session=False)
    db.commit()
    logging.info(f"{admin.email} bulk-deleted {deleted} subscribers")
    return BulkDeleteResponse(deleted=deleted)


@admin_router.put("/{email}", response_model=SubscriberResponse)
async def update_subscriber(
    email: str,
    payload: SubscriberStatusUpdate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Admin status transition (active <-> unsubscribed)."""
    if payload.status not in SUBSCRIBER_STATUSES:
        raise validation_error(f"status must be one of: {', '.join(SUBSCRIBER_STATUSES)}")

    subscriber = db.query(Subscriber).filter(Subscriber.email == email.strip().lower()).first()
    if subscriber is None:
        raise not_found()

    subscriber.status = payload.status
    db.commit()
    db.refresh(subscriber)
    return SubscriberResponse.model_validate(subscriber)


@admin_router.delete("/{email}", response_model=OkResponse)
async def delete_subscriber(
    email: str,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    subscriber = db.query(Subscriber).filter(Subscriber.email == email.strip().lower()).first()
    if subscriber is None:
        raise not_found()
    db.delete(subscriber)
    db.commit()
    return OkResponse()
