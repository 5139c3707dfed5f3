"""Contact routes: public contact form and admin inbox."""

import logging

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import or_
from sqlalchemy.orm import Session

from journal.shared.database import get_db
from journal.shared.errors import ApiError, ErrorKind, validation_error, not_found, internal_error
from journal.shared.input_validation import (
    validate_email,
    require_fields,
    sanitize_text,
    MAX_NAME_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_SUBJECT_LENGTH,
    MAX_MESSAGE_LENGTH,
)
from journal.shared.rate_limit import SlidingWindowRateLimiter, get_client_ip
from journal.shared.schemas import SuccessResponse
from journal.auth.database import AdminUser
from journal.auth.dependencies import get_current_admin
from journal.contact.database import ContactMessage, CONTACT_STATUSES
from journal.contact.schemas import (
    ContactRequest,
    ContactResponse,
    ContactItem,
    ContactListResponse,
    ContactStatusUpdate,
    ContactUpdateResponse,
)

public_router = APIRouter(prefix="/api/public", tags=["contact"])
admin_router = APIRouter(prefix="/api/admin/contacts", tags=["contact"])

# Rate limiting configuration
RATE_LIMIT_MAX_REQUESTS = 5  # Max 5 messages per hour per IP
RATE_LIMIT_WINDOW_SECONDS = 60 * 60

contact_rate_limiter = SlidingWindowRateLimiter(RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS)


@public_router.post("/contact", response_model=ContactResponse)
async def submit_contact_form(
    contact_data: ContactRequest,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Store a contact form message for the admin inbox.

    Order matters: field validation failures don't use up the sender's quota,
    and a rate-limited request is never persisted.
    """
    require_fields(contact_data.model_dump(), ("name", "email", "subject", "message"))
    email = validate_email(contact_data.email, "Valid email address required.")

    client_ip = get_client_ip(request)
    if not contact_rate_limiter.allow(client_ip):
        logging.warning(f"Contact rate limit exceeded for {client_ip}")
        raise ApiError(
            ErrorKind.RATE_LIMITED,
            "Too many submissions. Please try again in an hour.",
            headers={"Retry-After": str(contact_rate_limiter.retry_after(client_ip))},
        )

    name = sanitize_text(contact_data.name, max_length=MAX_NAME_LENGTH)
    phone = sanitize_text(contact_data.phone, max_length=MAX_PHONE_LENGTH)
    subject = sanitize_text(contact_data.subject, max_length=MAX_SUBJECT_LENGTH)
    message = sanitize_text(contact_data.message, max_length=MAX_MESSAGE_LENGTH)

    if not name or not subject or not message:
        raise validation_error("Input validation failed.")

    contact = ContactMessage(
        name=name,
        email=email,
        phone=phone,
        subject=subject,
        message=message,
        ip_address=client_ip,
        status="new",
    )
    try:
        db.add(contact)
        db.commit()
        db.refresh(contact)
    except Exception as e:
        db.rollback()
        logging.error(f"Contact submission error: {str(e)}", exc_info=True)
        raise internal_error("Failed to submit contact form.")

    logging.info(f"Contact message {contact.id} received from {email}")
    return ContactResponse(
        success=True,
        message="Thank you for reaching out. We will be in touch soon.",
        contact_id=contact.id,
    )


@admin_router.get("", response_model=ContactListResponse)
async def list_contacts(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: str = Query(""),
    status: str = Query(""),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    query = db.query(ContactMessage)
    search = search.strip().lower()
    if search:
        query = query.filter(or_(
            ContactMessage.name.ilike(f"%{search}%"),
            ContactMessage.email.ilike(f"%{search}%"),
        ))
    if status in CONTACT_STATUSES:
        query = query.filter(ContactMessage.status == status)

    total = query.count()
    contacts = query.order_by(ContactMessage.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return ContactListResponse(
        contacts=[ContactItem.model_validate(c) for c in contacts],
        page=page,
        limit=limit,
        total=total,
        total_pages=-(-total // limit),
    )


@admin_router.put("/{contact_id}", response_model=ContactUpdateResponse)
async def update_contact_status(
    contact_id: str,
    payload: ContactStatusUpdate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if payload.status not in CONTACT_STATUSES:
        raise validation_error("Valid status required: new, read, or archived.")

    contact = db.query(ContactMessage).filter(ContactMessage.id == contact_id).first()
    if contact is None:
        raise not_found("Contact not found.")

    contact.status = payload.status
    db.commit()
    db.refresh(contact)
    return ContactUpdateResponse(contact=ContactItem.model_validate(contact))


@admin_router.delete("/{contact_id}", response_model=SuccessResponse)
async def delete_contact(
    contact_id: str,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    contact = db.query(ContactMessage).filter(ContactMessage.id == contact_id).first()
    if contact is None:
        raise not_found("Contact not found.")
    db.delete(contact)
    db.commit()
    return SuccessResponse(success=True, message="Contact deleted.")
