"""Popup lead capture: public popup display/submit and admin popup management."""

import csv
import io
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy import func
from sqlalchemy.orm import Session

from journal.shared.database import get_db
from journal.shared.errors import validation_error, not_found, internal_error
from journal.shared.input_validation import validate_email, sanitize_text
from journal.shared.rate_limit import get_client_ip
from journal.shared.schemas import SuccessResponse
from journal.auth.database import AdminUser
from journal.auth.dependencies import get_current_admin
from journal.subscribers.service import subscribe
from journal.popups.database import PopupConfig, PopupLead
from journal.popups.schemas import (
    PopupPublic,
    ActivePopupResponse,
    PopupSubmitRequest,
    PopupSubmitResponse,
    PopupCreate,
    PopupUpdate,
    PopupAdmin,
    PopupListResponse,
    PopupLeadItem,
    PopupLeadListResponse,
)

public_router = APIRouter(prefix="/api/public/popup", tags=["popups"])
admin_router = APIRouter(prefix="/api/admin", tags=["popups"])

DUPLICATE_WINDOW = timedelta(hours=24)
LEAD_SOURCE = "popup-lead-capture"
MAX_USER_AGENT_LENGTH = 500
LEAD_EXPORT_COLUMNS = ["Email", "Popup Name", "Popup Title", "Status", "IP Address", "Submitted At"]


def _deactivate_others(db: Session, popup_id: Optional[str]) -> None:
    query = db.query(PopupConfig).filter(PopupConfig.active.is_(True))
    if popup_id:
        query = query.filter(PopupConfig.id != popup_id)
    query.update({PopupConfig.active: False}, synchronize_session=False)


def _lead_count(db: Session, popup_id: str) -> int:
    return db.query(func.count(PopupLead.id)).filter(PopupLead.popup_config_id == popup_id).scalar() or 0


@public_router.get("/active", response_model=ActivePopupResponse)
async def get_active_popup(db: Session = Depends(get_db)):
    popup = db.query(PopupConfig).filter(PopupConfig.active.is_(True)).order_by(PopupConfig.created_at.desc()).first()
    if popup is None:
        return ActivePopupResponse(popup=None)
    return ActivePopupResponse(popup=PopupPublic.model_validate(popup))


@public_router.post("/submit", response_model=PopupSubmitResponse)
async def submit_popup_lead(
    payload: PopupSubmitRequest,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Record a popup lead and hand back the download link.

    A repeat submission for the same popup and email within 24 hours is stored
    again (for analytics) and answered with an "already sent" message. The
    email is also subscribed to the newsletter, best effort: a failed upsert is
    logged and the download link is still returned.
    """
    email = validate_email(payload.email, "Valid email required.")
    if not payload.popup_id or not payload.popup_id.strip():
        raise validation_error("Popup ID required.")

    popup = db.query(PopupConfig).filter(
        PopupConfig.id == payload.popup_id.strip(),
        PopupConfig.active.is_(True),
    ).first()
    if popup is None:
        raise not_found("Popup not found or inactive.")

    since = datetime.utcnow() - DUPLICATE_WINDOW
    already_sent = db.query(PopupLead.id).filter(
        PopupLead.popup_config_id == popup.id,
        PopupLead.email == email,
        PopupLead.created_at >= since,
    ).first() is not None

    lead = PopupLead(
        popup_config_id=popup.id,
        email=email,
        ip_address=get_client_ip(request),
        user_agent=sanitize_text(request.headers.get("user-agent", ""), max_length=MAX_USER_AGENT_LENGTH),
        status="active",
    )
    try:
        db.add(lead)
        db.commit()
        db.refresh(lead)
    except Exception as e:
        db.rollback()
        logging.error(f"Popup lead submission error: {str(e)}", exc_info=True)
        raise internal_error("Failed to process request.")

    message = "Download link sent again!" if already_sent else "Success! Check your email for the download link."
    response = PopupSubmitResponse(
        success=True,
        message=message,
        download_url=popup.pdf_url,
        pdf_title=popup.pdf_title,
        lead_id=lead.id,
    )

    try:
        subscribe(db, email, LEAD_SOURCE, update_source=True)
    except Exception as e:
        db.rollback()
        logging.error(f"Popup lead subscriber upsert failed for {email}: {str(e)}", exc_info=True)

    return response


@admin_router.get("/popups", response_model=PopupListResponse)
async def list_popups(
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    popups = db.query(PopupConfig).order_by(PopupConfig.created_at.desc()).all()
    return PopupListResponse(popups=[PopupAdmin.model_validate(p) for p in popups])


@admin_router.get("/popups/{popup_id}", response_model=PopupAdmin)
async def get_popup(
    popup_id: str,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    popup = db.query(PopupConfig).filter(PopupConfig.id == popup_id).first()
    if popup is None:
        raise not_found("Popup not found.")
    response = PopupAdmin.model_validate(popup)
    response.lead_count = _lead_count(db, popup.id)
    return response


@admin_router.post("/popups", response_model=PopupAdmin)
async def create_popup(
    payload: PopupCreate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if not payload.name or not payload.title or not payload.pdf_url or not payload.pdf_title:
        raise validation_error("Name, title, pdfUrl, and pdfTitle are required.")

    if payload.active:
        _deactivate_others(db, None)

    popup = PopupConfig(**payload.model_dump())
    db.add(popup)
    db.commit()
    db.refresh(popup)
    logging.info(f"Popup {popup.id} created by {admin.email}")
    return PopupAdmin.model_validate(popup)


@admin_router.put("/popups/{popup_id}", response_model=PopupAdmin)
async def update_popup(
    popup_id: str,
    payload: PopupUpdate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Update the fields present in the body. Activating a popup deactivates every other one."""
    popup = db.query(PopupConfig).filter(PopupConfig.id == popup_id).first()
    if popup is None:
        raise not_found("Popup not found.")

    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    if changes.get("active"):
        _deactivate_others(db, popup.id)

    for field, value in changes.items():
        setattr(popup, field, value)
    db.commit()
    db.refresh(popup)
    return PopupAdmin.model_validate(popup)


@admin_router.delete("/popups/{popup_id}", response_model=SuccessResponse)
async def delete_popup(
    popup_id: str,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Delete a popup together with its leads."""
    popup = db.query(PopupConfig).filter(PopupConfig.id == popup_id).first()
    if popup is None:
        raise not_found("Popup not found.")
    db.delete(popup)
    db.commit()
    return SuccessResponse(success=True, message="Popup deleted.")


@admin_router.get("/popup-leads", response_model=PopupLeadListResponse)
async def list_popup_leads(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    popup_id: Optional[str] = Query(None, alias="popupId"),
    search: str = Query(""),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    query = db.query(PopupLead, PopupConfig).outerjoin(PopupConfig, PopupLead.popup_config_id == PopupConfig.id)
    if popup_id:
        query = query.filter(PopupLead.popup_config_id == popup_id)
    search = search.strip().lower()
    if search:
        query = query.filter(PopupLead.email.ilike(f"%{search}%"))

    total = query.count()
    rows = query.order_by(PopupLead.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    leads = [
        PopupLeadItem(
            id=lead.id,
            email=lead.email,
            popup_config_id=lead.popup_config_id,
            popup_name=popup.name if popup else "Unknown",
            popup_title=popup.title if popup else "Unknown",
            status=lead.status,
            ip_address=lead.ip_address,
            user_agent=lead.user_agent,
            created_at=lead.created_at,
        )
        for lead, popup in rows
    ]
    return PopupLeadListResponse(
        leads=leads,
        page=page,
        limit=limit,
        total=total,
        total_pages=-(-total // limit),
    )


@admin_router.get("/popup-leads/export")
async def export_popup_leads(
    popup_id: Optional[str] = Query(None, alias="popupId"),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Download leads as CSV, newest first, optionally for a single popup."""
    query = db.query(PopupLead, PopupConfig).outerjoin(PopupConfig, PopupLead.popup_config_id == PopupConfig.id)
    if popup_id:
        query = query.filter(PopupLead.popup_config_id == popup_id)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(LEAD_EXPORT_COLUMNS)
    for lead, popup in query.order_by(PopupLead.created_at.desc()).all():
        writer.writerow([
            lead.email,
            popup.name if popup else "Unknown",
            popup.title if popup else "Unknown",
            lead.status,
            lead.ip_address or "N/A",
            lead.created_at.isoformat() if lead.created_at else "",
        ])

    filename = f"popup-leads-{datetime.utcnow().date().isoformat()}.csv"
    logging.info(f"Popup leads exported by {admin.email}")
    return Response(
        content=buffer.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@admin_router.delete("/popup-leads/{lead_id}", response_model=SuccessResponse)
async def delete_popup_lead(
    lead_id: str,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    lead = db.query(PopupLead).filter(PopupLead.id == lead_id).first()
    if lead is None:
        raise not_found("Lead not found.")
    db.delete(lead)
    db.commit()
    return SuccessResponse(success=True, message="Lead deleted.")
