"""Admin routes for managing ads."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from journal.shared.database import get_db
from journal.shared.errors import not_found
from journal.shared.schemas import OkResponse
from journal.auth.database import AdminUser
from journal.auth.dependencies import get_current_admin
from journal.ads.database import Ad
from journal.ads.schemas import AdPayload, AdResponse

router = APIRouter(prefix="/api/admin/ads", tags=["ads"])


@router.get("", response_model=List[AdResponse])
async def list_ads(
    placement: Optional[str] = Query(None),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    query = db.query(Ad)
    if placement:
        query = query.filter(Ad.placement == placement)
    ads = query.order_by(Ad.placement, Ad.order, Ad.updated_at.desc()).all()
    return [AdResponse.model_validate(ad) for ad in ads]


@router.post("", response_model=AdResponse)
async def create_ad(
    payload: AdPayload,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    ad = Ad(**payload.model_dump())
    db.add(ad)
    db.commit()
    db.refresh(ad)
    logging.info(f"Ad {ad.id} created in placement {ad.placement}")
    return AdResponse.model_validate(ad)


@router.put("/{ad_id}", response_model=AdResponse)
async def update_ad(
    ad_id: str,
    payload: AdPayload,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Replace every field of an ad; the payload is validated like a create."""
    ad = db.query(Ad).filter(Ad.id == ad_id).first()
    if ad is None:
        raise not_found()

    for field, value in payload.model_dump().items():
        setattr(ad, field, value)
    db.commit()
    db.refresh(ad)
    return AdResponse.model_validate(ad)


@router.delete("/{ad_id}", response_model=OkResponse)
async def delete_ad(
    ad_id: str,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    ad = db.query(Ad).filter(Ad.id == ad_id).first()
    if ad is None:
        raise not_found()
    db.delete(ad)
    db.commit()
    return OkResponse()
