"""Admin dashboard routes: stats and image uploads."""

import io
import time
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from journal.shared.database import get_db
from journal.shared.errors import upstream_failure
from journal.auth.database import AdminUser
from journal.auth.dependencies import get_current_admin
from journal.articles.database import Article
from journal.articles.service import CATEGORIES
from journal.ads.database import Ad
from journal.subscribers.database import Subscriber
from journal.images import cloudinary_client
from journal.images.image_utils import process_image, sanitize_filename

router = APIRouter(prefix="/api/admin", tags=["admin"])

TREND_DAYS = 7
RECENT_EVENTS_LIMIT = 10


class RecentEvent(BaseModel):
    type: str
    date: datetime
    title: Optional[str] = None
    slug: Optional[str] = None
    email: Optional[str] = None


class Trend(BaseModel):
    current: int
    previous: int


class Trends(BaseModel):
    subscribers: Trend
    articles: Trend


class StatsResponse(BaseModel):
    subscribers: int
    articles: int
    categories: int
    ads: int
    admins: int
    recentEvents: List[RecentEvent]
    trends: Trends


class UploadResponse(BaseModel):
    url: str


def _trend(db: Session, created_at, now: datetime) -> Trend:
    """Rows created in the last TREND_DAYS days against the TREND_DAYS days before."""
    week_ago = now - timedelta(days=TREND_DAYS)
    two_weeks_ago = now - timedelta(days=2 * TREND_DAYS)
    current = db.query(func.count()).filter(created_at >= week_ago).scalar() or 0
    previous = db.query(func.count()).filter(created_at >= two_weeks_ago, created_at < week_ago).scalar() or 0
    return Trend(current=current, previous=previous)


@router.get("/stats", response_model=StatsResponse, response_model_exclude_none=True)
async def get_stats(
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Dashboard counters, the latest article/subscriber events and week-over-week trends."""
    now = datetime.utcnow()

    recent_articles = db.query(Article).order_by(Article.created_at.desc()).limit(6).all()
    recent_subscribers = db.query(Subscriber).order_by(Subscriber.created_at.desc()).limit(4).all()
    events = [
        RecentEvent(type="article", title=a.title, slug=a.slug, date=a.created_at)
        for a in recent_articles
    ] + [
        RecentEvent(type="subscriber", email=s.email, date=s.created_at)
        for s in recent_subscribers
    ]
    events.sort(key=lambda e: e.date, reverse=True)

    return StatsResponse(
        subscribers=db.query(func.count(Subscriber.id)).filter(Subscriber.status == "active").scalar() or 0,
        articles=db.query(func.count(Article.id)).scalar() or 0,
        categories=len(CATEGORIES),
        ads=db.query(func.count(Ad.id)).scalar() or 0,
        admins=db.query(func.count(AdminUser.id)).filter(AdminUser.role == "admin").scalar() or 0,
        recentEvents=events[:RECENT_EVENTS_LIMIT],
        trends=Trends(
            subscribers=_trend(db, Subscriber.created_at, now),
            articles=_trend(db, Article.created_at, now),
        ),
    )


@router.post("/uploads", response_model=UploadResponse)
def upload_image(
    file: UploadFile = File(...),
    admin: AdminUser = Depends(get_current_admin)
):
    """
    Upload an image for use in articles or ads.

    The image is validated and re-encoded as JPEG with Pillow before it is
    sent to Cloudinary. Plain def: the upload blocks, so it runs in the threadpool.
    """
    jpeg_bytes = process_image(file)

    public_id = f"uxdj/{sanitize_filename(file.filename)}-{int(time.time() * 1000)}"
    url = cloudinary_client.upload_image(io.BytesIO(jpeg_bytes), public_id)
    if not url:
        raise upstream_failure("Image upload failed")

    logging.info(f"Image uploaded by {admin.email}: {url}")
    return UploadResponse(url=url)
