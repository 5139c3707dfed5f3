"""Public reader routes: homepage, categories, article pages, archive and search."""

import os
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from journal.shared.database import get_db
from journal.shared.errors import not_found
from journal.shared.schemas import OkResponse
from journal.ads.placement import get_ads_by_placement, pick_placement
from journal.articles.database import Article
from journal.articles.schemas import (
    Category,
    HomepageResponse,
    CategoryPageResponse,
    ArticlePageResponse,
    ArchiveResponse,
    AdGroups,
    VersionResponse,
)
from journal.articles.service import (
    CATEGORIES,
    find_category,
    get_article,
    published,
    to_response,
    to_archive_item,
    total_pages,
)

router = APIRouter(prefix="/api/public", tags=["public"])

APP_NAME = "uxdesignjournal-backend"
APP_VERSION = "3.0.0"
PAGE_SIZE = 20


@router.get("/version", response_model=VersionResponse)
async def version():
    """Version info, useful for checking which build is deployed."""
    commit = os.environ.get("RAILWAY_GIT_COMMIT_SHA") or os.environ.get("GIT_COMMIT_SHA")
    return VersionResponse(
        app=APP_NAME,
        version=APP_VERSION,
        commit=commit,
        now=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/categories", response_model=List[Category])
async def categories():
    return CATEGORIES


@router.get("/homepage", response_model=HomepageResponse)
async def homepage(db: Session = Depends(get_db)):
    ads = get_ads_by_placement(db, ["homepage-latest", "homepage-lead"])

    latest = published(db).order_by(Article.created_at.desc()).limit(6).all()
    featured = published(db).filter(Article.featured.is_(True)).order_by(
        Article.feature_order, Article.created_at.desc()
    ).limit(6).all()

    latest_responses = [to_response(a) for a in latest]
    return HomepageResponse(
        categories=CATEGORIES,
        latest=latest_responses,
        lead=latest_responses[0] if latest_responses else None,
        daily=latest_responses[:4],
        featured=[to_response(a) for a in featured],
        tiles=latest_responses[:4],
        ads=AdGroups(
            sidebar=pick_placement(ads, "homepage-latest"),
            inline=pick_placement(ads, "homepage-lead"),
        ),
    )


@router.get("/category/{slug}", response_model=CategoryPageResponse)
async def category_page(slug: str, db: Session = Depends(get_db)):
    category = find_category(slug)
    if category is None:
        raise not_found()

    articles = published(db).filter(Article.category == category.slug).order_by(Article.created_at.desc()).all()
    responses = [to_response(a) for a in articles]
    return CategoryPageResponse(category=category, articles=responses, daily=responses[:3])


@router.get("/article/{slug}", response_model=ArticlePageResponse)
async def article_page(slug: str, db: Session = Depends(get_db)):
    article = get_article(db, slug)
    if article is None:
        raise not_found()

    ads = get_ads_by_placement(db, ["article-inline", "article-readmore", "article-sidebar"])
    related = published(db).filter(Article.slug != article.slug).order_by(Article.created_at.desc()).limit(3).all()

    page = ArticlePageResponse(**to_response(article).model_dump())
    page.related = [to_response(a) for a in related]
    page.ads = AdGroups(
        sidebar=pick_placement(ads, "article-sidebar"),
        inline=pick_placement(ads, "article-inline") + pick_placement(ads, "article-readmore"),
    )
    return page


@router.get("/archive", response_model=ArchiveResponse)
async def archive(page: int = Query(1, ge=1), db: Session = Depends(get_db)):
    query = published(db)
    total = query.count()
    results = query.order_by(Article.created_at.desc()).offset((page - 1) * PAGE_SIZE).limit(PAGE_SIZE).all()
    return ArchiveResponse(
        results=[to_archive_item(a) for a in results],
        page=page,
        total_pages=total_pages(total, PAGE_SIZE),
    )


@router.get("/search", response_model=ArchiveResponse)
async def search(q: str = Query(""), page: int = Query(1, ge=1), db: Session = Depends(get_db)):
    query = published(db)
    q = q.strip()
    if q:
        query = query.filter(Article.title.ilike(f"%{q}%"))
    total = query.count()
    results = query.order_by(Article.created_at.desc()).offset((page - 1) * PAGE_SIZE).limit(PAGE_SIZE).all()
    return ArchiveResponse(
        results=[to_archive_item(a) for a in results],
        page=page,
        total_pages=total_pages(total, PAGE_SIZE),
    )


@router.post("/session/heartbeat", response_model=OkResponse)
async def session_heartbeat():
    return OkResponse()


@router.post("/session/identify", response_model=OkResponse)
async def session_identify():
    return OkResponse()
