"""Admin article routes: list, read, create, update, delete."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from journal.shared.database import get_db
from journal.shared.errors import validation_error, not_found
from journal.shared.schemas import OkResponse
from journal.auth.database import AdminUser
from journal.auth.dependencies import get_current_admin
from journal.articles.database import Article, ARTICLE_STATUSES
from journal.articles.schemas import ArticleCreate, ArticleUpdate, ArticleResponse, ArticleListResponse
from journal.articles.service import get_article, to_response, to_list_item, total_pages
from journal.articles.slugs import derive_slug, slug_or_random, slug_exists, insert_with_unique_slug
from journal.images.provenance import assert_durable, TransientImageUrlError

router = APIRouter(prefix="/api/admin/articles", tags=["articles"])


def _check_image(url: Optional[str]) -> None:
    try:
        assert_durable(url)
    except TransientImageUrlError as e:
        raise validation_error(str(e))


def _check_status(value: Optional[str]) -> None:
    if value is not None and value not in ARTICLE_STATUSES:
        raise validation_error(f"status must be one of: {', '.join(ARTICLE_STATUSES)}")


@router.get("", response_model=ArticleListResponse)
async def list_articles(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    q: str = Query(""),
    status: str = Query(""),
    category: str = Query(""),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    query = db.query(Article)
    q = q.strip()
    if q:
        query = query.filter(Article.title.ilike(f"%{q}%"))
    if status.strip() in ARTICLE_STATUSES:
        query = query.filter(Article.status == status.strip())
    if category.strip():
        query = query.filter(Article.category == category.strip())

    total = query.count()
    items = query.order_by(Article.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return ArticleListResponse(
        items=[to_list_item(a) for a in items],
        page=page,
        total=total,
        total_pages=total_pages(total, limit),
    )


@router.get("/{slug}", response_model=ArticleResponse)
async def read_article(
    slug: str,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    article = get_article(db, slug)
    if article is None:
        raise not_found()
    return to_response(article)


@router.post("", response_model=ArticleResponse)
async def create_article(
    payload: ArticleCreate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """
    Create an article.

    A caller-supplied slug is normalised and must be free (400 otherwise).
    Without one, the slug is derived from the title and de-duplicated with a
    numeric suffix.
    """
    _check_status(payload.status)
    _check_image(payload.image_url)

    data = payload.model_dump(exclude={"slug"})
    article = Article(**data)

    if payload.slug and payload.slug.strip():
        slug = derive_slug(payload.slug)
        if not slug:
            raise validation_error("Slug must contain letters or numbers")
        if slug_exists(db, slug):
            raise validation_error("Slug already exists")
        article.slug = slug
        db.add(article)
        try:
            db.commit()
        except IntegrityError:
            # Taken between the check and the insert
            db.rollback()
            raise validation_error("Slug already exists")
        db.refresh(article)
    else:
        insert_with_unique_slug(db, article, slug_or_random(payload.title))

    logging.info(f"Article {article.slug} created by {admin.email}")
    return to_response(article)


@router.put("/{slug}", response_model=ArticleResponse)
async def update_article(
    slug: str,
    payload: ArticleUpdate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """
    Update the fields present in the body.

    The slug of a published article is frozen; drafts and scheduled articles may be renamed.
    """
    article = get_article(db, slug)
    if article is None:
        raise not_found()

    changes = payload.model_dump(exclude_unset=True)
    _check_status(changes.get("status"))
    if "image_url" in changes:
        _check_image(changes["image_url"])

    new_slug = changes.pop("slug", None)
    if new_slug is not None:
        new_slug = derive_slug(new_slug)
        if new_slug and new_slug != article.slug:
            if article.status == "published":
                raise validation_error("Slug of a published article cannot be changed")
            if slug_exists(db, new_slug):
                raise validation_error("Slug already exists")
            article.slug = new_slug

    for field, value in changes.items():
        if value is None and field not in ("date", "publish_at"):
            continue
        setattr(article, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise validation_error("Slug already exists")
    db.refresh(article)
    return to_response(article)


@router.delete("/{slug}", response_model=OkResponse)
async def delete_article(
    slug: str,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    article = get_article(db, slug)
    if article is None:
        raise not_found()
    db.delete(article)
    db.commit()
    logging.info(f"Article {slug} deleted by {admin.email}")
    return OkResponse()
