"""Article helpers shared by the admin, public and AI routes."""

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from journal.articles.database import Article
from journal.articles.schemas import ArticleResponse, ArticleListItem, ArchiveItem, Category
from journal.images.provenance import safe_image_url

CATEGORIES = [
    Category(slug="practice", name="Practice"),
    Category(slug="design-reviews", name="Design Reviews"),
    Category(slug="career", name="Career"),
    Category(slug="signals", name="Signals"),
    Category(slug="journal", name="Journal"),
]


def find_category(slug: str) -> Optional[Category]:
    return next((c for c in CATEGORIES if c.slug == slug), None)


def get_article(db: Session, slug: str) -> Optional[Article]:
    return db.query(Article).filter(Article.slug == slug).first()


def to_response(article: Article) -> ArticleResponse:
    """Serialize an article, re-validating its image URL on the way out."""
    response = ArticleResponse.model_validate(article)
    response.image_url = safe_image_url(article.image_url, article.slug)
    response.tags = list(article.tags or [])
    return response


def to_list_item(article: Article) -> ArticleListItem:
    return ArticleListItem(
        id=article.slug,
        slug=article.slug,
        title=article.title,
        category=article.category,
        date=article.date,
        status=article.status,
        featured=article.featured,
        feature_order=article.feature_order,
        image_url=safe_image_url(article.image_url, article.slug),
    )


def to_archive_item(article: Article) -> ArchiveItem:
    return ArchiveItem(
        headline=article.title,
        slug=article.slug,
        category=article.category,
        date=article.date,
        image_url=safe_image_url(article.image_url, article.slug),
    )


def total_pages(total: int, limit: int) -> int:
    return max(1, -(-total // limit))


def published(db: Session):
    return db.query(Article).filter(Article.status == "published")


def seed_articles(db: Session) -> None:
    """Insert a handful of sample articles into an empty database."""
    if db.query(Article.id).first() is not None:
        return

    today = date.today().isoformat()
    samples: List[Article] = [
        Article(
            slug="before-the-design-ships",
            title="Before the Design Ships, Someone Has to Be Right",
            excerpt="Judgment becomes the defining skill at the top.",
            category="practice",
            date=today,
            author="UXDJ",
            body_markdown="## Lead story\n\nDesign ships when someone owns the call.",
            featured=True,
            feature_order=1,
            status="published",
        ),
        Article(
            slug="long-middle-design-career",
            title="The Long Middle of a Design Career",
            excerpt="After momentum fades and before legacy forms, most designers live here.",
            category="career",
            date=today,
            body_markdown="Middle career realities.",
            status="published",
        ),
        Article(
            slug="ai-didnt-change-ux",
            title="AI Didn't Change UX. Compliance Did.",
            excerpt="The quiet shift reshaping authority inside design teams.",
            category="signals",
            date=today,
            status="published",
        ),
        Article(
            slug="good-design-misalignment",
            title="Good Design Doesn't Survive Bad Alignment",
            excerpt="Talent cannot outwork misalignment. Stop trying.",
            category="practice",
            date=today,
            status="published",
        ),
    ]
    now = datetime.utcnow()
    for article in samples:
        article.created_at = now
        article.updated_at = now
        db.add(article)
    db.commit()
    logging.info("Seeded sample articles")
