"""Slug derivation and allocation for articles."""

import logging
import re
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from journal.articles.database import Article

MAX_SLUG_ATTEMPTS = 50

_APOSTROPHES = re.compile(r"['’]")
_NON_ALNUM = re.compile(r'[^a-z0-9]+')


class SlugAllocationError(RuntimeError):
    """No free slug found within MAX_SLUG_ATTEMPTS inserts."""


def derive_slug(text) -> str:
    """
    Derive a URL-safe slug from free text.

    "AI Didn't Change UX!!" -> "ai-didnt-change-ux"
    """
    slug = _APOSTROPHES.sub('', str(text or '').strip().lower())
    slug = _NON_ALNUM.sub('-', slug).strip('-')
    return slug


def slug_or_random(text) -> str:
    return derive_slug(text) or uuid.uuid4().hex[:12]


def slug_exists(db: Session, slug: str) -> bool:
    return db.query(Article.id).filter(Article.slug == slug).first() is not None


def allocate_unique(db: Session, candidate: str) -> str:
    """
    Return ``candidate`` or the first free ``candidate-N`` (N = 1, 2, ...).

    One query per probe. The result is only free at the moment of the check;
    insert_with_unique_slug() covers the race with the unique constraint.
    """
    slug = candidate
    suffix = 1
    while slug_exists(db, slug):
        slug = f"{candidate}-{suffix}"
        suffix += 1
    return slug


def _is_slug_conflict(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "slug" in message or "unique" in message or "duplicate" in message


def insert_with_unique_slug(db: Session, article: Article, base: str) -> Article:
    """
    Insert ``article`` with the first free slug derived from ``base`` and commit.

    If a concurrent writer takes the slug between the probe and the insert, the
    unique constraint rejects the row and the next candidate is tried.
    """
    for attempt in range(MAX_SLUG_ATTEMPTS):
        article.slug = allocate_unique(db, base)
        db.add(article)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if not _is_slug_conflict(e):
                raise
            logging.warning(f"Slug {article.slug} taken concurrently, retrying (attempt {attempt + 1})")
            continue
        db.refresh(article)
        return article

    raise SlugAllocationError(f"Could not allocate a unique slug for '{base}'")
