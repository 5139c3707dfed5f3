import pytest

from journal.shared.database import engine
from journal.articles.database import Article
from journal.articles import slugs
from journal.articles.slugs import derive_slug, slug_or_random, allocate_unique, insert_with_unique_slug


@pytest.mark.parametrize("text, expected", [
    ("AI Didn't Change UX!!", "ai-didnt-change-ux"),
    ("Good Design!", "good-design"),
    ("  --Hello,   World--  ", "hello-world"),
    ("Café & Crème", "caf-cr-me"),
    ("already-a-slug", "already-a-slug"),
    ("!!!", ""),
    (None, ""),
])
def test_derive_slug(text, expected):
    assert derive_slug(text) == expected


def test_slug_or_random_never_empty():
    slug = slug_or_random("???")
    assert len(slug) == 12
    assert derive_slug(slug) == slug


def test_allocate_unique_appends_numeric_suffix(db):
    db.add(Article(slug="good-design", title="Good Design"))
    db.commit()

    first = insert_with_unique_slug(db, Article(title="Good Design!"), derive_slug("Good Design!"))
    assert first.slug == "good-design-1"

    second = insert_with_unique_slug(db, Article(title="Good Design!"), derive_slug("Good Design!"))
    assert second.slug == "good-design-2"

    assert allocate_unique(db, "fresh-title") == "fresh-title"


def test_insert_retries_when_slug_taken_concurrently(db, monkeypatch):
    """A writer racing between the probe and the insert makes the first commit fail."""
    real_allocate = slugs.allocate_unique
    calls = []

    def racing_allocate(session, candidate):
        slug = real_allocate(session, candidate)
        if not calls:
            # Another request commits the same slug right after our probe
            with engine.begin() as connection:
                connection.execute(Article.__table__.insert().values(id="racer", slug=slug, title="Racer", tags=[]))
        calls.append(slug)
        return slug

    monkeypatch.setattr(slugs, "allocate_unique", racing_allocate)

    article = insert_with_unique_slug(db, Article(title="Race"), "race")

    assert calls == ["race", "race-1"]
    assert article.slug == "race-1"
