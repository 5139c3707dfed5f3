from journal.articles import routes as article_routes
from journal.articles.database import Article
from journal.ads.database import Ad
from journal.articles.service import seed_articles
from journal.images.provenance import fallback_image

DALLE_URL = "https://oaidalleapiprodscus.blob.core.windows.net/private/img.png"


def add_article(db, slug, **fields):
    values = dict(title=slug.replace("-", " ").title(), status="published", category="practice")
    values.update(fields)
    article = Article(slug=slug, **values)
    db.add(article)
    db.commit()
    return article


def test_create_derives_and_deduplicates_slug(client, db, admin_headers):
    add_article(db, "good-design")

    first = client.post("/api/admin/articles", json={"title": "Good Design!"}, headers=admin_headers)
    second = client.post("/api/admin/articles", json={"title": "Good Design!"}, headers=admin_headers)

    assert first.status_code == 200
    assert first.json()["slug"] == "good-design-1"
    assert second.json()["slug"] == "good-design-2"
    assert first.json()["status"] == "draft"


def test_create_with_taken_slug_is_rejected(client, db, admin_headers):
    add_article(db, "ai-didnt-change-ux")

    response = client.post(
        "/api/admin/articles", json={"title": "Anything", "slug": "AI Didn't Change UX!!"}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Slug already exists"


def test_create_with_slug_taken_concurrently_is_rejected(client, db, admin_headers, monkeypatch):
    add_article(db, "race-winner")
    monkeypatch.setattr(article_routes, "slug_exists", lambda session, slug: False)

    response = client.post("/api/admin/articles", json={"title": "Late", "slug": "race-winner"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Slug already exists"
    assert db.query(Article).filter(Article.slug == "race-winner").count() == 1

    add_article(db, "draft-loser", status="draft")
    renamed = client.put("/api/admin/articles/draft-loser", json={"slug": "race-winner"}, headers=admin_headers)
    assert renamed.status_code == 400
    assert renamed.json()["message"] == "Slug already exists"


def test_create_rejects_transient_image(client, admin_headers):
    response = client.post("/api/admin/articles", json={"title": "Pic", "imageUrl": DALLE_URL}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "validation"


def test_create_rejects_unknown_status(client, admin_headers):
    response = client.post("/api/admin/articles", json={"title": "X", "status": "live"}, headers=admin_headers)
    assert response.status_code == 400


def test_update_renames_draft_but_not_published(client, db, admin_headers):
    add_article(db, "draft-piece", status="draft")
    add_article(db, "live-piece", status="published")

    renamed = client.put("/api/admin/articles/draft-piece", json={"slug": "Better Name", "title": "Better"}, headers=admin_headers)
    assert renamed.status_code == 200
    assert renamed.json()["slug"] == "better-name"
    assert renamed.json()["title"] == "Better"

    frozen = client.put("/api/admin/articles/live-piece", json={"slug": "new-name"}, headers=admin_headers)
    assert frozen.status_code == 400
    assert frozen.json()["message"] == "Slug of a published article cannot be changed"

    same = client.put("/api/admin/articles/live-piece", json={"slug": "live-piece", "featured": True}, headers=admin_headers)
    assert same.status_code == 200
    assert same.json()["featured"] is True


def test_list_filters_and_delete(client, db, admin_headers):
    add_article(db, "one", status="draft", category="career")
    add_article(db, "two", status="published", category="career")
    add_article(db, "three", status="published", category="signals")

    body = client.get("/api/admin/articles", params={"status": "published", "category": "career"}, headers=admin_headers).json()
    assert [item["slug"] for item in body["items"]] == ["two"]
    assert body["totalPages"] == 1

    assert client.delete("/api/admin/articles/two", headers=admin_headers).json() == {"ok": True}
    assert client.get("/api/admin/articles/two", headers=admin_headers).status_code == 404


def test_legacy_transient_image_is_replaced_on_read(client, db):
    add_article(db, "legacy-post", image_url=DALLE_URL)

    body = client.get("/api/public/article/legacy-post").json()

    assert body["imageUrl"] == fallback_image("legacy-post")


def test_article_page_has_related_and_ads(client, db):
    for slug in ("a-post", "b-post", "c-post", "d-post", "e-post"):
        add_article(db, slug)
    db.add(Ad(placement="article-sidebar", type="IMAGE_LINK", image_url="300x600", href="https://s.example"))
    db.commit()

    body = client.get("/api/public/article/a-post").json()

    assert len(body["related"]) == 3
    assert "a-post" not in [r["slug"] for r in body["related"]]
    assert body["ads"]["sidebar"][0]["imageUrl"] == "https://placehold.co/300x600"
    assert body["ads"]["inline"] == []


def test_homepage_only_shows_published(client, db):
    seed_articles(db)
    add_article(db, "secret-draft", status="draft")

    body = client.get("/api/public/homepage").json()

    slugs = [a["slug"] for a in body["latest"]]
    assert "secret-draft" not in slugs
    assert len(slugs) == 4
    assert body["lead"]["slug"] == slugs[0]
    assert len(body["categories"]) == 5
    assert [a["slug"] for a in body["featured"]] == ["before-the-design-ships"]


def test_category_archive_and_search(client, db):
    seed_articles(db)

    assert client.get("/api/public/category/unknown").status_code == 404
    practice = client.get("/api/public/category/practice").json()
    assert {a["category"] for a in practice["articles"]} == {"practice"}

    archive = client.get("/api/public/archive").json()
    assert archive["page"] == 1
    assert archive["totalPages"] == 1
    assert len(archive["results"]) == 4
    assert "headline" in archive["results"][0]

    search = client.get("/api/public/search", params={"q": "career"}).json()
    assert [r["slug"] for r in search["results"]] == ["long-middle-design-career"]


def test_seed_only_fills_empty_table(db):
    seed_articles(db)
    seed_articles(db)
    assert db.query(Article).count() == 4


def test_public_misc_endpoints(client):
    assert client.get("/api/public/version").json()["version"] == "3.0.0"
    assert len(client.get("/api/public/categories").json()) == 5
    assert client.post("/api/public/session/heartbeat").json() == {"ok": True}
    assert client.post("/api/public/session/identify").json() == {"ok": True}
