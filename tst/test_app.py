from fastapi.testclient import TestClient

from journal.app import app, validation_message
from journal.articles.database import Article
from journal.auth.database import AdminUser


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["status"] == "ok"


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/public/nope")

    assert response.status_code == 404
    assert response.json()["success"] is False
    assert response.json()["error"] == "not_found"


def test_malformed_body_is_a_400(client):
    response = client.post("/api/public/contact", content="{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"] == "validation"


def test_validation_message_strips_value_error_prefix():
    assert validation_message([{"loc": ("body",), "msg": "Value error, html is required"}]) == "html is required"
    assert validation_message([{"loc": ("body", "order"), "msg": "Input should be a valid integer"}]) == (
        "order: Input should be a valid integer"
    )
    assert validation_message([]) == "Invalid request."


def test_startup_seeds_admin_and_articles(db):
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200

    assert db.query(AdminUser).count() == 1
    assert db.query(Article).filter(Article.status == "published").count() == 4


def test_cors_headers_on_errors(client):
    response = client.get("/api/admin/users", headers={"Origin": "http://localhost:5173"})

    assert response.status_code == 401
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
