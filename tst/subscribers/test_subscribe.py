from journal.subscribers.database import Subscriber
from journal.subscribers.service import subscribe, SubscribeOutcome


def test_subscribe_twice_keeps_one_row(db):
    assert subscribe(db, "reader@example.com", "newsletter-form") == SubscribeOutcome.CREATED
    assert subscribe(db, "reader@example.com", "newsletter-form") == SubscribeOutcome.ALREADY_ACTIVE

    rows = db.query(Subscriber).filter(Subscriber.email == "reader@example.com").all()
    assert len(rows) == 1
    assert rows[0].status == "active"


def test_unsubscribed_row_is_reactivated(db):
    db.add(Subscriber(email="back@example.com", source="footer", status="unsubscribed"))
    db.commit()

    outcome = subscribe(db, "back@example.com", "popup-lead-capture", update_source=True)

    assert outcome == SubscribeOutcome.REACTIVATED
    row = db.query(Subscriber).filter(Subscriber.email == "back@example.com").one()
    assert row.status == "active"
    assert row.source == "popup-lead-capture"


def test_public_subscribe_endpoint(client, db):
    first = client.post("/api/public/subscribe", json={"email": "  Fan@Example.com "})
    again = client.post("/api/public/subscribe", json={"email": "fan@example.com"})

    assert first.status_code == 200
    assert first.json() == {"success": True, "message": "Subscribed successfully."}
    assert again.json()["message"] == "Already subscribed."
    assert db.query(Subscriber).filter(Subscriber.email == "fan@example.com").count() == 1


def test_public_subscribe_rejects_bad_email(client):
    response = client.post("/api/public/subscribe", json={"email": "not-an-email"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Valid email required.", "error": "validation"}


def test_admin_subscriber_management(client, db, admin_headers):
    subscribe(db, "one@example.com", "newsletter-form")
    subscribe(db, "two@example.com", "newsletter-form")

    listing = client.get("/api/admin/subscribers", headers=admin_headers)
    assert listing.status_code == 200
    body = listing.json()
    assert body["total"] == 2
    assert {item["email"] for item in body["items"]} == {"one@example.com", "two@example.com"}
    assert "subscribedAt" in body["items"][0]

    update = client.put("/api/admin/subscribers/one@example.com", json={"status": "unsubscribed"}, headers=admin_headers)
    assert update.status_code == 200

    deleted = client.post("/api/admin/subscribers/bulk-delete", json={"emails": ["two@example.com"]}, headers=admin_headers)
    assert deleted.status_code == 200
    assert deleted.json()["deleted"] == 1
