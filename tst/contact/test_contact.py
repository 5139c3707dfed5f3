from journal.contact.database import ContactMessage

VALID_MESSAGE = {
    "name": "Ada Reader",
    "email": "ada@example.com",
    "phone": "555-0100",
    "subject": "Loved the issue",
    "message": "Thanks for the piece on design reviews.",
}
FORWARDED = {"X-Forwarded-For": "1.2.3.4, 10.0.0.1"}


def test_sixth_submission_from_same_ip_is_rate_limited(client, db):
    for _ in range(5):
        response = client.post("/api/public/contact", json=VALID_MESSAGE, headers=FORWARDED)
        assert response.status_code == 200
        assert response.json()["success"] is True

    sixth = client.post("/api/public/contact", json=VALID_MESSAGE, headers=FORWARDED)

    assert sixth.status_code == 429
    assert sixth.json() == {
        "success": False,
        "message": "Too many submissions. Please try again in an hour.",
        "error": "rate_limited",
    }
    assert int(sixth.headers["Retry-After"]) > 0
    assert db.query(ContactMessage).count() == 5


def test_other_ip_is_not_limited(client):
    for _ in range(5):
        client.post("/api/public/contact", json=VALID_MESSAGE, headers=FORWARDED)

    response = client.post("/api/public/contact", json=VALID_MESSAGE, headers={"X-Forwarded-For": "5.6.7.8"})
    assert response.status_code == 200


def test_submission_is_sanitized_and_stored(client, db):
    payload = dict(VALID_MESSAGE, name="<b>Ada</b>   Reader", message="<script>x</script>Hello\n\nthere")

    response = client.post("/api/public/contact", json=payload, headers=FORWARDED)

    assert response.status_code == 200
    contact_id = response.json()["contactId"]
    stored = db.query(ContactMessage).filter(ContactMessage.id == contact_id).one()
    assert stored.name == "Ada Reader"
    assert stored.message == "xHello there"
    assert stored.ip_address == "1.2.3.4"
    assert stored.status == "new"


def test_missing_fields_are_listed(client):
    response = client.post("/api/public/contact", json={"email": "ada@example.com"})

    assert response.status_code == 400
    assert response.json()["message"] == "Missing required fields: name, subject, message."


def test_invalid_email_does_not_use_quota(client):
    for _ in range(10):
        bad = client.post("/api/public/contact", json=dict(VALID_MESSAGE, email="nope"), headers=FORWARDED)
        assert bad.status_code == 400
        assert bad.json()["message"] == "Valid email address required."

    assert client.post("/api/public/contact", json=VALID_MESSAGE, headers=FORWARDED).status_code == 200


def test_field_that_sanitizes_to_empty_is_rejected(client, db):
    response = client.post("/api/public/contact", json=dict(VALID_MESSAGE, subject="<b></b>"), headers=FORWARDED)

    assert response.status_code == 400
    assert response.json()["message"] == "Input validation failed."
    assert db.query(ContactMessage).count() == 0


def test_long_message_is_truncated(client, db):
    response = client.post("/api/public/contact", json=dict(VALID_MESSAGE, message="m" * 6000), headers=FORWARDED)

    assert response.status_code == 200
    assert len(db.query(ContactMessage).one().message) == 5000


def test_admin_inbox(client, db, admin_headers):
    contact_id = client.post("/api/public/contact", json=VALID_MESSAGE, headers=FORWARDED).json()["contactId"]

    listing = client.get("/api/admin/contacts", params={"search": "ada"}, headers=admin_headers)
    assert listing.status_code == 200
    assert listing.json()["total"] == 1
    assert listing.json()["contacts"][0]["ipAddress"] == "1.2.3.4"

    update = client.put(f"/api/admin/contacts/{contact_id}", json={"status": "read"}, headers=admin_headers)
    assert update.status_code == 200
    assert update.json()["contact"]["status"] == "read"

    bad_status = client.put(f"/api/admin/contacts/{contact_id}", json={"status": "spam"}, headers=admin_headers)
    assert bad_status.status_code == 400

    assert client.delete(f"/api/admin/contacts/{contact_id}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/admin/contacts/{contact_id}", headers=admin_headers).status_code == 404


def test_admin_inbox_requires_token(client):
    response = client.get("/api/admin/contacts")

    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"
