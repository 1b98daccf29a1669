import uuid

from fastapi.testclient import TestClient

from app.models.admin_profile import AdminProfile
from app.models.listing import Listing
from app.models.report import Report


def _listing(db, seller_id) -> Listing:
    listing = Listing(
        id=uuid.uuid4(),
        seller_id=seller_id,
        title="Dev account 2019",
        country="BR",
        year=2019,
        price_usd=250,
    )
    db.add(listing)
    db.commit()
    return listing


def test_report_listing(client: TestClient, db, make_profile) -> None:
    listing = _listing(db, make_profile().id)

    resp = client.post(
        "/api/v1/reports",
        json={"type": "listing", "target_id": str(listing.id), "message": "Looks like a scam"},
        headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"},
    )

    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Report submitted successfully"

    report = db.get(Report, uuid.UUID(body["report_id"]))
    assert report.type == "listing"
    assert report.target_id == listing.id
    assert report.message == "Looks like a scam"
    assert report.from_ip == "203.0.113.9"


def test_report_admin_without_message(client: TestClient, db) -> None:
    admin = AdminProfile(id=uuid.uuid4(), name="Escrow Bruno", verified=True)
    db.add(admin)
    db.commit()

    resp = client.post("/api/v1/reports", json={"type": "admin", "target_id": str(admin.id)})

    assert resp.status_code == 201
    report = db.get(Report, uuid.UUID(resp.json()["report_id"]))
    assert report.message is None


def test_report_validates_type_and_target(client: TestClient) -> None:
    for body in (
        {"type": "user", "target_id": str(uuid.uuid4())},
        {"type": "listing"},
        {"target_id": str(uuid.uuid4())},
        {"type": ["listing"], "target_id": str(uuid.uuid4())},
        {"type": "listing", "target_id": 123},
    ):
        resp = client.post("/api/v1/reports", json=body)
        assert resp.status_code == 400, body
        assert resp.json()["detail"] == "Valid type and target_id are required"


def test_report_unknown_target(client: TestClient) -> None:
    listing = client.post("/api/v1/reports", json={"type": "listing", "target_id": str(uuid.uuid4())})
    admin = client.post("/api/v1/reports", json={"type": "admin", "target_id": str(uuid.uuid4())})

    assert listing.status_code == 404
    assert listing.json()["detail"] == "Listing not found"
    assert admin.status_code == 404
    assert admin.json()["detail"] == "Admin not found"


def test_report_malformed_target_id_counts_and_is_404(client: TestClient, db) -> None:
    from app.models.rate_limit_window import RateLimitWindow

    headers = {"X-Forwarded-For": "203.0.113.70"}
    resp = client.post("/api/v1/reports", json={"type": "listing", "target_id": "123"}, headers=headers)

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Listing not found"
    window = db.get(RateLimitWindow, "report|203.0.113.70")
    assert window is not None and window.count == 1


def test_report_message_must_be_text(client: TestClient, db, make_profile) -> None:
    listing = _listing(db, make_profile().id)

    resp = client.post(
        "/api/v1/reports",
        json={"type": "listing", "target_id": str(listing.id), "message": {"text": "scam"}},
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "message must be a string"
    db.expire_all()
    assert db.query(Report).count() == 0
