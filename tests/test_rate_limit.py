import uuid
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from starlette.requests import Request

from app.models.admin_profile import AdminProfile
from app.models.rate_limit_window import RateLimitWindow
from app.models.report import Report
from app.services.rate_limit import (
    FixedWindowRateLimiter,
    SqlCounterStore,
    client_ip,
    rate_limit_key,
)


class FakeClock:
    def __init__(self):
        self.now = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def _limiter(clock: FakeClock) -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(SqlCounterStore(), capacity=5, window_seconds=60, clock=clock)


def _request(headers: dict[str, str], peer: str | None = "10.0.0.9") -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "client": (peer, 1234) if peer else None,
    }
    return Request(scope)


def test_sixth_hit_in_window_is_rejected(db) -> None:
    clock = FakeClock()
    limiter = _limiter(clock)

    decisions = [limiter.hit(db, "report|1.2.3.4") for _ in range(6)]

    assert [d.allowed for d in decisions] == [True] * 5 + [False]
    assert [d.remaining for d in decisions[:5]] == [4, 3, 2, 1, 0]
    assert decisions[5].retry_after_seconds == 60


def test_window_resets_after_it_elapses(db) -> None:
    clock = FakeClock()
    limiter = _limiter(clock)
    for _ in range(5):
        assert limiter.hit(db, "report|1.2.3.4").allowed

    clock.advance(30)
    blocked = limiter.hit(db, "report|1.2.3.4")
    assert blocked.allowed is False
    assert blocked.retry_after_seconds == 30

    clock.advance(30)
    fresh = limiter.hit(db, "report|1.2.3.4")
    assert fresh.allowed is True
    assert fresh.remaining == 4


def test_keys_are_counted_independently(db) -> None:
    clock = FakeClock()
    limiter = _limiter(clock)
    for _ in range(5):
        limiter.hit(db, "report|1.2.3.4")

    assert limiter.hit(db, "report|1.2.3.4").allowed is False
    assert limiter.hit(db, "report|5.6.7.8").allowed is True
    assert limiter.hit(db, "seller_login|1.2.3.4").allowed is True


def test_counters_are_shared_between_limiter_instances(db) -> None:
    clock = FakeClock()
    first, second = _limiter(clock), _limiter(clock)
    for _ in range(3):
        first.hit(db, "report|1.2.3.4")
    for _ in range(2):
        second.hit(db, "report|1.2.3.4")

    assert first.hit(db, "report|1.2.3.4").allowed is False
    row = db.get(RateLimitWindow, "report|1.2.3.4")
    assert row.count == 6


def test_client_ip_prefers_forwarded_headers() -> None:
    assert client_ip(_request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})) == "203.0.113.7"
    assert client_ip(_request({"X-Real-IP": "198.51.100.2"})) == "198.51.100.2"
    assert client_ip(_request({})) == "10.0.0.9"
    assert client_ip(_request({}, peer=None)) == "unknown"


def test_long_keys_are_hashed() -> None:
    key = rate_limit_key("report", "x" * 600)
    assert key.startswith("report|sha256:")
    assert len(key) < 512
    assert rate_limit_key("report", "1.2.3.4") == "report|1.2.3.4"


def test_report_endpoint_rejects_sixth_submission(client: TestClient, db) -> None:
    admin = AdminProfile(id=uuid.uuid4(), name="Escrow Ana")
    db.add(admin)
    db.commit()

    headers = {"X-Forwarded-For": "203.0.113.50"}
    body = {"type": "admin", "target_id": str(admin.id), "message": "no reply"}
    for _ in range(5):
        ok = client.post("/api/v1/reports", json=body, headers=headers)
        assert ok.status_code == 201, ok.text

    blocked = client.post("/api/v1/reports", json=body, headers=headers)
    assert blocked.status_code == 429
    assert blocked.json()["detail"] == "Rate limit exceeded. Please try again later."
    assert int(blocked.headers["Retry-After"]) > 0

    other = client.post("/api/v1/reports", json=body, headers={"X-Forwarded-For": "203.0.113.51"})
    assert other.status_code == 201

    db.expire_all()
    assert db.query(Report).count() == 6


def test_rate_limited_login_does_not_touch_registry(client: TestClient, monkeypatch) -> None:
    from app.services.code_registry import seller_code_registry

    headers = {"X-Forwarded-For": "203.0.113.60"}
    for _ in range(5):
        resp = client.post("/api/v1/auth/login-with-code", json={"code": "bad"}, headers=headers)
        assert resp.status_code == 400

    calls = []
    monkeypatch.setattr(seller_code_registry, "claim_or_resume", lambda *a, **kw: calls.append(a))

    blocked = client.post("/api/v1/auth/login-with-code", json={"code": "bad"}, headers=headers)
    assert blocked.status_code == 429
    assert calls == []
