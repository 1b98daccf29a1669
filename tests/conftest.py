import os
import sys
import tempfile
import uuid
from pathlib import Path
from types import SimpleNamespace

import pytest

_DB_DIR = Path(tempfile.mkdtemp(prefix="seller-desk-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'test.db'}"
os.environ["ENVIRONMENT"] = "test"

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.database.session import init_db  # noqa: E402

init_db()


@pytest.fixture(autouse=True)
def _isolate_db() -> None:
    from app.database.base import Base
    from app.database.engine import engine

    with engine.begin() as conn:
        for t in reversed(Base.metadata.sorted_tables):
            conn.execute(t.delete())


# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------

class FakeSessionIssuer:
    def __init__(self):
        self.provisioned = []
        self.sessions = []
        self.fail_with = None

    def provision(self, account_handle, profile_id):
        self.provisioned.append((account_handle, profile_id))

    def issue_session(self, account_handle, redirect_to):
        if self.fail_with is not None:
            raise self.fail_with
        self.sessions.append((account_handle, redirect_to))
        return f"https://auth.example.test/verify?email={account_handle}&redirect_to={redirect_to}"


class FakeSupabaseAuth:
    def __init__(self):
        self.tokens = {}

    def get_user(self, token):
        user = self.tokens.get(token)
        if user is None:
            return None
        return SimpleNamespace(user=user)


class FakeSupabase:
    def __init__(self):
        self.auth = FakeSupabaseAuth()

    def sign_in(self, profile_id, metadata=None, email=None) -> str:
        token = f"token-{uuid.uuid4().hex}"
        self.auth.tokens[token] = SimpleNamespace(id=str(profile_id), email=email, user_metadata=metadata or {})
        return token


class FakeBlobService:
    bucket = "listing-images"
    expiry_seconds = 900

    def __init__(self):
        self.presigned = []

    def presign_upload(self, key, content_type="application/octet-stream"):
        self.presigned.append(key)
        return f"https://blobs.example.test/{self.bucket}/{key}?signature=abc"

    def public_url(self, key):
        return f"https://cdn.example.test/{self.bucket}/{key}"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def db():
    from app.database.engine import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_issuer():
    return FakeSessionIssuer()


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def fake_blobs():
    return FakeBlobService()


@pytest.fixture
def client(fake_issuer, fake_supabase, fake_blobs):
    from fastapi.testclient import TestClient

    from app.api.dependencies import get_session_issuer, get_supabase_client
    from app.services.blob_service import get_blob_service
    from main import app

    app.dependency_overrides[get_session_issuer] = lambda: fake_issuer
    app.dependency_overrides[get_supabase_client] = lambda: fake_supabase
    app.dependency_overrides[get_blob_service] = lambda: fake_blobs
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_profile(db):
    from app.models.profile import Profile

    def _make(role: str = "seller", whatsapp: str | None = None) -> Profile:
        profile = Profile(id=uuid.uuid4(), role=role, whatsapp=whatsapp)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make


@pytest.fixture
def admin_headers(make_profile, fake_supabase) -> dict[str, str]:
    admin = make_profile(role="admin")
    token = fake_supabase.sign_in(admin.id)
    return {"Authorization": f"Bearer {token}"}
