import os
import sys
import tempfile
from pathlib import Path

# Configure the app for tests before any blogapi import reads settings
_test_tmp_dir = tempfile.mkdtemp(prefix="blogapi_test_")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("UPLOAD_DIR", os.path.join(_test_tmp_dir, "uploads"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from blogapi.database import SessionLocal, engine  # noqa: E402
from blogapi.main import app  # noqa: E402
from blogapi.models import Base, User, ROLE_ADMIN  # noqa: E402
from blogapi.services.auth import get_password_hash  # noqa: E402
from blogapi.services.errors import DependencyError  # noqa: E402
from blogapi.services.media import UploadResult, get_media_storage  # noqa: E402
from blogapi.utils import generate_id  # noqa: E402


class FakeStorage:
    """Records uploads and deletions instead of calling the media service."""

    def __init__(self):
        self.uploaded = []
        self.deleted = []
        self.fail = False

    def upload(self, path):
        path = Path(path)
        assert path.exists(), "staged file must exist during upload"
        self.uploaded.append(path)
        if self.fail:
            raise DependencyError("Image upload failed: simulated outage")
        n = len(self.uploaded)
        return UploadResult(url=f"https://media.test/{n}/{path.name}", public_id=f"media/{n}")

    def delete(self, public_id, resource_type="image"):
        if public_id:
            self.deleted.append((public_id, resource_type))


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage():
    fake = FakeStorage()
    app.dependency_overrides[get_media_storage] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_media_storage, None)


@pytest.fixture
def client(storage):
    return TestClient(app)


def register(client, username, email, password="pw1234"):
    return client.post(
        "/api/auth/register",
        json={
            "username": username,
            "email": email,
            "password": password,
            "confirm_password": password,
        },
    )


def login(client, email, password="pw1234"):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def regular_user(client):
    resp = register(client, "ana", "ana@x.com")
    assert resp.status_code == 201, resp.text
    token = login(client, "ana@x.com")
    return {"id": resp.json()["id"], "token": token, "headers": auth_headers(token)}


@pytest.fixture
def admin_user(client, db):
    user = User(
        id=generate_id(),
        username="admin",
        email="admin@example.com",
        hashed_password=get_password_hash("adminpass"),
        role=ROLE_ADMIN,
        liked_items=[],
    )
    db.add(user)
    db.commit()
    token = login(client, "admin@example.com", "adminpass")
    return {"id": user.id, "token": token, "headers": auth_headers(token)}


@pytest.fixture
def published_post(client, admin_user):
    resp = client.post(
        "/api/posts",
        headers=admin_user["headers"],
        data={"title": "Hello", "content": "This is a long enough post body."},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["post"]
