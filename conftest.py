import os
import shutil
import tempfile

# Settings are read at import time, so the test environment goes in first.
_TMP_DIR = tempfile.mkdtemp(prefix="ayelearn-tests-")
os.environ.update(
    {
        "DB_CONNECTION": "sqlite",
        "DB_DATABASE": ":memory:",
        "UPLOAD_DIR": os.path.join(_TMP_DIR, "storage"),
        "LOG_FILE": os.path.join(_TMP_DIR, "logs", "app.log"),
        "RATE_LIMIT_ENABLED": "false",
        "DEBUG": "false",
        "JWT_SECRET": "test-secret-key",
        "ADMIN_DEFAULT_EMAIL": "admin@example.com",
        "ADMIN_DEFAULT_PASSWORD": "Admin@123",
        "FRONTEND_URL": "http://frontend.test",
    }
)

import pytest
from fastapi.testclient import TestClient

from ayelearn.core.config import settings
from ayelearn.core.database import Base, engine
from ayelearn.utils.mailer import mailer
from main import app

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x02\x00\x00\x00\x90wS\xde\x00\x00\x00\x0cIDATx\x9cc\xf8\x0f\x00"
    b"\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture
def outbox(monkeypatch):
    """Captures outgoing emails instead of talking to SMTP."""
    sent = []

    def fake_send(to, subject, html):
        sent.append({"to": to, "subject": subject, "html": html})
        return True

    monkeypatch.setattr(mailer, "send", fake_send)
    return sent


@pytest.fixture
def client(outbox):
    Base.metadata.drop_all(bind=engine)
    shutil.rmtree(settings.upload_dir, ignore_errors=True)

    # Startup creates the tables, the default admin and the storage folders
    with TestClient(app) as test_client:
        yield test_client

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage_path():
    def resolve(relative_path):
        return os.path.join(settings.upload_dir, relative_path)

    return resolve


@pytest.fixture
def admin_token(client):
    response = client.post(
        "/api/admin/login",
        json={"email": "admin@example.com", "password": "Admin@123"},
    )
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def department(client, admin_headers):
    response = client.post(
        "/api/departments",
        json={"name": "Cardiology", "status": "active"},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def level(client, admin_headers):
    response = client.post(
        "/api/experience-levels",
        json={"name": "Beginner", "level_order": 1, "status": "active"},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def make_learner(client, admin_headers, department, level):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        payload = {
            "first_name": "Jane",
            "last_name": "Doe",
            "email": f"learner{counter['n']}@example.com",
            "gender": "Female",
            "department": department["name"],
            "experience_level": level["name"],
            "password": "secret123",
        }
        payload.update(overrides)
        response = client.post("/api/learners", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _make


@pytest.fixture
def learner_headers(client):
    def _login(email, password="secret123"):
        response = client.post(
            "/api/learners/login", json={"email": email, "password": password}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture
def upload_course_file(client, admin_headers):
    def _upload(upload_type="documents", filename="notes.pdf", content=b"%PDF-1.4 test"):
        response = client.post(
            "/api/courses/upload-course-file",
            files={"file": (filename, content, "application/octet-stream")},
            data={"type": upload_type},
            headers=admin_headers,
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _upload


@pytest.fixture
def make_course(client, admin_headers, department, level):
    def _make(**overrides):
        payload = {
            "title": "Cardiac Basics",
            "department": department["name"],
            "level": level["name"],
            "overview": "Introduction to cardiology",
            "learning_objectives": ["Read an ECG"],
            "modules": [{"heading": "Module 1"}],
        }
        payload.update(overrides)
        response = client.post("/api/courses", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make
