"""Admin and learner authentication flows."""

from datetime import datetime, timedelta, timezone

from ayelearn.core.database import SessionLocal
from ayelearn.core.security import jwt_manager
from ayelearn.models.admin import Admin


def test_default_admin_can_log_in(client):
    response = client.post(
        "/api/admin/login",
        json={"email": "admin@example.com", "password": "Admin@123"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["token"]
    assert body["data"]["email"] == "admin@example.com"
    assert body["data"]["first_name"] == "Super"


def test_admin_login_rejects_bad_password(client):
    response = client.post(
        "/api/admin/login",
        json={"email": "admin@example.com", "password": "wrong"},
    )

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}


def test_login_requires_valid_email(client):
    response = client.post(
        "/api/admin/login", json={"email": "not-an-email", "password": "x"}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert [error["field"] for error in body["errors"]] == ["email"]


def test_protected_route_without_token_is_401(client):
    response = client.get("/api/departments")

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_garbage_token_is_401(client):
    response = client.get(
        "/api/departments", headers={"Authorization": "Bearer not.a.token"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_expired_token_is_401(client):
    db = SessionLocal()
    try:
        admin = db.query(Admin).first()
        token = jwt_manager.create_admin_token(
            admin, custom_expiration=timedelta(seconds=-10)
        )
    finally:
        db.close()

    response = client.get(
        "/api/admin/profile", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Token expired"


def test_learner_token_cannot_use_admin_routes(client, make_learner, learner_headers):
    learner = make_learner()
    headers = learner_headers(learner["email"])

    response = client.get("/api/departments", headers=headers)

    assert response.status_code == 403
    assert response.json()["message"] == "Admin access required"


def test_admin_token_cannot_use_learner_only_routes(client, admin_headers):
    response = client.get("/api/learners/me", headers=admin_headers)

    assert response.status_code == 403


def test_learner_login_and_me(client, make_learner, learner_headers):
    learner = make_learner(email="Mixed.Case@Example.com")
    assert learner["email"] == "mixed.case@example.com"

    headers = learner_headers("mixed.case@example.com")
    response = client.get("/api/learners/me", headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["id"] == learner["id"]
    assert "password" not in response.json()["data"]


def test_inactive_learner_cannot_log_in(client, admin_headers, make_learner):
    learner = make_learner(status="inactive")

    response = client.post(
        "/api/learners/login",
        json={"email": learner["email"], "password": "secret123"},
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Account is inactive"


def test_learner_without_password_cannot_log_in(client, make_learner):
    learner = make_learner(password=None)

    response = client.post(
        "/api/learners/login",
        json={"email": learner["email"], "password": "anything"},
    )

    assert response.status_code == 401


def test_admin_password_reset_flow(client, outbox):
    response = client.post(
        "/api/admin/forgot-password", json={"email": "admin@example.com"}
    )
    assert response.status_code == 200
    assert len(outbox) == 1
    assert outbox[0]["to"] == "admin@example.com"

    db = SessionLocal()
    try:
        token = db.query(Admin).first().reset_token
    finally:
        db.close()
    assert f"http://frontend.test/reset-password/{token}" in outbox[0]["html"]

    response = client.post(
        f"/api/admin/reset-password/{token}", json={"password": "NewPass1"}
    )
    assert response.status_code == 200

    # Token is single use
    response = client.post(
        f"/api/admin/reset-password/{token}", json={"password": "Another1"}
    )
    assert response.status_code == 400

    response = client.post(
        "/api/admin/login",
        json={"email": "admin@example.com", "password": "NewPass1"},
    )
    assert response.status_code == 200


def test_expired_reset_token_is_rejected(client, outbox):
    client.post("/api/admin/forgot-password", json={"email": "admin@example.com"})

    db = SessionLocal()
    try:
        admin = db.query(Admin).first()
        token = admin.reset_token
        admin.reset_token_expires = datetime.now(timezone.utc) - timedelta(minutes=1)
        db.commit()
    finally:
        db.close()

    response = client.post(
        f"/api/admin/reset-password/{token}", json={"password": "NewPass1"}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid or expired reset token"


def test_forgot_password_unknown_email_is_404(client, outbox):
    response = client.post(
        "/api/admin/forgot-password", json={"email": "nobody@example.com"}
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Email not found"
    assert outbox == []


def test_forgot_password_mail_failure_clears_token(client, monkeypatch):
    from ayelearn.utils.mailer import mailer

    monkeypatch.setattr(mailer, "send", lambda to, subject, html: False)

    response = client.post(
        "/api/admin/forgot-password", json={"email": "admin@example.com"}
    )

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to send reset email"
    db = SessionLocal()
    try:
        assert db.query(Admin).first().reset_token is None
    finally:
        db.close()


def test_reset_password_enforces_min_length(client):
    response = client.post("/api/admin/reset-password/abc", json={"password": "123"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "password"


def test_learner_password_reset_link_targets_learner_portal(
    client, make_learner, outbox
):
    learner = make_learner(password=None)

    response = client.post(
        "/api/learners/forgot-password", json={"email": learner["email"]}
    )

    assert response.status_code == 200
    assert "http://frontend.test/learner/reset-password/" in outbox[0]["html"]


def test_unknown_route_returns_envelope(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Route not found"}


def test_health_and_root(client):
    assert client.get("/").json()["app_name"] == "ayeLearn"

    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["database"] == "healthy"
    assert "X-Request-ID" in response.headers
    assert "X-Process-Time" in response.headers
