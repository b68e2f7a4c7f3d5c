"""Admin profile and dashboards."""

import os
from datetime import datetime, timedelta, timezone

from conftest import PNG_BYTES

from ayelearn.core.database import SessionLocal
from ayelearn.models.learner import Learner


def test_get_profile(client, admin_headers):
    response = client.get("/api/admin/profile", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "admin@example.com"
    assert "password" not in data
    assert "reset_token" not in data


def test_update_profile(client, admin_headers):
    response = client.put(
        "/api/admin/profile",
        json={"first_name": "Ada", "phone_number": "+201001234567"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["first_name"] == "Ada"
    assert data["phone_number"] == "+201001234567"
    assert data["last_name"] == "Admin"


def test_update_profile_rejects_empty_payload(client, admin_headers):
    response = client.put("/api/admin/profile", json={}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "No valid fields to update"


def test_profile_requires_admin(client, make_learner, learner_headers):
    learner = make_learner()

    response = client.get(
        "/api/admin/profile", headers=learner_headers(learner["email"])
    )

    assert response.status_code == 403


def test_upload_profile_image_replaces_previous(client, admin_headers, storage_path):
    def upload(name):
        response = client.post(
            "/api/admin/profile/upload-image",
            files={"profile_image": (name, PNG_BYTES, "image/png")},
            headers=admin_headers,
        )
        assert response.status_code == 200, response.text
        return response.json()["imagePath"]

    first = upload("one.png")
    second = upload("two.png")

    assert first.startswith("admin/") and second.startswith("admin/")
    assert not os.path.exists(storage_path(first))
    assert os.path.exists(storage_path(second))
    profile = client.get("/api/admin/profile", headers=admin_headers).json()["data"]
    assert profile["profile_image"] == second


def test_upload_profile_image_rejects_other_types(client, admin_headers):
    response = client.post(
        "/api/admin/profile/upload-image",
        files={"profile_image": ("anim.gif", b"GIF89a", "image/gif")},
        headers=admin_headers,
    )

    assert response.status_code == 400


def test_dashboard_stats(client, admin_headers, make_course, make_learner):
    active = make_learner()
    inactive = make_learner()
    client.patch(
        f"/api/learners/{inactive['id']}/status",
        json={"status": "inactive"},
        headers=admin_headers,
    )
    course = make_course(learner_ids=[active["id"], inactive["id"]])
    client.put(
        f"/api/learners/{active['id']}/courses/{course['courseId']}/progress",
        json={"completed_modules": 1, "score": 90},
        headers=admin_headers,
    )

    response = client.get("/api/admin/dashboard-stats", headers=admin_headers)

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["activeLearners"] == 1
    assert stats["totalCourses"] == 1
    assert stats["learnerGrowth"] == "+2"
    assert stats["courseGrowth"] == "+1"
    assert stats["completedAssessments"] == 1
    assert stats["assessmentRate"] == 50
    assert stats["avgScore"] == 90


def test_dashboard_summary(client, admin_headers, make_course, make_learner):
    learner = make_learner()
    make_course(learner_ids=[learner["id"]])

    response = client.get("/api/admin/dashboard", headers=admin_headers)

    data = response.json()["data"]
    assert data["total_learners"] == 1
    assert data["active_learners"] == 1
    assert data["total_courses"] == 1
    assert data["total_departments"] == 1
    assert data["total_experience_levels"] == 1
    assert data["total_assignments"] == 1
    assert [l["email"] for l in data["recent_learners"]] == [learner["email"]]
    assert data["recent_courses"][0]["title"] == "Cardiac Basics"


def test_growth_counts_only_the_last_30_days(client, admin_headers, make_learner):
    old = make_learner()
    make_learner()

    db = SessionLocal()
    try:
        db.query(Learner).filter(Learner.id == old["id"]).update(
            {"created_at": datetime.now(timezone.utc) - timedelta(days=40)}
        )
        db.commit()
    finally:
        db.close()

    stats = client.get("/api/admin/dashboard-stats", headers=admin_headers).json()["data"]

    assert stats["activeLearners"] == 2
    assert stats["learnerGrowth"] == "+1"
