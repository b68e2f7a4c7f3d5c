"""Learner management endpoints."""

import os
from datetime import date, timedelta

from conftest import PNG_BYTES

from ayelearn.core.config import settings
from ayelearn.core.database import SessionLocal
from ayelearn.models.learner import Learner
from ayelearn.utils.file_upload import file_upload_service


def test_create_learner(client, make_learner):
    learner = make_learner(phone="+12345678901", date_of_birth="1990-05-17")

    assert learner["first_name"] == "Jane"
    assert learner["status"] == "active"
    assert learner["phone"] == "+12345678901"
    assert learner["date_of_birth"] == "1990-05-17"


def test_create_learner_field_errors(client, admin_headers, department, level):
    response = client.post(
        "/api/learners",
        json={
            "first_name": "J4ne",
            "last_name": "D",
            "email": "nope",
            "phone": "12345",
            "date_of_birth": (date.today() + timedelta(days=1)).isoformat(),
            "gender": "Unknown",
            "department": department["name"],
            "experience_level": level["name"],
        },
        headers=admin_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    errors = {error["field"]: error["message"] for error in body["errors"]}
    assert set(errors) == {
        "first_name",
        "last_name",
        "email",
        "phone",
        "date_of_birth",
        "gender",
    }
    assert errors["first_name"] == "First name can only contain letters and spaces"
    assert errors["date_of_birth"] == "Date of birth cannot be in the future"
    assert errors["phone"] == "Phone number must be at least 10 digits long"


def test_birth_date_before_1900_is_rejected(client, admin_headers, department, level):
    response = client.post(
        "/api/learners",
        json={
            "first_name": "Old",
            "last_name": "Timer",
            "email": "old@example.com",
            "gender": "Other",
            "department": department["name"],
            "experience_level": level["name"],
            "date_of_birth": "1899-12-31",
        },
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "date_of_birth", "message": "Date of birth cannot be before 1900"}
    ]


def test_unknown_department_is_a_field_error(client, admin_headers, make_learner):
    response = client.post(
        "/api/learners",
        json={
            "first_name": "Sam",
            "last_name": "Lee",
            "email": "sam@example.com",
            "gender": "Male",
            "department": "Astrology",
            "experience_level": "Beginner",
        },
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "department", "message": "Please select a valid Department"}
    ]


def test_duplicate_email_is_rejected(client, admin_headers, make_learner):
    learner = make_learner()

    response = client.post(
        "/api/learners",
        json={
            "first_name": "Other",
            "last_name": "Person",
            "email": learner["email"],
            "gender": "Male",
            "department": learner["department"],
            "experience_level": learner["experience_level"],
        },
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Email already exists"


def test_list_learners_sort_search_and_limit(client, admin_headers, make_learner):
    make_learner(first_name="Alice", email="alice@example.com")
    make_learner(first_name="Bob", email="bob@example.com")
    make_learner(first_name="Carol", email="carol@example.com")

    response = client.get(
        "/api/learners",
        params={"sort": "first_name", "order": "asc"},
        headers=admin_headers,
    )
    assert [l["first_name"] for l in response.json()["data"]] == ["Alice", "Bob", "Carol"]

    limited = client.get(
        "/api/learners",
        params={"sort": "first_name", "order": "desc", "limit": 1},
        headers=admin_headers,
    ).json()
    assert [l["first_name"] for l in limited["data"]] == ["Carol"]
    assert limited["total"] == 3

    found = client.get(
        "/api/learners", params={"search": "bob"}, headers=admin_headers
    ).json()["data"]
    assert [l["email"] for l in found] == ["bob@example.com"]


def test_unknown_sort_column_falls_back(client, admin_headers, make_learner):
    make_learner()

    response = client.get(
        "/api/learners",
        params={"sort": "password; DROP TABLE learners"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert len(response.json()["data"]) == 1


def test_status_toggle_is_reflected_in_list(client, admin_headers, make_learner):
    learner = make_learner()

    toggled = client.patch(
        f"/api/learners/{learner['id']}/status", headers=admin_headers
    )
    assert toggled.status_code == 200
    assert toggled.json()["data"]["status"] == "inactive"

    inactive = client.get(
        "/api/learners", params={"status": "inactive"}, headers=admin_headers
    ).json()["data"]
    assert [l["id"] for l in inactive] == [learner["id"]]

    toggled_back = client.patch(
        f"/api/learners/{learner['id']}/status", json={}, headers=admin_headers
    )
    assert toggled_back.json()["data"]["status"] == "active"

    active = client.get(
        "/api/learners", params={"status": "active"}, headers=admin_headers
    ).json()["data"]
    assert [l["id"] for l in active] == [learner["id"]]


def test_status_can_be_set_explicitly(client, admin_headers, make_learner):
    learner = make_learner()

    response = client.patch(
        f"/api/learners/{learner['id']}/status",
        json={"status": "active"},
        headers=admin_headers,
    )

    assert response.json()["data"]["status"] == "active"


def test_update_applies_only_given_fields(client, admin_headers, make_learner):
    learner = make_learner(phone="1234567890")

    response = client.put(
        f"/api/learners/{learner['id']}",
        json={"last_name": "Smith", "phone": None},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["last_name"] == "Smith"
    assert data["first_name"] == "Jane"
    assert data["phone"] == "1234567890"


def test_update_with_nothing_is_rejected(client, admin_headers, make_learner):
    learner = make_learner()

    response = client.put(
        f"/api/learners/{learner['id']}", json={}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["message"] == "No valid fields to update"


def test_learner_can_edit_self_but_not_status(client, make_learner, learner_headers):
    learner = make_learner()
    headers = learner_headers(learner["email"])

    ok = client.put(
        f"/api/learners/{learner['id']}", json={"first_name": "Janet"}, headers=headers
    )
    assert ok.status_code == 200
    assert ok.json()["data"]["first_name"] == "Janet"

    denied = client.put(
        f"/api/learners/{learner['id']}", json={"status": "inactive"}, headers=headers
    )
    assert denied.status_code == 403


def test_learner_cannot_read_another_learner(client, make_learner, learner_headers):
    first = make_learner()
    second = make_learner()

    response = client.get(
        f"/api/learners/{second['id']}", headers=learner_headers(first["email"])
    )

    assert response.status_code == 403


def test_avatar_upload_and_replace(client, admin_headers, make_learner, storage_path):
    learner = make_learner()

    first = client.post(
        f"/api/learners/{learner['id']}/avatar",
        files={"avatar": ("me.png", PNG_BYTES, "image/png")},
        headers=admin_headers,
    )
    assert first.status_code == 200
    first_path = first.json()["data"]["avatar_url"]
    assert first_path.startswith("learners/")
    assert os.path.isfile(storage_path(first_path))

    second = client.post(
        f"/api/learners/{learner['id']}/avatar",
        files={"avatar": ("me2.jpg", PNG_BYTES, "image/jpeg")},
        headers=admin_headers,
    )
    second_path = second.json()["data"]["avatar_url"]
    assert second_path != first_path
    assert not os.path.exists(storage_path(first_path))

    served = client.get(f"/storage/{second_path}")
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_upload_image_rejects_other_types(client, admin_headers):
    response = client.post(
        "/api/learners/upload-image",
        files={"avatar": ("doc.gif", b"GIF89a", "image/gif")},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_upload_image_returns_path(client, admin_headers):
    response = client.post(
        "/api/learners/upload-image",
        files={"avatar": ("pic.png", PNG_BYTES, "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["imagePath"].startswith("learners/")


def test_delete_learner_removes_assignments_and_avatar(
    client, admin_headers, make_learner, make_course, storage_path
):
    learner = make_learner()
    avatar = client.post(
        f"/api/learners/{learner['id']}/avatar",
        files={"avatar": ("me.png", PNG_BYTES, "image/png")},
        headers=admin_headers,
    ).json()["data"]["avatar_url"]
    course = make_course(learner_ids=[learner["id"]])

    response = client.delete(f"/api/learners/{learner['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert not os.path.exists(storage_path(avatar))
    assert client.get(
        f"/api/learners/{learner['id']}", headers=admin_headers
    ).status_code == 404
    learners = client.get(
        f"/api/courses/{course['courseId']}/learners", headers=admin_headers
    ).json()["data"]
    assert learners == []


def test_avatar_url_must_point_into_learner_storage(
    client, admin_headers, department, level
):
    payload = {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "avatar@example.com",
        "gender": "Female",
        "department": department["name"],
        "experience_level": level["name"],
    }

    outside = client.post(
        "/api/learners",
        json={**payload, "avatar_url": "../victim.txt"},
        headers=admin_headers,
    )
    assert outside.status_code == 400
    assert outside.json()["errors"][0]["field"] == "avatar_url"

    served = client.post(
        "/api/learners",
        json={**payload, "avatar_url": "/storage/learners/abc.png"},
        headers=admin_headers,
    )
    assert served.status_code == 201
    assert served.json()["data"]["avatar_url"] == "learners/abc.png"


def test_learner_cannot_set_avatar_path_directly(
    client, make_learner, learner_headers
):
    learner = make_learner()
    headers = learner_headers(learner["email"])
    url = f"/api/learners/{learner['id']}"

    traversal = client.put(url, json={"avatar_url": "../victim.txt"}, headers=headers)
    assert traversal.status_code == 400

    direct = client.put(url, json={"avatar_url": "learners/other.png"}, headers=headers)
    assert direct.status_code == 403


def test_stored_path_outside_storage_is_never_deleted(
    client, admin_headers, make_learner
):
    victim = os.path.join(os.path.dirname(settings.upload_dir), "victim.txt")
    with open(victim, "w") as f:
        f.write("keep me")
    learner = make_learner()

    db = SessionLocal()
    try:
        db.query(Learner).filter(Learner.id == learner["id"]).update(
            {"avatar_url": "../victim.txt"}
        )
        db.commit()
    finally:
        db.close()

    response = client.post(
        f"/api/learners/{learner['id']}/avatar",
        files={"avatar": ("me.png", PNG_BYTES, "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert os.path.exists(victim)
    assert file_upload_service.delete_file("../victim.txt") is False
    assert os.path.exists(victim)
