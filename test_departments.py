"""Department CRUD and reference rules."""


def test_create_department_then_duplicate_name_fails(client, admin_headers):
    payload = {"name": "Cardiology", "status": "active"}

    first = client.post("/api/departments", json=payload, headers=admin_headers)
    assert first.status_code == 201
    assert first.json()["success"] is True
    assert first.json()["data"]["name"] == "Cardiology"

    second = client.post("/api/departments", json=payload, headers=admin_headers)
    assert second.status_code == 400
    assert second.json() == {
        "success": False,
        "message": "Department with this name already exists",
    }


def test_department_name_rules(client, admin_headers):
    response = client.post(
        "/api/departments",
        json={"name": "Bad/Name!", "status": "archived"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"name", "status"}


def test_department_name_allows_hyphen_and_ampersand(client, admin_headers):
    response = client.post(
        "/api/departments",
        json={"name": "Ear-Nose & Throat 2", "status": "active"},
        headers=admin_headers,
    )

    assert response.status_code == 201


def test_list_departments_ordered_by_name_and_filtered(client, admin_headers):
    for name, status in [("Radiology", "active"), ("Anatomy", "inactive"), ("Neurology", "active")]:
        client.post(
            "/api/departments",
            json={"name": name, "status": status},
            headers=admin_headers,
        )

    everything = client.get("/api/departments", headers=admin_headers).json()["data"]
    assert [d["name"] for d in everything] == ["Anatomy", "Neurology", "Radiology"]

    active = client.get(
        "/api/departments", params={"status": "active"}, headers=admin_headers
    ).json()["data"]
    assert [d["name"] for d in active] == ["Neurology", "Radiology"]


def test_get_missing_department_is_404(client, admin_headers):
    response = client.get("/api/departments/999", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Department not found"


def test_update_department_rejects_name_of_another(client, admin_headers, department):
    other = client.post(
        "/api/departments",
        json={"name": "Oncology", "status": "active"},
        headers=admin_headers,
    ).json()["data"]

    response = client.put(
        f"/api/departments/{other['id']}",
        json={"name": "Cardiology", "status": "active"},
        headers=admin_headers,
    )

    assert response.status_code == 400


def test_rename_propagates_to_learners_and_courses(
    client, admin_headers, department, make_learner, make_course
):
    learner = make_learner()
    created = make_course()

    response = client.put(
        f"/api/departments/{department['id']}",
        json={"name": "Heart Care", "status": "active", "description": "Renamed"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["description"] == "Renamed"

    learner_after = client.get(
        f"/api/learners/{learner['id']}", headers=admin_headers
    ).json()["data"]
    course_after = client.get(
        f"/api/courses/{created['courseId']}", headers=admin_headers
    ).json()["data"]
    assert learner_after["department"] == "Heart Care"
    assert course_after["department"] == "Heart Care"


def test_delete_department_in_use_is_refused(
    client, admin_headers, department, make_learner
):
    make_learner()

    response = client.delete(
        f"/api/departments/{department['id']}", headers=admin_headers
    )

    assert response.status_code == 400
    assert "assigned to 1 learner" in response.json()["message"]


def test_delete_unused_department(client, admin_headers, department):
    response = client.delete(
        f"/api/departments/{department['id']}", headers=admin_headers
    )

    assert response.status_code == 200
    assert client.get(
        f"/api/departments/{department['id']}", headers=admin_headers
    ).status_code == 404
