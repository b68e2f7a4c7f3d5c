"""Listing of course assignments across all courses."""


def test_lists_assignments_with_offset_pagination(
    client, admin_headers, make_course, make_learner
):
    first, second, third = make_learner(), make_learner(), make_learner()
    course = make_course(learner_ids=[first["id"], second["id"], third["id"]])

    response = client.get(
        "/api/course-learners", params={"limit": 2, "offset": 0}, headers=admin_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["pagination"] == {"total": 3, "limit": 2, "offset": 0}
    assert len(body["data"]) == 2
    row = body["data"][0]
    assert row["course_id"] == course["courseId"]
    assert row["course_title"] == "Cardiac Basics"
    assert row["status"] == "not_started"
    assert row["progress_percentage"] == 0

    rest = client.get(
        "/api/course-learners", params={"limit": 2, "offset": 2}, headers=admin_headers
    ).json()
    assert len(rest["data"]) == 1
    seen = {r["learner_id"] for r in body["data"] + rest["data"]}
    assert seen == {first["id"], second["id"], third["id"]}


def test_filters_by_course_learner_and_search(
    client, admin_headers, make_course, make_learner
):
    alice = make_learner(first_name="Alice")
    bob = make_learner(first_name="Bob")
    heart = make_course(title="Heart", learner_ids=[alice["id"], bob["id"]])
    make_course(title="Lungs", learner_ids=[alice["id"]])

    def rows(**params):
        response = client.get("/api/course-learners", params=params, headers=admin_headers)
        assert response.status_code == 200
        return response.json()["data"]

    assert len(rows(course_id=heart["courseId"])) == 2
    assert {r["course_title"] for r in rows(learner_id=alice["id"])} == {
        "Heart",
        "Lungs",
    }
    assert [r["learner_first_name"] for r in rows(search="bob")] == ["Bob"]
    assert len(rows(search="lungs")) == 1


def test_limit_is_bounded(client, admin_headers):
    response = client.get(
        "/api/course-learners", params={"limit": 0}, headers=admin_headers
    )

    assert response.status_code == 400


def test_requires_admin(client, make_learner, learner_headers):
    learner = make_learner()

    response = client.get("/api/course-learners", headers=learner_headers(learner["email"]))

    assert response.status_code == 403
