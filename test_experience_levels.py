"""Experience level CRUD."""


def _create(client, headers, name, order, status="active"):
    return client.post(
        "/api/experience-levels",
        json={"name": name, "level_order": order, "status": status},
        headers=headers,
    )


def test_levels_are_listed_by_rank(client, admin_headers):
    _create(client, admin_headers, "Advanced", 3)
    _create(client, admin_headers, "Beginner", 1)
    _create(client, admin_headers, "Intermediate", 2, status="inactive")

    levels = client.get("/api/experience-levels", headers=admin_headers).json()["data"]
    assert [level["name"] for level in levels] == ["Beginner", "Intermediate", "Advanced"]

    active = client.get(
        "/api/experience-levels", params={"status": "active"}, headers=admin_headers
    ).json()["data"]
    assert [level["name"] for level in active] == ["Beginner", "Advanced"]


def test_duplicate_name_and_order_are_rejected(client, admin_headers):
    assert _create(client, admin_headers, "Beginner", 1).status_code == 201

    same_name = _create(client, admin_headers, "Beginner", 2)
    assert same_name.status_code == 400
    assert same_name.json()["message"] == "Experience level with this name already exists"

    same_order = _create(client, admin_headers, "Expert", 1)
    assert same_order.status_code == 400
    assert same_order.json()["message"] == "Experience level with this order already exists"


def test_level_order_bounds(client, admin_headers):
    response = _create(client, admin_headers, "Legend", 101)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "level_order"


def test_level_name_rejects_symbols(client, admin_headers):
    response = _create(client, admin_headers, "Pro & Up", 5)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "name"


def test_update_level_keeps_its_own_order(client, admin_headers, level):
    response = client.put(
        f"/api/experience-levels/{level['id']}",
        json={"name": "Novice", "level_order": 1, "status": "active"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Novice"


def test_delete_level_in_use_is_refused(client, admin_headers, level, make_learner):
    make_learner()

    response = client.delete(
        f"/api/experience-levels/{level['id']}", headers=admin_headers
    )

    assert response.status_code == 400


def test_delete_missing_level_is_404(client, admin_headers):
    response = client.delete("/api/experience-levels/42", headers=admin_headers)

    assert response.status_code == 404
