from taskflow.models import FMSDisplayConfig


def test_designations_are_distinct_sorted_and_non_empty(client, make_user, headers_for):
    viewer = make_user("Viewer")
    make_user("Alice", designation="Store Keeper")
    make_user("Bob", designation="Accountant")
    make_user("Carol", designation="Store Keeper")
    make_user("Dave", designation="")

    response = client.get("/designations/", headers=headers_for(viewer))

    assert response.status_code == 200
    assert response.json() == {"success": True, "designations": ["Accountant", "Store Keeper"]}


def test_user_listing_is_superadmin_only(client, make_user, headers_for, admin_headers):
    member = make_user("Zed", designation="Driver")

    assert client.get("/designations/users", headers=headers_for(member)).status_code == 403

    response = client.get("/designations/users", headers=admin_headers)
    assert response.status_code == 200
    users = response.json()["users"]
    assert [u["username"] for u in users] == ["Admin", "Zed"]
    assert users[1]["designation"] == "Driver"
    assert "hashed_password" not in users[1]


def test_update_designation(client, make_user, admin_headers, db_session):
    alice = make_user("Alice", designation="Clerk")

    response = client.put(
        f"/designations/users/{alice.id}",
        json={"designation": "Purchase Executive"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["user"]["designation"] == "Purchase Executive"
    db_session.refresh(alice)
    assert alice.designation == "Purchase Executive"


def test_update_designation_without_value_clears_it(client, make_user, admin_headers):
    alice = make_user("Alice", designation="Clerk")

    response = client.put(f"/designations/users/{alice.id}", json={}, headers=admin_headers)

    assert response.json()["user"]["designation"] == ""


def test_update_designation_for_unknown_user(client, admin_headers):
    response = client.put("/designations/users/999", json={"designation": "X"}, headers=admin_headers)

    assert response.status_code == 404


def test_display_config_is_created_on_first_read(client, make_user, headers_for, db_session):
    viewer = make_user("Viewer")
    assert db_session.query(FMSDisplayConfig).count() == 0

    response = client.get("/designations/fms-display-config", headers=headers_for(viewer))

    assert response.status_code == 200
    assert response.json()["config"] == {"displayMode": "name"}
    assert db_session.query(FMSDisplayConfig).count() == 1


def test_update_display_config(client, admin_headers, db_session):
    client.get("/designations/fms-display-config", headers=admin_headers)

    response = client.put(
        "/designations/fms-display-config",
        json={"displayMode": "both"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["config"] == {"displayMode": "both"}
    assert db_session.query(FMSDisplayConfig).count() == 1
    assert client.get("/designations/fms-display-config", headers=admin_headers).json()["config"]["displayMode"] == "both"


def test_update_display_config_rejects_unknown_mode(client, admin_headers):
    response = client.put(
        "/designations/fms-display-config",
        json={"displayMode": "avatar"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert "name, designation, or both" in response.json()["detail"]


def test_update_display_config_is_superadmin_only(client, make_user, headers_for):
    member = make_user("Member")

    response = client.put(
        "/designations/fms-display-config",
        json={"displayMode": "designation"},
        headers=headers_for(member),
    )

    assert response.status_code == 403
