import uuid


def test_root_and_nested_paths(client, auth_headers, create_type):
    engine = create_type("Engine")
    oil = create_type("Oil", parent_id=engine["id"])
    filt = create_type("Filter", parent_id=oil["id"])

    assert (engine["level"], engine["path"]) == (0, "Engine")
    assert (oil["level"], oil["path"]) == (1, "Engine/Oil")
    assert (filt["level"], filt["path"]) == (2, "Engine/Oil/Filter")


def test_rename_repaths_subtree(client, auth_headers, create_type):
    engine = create_type("Engine")
    oil = create_type("Oil", parent_id=engine["id"])
    filt = create_type("Filter", parent_id=oil["id"])

    response = client.put(f"/api/maintenance-type/{engine['id']}", json={"type": "Motor"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["path"] == "Motor"

    response = client.get(f"/api/maintenance-type/{filt['id']}", headers=auth_headers)
    assert response.json()["data"]["path"] == "Motor/Oil/Filter"


def test_move_to_root_with_explicit_null(client, auth_headers, create_type):
    engine = create_type("Engine")
    oil = create_type("Oil", parent_id=engine["id"])
    filt = create_type("Filter", parent_id=oil["id"])

    response = client.put(f"/api/maintenance-type/{oil['id']}", json={"parent_id": None}, headers=auth_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["parent_id"] is None
    assert (data["level"], data["path"]) == (0, "Oil")

    child = client.get(f"/api/maintenance-type/{filt['id']}", headers=auth_headers).json()["data"]
    assert (child["level"], child["path"]) == (1, "Oil/Filter")


def test_move_under_descendant_is_rejected(client, auth_headers, create_type):
    engine = create_type("Engine")
    oil = create_type("Oil", parent_id=engine["id"])
    filt = create_type("Filter", parent_id=oil["id"])

    response = client.put(
        f"/api/maintenance-type/{engine['id']}", json={"parent_id": filt["id"]}, headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json()["code"] == "MAINTENANCE_TYPE_CYCLE"

    response = client.put(
        f"/api/maintenance-type/{engine['id']}", json={"parent_id": engine["id"]}, headers=auth_headers
    )
    assert response.json()["code"] == "MAINTENANCE_TYPE_CYCLE"


def test_delete_with_children_fails_and_leaf_succeeds(client, auth_headers, create_type):
    engine = create_type("Engine")
    oil = create_type("Oil", parent_id=engine["id"])

    response = client.delete(f"/api/maintenance-type/{engine['id']}", headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "MAINTENANCE_TYPE_HAS_CHILDREN"

    response = client.delete(f"/api/maintenance-type/{oil['id']}", headers=auth_headers)
    assert response.status_code == 200
    response = client.delete(f"/api/maintenance-type/{engine['id']}", headers=auth_headers)
    assert response.status_code == 200


def test_delete_type_used_by_stage_fails(client, auth_headers, create_type, create_plan, create_stage):
    oil = create_type("Oil")
    plan = create_plan("Light vehicles")
    create_stage(plan["id"], oil["id"], 5000, 90)

    response = client.delete(f"/api/maintenance-type/{oil['id']}", headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "MAINTENANCE_TYPE_IN_USE"


def test_parent_must_belong_to_user(client, other_headers, create_type):
    engine = create_type("Engine")
    response = client.post(
        "/api/maintenance-type", json={"type": "Oil", "parent_id": engine["id"]}, headers=other_headers
    )
    assert response.status_code == 403
    assert response.json()["code"] == "ACCESS_DENIED"


def test_unknown_parent_is_404(client, auth_headers):
    response = client.post(
        "/api/maintenance-type", json={"type": "Oil", "parent_id": str(uuid.uuid4())}, headers=auth_headers
    )
    assert response.status_code == 404
    assert response.json()["code"] == "MAINTENANCE_TYPE_NOT_FOUND"


def test_tree_and_children(client, auth_headers, create_type):
    engine = create_type("Engine")
    create_type("Oil", parent_id=engine["id"])
    create_type("Coolant", parent_id=engine["id"])
    create_type("Brakes")

    tree = client.get("/api/maintenance-type/tree", headers=auth_headers).json()["data"]
    assert [node["type"] for node in tree] == ["Brakes", "Engine"]
    engine_node = tree[1]
    assert [child["type"] for child in engine_node["children"]] == ["Coolant", "Oil"]

    children = client.get(f"/api/maintenance-type/{engine['id']}/children", headers=auth_headers).json()["data"]
    assert [child["type"] for child in children] == ["Coolant", "Oil"]

    page = client.get("/api/maintenance-type?limit=0", headers=auth_headers).json()["data"]
    assert page["total"] == 4
    assert page["pages"] == 1
