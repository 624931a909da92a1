import uuid


def test_pagination_metadata(client, auth_headers, create_equipment):
    for _ in range(25):
        create_equipment()

    page = client.get("/api/equipments?limit=10&offset=0", headers=auth_headers).json()["data"]
    assert page["total"] == 25
    assert page["pages"] == 3
    assert len(page["data"]) == 10

    page = client.get("/api/equipments?limit=10&offset=20", headers=auth_headers).json()["data"]
    assert len(page["data"]) == 5

    page = client.get("/api/equipments?limit=0", headers=auth_headers).json()["data"]
    assert page["pages"] == 1
    assert len(page["data"]) == 25


def test_limit_bounds(client, auth_headers):
    assert client.get("/api/equipments?limit=101", headers=auth_headers).status_code == 400
    assert client.get("/api/equipments?offset=-1", headers=auth_headers).status_code == 400


def test_list_is_scoped_to_user(client, auth_headers, other_headers, create_equipment):
    create_equipment()
    page = client.get("/api/equipments", headers=other_headers).json()["data"]
    assert page["total"] == 0


def test_license_plate_and_code_unique(client, auth_headers, other_headers, create_equipment):
    create_equipment(license_plate="XYZ-1", code="C-1")

    response = client.post("/api/equipments", json={"type": "Van", "license_plate": "XYZ-1", "code": "C-2"},
                           headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "LICENSE_PLATE_EXISTS"

    response = client.post("/api/equipments", json={"type": "Van", "license_plate": "XYZ-2", "code": "C-1"},
                           headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "EQUIPMENT_CODE_EXISTS"

    response = client.post("/api/equipments", json={"type": "Van", "license_plate": "XYZ-1", "code": "C-1"},
                           headers=other_headers)
    assert response.status_code == 201


def test_get_update_and_ownership(client, auth_headers, other_headers, create_equipment):
    equipment = create_equipment()

    response = client.put(f"/api/equipments/{equipment['id']}", json={"type": "Excavator"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["type"] == "Excavator"

    response = client.get(f"/api/equipments/{equipment['id']}", headers=other_headers)
    assert response.status_code == 403
    assert response.json()["code"] == "ACCESS_DENIED"

    response = client.get(f"/api/equipments/{uuid.uuid4()}", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "EQUIPMENT_NOT_FOUND"


def test_assigning_unknown_plan_fails(client, auth_headers, create_equipment):
    equipment = create_equipment()
    response = client.put(f"/api/equipments/{equipment['id']}", json={"maintenance_plan_id": str(uuid.uuid4())},
                          headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "MAINTENANCE_PLAN_NOT_FOUND"


def test_delete_blocked_by_records(client, auth_headers, create_equipment):
    equipment = create_equipment()
    assert client.get(f"/api/equipments/has-records/{equipment['id']}",
                      headers=auth_headers).json()["data"]["has_records"] is False

    client.post("/api/mileage-record", json={
        "equipment_id": equipment["id"], "record_date": "2024-01-10", "kilometers": 1500,
    }, headers=auth_headers)
    assert client.get(f"/api/equipments/has-records/{equipment['id']}",
                      headers=auth_headers).json()["data"]["has_records"] is True

    response = client.delete(f"/api/equipments/{equipment['id']}", headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "EQUIPMENT_HAS_RECORDS"


def test_delete_equipment(client, auth_headers, create_equipment):
    equipment = create_equipment()
    response = client.delete(f"/api/equipments/{equipment['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["id"] == equipment["id"]


def test_equipment_maintenance_plans(client, auth_headers, create_equipment, create_plan, create_type, create_stage):
    oil = create_type("Oil Service")
    plan = create_plan("Oil plan")
    create_stage(plan["id"], oil["id"], 5000, 90)
    create_stage(plan["id"], oil["id"], 1000, 30)
    create_equipment(maintenance_plan_id=plan["id"])
    create_equipment()

    page = client.get("/api/equipments/maintenance-plans", headers=auth_headers).json()["data"]
    assert page["total"] == 2
    with_plan = [e for e in page["data"] if e["maintenance_plan"]]
    assert len(with_plan) == 1
    assert with_plan[0]["maintenance_plan"]["name"] == "Oil plan"
    assert [s["stage_index"] for s in with_plan[0]["stages"]] == [1, 2]
    assert [s["kilometers"] for s in with_plan[0]["stages"]] == [1000, 5000]
