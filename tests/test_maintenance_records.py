import uuid

import pytest


@pytest.fixture
def setup(create_equipment, create_type, create_spare_part, create_activity):
    equipment = create_equipment()
    oil = create_type("Oil Service")
    filter_part = create_spare_part("OF-100", "Oil filter", 12.5)
    oil_part = create_spare_part("OIL-5W30", "Engine oil", 40)
    drain = create_activity([oil["id"]], name="Drain oil")
    refill = create_activity([oil["id"]], name="Refill oil")
    return {
        "equipment": equipment,
        "type": oil,
        "parts": [filter_part, oil_part],
        "activities": [drain, refill],
    }


def record_body(setup, **overrides):
    body = {
        "equipment_id": setup["equipment"]["id"],
        "maintenance_type_id": setup["type"]["id"],
        "start_datetime": "2024-03-01T08:00:00Z",
        "observations": "Scheduled oil change",
        "mileage": 15000,
        "spare_parts": [
            {"spare_part_id": setup["parts"][0]["id"], "quantity": 1, "unit_price": 12.5},
            {"spare_part_id": setup["parts"][1]["id"], "quantity": 5},
        ],
        "activities": [
            {"activity_id": setup["activities"][0]["id"], "status": "completed"},
            {"activity_id": setup["activities"][1]["id"], "priority": "high"},
        ],
    }
    body.update(overrides)
    return body


def test_create_composite_record(client, auth_headers, setup):
    response = client.post("/api/maintenance-records", json=record_body(setup), headers=auth_headers)
    assert response.status_code == 201
    record = response.json()["data"]

    assert record["maintenance_type"]["type"] == "Oil Service"
    assert record["mileage_record"]["kilometers"] == 15000
    assert record["mileage_record"]["record_date"] == "2024-03-01"
    assert len(record["spare_parts"]) == 2
    statuses = {a["activity"]["name"]: (a["status"], a["priority"]) for a in record["activities"]}
    assert statuses == {"Drain oil": ("completed", "no"), "Refill oil": ("pending", "high")}


def test_create_reuses_mileage_of_same_day(client, auth_headers, setup):
    client.post("/api/mileage-record", json={
        "equipment_id": setup["equipment"]["id"], "record_date": "2024-03-01", "kilometers": 14900,
    }, headers=auth_headers)

    client.post("/api/maintenance-records", json=record_body(setup), headers=auth_headers)
    page = client.get("/api/mileage-record", headers=auth_headers).json()["data"]
    assert page["total"] == 1
    assert page["data"][0]["kilometers"] == 15000


def test_failed_create_leaves_nothing(client, auth_headers, setup):
    body = record_body(setup)
    body["spare_parts"].append({"spare_part_id": str(uuid.uuid4()), "quantity": 1})
    response = client.post("/api/maintenance-records", json=body, headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "SPARE_PART_NOT_FOUND"

    assert client.get("/api/mileage-record", headers=auth_headers).json()["data"]["total"] == 0
    assert client.get("/api/maintenance-records", headers=auth_headers).json()["data"]["total"] == 0


def test_duplicate_line_item_rejected(client, auth_headers, setup):
    body = record_body(setup)
    body["activities"].append({"activity_id": setup["activities"][0]["id"]})
    response = client.post("/api/maintenance-records", json=body, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_LINE_ITEM"


def test_end_must_follow_start(client, auth_headers, setup):
    body = record_body(setup, end_datetime="2024-02-28T08:00:00Z")
    response = client.post("/api/maintenance-records", json=body, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_DATETIME_RANGE"


def test_update_line_items_and_mileage(client, auth_headers, setup):
    record = client.post("/api/maintenance-records", json=record_body(setup), headers=auth_headers).json()["data"]
    mileage_id = record["mileage_record_id"]

    response = client.put(f"/api/maintenance-records/{record['id']}", json={
        "mileage": 15100,
        "mileage_record_id": mileage_id,
        "spare_parts": [{"spare_part_id": setup["parts"][1]["id"], "quantity": 4}],
        "activities": [{"activity_id": setup["activities"][1]["id"], "status": "completed", "priority": "high"}],
    }, headers=auth_headers)
    assert response.status_code == 200
    updated = response.json()["data"]

    assert updated["mileage_record_id"] == mileage_id
    assert updated["mileage_record"]["kilometers"] == 15100
    assert [(p["spare_part_id"], p["quantity"]) for p in updated["spare_parts"]] == [(setup["parts"][1]["id"], 4)]
    assert [(a["activity_id"], a["status"]) for a in updated["activities"]] == [
        (setup["activities"][1]["id"], "completed")
    ]


def test_update_without_lists_keeps_line_items(client, auth_headers, setup):
    record = client.post("/api/maintenance-records", json=record_body(setup), headers=auth_headers).json()["data"]
    response = client.put(f"/api/maintenance-records/{record['id']}", json={"observations": "Done early"},
                          headers=auth_headers)
    updated = response.json()["data"]
    assert updated["observations"] == "Done early"
    assert len(updated["spare_parts"]) == 2
    assert len(updated["activities"]) == 2


def test_complete_once(client, auth_headers, setup):
    record = client.post("/api/maintenance-records", json=record_body(setup), headers=auth_headers).json()["data"]

    response = client.post(f"/api/maintenance-records/{record['id']}/complete",
                           json={"end_datetime": "2024-03-01T12:00:00Z"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["end_datetime"].startswith("2024-03-01T12:00:00")

    response = client.post(f"/api/maintenance-records/{record['id']}/complete", headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "MAINTENANCE_RECORD_COMPLETED"


def test_complete_defaults_to_now(client, auth_headers, setup):
    record = client.post("/api/maintenance-records", json=record_body(setup), headers=auth_headers).json()["data"]
    response = client.post(f"/api/maintenance-records/{record['id']}/complete", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["end_datetime"] is not None


def test_by_equipment_and_ownership(client, auth_headers, other_headers, setup):
    record = client.post("/api/maintenance-records", json=record_body(setup), headers=auth_headers).json()["data"]

    page = client.get(f"/api/maintenance-records/by-equipment/{setup['equipment']['id']}?search=oil",
                      headers=auth_headers).json()["data"]
    assert page["total"] == 1

    response = client.get(f"/api/maintenance-records/{record['id']}", headers=other_headers)
    assert response.status_code == 403


def test_delete_record_frees_catalog(client, auth_headers, setup):
    record = client.post("/api/maintenance-records", json=record_body(setup), headers=auth_headers).json()["data"]
    part_id = setup["parts"][0]["id"]

    response = client.delete(f"/api/spare-parts/{part_id}", headers=auth_headers)
    assert response.status_code == 409

    assert client.delete(f"/api/maintenance-records/{record['id']}", headers=auth_headers).status_code == 200
    assert client.delete(f"/api/spare-parts/{part_id}", headers=auth_headers).status_code == 200


def test_with_records_filters(client, auth_headers, setup, create_equipment):
    client.post("/api/maintenance-records", json=record_body(setup), headers=auth_headers)
    create_equipment()

    page = client.get("/api/equipments/with-records", headers=auth_headers).json()["data"]
    assert page["total"] == 2

    page = client.get("/api/equipments/with-records?byStatus=pending&byPriority=high",
                      headers=auth_headers).json()["data"]
    assert page["total"] == 1
    nested = page["data"][0]["maintenance_records"]
    assert nested["total"] == 1
    assert page["data"][0]["mileage_records"]["total"] == 1

    page = client.get("/api/equipments/with-records?byStatus=completed&byPriority=high",
                      headers=auth_headers).json()["data"]
    assert page["total"] == 0

    page = client.post("/api/equipments/with-records", json={"byStatus": ["pending"], "limit": 5},
                       headers=auth_headers).json()["data"]
    assert page["total"] == 1

    response = client.get("/api/equipments/with-records?sortBy=color", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_SORT_FIELD"

    response = client.get("/api/equipments/with-records?byStatus=done", headers=auth_headers)
    assert response.status_code == 400


def test_with_pending_records(client, auth_headers, setup):
    record = client.post("/api/maintenance-records", json=record_body(setup), headers=auth_headers).json()["data"]
    page = client.get("/api/equipments/with-pending-records", headers=auth_headers).json()["data"]
    assert page["total"] == 1

    client.put(f"/api/maintenance-records/{record['id']}", json={
        "activities": [{"activity_id": a["id"], "status": "completed"} for a in setup["activities"]],
    }, headers=auth_headers)
    page = client.get("/api/equipments/with-pending-records", headers=auth_headers).json()["data"]
    assert page["total"] == 0


def test_moving_record_to_other_equipment_moves_mileage(client, auth_headers, setup, create_equipment):
    record = client.post("/api/maintenance-records", json=record_body(setup), headers=auth_headers).json()["data"]
    other = create_equipment()

    response = client.put(f"/api/maintenance-records/{record['id']}", json={"equipment_id": other["id"]},
                          headers=auth_headers)
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["equipment_id"] == other["id"]
    assert updated["mileage_record"]["equipment_id"] == other["id"]
    assert updated["mileage_record"]["record_date"] == "2024-03-01"
    assert updated["mileage_record"]["kilometers"] == 15000


def test_changing_start_date_moves_mileage(client, auth_headers, setup):
    record = client.post("/api/maintenance-records", json=record_body(setup), headers=auth_headers).json()["data"]

    response = client.put(f"/api/maintenance-records/{record['id']}",
                          json={"start_datetime": "2024-03-05T08:00:00Z"}, headers=auth_headers)
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["mileage_record_id"] != record["mileage_record_id"]
    assert updated["mileage_record"]["equipment_id"] == setup["equipment"]["id"]
    assert updated["mileage_record"]["record_date"] == "2024-03-05"
    assert updated["mileage_record"]["kilometers"] == 15000


def test_same_day_time_change_keeps_mileage(client, auth_headers, setup):
    record = client.post("/api/maintenance-records", json=record_body(setup), headers=auth_headers).json()["data"]

    response = client.put(f"/api/maintenance-records/{record['id']}",
                          json={"start_datetime": "2024-03-01T10:30:00Z"}, headers=auth_headers)
    assert response.json()["data"]["mileage_record_id"] == record["mileage_record_id"]
