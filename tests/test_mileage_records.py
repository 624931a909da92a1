from datetime import date, timedelta


def post_mileage(client, headers, equipment_id, record_date, kilometers):
    return client.post("/api/mileage-record", json={
        "equipment_id": equipment_id,
        "record_date": record_date,
        "kilometers": kilometers,
    }, headers=headers)


def test_create_then_same_date_updates(client, auth_headers, create_equipment):
    equipment = create_equipment()

    first = post_mileage(client, auth_headers, equipment["id"], "2024-02-01", 1000)
    assert first.status_code == 201

    second = post_mileage(client, auth_headers, equipment["id"], "2024-02-01", 1250.5)
    assert second.status_code == 200
    assert second.json()["success"] is True
    assert second.json()["data"]["id"] == first.json()["data"]["id"]
    assert second.json()["data"]["kilometers"] == 1250.5

    page = client.get("/api/mileage-record", headers=auth_headers).json()["data"]
    assert page["total"] == 1


def test_rejects_future_date_and_negative_kilometers(client, auth_headers, create_equipment):
    equipment = create_equipment()
    tomorrow = (date.today() + timedelta(days=1)).isoformat()

    response = post_mileage(client, auth_headers, equipment["id"], tomorrow, 100)
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"

    response = post_mileage(client, auth_headers, equipment["id"], "2024-02-01", -5)
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_KILOMETERS"


def test_equipment_of_other_user(client, other_headers, create_equipment):
    equipment = create_equipment()
    response = post_mileage(client, other_headers, equipment["id"], "2024-02-01", 100)
    assert response.status_code == 403


def test_by_equipment_daily_distance(client, auth_headers, create_equipment):
    equipment = create_equipment()
    post_mileage(client, auth_headers, equipment["id"], "2024-02-01", 1000)
    post_mileage(client, auth_headers, equipment["id"], "2024-02-03", 1180)
    post_mileage(client, auth_headers, equipment["id"], "2024-02-02", 1100)

    page = client.get(f"/api/mileage-record/by-equipment/{equipment['id']}", headers=auth_headers).json()["data"]
    assert page["equipment_id"] == equipment["id"]
    assert page["total"] == 3
    assert [r["record_date"] for r in page["data"]] == ["2024-02-03", "2024-02-02", "2024-02-01"]
    assert [r["daily_distance"] for r in page["data"]] == [80, 100, 0]

    page = client.get(f"/api/mileage-record/by-equipment/{equipment['id']}?limit=1&offset=1",
                      headers=auth_headers).json()["data"]
    assert page["pages"] == 3
    assert page["data"][0]["daily_distance"] == 100


def test_by_date_range(client, auth_headers, create_equipment):
    truck = create_equipment()
    van = create_equipment()
    post_mileage(client, auth_headers, truck["id"], "2024-01-10", 100)
    post_mileage(client, auth_headers, truck["id"], "2024-02-10", 200)
    post_mileage(client, auth_headers, van["id"], "2024-02-11", 300)

    page = client.get("/api/mileage-record/by-date-range?start_date=2024-02-01&end_date=2024-02-28",
                      headers=auth_headers).json()["data"]
    assert page["total"] == 2

    page = client.get(
        f"/api/mileage-record/by-date-range?start_date=2024-02-01&end_date=2024-02-28&equipment_id={truck['id']}",
        headers=auth_headers,
    ).json()["data"]
    assert page["total"] == 1
    assert page["data"][0]["kilometers"] == 200

    response = client.get("/api/mileage-record/by-date-range?start_date=2024-03-01&end_date=2024-02-01",
                          headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_DATE_RANGE"


def test_update_onto_existing_date_conflicts(client, auth_headers, create_equipment):
    equipment = create_equipment()
    post_mileage(client, auth_headers, equipment["id"], "2024-02-01", 1000)
    second = post_mileage(client, auth_headers, equipment["id"], "2024-02-02", 1100).json()["data"]

    response = client.put(f"/api/mileage-record/{second['id']}", json={"record_date": "2024-02-01"},
                          headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_MILEAGE_DATE"

    response = client.put(f"/api/mileage-record/{second['id']}", json={"kilometers": 1150},
                          headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["kilometers"] == 1150


def test_delete_blocked_when_linked(client, auth_headers, create_equipment, create_type):
    equipment = create_equipment()
    oil = create_type("Oil Service")
    client.post("/api/maintenance-records", json={
        "equipment_id": equipment["id"],
        "maintenance_type_id": oil["id"],
        "start_datetime": "2024-02-05T08:00:00Z",
        "mileage": 5000,
    }, headers=auth_headers)
    mileage = client.get("/api/mileage-record", headers=auth_headers).json()["data"]["data"][0]

    response = client.delete(f"/api/mileage-record/{mileage['id']}", headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "MILEAGE_RECORD_IN_USE"


def test_delete_unlinked(client, auth_headers, create_equipment):
    equipment = create_equipment()
    record = post_mileage(client, auth_headers, equipment["id"], "2024-02-01", 1000).json()["data"]
    response = client.delete(f"/api/mileage-record/{record['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert client.get(f"/api/mileage-record/{record['id']}", headers=auth_headers).status_code == 404
