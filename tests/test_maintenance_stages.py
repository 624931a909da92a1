def stages_of(client, headers, plan_id):
    response = client.get(f"/api/maintenance-stage?plan_id={plan_id}&limit=0", headers=headers)
    assert response.status_code == 200
    return response.json()["data"]["data"]


def assert_ranked(stages):
    ordered = sorted(stages, key=lambda s: (s["kilometers"], s["days"]))
    assert [s["stage_index"] for s in ordered] == list(range(1, len(stages) + 1))


def test_oil_service_example(client, auth_headers, create_type, create_plan, create_stage):
    oil = create_type("Oil Service")
    plan = create_plan("Oil plan")

    a = create_stage(plan["id"], oil["id"], 5000, 90)
    assert a["stage_index"] == 1

    b = create_stage(plan["id"], oil["id"], 1000, 30)
    assert b["stage_index"] == 1

    stages = {s["id"]: s for s in stages_of(client, auth_headers, plan["id"])}
    assert stages[b["id"]]["stage_index"] == 1
    assert stages[a["id"]]["stage_index"] == 2


def test_duplicate_kilometers_rejected_without_write(client, auth_headers, create_type, create_plan, create_stage):
    oil = create_type("Oil Service")
    plan = create_plan("Oil plan")
    create_stage(plan["id"], oil["id"], 5000, 90)

    response = client.post("/api/maintenance-stage", json={
        "maintenance_plan_id": plan["id"],
        "maintenance_type_id": oil["id"],
        "kilometers": 5000,
        "days": 180,
    }, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_STAGE_KILOMETERS"
    assert len(stages_of(client, auth_headers, plan["id"])) == 1


def test_duplicate_days_rejected(client, auth_headers, create_type, create_plan, create_stage):
    oil = create_type("Oil Service")
    plan = create_plan("Oil plan")
    create_stage(plan["id"], oil["id"], 5000, 90)

    response = client.post("/api/maintenance-stage", json={
        "maintenance_plan_id": plan["id"],
        "maintenance_type_id": oil["id"],
        "kilometers": 8000,
        "days": 90,
    }, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_STAGE_DAYS"


def test_same_values_allowed_in_other_plan(client, auth_headers, create_type, create_plan, create_stage):
    oil = create_type("Oil Service")
    first = create_plan("Plan one")
    second = create_plan("Plan two")
    create_stage(first["id"], oil["id"], 5000, 90)
    stage = create_stage(second["id"], oil["id"], 5000, 90)
    assert stage["stage_index"] == 1


def test_negative_values_rejected(client, auth_headers, create_type, create_plan):
    oil = create_type("Oil Service")
    plan = create_plan("Oil plan")
    response = client.post("/api/maintenance-stage", json={
        "maintenance_plan_id": plan["id"],
        "maintenance_type_id": oil["id"],
        "kilometers": -1,
        "days": 10,
    }, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STAGE_VALUE"


def test_update_rerank(client, auth_headers, create_type, create_plan, create_stage):
    oil = create_type("Oil Service")
    plan = create_plan("Oil plan")
    a = create_stage(plan["id"], oil["id"], 1000, 30)
    b = create_stage(plan["id"], oil["id"], 5000, 90)
    c = create_stage(plan["id"], oil["id"], 10000, 180)

    response = client.put(f"/api/maintenance-stage/{a['id']}", json={"kilometers": 20000, "days": 365},
                          headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["stage_index"] == 3

    stages = stages_of(client, auth_headers, plan["id"])
    assert_ranked(stages)
    ranks = {s["id"]: s["stage_index"] for s in stages}
    assert ranks == {b["id"]: 1, c["id"]: 2, a["id"]: 3}


def test_update_may_keep_own_values(client, auth_headers, create_type, create_plan, create_stage):
    oil = create_type("Oil Service")
    plan = create_plan("Oil plan")
    a = create_stage(plan["id"], oil["id"], 1000, 30)

    response = client.put(f"/api/maintenance-stage/{a['id']}", json={"kilometers": 1000, "days": 30},
                          headers=auth_headers)
    assert response.status_code == 200


def test_delete_repacks(client, auth_headers, create_type, create_plan, create_stage):
    oil = create_type("Oil Service")
    plan = create_plan("Oil plan")
    a = create_stage(plan["id"], oil["id"], 1000, 30)
    create_stage(plan["id"], oil["id"], 5000, 90)
    create_stage(plan["id"], oil["id"], 10000, 180)

    response = client.delete(f"/api/maintenance-stage/{a['id']}", headers=auth_headers)
    assert response.status_code == 200

    stages = stages_of(client, auth_headers, plan["id"])
    assert sorted(s["stage_index"] for s in stages) == [1, 2]
    assert_ranked(stages)


def test_explicit_reorder(client, auth_headers, create_type, create_plan, create_stage):
    oil = create_type("Oil Service")
    plan = create_plan("Oil plan")
    a = create_stage(plan["id"], oil["id"], 1000, 30)
    b = create_stage(plan["id"], oil["id"], 5000, 90)

    response = client.put("/api/maintenance-stages/reorder", json={"newOrder": [b["id"], a["id"]]},
                          headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["reordered_count"] == 2

    ranks = {s["id"]: s["stage_index"] for s in stages_of(client, auth_headers, plan["id"])}
    assert ranks == {b["id"]: 1, a["id"]: 2}

    response = client.put("/api/maintenance-stage/reorder", json={"newOrder": [a["id"], b["id"]]},
                          headers=auth_headers)
    assert response.status_code == 200


def test_reorder_requires_same_plan(client, auth_headers, create_type, create_plan, create_stage):
    oil = create_type("Oil Service")
    first = create_plan("Plan one")
    second = create_plan("Plan two")
    a = create_stage(first["id"], oil["id"], 1000, 30)
    b = create_stage(second["id"], oil["id"], 5000, 90)

    response = client.put("/api/maintenance-stages/reorder", json={"newOrder": [a["id"], b["id"]]},
                          headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "STAGES_NOT_IN_SAME_PLAN"


def test_reorder_must_cover_whole_plan(client, auth_headers, create_type, create_plan, create_stage):
    oil = create_type("Oil Service")
    plan = create_plan("Oil plan")
    create_stage(plan["id"], oil["id"], 1000, 30)
    create_stage(plan["id"], oil["id"], 2000, 60)
    c = create_stage(plan["id"], oil["id"], 3000, 90)

    response = client.put("/api/maintenance-stages/reorder", json={"newOrder": [c["id"]]},
                          headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"

    ranks = sorted(s["stage_index"] for s in stages_of(client, auth_headers, plan["id"]))
    assert ranks == [1, 2, 3]


def test_reorder_rejects_empty_list(client, auth_headers):
    response = client.put("/api/maintenance-stages/reorder", json={"newOrder": []}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_reorder_checks_ownership(client, auth_headers, other_headers, create_type, create_plan, create_stage):
    oil = create_type("Oil Service")
    plan = create_plan("Oil plan")
    a = create_stage(plan["id"], oil["id"], 1000, 30)

    response = client.put("/api/maintenance-stages/reorder", json={"newOrder": [a["id"]]}, headers=other_headers)
    assert response.status_code == 403
