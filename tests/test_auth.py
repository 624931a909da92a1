import uuid


def test_missing_token_is_401(client):
    response = client.get("/api/equipments")
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "UNAUTHORIZED"


def test_garbage_token_is_401(client):
    response = client.get("/api/equipments", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_wrong_secret_is_401(client):
    from jose import jwt
    token = jwt.encode({"sub": str(uuid.uuid4())}, "another-secret", algorithm="HS256")
    response = client.get("/api/equipments", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_non_uuid_subject_is_401(client, token_for):
    token = token_for("not-a-uuid")
    response = client.get("/api/equipments", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_valid_token_is_accepted(client, auth_headers):
    response = client.get("/api/equipments", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_system_endpoints_are_public(client):
    assert client.get("/").json()["success"] is True
    assert client.get("/api/version").json()["api_version"]
