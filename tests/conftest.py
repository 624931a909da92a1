import os

# Settings are read once at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ["TESTING"] = "True"

import uuid

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import maintrack.models  # noqa: F401
from maintrack.core.config import settings
from maintrack.database import get_db
from maintrack.db.base import Base
from maintrack.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


def make_token(user_id, **claims) -> str:
    payload = {"sub": str(user_id), **claims}
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def auth_headers(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def other_headers():
    return {"Authorization": f"Bearer {make_token(uuid.uuid4())}"}


# ==================== Factories ====================

@pytest.fixture
def create_type(client, auth_headers):
    def _create(type_name="Engine", parent_id=None, headers=None):
        body = {"type": type_name}
        if parent_id is not None:
            body["parent_id"] = parent_id
        response = client.post("/api/maintenance-type", json=body, headers=headers or auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


@pytest.fixture
def create_plan(client, auth_headers):
    def _create(name="Fleet plan", description=None, headers=None):
        response = client.post(
            "/api/maintenance-plan",
            json={"name": name, "description": description},
            headers=headers or auth_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


@pytest.fixture
def create_stage(client, auth_headers):
    def _create(plan_id, type_id, kilometers, days, headers=None):
        response = client.post(
            "/api/maintenance-stage",
            json={
                "maintenance_plan_id": plan_id,
                "maintenance_type_id": type_id,
                "kilometers": kilometers,
                "days": days,
            },
            headers=headers or auth_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


@pytest.fixture
def create_equipment(client, auth_headers):
    counter = {"n": 0}

    def _create(headers=None, **overrides):
        counter["n"] += 1
        body = {
            "type": "Truck",
            "license_plate": f"ABC-{counter['n']:03d}",
            "code": f"EQ-{counter['n']:03d}",
        }
        body.update(overrides)
        response = client.post("/api/equipments", json=body, headers=headers or auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


@pytest.fixture
def create_spare_part(client, auth_headers):
    def _create(factory_code="OF-100", name="Oil filter", price=12.5, headers=None):
        response = client.post(
            "/api/spare-parts",
            json={"factory_code": factory_code, "name": name, "price": price},
            headers=headers or auth_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


@pytest.fixture
def create_activity(client, auth_headers):
    def _create(type_ids, name="Replace oil filter", headers=None):
        response = client.post(
            "/api/activities",
            json={"name": name, "maintenance_type_ids": type_ids},
            headers=headers or auth_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


@pytest.fixture
def token_for():
    return make_token
