import os

# before any tutoring import: settings are read once
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_RETRY_DELAY_SECONDS"] = "0"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from tutoring.core.config import settings
from tutoring.db import Base
from tutoring.db.session import engine
from tutoring.main import app


@pytest.fixture
def client():
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as c:
        yield c
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def admin_headers(client):
    response = client.post(
        "/api/auth/login",
        json={"phone": settings.ADMIN_PHONE, "password": settings.ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def make_student(client, admin_headers):
    def _make(name="أحمد علي", phone="01111111111", group_name="السبت 4", grade="first"):
        response = client.post(
            "/api/students/",
            json={
                "name": name,
                "phone": phone,
                "parent_phone": "01222222222",
                "group_name": group_name,
                "grade": grade,
            },
            headers=admin_headers,
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _make


@pytest.fixture
def login(client):
    def _login(phone, password):
        response = client.post("/api/auth/login", json={"phone": phone, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login
