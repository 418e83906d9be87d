from datetime import datetime

import pytest

from app import create_app, db
from app.models.exercise import Exercise
from config import TestConfig
from tests.fakes import FakeAnalyticsStore


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_store():
    return FakeAnalyticsStore()


@pytest.fixture
def now():
    return datetime(2025, 11, 21, 18, 0, 0)


def _register(client, username, weight_kg=None):
    payload = {
        "email": f"{username}@example.com",
        "username": username,
        "password": "secret123",
    }
    if weight_kg is not None:
        payload["weight_kg"] = weight_kg
    resp = client.post("/api/auth/register", json=payload)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


@pytest.fixture
def register(client):
    """Register a user and return (user_dict, auth headers)."""

    def _make(username="titan", weight_kg=None):
        body = _register(client, username, weight_kg)
        return body["user"], {"Authorization": f"Bearer {body['token']}"}

    return _make


@pytest.fixture
def auth(register):
    return register()


@pytest.fixture
def exercises(app):
    with app.app_context():
        rows = [
            Exercise(name="Back Squat", muscle_group="legs"),
            Exercise(name="Bench Press", muscle_group="chest"),
        ]
        db.session.add_all(rows)
        db.session.commit()
        return {row.name: row.id for row in rows}
