import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-studyhabits-suite"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest

from studyhabits import app as flask_app, tracker
from studyhabits.models import db


@pytest.fixture
def app():
    flask_app.config.update(TESTING=True)
    with flask_app.app_context():
        db.drop_all()
        db.create_all()
        yield flask_app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def clock(monkeypatch):
    """Freeze tracker.local_now; set ``clock.now`` to move time."""
    class Clock:
        now = None

    fixed = Clock()
    monkeypatch.setattr(tracker, "local_now", lambda: fixed.now)
    return fixed


def register(client, username="alice", email="alice@example.com", password="secret123"):
    return client.post("/api/register", json={
        "username": username,
        "email": email,
        "password": password,
    })


@pytest.fixture
def auth_headers(client):
    response = register(client)
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.get_json()['token']}"}


@pytest.fixture
def other_headers(client):
    response = register(client, username="bob", email="bob@example.com")
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.get_json()['token']}"}
