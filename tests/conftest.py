"""
CollabZone - Test Configuration and Fixtures
"""
import pytest
from flask import Flask

from app import create_app
from model import db
from storage import STORAGE_EXTENSION, MemStorage, DatabaseStorage


@pytest.fixture
def app():
    """App on the in-memory store with the admin seeded"""
    return create_app("testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_storage(app):
    return app.extensions[STORAGE_EXTENSION]


@pytest.fixture
def db_app():
    """App backed by SQLAlchemy on an in-memory SQLite database"""
    app = create_app("testing", {"STORAGE_BACKEND": "database"})
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def db_client(db_app):
    return db_app.test_client()


@pytest.fixture(params=["memory", "database"])
def storage(request):
    """Each store test runs once per backend"""
    if request.param == "memory":
        yield MemStorage()
        return

    app = Flask(__name__)
    app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    db.init_app(app)
    with app.app_context():
        db.create_all()
        yield DatabaseStorage(db)
        db.session.remove()
        db.drop_all()


@pytest.fixture
def make_college(client):
    """POST a college and return its JSON"""
    def _make(**overrides):
        payload = {
            "name": "Tech U",
            "email": "admin@techu.edu",
            "password": "secret123",
            "location": "City",
        }
        payload.update(overrides)
        response = client.post("/api/colleges", json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _make


@pytest.fixture
def make_event(client):
    """POST an event and return its JSON"""
    def _make(college_id, **overrides):
        payload = {
            "name": "Fest",
            "collegeId": college_id,
            "date": "2030-01-01T10:00:00Z",
            "fee": 0,
        }
        payload.update(overrides)
        response = client.post("/api/events", json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _make


@pytest.fixture
def registration_payload():
    def _payload(event_id, **overrides):
        payload = {
            "eventId": event_id,
            "fullName": "Jane",
            "email": "jane@students.edu",
            "phone": "1234567890",
            "college": "X",
            "course": "CS",
        }
        payload.update(overrides)
        return payload
    return _payload
