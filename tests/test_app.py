import pytest

from app import create_app
from config import Config, TestingConfig
from storage import DatabaseStorage, MemStorage, STORAGE_EXTENSION


def test_health_reports_storage_backend(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "ok"
    assert body["storage"] == "memory"
    assert "database" not in body


def test_health_probes_database(db_client):
    body = db_client.get("/health").get_json()
    assert body["storage"] == "database"
    assert body["database"] == "connected"
    assert db_client.get("/ready").get_json() == {"status": "ready"}


def test_root_answers_health_without_frontend_bundle(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_unknown_paths_answer_json_404(client):
    for path in ("/api/nothing-here", "/some/client/route"):
        response = client.get(path)
        assert response.status_code == 404
        assert response.get_json() == {"error": "Resource not found", "status": 404}


def test_serves_frontend_bundle(tmp_path):
    (tmp_path / "index.html").write_text("<html>CollabZone</html>")
    (tmp_path / "app.js").write_text("console.log('hi')")
    client = create_app("testing", {"FRONTEND_DIST": str(tmp_path)}).test_client()

    assert b"CollabZone" in client.get("/").data
    assert b"console.log" in client.get("/app.js").data
    # Client-side routes fall back to index.html
    assert b"CollabZone" in client.get("/events/3").data
    assert client.get("/api/unknown").status_code == 404


def test_store_selection(app, db_app):
    assert isinstance(app.extensions[STORAGE_EXTENSION], MemStorage)
    assert isinstance(db_app.extensions[STORAGE_EXTENSION], DatabaseStorage)


def test_unknown_storage_backend_is_rejected():
    with pytest.raises(ValueError):
        create_app("testing", {"STORAGE_BACKEND": "redis"})


def test_sample_data_seeding():
    app = create_app("testing", {"SEED_SAMPLE_DATA": True})
    names = [c["name"] for c in app.test_client().get("/api/colleges").get_json()]
    assert names == ["Arts College", "Tech University"]


class TestConfigValidation:

    def test_testing_config_is_valid(self):
        assert TestingConfig.validate_config() is True

    def test_mail_username_requires_password(self, monkeypatch):
        monkeypatch.setattr(Config, "MAIL_USERNAME", "mailer@collabzone.app")
        monkeypatch.setattr(Config, "MAIL_PASSWORD", None)
        with pytest.raises(ValueError, match="MAIL_PASSWORD"):
            Config.validate_config()

    def test_unknown_backend(self, monkeypatch):
        monkeypatch.setattr(Config, "STORAGE_BACKEND", "redis")
        with pytest.raises(ValueError, match="STORAGE_BACKEND"):
            Config.validate_config()

    def test_invalid_config_aborts_outside_production(self, monkeypatch):
        monkeypatch.setattr(TestingConfig, "STORAGE_BACKEND", "redis")
        with pytest.raises(ValueError):
            create_app("testing")

    def test_overrides_are_validated(self):
        with pytest.raises(ValueError, match="MAIL_PASSWORD"):
            create_app("testing", {"MAIL_USERNAME": "mailer@collabzone.app", "MAIL_PASSWORD": None})

    def test_production_falls_back_to_memory_store(self):
        app = create_app("production", {
            "STORAGE_BACKEND": "redis",
            "SEED_SAMPLE_DATA": False,
            "FRONTEND_DIST": None,
        })
        assert app.config["STORAGE_BACKEND"] == "memory"
        assert isinstance(app.extensions[STORAGE_EXTENSION], MemStorage)
        assert app.test_client().get("/health").get_json()["storage"] == "memory"
