import logging

from portal import create_app
from portal.config import TestConfig


def test_factory_can_run_twice(app, tmp_path):
    logger = logging.getLogger(app.name)
    handlers_before = len(logger.handlers)

    class Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    second = create_app(Config)

    assert len(logger.handlers) == handlers_before
    client = second.test_client()
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    assert client.get("/api/auth/me").get_json()["role"] == "admin"
