import itertools
from collections import namedtuple
from pathlib import Path

import pytest

from portal import create_app, db
from portal.config import TestConfig
from portal.users import ensure_admin_user

LoggedIn = namedtuple("LoggedIn", "client user")

STUDENT_PASSWORD = "secret123"


@pytest.fixture(scope="session")
def app(tmp_path_factory):
    upload_root = tmp_path_factory.mktemp("uploads")

    class Config(TestConfig):
        UPLOAD_FOLDER = str(upload_root)

    return create_app(Config)


@pytest.fixture(autouse=True)
def fresh_db(app):
    with app.app_context():
        db.drop_all()
        db.create_all()
        ensure_admin_user()
    yield
    with app.app_context():
        db.session.remove()
    for path in Path(app.config["UPLOAD_FOLDER"]).iterdir():
        path.unlink()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


def student_payload(n, **overrides):
    payload = {
        "username": f"student{n}",
        "password": STUDENT_PASSWORD,
        "email": f"student{n}@university.edu",
        "fullName": f"Student Number {n}",
        "nationalId": f"NID-{n:05d}",
        "programId": f"PRG-{n:05d}",
        "phoneNumber": "+49 151 000000",
        "currentAddress": "Hauptstrasse 1, Berlin",
        "countryOfStudy": "Germany",
        "university": "TU Berlin",
        "fieldOfStudy": "Mechanical Engineering",
        "degreeLevel": "Bachelor",
        "sponsorGroup": "Group A",
        "sponsorshipPeriod": "2023-2027",
        "bankName": "Deutsche Bank",
        "bankAddress": "Unter den Linden 13, Berlin",
        "accountNumber": f"DE8937040044053201{n:04d}",
        "swiftCode": "DEUTDEDB",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def register(app):
    counter = itertools.count(1)

    def _register(**overrides):
        payload = student_payload(next(counter), **overrides)
        return app.test_client().post("/api/users", json=payload)

    return _register


@pytest.fixture
def login_as(app):
    def _login(username, password=STUDENT_PASSWORD):
        client = app.test_client()
        resp = client.post("/api/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return LoggedIn(client, resp.get_json())

    return _login


@pytest.fixture
def student(register, login_as):
    resp = register(username="amina")
    assert resp.status_code == 201, resp.get_json()
    return login_as("amina")


@pytest.fixture
def other_student(register, login_as):
    resp = register(username="jonas")
    assert resp.status_code == 201, resp.get_json()
    return login_as("jonas")


@pytest.fixture
def admin(login_as):
    return login_as("admin", "admin123")


@pytest.fixture
def claim_payload():
    def _payload(**overrides):
        payload = {
            "claimType": "Books",
            "amount": 250.75,
            "claimPeriod": "Fall 2024",
            "description": "Textbooks for Fall semester",
            "receiptFile": "1700000000000-receipt.pdf",
        }
        payload.update(overrides)
        return payload

    return _payload
