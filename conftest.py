"""
Fixtures compartidos para los tests de los módulos.

La base de datos es SQLite en memoria; las tablas se crean y eliminan por test.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("APP_SECRET_STRING", "test-secret-key")

import smtplib
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.config import MailSettings
from app.database.database import sync_engine, SessionLocal, Base
from app.modules.email.service import EmailService, get_email_service


class FakeSMTP:
    """Transporte SMTP en memoria: registra cada mensaje enviado."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def __call__(self, config):
        return self

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def sendmail(self, from_addr, to_addrs, msg):
        if self.fail:
            raise smtplib.SMTPRecipientsRefused({addr: (550, b"rejected") for addr in to_addrs})
        self.sent.append({"from": from_addr, "to": to_addrs, "message": msg})


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=sync_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=sync_engine)


@pytest.fixture
def client(db_session):
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def mail_settings():
    return MailSettings(
        SMTP_HOST="smtp.test.local",
        SMTP_PORT=587,
        SMTP_USER="billing@test.local",
        SMTP_PASSWORD="secret",
        MAIL_FROM="billing@test.local",
        MAIL_FROM_NAME="Acme Billing"
    )


@pytest.fixture
def fake_smtp():
    return FakeSMTP()


@pytest.fixture
def email_service(mail_settings, fake_smtp):
    return EmailService(mail_settings, smtp_factory=fake_smtp)


@pytest.fixture
def override_email(client, email_service):
    app.dependency_overrides[get_email_service] = lambda: email_service
    return email_service


@pytest.fixture
def user_data():
    return {
        "email": "owner@example.com",
        "password": "supersecret",
        "name": "Owner",
        "currency": "USD"
    }


@pytest.fixture
def auth_headers(client, user_data):
    response = client.post("/auth/signup", json=user_data)
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def client_data():
    return {
        "name": "Acme Corp",
        "email": "billing@acme.com",
        "phone": "+1 555 0100",
        "address": "1 Market St, Springfield"
    }


@pytest.fixture
def sample_client(client, auth_headers, client_data):
    response = client.post("/clients", json=client_data, headers=auth_headers)
    assert response.status_code == 201
    return response.json()
