import json
import smtplib

import pytest
from fastapi.testclient import TestClient

from app import create_app
from app.config.config import EmailConfig, FirebaseConfig, GatewayConfig
from app.core import firebase_push_service


CONFIG_DATA = {
    "email": {
        "smtp_host": "smtp.test.local",
        "smtp_port": 587,
        "username": "gateway@test.local",
        "password": "secret",
    },
    "firebase": {"credentials_file": "missing-service-account.json"},
}


class FakeSMTP:
    """smtplib.SMTP 대체용. 생성된 인스턴스와 호출 내역을 기록합니다."""

    instances = []
    extensions = {"starttls"}
    connect_error = None
    login_error = None
    send_error = None

    def __init__(self, host, port, **kwargs):
        if self.connect_error:
            raise self.connect_error
        self.host = host
        self.port = port
        self.kwargs = kwargs
        self.started_tls = False
        self.logged_in_as = None
        self.sent = []
        self.closed = False
        FakeSMTP.instances.append(self)

    def ehlo(self):
        return 250, b"ok"

    def has_extn(self, name):
        return name in self.extensions

    def starttls(self, context=None):
        self.started_tls = True

    def login(self, user, password):
        if self.login_error:
            raise self.login_error
        self.logged_in_as = (user, password)

    def send_message(self, message):
        if self.send_error:
            raise self.send_error
        self.sent.append(message)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class StubEmailSender:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def send(self, to, subject, body):
        self.calls.append((to, subject, body))
        if self.error:
            raise self.error


class StubPushSender:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def send(self, token, title, body):
        self.calls.append((token, title, body))
        if self.error:
            raise self.error


@pytest.fixture
def gateway_config():
    return GatewayConfig(
        email=EmailConfig(**CONFIG_DATA["email"]),
        firebase=FirebaseConfig(**CONFIG_DATA["firebase"]),
    )


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(CONFIG_DATA), encoding="utf-8")
    return path


@pytest.fixture
def fake_smtp(monkeypatch):
    monkeypatch.setattr(FakeSMTP, "instances", [])
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(smtplib, "SMTP_SSL", FakeSMTP)
    return FakeSMTP


@pytest.fixture
def email_sender():
    return StubEmailSender()


@pytest.fixture
def push_sender():
    return StubPushSender()


@pytest.fixture
def client(gateway_config, email_sender, push_sender):
    app = create_app(gateway_config, email_sender=email_sender, push_sender=push_sender)
    return TestClient(app)


class FakeFirebaseApp:
    def __init__(self, name, project_id):
        self.name = name
        self.project_id = project_id


class FakeFirebase:
    """firebase_admin 의 credentials/initialize_app/messaging.send 대체용."""

    def __init__(self):
        self.project_id = "test-project"
        self.certificates = []
        self.initialized = []
        self.sent = []
        self.deleted = []
        self.certificate_errors = []
        self.send_error = None

    def certificate(self, path):
        self.certificates.append(path)
        if self.certificate_errors:
            raise self.certificate_errors.pop(0)
        return f"cred:{path}"

    def initialize_app(self, cred, name):
        app = FakeFirebaseApp(name, self.project_id)
        self.initialized.append((cred, name, app))
        return app

    def send(self, message, app=None):
        if self.send_error:
            raise self.send_error
        self.sent.append((message, app))
        return f"projects/test/messages/{len(self.sent)}"

    def delete_app(self, app):
        self.deleted.append(app)


@pytest.fixture
def fake_firebase(monkeypatch):
    fake = FakeFirebase()
    monkeypatch.setattr(firebase_push_service.credentials, "Certificate", fake.certificate)
    monkeypatch.setattr(firebase_push_service.firebase_admin, "initialize_app", fake.initialize_app)
    monkeypatch.setattr(firebase_push_service.firebase_admin, "delete_app", fake.delete_app)
    monkeypatch.setattr(firebase_push_service.messaging, "send", fake.send)
    return fake
