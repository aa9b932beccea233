import dataclasses
import smtplib

import pytest

from backoffice.services import email as email_service


class _FakeSMTP:
    instances: list["_FakeSMTP"] = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in = None
        self.sent = []
        _FakeSMTP.instances.append(self)

    def starttls(self):
        self.started_tls = True

    def login(self, username, password):
        self.logged_in = (username, password)

    def sendmail(self, from_email, to_email, message):
        self.sent.append((from_email, to_email, message))
        return {}

    def quit(self):
        pass


@pytest.fixture()
def smtp_settings(monkeypatch):
    configured = dataclasses.replace(
        email_service.settings,
        smtp_host="smtp.test",
        smtp_port=2525,
        smtp_username="mailer",
        smtp_password="pw",
        smtp_use_tls=True,
        smtp_use_ssl=False,
        smtp_from_email="noreply@tyvg.com",
    )
    monkeypatch.setattr(email_service, "settings", configured)
    _FakeSMTP.instances = []
    monkeypatch.setattr(smtplib, "SMTP", _FakeSMTP)
    return configured


def test_send_email_without_smtp_host_is_skipped(monkeypatch):
    monkeypatch.setattr(email_service, "settings", dataclasses.replace(email_service.settings, smtp_host=None))

    assert email_service.send_email("ops@tyvg.com", "Hola", "<p>Hola</p>") is False


def test_send_email_uses_tls_and_login(smtp_settings):
    assert email_service.send_email("ops@tyvg.com", "Hola", "<p>Hola</p>", "Hola") is True

    (server,) = _FakeSMTP.instances
    assert (server.host, server.port) == ("smtp.test", 2525)
    assert server.started_tls is True
    assert server.logged_in == ("mailer", "pw")
    from_email, to_email, message = server.sent[0]
    assert from_email == "noreply@tyvg.com"
    assert to_email == "ops@tyvg.com"
    assert "Subject: Hola" in message


def test_send_email_reports_smtp_failure(smtp_settings, monkeypatch):
    def _refuse(self, from_email, to_email, message):
        raise smtplib.SMTPRecipientsRefused({to_email: (550, b"no such user")})

    monkeypatch.setattr(_FakeSMTP, "sendmail", _refuse)

    assert email_service.send_email("ops@tyvg.com", "Hola", "<p>Hola</p>") is False


def test_render_user_activation_includes_credentials(smtp_settings):
    subject, html, text = email_service.render_user_activation(
        "ana@tyvg.com", "Ana", "s3cret", "Administrador", "http://localhost:8000/login"
    )

    assert smtp_settings.company_name in subject
    assert "s3cret" in html
    assert "http://localhost:8000/login" in text


def test_test_email_requires_address(client):
    response = client.post("/test-email", json={"email": "  "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Email is required"


def test_test_email_without_smtp_is_server_error(client, monkeypatch):
    monkeypatch.setattr(email_service, "settings", dataclasses.replace(email_service.settings, smtp_host=None))

    response = client.post("/test-email", json={"email": "ops@tyvg.com"})

    assert response.status_code == 500
    assert response.json()["detail"] == "SMTP is not configured"


def test_test_email_sends_activation_message(client, smtp_settings):
    response = client.post("/test-email", json={"email": "ops@tyvg.com"})

    assert response.status_code == 200
    assert response.json() == {"message": "Test email sent to ops@tyvg.com"}
    assert _FakeSMTP.instances[0].sent[0][1] == "ops@tyvg.com"
