"""
Tests para el servicio de email

- Configuración incompleta
- Construcción del mensaje MIME con adjuntos
- Errores del transporte SMTP
"""

import smtplib

import pytest

from app.core.config import MailSettings
from app.modules.email.service import (
    EmailService, EmailNotConfiguredError, EmailDeliveryError
)


class BrokenSMTP:

    def __call__(self, config):
        raise ConnectionRefusedError("connection refused")


class TestMailSettings:

    def test_is_configured(self, mail_settings):
        assert mail_settings.is_configured

    def test_missing_password(self, mail_settings):
        settings = mail_settings.model_copy(update={"SMTP_PASSWORD": ""})
        assert not settings.is_configured

    def test_sender(self, mail_settings):
        assert mail_settings.sender == "Acme Billing <billing@test.local>"

    def test_sender_falls_back_to_user(self, mail_settings):
        settings = mail_settings.model_copy(update={"MAIL_FROM": ""})
        assert settings.sender == "Acme Billing <billing@test.local>"

    @pytest.mark.parametrize("raw, expected", [("true", True), ("1", True), ("false", False), ("", False)])
    def test_secure_flag_parsing(self, raw, expected):
        assert MailSettings(SMTP_SECURE=raw).SMTP_SECURE is expected


class TestEmailService:

    def test_render_template_escapes_html(self, email_service):
        html = email_service.render_template("invoice_email.html", {
            "client_name": "<b>Acme</b>",
            "invoice_number": "INV-12345678-001",
            "invoice_date": "2024-03-01",
            "due_date": "2024-03-31",
            "amount_due": "$110.00",
            "status": "PENDING",
            "sender_name": "Acme Billing",
        })
        assert "&lt;b&gt;Acme&lt;/b&gt;" in html
        assert "INV-12345678-001" in html
        assert "$110.00" in html

    def test_build_message_with_attachment(self, email_service):
        msg = email_service.build_message(
            ["client@example.com"], "Invoice", "<p>Hi</p>",
            attachments=[("invoice-INV-12345678-001.pdf", b"%PDF-1.4 test")]
        )
        parts = msg.get_payload()

        assert msg["To"] == "client@example.com"
        assert msg["From"] == "Acme Billing <billing@test.local>"
        assert parts[0].get_content_type() == "text/html"
        assert parts[1].get_content_type() == "application/pdf"
        assert parts[1].get_filename() == "invoice-INV-12345678-001.pdf"
        assert parts[1].get_payload(decode=True) == b"%PDF-1.4 test"

    def test_send_email(self, email_service, fake_smtp):
        email_service.send_email(["client@example.com"], "Hello", "<p>Hi</p>")
        assert len(fake_smtp.sent) == 1
        assert fake_smtp.sent[0]["from"] == "billing@test.local"
        assert fake_smtp.sent[0]["to"] == ["client@example.com"]

    def test_not_configured(self, fake_smtp):
        service = EmailService(MailSettings(SMTP_HOST="", SMTP_USER="", SMTP_PASSWORD=""), smtp_factory=fake_smtp)
        with pytest.raises(EmailNotConfiguredError) as exc_info:
            service.send_email(["client@example.com"], "Hello", "<p>Hi</p>")

        assert "SMTP_HOST" in str(exc_info.value)
        assert fake_smtp.sent == []

    def test_rejected_recipient(self, email_service, fake_smtp):
        fake_smtp.fail = True
        with pytest.raises(EmailDeliveryError):
            email_service.send_email(["client@example.com"], "Hello", "<p>Hi</p>")

    def test_connection_error(self, mail_settings):
        service = EmailService(mail_settings, smtp_factory=BrokenSMTP())
        with pytest.raises(EmailDeliveryError) as exc_info:
            service.send_email(["client@example.com"], "Hello", "<p>Hi</p>")

        assert "connection refused" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_delivery_error_is_smtp_agnostic(self):
        assert not issubclass(EmailDeliveryError, smtplib.SMTPException)


class FailingHandshakeSMTP:
    """Conexión SMTP que se abre pero falla en STARTTLS o en el login."""

    instances = []

    def __init__(self, host, port, timeout=None, context=None, fail_on="starttls"):
        self.fail_on = fail_on
        self.closed = False
        FailingHandshakeSMTP.instances.append(self)

    def starttls(self, context=None):
        if self.fail_on == "starttls":
            raise smtplib.SMTPNotSupportedError("STARTTLS extension not supported by server")

    def login(self, user, password):
        raise smtplib.SMTPAuthenticationError(535, b"authentication failed")

    def close(self):
        self.closed = True


class TestSMTPConnection:

    @pytest.fixture(autouse=True)
    def reset_instances(self):
        FailingHandshakeSMTP.instances = []

    def test_starttls_failure_closes_connection(self, mail_settings, monkeypatch):
        monkeypatch.setattr(smtplib, "SMTP", FailingHandshakeSMTP)
        service = EmailService(mail_settings)

        with pytest.raises(EmailDeliveryError):
            service.send_email(["client@example.com"], "Hello", "<p>Hi</p>")

        assert len(FailingHandshakeSMTP.instances) == 1
        assert FailingHandshakeSMTP.instances[0].closed

    def test_login_failure_closes_connection(self, mail_settings, monkeypatch):
        monkeypatch.setattr(
            smtplib, "SMTP",
            lambda host, port, timeout=None: FailingHandshakeSMTP(host, port, timeout, fail_on="login")
        )
        service = EmailService(mail_settings)

        with pytest.raises(EmailDeliveryError) as exc_info:
            service.send_email(["client@example.com"], "Hello", "<p>Hi</p>")

        assert "authentication failed" in str(exc_info.value)
        assert FailingHandshakeSMTP.instances[0].closed
