import asyncio
import smtplib

import pytest

from tech_news_digest import mailer
from tech_news_digest.config import Settings
from tech_news_digest.mailer import MailerConfigError, SmtpConfig, build_message, send_email


class FakeSMTP:
    instances = []
    starttls_supported = True

    def __init__(self, host, port, **kwargs):
        self.host = host
        self.port = port
        self.kwargs = kwargs
        self.started_tls = False
        self.logged_in = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def ehlo(self):
        pass

    def has_extn(self, name):
        return self.starttls_supported and name == "starttls"

    def starttls(self, context=None):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, message):
        self.sent.append(message)


@pytest.fixture(autouse=True)
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(mailer.smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(mailer.smtplib, "SMTP_SSL", FakeSMTP)
    return FakeSMTP


def test_smtp_config_prefers_password_then_app_password():
    settings = Settings(
        _env_file=None,
        SMTP_USER="me@example.com",
        SMTP_PASSWORD=None,
        SMTP_APP_PASSWORD="app-pass",
        SMTP_FROM="News <news@example.com>",
    )

    config = SmtpConfig.from_settings(settings)

    assert config.password == "app-pass"
    assert config.sender == "News <news@example.com>"
    assert config.host == "smtp.gmail.com"
    assert config.port == 587


def test_build_message_has_text_and_html_parts():
    message = build_message("to@example.com", "Subj", "line1\nline2", sender="me@example.com")

    assert message["From"] == "me@example.com"
    assert message["To"] == "to@example.com"
    assert message["Message-ID"].endswith("@example.com>")
    plain = message.get_body(preferencelist=("plain",)).get_content()
    html = message.get_body(preferencelist=("html",)).get_content()
    assert plain.startswith("line1\nline2")
    assert "line1<br>line2" in html


def test_send_email_uses_starttls_and_login():
    config = SmtpConfig(user="me@example.com", password="secret")

    message_id = asyncio.run(send_email("to@example.com", "Subj", "Body", config))

    server = FakeSMTP.instances[0]
    assert (server.host, server.port) == ("smtp.gmail.com", 587)
    assert server.started_tls is True
    assert server.logged_in == ("me@example.com", "secret")
    assert server.sent[0]["Message-ID"] == message_id
    assert server.sent[0]["From"] == "me@example.com"


def test_send_email_secure_uses_ssl_connection():
    config = SmtpConfig(host="smtp.example.com", port=465, secure=True, user="u@x.io", password="p")

    asyncio.run(send_email("to@example.com", "Subj", "Body", config))

    server = FakeSMTP.instances[0]
    assert server.port == 465
    assert "context" in server.kwargs
    assert server.started_tls is False


@pytest.mark.parametrize(
    "config, fragment",
    [
        (SmtpConfig(user=None, password="p"), "SMTP_USER"),
        (SmtpConfig(user="u@x.io", password=None), "SMTP_PASSWORD"),
    ],
)
def test_missing_credentials_fail_before_connecting(config, fragment):
    with pytest.raises(MailerConfigError) as excinfo:
        asyncio.run(send_email("to@example.com", "Subj", "Body", config))

    assert fragment in str(excinfo.value)
    assert FakeSMTP.instances == []


def test_transport_errors_propagate(monkeypatch):
    class RejectingSMTP(FakeSMTP):
        def login(self, user, password):
            raise smtplib.SMTPAuthenticationError(535, b"denied")

    monkeypatch.setattr(mailer.smtplib, "SMTP", RejectingSMTP)

    with pytest.raises(smtplib.SMTPAuthenticationError):
        asyncio.run(
            send_email("to@example.com", "Subj", "Body", SmtpConfig(user="u@x.io", password="p"))
        )


def test_refuses_login_without_starttls(monkeypatch):
    class PlainSMTP(FakeSMTP):
        starttls_supported = False

    monkeypatch.setattr(mailer.smtplib, "SMTP", PlainSMTP)

    with pytest.raises(smtplib.SMTPNotSupportedError, match="SMTP_SECURE"):
        asyncio.run(
            send_email("to@example.com", "Subj", "Body", SmtpConfig(user="u@x.io", password="p"))
        )

    server = PlainSMTP.instances[0]
    assert server.logged_in is None
    assert server.sent == []
