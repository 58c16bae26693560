import pytest

from backend.services import mailers
from backend.services.mailers import (
    ApiEmailSender,
    NullEmailSender,
    SmtpEmailSender,
    build_email_sender,
)


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.calls = []
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user, password))

    def send_message(self, msg):
        self.messages.append(msg)


class FakeResponse:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


def test_smtp_sender_uses_tls_login_and_timeout(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(mailers.smtplib, "SMTP", FakeSMTP)

    sender = SmtpEmailSender(
        "smtp.example", 2525, user="relay", password="secret", use_tls=True,
        sender="no-reply@bank.example", timeout=3,
    )
    assert sender.send("h@apollo.example", "Blood stock updated", "<p>ok</p>") is True

    smtp = FakeSMTP.instances[0]
    assert (smtp.host, smtp.port, smtp.timeout) == ("smtp.example", 2525, 3)
    assert smtp.calls == ["starttls", ("login", "relay", "secret")]
    msg = smtp.messages[0]
    assert msg["To"] == "h@apollo.example"
    assert msg["Subject"] == "Blood stock updated"


def test_smtp_sender_skips_login_without_user(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(mailers.smtplib, "SMTP", FakeSMTP)

    SmtpEmailSender("localhost", 25, use_tls=False, sender="x@y.z").send("a@b.com", "s", "b")
    assert FakeSMTP.instances[0].calls == []


def test_api_sender_posts_payload(monkeypatch):
    captured = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        captured.update(url=url, json=json, headers=headers, timeout=timeout)
        return FakeResponse(201)

    monkeypatch.setattr(mailers.requests, "post", fake_post)

    sender = ApiEmailSender("https://mail.example/send", "k-123", sender="no-reply@bank.example", timeout=4)
    assert sender.send("a@b.com", "Hello", "<b>hi</b>") is True

    assert captured["url"] == "https://mail.example/send"
    assert captured["headers"]["api-key"] == "k-123"
    assert captured["timeout"] == 4
    assert captured["json"]["to"] == [{"email": "a@b.com"}]
    assert captured["json"]["htmlContent"] == "<b>hi</b>"


def test_api_sender_reports_refusal(monkeypatch):
    monkeypatch.setattr(mailers.requests, "post", lambda *a, **kw: FakeResponse(401, "bad key"))
    assert ApiEmailSender("https://mail.example", "k", sender="x@y.z").send("a@b.com", "s", "b") is False


def test_build_email_sender(monkeypatch):
    assert isinstance(build_email_sender("none"), NullEmailSender)
    assert isinstance(build_email_sender("smtp"), SmtpEmailSender)

    monkeypatch.setattr(mailers.config, "EMAIL_API_KEY", "")
    with pytest.raises(ValueError):
        build_email_sender("api")

    monkeypatch.setattr(mailers.config, "EMAIL_API_KEY", "k")
    assert isinstance(build_email_sender("api"), ApiEmailSender)

    with pytest.raises(ValueError):
        build_email_sender("carrier-pigeon")


def test_null_sender_never_delivers():
    assert NullEmailSender().send("a@b.com", "s", "b") is False


def test_email_sender_is_abstract():
    with pytest.raises(TypeError):
        mailers.EmailSender()
