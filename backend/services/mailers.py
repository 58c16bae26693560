"""
Email senders (mailers).

Contrat commun : send(to_address, subject, html_body) -> bool
- True  = le relais / l'API a accepté le message
- False = échec (déjà loggé)
Les exceptions réseau peuvent remonter : le dispatcher les absorbe.
"""
from __future__ import annotations

import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage

import requests

from backend.app.core import config
from backend.app.db.models.core_types import EmailBackend

logger = logging.getLogger(__name__)


class EmailSender(ABC):
    @abstractmethod
    def send(self, to_address: str, subject: str, html_body: str) -> bool:
        raise NotImplementedError


class NullEmailSender(EmailSender):
    """Email disabled: nothing leaves the process."""

    def send(self, to_address: str, subject: str, html_body: str) -> bool:
        logger.info("Email disabled, dropping %r for %s", subject, to_address)
        return False


class SmtpEmailSender(EmailSender):
    def __init__(
        self,
        host: str,
        port: int,
        *,
        user: str = "",
        password: str = "",
        use_tls: bool = True,
        sender: str,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.sender = sender
        self.timeout = timeout

    def send(self, to_address: str, subject: str, html_body: str) -> bool:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = to_address
        msg["Subject"] = subject
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html_body, subtype="html")

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.user:
                server.login(self.user, self.password)
            server.send_message(msg)
        return True


class ApiEmailSender(EmailSender):
    """Transactional email over HTTP (Brevo v3 payload shape)."""

    def __init__(self, url: str, api_key: str, *, sender: str, timeout: float = 10.0):
        self.url = url
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout

    def send(self, to_address: str, subject: str, html_body: str) -> bool:
        resp = requests.post(
            self.url,
            json={
                "sender": {"email": self.sender},
                "to": [{"email": to_address}],
                "subject": subject,
                "htmlContent": html_body,
            },
            headers={"api-key": self.api_key, "accept": "application/json"},
            timeout=self.timeout,
        )
        if 200 <= resp.status_code < 300:
            return True

        logger.warning("Email API refused message to %s: %s %s", to_address, resp.status_code, resp.text[:200])
        return False


def build_email_sender(backend: str | None = None) -> EmailSender:
    kind = EmailBackend((backend or config.EMAIL_BACKEND).lower())

    if kind == EmailBackend.smtp:
        return SmtpEmailSender(
            config.SMTP_HOST,
            config.SMTP_PORT,
            user=config.SMTP_USER,
            password=config.SMTP_PASSWORD,
            use_tls=config.SMTP_USE_TLS,
            sender=config.EMAIL_FROM,
            timeout=config.EMAIL_TIMEOUT_SECONDS,
        )
    if kind == EmailBackend.api:
        if not config.EMAIL_API_KEY:
            raise ValueError("EMAIL_API_KEY is required when EMAIL_BACKEND=api")
        return ApiEmailSender(
            config.EMAIL_API_URL,
            config.EMAIL_API_KEY,
            sender=config.EMAIL_FROM,
            timeout=config.EMAIL_TIMEOUT_SECONDS,
        )
    return NullEmailSender()
