"""SMTP mail delivery as a small Flask extension."""

from __future__ import annotations

import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from flask import Flask, current_app


class MailDeliveryError(RuntimeError):
    """Raised when a message could not be handed to the SMTP server."""


class Mailer:
    """Send plain-text + HTML messages through the configured SMTP server.

    With ``MAIL_SUPPRESS_SEND`` enabled, messages are appended to the
    application's outbox instead of being sent.
    """

    def __init__(self, app: Flask | None = None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        app.config.setdefault("MAIL_SERVER", "localhost")
        app.config.setdefault("MAIL_PORT", 587)
        app.config.setdefault("MAIL_USE_TLS", True)
        app.config.setdefault("MAIL_TIMEOUT", 10)
        app.config.setdefault("MAIL_SUPPRESS_SEND", app.testing)
        app.extensions["mailer"] = self
        app.extensions["mail_outbox"] = []

    @property
    def outbox(self) -> list[EmailMessage]:
        return current_app.extensions["mail_outbox"]

    def build_message(
        self, to: str, subject: str, text: str, html: str | None = None
    ) -> EmailMessage:
        config = current_app.config
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = formataddr(
            (config.get("MAIL_SENDER_NAME") or "", config["MAIL_DEFAULT_SENDER"])
        )
        message["To"] = to
        message.set_content(text)
        if html:
            message.add_alternative(html, subtype="html")
        return message

    def send(self, to: str, subject: str, text: str, html: str | None = None) -> None:
        """Deliver a message or raise :class:`MailDeliveryError`."""

        config = current_app.config
        message = self.build_message(to, subject, text, html)

        if config.get("MAIL_SUPPRESS_SEND"):
            self.outbox.append(message)
            current_app.logger.info("Mail to %s suppressed: %s", to, subject)
            return

        try:
            with smtplib.SMTP(
                config["MAIL_SERVER"], config["MAIL_PORT"], timeout=config["MAIL_TIMEOUT"]
            ) as server:
                if config.get("MAIL_USE_TLS"):
                    server.starttls()
                if config.get("MAIL_USERNAME"):
                    server.login(config["MAIL_USERNAME"], config.get("MAIL_PASSWORD") or "")
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            current_app.logger.error("Mail delivery to %s failed: %s", to, exc)
            raise MailDeliveryError(str(exc)) from exc

        current_app.logger.info("Mail sent to %s: %s", to, subject)
