"""Best-effort outbound email delivered off the request path."""

from __future__ import annotations

import atexit
import logging
import smtplib
import ssl
from concurrent.futures import Future, ThreadPoolExecutor
from email.message import EmailMessage

from flask import Flask

logger = logging.getLogger(__name__)


class Mailer:
    """SMTP notifier bound to an application with ``init_app``.

    Messages handed to :meth:`dispatch` are delivered on a small worker pool
    so the HTTP response never waits for SMTP. Delivery failures are logged
    and otherwise ignored. With ``MAIL_SUPPRESS_SEND`` enabled, messages are
    collected in :attr:`outbox` instead of being sent.
    """

    def __init__(self, app: Flask | None = None):
        self.outbox: list[EmailMessage] = []
        self._executor: ThreadPoolExecutor | None = None
        self._settings: dict = {}
        self._shutdown_registered = False
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        config = app.config
        self.shutdown()
        self.outbox = []
        self._settings = {
            "server": config.get("MAIL_SERVER", "localhost"),
            "port": int(config.get("MAIL_PORT", 25)),
            "use_tls": bool(config.get("MAIL_USE_TLS", False)),
            "username": config.get("MAIL_USERNAME"),
            "password": config.get("MAIL_PASSWORD"),
            "sender": config.get("MAIL_DEFAULT_SENDER", "noreply@localhost"),
            "timeout": int(config.get("MAIL_TIMEOUT", 10)),
            "suppress": bool(config.get("MAIL_SUPPRESS_SEND", False)),
        }
        if config.get("MAIL_ASYNC", True):
            self._executor = ThreadPoolExecutor(
                max_workers=int(config.get("MAIL_MAX_WORKERS", 2)),
                thread_name_prefix="mailer",
            )
        if not self._shutdown_registered:
            atexit.register(self.shutdown)
            self._shutdown_registered = True
        app.extensions["mailer"] = self

    @property
    def default_sender(self) -> str:
        return self._settings.get("sender", "noreply@localhost")

    def build_message(
        self,
        to: str,
        subject: str,
        html: str,
        *,
        reply_to: str | None = None,
        sender: str | None = None,
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = sender or self.default_sender
        message["To"] = to
        message["Subject"] = subject
        if reply_to:
            message["Reply-To"] = reply_to
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    def send(self, message: EmailMessage) -> None:
        """Deliver ``message`` synchronously, raising on SMTP failure."""

        settings = self._settings
        if settings.get("suppress"):
            self.outbox.append(message)
            return

        with smtplib.SMTP(
            settings["server"], settings["port"], timeout=settings["timeout"]
        ) as smtp:
            if settings["use_tls"]:
                smtp.starttls(context=ssl.create_default_context())
            if settings["username"]:
                smtp.login(settings["username"], settings["password"] or "")
            smtp.send_message(message)

    def dispatch(self, message: EmailMessage) -> Future | None:
        """Queue ``message`` for delivery without raising delivery errors."""

        if not message["To"]:
            logger.warning("Dropping mail %r without a recipient", message["Subject"])
            return None
        if self._executor is None:
            self._deliver(message)
            return None
        return self._executor.submit(self._deliver, message)

    def _deliver(self, message: EmailMessage) -> bool:
        try:
            self.send(message)
        except Exception:
            logger.exception("Email sending failed for %s", message["To"])
            return False
        logger.info("Email %r sent to %s", message["Subject"], message["To"])
        return True

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker pool after pending deliveries finish."""

        executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)


mailer = Mailer()
