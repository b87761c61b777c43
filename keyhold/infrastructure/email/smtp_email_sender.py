"""SMTP email sender.

Uses the standard library's smtplib in a worker thread so the event loop
is never blocked. Each send opens its own connection; delivery is retried
up to ``max_retry_attempts`` times and the last error is re-raised so the
event transport can redeliver.
"""

import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from keyhold.core.config import EmailSettings
from keyhold.domain.protocols import EmailMessage, LoggerProtocol


class SmtpEmailSender:
    def __init__(self, settings: EmailSettings, logger: LoggerProtocol) -> None:
        self._settings = settings
        self._logger = logger

    async def send(self, message: EmailMessage) -> None:
        """Deliver one message.

        Raises:
            smtplib.SMTPException | OSError: All attempts failed.
        """
        attempts = self._settings.max_retry_attempts
        for attempt in range(1, attempts + 1):
            try:
                await asyncio.to_thread(self._send_sync, message)
            except (smtplib.SMTPException, OSError) as e:
                if attempt == attempts:
                    self._logger.error(
                        "email_send_failed",
                        error=e,
                        to_address=message.to_address,
                        attempts=attempt,
                    )
                    raise
                self._logger.warning(
                    "email_send_retrying",
                    to_address=message.to_address,
                    attempt=attempt,
                    error_type=type(e).__name__,
                )
                continue
            self._logger.info(
                "email_sent",
                to_address=message.to_address,
                subject=message.subject,
                attempt=attempt,
            )
            return

    def build_mime(self, message: EmailMessage) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = formataddr((self._settings.from_name, self._settings.from_address))
        msg["To"] = message.to_address
        msg["Subject"] = message.subject
        msg.attach(MIMEText(message.html_body, "html"))
        return msg

    def _send_sync(self, message: EmailMessage) -> None:
        settings = self._settings
        with smtplib.SMTP(
            settings.smtp_host, settings.smtp_port, timeout=settings.timeout_seconds
        ) as server:
            if settings.use_tls:
                server.starttls()
            if settings.smtp_username and settings.smtp_password:
                server.login(settings.smtp_username, settings.smtp_password)
            server.send_message(self.build_mime(message), to_addrs=[message.to_address])
