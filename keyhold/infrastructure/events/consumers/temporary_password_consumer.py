"""Sends the temporary password issued by the forgot-password flow."""

from keyhold.core.config import EmailSettings
from keyhold.domain.events import TemporaryPasswordEvent
from keyhold.domain.protocols import EmailMessage, EmailSenderProtocol, LoggerProtocol
from keyhold.infrastructure.email import templates


class TemporaryPasswordConsumer:
    def __init__(
        self,
        email_sender: EmailSenderProtocol,
        settings: EmailSettings,
        logger: LoggerProtocol,
    ) -> None:
        self._email_sender = email_sender
        self._settings = settings
        self._logger = logger

    async def handle(self, event: TemporaryPasswordEvent) -> None:
        message = EmailMessage(
            to_address=event.email,
            subject=f"{self._settings.business_name} Password Reset",
            html_body=templates.temporary_password_email(
                self._settings, temporary_password=event.temporary_password
            ),
        )
        await self._email_sender.send(message)
        self._logger.info(
            "temporary_password_email_dispatched",
            user_id=str(event.user_id),
            event_id=str(event.event_id),
        )
