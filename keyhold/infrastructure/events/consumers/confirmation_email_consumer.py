"""Sends the account confirmation email.

Subscribed to ConfirmationEmailEvent. Delivery is at-least-once, so a
redelivered event produces a duplicate email; a send failure propagates
to the transport, which redelivers or gives up and logs.
"""

from urllib.parse import urlencode

from keyhold.core.config import EmailSettings
from keyhold.domain.events import ConfirmationEmailEvent
from keyhold.domain.protocols import EmailMessage, EmailSenderProtocol, LoggerProtocol
from keyhold.infrastructure.email import templates


class ConfirmationEmailConsumer:
    def __init__(
        self,
        email_sender: EmailSenderProtocol,
        settings: EmailSettings,
        logger: LoggerProtocol,
    ) -> None:
        self._email_sender = email_sender
        self._settings = settings
        self._logger = logger

    def confirmation_link(self, event: ConfirmationEmailEvent) -> str:
        query = urlencode({"Id": str(event.user_id), "Code": event.verification_code})
        return f"{self._settings.website}/account/confirmEmail?{query}"

    async def handle(self, event: ConfirmationEmailEvent) -> None:
        message = EmailMessage(
            to_address=event.email,
            subject=f"{self._settings.business_name} Account Confirmation",
            html_body=templates.confirmation_email(
                self._settings, confirmation_link=self.confirmation_link(event)
            ),
        )
        await self._email_sender.send(message)
        self._logger.info(
            "confirmation_email_dispatched",
            user_id=str(event.user_id),
            event_id=str(event.event_id),
        )
