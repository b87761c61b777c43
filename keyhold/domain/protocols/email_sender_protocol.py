"""Email sender protocol.

Implementations deliver (or, in development, log) a single message.
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, kw_only=True)
class EmailMessage:
    """Outbound email.

    Attributes:
        to_address: Recipient address.
        subject: Subject line.
        html_body: HTML body.
    """

    to_address: str
    subject: str
    html_body: str


class EmailSenderProtocol(Protocol):
    async def send(self, message: EmailMessage) -> None:
        """Send one message.

        Raises:
            Exception: Delivery failures propagate so the event transport
                can redeliver.
        """
        ...
