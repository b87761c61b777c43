"""Development email sender: logs instead of delivering."""

from keyhold.domain.protocols import EmailMessage, LoggerProtocol


class LoggingEmailSender:
    """EmailSenderProtocol implementation that records intent only.

    The body is not logged; it may contain codes or temporary passwords.
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger

    async def send(self, message: EmailMessage) -> None:
        self._logger.info(
            "email_would_be_sent",
            to_address=message.to_address,
            subject=message.subject,
            body_length=len(message.html_body),
        )
