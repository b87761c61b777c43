"""Outbound email adapters."""

from keyhold.infrastructure.email.logging_email_sender import LoggingEmailSender
from keyhold.infrastructure.email.smtp_email_sender import SmtpEmailSender

__all__ = ["LoggingEmailSender", "SmtpEmailSender"]
