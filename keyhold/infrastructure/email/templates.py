"""HTML bodies for account emails.

Interpolated values are HTML-escaped; links are built by the caller.
"""

from html import escape

from keyhold.core.config import EmailSettings


def _signature(settings: EmailSettings) -> str:
    return (
        "<br>"
        f"<h4>{escape(settings.team_name)}</h4>"
        f"<h3>{escape(settings.business_name)}</h3>"
        f"<p>Email: {escape(settings.from_address)}</p>"
        f"<p>Website: {escape(settings.website)}</p>"
    )


def confirmation_email(settings: EmailSettings, *, confirmation_link: str) -> str:
    return (
        "<h3>Congratulations! You have successfully created your account for "
        f"{escape(settings.business_name)}.</h3>"
        "<p>Please click on the link below to confirm your email address.</p>"
        f'<p><a href="{escape(confirmation_link, quote=True)}">Confirm your email</a></p>'
        + _signature(settings)
    )


def temporary_password_email(settings: EmailSettings, *, temporary_password: str) -> str:
    return (
        "<h3>Your password has been reset.</h3>"
        "<p>Use the temporary password below to sign in, then change it "
        "from your account settings.</p>"
        f"<p><strong>{escape(temporary_password)}</strong></p>"
        + _signature(settings)
    )
