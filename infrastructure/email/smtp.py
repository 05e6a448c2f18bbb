"""SMTP implementation of EmailProvider (aiosmtplib).

Defaults target an implicit-TLS relay on port 465 with the connect and
socket timeouts from EmailSettings.
"""

from email.message import EmailMessage
from typing import Optional

import aiosmtplib

from config import EmailSettings
from infrastructure.email.templates import OtpEmailRenderer
from shared.logging import get_logger

log = get_logger(__name__)


class SmtpProvider:
    def __init__(
        self,
        settings: EmailSettings,
        renderer: Optional[OtpEmailRenderer] = None,
    ) -> None:
        self._settings = settings
        self._renderer = renderer or OtpEmailRenderer(app_name=settings.email_from_name)

    def _build_message(
        self, to_email: str, subject: str, html_body: str, text_body: str
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = f"{self._settings.email_from_name} <{self._settings.email_from}>"
        message["To"] = to_email
        message["Subject"] = subject
        message.set_content(text_body)
        message.add_alternative(html_body, subtype="html")
        return message

    async def send_otp_email(self, email: str, otp_code: str) -> bool:
        if not self._settings.smtp_configured:
            log.error("smtp_send_failed", reason="credentials_not_configured")
            return False

        rendered = self._renderer.render(otp_code)
        message = self._build_message(
            email, rendered.subject, rendered.html_body, rendered.text_body
        )

        try:
            await aiosmtplib.send(
                message,
                hostname=self._settings.smtp_host,
                port=self._settings.smtp_port,
                username=self._settings.smtp_user,
                password=self._settings.smtp_password,
                use_tls=self._settings.smtp_use_tls,
                start_tls=not self._settings.smtp_use_tls,
                timeout=self._settings.email_socket_timeout_seconds,
            )
            log.info("email_sent_success", to_email=email, transport="smtp")
            return True
        except (aiosmtplib.SMTPException, OSError) as e:
            log.error(
                "email_send_error",
                to_email=email,
                transport="smtp",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False
