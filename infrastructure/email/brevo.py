"""Brevo (Sendinblue) transactional email implementation of EmailProvider.

Sends through the Brevo HTTP API using the shared async HttpClient.
"""

from typing import Optional

from config import EmailSettings
from infrastructure.email.templates import OtpEmailRenderer
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)


class BrevoProvider:
    def __init__(
        self,
        settings: EmailSettings,
        http_client: HttpClient,
        renderer: Optional[OtpEmailRenderer] = None,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._renderer = renderer or OtpEmailRenderer(app_name=settings.email_from_name)

    async def _send(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: Optional[str] = None,
    ) -> bool:
        if not self._settings.brevo_api_key:
            log.error("brevo_send_failed", reason="api_key_not_configured")
            return False

        payload: dict = {
            "sender": {
                "email": self._settings.email_from,
                "name": self._settings.email_from_name,
            },
            "to": [{"email": to_email}],
            "subject": subject,
            "htmlContent": html_body,
        }
        if text_body:
            payload["textContent"] = text_body

        headers = {
            "api-key": self._settings.brevo_api_key,
            "Content-Type": "application/json",
            "accept": "application/json",
        }

        try:
            response = await self._http.post(
                self._settings.brevo_api_url, json=payload, headers=headers
            )
            if response.status_code in (200, 201, 202):
                log.info("email_sent_success", to_email=to_email, transport="brevo")
                return True
            log.error(
                "email_sent_failed",
                to_email=to_email,
                transport="brevo",
                status_code=response.status_code,
                response=response.text[:200],
            )
            return False
        except Exception as e:
            log.error(
                "email_send_error",
                to_email=to_email,
                transport="brevo",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    async def send_otp_email(self, email: str, otp_code: str) -> bool:
        rendered = self._renderer.render(otp_code)
        return await self._send(
            email, rendered.subject, rendered.html_body, rendered.text_body
        )
