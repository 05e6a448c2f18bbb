"""Ordered fallback across email transports.

Providers are tried in order; the first one that reports a successful
delivery wins. An empty chain delivers nothing and reports failure.
"""

from typing import Sequence

from infrastructure.email.protocol import EmailProvider
from shared.logging import get_logger

log = get_logger(__name__)


class EmailProviderChain:
    def __init__(self, providers: Sequence[EmailProvider]) -> None:
        self._providers = list(providers)

    @property
    def providers(self) -> list[EmailProvider]:
        return list(self._providers)

    async def send_otp_email(self, email: str, otp_code: str) -> bool:
        if not self._providers:
            log.warning("email_no_transport_configured", to_email=email)
            return False

        for provider in self._providers:
            if await provider.send_otp_email(email, otp_code):
                return True
            log.warning(
                "email_transport_fallback",
                to_email=email,
                failed_transport=type(provider).__name__,
            )
        return False
