"""EmailProvider protocol — services depend on this, not the concrete implementation.

Providers report delivery as a bool and never raise for transport errors;
the OTP issuer decides what a failed delivery means.
"""

from typing import Protocol


class EmailProvider(Protocol):
    async def send_otp_email(self, email: str, otp_code: str) -> bool: ...
