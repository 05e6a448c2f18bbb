"""
Random code generators — pure, side-effect-free functions.

All generators use cryptographically secure sources (``secrets`` module).
"""

from __future__ import annotations

import secrets

OTP_MIN = 100000
OTP_MAX = 999999


def generate_otp_code() -> str:
    """Generate a uniformly random 6-digit OTP in ``100000..999999``.

    The leading digit is never zero so the code is always six characters
    when rendered as an integer.
    """
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def generate_request_id() -> str:
    """Generate a short unique request ID for log correlation."""
    return f"req_{secrets.token_hex(6)}"
