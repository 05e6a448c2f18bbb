"""
Cryptographic helpers — password hashing and OTP digesting.

Uses argon2 for passwords (via argon2-cffi) and SHA-256 for OTP codes.
Password hashing is CPU-bound; the async variants push it to a
worker thread so request handling never stalls the event loop.
"""

from __future__ import annotations

import asyncio
import hashlib
import secrets
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_password_hasher = PasswordHasher()

# One throwaway hash per cost configuration, see dummy_password_hash()
_dummy_hashes: dict[tuple[int, int, int], str] = {}


def build_password_hasher(
    time_cost: int, memory_cost: int, parallelism: int
) -> PasswordHasher:
    """Return an argon2id hasher with the given cost parameters."""
    return PasswordHasher(
        time_cost=time_cost, memory_cost=memory_cost, parallelism=parallelism
    )


def hash_password(
    plain_password: str, hasher: Optional[PasswordHasher] = None
) -> str:
    """Hash *plain_password* with argon2id.

    Returns:
        Argon2 hash string (includes algorithm parameters and salt).
    """
    return (hasher or _password_hasher).hash(plain_password)


def verify_password(
    plain_password: str,
    password_hash: str,
    hasher: Optional[PasswordHasher] = None,
) -> bool:
    """Verify *plain_password* against an argon2 *password_hash*.

    Returns:
        ``True`` if the password matches, ``False`` for a wrong password or
        an unreadable hash.
    """
    try:
        (hasher or _password_hasher).verify(password_hash, plain_password)
        return True
    except (VerificationError, InvalidHashError):
        return False


def dummy_password_hash(hasher: Optional[PasswordHasher] = None) -> str:
    """Return a hash of a random secret made with *hasher*'s parameters.

    Login paths that have no stored hash verify against this one, so they
    spend the same argon2 time as a real password check.
    """
    hasher = hasher or _password_hasher
    params = (hasher.time_cost, hasher.memory_cost, hasher.parallelism)
    if params not in _dummy_hashes:
        _dummy_hashes[params] = hasher.hash(secrets.token_urlsafe(16))
    return _dummy_hashes[params]


async def hash_password_async(
    plain_password: str, hasher: Optional[PasswordHasher] = None
) -> str:
    return await asyncio.to_thread(hash_password, plain_password, hasher)


async def verify_password_async(
    plain_password: str,
    password_hash: str,
    hasher: Optional[PasswordHasher] = None,
) -> bool:
    return await asyncio.to_thread(
        verify_password, plain_password, password_hash, hasher
    )


def hash_otp(code: str) -> str:
    """Return the hex-encoded SHA-256 digest of *code*.

    OTP codes are digested before they are stored so the plaintext is never
    persisted; verification digests the submitted code and compares.

    Returns:
        64-character lowercase hex string.
    """
    return hashlib.sha256(code.encode("utf-8")).hexdigest()
