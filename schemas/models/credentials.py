"""
Credential variants for a user account.

A user always holds at least one usable way to sign in. The three variants
below are the only shapes a Credentials value can take; they are built
through the factory functions in this module, and the "no credential"
state has no constructor.

    PasswordOnly          — signed up with email + password
    FederatedOnly         — created by Google sign-in
    PasswordAndFederated  — password account later linked to Google
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class PasswordOnly:
    password_hash: str

    @property
    def federated_id(self) -> None:
        return None


@dataclass(frozen=True)
class FederatedOnly:
    federated_id: str

    @property
    def password_hash(self) -> None:
        return None


@dataclass(frozen=True)
class PasswordAndFederated:
    password_hash: str
    federated_id: str


Credentials = Union[PasswordOnly, FederatedOnly, PasswordAndFederated]


class MissingCredentialError(ValueError):
    """Raised when a user record would carry neither a password nor a federated id."""


def password_credentials(password_hash: str) -> PasswordOnly:
    if not password_hash:
        raise MissingCredentialError("password hash must not be empty")
    return PasswordOnly(password_hash=password_hash)


def federated_credentials(federated_id: str) -> FederatedOnly:
    if not federated_id:
        raise MissingCredentialError("federated id must not be empty")
    return FederatedOnly(federated_id=federated_id)


def link_federated(current: Credentials, federated_id: str) -> Credentials:
    """Return *current* with *federated_id* attached.

    A federated id is immutable once set, so linking a different id to an
    account that already has one is rejected.
    """
    if not federated_id:
        raise MissingCredentialError("federated id must not be empty")
    if current.federated_id is not None:
        if current.federated_id != federated_id:
            raise ValueError("account is already linked to another federated identity")
        return current
    return PasswordAndFederated(
        password_hash=current.password_hash, federated_id=federated_id
    )


def credentials_from_columns(
    password_hash: Optional[str], federated_id: Optional[str]
) -> Credentials:
    """Rebuild the credential variant from stored column values."""
    if password_hash and federated_id:
        return PasswordAndFederated(
            password_hash=password_hash, federated_id=federated_id
        )
    if password_hash:
        return PasswordOnly(password_hash=password_hash)
    if federated_id:
        return FederatedOnly(federated_id=federated_id)
    raise MissingCredentialError("user record has no usable credential")
