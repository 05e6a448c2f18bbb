"""
Account link policies for Google sign-in.

When a Google identity arrives whose email already belongs to a local
account without a google_id, the configured policy decides what happens:

    link-by-email        attach the Google id and mark the email verified,
                         only when Google reports the email as verified
    reject-on-conflict   refuse with 409, leave the account untouched
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from errors import ConflictError
from infrastructure.google_identity import FederatedIdentity
from repositories.user_repository import UserRepository
from schemas.models.user import User
from shared.logging import get_logger

log = get_logger(__name__)


class AccountLinkPolicy(ABC):
    name: str

    @abstractmethod
    async def resolve(
        self, users: UserRepository, existing: User, identity: FederatedIdentity
    ) -> User:
        """Return the user to sign in, or raise."""


class LinkByEmailPolicy(AccountLinkPolicy):
    name = "link-by-email"

    async def resolve(
        self, users: UserRepository, existing: User, identity: FederatedIdentity
    ) -> User:
        if not identity.email_verified:
            log.warning(
                "google_link_rejected",
                reason="provider_email_unverified",
                user_id=str(existing.id),
            )
            raise ConflictError(
                "An account with this email already exists. Sign in with your password."
            )
        user = await users.link_federated_id(existing, identity.provider_user_id)
        log.info("google_account_linked", user_id=str(user.id))
        return user


class RejectOnConflictPolicy(AccountLinkPolicy):
    name = "reject-on-conflict"

    async def resolve(
        self, users: UserRepository, existing: User, identity: FederatedIdentity
    ) -> User:
        log.warning("google_link_rejected", user_id=str(existing.id))
        raise ConflictError(
            "An account with this email already exists. Sign in with your password."
        )


LINK_POLICIES: dict[str, type[AccountLinkPolicy]] = {
    LinkByEmailPolicy.name: LinkByEmailPolicy,
    RejectOnConflictPolicy.name: RejectOnConflictPolicy,
}


def get_link_policy(name: str) -> AccountLinkPolicy:
    try:
        return LINK_POLICIES[name]()
    except KeyError:
        raise ValueError(f"unknown account link policy: {name!r}") from None
