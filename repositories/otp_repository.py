"""OTP repository — reads and writes against the `otps` table."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from schemas.models.otp import OneTimePasscode
from shared.datetime_utils import utcnow

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class OtpRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def replace(
        self, email: str, code_hash: str, expires_at: datetime
    ) -> OneTimePasscode:
        """Store a new code for *email*, overwriting any previous one.

        `otps.email` is unique, so this is a single upsert. Concurrent calls
        for the same email block on the conflicting row and the last one to
        commit wins; there is never more than one row per email.
        """
        insert = _UPSERT_INSERTS[self._session.get_bind().dialect.name]
        stmt = insert(OneTimePasscode).values(
            email=email, code=code_hash, expires_at=expires_at, created_at=utcnow()
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["email"],
            set_={
                "code": stmt.excluded.code,
                "expires_at": stmt.excluded.expires_at,
                "created_at": stmt.excluded.created_at,
            },
        )
        await self._session.execute(stmt)

        result = await self._session.execute(
            select(OneTimePasscode)
            .where(OneTimePasscode.email == email)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def find_live(
        self, email: str, code_hash: str, now: datetime
    ) -> Optional[OneTimePasscode]:
        result = await self._session.execute(
            select(OneTimePasscode).where(
                OneTimePasscode.email == email,
                OneTimePasscode.code == code_hash,
                OneTimePasscode.expires_at > now,
            )
        )
        return result.scalars().first()

    async def count_live(self, email: str, now: datetime) -> int:
        result = await self._session.execute(
            select(OneTimePasscode.id).where(
                OneTimePasscode.email == email,
                OneTimePasscode.expires_at > now,
            )
        )
        return len(result.all())

    async def delete_for_email(self, email: str) -> int:
        result = await self._session.execute(
            delete(OneTimePasscode).where(OneTimePasscode.email == email)
        )
        return result.rowcount
