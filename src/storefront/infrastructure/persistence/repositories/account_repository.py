"""Queries and writes against the accounts table."""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.infrastructure.persistence.database import utcnow
from storefront.infrastructure.persistence.models import AccountModel


class AccountRepository:
    """Account lookups plus the refresh-hash compare-and-set.

    Writes are flushed, never committed; AuthService owns the transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, account: AccountModel) -> AccountModel:
        """Insert an account and flush so its ID is assigned."""
        self.session.add(account)
        await self.session.flush()
        return account

    async def get_by_id(self, account_id: int) -> AccountModel | None:
        result = await self.session.execute(
            select(AccountModel).where(AccountModel.id == account_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> AccountModel | None:
        # Callers pass the lowercased email; the column stores it that way
        result = await self.session.execute(
            select(AccountModel).where(AccountModel.email == email)
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        result = await self.session.execute(
            select(AccountModel.id).where(AccountModel.email == email).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def get_refresh_state(self, account_id: int) -> tuple[str | None, int] | None:
        """Read the stored refresh hash and its version straight from the table.

        Bypasses the identity map so the caller sees the committed row.

        Args:
            account_id: Account ID.

        Returns:
            (refresh_token_hash, refresh_token_version), or None if the
            account does not exist.
        """
        result = await self.session.execute(
            select(
                AccountModel.refresh_token_hash,
                AccountModel.refresh_token_version,
            ).where(AccountModel.id == account_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return row.refresh_token_hash, row.refresh_token_version

    async def update_refresh_hash(
        self,
        account_id: int,
        token_hash: str | None,
        expected_version: int | None = None,
    ) -> bool:
        """Replace the stored refresh hash and bump its version.

        When expected_version is given the write only happens if the row
        still carries that version (compare-and-set). Without it the write
        is unconditional.

        Args:
            account_id: Account ID.
            token_hash: New hash, or None to clear the active session.
            expected_version: Version the caller read before hashing.

        Returns:
            True if a row was updated, False if the account is gone or
            another writer got there first.
        """
        stmt = update(AccountModel).where(AccountModel.id == account_id)
        if expected_version is not None:
            stmt = stmt.where(AccountModel.refresh_token_version == expected_version)
        stmt = stmt.values(
            refresh_token_hash=token_hash,
            refresh_token_version=AccountModel.refresh_token_version + 1,
            updated_at=utcnow(),
        ).execution_options(synchronize_session=False)

        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def update(self, account: AccountModel) -> AccountModel:
        """Flush pending attribute changes on an already-loaded account."""
        await self.session.flush()
        return account
