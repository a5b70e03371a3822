"""OAuth link repository for database operations."""

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.infrastructure.persistence.models import AccountModel, OAuthLinkModel


class OAuthLinkRepository:
    """Repository for provider-identity links."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_provider_account(
        self, provider: str, provider_account_id: str
    ) -> OAuthLinkModel | None:
        """Find the link for a provider identity.

        Args:
            provider: Provider name, e.g. "google".
            provider_account_id: The provider's stable user ID.

        Returns:
            Link model if found, None otherwise.
        """
        result = await self.session.execute(
            select(OAuthLinkModel).where(
                and_(
                    OAuthLinkModel.provider == provider,
                    OAuthLinkModel.provider_account_id == provider_account_id,
                )
            )
        )
        return result.scalar_one_or_none()

    async def create_account_with_link(
        self, account: AccountModel, link: OAuthLinkModel
    ) -> tuple[AccountModel, OAuthLinkModel]:
        """Insert an account and its first provider link in one flush.

        Integrity errors (duplicate email or duplicate link) propagate; the
        caller owns the transaction and decides how to recover.
        """
        self.session.add(account)
        await self.session.flush()
        link.account_id = account.id
        self.session.add(link)
        await self.session.flush()
        return account, link
