"""SQLAlchemy model for the oauth_links table.

Links a third-party provider identity to a local account.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.infrastructure.persistence.database import Base, utcnow


class OAuthLinkModel(Base):
    """SQLAlchemy model for the oauth_links table.

    The pair (provider, provider_account_id) is unique. Links are created
    once on first sign-in and only read afterwards.
    """

    __tablename__ = "oauth_links"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    provider: Mapped[str] = mapped_column(String(50), nullable=False)
    provider_account_id: Mapped[str] = mapped_column(String(255), nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Provider-issued refresh token, stored as given",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )

    account: Mapped["AccountModel"] = relationship(  # noqa: F821
        "AccountModel",
        back_populates="oauth_links",
    )

    __table_args__ = (
        UniqueConstraint(
            "provider",
            "provider_account_id",
            name="uq_oauth_links_provider_account",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<OAuthLink(id={self.id}, provider={self.provider}, "
            f"account_id={self.account_id})>"
        )
