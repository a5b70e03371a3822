"""SQLAlchemy model for the accounts table.

Accounts are uniquely identified by email and hold at most one stored
refresh-token hash at a time.
"""

from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.domain.entities import AccountProfile, AccountRole
from storefront.infrastructure.persistence.database import Base, utcnow


class AccountModel(Base):
    """SQLAlchemy model for the accounts table.

    Attributes:
        id: Primary key (autoincrement integer).
        name: Display name.
        email: Email address (globally unique).
        email_verified: When the email was verified, if ever.
        password_hash: Argon2 hash of the password; None for OAuth-only accounts.
        refresh_token_hash: Argon2 hash of the single active refresh token.
        refresh_token_version: Incremented on every write of refresh_token_hash;
            used as the compare-and-set guard for rotation.
        role: ADMIN or CUSTOMER.
        image: Optional avatar URL.
        created_at: Timestamp when the account was created.
        updated_at: Timestamp when the account was last updated.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Account email address",
    )
    email_verified: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    password_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Hashed password (argon2); null for OAuth-only accounts",
    )
    refresh_token_hash: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Hashed active refresh token (argon2)",
    )
    refresh_token_version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )
    role: Mapped[AccountRole] = mapped_column(
        Enum(AccountRole, name="account_role"),
        nullable=False,
        default=AccountRole.CUSTOMER,
        server_default=AccountRole.CUSTOMER.value,
    )
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
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

    oauth_links: Mapped[list["OAuthLinkModel"]] = relationship(  # noqa: F821
        "OAuthLinkModel",
        back_populates="account",
        cascade="all, delete-orphan",
    )

    def to_profile(self) -> AccountProfile:
        """Map to the public profile."""
        return AccountProfile(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
            image=self.image,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, email={self.email}, role={self.role})>"
