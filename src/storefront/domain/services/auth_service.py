"""Authentication service for credential and session management.

Coordinates password hashing, token signing, refresh-token encryption and
the account stores to implement registration, login, OAuth sign-in, token
refresh and logout. Each account holds at most one active refresh token;
its Argon2 hash is replaced with an optimistic compare-and-set on
``refresh_token_version`` so concurrent sign-ins cannot leave two valid
refresh tokens behind.

Every public operation returns an ``AuthResult``. Classified failures are
reported through the result; anything else is logged, rolled back and
reported as ``UNEXPECTED``.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import get_settings
from storefront.core.logging import get_logger
from storefront.domain.entities import (
    AccountProfile,
    AccountRole,
    IssuedSession,
    OAuthIdentity,
    RefreshedTokens,
)
from storefront.domain.services.auth_result import AuthErrorKind, AuthResult
from storefront.domain.services.credential_validator import (
    CredentialValidator,
    default_credential_validator,
    normalize_email,
)
from storefront.infrastructure.auth import (
    DUMMY_PASSWORD_HASH,
    InvalidOrExpiredTokenError,
    TokenClaims,
    TokenPurpose,
    TokenSigner,
    hash_password_async,
    needs_rehash,
    token_signer as default_token_signer,
    verify_password_async,
)
from storefront.infrastructure.persistence.database import utcnow
from storefront.infrastructure.persistence.models import AccountModel, OAuthLinkModel
from storefront.infrastructure.persistence.repositories import (
    AccountRepository,
    OAuthLinkRepository,
)
from storefront.infrastructure.security import DecryptionError, TokenCipher

logger = get_logger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
UNEXPECTED_MESSAGE = "An unexpected error occurred"


class RefreshHashConflictError(Exception):
    """Raised when the refresh hash keeps changing underneath a sign-in."""


class AuthService:
    """Service for authentication and session business logic."""

    # Sign-ins retry the compare-and-set this many times before giving up
    MAX_ROTATION_ATTEMPTS = 3

    def __init__(
        self,
        session: AsyncSession,
        token_signer: TokenSigner | None = None,
        token_cipher: TokenCipher | None = None,
        validator: CredentialValidator | None = None,
        rotate_refresh_tokens: bool | None = None,
    ) -> None:
        """Initialize the authentication service.

        Args:
            session: SQLAlchemy async session, one per request.
            token_signer: Signer for access and refresh tokens.
            token_cipher: Cipher for refresh tokens in transit.
            validator: Input validator for credentials and profiles.
            rotate_refresh_tokens: Whether refresh issues a new refresh
                token. Defaults to the configured value.
        """
        self.session = session
        self.account_repo = AccountRepository(session)
        self.oauth_link_repo = OAuthLinkRepository(session)
        self.token_signer = token_signer or default_token_signer
        self.token_cipher = token_cipher or TokenCipher()
        self.validator = validator or default_credential_validator
        if rotate_refresh_tokens is None:
            rotate_refresh_tokens = get_settings().rotate_refresh_tokens
        self.rotate_refresh_tokens = rotate_refresh_tokens

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def register(self, name: str, email: str, password: str) -> AuthResult[AccountProfile]:
        """Create a customer account with a password.

        No tokens are issued; the caller logs in separately.
        """
        return await self._create_account(name, email, password, AccountRole.CUSTOMER)

    async def create_admin(self, name: str, email: str, password: str) -> AuthResult[AccountProfile]:
        """Create an administrator account with a password."""
        return await self._create_account(name, email, password, AccountRole.ADMIN)

    async def _create_account(
        self, name: str, email: str, password: str, role: AccountRole
    ) -> AuthResult[AccountProfile]:
        errors = self.validator.validate_registration(name, email, password)
        if errors:
            return AuthResult.fail(AuthErrorKind.VALIDATION_ERROR, "Validation failed", errors)

        email = normalize_email(email)
        try:
            if await self.account_repo.email_exists(email):
                logger.info("Registration rejected", reason="duplicate_email")
                return AuthResult.fail(AuthErrorKind.DUPLICATE_EMAIL, "Email already registered")

            account = AccountModel(
                name=name.strip(),
                email=email,
                password_hash=await hash_password_async(password),
                role=role,
            )
            await self.account_repo.create(account)
            await self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            await self.session.rollback()
            logger.info("Registration rejected", reason="duplicate_email_race")
            return AuthResult.fail(AuthErrorKind.DUPLICATE_EMAIL, "Email already registered")
        except Exception as e:
            return await self._unexpected("register", e)

        logger.info("Account registered", account_id=account.id, role=role.value)
        return AuthResult.success(account.to_profile())

    # ------------------------------------------------------------------
    # Sign-in
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> AuthResult[IssuedSession]:
        """Authenticate with email and password and start a new session.

        Any previously issued refresh token for the account stops working.
        """
        errors = self.validator.validate_login(email, password)
        if errors:
            return AuthResult.fail(AuthErrorKind.VALIDATION_ERROR, "Validation failed", errors)

        email = normalize_email(email)
        try:
            account = await self.account_repo.get_by_email(email)
            if account is None or account.password_hash is None:
                await verify_password_async(password, DUMMY_PASSWORD_HASH)
                logger.info(
                    "Login failed",
                    reason="unknown_email" if account is None else "no_password",
                )
                return AuthResult.fail(
                    AuthErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE
                )

            if not await verify_password_async(password, account.password_hash):
                logger.info("Login failed", reason="wrong_password", account_id=account.id)
                return AuthResult.fail(
                    AuthErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE
                )

            if needs_rehash(account.password_hash):
                account.password_hash = await hash_password_async(password)

            issued = await self._issue_session(account)
            await self.session.commit()
        except Exception as e:
            return await self._unexpected("login", e)

        logger.info("Login succeeded", account_id=account.id)
        return AuthResult.success(issued)

    async def validate_oauth(self, identity: OAuthIdentity) -> AuthResult[IssuedSession]:
        """Sign in with a provider identity, creating the account on first use.

        An email already owned by an account without this provider link is
        rejected as ``DUPLICATE_EMAIL`` and nothing is created.
        """
        is_new_account = False
        try:
            link = await self.oauth_link_repo.get_by_provider_account(
                identity.provider, identity.provider_account_id
            )

            if link is None:
                # The provider email becomes the account email and must fit its column
                errors = self.validator.validate_email(identity.email)
                if errors:
                    logger.info(
                        "OAuth sign-in rejected",
                        provider=identity.provider,
                        reason="invalid_email",
                    )
                    return AuthResult.fail(
                        AuthErrorKind.VALIDATION_ERROR, "Validation failed", errors
                    )

                email = normalize_email(identity.email)
                if await self.account_repo.email_exists(email):
                    logger.info(
                        "OAuth sign-in rejected",
                        provider=identity.provider,
                        reason="duplicate_email",
                    )
                    return AuthResult.fail(
                        AuthErrorKind.DUPLICATE_EMAIL,
                        "Email already registered with a different sign-in method",
                    )

                account = AccountModel(
                    name=identity.name[: self.validator.max_name_length],
                    email=email,
                    password_hash=None,
                    role=AccountRole.CUSTOMER,
                    image=identity.image,
                    email_verified=utcnow(),
                )
                new_link = OAuthLinkModel(
                    provider=identity.provider,
                    provider_account_id=identity.provider_account_id,
                    refresh_token=identity.provider_refresh_token,
                )
                try:
                    await self.oauth_link_repo.create_account_with_link(account, new_link)
                    link = new_link
                    is_new_account = True
                except IntegrityError:
                    # Only reads preceded the insert, so nothing else is lost
                    await self.session.rollback()
                    link = await self.oauth_link_repo.get_by_provider_account(
                        identity.provider, identity.provider_account_id
                    )
                    if link is None:
                        logger.info(
                            "OAuth sign-in rejected",
                            provider=identity.provider,
                            reason="duplicate_email_race",
                        )
                        return AuthResult.fail(
                            AuthErrorKind.DUPLICATE_EMAIL,
                            "Email already registered with a different sign-in method",
                        )
                    logger.info(
                        "OAuth link created concurrently, reusing it",
                        provider=identity.provider,
                        account_id=link.account_id,
                    )

            account = await self.account_repo.get_by_id(link.account_id)
            if account is None:
                return AuthResult.fail(AuthErrorKind.ACCOUNT_NOT_FOUND, "Account not found")

            issued = await self._issue_session(account, is_new_account=is_new_account)
            await self.session.commit()
        except Exception as e:
            return await self._unexpected("validate_oauth", e)

        logger.info(
            "OAuth sign-in succeeded",
            provider=identity.provider,
            account_id=account.id,
            is_new_account=is_new_account,
        )
        return AuthResult.success(issued)

    async def _issue_session(
        self, account: AccountModel, is_new_account: bool = False
    ) -> IssuedSession:
        """Mint access and refresh tokens and store the refresh hash.

        Retries with a fresh version read when another writer replaces the
        hash between the read and the write.

        Raises:
            RefreshHashConflictError: If every attempt loses the race.
        """
        claims = self._claims_for(account)
        for attempt in range(1, self.MAX_ROTATION_ATTEMPTS + 1):
            state = await self.account_repo.get_refresh_state(account.id)
            if state is None:
                raise LookupError(f"Account {account.id} disappeared during sign-in")
            _, version = state

            access_token = self.token_signer.sign(claims, TokenPurpose.ACCESS)
            refresh_token = self.token_signer.sign(claims, TokenPurpose.REFRESH)
            refresh_hash = await hash_password_async(refresh_token)

            if await self.account_repo.update_refresh_hash(
                account.id, refresh_hash, expected_version=version
            ):
                return IssuedSession(
                    profile=account.to_profile(),
                    access_token=access_token,
                    encrypted_refresh_token=self.token_cipher.encrypt(refresh_token),
                    is_new_account=is_new_account,
                )

            logger.warning(
                "Refresh hash changed concurrently, retrying",
                account_id=account.id,
                attempt=attempt,
            )

        raise RefreshHashConflictError(
            f"Could not store refresh token for account {account.id}"
        )

    # ------------------------------------------------------------------
    # Session maintenance
    # ------------------------------------------------------------------

    async def refresh_access_token(
        self, encrypted_refresh_token: str | None
    ) -> AuthResult[RefreshedTokens]:
        """Exchange an encrypted refresh token for a new access token.

        With rotation enabled a new refresh token is issued as well and the
        presented one stops working.
        """
        if not encrypted_refresh_token or not encrypted_refresh_token.strip():
            return AuthResult.fail(AuthErrorKind.MISSING_TOKEN, "Refresh token is missing")

        try:
            refresh_token = self.token_cipher.decrypt(encrypted_refresh_token)
        except DecryptionError:
            logger.info("Refresh rejected", kind=AuthErrorKind.INVALID_TOKEN.value)
            return AuthResult.fail(AuthErrorKind.INVALID_TOKEN, "Invalid refresh token")

        try:
            claims = self.token_signer.verify(refresh_token, TokenPurpose.REFRESH)
        except InvalidOrExpiredTokenError as e:
            logger.info(
                "Refresh rejected",
                kind=AuthErrorKind.INVALID_OR_EXPIRED_TOKEN.value,
                reason=e.reason,
            )
            return AuthResult.fail(
                AuthErrorKind.INVALID_OR_EXPIRED_TOKEN, "Refresh token is invalid or expired"
            )

        try:
            account = await self.account_repo.get_by_id(claims.id)
            if account is None:
                logger.info(
                    "Refresh rejected",
                    kind=AuthErrorKind.ACCOUNT_NOT_FOUND.value,
                    account_id=claims.id,
                )
                return AuthResult.fail(AuthErrorKind.ACCOUNT_NOT_FOUND, "Account not found")

            state = await self.account_repo.get_refresh_state(account.id)
            if state is None:
                return AuthResult.fail(AuthErrorKind.ACCOUNT_NOT_FOUND, "Account not found")
            stored_hash, version = state

            if stored_hash is None:
                logger.info(
                    "Refresh rejected",
                    kind=AuthErrorKind.NO_ACTIVE_SESSION.value,
                    account_id=account.id,
                )
                return AuthResult.fail(AuthErrorKind.NO_ACTIVE_SESSION, "No active session")

            if not await verify_password_async(refresh_token, stored_hash):
                logger.info(
                    "Refresh rejected",
                    kind=AuthErrorKind.REFRESH_TOKEN_MISMATCH.value,
                    account_id=account.id,
                )
                return AuthResult.fail(
                    AuthErrorKind.REFRESH_TOKEN_MISMATCH, "Refresh token does not match"
                )

            fresh_claims = self._claims_for(account)
            access_token = self.token_signer.sign(fresh_claims, TokenPurpose.ACCESS)
            if not self.rotate_refresh_tokens:
                logger.info("Access token refreshed", account_id=account.id, rotated=False)
                return AuthResult.success(RefreshedTokens(access_token=access_token))

            new_refresh_token = self.token_signer.sign(fresh_claims, TokenPurpose.REFRESH)
            new_hash = await hash_password_async(new_refresh_token)
            if not await self.account_repo.update_refresh_hash(
                account.id, new_hash, expected_version=version
            ):
                # Another refresh or sign-in replaced the hash first.
                # Rollback expires ``account``; only plain values are used after it.
                await self.session.rollback()
                logger.info(
                    "Refresh rejected",
                    kind=AuthErrorKind.REFRESH_TOKEN_MISMATCH.value,
                    account_id=claims.id,
                    reason="concurrent_rotation",
                )
                return AuthResult.fail(
                    AuthErrorKind.REFRESH_TOKEN_MISMATCH, "Refresh token does not match"
                )
            await self.session.commit()
        except Exception as e:
            return await self._unexpected("refresh_access_token", e)

        logger.info("Access token refreshed", account_id=account.id, rotated=True)
        return AuthResult.success(
            RefreshedTokens(
                access_token=access_token,
                encrypted_refresh_token=self.token_cipher.encrypt(new_refresh_token),
            )
        )

    async def logout(self, account_id: int) -> AuthResult[None]:
        """End the account's session by clearing its refresh hash.

        Idempotent; an unknown account ID is not an error.
        """
        try:
            await self.account_repo.update_refresh_hash(account_id, None)
            await self.session.commit()
        except Exception as e:
            return await self._unexpected("logout", e)

        logger.info("Logged out", account_id=account_id)
        return AuthResult.success(None)

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    async def get_profile(self, account_id: int) -> AuthResult[AccountProfile]:
        """Get the public profile of an account."""
        try:
            account = await self.account_repo.get_by_id(account_id)
        except Exception as e:
            return await self._unexpected("get_profile", e)

        if account is None:
            return AuthResult.fail(AuthErrorKind.ACCOUNT_NOT_FOUND, "Account not found")
        return AuthResult.success(account.to_profile())

    async def update_profile(
        self,
        account_id: int,
        name: str | None = None,
        password: str | None = None,
        image: str | None = None,
    ) -> AuthResult[AccountProfile]:
        """Update the caller's own name, password or avatar.

        Only supplied fields are validated and changed. The role cannot be
        changed here.
        """
        errors = []
        if name is not None:
            errors += self.validator.validate_name(name)
        if password is not None:
            errors += self.validator.validate_password(password)
        if errors:
            return AuthResult.fail(AuthErrorKind.VALIDATION_ERROR, "Validation failed", errors)

        try:
            account = await self.account_repo.get_by_id(account_id)
            if account is None:
                return AuthResult.fail(AuthErrorKind.ACCOUNT_NOT_FOUND, "Account not found")

            if name is not None:
                account.name = name.strip()
            if image is not None:
                account.image = image
            if password is not None:
                account.password_hash = await hash_password_async(password)

            await self.account_repo.update(account)
            await self.session.commit()
        except Exception as e:
            return await self._unexpected("update_profile", e)

        logger.info(
            "Profile updated",
            account_id=account_id,
            password_changed=password is not None,
        )
        return AuthResult.success(account.to_profile())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _claims_for(account: AccountModel) -> TokenClaims:
        return TokenClaims(id=account.id, email=account.email, role=account.role.value)

    async def _unexpected(self, operation: str, error: Exception) -> AuthResult:
        logger.error(
            "Unexpected error in auth operation",
            operation=operation,
            error_type=type(error).__name__,
        )
        await self.session.rollback()
        return AuthResult.fail(AuthErrorKind.UNEXPECTED, UNEXPECTED_MESSAGE)
