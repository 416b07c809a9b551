"""Authentication service for registration, login and token checks."""

from datetime import timedelta

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from safetrack.config import Settings
from safetrack.core.exceptions import (
    ConfigurationError,
    DuplicateIdentityException,
    ForbiddenException,
    InvalidCredentialsException,
    InvalidInputException,
    NotFoundException,
    UnauthenticatedException,
)
from safetrack.core.security import (
    TokenClaims,
    create_access_token,
    get_password_context,
    get_password_hash,
    verify_access_token,
    verify_password,
)
from safetrack.models.users import users

logger = structlog.get_logger(__name__)

PUBLIC_USER_COLUMNS = (users.c.id, users.c.email, users.c.created_at)


class AuthService:
    """Service for credential registration, verification and bearer tokens."""

    def __init__(self, settings: Settings):
        """
        Initialize the service from settings.

        Raises:
            ConfigurationError: If no signing secret is configured
        """
        if not settings.jwt_secret_key:
            raise ConfigurationError("JWT_SECRET must be set for the auth service")

        self._secret_key = settings.jwt_secret_key
        self._algorithm = settings.jwt_algorithm
        self._token_ttl = timedelta(minutes=settings.access_token_expire_minutes)
        self._rounds = settings.bcrypt_rounds

    @staticmethod
    def _require_credentials(email: str | None, password: str | None) -> tuple[str, str]:
        if not email or not password:
            raise InvalidInputException("Email and password are required.")
        return email, password

    async def register(
        self,
        db: AsyncSession,
        email: str | None,
        password: str | None,
    ) -> dict:
        """
        Register a new user with a hashed password.

        Uniqueness is left to the database constraint, so concurrent
        registrations of the same email cannot both succeed.

        Args:
            db: Database session
            email: Account email
            password: Plaintext password

        Returns:
            Public user fields (id, email, created_at)

        Raises:
            InvalidInputException: If email or password is missing
            DuplicateIdentityException: If the email is already registered
        """
        email, password = self._require_credentials(email, password)

        password_hash = await run_in_threadpool(get_password_hash, password, self._rounds)

        query = (
            users.insert()
            .values(email=email, password_hash=password_hash)
            .returning(*PUBLIC_USER_COLUMNS)
        )

        try:
            result = await db.execute(query)
            user = result.mappings().one()
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.info("registration_conflict")
            raise DuplicateIdentityException("Email already exists.")

        logger.info("user_registered", user_id=user["id"])
        return dict(user)

    async def login(
        self,
        db: AsyncSession,
        email: str | None,
        password: str | None,
    ) -> str:
        """
        Verify credentials and issue an access token.

        Unknown emails and wrong passwords fail identically.

        Args:
            db: Database session
            email: Account email
            password: Plaintext password

        Returns:
            Signed JWT carrying the user's id and email

        Raises:
            InvalidInputException: If email or password is missing
            InvalidCredentialsException: If the credentials do not match
        """
        email, password = self._require_credentials(email, password)

        result = await db.execute(
            select(users.c.id, users.c.email, users.c.password_hash).where(users.c.email == email)
        )
        user = result.mappings().first()

        if user is None:
            # Spend the same hashing time as a real check
            await run_in_threadpool(get_password_context(self._rounds).dummy_verify)
            logger.info("login_failed", reason="unknown_email")
            raise InvalidCredentialsException()

        matches = await run_in_threadpool(
            verify_password, password, user["password_hash"], self._rounds
        )
        if not matches:
            logger.info("login_failed", reason="password_mismatch", user_id=user["id"])
            raise InvalidCredentialsException()

        logger.info("login_succeeded", user_id=user["id"])
        return self.issue_token(user["id"], user["email"])

    def issue_token(self, user_id: int, email: str, expires_delta: timedelta | None = None) -> str:
        """Sign an access token for the given identity."""
        return create_access_token(
            data={"sub": str(user_id), "email": email},
            secret_key=self._secret_key,
            algorithm=self._algorithm,
            expires_delta=expires_delta if expires_delta is not None else self._token_ttl,
        )

    def authenticate(self, token: str | None) -> TokenClaims:
        """
        Verify a bearer token and return its claims.

        Args:
            token: Raw bearer token, or None when the request carried none

        Returns:
            Verified token claims

        Raises:
            UnauthenticatedException: If no token was presented
            ForbiddenException: If the token is malformed, expired or forged
        """
        if not token:
            raise UnauthenticatedException("Access token is missing.")

        verification = verify_access_token(token, self._secret_key, self._algorithm)
        if verification.claims is None:
            logger.info("token_rejected", reason=verification.error)
            raise ForbiddenException("Invalid or expired token.")

        return verification.claims

    async def get_profile(self, db: AsyncSession, claims: TokenClaims) -> dict:
        """
        Get the public profile of the authenticated user.

        Raises:
            NotFoundException: If the user no longer exists
        """
        result = await db.execute(
            select(*PUBLIC_USER_COLUMNS).where(users.c.id == claims.user_id)
        )
        user = result.mappings().first()

        if user is None:
            raise NotFoundException("User not found.")

        return dict(user)
