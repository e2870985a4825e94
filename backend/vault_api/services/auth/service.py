# vault_api/services/auth/service.py
from __future__ import annotations

import logging

from vault_api.models.user import USERNAME_MAX_LENGTH
from vault_api.services._shared.base import BaseService, ServiceContext
from vault_api.services._shared.errors import (
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    PasswordRequiredError,
    UsernameAlreadyExistsError,
    UsernameRequiredError,
    UsernameTooLongError,
)
from vault_api.services._shared.ports.clock import Clock, SystemClock
from vault_api.services._shared.ports.password_hasher import PasswordHasher
from vault_api.services._shared.ports.session_store import SessionStore
from vault_api.services._shared.ports.token_provider import TokenProvider
from vault_api.services._shared.ports.user_store import UserStore

# DTOs
from vault_api.services.auth.dto import (
    AuthTokenConfig,
    LoginIn,
    LoginOut,
    RefreshIn,
    RegisterIn,
    RegisterOut,
    TokenPairOut,
)

log = logging.getLogger(__name__)


def normalize_username(raw: str | None) -> str:
    """Strip surrounding whitespace; case is preserved and significant."""
    return (raw or "").strip()


class AuthService(BaseService):
    """
    Account and session lifecycle service (register / login / refresh / delete).

    Credentials live behind a :class:`UserStore`, refresh sessions behind a
    :class:`SessionStore`, and tokens come from a :class:`TokenProvider`.
    The instance keeps no per-call state and can be shared across threads.

    Invariants
    ----------
    - A refresh token validates at most once: rotation consumes it.
    - Deleting an account revokes every refresh session it owns first.
    - Password hashing never runs while a store lock or transaction is held.
    """

    def __init__(
        self,
        *,
        users: UserStore,
        sessions: SessionStore,
        tokens: TokenProvider,
        hasher: PasswordHasher,
        clock: Clock | None = None,
        token_cfg: AuthTokenConfig | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its collaborators.

        :param users: Credential store.
        :param sessions: Refresh-session store (atomic rotation).
        :param tokens: Access/refresh token issuer.
        :param hasher: Slow one-way hasher for stored credentials.
        :param clock: Time source for session expiry.
        :param token_cfg: Refresh-session lifetime.
        :param ctx: Request-scoped context used for logging.
        """
        super().__init__(ctx=ctx)
        self.users = users
        self.sessions = sessions
        self.tokens = tokens
        self.hasher = hasher
        self.clock = clock or SystemClock()
        self.cfg = token_cfg or AuthTokenConfig()

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> RegisterOut:
        """
        Create an account. No tokens are issued; callers log in afterwards.

        :param dto: Registration input.
        :returns: Identifier of the new account.
        :raises UsernameRequiredError: Blank username.
        :raises UsernameTooLongError: More than :data:`USERNAME_MAX_LENGTH` characters once trimmed.
        :raises PasswordRequiredError: Blank credential.
        :raises UsernameAlreadyExistsError: Username taken (also under races).
        """
        username = normalize_username(dto.username)
        if not username:
            raise UsernameRequiredError()
        if len(username) > USERNAME_MAX_LENGTH:
            raise UsernameTooLongError()
        if not (dto.password_hash or "").strip():
            raise PasswordRequiredError()

        with self.guard("register"):
            if self.users.find_by_username(username) is not None:
                log.warning(
                    "Registration rejected: username already exists",
                    extra={"operation": "register", "code": UsernameAlreadyExistsError.code},
                )
                raise UsernameAlreadyExistsError(username)

            # Expensive; computed before the store opens its transaction
            stored_hash = self.hasher.hash(dto.password_hash)
            hint = (dto.password_hint or "").strip() or None
            user = self.users.create(
                username=username, password_hash=stored_hash, password_hint=hint
            )

        log.info(
            "User registered",
            extra={"operation": "register", "user_id": user.id},
        )
        return RegisterOut(user_id=user.id)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Verify credentials and open a new refresh session.

        Unknown usernames and wrong secrets raise the same error; an unknown
        username still pays for one hash verification.

        :param dto: Login input.
        :returns: Access token, refresh token and the account identity.
        :raises InvalidCredentialsError: Blank fields, unknown user or mismatch.
        """
        username = normalize_username(dto.username)
        presented = dto.password_hash or ""
        if not username or not presented.strip():
            raise InvalidCredentialsError()

        with self.guard("login"):
            user = self.users.find_by_username(username)
            if user is None:
                self.hasher.dummy_verify(presented)
                verified = False
            else:
                verified = self.users.verify_credential(user, presented)

            if user is None or not verified:
                log.warning(
                    "Login failed",
                    extra={"operation": "login", "code": InvalidCredentialsError.code},
                )
                raise InvalidCredentialsError()

            access = self.tokens.create_access_token(user.id, user.username)
            refresh = self.tokens.create_refresh_token(user.id)
            self.sessions.create(
                user.id, refresh, expires_at=self.clock.now() + self.cfg.refresh_expires
            )

        log.info("User logged in", extra={"operation": "login", "user_id": user.id})
        return LoginOut(
            access_token=access,
            refresh_token=refresh,
            user_id=user.id,
            username=user.username,
        )

    # ------------------------------------------------------------------ #
    # Refresh with atomic rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a live refresh token for a new access/refresh pair.

        Security
        --------
        - The presented token is consumed by the store's atomic ``rotate``;
          replaying it (or losing a concurrent race) fails.
        - Sessions whose owner has been deleted are revoked on sight.

        :param dto: Refresh input.
        :returns: New token pair; the refresh token always differs.
        :raises InvalidRefreshTokenError: Unknown, expired, spent or orphaned token.
        """
        presented = (dto.refresh_token or "").strip()
        if not presented:
            raise InvalidRefreshTokenError()

        with self.guard("refresh"):
            owner_id = self.sessions.validate_and_get_owner(presented)
            if owner_id is None:
                log.warning(
                    "Refresh rejected: no live session",
                    extra={"operation": "refresh", "code": InvalidRefreshTokenError.code},
                )
                raise InvalidRefreshTokenError()

            user = self.users.find_by_id(owner_id)
            if user is None:
                revoked = self.sessions.revoke_all(owner_id)
                log.warning(
                    "Refresh rejected: owner no longer exists (%d orphan sessions revoked)",
                    revoked,
                    extra={"operation": "refresh", "user_id": owner_id},
                )
                raise InvalidRefreshTokenError()

            new_refresh = self.tokens.create_refresh_token(user.id)
            rotated = self.sessions.rotate(
                old_token=presented,
                new_token=new_refresh,
                user_id=user.id,
                expires_at=self.clock.now() + self.cfg.refresh_expires,
            )
            if not rotated:
                log.warning(
                    "Refresh rejected: token consumed concurrently",
                    extra={"operation": "refresh", "user_id": user.id},
                )
                raise InvalidRefreshTokenError()

            access = self.tokens.create_access_token(user.id, user.username)

        return TokenPairOut(access_token=access, refresh_token=new_refresh)

    # ------------------------------------------------------------------ #
    # Delete account
    # ------------------------------------------------------------------ #

    def delete_account(self, user_id: str) -> None:
        """
        Revoke every session of ``user_id`` and then delete the account.

        Idempotent: an already-deleted account is a successful no-op. Access
        tokens issued earlier stay valid until they expire.

        :param user_id: Subject of a verified access token.
        """
        with self.guard("delete_account"):
            revoked = self.sessions.revoke_all(user_id)
            deleted = self.users.delete(user_id)

        log.info(
            "Account deleted" if deleted else "Account already absent",
            extra={"operation": "delete_account", "user_id": user_id},
        )
        log.debug("Revoked %d sessions", revoked, extra={"user_id": user_id})
