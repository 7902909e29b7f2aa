"""
Auth Service

Account flows: registration, login, current user, and the forgot/reset
password cycle.
"""

import logging
import secrets
from datetime import timedelta

from sqlalchemy.exc import IntegrityError

from zerogrid.api.utils.jwt import (
    generate_access_token,
    generate_refresh_token,
    verify_refresh_token,
)
from zerogrid.api.utils.password import burn_password_check, hash_password, verify_password
from zerogrid.app.services.dtos import (
    AuthResponse,
    AuthTokens,
    LoginCommand,
    RegisterCommand,
    UserInfo,
)
from zerogrid.app.services.notifier import (
    INotifier,
    password_changed_email,
    password_reset_email,
    welcome_email,
)
from zerogrid.app.services.unit_of_work import UnitOfWork
from zerogrid.domain.base import utcnow
from zerogrid.domain.entities import PasswordResetToken, User
from zerogrid.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

RESET_TOKEN_BYTES = 32
RESET_TOKEN_TTL = timedelta(hours=1)

# Same message for unknown email and wrong password so accounts cannot be enumerated
INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid credentials")
EMAIL_TAKEN = Error("EMAIL_ALREADY_EXISTS", "User with this email already exists")


def _issue_tokens(user: User) -> AuthTokens:
    return AuthTokens(
        access_token=generate_access_token(user.id, user.email),
        refresh_token=generate_refresh_token(user.id, user.email),
    )


class AuthService:
    """
    Business Rules:
    - Emails are compared and stored lower-cased
    - Passwords are hashed with bcrypt (cost factor 10)
    - Login failures never reveal whether the account exists
    - Forgot-password succeeds silently for unknown emails
    - A reset token works once, for one hour, and only the newest one works
    """

    def __init__(self, uow: UnitOfWork, notifier: INotifier):
        self.uow = uow
        self.notifier = notifier

    async def register(self, command: RegisterCommand) -> Result[AuthResponse]:
        email = command.email.lower()

        async with self.uow:
            existing_user = await self.uow.users.get_by_email(email)
            if existing_user:
                return Return.err(EMAIL_TAKEN)

            user = User(
                email=email,
                password=hash_password(command.password),
                name=command.name,
            )
            try:
                user = await self.uow.users.create(user)
                await self.uow.commit()
            except IntegrityError:
                # Lost a race with a concurrent registration for the same email
                logger.warning("Duplicate email rejected by the users table")
                return Return.err(EMAIL_TAKEN)

            response = AuthResponse(user=UserInfo.model_validate(user), tokens=_issue_tokens(user))

        logger.info(f"User registered: {response.user.id}")
        self.notifier.submit(welcome_email(response.user.email, response.user.name or "User"))

        return Return.ok(response)

    async def login(self, command: LoginCommand) -> Result[AuthResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_email(command.email.lower())

            if user is None:
                burn_password_check()
                return Return.err(INVALID_CREDENTIALS)

            if not verify_password(command.password, user.password):
                return Return.err(INVALID_CREDENTIALS)

            return Return.ok(
                AuthResponse(user=UserInfo.model_validate(user), tokens=_issue_tokens(user))
            )

    async def get_current_user(self, user_id: str) -> Result[UserInfo]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)

            if user is None:
                return Return.err(Error("AUTHENTICATION_FAILED", "User not found"))

            return Return.ok(UserInfo.model_validate(user))

    async def refresh(self, refresh_token: str) -> Result[AuthResponse]:
        """Trade a valid refresh token for a fresh token pair"""
        verified = verify_refresh_token(refresh_token)
        if verified.is_err():
            return Return.err(Error("AUTHENTICATION_FAILED", "Invalid or expired refresh token"))

        async with self.uow:
            user = await self.uow.users.get_by_id(verified.value["user_id"])

            if user is None:
                return Return.err(
                    Error("AUTHENTICATION_FAILED", "Invalid or expired refresh token")
                )

            return Return.ok(
                AuthResponse(user=UserInfo.model_validate(user), tokens=_issue_tokens(user))
            )

    async def forgot_password(self, email: str) -> Result[None]:
        async with self.uow:
            user = await self.uow.users.get_by_email(email.lower())

            if user is None:
                logger.info("Password reset requested for unknown email")
                return Return.ok(None)

            # Only the newest token may ever be valid
            await self.uow.password_reset_tokens.delete_user_tokens(user.id)

            token = secrets.token_hex(RESET_TOKEN_BYTES)
            await self.uow.password_reset_tokens.create(
                PasswordResetToken(
                    user_id=user.id,
                    token=token,
                    expires_at=utcnow() + RESET_TOKEN_TTL,
                )
            )
            await self.uow.commit()

            message = password_reset_email(user.email, user.name or "Operative", token)
            logger.info(f"Password reset token issued for user {user.id}")

        self.notifier.submit(message)
        return Return.ok(None)

    async def reset_password(self, token: str, new_password: str) -> Result[None]:
        async with self.uow:
            found = await self.uow.password_reset_tokens.find_valid_token(token)
            if found is None:
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or expired reset token")
                )

            reset_token, user = found

            # Password change and token invalidation commit together
            await self.uow.users.update_password(user.id, hash_password(new_password))
            await self.uow.password_reset_tokens.mark_as_used(reset_token.id)
            await self.uow.password_reset_tokens.delete_user_tokens(user.id)
            await self.uow.commit()

            message = password_changed_email(user.email, user.name or "Operative")
            logger.info(f"Password reset completed for user {user.id}")

        self.notifier.submit(message)
        return Return.ok(None)

    async def verify_reset_token(self, token: str) -> bool:
        async with self.uow:
            found = await self.uow.password_reset_tokens.find_valid_token(token)
        return found is not None
