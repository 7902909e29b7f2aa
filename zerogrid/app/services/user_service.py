"""
User Service

Profile read and update for the authenticated user.
"""

import logging

from sqlalchemy.exc import IntegrityError

from zerogrid.app.services.dtos import UpdateProfileCommand, UserInfo
from zerogrid.app.services.notifier import INotifier, profile_updated_email
from zerogrid.app.services.unit_of_work import UnitOfWork
from zerogrid.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

EMAIL_IN_USE = Error("VALIDATION_FAILED", "Email is already in use")


class UserService:
    def __init__(self, uow: UnitOfWork, notifier: INotifier):
        self.uow = uow
        self.notifier = notifier

    async def get_profile(self, user_id: str) -> Result[UserInfo]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)

            if user is None:
                return Return.err(Error("NOT_FOUND", "User not found"))

            return Return.ok(UserInfo.model_validate(user))

    async def update_profile(self, user_id: str, command: UpdateProfileCommand) -> Result[UserInfo]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("NOT_FOUND", "User not found"))

            if command.email is not None:
                email = command.email.lower()
                if email != user.email:
                    existing_user = await self.uow.users.get_by_email(email)
                    if existing_user:
                        return Return.err(EMAIL_IN_USE)
                user.email = email

            if command.name is not None:
                user.name = command.name

            try:
                user = await self.uow.users.update(user)
                await self.uow.commit()
            except IntegrityError:
                logger.warning(f"Email change for user {user_id} rejected by the users table")
                return Return.err(EMAIL_IN_USE)

            profile = UserInfo.model_validate(user)

        self.notifier.submit(profile_updated_email(profile.email, profile.name or "User"))
        return Return.ok(profile)
