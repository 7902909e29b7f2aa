from typing import Optional, Tuple

from sqlalchemy import delete, update
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from zerogrid.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from zerogrid.domain.base import utcnow
from zerogrid.domain.entities import PasswordResetToken, User


class PasswordResetTokenRepository(IPasswordResetTokenRepository):
    """PasswordResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def find_valid_token(
        self, token: str
    ) -> Optional[Tuple[PasswordResetToken, User]]:
        """Get an unused, unexpired token joined with its owner"""
        stmt = (
            select(PasswordResetToken, User)
            .join(User, PasswordResetToken.user_id == User.id)
            .where(
                PasswordResetToken.token == token,
                PasswordResetToken.expires_at > utcnow(),
                col(PasswordResetToken.used_at).is_(None),
            )
            .limit(1)
        )
        result = await self.session.exec(stmt)
        row = result.first()
        if row is None:
            return None
        reset_token, user = row
        return reset_token, user

    async def mark_as_used(self, token_id: str) -> None:
        """Stamp used_at on a token"""
        stmt = (
            update(PasswordResetToken)
            .where(PasswordResetToken.id == token_id)
            .values(used_at=utcnow())
        )
        await self.session.execute(stmt)

    async def delete_user_tokens(self, user_id: str) -> int:
        """Delete every token belonging to a user"""
        stmt = delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.rowcount

    async def delete_expired_tokens(self) -> int:
        """Delete tokens whose expiry has passed"""
        stmt = delete(PasswordResetToken).where(PasswordResetToken.expires_at < utcnow())
        result = await self.session.execute(stmt)
        return result.rowcount
