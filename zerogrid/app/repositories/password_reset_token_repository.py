from abc import ABC, abstractmethod
from typing import Optional, Tuple

from zerogrid.domain.entities import PasswordResetToken, User


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        pass

    @abstractmethod
    async def find_valid_token(
        self, token: str
    ) -> Optional[Tuple[PasswordResetToken, User]]:
        """Get an unused, unexpired token together with its owner"""
        pass

    @abstractmethod
    async def mark_as_used(self, token_id: str) -> None:
        """Stamp used_at on a token"""
        pass

    @abstractmethod
    async def delete_user_tokens(self, user_id: str) -> int:
        """Delete every token belonging to a user"""
        pass

    @abstractmethod
    async def delete_expired_tokens(self) -> int:
        """Delete tokens whose expiry has passed"""
        pass
