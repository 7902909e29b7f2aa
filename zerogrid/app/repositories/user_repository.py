from abc import ABC, abstractmethod
from typing import Optional

from zerogrid.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user and touch updated_at"""
        pass

    @abstractmethod
    async def update_password(self, user_id: str, password_hash: str) -> None:
        """Replace the stored password hash"""
        pass
