from abc import ABC, abstractmethod
from typing import List, Optional

from zerogrid.domain.entities import Issue


class IIssueRepository(ABC):
    """Issue repository interface - application layer"""

    @abstractmethod
    async def create(self, issue: Issue) -> Issue:
        """Create a new issue"""
        pass

    @abstractmethod
    async def get_by_id(self, issue_id: str) -> Optional[Issue]:
        """Get issue by ID"""
        pass

    @abstractmethod
    async def get_by_user_id(
        self, user_id: str, issue_type: Optional[str] = None
    ) -> List[Issue]:
        """Get issues owned by a user, newest first, optionally filtered by type"""
        pass

    @abstractmethod
    async def update(self, issue: Issue) -> Issue:
        """Update existing issue and touch updated_at"""
        pass

    @abstractmethod
    async def delete(self, issue: Issue) -> None:
        """Delete an issue"""
        pass
