from typing import List, Optional

from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from zerogrid.app.repositories.issue_repository import IIssueRepository
from zerogrid.domain.base import utcnow
from zerogrid.domain.entities import Issue


class IssueRepository(IIssueRepository):
    """Issue repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, issue: Issue) -> Issue:
        """Create a new issue"""
        self.session.add(issue)
        await self.session.flush()
        await self.session.refresh(issue)
        return issue

    async def get_by_id(self, issue_id: str) -> Optional[Issue]:
        """Get issue by ID"""
        stmt = select(Issue).where(Issue.id == issue_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_user_id(
        self, user_id: str, issue_type: Optional[str] = None
    ) -> List[Issue]:
        """Get issues owned by a user, newest first"""
        stmt = select(Issue).where(Issue.user_id == user_id)
        if issue_type:
            stmt = stmt.where(Issue.type == issue_type)
        stmt = stmt.order_by(col(Issue.created_at).desc())
        result = await self.session.exec(stmt)
        return list(result.all())

    async def update(self, issue: Issue) -> Issue:
        """Update existing issue"""
        issue.updated_at = utcnow()
        self.session.add(issue)
        await self.session.flush()
        await self.session.refresh(issue)
        return issue

    async def delete(self, issue: Issue) -> None:
        """Delete an issue"""
        await self.session.delete(issue)
        await self.session.flush()
