from sqlmodel.ext.asyncio.session import AsyncSession

from zerogrid.adapter.repositories.issue_repository import IssueRepository
from zerogrid.adapter.repositories.password_reset_token_repository import PasswordResetTokenRepository
from zerogrid.adapter.repositories.rate_limit_repository import RateLimitRepository
from zerogrid.adapter.repositories.user_repository import UserRepository
from zerogrid.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.issues = IssueRepository(self.session)
        self.password_reset_tokens = PasswordResetTokenRepository(self.session)
        self.rate_limits = RateLimitRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
