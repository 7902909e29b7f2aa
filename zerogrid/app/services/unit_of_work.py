from abc import ABC, abstractmethod

from zerogrid.app.repositories.issue_repository import IIssueRepository
from zerogrid.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from zerogrid.app.repositories.rate_limit_repository import IRateLimitRepository
from zerogrid.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    issues: IIssueRepository
    password_reset_tokens: IPasswordResetTokenRepository
    rate_limits: IRateLimitRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
