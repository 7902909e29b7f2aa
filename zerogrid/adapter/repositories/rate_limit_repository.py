from datetime import datetime
from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from zerogrid.app.repositories.rate_limit_repository import IRateLimitRepository
from zerogrid.domain.base import utcnow
from zerogrid.domain.entities import RateLimit


class RateLimitRepository(IRateLimitRepository):
    """RateLimit repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_key(self, key: str) -> Optional[RateLimit]:
        """Get the counter for a bucket"""
        stmt = select(RateLimit).where(RateLimit.key == key)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def start_window(self, key: str, reset_at: datetime) -> RateLimit:
        """Insert or overwrite the counter with count=1"""
        counter = await self.get_by_key(key)
        if counter is None:
            counter = RateLimit(key=key, count=1, reset_at=reset_at)
        else:
            counter.count = 1
            counter.reset_at = reset_at
            counter.updated_at = utcnow()
        self.session.add(counter)
        await self.session.flush()
        await self.session.refresh(counter)
        return counter

    async def increment(self, counter: RateLimit) -> RateLimit:
        """Add one to an existing counter"""
        counter.count += 1
        counter.updated_at = utcnow()
        self.session.add(counter)
        await self.session.flush()
        await self.session.refresh(counter)
        return counter
