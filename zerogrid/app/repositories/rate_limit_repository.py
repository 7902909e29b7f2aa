from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from zerogrid.domain.entities import RateLimit


class IRateLimitRepository(ABC):
    """RateLimit repository interface - application layer"""

    @abstractmethod
    async def get_by_key(self, key: str) -> Optional[RateLimit]:
        """Get the counter for a bucket"""
        pass

    @abstractmethod
    async def start_window(self, key: str, reset_at: datetime) -> RateLimit:
        """Insert or overwrite the counter with count=1 and a new reset_at"""
        pass

    @abstractmethod
    async def increment(self, counter: RateLimit) -> RateLimit:
        """Add one to an existing counter"""
        pass
