"""
RateLimit Entity

Fixed-window request counter for one logical bucket.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, SQLModel

from ..base import generate_uuid, utcnow


class RateLimit(SQLModel, table=True):
    """
    RateLimit entity - fixed-window counter keyed by bucket name.

    Business Rules:
    - key is unique, e.g. "login:203.0.113.7" or "issues:<user id>"
    - count only grows until reset_at; after that the window starts over
    """

    __tablename__ = "rate_limits"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    key: str = Field(unique=True, index=True, max_length=255)
    count: int = Field(default=0)

    # Timestamps
    reset_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
