"""
PasswordResetToken Entity

Single-use password reset tokens.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from ..base import generate_uuid, utcnow

if TYPE_CHECKING:
    from .user import User


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - single-use password reset tokens.

    Business Rules:
    - Expires after 1 hour
    - Token is 32 random bytes, hex encoded (64 chars)
    - Valid only while used_at is null and expires_at is in the future
    - A new request deletes every earlier token of the same user
    """

    __tablename__ = "password_reset_tokens"

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE")
    token: str = Field(unique=True, max_length=64)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))

    user: Optional["User"] = Relationship(back_populates="password_reset_tokens")

    __table_args__ = (
        Index("idx_password_reset_expires_at", "expires_at"),
        Index("idx_password_reset_user_id", "user_id"),
    )
