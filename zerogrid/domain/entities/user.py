"""
User Entity

Represents an operator account that owns issues.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlmodel import Column, DateTime, Field, Relationship, SQLModel

from ..base import generate_uuid, utcnow

if TYPE_CHECKING:
    from .issue import Issue
    from .password_reset_token import PasswordResetToken


class User(SQLModel, table=True):
    """
    User entity - an account that owns issues and reset tokens.

    Business Rules:
    - Email is unique and stored lower-cased
    - Password stored as bcrypt hash (cost factor 10), never serialized
    - Issues and reset tokens are deleted together with the user
    """

    __tablename__ = "users"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password: str = Field(max_length=60)  # Bcrypt output is 60 chars
    name: Optional[str] = Field(default=None, max_length=255)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))

    # Relationships
    issues: list["Issue"] = Relationship(
        back_populates="user", sa_relationship_kwargs={"passive_deletes": True}
    )
    password_reset_tokens: list["PasswordResetToken"] = Relationship(
        back_populates="user", sa_relationship_kwargs={"passive_deletes": True}
    )
