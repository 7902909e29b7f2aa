"""
Issue Entity

A security finding tracked by its owning user.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from ..base import generate_uuid, utcnow
from .enums import IssuePriority, IssueStatus

if TYPE_CHECKING:
    from .user import User


class Issue(SQLModel, table=True):
    """
    Issue entity - owned by exactly one user.

    Business Rules:
    - type is one of cloud-security, reteam-assessment, vapt
    - priority defaults to medium, status defaults to open
    - Only the owner may read, update or delete it
    """

    __tablename__ = "issues"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    type: str = Field(max_length=32)
    title: str = Field(max_length=255)
    description: str
    priority: str = Field(default=IssuePriority.medium.value, max_length=16)
    status: str = Field(default=IssueStatus.open.value, max_length=16)

    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE")

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))

    user: Optional["User"] = Relationship(back_populates="issues")

    __table_args__ = (
        Index("idx_issue_user_id", "user_id"),
        Index("idx_issue_user_type", "user_id", "type"),
    )
