"""
ZEROGRID Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import IssuePriority, IssueStatus, IssueType

# Export all entities
from .user import User
from .issue import Issue
from .password_reset_token import PasswordResetToken
from .rate_limit import RateLimit

__all__ = [
    # Enums
    "IssueType",
    "IssuePriority",
    "IssueStatus",
    # Entities
    "User",
    "Issue",
    "PasswordResetToken",
    "RateLimit",
]
