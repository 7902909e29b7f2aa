"""
ZEROGRID Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class IssueType(str, Enum):
    """Category of security engagement an issue belongs to"""

    cloud_security = "cloud-security"
    reteam_assessment = "reteam-assessment"
    vapt = "vapt"


class IssuePriority(str, Enum):
    """Issue priority"""

    low = "low"
    medium = "medium"
    high = "high"


class IssueStatus(str, Enum):
    """Issue lifecycle status"""

    open = "open"
    in_progress = "in-progress"
    closed = "closed"
