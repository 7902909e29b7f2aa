"""
Service DTOs (Data Transfer Objects)

Commands carry validated input into the services; responses carry data
back out. Responses serialize with camelCase keys.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# ============================================================================
# Commands
# ============================================================================


class RegisterCommand(BaseModel):
    email: str
    password: str
    name: str


class LoginCommand(BaseModel):
    email: str
    password: str


class ResetPasswordCommand(BaseModel):
    token: str
    password: str


class CreateIssueCommand(BaseModel):
    type: str
    title: str
    description: str
    priority: Optional[str] = None
    status: Optional[str] = None


class UpdateIssueCommand(BaseModel):
    """Partial update - only fields that are set are applied"""

    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None


class UpdateProfileCommand(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


# ============================================================================
# Responses
# ============================================================================


class UserInfo(CamelModel):
    """User without the password hash"""

    id: str
    email: str
    name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class IssueInfo(CamelModel):
    id: str
    type: str
    title: str
    description: str
    priority: str
    status: str
    user_id: str
    created_at: datetime
    updated_at: datetime


class AuthTokens(CamelModel):
    access_token: str
    refresh_token: str


class AuthResponse(CamelModel):
    user: UserInfo
    tokens: AuthTokens


class ResetTokenStatus(CamelModel):
    valid: bool
