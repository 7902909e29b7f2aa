"""
Request validators

Pure shape and field checks that run before any service call. Each
validator takes the decoded JSON body and returns a Result holding the
command for the service, or Error(VALIDATION_FAILED) with a readable message.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Optional

from zerogrid.app.services.dtos import (
    CreateIssueCommand,
    LoginCommand,
    RegisterCommand,
    ResetPasswordCommand,
    UpdateIssueCommand,
    UpdateProfileCommand,
)
from zerogrid.domain.entities import IssuePriority, IssueStatus, IssueType
from zerogrid.libs.result import Error, Result, Return

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2
MIN_TITLE_LENGTH = 3
MIN_DESCRIPTION_LENGTH = 10

VALID_TYPES = [t.value for t in IssueType]
VALID_PRIORITIES = [p.value for p in IssuePriority]
VALID_STATUSES = [s.value for s in IssueStatus]


def _invalid(message: str) -> Result:
    return Return.err(Error("VALIDATION_FAILED", message))


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def _check_email(email: Any) -> Optional[str]:
    if not _is_text(email):
        return "Email is required"
    if not EMAIL_REGEX.match(email):
        return "Invalid email format"
    return None


def _check_password(password: Any) -> Optional[str]:
    if not _is_text(password):
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None


def _check_choice(value: Any, label: str, choices: list) -> Optional[str]:
    if value not in choices:
        return f"Invalid {label}. Must be one of: {', '.join(choices)}"
    return None


class IValidator(ABC):
    @abstractmethod
    def validate(self, data: Any) -> Result:
        pass


class RegisterValidator(IValidator):
    def validate(self, data: Any) -> Result[RegisterCommand]:
        if not isinstance(data, dict):
            return _invalid("Request body must be a JSON object")

        message = _check_email(data.get("email")) or _check_password(data.get("password"))
        if message:
            return _invalid(message)

        name = data.get("name")
        if not _is_text(name):
            return _invalid("Name is required")
        if len(name) < MIN_NAME_LENGTH:
            return _invalid(f"Name must be at least {MIN_NAME_LENGTH} characters")

        return Return.ok(
            RegisterCommand(email=data["email"], password=data["password"], name=name)
        )


class LoginValidator(IValidator):
    def validate(self, data: Any) -> Result[LoginCommand]:
        if not isinstance(data, dict):
            return _invalid("Request body must be a JSON object")
        if not _is_text(data.get("email")):
            return _invalid("Email is required")
        if not _is_text(data.get("password")):
            return _invalid("Password is required")
        return Return.ok(LoginCommand(email=data["email"], password=data["password"]))


class ForgotPasswordValidator(IValidator):
    def validate(self, data: Any) -> Result[str]:
        if not isinstance(data, dict):
            return _invalid("Request body must be a JSON object")
        message = _check_email(data.get("email"))
        if message:
            return _invalid(message)
        return Return.ok(data["email"])


class ResetPasswordValidator(IValidator):
    def validate(self, data: Any) -> Result[ResetPasswordCommand]:
        if not isinstance(data, dict):
            return _invalid("Request body must be a JSON object")
        if not _is_text(data.get("token")):
            return _invalid("Reset token is required")
        message = _check_password(data.get("password"))
        if message:
            return _invalid(message)
        if data["password"] != data.get("confirmPassword"):
            return _invalid("Passwords do not match")
        return Return.ok(ResetPasswordCommand(token=data["token"], password=data["password"]))


class IssueValidator(IValidator):
    """Validates a new issue; every field except priority and status is required"""

    def validate(self, data: Any) -> Result[CreateIssueCommand]:
        if not isinstance(data, dict):
            return _invalid("Request body must be a JSON object")

        issue_type = data.get("type")
        if not _is_text(issue_type):
            return _invalid("Issue type is required")
        message = _check_choice(issue_type, "issue type", VALID_TYPES)
        if message:
            return _invalid(message)

        title = data.get("title")
        if not _is_text(title):
            return _invalid("Title is required")
        if len(title) < MIN_TITLE_LENGTH:
            return _invalid(f"Title must be at least {MIN_TITLE_LENGTH} characters")

        description = data.get("description")
        if not _is_text(description):
            return _invalid("Description is required")

        message = _check_issue_fields(data)
        if message:
            return _invalid(message)

        return Return.ok(
            CreateIssueCommand(
                type=issue_type,
                title=title,
                description=description,
                priority=data.get("priority") or None,
                status=data.get("status") or None,
            )
        )


class IssueUpdateValidator(IValidator):
    """Validates a partial issue update; absent fields are left alone"""

    def validate(self, data: Any) -> Result[UpdateIssueCommand]:
        if not isinstance(data, dict):
            return _invalid("Request body must be a JSON object")

        for field in ("type", "title", "description", "priority", "status"):
            if field in data and not _is_text(data[field]):
                return _invalid(f"{field.capitalize()} must be a non-empty string")

        message = _check_issue_fields(data)
        if message:
            return _invalid(message)

        fields = {
            key: data[key]
            for key in ("type", "title", "description", "priority", "status")
            if key in data
        }
        return Return.ok(UpdateIssueCommand(**fields))


def _check_issue_fields(data: dict) -> Optional[str]:
    if "type" in data:
        message = _check_choice(data["type"], "issue type", VALID_TYPES)
        if message:
            return message
    if "title" in data and len(data["title"]) < MIN_TITLE_LENGTH:
        return f"Title must be at least {MIN_TITLE_LENGTH} characters"
    if "description" in data and len(data["description"]) < MIN_DESCRIPTION_LENGTH:
        return f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters"
    if data.get("priority"):
        message = _check_choice(data["priority"], "priority", VALID_PRIORITIES)
        if message:
            return message
    if data.get("status"):
        message = _check_choice(data["status"], "status", VALID_STATUSES)
        if message:
            return message
    return None


class ProfileValidator(IValidator):
    def validate(self, data: Any) -> Result[UpdateProfileCommand]:
        if not isinstance(data, dict):
            return _invalid("Request body must be a JSON object")

        name = data.get("name")
        if "name" in data and not _is_text(name):
            return _invalid("Name must be a non-empty string")

        email = data.get("email")
        if "email" in data:
            if not isinstance(email, str):
                return _invalid("Email must be a string")
            if not EMAIL_REGEX.match(email):
                return _invalid("Invalid email format")

        return Return.ok(UpdateProfileCommand(name=name, email=email))
