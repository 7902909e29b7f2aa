"""
Notifier

Transactional email is fire-and-forget: services submit a message and move
on. Delivery happens elsewhere and never affects the caller's outcome.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from config import ApplicationConfig


class EmailMessage(BaseModel):
    """A rendered email waiting to be delivered"""

    kind: str
    to: str
    subject: str
    text: str


class INotifier(ABC):
    """Notification sink - application layer"""

    @abstractmethod
    def submit(self, message: EmailMessage) -> None:
        """Queue a message for delivery without waiting for it"""
        pass


def welcome_email(email: str, name: str) -> EmailMessage:
    return EmailMessage(
        kind="welcome",
        to=email,
        subject="ZEROGRID: New Operative Access",
        text=(
            f"Greetings {name},\n\n"
            "Your account is ready. Sign in to start tracking cloud security, "
            "red team and VAPT findings.\n\n"
            f"{ApplicationConfig.APP_URL}/dashboard"
        ),
    )


def issue_created_email(email: str, name: str, issue_type: str, title: str, description: str) -> EmailMessage:
    return EmailMessage(
        kind="issue_created",
        to=email,
        subject=f"ALERT: {title}",
        text=(
            f"Greetings {name},\n\n"
            "A new issue has been logged on your account.\n\n"
            f"Type: {issue_type}\n"
            f"Title: {title}\n"
            f"Description: {description}\n\n"
            f"{ApplicationConfig.APP_URL}/dashboard"
        ),
    )


def profile_updated_email(email: str, name: str) -> EmailMessage:
    return EmailMessage(
        kind="profile_updated",
        to=email,
        subject="SECURITY: Profile Updated",
        text=(
            f"Greetings {name},\n\n"
            "Your profile details were changed. If this was not you, reset your "
            "password immediately.\n\n"
            f"{ApplicationConfig.APP_URL}/profile"
        ),
    )


def password_reset_email(email: str, name: str, reset_token: str) -> EmailMessage:
    reset_url = f"{ApplicationConfig.APP_URL}/reset-password?token={reset_token}"
    return EmailMessage(
        kind="password_reset",
        to=email,
        subject="ZEROGRID: Password Reset Request",
        text=(
            f"Greetings {name},\n\n"
            "A password reset was requested for your account. The link below "
            "expires in 1 hour and works once.\n\n"
            f"{reset_url}\n\n"
            "If you did not request this, ignore this message."
        ),
    )


def password_changed_email(email: str, name: str) -> EmailMessage:
    return EmailMessage(
        kind="password_changed",
        to=email,
        subject="ZEROGRID: Password Changed Successfully",
        text=(
            f"Greetings {name},\n\n"
            "Your password has been changed. You can now sign in with the new "
            "credentials.\n\n"
            f"{ApplicationConfig.APP_URL}/login"
        ),
    )
