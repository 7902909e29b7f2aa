"""
Unit tests for AuthService

Tests all business logic with mocked dependencies.
"""
from datetime import datetime, timedelta

import bcrypt
import pytest
from sqlalchemy.exc import IntegrityError

from zerogrid.api.utils.jwt import (
    generate_access_token,
    generate_refresh_token,
    verify_access_token,
    verify_refresh_token,
)
from zerogrid.app.services.auth_service import AuthService
from zerogrid.app.services.dtos import LoginCommand, RegisterCommand
from zerogrid.domain.entities import PasswordResetToken, User


def make_user(email="operative@zerogrid.io", password="hunter22", name="Ada"):
    return User(
        email=email,
        password=bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode(),
        name=name,
    )


@pytest.mark.asyncio
async def test_register_hashes_password_and_issues_tokens(mock_uow, mock_notifier):
    """Stored password is a bcrypt hash of the plaintext, never the plaintext"""
    service = AuthService(mock_uow, mock_notifier)

    result = await service.register(
        RegisterCommand(email="Operative@ZeroGrid.io", password="hunter22", name="Ada")
    )

    assert result.is_ok()
    created_user = mock_uow.users.create.call_args.args[0]
    assert created_user.email == "operative@zerogrid.io"
    assert created_user.password != "hunter22"
    assert bcrypt.checkpw(b"hunter22", created_user.password.encode())

    data = result.value
    assert data.user.email == "operative@zerogrid.io"
    assert "password" not in data.user.model_dump()

    access = verify_access_token(data.tokens.access_token)
    assert access.is_ok()
    assert access.value == {"user_id": created_user.id, "email": "operative@zerogrid.io"}
    assert verify_refresh_token(data.tokens.refresh_token).is_ok()

    mock_uow.commit.assert_called_once()
    mock_notifier.submit.assert_called_once()
    assert mock_notifier.submit.call_args.args[0].kind == "welcome"


@pytest.mark.asyncio
async def test_register_duplicate_email_conflict(mock_uow, mock_notifier):
    """Registering an email that exists in any casing fails"""
    mock_uow.users.get_by_email.return_value = make_user()
    service = AuthService(mock_uow, mock_notifier)

    result = await service.register(
        RegisterCommand(email="OPERATIVE@zerogrid.io", password="hunter22", name="Ada")
    )

    assert result.is_err()
    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    mock_uow.users.get_by_email.assert_called_once_with("operative@zerogrid.io")
    mock_uow.users.create.assert_not_called()
    mock_uow.commit.assert_not_called()
    mock_notifier.submit.assert_not_called()


@pytest.mark.asyncio
async def test_register_unique_constraint_is_a_conflict(mock_uow, mock_notifier):
    """A concurrent insert that wins the race surfaces as a conflict, not a crash"""
    mock_uow.users.create.side_effect = IntegrityError(
        "INSERT INTO users", {}, Exception("UNIQUE constraint failed: users.email")
    )
    service = AuthService(mock_uow, mock_notifier)

    result = await service.register(
        RegisterCommand(email="operative@zerogrid.io", password="hunter22", name="Ada")
    )

    assert result.is_err()
    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    mock_uow.commit.assert_not_called()
    mock_notifier.submit.assert_not_called()


@pytest.mark.asyncio
async def test_login_success(mock_uow, mock_notifier):
    user = make_user()
    mock_uow.users.get_by_email.return_value = user
    service = AuthService(mock_uow, mock_notifier)

    result = await service.login(LoginCommand(email="Operative@zerogrid.io", password="hunter22"))

    assert result.is_ok()
    assert result.value.user.id == user.id
    assert verify_access_token(result.value.tokens.access_token).value["user_id"] == user.id


@pytest.mark.asyncio
async def test_login_errors_are_identical(mock_uow, mock_notifier):
    """Wrong password and unknown email produce the same error"""
    service = AuthService(mock_uow, mock_notifier)

    mock_uow.users.get_by_email.return_value = make_user()
    wrong_password = await service.login(
        LoginCommand(email="operative@zerogrid.io", password="not-it")
    )

    mock_uow.users.get_by_email.return_value = None
    unknown_email = await service.login(
        LoginCommand(email="nobody@zerogrid.io", password="hunter22")
    )

    assert wrong_password.is_err()
    assert unknown_email.is_err()
    assert wrong_password.error == unknown_email.error
    assert wrong_password.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_get_current_user_missing(mock_uow, mock_notifier):
    service = AuthService(mock_uow, mock_notifier)

    result = await service.get_current_user("missing-id")

    assert result.is_err()
    assert result.error.code == "AUTHENTICATION_FAILED"


@pytest.mark.asyncio
async def test_refresh_issues_new_pair(mock_uow, mock_notifier):
    user = make_user()
    mock_uow.users.get_by_id.return_value = user
    service = AuthService(mock_uow, mock_notifier)

    result = await service.refresh(generate_refresh_token(user.id, user.email))

    assert result.is_ok()
    assert verify_access_token(result.value.tokens.access_token).is_ok()


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(mock_uow, mock_notifier):
    """An access token is signed with a different secret and cannot refresh"""
    user = make_user()
    mock_uow.users.get_by_id.return_value = user
    service = AuthService(mock_uow, mock_notifier)
    result = await service.refresh(generate_access_token(user.id, user.email))

    assert result.is_err()
    assert result.error.code == "AUTHENTICATION_FAILED"


@pytest.mark.asyncio
async def test_forgot_password_unknown_email_is_silent(mock_uow, mock_notifier):
    """No error, no token, no email for an unknown address"""
    service = AuthService(mock_uow, mock_notifier)

    result = await service.forgot_password("nobody@zerogrid.io")

    assert result.is_ok()
    mock_uow.password_reset_tokens.create.assert_not_called()
    mock_uow.password_reset_tokens.delete_user_tokens.assert_not_called()
    mock_uow.commit.assert_not_called()
    mock_notifier.submit.assert_not_called()


@pytest.mark.asyncio
async def test_forgot_password_replaces_previous_tokens(mock_uow, mock_notifier):
    user = make_user()
    mock_uow.users.get_by_email.return_value = user
    service = AuthService(mock_uow, mock_notifier)

    result = await service.forgot_password("OPERATIVE@zerogrid.io")

    assert result.is_ok()
    mock_uow.password_reset_tokens.delete_user_tokens.assert_called_once_with(user.id)

    created_token = mock_uow.password_reset_tokens.create.call_args.args[0]
    assert created_token.user_id == user.id
    assert len(created_token.token) == 64
    int(created_token.token, 16)  # hex encoded
    assert created_token.used_at is None

    time_until_expiry = created_token.expires_at - datetime.utcnow()
    assert time_until_expiry.total_seconds() > 55 * 60
    assert time_until_expiry.total_seconds() < 65 * 60

    mock_uow.commit.assert_called_once()
    message = mock_notifier.submit.call_args.args[0]
    assert message.kind == "password_reset"
    assert f"reset-password?token={created_token.token}" in message.text


@pytest.mark.asyncio
async def test_reset_password_invalid_token(mock_uow, mock_notifier):
    service = AuthService(mock_uow, mock_notifier)

    result = await service.reset_password("bogus", "newpass1")

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    mock_uow.users.update_password.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_reset_password_success(mock_uow, mock_notifier):
    user = make_user()
    reset_token = PasswordResetToken(
        user_id=user.id,
        token="a" * 64,
        expires_at=datetime.utcnow() + timedelta(minutes=30),
    )
    mock_uow.password_reset_tokens.find_valid_token.return_value = (reset_token, user)
    service = AuthService(mock_uow, mock_notifier)

    result = await service.reset_password("a" * 64, "newpass1")

    assert result.is_ok()
    user_id, new_hash = mock_uow.users.update_password.call_args.args
    assert user_id == user.id
    assert bcrypt.checkpw(b"newpass1", new_hash.encode())
    mock_uow.password_reset_tokens.mark_as_used.assert_called_once_with(reset_token.id)
    mock_uow.password_reset_tokens.delete_user_tokens.assert_called_once_with(user.id)
    # All three writes land in one commit
    mock_uow.commit.assert_called_once()
    assert mock_notifier.submit.call_args.args[0].kind == "password_changed"


@pytest.mark.asyncio
async def test_verify_reset_token(mock_uow, mock_notifier):
    service = AuthService(mock_uow, mock_notifier)
    assert await service.verify_reset_token("bogus") is False

    user = make_user()
    reset_token = PasswordResetToken(
        user_id=user.id, token="b" * 64, expires_at=datetime.utcnow() + timedelta(hours=1)
    )
    mock_uow.password_reset_tokens.find_valid_token.return_value = (reset_token, user)
    assert await service.verify_reset_token("b" * 64) is True
    mock_uow.commit.assert_not_called()
