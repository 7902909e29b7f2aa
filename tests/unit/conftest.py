import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)
    uow.users.update_password = AsyncMock()

    uow.issues = MagicMock()
    uow.issues.create = AsyncMock(side_effect=lambda issue: issue)
    uow.issues.get_by_id = AsyncMock(return_value=None)
    uow.issues.get_by_user_id = AsyncMock(return_value=[])
    uow.issues.update = AsyncMock(side_effect=lambda issue: issue)
    uow.issues.delete = AsyncMock()

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.find_valid_token = AsyncMock(return_value=None)
    uow.password_reset_tokens.mark_as_used = AsyncMock()
    uow.password_reset_tokens.delete_user_tokens = AsyncMock(return_value=0)
    uow.password_reset_tokens.delete_expired_tokens = AsyncMock(return_value=0)

    uow.rate_limits = MagicMock()
    uow.rate_limits.get_by_key = AsyncMock(return_value=None)
    uow.rate_limits.start_window = AsyncMock()
    uow.rate_limits.increment = AsyncMock()
    return uow


@pytest.fixture
def mock_notifier():
    notifier = MagicMock()
    notifier.submit = MagicMock()
    return notifier
