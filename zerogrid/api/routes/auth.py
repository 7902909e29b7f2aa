from typing import Any, Optional

from fastapi import APIRouter, Body, Cookie, Depends, Query, Response, status

from zerogrid.api.envelope import (
    REFRESH_COOKIE,
    Envelope,
    MessageResponse,
    clear_auth_cookies,
    set_auth_cookies,
)
from zerogrid.api.error import ClientError, raise_for_error
from zerogrid.app.services.auth_service import AuthService
from zerogrid.app.services.dtos import AuthResponse, ResetTokenStatus, UserInfo
from zerogrid.app.services.notifier import INotifier
from zerogrid.app.services.unit_of_work import UnitOfWork
from zerogrid.app.validators import (
    ForgotPasswordValidator,
    LoginValidator,
    RegisterValidator,
    ResetPasswordValidator,
)
from zerogrid.depends import (
    RateLimit,
    UserRateLimit,
    get_current_user,
    get_notifier,
    get_unit_of_work,
)
from zerogrid.libs.result import Error

router = APIRouter(prefix="/auth", tags=["Authentication"])

FIFTEEN_MINUTES_MS = 15 * 60 * 1000


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=Envelope[AuthResponse],
    dependencies=[Depends(RateLimit("register"))],
)
async def register(
    response: Response,
    payload: Any = Body(default=None),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """
    Register a new account

    Creates the user, sets the accessToken/refreshToken cookies and sends a
    welcome email in the background.

    Raises:
        - 400 Bad Request: Invalid input
        - 409 Conflict: Email already registered (any casing)
        - 429 Too Many Requests: Rate limit exceeded
    """
    command = RegisterValidator().validate(payload)
    if command.is_err():
        raise_for_error(command.error)

    result = await AuthService(uow, notifier).register(command.value)
    if result.is_err():
        raise_for_error(result.error)

    tokens = result.value.tokens
    set_auth_cookies(response, tokens.access_token, tokens.refresh_token)
    return {"success": True, "data": result.value}


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=Envelope[AuthResponse],
    dependencies=[Depends(RateLimit("login"))],
)
async def login(
    response: Response,
    payload: Any = Body(default=None),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """
    Log in with email and password

    Raises:
        - 401 Unauthorized: Invalid credentials (same error for unknown email
          and wrong password)
        - 429 Too Many Requests: Rate limit exceeded
    """
    command = LoginValidator().validate(payload)
    if command.is_err():
        raise_for_error(command.error)

    result = await AuthService(uow, notifier).login(command.value)
    if result.is_err():
        raise_for_error(result.error)

    tokens = result.value.tokens
    set_auth_cookies(response, tokens.access_token, tokens.refresh_token)
    return {"success": True, "data": result.value}


@router.post(
    "/logout",
    status_code=status.HTTP_200_OK,
    response_model=MessageResponse,
    dependencies=[Depends(RateLimit("logout"))],
)
async def logout(response: Response):
    clear_auth_cookies(response)
    return {"success": True, "message": "Logged out successfully"}


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=Envelope[AuthResponse],
    dependencies=[Depends(RateLimit("refresh"))],
)
async def refresh(
    response: Response,
    refresh_token: Optional[str] = Cookie(default=None, alias=REFRESH_COOKIE),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """
    Exchange the refreshToken cookie for a new token pair

    Raises:
        - 401 Unauthorized: Missing, invalid or expired refresh token
    """
    if not refresh_token:
        raise ClientError(
            Error("AUTHENTICATION_FAILED", "Refresh token required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    result = await AuthService(uow, notifier).refresh(refresh_token)
    if result.is_err():
        raise_for_error(result.error)

    tokens = result.value.tokens
    set_auth_cookies(response, tokens.access_token, tokens.refresh_token)
    return {"success": True, "data": result.value}


@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    response_model=Envelope[UserInfo],
    dependencies=[Depends(UserRateLimit("me"))],
)
async def me(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """
    Current user

    Raises:
        - 401 Unauthorized: Missing/invalid access token, or the user no
          longer exists
    """
    result = await AuthService(uow, notifier).get_current_user(current_user["user_id"])
    if result.is_err():
        raise_for_error(result.error)

    return {"success": True, "data": result.value}


@router.post(
    "/forgot-password",
    status_code=status.HTTP_200_OK,
    response_model=MessageResponse,
    dependencies=[Depends(RateLimit("forgot-password", max_requests=3, window_ms=FIFTEEN_MINUTES_MS))],
)
async def forgot_password(
    payload: Any = Body(default=None),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """
    Request a password reset link

    Always answers with the same message whether or not the account exists.

    Raises:
        - 400 Bad Request: Missing or malformed email
        - 429 Too Many Requests: More than 3 requests in 15 minutes
    """
    email = ForgotPasswordValidator().validate(payload)
    if email.is_err():
        raise_for_error(email.error)

    result = await AuthService(uow, notifier).forgot_password(email.value)
    if result.is_err():
        raise_for_error(result.error)

    return {
        "success": True,
        "message": "If an account exists with this email, a password reset link has been sent.",
    }


@router.post(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=MessageResponse,
    dependencies=[Depends(RateLimit("reset-password", max_requests=5, window_ms=FIFTEEN_MINUTES_MS))],
)
async def reset_password(
    payload: Any = Body(default=None),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """
    Set a new password with a reset token

    Raises:
        - 400 Bad Request: Invalid input, or the token is invalid, expired or
          already used
        - 429 Too Many Requests: More than 5 requests in 15 minutes
    """
    command = ResetPasswordValidator().validate(payload)
    if command.is_err():
        raise_for_error(command.error)

    result = await AuthService(uow, notifier).reset_password(
        command.value.token, command.value.password
    )
    if result.is_err():
        raise_for_error(result.error)

    return {"success": True, "message": "Password has been reset successfully."}


@router.get(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=Envelope[ResetTokenStatus],
    dependencies=[Depends(RateLimit("verify-reset-token"))],
)
async def verify_reset_token(
    token: Optional[str] = Query(default=None),
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """Check whether a reset token can still be used"""
    if not token:
        raise_for_error(Error("VALIDATION_FAILED", "Token is required"))

    valid = await AuthService(uow, notifier).verify_reset_token(token)
    return {"success": True, "data": ResetTokenStatus(valid=valid)}
