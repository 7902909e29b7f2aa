from typing import Generic, TypeVar

from fastapi import Response
from pydantic import BaseModel

from config import ApplicationConfig

T = TypeVar("T")

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


class Envelope(BaseModel, Generic[T]):
    """{"success": true, "data": ...}"""

    success: bool = True
    data: T


class MessageResponse(BaseModel):
    """{"success": true, "message": ...}"""

    success: bool = True
    message: str


def set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    secure = ApplicationConfig.is_production()
    response.set_cookie(
        ACCESS_COOKIE,
        access_token,
        max_age=ApplicationConfig.JWT_ACCESS_EXPIRY,
        path="/",
        secure=secure,
        httponly=True,
        samesite="lax",
    )
    response.set_cookie(
        REFRESH_COOKIE,
        refresh_token,
        max_age=ApplicationConfig.JWT_REFRESH_EXPIRY,
        path="/",
        secure=secure,
        httponly=True,
        samesite="lax",
    )


def clear_auth_cookies(response: Response) -> None:
    secure = ApplicationConfig.is_production()
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(name, path="/", secure=secure, httponly=True, samesite="lax")
