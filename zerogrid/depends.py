import logging
from typing import Optional

from fastapi import Cookie, Depends, Request, Response

from config import ApplicationConfig
from zerogrid.adapter.services.database import Database
from zerogrid.adapter.services.email_notifier import QueueNotifier, ResendEmailClient
from zerogrid.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from zerogrid.api.error import ClientError
from zerogrid.api.utils.jwt import verify_access_token
from zerogrid.app.services.notifier import INotifier
from zerogrid.app.services.rate_limiter import (
    DEFAULT_MAX_REQUESTS,
    DEFAULT_WINDOW_MS,
    RateLimitConfig,
    RateLimiter,
)
from zerogrid.app.services.unit_of_work import UnitOfWork
from zerogrid.libs.result import Error

logger = logging.getLogger(__name__)

database = Database(ApplicationConfig.DB_URI)

notifier = QueueNotifier(
    ResendEmailClient(
        api_key=ApplicationConfig.RESEND_API_KEY,
        from_email=ApplicationConfig.RESEND_FROM_EMAIL,
        api_url=ApplicationConfig.RESEND_API_URL,
    )
)


async def get_unit_of_work():
    async with database.session() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_notifier() -> INotifier:
    return notifier


async def get_current_user(
    request: Request,
    access_token: Optional[str] = Cookie(default=None, alias="accessToken"),
) -> dict:
    """
    Dependency to extract and verify the access token cookie.

    Returns:
        Decoded payload containing user_id and email

    Raises:
        ClientError: 401 if the cookie is missing, invalid or expired
    """
    if not access_token:
        raise ClientError(
            Error("AUTHENTICATION_FAILED", "Authentication required"),
            status_code=401,
        )

    result = verify_access_token(access_token)
    if result.is_err():
        raise ClientError(
            Error("AUTHENTICATION_FAILED", "Invalid or expired token"),
            status_code=401,
        )

    request.state.user = result.value
    return result.value


def client_ip(request: Request) -> str:
    if ApplicationConfig.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RateLimit:
    """
    Dependency applying a fixed-window limit to a route, keyed by client IP.

    The X-RateLimit-* headers are set on the response and kept on
    request.state so error responses rendered later carry them too.
    """

    def __init__(
        self,
        scope: str,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_ms: int = DEFAULT_WINDOW_MS,
    ):
        self.scope = scope
        self.config = RateLimitConfig(max_requests=max_requests, window_ms=window_ms)

    async def apply(self, key: str, request: Request, response: Response, uow: UnitOfWork) -> None:
        result = await RateLimiter(uow).check_limit(key, self.config)
        headers = result.headers()
        request.state.rate_limit_headers = headers

        if not result.allowed:
            logger.warning(f"Rate limit exceeded for {key}")
            raise ClientError(
                Error("RATE_LIMIT_EXCEEDED", "Too many requests. Please try again later."),
                status_code=429,
                headers=headers,
            )

        response.headers.update(headers)

    async def __call__(
        self,
        request: Request,
        response: Response,
        uow: UnitOfWork = Depends(get_unit_of_work),
    ) -> None:
        await self.apply(f"{self.scope}:{client_ip(request)}", request, response, uow)


class UserRateLimit(RateLimit):
    """Same as RateLimit, keyed by the authenticated user id"""

    async def __call__(
        self,
        request: Request,
        response: Response,
        current_user: dict = Depends(get_current_user),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ) -> None:
        await self.apply(f"{self.scope}:{current_user['user_id']}", request, response, uow)
