import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


def _error_response(request: Request, status_code: int, code: str, message: str, headers=None):
    # Rate limit headers recorded earlier in the request travel with errors too
    merged = dict(getattr(request.state, "rate_limit_headers", None) or {})
    merged.update(headers or {})
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, "code": code},
        headers=merged or None,
    )


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return _error_response(
        request, exc.status_code, exc.base_error.code, exc.base_error.message, exc.headers
    )


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code}: {exc.base_error.message}")
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        exc.base_error.code,
        "Internal server error",
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    logger.warning(f"Request validation error: {exc.errors()}")
    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_FAILED",
        "Invalid request body",
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "Internal server error",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    from zerogrid.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
    from zerogrid.depends import database, notifier

    await database.create_all()
    async with database.session() as session:
        async with SqlAlchemyUnitOfWork(session) as uow:
            swept = await uow.password_reset_tokens.delete_expired_tokens()
            await uow.commit()
    logger.info(f"Removed {swept} expired password reset tokens")

    await notifier.start()
    try:
        yield
    finally:
        await notifier.stop()
        await database.dispose()


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="ZEROGRID API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from zerogrid.api.routes import auth, health_check, issue, user

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, prefix=prefix, tags=["Health"])
    app.include_router(auth.router, prefix=prefix, tags=["Authentication"])
    app.include_router(issue.router, prefix=prefix, tags=["Issues"])
    app.include_router(user.router, prefix=prefix, tags=["User"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
