from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from config import ApplicationConfig
from zerogrid.libs.result import Error, Result, Return

ALGORITHM = "HS256"


def _encode(user_id: str, email: str, secret: str, expires_delta: timedelta) -> str:
    now = datetime.now(UTC)
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def _decode(token: str, secret: str) -> Result[dict]:
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        # Expired, tampered and malformed tokens are reported the same way
        return Return.err(Error("INVALID_TOKEN", "Invalid or expired token"))
    if "user_id" not in payload or "email" not in payload:
        return Return.err(Error("INVALID_TOKEN", "Invalid or expired token"))
    return Return.ok({"user_id": payload["user_id"], "email": payload["email"]})


def generate_access_token(
    user_id: str, email: str, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Generate a short-lived access token

    Args:
        user_id: User ID
        email: User email
        expires_delta: Override of JWT_ACCESS_EXPIRY

    Returns:
        JWT token string (HS256) signed with JWT_SECRET
    """
    if expires_delta is None:
        expires_delta = timedelta(seconds=ApplicationConfig.JWT_ACCESS_EXPIRY)
    return _encode(user_id, email, ApplicationConfig.JWT_SECRET, expires_delta)


def generate_refresh_token(
    user_id: str, email: str, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Generate a long-lived refresh token

    Signed with JWT_REFRESH_SECRET so an access token can never pass as a
    refresh token and vice versa.
    """
    if expires_delta is None:
        expires_delta = timedelta(seconds=ApplicationConfig.JWT_REFRESH_EXPIRY)
    return _encode(user_id, email, ApplicationConfig.JWT_REFRESH_SECRET, expires_delta)


def verify_access_token(token: str) -> Result[dict]:
    """
    Verify and decode an access token

    Returns:
        Result with {"user_id", "email"} or Error(INVALID_TOKEN)
    """
    return _decode(token, ApplicationConfig.JWT_SECRET)


def verify_refresh_token(token: str) -> Result[dict]:
    """Verify and decode a refresh token"""
    return _decode(token, ApplicationConfig.JWT_REFRESH_SECRET)
