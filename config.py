import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def _get(key, default=None):
    # Environment variables win over env.yaml
    return os.environ.get(key, data.get(key, default))


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _as_list(value) -> list:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return list(value or [])


def parse_duration(value) -> int:
    """Convert "15m" / "1h" / "7d" / 3600 into seconds"""
    if isinstance(value, (int, float)):
        return int(value)
    value = str(value).strip().lower()
    units = {"s": 1, "m": 60, "h": 3600, "d": 86400}
    if value and value[-1] in units:
        return int(value[:-1]) * units[value[-1]]
    return int(value)


class ApplicationConfig:
    DB_URI = _get("DB_URI", "sqlite+aiosqlite:///./zerogrid.db")
    API_PREFIX = _get("API_PREFIX", "")
    API_PORT = int(_get("API_PORT", 8000))
    API_HOST = _get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = _as_list(_get("CORS_ORIGINS", []))
    CORS_ALLOW_CREDENTIALS = _as_bool(_get("CORS_ALLOW_CREDENTIALS", True))
    LOG_LEVEL = _get("LOG_LEVEL", "INFO")
    ENVIRONMENT = _get("ENVIRONMENT", "development")
    TRUST_PROXY_HEADERS = _as_bool(_get("TRUST_PROXY_HEADERS", True))
    JWT_SECRET = _get("JWT_SECRET", "fallback-secret-dev-only")
    JWT_REFRESH_SECRET = _get("JWT_REFRESH_SECRET", "fallback-refresh-dev-only")
    JWT_ACCESS_EXPIRY = parse_duration(_get("JWT_ACCESS_EXPIRY", "1h"))
    JWT_REFRESH_EXPIRY = parse_duration(_get("JWT_REFRESH_EXPIRY", "7d"))
    RESEND_API_KEY = _get("RESEND_API_KEY", "")
    RESEND_API_URL = _get("RESEND_API_URL", "https://api.resend.com/emails")
    RESEND_FROM_EMAIL = _get("RESEND_FROM_EMAIL", "system@zerogrid.io")
    APP_URL = _get("APP_URL", "http://localhost:3000")

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT == "production"
