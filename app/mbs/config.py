import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str
    log_level: str

    supabase_url: str
    supabase_anon_key: str

    resend_api_key: str
    email_from: str
    contact_notify_to: str
    http_timeout_seconds: int

    contact_require_name: bool
    contact_message_min_length: int
    contact_require_subject: bool

    csrf_enabled: bool


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_bool(name: str, default: bool) -> bool:
    raw = _getenv(name)
    if not raw:
        return default
    return raw.lower() in ("1", "true", "yes", "on")


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_getenv("DATABASE_URL", ""),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        supabase_url=_getenv("SUPABASE_URL", ""),
        supabase_anon_key=_getenv("SUPABASE_ANON_KEY", ""),
        resend_api_key=_getenv("RESEND_API_KEY", ""),
        email_from=_getenv("EMAIL_FROM", "onboarding@resend.dev"),
        contact_notify_to=_getenv("CONTACT_NOTIFY_TO", ""),
        http_timeout_seconds=_getenv_int("HTTP_TIMEOUT_SECONDS", 10),
        contact_require_name=_getenv_bool("CONTACT_REQUIRE_NAME", True),
        contact_message_min_length=_getenv_int("CONTACT_MESSAGE_MIN_LENGTH", 10),
        contact_require_subject=_getenv_bool("CONTACT_REQUIRE_SUBJECT", False),
        csrf_enabled=_getenv_bool("CSRF_ENABLED", True),
    )


def load_config() -> dict:
    s = load_settings()
    is_production = s.env in ("prod", "production")
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        "SUPABASE_URL": s.supabase_url,
        "SUPABASE_ANON_KEY": s.supabase_anon_key,
        "RESEND_API_KEY": s.resend_api_key,
        "EMAIL_FROM": s.email_from,
        "CONTACT_NOTIFY_TO": s.contact_notify_to,
        "HTTP_TIMEOUT_SECONDS": s.http_timeout_seconds,
        # contact form strictness differs per deployment
        "CONTACT_REQUIRE_NAME": s.contact_require_name,
        "CONTACT_MESSAGE_MIN_LENGTH": s.contact_message_min_length,
        "CONTACT_REQUIRE_SUBJECT": s.contact_require_subject,
        "CSRF_ENABLED": s.csrf_enabled,
        # security defaults
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_SECURE": is_production,  # Require HTTPS in production
        # form posts only, no uploads
        "MAX_CONTENT_LENGTH": 1 * 1024 * 1024,
    }
