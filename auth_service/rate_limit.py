"""Rate limiting configuration for API endpoints."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from auth_service.config import Settings, get_settings

_defaults = get_settings()

# Limit strings in force; replaced by configure_limiter when an app is built
RATE_LIMITS = {
    # Default for every endpoint
    "default": _defaults.RATE_LIMIT_DEFAULT,
    # Credential endpoints (login, forgot password), stricter to slow brute force
    "auth": _defaults.RATE_LIMIT_AUTH,
}


def default_limit() -> str:
    return RATE_LIMITS["default"]


def auth_limit() -> str:
    return RATE_LIMITS["auth"]


# Global limiter instance, keyed by client address. Limits are callables so
# they are read per request.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[default_limit],
    storage_uri=_defaults.RATE_LIMIT_STORAGE,
    strategy="fixed-window",
    enabled=_defaults.RATE_LIMIT_ENABLED,
)


def configure_limiter(settings: Settings) -> Limiter:
    """
    Apply an app's rate limit settings to the shared limiter.

    The storage backend is fixed when the limiter is created and is not
    changed here.
    """
    limiter.enabled = settings.RATE_LIMIT_ENABLED
    RATE_LIMITS["default"] = settings.RATE_LIMIT_DEFAULT
    RATE_LIMITS["auth"] = settings.RATE_LIMIT_AUTH
    return limiter
