"""
Configuration for Auth Service
"""

from functools import lru_cache

from natours_core.config import NatoursSettings


class Settings(NatoursSettings):
    """Auth service configuration"""

    # Service
    SERVICE_NAME: str = 'auth'
    SERVICE_PORT: int = 8011

    # CORS
    CORS_ORIGINS: str = '*'

    # Rate limiting (slowapi limit strings)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = '100/hour'
    RATE_LIMIT_AUTH: str = '10/minute'
    RATE_LIMIT_STORAGE: str = 'memory://'


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
