"""Run the auth service with uvicorn: ``python -m auth_service``"""

import uvicorn

from auth_service.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "auth_service.main:app",
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
