"""
Natours Auth Service - FastAPI Application

Provides signup, login, password lifecycle and current-user APIs.
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from natours_core.auth import TokenIssuer
from natours_core.db import Database
from natours_core.errors import NatoursError, RateLimited, ValidationFailed
from natours_core.notifications import EmailSender, NotificationSender
from natours_core.utils.datetime import Clock, utc_now

from auth_service.config import Settings, get_settings
from auth_service.rate_limit import configure_limiter
from auth_service.routes import auth, users

log = logging.getLogger(__name__)

# Request parts that FastAPI puts at the front of an error location
_REQUEST_PARTS = {"body", "query", "path", "header", "cookie"}

HTTP_ERROR_CODES = {
    404: 'NOT_FOUND',
    405: 'METHOD_NOT_ALLOWED',
}


def field_errors(errors) -> Dict[str, List[str]]:
    """
    Group FastAPI request validation errors by field.

    Unparseable bodies are reported under ``body``.
    """
    fields: Dict[str, List[str]] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in _REQUEST_PARTS]
        field = "body" if err.get("type") == "json_invalid" or not loc else ".".join(loc)
        fields.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return fields


def error_response(exc: NatoursError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    settings = app.state.settings
    database = app.state.database
    log.info(f"Starting {settings.SERVICE_NAME} service on port {settings.SERVICE_PORT}")

    try:
        database.create_all()
        log.info("Database initialized")
    except Exception as e:
        log.error(f"Database initialization failed: {e}")
        raise

    yield

    log.info("Shutting down auth service")
    database.dispose()


def create_app(
    settings: Optional[Settings] = None,
    sender: Optional[NotificationSender] = None,
    clock: Optional[Clock] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Service settings; defaults to the environment
        sender: Notification sender; defaults to SMTP email
        clock: Source of "now" for token and reset-token times
        database: Database to use; defaults to one built from settings.DATABASE_URL

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    clock = clock or utc_now

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    app = FastAPI(
        title="Natours Auth Service",
        description="Authentication, password lifecycle and current-user API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.clock = clock
    app.state.database = database or Database.from_settings(settings)
    app.state.token_issuer = TokenIssuer.from_settings(settings, clock=clock)
    app.state.notification_sender = sender or EmailSender(settings)

    # Rate limiting
    app.state.limiter = configure_limiter(settings)
    app.add_middleware(SlowAPIMiddleware)

    # Configure CORS
    origins = settings.CORS_ORIGINS.split(',') if settings.CORS_ORIGINS != '*' else ['*']
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NatoursError)
    async def natours_error_handler(request: Request, exc: NatoursError):
        log.warning(f"API error on {request.url.path}: {exc.error_code} - {exc.message}")
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error = ValidationFailed('Invalid input data.', field_errors=field_errors(exc.errors()))
        log.warning(f"Malformed request on {request.url.path}: {error.field_errors}")
        return error_response(error)

    # slowapi's middleware calls this handler without awaiting it
    @app.exception_handler(RateLimitExceeded)
    def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        log.warning(f"Rate limit exceeded on {request.url.path}: {exc.detail}")
        return error_response(RateLimited())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        error_code = HTTP_ERROR_CODES.get(exc.status_code, 'HTTP_ERROR')
        return error_response(NatoursError(str(exc.detail), status_code=exc.status_code, error_code=error_code))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        log.exception(f"Unexpected error on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content=NatoursError().to_dict())

    # Include routers
    app.include_router(auth.router, prefix="/api/v1/users", tags=["Authentication"])
    app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
    app.include_router(users.session_router, prefix="/api/v1/session", tags=["Users"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": settings.SERVICE_NAME}

    return app


app = create_app()
