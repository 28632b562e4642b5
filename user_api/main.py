"""FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Annotated

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from user_api.api import auth, users
from user_api.api.errors import register_exception_handlers
from user_api.config import Settings, get_settings
from user_api.database import check_database_health, get_db, init_db
from user_api.services.passwords import PasswordHasher
from user_api.services.tokens import TokenService

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    init_db()
    logger.info(f"User API started in {app.state.settings.environment} mode")
    yield
    logger.info("User API shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application and the services shared across requests."""
    settings = settings or get_settings()
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("user_api").setLevel(settings.log_level.upper())

    app = FastAPI(
        title="User API",
        description="User registration, JWT login and authenticated user management",
        version=API_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_service = TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        default_expires_in=settings.jwt_expires_in,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        logger.info(f"{request.method} {request.url.path} - {response.status_code} - {elapsed:.4f}s")
        return response

    register_exception_handlers(app)

    # Register routers
    app.include_router(auth.router)
    app.include_router(users.router)

    @app.get("/")
    async def root():
        """API information."""
        return {
            "message": "User API",
            "version": API_VERSION,
            "environment": settings.environment,
            "documentation": "/docs",
        }

    @app.get("/health")
    def health_check(db: Annotated[Session, Depends(get_db)]):
        """Health check endpoint."""
        database_ok = check_database_health(db)
        body = {
            "status": "healthy" if database_ok else "unhealthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "environment": settings.environment,
            "database": "connected" if database_ok else "unavailable",
        }
        status_code = status.HTTP_200_OK if database_ok else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(status_code=status_code, content=body)

    return app


app = create_app()
