"""Team Task Manager API - Main Application Module.

This module initializes the FastAPI application with proper configuration,
middleware, routing, and lifecycle management for the team task manager.
"""

import logging
import sys
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

# Add the project root to Python path if running directly
if __name__ == "__main__":
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import ConfigValidator, get_config_summary, settings
from app.core.logging import setup_logging
from app.database import AsyncSessionLocal, engine
from app.schemas.base import ErrorResponseSchema
from app.services.notification_service import notification_dispatcher
from models import Base

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifecycle events."""
    # Startup
    logger.info(f"🚀 Starting {settings.app_name}...")
    ConfigValidator.validate_required_settings()
    logger.info(f"⚙️ Configuration: {get_config_summary()}")

    # Development mode: Auto-create tables if they don't exist
    if settings.is_development:
        logger.info("📝 Development mode: Creating/updating database tables...")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("✅ Database tables created/verified")
    else:
        logger.info("✅ Application started")

    yield

    # Shutdown
    logger.info(f"🛑 Shutting down {settings.app_name}...")
    await notification_dispatcher.drain()
    await engine.dispose()
    logger.info("✅ Database connections closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Team task management: projects, members, tasks, attachments, comments and activity feeds",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Add middleware
    setup_middleware(app)

    # Add exception handlers
    setup_exception_handlers(app)

    # Include routers
    setup_routers(app)

    return app


def setup_middleware(app: FastAPI):
    """Configure application middleware."""
    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def error_response(
    request: Request,
    status_code: int,
    message: str,
    error_code: str,
    details=None,
    headers: dict | None = None,
) -> JSONResponse:
    """Render the error envelope shared by every failure path."""
    body = ErrorResponseSchema(
        message=message,
        error_code=error_code,
        details=details,
        timestamp=datetime.now(timezone.utc),
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


def setup_exception_handlers(app: FastAPI):
    """Configure global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Application errors carry a structured detail, framework 404/405s a plain string
        if isinstance(exc.detail, dict) and "message" in exc.detail:
            return error_response(
                request,
                exc.status_code,
                exc.detail["message"],
                exc.detail.get("error_code", "HTTP_ERROR"),
                exc.detail.get("details"),
                headers=getattr(exc, "headers", None),
            )
        return error_response(
            request,
            exc.status_code,
            str(exc.detail) if exc.detail else "An error occurred",
            "HTTP_ERROR",
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "loc": [str(part) for part in error.get("loc", [])],
                "msg": str(error.get("msg", "Validation error")),
                "type": error.get("type", "value_error"),
            }
            for error in exc.errors()
        ]

        # The first failing constraint becomes the message
        message = errors[0]["msg"] if errors else "Validation error"
        message = message.removeprefix("Value error, ")
        return error_response(request, 400, message, "VALIDATION_ERROR", errors)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            f"❌ Unhandled error on {request.method} {request.url.path} "
            f"[{getattr(request.state, 'request_id', None)}]"
        )
        details = None if settings.is_production else {"error": str(exc), "type": type(exc).__name__}
        return error_response(request, 500, "Internal server error", "INTERNAL_ERROR", details)


def setup_routers(app: FastAPI):
    """Configure application routers."""
    # Import routers
    from app.domains.activity.controller import router as activity_router
    from app.domains.attachment.controller import router as attachment_router
    from app.domains.auth.controller import router as auth_router
    from app.domains.comment.controller import router as comment_router
    from app.domains.project.controller import router as project_router
    from app.domains.task.controller import router as task_router
    from app.domains.user.controller import router as user_router

    @app.get("/api/health")
    async def health_check():
        """Liveness check with database status."""
        db_status = "healthy"
        try:
            async with AsyncSessionLocal() as db:
                await db.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning(f"Health check database probe failed: {str(e)}")
            db_status = "unhealthy"

        return {
            "status": "healthy" if db_status == "healthy" else "degraded",
            "version": settings.version,
            "environment": settings.environment,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": {"database": db_status},
            "features": ConfigValidator.get_feature_status(),
        }

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "docs_url": "/docs" if settings.is_development else None,
        }

    # Include domain routers
    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(project_router)
    app.include_router(task_router)
    app.include_router(attachment_router)
    app.include_router(comment_router)
    app.include_router(activity_router)


# Create the application instance
app = create_app()


def main():
    """Entry point for running the application directly."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
