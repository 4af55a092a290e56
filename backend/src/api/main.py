"""FastAPI application entry point."""
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routers import auth, blogs, health, tags, users
from core.config import get_settings
from core.errors import BlogPlatformError
from db.session import create_tables, engine


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:  # noqa: ARG001
    """Create missing tables on startup and dispose of the pool on shutdown."""
    settings = get_settings()
    if settings.auto_create_tables:
        await create_tables(engine)
    yield
    await engine.dispose()


async def blog_platform_error_handler(request: Request, exc: BlogPlatformError) -> JSONResponse:  # noqa: ARG001
    """Render NotFoundError/ForbiddenError with their own status code."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: ARG001
    """Report invalid payloads and query parameters as 400 with per-field errors."""
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures server-side and return a generic 500."""
    logger.error(
        "unhandled_error",
        extra={"method": request.method, "path": request.url.path},
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    """Build the application with middleware, exception handlers and routers."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title="Blog Platform API",
        description="Publish, browse, tag and like blog posts.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BlogPlatformError, blog_platform_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(health.router)
    app.include_router(auth.router, prefix="/api")
    app.include_router(blogs.router, prefix="/api")
    app.include_router(users.router, prefix="/api")
    app.include_router(tags.router, prefix="/api")

    return app


app = create_app()
