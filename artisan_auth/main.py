"""
FastAPI application factory and entry point.

This module creates and configures the FastAPI application:
  1. Logging — standard library logging at LOG_LEVEL
  2. Lifespan manager — creates tables on startup, disposes the engine on shutdown
  3. CORS middleware — allows the frontend origin to call the API
  4. Exception handlers — maps domain errors to the failure envelope
  5. Token issuer — built once from settings and kept on app.state
  6. Router registration — mounts the auth endpoints under /auth, plus the
     debug endpoints outside production

Running locally:
    uvicorn artisan_auth.main:app --reload
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from artisan_auth.config import Settings, settings
from artisan_auth.database import engine, Base
from artisan_auth.exceptions import register_exception_handlers
from artisan_auth.routers import auth, debug
from artisan_auth.security import TokenIssuer
from artisan_auth import models  # noqa: F401


logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL.upper(),
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("passlib", "aiosqlite", "httpx", "httpcore"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
      Creates all database tables if they don't exist.

    Shutdown:
      Disposes of the database engine, closing all connections cleanly.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s %s started (%s)", settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT)
    yield
    await engine.dispose()


def create_app(config: Settings = settings) -> FastAPI:
    app = FastAPI(
        title=config.APP_NAME,
        version=config.APP_VERSION,
        description="Account signup, login and profile API for artisans",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, config)

    # Signing secret is read here once; every request reuses this issuer
    app.state.token_issuer = TokenIssuer(config)

    app.include_router(auth.router, prefix="/auth", tags=["Auth"])
    if not config.is_production:
        app.include_router(debug.router, prefix="/auth", tags=["Debug"])

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for deployment probes."""
        return {"status": "ok", "version": config.APP_VERSION}

    return app


app = create_app()
