"""
FastAPI application for Automation Hub.
"""

from __future__ import annotations

import importlib.metadata
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .db.base import init_database
from .errors import AutomationHubError
from .logging_config import configure_logging
from .routes import agents_router, ai_router, sessions_router

logger = structlog.get_logger()

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    configure_logging(settings)
    logger.info("Starting Automation Hub", environment=settings.environment)

    try:
        await init_database()
        logger.info("Database initialized")
    except Exception as e:
        logger.error("Failed to start application", error=str(e))
        raise

    if not settings.openrouter_api_key:
        logger.warning("OPENROUTER_API_KEY is not set; model-backed endpoints will fail")

    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title="Automation Hub",
    description="Automation sessions, context extraction and code generation",
    version=importlib.metadata.version("automation-hub"),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AutomationHubError)
async def automation_hub_error_handler(
    request: Request, exc: AutomationHubError
) -> JSONResponse:
    """Map application errors onto HTTP responses with a flat ``detail``."""
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, **exc.to_dict())
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(sessions_router)
app.include_router(agents_router)
app.include_router(ai_router)


@app.get("/healthz", tags=["system"])
def healthz() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/version", tags=["system"])
def version() -> dict[str, str]:
    """Return the version of the application."""
    return {"version": importlib.metadata.version("automation-hub")}
