"""
godo server - Main Application Entry Point

Receives and stores todos from godo clients and answers list queries.
Also exposes a request counter and a request echo for debugging.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from godo import __version__
from godo.config import Settings, get_settings
from godo.api import router
from godo.store import ServerState


def setup_logging(settings: Optional[Settings] = None):
    """Configure structured logging."""
    settings = settings or get_settings()

    # Set log level
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure root logger
    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        stream=sys.stdout
    )

    # Reduce noise from libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = app.state.settings
    logger = structlog.get_logger()

    logger.info("Starting godo server...", host=settings.host, port=settings.port)

    yield

    store = app.state.godo.store
    logger.info("godo server stopped", lists=len(store.snapshot()), todos=len(store))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors, never server failures."""
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())}
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create an app with its own, empty store and counter."""
    app = FastAPI(
        title="godo",
        description="In-memory todo lists for the godo command line client",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings or get_settings()
    app.state.godo = ServerState()

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(router)
    return app


def run_server(settings: Optional[Settings] = None) -> None:
    """Serve until interrupted."""
    import uvicorn

    settings = settings or get_settings()
    setup_logging(settings)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower()
    )


# Create FastAPI app
app = create_app()


if __name__ == "__main__":
    run_server()
