"""
Users API: FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires the UserStore and the EventLogger onto app.state,
       registers middleware, exception handlers and routers. The lifespan
       opens the store connection on startup and releases everything on
       shutdown.
Who:   uvicorn (`users_api.main:app`, or `python -m users_api`) and the tests,
       which call create_app() with their own store and logger.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:   Request ID → Access Log              │
    │                                                     │
    │  Routes:       /users  /users/{id}  /health         │
    │  Docs:         /swagger  /swagger/openapi.json      │
    │                                                     │
    │  Exception Handlers:                                │
    │    StoreQueryError → 500 + error event              │
    │    Exception       → 500                            │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure stdlib logging (console)
    2. Build the event logger unless one was injected
    3. Connect the store and create the users table if absent.
       StoreConnectionError propagates: the server does not start.

    Shutdown:
    1. Dispose the store engine
    2. Stop the remote log listener in a worker thread (flushes queued
       records until REMOTE_LOG_DRAIN_TIMEOUT)
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from users_api import __version__
from users_api.config import SERVER_PORT, Settings, settings
from users_api.exceptions import StoreConnectionError, StoreQueryError
from users_api.middleware.logging import RequestLoggingMiddleware
from users_api.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from users_api.routes import health, users
from users_api.services.event_logger import (
    EVENT_LOGGER_NAME,
    EventLogger,
    LogLevel,
    LogLineFormatter,
)
from users_api.services.remote_sink import build_remote_sink
from users_api.services.user_store import UserStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(config: Settings) -> None:
    """
    Configure the root logger for operational and framework logs.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=LogLevel.from_name(config.log_level).levelno,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for noisy in ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "aiomysql", "httpcore", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def build_event_logger(config: Settings, client: Optional[httpx.Client] = None) -> EventLogger:
    """
    Attach the console sink, and the remote sink when LOGTAIL_TOKEN is set,
    to the "users_api.events" logger.

    Rebuilding replaces any handlers attached by a previous call.
    """
    event_log = logging.getLogger(EVENT_LOGGER_NAME)
    for handler in list(event_log.handlers):
        event_log.removeHandler(handler)
    event_log.setLevel(LogLevel.from_name(config.log_level).levelno)
    event_log.propagate = False

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(LogLineFormatter())
    event_log.addHandler(console)

    resources = []
    if config.remote_logging_enabled:
        queue_handler, listener, remote_handler = build_remote_sink(
            url=config.logtail_url,
            token=config.logtail_token,
            capacity=config.remote_log_queue_size,
            timeout=config.remote_log_timeout,
            drain_timeout=config.remote_log_drain_timeout,
            client=client,
        )
        event_log.addHandler(queue_handler)
        # Listener first: stopping it flushes records into the handler
        resources = [listener, remote_handler]
    else:
        logger.warning("LOGTAIL_TOKEN is not set; remote log sink disabled")

    return EventLogger(event_log, resources=resources)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings
    setup_logging(config)

    owns_event_logger = app.state.event_logger is None
    if owns_event_logger:
        app.state.event_logger = build_event_logger(config)
    events: EventLogger = app.state.event_logger
    store: UserStore = app.state.user_store

    try:
        await store.connect()
    except StoreConnectionError as e:
        events.error("Failed to connect to the database", e.context)
        if owns_event_logger:
            await asyncio.to_thread(events.close)
        raise
    events.info("Connected to the database")

    logger.info("Server running at http://localhost:%d", SERVER_PORT)
    logger.info("Swagger at http://localhost:%d/swagger", SERVER_PORT)

    yield

    logger.info("Shutting down...")
    await store.close()
    if owns_event_logger:
        # Draining the remote sink blocks on HTTP; keep it off the event loop
        await asyncio.to_thread(events.close)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to JSON error responses.

        StoreQueryError → 500, error event with the engine detail
        Exception       → 500, traceback logged server-side

    Engine error text never reaches the client; it goes to the event log.
    """

    @app.exception_handler(StoreQueryError)
    async def handle_store_query_error(request: Request, exc: StoreQueryError):
        rid = _request_id(request)
        events: Optional[EventLogger] = request.app.state.event_logger
        if events is not None:
            events.error(exc.message, {**exc.context, "request_id": rid})
        return JSONResponse(
            status_code=500,
            content={
                "error": "store_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
            # Runs outside the middleware stack, so the header is set here
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    store: Optional[UserStore] = None,
    event_logger: Optional[EventLogger] = None,
    config: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: The UserStore handlers will use. Defaults to one built from
               the configured store URL (not connected until startup).
        event_logger: The event logger handlers will use. When omitted, the
               lifespan builds one from configuration; pass NullEventLogger()
               to run without event logging.
        config: Settings to use instead of the module-level singleton.
    """
    config = config or settings

    app = FastAPI(
        title="User API",
        description="CRUD of users backed by MySQL",
        version=__version__,
        docs_url="/swagger",
        redoc_url=None,
        openapi_url="/swagger/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.user_store = store or UserStore(config.store_url)
    app.state.event_logger = event_logger

    # Last added runs first: Request ID wraps the access log
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(health.router)

    return app


app = create_app()
