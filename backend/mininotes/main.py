"""
Mini Notes Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the ASGI application.
Why:   Centralizes configuration, storage wiring, middleware, route mounting
       and lifecycle management in one place.
How:   create_app() builds the storage namespaces, the services and the
       notes router, then mounts the router under a FastAPI app that owns
       middleware, /health, /docs and the lifespan.
Who:   uvicorn (`uvicorn mininotes.main:app`) and the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │  Middleware: RequestID → Logging → RateLimit         │
    │                                                      │
    │  GET /health  (FastAPI)                              │
    │  mount "/" ─▶ Router                                 │
    │               ├── /api/auth/*   → AuthService        │
    │               ├── /api/notes*   → NoteService        │
    │               └── /, /index.html (front-end shell)   │
    │                                                      │
    │  StorageBackends(notes, users) ─▶ SQL or memory KV   │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, create kv_entries if DB_AUTO_CREATE
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from mininotes import __version__
from mininotes.config import Settings, settings as default_settings
from mininotes.database import create_tables, dispose_engine
from mininotes.middleware.logging import RequestLoggingMiddleware
from mininotes.middleware.rate_limit import RateLimitMiddleware
from mininotes.middleware.request_id import RequestIDMiddleware
from mininotes.routes import build_router, health
from mininotes.services.auth_service import AuthService
from mininotes.services.note_service import NoteService
from mininotes.services.password_hasher import PasswordHasher
from mininotes.services.session_store import SessionStore
from mininotes.storage import StorageBackends, build_storage

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2026-10-19T09:12:44 [INFO] mininotes.access: POST /api/notes 201 ...
    Output goes to stdout so container runtimes capture it.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request noise from the server and the database driver
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings
    engine = app.state.engine

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("Mini Notes backend %s starting (storage=%s)", __version__, config.storage_backend)

    if engine is not None and config.db_auto_create:
        await create_tables(engine)
        logger.info("kv_entries table ready")
    if config.storage_backend == "memory":
        logger.warning("Using in-memory storage: data is lost on restart, do not run multiple workers")

    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Mini Notes backend shutting down...")
    if engine is not None:
        await dispose_engine(engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[StorageBackends] = None,
) -> FastAPI:
    """
    Assemble the application.

    Args:
        settings: configuration; defaults to the environment-loaded singleton
        storage:  pre-built namespaces. When given, STORAGE_BACKEND is ignored
                  and no engine is created (tests inject memory stores here).
    """
    config = settings or default_settings

    engine = None
    if storage is None:
        storage, engine = build_storage(config)

    hasher = PasswordHasher(rounds=config.bcrypt_rounds)
    sessions = SessionStore(storage.users, ttl_seconds=config.token_ttl_seconds)
    auth_service = AuthService(
        storage.users,
        sessions,
        hasher,
        password_min_length=config.password_min_length,
        username_max_length=config.username_max_length,
    )
    note_service = NoteService(storage.notes)
    notes_router = build_router(auth_service, note_service, allow_origin=config.cors_allow_origin)

    app = FastAPI(
        title="Mini Notes API",
        description="Personal markdown notes with bearer-token authentication.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.storage = storage
    app.state.engine = engine
    app.state.auth_service = auth_service
    app.state.note_service = note_service

    # ── Middleware ────────────────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → RateLimit.
    # 429s therefore carry X-Request-ID and get an access log line.
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=config.rate_limit_requests,
        window=config.rate_limit_window,
        allow_origin=config.cors_allow_origin,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(health.router)
    # Mounted last: it matches every path FastAPI itself does not serve
    app.mount("/", notes_router)

    return app


app = create_app()
