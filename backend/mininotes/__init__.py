"""
Mini Notes Backend — Package Initializer
==========================================

What: Root package for the Mini Notes API server.
Why:  Enables imports like `from mininotes.config import settings`.
Who:  Used by uvicorn (`uvicorn mininotes.main:app`), alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   Router (ASGI, CORS, error map)    │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Routes (thin request handlers)    │  ← parse body, call service
    ├─────────────────────────────────────┤
    │   Services (auth, notes)            │  ← business rules
    ├─────────────────────────────────────┤
    │   Storage (key-value namespaces)    │  ← SQL table or in-memory dict
    └─────────────────────────────────────┘

    Each layer only talks to the one below it, so services are testable
    with an in-memory store and the router is testable with stub handlers.
"""

__version__ = "1.0.0"
