"""
Users API: Application Package Initializer
===========================================

What: Marks the `users_api` directory as a Python package.
Who:  Used by uvicorn (`users_api.main:app`), pytest, and `python -m users_api`.

Architecture Note:
    The service is a thin layered CRUD API:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (UserStore, EventLogger) │  ← SQL statements, log sinks
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy engine
    └─────────────────────────────────────┘

    Routes never touch the engine directly. They receive a UserStore and an
    EventLogger through FastAPI dependencies, which makes both replaceable
    in tests.
"""

__version__ = "1.0.0"
