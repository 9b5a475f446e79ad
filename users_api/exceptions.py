"""
Users API: Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the store layer.
Why:   Route handlers and exception handlers need to tell a fatal startup
       failure apart from a per-request query failure.
How:   Each exception carries a client-safe message and a context dict.
       The context is logged server-side only.

Exception Hierarchy:
    UsersApiError (base)
    └── StoreError
        ├── StoreConnectionError  → fatal at startup (process aborts)
        └── StoreQueryError       → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class UsersApiError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class StoreError(UsersApiError):
    """Base class for failures talking to the relational store."""


class StoreConnectionError(StoreError):
    """
    Raised when the store connection cannot be opened at startup.

    Not retried and not caught by the application: no request can be
    served without the store, so the lifespan lets it abort the process.
    """

    def __init__(
        self,
        message: str = "Could not connect to the database",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreQueryError(StoreError):
    """
    Raised when a single list/create/update/delete statement fails.

    HTTP: 500 Internal Server Error

    The message is the generic, per-operation text returned to the client.
    The underlying engine error (type and text) travels in `context` and
    only reaches the server-side logs.
    """

    def __init__(
        self,
        operation: str,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["operation"] = operation
        super().__init__(message=message, context=ctx)
        self.operation = operation
