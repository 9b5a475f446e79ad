"""FastAPI dependency implementations."""

from fastapi import Request

from users_api.services.event_logger import EventLogger, NullEventLogger
from users_api.services.user_store import UserStore


def get_user_store(request: Request) -> UserStore:
    """Get the store attached to the application at construction."""
    return request.app.state.user_store


def get_event_logger(request: Request) -> EventLogger:
    """
    Get the event logger attached to the application.

    Before the lifespan has built one (an app driven without startup), fall
    back to a logger that discards events.
    """
    return request.app.state.event_logger or NullEventLogger()
