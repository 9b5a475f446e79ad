"""
Users API: Database Engine Factory
====================================

What:  Async SQLAlchemy engine construction and the declarative Base.
Why:   Keeps driver and pool settings in one place; the UserStore owns the
       resulting engine for the life of the process.
How:   create_store_engine() builds an AsyncEngine whose pool holds exactly
       one connection. Every request reuses it; concurrent requests wait for
       their turn at pool checkout instead of opening new connections.

Driver:
    Production uses MySQL through aiomysql (mysql+aiomysql://...).
    Tests use SQLite through aiosqlite. Both go through the same adapted
    queue pool so behavior is identical.
"""

from typing import Union

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import AsyncAdaptedQueuePool


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def create_store_engine(url: Union[str, URL], echo: bool = False) -> AsyncEngine:
    """
    Build the single-connection async engine.

    pool_size=1, max_overflow=0:
        One persistent connection shared by all requests.
    pool_pre_ping:
        Replaces a connection the server closed while idle (MySQL
        wait_timeout) before it is handed to a query.
    pool_timeout=None:
        A request waits for the connection as long as it takes; a burst of
        concurrent requests never fails with a pool checkout timeout.
    """
    return create_async_engine(
        url,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=1,
        max_overflow=0,
        pool_timeout=None,
        pool_pre_ping=True,
        echo=echo,
    )
