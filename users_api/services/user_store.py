"""
Users API: User Store (Data Store Adapter)
============================================

What:  CRUD access to the `users` table over one long-lived connection.
Why:   Gives route handlers a small async interface and keeps every SQL
       statement, and every driver error, behind one seam.
How:   Owns an AsyncEngine (see database.create_store_engine). Each operation
       runs exactly one parameterized statement inside engine.begin(), which
       commits on success. Driver errors are wrapped in StoreQueryError.
Who:   Created by the application factory, stored on app.state, injected
       into route handlers through dependencies.get_user_store.
When:  connect() once during startup; operations per request; close() at
       shutdown.

Statement inventory (values are always bound parameters):
    list_users   SELECT id, name, email FROM users
    create_user  INSERT INTO users (name, email) VALUES (?, ?)
    update_user  UPDATE users SET name = ?, email = ? WHERE id = ?
    delete_user  DELETE FROM users WHERE id = ?

Unknown ids:
    update_user and delete_user do not check the affected row count. A
    statement that matches no row is a successful no-op.
"""

import logging
from typing import List, Optional, Union

from sqlalchemy import delete, insert, select, text, update
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from users_api.database import Base, create_store_engine
from users_api.exceptions import StoreConnectionError, StoreQueryError
from users_api.models.user import User
from users_api.schemas.user import UserResponse

logger = logging.getLogger(__name__)


class UserStore:
    """
    Explicit context object around the process-wide store connection.

    Responsibilities:
        - connect(): open the connection and create the table if absent
        - list_users / create_user / update_user / delete_user
        - ping(): lightweight reachability probe for /health
        - close(): release the connection

    Error Handling Strategy:
        connect() raises StoreConnectionError and is never retried.
        Operations raise StoreQueryError with a generic client message and
        the engine error in context. Nothing is retried.
    """

    def __init__(self, url: Union[str, URL], echo: bool = False):
        self._url = url
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None

    @property
    def connected(self) -> bool:
        return self._engine is not None

    async def connect(self) -> None:
        """
        Open the store connection and ensure the users table exists.

        Idempotent: a second call on a connected store does nothing.

        Raises:
            StoreConnectionError: the server is unreachable, credentials are
            rejected, or the table could not be created.
        """
        if self._engine is not None:
            return

        engine = create_store_engine(self._url, echo=self._echo)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            raise StoreConnectionError(
                context={
                    "url": engine.url.render_as_string(hide_password=True),
                    "error_type": type(e).__name__,
                    "detail": str(e),
                },
            ) from e

        self._engine = engine
        logger.debug("Store connected: %s", engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None

    def _require_engine(self, operation: str, message: str) -> AsyncEngine:
        if self._engine is None:
            raise StoreQueryError(
                operation=operation,
                message=message,
                context={"error_type": "NotConnected", "detail": "store is not connected"},
            )
        return self._engine

    @staticmethod
    def _wrap(operation: str, message: str, exc: Exception) -> StoreQueryError:
        return StoreQueryError(
            operation=operation,
            message=message,
            context={"error_type": type(exc).__name__, "detail": str(exc)},
        )

    # ── Operations ────────────────────────────────────────────────────────

    async def list_users(self) -> List[UserResponse]:
        """Return every row in natural storage order."""
        message = "Failed to list users"
        engine = self._require_engine("list", message)
        try:
            async with engine.begin() as conn:
                result = await conn.execute(select(User.id, User.name, User.email))
                rows = result.all()
        except (SQLAlchemyError, OSError) as e:
            raise self._wrap("list", message, e) from e

        return [UserResponse(id=row.id, name=row.name, email=row.email) for row in rows]

    async def create_user(self, name: Optional[str], email: Optional[str]) -> UserResponse:
        """Insert a row and return it with the store-assigned id."""
        message = "Failed to create user"
        engine = self._require_engine("create", message)
        try:
            async with engine.begin() as conn:
                result = await conn.execute(insert(User).values(name=name, email=email))
                new_id = result.inserted_primary_key[0]
        except (SQLAlchemyError, OSError) as e:
            raise self._wrap("create", message, e) from e

        return UserResponse(id=new_id, name=name, email=email)

    async def update_user(self, user_id: int, name: Optional[str], email: Optional[str]) -> None:
        """Overwrite name and email of the matching row. No row, no error."""
        message = "Failed to update user"
        engine = self._require_engine("update", message)
        try:
            async with engine.begin() as conn:
                await conn.execute(
                    update(User).where(User.id == user_id).values(name=name, email=email)
                )
        except (SQLAlchemyError, OSError) as e:
            raise self._wrap("update", message, e) from e

    async def delete_user(self, user_id: int) -> None:
        """Remove the matching row permanently. No row, no error."""
        message = "Failed to delete user"
        engine = self._require_engine("delete", message)
        try:
            async with engine.begin() as conn:
                await conn.execute(delete(User).where(User.id == user_id))
        except (SQLAlchemyError, OSError) as e:
            raise self._wrap("delete", message, e) from e

    async def ping(self) -> bool:
        """SELECT 1 against the store. False when unreachable or not connected."""
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Store ping failed: %s", str(e))
            return False
        return True
