"""
Users API: Users Route Handlers
=================================

What:  The four operations on the users resource.
How:   Each handler makes exactly one UserStore call, logs the outcome
       through the injected EventLogger, and shapes the HTTP response.
       Store failures raise StoreQueryError, which the handler registered in
       main.py turns into a 500 with a JSON error body (and an error event).

Route Inventory:
    GET    /users        200  list of users
    POST   /users        201  created user with its new id
    PUT    /users/{id}   200  echo of the id and the new fields
    DELETE /users/{id}   204  empty body

PUT and DELETE on an id that does not exist still succeed: the statement
simply matches no row.
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Path, Response

from users_api.dependencies import get_event_logger, get_user_store
from users_api.schemas.user import (
    ErrorResponse,
    UpdatedUserResponse,
    UserPayload,
    UserResponse,
)
from users_api.services.event_logger import EventLogger
from users_api.services.user_store import UserStore

router = APIRouter(tags=["Users"])

STORE_ERROR_RESPONSE = {500: {"description": "Store error", "model": ErrorResponse}}


@router.get(
    "/users",
    response_model=List[UserResponse],
    responses={200: {"description": "List of users"}, **STORE_ERROR_RESPONSE},
    summary="List all users",
)
async def list_users(
    store: UserStore = Depends(get_user_store),
    events: EventLogger = Depends(get_event_logger),
) -> List[UserResponse]:
    users = await store.list_users()
    events.info("GET /users - users listed", {"count": len(users)})
    return users


@router.post(
    "/users",
    status_code=201,
    response_model=UserResponse,
    responses={201: {"description": "User created"}, **STORE_ERROR_RESPONSE},
    summary="Create a user",
)
async def create_user(
    payload: Optional[UserPayload] = Body(default=None),
    store: UserStore = Depends(get_user_store),
    events: EventLogger = Depends(get_event_logger),
) -> UserResponse:
    """Insert a user. The response carries the id assigned by the store."""
    payload = payload or UserPayload()
    user = await store.create_user(payload.name, payload.email)
    events.info(f"POST /users - user created: {payload.name}", {"id": user.id})
    return user


@router.put(
    "/users/{user_id}",
    response_model=UpdatedUserResponse,
    responses={200: {"description": "User updated"}, **STORE_ERROR_RESPONSE},
    summary="Update a user",
)
async def update_user(
    user_id: int = Path(description="Identifier of the user to update"),
    payload: Optional[UserPayload] = Body(default=None),
    store: UserStore = Depends(get_user_store),
    events: EventLogger = Depends(get_event_logger),
) -> UpdatedUserResponse:
    """
    Overwrite name and email of a user.

    The row is not read back: the response echoes the path id (as a string)
    and the submitted fields, whether or not a row matched.
    """
    payload = payload or UserPayload()
    await store.update_user(user_id, payload.name, payload.email)
    events.info(f"PUT /users/{user_id} - user updated")
    return UpdatedUserResponse(id=str(user_id), name=payload.name, email=payload.email)


@router.delete(
    "/users/{user_id}",
    status_code=204,
    response_class=Response,
    responses={204: {"description": "User removed"}, **STORE_ERROR_RESPONSE},
    summary="Delete a user",
)
async def delete_user(
    user_id: int = Path(description="Identifier of the user to delete"),
    store: UserStore = Depends(get_user_store),
    events: EventLogger = Depends(get_event_logger),
) -> Response:
    await store.delete_user(user_id)
    events.info(f"DELETE /users/{user_id} - user removed")
    return Response(status_code=204)
