"""
Users API: Pydantic Request/Response Schemas
==============================================

What:  Pydantic models defining the API contract.
Why:   FastAPI uses them to parse request bodies, serialize responses, and
       generate the OpenAPI document served at /swagger.

Validation policy:
    The request body is deliberately permissive. Both fields are optional and
    carry no format rules; whatever the client sends (or omits) is handed to
    the store as-is. A missing field, or a missing body, becomes NULL, and a
    number is stored as its text.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserPayload(BaseModel):
    """Body of POST /users and PUT /users/{id}."""
    name: Optional[str] = Field(default=None, description="User name", examples=["Ana"])
    email: Optional[str] = Field(default=None, description="User email", examples=["ana@x.com"])

    model_config = ConfigDict(coerce_numbers_to_str=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """
    What:  A stored user row.
    Who:   Items of GET /users and the body of POST /users (201).
    """
    id: int = Field(description="Store-assigned identifier")
    name: Optional[str] = Field(default=None, description="User name")
    email: Optional[str] = Field(default=None, description="User email")

    model_config = {"from_attributes": True}


class UpdatedUserResponse(BaseModel):
    """
    What:  Body of PUT /users/{id}.
    Why id is a string: the handler echoes the path segment it received
    rather than reading the row back, so the id keeps its path form ("1").
    """
    id: str = Field(description="Identifier as given in the request path")
    name: Optional[str] = Field(default=None, description="New user name")
    email: Optional[str] = Field(default=None, description="New user email")


# ══════════════════════════════════════════════════════════════════════════
# Error / Operational Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body.

    Example:
        {
            "error": "store_error",
            "message": "Failed to list users",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
