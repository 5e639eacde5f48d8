"""
CatTrack Backend — Shared Response Schemas
===========================================

What:  Envelope, error, health and auth schemas shared by every router.
How:   FastAPI uses these as `response_model`s; OpenAPI docs come from them.

Success envelope for mutations:
    {"message": "Cat updated successfully", "data": {...record...}}

Reads return the bare record or list, no envelope.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, EmailStr, Field

from cattrack.schemas.user import UserPublic

T = TypeVar("T")


class MessageResponse(BaseModel, Generic[T]):
    """`{message, data}` envelope returned by create/update/delete endpoints."""

    message: str = Field(description="Human-readable success message")
    data: T = Field(description="The created, updated or deleted record")


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "forbidden",
            "message": "Only owner can delete cat",
            "details": {"reason": "owner required"},
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class LoginRequest(BaseModel):
    username: EmailStr = Field(description="Account email")
    password: str = Field(min_length=1, max_length=72)


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str = Field(description="Bearer token for the Authorization header")
    user: UserPublic


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Document store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
