"""
Post Service: Pydantic Request/Response Schemas
=================================================

What:  Pydantic models defining the API contract.
How:   FastAPI uses these models to coerce request bodies, serialize
       responses, and generate the OpenAPI document.

Field names mirror the table columns (post_id, create_at, update_at) and
the envelope keys of PATCH/DELETE use camelCase (updatedPost, deletedPost)
as existing clients expect.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_serializer


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostWrite(BaseModel):
    """
    What:  Body of POST /api/posts and PATCH /api/posts/{post_id}.

    All three fields are required on both routes: an update replaces the
    whole row, there is no partial update. Only type coercion is applied.
    """
    title: str = Field(description="Post title; the slug is derived from it")
    content: str = Field(description="Post body, may be empty")
    author: str = Field(description="Author display name")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PostResponse(BaseModel):
    """Full representation of a stored post."""
    post_id: str = Field(description="Server-generated identifier")
    title: str
    content: str
    author: str
    slug: str = Field(description="URL-friendly form of the title")
    create_at: datetime = Field(description="Creation timestamp (UTC ISO 8601)")
    update_at: datetime = Field(description="Last update timestamp (UTC ISO 8601)")

    model_config = {"from_attributes": True}

    @field_serializer("create_at", "update_at")
    def serialize_utc(self, value: datetime) -> datetime:
        """SQLite hands timestamps back naive; they are stored as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class PostUpdatedResponse(BaseModel):
    """Returned by PATCH /api/posts/{post_id}."""
    message: str = Field(default="Post updated successfully")
    updatedPost: PostResponse


class PostDeletedResponse(BaseModel):
    """Returned by DELETE /api/posts/{post_id}; echoes the removed row."""
    message: str = Field(default="Post deleted successfully")
    deletedPost: PostResponse


class MessageResponse(BaseModel):
    """Plain acknowledgement body."""
    message: str


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code ("not_found", "server_error")
        message: Human-readable description
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "not_found",
            "message": "post with ID '0b6c...' was not found",
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for load balancers and monitoring."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
