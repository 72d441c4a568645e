"""
Post Service: Posts Route Handlers
====================================

What:  CRUD endpoints under /api/posts.
How:   Each handler receives a request-scoped session, delegates to
       PostService, and returns the schema the service produced.

Routes:
    GET    /api/posts              → list, most recently updated first
    POST   /api/posts              → create, returns the stored row
    GET    /api/posts/{post_id}    → single row or 404
    PATCH  /api/posts/{post_id}    → full replacement, {message, updatedPost}
    DELETE /api/posts/{post_id}    → hard delete, {message, deletedPost}

All successful responses are HTTP 200, including creation.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from post_api.database import get_db_session
from post_api.schemas.post import (
    ErrorResponse,
    PostDeletedResponse,
    PostResponse,
    PostUpdatedResponse,
    PostWrite,
)
from post_api.services.post_service import post_service

router = APIRouter(prefix="/api", tags=["Posts"])

_SERVER_ERROR = {"description": "Server error", "model": ErrorResponse}
_NOT_FOUND = {"description": "Post not found", "model": ErrorResponse}


@router.get(
    "/posts",
    response_model=List[PostResponse],
    responses={500: _SERVER_ERROR},
    summary="List all posts",
)
async def list_posts(
    db: AsyncSession = Depends(get_db_session),
) -> List[PostResponse]:
    """Every post, ordered by update_at descending. No paging or filters."""
    return await post_service.list_posts(db)


@router.post(
    "/posts",
    response_model=PostResponse,
    responses={500: _SERVER_ERROR},
    summary="Create a post",
)
async def create_post(
    body: PostWrite,
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    """
    Create a post from {title, content, author}.

    The response carries the generated post_id, slug and timestamps.
    """
    return await post_service.create_post(db, body)


@router.get(
    "/posts/{post_id}",
    response_model=PostResponse,
    responses={404: _NOT_FOUND, 500: _SERVER_ERROR},
    summary="Get a single post by ID",
)
async def get_post(
    post_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await post_service.get_post(db, post_id)


@router.patch(
    "/posts/{post_id}",
    response_model=PostUpdatedResponse,
    responses={404: _NOT_FOUND, 500: _SERVER_ERROR},
    summary="Replace a post's title, content and author",
)
async def update_post(
    post_id: str,
    body: PostWrite,
    db: AsyncSession = Depends(get_db_session),
) -> PostUpdatedResponse:
    """
    All three fields are required; omitted fields are not kept from the
    previous version. create_at is preserved, update_at is refreshed.
    """
    updated = await post_service.update_post(db, post_id, body)
    return PostUpdatedResponse(message="Post updated successfully", updatedPost=updated)


@router.delete(
    "/posts/{post_id}",
    response_model=PostDeletedResponse,
    responses={404: _NOT_FOUND, 500: _SERVER_ERROR},
    summary="Delete a post",
)
async def delete_post(
    post_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> PostDeletedResponse:
    """Removes the row permanently and echoes it back for confirmation."""
    deleted = await post_service.delete_post(db, post_id)
    return PostDeletedResponse(message="Post deleted successfully", deletedPost=deleted)
