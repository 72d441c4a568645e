"""
Post Service: Post Service (Business Logic)
=============================================

What:  The five post operations plus slug derivation.
How:   Each operation issues exactly one parameterized SQL statement through
       the request's AsyncSession; writes use RETURNING so the affected row
       comes back in the same round trip, and commit before returning so a
       failed commit surfaces as DatabaseError instead of a sent 200.
Who:   Called by route handlers in routes/posts.py.

Statement map:
    list_posts   → SELECT ... ORDER BY update_at DESC
    get_post     → SELECT ... WHERE post_id = :id
    create_post  → INSERT ... RETURNING *
    update_post  → UPDATE ... WHERE post_id = :id RETURNING *
    delete_post  → DELETE ... WHERE post_id = :id RETURNING *

    A write that matches no row returns nothing, which becomes NotFoundError.
    There is no version check: concurrent updates are last-writer-wins.
"""

import logging
import re
import uuid
from typing import List

from sqlalchemy import delete, desc, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from post_api.exceptions import DatabaseError, NotFoundError
from post_api.models.post import Post, utc_now
from post_api.schemas.post import PostResponse, PostWrite

logger = logging.getLogger(__name__)

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """
    Derive the URL slug for a title.

    Lower-cases the title, collapses every run of characters outside
    [a-z0-9] into a single "-" and strips separators from both ends.

        >>> slugify("Hello World")
        'hello-world'
        >>> slugify("  C++ & Rust!  ")
        'c-rust'
    """
    return _NON_ALPHANUMERIC.sub("-", title.lower()).strip("-")


def _to_response(post: Post) -> PostResponse:
    return PostResponse(
        post_id=post.post_id,
        title=post.title,
        content=post.content,
        author=post.author,
        slug=post.slug,
        create_at=post.create_at,
        update_at=post.update_at,
    )


class PostService:
    """
    Business logic layer for post operations.

    Error Handling Strategy:
        NotFoundError propagates as-is. Any other failure while executing a
        statement is logged with its context and wrapped in DatabaseError,
        which the global handler turns into a generic 500.
    """

    async def list_posts(self, db: AsyncSession) -> List[PostResponse]:
        """
        Return every post, most recently updated first.

        An empty table is a normal outcome and yields an empty list.
        """
        try:
            result = await db.execute(
                select(Post).order_by(desc(Post.update_at))
            )
            posts = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve posts. Please try again.",
                context={"operation": "list", "error_type": type(e).__name__},
            )

        return [_to_response(post) for post in posts]

    async def get_post(self, db: AsyncSession, post_id: str) -> PostResponse:
        """
        Retrieve a single post by identifier.

        Raises:
            NotFoundError: No post has this identifier (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            result = await db.execute(
                select(Post).where(Post.post_id == post_id)
            )
            post = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching post %s: %s", post_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the post. Please try again.",
                context={"operation": "get", "post_id": post_id},
            )

        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)
        return _to_response(post)

    async def create_post(self, db: AsyncSession, data: PostWrite) -> PostResponse:
        """
        Insert a new post and return the stored row.

        The identifier and both timestamps are minted here; create_at and
        update_at start out identical.
        """
        now = utc_now()
        statement = (
            insert(Post)
            .values(
                post_id=str(uuid.uuid4()),
                title=data.title,
                content=data.content,
                author=data.author,
                slug=slugify(data.title),
                create_at=now,
                update_at=now,
            )
            .returning(Post)
        )

        try:
            result = await db.execute(statement)
            post = result.scalar_one()
            await db.commit()
        except Exception as e:
            logger.error("Database error creating post: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the post. Please try again.",
                context={"operation": "create", "error_type": type(e).__name__},
            )

        logger.info("Post created: %s (slug=%s)", post.post_id, post.slug)
        return _to_response(post)

    async def update_post(
        self,
        db: AsyncSession,
        post_id: str,
        data: PostWrite,
    ) -> PostResponse:
        """
        Replace title, content and author of an existing post.

        The slug is recomputed and update_at refreshed; create_at is not
        part of the SET clause and therefore never changes.

        Raises:
            NotFoundError: No post has this identifier (→ 404)
            DatabaseError: Statement execution failed (→ 500)
        """
        statement = (
            update(Post)
            .where(Post.post_id == post_id)
            .values(
                title=data.title,
                content=data.content,
                author=data.author,
                slug=slugify(data.title),
                update_at=utc_now(),
            )
            .returning(Post)
        )

        try:
            result = await db.execute(statement)
            post = result.scalar_one_or_none()
            await db.commit()
        except Exception as e:
            logger.error("Database error updating post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the post. Please try again.",
                context={"operation": "update", "post_id": post_id},
            )

        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)

        logger.info("Post updated: %s (slug=%s)", post.post_id, post.slug)
        return _to_response(post)

    async def delete_post(self, db: AsyncSession, post_id: str) -> PostResponse:
        """
        Permanently remove a post and return the row as it was.

        Deleting an already-deleted identifier is a NotFoundError, not a
        silent success.
        """
        statement = delete(Post).where(Post.post_id == post_id).returning(Post)

        try:
            result = await db.execute(statement)
            post = result.scalar_one_or_none()
            await db.commit()
        except Exception as e:
            logger.error("Database error deleting post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the post. Please try again.",
                context={"operation": "delete", "post_id": post_id},
            )

        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)

        logger.info("Post deleted: %s", post_id)
        return _to_response(post)


# ── Singleton Instance ────────────────────────────────────────────────────
# Stateless; the session is passed into every call
post_service = PostService()
