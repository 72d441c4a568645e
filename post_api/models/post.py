"""
Post Service: Post SQLAlchemy Model
=====================================

What:  ORM model representing the "Post" table.
How:   Inherits from the shared DeclarativeBase; PostService builds its
       INSERT/UPDATE/DELETE ... RETURNING statements against it.
Who:   Used by PostService for CRUD operations and by create_tables.

Table Design:
    - post_id: UUID4 text, minted by the service at insert time, never reused
    - slug: derived from title on every write; deliberately not unique
    - create_at / update_at: UTC, timezone-aware, taken from the service clock

    Index on update_at DESC:
        Backs the only list query (most recently touched first).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from post_api.database import Base


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class Post(Base):
    """
    A blog-style article.

    Lifecycle:
        1. Created by POST /api/posts (create_at == update_at)
        2. Fully replaced by PATCH /api/posts/{id} (update_at refreshed)
        3. Hard-deleted by DELETE /api/posts/{id}
    """

    __tablename__ = "Post"

    # ── Primary Key ───────────────────────────────────────────────────────
    # Text rather than a native UUID column so any path segment can be
    # compared safely; unknown ids simply match nothing
    post_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Server-minted UUID4, immutable",
    )

    # ── Content ───────────────────────────────────────────────────────────
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    author: Mapped[str] = mapped_column(Text, nullable=False)

    slug: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Lower-cased, hyphen-separated form of title; not unique",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    create_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        comment="Set once at insertion (UTC)",
    )
    update_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        comment="Set at insertion and refreshed on every update (UTC)",
    )

    # ── Indexes ───────────────────────────────────────────────────────────
    __table_args__ = (
        Index("idx_post_update_at", update_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Post(post_id={self.post_id}, slug='{self.slug}', "
            f"update_at='{self.update_at}')>"
        )
