"""
Post Service: Application Package
==================================

What:  HTTP CRUD service for blog-style posts stored in a single "Post" table.
Who:   Served by uvicorn (``uvicorn post_api.main:app``), imported by pytest.

Architecture Note:
    The package follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Slug derivation, SQL statements
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch SQL; services never touch HTTP status codes.
"""

__version__ = "1.0.0"
