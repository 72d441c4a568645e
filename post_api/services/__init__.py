# Services package init
"""
Post Service: Services Layer
==============================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - PostService: slug derivation and the five single-statement operations

Services can be unit-tested with a mocked AsyncSession and no HTTP stack.
"""
