"""
ProductBridge Backend — Application Package Initializer
=======================================================

What: Marks the `productbridge` directory as a Python package.
Who:  Imported by uvicorn (`productbridge.main:app`), Alembic and pytest.

Architecture Note:
    A thin REST-to-SQL bridge. Every request round-trips to the database;
    nothing is cached between requests.

    ┌─────────────────────────────────────┐
    │        Routes (API Layer)           │  ← verbs, paths, status codes
    ├─────────────────────────────────────┤
    │   Services (statement + persist)    │  ← build SQL, commit/rollback gate
    ├─────────────────────────────────────┤
    │   Statements (SQL templates)        │  ← parameterised text() clauses
    ├─────────────────────────────────────┤
    │   Datastore (async SQLAlchemy)      │  ← transaction scope per write
    └─────────────────────────────────────┘

    Writes funnel through a single persist step. A `fail` flag on the request
    forces that step to roll back instead of committing; the same SQL runs on
    both paths.
"""

__version__ = "1.0.0"
