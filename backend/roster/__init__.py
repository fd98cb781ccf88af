"""
Campus Roster Backend — Application Package Initializer
=======================================================

What: Marks the `roster` directory as a Python package.
Who:  Imported by uvicorn (`roster.main:app`), pytest, and the `roster-api` script.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (RosterService, Registry)│  ← id assignment, compaction
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch SQL directly. Services receive the session they work
    on as an argument, so every layer below the routes can be exercised
    against an in-memory SQLite store or a mocked session.
"""

__version__ = "1.0.0"
