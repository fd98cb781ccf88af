"""
Campus Roster Backend — Custom Exception Hierarchy
===================================================

What:  Application-specific exceptions raised by the service layer.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses with the right HTTP status code.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    RosterError (base)
    └── StoreUnavailableError   → 500 Internal Server Error

Deleting an id that does not exist is not an error: the delete simply
affects no rows and compaction leaves the collection unchanged.
"""

from typing import Any, Dict, Optional


class RosterError(Exception):
    """
    Base exception for all Campus Roster application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class StoreUnavailableError(RosterError):
    """
    Raised when a read or write against the relational store fails.

    When:    Connection refused or lost, pool exhausted, constraint violation
             (e.g. two concurrent inserts that picked the same next id).
    HTTP:    500 Internal Server Error

    The message names the failed operation ("Insert student failed") and is
    returned to the client as-is. Driver details stay in `context` and only
    reach the server log.
    """

    def __init__(
        self,
        message: str = "Store operation failed",
        collection: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if collection:
            ctx["collection"] = collection
        super().__init__(message=message, context=ctx)
        self.collection = collection
