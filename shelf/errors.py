# shelf/errors.py
from typing import List, Optional


class ShelfError(Exception):
    """Base class for all shelf errors"""
    pass


class ValidationError(ShelfError, ValueError):
    """Input rejected on the client before any remote call."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class CollaboratorError(ShelfError):
    """A call to the data collaborator failed."""
    pass


class RecordNotFoundError(CollaboratorError):
    """The record does not exist or belongs to another owner."""

    def __init__(self, entity: str, record_id: str):
        super().__init__(f"{entity} '{record_id}' not found")
        self.entity = entity
        self.record_id = record_id


class CascadeError(CollaboratorError):
    """One or more calls of a concurrent batch failed."""

    def __init__(self, failures: List[BaseException], total: Optional[int] = None):
        total = total if total is not None else len(failures)
        super().__init__(f"{len(failures)} of {total} operations failed: {failures[0]}")
        self.failures = failures
        self.total = total


class BookUnavailableError(ShelfError):
    """The book detail view cannot be shown."""

    def __init__(self, book_id: str, reason: str = "not found"):
        super().__init__(f"Book '{book_id}' is unavailable: {reason}")
        self.book_id = book_id
        self.reason = reason
