"""Structured results returned from service operations."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

NOT_AUTHENTICATED = "User not authenticated"
UNEXPECTED_ERROR = "An unexpected error occurred"


@dataclass(frozen=True)
class ActionResult(Generic[T]):
    """Outcome of a public operation: data on success, a message otherwise.

    ``code`` classifies failures so the HTTP layer can pick a status without
    parsing error strings. Known codes: ``unauthenticated``, ``invalid``,
    ``not_found``, ``upstream``, ``unavailable``, ``store`` and
    ``unexpected``.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    code: str | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> "ActionResult[T]":
        """Return a successful result."""
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, code: str = "unexpected") -> "ActionResult[T]":
        """Return a failed result."""
        return cls(success=False, error=error, code=code)

    @classmethod
    def unauthenticated(cls) -> "ActionResult[T]":
        """Return the result for a caller without a valid session."""
        return cls(success=False, error=NOT_AUTHENTICATED, code="unauthenticated")
