"""Translate Supabase query failures into store errors."""

from collections.abc import Iterator
from contextlib import contextmanager

from supabase import PostgrestAPIError

from munchy.domain.errors import StoreError


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Re-raise PostgREST failures inside the block as ``StoreError``."""
    try:
        yield
    except PostgrestAPIError as exc:
        raise StoreError(exc.message or f"Failed to {action}") from exc
