"""Authentication interface used by the HTTP layer."""

from typing import Protocol
from uuid import UUID


class AuthGateway(Protocol):
    """Resolves access tokens to user ids."""

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the token's user id, or None when the token is not valid."""
