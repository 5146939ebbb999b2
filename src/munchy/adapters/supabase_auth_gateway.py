"""Resolve bearer tokens to users through Supabase Auth."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from munchy.services.auth import AuthGateway

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Verifies access tokens issued by Supabase Auth."""

    client: Client

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the id of the token's user, or None if it is not valid."""
        if not access_token:
            return None
        try:
            response = self.client.auth.get_user(access_token)
        except Exception as exc:
            _logger.info("Rejected access token: %s", exc)
            return None
        if response is None or response.user is None:
            return None
        return UUID(str(response.user.id))
