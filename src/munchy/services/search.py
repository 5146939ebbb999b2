"""Debounced, latest-wins food search."""

import asyncio
import itertools
from collections.abc import Iterator
from dataclasses import dataclass, field

from munchy.domain.nutrition import FoodSummary
from munchy.services.nutrition import NutritionService

MIN_QUERY_LENGTH = 2


@dataclass
class SearchGate:
    """Debounces search-as-you-type requests per caller.

    Each request waits for a quiet period; a newer request from the same
    caller supersedes it, whether it is still waiting or already in flight.
    Superseded requests resolve to None instead of stale results.

    Sequence numbers come from one counter shared by every caller, so a
    caller's entry can be dropped once its latest request finishes without
    a later request reusing an old number.
    """

    nutrition_service: NutritionService
    quiet_period_seconds: float = 0.3
    _sequences: dict[str, int] = field(default_factory=dict)
    _counter: Iterator[int] = field(default_factory=lambda: itertools.count(1))

    async def search(
        self, caller: str, query: str, limit: int = 20
    ) -> list[FoodSummary] | None:
        """Return results for the caller's latest query, or None if superseded."""
        sequence = next(self._counter)
        self._sequences[caller] = sequence
        try:
            if len(query.strip()) < MIN_QUERY_LENGTH:
                return []
            await asyncio.sleep(self.quiet_period_seconds)
            if not self._is_latest(caller, sequence):
                return None
            results = await self.nutrition_service.search(query, limit=limit)
            if not self._is_latest(caller, sequence):
                return None
            return results
        finally:
            if self._is_latest(caller, sequence):
                del self._sequences[caller]

    def pending_callers(self) -> int:
        """Number of callers with a request still waiting or in flight."""
        return len(self._sequences)

    def _is_latest(self, caller: str, sequence: int) -> bool:
        return self._sequences.get(caller) == sequence
