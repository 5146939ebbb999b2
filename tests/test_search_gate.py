"""Tests for debounced latest-wins food search."""

import asyncio
from dataclasses import dataclass

from munchy.services.cache import InMemoryCache
from munchy.services.nutrition import NutritionService
from munchy.services.search import SearchGate
from tests.conftest import FakeBarcodeClient, FakeFdcClient


@dataclass
class SlowFdcClient(FakeFdcClient):
    delay_seconds: float = 0.05

    async def search_foods(self, query: str, page_size: int = 25) -> dict[str, object]:
        await asyncio.sleep(self.delay_seconds)
        return await super().search_foods(query, page_size)


def _gate(client: FakeFdcClient, quiet_period_seconds: float) -> SearchGate:
    service = NutritionService(client, FakeBarcodeClient(), InMemoryCache())
    return SearchGate(service, quiet_period_seconds=quiet_period_seconds)


def test_newer_request_supersedes_waiting_one() -> None:
    client = FakeFdcClient()
    gate = _gate(client, quiet_period_seconds=0.02)

    async def scenario() -> tuple[object, object]:
        return await asyncio.gather(
            gate.search("user-1", "chi"), gate.search("user-1", "chicken")
        )

    first, second = asyncio.run(scenario())

    assert first is None
    assert second is not None
    assert client.search_calls == [("chicken", 20)]


def test_stale_in_flight_response_is_discarded() -> None:
    client = SlowFdcClient()
    gate = _gate(client, quiet_period_seconds=0)

    async def scenario() -> tuple[object, object]:
        first = asyncio.create_task(gate.search("user-1", "chicken"))
        await asyncio.sleep(0.02)
        second = await gate.search("user-1", "rice")
        return await first, second

    first, second = asyncio.run(scenario())

    assert first is None
    assert second is not None
    assert len(client.search_calls) == 2


def test_callers_are_independent() -> None:
    gate = _gate(FakeFdcClient(), quiet_period_seconds=0.01)

    async def scenario() -> tuple[object, object]:
        return await asyncio.gather(
            gate.search("user-1", "chicken"), gate.search("user-2", "chicken")
        )

    first, second = asyncio.run(scenario())

    assert first and second


def test_short_query_returns_no_results() -> None:
    client = FakeFdcClient()
    gate = _gate(client, quiet_period_seconds=0)

    assert asyncio.run(gate.search("user-1", " c ")) == []
    assert client.search_calls == []


def test_finished_callers_are_forgotten() -> None:
    gate = _gate(FakeFdcClient(), quiet_period_seconds=0)

    async def scenario() -> None:
        await asyncio.gather(
            gate.search("user-1", "chicken"),
            gate.search("user-2", "rice"),
            gate.search("10.0.0.1", "c"),
        )

    asyncio.run(scenario())

    assert gate.pending_callers() == 0


def test_new_request_after_latest_finished_still_supersedes_old_one() -> None:
    client = SlowFdcClient(delay_seconds=0.1)
    gate = _gate(client, quiet_period_seconds=0)

    async def scenario() -> tuple[object, object, object]:
        slow = asyncio.create_task(gate.search("user-1", "chicken"))
        await asyncio.sleep(0.01)
        short = await gate.search("user-1", "c")
        newest = asyncio.create_task(gate.search("user-1", "rice"))
        return await slow, short, await newest

    slow, short, newest = asyncio.run(scenario())

    assert slow is None
    assert short == []
    assert newest is not None
    assert gate.pending_callers() == 0
