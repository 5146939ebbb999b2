"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

REQUEST_TIMEOUT_SECONDS = 15


class FdcClient(Protocol):
    """Interface for FoodData Central lookups."""

    async def search_foods(self, query: str, page_size: int = 25) -> dict[str, object]:
        """Return the raw ``/foods/search`` payload for a query."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Return the raw full-format record for one food."""


@dataclass
class HttpxFdcClient(FdcClient):
    """FoodData Central client authenticated with an api.data.gov key.

    ``data_types`` narrows searches to FDC datasets such as ``Branded`` or
    ``Foundation``; every dataset is searched when it is empty.
    """

    base_url: str
    http_client: httpx.AsyncClient
    data_types: tuple[str, ...] = ()

    @classmethod
    def create(
        cls, api_key: str, base_url: str, data_types: tuple[str, ...] = ()
    ) -> "HttpxFdcClient":
        """Create a client whose session sends the API key on every request."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(headers={"X-Api-Key": api_key}),
            data_types=data_types,
        )

    async def search_foods(self, query: str, page_size: int = 25) -> dict[str, object]:
        """Search foods by name or description."""
        body: dict[str, object] = {"query": query, "pageSize": page_size}
        if self.data_types:
            body["dataType"] = list(self.data_types)
        response = await self.http_client.post(
            f"{self.base_url}/foods/search",
            json=body,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch the full record, including every reported nutrient."""
        response = await self.http_client.get(
            f"{self.base_url}/food/{fdc_id}",
            params={"format": "full"},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
