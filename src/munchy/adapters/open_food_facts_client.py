"""Open Food Facts product lookup client."""

from dataclasses import dataclass

import httpx

from munchy.services.nutrition import BarcodeClient

USER_AGENT = "Munchy/1.0 (nutrition tracker)"


@dataclass
class HttpxOpenFoodFactsClient(BarcodeClient):
    """Barcode client backed by the Open Food Facts product API."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(headers={"User-Agent": USER_AGENT}),
        )

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch the product payload for a barcode."""
        response = await self.http_client.get(
            f"{self.base_url}/api/v2/product/{barcode}.json",
            params={
                "fields": "product_name,brands,serving_quantity,"
                "serving_quantity_unit,nutriments"
            },
            timeout=10,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
