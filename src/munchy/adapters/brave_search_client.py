"""Brave Search web search client used by the agent."""

from dataclasses import dataclass

import httpx

from munchy.services.agent import WebSearchClient

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"


@dataclass
class HttpxBraveSearchClient(WebSearchClient):
    """Web search backed by the Brave Search API."""

    api_key: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str) -> "HttpxBraveSearchClient":
        """Create a client with a managed httpx session."""
        return cls(api_key=api_key, http_client=httpx.AsyncClient())

    async def search(self, query: str, count: int = 5) -> list[dict[str, str]]:
        """Return title/description/url triples for a query."""
        response = await self.http_client.get(
            BRAVE_SEARCH_URL,
            params={"q": query, "count": count},
            headers={
                "Accept": "application/json",
                "X-Subscription-Token": self.api_key,
            },
            timeout=10,
        )
        response.raise_for_status()
        results = (response.json().get("web") or {}).get("results") or []
        return [
            {
                "title": str(result.get("title", "")),
                "description": str(result.get("description", "")),
                "url": str(result.get("url", "")),
            }
            for result in results[:count]
        ]

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
