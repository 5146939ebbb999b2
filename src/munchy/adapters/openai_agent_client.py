"""OpenAI Responses API client for the food-logging agent."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from munchy.domain.agent import AgentTurn, ToolCall
from munchy.services.agent import AgentClient


@dataclass
class OpenAIAgentClient(AgentClient):
    """Agent client backed by an OpenAI-compatible Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, base_url: str | None = None) -> "OpenAIAgentClient":
        """Create an agent client, optionally against a compatible endpoint."""
        return cls(client=AsyncOpenAI(api_key=api_key, base_url=base_url))

    async def respond(
        self,
        *,
        model: str,
        instructions: str,
        input_items: str | list[dict[str, object]],
        tools: list[dict[str, object]],
        previous_response_id: str | None,
    ) -> AgentTurn:
        """Call the Responses API and collect function calls."""
        request_payload: dict[str, object] = {
            "model": model,
            "instructions": instructions,
            "input": input_items,
            "tools": tools,
        }
        if previous_response_id:
            request_payload["previous_response_id"] = previous_response_id

        response = await self.client.responses.create(**request_payload)
        tool_calls = [
            ToolCall(call_id=item.call_id, name=item.name, arguments=item.arguments)
            for item in response.output
            if item.type == "function_call"
        ]
        return AgentTurn(
            response_id=response.id,
            tool_calls=tool_calls,
            output_text=response.output_text or "",
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
