"""Domain models for the conversational agent."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ToolCall:
    """A function call requested by the model."""

    call_id: str
    name: str
    arguments: str


@dataclass(frozen=True)
class AgentTurn:
    """One model response: either tool calls to run or final text."""

    response_id: str | None
    tool_calls: list[ToolCall]
    output_text: str


@dataclass
class DisplayMessage:
    """Transcript entry rendered by the chat UI."""

    role: str
    content: str
    tool_name: str | None = None
    tool_args: dict[str, object] = field(default_factory=dict)
    tool_result: str | None = None


@dataclass(frozen=True)
class AgentReply:
    """Result of one agent run."""

    response_id: str | None
    messages: list[DisplayMessage]
