from dataclasses import dataclass, field
from typing import Literal, List, Dict, Any, Union, TypedDict, Optional, Tuple

# =============================================================================
# Type Definitions
# =============================================================================

# Supported LLM providers. "openai" and "groq" share the OpenAI-compatible adapter.
Provider = Literal["claude", "openai", "groq", "gemini"]

# Chat mode. Only the Claude adapter reacts to it (token budget + extended thinking).
ChatMode = Literal["quick", "dive"]

AttachmentKind = Literal["text", "image", "pdf"]


# =============================================================================
# Content Blocks (provider-agnostic)
# =============================================================================

class TextBlock(TypedDict):
    """
    Plain text content.
    """
    type: Literal["text"]
    text: str


class ThinkingBlock(TypedDict):
    """
    Extended-thinking content (Claude only). Surfaced to observers, never part
    of the answer text and never replayed from history.
    """
    type: Literal["thinking"]
    thinking: str


class ToolUseBlock(TypedDict):
    """
    A model's request to run a tool.
    """
    type: Literal["tool_use"]
    id: str
    name: str
    input: Dict[str, Any]


class ToolResultBlock(TypedDict, total=False):
    """
    Result of a tool run, answering the ToolUseBlock with the same id.

    `name` is optional but Gemini needs it to build a functionResponse.
    """
    type: Literal["tool_result"]
    tool_use_id: str
    content: str
    name: str


class MediaBlock(TypedDict):
    """
    Base64 media (image or document).
    """
    type: Literal["image", "document"]
    mime_type: str
    data: str


ContentBlock = Union[TextBlock, ThinkingBlock, ToolUseBlock, ToolResultBlock, MediaBlock]
MessageContent = Union[str, List[ContentBlock]]


class Message(TypedDict):
    """
    One conversation turn as supplied by the caller.

    Roles:
    - "user": User message
    - "assistant": Model response
    - "tool": Tool execution results
    """
    role: Literal["user", "assistant", "tool"]
    content: MessageContent


# =============================================================================
# Tool Definitions
# =============================================================================

class InputSchema(TypedDict, total=False):
    """
    JSON Schema for tool input.
    """
    type: Literal["object"]
    properties: Dict[str, Any]
    required: List[str]


class ToolDefinition(TypedDict):
    """
    Provider-agnostic tool definition. Each adapter reshapes it for its wire format.
    """
    name: str
    description: str
    input_schema: InputSchema


# =============================================================================
# Value Objects
# =============================================================================

@dataclass(frozen=True)
class Attachment:
    """
    An already-decoded file attached to the user's message.

    `data` holds the decoded text for text attachments and base64 for images/PDFs.
    """
    name: str
    mime_type: str
    kind: AttachmentKind
    data: str
    size: int = 0


@dataclass
class TokenUsage:
    """
    Token usage accumulated over one engine call.
    """
    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: Optional[int] = None
    cache_read_input_tokens: Optional[int] = None

    def accumulate(self, delta: "TokenUsage") -> None:
        """
        Fold one turn's usage into the running total.

        Every provider reports input tokens as the size of the full context sent,
        so input is overwritten with the latest turn. Output tokens are only the
        newly generated ones and are summed. Cache fields follow input.
        """
        self.input_tokens = delta.input_tokens
        self.output_tokens += delta.output_tokens
        if delta.cache_creation_input_tokens is not None:
            self.cache_creation_input_tokens = delta.cache_creation_input_tokens
        if delta.cache_read_input_tokens is not None:
            self.cache_read_input_tokens = delta.cache_read_input_tokens


@dataclass(frozen=True)
class AuthConfig:
    """
    Credentials for every backend. Replaced wholesale, never mutated.
    """
    claude_access_token: Optional[str] = None
    claude_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None


@dataclass
class ChatResponse:
    """
    Final result of send_message / summarize.
    """
    text: str = ""
    usage: TokenUsage = field(default_factory=TokenUsage)


# =============================================================================
# Normalized adapter output
# =============================================================================

@dataclass
class ToolInvocation:
    """
    A tool call extracted from a model turn, with parsed arguments.
    """
    id: str
    name: str
    input: Dict[str, Any]


# Kind of an ordered ParsedTurn segment
SegmentKind = Literal["text", "thinking"]


@dataclass
class ParsedTurn:
    """
    What the engine needs from one model response, independent of wire format.

    `segments` keeps text and thinking in the order the model produced them,
    so observers see interleaved thinking where it happened.
    `assistant_message` is the provider-native turn to append to the working
    message list; `done` is True when the loop should stop after this turn.
    """
    segments: List[Tuple[SegmentKind, str]] = field(default_factory=list)
    tool_calls: List[ToolInvocation] = field(default_factory=list)
    assistant_message: Dict[str, Any] = field(default_factory=dict)
    done: bool = True

    def add_text(self, text: str) -> None:
        self.segments.append(("text", text))

    def add_thinking(self, text: str) -> None:
        self.segments.append(("thinking", text))

    @property
    def text_parts(self) -> List[str]:
        return [value for kind, value in self.segments if kind == "text"]

    @property
    def thinking_parts(self) -> List[str]:
        return [value for kind, value in self.segments if kind == "thinking"]

    @property
    def text(self) -> str:
        return "".join(self.text_parts)
