from .client import ConversationEngine
from .cancellation import CancellationToken
from .config import load_auth_config
from .errors import (
    AgentMuxError, TransportError, AuthExpiredError, MalformedResponseError, ToolArgumentParseError,
)
from .http import HttpRequest, HttpResponse, HttpxTransport
from .observer import ChatObserver
from .rich_llm_printer import RichChatPrinter
from .tools import create_tool
from .types import (
    Attachment, AuthConfig, ChatMode, ChatResponse, ContentBlock, Message, Provider,
    TokenUsage, ToolDefinition,
)

__all__ = [
    "ConversationEngine",
    "CancellationToken",
    "load_auth_config",
    "AgentMuxError",
    "TransportError",
    "AuthExpiredError",
    "MalformedResponseError",
    "ToolArgumentParseError",
    "HttpRequest",
    "HttpResponse",
    "HttpxTransport",
    "ChatObserver",
    "RichChatPrinter",
    "create_tool",
    "Attachment",
    "AuthConfig",
    "ChatMode",
    "ChatResponse",
    "ContentBlock",
    "Message",
    "Provider",
    "TokenUsage",
    "ToolDefinition",
]
