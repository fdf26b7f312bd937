from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..http import HttpRequest
from ..types import (
    Attachment, AuthConfig, ChatMode, ContentBlock, Message, ParsedTurn,
    TokenUsage, ToolDefinition, ToolInvocation,
)

# Shared max_tokens for one-shot summaries
SUMMARY_MAX_TOKENS = 2048


class BaseAdapter(ABC):
    """
    Abstract base class for wire-format adapters.

    An adapter owns everything that differs between backends: how the working
    message list is built, how a request is serialized, how a response is
    parsed into a ParsedTurn and how tool results are appended. Working
    messages are provider-native dicts; the engine never looks inside them.
    """

    provider_name: str = ""

    @abstractmethod
    def build_messages(
        self,
        history: Sequence[Message],
        user_message: str,
        attachments: Sequence[Attachment],
    ) -> List[Dict[str, Any]]:
        """
        Convert caller history plus the new user turn into a fresh working list.

        Args:
            history (Sequence[Message]): Prior turns. Never mutated.
            user_message (str): The new user text.
            attachments (Sequence[Attachment]): Files attached to the new turn.

        Returns:
            List[Dict[str, Any]]: Provider-native messages.
        """
        pass

    @abstractmethod
    def convert_tools(self, tools: Sequence[ToolDefinition]) -> List[Dict[str, Any]]:
        """
        Reshape tool definitions for this backend.
        """
        pass

    @abstractmethod
    def build_request(
        self,
        *,
        model: str,
        mode: ChatMode,
        system_prompt: str,
        messages: List[Dict[str, Any]],
        tools: List[Dict[str, Any]],
        auth: AuthConfig,
    ) -> HttpRequest:
        """
        Serialize one loop iteration into an HTTP request.

        Called again after an auth refresh, so credentials must be read from
        `auth` every time.
        """
        pass

    @abstractmethod
    def parse_usage(self, data: Dict[str, Any]) -> Optional[TokenUsage]:
        """
        Extract this turn's usage, or None when the response carries none.
        """
        pass

    @abstractmethod
    def parse_turn(self, data: Dict[str, Any]) -> ParsedTurn:
        """
        Parse a successful response body.

        Raises:
            MalformedResponseError: If the required choice/candidate is missing.
        """
        pass

    @abstractmethod
    def append_tool_results(
        self,
        messages: List[Dict[str, Any]],
        results: List[Tuple[ToolInvocation, str]],
    ) -> None:
        """
        Append executed tool results to the working list in the backend's shape.
        """
        pass

    @abstractmethod
    def build_summary_request(
        self,
        *,
        text: str,
        system_prompt: str,
        model: str,
        auth: AuthConfig,
    ) -> HttpRequest:
        """
        Serialize a one-shot, tool-less request for summarize().
        """
        pass

    @staticmethod
    def content_blocks(content: Any) -> List[ContentBlock]:
        """
        View message content as a block list (bare strings become one text block).
        """
        if isinstance(content, str):
            return [{"type": "text", "text": content}] if content else []
        return list(content or [])

    @staticmethod
    def normalize_usage(
        *,
        input_tokens: Optional[int],
        output_tokens: Optional[int],
        cache_creation_input_tokens: Optional[int] = None,
        cache_read_input_tokens: Optional[int] = None,
    ) -> TokenUsage:
        """
        Normalize token usage information across providers.

        Missing counts become 0. Cache fields stay None when the provider does
        not report caching at all.

        Args:
            input_tokens (int, optional): Prompt tokens (full context size).
            output_tokens (int, optional): Newly generated tokens.
            cache_creation_input_tokens (int, optional): Tokens written to the prompt cache.
            cache_read_input_tokens (int, optional): Tokens served from the prompt cache.

        Returns:
            TokenUsage: Usage for a single turn.
        """
        return TokenUsage(
            input_tokens=input_tokens or 0,
            output_tokens=output_tokens or 0,
            cache_creation_input_tokens=cache_creation_input_tokens,
            cache_read_input_tokens=cache_read_input_tokens,
        )
