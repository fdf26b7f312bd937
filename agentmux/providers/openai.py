import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .base import BaseAdapter, SUMMARY_MAX_TOKENS
from ..attachments import format_openai_user_content
from ..errors import MalformedResponseError, ToolArgumentParseError
from ..http import HttpRequest, json_request
from ..types import (
    Attachment, AuthConfig, ChatMode, Message, ParsedTurn, TokenUsage,
    ToolDefinition, ToolInvocation,
)

OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"
OPENAI_MAX_TOKENS = 4096


class OpenAIAdapter(BaseAdapter):
    """
    Adapter for OpenAI-compatible chat completion APIs.

    Subclasses only change the endpoint, which AuthConfig field holds the key
    and the name of the max-token field (see GroqAdapter).
    """

    def __init__(
        self,
        api_url: str = OPENAI_API_URL,
        provider_name: str = "openai",
        key_field: str = "openai_api_key",
        max_tokens_field: str = "max_completion_tokens",
    ):
        """
        Args:
            api_url (str): Chat completions endpoint.
            provider_name (str): Name used in errors and logs.
            key_field (str): AuthConfig attribute holding the bearer key.
            max_tokens_field (str): Body field carrying the output token limit.
                Newer OpenAI models only accept `max_completion_tokens`.
        """
        self.api_url = api_url
        self.provider_name = provider_name
        self.key_field = key_field
        self.max_tokens_field = max_tokens_field

    def build_headers(self, auth: AuthConfig) -> Dict[str, str]:
        api_key = getattr(auth, self.key_field, None) or ""
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def build_messages(
        self,
        history: Sequence[Message],
        user_message: str,
        attachments: Sequence[Attachment],
    ) -> List[Dict[str, Any]]:
        messages = []
        for msg in history:
            messages.extend(self._convert_message(msg))
        messages.append({
            "role": "user",
            "content": format_openai_user_content(user_message, attachments),
        })
        return messages

    def _convert_message(self, msg: Message) -> List[Dict[str, Any]]:
        """
        Convert one history turn into zero or more OpenAI messages.

        Handles:
        - Tool results (each becomes its own "tool" message)
        - Assistant turns with tool calls (preserving tool_calls for context)
        - Multimodal user content (text + images; other media as a note)
        """
        role = msg.get("role", "user")
        content = msg.get("content", "")
        if isinstance(content, str):
            return [{"role": "assistant" if role == "assistant" else "user", "content": content}]

        converted = []
        parts = []
        tool_calls = []
        for block in content:
            kind = block.get("type")
            if kind == "text":
                parts.append({"type": "text", "text": block.get("text", "")})
            elif kind == "tool_use":
                tool_calls.append({
                    "id": block.get("id", ""),
                    "type": "function",
                    "function": {
                        "name": block.get("name", ""),
                        "arguments": json.dumps(block.get("input") or {}),
                    },
                })
            elif kind == "tool_result":
                converted.append({
                    "role": "tool",
                    "tool_call_id": block.get("tool_use_id", ""),
                    "content": block.get("content", ""),
                })
            elif kind == "image":
                parts.append({
                    "type": "image_url",
                    "image_url": {"url": f"data:{block.get('mime_type')};base64,{block.get('data', '')}"},
                })
            elif kind == "document":
                parts.append({
                    "type": "text",
                    "text": f"[Attached document ({block.get('mime_type')}) not directly supported by this model]",
                })

        if role == "assistant":
            if parts or tool_calls:
                text = "".join(p["text"] for p in parts if p["type"] == "text")
                assistant_msg: Dict[str, Any] = {"role": "assistant", "content": text or None}
                if tool_calls:
                    assistant_msg["tool_calls"] = tool_calls
                converted.append(assistant_msg)
        elif parts:
            converted.append({"role": "user", "content": parts})
        return converted

    def convert_tools(self, tools: Sequence[ToolDefinition]) -> List[Dict[str, Any]]:
        return [
            {
                "type": "function",
                "function": {
                    "name": tool["name"],
                    "description": tool.get("description", ""),
                    "parameters": tool.get("input_schema", {"type": "object", "properties": {}}),
                },
            }
            for tool in tools
        ]

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
        body: Dict[str, Any] = {
            "model": model,
            "messages": [{"role": "system", "content": system_prompt}, *messages],
            self.max_tokens_field: OPENAI_MAX_TOKENS,
        }
        if tools:
            body["tools"] = tools
        return json_request(self.api_url, self.build_headers(auth), body)

    def parse_usage(self, data: Dict[str, Any]) -> Optional[TokenUsage]:
        usage = data.get("usage")
        if not usage:
            return None
        return self.normalize_usage(
            input_tokens=usage.get("prompt_tokens"),
            output_tokens=usage.get("completion_tokens"),
        )

    def parse_turn(self, data: Dict[str, Any]) -> ParsedTurn:
        choices = data.get("choices") or []
        if not choices:
            raise MalformedResponseError(f"No response from {self.provider_name}")

        choice = choices[0]
        message = choice.get("message") or {}
        content = message.get("content")
        raw_calls = message.get("tool_calls") or []

        assistant_msg: Dict[str, Any] = {"role": "assistant", "content": content}
        if raw_calls:
            assistant_msg["tool_calls"] = raw_calls

        turn = ParsedTurn(assistant_message=assistant_msg)
        if content:
            turn.add_text(content)

        turn.done = choice.get("finish_reason") != "tool_calls" or not raw_calls
        if not turn.done:
            turn.tool_calls = [self._parse_tool_call(tc) for tc in raw_calls]
        return turn

    @staticmethod
    def _parse_tool_call(tool_call: Dict[str, Any]) -> ToolInvocation:
        """
        Parse one tool call. Arguments arrive as a JSON string.

        Raises:
            ToolArgumentParseError: If the arguments are not a JSON object.
        """
        function = tool_call.get("function") or {}
        name = function.get("name", "")
        raw_args = function.get("arguments")

        if isinstance(raw_args, dict):
            args = raw_args
        elif not raw_args:
            args = {}
        else:
            try:
                args = json.loads(raw_args)
            except json.JSONDecodeError as e:
                raise ToolArgumentParseError(name, raw_args, str(e)) from e
            if not isinstance(args, dict):
                raise ToolArgumentParseError(name, raw_args, "expected a JSON object")

        return ToolInvocation(id=tool_call.get("id", ""), name=name, input=args)

    def append_tool_results(
        self,
        messages: List[Dict[str, Any]],
        results: List[Tuple[ToolInvocation, str]],
    ) -> None:
        for call, result in results:
            messages.append({"role": "tool", "tool_call_id": call.id, "content": result})

    def build_summary_request(
        self,
        *,
        text: str,
        system_prompt: str,
        model: str,
        auth: AuthConfig,
    ) -> HttpRequest:
        body = {
            "model": model,
            self.max_tokens_field: SUMMARY_MAX_TOKENS,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": text},
            ],
        }
        return json_request(self.api_url, self.build_headers(auth), body)
