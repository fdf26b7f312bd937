from typing import Any, Dict, List, Optional, Sequence, Tuple

from .base import BaseAdapter, SUMMARY_MAX_TOKENS
from ..attachments import format_claude_user_content
from ..http import HttpRequest, json_request
from ..types import (
    Attachment, AuthConfig, ChatMode, Message, ParsedTurn, TokenUsage,
    ToolDefinition, ToolInvocation,
)

CLAUDE_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"

OAUTH_BETA = "oauth-2025-04-20"
INTERLEAVED_THINKING_BETA = "interleaved-thinking-2025-05-14"

QUICK_MAX_TOKENS = 4096
DIVE_MAX_TOKENS = 16000
THINKING_BUDGET_TOKENS = 10000

EPHEMERAL_CACHE = {"type": "ephemeral"}


class AnthropicAdapter(BaseAdapter):
    """
    Adapter for the Anthropic Messages API (Claude).

    Marks the system prompt and the last tool definition as prompt-cache
    breakpoints, requests extended thinking in dive mode, and keeps every
    response block (thinking included) in the working list because the API
    needs them to continue after tool use.
    """

    provider_name = "claude"

    @staticmethod
    def build_headers(auth: AuthConfig, mode: Optional[ChatMode] = None) -> Dict[str, str]:
        """
        Build auth headers for a Claude request.

        An OAuth access token wins over an API key and needs the oauth beta;
        dive mode adds the interleaved-thinking beta.
        """
        headers = {
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        betas = []
        if auth.claude_access_token:
            headers["Authorization"] = f"Bearer {auth.claude_access_token}"
            betas.append(OAUTH_BETA)
        else:
            headers["x-api-key"] = auth.claude_api_key or ""
        if mode == "dive":
            betas.append(INTERLEAVED_THINKING_BETA)
        if betas:
            headers["anthropic-beta"] = ",".join(betas)
        return headers

    def build_messages(
        self,
        history: Sequence[Message],
        user_message: str,
        attachments: Sequence[Attachment],
    ) -> List[Dict[str, Any]]:
        messages = []
        for msg in history:
            converted = self._convert_message(msg)
            if converted is not None:
                messages.append(converted)
        messages.append({
            "role": "user",
            "content": format_claude_user_content(user_message, attachments),
        })
        return messages

    def _convert_message(self, msg: Message) -> Optional[Dict[str, Any]]:
        """
        Convert one history turn. Tool turns are sent as user turns, which is
        where Claude expects tool_result blocks.
        """
        role = "assistant" if msg.get("role") == "assistant" else "user"
        content = msg.get("content", "")
        if isinstance(content, str):
            return {"role": role, "content": content}

        blocks = []
        for block in content:
            kind = block.get("type")
            if kind == "text":
                blocks.append({"type": "text", "text": block.get("text", "")})
            elif kind == "tool_use":
                blocks.append({
                    "type": "tool_use",
                    "id": block.get("id", ""),
                    "name": block.get("name", ""),
                    "input": block.get("input") or {},
                })
            elif kind == "tool_result":
                blocks.append({
                    "type": "tool_result",
                    "tool_use_id": block.get("tool_use_id", ""),
                    "content": block.get("content", ""),
                })
            elif kind in ("image", "document"):
                blocks.append({
                    "type": kind,
                    "source": {
                        "type": "base64",
                        "media_type": block.get("mime_type", ""),
                        "data": block.get("data", ""),
                    },
                })
            # thinking blocks from stored history carry no signature; drop them
        if not blocks:
            return None
        return {"role": role, "content": blocks}

    def convert_tools(self, tools: Sequence[ToolDefinition]) -> List[Dict[str, Any]]:
        """
        Claude takes `input_schema` as-is. The last definition closes the
        cacheable prefix.
        """
        claude_tools = []
        for idx, tool in enumerate(tools):
            definition = {
                "name": tool["name"],
                "description": tool.get("description", ""),
                "input_schema": tool.get("input_schema", {"type": "object", "properties": {}}),
            }
            if idx == len(tools) - 1:
                definition["cache_control"] = dict(EPHEMERAL_CACHE)
            claude_tools.append(definition)
        return claude_tools

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
        is_dive = mode == "dive"
        body: Dict[str, Any] = {
            "model": model,
            "max_tokens": DIVE_MAX_TOKENS if is_dive else QUICK_MAX_TOKENS,
            "system": [{"type": "text", "text": system_prompt, "cache_control": dict(EPHEMERAL_CACHE)}],
            "messages": messages,
        }
        if tools:
            body["tools"] = tools

        # Extended thinking for dive mode
        if is_dive:
            if "opus" in model:
                body["thinking"] = {"type": "adaptive"}
            else:
                body["thinking"] = {"type": "enabled", "budget_tokens": THINKING_BUDGET_TOKENS}

        return json_request(CLAUDE_API_URL, self.build_headers(auth, mode), body)

    def parse_usage(self, data: Dict[str, Any]) -> Optional[TokenUsage]:
        usage = data.get("usage")
        if not usage:
            return None
        return self.normalize_usage(
            input_tokens=usage.get("input_tokens"),
            output_tokens=usage.get("output_tokens"),
            cache_creation_input_tokens=usage.get("cache_creation_input_tokens") or 0,
            cache_read_input_tokens=usage.get("cache_read_input_tokens") or 0,
        )

    def parse_turn(self, data: Dict[str, Any]) -> ParsedTurn:
        content = data.get("content") or []
        turn = ParsedTurn(assistant_message={"role": "assistant", "content": content})

        for block in content:
            kind = block.get("type")
            if kind == "thinking":
                if block.get("thinking"):
                    turn.add_thinking(block["thinking"])
            elif kind == "text":
                if block.get("text"):
                    turn.add_text(block["text"])
            elif kind == "tool_use":
                turn.tool_calls.append(ToolInvocation(
                    id=block.get("id", ""),
                    name=block.get("name", ""),
                    input=block.get("input") or {},
                ))

        turn.done = data.get("stop_reason") == "end_turn" or not turn.tool_calls
        return turn

    def append_tool_results(
        self,
        messages: List[Dict[str, Any]],
        results: List[Tuple[ToolInvocation, str]],
    ) -> None:
        messages.append({
            "role": "user",
            "content": [
                {"type": "tool_result", "tool_use_id": call.id, "content": result}
                for call, result in results
            ],
        })

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
            "max_tokens": SUMMARY_MAX_TOKENS,
            "system": system_prompt,
            "messages": [{"role": "user", "content": text}],
        }
        return json_request(CLAUDE_API_URL, self.build_headers(auth), body)
