from typing import Any, Dict, List, Optional, Sequence, Tuple

from .base import BaseAdapter
from ..attachments import format_gemini_user_parts
from ..errors import MalformedResponseError
from ..http import HttpRequest, json_request
from ..types import (
    Attachment, AuthConfig, ChatMode, Message, ParsedTurn, TokenUsage,
    ToolDefinition, ToolInvocation,
)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiAdapter(BaseAdapter):
    """
    Adapter for the Google Gemini generateContent API.

    Gemini has no system role in history and no "assistant" role: the system
    prompt goes in `systemInstruction` on every request and assistant turns
    are relabeled "model". The API key travels as a query parameter.
    """

    provider_name = "gemini"

    def __init__(self, api_base: str = GEMINI_API_BASE):
        self.api_base = api_base

    def endpoint(self, model: str, auth: AuthConfig) -> str:
        return f"{self.api_base}/{model}:generateContent?key={auth.gemini_api_key or ''}"

    def build_messages(
        self,
        history: Sequence[Message],
        user_message: str,
        attachments: Sequence[Attachment],
    ) -> List[Dict[str, Any]]:
        contents: List[Dict[str, Any]] = []
        tool_names: Dict[str, str] = {}
        for msg in history:
            parts = self._convert_parts(msg, tool_names)
            if parts:
                role = "model" if msg.get("role") == "assistant" else "user"
                self._append(contents, role, parts)
        self._append(contents, "user", format_gemini_user_parts(user_message, attachments))
        return contents

    @staticmethod
    def _append(contents: List[Dict[str, Any]], role: str, parts: List[Dict[str, Any]]) -> None:
        """
        Add parts as a turn, merging into the previous turn when the role repeats
        so user/model alternation holds.
        """
        if contents and contents[-1]["role"] == role:
            contents[-1]["parts"].extend(parts)
        else:
            contents.append({"role": role, "parts": list(parts)})

    def _convert_parts(self, msg: Message, tool_names: Dict[str, str]) -> List[Dict[str, Any]]:
        """
        Convert one history turn into Gemini parts.

        `tool_names` maps tool_use ids seen so far to tool names, so a
        tool_result without its own `name` still gets a functionResponse name.
        """
        parts = []
        for block in self.content_blocks(msg.get("content", "")):
            kind = block.get("type")
            if kind == "text":
                parts.append({"text": block.get("text", "")})
            elif kind == "tool_use":
                tool_names[block.get("id", "")] = block.get("name", "")
                parts.append({
                    "functionCall": {"name": block.get("name", ""), "args": block.get("input") or {}},
                })
            elif kind == "tool_result":
                parts.append({
                    "functionResponse": {
                        "name": block.get("name") or tool_names.get(block.get("tool_use_id", ""), ""),
                        "response": {"result": block.get("content", "")},
                    },
                })
            elif kind in ("image", "document"):
                parts.append({
                    "inlineData": {"mimeType": block.get("mime_type", ""), "data": block.get("data", "")},
                })
        return parts

    def convert_tools(self, tools: Sequence[ToolDefinition]) -> List[Dict[str, Any]]:
        """
        Wrap every definition into a single functionDeclarations entry.
        """
        if not tools:
            return []
        function_declarations = [
            {
                "name": tool["name"],
                "description": tool.get("description", ""),
                "parameters": tool.get("input_schema", {"type": "object", "properties": {}}),
            }
            for tool in tools
        ]
        return [{"functionDeclarations": function_declarations}]

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
            "contents": messages,
            "systemInstruction": {"parts": [{"text": system_prompt}]},
        }
        if tools:
            body["tools"] = tools
        return json_request(self.endpoint(model, auth), {"Content-Type": "application/json"}, body)

    def parse_usage(self, data: Dict[str, Any]) -> Optional[TokenUsage]:
        um = data.get("usageMetadata")
        if not um:
            return None
        return self.normalize_usage(
            input_tokens=um.get("promptTokenCount"),
            output_tokens=um.get("candidatesTokenCount"),
        )

    def parse_turn(self, data: Dict[str, Any]) -> ParsedTurn:
        candidates = data.get("candidates") or []
        if not candidates:
            raise MalformedResponseError("No response from Gemini")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        turn = ParsedTurn(assistant_message={"role": "model", "parts": parts})

        for part in parts:
            if part.get("text"):
                if part.get("thought"):
                    turn.add_thinking(part["text"])
                else:
                    turn.add_text(part["text"])
            elif part.get("functionCall"):
                fc = part["functionCall"]
                turn.tool_calls.append(ToolInvocation(
                    # Gemini doesn't provide call IDs
                    id=f"gemini_{fc.get('name', '')}_{len(turn.tool_calls)}",
                    name=fc.get("name", ""),
                    input=fc.get("args") or {},
                ))

        turn.done = not turn.tool_calls
        return turn

    def append_tool_results(
        self,
        messages: List[Dict[str, Any]],
        results: List[Tuple[ToolInvocation, str]],
    ) -> None:
        messages.append({
            "role": "user",
            "parts": [
                {"functionResponse": {"name": call.name, "response": {"result": result}}}
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
            "contents": [{"role": "user", "parts": [{"text": text}]}],
            "systemInstruction": {"parts": [{"text": system_prompt}]},
        }
        return json_request(self.endpoint(model, auth), {"Content-Type": "application/json"}, body)
