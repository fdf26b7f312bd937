import json

import pytest
from unittest.mock import MagicMock

from agentmux import AuthConfig, ChatObserver, ConversationEngine, HttpResponse


class ScriptedHttp:
    """
    Fake HttpClient returning queued responses in order and recording requests.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def queue(self, status=200, body=None):
        text = json.dumps(body) if body is not None else ""
        self.responses.append(HttpResponse(status=status, text=text, json=body))
        return self

    async def __call__(self, request):
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request to {request.url}")
        return self.responses.pop(0)

    def body(self, index=-1):
        return json.loads(self.requests[index].body)


@pytest.fixture
def mock_env(monkeypatch):
    """Mock environment variables for API keys."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test-anthropic")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-openai")
    monkeypatch.setenv("GOOGLE_API_KEY", "AIza-test-google")
    monkeypatch.setenv("GROQ_API_KEY", "gsk-test-groq")
    monkeypatch.delenv("ANTHROPIC_AUTH_TOKEN", raising=False)


@pytest.fixture
def auth():
    return AuthConfig(
        claude_api_key="sk-test-anthropic",
        openai_api_key="sk-test-openai",
        gemini_api_key="AIza-test-google",
        groq_api_key="gsk-test-groq",
    )


@pytest.fixture
def http():
    return ScriptedHttp()


@pytest.fixture
def engine(auth, http):
    return ConversationEngine(auth, http, stream_delay=0)


@pytest.fixture
def observer():
    """ChatObserver whose callbacks are MagicMocks."""
    return ChatObserver(
        on_text=MagicMock(),
        on_thinking=MagicMock(),
        on_tool_use=MagicMock(),
        on_tool_result=MagicMock(),
    )


# =============================================================================
# Canned provider responses
# =============================================================================

def claude_text(text, input_tokens=10, output_tokens=5, **usage):
    return {
        "content": [{"type": "text", "text": text}],
        "stop_reason": "end_turn",
        "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens, **usage},
    }


def claude_tool(name, tool_input, tool_id="toolu_1", input_tokens=10, output_tokens=5, text=None):
    content = [{"type": "text", "text": text}] if text else []
    content.append({"type": "tool_use", "id": tool_id, "name": name, "input": tool_input})
    return {
        "content": content,
        "stop_reason": "tool_use",
        "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens},
    }


def openai_text(text, prompt_tokens=10, completion_tokens=5):
    return {
        "choices": [{"message": {"role": "assistant", "content": text}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": prompt_tokens, "completion_tokens": completion_tokens},
    }


def openai_tool(name, arguments, call_id="call_1", prompt_tokens=10, completion_tokens=5, text=None):
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)
    return {
        "choices": [{
            "message": {
                "role": "assistant",
                "content": text,
                "tool_calls": [{
                    "id": call_id,
                    "type": "function",
                    "function": {"name": name, "arguments": arguments},
                }],
            },
            "finish_reason": "tool_calls",
        }],
        "usage": {"prompt_tokens": prompt_tokens, "completion_tokens": completion_tokens},
    }


def gemini_text(text, prompt=10, candidates=5):
    return {
        "candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}],
        "usageMetadata": {"promptTokenCount": prompt, "candidatesTokenCount": candidates},
    }


def gemini_tool(name, args, prompt=10, candidates=5, text=None):
    parts = [{"text": text}] if text else []
    parts.append({"functionCall": {"name": name, "args": args}})
    return {
        "candidates": [{"content": {"role": "model", "parts": parts}}],
        "usageMetadata": {"promptTokenCount": prompt, "candidatesTokenCount": candidates},
    }
