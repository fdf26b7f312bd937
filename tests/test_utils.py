import asyncio
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from agentmux import Attachment, ChatObserver, ChatResponse, RichChatPrinter, TokenUsage, create_tool
from agentmux.attachments import (
    format_claude_user_content, format_file_text, format_gemini_user_parts,
    format_openai_user_content,
)
from agentmux.cancellation import CancellationToken
from agentmux.config import load_auth_config
from agentmux.http import redact_url
from agentmux.prompts import NO_INDEX, NO_PROFILE, build_system_prompt
from agentmux.streaming import simulate_stream, split_words
from agentmux.tool_definitions import ALL_TOOLS, VAULT_TOOLS
from agentmux.tools import ToolCoordinator
from agentmux.types import ToolInvocation


class TestAttachments:

    def test_format_file_text(self):
        att = Attachment(name="notes.md", mime_type="text/markdown", kind="text", data="hello")
        assert format_file_text(att) == "[File: notes.md]\nhello"

    def test_no_attachments_keeps_bare_text(self):
        assert format_claude_user_content("hi", []) == "hi"
        assert format_openai_user_content("hi", []) == "hi"
        assert format_gemini_user_parts("hi", []) == [{"text": "hi"}]

    def test_claude_pdf_is_native_document(self):
        pdf = Attachment(name="paper.pdf", mime_type="application/pdf", kind="pdf", data="JVBER")

        blocks = format_claude_user_content("read it", [pdf])

        assert blocks[0] == {
            "type": "document",
            "source": {"type": "base64", "media_type": "application/pdf", "data": "JVBER"},
        }
        assert blocks[1] == {"type": "text", "text": "read it"}


class TestStreaming:

    def test_split_words_keeps_whitespace(self):
        text = "Hello  world,\nhow are\tyou?"
        pieces = split_words(text)

        assert "".join(pieces) == text
        assert pieces[:3] == ["Hello", "  ", "world,"]

    @pytest.mark.asyncio
    async def test_simulate_stream_batches(self):
        chunks = []

        await simulate_stream("one two three four", chunks.append, delay=0)

        # 7 pieces: 3 + 3 + 1
        assert chunks == ["one two", " three ", "four"]
        assert "".join(chunks) == "one two three four"

    @pytest.mark.asyncio
    async def test_empty_text_emits_nothing(self):
        on_text = MagicMock()

        await simulate_stream("", on_text, delay=0)

        on_text.assert_not_called()


class TestToolCoordinator:

    @pytest.mark.asyncio
    async def test_sync_executor(self):
        observer = ChatObserver(on_tool_use=MagicMock(), on_tool_result=MagicMock())
        coordinator = ToolCoordinator(lambda name, args: f"{name}:{args['q']}", observer)

        result = await coordinator.run(ToolInvocation(id="1", name="search", input={"q": "x"}))

        assert result == "search:x"
        observer.on_tool_use.assert_called_once_with("search", {"q": "x"})
        observer.on_tool_result.assert_called_once_with("search", "search:x")

    @pytest.mark.asyncio
    async def test_async_executor_and_non_string_result(self):
        async def executor(name, args):
            await asyncio.sleep(0)
            return 42

        coordinator = ToolCoordinator(executor, ChatObserver())

        assert await coordinator.run(ToolInvocation(id="1", name="count", input={})) == "42"


class TestToolDefinitions:

    def test_create_tool(self):
        tool = create_tool(
            name="get_weather",
            description="Get weather",
            properties={"location": {"type": "string"}},
            required=["location"],
        )

        assert tool["name"] == "get_weather"
        assert tool["input_schema"]["type"] == "object"
        assert tool["input_schema"]["required"] == ["location"]

    def test_create_tool_without_required(self):
        tool = create_tool("get_tags", "List tags", {})
        assert tool["input_schema"]["required"] == []

    def test_catalog_names_are_unique(self):
        names = [tool["name"] for tool in ALL_TOOLS]

        assert len(names) == len(set(names))
        assert {"search_vault", "read_note", "write_note"} <= {t["name"] for t in VAULT_TOOLS}


class TestConfig:

    def test_load_auth_config_from_env(self, mock_env, tmp_path):
        auth = load_auth_config(env_file=str(tmp_path / "missing.env"))

        assert auth.claude_api_key == "sk-test-anthropic"
        assert auth.claude_access_token is None
        assert auth.openai_api_key == "sk-test-openai"
        assert auth.gemini_api_key == "AIza-test-google"
        assert auth.groq_api_key == "gsk-test-groq"

    def test_gemini_key_fallback(self, mock_env, monkeypatch, tmp_path):
        monkeypatch.delenv("GOOGLE_API_KEY")
        monkeypatch.setenv("GEMINI_API_KEY", "AIza-fallback")

        auth = load_auth_config(env_file=str(tmp_path / "missing.env"))

        assert auth.gemini_api_key == "AIza-fallback"

    def test_env_file_fills_missing_values(self, mock_env, monkeypatch, tmp_path):
        monkeypatch.delenv("GROQ_API_KEY")
        env_file = tmp_path / ".env"
        env_file.write_text("GROQ_API_KEY=gsk-from-file\nOPENAI_API_KEY=ignored\n")

        auth = load_auth_config(env_file=str(env_file))

        assert auth.groq_api_key == "gsk-from-file"
        assert auth.openai_api_key == "sk-test-openai"
        monkeypatch.delenv("GROQ_API_KEY")


class TestPrompts:

    def test_build_system_prompt(self):
        now = datetime(2026, 3, 5, 14, 30)

        prompt = build_system_prompt(profile="I like hiking", index="ideas/", mode="dive", now=now)

        assert "Today is Thursday, March 5, 2026, 02:30 PM." in prompt
        assert "I like hiking" in prompt
        assert "Deep Dive Mode" in prompt
        assert "Quick Capture Mode" not in prompt

    def test_placeholders_when_empty(self):
        prompt = build_system_prompt(profile="", index="", mode="quick", now=datetime(2026, 1, 1))

        assert NO_PROFILE in prompt
        assert NO_INDEX in prompt
        assert "Quick Capture Mode" in prompt


class TestMisc:

    def test_token_usage_accumulate(self):
        total = TokenUsage()
        total.accumulate(TokenUsage(input_tokens=100, output_tokens=20, cache_read_input_tokens=80))
        total.accumulate(TokenUsage(input_tokens=140, output_tokens=15))

        assert total.input_tokens == 140
        assert total.output_tokens == 35
        assert total.cache_read_input_tokens == 80
        assert total.cache_creation_input_tokens is None

    def test_cancellation_token(self):
        token = CancellationToken()
        assert token.cancelled is False
        token.cancel()
        token.cancel()
        assert token.cancelled is True

    def test_redact_url(self):
        assert redact_url("https://host/models/m:generateContent?key=secret") == (
            "https://host/models/m:generateContent"
        )

    def test_observer_thinking_is_optional(self):
        ChatObserver().thinking("ignored")

        on_thinking = MagicMock()
        observer = ChatObserver(on_thinking=on_thinking)
        observer.thinking("")
        observer.thinking("idea")
        on_thinking.assert_called_once_with("idea")

    def test_printer_renders_stream_and_response(self):
        from rich.console import Console

        console = Console(record=True, width=80)
        printer = RichChatPrinter(title="Companion", console=console)
        observer = printer.observer()

        observer.on_text("Hello ")
        observer.on_tool_use("read_note", {"path": "a.md"})
        observer.on_tool_result("read_note", "x" * 600)
        printer.print_response(ChatResponse(text="**Done**", usage=TokenUsage(10, 5)), provider="claude")

        output = console.export_text()
        assert "> read_note" in output
        assert "..." in output
        assert "Companion" in output
        assert "input_tokens" in output
