"""
Demo: Tool-augmented chat with agentmux

Runs one user message through the agentic loop with a toy in-memory vault,
rendering text, thinking and tool calls live in the terminal.

Usage:
    python demo.py [provider] [model]
"""

import asyncio
import json
import logging
import sys

from rich.logging import RichHandler

from agentmux import CancellationToken, ConversationEngine, RichChatPrinter, load_auth_config
from agentmux.prompts import build_system_prompt
from agentmux.tool_definitions import VAULT_TOOLS


# =============================================================================
# A toy vault (mock implementations)
# =============================================================================

NOTES = {
    "ideas/ai-tutor.md": "# AI tutor\nA tutor that adapts exercises to the learner's mistakes.",
    "journal/2026-10-18.md": "Walked by the river. Thought about the [[ideas/ai-tutor]] pricing.",
}


def execute_tool(name: str, arguments: dict) -> str:
    """Execute a vault tool and return the result as a string."""
    try:
        if name == "search_vault":
            query = arguments["query"].lower()
            hits = [path for path, text in NOTES.items() if query in text.lower()]
            return json.dumps(hits)
        if name == "read_note":
            return NOTES.get(arguments["path"], "Note not found")
        if name == "list_folder":
            prefix = arguments.get("path", "")
            return json.dumps([path for path in NOTES if path.startswith(prefix)])
        return f"Tool '{name}' is read-only in this demo"
    except KeyError as e:
        return f"Error executing {name}: missing argument {e}"


DEFAULT_MODELS = {
    "claude": "claude-sonnet-4-5",
    "openai": "gpt-4o",
    "groq": "llama-3.3-70b-versatile",
    "gemini": "gemini-2.5-flash",
}


async def main():
    provider = sys.argv[1] if len(sys.argv) > 1 else "claude"
    model = sys.argv[2] if len(sys.argv) > 2 else DEFAULT_MODELS[provider]

    printer = RichChatPrinter(title="Companion")
    async with ConversationEngine(load_auth_config()) as engine:
        response = await engine.send_message(
            user_message="What did I write about the AI tutor idea?",
            provider=provider,
            model=model,
            mode="quick",
            system_prompt=build_system_prompt(profile="", index="ideas/, journal/", mode="quick"),
            conversation_history=[],
            tool_executor=execute_tool,
            tools=VAULT_TOOLS,
            cancel_token=CancellationToken(),
            observer=printer.observer(),
        )
    printer.print_response(response, provider=provider)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s", handlers=[RichHandler()])
    asyncio.run(main())
