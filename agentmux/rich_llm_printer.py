"""
Rich terminal rendering for ConversationEngine calls.
"""
import json
from dataclasses import asdict
from typing import Any, Dict, Optional

from rich.console import Console, Group
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

from .observer import ChatObserver
from .types import ChatResponse


class RichChatPrinter:
    """
    Displays a conversation as it happens, and its final response, using rich.

    Use `observer()` to get a ChatObserver for send_message, then
    `print_response()` on the returned ChatResponse.

    Attributes:
        title: Title for the final response panel
        show_thinking: Whether to render thinking blocks
        show_usage: Whether to show token usage under the final response
        max_result_chars: Tool results longer than this are truncated on screen
        code_theme: Theme for code blocks
        border_style: Border style for the final panel
    """

    def __init__(
        self,
        title: str = "Response",
        show_thinking: bool = True,
        show_usage: bool = True,
        max_result_chars: int = 500,
        code_theme: str = "coffee",
        border_style: str = "green",
        console: Optional[Console] = None,
    ):
        self.title = title
        self.show_thinking = show_thinking
        self.show_usage = show_usage
        self.max_result_chars = max_result_chars
        self.code_theme = code_theme
        self.border_style = border_style
        self.console = console or Console()
        self._streamed = ""

    def observer(self) -> ChatObserver:
        """
        Build a ChatObserver that renders events on this printer's console.
        """
        return ChatObserver(
            on_text=self.on_text,
            on_thinking=self.on_thinking if self.show_thinking else None,
            on_tool_use=self.on_tool_use,
            on_tool_result=self.on_tool_result,
        )

    def on_text(self, chunk: str) -> None:
        self._streamed += chunk
        self.console.print(chunk, end="", markup=False, highlight=False)

    def on_thinking(self, text: str) -> None:
        self._end_line()
        self.console.print(
            Panel(Text(text, style="dim italic"), title="[dim]Thinking[/dim]", border_style="dim")
        )

    def on_tool_use(self, name: str, tool_input: Dict[str, Any]) -> None:
        self._end_line()
        args = json.dumps(tool_input, ensure_ascii=False, default=str)
        self.console.print(f"[bold cyan]> {name}[/bold cyan] [dim]{args}[/dim]", highlight=False)

    def on_tool_result(self, name: str, result: str) -> None:
        shown = result
        if len(shown) > self.max_result_chars:
            shown = shown[:self.max_result_chars] + "..."
        self.console.print(Text(f"< {name}: ", style="bold green") + Text(shown, style="dim"))

    def _end_line(self) -> None:
        """Close a partially streamed line before printing a block."""
        if self._streamed and not self._streamed.endswith("\n"):
            self.console.print()
        self._streamed = ""

    def print_response(self, response: ChatResponse, provider: str = "") -> ChatResponse:
        """
        Display the final response as Markdown, with token usage if enabled.

        Args:
            response: The ChatResponse returned by send_message / summarize.
            provider: Provider name to show in the title.

        Returns:
            The same response for chaining.
        """
        self._end_line()
        title = f"[bold]{self.title}[/bold]"
        if provider:
            title += f" [dim]({provider})[/dim]"

        self.console.print(
            Panel(
                self._build_content(response),
                title=title,
                border_style=self.border_style,
                padding=(1, 2),
            )
        )
        return response

    def _build_content(self, response: ChatResponse) -> Any:
        if not response.text.strip():
            content: Any = Text("(empty response)", style="dim italic")
        else:
            content = Markdown(response.text, code_theme=self.code_theme)

        if not self.show_usage:
            return content

        usage = {k: v for k, v in asdict(response.usage).items() if v is not None}
        usage_panel = Panel(
            Syntax(json.dumps(usage, indent=2), "json", theme="lightbulb", background_color="default"),
            title="[bold]Usage[/bold]",
            border_style="dim",
        )
        return Group(content, usage_panel)
