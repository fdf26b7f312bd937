from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


def _ignore(*args: Any) -> None:
    return None


@dataclass
class ChatObserver:
    """
    Notification ports for one send_message call.

    All callbacks are synchronous and called in the order events happen:
    a turn's thinking and text chunks as the model interleaved them, then
    one on_tool_use / on_tool_result pair per tool executed.

    Attributes:
        on_text: Receives streamed answer chunks.
        on_thinking: Receives whole thinking blocks (Claude dive mode, Gemini thoughts). Optional.
        on_tool_use: Called with (tool_name, input) right before a tool runs.
        on_tool_result: Called with (tool_name, result) once it returns.
    """
    on_text: Callable[[str], None] = _ignore
    on_thinking: Optional[Callable[[str], None]] = None
    on_tool_use: Callable[[str, Dict[str, Any]], None] = _ignore
    on_tool_result: Callable[[str, str], None] = _ignore

    def thinking(self, text: str) -> None:
        if self.on_thinking is not None and text:
            self.on_thinking(text)
