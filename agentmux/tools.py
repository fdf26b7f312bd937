import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from .observer import ChatObserver
from .types import ToolDefinition, ToolInvocation

logger = logging.getLogger(__name__)

# (tool_name, input) -> result text. Sync and async callables are both accepted.
ToolExecutor = Callable[[str, Dict[str, Any]], Union[str, Awaitable[str]]]


# =============================================================================
# Tool Execution Coordinator
# =============================================================================

class ToolCoordinator:
    """
    Runs tool invocations through the caller's executor, one at a time.

    Results are opaque text handed back to the model unchanged. Executor
    exceptions are not caught here; the executor is expected to turn its own
    failures into result strings.
    """

    def __init__(self, tool_executor: ToolExecutor, observer: ChatObserver):
        self.tool_executor = tool_executor
        self.observer = observer

    async def run(self, invocation: ToolInvocation) -> str:
        """
        Execute one invocation and report it to the observer.

        Args:
            invocation (ToolInvocation): The parsed tool call.

        Returns:
            str: The executor's result.
        """
        self.observer.on_tool_use(invocation.name, invocation.input)
        logger.debug("Running tool %s (id=%s)", invocation.name, invocation.id)

        result = self.tool_executor(invocation.name, invocation.input)
        if inspect.isawaitable(result):
            result = await result
        if not isinstance(result, str):
            result = str(result)

        self.observer.on_tool_result(invocation.name, result)
        return result


# =============================================================================
# Tool Definition Helpers
# =============================================================================

def create_tool(
    name: str,
    description: str,
    properties: Dict[str, Any],
    required: Optional[List[str]] = None,
) -> ToolDefinition:
    """
    Create a provider-agnostic ToolDefinition.

    Args:
        name (str): The name of the tool.
        description (str): What the tool does, written for the model.
        properties (Dict): JSON Schema properties of the tool input.
        required (List[str], optional): Names of required properties.

    Returns:
        ToolDefinition: A definition every adapter can reshape.
    """
    return {
        "name": name,
        "description": description,
        "input_schema": {
            "type": "object",
            "properties": properties,
            "required": required or [],
        },
    }
