"""
Error Definitions

Exceptions raised by the conversation engine and its adapters.
Cancellation is not an error and has no exception here.
"""

from typing import Optional


class AgentMuxError(RuntimeError):
    """
    Base class for all agentmux errors.
    """


class TransportError(AgentMuxError):
    """
    The backend answered with a non-200 status (after any auth retry).

    Attributes:
        status: HTTP status code
        body: Raw response body text
    """

    def __init__(self, status: int, body: str = ""):
        super().__init__(f"{status} {body}".rstrip())
        self.status = status
        self.body = body


class AuthExpiredError(TransportError):
    """
    A 401 that could not be recovered: no retry hook, or the hook returned None.
    """

    def __init__(self, status: int = 401, body: str = ""):
        super().__init__(status, body)


class MalformedResponseError(AgentMuxError):
    """
    A required part of the response (choice / candidate) is missing,
    or the body is not a JSON object.
    """


class ToolArgumentParseError(AgentMuxError, ValueError):
    """
    Tool-call arguments from an OpenAI-compatible backend are not valid JSON.

    Attributes:
        tool_name: Name of the tool the model tried to call
        raw_arguments: The unparseable argument string
    """

    def __init__(self, tool_name: str, raw_arguments: str, reason: Optional[str] = None):
        message = f"Invalid JSON arguments for tool '{tool_name}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.tool_name = tool_name
        self.raw_arguments = raw_arguments
