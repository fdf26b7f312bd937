import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from .cancellation import CancellationToken
from .errors import AuthExpiredError, MalformedResponseError, TransportError
from .http import HttpClient, HttpRequest, HttpxTransport, redact_url
from .observer import ChatObserver
from .providers.anthropic import AnthropicAdapter
from .providers.base import BaseAdapter
from .providers.gemini import GeminiAdapter
from .providers.groq import GroqAdapter
from .providers.openai import OpenAIAdapter
from .streaming import STREAM_BATCH_SIZE, STREAM_DELAY_SECONDS, simulate_stream
from .tools import ToolCoordinator, ToolExecutor
from .types import (
    Attachment, AuthConfig, ChatMode, ChatResponse, Message, Provider,
    TokenUsage, ToolDefinition, ToolInvocation,
)

logger = logging.getLogger(__name__)

# Out-of-band credential refresh. Returns replacement credentials or None.
AuthRetryHook = Callable[[], Awaitable[Optional[AuthConfig]]]


@dataclass
class _CallState:
    """Per-call bookkeeping: the auth refresh may happen once per call."""
    auth_retried: bool = False


class ConversationEngine:
    """
    Provider-normalizing agentic loop.

    Drives a multi-turn, tool-augmented conversation against Claude,
    OpenAI, Groq or Gemini through one interface: the same callbacks,
    the same usage object and the same cancellation behavior whichever
    backend is in play.
    """

    def __init__(
        self,
        auth: AuthConfig,
        http_client: Optional[HttpClient] = None,
        on_auth_retry: Optional[AuthRetryHook] = None,
        *,
        stream_delay: float = STREAM_DELAY_SECONDS,
        stream_batch_size: int = STREAM_BATCH_SIZE,
    ):
        """
        Initialize the engine.

        Args:
            auth: Credentials for every backend.
            http_client: Transport capability. Defaults to an httpx-based transport.
            on_auth_retry: Called on the first 401 of a call to refresh credentials.
            stream_delay: Seconds between simulated stream chunks.
            stream_batch_size: Words (and separators) per simulated stream chunk.
        """
        self._auth = auth
        self._owns_http = http_client is None
        self.http = http_client or HttpxTransport()
        self.on_auth_retry = on_auth_retry
        self.stream_delay = stream_delay
        self.stream_batch_size = stream_batch_size

        self.adapters: Dict[str, BaseAdapter] = {
            "claude": AnthropicAdapter(),
            "openai": OpenAIAdapter(),
            "groq": GroqAdapter(),
            "gemini": GeminiAdapter(),
        }

    @property
    def auth(self) -> AuthConfig:
        return self._auth

    def update_auth(self, auth: AuthConfig) -> None:
        """
        Replace the credentials wholesale. Affects the next request built.
        """
        self._auth = auth

    async def aclose(self) -> None:
        """
        Close the default transport. A caller-supplied transport is left open.
        """
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "ConversationEngine":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def adapter_for(self, provider: Provider) -> BaseAdapter:
        """
        Get the wire-format adapter for a provider.

        Raises:
            ValueError: If the provider is not supported.
        """
        if provider not in self.adapters:
            raise ValueError(f"Provider '{provider}' not supported.")
        return self.adapters[provider]

    # ==========================================================================
    # Agentic loop
    # ==========================================================================

    async def send_message(
        self,
        *,
        user_message: str,
        provider: Provider,
        model: str,
        mode: ChatMode,
        system_prompt: str,
        conversation_history: Sequence[Message],
        tool_executor: ToolExecutor,
        tools: Optional[Sequence[ToolDefinition]] = None,
        attachments: Optional[Sequence[Attachment]] = None,
        cancel_token: Optional[CancellationToken] = None,
        observer: Optional[ChatObserver] = None,
    ) -> ChatResponse:
        """
        Send a user message and run the tool loop until the model is done.

        Each iteration:
        1. Stops early (returning what was gathered) if cancellation was requested.
        2. Sends the working conversation to the backend.
        3. Forwards thinking, streams text, and records the assistant turn.
        4. Stops if the turn requested no tools; otherwise runs them one at a
           time and feeds the results back.

        Args:
            user_message (str): The new user text.
            provider (Provider): 'claude', 'openai', 'groq' or 'gemini'.
            model (str): Model identifier for that provider.
            mode (ChatMode): 'quick' or 'dive'. Only Claude uses it.
            system_prompt (str): System instructions.
            conversation_history (Sequence[Message]): Prior turns. Not modified.
            tool_executor (ToolExecutor): Runs a tool by name and returns text.
            tools (Sequence[ToolDefinition], optional): Tools offered to the model.
            attachments (Sequence[Attachment], optional): Files for the new turn.
            cancel_token (CancellationToken, optional): Cooperative cancellation.
            observer (ChatObserver, optional): Text / thinking / tool notifications.

        Returns:
            ChatResponse: Answer text of every turn concatenated, plus usage.

        Raises:
            AuthExpiredError: On a 401 that could not be refreshed.
            TransportError: On any other non-200 status.
            MalformedResponseError: If the backend returned no choice/candidate.
            ToolArgumentParseError: If OpenAI-compatible tool arguments are not JSON.
        """
        adapter = self.adapter_for(provider)
        observer = observer or ChatObserver()
        cancel_token = cancel_token or CancellationToken()
        coordinator = ToolCoordinator(tool_executor, observer)
        state = _CallState()

        messages = adapter.build_messages(conversation_history, user_message, attachments or [])
        tool_defs = adapter.convert_tools(tools or [])

        response = ChatResponse()
        iteration = 0

        while True:
            if cancel_token.cancelled:
                logger.info("Cancelled before request %d to %s", iteration + 1, provider)
                break
            iteration += 1

            def build_request() -> HttpRequest:
                return adapter.build_request(
                    model=model,
                    mode=mode,
                    system_prompt=system_prompt,
                    messages=messages,
                    tools=tool_defs,
                    auth=self._auth,
                )

            logger.debug("Request %d to %s (model=%s)", iteration, provider, model)
            data = await self._exchange(build_request, state)

            self._accumulate(response.usage, adapter.parse_usage(data))
            turn = adapter.parse_turn(data)

            for kind, value in turn.segments:
                if kind == "thinking":
                    observer.thinking(value)
                    continue
                response.text += value
                await simulate_stream(
                    value,
                    observer.on_text,
                    batch_size=self.stream_batch_size,
                    delay=self.stream_delay,
                )

            messages.append(turn.assistant_message)

            if turn.done:
                break

            results: List[Tuple[ToolInvocation, str]] = []
            for call in turn.tool_calls:
                if cancel_token.cancelled:
                    break
                results.append((call, await coordinator.run(call)))

            if results:
                adapter.append_tool_results(messages, results)
            if cancel_token.cancelled:
                logger.info(
                    "Cancelled after %d of %d tool calls", len(results), len(turn.tool_calls)
                )
                break

        return response

    async def summarize(
        self,
        text: str,
        system_prompt: str,
        provider: Provider,
        model: str,
    ) -> ChatResponse:
        """
        One-shot request without tools, history or streaming.

        Args:
            text (str): Content to summarize.
            system_prompt (str): Summarization instructions.
            provider (Provider): Backend to use.
            model (str): Model identifier.

        Returns:
            ChatResponse: Summary text and that single request's usage.
        """
        adapter = self.adapter_for(provider)
        state = _CallState()

        def build_request() -> HttpRequest:
            return adapter.build_summary_request(
                text=text,
                system_prompt=system_prompt,
                model=model,
                auth=self._auth,
            )

        data = await self._exchange(build_request, state)

        response = ChatResponse()
        self._accumulate(response.usage, adapter.parse_usage(data))
        response.text = adapter.parse_turn(data).text
        return response

    # ==========================================================================
    # Internals
    # ==========================================================================

    async def _exchange(
        self,
        build_request: Callable[[], HttpRequest],
        state: _CallState,
    ) -> Dict[str, Any]:
        """
        Perform one request, refreshing credentials once on the first 401.

        The request is rebuilt after a refresh so it carries the new credentials.

        Returns:
            Dict[str, Any]: Parsed JSON body of the 200 response.
        """
        while True:
            request = build_request()
            result = await self.http(request)

            if result.status == 401 and not state.auth_retried:
                state.auth_retried = True
                logger.warning("401 from %s, attempting credential refresh", redact_url(request.url))
                new_auth = await self.on_auth_retry() if self.on_auth_retry else None
                if new_auth is None:
                    raise AuthExpiredError(result.status, result.text)
                self._auth = new_auth
                logger.info("Credentials refreshed, retrying request")
                continue

            if result.status != 200:
                raise TransportError(result.status, result.text)

            if not isinstance(result.json, dict):
                raise MalformedResponseError(
                    f"Expected a JSON object from {redact_url(request.url)}"
                )
            return result.json

    @staticmethod
    def _accumulate(total: TokenUsage, delta: Optional[TokenUsage]) -> None:
        if delta is not None:
            total.accumulate(delta)
