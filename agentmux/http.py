"""
HTTP transport capability.

The engine never talks to the network directly; it hands an HttpRequest to an
HttpClient callable and inspects the HttpResponse status itself, so it can
decide whether a 401 deserves a credential refresh before giving up.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpRequest:
    """
    A single HTTP exchange to perform.

    Attributes:
        url: Full request URL (may carry a query string, e.g. Gemini's key)
        method: HTTP method
        headers: Request headers
        body: Serialized request body
        throw: Raise on error statuses. The engine always sends False.
    """
    url: str
    method: str = "POST"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    throw: bool = False


@dataclass
class HttpResponse:
    """
    Result of an HTTP exchange. `json` is None when the body is not JSON.
    """
    status: int
    text: str = ""
    json: Any = None


HttpClient = Callable[[HttpRequest], Awaitable[HttpResponse]]


def json_request(url: str, headers: Dict[str, str], payload: Dict[str, Any]) -> HttpRequest:
    """
    Build a POST request with a JSON body and throwing disabled.
    """
    return HttpRequest(
        url=url,
        method="POST",
        headers=headers,
        body=json.dumps(payload),
        throw=False,
    )


def redact_url(url: str) -> str:
    """
    Strip the query string so keys passed as parameters never reach the logs.
    """
    return url.split("?", 1)[0]


class HttpxTransport:
    """
    Default HttpClient built on httpx.AsyncClient.

    The underlying client is created lazily and reused across requests.
    Call `aclose()` (or use `async with`) when done.
    """

    def __init__(self, timeout: float = 120.0, client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            timeout: Request timeout in seconds for the lazily created client.
            client: An existing httpx.AsyncClient to use instead.
        """
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def __call__(self, request: HttpRequest) -> HttpResponse:
        client = self._get_client()
        logger.debug("%s %s", request.method, redact_url(request.url))
        response = await client.request(
            request.method,
            request.url,
            headers=request.headers,
            content=request.body,
        )
        if request.throw:
            response.raise_for_status()

        try:
            data = response.json()
        except ValueError:
            data = None

        return HttpResponse(status=response.status_code, text=response.text, json=data)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
