"""
HTTP execution against the Gigapipe host.

One pooled httpx.AsyncClient serves every tool call. Each request is bounded
by a timeout; there are no retries.
"""

import asyncio
import logging

import httpx

from .config import REQUEST_TIMEOUT
from .errors import TransportError, UpstreamError
from .request_builder import UpstreamRequest


logger = logging.getLogger(__name__)


class HTTPExecutor:
    """Issues upstream requests and checks their status."""

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = REQUEST_TIMEOUT):
        """
        Args:
            client: Client to send requests with. A new pooled client is
                created when omitted; a given client stays owned by the caller.
            timeout: Upper bound in seconds for one request, including
                reading the response body.
        """
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )

    async def execute(self, request: UpstreamRequest) -> bytes:
        """Send the request and return the body of a 200 response.

        Task cancellation is not intercepted and propagates to the caller.

        Raises:
            TransportError: On connection, DNS, timeout, redirect loop or
                content decoding failures.
            UpstreamError: If the status code is not 200. The body is dropped.
        """
        try:
            response = await asyncio.wait_for(
                self._client.request(request.method, request.url, auth=request.basic_auth),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportError(f"timed out after {self.timeout:g}s") from e
        except httpx.RequestError as e:
            # Network failures, redirect loops and undecodable content encodings
            raise TransportError(str(e) or type(e).__name__) from e
        except httpx.InvalidURL as e:
            raise TransportError(f"invalid URL: {e}") from e

        logger.debug(f"{request.method} {response.url} -> {response.status_code}")

        if response.status_code != httpx.codes.OK:
            raise UpstreamError(response.status_code)

        return response.content

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HTTPExecutor":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
