# twitter_oauth/transport.py
"""
HTTP transport for signed OAuth requests, built on httpx.
"""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from twitter_oauth.errors import TransportError
from twitter_oauth.signing import SignedRequest

logger = logging.getLogger(__name__)


class HttpResponse(BaseModel):
    """The parts of an HTTP response the handshake looks at."""
    status_code: int
    body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport:
    """
    Sends signed requests with an httpx.AsyncClient.

    A client passed in by the caller is left open on aclose(); a client
    created here is closed.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def send(self, request: SignedRequest) -> HttpResponse:
        """
        Send a signed request.

        Non-2xx responses are returned, not raised; classifying them is up to
        the caller.

        Raises:
            TransportError: If no response was received
        """
        try:
            response = await self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Request to {request.url} timed out: {str(e)}")
            raise TransportError(f"Request to {request.url} timed out") from e
        except httpx.RequestError as e:
            logger.error(f"Request to {request.url} failed: {str(e)}")
            raise TransportError(f"Request to {request.url} failed: {str(e)}") from e

        logger.debug(f"{request.method} {request.url} -> {response.status_code}")
        return HttpResponse(status_code=response.status_code, body=response.text)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
