"""HTTP transport backed by httpx."""

from __future__ import annotations

import logging

import httpx

from usagestats.core.settings import DEFAULT_TIMEOUT_SECONDS
from usagestats.errors import TransportError
from usagestats.models.types import HttpRequest
from usagestats.transport.base import TransportBase

logger = logging.getLogger(__name__)


class HttpxTransport(TransportBase):
    """Sends requests with a synchronous httpx client.

    Any httpx error (connection failure, timeout, non-2xx response) or a
    body that cannot be encoded as JSON is raised as TransportError.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.Client | None = None,
    ):
        """Initialize transport.

        Args:
            timeout: Request timeout in seconds, used when no client is given.
            client: Optional preconfigured client (tests pass one built on
                httpx.MockTransport). Not closed by close().
        """
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def send(self, request: HttpRequest) -> None:
        try:
            response = self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                json=request.body,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise TransportError(
                f"{request.method} {request.url} returned HTTP {status}", status_code=status
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e
        except (TypeError, ValueError) as e:
            # Body not JSON encodable (e.g. NaN or infinite floats)
            raise TransportError(f"{request.method} {request.url} body not sendable: {e}") from e

        logger.debug(f"{request.method} {request.url}: HTTP {response.status_code}")

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
