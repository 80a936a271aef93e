"""
Shared async HTTP client for RapidAPI-hosted source APIs.

Every source API is a GET against a fixed host, authenticated with the
RapidAPI key and host headers. Transport failures, non-success statuses and
bodies that are not JSON all surface as SourceTransportError.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from sentiment_etl.errors import SourceTransportError

logger = logging.getLogger(__name__)


class RapidAPIClient:
    """
    Async JSON client bound to one RapidAPI host.

    Subclasses set `source` and add endpoint-specific methods on top of
    `get_json`. Use as an async context manager or call `close()`.
    """

    source = "rapidapi"

    def __init__(
        self,
        api_key: str,
        host: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: RapidAPI key sent with every request.
            host: RapidAPI host name, also used as the base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, mainly for tests.
        """
        self.host = host
        self.timeout = timeout
        self.client = httpx.AsyncClient(
            base_url=f"https://{host}",
            headers={
                "x-rapidapi-key": api_key,
                "x-rapidapi-host": host,
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET `path` and decode the JSON body.

        Args:
            path: Path relative to the host, e.g. "/search".
            params: Query parameters; None values are dropped.

        Returns:
            The decoded JSON body.

        Raises:
            SourceTransportError: On transport failure, a non-2xx status or a
                body that is not valid JSON.
        """
        query = {k: v for k, v in (params or {}).items() if v is not None}
        try:
            response = await self.client.get(path, params=query)
        except httpx.HTTPError as e:
            logger.warning(f"{self.source}: request to {path} failed: {e}")
            raise SourceTransportError(self.source, f"request failed: {e}") from e

        if not response.is_success:
            logger.warning(f"{self.source}: {path} returned HTTP {response.status_code}")
            raise SourceTransportError(
                self.source,
                f"HTTP {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise SourceTransportError(
                self.source, f"malformed JSON response from {path}: {e}", status_code=response.status_code
            ) from e
