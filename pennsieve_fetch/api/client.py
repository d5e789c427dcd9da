"""
Async client for the two Pennsieve API endpoints used by a run.
"""

import asyncio
import time
from typing import Any, Optional

import aiohttp

from pennsieve_fetch.exceptions import TransportError
from pennsieve_fetch.models.integration import PackageList
from pennsieve_fetch.utils.structured_logger import APILogger


class PennsieveAPIClient:
    """
    Client for the Pennsieve integrations and packages APIs.

    Responses are returned as raw bytes whatever their HTTP status; callers
    decode them. Only failures to carry out a request at all are raised, as
    TransportError.
    """

    def __init__(
        self,
        api_host: str,
        api_host2: str,
        session_token: str,
        api_logger: APILogger,
        timeout: float | None = None,
    ):
        """
        Initializes the API client.

        Args:
            api_host: Base URL serving the packages API.
            api_host2: Base URL serving the integrations API.
            session_token: Pennsieve session token.
            api_logger: Structured logger for request events.
            timeout: Total per-request timeout in seconds (None waits forever).
        """
        self.api_host = api_host
        self.api_host2 = api_host2
        self.session_token = session_token
        self.timeout = timeout
        self._api_log = api_logger
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "PennsieveAPIClient":
        await self._initialize_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _request(
        self, method: str, url: str, endpoint: str, **kwargs: Any
    ) -> bytes:
        """
        Performs a single request and returns the body bytes.

        `endpoint` is the path used in log records; it never carries the
        session token.
        """
        await self._initialize_session()
        self._api_log.request_started(method, endpoint)
        start_time = time.monotonic()

        try:
            async with self._session.request(method, url, **kwargs) as r:
                body = await r.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            error = str(e) or type(e).__name__
            self._api_log.request_failed(method, endpoint, error, duration_ms)
            raise TransportError(
                f"{method} {endpoint} failed: {error}", url=endpoint
            ) from e

        duration_ms = (time.monotonic() - start_time) * 1000
        self._api_log.request_completed(
            method, endpoint, r.status, duration_ms, len(body)
        )
        self._api_log.response_body(endpoint, body)
        return body

    # Public API Methods
    async def fetch_integration(self, integration_id: str) -> bytes:
        """GET {api_host2}/integrations/{integration_id}."""
        endpoint = f"/integrations/{integration_id}"
        return await self._request(
            "GET",
            f"{self.api_host2}{endpoint}",
            endpoint,
            headers={
                "accept": "application/json",
                "Authorization": f"Bearer {self.session_token}",
            },
        )

    async def fetch_download_manifest(self, node_ids: list[str]) -> bytes:
        """POST {api_host}/packages/download-manifest with the node IDs."""
        endpoint = "/packages/download-manifest"
        return await self._request(
            "POST",
            f"{self.api_host}{endpoint}",
            endpoint,
            params={"api_key": self.session_token},
            data=PackageList(node_ids=node_ids).to_json(),
            headers={
                "accept": "*/*",
                "content-type": "application/json",
            },
        )
