import logging
import time

import httpx

from commandbot.config import REQUEST_TIMEOUT
from commandbot.core.errors import BackendUnavailable

logger = logging.getLogger(__name__)


class HttpBackend:
    """Single-attempt JSON-over-HTTP client shared by the three backends.

    `transport` lets tests plug in an `httpx.MockTransport`.
    """

    name = "backend"

    def __init__(self, base_url, headers=None, timeout=REQUEST_TIMEOUT, transport=None):
        self.base_url = (base_url or "").rstrip("/")
        self.headers = {"Content-Type": "application/json", **(headers or {})}
        self.timeout = timeout
        self._transport = transport

    async def _request(self, method, path="", payload=None):
        url = f"{self.base_url}{path}"
        t0 = time.time()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, json=payload, headers=self.headers)
        except httpx.HTTPError as e:
            logger.warning(f"  [{self.name}] {method} {path or '/'} failed: {e}")
            raise BackendUnavailable(str(e) or type(e).__name__) from e

        ms = int((time.time() - t0) * 1000)
        logger.debug(f"  [{self.name}] {method} {path or '/'} -> {response.status_code} {ms}ms")

        if not response.is_success:
            raise BackendUnavailable(
                f"{self.name} returned {response.status_code}",
                status_code=response.status_code,
            )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise BackendUnavailable(f"{self.name} returned invalid JSON") from e

    async def _post(self, path="", payload=None):
        return await self._request("POST", path, {} if payload is None else payload)
