"""
bybit_client.py
---------------
Signed REST client for the Bybit v5 API.  Every call is a GET with the
query string signed as-is (HMAC-SHA256 over timestamp + key + recv window +
query) and the envelope checked before the body is handed back.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp
from yarl import URL

from core.errors import ParseError, RequestError
from models.envelope import decode_bybit
from utils import signing


# ----------------------------- constants ---------------------------------- #
BYBIT_BASE_URL = "https://api.bybit.com/v5"

API_KEY_HEADER = "X-BAPI-API-KEY"
TIMESTAMP_HEADER = "X-BAPI-TIMESTAMP"
RECV_WINDOW_HEADER = "X-BAPI-RECV-WINDOW"
SIGN_HEADER = "X-BAPI-SIGN"

DEFAULT_TIMEOUT = 15.0


# ----------------------------- client ------------------------------------- #
class BybitClient:
    """Asynchronous signed client; holds no per-call state."""

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        *,
        base_url: str = BYBIT_BASE_URL,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = DEFAULT_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self._api_key = api_key
        self._api_secret = api_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    # -------------------------------------------------------------------- #
    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            if not self._session.closed:
                await self._session.close()
            self._session = None

    # -------------------------------------------------------------------- #
    def build_headers(self, query: str, timestamp: Optional[str] = None) -> Dict[str, str]:
        """Auth headers for one request; a fresh timestamp unless one is given."""
        ts = timestamp or str(signing.stamp())
        return {
            API_KEY_HEADER: self._api_key,
            TIMESTAMP_HEADER: ts,
            RECV_WINDOW_HEADER: signing.RECV_WINDOW,
            SIGN_HEADER: signing.generate_signature(
                self._api_secret, ts, self._api_key, query
            ),
        }

    def build_url(self, endpoint: str, query: str) -> str:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        return f"{url}?{query}" if query else url

    async def request(self, endpoint: str, query: str = "") -> Dict[str, Any]:
        """Signed GET `endpoint?query`; returns the envelope when retCode == 0."""
        if not endpoint or not endpoint.strip("/"):
            raise ValueError("endpoint must be non-empty")

        url = self.build_url(endpoint, query)
        headers = self.build_headers(query)
        self.logger.debug("Bybit GET %s", url)

        # --- HTTP request
        session = self._get_session()
        try:
            # encoded=True keeps the signed query bytes untouched
            async with session.get(URL(url, encoded=True), headers=headers) as resp:
                status = resp.status
                body = await resp.text()
        except asyncio.TimeoutError as exc:
            raise RequestError(f"timeout after {self.timeout}s on {endpoint}") from exc
        except aiohttp.ClientError as exc:
            raise RequestError(f"{endpoint}: {exc}") from exc

        if not 200 <= status < 300:
            raise RequestError(
                f"API returned error status on {endpoint}", status=status, body=body
            )

        # --- body + envelope
        try:
            data = json.loads(body)
        except ValueError as exc:
            raise ParseError(f"Failed to parse JSON: {exc}", body=body) from exc

        return decode_bybit(data)
