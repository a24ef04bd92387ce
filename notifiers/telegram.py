# notifiers/telegram.py
"""
Telegram Bot API notifier: one `sendMessage` POST per call, HTML parse mode,
`{ok, error_code, description}` envelope checked on the way back.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from core.errors import ParseError, RequestError
from models.envelope import TelegramEnvelope, decode_telegram
from notifiers.base import BaseNotifier

TELEGRAM_BASE_URL = "https://api.telegram.org"
SEND_MESSAGE = "sendMessage"
PARSE_MODE = "HTML"

logger = logging.getLogger(__name__)


class TelegramNotifier(BaseNotifier):
    def __init__(
        self,
        token: str,
        chat_id: str,
        *,
        base_url: str = TELEGRAM_BASE_URL,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 15.0,
    ) -> None:
        self._token = token
        self.chat_id = chat_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    @property
    def bot_url(self) -> str:
        return f"{self.base_url}/bot{self._token}"

    def _redacted(self, url: str) -> str:
        return url.replace(self._token, "***") if self._token else url

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

    def build_payload(self, text: str) -> Dict[str, Any]:
        return {"chat_id": self.chat_id, "text": text, "parse_mode": PARSE_MODE}

    async def send(self, text: str) -> None:
        await self.request(SEND_MESSAGE, self.build_payload(text))
        logger.info("Notification sent to chat %s", self.chat_id)

    async def request(self, method: str, payload: Dict[str, Any]) -> TelegramEnvelope:
        url = f"{self.bot_url}/{method}"
        logger.debug("Telegram POST %s", self._redacted(url))

        session = self._get_session()
        try:
            async with session.post(url, json=payload) as resp:
                status = resp.status
                body = await resp.text()
        except asyncio.TimeoutError as exc:
            raise RequestError(f"timeout after {self.timeout}s on {method}") from exc
        except aiohttp.ClientError as exc:
            # aiohttp puts the URL (and so the token) into some messages
            raise RequestError(self._redacted(f"{method}: {exc}")) from exc

        try:
            data = json.loads(body)
        except ValueError as exc:
            if not 200 <= status < 300:
                raise RequestError(
                    f"Telegram API returned error status on {method}", status=status, body=body
                ) from exc
            raise ParseError(f"Failed to parse JSON: {exc}", body=body) from exc

        if not 200 <= status < 300:
            # rejected calls still carry {ok: false, error_code, description}
            if isinstance(data, dict) and data.get("ok") is False:
                decode_telegram(data)
            raise RequestError(
                f"Telegram API returned error status on {method}", status=status, body=body
            )

        return decode_telegram(data)
