"""
account_service.py
------------------
Read-only account queries on top of BybitClient: wallet balance, open
linear USDT positions and the most recent closed-PnL records.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from core.errors import ParseError
from models.envelope import decode_bybit_list
from modules.bybit_client import BybitClient
from utils.numeric import parse_float


WALLET_BALANCE_ENDPOINT = "account/wallet-balance"
POSITION_LIST_ENDPOINT = "position/list"
CLOSED_PNL_ENDPOINT = "position/closed-pnl"

DEFAULT_POSITIONS_LIMIT = 10
DEFAULT_CLOSED_PNL_LIMIT = 100


def _check_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")
    return limit


class AccountDataService:
    """Three independent reads sharing one signed client."""

    def __init__(
        self,
        client: BybitClient,
        account_type: str,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.client = client
        self.account_type = account_type
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    # ------------------------------------------------------------------ #
    async def get_balance(self) -> float:
        """Total equity of the configured account type.

        Raises ParseError with "no data" when the list is missing or empty
        and "malformed data" when `totalEquity` is absent or not numeric.
        """
        query = urlencode([("accountType", self.account_type)])
        data = await self.client.request(WALLET_BALANCE_ENDPOINT, query)

        try:
            accounts = decode_bybit_list(data)
        except ParseError as exc:
            raise ParseError(f"no data: {exc.message}") from exc
        if not accounts:
            raise ParseError("no data: 'list' is empty")

        first = accounts[0]
        raw = first.get("totalEquity") if isinstance(first, dict) else None
        if raw is None:
            raise ParseError("malformed data: 'totalEquity' not found")
        try:
            balance = parse_float(raw)
        except ValueError as exc:
            raise ParseError(f"malformed data: 'totalEquity' {exc}") from exc

        self.logger.debug("Balance for %s: %.2f", self.account_type, balance)
        return balance

    async def get_positions(self, limit: int = DEFAULT_POSITIONS_LIMIT) -> List[Dict[str, Any]]:
        """Open linear USDT positions, unfiltered."""
        query = urlencode(
            [("category", "linear"), ("settleCoin", "USDT"), ("limit", _check_limit(limit))]
        )
        data = await self.client.request(POSITION_LIST_ENDPOINT, query)
        return decode_bybit_list(data)

    async def get_closed_pnl(self, limit: int = DEFAULT_CLOSED_PNL_LIMIT) -> List[Dict[str, Any]]:
        """Latest `limit` closed-PnL records; any time span."""
        query = urlencode([("category", "linear"), ("limit", _check_limit(limit))])
        data = await self.client.request(CLOSED_PNL_ENDPOINT, query)
        return decode_bybit_list(data)
