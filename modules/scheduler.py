"""
scheduler.py
------------
Fixed-period status loop: every `interval` seconds fetch balance, positions
and closed PnL (concurrently), build the report and send it.  A failed fetch
degrades to a placeholder; a failed send is logged; any other failure ends
only the current cycle.  None of them stops the loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any, Awaitable, List, Optional

from models.report import AccountReport, FetchOutcome
from modules.account_service import (
    DEFAULT_CLOSED_PNL_LIMIT,
    DEFAULT_POSITIONS_LIMIT,
    AccountDataService,
)
from modules.report_formatter import build_report, render_report
from notifiers.base import BaseNotifier
from utils.timeframe import interval_label


class StatusScheduler:
    """Single recurring job; the next tick only starts after the previous one."""

    def __init__(
        self,
        account_service: AccountDataService,
        notifier: BaseNotifier,
        *,
        account_label: str,
        interval: int,
        positions_limit: int = DEFAULT_POSITIONS_LIMIT,
        closed_pnl_limit: int = DEFAULT_CLOSED_PNL_LIMIT,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
            raise ValueError(f"interval must be a positive number of seconds, got {interval!r}")

        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.account_service = account_service
        self.notifier = notifier
        self.account_label = account_label
        self.interval = interval
        self.positions_limit = positions_limit
        self.closed_pnl_limit = closed_pnl_limit

        # metrics
        self.metrics = {
            "cycles": 0,
            "fetch_errors": 0,
            "send_errors": 0,
            "skipped_records": 0,
            "cycle_errors": 0,
        }

    # -------------------------------------------------------------------- #
    async def _capture(self, step: str, aw: Awaitable[Any]) -> FetchOutcome:
        """Await `aw` and tag the result; never raises (except cancellation)."""
        try:
            return FetchOutcome(step=step, value=await aw)
        except Exception as exc:  # noqa: BLE001 (one bad fetch must not sink the cycle)
            return FetchOutcome(step=step, error=exc)

    async def fetch_all(self) -> List[FetchOutcome]:
        return list(
            await asyncio.gather(
                self._capture("balance", self.account_service.get_balance()),
                self._capture("positions", self.account_service.get_positions(self.positions_limit)),
                self._capture("closed PnL", self.account_service.get_closed_pnl(self.closed_pnl_limit)),
            )
        )

    async def run_cycle(self) -> AccountReport:
        """One tick: fetch → format → send."""
        balance, positions, closed_pnl = await self.fetch_all()

        errors = []
        for outcome in (balance, positions, closed_pnl):
            if not outcome.ok:
                self.metrics["fetch_errors"] += 1
                errors.append(f"{outcome.step}: {outcome.error}")
                self.logger.warning("Error getting %s: %s", outcome.step, outcome.error)

        report = build_report(
            self.account_label,
            balance.value_or(None),
            positions.value_or([]),
            closed_pnl.value_or([]),
            interval_label=interval_label(self.interval),
            pnl_window=self.closed_pnl_limit,
        )
        if errors:
            report = replace(report, errors=tuple(errors))
        if report.skipped_records:
            self.metrics["skipped_records"] += report.skipped_records
            self.logger.warning(
                "Skipped %d non-numeric PnL record(s) (closed=%d, open=%d)",
                report.skipped_records,
                report.skipped_closed,
                report.skipped_open,
            )

        self.logger.debug("Cycle report: %s", report.as_dict())
        message = render_report(report)
        try:
            await self.notifier.send(message)
        except Exception as exc:  # noqa: BLE001 (keep the loop alive)
            self.metrics["send_errors"] += 1
            self.logger.error("Error sending notification: %s", exc)

        self.metrics["cycles"] += 1
        return report

    # -------------------------------------------------------------------- #
    def log_metrics(self) -> None:
        self.logger.info(
            "📊 Cycles: %s | Fetch errors: %s | Send errors: %s | Skipped records: %s | Failed cycles: %s",
            self.metrics["cycles"],
            self.metrics["fetch_errors"],
            self.metrics["send_errors"],
            self.metrics["skipped_records"],
            self.metrics["cycle_errors"],
        )

    async def polling_loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self.interval
        while True:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            try:
                await self.run_cycle()
            except Exception:  # noqa: BLE001 (one bad cycle must not end the service)
                self.metrics["cycle_errors"] += 1
                self.logger.exception("Status cycle failed")
            self.log_metrics()
            # overrun → fire right away, never in a burst
            next_tick = max(next_tick + self.interval, loop.time())

    async def run(self) -> None:
        self.logger.info(
            "✅ StatusScheduler started – reporting %s every %ss",
            self.account_label,
            self.interval,
        )
        try:
            await self.polling_loop()
        except asyncio.CancelledError:
            self.logger.info("Status loop cancelled – shutting down")
            raise
