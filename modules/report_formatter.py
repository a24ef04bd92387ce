"""
report_formatter.py
-------------------
Turns one cycle's fetch results into the Telegram status message (HTML
parse mode).  Pure: no I/O, the clock is only read when `now` is omitted.
"""

from __future__ import annotations

import html
from datetime import datetime
from typing import Any, Optional, Sequence

from models.report import AccountReport
from utils.numeric import best_effort_sum

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
BALANCE_ERROR = "Error"

# `&` must be an entity in Telegram HTML
TEMPLATE = (
    "<b>✨ Account Status ({account}) ✨</b>\n"
    "<b>💰 Balance:</b> <code>{balance} USDT</code>\n"
    "<b>⏱️ Timeframe:</b> <code>{interval}</code>\n"
    "<b>📂 Open Positions:</b> <code>{open_positions}</code>\n"
    "<b>💰 Last {window} P&amp;L:</b> <code>{last_pnl:.2f} USDT</code>\n"
    "<b>💹 Current P&amp;L:</b> <code>{current_pnl:.2f} USDT</code>\n\n"
    "<i>🔸 Generated at: <code>{generated_at}</code></i>"
)


def build_report(
    account_label: str,
    balance: Optional[float],
    positions: Sequence[Any],
    closed_pnl_items: Sequence[Any],
    now: Optional[datetime] = None,
    *,
    interval_label: str = "1m",
    pnl_window: int = 100,
) -> AccountReport:
    """Aggregate the raw fetch results; malformed PnL entries are skipped."""
    last = best_effort_sum(closed_pnl_items, "closedPnl")
    current = best_effort_sum(positions, "unrealisedPnl")
    return AccountReport(
        account=account_label,
        balance=balance,
        open_positions=len(positions),
        last_pnl=last.total,
        current_pnl=current.total,
        generated_at=now or datetime.now(),
        pnl_window=pnl_window,
        interval_label=interval_label,
        skipped_closed=last.skipped,
        skipped_open=current.skipped,
    )


def render_report(report: AccountReport) -> str:
    balance = BALANCE_ERROR if report.balance is None else f"{report.balance:.2f}"
    return TEMPLATE.format(
        account=html.escape(report.account),
        balance=balance,
        interval=html.escape(report.interval_label),
        open_positions=report.open_positions,
        window=report.pnl_window,
        last_pnl=report.last_pnl,
        current_pnl=report.current_pnl,
        generated_at=report.generated_at.strftime(TIMESTAMP_FORMAT),
    )


def format_report(
    account_label: str,
    balance: Optional[float],
    positions: Sequence[Any],
    closed_pnl_items: Sequence[Any],
    now: Optional[datetime] = None,
    *,
    interval_label: str = "1m",
    pnl_window: int = 100,
) -> str:
    report = build_report(
        account_label,
        balance,
        positions,
        closed_pnl_items,
        now,
        interval_label=interval_label,
        pnl_window=pnl_window,
    )
    return render_report(report)
