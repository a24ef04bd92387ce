# --------------------------------------------------------------------
# models/report.py
# Per-cycle records: the tagged result of one fetch and the account report
# built from the three fetches. Never persisted.
# --------------------------------------------------------------------
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class FetchOutcome(Generic[T]):
    step: str
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def value_or(self, default: T) -> T:
        return self.value if self.ok else default


@dataclass(frozen=True)
class AccountReport:
    account: str
    balance: Optional[float]  # None → upstream failure, rendered as "Error"
    open_positions: int
    last_pnl: float
    current_pnl: float
    generated_at: datetime
    pnl_window: int = 100
    interval_label: str = "1m"
    skipped_closed: int = 0
    skipped_open: int = 0
    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def skipped_records(self) -> int:
        return self.skipped_closed + self.skipped_open

    def as_dict(self) -> dict[str, Any]:
        return {
            "account": self.account,
            "balance": self.balance,
            "open_positions": self.open_positions,
            "last_pnl": self.last_pnl,
            "current_pnl": self.current_pnl,
            "generated_at": self.generated_at.isoformat(),
        }
