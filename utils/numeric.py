"""
utils/numeric.py
----------------
Best-effort numeric coercion for loosely-typed API records.

Bybit encodes numbers as strings ("10.5", "-3.0", "").  When summing a field
across a list of records, entries that are absent or do not parse contribute
nothing and are counted in `skipped`; one bad record never blocks the sum.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable

import pandas as pd


@dataclass(frozen=True)
class NumericSum:
    total: float = 0.0
    used: int = 0
    skipped: int = 0


def _field(item: Any, field: str) -> Any:
    if not isinstance(item, dict):
        return None
    value = item.get(field)
    # bools are ints to pandas; never a valid amount here
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return None
    return value


def _coerce_one(value: Any) -> float:
    """Single value → float; NaN when it does not parse or is not finite."""
    try:
        number = float(pd.to_numeric(value, errors="coerce"))
    except (OverflowError, TypeError, ValueError):
        return math.nan
    return number if math.isfinite(number) else math.nan


def best_effort_sum(items: Iterable[Any], field: str) -> NumericSum:
    """Sum `item[field]` over `items`, skipping entries that are not numeric."""
    raw = [_field(item, field) for item in items]
    if not raw:
        return NumericSum()
    try:
        values = pd.to_numeric(pd.Series(raw, dtype=object), errors="coerce").astype(float)
    except OverflowError:
        # huge digit strings overflow the vectorised path
        values = pd.Series([_coerce_one(v) for v in raw], dtype=float)
    valid = values.notna() & (values.abs() != math.inf)
    return NumericSum(
        total=float(values[valid].sum()),
        used=int(valid.sum()),
        skipped=int((~valid).sum()),
    )


def parse_float(value: Any) -> float:
    """Strict single-value parse; raises ValueError on anything non-numeric."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"not a number: {value!r}")
    number = _coerce_one(value)
    if math.isnan(number):
        raise ValueError(f"not a number: {value!r}")
    return number
