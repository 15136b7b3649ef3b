from __future__ import annotations
import math
from typing import Any, Dict, Iterable, Optional, Union

from umami_export.common.paths import normalize_path

Number = Union[int, float]
Totals = Dict[str, Number]


def visitors_value(raw: Any) -> Optional[Number]:
    """
    Numeric visitors for a row, or None when it is not a finite number.
    Missing/null/blank counts as 0.
    """
    if raw is None:
        return 0
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, (int, float)):
        value = raw
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return 0
        try:
            value = float(text)
        except ValueError:
            return None
    else:
        return None

    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer():
            return int(value)
    return value


def accumulate(totals: Totals, page: Iterable[Any]) -> Totals:
    """Fold one page of metric rows into `totals` (in place) and return it."""
    for row in page:
        if not isinstance(row, dict):
            row = {}
        visitors = visitors_value(row.get("visitors"))
        if visitors is None:
            continue
        key = normalize_path(row.get("name"))
        totals[key] = totals.get(key, 0) + visitors
    return totals
