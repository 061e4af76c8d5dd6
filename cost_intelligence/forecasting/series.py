"""
Cost Series Inputs

Historical daily-cost observations and the spending snapshot shown
alongside a forecast.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Union

import numpy as np

logger = logging.getLogger(__name__)


class InvalidSeriesError(ValueError):
    """Raised when a cost series violates the input contract"""


DateLike = Union[date, datetime, str]


def parse_date(value: DateLike) -> date:
    """
    Coerce a date, datetime or ISO-8601 string into a calendar date.

    Raises:
        InvalidSeriesError: if the value cannot be read as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            raise InvalidSeriesError(f"Malformed date: {value!r}")
    raise InvalidSeriesError(f"Unsupported date value: {value!r}")


def parse_cost(value: Any) -> float:
    """Coerce a cost into a finite float"""
    if isinstance(value, bool):
        raise InvalidSeriesError(f"Cost must be numeric, got {value!r}")
    try:
        cost = float(value)
    except (TypeError, ValueError):
        raise InvalidSeriesError(f"Cost must be numeric, got {value!r}")
    if not math.isfinite(cost):
        raise InvalidSeriesError(f"Cost must be finite, got {value!r}")
    return cost


@dataclass(frozen=True)
class HistoricalPoint:
    """One observed day of project spend"""
    date: date
    cost: float

    @classmethod
    def coerce(cls, raw: Any) -> "HistoricalPoint":
        """Build a point from an instance, a {date, cost} mapping or a pair"""
        if isinstance(raw, cls):
            return cls(date=parse_date(raw.date), cost=parse_cost(raw.cost))
        if isinstance(raw, dict):
            if "date" not in raw or "cost" not in raw:
                raise InvalidSeriesError(f"Point needs 'date' and 'cost': {raw!r}")
            return cls(date=parse_date(raw["date"]), cost=parse_cost(raw["cost"]))
        if isinstance(raw, (tuple, list)) and len(raw) == 2:
            return cls(date=parse_date(raw[0]), cost=parse_cost(raw[1]))
        raise InvalidSeriesError(f"Unrecognised history point: {raw!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date.isoformat(), "cost": self.cost}


def coerce_history(history: Optional[Iterable[Any]]) -> List[HistoricalPoint]:
    """Validate a raw series, preserving the caller's order"""
    if history is None:
        return []
    return [HistoricalPoint.coerce(point) for point in history]


def sort_history(points: Iterable[HistoricalPoint]) -> List[HistoricalPoint]:
    """Stable ascending sort by date; same-day records keep their order"""
    return sorted(points, key=lambda p: p.date)


@dataclass
class SpendingSnapshot:
    """Headline spend figures for a daily-cost series"""
    total_cost: float
    average_daily_cost: float
    total_days: int
    recent_trend_percentage: float
    start_date: Optional[date]
    end_date: Optional[date]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalCost": self.total_cost,
            "averageDailyCost": self.average_daily_cost,
            "totalDays": self.total_days,
            "recentTrendPercentage": self.recent_trend_percentage,
            "dataRange": {
                "startDate": self.start_date.isoformat() if self.start_date else None,
                "endDate": self.end_date.isoformat() if self.end_date else None,
            },
        }


def summarize_spending(history: Iterable[Any], window: int = 7) -> SpendingSnapshot:
    """
    Summarize a daily-cost series.

    The recent trend compares the mean of the last `window` observations
    with the mean of the `window` before them.

    Args:
        history: {date, cost} observations in any order
        window: Number of observations per comparison window

    Returns:
        SpendingSnapshot
    """
    points = sort_history(coerce_history(history))
    if not points:
        return SpendingSnapshot(0.0, 0.0, 0, 0.0, None, None)

    costs = np.array([p.cost for p in points], dtype=float)
    total = float(np.sum(costs))

    recent = costs[-window:]
    previous = costs[-2 * window:-window] if len(costs) > window else costs[:0]
    recent_avg = float(np.mean(recent))
    previous_avg = float(np.mean(previous)) if len(previous) else 0.0

    if previous_avg > 0:
        trend_pct = (recent_avg - previous_avg) / previous_avg * 100
    else:
        trend_pct = 0.0

    return SpendingSnapshot(
        total_cost=total,
        average_daily_cost=total / len(points),
        total_days=len(points),
        recent_trend_percentage=trend_pct,
        start_date=points[0].date,
        end_date=points[-1].date,
    )
