from __future__ import annotations
from typing import Any, Iterable, Optional
from datetime import date, datetime
import pandas as pd


def parse_date(value: Any, formats: Iterable[str] = ("%Y-%m-%d",)) -> Optional[date]:
    """Parse a calendar date from a string or date-like value; None when it can't be parsed."""
    if value is None or value is pd.NaT:
        return None
    # pd.Timestamp is a datetime subclass
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    s = value.strip()
    for f in formats:
        try:
            return datetime.strptime(s, f).date()
        except ValueError:
            continue
    return None


def format_long_date(d: date, fmt: str = "%b %d, %Y") -> str:
    return d.strftime(fmt)


def to_ordinal(d: date) -> float:
    # day resolution is all a daily series needs
    return float(d.toordinal())


def from_ordinal(x: float) -> date:
    return date.fromordinal(int(round(x)))
