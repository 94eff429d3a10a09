"""
Raw table -> typed, immutable, date-ordered DataSet.

Every Record field is validated here so nothing downstream has to guard
against NaN, blanks or negative counts. Ascending date order is enforced
(re-sorted when needed) because anchor search and line rendering rely on it.
"""
from __future__ import annotations
from bisect import bisect_left
from dataclasses import dataclass, field
from functools import cached_property
from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple
import logging
import numbers
import re

import pandas as pd

from ..io.readers import read_table
from ..utils.time import parse_date

log = logging.getLogger(__name__)

AGE_BINS: Tuple[str, ...] = ("0-17", "18-29", "30-39", "40-49", "50-59", "60-69", "70-79", "80+")

# column names used by the published CSV export
AGE_COLUMN_ALIASES: Dict[str, str] = {
    "0-17": "Age_0_17",
    "18-29": "Age_18_29",
    "30-39": "Age_30_39",
    "40-49": "Age_40_49",
    "50-59": "Age_50_59",
    "60-69": "Age_60_69",
    "70-79": "Age_70_79",
    "80+": "Age_80_plus",
}

METRICS: Tuple[str, ...] = ("cases", "deaths", "hospitalizations")
_METRIC_COLUMNS: Dict[str, str] = {"cases": "Cases", "deaths": "Deaths", "hospitalizations": "Hospitalizations"}
DATE_COLUMN = "Date"

_INT_RE = re.compile(r"^\+?\d+$")


class DataValidationError(ValueError):
    """A raw row (or the table as a whole) cannot become a Record."""

    def __init__(self, message: str, *, row: Optional[int] = None, column: Optional[str] = None):
        where = []
        if row is not None:
            where.append(f"row {row}")
        if column is not None:
            where.append(f"column {column!r}")
        super().__init__(f"{message} ({', '.join(where)})" if where else message)
        self.row = row
        self.column = column


@dataclass(frozen=True)
class Record:
    date: date
    cases: int
    deaths: int
    hospitalizations: int
    age_groups: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({b: 0 for b in AGE_BINS}))

    def __post_init__(self):
        # freeze the mapping even when a plain dict was passed in
        if not isinstance(self.age_groups, MappingProxyType):
            object.__setattr__(self, "age_groups", MappingProxyType(dict(self.age_groups)))

    def metric(self, name: str) -> int:
        if name not in METRICS:
            raise KeyError(name)
        return getattr(self, name)

    @property
    def age_total(self) -> int:
        return sum(self.age_groups.values())


@dataclass(frozen=True)
class DataSet:
    """Ordered, read-only sequence of Records (strictly ascending by date)."""
    records: Tuple[Record, ...]

    def __post_init__(self):
        recs = tuple(self.records)
        if not recs:
            raise DataValidationError("dataset has no records")
        for i in range(1, len(recs)):
            if recs[i].date <= recs[i - 1].date:
                raise DataValidationError(
                    f"records not strictly ascending: {recs[i - 1].date} then {recs[i].date}", row=i
                )
        object.__setattr__(self, "records", recs)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __getitem__(self, i: int) -> Record:
        return self.records[i]

    @property
    def first(self) -> Record:
        return self.records[0]

    @property
    def last(self) -> Record:
        return self.records[-1]

    @cached_property
    def dates(self) -> Tuple[date, ...]:
        return tuple(r.date for r in self.records)

    def extent(self) -> Tuple[date, date]:
        return self.first.date, self.last.date

    def max_of(self, metric: str) -> int:
        return max(r.metric(metric) for r in self.records)

    def anchor_index(self, when: date) -> Optional[int]:
        """Index of the first record dated on or after `when`; None when `when` is past the end."""
        i = bisect_left(self.dates, when)
        return i if i < len(self.records) else None


# ---------- coercion helpers ----------

def _coerce_count(value: Any, *, row: int, column: str) -> int:
    if isinstance(value, bool):
        raise DataValidationError(f"boolean {value!r} is not a count", row=row, column=column)
    if isinstance(value, numbers.Integral):
        n = int(value)
    elif isinstance(value, numbers.Real):
        f = float(value)
        if f != f or not f.is_integer():
            raise DataValidationError(f"{value!r} is not a whole number", row=row, column=column)
        n = int(f)
    elif isinstance(value, str):
        s = value.strip()
        if not _INT_RE.match(s):
            raise DataValidationError(f"{value!r} is not a non-negative integer", row=row, column=column)
        n = int(s)
    else:
        raise DataValidationError(f"missing or unsupported value {value!r}", row=row, column=column)
    if n < 0:
        raise DataValidationError(f"negative count {n}", row=row, column=column)
    return n


def resolve_age_columns(columns: Sequence[str]) -> Dict[str, str]:
    """Map each age bin to the column holding it (original alias or the bin label itself)."""
    cols = set(columns)
    out: Dict[str, str] = {}
    missing: List[str] = []
    for b in AGE_BINS:
        alias = AGE_COLUMN_ALIASES[b]
        if alias in cols:
            out[b] = alias
        elif b in cols:
            out[b] = b
        else:
            missing.append(alias)
    if missing:
        raise DataValidationError(f"missing age-group columns: {', '.join(missing)}")
    return out


def _check_columns(df: pd.DataFrame) -> Dict[str, str]:
    required = [DATE_COLUMN] + list(_METRIC_COLUMNS.values())
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise DataValidationError(f"missing columns: {', '.join(missing)}")
    return resolve_age_columns(list(df.columns))


# ---------- public API ----------

def normalize_rows(df: pd.DataFrame, *, date_format: str = "%Y-%m-%d") -> DataSet:
    """Validate every row and build the DataSet; raises DataValidationError on the first bad cell."""
    if df.empty:
        raise DataValidationError("input table has no rows")
    age_cols = _check_columns(df)

    records: List[Record] = []
    for i, row in enumerate(df.to_dict("records")):
        d = parse_date(row[DATE_COLUMN], (date_format,))
        if d is None:
            raise DataValidationError(f"unparsable date {row[DATE_COLUMN]!r}", row=i, column=DATE_COLUMN)
        counts = {m: _coerce_count(row[c], row=i, column=c) for m, c in _METRIC_COLUMNS.items()}
        ages = {b: _coerce_count(row[c], row=i, column=c) for b, c in age_cols.items()}
        records.append(Record(date=d, age_groups=ages, **counts))

    seen: Dict[date, int] = {}
    for i, r in enumerate(records):
        if r.date in seen:
            raise DataValidationError(f"duplicate date {r.date} (first seen at row {seen[r.date]})", row=i, column=DATE_COLUMN)
        seen[r.date] = i

    if any(records[i].date < records[i - 1].date for i in range(1, len(records))):
        log.warning("input rows not in date order; re-sorting", extra={"rows": len(records)})
        records.sort(key=lambda r: r.date)

    return DataSet(tuple(records))


def load_dataset(path: str | Path, *, date_format: str = "%Y-%m-%d") -> DataSet:
    df = read_table(path)
    ds = normalize_rows(df, date_format=date_format)
    lo, hi = ds.extent()
    log.info("dataset loaded", extra={"path": str(path), "records": len(ds), "start": lo.isoformat(), "end": hi.isoformat()})
    return ds
