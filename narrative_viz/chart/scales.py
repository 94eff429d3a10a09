"""
Data -> pixel mappings shared by every scene.

Three kinds: a temporal scale (date -> x), a linear scale (value -> y, with
"nice" domain rounding) and a band scale (category -> slot). The tick and
nice-rounding arithmetic follows the d3-scale conventions so axis labels land
on human-friendly boundaries (1, 2 or 5 times a power of ten).
"""
from __future__ import annotations
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple
import math

import pandas as pd

from ..utils.time import to_ordinal, from_ordinal

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def _js_round(x: float) -> int:
    # half-up rounding, not banker's
    return math.floor(x + 0.5)


def _tick_range(start: float, stop: float, count: float) -> Tuple[int, int, float]:
    step = (stop - start) / max(0.0, count)
    power = math.floor(math.log10(step))
    error = step / (10 ** power)
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power < 0:
        inc = (10 ** -power) / factor
        i1 = _js_round(start * inc)
        i2 = _js_round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = (10 ** power) * factor
        i1 = _js_round(start / inc)
        i2 = _js_round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
    if i2 < i1 and 0.5 <= count < 2:
        return _tick_range(start, stop, count * 2)
    return i1, i2, inc


def tick_increment(start: float, stop: float, count: int) -> float:
    """Signed tick step; negative values encode 1/step for sub-unit steps."""
    if stop <= start or count <= 0:
        return 0.0
    return _tick_range(start, stop, count)[2]


def nice_domain(lo: float, hi: float, count: int = 10) -> Tuple[float, float]:
    """Widen [lo, hi] outward to tick boundaries; degenerate domains come back unchanged."""
    if not (hi > lo):
        return lo, hi
    start, stop = float(lo), float(hi)
    prestep: Optional[float] = None
    for _ in range(10):
        step = tick_increment(start, stop, count)
        if step == prestep:
            break
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        else:
            break
        prestep = step
    return start, stop


def linear_ticks(lo: float, hi: float, count: int = 10) -> List[float]:
    if count <= 0:
        return []
    if lo == hi:
        return [float(lo)]
    reverse = hi < lo
    start, stop = (hi, lo) if reverse else (lo, hi)
    i1, i2, inc = _tick_range(start, stop, count)
    if i2 < i1:
        return []
    if inc < 0:
        out = [(i1 + i) / -inc for i in range(i2 - i1 + 1)]
    else:
        out = [float((i1 + i) * inc) for i in range(i2 - i1 + 1)]
    return out[::-1] if reverse else out


class LinearScale:
    """Continuous value -> pixel mapping; a zero-width domain maps to the middle of the range."""

    def __init__(self, domain: Tuple[float, float], range_: Tuple[float, float]):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2.0
        t = (float(value) - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    def invert(self, px: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return (d0 + d1) / 2.0
        return d0 + (float(px) - r0) / (r1 - r0) * (d1 - d0)

    def nice(self, count: int = 10) -> "LinearScale":
        return LinearScale(nice_domain(*self.domain, count=count), self.range)

    def ticks(self, count: int = 10) -> List[float]:
        return linear_ticks(self.domain[0], self.domain[1], count)

    def tick_format(self, count: int = 10):
        inc = tick_increment(min(self.domain), max(self.domain), count)
        # negative increments encode sub-unit steps as 1/step
        decimals = math.ceil(math.log10(-inc)) if inc < 0 else 0
        return lambda v: f"{v:,.{decimals}f}"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LinearScale) and self.domain == other.domain and self.range == other.range

    def __repr__(self) -> str:
        return f"LinearScale(domain={self.domain}, range={self.range})"


# (name, approximate duration in days, pandas frequency, field step)
_TIME_INTERVALS: Tuple[Tuple[str, float, str, int], ...] = (
    ("day", 1.0, "D", 1),
    ("2 days", 2.0, "D", 2),
    ("week", 7.0, "W-SUN", 1),
    ("month", 30.0, "MS", 1),
    ("3 months", 90.0, "MS", 3),
    ("year", 365.0, "YS", 1),
)


class TemporalScale:
    """Calendar date -> pixel, linear in days."""

    def __init__(self, domain: Tuple[date, date], range_: Tuple[float, float]):
        self.domain = (domain[0], domain[1])
        self._linear = LinearScale((to_ordinal(domain[0]), to_ordinal(domain[1])), range_)
        self.range = self._linear.range

    def __call__(self, d: date) -> float:
        return self._linear(to_ordinal(d))

    def invert(self, px: float) -> date:
        return from_ordinal(self._linear.invert(px))

    def _interval(self, count: int) -> Tuple[str, int]:
        span = to_ordinal(self.domain[1]) - to_ordinal(self.domain[0])
        target = span / max(1, count)
        durations = [iv[1] for iv in _TIME_INTERVALS]
        if target >= durations[-1]:
            y0, y1 = self.domain[0].year, self.domain[1].year
            step = tick_increment(y0, max(y1, y0 + 1), count)
            return "YS", max(1, int(step))
        i = next((k for k, d in enumerate(durations) if d >= target), len(durations) - 1)
        if i > 0 and target / durations[i - 1] < durations[i] / target:
            i -= 1
        _, _, freq, every = _TIME_INTERVALS[i]
        return freq, every

    def ticks(self, count: int = 10) -> List[date]:
        lo, hi = self.domain
        if lo == hi:
            return [lo]
        freq, every = self._interval(count)
        stamps = pd.date_range(lo, hi, freq=freq)
        out: List[date] = []
        for ts in stamps:
            d = ts.date()
            if freq == "D" and (d.day - 1) % every:
                continue
            if freq == "MS" and (d.month - 1) % every:
                continue
            if freq == "YS" and d.year % every:
                continue
            out.append(d)
        return out

    @staticmethod
    def tick_format(d: date) -> str:
        if d.month == 1 and d.day == 1:
            return d.strftime("%Y")
        if d.day == 1:
            return d.strftime("%B")
        return d.strftime("%b %d")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TemporalScale) and self.domain == other.domain and self.range == other.range

    def __repr__(self) -> str:
        return f"TemporalScale(domain={self.domain}, range={self.range})"


class BandScale:
    """Ordered categories -> equal-width slots with uniform inner/outer padding, centred in the range."""

    def __init__(self, domain: Sequence[str], range_: Tuple[float, float], padding: float = 0.2, align: float = 0.5):
        if len(set(domain)) != len(domain):
            raise ValueError("band scale categories must be unique")
        self.domain = tuple(domain)
        self.range = (float(range_[0]), float(range_[1]))
        self.padding = float(padding)
        n = len(self.domain)
        start, stop = self.range
        self.step = (stop - start) / max(1.0, n - self.padding + self.padding * 2)
        start += (stop - start - self.step * (n - self.padding)) * align
        self.bandwidth = self.step * (1 - self.padding)
        self._index: Dict[str, float] = {c: start + self.step * i for i, c in enumerate(self.domain)}

    def __call__(self, category: str) -> float:
        try:
            return self._index[category]
        except KeyError:
            raise KeyError(f"unknown category {category!r}") from None

    def center(self, category: str) -> float:
        return self(category) + self.bandwidth / 2.0

    def __repr__(self) -> str:
        return f"BandScale(domain={self.domain}, range={self.range}, padding={self.padding})"


class ScaleFactory:
    """
    Builds fresh scales for one render from the canvas geometry.

    Nothing is cached: a cases scale and a deaths scale share the pixel range
    but each gets the domain of its own metric.
    """

    def __init__(self, canvas):
        self.canvas = canvas

    @property
    def x_range(self) -> Tuple[float, float]:
        return self.canvas.left_edge, self.canvas.right_edge

    @property
    def y_range(self) -> Tuple[float, float]:
        # inverted: larger values plot higher
        return self.canvas.bottom_edge, self.canvas.top_edge

    def temporal(self, ds) -> TemporalScale:
        return TemporalScale(ds.extent(), self.x_range)

    def linear(self, max_value: float, *, nice: bool = True) -> LinearScale:
        sc = LinearScale((0.0, float(max_value)), self.y_range)
        return sc.nice() if nice else sc

    def linear_for(self, ds, metric: str) -> LinearScale:
        return self.linear(ds.max_of(metric))

    def band(self, categories: Sequence[str], padding: float = 0.2) -> BandScale:
        return BandScale(categories, self.x_range, padding=padding)
