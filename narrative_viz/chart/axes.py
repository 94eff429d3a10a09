from __future__ import annotations
from typing import Callable, Iterable, Tuple

from .surface import Surface
from .scales import BandScale, LinearScale, TemporalScale

TICK_SIZE = 6.0
TICK_PADDING = 3.0
FONT_SIZE = 10


def _draw_bottom(surface: Surface, y: float, span: Tuple[float, float],
                 ticks: Iterable[Tuple[float, str]], color: str, group: str) -> None:
    surface.add_line(span[0], y, span[1], y, stroke=color, group=group)
    for x, label in ticks:
        surface.add_line(x, y, x, y + TICK_SIZE, stroke=color, group=group)
        surface.add_text(x, y + TICK_SIZE + TICK_PADDING + FONT_SIZE, label,
                         fill=color, font_size=FONT_SIZE, anchor="middle", group=group)


def axis_bottom_time(surface: Surface, scale: TemporalScale, y: float, *, count: int = 8,
                     color: str = "#000", group: str = "axis-x") -> None:
    ticks = [(scale(d), scale.tick_format(d)) for d in scale.ticks(count)]
    _draw_bottom(surface, y, scale.range, ticks, color, group)


def axis_bottom_band(surface: Surface, scale: BandScale, y: float, *,
                     color: str = "#000", group: str = "axis-x") -> None:
    ticks = [(scale.center(c), c) for c in scale.domain]
    _draw_bottom(surface, y, scale.range, ticks, color, group)


def axis_left(surface: Surface, scale: LinearScale, x: float, *, count: int = 10,
              color: str = "#000", group: str = "axis-y") -> None:
    fmt: Callable[[float], str] = scale.tick_format(count)
    lo, hi = sorted(scale.range)
    surface.add_line(x, lo, x, hi, stroke=color, group=group)
    for v in scale.ticks(count):
        y = scale(v)
        surface.add_line(x - TICK_SIZE, y, x, y, stroke=color, group=group)
        surface.add_text(x - TICK_SIZE - TICK_PADDING, y - FONT_SIZE / 2, fmt(v),
                         fill=color, font_size=FONT_SIZE, anchor="end", group=group)
