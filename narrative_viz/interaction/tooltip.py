"""
Hover correlation for the interactive scene.

Markers are bound to their records up front; pointer events name the marker
they hit, so no nearest-point search is needed. The layer owns the only
tooltip: `show` always removes the live one first, which keeps the count at
zero or one however fast the pointer moves across adjacent markers.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Literal, Optional, Tuple
import logging

from ..chart.surface import Surface
from ..data.normalize import Record
from ..utils.time import format_long_date

log = logging.getLogger(__name__)

TOOLTIP_ID = "tooltip"


@dataclass(frozen=True)
class HoverPoint:
    index: int
    record: Record
    x: float
    y: float


@dataclass(frozen=True)
class PointerEvent:
    kind: Literal["enter", "leave"]
    target: int
    client_x: float = 0.0
    client_y: float = 0.0


@dataclass(frozen=True)
class TooltipHandle:
    element_id: str
    marker: int
    text: str


class InteractionLayer:
    def __init__(self, surface: Surface, cfg, origin: Tuple[float, float] = (0.0, 0.0)):
        self.surface = surface
        self.cfg = cfg
        self.origin = origin
        self._points: Dict[int, HoverPoint] = {}
        self._active: Optional[TooltipHandle] = None

    @property
    def active(self) -> Optional[TooltipHandle]:
        return self._active

    def bind(self, point: HoverPoint) -> None:
        self._points[point.index] = point

    def point(self, marker: int) -> HoverPoint:
        try:
            return self._points[marker]
        except KeyError:
            raise KeyError(f"no marker bound at index {marker}") from None

    def relative(self, client_x: float, client_y: float) -> Tuple[float, float]:
        """Pointer position in surface coordinates."""
        return client_x - self.origin[0], client_y - self.origin[1]

    def tooltip_text(self, record: Record) -> str:
        return f"Cases: {record.cases:,} on {format_long_date(record.date, self.cfg.date_format)}"

    def show(self, point: HoverPoint, at: Optional[Tuple[float, float]] = None) -> TooltipHandle:
        self.hide()
        x, y = at if at is not None else (point.x, point.y)
        text = self.tooltip_text(point.record)
        el = self.surface.add_text(x + self.cfg.tooltip_dx, y + self.cfg.tooltip_dy, text,
                                   fill="black", font_size=12, group="tooltip", id=TOOLTIP_ID)
        self._active = TooltipHandle(element_id=el.id, marker=point.index, text=text)
        return self._active

    def hide(self) -> bool:
        if self._active is None:
            return False
        removed = self.surface.remove(self._active.element_id)
        self._active = None
        return removed

    def on_pointer_enter(self, marker: int, client_x: float, client_y: float) -> TooltipHandle:
        return self.show(self.point(marker), self.relative(client_x, client_y))

    def on_pointer_leave(self, marker: int) -> bool:
        # a late leave from a marker that no longer owns the tooltip is ignored
        if self._active is None or self._active.marker != marker:
            return False
        return self.hide()

    def dispatch(self, event: PointerEvent):
        if event.kind == "enter":
            return self.on_pointer_enter(event.target, event.client_x, event.client_y)
        if event.kind == "leave":
            return self.on_pointer_leave(event.target)
        raise ValueError(f"unknown pointer event kind {event.kind!r}")
