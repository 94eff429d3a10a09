"""
Event callouts for the overview scene.

Each AnnotationMarker is anchored to the first record dated on or after its
event date (records are ascending, so this is a bisect). Callout boxes start
just above-right of the anchor point; when a box would collide with one that
is already placed it is lifted by whole steps (box height + gap) until it
clears every placed box. Markers past the end of the data are skipped.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple
import logging

from ..data.normalize import DataSet, Record

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnnotationMarker:
    event_date: date
    label: str


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def lifted(self, dy: float) -> "Box":
        return replace(self, y=self.y - dy)

    def collides(self, other: "Box", gap: float = 0.0) -> bool:
        """True when the boxes overlap or sit closer than `gap` vertically."""
        return (
            self.x < other.right and other.x < self.right
            and self.y < other.bottom + gap and other.y < self.bottom + gap
        )


@dataclass(frozen=True)
class Callout:
    marker: AnnotationMarker
    anchor: Record
    anchor_index: int
    point: Tuple[float, float]
    box: Box
    offset: float
    leader: Tuple[float, float, float, float]
    text_pos: Tuple[float, float]


def markers_from_cfg(events: Iterable) -> List[AnnotationMarker]:
    return [AnnotationMarker(event_date=e.date, label=e.label) for e in events]


class AnnotationLayout:
    def __init__(self, cfg):
        self.cfg = cfg

    @property
    def step(self) -> float:
        return self.cfg.box_height + self.cfg.gap

    def find_anchor(self, ds: DataSet, marker: AnnotationMarker) -> Optional[int]:
        return ds.anchor_index(marker.event_date)

    def next_offset(self, placed: Sequence[Box], candidate: Box) -> float:
        """Smallest whole-step lift that keeps `candidate` clear of every placed box."""
        offset = 0.0
        while any(candidate.lifted(offset).collides(b, self.cfg.gap) for b in placed):
            offset += self.step
        return offset

    def place(self, ds: DataSet, markers: Sequence[AnnotationMarker], x_scale, y_scale,
              metric: str = "cases") -> List[Callout]:
        c = self.cfg
        placed: List[Box] = []
        out: List[Callout] = []
        for m in markers:
            idx = self.find_anchor(ds, m)
            if idx is None:
                log.debug("annotation skipped: event after last record",
                          extra={"label": m.label, "event_date": m.event_date.isoformat()})
                continue
            rec = ds[idx]
            px, py = x_scale(rec.date), y_scale(rec.metric(metric))
            base = Box(px + c.box_dx, py - c.box_dy, c.box_width, c.box_height)
            offset = self.next_offset(placed, base)
            box = base.lifted(offset)
            placed.append(box)
            out.append(Callout(
                marker=m,
                anchor=rec,
                anchor_index=idx,
                point=(px, py),
                box=box,
                offset=offset,
                leader=(px, py, box.x, box.bottom),
                text_pos=(px + c.text_dx, py - c.text_dy - offset),
            ))
        return out
