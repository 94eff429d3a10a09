"""
Retained-mode drawing surface.

Renderers append primitive elements (paths, lines, rects, text, circles) in
pixel coordinates; `to_figure` materializes the current element list as a
Plotly figure whose axes are pinned to the canvas so one pixel is one unit.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import plotly.graph_objects as go

Point = Tuple[float, float]

_ANCHORS = {"start": "left", "middle": "center", "end": "right"}


@dataclass(frozen=True)
class Element:
    id: str
    kind: str                      # path | line | rect | text | circle
    attrs: Dict[str, Any] = field(default_factory=dict)
    group: str = ""

    def attr(self, name: str, default: Any = None) -> Any:
        return self.attrs.get(name, default)


class Surface:
    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self._elements: Dict[str, Element] = {}
        self._seq = 0

    # ---------- bookkeeping ----------

    def clear(self) -> None:
        """Drop every element; ids restart so identical draws produce identical ids."""
        self._elements.clear()
        self._seq = 0

    def _add(self, kind: str, attrs: Dict[str, Any], *, group: str = "", id: Optional[str] = None) -> Element:
        if id is None:
            self._seq += 1
            id = f"{kind}-{self._seq}"
        if id in self._elements:
            raise ValueError(f"element id {id!r} already on the surface")
        el = Element(id=id, kind=kind, attrs=attrs, group=group)
        self._elements[id] = el
        return el

    def remove(self, id: str) -> bool:
        return self._elements.pop(id, None) is not None

    def get(self, id: str) -> Optional[Element]:
        return self._elements.get(id)

    def __contains__(self, id: object) -> bool:
        return id in self._elements

    def __len__(self) -> int:
        return len(self._elements)

    @property
    def elements(self) -> Tuple[Element, ...]:
        return tuple(self._elements.values())

    def select(self, kind: Optional[str] = None, group: Optional[str] = None) -> List[Element]:
        return [
            e for e in self._elements.values()
            if (kind is None or e.kind == kind) and (group is None or e.group == group)
        ]

    def snapshot(self) -> Tuple[Tuple[Any, ...], ...]:
        """Comparable, order-preserving dump of everything drawn."""
        return tuple(
            (e.id, e.kind, e.group, tuple(sorted((k, _freeze(v)) for k, v in e.attrs.items())))
            for e in self._elements.values()
        )

    # ---------- primitives ----------

    def add_path(self, points: Sequence[Point], *, stroke: str, stroke_width: float = 2.0,
                 group: str = "", id: Optional[str] = None) -> Element:
        pts = tuple((float(x), float(y)) for x, y in points)
        return self._add("path", {"points": pts, "stroke": stroke, "stroke_width": stroke_width, "fill": "none"},
                         group=group, id=id)

    def add_line(self, x1: float, y1: float, x2: float, y2: float, *, stroke: str = "#333",
                 stroke_width: float = 1.0, dash: Optional[str] = None,
                 group: str = "", id: Optional[str] = None) -> Element:
        return self._add("line", {"x1": float(x1), "y1": float(y1), "x2": float(x2), "y2": float(y2),
                                  "stroke": stroke, "stroke_width": stroke_width, "dash": dash},
                         group=group, id=id)

    def add_rect(self, x: float, y: float, width: float, height: float, *, fill: str = "white",
                 stroke: Optional[str] = None, stroke_width: float = 0.0,
                 group: str = "", id: Optional[str] = None) -> Element:
        return self._add("rect", {"x": float(x), "y": float(y), "width": float(width), "height": float(height),
                                  "fill": fill, "stroke": stroke, "stroke_width": stroke_width},
                         group=group, id=id)

    def add_text(self, x: float, y: float, text: str, *, fill: str = "#111", font_size: int = 12,
                 anchor: str = "start", group: str = "", id: Optional[str] = None) -> Element:
        if anchor not in _ANCHORS:
            raise ValueError(f"unknown text anchor {anchor!r}")
        return self._add("text", {"x": float(x), "y": float(y), "text": str(text), "fill": fill,
                                  "font_size": font_size, "anchor": anchor},
                         group=group, id=id)

    def add_circle(self, cx: float, cy: float, r: float, *, fill: str, hover: Optional[str] = None,
                   group: str = "", id: Optional[str] = None) -> Element:
        return self._add("circle", {"cx": float(cx), "cy": float(cy), "r": float(r), "fill": fill, "hover": hover},
                         group=group, id=id)

    # ---------- materialization ----------

    def to_figure(self) -> go.Figure:
        fig = go.Figure()
        shapes: List[Dict[str, Any]] = []
        annotations: List[Dict[str, Any]] = []

        for batch in _batched_circles(self._elements.values()):
            first = batch[0]
            fig.add_scatter(
                x=[e.attrs["cx"] for e in batch], y=[e.attrs["cy"] for e in batch],
                mode="markers", name=first.group or first.id, showlegend=False,
                marker=dict(size=2 * first.attrs["r"], color=first.attrs["fill"]),
                hovertext=[e.attrs["hover"] or "" for e in batch],
                hovertemplate="%{hovertext}<extra></extra>",
            )

        for e in self._elements.values():
            a = e.attrs
            if e.kind == "path":
                xs, ys = zip(*a["points"]) if a["points"] else ((), ())
                fig.add_scatter(x=list(xs), y=list(ys), mode="lines", name=e.id, showlegend=False,
                                line=dict(color=a["stroke"], width=a["stroke_width"]), hoverinfo="skip")
            elif e.kind == "line":
                line = dict(color=a["stroke"], width=a["stroke_width"])
                if a["dash"]:
                    line["dash"] = ",".join(f"{p}px" for p in a["dash"].split())
                shapes.append(dict(type="line", name=e.id, xref="x", yref="y", layer="above",
                                   x0=a["x1"], y0=a["y1"], x1=a["x2"], y1=a["y2"], line=line))
            elif e.kind == "rect":
                shapes.append(dict(type="rect", name=e.id, xref="x", yref="y", layer="above",
                                   x0=a["x"], y0=a["y"], x1=a["x"] + a["width"], y1=a["y"] + a["height"],
                                   fillcolor=a["fill"],
                                   line=dict(color=a["stroke"] or a["fill"], width=a["stroke_width"])))
            elif e.kind == "text":
                annotations.append(dict(name=e.id, x=a["x"], y=a["y"], xref="x", yref="y", text=a["text"],
                                        showarrow=False, xanchor=_ANCHORS[a["anchor"]], yanchor="bottom",
                                        font=dict(size=a["font_size"], color=a["fill"])))

        fig.update_layout(
            width=self.width, height=self.height,
            margin=dict(l=0, r=0, t=0, b=0),
            shapes=shapes, annotations=annotations,
            paper_bgcolor="#ffffff",
            plot_bgcolor="#ffffff",
            hovermode="closest",
        )
        fig.update_xaxes(range=[0, self.width], visible=False, fixedrange=True)
        # pixel space: y grows downward
        fig.update_yaxes(range=[self.height, 0], visible=False, fixedrange=True)
        return fig


def _freeze(v: Any) -> Any:
    if isinstance(v, list):
        return tuple(_freeze(x) for x in v)
    return v


def _batched_circles(elements: Iterable[Element]) -> List[List[Element]]:
    """Group consecutive circles sharing group/radius/fill into one marker trace each."""
    batches: List[List[Element]] = []
    key = None
    for e in elements:
        if e.kind != "circle":
            key = None
            continue
        k = (e.group, e.attrs["r"], e.attrs["fill"])
        if k != key or not batches:
            batches.append([])
            key = k
        batches[-1].append(e)
    return batches
