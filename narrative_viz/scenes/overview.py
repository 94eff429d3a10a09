from __future__ import annotations
from typing import List

from ..chart.axes import axis_bottom_time, axis_left
from ..chart.common import SERIES_COLORS
from ..data.normalize import METRICS
from ..layout.annotations import AnnotationLayout, Callout, markers_from_cfg
from .base import AppContext, draw_title, require_data

LABEL_X_FROM_RIGHT = 130
LABEL_STAGGER = {"cases": 0, "deaths": -20, "hospitalizations": -40}


def render_overview(ctx: AppContext) -> List[Callout]:
    """Cases, deaths and hospitalizations on one cases-driven y-scale, plus event callouts."""
    ds = require_data(ctx)
    cfg = ctx.cfg
    surface = ctx.surface
    ctx.description.set(cfg.scenes.overview.caption)

    x = ctx.scales.temporal(ds)
    # cases dominate, so one scale for all three series
    y = ctx.scales.linear_for(ds, "cases")

    axis_bottom_time(surface, x, cfg.canvas.bottom_edge, count=8)
    axis_left(surface, y, cfg.canvas.left_edge)

    latest = ds.last
    for metric in METRICS:
        color = SERIES_COLORS[metric]
        surface.add_path([(x(r.date), y(r.metric(metric))) for r in ds],
                         stroke=color, stroke_width=2, group=f"series-{metric}")
        surface.add_text(cfg.canvas.width - LABEL_X_FROM_RIGHT, y(latest.metric(metric)) + LABEL_STAGGER[metric],
                         metric.capitalize(), fill=color, font_size=14, group="series-label")

    draw_title(ctx, cfg.scenes.overview.title)

    callouts = AnnotationLayout(cfg.annotations).place(ds, markers_from_cfg(cfg.annotations.events), x, y)
    for co in callouts:
        b = co.box
        surface.add_rect(b.x, b.y, b.width, b.height, fill="white", stroke="#333", stroke_width=0.5,
                         group="annotation")
        surface.add_line(*co.leader, stroke="#333", dash="4 2", group="annotation")
        surface.add_text(*co.text_pos, co.marker.label, fill="#111", font_size=12, group="annotation")
    return callouts
