from __future__ import annotations

from ..chart.axes import axis_bottom_time, axis_left
from ..chart.common import SERIES_COLORS
from ..interaction.tooltip import HoverPoint, InteractionLayer
from .base import AppContext, draw_title, require_data


def render_interactive(ctx: AppContext) -> InteractionLayer:
    """Cases line with one hoverable marker per record; returns the layer that owns the tooltip."""
    ds = require_data(ctx)
    cfg = ctx.cfg
    surface = ctx.surface
    color = SERIES_COLORS["interactive"]
    ctx.description.set(cfg.scenes.interactive.caption)

    x = ctx.scales.temporal(ds)
    y = ctx.scales.linear_for(ds, "cases")

    surface.add_path([(x(r.date), y(r.cases)) for r in ds], stroke=color, stroke_width=2, group="series-cases")

    layer = InteractionLayer(surface, cfg.interaction)
    for i, r in enumerate(ds):
        pt = HoverPoint(index=i, record=r, x=x(r.date), y=y(r.cases))
        surface.add_circle(pt.x, pt.y, cfg.interaction.marker_radius, fill=color,
                           hover=layer.tooltip_text(r), group="markers", id=f"marker-{i}")
        layer.bind(pt)

    axis_bottom_time(surface, x, cfg.canvas.bottom_edge, count=8)
    axis_left(surface, y, cfg.canvas.left_edge)
    draw_title(ctx, cfg.scenes.interactive.title)
    return layer
