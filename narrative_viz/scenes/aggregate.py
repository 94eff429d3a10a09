from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List

from ..chart.axes import axis_bottom_band, axis_left
from ..chart.common import SERIES_COLORS
from ..data.aggregate import ReconciliationFinding, age_bin_totals, reconcile_age_bins
from ..data.normalize import AGE_BINS
from .base import AppContext, draw_title, require_data


@dataclass(frozen=True)
class AggregateResult:
    totals: Dict[str, int]
    findings: List[ReconciliationFinding]


def render_aggregate(ctx: AppContext) -> AggregateResult:
    """One bar per age bin, height = exact cumulative total for that bin."""
    ds = require_data(ctx)
    cfg = ctx.cfg
    surface = ctx.surface
    ctx.description.set(cfg.scenes.aggregate.caption)

    totals = age_bin_totals(ds)
    x = ctx.scales.band(AGE_BINS)
    y = ctx.scales.linear(max(totals.values()))
    base = cfg.canvas.bottom_edge

    for b in AGE_BINS:
        top = y(totals[b])
        surface.add_rect(x(b), top, x.bandwidth, base - top, fill=SERIES_COLORS["bars"], group="bars")

    axis_bottom_band(surface, x, base)
    axis_left(surface, y, cfg.canvas.left_edge)
    draw_title(ctx, cfg.scenes.aggregate.title)

    return AggregateResult(totals=totals, findings=reconcile_age_bins(ds))
