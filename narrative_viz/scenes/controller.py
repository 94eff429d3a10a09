"""
Scene state machine.

The controller is the only owner of "which scene is showing". Every
`set_scene` call wipes the surface and caption before drawing, so two scenes
never share the canvas, and because renderers are pure functions of the
dataset and config, repeating a call redraws the exact same elements.
"""
from __future__ import annotations
from enum import IntEnum
from typing import Any, Callable, Dict, Mapping, Optional
import logging

import plotly.graph_objects as go

from ..chart.common import apply_theme, theme_from_cfg
from ..chart.surface import Surface
from ..config_model.model import RootCfg
from ..data.normalize import DataSet, load_dataset
from ..interaction.tooltip import InteractionLayer, PointerEvent
from .aggregate import render_aggregate
from .base import AppContext, DescriptionSink
from .interactive import render_interactive
from .overview import render_overview

log = logging.getLogger(__name__)


class SceneId(IntEnum):
    OVERVIEW = 1
    AGGREGATE = 2
    INTERACTIVE = 3

    @classmethod
    def parse(cls, value: Any) -> Optional["SceneId"]:
        # bools are ints in Python but never scene ids
        if isinstance(value, bool):
            return None
        try:
            n = int(value)
        except (TypeError, ValueError, OverflowError):
            return None
        # int() truncates: 2.5 must not become scene 2
        if not isinstance(value, str) and n != value:
            return None
        try:
            return cls(n)
        except ValueError:
            return None


Renderer = Callable[[AppContext], Any]

RENDERERS: Dict[SceneId, Renderer] = {
    SceneId.OVERVIEW: render_overview,
    SceneId.AGGREGATE: render_aggregate,
    SceneId.INTERACTIVE: render_interactive,
}


class SceneController:
    def __init__(self, ctx: AppContext, renderers: Optional[Mapping[SceneId, Renderer]] = None):
        self._ctx = ctx
        self._renderers = dict(renderers or RENDERERS)
        self._current: Optional[SceneId] = None
        self._result: Any = None

    @property
    def ctx(self) -> AppContext:
        return self._ctx

    @property
    def current(self) -> Optional[SceneId]:
        return self._current

    @property
    def result(self) -> Any:
        """Whatever the active renderer returned (callouts, bin totals, interaction layer)."""
        return self._result

    @property
    def interaction(self) -> Optional[InteractionLayer]:
        return self._result if isinstance(self._result, InteractionLayer) else None

    def set_scene(self, scene_id: Any) -> bool:
        """Switch views; returns False (after clearing) when `scene_id` names no scene."""
        self._ctx.surface.clear()
        self._ctx.description.clear()
        self._result = None

        sid = SceneId.parse(scene_id)
        if sid is None or sid not in self._renderers:
            log.warning("unknown scene requested; surface left empty", extra={"scene": repr(scene_id)})
            self._current = None
            return False

        self._current = sid
        self._result = self._renderers[sid](self._ctx)
        log.debug("scene rendered", extra={"scene": sid.name.lower(), "elements": len(self._ctx.surface)})
        return True

    def dispatch(self, event: PointerEvent):
        """Route a pointer event to the interactive scene; ignored anywhere else."""
        layer = self.interaction
        if layer is None:
            return None
        return layer.dispatch(event)

    def figure(self) -> go.Figure:
        return apply_theme(self._ctx.surface.to_figure(), theme_from_cfg(self._ctx.cfg.env.theme))


def bootstrap(cfg: RootCfg, dataset: Optional[DataSet] = None) -> SceneController:
    """Load (unless a dataset is given), then render the default scene as the continuation of the load."""
    ds = dataset if dataset is not None else load_dataset(cfg.data.path, date_format=cfg.data.date_format)
    ctx = AppContext(
        cfg=cfg,
        dataset=ds,
        surface=Surface(cfg.canvas.width, cfg.canvas.height),
        description=DescriptionSink(),
    )
    controller = SceneController(ctx)
    controller.set_scene(cfg.scenes.default)
    return controller
