from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..chart.scales import ScaleFactory
from ..chart.surface import Surface
from ..config_model.model import RootCfg
from ..data.normalize import DataSet


class DescriptionSink:
    """The single caption line shown beside the chart."""

    def __init__(self) -> None:
        self._text = ""

    @property
    def text(self) -> str:
        return self._text

    def set(self, text: str) -> None:
        self._text = text

    def clear(self) -> None:
        self._text = ""


@dataclass(frozen=True)
class AppContext:
    """Everything a renderer may touch; built once after the dataset has loaded."""
    cfg: RootCfg
    dataset: DataSet
    surface: Surface
    description: DescriptionSink

    def __post_init__(self):
        if not isinstance(self.dataset, DataSet):
            raise TypeError("AppContext needs a loaded DataSet")

    @property
    def scales(self) -> ScaleFactory:
        return ScaleFactory(self.cfg.canvas)


def draw_title(ctx: AppContext, text: str) -> None:
    c = ctx.cfg.canvas
    ctx.surface.add_text(c.width / 2, c.margin.top / 2, text.format(region=ctx.cfg.env.region),
                         font_size=18, anchor="middle", group="title")


def require_data(ctx: AppContext) -> DataSet:
    ds: Optional[DataSet] = ctx.dataset
    if ds is None or len(ds) == 0:
        raise RuntimeError("render called before the dataset was loaded")
    return ds
