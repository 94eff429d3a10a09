from __future__ import annotations
from typing import List, Literal, Optional
from pathlib import Path
import datetime as dt
import os
from pydantic import (
    BaseModel,
    ConfigDict,
    PrivateAttr,
    model_validator,
)


# ---------- Leaf models ----------

class EnvCfg(BaseModel):
    project_name: str = "narrative-viz"
    region: str = "California"
    theme: str = "light"


class DataCfg(BaseModel):
    path: str = "data/covid-19-data.csv"
    date_format: str = "%Y-%m-%d"


class MarginCfg(BaseModel):
    top: int = 50
    right: int = 50
    bottom: int = 50
    left: int = 80


class CanvasCfg(BaseModel):
    width: int = 900
    height: int = 500
    margin: MarginCfg = MarginCfg()

    @model_validator(mode="after")
    def _plot_area_ok(self):
        m = self.margin
        if self.width - m.left - m.right <= 0 or self.height - m.top - m.bottom <= 0:
            raise ValueError(
                f"margins {m.model_dump()} leave no plot area on a {self.width}x{self.height} canvas"
            )
        return self

    # plot-area edges in pixel space (y grows downward)
    @property
    def left_edge(self) -> float:
        return float(self.margin.left)

    @property
    def right_edge(self) -> float:
        return float(self.width - self.margin.right)

    @property
    def top_edge(self) -> float:
        return float(self.margin.top)

    @property
    def bottom_edge(self) -> float:
        return float(self.height - self.margin.bottom)


class SceneTextCfg(BaseModel):
    title: str
    caption: str


class ScenesCfg(BaseModel):
    default: Literal[1, 2, 3] = 1
    overview: SceneTextCfg = SceneTextCfg(
        title="Overview of COVID-19 in {region}",
        caption="Scene 1: Overall trends in cases, deaths, and hospitalizations over time.",
    )
    aggregate: SceneTextCfg = SceneTextCfg(
        title="Cumulative COVID-19 Cases by Age Group",
        caption="Scene 2: Cumulative COVID-19 cases by age group.",
    )
    interactive: SceneTextCfg = SceneTextCfg(
        title="Interactive Exploration of Daily COVID-19 Cases",
        caption=(
            "Scene 3: Interactive exploration of daily COVID-19 case counts - "
            "hover over any data point to see more details."
        ),
    )


class EventCfg(BaseModel):
    date: dt.date
    label: str


class AnnotationsCfg(BaseModel):
    box_width: float = 150.0
    box_height: float = 30.0
    box_dx: float = 5.0        # box left edge relative to the anchor point
    box_dy: float = 40.0       # box top edge above the anchor point
    gap: float = 10.0          # vertical clearance between stacked boxes
    text_dx: float = 10.0
    text_dy: float = 20.0
    events: List[EventCfg] = [
        EventCfg(date=dt.date(2021, 1, 1), label="Post-Holiday Surge"),
        EventCfg(date=dt.date(2021, 4, 15), label="Vaccine Eligibility Opens"),
        EventCfg(date=dt.date(2021, 7, 15), label="Delta Variant Spike"),
    ]


class InteractionCfg(BaseModel):
    tooltip_dx: float = 10.0
    tooltip_dy: float = 0.0
    marker_radius: float = 3.0
    date_format: str = "%b %d, %Y"


class ChartsCfg(BaseModel):
    export_static_png: bool = False
    png_engine: Literal["playwright", "kaleido"] = "playwright"
    png_scale: float = 2.0


class LoggingCfg(BaseModel):
    level: str = "INFO"
    structured_json: bool = True


# ---------- Root ----------

class RootCfg(BaseModel):
    model_config = ConfigDict(extra="ignore")

    env: EnvCfg = EnvCfg()
    data: DataCfg = DataCfg()
    canvas: CanvasCfg = CanvasCfg()
    scenes: ScenesCfg = ScenesCfg()
    annotations: AnnotationsCfg = AnnotationsCfg()
    interaction: InteractionCfg = InteractionCfg()
    charts: ChartsCfg = ChartsCfg()
    logging: LoggingCfg = LoggingCfg()

    # Private attribute (not a field); used only to resolve relative paths
    _config_dir: Optional[Path] = PrivateAttr(default=None)

    def _normalize_paths(self) -> "RootCfg":
        if self._config_dir:
            # A config living in a conventional "config" folder resolves against the
            # project root (its parent); otherwise against the config file's own folder.
            base_dir = self._config_dir.parent if self._config_dir.name.lower() == "config" else self._config_dir
            p = Path(self.data.path)
            if not p.is_absolute():
                self.data.path = str((base_dir / p).resolve())
        return self

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str]) -> "RootCfg":
        try:
            import tomllib  # py>=3.11
        except ImportError:
            import tomli as tomllib

        p = Path(path)
        text = p.read_text(encoding="utf-8-sig")
        try:
            raw = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            snippet = text.strip()[:80].replace("\n", "\\n")
            raise RuntimeError(f"Failed to parse TOML at {p}. First chars: {snippet!r}") from e

        cfg = cls(**raw)
        cfg._config_dir = p.parent.resolve()
        return cfg._normalize_paths()

    @classmethod
    def load(cls, path: str | None = None) -> "RootCfg":
        final = Path(path or os.environ.get("NARRATIVE_CFG", "config/config.toml")).resolve()
        return cls.from_toml(final)


def load_config(path: str | None = None) -> RootCfg:
    return RootCfg.load(path)
