from pathlib import Path
from typing import Dict, List

import pandas as pd
import pytest

from narrative_viz.chart.surface import Surface
from narrative_viz.config_model.model import load_config
from narrative_viz.data.normalize import AGE_BINS, AGE_COLUMN_ALIASES, normalize_rows
from narrative_viz.scenes.base import AppContext, DescriptionSink


@pytest.fixture(scope="session")
def project_root() -> Path:
    return Path(__file__).resolve().parents[1]


@pytest.fixture(scope="session")
def cfg_path(project_root: Path) -> Path:
    return project_root / "config" / "config.toml"


@pytest.fixture
def cfg(cfg_path: Path):
    # function-scoped: some tests mutate it
    return load_config(str(cfg_path))


@pytest.fixture
def make_rows():
    """Build raw CSV-shaped rows: (date, cases, deaths, hosp, ages-or-None)."""
    def _make(raw: List[tuple]) -> pd.DataFrame:
        out: List[Dict[str, str]] = []
        for d, cases, deaths, hosp, ages in raw:
            row = {"Date": d, "Cases": str(cases), "Deaths": str(deaths), "Hospitalizations": str(hosp)}
            ages = ages if ages is not None else [cases] + [0] * (len(AGE_BINS) - 1)
            for b, v in zip(AGE_BINS, ages):
                row[AGE_COLUMN_ALIASES[b]] = str(v)
            out.append(row)
        return pd.DataFrame(out)
    return _make


TINY_ROWS = [
    ("2021-01-01", 10, 1, 3, [1, 2, 1, 1, 1, 1, 2, 1]),
    ("2021-01-02", 20, 2, 4, [2, 4, 2, 2, 3, 3, 2, 2]),
    ("2021-01-03", 15, 1, 5, [1, 2, 2, 2, 2, 2, 2, 2]),
]


@pytest.fixture
def tiny_df(make_rows) -> pd.DataFrame:
    return make_rows(TINY_ROWS)


@pytest.fixture
def tiny_ds(tiny_df):
    return normalize_rows(tiny_df)


@pytest.fixture
def ctx(cfg, tiny_ds) -> AppContext:
    return AppContext(
        cfg=cfg,
        dataset=tiny_ds,
        surface=Surface(cfg.canvas.width, cfg.canvas.height),
        description=DescriptionSink(),
    )


@pytest.fixture
def tmp_out(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir(parents=True, exist_ok=True)
    return d
