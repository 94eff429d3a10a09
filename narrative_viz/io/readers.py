from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional
import pandas as pd

_EXTS = (".csv", ".json", ".ndjson", ".txt")


def _infer_ext(path: str) -> str:
    p = path.lower()
    for e in _EXTS:
        if p.endswith(e):
            return e
    # default to csv if unknown
    return ".csv"


def read_table(
    path: str | Path,
    *,
    fmt: Optional[str] = None,
    csv_options: Optional[Dict[str, Any]] = None,
) -> pd.DataFrame:
    """
    Read a raw table into a DataFrame without any type coercion.
    - csv/txt: every cell stays a string, blanks stay "" (validation happens downstream)
    - json: a JSON array of objects; ndjson: one object per line
    Raises FileNotFoundError when the path does not exist.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"data file not found: {p}")
    fmt = (fmt or _infer_ext(str(p))).lstrip(".").lower()

    if fmt == "ndjson":
        return pd.read_json(p, lines=True, dtype=False, convert_dates=False)
    if fmt == "json":
        return pd.read_json(p, dtype=False, convert_dates=False)
    opts = {"dtype": str, "keep_default_na": False}
    opts.update(csv_options or {})
    return pd.read_csv(p, **opts)
