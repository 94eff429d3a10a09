from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np
import pandas as pd

from narrative_viz.data.normalize import AGE_BINS, AGE_COLUMN_ALIASES

# share of cases per age bin, same order as AGE_BINS
AGE_SHARES = np.array([0.12, 0.22, 0.18, 0.15, 0.14, 0.10, 0.06, 0.03])


def _rng(seed: int) -> np.random.Generator:
    return np.random.default_rng(seed)


def _wave(t: np.ndarray, peak: float, center: float, width: float) -> np.ndarray:
    return peak * np.exp(-((t - center) ** 2) / (2 * width ** 2))


def make_series(start: str = "2020-12-01", days: int = 273, seed: int = 42, mismatch_rate: float = 0.0) -> pd.DataFrame:
    """
    Daily cases with a winter surge and a late-summer wave; deaths and
    hospitalizations follow cases. Age bins partition cases exactly unless
    `mismatch_rate` > 0, which perturbs that share of rows.
    """
    rng = _rng(seed)
    t = np.arange(days)
    base = 1800 + _wave(t, 42000, 40, 18) + _wave(t, 15000, 250, 22)
    cases = np.maximum(0, np.round(base * rng.lognormal(0, 0.08, days))).astype(np.int64)
    deaths = np.round(cases * 0.012 * rng.uniform(0.8, 1.2, days)).astype(np.int64)
    hosp = np.round(cases * 0.065 * rng.uniform(0.8, 1.2, days)).astype(np.int64)

    ages = np.stack([rng.multinomial(n, AGE_SHARES) for n in cases])
    bad = rng.random(days) < mismatch_rate
    ages[bad, 0] += rng.integers(1, 50, bad.sum())

    df = pd.DataFrame({
        "Date": pd.date_range(start, periods=days, freq="D").strftime("%Y-%m-%d"),
        "Cases": cases,
        "Deaths": deaths,
        "Hospitalizations": hosp,
    })
    for i, b in enumerate(AGE_BINS):
        df[AGE_COLUMN_ALIASES[b]] = ages[:, i]
    return df


def main():
    ap = argparse.ArgumentParser(description="Generate a synthetic daily COVID-19 CSV")
    ap.add_argument("-o", "--out", default="data/synthetic-covid-19-data.csv")
    ap.add_argument("--start", default="2020-12-01")
    ap.add_argument("--days", type=int, default=273)
    ap.add_argument("--seed", type=int, default=42)
    ap.add_argument("--mismatch-rate", type=float, default=0.0,
                    help="fraction of rows whose age bins do not add up to cases")
    args = ap.parse_args()

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    make_series(args.start, args.days, args.seed, args.mismatch_rate).to_csv(out, index=False)
    print("wrote", out.resolve())


if __name__ == "__main__":
    main()
