from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional
import os
import tempfile

import plotly.graph_objects as go
import plotly.io as pio

_THEMES: Dict[str, Dict[str, str]] = {
    "light": {
        "paper_bg": "#ffffff",
        "plot_bg": "#ffffff",
        "font_color": "#111111",
        "font_family": "sans-serif",
        "axis": "#000000",
        "primary": "steelblue",
        "accent": "crimson",
        "neutral": "#333333",
    },
    "dark_blue": {
        "paper_bg": "#0b1220",
        "plot_bg": "#0b1220",
        "font_color": "#e5e7eb",
        "font_family": "sans-serif",
        "axis": "#9ca3af",
        "primary": "#2563eb",
        "accent": "#ef4444",
        "neutral": "#6b7280",
    },
}

# series colors are part of the story, not the theme
SERIES_COLORS: Dict[str, str] = {
    "cases": "steelblue",
    "deaths": "crimson",
    "hospitalizations": "darkorange",
    "interactive": "seagreen",
    "bars": "teal",
}


def theme_from_cfg(theme_name: str = "light") -> Dict[str, str]:
    try:
        return dict(_THEMES[theme_name])
    except KeyError:
        raise ValueError(f"unknown theme {theme_name!r}; expected one of {sorted(_THEMES)}") from None


def colorway(theme: Dict[str, str]) -> List[str]:
    return [theme.get("primary", "steelblue"), theme.get("accent", "crimson"), theme.get("neutral", "#333")]


def apply_theme(fig: go.Figure, theme: Dict[str, str]) -> go.Figure:
    fig.update_layout(
        paper_bgcolor=theme.get("paper_bg"),
        plot_bgcolor=theme.get("plot_bg"),
        font=dict(family=theme.get("font_family"), color=theme.get("font_color")),
        colorway=colorway(theme),
    )
    return fig


PNG_ENGINES = ("playwright", "kaleido")
CHART_DIV_ID = "chart"


def _figure_html(fig: go.Figure) -> str:
    # fixed div id so the PNG path can screenshot just the chart element
    return pio.to_html(fig, full_html=True, include_plotlyjs="cdn", div_id=CHART_DIV_ID,
                       config={"displayModeBar": False})


def export_html(fig: go.Figure, out_html: Optional[str] = None) -> Path:
    """Write the figure as one HTML page (plotly.js from the CDN); a temp file when no path is given."""
    html = _figure_html(fig)
    if out_html is None:
        fd, name = tempfile.mkstemp(suffix=".html")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(html)
        return Path(name)
    out = Path(out_html)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(html, encoding="utf-8")
    return out


def _png_kaleido(fig: go.Figure, out: Path, width: int, height: int, scale: float) -> None:
    try:
        fig.write_image(str(out), format="png", width=width, height=height, scale=scale)
    except Exception as e:
        raise RuntimeError("kaleido export failed; install kaleido or use engine='playwright'") from e


def _png_playwright(fig: go.Figure, out: Path, width: int, height: int, scale: float, timeout_ms: int) -> None:
    try:
        from playwright.sync_api import sync_playwright  # lazy import
    except ImportError as e:
        raise RuntimeError("playwright not installed; pip install playwright && playwright install chromium") from e

    with tempfile.TemporaryDirectory() as tmp:
        page_path = export_html(fig, os.path.join(tmp, "scene.html"))
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True)
            try:
                page = browser.new_page(viewport={"width": int(width), "height": int(height)},
                                        device_scale_factor=float(scale))
                page.goto(page_path.resolve().as_uri(), wait_until="networkidle", timeout=timeout_ms)
                # crop to the plot div, not the whole viewport
                page.locator(f"#{CHART_DIV_ID}").screenshot(path=str(out))
            finally:
                browser.close()


def export_png(
    fig: go.Figure,
    out_path: str,
    *,
    width: int = 900,
    height: int = 500,
    scale: float = 2.0,
    engine: str = "playwright",
    timeout_ms: int = 10_000,
) -> str:
    """
    Render the figure to PNG and return the absolute path.

    playwright: load the exported HTML in headless Chromium and screenshot the
    chart element. kaleido: Plotly's static image writer.
    """
    if engine not in PNG_ENGINES:
        raise ValueError(f"unknown PNG engine {engine!r}; expected one of {PNG_ENGINES}")
    out = Path(out_path).resolve()
    out.parent.mkdir(parents=True, exist_ok=True)
    if engine == "kaleido":
        _png_kaleido(fig, out, width, height, scale)
    else:
        _png_playwright(fig, out, width, height, scale, timeout_ms)
    return str(out)
