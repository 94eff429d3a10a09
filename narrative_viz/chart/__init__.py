from .common import (
    SERIES_COLORS,
    theme_from_cfg,
    apply_theme,
    colorway,
    export_html,
    export_png,
)
from .scales import BandScale, LinearScale, ScaleFactory, TemporalScale, nice_domain
from .surface import Element, Surface

__all__ = [
    "SERIES_COLORS", "theme_from_cfg", "apply_theme", "colorway",
    "export_html", "export_png",
    "BandScale", "LinearScale", "ScaleFactory", "TemporalScale", "nice_domain",
    "Element", "Surface",
]
