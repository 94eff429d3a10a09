from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .chart.common import export_html, export_png
from .config_model.model import load_config
from .data.normalize import DataValidationError
from .interaction.tooltip import PointerEvent
from .scenes.controller import SceneController, SceneId, bootstrap
from .utils.log import configure_from_cfg, get_logger


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="narrative-viz", description="Render one scene of the COVID-19 data story.")
    ap.add_argument("--config", default=None, help="path to config.toml (default: $NARRATIVE_CFG or config/config.toml)")
    ap.add_argument("--data", default=None, help="override the CSV path from the config")
    ap.add_argument("--scene", type=int, default=None, help="1=overview, 2=age groups, 3=interactive")
    ap.add_argument("--out", default="out/story.html", help="HTML output path")
    ap.add_argument("--png", default=None, help="optional PNG output path")
    ap.add_argument("--hover", type=int, default=None,
                    help="scene 3 only: simulate the pointer entering marker N before export")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        cfg = load_config(args.config)
    except (FileNotFoundError, RuntimeError, ValidationError) as e:
        get_logger().error("config load failed", extra={"config": args.config, "error": str(e)})
        return 1
    if args.data:
        cfg.data.path = str(Path(args.data).resolve())
    log = configure_from_cfg(cfg)

    try:
        controller: SceneController = bootstrap(cfg)
    except (FileNotFoundError, DataValidationError) as e:
        log.error("data load failed", extra={"path": cfg.data.path, "error": str(e)})
        return 1

    if args.scene is not None and not controller.set_scene(args.scene):
        log.error("unknown scene", extra={"scene": args.scene, "known": [s.value for s in SceneId]})
        return 2

    if args.hover is not None:
        layer = controller.interaction
        if layer is None:
            log.error("--hover needs the interactive scene (--scene 3)")
            return 2
        try:
            pt = layer.point(args.hover)
        except KeyError as e:
            log.error("no such marker", extra={"marker": args.hover, "error": str(e)})
            return 2
        controller.dispatch(PointerEvent("enter", args.hover, pt.x, pt.y))

    fig = controller.figure()
    html = export_html(fig, args.out)
    log.info("scene exported", extra={"scene": controller.current.name.lower(), "html": str(html),
                                      "caption": controller.ctx.description.text})
    png_path = args.png or (str(Path(args.out).with_suffix(".png")) if cfg.charts.export_static_png else None)
    if png_path:
        png = export_png(fig, png_path, width=cfg.canvas.width, height=cfg.canvas.height,
                         scale=cfg.charts.png_scale, engine=cfg.charts.png_engine)
        log.info("png exported", extra={"png": png})
    return 0


if __name__ == "__main__":
    sys.exit(main())
