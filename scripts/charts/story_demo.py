from __future__ import annotations

import argparse
from pathlib import Path

from narrative_viz.config_model.model import load_config
from narrative_viz.interaction.tooltip import PointerEvent
from narrative_viz.scenes.controller import SceneId, bootstrap

# ---------- small I/O helper ----------

def _save(fig, outdir: Path, name: str):
    outdir.mkdir(parents=True, exist_ok=True)
    html = outdir / f"{name}.html"
    png  = outdir / f"{name}.png"
    fig.write_html(str(html), include_plotlyjs="cdn")
    # PNG if kaleido is available
    try:
        fig.write_image(str(png), scale=2, width=fig.layout.width, height=fig.layout.height)
    except Exception:
        pass


def main():
    ap = argparse.ArgumentParser(description="Walk the three scenes and save each one")
    ap.add_argument("-o", "--out", default="out/story_demo", help="output directory")
    ap.add_argument("--config", default=None, help="config.toml path")
    ap.add_argument("--hover", type=int, default=None, help="marker to hover in scene 3 (default: the peak)")
    args = ap.parse_args()
    outdir = Path(args.out)

    ctrl = bootstrap(load_config(args.config))

    # 1) Overview with event callouts
    _save(ctrl.figure(), outdir, "01_overview")
    for co in ctrl.result:
        print(f"callout {co.marker.label!r} -> {co.anchor.date} (lift {co.offset:g}px)")

    # 2) Age groups
    ctrl.set_scene(SceneId.AGGREGATE)
    _save(ctrl.figure(), outdir, "02_age_groups")
    if ctrl.result.findings:
        print(f"{len(ctrl.result.findings)} records where age bins != cases")

    # 3) Interactive, with one tooltip frozen in place
    ctrl.set_scene(SceneId.INTERACTIVE)
    ds = ctrl.ctx.dataset
    idx = args.hover if args.hover is not None else max(range(len(ds)), key=lambda i: ds[i].cases)
    pt = ctrl.interaction.point(idx)
    ctrl.dispatch(PointerEvent("enter", idx, pt.x, pt.y))
    _save(ctrl.figure(), outdir, "03_interactive")
    print("wrote", outdir.resolve())


if __name__ == "__main__":
    main()
