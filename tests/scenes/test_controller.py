import json

import pytest

from narrative_viz.interaction.tooltip import PointerEvent
from narrative_viz.scenes.base import AppContext, DescriptionSink
from narrative_viz.scenes.controller import SceneController, SceneId, bootstrap


@pytest.fixture
def controller(cfg, tiny_ds):
    return bootstrap(cfg, dataset=tiny_ds)


def test_bootstrap_renders_default_scene(controller, cfg):
    assert controller.current is SceneId.OVERVIEW
    assert controller.ctx.description.text == cfg.scenes.overview.caption
    assert len(controller.ctx.surface) > 0


@pytest.mark.parametrize("scene", list(SceneId))
def test_set_scene_is_idempotent(controller, scene):
    assert controller.set_scene(scene)
    first = controller.ctx.surface.snapshot()
    first_fig = controller.figure().to_json()
    assert controller.set_scene(scene)
    assert controller.ctx.surface.snapshot() == first
    assert controller.figure().to_json() == first_fig


def test_switching_leaves_nothing_from_the_previous_scene(controller):
    controller.set_scene(SceneId.OVERVIEW)
    overview_groups = {e.group for e in controller.ctx.surface.elements}
    controller.set_scene(SceneId.AGGREGATE)
    groups = {e.group for e in controller.ctx.surface.elements}
    assert "bars" in groups
    assert not ({"series-cases", "series-label", "annotation"} & groups)
    assert overview_groups - groups  # overview-only groups are gone
    assert controller.ctx.description.text == controller.ctx.cfg.scenes.aggregate.caption


def test_overview_aggregate_overview_round_trip(controller):
    controller.set_scene(1)
    before = controller.ctx.surface.snapshot()
    controller.set_scene(2)
    controller.set_scene(1)
    assert controller.ctx.surface.snapshot() == before


@pytest.mark.parametrize("bad", [0, 4, "x", None, 2.5, 1.9, True, False, "2.5"])
def test_unknown_scene_clears_and_reports(controller, bad):
    assert controller.set_scene(bad) is False
    assert len(controller.ctx.surface) == 0
    assert controller.ctx.description.text == ""
    assert controller.current is None
    assert controller.result is None


def test_scene_ids_accept_numeric_strings(controller):
    assert controller.set_scene("3")


@pytest.mark.parametrize("value, expected", [
    (1, SceneId.OVERVIEW), ("2", SceneId.AGGREGATE), (3.0, SceneId.INTERACTIVE),
    (2.5, None), (True, None), (float("nan"), None), (float("inf"), None),
])
def test_scene_id_parse_rejects_non_integral_values(controller, value, expected):
    assert SceneId.parse(value) is expected
    assert controller.current is SceneId.INTERACTIVE


def test_pointer_events_only_reach_the_interactive_scene(controller):
    assert controller.dispatch(PointerEvent("enter", 0, 10, 10)) is None
    controller.set_scene(3)
    controller.dispatch(PointerEvent("enter", 0, 10, 10))
    assert len(controller.ctx.surface.select(group="tooltip")) == 1
    controller.set_scene(1)
    assert controller.ctx.surface.select(group="tooltip") == []
    assert controller.interaction is None
    # re-entering the scene starts without a tooltip
    controller.set_scene(3)
    assert controller.ctx.surface.select(group="tooltip") == []


def test_figure_carries_hover_text_and_pixel_axes(controller):
    controller.set_scene(3)
    fig = json.loads(controller.figure().to_json())
    markers = [t for t in fig["data"] if t.get("mode") == "markers"]
    assert markers and markers[0]["hovertext"][0] == "Cases: 10 on Jan 01, 2021"
    assert fig["layout"]["yaxis"]["range"] == [500, 0]
    assert fig["layout"]["width"] == 900


def test_context_requires_loaded_dataset(cfg):
    from narrative_viz.chart.surface import Surface
    with pytest.raises(TypeError):
        AppContext(cfg=cfg, dataset=None, surface=Surface(900, 500), description=DescriptionSink())


def test_custom_renderer_table(ctx):
    calls = []
    ctrl = SceneController(ctx, renderers={SceneId.OVERVIEW: lambda c: calls.append(c)})
    assert ctrl.set_scene(1)
    assert ctrl.set_scene(2) is False
    assert calls == [ctx]
