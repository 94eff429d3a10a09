import datetime as dt

import pytest

from narrative_viz.chart.surface import Surface
from narrative_viz.data.normalize import Record
from narrative_viz.interaction.tooltip import HoverPoint, InteractionLayer, PointerEvent, TOOLTIP_ID


@pytest.fixture
def layer(cfg, tiny_ds):
    lay = InteractionLayer(Surface(900, 500), cfg.interaction)
    for i, r in enumerate(tiny_ds):
        lay.bind(HoverPoint(index=i, record=r, x=100.0 * (i + 1), y=200.0))
    return lay


def _tooltips(layer):
    return layer.surface.select(group="tooltip")


def test_enter_creates_tooltip_near_pointer(layer):
    handle = layer.on_pointer_enter(0, 100, 200)
    (el,) = _tooltips(layer)
    assert el.id == handle.element_id == TOOLTIP_ID
    assert el.attr("text") == "Cases: 10 on Jan 01, 2021"
    assert (el.attr("x"), el.attr("y")) == (110.0, 200.0)


def test_pointer_is_made_relative_to_surface(cfg, tiny_ds):
    lay = InteractionLayer(Surface(900, 500), cfg.interaction, origin=(10, 20))
    lay.bind(HoverPoint(index=0, record=tiny_ds[0], x=0, y=0))
    lay.on_pointer_enter(0, 100, 200)
    (el,) = lay.surface.select(group="tooltip")
    assert (el.attr("x"), el.attr("y")) == (100.0, 180.0)


def test_leave_removes_tooltip(layer):
    layer.on_pointer_enter(1, 0, 0)
    assert layer.on_pointer_leave(1) is True
    assert _tooltips(layer) == []
    assert layer.active is None
    assert layer.hide() is False


def test_rapid_reentry_keeps_a_single_tooltip(layer):
    events = [
        PointerEvent("enter", 0, 100, 200),
        PointerEvent("enter", 1, 200, 200),
        PointerEvent("leave", 0),
        PointerEvent("enter", 2, 300, 200),
        PointerEvent("enter", 1, 200, 200),
        PointerEvent("leave", 2),
    ]
    last_entered = None
    for ev in events:
        layer.dispatch(ev)
        tips = _tooltips(layer)
        assert len(tips) <= 1
        if ev.kind == "enter":
            last_entered = ev.target
        if tips:
            rec = layer.point(last_entered).record
            assert tips[0].attr("text") == layer.tooltip_text(rec)
    assert layer.active.marker == 1
    layer.dispatch(PointerEvent("leave", 1))
    assert _tooltips(layer) == []


def test_grouped_thousands_and_long_date(cfg):
    lay = InteractionLayer(Surface(900, 500), cfg.interaction)
    rec = Record(date=dt.date(2021, 7, 4), cases=1_532_410, deaths=0, hospitalizations=0)
    assert lay.tooltip_text(rec) == "Cases: 1,532,410 on Jul 04, 2021"


def test_unknown_marker_and_event_kind(layer):
    with pytest.raises(KeyError):
        layer.on_pointer_enter(99, 0, 0)
    with pytest.raises(ValueError):
        layer.dispatch(PointerEvent("click", 0))


def test_show_defaults_to_the_marker_position(cfg, tiny_ds):
    icfg = cfg.interaction.model_copy(update={"tooltip_dx": 10.0, "tooltip_dy": -5.0})
    lay = InteractionLayer(Surface(900, 500), icfg)
    pt = HoverPoint(index=2, record=tiny_ds[2], x=300.0, y=150.0)
    lay.bind(pt)
    handle = lay.show(pt)
    (el,) = lay.surface.select(group="tooltip")
    assert (el.attr("x"), el.attr("y")) == (310.0, 145.0)
    assert handle.marker == 2
    assert handle.text == el.attr("text") == "Cases: 15 on Jan 03, 2021"
