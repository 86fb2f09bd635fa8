from __future__ import annotations

import math

import pytest

from halfdonut.chart import DonutChart


@pytest.fixture
def chart(adapter, config, clock):
    data = [{"id": "a", "value": 30}, {"id": "b", "value": 70}]
    return DonutChart(adapter, config, data, clock=clock)


def test_pop_moves_out_along_the_bisector_then_back(chart, adapter, clock, config):
    handle = adapter.by_id("a")
    timeline = chart.activate("a")
    assert timeline is not None
    assert timeline.duration == pytest.approx(2 * config.pop_duration)

    clock.advance(config.pop_duration)
    mid = (-math.pi - 0.7 * math.pi) / 2
    dx, dy, scale = handle.transform
    assert dx == pytest.approx(math.cos(mid) * config.pop_distance)
    assert dy == pytest.approx(math.sin(mid) * config.pop_distance)
    assert scale == pytest.approx(config.pop_scale)

    clock.advance(config.pop_duration / 2)
    dx_half, _dy, scale_half = handle.transform
    assert 0 < abs(dx_half) < abs(dx)
    assert 1.0 < scale_half < config.pop_scale

    clock.advance(config.pop_duration)
    assert handle.transform == (0.0, 0.0, 1.0)
    assert not clock.active


def test_click_on_drawable_routes_to_activation(chart, adapter, clock):
    seen = []
    chart.sliceActivated.connect(seen.append)
    adapter.by_id("b").click()
    assert seen == ["b"]
    assert clock.active


def test_pops_are_independent(chart, adapter, clock, config):
    chart.activate("a")
    clock.advance(config.pop_duration / 2)
    chart.activate("b")
    clock.advance(config.pop_duration / 2)
    a = adapter.by_id("a").transform
    b = adapter.by_id("b").transform
    assert a[2] == pytest.approx(config.pop_scale)
    assert 1.0 < b[2] < config.pop_scale
    assert len(chart._interaction.running) == 2


def test_pop_is_not_gated_by_a_transition(chart, adapter, clock):
    chart.update_data([{"id": "a", "value": 50}, {"id": "b", "value": 50}])
    assert chart.activate("a") is not None
    clock.advance(0.1)
    assert adapter.by_id("a").transform != (0.0, 0.0, 1.0)


def test_new_slice_can_pop_during_its_transition(chart, adapter, clock):
    chart.update_data([{"id": "a", "value": 1}, {"id": "b", "value": 1}, {"id": "c", "value": 2}])
    assert chart.registry.lookup("c") is None
    assert chart.activate("c") is not None
    clock.advance(0.2)
    dx, dy, _scale = adapter.by_id("c").transform
    # c ends up on the right half: [-pi/2, 0]
    assert dx > 0 and dy < 0


def test_unknown_slice_is_ignored(chart, clock):
    assert chart.activate("nope") is None
    assert not clock.active
