from __future__ import annotations

import random

import pytest

pytest.importorskip("PyQt5.QtWidgets")

from halfdonut.app import INITIAL_DATA, ChartWindow, build_parser, random_data


def test_random_data_keeps_identity_and_colors():
    data = random_data(INITIAL_DATA, random.Random(7))
    assert [d["id"] for d in data] == [d["id"] for d in INITIAL_DATA]
    assert [d["color"] for d in data] == [d["color"] for d in INITIAL_DATA]
    assert all(0.0 <= d["value"] < 30.0 for d in data)
    assert INITIAL_DATA[0]["value"] == 30


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert (args.width, args.height, args.interval, args.verbose) == (600, 350, 3000, False)


def test_window_builds_and_tears_down(qapp):
    window = ChartWindow(600, 350, 3000)
    chart = window.chart
    assert chart.registry.ids() == ["segment1", "segment2", "segment3", "segment4"]
    assert chart.label_text == "€5,000,000"

    window.slider.setValue(1_000_000)
    assert chart.label_text == "€1,000,000"

    window.refresh_data()
    assert chart.engine.is_transitioning
    window.clock.advance(5.0)
    assert not chart.engine.is_transitioning

    window.close()
    assert chart.is_destroyed
    assert window.scene.items() == []
