from __future__ import annotations

import math

import pytest

from halfdonut.config import (
    DEFAULTS,
    ChartConfig,
    DataPoint,
    config_from_options,
    normalize_data,
    parse_color,
    sanitize_options,
)
from halfdonut.errors import InvalidConfig, InvalidInput


def test_defaults_match_the_half_donut():
    config = config_from_options()
    assert config.inner_radius == 100.0 and config.outer_radius == 160.0
    assert config.start_angle == -math.pi and config.end_angle == 0.0
    assert config.total_angle == math.pi
    assert config.center == (300.0, pytest.approx(210.0))


def test_sanitize_ignores_junk():
    options = sanitize_options({"innerRadius": "80", "popDistance": None, "width": True, "bogus": 1})
    assert options["innerRadius"] == 80.0
    assert options["popDistance"] == DEFAULTS["popDistance"]
    assert options["width"] == DEFAULTS["width"]
    assert "bogus" not in options
    assert sanitize_options(None) == DEFAULTS


def test_config_from_options_validates():
    with pytest.raises(InvalidConfig):
        config_from_options({"innerRadius": 200, "outerRadius": 100})


def test_validate_rejects_non_numbers():
    config = ChartConfig(inner_radius="10", outer_radius=20, pop_distance=1, width=10, height=10)  # type: ignore[arg-type]
    with pytest.raises(InvalidConfig):
        config.validate()


@pytest.mark.parametrize(
    "raw, expected",
    [
        (0x4F46E5, (0x4F, 0x46, 0xE5)),
        ("#a78bfa", (0xA7, 0x8B, 0xFA)),
        ("0xC4B5FD", (0xC4, 0xB5, 0xFD)),
        ("#fff", (255, 255, 255)),
        ((1, 2, 3), (1, 2, 3)),
        ([0, 0, 0], (0, 0, 0)),
    ],
)
def test_parse_color(raw, expected):
    assert parse_color(raw) == expected


@pytest.mark.parametrize("raw", [-1, 0x1000000, "#12345", "#zzzzzz", (1, 2), (1, 2, 300), True, None])
def test_parse_color_rejects(raw):
    with pytest.raises(InvalidInput):
        parse_color(raw)


def test_normalize_data_mixes_points_and_mappings():
    points = normalize_data([DataPoint("a", 1.0, (1, 2, 3)), {"value": "2.5"}, {"id": "", "value": 1}])
    assert points == [
        DataPoint("a", 1.0, (1, 2, 3)),
        DataPoint("slice-1", 2.5, (255, 255, 255)),
        DataPoint("slice-2", 1.0, (255, 255, 255)),
    ]


@pytest.mark.parametrize("value", [-1, math.nan, math.inf, None, "x", False])
def test_normalize_data_rejects_bad_values(value):
    with pytest.raises(InvalidInput):
        normalize_data([{"value": value}])


def test_normalize_data_rejects_unknown_entries():
    with pytest.raises(InvalidInput):
        normalize_data([42])
