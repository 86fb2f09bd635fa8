"""Chart configuration, defaults and input normalisation.

The option names in :data:`DEFAULTS` follow the camelCase keys of the options
object the chart historically accepted (``innerRadius``, ``popDistance``...),
so payloads coming from JSON or from the demo app can be passed through
:func:`sanitize_options` unchanged.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import InvalidConfig, InvalidInput

SliceId = Union[str, int]
RGB = Tuple[int, int, int]

DEFAULTS = dict(
    innerRadius=100.0,
    outerRadius=160.0,
    popDistance=15.0,
    width=600,
    height=350,
    startAngle=-math.pi,
    endAngle=0.0,
    precision=0.03,
    centerRatio=0.6,
    transitionDuration=0.8,
    transitionStagger=0.05,
    transitionOverlap=0.75,
    popDuration=0.2,
    popScale=1.15,
)

# camelCase option key -> ChartConfig field
_FIELDS = {
    "innerRadius": "inner_radius",
    "outerRadius": "outer_radius",
    "popDistance": "pop_distance",
    "width": "width",
    "height": "height",
    "startAngle": "start_angle",
    "endAngle": "end_angle",
    "precision": "precision",
    "centerRatio": "center_ratio",
    "transitionDuration": "transition_duration",
    "transitionStagger": "transition_stagger",
    "transitionOverlap": "transition_overlap",
    "popDuration": "pop_duration",
    "popScale": "pop_scale",
}

DEFAULT_COLOR: RGB = (255, 255, 255)


@dataclass(frozen=True)
class ChartConfig:
    """Geometry and animation settings of one chart."""

    inner_radius: float
    outer_radius: float
    pop_distance: float
    width: float
    height: float
    start_angle: float = -math.pi
    end_angle: float = 0.0
    precision: float = 0.03
    center_ratio: float = 0.6
    transition_duration: float = 0.8
    transition_stagger: float = 0.05
    transition_overlap: float = 0.75
    pop_duration: float = 0.2
    pop_scale: float = 1.15

    @property
    def total_angle(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def center(self) -> Tuple[float, float]:
        """Scene position of the donut centre."""
        return self.width / 2.0, self.height * self.center_ratio

    def validate(self) -> "ChartConfig":
        """Raise :class:`InvalidConfig` when an invariant does not hold."""

        for name in _FIELDS.values():
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidConfig(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidConfig(f"{name} must be finite, got {value!r}")
        if self.inner_radius < 0:
            raise InvalidConfig("inner_radius must not be negative")
        if self.inner_radius >= self.outer_radius:
            raise InvalidConfig(
                f"inner_radius ({self.inner_radius}) must be smaller than outer_radius ({self.outer_radius})"
            )
        if self.start_angle == self.end_angle:
            raise InvalidConfig("start_angle and end_angle must differ")
        if self.precision <= 0:
            raise InvalidConfig("precision must be positive")
        if self.width <= 0 or self.height <= 0:
            raise InvalidConfig("width and height must be positive")
        for name in ("transition_duration", "transition_stagger", "transition_overlap", "pop_duration"):
            if getattr(self, name) < 0:
                raise InvalidConfig(f"{name} must not be negative")
        if self.pop_scale <= 0:
            raise InvalidConfig("pop_scale must be positive")
        return self


def sanitize_options(payload: Optional[Mapping[str, Any]]) -> Dict[str, float]:
    """Return a full option dict built from ``payload`` and :data:`DEFAULTS`.

    Unknown keys are ignored and values that are not numbers fall back to the
    default. Values are not range checked here, see :meth:`ChartConfig.validate`.
    """

    base: Dict[str, float] = dict(DEFAULTS)
    if not isinstance(payload, Mapping):
        return base
    for key in _FIELDS:
        raw = payload.get(key)
        if isinstance(raw, bool) or raw is None:
            continue
        try:
            base[key] = float(raw)
        except (TypeError, ValueError):
            continue
    return base


def config_from_options(payload: Optional[Mapping[str, Any]] = None) -> ChartConfig:
    options = sanitize_options(payload)
    config = ChartConfig(**{field: options[key] for key, field in _FIELDS.items()})
    return config.validate()


# ---------------------------------------------------------------------------
# Data points


@dataclass(frozen=True)
class DataPoint:
    """One value of the chart; ``id`` is the continuity key across updates."""

    id: SliceId
    value: float
    color: RGB = DEFAULT_COLOR


def parse_color(raw: Any) -> RGB:
    """Return ``raw`` as an ``(r, g, b)`` tuple.

    Accepts ``0xRRGGBB`` integers, ``"#RRGGBB"`` strings and 3-sequences.
    """

    if isinstance(raw, bool):
        raise InvalidInput(f"invalid color {raw!r}")
    if isinstance(raw, int):
        if not 0 <= raw <= 0xFFFFFF:
            raise InvalidInput(f"color out of range: {raw!r}")
        return (raw >> 16) & 0xFF, (raw >> 8) & 0xFF, raw & 0xFF
    if isinstance(raw, str):
        text = raw.strip().lstrip("#")
        if text.lower().startswith("0x"):
            text = text[2:]
        if len(text) == 3:
            text = "".join(ch * 2 for ch in text)
        if len(text) != 6:
            raise InvalidInput(f"invalid color {raw!r}")
        try:
            return parse_color(int(text, 16))
        except ValueError as exc:
            raise InvalidInput(f"invalid color {raw!r}") from exc
    if isinstance(raw, (tuple, list)) and len(raw) == 3:
        channels = []
        for channel in raw:
            if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
                raise InvalidInput(f"invalid color {raw!r}")
            channels.append(channel)
        return channels[0], channels[1], channels[2]
    raise InvalidInput(f"invalid color {raw!r}")


def _coerce_value(raw: Any) -> float:
    if isinstance(raw, bool):
        raise InvalidInput(f"invalid value {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"invalid value {raw!r}") from exc
    if not math.isfinite(value) or value < 0:
        raise InvalidInput(f"values must be finite and non-negative, got {raw!r}")
    return value


def normalize_data(data: Iterable[Any]) -> List[DataPoint]:
    """Turn ``data`` (DataPoints or ``{id?, value, color}`` mappings) into DataPoints.

    Entries without an id get ``"slice-<index>"`` from their position.
    """

    points: List[DataPoint] = []
    for index, entry in enumerate(data):
        if isinstance(entry, DataPoint):
            ident, raw_value, raw_color = entry.id, entry.value, entry.color
        elif isinstance(entry, Mapping):
            ident = entry.get("id")
            raw_value = entry.get("value")
            raw_color = entry.get("color", DEFAULT_COLOR)
        else:
            raise InvalidInput(f"unsupported data entry {entry!r}")
        if ident is None or ident == "":
            ident = f"slice-{index}"
        points.append(DataPoint(id=ident, value=_coerce_value(raw_value), color=parse_color(raw_color)))
    return points


__all__ = [
    "ChartConfig",
    "DEFAULTS",
    "DEFAULT_COLOR",
    "DataPoint",
    "RGB",
    "SliceId",
    "config_from_options",
    "normalize_data",
    "parse_color",
    "sanitize_options",
]
