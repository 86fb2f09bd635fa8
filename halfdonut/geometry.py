"""Angle allocation and annulus outlines for the donut segments.

Everything in this module is pure: the transition engine computes its targets
here before any animation exists and feeds interpolated angles back in on
every frame.
"""

from __future__ import annotations

import math
from collections import OrderedDict
from typing import TYPE_CHECKING, List, Sequence, Tuple

from .errors import InvalidInput

if TYPE_CHECKING:  # pragma: no cover
    from .config import DataPoint, SliceId

Point = Tuple[float, float]
Segment = Tuple["SliceId", float, float]

__all__ = [
    "Point",
    "Segment",
    "build_arc_polygon",
    "compute_angles",
    "mid_angle",
    "pop_offset",
    "total_span",
]


def compute_angles(data: Sequence["DataPoint"], start_angle: float, end_angle: float) -> List[Segment]:
    """Partition ``[start_angle, end_angle]`` proportionally to the values.

    Parameters
    ----------
    data:
        Ordered data points. When an id appears more than once the last value
        wins and the segment keeps the position of the first occurrence.
    start_angle, end_angle:
        Angular range in radians. ``end_angle`` may be smaller than
        ``start_angle``, the segments then run clockwise.

    Returns ``(id, start, end)`` triples. Each start is the previous end and
    the last end is ``end_angle`` itself, so no gap can open at the boundary.
    """

    values: "OrderedDict[SliceId, float]" = OrderedDict()
    for point in data:
        value = point.value
        if not math.isfinite(value) or value < 0:
            raise InvalidInput(f"values must be finite and non-negative, got {value!r} for {point.id!r}")
        values[point.id] = value

    total = sum(values.values())
    if total <= 0:
        raise InvalidInput(f"total value must be positive, got {total!r}")

    total_angle = end_angle - start_angle
    segments: List[Segment] = []
    current = start_angle
    last_index = len(values) - 1
    for index, (ident, value) in enumerate(values.items()):
        if index == last_index:
            end = end_angle
        else:
            end = current + (value / total) * total_angle
        segments.append((ident, current, end))
        current = end
    return segments


def build_arc_polygon(
    inner_radius: float,
    outer_radius: float,
    start_angle: float,
    end_angle: float,
    precision: float,
) -> List[Point]:
    """Return the closed outline of the annulus segment between two angles.

    The outer arc is walked from ``start_angle`` to ``end_angle`` in steps of
    ``precision`` radians followed by the exact end point, then the inner arc
    is walked back to ``start_angle`` and closed on the exact start point.
    A zero-width segment yields an empty outline.
    """

    if precision <= 0:
        raise ValueError("precision must be positive")
    span = end_angle - start_angle
    if span == 0:
        return []

    step = math.copysign(precision, span)
    steps = int(math.floor(abs(span) / precision))
    points: List[Point] = []

    for i in range(steps + 1):
        angle = start_angle + i * step
        points.append((math.cos(angle) * outer_radius, math.sin(angle) * outer_radius))
    points.append((math.cos(end_angle) * outer_radius, math.sin(end_angle) * outer_radius))

    for i in range(steps + 1):
        angle = end_angle - i * step
        points.append((math.cos(angle) * inner_radius, math.sin(angle) * inner_radius))
    points.append((math.cos(start_angle) * inner_radius, math.sin(start_angle) * inner_radius))
    return points


def mid_angle(start_angle: float, end_angle: float) -> float:
    return (start_angle + end_angle) / 2.0


def pop_offset(start_angle: float, end_angle: float, distance: float) -> Point:
    """Offset pushing a segment outwards along its bisector."""
    mid = mid_angle(start_angle, end_angle)
    return math.cos(mid) * distance, math.sin(mid) * distance


def total_span(segments: Sequence[Segment]) -> float:
    return sum(end - start for _ident, start, end in segments)
