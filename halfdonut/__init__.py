"""Animated half-donut chart rendered with PyQt5."""

from .chart import DonutChart, format_currency
from .config import ChartConfig, DataPoint, config_from_options
from .errors import ChartError, InvalidConfig, InvalidInput
from .geometry import build_arc_polygon, compute_angles
from .render import RenderAdapter, SceneRenderAdapter
from .slice_registry import SliceRegistry, SliceState
from .timeline import FrameClock, Timeline, Tween
from .transition import TransitionEngine, TransitionState

__all__ = [
    "ChartConfig",
    "ChartError",
    "DataPoint",
    "DonutChart",
    "FrameClock",
    "InvalidConfig",
    "InvalidInput",
    "RenderAdapter",
    "SceneRenderAdapter",
    "SliceRegistry",
    "SliceState",
    "Timeline",
    "TransitionEngine",
    "TransitionState",
    "Tween",
    "build_arc_polygon",
    "compute_angles",
    "config_from_options",
    "format_currency",
]
