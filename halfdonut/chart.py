"""Half-donut chart with animated updates and clickable segments.

:class:`DonutChart` wires the pieces together: the registry of rendered
segments, the transition engine fed by :meth:`DonutChart.update_data`, the
pop animation started by segment activation and the value label.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

from PyQt5 import QtCore

from .config import ChartConfig, SliceId, config_from_options, normalize_data
from .diagnostics import component_logger
from .geometry import build_arc_polygon, compute_angles
from .interaction import InteractionController
from .render import RenderAdapter
from .slice_registry import SliceRegistry, SliceState
from .timeline import FrameClock, Timeline
from .transition import TransitionEngine, TransitionState

__all__ = ["DonutChart", "format_currency"]

_debug = component_logger("chart")


def format_currency(value: float) -> str:
    """Default label formatter: ``5000000 -> "€5,000,000"``."""
    return f"€{value:,.0f}"


class DonutChart(QtCore.QObject):
    """Segmented ring chart drawn through a :class:`RenderAdapter`."""

    sliceActivated = QtCore.pyqtSignal(object)
    transitionFinished = QtCore.pyqtSignal()

    def __init__(
        self,
        adapter: RenderAdapter,
        config: ChartConfig,
        data: Iterable[Any] = (),
        label_value: float = 0.0,
        *,
        clock: Optional[FrameClock] = None,
        label_formatter: Callable[[float], str] = format_currency,
        parent: Optional[QtCore.QObject] = None,
    ):
        super().__init__(parent)
        # validate everything before the adapter is touched
        self._config = config.validate()
        points = normalize_data(data)
        segments = compute_angles(points, config.start_angle, config.end_angle) if points else []

        self._adapter = adapter
        self._clock = clock if clock is not None else FrameClock()
        self._format_label = label_formatter
        self._label_value = float(label_value)
        self._label_text = ""
        self._destroyed = False
        self.registry = SliceRegistry(self)
        self._engine = TransitionEngine(
            config,
            self.registry,
            adapter,
            self._clock,
            create_handle=self._create_handle,
            release_handle=self._release_handle,
            parent=self,
        )
        self._engine.transitionFinished.connect(self.transitionFinished)
        self._interaction = InteractionController(config, adapter, self._clock, self._locate)

        try:
            colors = {point.id: point for point in points}
            states: List[SliceState] = []
            for ident, start, end in segments:
                point = colors[ident]
                handle = self._create_handle(ident)
                states.append(SliceState(ident, point.value, start, end, handle, point.color))
                adapter.draw_slice(
                    handle,
                    build_arc_polygon(config.inner_radius, config.outer_radius, start, end, config.precision),
                    point.color,
                )
            self.registry.replace(states)
            self._set_label(self._label_value)
        except Exception:
            adapter.destroy()
            self._destroyed = True
            raise
        _debug(f"chart created with {len(states)} slices")

    @classmethod
    def from_options(
        cls,
        adapter_factory: Callable[[ChartConfig], RenderAdapter],
        options: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> "DonutChart":
        """Build a chart from a loose option mapping (``innerRadius``, ``data``, ``euroValue``...)."""

        options = dict(options or {})
        config = config_from_options(options)
        data = options.get("data") or ()
        label_value = options.get("labelValue", options.get("euroValue", 0.0)) or 0.0
        return cls(adapter_factory(config), config, data, float(label_value), **kwargs)

    # ------------------------------------------------------------- accessors
    @property
    def config(self) -> ChartConfig:
        return self._config

    @property
    def clock(self) -> FrameClock:
        return self._clock

    @property
    def adapter(self) -> RenderAdapter:
        return self._adapter

    @property
    def engine(self) -> TransitionEngine:
        return self._engine

    @property
    def state(self) -> TransitionState:
        return self._engine.state

    @property
    def label_value(self) -> float:
        return self._label_value

    @property
    def label_text(self) -> str:
        return self._label_text

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def slices(self) -> List[SliceState]:
        return self.registry.states()

    # ------------------------------------------------------------- public API
    def update_data(self, data: Iterable[Any]) -> bool:
        """Animate towards ``data``; returns ``False`` when the request was dropped."""

        if self._destroyed:
            _debug("update ignored: chart destroyed")
            return False
        return self._engine.request_update(data)

    def update_label_value(self, value: float) -> None:
        if self._destroyed:
            return
        self._set_label(value)

    def activate(self, ident: SliceId) -> Optional[Timeline]:
        if self._destroyed:
            return None
        timeline = self._interaction.on_activate(ident)
        if timeline is not None:
            self.sliceActivated.emit(ident)
        return timeline

    def destroy(self) -> None:
        """Release every drawable and the scene; later calls do nothing."""

        if self._destroyed:
            return
        self._destroyed = True
        self._interaction.cancel_all()
        handles = self.registry.handles() + self._engine.abort()
        for handle in handles:
            self._release_handle(handle)
        self.registry.clear()
        self._adapter.destroy()
        _debug(f"chart destroyed, {len(handles)} slices released")

    # --------------------------------------------------------------- helpers
    def _set_label(self, value: float) -> None:
        self._label_value = float(value)
        self._label_text = self._format_label(self._label_value)
        self._adapter.set_label(self._label_text)

    def _create_handle(self, ident: SliceId) -> object:
        handle = self._adapter.create_slice(ident)
        self._adapter.bind_activation(handle, lambda ident=ident: self.activate(ident))
        return handle

    def _release_handle(self, handle: object) -> None:
        self._adapter.unbind_activation(handle)
        self._adapter.remove_slice(handle)

    def _locate(self, ident: SliceId) -> Optional[Tuple[object, float, float]]:
        state = self.registry.lookup(ident)
        if state is not None:
            return state.handle, state.start_angle, state.end_angle
        target = self._engine.pending_target(ident)
        handle = self._engine.pending_handle(ident)
        if target is None or handle is None:
            return None
        return handle, target[0], target[1]
