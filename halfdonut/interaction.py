"""Pop animation played when a segment is activated."""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from PyQt5 import QtCore

from .config import ChartConfig, SliceId
from .diagnostics import component_logger
from .geometry import pop_offset
from .render import RenderAdapter
from .timeline import FrameClock, Timeline, Tween

__all__ = ["InteractionController", "SliceLocator"]

_debug = component_logger("pop")

# id -> (handle, start_angle, end_angle), or None when the id is unknown
SliceLocator = Callable[[SliceId], Optional[Tuple[object, float, float]]]

POP_OUT_EASING = QtCore.QEasingCurve.OutQuad
POP_BACK_EASING = QtCore.QEasingCurve.InQuad


class InteractionController:
    """Push a segment outwards along its bisector, scale it up, then bring it back.

    Pops are not coordinated with transitions nor with each other: two pops
    on the same segment, or a pop during a transition, simply overlap.
    """

    def __init__(
        self,
        config: ChartConfig,
        adapter: RenderAdapter,
        clock: FrameClock,
        locate: SliceLocator,
    ):
        self._config = config
        self._adapter = adapter
        self._clock = clock
        self._locate = locate
        self._running: List[Timeline] = []

    @property
    def running(self) -> List[Timeline]:
        return [timeline for timeline in self._running if not timeline.finished]

    def on_activate(self, ident: SliceId) -> Optional[Timeline]:
        found = self._locate(ident)
        if found is None:
            _debug(f"activation ignored: unknown slice {ident!r}")
            return None
        handle, start, end = found
        cfg = self._config
        dx, dy = pop_offset(start, end, cfg.pop_distance)

        def _read() -> Tuple[float, float, float]:
            return self._adapter.slice_transform(handle)

        def _write(values: Tuple[float, ...]) -> None:
            x, y, scale = values
            self._adapter.set_slice_transform(handle, x, y, scale)

        timeline = Timeline()
        timeline.add(
            Tween(cfg.pop_duration, (dx, dy, cfg.pop_scale), _write, read=_read, easing=POP_OUT_EASING),
            position=0.0,
        )
        timeline.add(Tween(cfg.pop_duration, (0.0, 0.0, 1.0), _write, read=_read, easing=POP_BACK_EASING))
        self._running = self.running + [timeline]
        self._clock.attach(timeline)
        return timeline

    def cancel_all(self) -> None:
        for timeline in self._running:
            self._clock.detach(timeline)
        self._running = []
