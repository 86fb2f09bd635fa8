"""Frame clock, timelines and eased tweens.

A :class:`FrameClock` fans one tick (elapsed seconds) out to every attached
:class:`Timeline`. A timeline places :class:`Tween` entries at time offsets
and advances those whose start has been reached. The clock is driven by a
``QTimer`` in the application and by :meth:`FrameClock.advance` in tests.
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional, Sequence, Tuple

from PyQt5 import QtCore

Values = Tuple[float, ...]

__all__ = ["FrameClock", "Timeline", "Tween"]


class Tween:
    """Interpolate a tuple of floats from a start to a target value.

    When ``start`` is omitted the tween reads it through ``read`` the first
    time it renders, i.e. when its slot on the timeline is reached.
    """

    def __init__(
        self,
        duration: float,
        target: Sequence[float],
        write: Callable[[Values], None],
        *,
        start: Optional[Sequence[float]] = None,
        read: Optional[Callable[[], Sequence[float]]] = None,
        easing: QtCore.QEasingCurve.Type = QtCore.QEasingCurve.Linear,
    ) -> None:
        if start is None and read is None:
            raise ValueError("a tween needs a start value or a reader")
        self.duration = max(0.0, float(duration))
        self.target: Values = tuple(float(v) for v in target)
        self.start: Optional[Values] = tuple(float(v) for v in start) if start is not None else None
        self._read = read
        self._write = write
        self._curve = QtCore.QEasingCurve(easing)
        self.done = False

    def value_at(self, local_time: float) -> Values:
        if self.start is None:
            self.start = tuple(float(v) for v in self._read())  # type: ignore[misc]
        if self.duration <= 0 or local_time >= self.duration:
            return self.target
        progress = max(0.0, local_time / self.duration)
        eased = self._curve.valueForProgress(progress)
        return tuple(a + (b - a) * eased for a, b in zip(self.start, self.target))

    def render(self, local_time: float) -> None:
        if self.done:
            return
        values = self.value_at(local_time)
        if values is self.target:
            self.done = True
        self._write(values)


class Timeline:
    """Tweens placed at absolute offsets, completed as one unit."""

    def __init__(self, on_complete: Optional[Callable[[], None]] = None) -> None:
        self._entries: List[Tuple[float, Tween]] = []
        self._on_complete = on_complete
        self.elapsed = 0.0
        self.finished = False

    @property
    def duration(self) -> float:
        return max((offset + tween.duration for offset, tween in self._entries), default=0.0)

    @property
    def entries(self) -> List[Tuple[float, Tween]]:
        return list(self._entries)

    def add(self, tween: Tween, position: Optional[float] = None, delay: float = 0.0) -> float:
        """Place ``tween`` at ``position`` (default: the current end) plus ``delay``.

        Returns the offset the tween starts at.
        """

        base = self.duration if position is None else max(0.0, float(position))
        offset = base + max(0.0, float(delay))
        self._entries.append((offset, tween))
        return offset

    def advance(self, dt: float) -> None:
        if self.finished:
            return
        self.elapsed += max(0.0, float(dt))
        for offset, tween in self._entries:
            if self.elapsed >= offset:
                tween.render(self.elapsed - offset)
        if self.elapsed >= self.duration:
            self.finished = True
            if self._on_complete is not None:
                self._on_complete()


class FrameClock:
    """Single animation clock shared by every timeline of a chart."""

    def __init__(self, interval_ms: int = 16) -> None:
        self._timelines: List[Timeline] = []
        self._interval_ms = max(1, int(interval_ms))
        self._timer: Optional[QtCore.QTimer] = None
        self._last_tick: Optional[float] = None

    # -------------------------------------------------------------- timelines
    def attach(self, timeline: Timeline) -> None:
        if timeline not in self._timelines:
            self._timelines.append(timeline)

    def detach(self, timeline: Timeline) -> None:
        if timeline in self._timelines:
            self._timelines.remove(timeline)

    def __contains__(self, timeline: object) -> bool:
        return timeline in self._timelines

    @property
    def active(self) -> bool:
        return bool(self._timelines)

    def advance(self, dt: float) -> None:
        """Deliver one tick of ``dt`` seconds to every attached timeline.

        Timelines attached while the tick is delivered start on the next one.
        """

        for timeline in list(self._timelines):
            if timeline not in self._timelines:
                continue
            try:
                timeline.advance(dt)
            finally:
                if timeline.finished:
                    self.detach(timeline)

    # ------------------------------------------------------------------ timer
    def start(self, parent: Optional[QtCore.QObject] = None) -> None:
        if self._timer is None:
            self._timer = QtCore.QTimer(parent)
            self._timer.setInterval(self._interval_ms)
            self._timer.timeout.connect(self._on_timeout)
        self._last_tick = time.monotonic()
        self._timer.start()

    def stop(self) -> None:
        if self._timer is not None and self._timer.isActive():
            self._timer.stop()
        self._last_tick = None

    @property
    def running(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def _on_timeout(self) -> None:
        now = time.monotonic()
        last = self._last_tick if self._last_tick is not None else now
        self._last_tick = now
        self.advance(now - last)
