"""Animated reconciliation of the rendered segments with a new value set.

The engine has two states. While a transition runs every new request is
dropped; there is no queue and the running transition is never preempted.
Targets are computed once, synchronously, when a request is accepted. The
registry is read when a request is accepted and replaced when the timeline
completes, never in between.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from PyQt5 import QtCore

from .config import RGB, ChartConfig, DataPoint, SliceId, normalize_data
from .diagnostics import component_logger
from .geometry import build_arc_polygon, compute_angles
from .render import RenderAdapter
from .slice_registry import SliceRegistry, SliceState
from .timeline import FrameClock, Timeline, Tween

__all__ = ["SliceTarget", "TransitionEngine", "TransitionState"]

_debug = component_logger("transition")

TRANSITION_EASING = QtCore.QEasingCurve.InOutCubic


class TransitionState(enum.Enum):
    IDLE = "idle"
    TRANSITIONING = "transitioning"


@dataclass
class SliceTarget:
    """One entry of an accepted request."""

    point: DataPoint
    source: Tuple[float, float]
    target: Tuple[float, float]
    handle: object
    created: bool

    @property
    def id(self) -> SliceId:
        return self.point.id


class TransitionEngine(QtCore.QObject):
    """Drive one staggered transition at a time against a :class:`SliceRegistry`.

    ``create_handle`` and ``release_handle`` let the owner wire drawables of
    new segments (activation listeners) and unwire removed ones.
    """

    transitionStarted = QtCore.pyqtSignal(int)
    transitionFinished = QtCore.pyqtSignal()
    requestDropped = QtCore.pyqtSignal()

    def __init__(
        self,
        config: ChartConfig,
        registry: SliceRegistry,
        adapter: RenderAdapter,
        clock: FrameClock,
        *,
        create_handle: Optional[Callable[[SliceId], object]] = None,
        release_handle: Optional[Callable[[object], None]] = None,
        parent: Optional[QtCore.QObject] = None,
    ):
        super().__init__(parent)
        self._config = config
        self._registry = registry
        self._adapter = adapter
        self._clock = clock
        self._create_handle = create_handle or adapter.create_slice
        self._release_handle = release_handle or adapter.remove_slice
        self._state = TransitionState.IDLE
        self._timeline: Optional[Timeline] = None
        self._targets: List[SliceTarget] = []
        self._orphans: List[object] = []

    # ------------------------------------------------------------------ state
    @property
    def state(self) -> TransitionState:
        return self._state

    @property
    def is_transitioning(self) -> bool:
        return self._state is TransitionState.TRANSITIONING

    @property
    def timeline(self) -> Optional[Timeline]:
        return self._timeline

    def targets(self) -> List[SliceTarget]:
        return list(self._targets)

    def pending_target(self, ident: SliceId) -> Optional[Tuple[float, float]]:
        for entry in self._targets:
            if entry.id == ident:
                return entry.target
        return None

    def pending_handle(self, ident: SliceId) -> Optional[object]:
        for entry in self._targets:
            if entry.id == ident:
                return entry.handle
        return None

    # ---------------------------------------------------------------- request
    def request_update(self, data: Iterable[Any]) -> bool:
        """Start a transition towards ``data``.

        Returns ``False`` when the request was dropped because a transition is
        already running. Raises :class:`InvalidInput` before anything changes
        when the data cannot be partitioned.
        """

        if self._state is TransitionState.TRANSITIONING:
            _debug("update dropped: a transition is already running")
            self.requestDropped.emit()
            return False

        points = normalize_data(data)
        segments = compute_angles(points, self._config.start_angle, self._config.end_angle)
        by_id: Dict[SliceId, DataPoint] = {point.id: point for point in points}

        targets: List[SliceTarget] = []
        created: List[object] = []
        try:
            for ident, start, end in segments:
                existing = self._registry.lookup(ident)
                if existing is not None:
                    source = (existing.start_angle, existing.end_angle)
                    handle = existing.handle
                    is_new = False
                else:
                    source = (start, start)
                    handle = self._create_handle(ident)
                    created.append(handle)
                    is_new = True
                targets.append(SliceTarget(by_id[ident], source, (start, end), handle, is_new))
        except Exception:
            for handle in created:
                self._release_handle(handle)
            raise

        self._targets = targets
        self._timeline = self._schedule(targets)
        self._state = TransitionState.TRANSITIONING
        self._clock.attach(self._timeline)
        removed = [ident for ident in self._registry.ids() if ident not in by_id]
        _debug(
            "transition accepted: %d slices (%d new, %d leaving)"
            % (len(targets), len(created), len(removed))
        )
        self.transitionStarted.emit(len(targets))
        return True

    def _schedule(self, targets: List[SliceTarget]) -> Timeline:
        cfg = self._config
        timeline = Timeline(on_complete=self._commit)
        for index, entry in enumerate(targets):
            position = 0.0 if index == 0 else max(0.0, timeline.duration - cfg.transition_overlap)
            tween = Tween(
                cfg.transition_duration,
                entry.target,
                self._redraw_callback(entry.handle, entry.point.color),
                start=entry.source,
                easing=TRANSITION_EASING,
            )
            timeline.add(tween, position=position, delay=index * cfg.transition_stagger)
        return timeline

    def _redraw_callback(self, handle: object, color: RGB) -> Callable[[Tuple[float, ...]], None]:
        cfg = self._config

        def _redraw(values: Tuple[float, ...]) -> None:
            start, end = values
            points = build_arc_polygon(cfg.inner_radius, cfg.outer_radius, start, end, cfg.precision)
            self._adapter.draw_slice(handle, points, color)

        return _redraw

    # ----------------------------------------------------------------- commit
    def _commit(self) -> None:
        targets = self._targets
        states = [
            SliceState(
                id=entry.id,
                value=entry.point.value,
                start_angle=entry.target[0],
                end_angle=entry.target[1],
                handle=entry.handle,
                color=entry.point.color,
            )
            for entry in targets
        ]
        keep = {entry.id for entry in targets}
        leaving = [state for state in self._registry.states() if state.id not in keep]
        try:
            for state in leaving:
                self._release_handle(state.handle)
            self._registry.replace(states)
        except Exception:
            self._discard_created(targets)
            raise
        finally:
            self._reset()
        if leaving:
            _debug("transition committed, removed: %s" % ", ".join(str(s.id) for s in leaving))
        else:
            _debug("transition committed")
        self.transitionFinished.emit()

    def _discard_created(self, targets: List[SliceTarget]) -> None:
        # drawables of new segments never reach the registry after a failed commit
        for entry in targets:
            if not entry.created:
                continue
            try:
                self._release_handle(entry.handle)
            except Exception as exc:
                _debug(f"could not release slice {entry.id!r} after failed commit: {exc}")
                self._orphans.append(entry.handle)

    def _reset(self) -> None:
        self._state = TransitionState.IDLE
        self._timeline = None
        self._targets = []

    def abort(self) -> List[object]:
        """Detach the running timeline without committing.

        Returns the handles created for segments that never reached the
        registry, including those a failed commit could not release; the
        caller owns their release.
        """

        if self._timeline is not None:
            self._clock.detach(self._timeline)
        orphans = self._orphans + [entry.handle for entry in self._targets if entry.created]
        self._orphans = []
        self._reset()
        return orphans
