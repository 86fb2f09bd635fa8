from __future__ import annotations

import math
import os
from typing import Callable, Dict, List, Optional, Tuple

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from halfdonut.config import ChartConfig
from halfdonut.render import RenderAdapter
from halfdonut.timeline import FrameClock


class FakeSlice:
    """Drawable recorded by :class:`RecordingAdapter`."""

    def __init__(self, ident):
        self.ident = ident
        self.points: List[Tuple[float, float]] = []
        self.color = None
        self.transform = (0.0, 0.0, 1.0)
        self.callback: Optional[Callable[[], None]] = None
        self.in_scene = True
        self.draw_count = 0

    def click(self) -> None:
        assert self.callback is not None
        self.callback()


class RecordingAdapter(RenderAdapter):
    def __init__(self):
        self.slices: List[FakeSlice] = []
        self.calls: List[Tuple[str, object]] = []
        self.label: Optional[str] = None
        self.destroy_count = 0
        self.fail_on: Dict[str, Exception] = {}

    def _record(self, name: str, arg: object = None) -> None:
        self.calls.append((name, arg))
        error = self.fail_on.get(name)
        if error is not None:
            raise error

    def create_slice(self, ident):
        self._record("create_slice", ident)
        handle = FakeSlice(ident)
        self.slices.append(handle)
        return handle

    def draw_slice(self, handle, points, color):
        self._record("draw_slice", handle.ident)
        handle.points = list(points)
        handle.color = color
        handle.draw_count += 1

    def set_slice_transform(self, handle, dx, dy, scale):
        self._record("set_slice_transform", handle.ident)
        handle.transform = (dx, dy, scale)

    def slice_transform(self, handle):
        return handle.transform

    def bind_activation(self, handle, callback):
        self._record("bind_activation", handle.ident)
        handle.callback = callback

    def unbind_activation(self, handle):
        self._record("unbind_activation", handle.ident)
        handle.callback = None

    def remove_slice(self, handle):
        self._record("remove_slice", handle.ident)
        handle.in_scene = False

    def set_label(self, text):
        self._record("set_label", text)
        self.label = text

    def destroy(self):
        self._record("destroy")
        self.destroy_count += 1

    def live_slices(self) -> List[FakeSlice]:
        return [handle for handle in self.slices if handle.in_scene]

    def by_id(self, ident) -> FakeSlice:
        matches = [handle for handle in self.live_slices() if handle.ident == ident]
        assert len(matches) == 1, matches
        return matches[0]


@pytest.fixture
def adapter() -> RecordingAdapter:
    return RecordingAdapter()


@pytest.fixture
def clock() -> FrameClock:
    return FrameClock()


@pytest.fixture
def config() -> ChartConfig:
    return ChartConfig(
        inner_radius=100.0,
        outer_radius=160.0,
        pop_distance=15.0,
        width=600.0,
        height=350.0,
        start_angle=-math.pi,
        end_angle=0.0,
    )


def run_until_idle(clock: FrameClock, step: float = 1.0 / 60.0, limit: float = 30.0) -> float:
    """Tick ``clock`` until no timeline is attached; returns the simulated time."""

    elapsed = 0.0
    while clock.active:
        assert elapsed < limit, "animation did not settle"
        clock.advance(step)
        elapsed += step
    return elapsed


@pytest.fixture(scope="session")
def qapp():
    QtWidgets = pytest.importorskip("PyQt5.QtWidgets")
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


@pytest.fixture
def settle(clock):
    def _settle(step: float = 1.0 / 60.0) -> float:
        return run_until_idle(clock, step=step)

    return _settle
