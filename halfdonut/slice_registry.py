"""Keyed store of the segments currently rendered by a chart."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, List, Optional

from PyQt5 import QtCore

from .config import RGB, DEFAULT_COLOR, SliceId


@dataclass(frozen=True)
class SliceState:
    """Committed state of one segment.

    ``handle`` is the drawable returned by the render adapter; it is owned by
    this entry alone and survives updates as long as the id does.
    """

    id: SliceId
    value: float
    start_angle: float
    end_angle: float
    handle: object
    color: RGB = DEFAULT_COLOR

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle

    def with_angles(self, start_angle: float, end_angle: float) -> "SliceState":
        return replace(self, start_angle=start_angle, end_angle=end_angle)


class SliceRegistry(QtCore.QObject):
    """Segments by id, iterated in angular order."""

    registryChanged = QtCore.pyqtSignal()

    def __init__(self, parent: Optional[QtCore.QObject] = None):
        super().__init__(parent)
        self._states: Dict[SliceId, SliceState] = {}

    # ----------------------------------------------------------------- lookup
    def lookup(self, ident: SliceId) -> Optional[SliceState]:
        return self._states.get(ident)

    def ids(self) -> List[SliceId]:
        return list(self._states)

    def states(self) -> List[SliceState]:
        return list(self._states.values())

    def handles(self) -> List[object]:
        return [state.handle for state in self._states.values()]

    def __contains__(self, ident: object) -> bool:
        return ident in self._states

    def __iter__(self) -> Iterator[SliceState]:
        return iter(list(self._states.values()))

    def __len__(self) -> int:
        return len(self._states)

    # --------------------------------------------------------------- mutation
    def upsert(self, state: SliceState) -> None:
        """Insert ``state`` or overwrite the entry with the same id in place."""
        self._states[state.id] = state
        self.registryChanged.emit()

    def remove(self, ident: SliceId) -> Optional[SliceState]:
        state = self._states.pop(ident, None)
        if state is not None:
            self.registryChanged.emit()
        return state

    def replace(self, states: Iterable[SliceState]) -> None:
        """Swap the whole content for ``states`` at once.

        Duplicate ids are rejected before anything changes.
        """

        incoming: Dict[SliceId, SliceState] = {}
        for state in states:
            if state.id in incoming:
                raise ValueError(f"duplicate slice id {state.id!r}")
            incoming[state.id] = state
        self._states = incoming
        self.registryChanged.emit()

    def clear(self) -> None:
        if not self._states:
            return
        self._states = {}
        self.registryChanged.emit()


__all__ = ["SliceRegistry", "SliceState"]
