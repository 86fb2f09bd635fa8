"""Drawing surface used by the chart.

:class:`RenderAdapter` is the contract the chart core talks to: it creates a
drawable per segment, redraws it in place from a point list, moves/scales it
for the pop animation, and manages the value label. :class:`SceneRenderAdapter`
realises it on a ``QGraphicsScene``.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence, Tuple

from PyQt5 import QtCore, QtGui, QtWidgets

from .config import RGB, ChartConfig, SliceId
from .geometry import Point

Transform = Tuple[float, float, float]

__all__ = ["RenderAdapter", "SceneRenderAdapter", "SliceItem", "Transform"]


class RenderAdapter:
    """Operations the chart needs from a drawing surface."""

    def create_slice(self, ident: SliceId) -> object:
        """Create an empty drawable for ``ident``, add it to the scene and return it."""
        raise NotImplementedError

    def draw_slice(self, handle: object, points: Sequence[Point], color: RGB) -> None:
        """Replace the outline of ``handle``; an empty list draws nothing."""
        raise NotImplementedError

    def set_slice_transform(self, handle: object, dx: float, dy: float, scale: float) -> None:
        raise NotImplementedError

    def slice_transform(self, handle: object) -> Transform:
        raise NotImplementedError

    def bind_activation(self, handle: object, callback: Callable[[], None]) -> None:
        raise NotImplementedError

    def unbind_activation(self, handle: object) -> None:
        raise NotImplementedError

    def remove_slice(self, handle: object) -> None:
        """Detach ``handle`` from the scene and release it."""
        raise NotImplementedError

    def set_label(self, text: str) -> None:
        """Create the label on first use, then update its text."""
        raise NotImplementedError

    def destroy(self) -> None:
        """Tear the whole chart scene down."""
        raise NotImplementedError


class SliceItem(QtWidgets.QGraphicsPolygonItem):
    """Polygon item of one segment; mouse presses trigger the activation callback."""

    def __init__(self, ident: SliceId, parent: Optional[QtWidgets.QGraphicsItem] = None):
        super().__init__(parent)
        self.slice_id = ident
        self._on_activate: Optional[Callable[[], None]] = None
        self.setPen(QtGui.QPen(QtCore.Qt.NoPen))
        self.setCursor(QtCore.Qt.PointingHandCursor)
        self.setAcceptedMouseButtons(QtCore.Qt.LeftButton)

    def set_activation(self, callback: Optional[Callable[[], None]]) -> None:
        self._on_activate = callback

    @property
    def has_activation(self) -> bool:
        return self._on_activate is not None

    def mousePressEvent(self, event: QtWidgets.QGraphicsSceneMouseEvent) -> None:  # type: ignore[override]
        if self._on_activate is None:
            super().mousePressEvent(event)
            return
        event.accept()
        self._on_activate()


class SceneRenderAdapter(RenderAdapter):
    """Render the chart into ``scene``.

    Slices are children of a root item placed at the donut centre so that
    their scale origin is the centre of the ring.
    """

    LABEL_COLOR = QtGui.QColor(0x33, 0x33, 0x33)
    LABEL_POINT_SIZE = 24

    def __init__(self, scene: QtWidgets.QGraphicsScene, config: ChartConfig):
        self._scene = scene
        self._config = config
        self._root: Optional[QtWidgets.QGraphicsRectItem] = QtWidgets.QGraphicsRectItem()
        self._root.setPen(QtGui.QPen(QtCore.Qt.NoPen))
        self._root.setFlag(QtWidgets.QGraphicsItem.ItemHasNoContents, True)
        cx, cy = config.center
        self._root.setPos(cx, cy)
        scene.addItem(self._root)
        self._label: Optional[QtWidgets.QGraphicsSimpleTextItem] = None
        self._slices: Dict[int, SliceItem] = {}
        self._destroyed = False

    @property
    def scene(self) -> QtWidgets.QGraphicsScene:
        return self._scene

    @property
    def root(self) -> Optional[QtWidgets.QGraphicsRectItem]:
        return self._root

    @property
    def label(self) -> Optional[QtWidgets.QGraphicsSimpleTextItem]:
        return self._label

    def slice_items(self) -> Tuple[SliceItem, ...]:
        return tuple(self._slices.values())

    # ----------------------------------------------------------------- slices
    def create_slice(self, ident: SliceId) -> SliceItem:
        if self._destroyed or self._root is None:
            raise RuntimeError("scene adapter has been destroyed")
        item = SliceItem(ident, self._root)
        self._slices[id(item)] = item
        return item

    def draw_slice(self, handle: object, points: Sequence[Point], color: RGB) -> None:
        item = self._item(handle)
        item.setPolygon(QtGui.QPolygonF([QtCore.QPointF(float(x), float(y)) for x, y in points]))
        item.setBrush(QtGui.QBrush(QtGui.QColor(*color)))

    def set_slice_transform(self, handle: object, dx: float, dy: float, scale: float) -> None:
        item = self._item(handle)
        item.setPos(dx, dy)
        item.setScale(scale)

    def slice_transform(self, handle: object) -> Transform:
        item = self._item(handle)
        pos = item.pos()
        return pos.x(), pos.y(), item.scale()

    def bind_activation(self, handle: object, callback: Callable[[], None]) -> None:
        self._item(handle).set_activation(callback)

    def unbind_activation(self, handle: object) -> None:
        self._item(handle).set_activation(None)

    def remove_slice(self, handle: object) -> None:
        item = self._item(handle)
        self._slices.pop(id(item), None)
        item.set_activation(None)
        item.setParentItem(None)
        if item.scene() is not None:
            item.scene().removeItem(item)

    # ------------------------------------------------------------------ label
    def set_label(self, text: str) -> None:
        if self._destroyed:
            raise RuntimeError("scene adapter has been destroyed")
        if self._label is None:
            self._label = QtWidgets.QGraphicsSimpleTextItem()
            font = QtGui.QFont()
            font.setPointSize(self.LABEL_POINT_SIZE)
            font.setBold(True)
            self._label.setFont(font)
            self._label.setBrush(QtGui.QBrush(self.LABEL_COLOR))
            self._scene.addItem(self._label)
        self._label.setText(text)
        self._place_label()

    def _place_label(self) -> None:
        if self._label is None:
            return
        rect = self._label.boundingRect()
        cfg = self._config
        anchor_y = cfg.height * cfg.center_ratio - cfg.inner_radius * 0.5
        self._label.setPos(cfg.width / 2.0 - rect.width() / 2.0, anchor_y + rect.height() * 0.5)

    # --------------------------------------------------------------- teardown
    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        for item in list(self._slices.values()):
            item.set_activation(None)
        self._slices.clear()
        for item in (self._label, self._root):
            if item is not None and item.scene() is not None:
                item.scene().removeItem(item)
        self._label = None
        self._root = None

    def _item(self, handle: object) -> SliceItem:
        if not isinstance(handle, SliceItem):
            raise TypeError(f"not a slice handle: {handle!r}")
        return handle
