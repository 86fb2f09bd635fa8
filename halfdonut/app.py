"""Demo window: the chart, a value slider driving the label and a random data feed."""

from __future__ import annotations

import argparse
import random
import sys
from typing import List, NoReturn, Optional, Sequence


def _handle_qt_import_error(exc: ImportError) -> NoReturn:
    """Exit with a helpful message when the Qt bindings cannot be imported."""

    details = str(exc)
    message_lines = [
        "Unable to start the chart demo: importing PyQt5 failed.",
        "Check that PyQt5 is installed together with the system libraries it needs.",
    ]
    if "libGL.so.1" in details:
        message_lines.append("Hint: the system library libGL.so.1 is missing. Install the Mesa/OpenGL packages.")
    message_lines.append(f"Original error: {details}")
    raise SystemExit("\n".join(message_lines)) from exc


try:
    from PyQt5 import QtCore, QtGui, QtWidgets
    from PyQt5.QtCore import Qt
except ImportError as exc:  # pragma: no cover - environment dependent
    _handle_qt_import_error(exc)

from .chart import DonutChart, format_currency
from .config import DEFAULTS, config_from_options
from .diagnostics import install_debug_silencer, set_verbose
from .render import SceneRenderAdapter
from .timeline import FrameClock

INITIAL_DATA = [
    {"id": "segment1", "value": 30, "color": 0x4F46E5},
    {"id": "segment2", "value": 50, "color": 0x8B5CF6},
    {"id": "segment3", "value": 70, "color": 0xA78BFA},
    {"id": "segment4", "value": 40, "color": 0xC4B5FD},
]

SLIDER_MAX = 10_000_000
SLIDER_STEP = 100_000
SLIDER_DEFAULT = 5_000_000
RANDOM_MAX = 30.0


def random_data(base: Sequence[dict], rng: Optional[random.Random] = None) -> List[dict]:
    """Same ids and colors as ``base`` with fresh values in ``[0, 30)``."""
    rng = rng or random.Random()
    return [dict(entry, value=rng.random() * RANDOM_MAX) for entry in base]


class ChartWindow(QtWidgets.QMainWindow):
    def __init__(self, width: int, height: int, interval_ms: int, frame_ms: int = 16):
        super().__init__(None)
        self.setWindowTitle("Half donut")
        config = config_from_options(dict(DEFAULTS, width=width, height=height))

        self.scene = QtWidgets.QGraphicsScene(0, 0, config.width, config.height, self)
        self.view = QtWidgets.QGraphicsView(self.scene)
        self.view.setRenderHint(QtGui.QPainter.Antialiasing, True)
        self.view.setFrameShape(QtWidgets.QFrame.NoFrame)
        self.view.setFixedSize(int(config.width), int(config.height))
        self.view.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.view.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)

        self.clock = FrameClock(frame_ms)
        self._data = [dict(entry) for entry in INITIAL_DATA]
        self.chart = DonutChart(
            SceneRenderAdapter(self.scene, config),
            config,
            self._data,
            SLIDER_DEFAULT,
            clock=self.clock,
            parent=self,
        )

        self.slider = QtWidgets.QSlider(Qt.Horizontal)
        self.slider.setRange(0, SLIDER_MAX)
        self.slider.setSingleStep(SLIDER_STEP)
        self.slider.setPageStep(SLIDER_STEP)
        self.slider.setValue(SLIDER_DEFAULT)
        self.slider.valueChanged.connect(self.chart.update_label_value)

        bounds = QtWidgets.QHBoxLayout()
        bounds.addWidget(QtWidgets.QLabel(format_currency(0)))
        bounds.addStretch(1)
        bounds.addWidget(QtWidgets.QLabel(format_currency(SLIDER_MAX)))

        w = QtWidgets.QWidget()
        lay = QtWidgets.QVBoxLayout(w)
        lay.addWidget(self.view, 0, Qt.AlignHCenter)
        lay.addWidget(self.slider)
        lay.addLayout(bounds)
        self.setCentralWidget(w)

        self._feed = QtCore.QTimer(self)
        self._feed.setInterval(max(1, int(interval_ms)))
        self._feed.timeout.connect(self.refresh_data)
        self._feed.start()
        self.clock.start(self)

        QtWidgets.QShortcut(Qt.Key_Escape, self, activated=self.close)

    def refresh_data(self) -> None:
        self._data = random_data(self._data)
        if sum(entry["value"] for entry in self._data) > 0:
            self.chart.update_data(self._data)

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # type: ignore[override]
        self._feed.stop()
        self.clock.stop()
        self.chart.destroy()
        super().closeEvent(event)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Animated half-donut chart demo")
    parser.add_argument("--width", type=int, default=int(DEFAULTS["width"]), help="Scene width in pixels")
    parser.add_argument("--height", type=int, default=int(DEFAULTS["height"]), help="Scene height in pixels")
    parser.add_argument(
        "--interval", type=int, default=3000, help="Delay between random data updates (ms)"
    )
    parser.add_argument("--verbose", action="store_true", help="Print chart debug lines")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    set_verbose(args.verbose)
    if not args.verbose:
        install_debug_silencer()
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv[:1])
    window = ChartWindow(args.width, args.height, args.interval)
    window.show()
    return app.exec_()


if __name__ == "__main__":  # pragma: no cover - manual launch helper
    sys.exit(main())
