"""Tagged debug output shared by the chart modules and the demo app.

Every line starts with :data:`DEBUG_MARKER`, optionally followed by the
component that emitted it (``[HalfDonut][DEBUG][transition] ...``).
:func:`set_verbose` mutes them at the source; :class:`DebugSilencer` filters
marked lines that still reach stdout or stderr.
"""

from __future__ import annotations

import io
import sys
from typing import Callable, Optional

DEBUG_MARKER = "[HalfDonut][DEBUG]"

_verbose = True


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = bool(enabled)


def is_verbose() -> bool:
    return _verbose


def debug(message: str, component: Optional[str] = None) -> None:
    if not _verbose:
        return
    tag = DEBUG_MARKER if not component else f"{DEBUG_MARKER}[{component}]"
    print(f"{tag} {message}", flush=True)


def component_logger(component: str) -> Callable[[str], None]:
    """Return a ``debug`` bound to ``component``."""

    def _log(message: str) -> None:
        debug(message, component)

    return _log


class DebugSilencer(io.TextIOBase):
    """Stream wrapper filtering the verbose chart diagnostics."""

    def __init__(self, stream: io.TextIOBase, marker: str) -> None:
        super().__init__()
        self._stream = stream
        self._marker = marker
        self._buffer: str = ""

    def write(self, text: str) -> int:  # type: ignore[override]
        self._buffer += text
        while "\n" in self._buffer:
            line, self._buffer = self._buffer.split("\n", 1)
            self._emit(line + "\n")
        return len(text)

    def flush(self) -> None:  # type: ignore[override]
        if self._buffer:
            self._emit(self._buffer)
            self._buffer = ""
        self._stream.flush()

    def _emit(self, chunk: str) -> None:
        if self._marker not in chunk:
            self._stream.write(chunk)

    def writelines(self, lines) -> None:  # type: ignore[override]
        for line in lines:
            self.write(line)

    def __getattr__(self, name):
        return getattr(self._stream, name)


def install_debug_silencer(marker: str = DEBUG_MARKER) -> None:
    if marker and not isinstance(sys.stdout, DebugSilencer):
        sys.stdout = DebugSilencer(sys.stdout, marker)
    if marker and not isinstance(sys.stderr, DebugSilencer):
        sys.stderr = DebugSilencer(sys.stderr, marker)


__all__ = [
    "DEBUG_MARKER",
    "DebugSilencer",
    "component_logger",
    "debug",
    "install_debug_silencer",
    "is_verbose",
    "set_verbose",
]
