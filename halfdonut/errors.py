"""Exceptions raised by the chart core."""

from __future__ import annotations


class ChartError(Exception):
    """Base class for chart errors."""


class InvalidInput(ChartError, ValueError):
    """A value set cannot be turned into segments (total <= 0, bad value, bad color)."""


class InvalidConfig(ChartError, ValueError):
    """The chart configuration violates its invariants."""


__all__ = ["ChartError", "InvalidConfig", "InvalidInput"]
