"""
Ordered threshold bands.

Every severity ladder in the engine (pillar scores, compliance bumps,
override bands) is a list of ``(threshold, result)`` pairs evaluated
first-match, so each ladder is plain data that can be tested on its own.

Two directions are needed:

- :func:`first_below`: ascending upper limits, ``value < threshold``
  (e.g. projection gap → score).
- :func:`first_at_least`: descending lower limits, ``value >= threshold``
  (e.g. sleep hours → adjustment).
"""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")

Band = tuple[float, T]


def first_below(value: float, bands: Sequence[Band], default: T) -> T:
    """Result of the first band whose threshold is strictly above *value*."""
    for threshold, result in bands:
        if value < threshold:
            return result
    return default


def first_at_least(value: float, bands: Sequence[Band], default: T) -> T:
    """Result of the first band whose threshold is at or below *value*."""
    for threshold, result in bands:
        if value >= threshold:
            return result
    return default


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))
