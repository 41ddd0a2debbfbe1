"""
Phalcon Runtime - Number Helpers
"""

from __future__ import annotations

from typing import Union

Number = Union[int, float]


def between(value: Number, start: Number, end: Number) -> bool:
    """True when `start` <= `value` <= `end`."""
    return start <= value <= end
