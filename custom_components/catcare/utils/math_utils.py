# File: utils/math_utils.py
"""Math and calculation utilities for CatCare.

Pure Python math functions with ZERO Home Assistant dependencies.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.

Functions:
    - calculate_progress: Completion ratio with an empty-set default of 1
    - calculate_percentage: Progress percentage calculations
    - clamp: Bound a value to a range
"""

from __future__ import annotations

import logging

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# Default float precision for percentages
DATA_FLOAT_PRECISION = 1


def calculate_progress(completed: int, total: int) -> float:
    """Return completed/total as a ratio in [0, 1].

    Nothing configured counts as fully satisfied, so `total == 0` yields 1.0
    instead of dividing by zero.

    Examples:
        calculate_progress(1, 4) → 0.25
        calculate_progress(0, 0) → 1.0
    """
    if total <= 0:
        return 1.0
    return clamp(completed / total, 0.0, 1.0)


def calculate_percentage(
    completed: int,
    total: int,
    precision: int = DATA_FLOAT_PRECISION,
) -> float:
    """Return progress as a rounded percentage (0-100).

    Examples:
        calculate_percentage(1, 3) → 33.3
        calculate_percentage(0, 0) → 100.0
    """
    return round(calculate_progress(completed, total) * 100, precision)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
    """
    return max(min_val, min(value, max_val))
