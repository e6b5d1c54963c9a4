# File: utils/__init__.py
"""Pure Python utilities for CatCare.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: Business-day resolution, period windows, datetime parsing
    - math_utils: Progress ratios and percentages

Usage:
    from . import dt_utils
    from .math_utils import calculate_progress
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
