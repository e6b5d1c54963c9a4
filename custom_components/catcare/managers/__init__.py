"""Manager modules for CatCare integration.

Managers orchestrate workflows around the pure engines. They are stateful,
event-aware, and own persistence of their records.
"""

from .base_manager import BaseManager
from .care_manager import CareManager
from .household_manager import HouseholdManager
from .triage_manager import TriageManager

__all__ = [
    "BaseManager",
    "CareManager",
    "HouseholdManager",
    "TriageManager",
]
