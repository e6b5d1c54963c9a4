"""Engine modules for CatCare integration.

Contains pure computation engines:
- care_engine: Log type parsing, instance expansion, completion matching
- catchup_engine: Per-source catch-up items and severity-ranked merge
- triage_engine: Swipe gesture classification and triage state reducer
"""

# Use relative imports within package to avoid mypy module resolution issues
from .care_engine import (
    CareEngine,
    CareInstance,
    CareSummary,
    CareTaskDefinition,
    ParsedLogType,
    aggregate,
)
from .catchup_engine import CatchUpEngine, CatchUpItem, CatchUpResult
from .triage_engine import (
    TriageAction,
    TriageCommit,
    TriageEngine,
    TriageState,
    classify_gesture,
    direction_to_decision,
)

__all__ = [
    "CareEngine",
    "CareInstance",
    "CareSummary",
    "CareTaskDefinition",
    "CatchUpEngine",
    "CatchUpItem",
    "CatchUpResult",
    "ParsedLogType",
    "TriageAction",
    "TriageCommit",
    "TriageEngine",
    "TriageState",
    "aggregate",
    "classify_gesture",
    "direction_to_decision",
]
