"""Triage Engine - Gesture classification and swipe-triage state reduction.

Two separate pure pieces:
- classify_gesture: drag offset + release velocity → left/right/up/down/none
- TriageEngine.reduce: (state, action) → new state

The reducer owns the session lifecycle:

    idle → presenting(index) → committing(decision) → presenting(index + 1)
                                                    ↘ completed (index >= len)

`later` decisions advance immediately because nothing is persisted. `done`
decisions wait in `committing` until the caller reports the outcome of the
write; a failed write returns to `presenting` at the same index. `undo`
steps back exactly one commit (single-level, no history stack).

ARCHITECTURE: No Home Assistant dependencies. Persistence and notifications
belong in TriageManager.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from .. import const
from .catchup_engine import CatchUpItem

# =============================================================================
# GESTURES
# =============================================================================


def classify_gesture(
    offset_x: float,
    offset_y: float,
    velocity_x: float = 0.0,
    velocity_y: float = 0.0,
    allow_vertical: bool = True,
) -> str:
    """Classify a released drag into a swipe direction.

    The dominant axis is chosen first so a sloppy diagonal drag does not
    trigger both a decision and a cat switch.

    Horizontal: past ±80 px, or faster than ±300 px/s, or past ±30 px with a
    combined score |x| + 0.15·|vx| above 100.
    Vertical: past ±60 px or faster than ±250 px/s.

    Examples:
        classify_gesture(90, 0) → "right"
        classify_gesture(-35, 0, velocity_x=-500) → "left"
        classify_gesture(5, -70) → "up"
        classify_gesture(20, 10) → "none"
    """
    abs_x = abs(offset_x)
    abs_y = abs(offset_y)

    is_horizontal = abs_x > abs_y * const.GESTURE_AXIS_DOMINANCE_RATIO or (
        abs_x > const.GESTURE_AXIS_LOCK_MIN_OFFSET
        and abs_y < const.GESTURE_AXIS_LOCK_MAX_CROSS_OFFSET
    )
    is_vertical = abs_y > abs_x * const.GESTURE_AXIS_DOMINANCE_RATIO or (
        abs_y > const.GESTURE_AXIS_LOCK_MIN_OFFSET
        and abs_x < const.GESTURE_AXIS_LOCK_MAX_CROSS_OFFSET
    )

    if is_horizontal:
        combined = abs_x + abs(velocity_x) * const.GESTURE_COMBINED_VELOCITY_WEIGHT
        combined_passed = combined > const.GESTURE_COMBINED_THRESHOLD

        if (
            offset_x > const.GESTURE_POSITION_THRESHOLD
            or velocity_x > const.GESTURE_VELOCITY_THRESHOLD
            or (offset_x > const.GESTURE_COMBINED_MIN_OFFSET and combined_passed)
        ):
            return const.GESTURE_RIGHT
        if (
            offset_x < -const.GESTURE_POSITION_THRESHOLD
            or velocity_x < -const.GESTURE_VELOCITY_THRESHOLD
            or (offset_x < -const.GESTURE_COMBINED_MIN_OFFSET and combined_passed)
        ):
            return const.GESTURE_LEFT
        return const.GESTURE_NONE

    if is_vertical and allow_vertical:
        if (
            offset_y < -const.GESTURE_VERTICAL_POSITION_THRESHOLD
            or velocity_y < -const.GESTURE_VERTICAL_VELOCITY_THRESHOLD
        ):
            return const.GESTURE_UP
        if (
            offset_y > const.GESTURE_VERTICAL_POSITION_THRESHOLD
            or velocity_y > const.GESTURE_VERTICAL_VELOCITY_THRESHOLD
        ):
            return const.GESTURE_DOWN

    return const.GESTURE_NONE


def direction_to_decision(direction: str) -> str | None:
    """Map a swipe direction to a triage decision.

    right → done, left → later. Vertical swipes switch cats and carry no
    decision.
    """
    if direction == const.GESTURE_RIGHT:
        return const.TRIAGE_DECISION_DONE
    if direction == const.GESTURE_LEFT:
        return const.TRIAGE_DECISION_LATER
    return None


# =============================================================================
# STATE AND ACTIONS
# =============================================================================


@dataclass(frozen=True)
class TriageCommit:
    """A decision applied to one item.

    Attributes:
        index: Position of the item in the session list
        item: The item decided on
        decision: done or later
        value: Memo/answer recorded with a done decision
        undo_token: Opaque token from the persistence layer (None for later)
    """

    index: int
    item: CatchUpItem
    decision: str
    value: str | None = None
    undo_token: dict[str, Any] | None = None


@dataclass(frozen=True)
class TriageAction:
    """Input to TriageEngine.reduce. Use the factory methods."""

    kind: str
    items: tuple[CatchUpItem, ...] = ()
    decision: str | None = None
    value: str | None = None
    undo_token: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def start(cls, items: list[CatchUpItem] | tuple[CatchUpItem, ...]) -> TriageAction:
        """Begin a session over a freshly computed item list."""
        return cls(kind=const.TRIAGE_ACTION_START, items=tuple(items))

    @classmethod
    def commit(cls, decision: str, value: str | None = None) -> TriageAction:
        """Apply a decision to the current item."""
        return cls(kind=const.TRIAGE_ACTION_COMMIT, decision=decision, value=value)

    @classmethod
    def commit_succeeded(
        cls, undo_token: dict[str, Any] | None = None
    ) -> TriageAction:
        """Report that the pending write was persisted."""
        return cls(kind=const.TRIAGE_ACTION_COMMIT_SUCCEEDED, undo_token=undo_token)

    @classmethod
    def commit_failed(cls, error: str) -> TriageAction:
        """Report that the pending write failed."""
        return cls(kind=const.TRIAGE_ACTION_COMMIT_FAILED, error=error)

    @classmethod
    def undo(cls) -> TriageAction:
        """Step back one commit."""
        return cls(kind=const.TRIAGE_ACTION_UNDO)


@dataclass(frozen=True)
class TriageState:
    """Immutable triage session state."""

    phase: str = const.TRIAGE_PHASE_IDLE
    items: tuple[CatchUpItem, ...] = field(default_factory=tuple)
    index: int = 0
    pending: TriageCommit | None = None
    last_commit: TriageCommit | None = None
    error: str | None = None

    @property
    def current_item(self) -> CatchUpItem | None:
        """Return the item awaiting a decision, if any."""
        if self.phase in (const.TRIAGE_PHASE_PRESENTING, const.TRIAGE_PHASE_COMMITTING):
            if 0 <= self.index < len(self.items):
                return self.items[self.index]
        return None

    @property
    def can_undo(self) -> bool:
        """Return True when there is a commit to step back from."""
        return self.last_commit is not None and self.phase in (
            const.TRIAGE_PHASE_PRESENTING,
            const.TRIAGE_PHASE_COMPLETED,
        )


# =============================================================================
# TRIAGE ENGINE
# =============================================================================


class TriageEngine:
    """Pure reducer for swipe-triage sessions.

    All methods are static - no instance state.
    """

    # Actions accepted in each phase; anything else leaves the state unchanged
    VALID_ACTIONS: dict[str, list[str]] = {
        const.TRIAGE_PHASE_IDLE: [const.TRIAGE_ACTION_START],
        const.TRIAGE_PHASE_PRESENTING: [
            const.TRIAGE_ACTION_START,
            const.TRIAGE_ACTION_COMMIT,
            const.TRIAGE_ACTION_UNDO,
        ],
        # No restart while a write is in flight
        const.TRIAGE_PHASE_COMMITTING: [
            const.TRIAGE_ACTION_COMMIT_SUCCEEDED,
            const.TRIAGE_ACTION_COMMIT_FAILED,
        ],
        const.TRIAGE_PHASE_COMPLETED: [
            const.TRIAGE_ACTION_START,
            const.TRIAGE_ACTION_UNDO,
        ],
    }

    @staticmethod
    def can_apply(phase: str, action_kind: str) -> bool:
        """Return True if the action is valid in the given phase."""
        return action_kind in TriageEngine.VALID_ACTIONS.get(phase, [])

    @staticmethod
    def reduce(state: TriageState, action: TriageAction) -> TriageState:
        """Return the state after applying an action.

        Invalid actions (wrong phase, unknown decision, nothing to undo) are
        logged and return `state` unchanged.
        """
        if not TriageEngine.can_apply(state.phase, action.kind):
            const.LOGGER.debug(
                "Triage action '%s' ignored in phase '%s'", action.kind, state.phase
            )
            return state

        if action.kind == const.TRIAGE_ACTION_START:
            return TriageEngine._start(action.items)
        if action.kind == const.TRIAGE_ACTION_COMMIT:
            return TriageEngine._commit(state, action)
        if action.kind == const.TRIAGE_ACTION_COMMIT_SUCCEEDED:
            return TriageEngine._commit_succeeded(state, action)
        if action.kind == const.TRIAGE_ACTION_COMMIT_FAILED:
            return TriageEngine._commit_failed(state, action)
        return TriageEngine._undo(state)

    @staticmethod
    def _start(items: tuple[CatchUpItem, ...]) -> TriageState:
        """Reset the session over a recomputed list."""
        return TriageState(
            phase=const.TRIAGE_PHASE_PRESENTING if items else const.TRIAGE_PHASE_COMPLETED,
            items=items,
        )

    @staticmethod
    def _advance(state: TriageState, commit: TriageCommit) -> TriageState:
        """Move past the committed item."""
        next_index = commit.index + 1
        return replace(
            state,
            phase=(
                const.TRIAGE_PHASE_COMPLETED
                if next_index >= len(state.items)
                else const.TRIAGE_PHASE_PRESENTING
            ),
            index=next_index,
            pending=None,
            last_commit=commit,
            error=None,
        )

    @staticmethod
    def _commit(state: TriageState, action: TriageAction) -> TriageState:
        """Apply a decision to the current item."""
        item = state.current_item
        if item is None or action.decision not in const.TRIAGE_DECISION_OPTIONS:
            const.LOGGER.debug(
                "Triage commit rejected: decision=%s index=%s",
                action.decision,
                state.index,
            )
            return state

        commit = TriageCommit(
            index=state.index,
            item=item,
            decision=action.decision,
            value=action.value,
        )
        if action.decision == const.TRIAGE_DECISION_LATER:
            return TriageEngine._advance(state, commit)

        return replace(
            state,
            phase=const.TRIAGE_PHASE_COMMITTING,
            pending=commit,
            error=None,
        )

    @staticmethod
    def _commit_succeeded(state: TriageState, action: TriageAction) -> TriageState:
        """Advance past the pending item and remember it for undo."""
        if state.pending is None:
            return state
        return TriageEngine._advance(
            state, replace(state.pending, undo_token=action.undo_token)
        )

    @staticmethod
    def _commit_failed(state: TriageState, action: TriageAction) -> TriageState:
        """Roll the pending item back into the presenting position."""
        return replace(
            state,
            phase=const.TRIAGE_PHASE_PRESENTING,
            pending=None,
            error=action.error or const.ERROR_SAVE_FAILED,
        )

    @staticmethod
    def _undo(state: TriageState) -> TriageState:
        """Step back exactly one commit."""
        if state.last_commit is None:
            return state
        return replace(
            state,
            phase=const.TRIAGE_PHASE_PRESENTING,
            index=state.last_commit.index,
            pending=None,
            last_commit=None,
            error=None,
        )
