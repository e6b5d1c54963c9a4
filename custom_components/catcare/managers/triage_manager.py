"""Triage Manager - Adapter between swipe gestures, the reducer and storage.

Flow for one swipe:

    classify_gesture() → direction
        up/down    → fire EVENT_TRIAGE_CAT_SWITCH, state unchanged
        right/left → direction_to_decision() → TriageEngine.reduce(commit)
            later  → advanced by the reducer, nothing persisted
            done   → persist per item type → commit_succeeded | commit_failed

A failed write leaves the session on the same item, sets the state error
and raises a persistent notification (plus the configured notify service).
The user retries by swiping again; there is no automatic retry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import callback

from .. import const
from ..engines.triage_engine import (
    TriageAction,
    TriageEngine,
    TriageState,
    classify_gesture,
    direction_to_decision,
)
from ..notification_helper import async_notify_triage_error
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import CatCareDataCoordinator
    from ..engines.catchup_engine import CatchUpItem
    from ..type_defs import OperationResult
    from .care_manager import CareManager
    from .household_manager import HouseholdManager


class TriageManager(BaseManager):
    """Owns the single triage session of a household."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: CatCareDataCoordinator,
        care_manager: CareManager,
        household_manager: HouseholdManager,
    ) -> None:
        """Initialize the TriageManager.

        Args:
            hass: Home Assistant instance
            coordinator: The main CatCare coordinator
            care_manager: Writes care logs for task items
            household_manager: Writes acknowledgements, purchases, resolutions
        """
        super().__init__(hass, coordinator)
        self._care = care_manager
        self._household = household_manager
        self.state = TriageState()
        self.stale = False
        self._committing_source = False

    async def async_setup(self) -> None:
        """Subscribe to record changes made outside the session."""
        self.listen(const.SIGNAL_SUFFIX_RECORDS_CHANGED, self._on_records_changed)
        const.LOGGER.debug("TriageManager initialized for entry %s", self.entry_id)

    @callback
    def _on_records_changed(self, payload: dict[str, Any]) -> None:
        """Flag the session list as outdated when data changes elsewhere."""
        if self._committing_source:
            return
        if self.state.phase != const.TRIAGE_PHASE_IDLE:
            const.LOGGER.debug(
                "Triage list marked stale after '%s'", payload.get("source")
            )
            self.stale = True

    def _set_state(self, new_state: TriageState) -> None:
        """Store the reduced state and push it to entities."""
        self.state = new_state
        self.coordinator.async_update_listeners()

    # =========================================================================
    # Session Operations
    # =========================================================================

    def start(self) -> TriageState:
        """Start (or restart) a session over a freshly computed catch-up list."""
        snapshot = self.coordinator.async_refresh_snapshot()
        self.stale = False
        self._set_state(
            TriageEngine.reduce(
                self.state, TriageAction.start(snapshot.catch_up.items)
            )
        )
        const.LOGGER.debug(
            "Triage started with %s items (phase=%s)",
            len(self.state.items),
            self.state.phase,
        )
        return self.state

    async def async_swipe(
        self,
        offset_x: float,
        offset_y: float,
        velocity_x: float = 0.0,
        velocity_y: float = 0.0,
        value: str | None = None,
    ) -> str:
        """Handle a released drag on the current card.

        Returns:
            The classified direction (left/right/up/down/none).
        """
        direction = classify_gesture(offset_x, offset_y, velocity_x, velocity_y)

        if direction in (const.GESTURE_UP, const.GESTURE_DOWN):
            current = self.state.current_item
            self.hass.bus.async_fire(
                const.EVENT_TRIAGE_CAT_SWITCH,
                {
                    "entry_id": self.entry_id,
                    const.ATTR_DIRECTION: direction,
                    "cat_id": current.cat_id if current else None,
                },
            )
            return direction

        decision = direction_to_decision(direction)
        if decision is not None:
            await self.async_decide(decision, value)
        return direction

    async def async_decide(self, decision: str, value: str | None = None) -> TriageState:
        """Apply a decision to the current item and persist `done` decisions."""
        self._set_state(
            TriageEngine.reduce(self.state, TriageAction.commit(decision, value))
        )
        if self.state.phase != const.TRIAGE_PHASE_COMMITTING:
            return self.state

        pending = self.state.pending
        if pending is None:
            return self.state
        self._committing_source = True
        try:
            result, undo_token = await self._async_apply(pending.item, pending.value)
        finally:
            self._committing_source = False

        if "error" in result:
            self._set_state(
                TriageEngine.reduce(
                    self.state, TriageAction.commit_failed(result["error"])
                )
            )
            const.LOGGER.warning(
                "Triage commit failed for '%s': %s", pending.item.id, result["error"]
            )
            await async_notify_triage_error(
                self.hass,
                self.coordinator.notify_service,
                pending.item.title,
                result["error"],
            )
            return self.state

        self._set_state(
            TriageEngine.reduce(self.state, TriageAction.commit_succeeded(undo_token))
        )
        return self.state

    async def async_undo(self) -> TriageState | None:
        """Revert the last commit and step back one item.

        Returns:
            The new state, or None when there is nothing to undo or the
            revert could not be saved.
        """
        if not self.state.can_undo:
            return None

        commit = self.state.last_commit
        if commit is None:
            return None
        if commit.undo_token:
            self._committing_source = True
            try:
                result = await self._async_revert(commit.undo_token)
            finally:
                self._committing_source = False
            if "error" in result:
                const.LOGGER.warning("Triage undo failed: %s", result["error"])
                await async_notify_triage_error(
                    self.hass,
                    self.coordinator.notify_service,
                    commit.item.title,
                    result["error"],
                )
                return None

        self._set_state(TriageEngine.reduce(self.state, TriageAction.undo()))
        return self.state

    # =========================================================================
    # Persistence per item type
    # =========================================================================

    async def _async_apply(
        self, item: CatchUpItem, value: str | None
    ) -> tuple[OperationResult, dict[str, Any] | None]:
        """Persist a done decision. Returns (result, undo token)."""
        if item.item_type == const.CATCHUP_TYPE_TASK:
            result = await self._care.async_add_care_log(
                item.action_type or item.id,
                cat_id=item.cat_id,
                notes=value,
            )
            return result, self._token(
                result, const.UNDO_KIND_CARE_LOG, (result.get("data") or {}).get(const.DATA_ID)
            )

        if item.item_type == const.CATCHUP_TYPE_INVENTORY:
            result = await self._household.async_mark_inventory_bought(item.id)
            return result, self._token(result, const.UNDO_KIND_INVENTORY, item.id)

        if item.item_type == const.CATCHUP_TYPE_INCIDENT:
            result = await self._household.async_resolve_incident(item.id)
            return result, self._token(result, const.UNDO_KIND_INCIDENT, item.id)

        if item.id.startswith("photo-"):
            result = await self._household.async_mark_photos_seen()
            return result, self._token(result, const.UNDO_KIND_PHOTOS_SEEN, None)

        result = await self._household.async_acknowledge_observation(item.id)
        return result, self._token(result, const.UNDO_KIND_OBSERVATION, item.id)

    @staticmethod
    def _token(
        result: OperationResult, kind: str, target_id: str | None
    ) -> dict[str, Any] | None:
        """Build the undo token for a successful write."""
        if "error" in result:
            return None
        return {
            const.UNDO_KIND: kind,
            const.UNDO_TARGET_ID: target_id,
            const.UNDO_PREVIOUS: result.get("previous", {}),
        }

    async def _async_revert(self, token: dict[str, Any]) -> OperationResult:
        """Undo a persisted done decision from its token."""
        kind = token.get(const.UNDO_KIND)
        target_id = token.get(const.UNDO_TARGET_ID)
        previous = token.get(const.UNDO_PREVIOUS) or {}

        if kind == const.UNDO_KIND_CARE_LOG:
            return await self._care.async_delete_care_log(target_id)  # type: ignore[arg-type]
        if kind == const.UNDO_KIND_OBSERVATION:
            return await self._household.async_set_observation_acknowledged(
                target_id,  # type: ignore[arg-type]
                previous.get(const.DATA_OBSERVATION_ACKNOWLEDGED_AT),
            )
        if kind == const.UNDO_KIND_PHOTOS_SEEN:
            return await self._household.async_mark_photos_seen(
                previous.get(const.DATA_META_LAST_SEEN_PHOTO_AT)
                or const.DEFAULT_LAST_SEEN_PHOTO_AT
            )
        if kind == const.UNDO_KIND_INVENTORY:
            return await self._household.async_update_inventory_item(
                target_id, previous  # type: ignore[arg-type]
            )
        if kind == const.UNDO_KIND_INCIDENT:
            return await self._household.async_update_incident(
                target_id, previous  # type: ignore[arg-type]
            )

        const.LOGGER.warning("Unknown undo token kind '%s'", kind)
        return {"error": const.ERROR_TRIAGE_NOTHING_TO_UNDO}
