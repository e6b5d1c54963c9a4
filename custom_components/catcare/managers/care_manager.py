"""Care Manager - Care log and care task definition lifecycle.

This manager is the household's log provider:
- Append completion logs (never edited afterwards)
- Soft-delete logs by stamping deleted_at
- Create, update and remove care task definitions

Every write is persisted before it is reported as done. A failed save
rolls back the in-memory change and returns an `error` result instead of
raising, so callers such as the triage flow can decide how to surface it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
import uuid

from homeassistant.util import dt as dt_util

from .. import const
from ..engines.care_engine import CareEngine
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import CatCareDataCoordinator
    from ..type_defs import CareLogData, CareTaskDefData, OperationResult


class CareManager(BaseManager):
    """Manager for care logs and care task definitions.

    NOT responsible for:
    - Deciding which instances are outstanding (CareEngine)
    - Ranking catch-up items (CatchUpEngine)
    """

    def __init__(
        self, hass: HomeAssistant, coordinator: CatCareDataCoordinator
    ) -> None:
        """Initialize the CareManager."""
        super().__init__(hass, coordinator)

    async def async_setup(self) -> None:
        """Set up the CareManager. Called directly; no subscriptions."""
        const.LOGGER.debug("CareManager initialized for entry %s", self.entry_id)

    # =========================================================================
    # Data Access
    # =========================================================================

    @property
    def care_logs(self) -> list[CareLogData]:
        """Return every stored care log, soft-deleted rows included."""
        return self._data[const.DATA_CARE_LOGS]

    @property
    def care_task_defs(self) -> dict[str, CareTaskDefData]:
        """Return care task definitions keyed by id."""
        return self._data[const.DATA_CARE_TASK_DEFS]

    def get_care_log(self, log_id: str) -> CareLogData | None:
        """Return the care log with the given id, if any."""
        for log in self.care_logs:
            if log.get(const.DATA_ID) == log_id:
                return log
        return None

    # =========================================================================
    # Care Logs
    # =========================================================================

    async def async_add_care_log(
        self,
        log_type: str,
        cat_id: str | None = None,
        notes: str | None = None,
        images: list[str] | None = None,
        done_by: str | None = None,
        done_at: str | None = None,
    ) -> OperationResult:
        """Append a completion log.

        Duplicate logs for an already satisfied slot are written anyway; the
        matcher is existence based, so they do not change `done` status.

        Args:
            log_type: "{defId}", "{defId}:{slot}" (legacy "{defId}_{slot}" accepted)
            cat_id: Cat the care was for, None for household-wide care
            notes: Optional free text
            images: Optional image paths/URLs
            done_by: Optional actor id (HA user id)
            done_at: ISO timestamp, defaults to now (UTC)

        Returns:
            {"data": log} on success, {"error": message} otherwise.
        """
        if not log_type:
            return {"error": const.ERROR_INVALID_LOG_TYPE}
        if cat_id and cat_id not in self._data[const.DATA_CATS]:
            return {"error": const.ERROR_CAT_NOT_FOUND_FMT.format(cat_id)}

        record: CareLogData = {
            const.DATA_ID: str(uuid.uuid4()),
            const.DATA_CARE_LOG_TYPE: log_type,
            const.DATA_CARE_LOG_CAT_ID: cat_id,
            const.DATA_CARE_LOG_DONE_AT: done_at or dt_util.utcnow().isoformat(),
            const.DATA_CARE_LOG_NOTES: notes,
            const.DATA_CARE_LOG_IMAGES: list(images) if images else None,
            const.DATA_CARE_LOG_DONE_BY: done_by,
            const.DATA_DELETED_AT: None,
        }  # type: ignore[typeddict-item]
        self.care_logs.append(record)

        if not await self._async_commit(
            lambda: self.care_logs.remove(record),
            source=const.SERVICE_ADD_CARE_LOG,
            log_id=record[const.DATA_ID],
        ):
            return {"error": const.ERROR_SAVE_FAILED}

        parsed = CareEngine.parse_log_type(log_type, self.care_task_defs.keys())
        self.hass.bus.async_fire(
            const.EVENT_CARE_LOG_ADDED,
            {
                "entry_id": self.entry_id,
                "log_id": record[const.DATA_ID],
                "type": log_type,
                "def_id": parsed.base_id,
                "slot": parsed.slot,
                "cat_id": cat_id,
            },
        )
        const.LOGGER.debug("Care log added: %s (cat=%s)", log_type, cat_id)
        return {"data": dict(record)}

    async def async_delete_care_log(self, log_id: str) -> OperationResult:
        """Soft-delete a care log by stamping deleted_at.

        Deleting an already deleted log succeeds without another write.
        """
        record = self.get_care_log(log_id)
        if record is None:
            return {"error": const.ERROR_CARE_LOG_NOT_FOUND_FMT.format(log_id)}
        if record.get(const.DATA_DELETED_AT):
            return {"data": dict(record)}

        record[const.DATA_DELETED_AT] = dt_util.utcnow().isoformat()

        def _rollback() -> None:
            record[const.DATA_DELETED_AT] = None

        if not await self._async_commit(
            _rollback, source=const.SERVICE_DELETE_CARE_LOG, log_id=log_id
        ):
            return {"error": const.ERROR_SAVE_FAILED}

        const.LOGGER.debug("Care log soft-deleted: %s", log_id)
        return {"data": dict(record)}

    # =========================================================================
    # Care Task Definitions
    # =========================================================================

    async def async_upsert_care_task(
        self, task_id: str | None, fields: dict[str, Any]
    ) -> OperationResult:
        """Create or update a care task definition.

        Unspecified fields keep their stored value on update. The stored
        record is the normalized definition, so later reads never see an
        unknown frequency or slot.
        """
        existing = self.care_task_defs.get(task_id) if task_id else None
        if task_id and existing is None and not fields.get(const.DATA_CARE_TASK_TITLE):
            return {"error": const.ERROR_CARE_TASK_NOT_FOUND_FMT.format(task_id)}

        new_id = task_id or str(uuid.uuid4())
        merged: dict[str, Any] = {**(existing or {}), **fields, const.DATA_ID: new_id}
        definition = CareEngine.normalize_definition(merged)
        record: CareTaskDefData = {
            const.DATA_ID: definition.id,
            const.DATA_CARE_TASK_TITLE: definition.title,
            const.DATA_CARE_TASK_ENABLED: definition.enabled,
            const.DATA_CARE_TASK_FREQUENCY: definition.frequency,
            const.DATA_CARE_TASK_FREQUENCY_COUNT: definition.frequency_count,
            const.DATA_CARE_TASK_MEAL_SLOTS: list(definition.meal_slots),
            const.DATA_CARE_TASK_ICON: definition.icon,
            const.DATA_CARE_TASK_PER_CAT: definition.per_cat,
            const.DATA_CARE_TASK_TARGET_CAT_IDS: list(definition.target_cat_ids),
        }

        self.care_task_defs[new_id] = record

        def _rollback() -> None:
            if existing is None:
                self.care_task_defs.pop(new_id, None)
            else:
                self.care_task_defs[new_id] = existing

        if not await self._async_commit(
            _rollback, source=const.SERVICE_UPSERT_CARE_TASK, task_id=new_id
        ):
            return {"error": const.ERROR_SAVE_FAILED}

        const.LOGGER.info(
            "Care task '%s' %s", new_id, "updated" if existing else "created"
        )
        return {"data": dict(record)}

    async def async_remove_care_task(self, task_id: str) -> OperationResult:
        """Remove a care task definition. Its logs stay in the history."""
        existing = self.care_task_defs.pop(task_id, None)
        if existing is None:
            return {"error": const.ERROR_CARE_TASK_NOT_FOUND_FMT.format(task_id)}

        def _rollback() -> None:
            self.care_task_defs[task_id] = existing

        if not await self._async_commit(
            _rollback, source=const.SERVICE_REMOVE_CARE_TASK, task_id=task_id
        ):
            return {"error": const.ERROR_SAVE_FAILED}

        const.LOGGER.info("Care task '%s' removed", task_id)
        return {"data": dict(existing)}
