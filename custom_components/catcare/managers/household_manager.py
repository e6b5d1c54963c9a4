"""Household Manager - Cats, photos, observations, incidents and inventory.

These records feed the catch-up list alongside outstanding care. Every
mutation that the triage flow may need to undo returns the overwritten
fields in `previous`, and has a matching restore operation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
import uuid

from homeassistant.util import dt as dt_util

from .. import const
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import CatCareDataCoordinator
    from ..type_defs import (
        CatData,
        IncidentData,
        InventoryItemData,
        ObservationData,
        OperationResult,
    )


class HouseholdManager(BaseManager):
    """Manager for the non-care household records."""

    def __init__(
        self, hass: HomeAssistant, coordinator: CatCareDataCoordinator
    ) -> None:
        """Initialize the HouseholdManager."""
        super().__init__(hass, coordinator)

    async def async_setup(self) -> None:
        """Set up the HouseholdManager. Called directly; no subscriptions."""
        const.LOGGER.debug(
            "HouseholdManager initialized for entry %s", self.entry_id
        )

    # =========================================================================
    # Data Access
    # =========================================================================

    @property
    def cats(self) -> dict[str, CatData]:
        """Return cats keyed by id."""
        return self._data[const.DATA_CATS]

    @property
    def observations(self) -> list[ObservationData]:
        """Return recorded observations."""
        return self._data[const.DATA_OBSERVATIONS]

    @property
    def incidents(self) -> dict[str, IncidentData]:
        """Return incidents keyed by id."""
        return self._data[const.DATA_INCIDENTS]

    @property
    def inventory(self) -> dict[str, InventoryItemData]:
        """Return inventory items keyed by id."""
        return self._data[const.DATA_INVENTORY]

    @property
    def last_seen_photo_at(self) -> str:
        """Return when photos were last reviewed (ISO)."""
        return self._data[const.DATA_META].get(
            const.DATA_META_LAST_SEEN_PHOTO_AT, const.DEFAULT_LAST_SEEN_PHOTO_AT
        )

    def get_observation(self, observation_id: str) -> ObservationData | None:
        """Return the observation with the given id, if any."""
        for observation in self.observations:
            if observation.get(const.DATA_ID) == observation_id:
                return observation
        return None

    # =========================================================================
    # Shared helpers
    # =========================================================================

    async def _async_update_fields(
        self,
        record: dict[str, Any],
        updates: dict[str, Any],
        *,
        source: str,
        **payload: Any,
    ) -> OperationResult:
        """Apply field updates to a stored record, rolling back on save failure."""
        previous = {key: record.get(key) for key in updates}
        record.update(updates)

        if not await self._async_commit(
            lambda: record.update(previous), source=source, **payload
        ):
            return {"error": const.ERROR_SAVE_FAILED}
        return {"data": dict(record), "previous": previous}

    # =========================================================================
    # Cats and Photos
    # =========================================================================

    async def async_upsert_cat(self, cat_id: str | None, name: str) -> OperationResult:
        """Create a cat or rename an existing one."""
        if cat_id and cat_id in self.cats:
            return await self._async_update_fields(
                self.cats[cat_id],  # type: ignore[arg-type]
                {const.DATA_CAT_NAME: name},
                source=const.SERVICE_UPSERT_CAT,
                cat_id=cat_id,
            )

        new_id = cat_id or str(uuid.uuid4())
        record: CatData = {
            const.DATA_ID: new_id,
            const.DATA_CAT_NAME: name,
            const.DATA_CAT_IMAGES: [],
        }  # type: ignore[typeddict-item]
        self.cats[new_id] = record

        if not await self._async_commit(
            lambda: self.cats.pop(new_id, None),
            source=const.SERVICE_UPSERT_CAT,
            cat_id=new_id,
        ):
            return {"error": const.ERROR_SAVE_FAILED}
        const.LOGGER.info("Cat '%s' added", name)
        return {"data": dict(record)}

    async def async_add_cat_photo(
        self, cat_id: str, storage_path: str
    ) -> OperationResult:
        """Attach a photo reference (path or URL) to a cat."""
        cat = self.cats.get(cat_id)
        if cat is None:
            return {"error": const.ERROR_CAT_NOT_FOUND_FMT.format(cat_id)}

        image = {
            const.DATA_ID: str(uuid.uuid4()),
            const.DATA_CAT_IMAGE_STORAGE_PATH: storage_path,
            const.DATA_CREATED_AT: dt_util.utcnow().isoformat(),
        }
        images = cat.setdefault(const.DATA_CAT_IMAGES, [])
        images.append(image)  # type: ignore[arg-type]

        if not await self._async_commit(
            lambda: images.remove(image),  # type: ignore[arg-type]
            source=const.SERVICE_ADD_CAT_PHOTO,
            cat_id=cat_id,
        ):
            return {"error": const.ERROR_SAVE_FAILED}
        return {"data": dict(image)}

    async def async_mark_photos_seen(self, seen_at: str | None = None) -> OperationResult:
        """Move the last-seen photo marker forward (defaults to now)."""
        return await self._async_update_fields(
            self._data[const.DATA_META],
            {
                const.DATA_META_LAST_SEEN_PHOTO_AT: seen_at
                or dt_util.utcnow().isoformat()
            },
            source=const.SERVICE_MARK_PHOTOS_SEEN,
        )

    # =========================================================================
    # Observations
    # =========================================================================

    async def async_record_observation(
        self, cat_id: str, observation_type: str, value: str, notes: str | None = None
    ) -> OperationResult:
        """Record an observation answer for a cat."""
        if cat_id not in self.cats:
            return {"error": const.ERROR_CAT_NOT_FOUND_FMT.format(cat_id)}

        record: ObservationData = {
            const.DATA_ID: str(uuid.uuid4()),
            const.DATA_OBSERVATION_CAT_ID: cat_id,
            const.DATA_OBSERVATION_TYPE: observation_type,
            const.DATA_OBSERVATION_VALUE: value,
            const.DATA_OBSERVATION_NOTES: notes,
            const.DATA_OBSERVATION_RECORDED_AT: dt_util.utcnow().isoformat(),
            const.DATA_OBSERVATION_ACKNOWLEDGED_AT: None,
        }  # type: ignore[typeddict-item]
        self.observations.append(record)

        if not await self._async_commit(
            lambda: self.observations.remove(record),
            source=const.SERVICE_RECORD_OBSERVATION,
            observation_id=record[const.DATA_ID],
        ):
            return {"error": const.ERROR_SAVE_FAILED}
        return {"data": dict(record)}

    async def async_set_observation_acknowledged(
        self, observation_id: str, acknowledged_at: str | None
    ) -> OperationResult:
        """Acknowledge an observation, or clear the acknowledgement with None."""
        record = self.get_observation(observation_id)
        if record is None:
            return {
                "error": const.ERROR_OBSERVATION_NOT_FOUND_FMT.format(observation_id)
            }
        return await self._async_update_fields(
            record,  # type: ignore[arg-type]
            {const.DATA_OBSERVATION_ACKNOWLEDGED_AT: acknowledged_at},
            source=const.SERVICE_ACKNOWLEDGE_OBSERVATION,
            observation_id=observation_id,
        )

    async def async_acknowledge_observation(self, observation_id: str) -> OperationResult:
        """Mark an observation as seen so it leaves the catch-up list."""
        return await self.async_set_observation_acknowledged(
            observation_id, dt_util.utcnow().isoformat()
        )

    # =========================================================================
    # Incidents
    # =========================================================================

    async def async_report_incident(
        self, cat_id: str, incident_type: str, note: str | None = None
    ) -> OperationResult:
        """Open a watched incident for a cat."""
        if cat_id not in self.cats:
            return {"error": const.ERROR_CAT_NOT_FOUND_FMT.format(cat_id)}

        incident_id = str(uuid.uuid4())
        record: IncidentData = {
            const.DATA_ID: incident_id,
            const.DATA_INCIDENT_CAT_ID: cat_id,
            const.DATA_INCIDENT_TYPE: incident_type,
            const.DATA_INCIDENT_STATUS: const.INCIDENT_STATUS_WATCHING,
            const.DATA_INCIDENT_NOTE: note,
            const.DATA_CREATED_AT: dt_util.utcnow().isoformat(),
            const.DATA_INCIDENT_RESOLVED_AT: None,
        }  # type: ignore[typeddict-item]
        self.incidents[incident_id] = record

        if not await self._async_commit(
            lambda: self.incidents.pop(incident_id, None),
            source=const.SERVICE_REPORT_INCIDENT,
            incident_id=incident_id,
        ):
            return {"error": const.ERROR_SAVE_FAILED}
        const.LOGGER.info("Incident '%s' reported for cat %s", incident_type, cat_id)
        return {"data": dict(record)}

    async def async_resolve_incident(self, incident_id: str) -> OperationResult:
        """Resolve an incident."""
        return await self.async_update_incident(
            incident_id,
            {
                const.DATA_INCIDENT_STATUS: const.INCIDENT_STATUS_RESOLVED,
                const.DATA_INCIDENT_RESOLVED_AT: dt_util.utcnow().isoformat(),
            },
        )

    async def async_update_incident(
        self, incident_id: str, updates: dict[str, Any]
    ) -> OperationResult:
        """Overwrite incident fields (used for resolve and to restore on undo)."""
        record = self.incidents.get(incident_id)
        if record is None:
            return {"error": const.ERROR_INCIDENT_NOT_FOUND_FMT.format(incident_id)}
        return await self._async_update_fields(
            record,  # type: ignore[arg-type]
            updates,
            source=const.SERVICE_RESOLVE_INCIDENT,
            incident_id=incident_id,
        )

    # =========================================================================
    # Inventory
    # =========================================================================

    async def async_upsert_inventory_item(
        self, item_id: str | None, fields: dict[str, Any]
    ) -> OperationResult:
        """Create or update an inventory item."""
        if item_id and item_id in self.inventory:
            return await self.async_update_inventory_item(item_id, fields)

        if not fields.get(const.DATA_INVENTORY_LABEL):
            return {"error": const.ERROR_INVENTORY_NOT_FOUND_FMT.format(item_id)}

        new_id = item_id or str(uuid.uuid4())
        record: InventoryItemData = {
            const.DATA_ID: new_id,
            const.DATA_INVENTORY_LABEL: fields[const.DATA_INVENTORY_LABEL],
            const.DATA_INVENTORY_RANGE_MAX: fields.get(
                const.DATA_INVENTORY_RANGE_MAX, const.DEFAULT_INVENTORY_RANGE_MAX_DAYS
            ),
            const.DATA_INVENTORY_LAST_BOUGHT: fields.get(
                const.DATA_INVENTORY_LAST_BOUGHT
            ),
            const.DATA_INVENTORY_STOCK_LEVEL: fields.get(
                const.DATA_INVENTORY_STOCK_LEVEL, const.STOCK_LEVEL_FULL
            ),
            const.DATA_INVENTORY_ALERT_ENABLED: fields.get(
                const.DATA_INVENTORY_ALERT_ENABLED, True
            ),
            const.DATA_INVENTORY_PURCHASE_MEMO: fields.get(
                const.DATA_INVENTORY_PURCHASE_MEMO
            ),
            const.DATA_DELETED_AT: None,
        }  # type: ignore[typeddict-item]
        self.inventory[new_id] = record

        if not await self._async_commit(
            lambda: self.inventory.pop(new_id, None),
            source=const.SERVICE_UPSERT_INVENTORY_ITEM,
            item_id=new_id,
        ):
            return {"error": const.ERROR_SAVE_FAILED}
        return {"data": dict(record)}

    async def async_update_inventory_item(
        self, item_id: str, updates: dict[str, Any]
    ) -> OperationResult:
        """Overwrite inventory fields (used for edits and to restore on undo)."""
        record = self.inventory.get(item_id)
        if record is None:
            return {"error": const.ERROR_INVENTORY_NOT_FOUND_FMT.format(item_id)}
        return await self._async_update_fields(
            record,  # type: ignore[arg-type]
            updates,
            source=const.SERVICE_UPSERT_INVENTORY_ITEM,
            item_id=item_id,
        )

    async def async_mark_inventory_bought(self, item_id: str) -> OperationResult:
        """Record a purchase: restart the days-left clock and refill stock."""
        return await self.async_update_inventory_item(
            item_id,
            {
                const.DATA_INVENTORY_LAST_BOUGHT: dt_util.utcnow().isoformat(),
                const.DATA_INVENTORY_STOCK_LEVEL: const.STOCK_LEVEL_FULL,
            },
        )
