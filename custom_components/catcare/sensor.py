# File: sensor.py
"""Sensors for the CatCare integration.

- Care progress: percentage of today's due care instances completed
- Catch-up: number of ranked catch-up items
- Triage: phase of the swipe-triage session
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import PERCENTAGE
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .coordinator import CatCareDataCoordinator
from .entity import CatCareCoordinatorEntity
from .utils.math_utils import calculate_percentage


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensors for CatCare integration."""
    coordinator: CatCareDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    async_add_entities(
        [
            CareProgressSensor(coordinator, entry),
            CatchUpSensor(coordinator, entry),
            TriageSensor(coordinator, entry),
        ]
    )


class CareProgressSensor(CatCareCoordinatorEntity, SensorEntity):
    """Completion percentage of the care instances due so far today.

    Nothing due counts as fully done (100%).
    """

    _attr_translation_key = const.TRANS_KEY_SENSOR_CARE_PROGRESS
    _attr_native_unit_of_measurement = PERCENTAGE
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_icon = "mdi:paw"

    def __init__(self, coordinator: CatCareDataCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_CARE_PROGRESS)

    @property
    def native_value(self) -> float | None:
        """Return progress as a percentage."""
        if self.coordinator.data is None:
            return None
        care = self.coordinator.data.care
        return calculate_percentage(care.completed, care.total)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return totals and instance detail."""
        if self.coordinator.data is None:
            return {}
        care = self.coordinator.data.care
        return {
            const.ATTR_BUSINESS_DATE: care.business_date,
            const.ATTR_TOTAL: care.total,
            const.ATTR_COMPLETED: care.completed,
            const.ATTR_OUTSTANDING: [i.label for i in care.outstanding],
            const.ATTR_INSTANCES: [i.as_dict() for i in care.instances],
        }


class CatchUpSensor(CatCareCoordinatorEntity, SensorEntity):
    """Number of items waiting in the catch-up list."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_CATCH_UP
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_icon = "mdi:bell-badge"

    def __init__(self, coordinator: CatCareDataCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_CATCH_UP)

    @property
    def native_value(self) -> int | None:
        """Return the item count."""
        if self.coordinator.data is None:
            return None
        return len(self.coordinator.data.catch_up.items)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return the summary and the display window."""
        if self.coordinator.data is None:
            return {}
        catch_up = self.coordinator.data.catch_up
        return {
            const.ATTR_SUMMARY: catch_up.summary,
            const.ATTR_ITEMS: [item.as_dict() for item in catch_up.display_items],
            const.ATTR_REMAINING_COUNT: catch_up.remaining_count,
        }


class TriageSensor(CatCareCoordinatorEntity, SensorEntity):
    """Phase of the swipe-triage session (idle/presenting/committing/completed)."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_TRIAGE
    _attr_icon = "mdi:gesture-swipe"

    def __init__(self, coordinator: CatCareDataCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_TRIAGE)

    @property
    def native_value(self) -> str:
        """Return the session phase."""
        return self.coordinator.triage_manager.state.phase

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return the current card and undo availability."""
        manager = self.coordinator.triage_manager
        state = manager.state
        current = state.current_item
        last = state.last_commit
        return {
            const.ATTR_INDEX: state.index,
            const.ATTR_ITEM_COUNT: len(state.items),
            const.ATTR_CURRENT_ITEM: current.as_dict() if current else None,
            const.ATTR_ERROR: state.error,
            const.ATTR_CAN_UNDO: state.can_undo,
            const.ATTR_LAST_DECISION: last.decision if last else None,
            const.ATTR_STALE: manager.stale,
        }
