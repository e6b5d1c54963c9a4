"""Base entity classes for CatCare integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from . import const
from .coordinator import CatCareDataCoordinator


def create_household_device_info(config_entry: ConfigEntry) -> DeviceInfo:
    """Create device info for the household (one device per config entry)."""
    return DeviceInfo(
        identifiers={(const.DOMAIN, config_entry.entry_id)},
        name=config_entry.title,
        manufacturer=const.CATCARE_MANUFACTURER,
        model=const.CATCARE_TITLE,
        entry_type=DeviceEntryType.SERVICE,
    )


class CatCareCoordinatorEntity(CoordinatorEntity[CatCareDataCoordinator]):
    """Base entity class for CatCare sensors with typed coordinator access."""

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: CatCareDataCoordinator,
        entry: ConfigEntry,
        unique_id_suffix: str,
    ) -> None:
        """Initialize the entity with a household-scoped unique id."""
        super().__init__(coordinator)
        self._attr_unique_id = f"{entry.entry_id}{unique_id_suffix}"
        self._attr_device_info = create_household_device_info(entry)
