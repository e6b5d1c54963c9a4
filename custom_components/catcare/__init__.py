# File: __init__.py
"""Initialization file for the CatCare integration.

Handles setting up the integration, including loading the household store,
initializing the coordinator and its managers, and registering services.

Key Features:
- Config entry setup and unload support.
- Coordinator initialization for snapshot recomputation.
- Storage management for persistent household data.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from . import const
from .coordinator import CatCareDataCoordinator
from .services import async_setup_services, async_unload_services
from .store import CatCareStore


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("Starting setup for CatCare entry: %s", entry.entry_id)

    # Business-day math depends on the configured timezone
    const.set_default_timezone(hass)

    store = CatCareStore(hass, const.STORAGE_KEY)
    await store.async_initialize()

    coordinator = CatCareDataCoordinator(hass, entry, store)
    await coordinator.async_setup()

    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("Failed to refresh coordinator data: %s", e)
        raise ConfigEntryNotReady from e

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORE: store,
    }

    if not hass.services.has_service(const.DOMAIN, const.SERVICE_ADD_CARE_LOG):
        async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    # Options changes (day start hour, refresh interval) need a fresh coordinator
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    const.LOGGER.info("CatCare setup complete for entry: %s", entry.entry_id)
    return True


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry after an options update."""
    const.LOGGER.debug("Reloading CatCare entry %s after options update", entry.entry_id)
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("Unloading CatCare entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        hass.data[const.DOMAIN].pop(entry.entry_id)
        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry by deleting the household store."""
    const.LOGGER.info("Removing CatCare entry: %s", entry.entry_id)

    store = CatCareStore(hass, const.STORAGE_KEY)
    await store.async_delete_storage()

    const.LOGGER.info("CatCare entry data cleared: %s", entry.entry_id)
