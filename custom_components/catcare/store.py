# File: store.py
"""Handles persistent data storage for the CatCare integration.

Uses Home Assistant's Storage helper to save and load household data, so cats,
care task definitions, the care log and alert sources survive restarts.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class CatCareStore:
    """Handles persistent storage operations for CatCare data.

    Thin wrapper around Home Assistant's Store API. Id-keyed buckets hold
    definitions, cats and inventory; the care log and observations are
    append-only lists.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).

        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}  # In-memory data cache for quick access.

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return canonical data structure for fresh installations.

        Seeds the default care task and notice definitions so a new household
        has a useful checklist before any configuration.

        Returns:
            dict: Default structure with all buckets and meta initialized.
        """
        return {
            const.DATA_META: {
                const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION,
                const.DATA_META_LAST_SEEN_PHOTO_AT: const.DEFAULT_LAST_SEEN_PHOTO_AT,
            },
            const.DATA_CATS: {},
            const.DATA_CARE_TASK_DEFS: {
                definition[const.DATA_ID]: copy.deepcopy(definition)
                for definition in const.DEFAULT_CARE_TASK_DEFS
            },
            const.DATA_CARE_LOGS: [],
            const.DATA_NOTICE_DEFS: {
                definition[const.DATA_ID]: copy.deepcopy(definition)
                for definition in const.DEFAULT_NOTICE_DEFS
            },
            const.DATA_OBSERVATIONS: [],
            const.DATA_INVENTORY: {},
            const.DATA_INCIDENTS: {},
        }

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with the default structure. Buckets
        missing from older files are filled in from the defaults.
        """
        const.LOGGER.debug("CatCareStore: Loading data from storage")
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("No existing storage found. Initializing new data")
            self._data = CatCareStore.get_default_structure()
            return

        self._data = existing_data
        for key, value in CatCareStore.get_default_structure().items():
            self._data.setdefault(key, value)
        const.LOGGER.debug(
            "Loaded existing data from storage: %s",
            {
                "cats": len(self._data[const.DATA_CATS]),
                "care_task_defs": len(self._data[const.DATA_CARE_TASK_DEFS]),
                "care_logs": len(self._data[const.DATA_CARE_LOGS]),
                "observations": len(self._data[const.DATA_OBSERVATIONS]),
                "inventory": len(self._data[const.DATA_INVENTORY]),
                "incidents": len(self._data[const.DATA_INCIDENTS]),
            },
        )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def get_storage_path(self) -> str:
        """Get the storage file path.

        Returns:
            str: The absolute path to the storage file.
        """
        return self._store.path

    def set_data(self, new_data: dict[str, Any]) -> None:
        """Replace the entire in-memory data structure."""
        self._data = new_data

    async def async_save(self) -> bool:
        """Save the current data structure to storage asynchronously.

        Errors are logged, never raised, so callers can roll back their
        in-memory change.

        Returns:
            True when the data was written, False otherwise.
        """
        try:
            await self._store.async_save(self._data)
        except OSError as err:
            const.LOGGER.error(
                "Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
            return False
        except TypeError as err:
            const.LOGGER.error(
                "Failed to save storage due to non-serializable data: %s. "
                "Data contains types that cannot be converted to JSON",
                err,
            )
            return False
        except ValueError as err:
            const.LOGGER.error(
                "Failed to save storage due to invalid data format: %s. "
                "Data structure may be corrupted",
                err,
            )
            return False

        const.LOGGER.debug("Data saved successfully to storage")
        return True

    async def async_delete_storage(self) -> None:
        """Clear in-memory data and remove the storage file from disk."""
        const.LOGGER.warning("Clearing all CatCare data and removing storage")
        self._data = CatCareStore.get_default_structure()
        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "Storage file removed successfully: %s", self._store.path
            )
        except OSError as err:
            const.LOGGER.error(
                "Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
