"""Base manager class for CatCare managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import (
    async_dispatcher_connect,
    async_dispatcher_send,
)

from .. import const

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.core import HomeAssistant

    from ..coordinator import CatCareDataCoordinator


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Format: 'catcare_{entry_id}_{suffix}'
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


class BaseManager(ABC):
    """Base class for all CatCare managers with scoped event support.

    Provides:
    - Instance-scoped event emitting (emit)
    - Instance-scoped event listening (listen)
    - Save-or-rollback persistence (_async_commit)

    Subclasses must implement:
    - async_setup(): Subscribe to events, initialize state
    """

    def __init__(
        self, hass: HomeAssistant, coordinator: CatCareDataCoordinator
    ) -> None:
        """Initialize manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator managing this integration instance
        """
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id

    @property
    def _data(self) -> dict[str, Any]:
        """Return the live storage data."""
        return self.coordinator.store.data

    def emit(self, suffix: str, **payload: Any) -> None:
        """Emit instance-scoped event to other managers.

        Args:
            suffix: Signal suffix constant (e.g., const.SIGNAL_SUFFIX_RECORDS_CHANGED)
            **payload: Event data dict passed to listeners
        """
        signal = get_event_signal(self.entry_id, suffix)
        const.LOGGER.debug(
            "Emitting event '%s' for instance %s with payload keys: %s",
            suffix,
            self.entry_id,
            list(payload.keys()),
        )
        # Pass payload as single dict argument (dispatcher only supports *args)
        async_dispatcher_send(self.hass, signal, payload)

    def listen(self, suffix: str, callback: Callable[..., Any]) -> None:
        """Subscribe to instance-scoped event with automatic cleanup.

        The subscription is removed when the config entry is unloaded.
        """
        signal = get_event_signal(self.entry_id, suffix)
        unsub = async_dispatcher_connect(self.hass, signal, callback)
        self.coordinator.config_entry.async_on_unload(unsub)
        const.LOGGER.debug(
            "Manager %s listening to event '%s' for instance %s",
            self.__class__.__name__,
            suffix,
            self.entry_id,
        )

    async def _async_commit(
        self, rollback: Callable[[], None], *, source: str, **payload: Any
    ) -> bool:
        """Persist the in-memory change, or undo it if the save fails.

        On success the derived snapshot is refreshed and listeners are told
        which records changed.

        Args:
            rollback: Restores the in-memory state as it was before the change
            source: Operation name for logs and listeners
            **payload: Extra data for SIGNAL_SUFFIX_RECORDS_CHANGED listeners

        Returns:
            True when persisted, False when rolled back.
        """
        if not await self.coordinator.store.async_save():
            rollback()
            const.LOGGER.warning(
                "%s: save failed during '%s', change rolled back",
                self.__class__.__name__,
                source,
            )
            return False

        self.coordinator.async_refresh_snapshot()
        self.emit(const.SIGNAL_SUFFIX_RECORDS_CHANGED, source=source, **payload)
        return True

    @abstractmethod
    async def async_setup(self) -> None:
        """Set up the manager (subscribe to events, initialize state).

        Called once during coordinator initialization.
        """
