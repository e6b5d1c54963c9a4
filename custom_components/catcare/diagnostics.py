"""Diagnostics support for CatCare integration.

Returns the raw household store next to the derived snapshot, so a report
shows both what was recorded and what the engines made of it.
"""

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import CatCareDataCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: CatCareDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    snapshot = coordinator.compute_snapshot()
    triage = coordinator.triage_manager.state

    return {
        "options": dict(entry.options),
        "storage": coordinator.store.data,
        "snapshot": {
            "now": snapshot.now.isoformat(),
            "business_date": snapshot.business_date,
            "current_slot": snapshot.care.current_slot,
            "care_instances": [i.as_dict() for i in snapshot.care.instances],
            "catch_up_summary": snapshot.catch_up.summary,
            "catch_up_items": [i.as_dict() for i in snapshot.catch_up.items],
        },
        "triage": {
            "phase": triage.phase,
            "index": triage.index,
            "item_count": len(triage.items),
            "stale": coordinator.triage_manager.stale,
        },
    }
