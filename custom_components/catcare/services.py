# File: services.py
"""Defines custom services for the CatCare integration.

These services let scripts, automations and dashboards record care, manage
household records and drive the swipe-triage session.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import const
from .coordinator import CatCareDataCoordinator
from .type_defs import OperationResult

# --- Service Schemas ---
ADD_CARE_LOG_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TYPE): cv.string,
        vol.Optional(const.FIELD_CAT_ID): cv.string,
        vol.Optional(const.FIELD_NOTES): cv.string,
        vol.Optional(const.FIELD_IMAGES): vol.All(cv.ensure_list, [cv.string]),
    }
)

DELETE_CARE_LOG_SCHEMA = vol.Schema({vol.Required(const.FIELD_LOG_ID): cv.string})

UPSERT_CARE_TASK_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_TASK_ID): cv.string,
        vol.Optional(const.FIELD_TITLE): cv.string,
        vol.Optional(const.FIELD_ENABLED): cv.boolean,
        vol.Optional(const.FIELD_FREQUENCY): vol.In(const.FREQUENCY_OPTIONS),
        vol.Optional(const.FIELD_FREQUENCY_COUNT): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
        vol.Optional(const.FIELD_MEAL_SLOTS): vol.All(
            cv.ensure_list, [vol.In(const.SLOT_ORDER)]
        ),
        vol.Optional(const.FIELD_ICON): cv.icon,
        vol.Optional(const.FIELD_PER_CAT): cv.boolean,
        vol.Optional(const.FIELD_TARGET_CAT_IDS): vol.All(cv.ensure_list, [cv.string]),
    }
)

REMOVE_CARE_TASK_SCHEMA = vol.Schema({vol.Required(const.FIELD_TASK_ID): cv.string})

UPSERT_CAT_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_CAT_ID): cv.string,
        vol.Required(const.FIELD_NAME): cv.string,
    }
)

ADD_CAT_PHOTO_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CAT_ID): cv.string,
        vol.Required(const.FIELD_STORAGE_PATH): cv.string,
    }
)

MARK_PHOTOS_SEEN_SCHEMA = vol.Schema({})

RECORD_OBSERVATION_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CAT_ID): cv.string,
        vol.Required(const.FIELD_TYPE): cv.string,
        vol.Required(const.FIELD_VALUE): cv.string,
        vol.Optional(const.FIELD_NOTES): cv.string,
    }
)

ACKNOWLEDGE_OBSERVATION_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_OBSERVATION_ID): cv.string}
)

REPORT_INCIDENT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CAT_ID): cv.string,
        vol.Required(const.FIELD_TYPE): cv.string,
        vol.Optional(const.FIELD_NOTE): cv.string,
    }
)

RESOLVE_INCIDENT_SCHEMA = vol.Schema({vol.Required(const.FIELD_INCIDENT_ID): cv.string})

UPSERT_INVENTORY_ITEM_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_ITEM_ID): cv.string,
        vol.Optional(const.FIELD_LABEL): cv.string,
        vol.Optional(const.FIELD_RANGE_MAX): vol.All(vol.Coerce(int), vol.Range(min=1)),
        vol.Optional(const.FIELD_STOCK_LEVEL): vol.In(const.STOCK_LEVEL_OPTIONS),
        vol.Optional(const.FIELD_ALERT_ENABLED): cv.boolean,
        vol.Optional(const.FIELD_PURCHASE_MEMO): cv.string,
    }
)

MARK_INVENTORY_BOUGHT_SCHEMA = vol.Schema({vol.Required(const.FIELD_ITEM_ID): cv.string})

TRIAGE_START_SCHEMA = vol.Schema({})

TRIAGE_SWIPE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_OFFSET_X): vol.Coerce(float),
        vol.Optional(const.FIELD_OFFSET_Y, default=0.0): vol.Coerce(float),
        vol.Optional(const.FIELD_VELOCITY_X, default=0.0): vol.Coerce(float),
        vol.Optional(const.FIELD_VELOCITY_Y, default=0.0): vol.Coerce(float),
        vol.Optional(const.FIELD_MEMO): cv.string,
    }
)

TRIAGE_DECIDE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_DECISION): vol.In(const.TRIAGE_DECISION_OPTIONS),
        vol.Optional(const.FIELD_MEMO): cv.string,
    }
)

TRIAGE_UNDO_SCHEMA = vol.Schema({})


def _get_coordinator(hass: HomeAssistant) -> CatCareDataCoordinator:
    """Return the coordinator of the (single) loaded CatCare entry."""
    for entry_data in hass.data.get(const.DOMAIN, {}).values():
        if isinstance(entry_data, dict) and const.COORDINATOR in entry_data:
            return entry_data[const.COORDINATOR]
    const.LOGGER.warning("Service call: %s", const.ERROR_NO_ENTRY_FOUND)
    raise HomeAssistantError(const.ERROR_NO_ENTRY_FOUND)


def _raise_on_error(service: str, result: OperationResult) -> dict[str, Any]:
    """Turn a manager error result into a HomeAssistantError."""
    if "error" in result:
        const.LOGGER.warning("%s: %s", service, result["error"])
        raise HomeAssistantError(result["error"])
    return result.get("data", {})


def async_setup_services(hass: HomeAssistant) -> None:
    """Register CatCare services."""

    # --- Care ---

    async def handle_add_care_log(call: ServiceCall) -> None:
        """Handle recording a completed care task."""
        coordinator = _get_coordinator(hass)
        result = await coordinator.care_manager.async_add_care_log(
            call.data[const.FIELD_TYPE],
            cat_id=call.data.get(const.FIELD_CAT_ID),
            notes=call.data.get(const.FIELD_NOTES),
            images=call.data.get(const.FIELD_IMAGES),
            done_by=call.context.user_id,
        )
        _raise_on_error(const.SERVICE_ADD_CARE_LOG, result)

    async def handle_delete_care_log(call: ServiceCall) -> None:
        """Handle soft-deleting a care log."""
        coordinator = _get_coordinator(hass)
        result = await coordinator.care_manager.async_delete_care_log(
            call.data[const.FIELD_LOG_ID]
        )
        _raise_on_error(const.SERVICE_DELETE_CARE_LOG, result)

    async def handle_upsert_care_task(call: ServiceCall) -> None:
        """Handle creating or editing a care task definition."""
        coordinator = _get_coordinator(hass)
        fields = {
            key: value for key, value in call.data.items() if key != const.FIELD_TASK_ID
        }
        result = await coordinator.care_manager.async_upsert_care_task(
            call.data.get(const.FIELD_TASK_ID), fields
        )
        _raise_on_error(const.SERVICE_UPSERT_CARE_TASK, result)

    async def handle_remove_care_task(call: ServiceCall) -> None:
        """Handle removing a care task definition."""
        coordinator = _get_coordinator(hass)
        result = await coordinator.care_manager.async_remove_care_task(
            call.data[const.FIELD_TASK_ID]
        )
        _raise_on_error(const.SERVICE_REMOVE_CARE_TASK, result)

    # --- Household ---

    async def handle_upsert_cat(call: ServiceCall) -> None:
        """Handle adding or renaming a cat."""
        coordinator = _get_coordinator(hass)
        result = await coordinator.household_manager.async_upsert_cat(
            call.data.get(const.FIELD_CAT_ID), call.data[const.FIELD_NAME]
        )
        _raise_on_error(const.SERVICE_UPSERT_CAT, result)

    async def handle_add_cat_photo(call: ServiceCall) -> None:
        """Handle attaching a photo reference to a cat."""
        coordinator = _get_coordinator(hass)
        result = await coordinator.household_manager.async_add_cat_photo(
            call.data[const.FIELD_CAT_ID], call.data[const.FIELD_STORAGE_PATH]
        )
        _raise_on_error(const.SERVICE_ADD_CAT_PHOTO, result)

    async def handle_mark_photos_seen(call: ServiceCall) -> None:
        """Handle clearing the unseen-photo alerts."""
        coordinator = _get_coordinator(hass)
        result = await coordinator.household_manager.async_mark_photos_seen()
        _raise_on_error(const.SERVICE_MARK_PHOTOS_SEEN, result)

    async def handle_record_observation(call: ServiceCall) -> None:
        """Handle recording an observation answer."""
        coordinator = _get_coordinator(hass)
        result = await coordinator.household_manager.async_record_observation(
            call.data[const.FIELD_CAT_ID],
            call.data[const.FIELD_TYPE],
            call.data[const.FIELD_VALUE],
            call.data.get(const.FIELD_NOTES),
        )
        _raise_on_error(const.SERVICE_RECORD_OBSERVATION, result)

    async def handle_acknowledge_observation(call: ServiceCall) -> None:
        """Handle acknowledging an observation."""
        coordinator = _get_coordinator(hass)
        result = await coordinator.household_manager.async_acknowledge_observation(
            call.data[const.FIELD_OBSERVATION_ID]
        )
        _raise_on_error(const.SERVICE_ACKNOWLEDGE_OBSERVATION, result)

    async def handle_report_incident(call: ServiceCall) -> None:
        """Handle opening an incident."""
        coordinator = _get_coordinator(hass)
        result = await coordinator.household_manager.async_report_incident(
            call.data[const.FIELD_CAT_ID],
            call.data[const.FIELD_TYPE],
            call.data.get(const.FIELD_NOTE),
        )
        _raise_on_error(const.SERVICE_REPORT_INCIDENT, result)

    async def handle_resolve_incident(call: ServiceCall) -> None:
        """Handle resolving an incident."""
        coordinator = _get_coordinator(hass)
        result = await coordinator.household_manager.async_resolve_incident(
            call.data[const.FIELD_INCIDENT_ID]
        )
        _raise_on_error(const.SERVICE_RESOLVE_INCIDENT, result)

    async def handle_upsert_inventory_item(call: ServiceCall) -> None:
        """Handle creating or editing an inventory item."""
        coordinator = _get_coordinator(hass)
        fields = {
            key: value for key, value in call.data.items() if key != const.FIELD_ITEM_ID
        }
        result = await coordinator.household_manager.async_upsert_inventory_item(
            call.data.get(const.FIELD_ITEM_ID), fields
        )
        _raise_on_error(const.SERVICE_UPSERT_INVENTORY_ITEM, result)

    async def handle_mark_inventory_bought(call: ServiceCall) -> None:
        """Handle recording a purchase."""
        coordinator = _get_coordinator(hass)
        result = await coordinator.household_manager.async_mark_inventory_bought(
            call.data[const.FIELD_ITEM_ID]
        )
        _raise_on_error(const.SERVICE_MARK_INVENTORY_BOUGHT, result)

    # --- Triage ---

    async def handle_triage_start(call: ServiceCall) -> None:
        """Handle starting a triage session over the current catch-up list."""
        coordinator = _get_coordinator(hass)
        state = coordinator.triage_manager.start()
        const.LOGGER.info(
            "Triage session started: %s items", len(state.items)
        )

    async def handle_triage_swipe(call: ServiceCall) -> None:
        """Handle a released swipe gesture on the current card."""
        coordinator = _get_coordinator(hass)
        manager = coordinator.triage_manager
        if manager.state.phase != const.TRIAGE_PHASE_PRESENTING:
            raise HomeAssistantError(const.ERROR_TRIAGE_NOT_PRESENTING)
        direction = await manager.async_swipe(
            call.data[const.FIELD_OFFSET_X],
            call.data[const.FIELD_OFFSET_Y],
            call.data[const.FIELD_VELOCITY_X],
            call.data[const.FIELD_VELOCITY_Y],
            call.data.get(const.FIELD_MEMO),
        )
        const.LOGGER.debug("Triage swipe classified as '%s'", direction)

    async def handle_triage_decide(call: ServiceCall) -> None:
        """Handle a button decision on the current card."""
        coordinator = _get_coordinator(hass)
        manager = coordinator.triage_manager
        if manager.state.phase != const.TRIAGE_PHASE_PRESENTING:
            raise HomeAssistantError(const.ERROR_TRIAGE_NOT_PRESENTING)
        await manager.async_decide(
            call.data[const.FIELD_DECISION],
            call.data.get(const.FIELD_MEMO),
        )

    async def handle_triage_undo(call: ServiceCall) -> None:
        """Handle stepping back one triage decision."""
        coordinator = _get_coordinator(hass)
        manager = coordinator.triage_manager
        if not manager.state.can_undo:
            raise HomeAssistantError(const.ERROR_TRIAGE_NOTHING_TO_UNDO)
        if await manager.async_undo() is None:
            raise HomeAssistantError(const.ERROR_SAVE_FAILED)

    # --- Register Services ---
    for service, handler, schema in (
        (const.SERVICE_ADD_CARE_LOG, handle_add_care_log, ADD_CARE_LOG_SCHEMA),
        (const.SERVICE_DELETE_CARE_LOG, handle_delete_care_log, DELETE_CARE_LOG_SCHEMA),
        (
            const.SERVICE_UPSERT_CARE_TASK,
            handle_upsert_care_task,
            UPSERT_CARE_TASK_SCHEMA,
        ),
        (
            const.SERVICE_REMOVE_CARE_TASK,
            handle_remove_care_task,
            REMOVE_CARE_TASK_SCHEMA,
        ),
        (const.SERVICE_UPSERT_CAT, handle_upsert_cat, UPSERT_CAT_SCHEMA),
        (const.SERVICE_ADD_CAT_PHOTO, handle_add_cat_photo, ADD_CAT_PHOTO_SCHEMA),
        (
            const.SERVICE_MARK_PHOTOS_SEEN,
            handle_mark_photos_seen,
            MARK_PHOTOS_SEEN_SCHEMA,
        ),
        (
            const.SERVICE_RECORD_OBSERVATION,
            handle_record_observation,
            RECORD_OBSERVATION_SCHEMA,
        ),
        (
            const.SERVICE_ACKNOWLEDGE_OBSERVATION,
            handle_acknowledge_observation,
            ACKNOWLEDGE_OBSERVATION_SCHEMA,
        ),
        (const.SERVICE_REPORT_INCIDENT, handle_report_incident, REPORT_INCIDENT_SCHEMA),
        (
            const.SERVICE_RESOLVE_INCIDENT,
            handle_resolve_incident,
            RESOLVE_INCIDENT_SCHEMA,
        ),
        (
            const.SERVICE_UPSERT_INVENTORY_ITEM,
            handle_upsert_inventory_item,
            UPSERT_INVENTORY_ITEM_SCHEMA,
        ),
        (
            const.SERVICE_MARK_INVENTORY_BOUGHT,
            handle_mark_inventory_bought,
            MARK_INVENTORY_BOUGHT_SCHEMA,
        ),
        (const.SERVICE_TRIAGE_START, handle_triage_start, TRIAGE_START_SCHEMA),
        (const.SERVICE_TRIAGE_SWIPE, handle_triage_swipe, TRIAGE_SWIPE_SCHEMA),
        (const.SERVICE_TRIAGE_DECIDE, handle_triage_decide, TRIAGE_DECIDE_SCHEMA),
        (const.SERVICE_TRIAGE_UNDO, handle_triage_undo, TRIAGE_UNDO_SCHEMA),
    ):
        hass.services.async_register(const.DOMAIN, service, handler, schema=schema)

    const.LOGGER.info("CatCare services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister CatCare services when unloading the integration."""
    for service in const.SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("CatCare services have been unregistered")
