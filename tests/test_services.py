"""Tests for CatCare services: record keeping and the swipe-triage session."""

from unittest.mock import AsyncMock, patch

from freezegun import freeze_time
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
import pytest
from pytest_homeassistant_custom_component.common import (
    MockConfigEntry,
    async_capture_events,
)

from custom_components.catcare import const
from custom_components.catcare.store import CatCareStore

from .conftest import FROZEN_NOW, get_coordinator


def _active_logs(coordinator) -> list[dict]:
    return [
        log
        for log in coordinator.store.data[const.DATA_CARE_LOGS]
        if not log.get(const.DATA_DELETED_AT)
    ]


# =============================================================================
# Care logs and definitions
# =============================================================================


async def test_add_care_log_service(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """add_care_log stores the log and fires the log-added event."""
    events = async_capture_events(hass, const.EVENT_CARE_LOG_ADDED)

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_ADD_CARE_LOG,
        {const.FIELD_TYPE: "care_food_morning", const.FIELD_CAT_ID: "cat_mochi"},
        blocking=True,
    )
    await hass.async_block_till_done()

    coordinator = get_coordinator(hass, init_integration)
    (log,) = _active_logs(coordinator)
    assert log[const.DATA_CARE_LOG_TYPE] == "care_food_morning"
    assert log[const.DATA_CARE_LOG_CAT_ID] == "cat_mochi"
    assert len(events) == 1
    assert events[0].data["def_id"] == "care_food"
    assert events[0].data["slot"] == const.SLOT_MORNING


async def test_add_care_log_unknown_cat_raises(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Logs for unknown cats are rejected."""
    with pytest.raises(HomeAssistantError):
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_ADD_CARE_LOG,
            {const.FIELD_TYPE: "care_food", const.FIELD_CAT_ID: "cat_ghost"},
            blocking=True,
        )


async def test_delete_care_log_is_soft(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Deleting stamps deleted_at and keeps the row."""
    coordinator = get_coordinator(hass, init_integration)
    result = await coordinator.care_manager.async_add_care_log("care_water:morning")
    log_id = result["data"][const.DATA_ID]

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_DELETE_CARE_LOG,
        {const.FIELD_LOG_ID: log_id},
        blocking=True,
    )

    record = coordinator.care_manager.get_care_log(log_id)
    assert record[const.DATA_DELETED_AT] is not None
    assert _active_logs(coordinator) == []


async def test_upsert_and_remove_care_task(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Definitions are stored normalized and can be removed."""
    coordinator = get_coordinator(hass, init_integration)

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_UPSERT_CARE_TASK,
        {
            const.FIELD_TASK_ID: "care_meds",
            const.FIELD_TITLE: "Medicine",
            const.FIELD_MEAL_SLOTS: [const.SLOT_NIGHT, const.SLOT_MORNING],
        },
        blocking=True,
    )
    stored = coordinator.care_manager.care_task_defs["care_meds"]
    assert stored[const.DATA_CARE_TASK_MEAL_SLOTS] == [
        const.SLOT_MORNING,
        const.SLOT_NIGHT,
    ]
    assert stored[const.DATA_CARE_TASK_FREQUENCY] == const.FREQUENCY_DAILY

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_REMOVE_CARE_TASK,
        {const.FIELD_TASK_ID: "care_meds"},
        blocking=True,
    )
    assert "care_meds" not in coordinator.care_manager.care_task_defs

    with pytest.raises(HomeAssistantError):
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_REMOVE_CARE_TASK,
            {const.FIELD_TASK_ID: "care_meds"},
            blocking=True,
        )


async def test_save_failure_rolls_back(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """A failed save leaves no in-memory trace and raises."""
    coordinator = get_coordinator(hass, init_integration)

    with (
        patch.object(CatCareStore, "async_save", AsyncMock(return_value=False)),
        pytest.raises(HomeAssistantError),
    ):
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_ADD_CARE_LOG,
            {const.FIELD_TYPE: "care_food:morning"},
            blocking=True,
        )

    assert coordinator.store.data[const.DATA_CARE_LOGS] == []


# =============================================================================
# Household records
# =============================================================================


async def test_inventory_purchase_resets_stock(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """mark_inventory_bought refills stock and restarts the clock."""
    coordinator = get_coordinator(hass, init_integration)

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_UPSERT_INVENTORY_ITEM,
        {
            const.FIELD_ITEM_ID: "dry_food",
            const.FIELD_LABEL: "Dry food",
            const.FIELD_STOCK_LEVEL: const.STOCK_LEVEL_EMPTY,
        },
        blocking=True,
    )
    assert [i.id for i in coordinator.data.catch_up.alerts] == ["dry_food"]

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_MARK_INVENTORY_BOUGHT,
        {const.FIELD_ITEM_ID: "dry_food"},
        blocking=True,
    )
    item = coordinator.household_manager.inventory["dry_food"]
    assert item[const.DATA_INVENTORY_STOCK_LEVEL] == const.STOCK_LEVEL_FULL
    assert item[const.DATA_INVENTORY_LAST_BOUGHT] is not None
    assert coordinator.data.catch_up.alerts == []


async def test_incident_report_and_resolve(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Open incidents surface until resolved."""
    coordinator = get_coordinator(hass, init_integration)

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_REPORT_INCIDENT,
        {const.FIELD_CAT_ID: "cat_tofu", const.FIELD_TYPE: "Sneezing"},
        blocking=True,
    )
    (incident_id,) = coordinator.household_manager.incidents
    assert coordinator.data.catch_up.items[0].id == incident_id

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_RESOLVE_INCIDENT,
        {const.FIELD_INCIDENT_ID: incident_id},
        blocking=True,
    )
    incident = coordinator.household_manager.incidents[incident_id]
    assert incident[const.DATA_INCIDENT_STATUS] == const.INCIDENT_STATUS_RESOLVED
    assert incident_id not in [i.id for i in coordinator.data.catch_up.items]


async def test_photos_seen_clears_alert(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """A new photo raises an alert until photos are marked seen."""
    coordinator = get_coordinator(hass, init_integration)

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_ADD_CAT_PHOTO,
        {const.FIELD_CAT_ID: "cat_mochi", const.FIELD_STORAGE_PATH: "/media/m1.jpg"},
        blocking=True,
    )
    assert "photo-cat_mochi" in [i.id for i in coordinator.data.catch_up.items]

    await hass.services.async_call(
        const.DOMAIN, const.SERVICE_MARK_PHOTOS_SEEN, {}, blocking=True
    )
    assert "photo-cat_mochi" not in [i.id for i in coordinator.data.catch_up.items]


# =============================================================================
# Triage
# =============================================================================


@freeze_time(FROZEN_NOW, tz_offset=0)
async def test_triage_done_then_undo(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """done writes a care log; undo deletes it and steps back."""
    coordinator = get_coordinator(hass, init_integration)
    manager = coordinator.triage_manager

    await hass.services.async_call(
        const.DOMAIN, const.SERVICE_TRIAGE_START, {}, blocking=True
    )
    assert manager.state.phase == const.TRIAGE_PHASE_PRESENTING
    # Evening rounds (current slot) rank above the missed morning rounds
    assert [item.id for item in manager.state.items] == [
        "care_food:evening",
        "care_water:evening",
        "care_litter:evening",
        "care_food:morning",
        "care_water:morning",
    ]

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_TRIAGE_DECIDE,
        {const.FIELD_DECISION: const.TRIAGE_DECISION_DONE, const.FIELD_MEMO: "ate all"},
        blocking=True,
    )
    assert manager.state.index == 1
    assert manager.state.can_undo
    (log,) = _active_logs(coordinator)
    assert log[const.DATA_CARE_LOG_TYPE] == "care_food:evening"
    assert log[const.DATA_CARE_LOG_NOTES] == "ate all"
    assert coordinator.data.care.completed == 1
    assert not manager.stale

    await hass.services.async_call(
        const.DOMAIN, const.SERVICE_TRIAGE_UNDO, {}, blocking=True
    )
    assert manager.state.index == 0
    assert manager.state.current_item.id == "care_food:evening"
    assert _active_logs(coordinator) == []
    assert coordinator.data.care.completed == 0

    with pytest.raises(HomeAssistantError):
        await hass.services.async_call(
            const.DOMAIN, const.SERVICE_TRIAGE_UNDO, {}, blocking=True
        )


@freeze_time(FROZEN_NOW, tz_offset=0)
async def test_triage_swipes(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Left swipes skip, vertical swipes switch cats, small drags do nothing."""
    coordinator = get_coordinator(hass, init_integration)
    manager = coordinator.triage_manager
    events = async_capture_events(hass, const.EVENT_TRIAGE_CAT_SWITCH)
    manager.start()

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_TRIAGE_SWIPE,
        {const.FIELD_OFFSET_X: 12, const.FIELD_OFFSET_Y: 4},
        blocking=True,
    )
    assert manager.state.index == 0

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_TRIAGE_SWIPE,
        {const.FIELD_OFFSET_X: -120},
        blocking=True,
    )
    assert manager.state.index == 1
    assert manager.state.last_commit.decision == const.TRIAGE_DECISION_LATER
    assert _active_logs(coordinator) == []

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_TRIAGE_SWIPE,
        {const.FIELD_OFFSET_X: 0, const.FIELD_OFFSET_Y: -90},
        blocking=True,
    )
    await hass.async_block_till_done()
    assert manager.state.index == 1
    assert len(events) == 1
    assert events[0].data[const.ATTR_DIRECTION] == const.GESTURE_UP

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_TRIAGE_SWIPE,
        {const.FIELD_OFFSET_X: 40, const.FIELD_VELOCITY_X: 600},
        blocking=True,
    )
    assert manager.state.index == 2
    (log,) = _active_logs(coordinator)
    assert log[const.DATA_CARE_LOG_TYPE] == "care_water:evening"


@freeze_time(FROZEN_NOW, tz_offset=0)
async def test_triage_save_failure_stays_on_item(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """A failed write keeps the card, sets the error and notifies."""
    coordinator = get_coordinator(hass, init_integration)
    manager = coordinator.triage_manager
    manager.start()

    with (
        patch.object(CatCareStore, "async_save", AsyncMock(return_value=False)),
        patch(
            "custom_components.catcare.managers.triage_manager.async_notify_triage_error",
            new=AsyncMock(),
        ) as mock_notify,
    ):
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_TRIAGE_DECIDE,
            {const.FIELD_DECISION: const.TRIAGE_DECISION_DONE},
            blocking=True,
        )

    assert manager.state.phase == const.TRIAGE_PHASE_PRESENTING
    assert manager.state.index == 0
    assert manager.state.error == const.ERROR_SAVE_FAILED
    assert coordinator.store.data[const.DATA_CARE_LOGS] == []
    mock_notify.assert_awaited_once()

    # Retry succeeds once storage recovers
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_TRIAGE_DECIDE,
        {const.FIELD_DECISION: const.TRIAGE_DECISION_DONE},
        blocking=True,
    )
    assert manager.state.index == 1
    assert manager.state.error is None


@freeze_time(FROZEN_NOW, tz_offset=0)
async def test_triage_acknowledges_observation(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """done on an observation card acknowledges it; undo restores it."""
    coordinator = get_coordinator(hass, init_integration)
    manager = coordinator.triage_manager
    result = await coordinator.household_manager.async_record_observation(
        "cat_mochi", "n_toilet", "Concerning"
    )
    observation_id = result["data"][const.DATA_ID]

    manager.start()
    assert manager.state.current_item.id == observation_id

    await manager.async_decide(const.TRIAGE_DECISION_DONE)
    observation = coordinator.household_manager.get_observation(observation_id)
    assert observation[const.DATA_OBSERVATION_ACKNOWLEDGED_AT] is not None

    assert await manager.async_undo() is not None
    assert observation[const.DATA_OBSERVATION_ACKNOWLEDGED_AT] is None
    assert manager.state.current_item.id == observation_id


@freeze_time(FROZEN_NOW, tz_offset=0)
async def test_triage_marks_outside_changes_stale(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Writes made outside the session flag its list as stale until restart."""
    coordinator = get_coordinator(hass, init_integration)
    manager = coordinator.triage_manager
    manager.start()

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_ADD_CARE_LOG,
        {const.FIELD_TYPE: "care_litter:evening"},
        blocking=True,
    )
    assert manager.stale
    # The running session keeps its list
    assert len(manager.state.items) == 5

    await hass.services.async_call(
        const.DOMAIN, const.SERVICE_TRIAGE_START, {}, blocking=True
    )
    assert not manager.stale
    assert len(manager.state.items) == 4


async def test_triage_requires_presenting(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Decisions before triage_start are rejected."""
    with pytest.raises(HomeAssistantError):
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_TRIAGE_DECIDE,
            {const.FIELD_DECISION: const.TRIAGE_DECISION_LATER},
            blocking=True,
        )
