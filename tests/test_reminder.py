"""Tests for the daily care reminder."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

from freezegun import freeze_time
from homeassistant.core import HomeAssistant
import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.catcare import const
from custom_components.catcare.notification_helper import (
    async_notify_care_reminder,
    format_care_reminder,
)

from .conftest import FROZEN_NOW, get_coordinator

NOTIFY_SERVICE = "notify.mobile_app_phone"
SEND_PATCH = "custom_components.catcare.notification_helper.async_send_notification"


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return an entry that routes reminders to a phone."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title="Home",
        data={const.CONF_HOUSEHOLD_NAME: "Home"},
        options={
            const.CONF_DAY_START_HOUR: const.DEFAULT_DAY_START_HOUR,
            const.CONF_NOTIFY_SERVICE: NOTIFY_SERVICE,
            const.CONF_ENABLE_CARE_REMINDER: True,
            const.CONF_CARE_REMINDER_HOUR: 20,
        },
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


def test_format_care_reminder() -> None:
    """Only the first three labels are listed."""
    assert format_care_reminder(["Food (Morning)"]) == "Still open: Food (Morning)"
    assert format_care_reminder(["A", "B", "C", "D", "E"]) == (
        "Still open: A, B, C and 2 more"
    )


async def test_reminder_hour_from_options(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """The configured hour is used while reminders are enabled."""
    assert get_coordinator(hass, init_integration).care_reminder_hour == 20


@freeze_time(FROZEN_NOW, tz_offset=0)
async def test_reminder_lists_open_rounds(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Open rounds are sent to the configured notify service."""
    coordinator = get_coordinator(hass, init_integration)

    with patch(SEND_PATCH, new=AsyncMock()) as mock_send:
        await coordinator._async_handle_reminder(
            datetime(2025, 3, 3, 20, 0, tzinfo=UTC)
        )

    mock_send.assert_awaited_once_with(
        hass,
        NOTIFY_SERVICE,
        const.NOTIFICATION_TITLE_CARE_REMINDER,
        "Still open: Food (Morning), Food (Evening), Water (Morning) and 2 more",
    )


@freeze_time(FROZEN_NOW, tz_offset=0)
async def test_reminder_skipped_when_all_done(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Nothing is sent once every due round is logged."""
    coordinator = get_coordinator(hass, init_integration)
    for instance in coordinator.compute_snapshot().care.outstanding:
        result = await coordinator.care_manager.async_add_care_log(
            instance.action_type
        )
        assert "error" not in result

    with patch(SEND_PATCH, new=AsyncMock()) as mock_send:
        assert await coordinator.async_send_care_reminder() is False

    mock_send.assert_not_awaited()


async def test_reminder_without_notify_service_is_persistent(
    hass: HomeAssistant,
) -> None:
    """Without a notify service the reminder becomes a persistent notification."""
    with (
        patch(SEND_PATCH, new=AsyncMock()) as mock_send,
        patch(
            "custom_components.catcare.notification_helper."
            "persistent_notification.async_create"
        ) as mock_create,
    ):
        await async_notify_care_reminder(hass, None, ["Litter (Evening)"])

    mock_send.assert_not_awaited()
    mock_create.assert_called_once_with(
        hass,
        "Still open: Litter (Evening)",
        title=const.NOTIFICATION_TITLE_CARE_REMINDER,
        notification_id=const.NOTIFICATION_ID_CARE_REMINDER,
    )
