"""Shared fixtures for CatCare tests."""

from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.catcare.const import (
    CONF_DAY_START_HOUR,
    CONF_HOUSEHOLD_NAME,
    COORDINATOR,
    DATA_CAT_IMAGES,
    DATA_CAT_NAME,
    DATA_CATS,
    DATA_ID,
    DEFAULT_DAY_START_HOUR,
    DOMAIN,
)
from custom_components.catcare.store import CatCareStore

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name

# Monday evening; food/water morning + evening and litter evening are due
FROZEN_NOW = "2025-03-03 16:00:00"


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title="Home",
        data={CONF_HOUSEHOLD_NAME: "Home"},
        options={CONF_DAY_START_HOUR: DEFAULT_DAY_START_HOUR},
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


@pytest.fixture
def mock_storage_data() -> dict[str, Any]:
    """Return a seeded household with two cats."""
    data = CatCareStore.get_default_structure()
    data[DATA_CATS] = {
        "cat_mochi": {DATA_ID: "cat_mochi", DATA_CAT_NAME: "Mochi", DATA_CAT_IMAGES: []},
        "cat_tofu": {DATA_ID: "cat_tofu", DATA_CAT_NAME: "Tofu", DATA_CAT_IMAGES: []},
    }
    return data


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the CatCare integration for testing with mocked storage."""
    await hass.config.async_set_time_zone("UTC")
    mock_config_entry.add_to_hass(hass)

    # Mock the Store's async_load to return our test data
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    return mock_config_entry


def get_coordinator(hass: HomeAssistant, entry: MockConfigEntry):
    """Return the coordinator of a loaded entry."""
    return hass.data[DOMAIN][entry.entry_id][COORDINATOR]
