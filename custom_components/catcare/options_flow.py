# File: options_flow.py
"""Options Flow for the CatCare integration.

Edits the household tunables. Saving reloads the entry so the coordinator
picks up the new day start hour and refresh schedule.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries

from . import const


class CatCareOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for household settings."""

    def __init__(self, _config_entry: config_entries.ConfigEntry):
        """Initialize the options flow."""

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        """Show and save the settings form."""
        if user_input is not None:
            const.LOGGER.debug("Options updated: %s", list(user_input))
            return self.async_create_entry(title="", data=user_input)

        options = self.config_entry.options
        schema = vol.Schema(
            {
                vol.Required(
                    const.CONF_DAY_START_HOUR,
                    default=options.get(
                        const.CONF_DAY_START_HOUR, const.DEFAULT_DAY_START_HOUR
                    ),
                ): vol.All(
                    vol.Coerce(int),
                    vol.Range(min=const.MIN_DAY_START_HOUR, max=const.MAX_DAY_START_HOUR),
                ),
                vol.Required(
                    const.CONF_INVENTORY_URGENT_DAYS,
                    default=options.get(
                        const.CONF_INVENTORY_URGENT_DAYS,
                        const.DEFAULT_INVENTORY_URGENT_DAYS,
                    ),
                ): vol.All(vol.Coerce(int), vol.Range(min=0)),
                vol.Required(
                    const.CONF_INVENTORY_CRITICAL_DAYS,
                    default=options.get(
                        const.CONF_INVENTORY_CRITICAL_DAYS,
                        const.DEFAULT_INVENTORY_CRITICAL_DAYS,
                    ),
                ): vol.All(vol.Coerce(int), vol.Range(min=0)),
                vol.Required(
                    const.CONF_ENABLE_INCIDENT_ALERTS,
                    default=options.get(
                        const.CONF_ENABLE_INCIDENT_ALERTS,
                        const.DEFAULT_ENABLE_INCIDENT_ALERTS,
                    ),
                ): bool,
                vol.Required(
                    const.CONF_ENABLE_PHOTO_ALERTS,
                    default=options.get(
                        const.CONF_ENABLE_PHOTO_ALERTS,
                        const.DEFAULT_ENABLE_PHOTO_ALERTS,
                    ),
                ): bool,
                vol.Required(
                    const.CONF_ENABLE_CARE_REMINDER,
                    default=options.get(
                        const.CONF_ENABLE_CARE_REMINDER,
                        const.DEFAULT_ENABLE_CARE_REMINDER,
                    ),
                ): bool,
                vol.Required(
                    const.CONF_CARE_REMINDER_HOUR,
                    default=options.get(
                        const.CONF_CARE_REMINDER_HOUR, const.DEFAULT_CARE_REMINDER_HOUR
                    ),
                ): vol.All(vol.Coerce(int), vol.Range(min=0, max=23)),
                vol.Optional(
                    const.CONF_NOTIFY_SERVICE,
                    default=options.get(
                        const.CONF_NOTIFY_SERVICE, const.DEFAULT_NOTIFY_SERVICE
                    ),
                ): str,
                vol.Required(
                    const.CONF_UPDATE_INTERVAL,
                    default=options.get(
                        const.CONF_UPDATE_INTERVAL, const.DEFAULT_UPDATE_INTERVAL
                    ),
                ): vol.All(vol.Coerce(int), vol.Range(min=1)),
            }
        )
        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT, data_schema=schema
        )
