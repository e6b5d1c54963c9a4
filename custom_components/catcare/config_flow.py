# File: config_flow.py
"""Config flow for the CatCare integration.

One household per Home Assistant instance. The household name becomes the
entry title; tunables live in the entry options.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback

from . import const
from .options_flow import CatCareOptionsFlowHandler

# pylint: disable=abstract-method


class CatCareConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for CatCare."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        """Ask for the household name and business-day start hour."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        if user_input is not None:
            household_name = user_input[const.CONF_HOUSEHOLD_NAME].strip()
            const.LOGGER.info("Creating CatCare entry for '%s'", household_name)
            return self.async_create_entry(
                title=household_name or const.DEFAULT_HOUSEHOLD_NAME,
                data={const.CONF_HOUSEHOLD_NAME: household_name},
                options={
                    const.CONF_DAY_START_HOUR: user_input[const.CONF_DAY_START_HOUR],
                },
            )

        schema = vol.Schema(
            {
                vol.Required(
                    const.CONF_HOUSEHOLD_NAME, default=const.DEFAULT_HOUSEHOLD_NAME
                ): str,
                vol.Required(
                    const.CONF_DAY_START_HOUR, default=const.DEFAULT_DAY_START_HOUR
                ): vol.All(
                    vol.Coerce(int),
                    vol.Range(min=const.MIN_DAY_START_HOUR, max=const.MAX_DAY_START_HOUR),
                ),
            }
        )
        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER, data_schema=schema
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return CatCareOptionsFlowHandler(config_entry)
