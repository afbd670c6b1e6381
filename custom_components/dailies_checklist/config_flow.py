# File: config_flow.py
"""Config flow for the Dailies Checklist integration.

One config entry per character profile. The owner name doubles as the unique
id so the same character cannot be configured twice.
"""

from __future__ import annotations

from typing import Any, Optional

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.helpers import selector

from . import const


def build_user_schema(default: Optional[dict[str, Any]] = None) -> vol.Schema:
    """Build the schema for the owner step."""
    default = default or {}
    return vol.Schema(
        {
            vol.Required(
                const.CONF_OWNER_NAME, default=default.get(const.CONF_OWNER_NAME, "")
            ): str,
            vol.Optional(const.CONF_OWNER_ID): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    mode=selector.NumberSelectorMode.BOX,
                    min=0,
                    step=1,
                )
            ),
        }
    )


def build_options_schema(default: Optional[dict[str, Any]] = None) -> vol.Schema:
    """Build the schema for the general options step."""
    default = default or {}
    return vol.Schema(
        {
            vol.Required(
                const.CONF_RESET_CHECK_INTERVAL,
                default=default.get(
                    const.CONF_RESET_CHECK_INTERVAL, const.DEFAULT_RESET_CHECK_INTERVAL
                ),
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    mode=selector.NumberSelectorMode.BOX,
                    min=1,
                    max=60,
                    step=1,
                )
            ),
            vol.Required(
                const.CONF_SAVE_DELAY,
                default=default.get(
                    const.CONF_SAVE_DELAY, const.DEFAULT_SAVE_DELAY_SECONDS
                ),
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    mode=selector.NumberSelectorMode.BOX,
                    min=0,
                    max=60,
                    step=0.5,
                )
            ),
        }
    )


class DailiesChecklistConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config flow for Dailies Checklist."""

    VERSION = 1

    async def async_step_user(self, user_input: Optional[dict[str, Any]] = None):
        """Ask for the character profile this checklist belongs to."""
        errors: dict[str, str] = {}

        if user_input is not None:
            owner_name = user_input[const.CONF_OWNER_NAME].strip()
            if not owner_name:
                errors[const.CONF_OWNER_NAME] = const.TRANS_KEY_ERROR_INVALID_OWNER_NAME
            else:
                await self.async_set_unique_id(owner_name.lower())
                self._abort_if_unique_id_configured()

                data: dict[str, Any] = {const.CONF_OWNER_NAME: owner_name}
                owner_id = user_input.get(const.CONF_OWNER_ID)
                if owner_id is not None:
                    data[const.CONF_OWNER_ID] = int(owner_id)

                const.LOGGER.debug("DEBUG: Creating checklist for '%s'", owner_name)
                return self.async_create_entry(
                    title=f"{const.DAILIES_CHECKLIST_TITLE} ({owner_name})",
                    data=data,
                )

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=build_user_schema(user_input),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return DailiesChecklistOptionsFlowHandler()


class DailiesChecklistOptionsFlowHandler(config_entries.OptionsFlow):
    """Options flow for timer and persistence tuning."""

    async def async_step_init(self, user_input: Optional[dict[str, Any]] = None):
        """Edit the reset check interval and save delay."""
        if user_input is not None:
            options = {
                const.CONF_RESET_CHECK_INTERVAL: int(
                    user_input[const.CONF_RESET_CHECK_INTERVAL]
                ),
                const.CONF_SAVE_DELAY: float(user_input[const.CONF_SAVE_DELAY]),
            }
            const.LOGGER.debug(
                "DEBUG: Updating options for entry %s: %s",
                self.config_entry.entry_id,
                options,
            )
            return self.async_create_entry(title="", data=options)

        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=build_options_schema(dict(self.config_entry.options)),
        )
