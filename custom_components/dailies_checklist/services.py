# File: services.py
"""Defines custom services for the Dailies Checklist integration.

These services allow manual checklist actions through scripts or automations.
Every service accepts an optional config_entry_id; it may be omitted when
exactly one profile is loaded.
"""

from __future__ import annotations

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import ServiceValidationError
from homeassistant.helpers import config_validation as cv

from . import const
from .coordinator import ChecklistCoordinator

# --- Service Schemas ---
_ENTRY_SCHEMA = {vol.Optional(const.FIELD_CONFIG_ENTRY_ID): cv.string}

SET_TASK_COMPLETED_SCHEMA = vol.Schema(
    {
        **_ENTRY_SCHEMA,
        vol.Required(const.FIELD_TASK_KEY): cv.string,
        vol.Required(const.FIELD_COMPLETED): cv.boolean,
    }
)

ADJUST_TASK_COUNT_SCHEMA = vol.Schema(
    {
        **_ENTRY_SCHEMA,
        vol.Required(const.FIELD_TASK_KEY): cv.string,
        vol.Required(const.FIELD_DELTA): vol.Coerce(int),
    }
)

SET_TASK_ENABLED_SCHEMA = vol.Schema(
    {
        **_ENTRY_SCHEMA,
        vol.Required(const.FIELD_TASK_KEY): cv.string,
        vol.Required(const.FIELD_ENABLED): cv.boolean,
    }
)

RESET_CATEGORY_SCHEMA = vol.Schema(
    {
        **_ENTRY_SCHEMA,
        vol.Required(const.FIELD_CATEGORY): vol.In(const.TASK_CATEGORIES),
    }
)

ENTRY_ONLY_SCHEMA = vol.Schema(_ENTRY_SCHEMA)


def _get_coordinator(hass: HomeAssistant, call: ServiceCall) -> ChecklistCoordinator:
    """Resolve the target profile's coordinator or raise ServiceValidationError."""
    entries: dict = hass.data.get(const.DOMAIN, {})
    entry_id = call.data.get(const.FIELD_CONFIG_ENTRY_ID)

    if entry_id is None:
        if len(entries) != 1:
            raise ServiceValidationError(
                const.ERROR_ENTRY_NOT_FOUND_FMT.format("<unspecified>"),
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_ENTRY_NOT_FOUND,
                translation_placeholders={"entry_id": "<unspecified>"},
            )
        entry_id = next(iter(entries))

    if entry_id not in entries:
        raise ServiceValidationError(
            const.ERROR_ENTRY_NOT_FOUND_FMT.format(entry_id),
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_ENTRY_NOT_FOUND,
            translation_placeholders={"entry_id": entry_id},
        )
    return entries[entry_id][const.COORDINATOR]


def _task_not_found(task_key: str) -> ServiceValidationError:
    const.LOGGER.warning(
        "WARNING: %s", const.ERROR_TASK_NOT_FOUND_FMT.format(task_key)
    )
    return ServiceValidationError(
        const.ERROR_TASK_NOT_FOUND_FMT.format(task_key),
        translation_domain=const.DOMAIN,
        translation_key=const.TRANS_KEY_ERROR_TASK_NOT_FOUND,
        translation_placeholders={"task_key": task_key},
    )


def async_setup_services(hass: HomeAssistant) -> None:
    """Register Dailies Checklist services."""
    if hass.services.has_service(const.DOMAIN, const.SERVICE_SET_TASK_COMPLETED):
        return

    async def handle_set_task_completed(call: ServiceCall) -> None:
        """Handle a manual completion toggle."""
        coordinator = _get_coordinator(hass, call)
        task_key = call.data[const.FIELD_TASK_KEY]
        try:
            coordinator.set_task_completed(task_key, call.data[const.FIELD_COMPLETED])
        except KeyError as err:
            raise _task_not_found(task_key) from err

    async def handle_adjust_task_count(call: ServiceCall) -> None:
        """Handle a manual counter adjustment."""
        coordinator = _get_coordinator(hass, call)
        task_key = call.data[const.FIELD_TASK_KEY]
        try:
            coordinator.adjust_task_count(task_key, call.data[const.FIELD_DELTA])
        except KeyError as err:
            raise _task_not_found(task_key) from err

    async def handle_set_task_enabled(call: ServiceCall) -> None:
        """Handle enabling or disabling a task."""
        coordinator = _get_coordinator(hass, call)
        task_key = call.data[const.FIELD_TASK_KEY]
        try:
            coordinator.set_task_enabled(task_key, call.data[const.FIELD_ENABLED])
        except KeyError as err:
            raise _task_not_found(task_key) from err

    async def handle_reset_category(call: ServiceCall) -> None:
        """Handle clearing every task of one category."""
        coordinator = _get_coordinator(hass, call)
        coordinator.reset_category(call.data[const.FIELD_CATEGORY])

    async def handle_reset_checklist(call: ServiceCall) -> None:
        """Handle restoring catalog defaults."""
        coordinator = _get_coordinator(hass, call)
        await coordinator.async_reset_to_defaults()

    async def handle_check_resets(call: ServiceCall) -> None:
        """Handle forcing a reconciliation tick."""
        coordinator = _get_coordinator(hass, call)
        coordinator.reset_manager.check_and_apply_resets()

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_SET_TASK_COMPLETED,
        handle_set_task_completed,
        schema=SET_TASK_COMPLETED_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ADJUST_TASK_COUNT,
        handle_adjust_task_count,
        schema=ADJUST_TASK_COUNT_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_SET_TASK_ENABLED,
        handle_set_task_enabled,
        schema=SET_TASK_ENABLED_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_CATEGORY,
        handle_reset_category,
        schema=RESET_CATEGORY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_CHECKLIST,
        handle_reset_checklist,
        schema=ENTRY_ONLY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_CHECK_RESETS,
        handle_check_resets,
        schema=ENTRY_ONLY_SCHEMA,
    )

    const.LOGGER.info("INFO: Dailies Checklist services have been registered")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister Dailies Checklist services when the last profile unloads."""
    services = [
        const.SERVICE_SET_TASK_COMPLETED,
        const.SERVICE_ADJUST_TASK_COUNT,
        const.SERVICE_SET_TASK_ENABLED,
        const.SERVICE_RESET_CATEGORY,
        const.SERVICE_RESET_CHECKLIST,
        const.SERVICE_CHECK_RESETS,
    ]

    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: Dailies Checklist services have been unregistered")
