# File: __init__.py
"""Initialization file for the Dailies Checklist integration.

Handles setting up the integration, including loading configuration entries,
initializing persistent storage, and preparing the coordinator.

Key Features:
- One config entry per profile, each with its own state file.
- Synchronous final save on unload and on Home Assistant's final write.
- State file removal when an entry is deleted.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EVENT_HOMEASSISTANT_FINAL_WRITE
from homeassistant.core import Event, HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from . import const
from .coordinator import ChecklistCoordinator
from .services import async_setup_services, async_unload_services
from .store import ChecklistStore


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info(
        "INFO: Starting setup for Dailies Checklist entry: %s", entry.entry_id
    )

    store = ChecklistStore(
        hass,
        entry.entry_id,
        save_delay=entry.options.get(
            const.CONF_SAVE_DELAY, const.DEFAULT_SAVE_DELAY_SECONDS
        ),
    )
    coordinator = ChecklistCoordinator(hass, entry, store)

    try:
        # Loads the state and starts the managers (see ChecklistCoordinator._async_setup)
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to load checklist state: %s", e)
        raise

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
    }

    async_setup_services(hass)

    async def _async_final_write(_event: Event) -> None:
        """Write pending state before Home Assistant stops writing to disk."""
        await coordinator.store.async_save(coordinator.state)

    entry.async_on_unload(
        hass.bus.async_listen(EVENT_HOMEASSISTANT_FINAL_WRITE, _async_final_write)
    )
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))

    const.LOGGER.info(
        "INFO: Dailies Checklist setup complete for entry: %s", entry.entry_id
    )
    return True


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry when options change."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading Dailies Checklist entry: %s", entry.entry_id)

    entry_data = hass.data.get(const.DOMAIN, {}).pop(entry.entry_id, None)
    if entry_data is not None:
        coordinator: ChecklistCoordinator = entry_data[const.COORDINATOR]
        await coordinator.async_shutdown()

    if not hass.data.get(const.DOMAIN):
        hass.data.pop(const.DOMAIN, None)
        await async_unload_services(hass)

    return True


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing Dailies Checklist entry: %s", entry.entry_id)
    await ChecklistStore(hass, entry.entry_id).async_remove()
    const.LOGGER.info(
        "INFO: Dailies Checklist entry data cleared: %s", entry.entry_id
    )
