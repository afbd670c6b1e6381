"""Diagnostics support for Dailies Checklist integration.

Returns the raw state document (identical in shape to the on-disk file, so it
can be pasted back during recovery) alongside persistence, detector and reset
diagnostics.
"""

from __future__ import annotations

import copy
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import ChecklistCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: ChecklistCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    return {
        "state": copy.deepcopy(dict(coordinator.state)),
        **coordinator.get_diagnostics(),
    }
