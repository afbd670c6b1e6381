"""Dispatcher signal helpers for Dailies Checklist.

All change notifications travel over Home Assistant's dispatcher, scoped per
config entry so that several profiles never see each other's events.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.helpers.dispatcher import async_dispatcher_send

from .. import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Format: 'dailies_checklist_{entry_id}_{suffix}'

    Multi-instance example:
        - Profile A (entry_id="abc123"):
          get_event_signal("abc123", "save_completed") → "dailies_checklist_abc123_save_completed"
        - Profile B (entry_id="xyz789"):
          get_event_signal("xyz789", "save_completed") → "dailies_checklist_xyz789_save_completed"

    Args:
        entry_id: ConfigEntry.entry_id
        suffix: Signal suffix constant from const.py (e.g., SIGNAL_SUFFIX_SAVE_COMPLETED)

    Returns:
        Fully qualified signal name.
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


@callback
def async_emit(hass: HomeAssistant, entry_id: str, suffix: str, **payload: Any) -> None:
    """Send an instance-scoped signal with a single payload dict."""
    signal = get_event_signal(entry_id, suffix)
    const.LOGGER.debug(
        "DEBUG: Emitting event '%s' for instance %s with payload keys: %s",
        suffix,
        entry_id,
        list(payload.keys()),
    )
    # Pass payload as single dict argument (dispatcher only supports *args)
    async_dispatcher_send(hass, signal, payload)
