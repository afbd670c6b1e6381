"""Base manager class for Dailies Checklist managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..helpers.signal_helpers import async_emit

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import ChecklistCoordinator


class BaseManager(ABC):
    """Base class for all Dailies Checklist managers with scoped event support.

    Provides:
    - Instance-scoped event emitting (emit); signals are namespaced by the
      coordinator's config_entry.entry_id so profiles never cross-talk

    Data Persistence:
    - Use coordinator._persist_and_update() for user-visible state changes
      (detector signals, timer-triggered resets)
    - Use coordinator._persist() alone for internal bookkeeping

    Subclasses must implement:
    - async_setup(): Register timers, initialize state
    """

    def __init__(self, hass: HomeAssistant, coordinator: ChecklistCoordinator) -> None:
        """Initialize manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator managing this profile
        """
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id

    def emit(self, suffix: str, **payload: Any) -> None:
        """Emit instance-scoped event.

        Args:
            suffix: Signal suffix constant (e.g., const.SIGNAL_SUFFIX_RESETS_APPLIED)
            **payload: Event data dict passed to listeners (must be JSON-serializable)

        Example:
            self.emit(
                const.SIGNAL_SUFFIX_TASK_STATE_CHANGED,
                task_key="mini_cactpot",
                completed=True,
                origin=const.ORIGIN_DETECTOR,
            )
        """
        async_emit(self.hass, self.entry_id, suffix, **payload)

    @abstractmethod
    async def async_setup(self) -> None:
        """Set up the manager (register timers, initialize state).

        Called once during coordinator initialization.
        """
