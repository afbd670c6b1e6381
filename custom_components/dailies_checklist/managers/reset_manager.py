"""Reset Manager for Dailies Checklist integration.

The "Clock" - owns the reconciliation timers and applies due resets.

Timers:
- Interval tick every CONF_RESET_CHECK_INTERVAL minutes (default 1)
- One deferred startup tick shortly after setup, so resets missed while
  Home Assistant was stopped are applied once everything is loaded

Both timers and the reset service call check_and_apply_resets(), which is
idempotent: a tick with nothing due changes nothing and saves nothing.

Signals Emitted:
- SIGNAL_SUFFIX_TASK_STATE_CHANGED (origin=reset) per task whose completion cleared
- SIGNAL_SUFFIX_RESETS_APPLIED with the per-cadence applied map
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from homeassistant.core import callback
from homeassistant.helpers.event import async_call_later, async_track_time_interval

from .. import const
from ..engines.reset_engine import ResetEngine
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import ChecklistCoordinator


class ResetManager(BaseManager):
    """Applies reset cadences to the coordinator's state on a polling tick."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: ChecklistCoordinator,
        *,
        check_interval: timedelta | None = None,
        startup_delay: timedelta = const.DEFAULT_STARTUP_TICK_DELAY,
    ) -> None:
        """Initialize reset manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator
            check_interval: Tick interval (default from entry options)
            startup_delay: Delay before the startup catch-up tick
        """
        super().__init__(hass, coordinator)
        if check_interval is None:
            minutes = coordinator.config_entry.options.get(
                const.CONF_RESET_CHECK_INTERVAL, const.DEFAULT_RESET_CHECK_INTERVAL
            )
            check_interval = timedelta(minutes=minutes)
        self.check_interval = check_interval
        self.startup_delay = startup_delay

    async def async_setup(self) -> None:
        """Register the interval tick and the deferred startup tick."""
        entry = self.coordinator.config_entry
        entry.async_on_unload(
            async_track_time_interval(self.hass, self._on_tick, self.check_interval)
        )
        entry.async_on_unload(
            async_call_later(
                self.hass, self.startup_delay.total_seconds(), self._on_tick
            )
        )
        const.LOGGER.debug(
            "DEBUG: ResetManager initialized: tick every %s, startup tick in %s for entry %s",
            self.check_interval,
            self.startup_delay,
            self.entry_id,
        )

    @callback
    def _on_tick(self, _now: datetime) -> None:
        self.check_and_apply_resets()

    @callback
    def check_and_apply_resets(self, now: datetime | None = None) -> dict[str, bool]:
        """Reconcile the state against every tracked cadence.

        Returns:
            Mapping of reset type to whether it was applied.
        """
        state = self.coordinator.state
        completed_before = {
            task[const.DATA_TASK_KEY]
            for task in state[const.DATA_TASKS]
            if task[const.DATA_TASK_COMPLETED]
        }

        applied = ResetEngine.reconcile_all(state, now)
        if not any(applied.values()):
            return applied

        for task in state[const.DATA_TASKS]:
            key = task[const.DATA_TASK_KEY]
            if key in completed_before and not task[const.DATA_TASK_COMPLETED]:
                self.emit(
                    const.SIGNAL_SUFFIX_TASK_STATE_CHANGED,
                    task_key=key,
                    completed=False,
                    origin=const.ORIGIN_RESET,
                )

        self.emit(const.SIGNAL_SUFFIX_RESETS_APPLIED, applied=applied)
        self.coordinator._persist_and_update()  # pylint: disable=protected-access
        return applied

    # =========================================================================
    # Queries (thin wrappers over ResetEngine for every reset type)
    # =========================================================================

    def get_next_reset(self, reset_type: str, now: datetime | None = None) -> datetime:
        return ResetEngine.get_next_reset(reset_type, now)

    def get_last_reset(self, reset_type: str, now: datetime | None = None) -> datetime:
        return ResetEngine.get_last_reset(reset_type, now)

    def get_time_until_reset(
        self, reset_type: str, now: datetime | None = None
    ) -> timedelta:
        return ResetEngine.get_time_until_reset(reset_type, now)

    def get_formatted_time_until_reset(
        self, reset_type: str, now: datetime | None = None
    ) -> str:
        return ResetEngine.get_formatted_time_until_reset(reset_type, now)

    def get_reset_summary(self, now: datetime | None = None) -> dict[str, dict[str, str]]:
        """Return next/last boundary and countdown for every reset type."""
        return {
            reset_type: {
                "next": ResetEngine.get_next_reset(reset_type, now).isoformat(),
                "last": ResetEngine.get_last_reset(reset_type, now).isoformat(),
                "time_until": ResetEngine.get_formatted_time_until_reset(
                    reset_type, now
                ),
            }
            for reset_type in const.RESET_TYPES
        }
