# File: coordinator.py
"""Coordinator for the Dailies Checklist integration.

Owns the in-memory checklist state for one profile (config entry) and is the
only writer of it. Every mutation runs on the event loop, goes through an
engine, emits a task_state_changed signal when completion changes, and
requests a debounced save.

Components are constructed explicitly here:
- ChecklistStore: persistence (passed in)
- ResetManager: reconciliation timers
- DetectionManager: detector registry and signal aggregation
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import const
from .data_builders import (
    build_catalog_tasks,
    build_default_state,
    build_owner,
    build_task,
)
from .engines.task_engine import TaskEngine
from .helpers.signal_helpers import async_emit
from .managers.detection_manager import DetectionManager
from .managers.reset_manager import ResetManager
from .task_registry import get_catalog_entries, get_display_name
from .utils.dt_utils import dt_now_utc

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .store import ChecklistStore
    from .type_defs import ChecklistStateData, OwnerData, TaskData


class ChecklistCoordinator(DataUpdateCoordinator):
    """Coordinator for one Dailies Checklist profile."""

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: ChecklistStore,
    ) -> None:
        """Initialize the ChecklistCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=None,
        )
        self.store = store
        self._state: ChecklistStateData = build_default_state()
        self.reset_manager = ResetManager(hass, self)
        self.detection_manager = DetectionManager(hass, self)
        self._shutdown_done = False

    # -------------------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------------------

    async def _async_setup(self) -> None:
        """Load the persisted state and start the managers."""
        state = await self.store.async_load()
        changed = self._populate_catalog(state)
        changed |= self._apply_entry_owner(state)
        self._state = state

        await self.reset_manager.async_setup()
        await self.detection_manager.async_setup()

        if changed:
            self._persist()

        const.LOGGER.info(
            "INFO: Checklist loaded for entry %s: %s tasks",
            self.config_entry.entry_id,
            len(state[const.DATA_TASKS]),
        )

    async def _async_update_data(self) -> ChecklistStateData:
        return self._state

    def _populate_catalog(self, state: ChecklistStateData) -> bool:
        """Fill an empty task set from the catalog; append new catalog tasks.

        Returns:
            True if any task was added.
        """
        tasks = state[const.DATA_TASKS]
        if not tasks:
            state[const.DATA_TASKS] = build_catalog_tasks()
            const.LOGGER.info("INFO: Initialized checklist with default catalog")
            return True

        known = {task[const.DATA_TASK_KEY] for task in tasks}
        added = 0
        for entry in get_catalog_entries():
            if entry["key"] in known or len(tasks) >= const.MAX_TASKS:
                continue
            tasks.append(build_task(entry))
            added += 1
        if added:
            const.LOGGER.info("INFO: Added %s new catalog tasks", added)
        return added > 0

    def _apply_entry_owner(self, state: ChecklistStateData) -> bool:
        name = self.config_entry.data.get(const.CONF_OWNER_NAME)
        if not name:
            return False
        owner: OwnerData = build_owner(
            name, self.config_entry.data.get(const.CONF_OWNER_ID)
        )
        if state.get(const.DATA_OWNER) == owner:
            return False
        state[const.DATA_OWNER] = owner
        return True

    # -------------------------------------------------------------------------------------
    # Properties / lookups
    # -------------------------------------------------------------------------------------

    @property
    def state(self) -> ChecklistStateData:
        return self._state

    @property
    def tasks(self) -> list[TaskData]:
        return self._state[const.DATA_TASKS]

    def get_task(self, task_key: str) -> TaskData | None:
        return TaskEngine.find_task(self._state, task_key)

    # -------------------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------------------

    def _notify_task_change(self, task: TaskData, origin: str) -> None:
        const.LOGGER.debug(
            "DEBUG: %s marked %s (%s)",
            get_display_name(task[const.DATA_TASK_KEY]),
            "complete" if task[const.DATA_TASK_COMPLETED] else "incomplete",
            origin,
        )
        async_emit(
            self.hass,
            self.config_entry.entry_id,
            const.SIGNAL_SUFFIX_TASK_STATE_CHANGED,
            task_key=task[const.DATA_TASK_KEY],
            completed=task[const.DATA_TASK_COMPLETED],
            origin=origin,
        )

    @callback
    def apply_detector_signal(
        self, task_key: str, completed: bool, origin: str = const.ORIGIN_DETECTOR
    ) -> bool:
        """Apply the detector ingestion rule to one signal.

        Unknown keys are logged and dropped. Overridden tasks drop the signal
        silently. A signal matching the current state is a no-op.

        Returns:
            True if the task changed.
        """
        task = self.get_task(task_key)
        if task is None:
            const.LOGGER.warning(
                "WARNING: Detector signal for unknown task '%s' dropped", task_key
            )
            return False

        if task[const.DATA_TASK_MANUAL_OVERRIDE]:
            const.LOGGER.debug(
                "DEBUG: Detector signal for '%s' ignored (manual override)", task_key
            )
            return False

        if not TaskEngine.apply_detector_signal(task, completed, dt_now_utc()):
            return False

        self._notify_task_change(task, origin)
        self._persist_and_update()
        return True

    @callback
    def set_task_completed(self, task_key: str, completed: bool) -> bool:
        """Manual toggle. Sets the override so detectors stop updating the task.

        Raises:
            KeyError: If task_key is not in the checklist.
        """
        task = self._require_task(task_key)
        changed = TaskEngine.set_manual_completion(task, completed, dt_now_utc())
        if changed:
            self._notify_task_change(task, const.ORIGIN_MANUAL)
        # The override flag is persisted even when completion did not change.
        self._persist_and_update()
        return changed

    @callback
    def adjust_task_count(self, task_key: str, delta: int) -> bool:
        """Manual counter adjustment for multi-count tasks.

        Raises:
            KeyError: If task_key is not in the checklist.
        """
        task = self._require_task(task_key)
        was_completed = task[const.DATA_TASK_COMPLETED]
        changed = TaskEngine.adjust_task_count(task, delta, dt_now_utc())
        if task[const.DATA_TASK_COMPLETED] != was_completed:
            self._notify_task_change(task, const.ORIGIN_MANUAL)
        self._persist_and_update()
        return changed

    @callback
    def set_task_enabled(self, task_key: str, enabled: bool) -> bool:
        """Set the user opt-out flag.

        Raises:
            KeyError: If task_key is not in the checklist.
        """
        task = self._require_task(task_key)
        if not TaskEngine.set_task_enabled(task, enabled):
            return False
        self._persist_and_update()
        return True

    @callback
    def reset_category(self, category: str) -> int:
        """Clear every task of a category without touching cadence stamps.

        Returns:
            Number of tasks in the category.
        """
        if category not in const.TASK_CATEGORIES:
            raise ValueError(f"Unknown category: {category}")

        count = 0
        for task in self.tasks:
            if task[const.DATA_TASK_CATEGORY] != category:
                continue
            count += 1
            if TaskEngine.reset_task(task):
                self._notify_task_change(task, const.ORIGIN_MANUAL)

        const.LOGGER.info("INFO: Reset all %s tasks (%s)", category, count)
        self._persist_and_update()
        return count

    async def async_reset_to_defaults(self) -> bool:
        """Replace the state with catalog defaults and save immediately."""
        state = build_default_state(dt_now_utc(), self._state.get(const.DATA_OWNER))
        state[const.DATA_TASKS] = build_catalog_tasks()
        self._state = state
        const.LOGGER.warning(
            "WARNING: Checklist for entry %s reset to defaults",
            self.config_entry.entry_id,
        )
        self.async_set_updated_data(self._state)
        return await self.store.async_save(self._state)

    def _require_task(self, task_key: str) -> TaskData:
        task = self.get_task(task_key)
        if task is None:
            raise KeyError(task_key)
        return task

    # -------------------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------------------

    def _persist(self) -> None:
        """Request a debounced save of the current state."""
        self.store.async_delay_save(self._state)

    def _persist_and_update(self) -> None:
        """Request a debounced save and notify coordinator listeners."""
        self._persist()
        self.async_set_updated_data(self._state)

    async def async_shutdown(self) -> None:
        """Tear down detectors and write the state synchronously."""
        if self._shutdown_done:
            return
        self._shutdown_done = True
        await super().async_shutdown()
        await self.detection_manager.async_shutdown()
        await self.store.async_shutdown(self._state)

    def get_diagnostics(self) -> dict[str, Any]:
        """Return persistence, detector and reset diagnostics."""
        store = self.store
        return {
            "persistence": {
                "path": store.path,
                "has_pending_save": store.has_pending_save,
                "last_save_time": store.last_save_time.isoformat()
                if store.last_save_time
                else None,
                "last_save_success": store.last_save_success,
                "last_load_time": store.last_load_time.isoformat()
                if store.last_load_time
                else None,
                "last_load_success": store.last_load_success,
                "last_load_repaired": store.last_load_repaired,
            },
            "detectors": {
                "active_count": self.detection_manager.active_detector_count,
                "registered": self.detection_manager.get_diagnostics(),
            },
            "resets": self.reset_manager.get_reset_summary(),
        }
