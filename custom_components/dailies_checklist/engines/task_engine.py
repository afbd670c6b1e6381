"""Task Engine - Pure logic for checklist task state transitions.

This engine provides stateless, pure Python functions for:
- Detector signal ingestion with manual-override precedence
- Manual completion toggles and count adjustments
- Reset-clearing of a task's mutable fields
- Governing cadence lookup

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that mutate the passed-in TaskData and
report whether anything changed. Notification and persistence belong to the
coordinator.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import dt_now_utc, dt_to_iso

if TYPE_CHECKING:
    from ..type_defs import ChecklistStateData, TaskData


class TaskEngine:
    """Pure task state transitions."""

    # =========================================================================
    # Lookups
    # =========================================================================

    @staticmethod
    def find_task(state: ChecklistStateData, task_key: str) -> TaskData | None:
        """Return the task with task_key, or None if it is not in the state."""
        for task in state[const.DATA_TASKS]:
            if task[const.DATA_TASK_KEY] == task_key:
                return task
        return None

    @staticmethod
    def get_governing_reset_type(task: TaskData) -> str:
        """Return the reset cadence that clears this task.

        Per-task overrides win over the category mapping (the Jumbo Cactpot is
        a weekly task cleared by the Saturday drawing, not the Tuesday reset).
        """
        override = const.TASK_RESET_OVERRIDES.get(task[const.DATA_TASK_KEY])
        if override is not None:
            return override
        return const.CATEGORY_RESET_TYPES[task[const.DATA_TASK_CATEGORY]]

    # =========================================================================
    # Transitions
    # =========================================================================

    @staticmethod
    def _set_completion(task: TaskData, completed: bool, now: datetime) -> None:
        task[const.DATA_TASK_COMPLETED] = completed
        task[const.DATA_TASK_COMPLETED_AT] = dt_to_iso(now) if completed else None
        task[const.DATA_TASK_CURRENT_COUNT] = (
            task[const.DATA_TASK_MAX_COUNT] if completed else 0
        )

    @staticmethod
    def apply_detector_signal(
        task: TaskData, completed: bool, now: datetime | None = None
    ) -> bool:
        """Apply a detector completion signal.

        Rules:
        - manual_override set: signal ignored
        - signal agrees with current state: no change (completed_at untouched)
        - otherwise: completion set, completed_at set/cleared, counters
          moved to max_count / 0

        Returns:
            True if the task changed.
        """
        if task[const.DATA_TASK_MANUAL_OVERRIDE]:
            return False
        if task[const.DATA_TASK_COMPLETED] == completed:
            return False
        TaskEngine._set_completion(task, completed, now or dt_now_utc())
        return True

    @staticmethod
    def set_manual_completion(
        task: TaskData, completed: bool, now: datetime | None = None
    ) -> bool:
        """Apply a user toggle. Always sets manual_override.

        Returns:
            True if the completion flag changed.
        """
        task[const.DATA_TASK_MANUAL_OVERRIDE] = True
        if task[const.DATA_TASK_COMPLETED] == completed:
            return False
        TaskEngine._set_completion(task, completed, now or dt_now_utc())
        return True

    @staticmethod
    def adjust_task_count(
        task: TaskData, delta: int, now: datetime | None = None
    ) -> bool:
        """Apply a manual count adjustment, clamped to 0..max_count.

        Completion follows the counter (complete once current >= max). The
        adjustment is a user action, so it sets manual_override.

        Returns:
            True if the counter or completion flag changed.
        """
        max_count = task[const.DATA_TASK_MAX_COUNT]
        old_count = task[const.DATA_TASK_CURRENT_COUNT]
        new_count = min(max(old_count + delta, 0), max_count)
        task[const.DATA_TASK_MANUAL_OVERRIDE] = True

        was_completed = task[const.DATA_TASK_COMPLETED]
        now_completed = new_count >= max_count
        task[const.DATA_TASK_CURRENT_COUNT] = new_count
        if now_completed != was_completed:
            task[const.DATA_TASK_COMPLETED] = now_completed
            task[const.DATA_TASK_COMPLETED_AT] = (
                dt_to_iso(now or dt_now_utc()) if now_completed else None
            )
        return new_count != old_count or now_completed != was_completed

    @staticmethod
    def reset_task(task: TaskData) -> bool:
        """Clear completion, override, timestamp and counters.

        Returns:
            True if the completion flag was set before the reset.
        """
        was_completed = task[const.DATA_TASK_COMPLETED]
        task[const.DATA_TASK_COMPLETED] = False
        task[const.DATA_TASK_COMPLETED_AT] = None
        task[const.DATA_TASK_MANUAL_OVERRIDE] = False
        task[const.DATA_TASK_CURRENT_COUNT] = 0
        return was_completed

    @staticmethod
    def set_task_enabled(task: TaskData, enabled: bool) -> bool:
        """Set the user opt-out flag. Returns True if it changed."""
        if task[const.DATA_TASK_ENABLED] == enabled:
            return False
        task[const.DATA_TASK_ENABLED] = enabled
        return True
