"""Reset Engine - Pure logic for recurring UTC reset boundaries.

This engine provides stateless, pure Python functions for:
- Next/last occurrence of each reset cadence
- Time-until / time-since queries and their display strings
- Detecting whether a cadence has rolled over since a stored stamp
- Reconciling a state document against every tracked cadence

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Every function accepts an optional `now` so callers (and tests) control time.
Timers and notifications belong to ResetManager.

Catch-up semantics: however many boundaries were missed while offline, a
cadence resets at most once and its stamp becomes the most recent boundary.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import (
    as_utc,
    dt_format_duration,
    dt_next_time_of_day,
    dt_next_weekday_time,
    dt_now_utc,
    dt_to_iso,
    dt_to_utc,
)
from .task_engine import TaskEngine

if TYPE_CHECKING:
    from ..type_defs import ChecklistStateData


# =============================================================================
# Occurrence primitives
# =============================================================================


def next_occurrence(hour: int, minute: int, now: datetime | None = None) -> datetime:
    """Return the next UTC instant at hour:minute (exact match counts as passed)."""
    return dt_next_time_of_day(hour, minute, now or dt_now_utc())


def next_weekday_occurrence(
    weekday: int, hour: int, minute: int, now: datetime | None = None
) -> datetime:
    """Return the next UTC instant on weekday (0=Monday) at hour:minute."""
    return dt_next_weekday_time(weekday, hour, minute, now or dt_now_utc())


def _schedule(reset_type: str) -> tuple[int | None, int, int, timedelta]:
    try:
        return const.RESET_SCHEDULES[reset_type]
    except KeyError:
        raise ValueError(f"Unknown reset type: {reset_type}") from None


class ResetEngine:
    """Reset boundary calculations for every cadence in const.RESET_SCHEDULES."""

    @staticmethod
    def get_next_reset(reset_type: str, now: datetime | None = None) -> datetime:
        """Return the next boundary for reset_type.

        Raises:
            ValueError: If reset_type is unknown.
        """
        weekday, hour, minute, _period = _schedule(reset_type)
        if weekday is None:
            return next_occurrence(hour, minute, now)
        return next_weekday_occurrence(weekday, hour, minute, now)

    @staticmethod
    def get_last_reset(reset_type: str, now: datetime | None = None) -> datetime:
        """Return the most recent boundary at or before now (next - one period)."""
        _weekday, _hour, _minute, period = _schedule(reset_type)
        return ResetEngine.get_next_reset(reset_type, now) - period

    @staticmethod
    def get_time_until_reset(
        reset_type: str, now: datetime | None = None
    ) -> timedelta:
        now = as_utc(now) if now else dt_now_utc()
        return ResetEngine.get_next_reset(reset_type, now) - now

    @staticmethod
    def get_time_since_last_reset(
        reset_type: str, now: datetime | None = None
    ) -> timedelta:
        now = as_utc(now) if now else dt_now_utc()
        return now - ResetEngine.get_last_reset(reset_type, now)

    @staticmethod
    def get_formatted_time_until_reset(
        reset_type: str, now: datetime | None = None
    ) -> str:
        """Return e.g. "2h 30m", "1d 5h", "4m 10s" or "Now"."""
        return dt_format_duration(ResetEngine.get_time_until_reset(reset_type, now))

    @staticmethod
    def has_reset_occurred_since(
        reset_type: str,
        last_checked: datetime | str | None,
        now: datetime | None = None,
    ) -> bool:
        """Return True if a boundary of reset_type passed after last_checked.

        A naive last_checked is treated as UTC. None (or an unparsable string)
        means the cadence has never been applied, so a reset is due.
        """
        last_checked_utc = dt_to_utc(last_checked)
        if last_checked_utc is None:
            return True
        return ResetEngine.get_last_reset(reset_type, now) > last_checked_utc

    @staticmethod
    def reconcile_all(
        state: ChecklistStateData, now: datetime | None = None
    ) -> dict[str, bool]:
        """Apply every due cadence to state.

        For each tracked cadence (daily, grand company, weekly, drawing) that
        has rolled over since its stamp, clear every task it governs and set the
        stamp to get_last_reset(). Calling this twice in a row is a no-op the
        second time.

        Returns:
            Mapping of reset type to whether it was applied.
        """
        if state is None:
            raise ValueError("state must not be None")

        now = as_utc(now) if now else dt_now_utc()
        applied: dict[str, bool] = {}

        for reset_type, stamp_key in const.TRACKED_RESET_STAMPS.items():
            if not ResetEngine.has_reset_occurred_since(
                reset_type, state.get(stamp_key), now
            ):
                applied[reset_type] = False
                continue

            cleared = 0
            for task in state[const.DATA_TASKS]:
                if TaskEngine.get_governing_reset_type(task) == reset_type:
                    TaskEngine.reset_task(task)
                    cleared += 1

            state[stamp_key] = dt_to_iso(ResetEngine.get_last_reset(reset_type, now))  # type: ignore[literal-required]
            applied[reset_type] = True
            const.LOGGER.info(
                "INFO: Applied %s reset (%s tasks cleared)", reset_type, cleared
            )

        return applied
