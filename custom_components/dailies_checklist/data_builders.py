"""State document builders and validation.

This module is the SINGLE SOURCE OF TRUTH for:
- Task and state field defaults
- Building a fresh state document (first run, unrecoverable load)
- Validating and repairing a loaded document before it reaches the coordinator

### Build Functions
`build_task()` / `build_default_state()` return complete dicts ready for storage.

### Validation
`validate_and_repair_state()` never raises for bad content; it drops or clamps
offending values and reports whether anything changed. Only a `None` document
is a contract violation.

Consumers:
- store.py (load path)
- coordinator.py (catalog population, reset to defaults)
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast

from . import const
from .task_registry import get_catalog_entries, get_catalog_entry
from .type_defs import CatalogEntry, ChecklistStateData, OwnerData, TaskData
from .utils.dt_utils import dt_now_utc, dt_to_iso, dt_to_utc

# ==============================================================================
# BUILD FUNCTIONS
# ==============================================================================


def build_task(entry: CatalogEntry | dict[str, Any]) -> TaskData:
    """Build a fresh, incomplete task from a catalog entry (or a partial dict).

    Args:
        entry: Catalog entry or dict with at least `key` and `category`

    Returns:
        TaskData with all mutable fields at their reset defaults.
    """
    max_count = max(
        1, int(entry.get(const.DATA_TASK_MAX_COUNT, const.DEFAULT_TASK_MAX_COUNT))
    )
    return {
        const.DATA_TASK_KEY: entry[const.DATA_TASK_KEY],
        const.DATA_TASK_CATEGORY: entry[const.DATA_TASK_CATEGORY],
        const.DATA_TASK_DETECTION: entry.get(
            const.DATA_TASK_DETECTION, const.DETECTION_MANUAL
        ),
        const.DATA_TASK_ENABLED: bool(entry.get(const.DATA_TASK_ENABLED, True)),
        const.DATA_TASK_COMPLETED: False,
        const.DATA_TASK_COMPLETED_AT: None,
        const.DATA_TASK_MANUAL_OVERRIDE: False,
        const.DATA_TASK_CURRENT_COUNT: 0,
        const.DATA_TASK_MAX_COUNT: max_count,
    }  # type: ignore[return-value]


def build_catalog_tasks() -> list[TaskData]:
    """Build the default task list from the static catalog."""
    return [build_task(entry) for entry in get_catalog_entries()]


def build_owner(name: str, owner_id: int | None = None) -> OwnerData:
    """Build owner metadata for a profile."""
    return {const.DATA_OWNER_ID: owner_id, const.DATA_OWNER_NAME: name}  # type: ignore[return-value]


def build_default_state(
    now: datetime | None = None, owner: OwnerData | None = None
) -> ChecklistStateData:
    """Return a fresh state document with an empty task set.

    All cadence stamps are set to `now`, so a brand-new profile does not
    immediately reset anything.
    """
    stamp = dt_to_iso(now or dt_now_utc())
    return {
        const.DATA_VERSION: const.SCHEMA_VERSION_CURRENT,
        const.DATA_TASKS: [],
        const.DATA_LAST_DAILY_RESET: stamp,
        const.DATA_LAST_GC_RESET: stamp,
        const.DATA_LAST_WEEKLY_RESET: stamp,
        const.DATA_LAST_JUMBO_CACTPOT_RESET: stamp,
        const.DATA_LAST_SAVE_TIME: None,
        const.DATA_OWNER: owner,
    }  # type: ignore[return-value]


# ==============================================================================
# VALIDATION / REPAIR
# ==============================================================================

_STAMP_FIELDS = (
    const.DATA_LAST_DAILY_RESET,
    const.DATA_LAST_GC_RESET,
    const.DATA_LAST_WEEKLY_RESET,
    const.DATA_LAST_JUMBO_CACTPOT_RESET,
    const.DATA_LAST_SAVE_TIME,
)


def _repair_timestamp(value: Any, now: datetime) -> str | None:
    """Normalize a stored timestamp: UTC offset, no future values."""
    parsed = dt_to_utc(value) if isinstance(value, (str, datetime)) else None
    if parsed is None:
        return None
    if parsed > now:
        parsed = now
    return dt_to_iso(parsed)


def _coerce_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return default


def _repair_task(raw: dict[str, Any], now: datetime) -> TaskData:
    """Return a repaired copy of a task that already has a valid key/category."""
    catalog = get_catalog_entry(raw[const.DATA_TASK_KEY])

    detection = raw.get(const.DATA_TASK_DETECTION)
    if detection not in const.DETECTION_MODES:
        detection = catalog["detection"] if catalog else const.DETECTION_MANUAL

    max_count = _coerce_int(
        raw.get(const.DATA_TASK_MAX_COUNT), const.DEFAULT_TASK_MAX_COUNT
    )
    max_count = max(max_count, 1)
    current_count = _coerce_int(raw.get(const.DATA_TASK_CURRENT_COUNT), 0)
    current_count = min(max(current_count, 0), max_count)

    completed = bool(raw.get(const.DATA_TASK_COMPLETED, False))
    if max_count > 1 or current_count:
        completed = current_count >= max_count
    elif completed:
        current_count = max_count

    completed_at = (
        _repair_timestamp(raw.get(const.DATA_TASK_COMPLETED_AT), now)
        if completed
        else None
    )

    return {
        const.DATA_TASK_KEY: raw[const.DATA_TASK_KEY],
        const.DATA_TASK_CATEGORY: raw[const.DATA_TASK_CATEGORY],
        const.DATA_TASK_DETECTION: detection,
        const.DATA_TASK_ENABLED: bool(raw.get(const.DATA_TASK_ENABLED, True)),
        const.DATA_TASK_COMPLETED: completed,
        const.DATA_TASK_COMPLETED_AT: completed_at,
        const.DATA_TASK_MANUAL_OVERRIDE: bool(
            raw.get(const.DATA_TASK_MANUAL_OVERRIDE, False)
        ),
        const.DATA_TASK_CURRENT_COUNT: current_count,
        const.DATA_TASK_MAX_COUNT: max_count,
    }  # type: ignore[return-value]


def _repair_owner(raw: Any) -> OwnerData | None:
    if not isinstance(raw, dict):
        return None
    name = raw.get(const.DATA_OWNER_NAME)
    if not isinstance(name, str) or not name.strip():
        return None
    owner_id = raw.get(const.DATA_OWNER_ID)
    if isinstance(owner_id, bool) or not isinstance(owner_id, int):
        owner_id = None
    return build_owner(name, owner_id)


def validate_and_repair_state(
    state: dict[str, Any] | None, now: datetime | None = None
) -> tuple[ChecklistStateData, bool]:
    """Validate a loaded (already migrated) state document.

    Repairs applied:
    - Timestamps: naive values reinterpreted as UTC, future values clamped to
      now, unparsable values replaced by None
    - Tasks: malformed entries, duplicate keys and unknown categories dropped;
      list truncated to MAX_TASKS
    - Counters: negatives raised to 0, max_count at least 1, current_count at
      most max_count; completion and counters kept in step
    - completed_at cleared on incomplete tasks
    - Owner: malformed owner replaced by None
    - Unknown top-level fields carried through untouched

    Args:
        state: Parsed JSON document
        now: Reference time for clamping (defaults to current UTC time)

    Returns:
        Tuple of (repaired state, whether anything was changed).

    Raises:
        ValueError: If state is None.
    """
    if state is None:
        raise ValueError("state must not be None")

    now = now or dt_now_utc()
    repaired: ChecklistStateData = cast(ChecklistStateData, {})

    version = state.get(const.DATA_VERSION)
    repaired[const.DATA_VERSION] = (
        version
        if isinstance(version, int) and not isinstance(version, bool)
        else const.SCHEMA_VERSION_CURRENT
    )

    for field in _STAMP_FIELDS:
        repaired[field] = _repair_timestamp(state.get(field), now)  # type: ignore[literal-required]

    tasks: list[TaskData] = []
    seen: set[str] = set()
    raw_tasks = state.get(const.DATA_TASKS)
    for raw in raw_tasks if isinstance(raw_tasks, list) else []:
        if not isinstance(raw, dict):
            continue
        key = raw.get(const.DATA_TASK_KEY)
        if not isinstance(key, str) or not key or key in seen:
            continue
        if raw.get(const.DATA_TASK_CATEGORY) not in const.TASK_CATEGORIES:
            const.LOGGER.warning(
                "WARNING: Dropping task '%s' with unknown category '%s'",
                key,
                raw.get(const.DATA_TASK_CATEGORY),
            )
            continue
        seen.add(key)
        tasks.append(_repair_task(raw, now))

    if len(tasks) > const.MAX_TASKS:
        const.LOGGER.warning(
            "WARNING: Task list has %s entries, truncating to %s",
            len(tasks),
            const.MAX_TASKS,
        )
        tasks = tasks[: const.MAX_TASKS]
    repaired[const.DATA_TASKS] = tasks

    repaired[const.DATA_OWNER] = _repair_owner(state.get(const.DATA_OWNER))

    # Fields written by a newer schema are kept as-is
    for key, value in state.items():
        repaired.setdefault(key, value)  # type: ignore[misc]

    changed = any(state.get(key) != value for key, value in repaired.items())
    if changed:
        const.LOGGER.info("INFO: Loaded checklist state required repair")
    return repaired, changed
