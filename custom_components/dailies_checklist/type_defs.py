"""Type definitions for Dailies Checklist data structures.

The persisted state is a plain JSON document. TypedDicts describe its fixed
shape for static analysis only; runtime validation lives in data_builders.py.

IMPORTANT: This file must NOT import from coordinator.py or any manager to
avoid circular dependencies.
"""

from typing import TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

TaskKey = str  # Stable catalog key, e.g. "mini_cactpot"
ResetType = str  # One of const.RESET_TYPES
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"


# =============================================================================
# State Document
# =============================================================================


class TaskData(TypedDict):
    """A single checklist task.

    current_count never exceeds max_count. For multi-count tasks (max_count > 1),
    completed is true whenever current_count >= max_count.
    """

    key: TaskKey
    category: str
    detection: str
    enabled: bool
    completed: bool
    completed_at: ISODatetime | None
    manual_override: bool
    current_count: int
    max_count: int


class OwnerData(TypedDict):
    """Profile owner attached to a state document."""

    id: int | None
    name: str


class ChecklistStateData(TypedDict):
    """Root persisted document, one per config entry."""

    version: int
    tasks: list[TaskData]
    last_daily_reset: ISODatetime | None
    last_gc_reset: ISODatetime | None
    last_weekly_reset: ISODatetime | None
    last_jumbo_cactpot_reset: ISODatetime | None
    last_save_time: ISODatetime | None
    owner: OwnerData | None


# =============================================================================
# Catalog
# =============================================================================


class CatalogEntry(TypedDict):
    """Static definition of a default task with its display metadata."""

    key: TaskKey
    name: str
    location: str
    description: str
    category: str
    detection: str
    enabled: bool
    max_count: int
    sort_order: int
