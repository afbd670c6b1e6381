"""Schema migrations for the persisted checklist document.

Each step upgrades a document by exactly one version and is applied in
order until the document reaches SCHEMA_VERSION_CURRENT. Steps operate on
the raw parsed JSON (before validation), so they must tolerate missing or
malformed fields; validate_and_repair_state() cleans up afterwards.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from . import const


def _migrate_v1_to_v2(state: dict[str, Any]) -> None:
    """Add the Jumbo Cactpot drawing stamp.

    Version 1 tracked the drawing inside the weekly cadence, so the weekly
    stamp is the correct starting point for the new cadence.
    """
    if state.get(const.DATA_LAST_JUMBO_CACTPOT_RESET) is None:
        state[const.DATA_LAST_JUMBO_CACTPOT_RESET] = state.get(
            const.DATA_LAST_WEEKLY_RESET
        )


# from_version -> step producing from_version + 1
MIGRATION_STEPS: dict[int, Callable[[dict[str, Any]], None]] = {
    const.SCHEMA_VERSION_INITIAL: _migrate_v1_to_v2,
}


def get_schema_version(state: dict[str, Any]) -> int:
    """Return the document's schema version (documents without one are v1)."""
    version = state.get(const.DATA_VERSION)
    if isinstance(version, bool) or not isinstance(version, int) or version < 1:
        return const.SCHEMA_VERSION_INITIAL
    return version


def migrate_state(state: dict[str, Any]) -> tuple[dict[str, Any], int | None]:
    """Upgrade state in place to the current schema version.

    Args:
        state: Parsed JSON document

    Returns:
        Tuple of (state, from_version). from_version is None when no migration
        was needed.
    """
    from_version = get_schema_version(state)

    if from_version > const.SCHEMA_VERSION_CURRENT:
        const.LOGGER.warning(
            "WARNING: Checklist schema version %s is newer than supported version %s; "
            "loading best-effort",
            from_version,
            const.SCHEMA_VERSION_CURRENT,
        )
        return state, None

    if from_version == const.SCHEMA_VERSION_CURRENT:
        return state, None

    version = from_version
    while version < const.SCHEMA_VERSION_CURRENT:
        step = MIGRATION_STEPS[version]
        const.LOGGER.debug("DEBUG: Migrating checklist schema v%s -> v%s", version, version + 1)
        step(state)
        version += 1

    state[const.DATA_VERSION] = const.SCHEMA_VERSION_CURRENT
    const.LOGGER.info(
        "INFO: Migrated checklist state from schema v%s to v%s",
        from_version,
        const.SCHEMA_VERSION_CURRENT,
    )
    return state, from_version
