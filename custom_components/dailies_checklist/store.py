# File: store.py
"""Handles persistent storage for the Dailies Checklist integration.

One JSON document per config entry, written under <config>/.storage. Saves are
debounced: each delayed save replaces the pending snapshot and restarts the
timer, so only the last snapshot of a burst reaches disk. Loads never raise:
a missing file yields a fresh state, and a corrupt file yields a fresh state
plus a failed load_completed signal.

Home Assistant's Store helper is not used because it cannot report per-write
success, flush a pending delayed write on demand, or distinguish a corrupt
document from a missing one.
"""

from __future__ import annotations

import asyncio
import contextlib
import copy
import os
from datetime import datetime
from typing import TYPE_CHECKING, Any

from homeassistant.core import CALLBACK_TYPE, callback
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.event import async_call_later
from homeassistant.helpers.json import save_json
from homeassistant.util.json import load_json

from . import const
from .data_builders import build_default_state, validate_and_repair_state
from .helpers.signal_helpers import async_emit
from .migrations import migrate_state
from .utils.dt_utils import dt_now_utc, dt_to_iso

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .type_defs import ChecklistStateData


def get_storage_path(hass: HomeAssistant, entry_id: str) -> str:
    """Return the state file path for a config entry."""
    return hass.config.path(
        const.STORAGE_DIRECTORY, f"{const.STORAGE_KEY_PREFIX}.{entry_id}"
    )


class ChecklistStore:
    """Debounced, versioned persistence for one checklist state document."""

    def __init__(
        self,
        hass: HomeAssistant,
        entry_id: str,
        *,
        path: str | None = None,
        save_delay: float = const.DEFAULT_SAVE_DELAY_SECONDS,
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            entry_id: Config entry owning this document (scopes signals).
            path: Override for the file location (default: .storage/dailies_checklist.<entry_id>).
            save_delay: Debounce window in seconds for async_delay_save().
        """
        self.hass = hass
        self.entry_id = entry_id
        self.path = path or get_storage_path(hass, entry_id)
        self.save_delay = save_delay

        self._pending: dict[str, Any] | None = None
        self._unsub_delay: CALLBACK_TYPE | None = None
        self._write_lock = asyncio.Lock()

        self.last_save_time: datetime | None = None
        self.last_load_time: datetime | None = None
        self.last_save_success: bool | None = None
        self.last_load_success: bool | None = None
        self.last_load_repaired = False

    @property
    def has_pending_save(self) -> bool:
        return self._pending is not None

    # ------------------------------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------------------------------

    def _read_data(self) -> Any:
        """Read and parse the document (executor). Returns None if absent."""
        if not os.path.isfile(self.path):
            return None
        return load_json(self.path)

    async def async_load(self) -> ChecklistStateData:
        """Load, migrate and validate the state document.

        Returns:
            The repaired state. A fresh default state (empty task set) when the
            file is missing or unusable.
        """
        now = dt_now_utc()
        self.last_load_time = now
        self.last_load_repaired = False

        try:
            raw = await self.hass.async_add_executor_job(self._read_data)
        except HomeAssistantError as err:
            return self._handle_unusable_document(now, f"unreadable document: {err}")

        if raw is None:
            const.LOGGER.info(
                "INFO: No checklist state found at %s. Initializing new state",
                self.path,
            )
            self.last_load_success = True
            async_emit(
                self.hass,
                self.entry_id,
                const.SIGNAL_SUFFIX_LOAD_COMPLETED,
                success=True,
                repaired=False,
            )
            return build_default_state(now)

        if not isinstance(raw, dict):
            return self._handle_unusable_document(
                now, f"root is {type(raw).__name__}, expected object"
            )

        raw, from_version = migrate_state(raw)
        if from_version is not None:
            async_emit(
                self.hass,
                self.entry_id,
                const.SIGNAL_SUFFIX_CONFIG_MIGRATED,
                from_version=from_version,
                to_version=const.SCHEMA_VERSION_CURRENT,
            )

        state, repaired = validate_and_repair_state(raw, now)
        self.last_load_success = True
        self.last_load_repaired = repaired
        const.LOGGER.debug(
            "DEBUG: Loaded checklist state from %s: %s tasks (repaired=%s)",
            self.path,
            len(state[const.DATA_TASKS]),
            repaired,
        )
        async_emit(
            self.hass,
            self.entry_id,
            const.SIGNAL_SUFFIX_LOAD_COMPLETED,
            success=True,
            repaired=repaired,
        )
        return state

    def _handle_unusable_document(
        self, now: datetime, reason: str
    ) -> ChecklistStateData:
        const.LOGGER.error(
            "ERROR: Failed to load checklist state from %s (%s). Starting fresh",
            self.path,
            reason,
        )
        self.last_load_success = False
        async_emit(
            self.hass,
            self.entry_id,
            const.SIGNAL_SUFFIX_LOAD_COMPLETED,
            success=False,
            repaired=False,
        )
        return build_default_state(now)

    # ------------------------------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------------------------------

    @callback
    def async_delay_save(self, state: ChecklistStateData) -> None:
        """Schedule a debounced save of a snapshot of state.

        The snapshot is taken now, so later mutations are not written unless
        they request another save.
        """
        self._pending = copy.deepcopy(dict(state))
        self._cancel_timer()
        self._unsub_delay = async_call_later(
            self.hass, self.save_delay, self._async_handle_delay_elapsed
        )

    async def _async_handle_delay_elapsed(self, _now: datetime) -> None:
        self._unsub_delay = None
        await self.async_flush()

    async def async_flush(self) -> bool:
        """Write the pending snapshot now, if any.

        Returns:
            False only if a pending snapshot failed to write.
        """
        self._cancel_timer()
        snapshot, self._pending = self._pending, None
        if snapshot is None:
            return True
        return await self._async_write(snapshot)

    async def async_save(self, state: ChecklistStateData) -> bool:
        """Cancel any pending delayed save and write state immediately."""
        self._cancel_timer()
        self._pending = None
        return await self._async_write(copy.deepcopy(dict(state)))

    async def async_shutdown(self, state: ChecklistStateData) -> bool:
        """Final synchronous-style save on unload or Home Assistant stop."""
        const.LOGGER.debug("DEBUG: Flushing checklist state for %s", self.entry_id)
        return await self.async_save(state)

    def _write_data(self, data: dict[str, Any]) -> None:
        """Write the document atomically (executor)."""
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        save_json(self.path, data, atomic_writes=True)

    async def _async_write(self, snapshot: dict[str, Any]) -> bool:
        async with self._write_lock:
            now = dt_now_utc()
            version = snapshot.get(const.DATA_VERSION)
            if not isinstance(version, int) or version < const.SCHEMA_VERSION_CURRENT:
                version = const.SCHEMA_VERSION_CURRENT
            snapshot[const.DATA_VERSION] = version
            snapshot[const.DATA_LAST_SAVE_TIME] = dt_to_iso(now)
            try:
                await self.hass.async_add_executor_job(self._write_data, snapshot)
            except OSError as err:
                const.LOGGER.error(
                    "ERROR: Failed to save checklist state due to file system error: %s. "
                    "Check disk space and file permissions for %s",
                    err,
                    self.path,
                )
                return self._finish_save(False)
            except (TypeError, ValueError) as err:
                const.LOGGER.error(
                    "ERROR: Failed to save checklist state due to non-serializable data: %s",
                    err,
                )
                return self._finish_save(False)
            except HomeAssistantError as err:
                const.LOGGER.error(
                    "ERROR: Failed to save checklist state to %s: %s", self.path, err
                )
                return self._finish_save(False)

            self.last_save_time = now
            const.LOGGER.debug("DEBUG: Checklist state saved to %s", self.path)
            return self._finish_save(True)

    def _finish_save(self, success: bool) -> bool:
        self.last_save_success = success
        async_emit(
            self.hass,
            self.entry_id,
            const.SIGNAL_SUFFIX_SAVE_COMPLETED,
            success=success,
        )
        return success

    # ------------------------------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------------------------------

    def _cancel_timer(self) -> None:
        if self._unsub_delay is not None:
            self._unsub_delay()
            self._unsub_delay = None

    @callback
    def async_cancel_pending(self) -> None:
        """Drop any pending delayed save without writing it."""
        self._cancel_timer()
        self._pending = None

    def _delete_file(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            os.remove(self.path)

    async def async_remove(self) -> None:
        """Delete the state file from disk (config entry removal)."""
        self.async_cancel_pending()
        try:
            await self.hass.async_add_executor_job(self._delete_file)
            const.LOGGER.info("INFO: Checklist state file removed: %s", self.path)
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove checklist state file %s: %s. Check file permissions",
                self.path,
                err,
            )
