"""Detection Manager for Dailies Checklist integration.

The "Aggregator" - owns the registry of pluggable detectors and funnels their
completion signals into the coordinator.

Registry rules:
- Detectors are keyed by class; registering a second instance of the same
  class is rejected
- Each task key maps to the first detector claiming it; later claims are
  skipped with a warning
- A detector that raises during initialize() or signal handling is marked
  failed: its subscriptions are released and it counts as disabled for the
  rest of the session. Other detectors are unaffected.

Threading:
- Detector callbacks may fire on any thread. Signals are marshalled onto the
  Home Assistant event loop before touching state, which keeps the loop the
  single writer of the checklist.

Signals Emitted:
- SIGNAL_SUFFIX_DETECTOR_ERROR: {detector, error}
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback

from .. import const
from ..detectors.base import DetectionLimitation, TaskDetector
from .base_manager import BaseManager

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.core import HomeAssistant

    from ..coordinator import ChecklistCoordinator


@dataclass
class DetectorRecord:
    """Registry entry for one detector instance."""

    detector: TaskDetector
    task_keys: list[str] = field(default_factory=list)
    unsubscribes: list[Callable[[], None]] = field(default_factory=list)
    failed: bool = False
    error: str | None = None

    @property
    def name(self) -> str:
        return type(self.detector).__name__


class DetectionManager(BaseManager):
    """Registry and signal aggregator for TaskDetector implementations."""

    def __init__(self, hass: HomeAssistant, coordinator: ChecklistCoordinator) -> None:
        """Initialize detection manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator (applies the ingestion rule)
        """
        super().__init__(hass, coordinator)
        self._detectors: dict[type, DetectorRecord] = {}
        self._task_map: dict[str, type] = {}

    async def async_setup(self) -> None:
        """Detectors are registered later via add_detector()."""
        const.LOGGER.debug(
            "DEBUG: DetectionManager initialized for entry %s", self.entry_id
        )

    # =========================================================================
    # Registration
    # =========================================================================

    @callback
    def add_detector(self, detector: TaskDetector, enabled: bool = True) -> bool:
        """Register and initialize a detector.

        Args:
            detector: Object satisfying the TaskDetector protocol
            enabled: Initial enable flag

        Returns:
            True if the detector is registered and initialized.

        Raises:
            ValueError: If detector is None.
            TypeError: If detector does not satisfy TaskDetector.
        """
        if detector is None:
            raise ValueError("detector must not be None")
        if not isinstance(detector, TaskDetector):
            raise TypeError(f"{type(detector).__name__} does not implement TaskDetector")

        detector_type = type(detector)
        if detector_type in self._detectors:
            const.LOGGER.warning(
                "WARNING: Detector %s is already registered", detector_type.__name__
            )
            return False

        record = DetectorRecord(detector=detector)
        self._detectors[detector_type] = record

        try:
            for task_key in detector.supported_task_keys:
                owner = self._task_map.get(task_key)
                if owner is not None:
                    const.LOGGER.warning(
                        "WARNING: Task '%s' is already handled by %s; skipping for %s",
                        task_key,
                        owner.__name__,
                        record.name,
                    )
                    continue
                self._task_map[task_key] = detector_type
                record.task_keys.append(task_key)

            detector.is_enabled = enabled
            record.unsubscribes.append(
                detector.add_state_listener(
                    partial(self._on_detector_signal, detector_type)
                )
            )
            detector.initialize()
        except Exception as err:  # pylint: disable=broad-exception-caught
            const.LOGGER.exception(
                "ERROR: Failed to initialize detector %s", record.name
            )
            self._mark_failed(detector_type, err)
            return False

        const.LOGGER.info(
            "INFO: Registered detector %s for %s tasks (enabled=%s)",
            record.name,
            len(record.task_keys),
            enabled,
        )
        if enabled:
            self._sync_initial_states(record)
        return True

    @callback
    def remove_detector(self, detector_type: type) -> bool:
        """Unregister a detector, release its subscriptions and shut it down."""
        record = self._detectors.pop(detector_type, None)
        if record is None:
            const.LOGGER.warning(
                "WARNING: Detector %s is not registered", detector_type.__name__
            )
            return False

        self._release(record)
        try:
            record.detector.shutdown()
        except Exception as err:  # pylint: disable=broad-exception-caught
            const.LOGGER.exception(
                "ERROR: Error shutting down detector %s", record.name
            )
            self._emit_error(record.name, err)
            return False

        const.LOGGER.info("INFO: Removed detector %s", record.name)
        return True

    def _release(self, record: DetectorRecord) -> list[Exception]:
        """Drop key mappings and unsubscribe every listener, collecting errors."""
        errors: list[Exception] = []
        for task_key in record.task_keys:
            if self._task_map.get(task_key) is type(record.detector):
                del self._task_map[task_key]
        record.task_keys.clear()

        for unsub in record.unsubscribes:
            try:
                unsub()
            except Exception as err:  # pylint: disable=broad-exception-caught
                errors.append(err)
        record.unsubscribes.clear()
        return errors

    def _mark_failed(self, detector_type: type, err: Exception) -> None:
        record = self._detectors[detector_type]
        record.failed = True
        record.error = str(err)
        for release_err in self._release(record):
            const.LOGGER.warning(
                "WARNING: Error releasing subscription of %s: %s",
                record.name,
                release_err,
            )
        self._emit_error(record.name, err)

    def _emit_error(self, detector_name: str, err: Exception) -> None:
        self.emit(
            const.SIGNAL_SUFFIX_DETECTOR_ERROR, detector=detector_name, error=str(err)
        )

    # =========================================================================
    # Enable / query
    # =========================================================================

    @callback
    def set_detector_enabled(self, detector_type: type, enabled: bool) -> bool:
        """Toggle a detector at runtime. Prior signals are not reverted.

        Returns:
            False if the detector is unknown, or failed and asked to enable.
        """
        record = self._detectors.get(detector_type)
        if record is None:
            const.LOGGER.warning(
                "WARNING: Cannot set enabled state: detector %s not registered",
                detector_type.__name__,
            )
            return False
        if record.failed and enabled:
            const.LOGGER.warning(
                "WARNING: Detector %s failed earlier this session and cannot be enabled",
                record.name,
            )
            return False

        record.detector.is_enabled = enabled
        const.LOGGER.info(
            "INFO: Detector %s %s", record.name, "enabled" if enabled else "disabled"
        )
        return True

    def _is_active(self, record: DetectorRecord | None) -> bool:
        return record is not None and not record.failed and record.detector.is_enabled

    def is_detector_enabled(self, detector_type: type) -> bool:
        return self._is_active(self._detectors.get(detector_type))

    @property
    def active_detector_count(self) -> int:
        """Number of registered detectors that are enabled and not failed."""
        return sum(1 for record in self._detectors.values() if self._is_active(record))

    def get_detector(self, task_key: str) -> TaskDetector | None:
        """Return the detector mapped to task_key, if any."""
        detector_type = self._task_map.get(task_key)
        if detector_type is None:
            return None
        return self._detectors[detector_type].detector

    def get_task_completion_state(self, task_key: str) -> bool | None:
        """Ask the mapped detector for task_key's state.

        Returns:
            True/False when known; None when unmapped, disabled, unknown to
            the detector, or the detector raised.
        """
        detector_type = self._task_map.get(task_key)
        record = self._detectors.get(detector_type) if detector_type else None
        if record is None or not self._is_active(record):
            return None
        try:
            return record.detector.get_completion_state(task_key)
        except Exception as err:  # pylint: disable=broad-exception-caught
            const.LOGGER.exception(
                "ERROR: Error getting completion state for task '%s' from %s",
                task_key,
                record.name,
            )
            self._emit_error(record.name, err)
            return None

    def get_detectable_task_keys(self) -> list[str]:
        return list(self._task_map)

    def get_registered_detector_types(self) -> list[type]:
        return list(self._detectors)

    def get_detection_limitations(self) -> dict[str, list[DetectionLimitation]]:
        """Return known limitations grouped by detector class name."""
        limitations: dict[str, list[DetectionLimitation]] = {}
        for record in self._detectors.values():
            try:
                limitations[record.name] = list(
                    record.detector.get_detection_limitations()
                )
            except Exception:  # pylint: disable=broad-exception-caught
                const.LOGGER.exception(
                    "ERROR: Error reading limitations from %s", record.name
                )
                limitations[record.name] = []
        return limitations

    def get_task_limitations(self, task_key: str) -> list[DetectionLimitation]:
        detector_type = self._task_map.get(task_key)
        if detector_type is None:
            return []
        name = detector_type.__name__
        return [
            limitation
            for limitation in self.get_detection_limitations().get(name, [])
            if limitation.applies_to(task_key)
        ]

    def get_diagnostics(self) -> list[dict[str, Any]]:
        """Return a JSON-safe summary of every registered detector."""
        limitations = self.get_detection_limitations()
        return [
            {
                "detector": record.name,
                "enabled": self._is_active(record),
                "failed": record.failed,
                "error": record.error,
                "task_keys": list(record.task_keys),
                "limitations": [
                    {
                        "kind": limitation.kind,
                        "description": limitation.description,
                        "task_key": limitation.task_key,
                    }
                    for limitation in limitations.get(record.name, [])
                ],
            }
            for record in self._detectors.values()
        ]

    # =========================================================================
    # Signal handling
    # =========================================================================

    def _on_detector_signal(
        self, detector_type: type, task_key: str, completed: bool
    ) -> None:
        """Detector listener; may run on any thread."""
        try:
            running_loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            running_loop = None

        if running_loop is self.hass.loop:
            self._async_handle_signal(detector_type, task_key, completed)
        else:
            self.hass.loop.call_soon_threadsafe(
                self._async_handle_signal, detector_type, task_key, completed
            )

    @callback
    def _async_handle_signal(
        self, detector_type: type, task_key: str, completed: bool
    ) -> None:
        record = self._detectors.get(detector_type)
        if not self._is_active(record):
            const.LOGGER.debug(
                "DEBUG: Dropping signal for '%s' from inactive detector %s",
                task_key,
                detector_type.__name__,
            )
            return

        owner = self._task_map.get(task_key)
        if owner is not detector_type:
            const.LOGGER.debug(
                "DEBUG: Dropping signal for '%s' from %s; handled by %s",
                task_key,
                detector_type.__name__,
                owner.__name__ if owner is not None else "no detector",
            )
            return

        try:
            self.coordinator.apply_detector_signal(task_key, bool(completed))
        except Exception as err:  # pylint: disable=broad-exception-caught
            const.LOGGER.exception(
                "ERROR: Error handling signal for '%s' from %s",
                task_key,
                detector_type.__name__,
            )
            self._mark_failed(detector_type, err)

    def _sync_initial_states(self, record: DetectorRecord) -> None:
        """Apply whatever state a freshly initialized detector already knows."""
        for task_key in list(record.task_keys):
            state = self.get_task_completion_state(task_key)
            if state is not None:
                self.coordinator.apply_detector_signal(task_key, state)

    # =========================================================================
    # Teardown
    # =========================================================================

    async def async_shutdown(self) -> None:
        """Best-effort teardown of every detector.

        Each detector's subscriptions are released, then shutdown() is called.
        Errors are logged and never stop the teardown of the next detector.
        """
        records = list(self._detectors.values())
        self._detectors.clear()
        for record in records:
            errors = self._release(record)
            try:
                record.detector.shutdown()
            except Exception as err:  # pylint: disable=broad-exception-caught
                errors.append(err)
            for err in errors:
                const.LOGGER.error(
                    "ERROR: Error during teardown of detector %s: %s", record.name, err
                )
        self._task_map.clear()
        const.LOGGER.debug(
            "DEBUG: DetectionManager shut down %s detectors for entry %s",
            len(records),
            self.entry_id,
        )
