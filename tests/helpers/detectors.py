"""In-memory detectors satisfying the TaskDetector protocol.

FakeDetector records lifecycle calls and lets a test push completion signals
through the registered listeners, from the event loop or from another thread.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from custom_components.dailies_checklist import const
from custom_components.dailies_checklist.detectors.base import (
    DetectionLimitation,
    StateListener,
)


class FakeDetector:
    """Detector whose state is set directly by the test."""

    def __init__(
        self,
        task_keys: Iterable[str] = ("mini_cactpot", "roulette_expert"),
        *,
        known_states: dict[str, bool] | None = None,
        limitations: list[DetectionLimitation] | None = None,
    ) -> None:
        self._task_keys = list(task_keys)
        self.known_states: dict[str, bool] = dict(known_states or {})
        self._limitations = list(limitations or [])
        self._listeners: list[StateListener] = []
        self.is_enabled = True
        self.initialize_calls = 0
        self.shutdown_calls = 0

    @property
    def supported_task_keys(self) -> Iterable[str]:
        return list(self._task_keys)

    @property
    def has_limited_detection(self) -> bool:
        return bool(self._limitations)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def initialize(self) -> None:
        self.initialize_calls += 1

    def get_completion_state(self, task_key: str) -> bool | None:
        return self.known_states.get(task_key)

    def get_detection_limitations(self) -> list[DetectionLimitation]:
        return list(self._limitations)

    def add_state_listener(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def shutdown(self) -> None:
        self.shutdown_calls += 1

    def fire(self, task_key: str, completed: bool) -> None:
        """Push a signal to every listener (from whatever thread calls this)."""
        self.known_states[task_key] = completed
        for listener in list(self._listeners):
            listener(task_key, completed)


class OtherFakeDetector(FakeDetector):
    """Second detector type, for duplicate-key and isolation tests."""


class BrokenInitDetector(FakeDetector):
    """Detector whose initialize() raises."""

    def initialize(self) -> None:
        super().initialize()
        raise RuntimeError("game client not found")


class ThrowingShutdownDetector(FakeDetector):
    """Detector whose shutdown() raises."""

    def shutdown(self) -> None:
        super().shutdown()
        raise RuntimeError("handle already closed")


POST_START_LIMITATION = DetectionLimitation(
    kind=const.LIMITATION_POST_START_ONLY,
    description="Only completions after startup are seen",
    technical_reason="Completion flags are not readable retroactively",
)
