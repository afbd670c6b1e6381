"""Detector contract for automatic task completion sources.

Detectors are plugged into DetectionManager at runtime. They are described by
a structural Protocol rather than a base class: any object providing these
members can be registered, and concrete detectors are free to inherit from
whatever suits their data source.

Callbacks registered through add_state_listener() may be invoked from any
thread; DetectionManager marshals them onto the event loop.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from .. import const

# Listener signature: (task_key, completed)
StateListener = Callable[[str, bool], None]

LIMITATION_KINDS = frozenset(
    {
        const.LIMITATION_POST_START_ONLY,
        const.LIMITATION_PARTIAL_COVERAGE,
        const.LIMITATION_STUB,
        const.LIMITATION_REQUIRES_INTERACTION,
    }
)


@dataclass(frozen=True, slots=True)
class DetectionLimitation:
    """Known limitation of a detector's coverage.

    Attributes:
        kind: One of const.LIMITATION_* (post_start_only, partial_coverage,
              stub, requires_interaction)
        description: User-facing summary
        technical_reason: Why the detector cannot do better
        task_key: Affected task, or None when it applies to every supported task
    """

    kind: str
    description: str
    technical_reason: str
    task_key: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in LIMITATION_KINDS:
            raise ValueError(f"Unknown detection limitation kind: {self.kind}")

    def applies_to(self, task_key: str) -> bool:
        return self.task_key is None or self.task_key == task_key


@runtime_checkable
class TaskDetector(Protocol):
    """Structural interface every detector must satisfy."""

    @property
    def supported_task_keys(self) -> Iterable[str]:
        """Task keys this detector can report on (catalog keys)."""

    is_enabled: bool

    @property
    def has_limited_detection(self) -> bool:
        """True if get_detection_limitations() is non-empty."""

    def initialize(self) -> None:
        """Start observing the data source. Must be idempotent."""

    def get_completion_state(self, task_key: str) -> bool | None:
        """Return True/False when known, None when undeterminable."""

    def get_detection_limitations(self) -> list[DetectionLimitation]:
        """Return known coverage limitations."""

    def add_state_listener(self, listener: StateListener) -> Callable[[], None]:
        """Register listener and return a callable that removes it."""

    def shutdown(self) -> None:
        """Stop observing and release resources."""
