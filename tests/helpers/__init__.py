"""Test helpers for Dailies Checklist tests.

    from tests.helpers import FakeDetector, OtherFakeDetector, build_state
"""

from tests.helpers.detectors import (
    BrokenInitDetector,
    FakeDetector,
    OtherFakeDetector,
    ThrowingShutdownDetector,
)
from tests.helpers.signals import capture_signals
from tests.helpers.state import build_state, make_task

__all__ = [
    "BrokenInitDetector",
    "FakeDetector",
    "OtherFakeDetector",
    "ThrowingShutdownDetector",
    "build_state",
    "capture_signals",
    "make_task",
]
