"""Detector contract for Dailies Checklist.

Concrete detectors live outside this integration and are registered with
DetectionManager.add_detector().
"""

from .base import LIMITATION_KINDS, DetectionLimitation, StateListener, TaskDetector

__all__ = [
    "LIMITATION_KINDS",
    "DetectionLimitation",
    "StateListener",
    "TaskDetector",
]
