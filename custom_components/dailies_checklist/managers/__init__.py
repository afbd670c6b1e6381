"""Manager modules for Dailies Checklist integration.

Managers orchestrate workflows and coordinate between engines.
They are stateful, event-aware, and own Home Assistant timers.
"""

from .base_manager import BaseManager
from .detection_manager import DetectionManager, DetectorRecord
from .reset_manager import ResetManager

__all__ = [
    "BaseManager",
    "DetectionManager",
    "DetectorRecord",
    "ResetManager",
]
