"""Engine modules for Dailies Checklist integration.

Contains pure computation engines:
- reset_engine: UTC reset boundaries and state reconciliation
- task_engine: Task state transitions and signal ingestion
"""

# Use relative imports within package to avoid mypy module resolution issues
from .reset_engine import ResetEngine, next_occurrence, next_weekday_occurrence
from .task_engine import TaskEngine

__all__ = [
    "ResetEngine",
    "TaskEngine",
    "next_occurrence",
    "next_weekday_occurrence",
]
