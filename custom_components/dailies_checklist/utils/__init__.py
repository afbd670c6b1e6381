"""Pure Python utilities for Dailies Checklist.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: UTC parsing, occurrence calculations, duration formatting
"""

from . import dt_utils

__all__ = ["dt_utils"]
