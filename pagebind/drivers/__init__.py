"""
================================================================================
Drivers
================================================================================

Components:
    - base: NativeDriver boundary, Cookie and ComboBoxItem
    - playwright_driver: Playwright sync API adapter

Author: Automation Team
License: MIT
================================================================================
"""

from .base import ClearMethod, ComboBoxItem, Cookie, FillMethod, Locator, NativeDriver
from .playwright_driver import PlaywrightDriver

__all__ = [
    "ClearMethod",
    "ComboBoxItem",
    "Cookie",
    "FillMethod",
    "Locator",
    "NativeDriver",
    "PlaywrightDriver",
]
