"""
Module: verbosity_registry.py
Location: src/grouplog/logging/
Version: 0.1.0

Owns the group -> verbosity mapping and answers hierarchical lookups.
"""

import threading
from typing import Dict, Optional

from grouplog.logging.log_level import DEFAULT_LEVEL, LogLevel

ALL_GROUP = "all"
GROUP_SEPARATOR = "/"


class VerbosityRegistry:
    """
    Registry of configured verbosity thresholds.

    Lookup order for a group:
      group -> each truncated ancestor -> "all" -> DEFAULT_LEVEL
    """

    def __init__(self):
        # None until the first set(); lookups on an unconfigured
        # registry fall straight through to DEFAULT_LEVEL.
        self._levels: Optional[Dict[str, LogLevel]] = None
        self._lock = threading.Lock()

    def set(self, group: str, level: LogLevel) -> None:
        if not group:
            raise ValueError("Verbosity group must be a non-empty string")
        level = LogLevel(level)
        with self._lock:
            if self._levels is None:
                self._levels = {}
            self._levels[group] = level

    def get(self, group: str) -> LogLevel:
        with self._lock:
            levels = self._levels
            if levels is None:
                return DEFAULT_LEVEL

            current = group
            while True:
                level = levels.get(current)
                if level is not None:
                    return level

                if GROUP_SEPARATOR in current:
                    current = current.rsplit(GROUP_SEPARATOR, 1)[0]
                elif current != ALL_GROUP:
                    current = ALL_GROUP
                else:
                    return DEFAULT_LEVEL

    def is_configured(self) -> bool:
        return self._levels is not None

    def items(self) -> Dict[str, LogLevel]:
        with self._lock:
            return dict(self._levels or {})
