"""
Verbosity spec parsing for command-line and config-file callers.

Spec syntax (comma separated, applied left to right):
    LEVEL               # applies to the "all" group
    GROUP=LEVEL         # applies to GROUP and, by fallback, its children

    Examples:
        debug
        warn,core/ipc=debug
        all=info, script/lib/tab=verbose
"""

from dataclasses import dataclass
from typing import List

from grouplog.logging.log_level import LogLevel, level_from_name
from grouplog.logging.verbosity_registry import ALL_GROUP, VerbosityRegistry


class VerbositySpecError(ValueError):
    def __init__(self, entry: str, reason: str):
        self.entry = entry
        self.reason = reason
        super().__init__(f"Invalid verbosity entry '{entry}': {reason}")


@dataclass(frozen=True)
class VerbositySetting:
    group: str
    level: LogLevel


def parse_verbosity_spec(spec: str) -> List[VerbositySetting]:
    settings = []
    for raw in spec.split(","):
        entry = raw.strip()
        if not entry:
            continue

        if "=" in entry:
            group, _, name = entry.partition("=")
            group, name = group.strip(), name.strip()
            if not group:
                raise VerbositySpecError(entry, "missing group name")
        else:
            group, name = ALL_GROUP, entry

        level = level_from_name(name)
        if level is None:
            known = ", ".join(lvl.name for lvl in LogLevel)
            raise VerbositySpecError(entry, f"unknown level '{name}' (expected one of: {known})")

        settings.append(VerbositySetting(group=group, level=level))
    return settings


def apply_verbosity_spec(registry: VerbosityRegistry, spec: str) -> List[VerbositySetting]:
    """Parse the whole spec first, so a bad entry leaves the registry untouched."""
    settings = parse_verbosity_spec(spec)
    for setting in settings:
        registry.set(setting.group, setting.level)
    return settings
