"""
Module: log_record.py
Location: src/grouplog/logging/
Version: 0.1.0

Defines the transient record handed to the dispatcher and the mapping
from a call site's source identifier to its verbosity group.
"""

from dataclasses import dataclass

from grouplog.logging.log_exceptions import UnknownCallsiteError
from grouplog.logging.log_level import LogLevel

# Source kind -> (group root, recognised suffixes)
NATIVE_SOURCE = ("core", (".c", ".py"))
SCRIPT_SOURCE = ("script", (".lua",))

SOURCE_KINDS = (NATIVE_SOURCE, SCRIPT_SOURCE)

RELATIVE_PREFIX = "./"


@dataclass(frozen=True)
class LogRecord:
    level: LogLevel      # Severity of the record
    location: str        # Line (or position) within the call site
    callsite_id: str     # Source identifier, e.g. "common/ipc.c"
    message: str         # Fully rendered message text


def group_from_callsite(callsite_id: str) -> str:
    """
    Derive the verbosity group of a call site.

    "common/ipc.c"  -> "core/common/ipc"
    "./lib/tab.lua" -> "script/lib/tab"

    The identifier must end in exactly one known source kind's suffix;
    anything else is a caller bug and raises UnknownCallsiteError.
    """
    matches = []
    for root, suffixes in SOURCE_KINDS:
        for suffix in suffixes:
            if callsite_id.endswith(suffix):
                matches.append((root, suffix))
                break

    if not matches:
        raise UnknownCallsiteError(callsite_id, "no known source suffix")
    # Only reachable if a suffix is ever shared between source kinds
    if len(matches) > 1:
        raise UnknownCallsiteError(callsite_id, "ambiguous source suffix")

    root, suffix = matches[0]
    name = callsite_id[: -len(suffix)]
    if root == SCRIPT_SOURCE[0] and name.startswith(RELATIVE_PREFIX):
        name = name[len(RELATIVE_PREFIX):]

    return f"{root}/{name}"
