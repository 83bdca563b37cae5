# path: src/analysis/status.py
"""
Status kinds assigned to one (machine, input signature) comparison.

Declaration order is the report order.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, List

from runtime.errors import UsageError


class RecipeStatus(Enum):
    """Classification of one recipe key across the before/after snapshots."""

    ADDED = "Added"
    REMOVED = "Removed"
    OUTPUTS_CHANGED = "OutputsChanged"
    STATS_CHANGED = "StatsChanged"
    CONFLICTING = "Conflicting"
    CONFLICT_CREATED = "ConflictCreated"
    CONFLICT_REMOVED = "ConflictRemoved"
    DUPLICATE_REGISTRATION = "DuplicateRegistration"
    MISSING_INPUT = "MissingInput"
    MISSING_OUTPUT = "MissingOutput"
    MISSING_OUTPUT_CREATED = "MissingOutputCreated"

    @property
    def order(self) -> int:
        return _ORDER[self]

    @property
    def label(self) -> str:
        """Human-readable name, e.g. "Outputs Changed"."""
        return re.sub(r"(?<=[a-z])(?=[A-Z])", " ", self.value)


_ORDER = {status: i for i, status in enumerate(RecipeStatus)}

# "outputs-changed", "Outputs Changed", "OUTPUTS_CHANGED" -> "outputschanged"
_LOOKUP = {status.value.lower(): status for status in RecipeStatus}


def parse_status(name: str) -> RecipeStatus:
    """
    Resolve a status kind from user input.

    Case, spaces, "-" and "_" are ignored. Raises UsageError for unknown names.
    """
    normalized = re.sub(r"[\s_\-]", "", name).lower()
    try:
        return _LOOKUP[normalized]
    except KeyError:
        valid = ", ".join(s.value for s in RecipeStatus)
        raise UsageError(f"unknown status kind {name!r} (expected one of: {valid})") from None


def parse_status_list(names: Iterable[str]) -> List[RecipeStatus]:
    """Parse several names, dropping repeats but keeping first-seen order."""
    result: List[RecipeStatus] = []
    for name in names:
        status = parse_status(name)
        if status not in result:
            result.append(status)
    return result
