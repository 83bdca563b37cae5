# path: src/analysis/report.py
"""
Report assembly for recipe-diff.

Provides:
- StatusFilter: mutually exclusive blacklist / whitelist of status kinds
- apply_filter: drop (or keep only) the listed kinds in every machine
- summarize: total record count per status kind
- report_to_dict / render_report: nested JSON-ready structure / text
- write_report: atomic write of the JSON report
- print_summary: rich table of the per-kind totals

Report shape:

    {
      "Macerator": {
        "Added": [ {"before": [], "after": [ {recipe}, ... ]} ],
        "DuplicateRegistration": [ {"recipes": [ {recipe}, {recipe} ]} ]
      },
      ...
    }

Machines are sorted by name, status kinds follow RecipeStatus order and the
records are pre-sorted by the classifier, so identical inputs always render
byte-identical output.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Optional

from rich.console import Console
from rich.table import Table

from runtime.errors import UsageError

from .classifier import AnalysisResult
from .status import RecipeStatus

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StatusFilter:
    """
    Allow-list or deny-list of status kinds (never both).

    An empty filter keeps everything.
    """
    blacklist: FrozenSet[RecipeStatus] = field(default_factory=frozenset)
    whitelist: FrozenSet[RecipeStatus] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.blacklist and self.whitelist:
            raise UsageError("cannot use --blacklist and --whitelist at the same time")

    @classmethod
    def from_lists(
        cls,
        blacklist: Optional[Iterable[RecipeStatus]] = None,
        whitelist: Optional[Iterable[RecipeStatus]] = None,
    ) -> "StatusFilter":
        return cls(
            blacklist=frozenset(blacklist or ()),
            whitelist=frozenset(whitelist or ()),
        )

    def allows(self, status: RecipeStatus) -> bool:
        if self.whitelist:
            return status in self.whitelist
        return status not in self.blacklist


def apply_filter(result: AnalysisResult, status_filter: StatusFilter) -> AnalysisResult:
    """
    Return a filtered copy of `result`.

    Machines stay in the report even when every one of their kinds is
    filtered out.
    """
    return {
        machine: {
            status: records
            for status, records in statuses.items()
            if status_filter.allows(status)
        }
        for machine, statuses in result.items()
    }


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

def summarize(result: AnalysisResult) -> Dict[RecipeStatus, int]:
    """Total records per status kind over all machines (non-zero kinds only)."""
    totals: Dict[RecipeStatus, int] = {}
    for statuses in result.values():
        for status, records in statuses.items():
            totals[status] = totals.get(status, 0) + len(records)
    return {
        status: totals[status]
        for status in sorted(totals, key=lambda s: s.order)
        if totals[status] > 0
    }


def print_summary(summary: Dict[RecipeStatus, int], console: Optional[Console] = None) -> None:
    """Render the per-kind totals as a table on stdout (or `console`)."""
    console = console or Console()

    table = Table(title="summary")
    table.add_column("Status")
    table.add_column("Records", justify="right")

    for status, count in summary.items():
        table.add_row(status.label, str(count))
    if not summary:
        table.add_row("(no changes)", "0")

    console.print(table)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def report_to_dict(result: AnalysisResult) -> Dict[str, Any]:
    """Convert an AnalysisResult into plain dicts/lists for JSON."""
    return {
        machine: {
            status.value: [record.to_dict() for record in records]
            for status, records in statuses.items()
        }
        for machine, statuses in result.items()
    }


def render_report(result: AnalysisResult, indent: int = 2) -> str:
    """Pretty-printed JSON text of the report."""
    return json.dumps(report_to_dict(result), indent=indent, ensure_ascii=False)


def write_report(result: AnalysisResult, path: Path, indent: int = 2) -> None:
    """
    Write the report atomically.

    The JSON goes to a temp file next to `path` which is then renamed over
    it, so readers never see a half-written report.
    """
    path = Path(path)
    text = render_report(result, indent=indent)

    parent = path.parent
    if not parent.exists():
        parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger.info("wrote %s (%d bytes)", path, len(text.encode("utf-8")))


__all__ = [
    "StatusFilter",
    "apply_filter",
    "summarize",
    "print_summary",
    "report_to_dict",
    "render_report",
    "write_report",
]
