# analysis package
# src/analysis/__init__.py

"""
Before/after recipe analysis.

- analyze(before_index, after_index) -> machine -> RecipeStatus -> records
- classify_key                        -> the per-key decision procedure
- StatusFilter / apply_filter / summarize / write_report -> reporting
"""

from __future__ import annotations

from .status import RecipeStatus, parse_status, parse_status_list
from .classifier import (
    AnalysisResult,
    DiffRecord,
    SameRecord,
    analyze,
    classify_key,
    classify_machine,
    make_record,
)
from .report import (
    StatusFilter,
    apply_filter,
    print_summary,
    render_report,
    report_to_dict,
    summarize,
    write_report,
)


__all__ = [
    "RecipeStatus",
    "parse_status",
    "parse_status_list",
    "AnalysisResult",
    "DiffRecord",
    "SameRecord",
    "analyze",
    "classify_key",
    "classify_machine",
    "make_record",
    "StatusFilter",
    "apply_filter",
    "print_summary",
    "render_report",
    "report_to_dict",
    "summarize",
    "write_report",
]
