# path: src/runtime/errors.py

"""
Error taxonomy for recipe-diff.

Every failure the tool can report derives from RecipeDiffError so the CLI
boundary can map it to an exit code without catching unrelated exceptions:

- UsageError          bad command line (both filters, unknown status names)
- ParseError          a dump could not be turned into a Snapshot
    - DumpIOError     file missing / unreadable
    - DumpFormatError invalid JSON, or JSON that does not match the dump shape
- MissingSourceError  a snapshot carries no GregTech recipe source
- ConfigError         invalid recipe_diff.yaml

Library code raises these and never exits the process itself.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class RecipeDiffError(Exception):
    """Base class for all recipe-diff failures."""


class UsageError(RecipeDiffError):
    """Invalid invocation; raised before any dump is read."""


class ConfigError(RecipeDiffError):
    """The configuration file is unreadable or malformed."""


class ParseError(RecipeDiffError):
    """
    A dump file could not be loaded.

    `path` is the dump being read; `location` is the JSON path of the
    offending value when the failure is tied to one (e.g.
    "sources[0].machines[2].recipes[5].eut").
    """

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        location: Optional[str] = None,
    ) -> None:
        self.path = path
        self.location = location
        self.detail = message

        parts = []
        if path is not None:
            parts.append(str(path))
        if location:
            parts.append(location)
        prefix = ": ".join(parts)
        super().__init__(f"{prefix}: {message}" if prefix else message)


class DumpIOError(ParseError):
    """The dump file does not exist or cannot be read."""


class DumpFormatError(ParseError):
    """The dump is not valid JSON or does not match the expected shape."""


class MissingSourceError(RecipeDiffError):
    """A snapshot has no GregTech (machine recipe) source to index."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path
        where = f" in {path}" if path is not None else ""
        super().__init__(f"no gregtech recipe source found{where}")


__all__ = [
    "RecipeDiffError",
    "UsageError",
    "ConfigError",
    "ParseError",
    "DumpIOError",
    "DumpFormatError",
    "MissingSourceError",
]
