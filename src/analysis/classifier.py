# path: src/analysis/classifier.py
"""
Recipe change classifier.

For every machine, every input signature (RecipeKey) seen on either side gets
at most one RecipeStatus. The checks run in a fixed priority order and the
first match wins:

  1. MissingInput           a stack in the key itself is Missing
  2. MissingOutput(Created) some after-side recipe has a Missing stack;
                            MissingOutput if the before side had one too
  3. Added / ConflictCreated key only exists after (1 recipe / several)
  4. Removed                key only exists before
  5. key on both sides:
       a. ConflictRemoved       several before, one after
       b. ConflictCreated       one before, several after
       c. DuplicateRegistration several on both sides, all identical
          Conflicting           several on both sides, not all identical
       d. OutputsChanged        one each, outputs differ
          StatsChanged          one each, duration / EU/t / enabled differ
          (nothing)             one each, identical

Each emitted record carries both sides' recipe lists (sorted), as a
SameRecord when they are identical and a DiffRecord otherwise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from recipes.canonical import RecipeKey, key_has_missing, recipe_sort_key, sorted_recipes
from recipes.index import MachineIndex, RecipeIndex
from recipes.schema import GTRecipe

from .status import RecipeStatus

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DiffRecord:
    """The before and after recipe lists of a key differ."""
    before: Tuple[GTRecipe, ...]
    after: Tuple[GTRecipe, ...]

    def sort_key(self) -> tuple:
        return (
            0,
            tuple(recipe_sort_key(r) for r in self.before),
            tuple(recipe_sort_key(r) for r in self.after),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "before": [r.to_dict() for r in self.before],
            "after": [r.to_dict() for r in self.after],
        }


@dataclass(frozen=True)
class SameRecord:
    """Both sides registered exactly the same recipes for a key."""
    recipes: Tuple[GTRecipe, ...]

    def sort_key(self) -> tuple:
        return (1, tuple(recipe_sort_key(r) for r in self.recipes))

    def to_dict(self) -> Dict[str, Any]:
        return {"recipes": [r.to_dict() for r in self.recipes]}


RecipeRecord = Union[DiffRecord, SameRecord]

# machine name -> status -> records
MachineStatuses = Dict[RecipeStatus, List[RecipeRecord]]
AnalysisResult = Dict[str, MachineStatuses]


def make_record(
    before: Optional[Sequence[GTRecipe]],
    after: Optional[Sequence[GTRecipe]],
) -> RecipeRecord:
    """Sort both sides and pick the Same / Diff representation."""
    before_sorted = sorted_recipes(before or ())
    after_sorted = sorted_recipes(after or ())
    if before_sorted == after_sorted:
        return SameRecord(recipes=before_sorted)
    return DiffRecord(before=before_sorted, after=after_sorted)


# ---------------------------------------------------------------------------
# Decision procedure
# ---------------------------------------------------------------------------

def _outputs_differ(before: GTRecipe, after: GTRecipe) -> bool:
    # Output tuples are canonical, so tuple equality is multiset equality.
    return (
        before.item_outputs != after.item_outputs
        or before.fluid_outputs != after.fluid_outputs
    )


def _stats_differ(before: GTRecipe, after: GTRecipe) -> bool:
    return (
        before.duration != after.duration
        or before.eut != after.eut
        or before.enabled != after.enabled
    )


def classify_key(
    key: RecipeKey,
    before: Optional[Sequence[GTRecipe]],
    after: Optional[Sequence[GTRecipe]],
) -> Optional[RecipeStatus]:
    """
    Assign the status for one key; None means "unchanged, not reported".

    `before` / `after` are the recipe lists registered under `key` on each
    side, or None when the key does not exist on that side.
    """
    if key_has_missing(key):
        return RecipeStatus.MISSING_INPUT

    if after and any(r.has_missing() for r in after):
        if before and any(r.has_missing() for r in before):
            return RecipeStatus.MISSING_OUTPUT
        return RecipeStatus.MISSING_OUTPUT_CREATED

    if not before and not after:
        return None

    if not before:
        return RecipeStatus.CONFLICT_CREATED if len(after) > 1 else RecipeStatus.ADDED

    if not after:
        return RecipeStatus.REMOVED

    before_conflict = len(before) > 1
    after_conflict = len(after) > 1

    if before_conflict and not after_conflict:
        return RecipeStatus.CONFLICT_REMOVED
    if after_conflict and not before_conflict:
        return RecipeStatus.CONFLICT_CREATED
    if before_conflict and after_conflict:
        first = before[0]
        if all(r == first for r in list(before) + list(after)):
            return RecipeStatus.DUPLICATE_REGISTRATION
        return RecipeStatus.CONFLICTING

    if _outputs_differ(before[0], after[0]):
        return RecipeStatus.OUTPUTS_CHANGED
    if _stats_differ(before[0], after[0]):
        return RecipeStatus.STATS_CHANGED
    return None


def classify_machine(before: RecipeIndex, after: RecipeIndex) -> MachineStatuses:
    """
    Classify every key of one machine.

    Statuses come back in enum order, records sorted, statuses without
    records left out.
    """
    grouped: Dict[RecipeStatus, List[RecipeRecord]] = {}

    keys = set(before) | set(after)
    for key in keys:
        before_list = before.get(key)
        after_list = after.get(key)

        status = classify_key(key, before_list, after_list)
        if status is None:
            continue
        grouped.setdefault(status, []).append(make_record(before_list, after_list))

    return {
        status: sorted(grouped[status], key=lambda rec: rec.sort_key())
        for status in sorted(grouped, key=lambda s: s.order)
    }


def analyze(
    before: MachineIndex,
    after: MachineIndex,
    include_removed_machines: bool = False,
) -> AnalysisResult:
    """
    Classify all machines.

    The after index drives the loop: a machine missing from `before` is
    compared against an empty index. A machine missing from `after` is only
    reported (all of its keys as Removed / MissingInput) when
    include_removed_machines is set. Machines without records are left out;
    machine names come back sorted.
    """
    names = set(after)
    if include_removed_machines:
        names |= set(before)

    result: AnalysisResult = {}
    for name in sorted(names):
        if name not in before:
            logger.info("machine %r is new in the after snapshot", name)
        elif name not in after:
            logger.info("machine %r was removed in the after snapshot", name)

        statuses = classify_machine(before.get(name, {}), after.get(name, {}))
        if statuses:
            result[name] = statuses

    skipped = sorted(set(before) - set(after))
    if skipped and not include_removed_machines:
        logger.info(
            "%d machine(s) only present in the before snapshot were not analyzed: %s",
            len(skipped),
            ", ".join(skipped),
        )
    return result
