# path: src/recipes/index.py
"""
Per-machine recipe indexes.

A RecipeIndex groups one machine's recipes by input signature (RecipeKey).
Every list with more than one recipe is a multi-registration: either a
harmless duplicate or a real conflict, which the classifier sorts out.

Indexes are rebuilt from each snapshot and never mutated afterwards.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from .canonical import RecipeKey, recipe_key
from .schema import GTRecipe, Machine, Snapshot

logger = logging.getLogger(__name__)


RecipeIndex = Dict[RecipeKey, List[GTRecipe]]
MachineIndex = Dict[str, RecipeIndex]


def build_recipe_index(machine: Machine) -> RecipeIndex:
    """Group a machine's recipes by RecipeKey, keeping first-seen order."""
    index: RecipeIndex = {}
    for recipe in machine.recipes:
        index.setdefault(recipe_key(recipe), []).append(recipe)
    return index


def build_machine_index(snapshot: Snapshot) -> MachineIndex:
    """
    Index every machine of the snapshot's GregTech source.

    Raises MissingSourceError if the snapshot has no GregTech source. When a
    machine name repeats, the later entry wins.
    """
    per_machine: MachineIndex = {}
    for machine in snapshot.gregtech_machines():
        if machine.name in per_machine:
            logger.warning(
                "machine %r appears more than once in %s; keeping the last entry",
                machine.name,
                snapshot.path,
            )
        per_machine[machine.name] = build_recipe_index(machine)

    logger.debug(
        "indexed %d machines, %d input signatures, %d with conflicts",
        len(per_machine),
        sum(len(idx) for idx in per_machine.values()),
        sum(conflict_count(idx) for idx in per_machine.values()),
    )
    return per_machine


def conflict_count(index: RecipeIndex) -> int:
    """Number of keys with more than one registered recipe."""
    return sum(1 for recipes in index.values() if len(recipes) > 1)
