# recipes package
# src/recipes/__init__.py

"""
Recipe dump model for recipe-diff.

Small, stable surface for the analysis layer:

- load_snapshot / load_snapshot_pair -> Snapshot
- build_machine_index                -> machine name -> RecipeKey -> recipes
- ItemStack, FluidStack, GTRecipe, Machine, Snapshot
- recipe_key, recipe_sort_key        -> canonical keys and ordering
"""

from __future__ import annotations

from .schema import (
    FluidStack,
    GregTechSource,
    GTRecipe,
    ItemStack,
    Machine,
    Snapshot,
)
from .canonical import RecipeKey, recipe_key, recipe_sort_key
from .index import MachineIndex, RecipeIndex, build_machine_index, build_recipe_index
from .loader import load_snapshot, load_snapshot_pair, parse_snapshot


__all__ = [
    "FluidStack",
    "GregTechSource",
    "GTRecipe",
    "ItemStack",
    "Machine",
    "Snapshot",
    "RecipeKey",
    "recipe_key",
    "recipe_sort_key",
    "MachineIndex",
    "RecipeIndex",
    "build_machine_index",
    "build_recipe_index",
    "load_snapshot",
    "load_snapshot_pair",
    "parse_snapshot",
]
