# path: src/recipes/canonical.py
"""
Canonical ordering for stacks and recipes.

Keys, record ordering and report ordering all sort with the functions in this
module. Indexes built from different snapshots are only comparable because
both go through the same order, so nothing else should sort stacks or recipes
on its own.

Orders (lexicographic over the tuples, absent names before present ones):

  ItemStack   (amount, metadata, unlocalized_name, localized_name)
  FluidStack  (amount, unlocalized_name, localized_name)
  GTRecipe    (enabled, duration, eut, item_inputs, fluid_inputs,
               item_outputs, fluid_outputs)
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .schema import FluidStack, GTRecipe, ItemStack


RecipeKey = Tuple[Tuple[ItemStack, ...], Tuple[FluidStack, ...]]


def _name_key(name: Optional[str]) -> Tuple[int, str]:
    # None sorts before every string
    if name is None:
        return (0, "")
    return (1, name)


def item_sort_key(stack: ItemStack) -> tuple:
    return (
        stack.amount,
        stack.metadata,
        _name_key(stack.unlocalized_name),
        _name_key(stack.localized_name),
    )


def fluid_sort_key(stack: FluidStack) -> tuple:
    return (
        stack.amount,
        _name_key(stack.unlocalized_name),
        _name_key(stack.localized_name),
    )


def recipe_sort_key(recipe: GTRecipe) -> tuple:
    return (
        recipe.enabled,
        recipe.duration,
        recipe.eut,
        tuple(item_sort_key(s) for s in recipe.item_inputs),
        tuple(fluid_sort_key(s) for s in recipe.fluid_inputs),
        tuple(item_sort_key(s) for s in recipe.item_outputs),
        tuple(fluid_sort_key(s) for s in recipe.fluid_outputs),
    )


def canonical_items(stacks: Iterable[ItemStack]) -> Tuple[ItemStack, ...]:
    """Stable sort of item stacks into a tuple."""
    return tuple(sorted(stacks, key=item_sort_key))


def canonical_fluids(stacks: Iterable[FluidStack]) -> Tuple[FluidStack, ...]:
    """Stable sort of fluid stacks into a tuple."""
    return tuple(sorted(stacks, key=fluid_sort_key))


def canonical_recipe(recipe: GTRecipe) -> GTRecipe:
    """Return `recipe` with all four stack lists in canonical order."""
    return GTRecipe(
        enabled=recipe.enabled,
        duration=recipe.duration,
        eut=recipe.eut,
        item_inputs=canonical_items(recipe.item_inputs),
        fluid_inputs=canonical_fluids(recipe.fluid_inputs),
        item_outputs=canonical_items(recipe.item_outputs),
        fluid_outputs=canonical_fluids(recipe.fluid_outputs),
    )


def sorted_recipes(recipes: Iterable[GTRecipe]) -> Tuple[GTRecipe, ...]:
    return tuple(sorted(recipes, key=recipe_sort_key))


def recipe_key(recipe: GTRecipe) -> RecipeKey:
    """
    The input signature of a recipe: its sorted item and fluid inputs.

    Sorting here as well as in the loader keeps the key canonical for
    recipes built in memory.
    """
    return (canonical_items(recipe.item_inputs), canonical_fluids(recipe.fluid_inputs))


def key_has_missing(key: RecipeKey) -> bool:
    items, fluids = key
    return any(s.is_missing() for s in items) or any(s.is_missing() for s in fluids)
