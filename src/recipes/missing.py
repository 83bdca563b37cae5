# path: src/recipes/missing.py
"""
"Missing" detection for dumped stacks.

A stack is Missing when its name did not resolve against the game registry at
dump time. The exporter then leaves a name out, or writes the placeholder of
the burning fire block. Such a stack is not a real ingredient, so any
comparison involving it is meaningless.

The sentinel values live here on their own so they are easy to audit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .schema import FluidStack, ItemStack


# Placeholder written for items whose registry lookup failed.
PLACEHOLDER_UNLOCALIZED_NAME = "tile.fire"
PLACEHOLDER_LOCALIZED_NAME = "Fire"


def names_missing(unlocalized_name: Optional[str], localized_name: Optional[str]) -> bool:
    """True if either name is absent."""
    return unlocalized_name is None or localized_name is None


def is_item_missing(stack: "ItemStack") -> bool:
    """
    True if the item stack failed to resolve.

    Absent names, or either of the fire-block placeholders.
    """
    return (
        names_missing(stack.unlocalized_name, stack.localized_name)
        or stack.unlocalized_name == PLACEHOLDER_UNLOCALIZED_NAME
        or stack.localized_name == PLACEHOLDER_LOCALIZED_NAME
    )


def is_fluid_missing(stack: "FluidStack") -> bool:
    """True if the fluid stack lacks a name (fluids have no placeholder)."""
    return names_missing(stack.unlocalized_name, stack.localized_name)
