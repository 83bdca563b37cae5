# Snapshot, Machine, GTRecipe and stack types
# src/recipes/schema.py

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple, Union

from .missing import is_fluid_missing, is_item_missing
from runtime.errors import MissingSourceError


# ---------------------------------------------------------------------------
# Stacks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ItemStack:
    """
    One item stack as dumped by the recipe exporter.

    - amount: stack size
    - metadata: item damage / sub-type ("gt.metaitem.01" meta 2035 = copper dust)
    - unlocalized_name: registry identifier, None when it failed to resolve
    - localized_name: display name, None when it failed to resolve
    """
    amount: int
    metadata: int
    unlocalized_name: Optional[str] = None
    localized_name: Optional[str] = None

    def is_missing(self) -> bool:
        return is_item_missing(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "metadata": self.metadata,
            "unlocalizedName": self.unlocalized_name,
            "localizedName": self.localized_name,
        }


@dataclass(frozen=True)
class FluidStack:
    """One fluid stack (amount in mB); fluids carry no metadata."""
    amount: int
    unlocalized_name: Optional[str] = None
    localized_name: Optional[str] = None

    def is_missing(self) -> bool:
        return is_fluid_missing(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "unlocalizedName": self.unlocalized_name,
            "localizedName": self.localized_name,
        }


# ---------------------------------------------------------------------------
# GregTech machine recipes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GTRecipe:
    """
    A single GregTech machine recipe.

    Stack tuples are stored in canonical (sorted) order by the loader, so two
    recipes that only differ by dump order compare equal.
    """
    enabled: bool
    duration: int
    eut: int
    item_inputs: Tuple[ItemStack, ...] = ()
    fluid_inputs: Tuple[FluidStack, ...] = ()
    item_outputs: Tuple[ItemStack, ...] = ()
    fluid_outputs: Tuple[FluidStack, ...] = ()

    def has_missing(self) -> bool:
        """True if any input or output stack is Missing."""
        return (
            any(s.is_missing() for s in self.item_inputs)
            or any(s.is_missing() for s in self.fluid_inputs)
            or any(s.is_missing() for s in self.item_outputs)
            or any(s.is_missing() for s in self.fluid_outputs)
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "enabled": self.enabled,
            "duration": self.duration,
            "eut": self.eut,
        }
        # Empty stack lists are left out to keep reports readable.
        for key, stacks in (
            ("itemInputs", self.item_inputs),
            ("fluidInputs", self.fluid_inputs),
            ("itemOutputs", self.item_outputs),
            ("fluidOutputs", self.fluid_outputs),
        ):
            if stacks:
                data[key] = [s.to_dict() for s in stacks]
        return data


@dataclass(frozen=True)
class Machine:
    """A GregTech recipe map ("Macerator", "Assembler", ...) and its recipes."""
    name: str
    recipes: Tuple[GTRecipe, ...] = ()


# ---------------------------------------------------------------------------
# Crafting-table recipes (parsed, never analyzed)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ShapedRecipe:
    """Crafting grid recipe; empty grid slots are None."""
    item_inputs: Tuple[Optional[ItemStack], ...]
    item_output: ItemStack


@dataclass(frozen=True)
class ShapelessRecipe:
    item_inputs: FrozenSet[ItemStack]
    item_output: ItemStack


@dataclass(frozen=True)
class OreDictStack:
    """An ore dictionary slot: any of `candidates`, registered under `oredict_names`."""
    oredict_names: FrozenSet[str]
    candidates: FrozenSet[ItemStack]


@dataclass(frozen=True)
class OreDictInput:
    """A shaped ore-dict slot holds either an ore dictionary entry or a plain stack."""
    oredict: Optional[OreDictStack] = None
    stack: Optional[ItemStack] = None


@dataclass(frozen=True)
class ShapedOreDictRecipe:
    item_inputs: Tuple[Optional[OreDictInput], ...]
    item_output: ItemStack


# ---------------------------------------------------------------------------
# Recipe sources
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GregTechSource:
    machines: Tuple[Machine, ...] = ()


@dataclass(frozen=True)
class ShapedSource:
    recipes: Tuple[ShapedRecipe, ...] = ()


@dataclass(frozen=True)
class ShapelessSource:
    recipes: Tuple[ShapelessRecipe, ...] = ()


@dataclass(frozen=True)
class ShapedOreDictSource:
    recipes: Tuple[ShapedOreDictRecipe, ...] = ()


RecipeSource = Union[GregTechSource, ShapedSource, ShapelessSource, ShapedOreDictSource]


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Snapshot:
    """
    One full recipe dump.

    - sources: every recipe source in dump order
    - path: file the snapshot was read from (None for in-memory snapshots)
    """
    sources: Tuple[RecipeSource, ...] = ()
    path: Optional[Path] = field(default=None, compare=False)

    def gregtech_machines(self) -> Tuple[Machine, ...]:
        """
        Machines of the first GregTech source.

        Raises MissingSourceError if the dump has no GregTech source.
        """
        for source in self.sources:
            if isinstance(source, GregTechSource):
                return source.machines
        raise MissingSourceError(self.path)

    def source_counts(self) -> Dict[str, int]:
        """Number of sources per kind, for logging."""
        counts: Dict[str, int] = {}
        for source in self.sources:
            name = type(source).__name__
            counts[name] = counts.get(name, 0) + 1
        return counts
