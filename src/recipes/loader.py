# src/recipes/loader.py
"""
Dump loader: recipe exporter JSON -> Snapshot.

Responsibility:
  - Read a dump file and decode it as JSON
  - Map it into the frozen dataclasses of recipes.schema
  - Accept current and legacy/short field names for every structure, so old
    dumps keep loading:
        amount / a, metadata / m,
        unlocalizedName / unlocalized_name / uN,
        localizedName / localized_name / lN,
        enabled / en, duration / dur, eut / EUt,
        itemInputs / item_inputs / iI   (same for fI, iO, fO),
        name / n, recipes / recs, itemOutput / item_output / o,
        oredictNames / oredict_names / dns, candidates / ims
  - Put GregTech recipe stack lists into canonical order
  - Load a before/after pair concurrently

Failures surface as DumpIOError (cannot read) or DumpFormatError (bad JSON or
shape); both carry the file path and, where possible, the JSON path of the
offending value.

Expected shape (simplified):

  {
    "sources": [
      {
        "type": "gregtech",
        "machines": [
          {
            "n": "Macerator",
            "recs": [
              {
                "en": true, "dur": 200, "eut": 2,
                "iI": [{"a": 1, "m": 0, "uN": "tile.oreCopper", "lN": "Copper Ore"}],
                "iO": [{"a": 2, "m": 2035, "uN": "gt.metaitem.01.2035", "lN": "Copper Dust"}]
              }
            ]
          }
        ]
      },
      {"type": "shaped", "recipes": [...]},
      ...
    ]
  }
"""

from __future__ import annotations

import copy
import json
import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from runtime.errors import DumpFormatError, DumpIOError

from .canonical import canonical_recipe
from .schema import (
    FluidStack,
    GregTechSource,
    GTRecipe,
    ItemStack,
    Machine,
    OreDictInput,
    OreDictStack,
    RecipeSource,
    ShapedOreDictRecipe,
    ShapedOreDictSource,
    ShapedRecipe,
    ShapedSource,
    ShapelessRecipe,
    ShapelessSource,
    Snapshot,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Field aliases (first match wins)
# ---------------------------------------------------------------------------

AMOUNT = ("amount", "a")
METADATA = ("metadata", "m")
UNLOCALIZED_NAME = ("unlocalizedName", "unlocalized_name", "uN")
LOCALIZED_NAME = ("localizedName", "localized_name", "lN")

ENABLED = ("enabled", "en")
DURATION = ("duration", "dur")
EUT = ("eut", "EUt")
ITEM_INPUTS = ("itemInputs", "item_inputs", "iI")
FLUID_INPUTS = ("fluidInputs", "fluid_inputs", "fI")
ITEM_OUTPUTS = ("itemOutputs", "item_outputs", "iO")
FLUID_OUTPUTS = ("fluidOutputs", "fluid_outputs", "fO")

MACHINE_NAME = ("name", "n")
MACHINE_RECIPES = ("recipes", "recs")

ITEM_OUTPUT = ("itemOutput", "item_output", "o")
OREDICT_NAMES = ("oredictNames", "oredict_names", "dns")
CANDIDATES = ("candidates", "ims")


# normalized "type" tag -> source kind
SOURCE_TYPES = {
    "gregtech": "gregtech",
    "shaped": "shaped",
    "shapeless": "shapeless",
    "shapedoredict": "shapedOreDict",
}


def normalize_source_type(tag: str) -> Optional[str]:
    """
    Map a dump "type" tag to its canonical source kind.

    Case and "_" are ignored: "GregTech", "shaped_oredict" and
    "ShapedOredict" are all accepted. Returns None for unknown tags.
    """
    return SOURCE_TYPES.get(tag.replace("_", "").lower())


_MISSING = object()


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class DumpParser:
    """
    Converts an already-decoded dump object into a Snapshot.

    Keeps the dump path around so every DumpFormatError names the file.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path

    # ------------------------------------------------------------------
    # Primitive helpers
    # ------------------------------------------------------------------

    def _fail(self, message: str, location: str) -> DumpFormatError:
        return DumpFormatError(message, path=self.path, location=location)

    def _mapping(self, raw: Any, location: str) -> Dict[str, Any]:
        if not isinstance(raw, dict):
            raise self._fail(f"expected an object, got {type(raw).__name__}", location)
        return raw

    def _list(self, raw: Any, location: str) -> List[Any]:
        if not isinstance(raw, list):
            raise self._fail(f"expected an array, got {type(raw).__name__}", location)
        return raw

    def _pick(self, raw: Dict[str, Any], names: Sequence[str]) -> Tuple[str, Any]:
        """Return (matched name, value) for the first alias present in raw."""
        for name in names:
            if name in raw:
                return name, raw[name]
        return names[0], _MISSING

    def _int(self, raw: Dict[str, Any], names: Sequence[str], location: str) -> int:
        name, value = self._pick(raw, names)
        where = f"{location}.{name}"
        if value is _MISSING:
            raise self._fail(f"missing required field (one of {', '.join(names)})", where)
        # JSON booleans decode to bool, which is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            raise self._fail(f"expected an integer, got {value!r}", where)
        return value

    def _bool(self, raw: Dict[str, Any], names: Sequence[str], location: str) -> bool:
        name, value = self._pick(raw, names)
        where = f"{location}.{name}"
        if value is _MISSING:
            raise self._fail(f"missing required field (one of {', '.join(names)})", where)
        if not isinstance(value, bool):
            raise self._fail(f"expected a boolean, got {value!r}", where)
        return value

    def _opt_str(self, raw: Dict[str, Any], names: Sequence[str], location: str) -> Optional[str]:
        name, value = self._pick(raw, names)
        if value is _MISSING or value is None:
            return None
        if not isinstance(value, str):
            raise self._fail(f"expected a string, got {value!r}", f"{location}.{name}")
        return value

    def _str(self, raw: Dict[str, Any], names: Sequence[str], location: str) -> str:
        name, value = self._pick(raw, names)
        where = f"{location}.{name}"
        if value is _MISSING:
            raise self._fail(f"missing required field (one of {', '.join(names)})", where)
        if not isinstance(value, str):
            raise self._fail(f"expected a string, got {value!r}", where)
        return value

    def _items_of(
        self,
        raw: Dict[str, Any],
        names: Sequence[str],
        location: str,
        parse: Callable[[Any, str], Any],
    ) -> List[Any]:
        """Parse an optional list field element by element; absent or null -> []."""
        name, value = self._pick(raw, names)
        if value is _MISSING or value is None:
            return []
        where = f"{location}.{name}"
        return [parse(v, f"{where}[{i}]") for i, v in enumerate(self._list(value, where))]

    # ------------------------------------------------------------------
    # Stacks
    # ------------------------------------------------------------------

    def item_stack(self, raw: Any, location: str) -> ItemStack:
        data = self._mapping(raw, location)
        return ItemStack(
            amount=self._int(data, AMOUNT, location),
            metadata=self._int(data, METADATA, location),
            unlocalized_name=self._opt_str(data, UNLOCALIZED_NAME, location),
            localized_name=self._opt_str(data, LOCALIZED_NAME, location),
        )

    def optional_item_stack(self, raw: Any, location: str) -> Optional[ItemStack]:
        if raw is None:
            return None
        return self.item_stack(raw, location)

    def fluid_stack(self, raw: Any, location: str) -> FluidStack:
        data = self._mapping(raw, location)
        return FluidStack(
            amount=self._int(data, AMOUNT, location),
            unlocalized_name=self._opt_str(data, UNLOCALIZED_NAME, location),
            localized_name=self._opt_str(data, LOCALIZED_NAME, location),
        )

    # ------------------------------------------------------------------
    # GregTech
    # ------------------------------------------------------------------

    def gt_recipe(self, raw: Any, location: str) -> GTRecipe:
        data = self._mapping(raw, location)
        recipe = GTRecipe(
            enabled=self._bool(data, ENABLED, location),
            duration=self._int(data, DURATION, location),
            eut=self._int(data, EUT, location),
            item_inputs=tuple(self._items_of(data, ITEM_INPUTS, location, self.item_stack)),
            fluid_inputs=tuple(self._items_of(data, FLUID_INPUTS, location, self.fluid_stack)),
            item_outputs=tuple(self._items_of(data, ITEM_OUTPUTS, location, self.item_stack)),
            fluid_outputs=tuple(self._items_of(data, FLUID_OUTPUTS, location, self.fluid_stack)),
        )
        return canonical_recipe(recipe)

    def machine(self, raw: Any, location: str) -> Machine:
        data = self._mapping(raw, location)
        return Machine(
            name=self._str(data, MACHINE_NAME, location),
            recipes=tuple(self._items_of(data, MACHINE_RECIPES, location, self.gt_recipe)),
        )

    # ------------------------------------------------------------------
    # Crafting sources (pass-through)
    # ------------------------------------------------------------------

    def _item_output(self, data: Dict[str, Any], location: str) -> ItemStack:
        name, value = self._pick(data, ITEM_OUTPUT)
        where = f"{location}.{name}"
        if value is _MISSING:
            raise self._fail(f"missing required field (one of {', '.join(ITEM_OUTPUT)})", where)
        return self.item_stack(value, where)

    def shaped_recipe(self, raw: Any, location: str) -> ShapedRecipe:
        data = self._mapping(raw, location)
        return ShapedRecipe(
            item_inputs=tuple(self._items_of(data, ITEM_INPUTS, location, self.optional_item_stack)),
            item_output=self._item_output(data, location),
        )

    def shapeless_recipe(self, raw: Any, location: str) -> ShapelessRecipe:
        data = self._mapping(raw, location)
        return ShapelessRecipe(
            item_inputs=frozenset(self._items_of(data, ITEM_INPUTS, location, self.item_stack)),
            item_output=self._item_output(data, location),
        )

    def oredict_input(self, raw: Any, location: str) -> Optional[OreDictInput]:
        if raw is None:
            return None
        data = self._mapping(raw, location)

        # Ore dictionary slots carry names + candidates; anything else is a plain stack.
        if any(k in data for k in OREDICT_NAMES + CANDIDATES):
            names = self._items_of(data, OREDICT_NAMES, location, self._name_entry)
            candidates = self._items_of(data, CANDIDATES, location, self.item_stack)
            return OreDictInput(
                oredict=OreDictStack(
                    oredict_names=frozenset(names),
                    candidates=frozenset(candidates),
                )
            )
        return OreDictInput(stack=self.item_stack(data, location))

    def _name_entry(self, raw: Any, location: str) -> str:
        if not isinstance(raw, str):
            raise self._fail(f"expected a string, got {raw!r}", location)
        return raw

    def shaped_oredict_recipe(self, raw: Any, location: str) -> ShapedOreDictRecipe:
        data = self._mapping(raw, location)
        return ShapedOreDictRecipe(
            item_inputs=tuple(self._items_of(data, ITEM_INPUTS, location, self.oredict_input)),
            item_output=self._item_output(data, location),
        )

    # ------------------------------------------------------------------
    # Sources / root
    # ------------------------------------------------------------------

    def source(self, raw: Any, location: str) -> RecipeSource:
        data = self._mapping(raw, location)

        tag = data.get("type")
        if not isinstance(tag, str):
            raise self._fail("recipe source needs a string 'type' tag", f"{location}.type")
        kind = normalize_source_type(tag)

        if kind == "gregtech":
            machines = self._items_of(data, ("machines",), location, self.machine)
            return GregTechSource(machines=tuple(machines))
        if kind == "shaped":
            return ShapedSource(
                recipes=tuple(self._items_of(data, ("recipes",), location, self.shaped_recipe))
            )
        if kind == "shapeless":
            return ShapelessSource(
                recipes=tuple(self._items_of(data, ("recipes",), location, self.shapeless_recipe))
            )
        if kind == "shapedOreDict":
            return ShapedOreDictSource(
                recipes=tuple(
                    self._items_of(data, ("recipes",), location, self.shaped_oredict_recipe)
                )
            )
        raise self._fail(f"unknown recipe source type {tag!r}", f"{location}.type")

    def snapshot(self, raw: Any) -> Snapshot:
        data = self._mapping(raw, "$")
        if "sources" not in data:
            raise self._fail("missing required field 'sources'", "$")
        sources = [
            self.source(s, f"sources[{i}]")
            for i, s in enumerate(self._list(data["sources"], "sources"))
        ]
        return Snapshot(sources=tuple(sources), path=self.path)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_snapshot(data: Any, path: Optional[Path] = None) -> Snapshot:
    """Build a Snapshot from an already-decoded dump object."""
    return DumpParser(path).snapshot(data)


def load_snapshot(path: Path) -> Snapshot:
    """
    Read and parse one dump file.

    Raises DumpIOError if the file cannot be read, DumpFormatError if it is
    not valid JSON or not a valid dump.
    """
    path = Path(path)

    logger.info("reading %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise DumpFormatError(f"not valid UTF-8: {exc}", path=path) from exc
    except OSError as exc:
        raise DumpIOError(f"cannot read dump: {exc.strerror or exc}", path=path) from exc
    logger.info("finished reading %s", path)

    logger.info("loading %s", path)
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DumpFormatError(
            f"invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            path=path,
        ) from exc

    snapshot = parse_snapshot(raw, path=path)
    logger.info("finished loading %s (%s)", path, snapshot.source_counts())
    return snapshot


def load_snapshot_pair(
    before_path: Path,
    after_path: Optional[Path],
    parallel: bool = True,
) -> Tuple[Snapshot, Snapshot]:
    """
    Load the before and after dumps.

    - after_path None: self-diff mode, after is a deep copy of before so the
      two sides never share objects.
    - parallel: read both files on a two-worker thread pool and wait for both
      before returning. The first failure is re-raised.
    """
    if after_path is None:
        before = load_snapshot(before_path)
        return before, copy.deepcopy(before)

    if not parallel:
        return load_snapshot(before_path), load_snapshot(after_path)

    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="dump-loader") as pool:
        before_future = pool.submit(load_snapshot, before_path)
        after_future = pool.submit(load_snapshot, after_path)
        done, _ = wait([before_future, after_future], return_when=FIRST_EXCEPTION)

        for future in (before_future, after_future):
            if future in done and future.exception() is not None:
                raise future.exception()

        return before_future.result(), after_future.result()


__all__ = [
    "DumpParser",
    "normalize_source_type",
    "parse_snapshot",
    "load_snapshot",
    "load_snapshot_pair",
]
