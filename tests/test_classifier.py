# tests/test_classifier.py
"""
Classifier tests.

Covers every branch of the per-key decision procedure, the Same/Diff record
representation, machine handling and the self-diff property.
"""

from __future__ import annotations

import copy

import pytest

from analysis.classifier import (
    DiffRecord,
    SameRecord,
    analyze,
    classify_key,
    classify_machine,
    make_record,
)
from analysis.status import RecipeStatus
from recipes.canonical import canonical_recipe, recipe_key, sorted_recipes
from recipes.index import build_recipe_index
from recipes.schema import FluidStack, GTRecipe, ItemStack, Machine


ORE = ItemStack(1, 0, "tile.oreCopper", "Copper Ore")
GEM = ItemStack(1, 0, "gem.copper", "Copper Gem")
DUST2 = ItemStack(2, 2035, "gt.metaitem.01.2035", "Copper Dust")
DUST1 = ItemStack(1, 2035, "gt.metaitem.01.2035", "Copper Dust")
SMALL = ItemStack(1, 1035, "gt.metaitem.01.1035", "Small Pile of Copper Dust")
WATER = FluidStack(100, "water", "Water")
UNNAMED_DUST = ItemStack(2, 2035, "gt.metaitem.01.2035", None)


def _recipe(inputs, outputs, duration=200, eut=16, enabled=True, fluid_in=(), fluid_out=()):
    return canonical_recipe(
        GTRecipe(
            enabled=enabled,
            duration=duration,
            eut=eut,
            item_inputs=tuple(inputs),
            fluid_inputs=tuple(fluid_in),
            item_outputs=tuple(outputs),
            fluid_outputs=tuple(fluid_out),
        )
    )


def _index(*recipes):
    return build_recipe_index(Machine("Macerator", tuple(recipes)))


R1 = _recipe([ORE], [DUST2])
R1_ALT = _recipe([ORE], [DUST1])
R2 = _recipe([GEM], [DUST1])


def _only(result):
    """Single (status, records) pair of the single machine."""
    assert list(result) == ["Macerator"]
    statuses = result["Macerator"]
    assert len(statuses) == 1
    return next(iter(statuses.items()))


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

def test_new_key_is_added_and_unchanged_key_is_silent():
    result = analyze({"Macerator": _index(R1)}, {"Macerator": _index(R1, R2)})

    status, records = _only(result)
    assert status is RecipeStatus.ADDED
    assert records == [DiffRecord(before=(), after=(R2,))]


def test_second_recipe_on_existing_key_creates_conflict():
    result = analyze({"Macerator": _index(R1)}, {"Macerator": _index(R1, R1_ALT)})

    status, records = _only(result)
    assert status is RecipeStatus.CONFLICT_CREATED
    assert records == [DiffRecord(before=(R1,), after=sorted_recipes([R1, R1_ALT]))]


def test_new_key_with_two_recipes_is_conflict_created():
    result = analyze({"Macerator": _index()}, {"Macerator": _index(R1, R1_ALT)})
    status, _ = _only(result)
    assert status is RecipeStatus.CONFLICT_CREATED


def test_key_gone_after_is_removed():
    result = analyze({"Macerator": _index(R1, R2)}, {"Macerator": _index(R2)})

    status, records = _only(result)
    assert status is RecipeStatus.REMOVED
    assert records == [DiffRecord(before=(R1,), after=())]


def test_conflict_removed():
    result = analyze({"Macerator": _index(R1, R1_ALT)}, {"Macerator": _index(R1)})
    status, _ = _only(result)
    assert status is RecipeStatus.CONFLICT_REMOVED


def test_identical_multi_registration_is_duplicate():
    result = analyze({"Macerator": _index(R1, R1)}, {"Macerator": _index(R1, R1)})

    status, records = _only(result)
    assert status is RecipeStatus.DUPLICATE_REGISTRATION
    assert records == [SameRecord(recipes=(R1, R1))]


def test_conflict_on_both_sides_is_conflicting_even_if_some_pairs_match():
    before = _index(R1, R1, R1_ALT)
    after = _index(R1, R1)

    result = analyze({"Macerator": before}, {"Macerator": after})

    status, records = _only(result)
    assert status is RecipeStatus.CONFLICTING
    assert isinstance(records[0], DiffRecord)


def test_outputs_changed():
    result = analyze({"Macerator": _index(R1)}, {"Macerator": _index(R1_ALT)})

    status, records = _only(result)
    assert status is RecipeStatus.OUTPUTS_CHANGED
    assert records == [DiffRecord(before=(R1,), after=(R1_ALT,))]


def test_fluid_outputs_count_as_outputs():
    before = _recipe([ORE], [DUST2], fluid_out=[WATER])
    after = _recipe([ORE], [DUST2])
    assert classify_key(recipe_key(before), [before], [after]) is RecipeStatus.OUTPUTS_CHANGED


def test_output_order_does_not_matter():
    before = _recipe([ORE], [DUST2, SMALL])
    after = _recipe([ORE], [SMALL, DUST2])
    assert classify_key(recipe_key(before), [before], [after]) is None


@pytest.mark.parametrize(
    "changes",
    [{"duration": 100}, {"eut": 30}, {"enabled": False}],
)
def test_stats_changed(changes):
    after = _recipe([ORE], [DUST2], **changes)
    result = analyze({"Macerator": _index(R1)}, {"Macerator": _index(after)})

    status, _ = _only(result)
    assert status is RecipeStatus.STATS_CHANGED


def test_outputs_take_priority_over_stats():
    after = _recipe([ORE], [DUST1], duration=1)
    assert classify_key(recipe_key(R1), [R1], [after]) is RecipeStatus.OUTPUTS_CHANGED


def test_unchanged_key_emits_nothing():
    assert analyze({"Macerator": _index(R1)}, {"Macerator": _index(R1)}) == {}


# ---------------------------------------------------------------------------
# Missing stacks
# ---------------------------------------------------------------------------

def test_missing_input_wins_over_everything():
    broken = ItemStack(1, 0, "tile.fire", "Fire")
    recipe = _recipe([broken], [DUST2])

    # unchanged, added and removed all report MissingInput
    key = recipe_key(recipe)
    assert classify_key(key, [recipe], [recipe]) is RecipeStatus.MISSING_INPUT
    assert classify_key(key, None, [recipe]) is RecipeStatus.MISSING_INPUT
    assert classify_key(key, [recipe], None) is RecipeStatus.MISSING_INPUT


def test_missing_output_created_when_before_was_clean():
    after = _recipe([ORE], [UNNAMED_DUST])
    result = analyze({"Macerator": _index(R1)}, {"Macerator": _index(after)})

    status, records = _only(result)
    assert status is RecipeStatus.MISSING_OUTPUT_CREATED
    assert records == [DiffRecord(before=(R1,), after=(after,))]


def test_missing_output_when_before_was_missing_too():
    broken = _recipe([ORE], [UNNAMED_DUST])
    result = analyze({"Macerator": _index(broken)}, {"Macerator": _index(broken)})

    status, records = _only(result)
    assert status is RecipeStatus.MISSING_OUTPUT
    assert records == [SameRecord(recipes=(broken,))]


def test_missing_output_hides_conflict():
    broken = _recipe([ORE], [UNNAMED_DUST])
    result = analyze({"Macerator": _index(R1)}, {"Macerator": _index(R1, broken)})

    status, _ = _only(result)
    assert status is RecipeStatus.MISSING_OUTPUT_CREATED


def test_fixed_missing_output_is_outputs_changed():
    broken = _recipe([ORE], [UNNAMED_DUST])
    assert classify_key(recipe_key(R1), [broken], [R1]) is RecipeStatus.OUTPUTS_CHANGED


def test_new_key_with_missing_output_is_missing_output_created():
    broken = _recipe([GEM], [UNNAMED_DUST])
    assert classify_key(recipe_key(broken), None, [broken]) is RecipeStatus.MISSING_OUTPUT_CREATED


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def test_make_record_same_vs_diff():
    assert make_record([R1, R2], [R2, R1]) == SameRecord(recipes=sorted_recipes([R1, R2]))
    assert make_record(None, [R1]) == DiffRecord(before=(), after=(R1,))


def test_records_within_a_status_are_sorted():
    fast = _recipe([GEM], [DUST1], duration=10)
    slow = _recipe([SMALL], [DUST1], duration=900)

    statuses = classify_machine({}, _index(slow, fast))

    assert list(statuses) == [RecipeStatus.ADDED]
    assert statuses[RecipeStatus.ADDED] == [
        DiffRecord(before=(), after=(fast,)),
        DiffRecord(before=(), after=(slow,)),
    ]


def test_statuses_come_back_in_enum_order():
    before = _index(R1, R2)
    new = _recipe([SMALL], [DUST1])
    after = _index(R1_ALT, new)

    statuses = classify_machine(before, after)

    assert list(statuses) == [
        RecipeStatus.ADDED,
        RecipeStatus.REMOVED,
        RecipeStatus.OUTPUTS_CHANGED,
    ]


# ---------------------------------------------------------------------------
# Machines
# ---------------------------------------------------------------------------

def test_machine_only_in_after_is_compared_against_nothing():
    result = analyze({}, {"Extractor": _index(R2)})
    assert list(result["Extractor"]) == [RecipeStatus.ADDED]


def test_machine_only_in_before_is_skipped_by_default():
    assert analyze({"Macerator": _index(R1)}, {}) == {}


def test_machine_only_in_before_can_be_reported():
    result = analyze({"Macerator": _index(R1)}, {}, include_removed_machines=True)
    assert result["Macerator"] == {RecipeStatus.REMOVED: [DiffRecord(before=(R1,), after=())]}


def test_machine_names_are_sorted():
    result = analyze({}, {"Mixer": _index(R2), "Assembler": _index(R1)})
    assert list(result) == ["Assembler", "Mixer"]


# ---------------------------------------------------------------------------
# Self-diff property
# ---------------------------------------------------------------------------

SELF_DIFF_ALLOWED = {
    RecipeStatus.MISSING_INPUT,
    RecipeStatus.MISSING_OUTPUT,
    RecipeStatus.CONFLICTING,
    RecipeStatus.DUPLICATE_REGISTRATION,
}


def test_self_diff_only_reports_conflicts_and_missing():
    broken_in = _recipe([ItemStack(1, 0, None, "Ghost")], [DUST1])
    broken_out = _recipe([SMALL], [UNNAMED_DUST])
    index = {
        "Macerator": _index(R1, R1_ALT, R2, R2, broken_in, broken_out),
        "Mixer": _index(_recipe([GEM, ORE], [DUST2], fluid_in=[WATER])),
    }

    result = analyze(index, copy.deepcopy(index))

    seen = {status for statuses in result.values() for status in statuses}
    assert seen == SELF_DIFF_ALLOWED
    assert "Mixer" not in result
