import pytest

from domain.combo_registry import ComboRegistry
from domain.models import ALL_SIZES, ComboComponent, DesignInfo, OrderLineItem
from domain.size_summary import aggregate_sizes, calculate_grand_total, calculate_size_totals, row_total

CATALOG = [DesignInfo("1", "Tiger Classic"), DesignInfo("2", "Tiger Stripe"), DesignInfo("3", "Meeting Combo")]


@pytest.fixture
def registry():
    return ComboRegistry({"3": [ComboComponent("1", 1), ComboComponent("2", 1)]})


def by_id(rows):
    return {row.design_id: row for row in rows}


def test_combo_is_split_into_components_and_has_no_row(registry):
    items = [OrderLineItem("1", "L", 1), OrderLineItem("3", "L", 2)]

    rows = by_id(aggregate_sizes(items, CATALOG, registry))

    assert set(rows) == {"1", "2"}
    assert rows["1"].counts["L"] == 3
    assert rows["2"].counts["L"] == 2


def test_multiplier_scales_component_quantity():
    registry = ComboRegistry({"3": [ComboComponent("1", 3)]})

    rows = by_id(aggregate_sizes([OrderLineItem("3", "M", 2)], CATALOG, registry))

    assert rows["1"].counts["M"] == 6


def test_every_non_combo_design_gets_a_zeroed_row(registry):
    rows = aggregate_sizes([], CATALOG, registry)

    assert [row.design_id for row in rows] == ["1", "2"]
    for row in rows:
        assert list(row.counts) == list(ALL_SIZES)
        assert row_total(row) == 0


def test_rows_follow_catalog_order(registry):
    catalog = [DesignInfo("2", "Tiger Stripe"), DesignInfo("1", "Tiger Classic")]

    rows = aggregate_sizes([OrderLineItem("1", "S", 1)], catalog, registry)

    assert [row.design_id for row in rows] == ["2", "1"]


def test_unknown_size_and_unknown_design_are_skipped(registry):
    items = [
        OrderLineItem("1", "XXS", 5),
        OrderLineItem("99", "M", 5),
        OrderLineItem("1", "M", 1),
    ]

    rows = by_id(aggregate_sizes(items, CATALOG, registry))

    assert row_total(rows["1"]) == 1
    assert row_total(rows["2"]) == 0


def test_component_missing_from_catalog_is_dropped():
    registry = ComboRegistry({"3": [ComboComponent("1", 1), ComboComponent("42", 2)]})

    rows = by_id(aggregate_sizes([OrderLineItem("3", "S", 1)], CATALOG, registry))

    assert rows["1"].counts["S"] == 1
    assert "42" not in rows


def test_restricted_size_set_only_counts_those_sizes(registry):
    sizes = ("S", "M", "L")
    items = [OrderLineItem("1", "M", 2), OrderLineItem("1", "XL", 4)]

    rows = by_id(aggregate_sizes(items, CATALOG, registry, sizes))

    assert rows["1"].counts == {"S": 0, "M": 2, "L": 0}


def test_combo_without_components_counts_as_regular_design():
    rows = by_id(aggregate_sizes([OrderLineItem("3", "L", 2)], CATALOG, ComboRegistry({"3": []})))

    assert rows["3"].counts["L"] == 2


def test_size_totals_and_grand_total(registry):
    items = [OrderLineItem("1", "S", 2), OrderLineItem("3", "L", 1), OrderLineItem("2", "S", 1)]
    rows = aggregate_sizes(items, CATALOG, registry)

    totals = calculate_size_totals(rows)

    assert list(totals) == list(ALL_SIZES)
    assert totals["S"] == 3
    assert totals["L"] == 2
    assert calculate_grand_total(rows) == 5
