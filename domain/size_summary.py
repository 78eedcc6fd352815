# domain/size_summary.py
"""
Size summary: turns raw order line items into a design x size quantity table.

Shared by the size summary page, the size summary export and the full orders
export so the three always agree. Combo designs are split into their
components and never get a row of their own.
"""

from typing import Dict, Iterable, List, Sequence

from domain.combo_registry import ComboRegistry, expand_combo_items
from domain.models import ALL_SIZES, DesignInfo, OrderLineItem, SizeSummaryRow


def aggregate_sizes(
        items: Iterable[OrderLineItem],
        designs: Iterable[DesignInfo],
        registry: ComboRegistry,
        sizes: Sequence[str] = ALL_SIZES,
) -> List[SizeSummaryRow]:
    """
    Build one SizeSummaryRow per non-combo design in `designs`.

    `designs` may be any objects with `id` and `name` (DesignInfo, ShirtDesign).

    Unknown designs, unknown sizes and components missing from the catalog
    are dropped without error: the report has to render over stale data.
    """
    recognised = set(sizes)

    accumulator: Dict[str, Dict[str, int]] = {}
    names: Dict[str, str] = {}
    for design in designs:
        accumulator[design.id] = {size: 0 for size in sizes}
        names[design.id] = design.name

    for item in expand_combo_items(items, registry):
        if item.size not in recognised:
            continue

        counts = accumulator.get(item.design)
        if counts is not None:
            counts[item.size] += item.quantity

    # combos only show up through their components
    return [
        SizeSummaryRow(design_id=design_id, design_name=names[design_id], counts=counts)
        for design_id, counts in accumulator.items()
        if not registry.has(design_id)
    ]


def row_total(row: SizeSummaryRow) -> int:
    return sum(row.counts.values())


def calculate_size_totals(
        rows: Iterable[SizeSummaryRow],
        sizes: Sequence[str] = ALL_SIZES,
) -> Dict[str, int]:
    """
    Column totals for every size in `sizes`, in that order.
    """
    totals = {size: 0 for size in sizes}
    for row in rows:
        for size in sizes:
            totals[size] += row.counts.get(size, 0)
    return totals


def calculate_grand_total(
        rows: Iterable[SizeSummaryRow],
        sizes: Sequence[str] = ALL_SIZES,
) -> int:
    return sum(calculate_size_totals(rows, sizes).values())
