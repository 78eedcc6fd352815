# domain/summary_statistics.py

from dataclasses import dataclass
from typing import Dict, List, Sequence

from domain.models import ALL_SIZES, SizeSummaryRow
from domain.size_summary import calculate_grand_total, calculate_size_totals, row_total


def most_popular_design(rows: Sequence[SizeSummaryRow]) -> str:
    """
    Name of the design with the highest total, or "" when nothing was ordered.

    A later row only wins with a strictly larger total, so ties go to the
    first row.
    """
    best_name = ""
    best_total = 0
    for row in rows:
        total = row_total(row)
        if total > best_total:
            best_total = total
            best_name = row.design_name
    return best_name


def most_popular_size(rows: Sequence[SizeSummaryRow], sizes: Sequence[str] = ALL_SIZES) -> str:
    best_size = ""
    best_count = 0
    for size, count in calculate_size_totals(rows, sizes).items():
        if count > best_count:
            best_count = count
            best_size = size
    return best_size


@dataclass
class SummaryStatistics:
    size_totals: Dict[str, int]
    grand_total: int
    most_popular_design: str
    most_popular_size: str
    row_totals: List[int]


def summarize(rows: Sequence[SizeSummaryRow], sizes: Sequence[str] = ALL_SIZES) -> SummaryStatistics:
    return SummaryStatistics(
        size_totals=calculate_size_totals(rows, sizes),
        grand_total=calculate_grand_total(rows, sizes),
        most_popular_design=most_popular_design(rows),
        most_popular_size=most_popular_size(rows, sizes),
        row_totals=[row_total(row) for row in rows],
    )
