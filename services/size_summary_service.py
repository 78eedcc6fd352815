# services/size_summary_service.py

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from domain.combo_registry import ComboRegistry
from domain.models import ALL_SIZES, ORDER_STATUSES, DesignInfo, Order, OrderLineItem, SizeSummaryRow
from domain.size_summary import aggregate_sizes, row_total
from domain.summary_statistics import SummaryStatistics, summarize
from services.combo_service import load_combo_registry
from services.design_service import list_design_infos
from services.order_service import fetch_order_items, fetch_orders, filter_items_by_status

SORT_BY_NAME = "name"
SORT_BY_TOTAL = "total"

# cancelled orders are left out of production counts unless asked for
DEFAULT_REPORT_STATUSES = tuple(s for s in ORDER_STATUSES if s != "cancelled")


@dataclass
class ReportData:
    """Everything the size reports are computed from, read in one go."""
    orders: List[Order]
    items: List[OrderLineItem]
    designs: List[DesignInfo]
    registry: ComboRegistry


@dataclass
class SizeSummaryReport:
    rows: List[SizeSummaryRow]
    statistics: SummaryStatistics
    sizes: Sequence[str]


def load_report_data(db) -> ReportData:
    """
    Raises StorageError if orders, items or designs cannot be read. A failed
    combo read only degrades to an empty registry.
    """
    return ReportData(
        orders=fetch_orders(db),
        items=fetch_order_items(db),
        designs=list_design_infos(db),
        registry=load_combo_registry(db),
    )


def summarize_report_data(
        data: ReportData,
        statuses: Optional[Iterable[str]] = DEFAULT_REPORT_STATUSES,
        sizes: Sequence[str] = ALL_SIZES,
) -> SizeSummaryReport:
    items = filter_items_by_status(data.items, data.orders, statuses)
    rows = aggregate_sizes(items, data.designs, data.registry, sizes)
    return SizeSummaryReport(rows=rows, statistics=summarize(rows, sizes), sizes=sizes)


def build_size_summary(
        db,
        statuses: Optional[Iterable[str]] = DEFAULT_REPORT_STATUSES,
        sizes: Sequence[str] = ALL_SIZES,
) -> SizeSummaryReport:
    return summarize_report_data(load_report_data(db), statuses, sizes)


def sort_summary(rows: Sequence[SizeSummaryRow], sort_by: str = SORT_BY_NAME) -> List[SizeSummaryRow]:
    """
    "name": by design name, ignoring case. "total": largest total first,
    catalog order kept between equal totals.
    """
    if sort_by == SORT_BY_TOTAL:
        return sorted(rows, key=row_total, reverse=True)
    return sorted(rows, key=lambda row: row.design_name.casefold())
