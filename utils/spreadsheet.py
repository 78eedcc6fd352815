# utils/spreadsheet.py

from io import BytesIO
from typing import Dict, Iterable, List, Mapping, Sequence

import pandas as pd

from domain.models import ALL_SIZES, UNKNOWN_DESIGN_NAME, Order, OrderLineItem, SizeSummaryRow, status_label
from domain.size_summary import calculate_size_totals

DESIGN_COLUMN = "แบบเสื้อ"
TOTAL_LABEL = "รวมทั้งหมด"
SIZE_SHEET = "ขนาดเสื้อ"
ORDERS_SHEET = "รายการออเดอร์"
ITEMS_SHEET = "รายการสินค้า"


def summary_to_dataframe(
        rows: Sequence[SizeSummaryRow],
        sizes: Sequence[str] = ALL_SIZES,
        include_total_row: bool = True,
) -> pd.DataFrame:
    """
    Design name column followed by one column per size, canonical order.
    """
    columns = [DESIGN_COLUMN, *sizes]
    records = [{DESIGN_COLUMN: row.design_name, **{s: row.counts.get(s, 0) for s in sizes}} for row in rows]

    if include_total_row:
        totals = calculate_size_totals(rows, sizes)
        records.append({DESIGN_COLUMN: TOTAL_LABEL, **totals})

    return pd.DataFrame(records, columns=columns)


def orders_to_dataframe(orders: Iterable[Order]) -> pd.DataFrame:
    records = [
        {
            "รหัสออเดอร์": order.id,
            "ชื่อผู้สั่ง": order.name,
            "เบอร์โทรศัพท์": order.phone or "-",
            "ที่อยู่": "รับหน้างาน" if order.is_pickup else order.address,
            "ยอดรวม": order.total_price,
            "ค่าจัดส่ง": order.shipping_cost,
            "สถานะ": status_label(order.status),
            "วันที่สั่ง": order.created_at,
        }
        for order in orders
    ]
    return pd.DataFrame(records)


def items_to_dataframe(items: Iterable[OrderLineItem], design_names: Mapping[str, str]) -> pd.DataFrame:
    records = [
        {
            "รหัสออเดอร์": item.order_id,
            "แบบ": design_names.get(item.design, UNKNOWN_DESIGN_NAME),
            "ขนาด": item.size,
            "จำนวน": item.quantity,
            "ราคาต่อชิ้น": item.price_per_unit,
            "รวม": item.line_total,
        }
        for item in items
    ]
    return pd.DataFrame(records)


def _autosize_columns(worksheet, df: pd.DataFrame) -> None:
    for idx, column in enumerate(df.columns, start=1):
        values = [str(column)] + [str(v) for v in df[column].tolist()]
        width = max(len(v) for v in values) + 2
        worksheet.column_dimensions[worksheet.cell(row=1, column=idx).column_letter].width = width


def _write_sheets(sheets: Dict[str, pd.DataFrame]) -> bytes:
    out = BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        for name, df in sheets.items():
            df.to_excel(writer, sheet_name=name, index=False)
            _autosize_columns(writer.sheets[name], df)
    return out.getvalue()


def size_summary_to_excel(rows: Sequence[SizeSummaryRow], sizes: Sequence[str] = ALL_SIZES) -> bytes:
    return _write_sheets({SIZE_SHEET: summary_to_dataframe(rows, sizes)})


def orders_to_excel(
        orders: List[Order],
        items: List[OrderLineItem],
        summary_rows: Sequence[SizeSummaryRow],
        design_names: Mapping[str, str],
        sizes: Sequence[str] = ALL_SIZES,
) -> bytes:
    """
    Full export: orders, line items and the size summary on three sheets.
    `summary_rows` should come from the same aggregation as the live page.
    """
    return _write_sheets(
        {
            ORDERS_SHEET: orders_to_dataframe(orders),
            ITEMS_SHEET: items_to_dataframe(items, design_names),
            SIZE_SHEET: summary_to_dataframe(summary_rows, sizes, include_total_row=False),
        }
    )
