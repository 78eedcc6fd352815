from io import BytesIO

import pandas as pd

from domain.models import Order, OrderLineItem, SizeSummaryRow
from utils.spreadsheet import (
    DESIGN_COLUMN,
    ITEMS_SHEET,
    ORDERS_SHEET,
    SIZE_SHEET,
    TOTAL_LABEL,
    orders_to_excel,
    size_summary_to_excel,
    summary_to_dataframe,
)

SIZES = ("S", "M", "L")
ROWS = [
    SizeSummaryRow("1", "Tiger Classic", {"S": 1, "M": 3, "L": 0}),
    SizeSummaryRow("2", "Tiger Stripe", {"S": 0, "M": 2, "L": 4}),
]


def test_summary_dataframe_has_total_row():
    df = summary_to_dataframe(ROWS, SIZES)

    assert list(df.columns) == [DESIGN_COLUMN, "S", "M", "L"]
    assert df.iloc[-1].tolist() == [TOTAL_LABEL, 1, 5, 4]
    assert len(df) == 3


def test_summary_dataframe_without_total_row():
    df = summary_to_dataframe(ROWS, SIZES, include_total_row=False)

    assert df[DESIGN_COLUMN].tolist() == ["Tiger Classic", "Tiger Stripe"]


def test_size_summary_workbook():
    data = size_summary_to_excel(ROWS, SIZES)

    df = pd.read_excel(BytesIO(data), sheet_name=SIZE_SHEET)
    assert df[DESIGN_COLUMN].tolist() == ["Tiger Classic", "Tiger Stripe", TOTAL_LABEL]
    assert df["L"].tolist() == [0, 4, 4]


def test_full_export_has_three_sheets():
    orders = [Order(1, "Somchai", phone="081", total_price=700, shipping_cost=50, status="confirmed")]
    items = [OrderLineItem("1", "M", 2, 350, order_id=1)]

    data = orders_to_excel(orders, items, ROWS, {"1": "Tiger Classic"}, SIZES)

    sheets = pd.read_excel(BytesIO(data), sheet_name=None)
    assert list(sheets) == [ORDERS_SHEET, ITEMS_SHEET, SIZE_SHEET]
    assert sheets[ORDERS_SHEET]["สถานะ"].tolist() == ["ยืนยันการชำระเงิน"]
    assert sheets[ITEMS_SHEET]["รวม"].tolist() == [700]
    assert TOTAL_LABEL not in sheets[SIZE_SHEET][DESIGN_COLUMN].tolist()
