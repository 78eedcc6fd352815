# services/label_service.py
"""
Printable shipping labels: one A4 page per order with the recipient, the
order summary and the line items by design name.
"""

from io import BytesIO
from typing import Dict, List, Mapping, Sequence

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Cm, Mm, Pt

from domain.models import UNKNOWN_DESIGN_NAME, Order
from utils.formatting import format_baht, format_order_date

EVENT_NAME = "Tiger Thailand Meeting 2026"
LABEL_TITLE = "ใบปะหน้าพัสดุ"
ITEM_HEADERS = ("แบบเสื้อ", "ขนาด", "จำนวน", "ราคา/ชิ้น", "รวม")
FOOTER_NOTE = "** กรุณาตรวจสอบสินค้าก่อนรับ หากมีปัญหาโปรดติดต่อทันที **"


def recipient_fields(order: Order) -> Dict[str, str]:
    fields = {
        "ชื่อ": order.name,
        "เบอร์โทร": order.phone or "-",
        "วิธีรับ": "รับหน้างาน" if order.is_pickup else "จัดส่ง",
    }
    if not order.is_pickup and order.address:
        fields["ที่อยู่จัดส่ง"] = order.address
    return fields


def order_fields(order: Order) -> Dict[str, str]:
    return {
        "เลขที่": f"#{order.id}",
        "วันที่สั่ง": format_order_date(order.created_at),
        "ยอดรวม": format_baht(order.total_price),
    }


def item_rows(order: Order, design_names: Mapping[str, str]) -> List[List[str]]:
    return [
        [
            design_names.get(item.design, UNKNOWN_DESIGN_NAME),
            item.size,
            str(item.quantity),
            f"{item.price_per_unit:,.0f}",
            f"{item.line_total:,.0f}",
        ]
        for item in order.items
    ]


def _setup_a4(doc: Document) -> None:
    for section in doc.sections:
        section.page_width = Mm(210)
        section.page_height = Mm(297)
        section.left_margin = section.right_margin = Cm(1)
        section.top_margin = section.bottom_margin = Cm(1)


def _add_fields(doc: Document, heading: str, fields: Mapping[str, str]) -> None:
    doc.add_heading(heading, level=2)
    for label, value in fields.items():
        p = doc.add_paragraph()
        p.add_run(f"{label}: ").bold = True
        p.add_run(value)


def _add_label(doc: Document, order: Order, design_names: Mapping[str, str]) -> None:
    title = doc.add_heading(LABEL_TITLE, level=1)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER
    subtitle = doc.add_paragraph(EVENT_NAME)
    subtitle.alignment = WD_ALIGN_PARAGRAPH.CENTER

    _add_fields(doc, "ข้อมูลผู้รับ", recipient_fields(order))
    _add_fields(doc, "ข้อมูลคำสั่งซื้อ", order_fields(order))

    doc.add_heading("รายการสินค้า", level=2)
    rows = item_rows(order, design_names)
    table = doc.add_table(rows=1, cols=len(ITEM_HEADERS))
    table.style = "Table Grid"
    for cell, header in zip(table.rows[0].cells, ITEM_HEADERS):
        cell.text = header
        cell.paragraphs[0].runs[0].bold = True
    for values in rows:
        cells = table.add_row().cells
        for cell, value in zip(cells, values):
            cell.text = value

    total_cells = table.add_row().cells
    total_cells[0].merge(total_cells[-2]).text = "ยอดรวมทั้งสิ้น:"
    total_cells[-1].text = format_baht(order.total_price)

    note = doc.add_paragraph()
    note.alignment = WD_ALIGN_PARAGRAPH.CENTER
    run = note.add_run(FOOTER_NOTE)
    run.font.size = Pt(9)


def build_label_document(orders: Sequence[Order], design_names: Mapping[str, str]) -> Document:
    """
    One label per order, each on its own page, in the order given.
    Orders need their items attached (see list_orders_with_items).
    """
    doc = Document()
    _setup_a4(doc)

    for index, order in enumerate(orders):
        if index:
            doc.add_page_break()
        _add_label(doc, order, design_names)

    return doc


def shipping_labels_to_docx(orders: Sequence[Order], design_names: Mapping[str, str]) -> bytes:
    if not orders:
        raise ValueError("No orders selected for labels")

    out = BytesIO()
    build_label_document(orders, design_names).save(out)
    return out.getvalue()
