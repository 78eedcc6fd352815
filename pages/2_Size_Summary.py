from datetime import date

import streamlit as st

from domain.errors import StorageError
from domain.models import ORDER_STATUSES, status_label
from element_component import app_settings, get_db, require_admin
from services.size_summary_service import (
    DEFAULT_REPORT_STATUSES,
    SORT_BY_NAME,
    SORT_BY_TOTAL,
    load_report_data,
    sort_summary,
    summarize_report_data,
)
from utils.spreadsheet import size_summary_to_excel, summary_to_dataframe

st.set_page_config(page_title="สรุปขนาดเสื้อ", page_icon="📏")
st.sidebar.header("📏 สรุปขนาดเสื้อ")

require_admin()

settings = app_settings()
db = get_db(admin=True)

st.title("📏 สรุปขนาดเสื้อ")

try:
    data = load_report_data(db)
except StorageError as e:
    st.error(f"ไม่สามารถโหลดข้อมูลได้ กรุณาลองใหม่: {e}")
    st.stop()

# -----------------------------------------------------------------------------
# Filters
# -----------------------------------------------------------------------------
col_status, col_sort = st.columns([3, 1])
with col_status:
    statuses = st.multiselect(
        "สถานะออเดอร์",
        options=ORDER_STATUSES,
        default=list(DEFAULT_REPORT_STATUSES),
        format_func=status_label,
    )
with col_sort:
    sort_by = st.radio(
        "เรียงตาม",
        options=(SORT_BY_NAME, SORT_BY_TOTAL),
        format_func=lambda s: "ชื่อแบบ" if s == SORT_BY_NAME else "จำนวนรวม",
    )

if st.button("🔄 รีเฟรช"):
    st.rerun()

if not statuses:
    st.info("เลือกอย่างน้อย 1 สถานะ")
    st.stop()

report = summarize_report_data(data, statuses, settings.sizes)
stats = report.statistics

# -----------------------------------------------------------------------------
# Statistics
# -----------------------------------------------------------------------------
col_total, col_design, col_size = st.columns(3)
col_total.metric("จำนวนเสื้อทั้งหมด", f"{stats.grand_total:,}")
col_design.metric("แบบยอดนิยม", stats.most_popular_design or "-")
col_size.metric("ขนาดยอดนิยม", stats.most_popular_size or "-")

if data.registry.combo_ids():
    combo_names = {d.id: d.name for d in data.designs}
    st.caption(
        "สินค้า Combo ถูกแยกนับเป็นแบบย่อย: "
        + ", ".join(combo_names.get(cid, cid) for cid in data.registry.combo_ids())
    )

# -----------------------------------------------------------------------------
# Table
# -----------------------------------------------------------------------------
rows = sort_summary(report.rows, sort_by)
df = summary_to_dataframe(rows, settings.sizes)
df["รวม"] = df[list(settings.sizes)].sum(axis=1)

st.dataframe(df, width='stretch', hide_index=True)

st.download_button(
    "ดาวน์โหลด Excel",
    data=size_summary_to_excel(rows, settings.sizes),
    file_name=f"size-summary_{date.today().isoformat()}.xlsx",
    mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)
