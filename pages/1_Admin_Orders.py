from datetime import date

import pandas as pd
import streamlit as st

from domain.errors import StorageError
from domain.models import ORDER_STATUSES, status_label
from element_component import app_settings, get_db, require_admin
from services.label_service import shipping_labels_to_docx
from services.notification_service import TelegramNotifier
from services.order_service import is_ordering_closed, list_orders_with_items, toggle_ordering_closed, update_order_status
from services.size_summary_service import load_report_data, summarize_report_data
from utils.formatting import format_baht, format_order_date
from utils.spreadsheet import orders_to_excel

st.set_page_config(page_title="จัดการออเดอร์", page_icon="📋")
st.sidebar.header("📋 จัดการออเดอร์")

require_admin()

settings = app_settings()
db = get_db(admin=True)

st.title("📋 จัดการออเดอร์")

# -----------------------------------------------------------------------------
# Ordering open / closed
# -----------------------------------------------------------------------------
closed = is_ordering_closed(db)
col_state, col_toggle = st.columns([2, 1])
with col_state:
    if closed:
        st.error("สถานะ: ปิดรับออเดอร์")
    else:
        st.success("สถานะ: เปิดรับออเดอร์")
with col_toggle:
    if st.button("เปิดรับออเดอร์" if closed else "ปิดรับออเดอร์"):
        ok, msg, _ = toggle_ordering_closed(db)
        if ok:
            st.rerun()
        else:
            st.error(msg)

st.divider()

# -----------------------------------------------------------------------------
# Orders
# -----------------------------------------------------------------------------
try:
    orders = list_orders_with_items(db)
    report_data = load_report_data(db)
except StorageError as e:
    st.error(f"ไม่สามารถโหลดข้อมูลได้ กรุณาลองใหม่: {e}")
    st.stop()

if not orders:
    st.info("ยังไม่มีออเดอร์")
    st.stop()

design_names = {d.id: d.name for d in report_data.designs}

status_filter = st.multiselect(
    "กรองตามสถานะ",
    options=ORDER_STATUSES,
    format_func=status_label,
)
visible = [o for o in orders if not status_filter or o.status in status_filter]

df_orders = pd.DataFrame(
    [
        {
            "รหัส": o.id,
            "ชื่อ": o.name,
            "โทร": o.phone,
            "รับสินค้า": "รับหน้างาน" if o.is_pickup else "จัดส่ง",
            "รายการ": ", ".join(
                f"{design_names.get(i.design, i.design)} {i.size} x{i.quantity}" for i in o.items
            ),
            "ยอดรวม": format_baht(o.grand_total),
            "สถานะ": status_label(o.status),
            "วันที่สั่ง": format_order_date(o.created_at),
        }
        for o in visible
    ]
)
st.dataframe(df_orders, width='stretch', hide_index=True)
st.metric("ยอดขายรวม (ไม่รวมที่ยกเลิก)", format_baht(sum(o.grand_total for o in orders if o.status != "cancelled")))

# -----------------------------------------------------------------------------
# Status update
# -----------------------------------------------------------------------------
st.subheader("อัพเดทสถานะ")

order_by_id = {o.id: o for o in orders}
with st.form("status_form"):
    order_id = st.selectbox(
        "ออเดอร์",
        options=list(order_by_id),
        format_func=lambda oid: f"#{oid} {order_by_id[oid].name} ({status_label(order_by_id[oid].status)})",
    )
    new_status = st.selectbox("สถานะใหม่", options=ORDER_STATUSES, format_func=status_label)
    submitted = st.form_submit_button("บันทึก")

if submitted:
    ok, msg, _ = update_order_status(db, order_id, new_status, TelegramNotifier.from_settings(settings))
    if ok:
        st.success(f"อัพเดทออเดอร์ #{order_id} เป็น {status_label(new_status)} แล้ว")
    else:
        st.error(msg)

selected = order_by_id.get(order_id)
if selected and selected.slip_image:
    with st.expander(f"สลิปการโอนเงิน ออเดอร์ #{selected.id}"):
        st.image(selected.slip_image)

st.divider()

# -----------------------------------------------------------------------------
# Shipping labels
# -----------------------------------------------------------------------------
st.subheader("พิมพ์ใบปะหน้าพัสดุ")

label_ids = st.multiselect(
    "เลือกออเดอร์",
    options=[o.id for o in visible],
    format_func=lambda oid: f"#{oid} {order_by_id[oid].name}",
)
if label_ids:
    st.download_button(
        f"ดาวน์โหลดใบปะหน้า {len(label_ids)} รายการ (Word)",
        data=shipping_labels_to_docx([order_by_id[oid] for oid in label_ids], design_names),
        file_name=f"shipping-labels_{date.today().isoformat()}.docx",
        mime="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    )

st.divider()

# -----------------------------------------------------------------------------
# Export
# -----------------------------------------------------------------------------
summary = summarize_report_data(report_data, sizes=settings.sizes)
all_items = [item for o in orders for item in o.items]

st.download_button(
    "ดาวน์โหลดออเดอร์ทั้งหมด (Excel)",
    data=orders_to_excel(orders, all_items, summary.rows, design_names, settings.sizes),
    file_name=f"orders_export_{date.today().isoformat()}.xlsx",
    mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)
