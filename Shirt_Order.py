import streamlit as st

from domain.errors import OrderValidationError, StorageError
from domain.models import OrderLineItem, UploadedImage
from element_component import app_settings, get_db
from google_client import get_drive_service
from services.design_service import list_designs
from services.drive_service import make_uploader
from services.notification_service import TelegramNotifier
from services.order_service import create_order, is_ordering_closed
from utils.formatting import format_baht

st.set_page_config(
    page_title="สั่งซื้อเสื้อ Tiger Thailand Meeting",
    page_icon="👕"
)

settings = app_settings()
db = get_db()

if settings.is_test_environment:
    st.warning("🧪 ระบบทดสอบ: ออเดอร์ในหน้านี้ไม่ใช่ออเดอร์จริง")

st.title("👕 สั่งซื้อเสื้อ Tiger Thailand Meeting")

if is_ordering_closed(db):
    st.info("ขณะนี้ปิดรับออเดอร์แล้ว ขอบคุณที่ให้ความสนใจ")
    st.stop()

try:
    designs = list_designs(db)
except StorageError as e:
    st.error(f"ไม่สามารถโหลดแบบเสื้อได้: {e}")
    st.stop()

if not designs:
    st.warning("ยังไม่มีแบบเสื้อเปิดให้สั่งซื้อ")
    st.stop()

design_by_id = {d.id: d for d in designs}

# -----------------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------------
cols = st.columns(min(len(designs), 3))
for idx, design in enumerate(designs):
    with cols[idx % len(cols)]:
        images = [url for url in (design.front_image, design.back_image) if url]
        if images:
            st.image(images[0], width='stretch')
        st.markdown(f"**{design.name}**")
        st.caption(f"{design.description}\n\n{format_baht(design.price)}")

st.divider()

# -----------------------------------------------------------------------------
# Line items
# -----------------------------------------------------------------------------
if "num_items" not in st.session_state:
    st.session_state.num_items = 1

col_add, col_remove = st.columns(2)
with col_add:
    if st.button("➕ เพิ่มรายการ"):
        st.session_state.num_items += 1
with col_remove:
    if st.button("➖ ลบรายการล่าสุด", disabled=st.session_state.num_items <= 1):
        st.session_state.num_items -= 1

st.subheader("รายการสั่งซื้อ")

items = []
for i in range(st.session_state.num_items):
    col_design, col_size, col_qty = st.columns([2, 1, 1])

    with col_design:
        design_id = st.selectbox(
            "แบบเสื้อ",
            options=list(design_by_id),
            format_func=lambda d: f"{design_by_id[d].name} - {format_baht(design_by_id[d].price)}",
            key=f"design_{i}",
        )
    with col_size:
        size = st.selectbox("ขนาด", options=settings.sizes, key=f"size_{i}")
    with col_qty:
        qty = st.number_input("จำนวน", min_value=1, max_value=99, step=1, value=1, key=f"qty_{i}")

    items.append(OrderLineItem(design=design_id, size=size, quantity=int(qty)))

subtotal = sum(design_by_id[item.design].price * item.quantity for item in items)

st.divider()

# -----------------------------------------------------------------------------
# Customer & payment
# -----------------------------------------------------------------------------
with st.form("order_form", enter_to_submit=False):
    name = st.text_input("ชื่อ-นามสกุล")
    phone = st.text_input("เบอร์โทรศัพท์")
    is_pickup = st.checkbox("รับหน้างาน (ไม่มีค่าจัดส่ง)")
    address = st.text_area("ที่อยู่สำหรับจัดส่ง")
    slip_file = st.file_uploader("สลิปการโอนเงิน", type=["jpg", "jpeg", "png"])

    shipping = 0 if is_pickup else settings.shipping_cost
    st.caption(
        f"ยอดสินค้า: **{format_baht(subtotal)}** | ค่าจัดส่ง: **{format_baht(shipping)}** "
        f"(คิดตามตัวเลือกล่าสุด) | ยอดรวม: **{format_baht(subtotal + shipping)}**"
    )

    submitted = st.form_submit_button("ยืนยันการสั่งซื้อ", type="primary")

if submitted:
    slip = None
    if slip_file is not None:
        slip = UploadedImage(slip_file.name, slip_file.type or "image/jpeg", slip_file.getvalue())

    try:
        uploader = make_uploader(get_drive_service(settings), settings.drive_slip_folder_id)
        order = create_order(
            db,
            name=name,
            phone=phone,
            address=address,
            is_pickup=is_pickup,
            items=items,
            slip=slip,
            designs=designs,
            uploader=uploader,
            notifier=TelegramNotifier.from_settings(settings),
            shipping_cost=settings.shipping_cost,
            sizes=settings.sizes,
        )
    except OrderValidationError as e:
        st.error(str(e))
    except (StorageError, RuntimeError) as e:
        st.error(f"ไม่สามารถบันทึกออเดอร์ได้ กรุณาลองใหม่: {e}")
    else:
        st.session_state.num_items = 1
        st.success(f"สั่งซื้อสำเร็จ! รหัสสั่งซื้อของคุณคือ **{order.id}**")
        st.metric("ยอดรวมทั้งสิ้น", format_baht(order.grand_total))
        st.balloons()
