import pandas as pd
import streamlit as st

from domain.errors import StorageError
from domain.models import UploadedImage
from element_component import app_settings, confirmation_dialog, get_db, require_admin
from google_client import get_drive_service
from services.design_service import create_design, deactivate_design, list_designs, update_design
from services.drive_service import make_uploader
from utils.formatting import format_baht

st.set_page_config(page_title="แบบเสื้อ", page_icon="👚")
st.sidebar.header("👚 แบบเสื้อ")

require_admin()

settings = app_settings()
db = get_db(admin=True)

if "design_input_state" not in st.session_state:
    st.session_state["design_input_state"] = False
if "design_delete_state" not in st.session_state:
    st.session_state["design_delete_state"] = False


def to_image(uploaded):
    if uploaded is None:
        return None
    return UploadedImage(uploaded.name, uploaded.type or "image/jpeg", uploaded.getvalue())


def design_uploader():
    return make_uploader(get_drive_service(settings), settings.drive_design_folder_id, overwrite=True)


st.title("👚 จัดการแบบเสื้อ")

try:
    designs = list_designs(db, include_inactive=True)
except StorageError as e:
    st.error(f"ไม่สามารถโหลดแบบเสื้อได้: {e}")
    st.stop()

st.dataframe(
    pd.DataFrame(
        [
            {
                "รหัส": d.id,
                "ชื่อ": d.name,
                "ราคา": format_baht(d.price),
                "ลำดับ": d.display_order,
                "เปิดขาย": "✅" if d.is_active else "❌",
                "Combo": "🧩" if d.is_combo else "",
            }
            for d in designs
        ]
    ),
    width='stretch',
    hide_index=True,
)

if st.session_state["design_delete_state"]:
    st.success("ปิดการขายแบบเสื้อแล้ว")
    st.session_state["design_delete_state"] = False

# -----------------------------------------------------------------------------
# New design
# -----------------------------------------------------------------------------
with st.form("design_input_form", enter_to_submit=False):
    st.subheader("เพิ่มแบบเสื้อใหม่")
    design_id = st.text_input("รหัสแบบ")
    name = st.text_input("ชื่อแบบ")
    price = st.number_input("ราคา", min_value=0, step=10)
    description = st.text_area("รายละเอียด")
    display_order = st.number_input("ลำดับการแสดง", min_value=0, step=1)
    front = st.file_uploader("รูปด้านหน้า", type=["jpg", "jpeg", "png"], key="new_front")
    back = st.file_uploader("รูปด้านหลัง", type=["jpg", "jpeg", "png"], key="new_back")

    submitted = st.form_submit_button("บันทึก")

    if submitted:
        st.session_state["design_input_state"] = False
        try:
            uploader = design_uploader()
        except RuntimeError as e:
            st.error(str(e))
        else:
            ok, msg, _ = create_design(
                db,
                design_id=design_id.strip(),
                name=name.strip(),
                price=price,
                description=description.strip(),
                front_image=to_image(front),
                back_image=to_image(back),
                uploader=uploader,
                display_order=int(display_order),
            )
            if ok:
                st.session_state["design_input_state"] = True
            else:
                st.error(msg)

    if st.session_state["design_input_state"]:
        st.success("เพิ่มแบบเสื้อใหม่แล้ว")

# -----------------------------------------------------------------------------
# Edit design
# -----------------------------------------------------------------------------
if designs:
    st.subheader("แก้ไขแบบเสื้อ")
    design_by_id = {d.id: d for d in designs}
    selected_id = st.selectbox(
        "แบบเสื้อ",
        options=list(design_by_id),
        format_func=lambda d: f"{d} - {design_by_id[d].name}",
    )
    selected = design_by_id[selected_id]

    with st.form("design_edit_form"):
        edit_name = st.text_input("ชื่อแบบ", value=selected.name)
        edit_price = st.number_input("ราคา", min_value=0.0, step=10.0, value=float(selected.price))
        edit_description = st.text_area("รายละเอียด", value=selected.description)
        edit_order = st.number_input("ลำดับการแสดง", min_value=0, step=1, value=selected.display_order)
        edit_active = st.checkbox("เปิดขาย", value=selected.is_active)
        edit_front = st.file_uploader("เปลี่ยนรูปด้านหน้า", type=["jpg", "jpeg", "png"], key="edit_front")
        edit_back = st.file_uploader("เปลี่ยนรูปด้านหลัง", type=["jpg", "jpeg", "png"], key="edit_back")

        saved = st.form_submit_button("บันทึกการแก้ไข")

    if saved:
        try:
            uploader = design_uploader() if (edit_front or edit_back) else None
        except RuntimeError as e:
            st.error(str(e))
            st.stop()
        ok, msg, _ = update_design(
            db,
            selected_id,
            uploader=uploader,
            name=edit_name.strip(),
            price=edit_price,
            description=edit_description.strip(),
            is_active=edit_active,
            display_order=int(edit_order),
            front_image=to_image(edit_front),
            back_image=to_image(edit_back),
        )
        if ok:
            st.success("บันทึกการแก้ไขแล้ว")
        else:
            st.error(msg)

    if selected.is_active and st.button("ปิดการขายแบบนี้"):
        confirmation_dialog(
            {"รหัส": selected.id, "ชื่อ": selected.name},
            lambda: deactivate_design(db, selected.id),
            "design_delete_state",
        )
