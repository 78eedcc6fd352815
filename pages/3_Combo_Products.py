import pandas as pd
import streamlit as st

from domain.errors import ComboNotFoundError, ComboReplaceError, ComboValidationError, StorageError
from domain.models import ComboComponent
from element_component import confirmation_dialog, get_db, require_admin
from services.combo_service import create_or_replace_combo, delete_combo, list_combos
from services.design_service import list_designs

st.set_page_config(page_title="สินค้า Combo", page_icon="🧩")
st.sidebar.header("🧩 สินค้า Combo")

require_admin()

db = get_db(admin=True)

st.title("🧩 จัดการสินค้า Combo")
st.caption(
    "สินค้า Combo จะถูกแยกเป็นแบบย่อยในสรุปขนาดเสื้อ "
    "(จำนวนที่สั่ง × ตัวคูณ) รองรับการแยกได้ 1 ชั้นเท่านั้น"
)

if "combo_saved_state" not in st.session_state:
    st.session_state["combo_saved_state"] = False
if "combo_deleted_state" not in st.session_state:
    st.session_state["combo_deleted_state"] = False

try:
    combos = list_combos(db)
    designs = list_designs(db, include_inactive=True)
except StorageError as e:
    st.error(f"ไม่สามารถโหลดข้อมูลได้: {e}")
    st.stop()

design_by_id = {d.id: d for d in designs}


def design_label(design_id: str) -> str:
    design = design_by_id.get(design_id)
    return f"{design_id} - {design.name}" if design else design_id


# -----------------------------------------------------------------------------
# Existing combos
# -----------------------------------------------------------------------------
st.subheader("Combo ที่มีอยู่")

if st.session_state["combo_deleted_state"]:
    st.success("ลบ Combo แล้ว")
    st.session_state["combo_deleted_state"] = False

if not combos:
    st.info("ยังไม่มีสินค้า Combo")

for combo in combos:
    with st.expander(f"{combo.combo_id} - {combo.combo_name}"):
        if not combo.is_combo:
            st.warning("แบบเสื้อนี้ยังไม่ได้ถูกตั้งค่าเป็น Combo")
        st.dataframe(
            pd.DataFrame(
                [
                    {"รหัส": c.component_id, "แบบเสื้อ": c.component_name, "ตัวคูณ": c.multiplier}
                    for c in combo.components
                ]
            ),
            hide_index=True,
        )

        if st.button("🗑️ ลบ Combo", key=f"delete_{combo.combo_id}"):

            def do_delete(combo_id=combo.combo_id):
                try:
                    delete_combo(db, combo_id)
                except (ComboNotFoundError, StorageError) as e:
                    return False, str(e)
                return True, ""

            confirmation_dialog(
                {"Combo": f"{combo.combo_id} - {combo.combo_name}", "คอมโพเนนต์": len(combo.components)},
                do_delete,
                "combo_deleted_state",
            )

st.divider()

# -----------------------------------------------------------------------------
# Create / replace
# -----------------------------------------------------------------------------
st.subheader("สร้าง / แก้ไข Combo")

if "num_components" not in st.session_state:
    st.session_state.num_components = 2

col_add, col_remove = st.columns(2)
with col_add:
    if st.button("➕ เพิ่มคอมโพเนนต์"):
        st.session_state.num_components += 1
with col_remove:
    if st.button("➖ ลบคอมโพเนนต์", disabled=st.session_state.num_components <= 1):
        st.session_state.num_components -= 1

design_ids = list(design_by_id)

with st.form("combo_form"):
    combo_id = st.selectbox(
        "แบบเสื้อที่เป็น Combo",
        options=design_ids,
        index=None,
        placeholder="เลือกแบบเสื้อ",
        format_func=design_label,
    )

    components = []
    for i in range(st.session_state.num_components):
        col_component, col_multiplier = st.columns([3, 1])
        with col_component:
            component_id = st.selectbox(
                f"คอมโพเนนต์ {i + 1}",
                options=design_ids,
                index=None,
                placeholder="เลือกแบบเสื้อ",
                format_func=design_label,
                key=f"component_{i}",
            )
        with col_multiplier:
            multiplier = st.number_input("ตัวคูณ", min_value=1, step=1, value=1, key=f"multiplier_{i}")
        components.append(ComboComponent(component_id or "", int(multiplier)))

    submitted = st.form_submit_button("บันทึก Combo", type="primary")

if submitted:
    st.session_state["combo_saved_state"] = False
    try:
        create_or_replace_combo(db, combo_id or "", components)
    except ComboValidationError as e:
        st.error(e.message)
    except ComboReplaceError as e:
        st.error(str(e))
    except StorageError as e:
        st.error(f"บันทึก Combo ไม่สำเร็จ: {e}")
    else:
        st.session_state["combo_saved_state"] = True
        st.rerun()

if st.session_state["combo_saved_state"]:
    st.success("บันทึก Combo สำเร็จ")
