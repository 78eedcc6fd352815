from typing import Any, Callable, Dict, Tuple

import pandas as pd
import streamlit as st

from config import Settings, configure_logging, load_settings
from supabase_client import get_database


@st.cache_resource
def app_settings() -> Settings:
    configure_logging()
    return load_settings()


def get_db(admin: bool = False):
    return get_database(app_settings(), admin=admin)


def require_admin() -> None:
    """
    Password gate for admin pages. Stops the page run until the admin
    password from ADMIN_PASSWORD has been entered in this session.
    """
    if st.session_state.get("admin_authenticated"):
        return

    settings = app_settings()

    with st.form("admin_login_form"):
        st.subheader("เข้าสู่ระบบผู้ดูแล")
        password = st.text_input("รหัสผ่าน", type="password")
        submitted = st.form_submit_button("เข้าสู่ระบบ")

    if submitted:
        if settings.admin_password and password == settings.admin_password:
            st.session_state["admin_authenticated"] = True
            st.rerun()
        else:
            st.error("รหัสผ่านไม่ถูกต้อง")

    st.stop()


@st.dialog("ยืนยัน")
def confirmation_dialog(summary: Dict[str, Any], action: Callable[[], Tuple[bool, str]], state_name: str):
    df = pd.DataFrame(list(summary.items()), columns=["รายการ", "ค่า"])
    df["ค่า"] = df["ค่า"].astype("string")
    st.dataframe(df, hide_index=True)

    col_yes, col_no = st.columns(2)

    with col_yes:
        if st.button("ยืนยัน", type="primary", key="confirm_yes"):
            ok, msg = action()
            st.session_state[state_name] = ok

            if not ok:
                st.error(msg)
            else:
                st.rerun()
    with col_no:
        if st.button("ยกเลิก", key="confirm_no"):
            st.rerun()
