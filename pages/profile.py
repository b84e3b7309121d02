# pages/profile.py
import streamlit as st

from crickboard import auth, storage
from crickboard.ui import require_user

st.set_page_config(page_title="Profile", page_icon="👤", layout="wide")


def main():
    user = require_user()
    st.header("👤 Profile")
    st.write(f"**Email:** {user.email}")
    st.caption(f"Member since {user.created_at[:10]}")

    with st.form("profile"):
        name = st.text_input("Name", value=user.name)
        password = st.text_input("New password (leave blank to keep)", type="password")
        submitted = st.form_submit_button("Save")
    if submitted:
        try:
            updated = auth.update_user(user.id, name=name, password=password or None)
            st.session_state["user"] = updated
            st.success("Profile updated.")
        except auth.AuthError as e:
            st.error(str(e))

    st.divider()
    st.subheader("⚠️ Danger zone")
    confirm = st.checkbox("I understand this removes all my players, matches and tournaments")
    if st.button("Clear all data", disabled=not confirm):
        if storage.clear_all_data(user.id):
            st.success("All data cleared.")
        else:
            st.error("Clearing data failed.")


main()
