# pages/victory_wall.py
import streamlit as st

from crickboard import storage
from crickboard.ui import require_user

st.set_page_config(page_title="Victory Wall", page_icon="🎉", layout="wide")


def show_post(post, user_id: str):
    with st.container(border=True):
        st.markdown(f"### 🏆 vs {post.opponent}")
        st.caption(f"{post.date} • {post.result.value}")
        if post.image_uri:
            st.image(post.image_uri, use_container_width=True)
        st.write(post.caption)
        if post.author_id == user_id:
            if st.button("Delete", key=f"del_{post.id}"):
                if storage.delete_victory_post(user_id, post.id):
                    st.rerun()
                else:
                    st.error("Could not delete this post.")


def main():
    user = require_user()
    st.header("🎉 Victory Wall")
    st.caption("Share a win from the match detail screen to celebrate it here.")

    posts = storage.get_victory_posts()
    if not posts:
        st.info("No victories posted yet.")
        return
    for post in posts:
        show_post(post, user.id)


main()
