# crickboard/ui.py
# Streamlit glue shared by app.py and the pages: store init, session user, tables.
from typing import Iterable, Optional

import pandas as pd
import streamlit as st

from crickboard import auth, calculations, config, storage
from crickboard.app_logger import get_logger
from crickboard.db_connection import ensure_schema
from crickboard.models import Match, Player, User

log = get_logger("ui")

TEMPLATE = "plotly_white"


@st.cache_resource(show_spinner=True)
def init_store(db_file: str):
    """Create tables once per database file and process."""
    ensure_schema(db_file)
    log.info("Store ready at %s", db_file)
    return True


def bootstrap():
    init_store(str(config.db_path()))


# ----------------- session -----------------
def current_user() -> Optional[User]:
    return st.session_state.get("user")


def sign_in(user: User):
    st.session_state["user"] = user
    if config.seed_demo():
        storage.seed_demo_data_if_empty(user.id)


def sign_out():
    st.session_state.pop("user", None)


def require_user() -> User:
    """Stop the page unless someone is signed in."""
    bootstrap()
    user = current_user()
    if user is None:
        st.warning("Please sign in from the main page first.")
        st.stop()
    with st.sidebar:
        st.caption(f"Signed in as **{user.name}**")
        if st.button("Sign out", key="sidebar_sign_out"):
            sign_out()
            st.rerun()
    return user


def login_panel():
    tab_login, tab_register = st.tabs(["🔐 Sign in", "🆕 Register"])
    with tab_login:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in")
        if submitted:
            try:
                sign_in(auth.login(email, password))
                st.rerun()
            except auth.AuthError as e:
                st.error(str(e))
    with tab_register:
        with st.form("register_form"):
            name = st.text_input("Name")
            email = st.text_input("Email", key="reg_email")
            password = st.text_input("Password", type="password", key="reg_password")
            submitted = st.form_submit_button("Create account")
        if submitted:
            try:
                sign_in(auth.register(email, password, name))
                st.rerun()
            except auth.AuthError as e:
                st.error(str(e))


# ----------------- tables -----------------
def players_frame(players: Iterable[Player]) -> pd.DataFrame:
    rows = []
    for p in players:
        s = p.stats
        rows.append({
            "Player": p.name,
            "Role": p.role,
            "Team": p.team or "",
            "Matches": s.matches,
            "Runs": s.runs,
            "Wickets": s.wickets,
            "Catches": s.catches,
            **{k.replace("_", " ").title(): v for k, v in calculations.career_stats(s).items()},
        })
    return pd.DataFrame(rows)


def matches_frame(matches: Iterable[Match]) -> pd.DataFrame:
    rows = []
    for m in matches:
        rows.append({
            "Date": m.date,
            "Opponent": m.opponent,
            "Venue": m.venue or "",
            "Result": m.result.value,
            "Runs": calculations.match_runs(m),
            "Extras": calculations.match_extras(m),
            "Run Rate": calculations.run_rate(m),
        })
    return pd.DataFrame(rows)


def performances_frame(match: Match) -> pd.DataFrame:
    rows = []
    for p in match.performances:
        rows.append({
            "Player": p.player_name,
            "Runs": p.runs,
            "Balls": p.balls,
            "4s": p.fours,
            "6s": p.sixes,
            "SR": calculations.strike_rate(p.runs, p.balls),
            "Overs": p.overs,
            "Maidens": p.maidens,
            "Conceded": p.runs_conceded,
            "Wickets": p.wickets,
            "Econ": calculations.economy_rate(p.runs_conceded, p.overs),
            "Catches": p.catches,
        })
    return pd.DataFrame(rows)


def result_badge(result) -> str:
    return {"Win": "🟢 Win", "Loss": "🔴 Loss"}.get(getattr(result, "value", result), "⚪ Draw")


# ----------------- pickers -----------------
def pick_record(label: str, records, fmt, key: Optional[str] = None):
    """Selectbox over records keyed by id, so records with the same label stay reachable."""
    by_id = {r.id: r for r in records}
    picked = st.selectbox(label, list(by_id), format_func=lambda i: fmt(by_id[i]), key=key)
    return by_id[picked]
