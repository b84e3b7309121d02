# pages/players.py
import streamlit as st

from crickboard import calculations, storage
from crickboard.models import ROLES, STAT_FIELDS, Player, PlayerStats
from crickboard.ui import pick_record, players_frame, require_user, result_badge

st.set_page_config(page_title="Players", page_icon="👥", layout="wide")

STAT_LABELS = {
    "matches": "Matches", "runs": "Runs", "balls": "Balls", "fours": "4s", "sixes": "6s",
    "wickets": "Wickets", "overs": "Overs", "runs_conceded": "Runs Conceded",
    "maidens": "Maidens", "catches": "Catches", "stumpings": "Stumpings", "run_outs": "Run Outs",
}


# --------------- UI helpers -------------------
def _stat_inputs(stats: PlayerStats, key_prefix: str) -> dict:
    values = {}
    cols = st.columns(4)
    for i, name in enumerate(STAT_FIELDS):
        current = getattr(stats, name)
        with cols[i % 4]:
            if name == "overs":
                values[name] = st.number_input(
                    STAT_LABELS[name], min_value=0.0, value=float(current), step=0.1, key=f"{key_prefix}_{name}"
                )
            else:
                values[name] = st.number_input(
                    STAT_LABELS[name], min_value=0, value=int(current), step=1, key=f"{key_prefix}_{name}"
                )
    return values


def _label(p: Player) -> str:
    return f"{p.name} ({p.role})"


# ----------------- CRUD ops -------------------
def list_players(user_id: str, players):
    st.subheader("📖 Squad")
    c1, c2 = st.columns([2, 1])
    query = c1.text_input("Search by name", key="player_search")
    role = c2.selectbox("Role", ["All", *ROLES], key="player_role")
    shown = calculations.filter_players(players, query, role)
    if not shown:
        st.info("No players found.")
        return
    st.dataframe(players_frame(shown), use_container_width=True, hide_index=True)


def create_player(user_id: str):
    st.subheader("➕ Add Player")
    with st.form("create_player"):
        name = st.text_input("Name")
        role = st.selectbox("Role", ROLES)
        team = st.text_input("Team (optional)")
        submitted = st.form_submit_button("Add player")
    if submitted:
        if not name.strip():
            st.error("Please enter player name")
            return
        p = storage.add_player(user_id, {"name": name, "role": role, "team": team.strip() or None})
        if p is None:
            st.error("Failed to add player")
            return
        st.success("Player added successfully")
        st.rerun()


def player_detail(user_id: str, players):
    st.subheader("🔎 Player Profile")
    if not players:
        st.info("No players yet.")
        return
    p = pick_record("Choose a player", players, _label, key="detail_pick")

    career = calculations.career_stats(p.stats)
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric("Matches", p.stats.matches)
    c2.metric("Runs", p.stats.runs)
    c3.metric("Batting Avg", career["batting_average"])
    c4.metric("Strike Rate", career["strike_rate"])
    c5.metric("Wickets", p.stats.wickets)
    c1, c2, c3 = st.columns(3)
    c1.metric("Bowling Avg", career["bowling_average"])
    c2.metric("Economy", career["economy_rate"])
    c3.metric("Bowling SR", career["bowling_strike_rate"])

    history = calculations.player_match_history(p.id, storage.get_matches(user_id))
    st.markdown("#### Recent matches")
    if not history:
        st.info("No recorded matches for this player.")
        return
    for h in history[:5]:
        perf = h["performance"]
        st.write(
            f"{h['date']} vs **{h['opponent']}** {result_badge(h['result'])}: "
            f"{perf.runs} ({perf.balls}), {perf.wickets}/{perf.runs_conceded}"
        )


def edit_player(user_id: str, players):
    st.subheader("✏️ Edit Player")
    if not players:
        st.info("No players to edit.")
        return
    p = pick_record("Choose a player", players, _label, key="edit_pick")

    with st.form(f"edit_{p.id}"):
        name = st.text_input("Name", value=p.name)
        role = st.selectbox("Role", ROLES, index=ROLES.index(p.role))
        team = st.text_input("Team", value=p.team or "")
        stats = _stat_inputs(p.stats, key_prefix=f"edit_{p.id}")
        reset = st.checkbox("Reset all statistics to zero")
        submitted = st.form_submit_button("Save changes")
    if submitted:
        if not name.strip():
            st.error("Player name cannot be empty")
            return
        updated = p.model_copy(update={
            "name": name.strip(),
            "role": role,
            "team": team.strip() or None,
            "stats": PlayerStats() if reset else PlayerStats(**stats),
        })
        if storage.update_player(user_id, updated):
            st.success("Profile updated successfully!")
            st.rerun()
        else:
            st.error("Update failed. Check storage.")


def delete_player(user_id: str, players):
    st.subheader("🗑️ Delete Player")
    if not players:
        st.info("No players to delete.")
        return
    p = pick_record("Choose a player to delete", players, _label, key="delete_pick")
    if st.button("Delete permanently"):
        if storage.delete_player(user_id, p.id):
            st.success("Player deleted successfully")
            st.rerun()
        else:
            st.error("Failed to delete player")


# ----------------- Page -----------------------
def main():
    user = require_user()
    st.header("👥 Players")
    players = storage.get_players(user.id)

    operation = st.selectbox(
        "Choose operation:",
        ["Browse", "Profile", "Add", "Edit", "Delete"],
        key="player_operation",
    )
    st.divider()

    if operation == "Browse":
        list_players(user.id, players)
    elif operation == "Profile":
        player_detail(user.id, players)
    elif operation == "Add":
        create_player(user.id)
    elif operation == "Edit":
        edit_player(user.id, players)
    elif operation == "Delete":
        delete_player(user.id, players)


main()
