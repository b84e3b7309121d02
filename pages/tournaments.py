# pages/tournaments.py
import pandas as pd
import streamlit as st

from crickboard import calculations, config, storage
from crickboard.models import TOURNAMENT_FORMATS, MatchResult
from crickboard.ui import pick_record, require_user

st.set_page_config(page_title="Tournaments", page_icon="🏆", layout="wide")

TEAM_OPTIONS = [4, 6, 8, 12, 16]


def create_tournament(user_id: str):
    st.subheader("➕ Create Tournament")
    with st.form("create_tournament"):
        name = st.text_input("Tournament name")
        fmt = st.selectbox("Format", TOURNAMENT_FORMATS)
        teams = st.selectbox("Teams", TEAM_OPTIONS)
        submitted = st.form_submit_button("Create")
    if submitted:
        if not name.strip():
            st.error("Please enter a tournament name")
            return
        if storage.add_tournament(user_id, {"name": name, "format": fmt, "teams": teams}) is None:
            st.error("Failed to create tournament")
            return
        st.success("Tournament created!")
        st.rerun()


def standings_frame(standings) -> pd.DataFrame:
    return pd.DataFrame([
        {"#": s.position, "Team": s.team, "P": s.played, "W": s.won, "L": s.lost, "D": s.draw, "Pts": s.points}
        for s in standings
    ])


def tournament_detail(user_id: str, tournament):
    st.markdown(f"### {tournament.name}")
    st.caption(f"{tournament.format} • {tournament.teams} teams • {tournament.matches} matches • {tournament.status}")

    fixtures = storage.get_tournament_matches(user_id, tournament.id)
    standings = calculations.compute_standings(fixtures)

    c1, c2 = st.columns([3, 2])
    with c1:
        st.markdown("#### Standings")
        if standings:
            st.dataframe(standings_frame(standings), use_container_width=True, hide_index=True)
        else:
            st.info("No results yet.")
    with c2:
        st.markdown("#### Results")
        for f in fixtures:
            st.write(f"{f.date}: {f.team1 or config.team_name()} vs {f.opponent} ({f.result.value})")

    with st.form(f"fixture_{tournament.id}"):
        st.markdown("#### Add result")
        c1, c2, c3 = st.columns(3)
        team1 = c1.text_input("Team 1", placeholder=config.team_name())
        opponent = c2.text_input("Team 2")
        result = c3.selectbox("Result for Team 1", [r.value for r in MatchResult])
        submitted = st.form_submit_button("Add result")
    if submitted:
        if not opponent.strip():
            st.error("Please enter the opposing team")
            return
        saved = storage.add_tournament_match(user_id, {
            "tournament_id": tournament.id,
            "team1": team1.strip() or None,
            "opponent": opponent.strip(),
            "result": result,
        })
        if saved is None:
            st.error("Failed to add result")
            return
        st.rerun()


def main():
    user = require_user()
    st.header("🏆 Tournaments")

    tournaments = storage.get_tournaments(user.id)
    tab1, tab2 = st.tabs(["📋 My Tournaments", "➕ New"])
    with tab1:
        if not tournaments:
            st.info("No tournaments yet.")
        else:
            t = pick_record("Choose a tournament", tournaments, lambda t: f"{t.name} ({t.status})", key="tournament_pick")
            tournament_detail(user.id, t)
    with tab2:
        create_tournament(user.id)


main()
