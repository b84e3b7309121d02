# pages/matches.py
from datetime import date

import streamlit as st

from crickboard import calculations, storage
from crickboard.models import MatchResult
from crickboard.ui import matches_frame, performances_frame, pick_record, require_user, result_badge

st.set_page_config(page_title="Matches", page_icon="📋", layout="wide")

PERF_FIELDS = [
    ("runs", "Runs"), ("balls", "Balls"), ("fours", "4s"), ("sixes", "6s"),
    ("wickets", "Wickets"), ("overs", "Overs"), ("runs_conceded", "Conceded"), ("maidens", "Maidens"),
    ("catches", "Catches"), ("stumpings", "Stumpings"), ("run_outs", "Run Outs"),
]


def _match_label(m) -> str:
    return f"{m.date} vs {m.opponent} ({m.result.value})"


def list_matches(matches):
    st.subheader("📖 Match History")
    result_filter = st.radio("Show", calculations.RESULT_FILTERS, horizontal=True, key="match_filter")
    shown = calculations.filter_matches_by_result(matches, result_filter)
    totals = calculations.match_totals(shown)
    c1, c2, c3 = st.columns(3)
    c1.metric("Matches", totals["total_matches"])
    c2.metric("Runs", totals["total_runs"])
    c3.metric("Wickets", totals["total_wickets"])
    if not shown:
        st.info("No matches found.")
        return
    st.dataframe(matches_frame(shown), use_container_width=True, hide_index=True)


def record_match(user_id: str):
    st.subheader("➕ Record Match")
    players = storage.get_players(user_id)
    if not players:
        st.info("Add players before recording a match.")
        return
    by_id = {p.id: p for p in players}
    picked = st.multiselect(
        "Players who took part",
        list(by_id),
        format_func=lambda i: f"{by_id[i].name} ({by_id[i].role})",
        key="record_players",
    )

    with st.form("record_match"):
        c1, c2, c3 = st.columns(3)
        match_date = c1.date_input("Date", value=date.today())
        opponent = c2.text_input("Opponent", placeholder="Friendly Fixture")
        venue = c3.text_input("Venue", placeholder="Home Ground")
        c1, c2, c3 = st.columns(3)
        result = c1.selectbox("Result", [r.value for r in MatchResult])
        wides = c2.number_input("Wides conceded", min_value=0, step=1)
        no_balls = c3.number_input("No-balls conceded", min_value=0, step=1)
        notes = st.text_area("Notes")

        performances = []
        for player_id in picked:
            p = by_id[player_id]
            st.markdown(f"**{p.name}**")
            cols = st.columns(len(PERF_FIELDS))
            perf = {"player_id": p.id, "player_name": p.name}
            for col, (field, label) in zip(cols, PERF_FIELDS):
                if field == "overs":
                    perf[field] = col.number_input(label, min_value=0.0, step=0.1, key=f"perf_{p.id}_{field}")
                else:
                    perf[field] = col.number_input(label, min_value=0, step=1, key=f"perf_{p.id}_{field}")
            performances.append(perf)
        submitted = st.form_submit_button("Save match")

    if submitted:
        if not performances:
            st.error("Add at least one player performance.")
            return
        saved = storage.record_match(user_id, {
            "date": match_date,
            "opponent": opponent,
            "venue": venue,
            "result": result,
            "wides": wides,
            "no_balls": no_balls,
            "notes": notes.strip() or None,
            "performances": performances,
        })
        if saved is None:
            st.error("Failed to record match. Please try again.")
            return
        st.success("Match recorded.")
        st.rerun()


def match_detail(user_id: str, matches):
    st.subheader("🔎 Match Detail")
    if not matches:
        st.info("No matches recorded yet.")
        return
    m = pick_record("Choose a match", matches, _match_label, key="detail_match")

    st.markdown(f"### vs {m.opponent} {result_badge(m.result)}")
    st.caption(f"{m.date} • {m.venue}")

    mom = calculations.man_of_the_match(m)
    if mom is not None:
        st.success(f"🏅 Player of the match: **{mom.player_name}** ({mom.runs} runs, {mom.wickets} wickets)")

    if m.performances:
        st.dataframe(performances_frame(m), use_container_width=True, hide_index=True)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Wides", m.wides)
    c2.metric("No-Balls", m.no_balls)
    c3.metric("Total Extras", calculations.match_extras(m))
    c4.metric("Run Rate", calculations.run_rate(m))
    if m.notes:
        st.markdown(f"> {m.notes}")

    if m.result is MatchResult.WIN:
        with st.form(f"post_{m.id}"):
            caption = st.text_input("Caption", placeholder=f"Victory against {m.opponent}!")
            image_uri = st.text_input("Image URL (optional)")
            if st.form_submit_button("🎉 Share to Victory Wall"):
                post = storage.add_victory_post(
                    user_id, storage.victory_post_from_match(m, caption, image_uri.strip() or None)
                )
                if post is None:
                    st.error("Could not share this win.")
                else:
                    st.success("Shared to the Victory Wall!")


def delete_match(user_id: str, matches):
    st.subheader("🗑️ Delete Match")
    if not matches:
        st.info("No matches to delete.")
        return
    m = pick_record("Choose a match to delete", matches, _match_label, key="delete_match")
    if st.button("Delete permanently"):
        if storage.delete_match(user_id, m.id):
            st.success("Match deleted.")
            st.rerun()
        else:
            st.error("Failed to delete match")


def main():
    user = require_user()
    st.header("📋 Matches")
    matches = storage.get_matches(user.id)

    operation = st.selectbox(
        "Choose operation:",
        ["History", "Detail", "Record", "Delete"],
        key="match_operation",
    )
    st.divider()

    if operation == "History":
        list_matches(matches)
    elif operation == "Detail":
        match_detail(user.id, matches)
    elif operation == "Record":
        record_match(user.id)
    elif operation == "Delete":
        delete_match(user.id, matches)


main()
