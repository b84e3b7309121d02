# app.py
import pandas as pd
import plotly.express as px
import streamlit as st

from crickboard import calculations, storage
from crickboard.ui import TEMPLATE, bootstrap, current_user, login_panel, result_badge, sign_out

st.set_page_config(page_title="CrickBoard", page_icon="🏏", layout="wide")

bootstrap()

st.title("🏏 CrickBoard")

user = current_user()
if user is None:
    st.markdown("""
Welcome! 🎉 Track your team's players, matches, tournaments and wins.

Sign in or create an account to continue.
""")
    login_panel()
    st.stop()

with st.sidebar:
    st.caption(f"Signed in as **{user.name}**")
    if st.button("Sign out"):
        sign_out()
        st.rerun()

players = storage.get_players(user.id)
matches = storage.get_matches(user.id)
summary = calculations.team_summary(players, matches)

st.markdown(f"### 👋 Hello, {user.name}")
st.markdown("""
Use the **sidebar** to explore:
- 👥 Players
- 📋 Matches
- 📊 Insights
- 🏆 Tournaments
- 🎉 Victory Wall

---
""")

c1, c2, c3, c4 = st.columns(4)
c1.metric("Matches", summary["matches_played"])
c2.metric("Win Rate", f"{summary['win_rate']}%")
c3.metric("Total Runs", summary["total_runs"])
c4.metric("Total Wickets", summary["total_wickets"])

c1, c2, c3 = st.columns(3)
c1.metric("Team Strike Rate", summary["strike_rate"])
c2.metric("Team Economy", summary["economy"])
c3.metric("Avg Runs / Match", summary["avg_runs"])

if not players:
    st.info("No players yet. Add players and record matches to unlock insights.")
    st.stop()

top = calculations.top_performers(players)
st.markdown("### ⭐ Top Performers")
c1, c2, c3 = st.columns(3)
for col, label, key, metric in [
    (c1, "🏏 Top Batsman", "batsman", "runs"),
    (c2, "🎯 Top Bowler", "bowler", "wickets"),
    (c3, "🧤 Top Fielder", "fielder", "catches"),
]:
    p = top[key]
    with col:
        st.markdown(f"**{label}**")
        if p is None:
            st.write("-")
        else:
            st.write(f"{p.name}: {getattr(p.stats, metric)} {metric}")

c1, c2 = st.columns(2)
with c1:
    st.markdown("### 🏏 Leading Run Scorers")
    board = calculations.leaderboard(players, "runs", limit=3)
    df = pd.DataFrame([{"Player": p.name, "Runs": p.stats.runs} for p in board])
    if not df.empty:
        fig = px.bar(df, x="Player", y="Runs", template=TEMPLATE, title="Top 3 by Runs")
        st.plotly_chart(fig, use_container_width=True)
with c2:
    st.markdown("### 🎯 Leading Wicket Takers")
    board = calculations.leaderboard(players, "wickets", limit=3)
    df = pd.DataFrame([{"Player": p.name, "Wickets": p.stats.wickets} for p in board])
    if not df.empty:
        fig = px.bar(df, x="Player", y="Wickets", template=TEMPLATE, title="Top 3 by Wickets")
        st.plotly_chart(fig, use_container_width=True)

if matches:
    recent = matches[0]
    st.markdown("### 🕑 Most Recent Match")
    st.write(f"{recent.date} vs **{recent.opponent}** at {recent.venue}: {result_badge(recent.result)}")
    for perf in recent.performances[:2]:
        st.caption(f"{perf.player_name}: {perf.runs} runs, {perf.wickets} wickets")
