# pages/insights.py
# Leaderboards, match trends and season snapshot

import pandas as pd
import plotly.express as px
import streamlit as st

from crickboard import calculations, storage
from crickboard.ui import TEMPLATE, require_user

st.set_page_config(page_title="Insights", page_icon="📊", layout="wide")


# =============================================================================
# Page entry
# =============================================================================
def show_insights(user_id: str):
    st.markdown("# 📊 Insights")
    players = storage.get_players(user_id)
    matches = storage.get_matches(user_id)

    if not players:
        st.info("No players yet. Add players and record matches to unlock insights.")
        return

    show_snapshot(players, matches)

    tab1, tab2, tab3 = st.tabs(["🏆 Leaderboards", "📈 Match Trends", "🧮 Two Views of the Season"])
    with tab1:
        show_leaderboards(players)
    with tab2:
        show_trends(matches)
    with tab3:
        show_totals(players, matches)


# ------------------------ Snapshot ------------------------
def show_snapshot(players, matches):
    summary = calculations.team_summary(players, matches)
    st.markdown("## Season Snapshot")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Runs", summary["total_runs"])
    c2.metric("Wickets", summary["total_wickets"])
    c3.metric("Strike Rate", summary["strike_rate"])
    c4.metric("Economy", summary["economy"])


# ---------------------- Leaderboards ----------------------
LEADERBOARDS = [
    ("runs", "Top Run Scorers", "viridis"),
    ("wickets", "Top Wicket Takers", "plasma"),
    ("catches", "Top Fielders", "blues"),
]


def show_leaderboards(players):
    cols = st.columns(len(LEADERBOARDS))
    for col, (metric, title, scale) in zip(cols, LEADERBOARDS):
        board = calculations.leaderboard(players, metric)
        with col:
            st.markdown(f"### {title}")
            if not board:
                st.info("No data.")
                continue
            df = pd.DataFrame([
                {"Player": p.name, metric.title(): getattr(p.stats, metric), "Matches": p.stats.matches}
                for p in board
            ])
            st.dataframe(df, use_container_width=True, hide_index=True)
            fig = px.bar(
                df,
                x="Player",
                y=metric.title(),
                color=metric.title(),
                template=TEMPLATE,
                color_continuous_scale=scale,
            )
            fig.update_layout(xaxis_tickangle=-45, showlegend=False)
            st.plotly_chart(fig, use_container_width=True)


# ----------------------- Trends ---------------------------
def show_trends(matches):
    if not matches:
        st.info("Record matches to see trends.")
        return

    runs = calculations.runs_trend(matches)
    rates = calculations.run_rate_trend(matches)

    c1, c2 = st.columns(2)
    with c1:
        fig = px.line(
            pd.DataFrame({"Match": runs.labels, "Runs": runs.values}),
            x="Match", y="Runs", markers=True, template=TEMPLATE,
            title="Runs in the Last 5 Matches",
        )
        st.plotly_chart(fig, use_container_width=True)
    with c2:
        fig = px.line(
            pd.DataFrame({"Match": rates.labels, "Run Rate": rates.values}),
            x="Match", y="Run Rate", markers=True, template=TEMPLATE,
            title="Run Rate in the Last 5 Matches",
        )
        st.plotly_chart(fig, use_container_width=True)

    ratio = calculations.extras_ratio(matches)
    st.metric("Extras share of all runs", f"{ratio * 100:.2f}%")


# ----------------------- Totals ---------------------------
def show_totals(players, matches):
    st.markdown(
        """
        Career totals come from each player's profile; match totals are summed
        from recorded match sheets. Manual profile edits can make them differ.
        """
    )
    summary = calculations.team_summary(players, matches)
    sheets = calculations.match_totals(matches)
    df = pd.DataFrame([
        {"Source": "Player profiles", "Runs": summary["total_runs"], "Wickets": summary["total_wickets"]},
        {"Source": "Match sheets", "Runs": sheets["total_runs"], "Wickets": sheets["total_wickets"]},
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)


user = require_user()
show_insights(user.id)
