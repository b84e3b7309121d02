# Overview and about the project page

import streamlit as st

st.title("📓 CrickBoard: team records and season insights")

st.markdown("""
    Welcome to **CrickBoard**, a scorebook for amateur cricket teams  
    built with Streamlit, SQLite and plotly.

    ### 🎯 What it does
            
    - 👥 Keep a squad list with career batting, bowling and fielding numbers  
    - 📋 Record matches with per-player performances and extras  
    - 📊 Leaderboards, run-rate trends and win rate  
    - 🏆 Tournament tables built from recorded results  
    - 🎉 A shared Victory Wall for celebrating wins  

    ### 📐 How the numbers are worked out
            
    - **Strike rate**: runs per 100 balls faced  
    - **Batting average**: runs per match played  
    - **Bowling average**: runs conceded per wicket  
    - **Economy**: runs conceded per over  
    - **Standings**: 2 points for a win, 1 for a draw; ties broken by wins, then fewer losses

    ### 📍 Navigation
            
    Sign in on the main page, then use the sidebar to open the other pages.
            """)
