# tests/test_app.py
from pathlib import Path

import pytest

from crickboard import auth, storage

testing = pytest.importorskip("streamlit.testing.v1")

APP = str(Path(__file__).resolve().parent.parent / "app.py")
PAGES = Path(__file__).resolve().parent.parent / "pages"


def test_app_shows_login_when_signed_out(db):
    at = testing.AppTest.from_file(APP)
    at.run(timeout=30)
    assert not at.exception
    assert at.title[0].value == "🏏 CrickBoard"
    assert len(at.metric) == 0


def test_app_shows_dashboard_for_signed_in_user(db):
    user = auth.register("coach@example.com", "secret1", "Pat")
    storage.seed_demo_data_if_empty(user.id)

    at = testing.AppTest.from_file(APP)
    at.session_state["user"] = user
    at.run(timeout=30)
    assert not at.exception
    assert len(at.metric) >= 7
    labels = [m.label for m in at.metric]
    assert "Win Rate" in labels


def test_players_with_the_same_name_are_all_selectable(db):
    user = auth.register("coach@example.com", "secret1", "Pat")
    first = storage.add_player(user.id, {"name": "Amy", "role": "Batsman"})
    second = storage.add_player(user.id, {"name": "Amy", "role": "Batsman"})

    at = testing.AppTest.from_file(str(PAGES / "players.py"))
    at.session_state["user"] = user
    at.run(timeout=30)
    at.selectbox(key="player_operation").select("Delete").run(timeout=30)
    assert not at.exception

    assert len(at.selectbox(key="delete_pick").options) == 2
    assert {p.id for p in storage.get_players(user.id)} == {first.id, second.id}


def test_matches_with_the_same_label_are_all_selectable(db):
    user = auth.register("coach@example.com", "secret1", "Pat")
    for _ in range(2):
        storage.add_match(user.id, {"date": "2025-05-01", "opponent": "Hillside", "result": "Win"})

    at = testing.AppTest.from_file(str(PAGES / "matches.py"))
    at.session_state["user"] = user
    at.run(timeout=30)
    at.selectbox(key="match_operation").select("Delete").run(timeout=30)
    assert not at.exception
    assert len(at.selectbox(key="delete_match").options) == 2
