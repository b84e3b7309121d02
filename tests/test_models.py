# tests/test_models.py
from datetime import date

import pytest
from pydantic import ValidationError

from crickboard.models import (
    Match,
    MatchResult,
    Performance,
    Player,
    PlayerStats,
    Tournament,
    TournamentMatch,
    classify_result,
    exact_result,
    to_number,
)


@pytest.mark.parametrize("text,expected", [
    ("Win", MatchResult.WIN),
    ("win", MatchResult.WIN),
    ("Loss", MatchResult.LOSS),
    ("Draw", MatchResult.DRAW),
    ("We won again", MatchResult.WIN),
    ("Won by 5 wickets", MatchResult.WIN),
    ("We lost but had a win moment", MatchResult.LOSS),
    ("Tied", MatchResult.DRAW),
    ("", MatchResult.DRAW),
    (None, MatchResult.DRAW),
    (MatchResult.LOSS, MatchResult.LOSS),
])
def test_classify_result(text, expected):
    assert classify_result(text) is expected


@pytest.mark.parametrize("text,expected", [
    ("Win", MatchResult.WIN),
    (" Loss ", MatchResult.LOSS),
    ("Draw", MatchResult.DRAW),
    ("win", MatchResult.DRAW),
    ("We won again", MatchResult.DRAW),
    ("lost on DLS", MatchResult.DRAW),
    (None, MatchResult.DRAW),
    (MatchResult.WIN, MatchResult.WIN),
])
def test_exact_result(text, expected):
    assert exact_result(text) is expected


def test_fixture_result_only_accepts_exact_names():
    assert TournamentMatch(tournament_id="t1", opponent="B", result="Win").result is MatchResult.WIN
    assert TournamentMatch(tournament_id="t1", opponent="B", result="We won").result is MatchResult.DRAW


@pytest.mark.parametrize("raw,expected", [
    (None, 0), ("", 0), ("abc", 0), ("12", 12.0), (" 3.5 ", 3.5), ("1,200", 1200.0), (7, 7), (True, 0),
])
def test_to_number(raw, expected):
    assert to_number(raw) == expected


def test_performance_coerces_form_text():
    perf = Performance(playerId="p1", playerName="Amy", runs="12", overs="3.4", balls="abc", runsConceded=None)
    assert perf.runs == 12
    assert perf.overs == 3.4
    assert perf.balls == 0
    assert perf.runs_conceded == 0
    assert perf.model_dump(by_alias=True)["runsConceded"] == 0


def test_negative_stats_are_rejected():
    with pytest.raises(ValidationError):
        PlayerStats(runs=-1)


def test_player_defaults_and_aliases():
    p = Player.model_validate({"name": "  Dev  ", "stats": {"runsConceded": 5, "runOuts": "2"}})
    assert p.name == "Dev"
    assert p.role == "Batsman"
    assert p.stats.runs_conceded == 5
    assert p.stats.run_outs == 2
    assert p.stats.matches == 0
    assert p.id and p.created_at


def test_player_without_stats_gets_zeroes():
    p = Player(name="Sam", stats=None)
    assert p.stats == PlayerStats()


def test_player_role_is_closed():
    with pytest.raises(ValidationError):
        Player(name="Sam", role="Coach")


def test_match_defaults():
    m = Match()
    assert m.opponent == "Friendly Fixture"
    assert m.venue == "Home Ground"
    assert m.result is MatchResult.WIN
    assert m.wides == 0 and m.no_balls == 0
    assert m.performances == []


def test_match_normalizes_date_and_result():
    m = Match(date=date(2025, 1, 2), result="we lost", opponent="  ", noBalls="3")
    assert m.date == "2025-01-02"
    assert m.result is MatchResult.LOSS
    assert m.opponent == "Friendly Fixture"
    assert m.no_balls == 3


def test_match_rejects_duplicate_players():
    with pytest.raises(ValidationError):
        Match(performances=[
            {"player_id": "p1", "runs": 3},
            {"player_id": "p1", "runs": 5},
        ])


def test_tournament_limits():
    t = Tournament(name="Cup")
    assert (t.format, t.teams, t.matches, t.status) == ("round-robin", 4, 0, "upcoming")
    with pytest.raises(ValidationError):
        Tournament(name="Cup", format="swiss")
