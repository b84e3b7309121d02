# tests/test_calculations.py
import pytest

from crickboard import calculations as calc
from crickboard.models import Match, MatchResult, Performance, Player, PlayerStats, TournamentMatch


def _player(name, **stats):
    return Player(name=name, stats=PlayerStats(**stats))


def _match(date, runs=(), overs=(), wides=0, no_balls=0, result="Win"):
    perfs = [
        Performance(player_id=f"p{i}", player_name=f"P{i}", runs=r, overs=o)
        for i, (r, o) in enumerate(zip(runs, overs or [0] * len(runs)))
    ]
    return Match(date=date, result=result, wides=wides, no_balls=no_balls, performances=perfs)


# ------------------------ formulas ------------------------
@pytest.mark.parametrize("runs", [0, 1, 57, 400])
def test_strike_rate_is_zero_without_balls(runs):
    assert calc.strike_rate(runs, 0) == 0


def test_rate_formulas():
    assert calc.strike_rate(50, 40) == 125.0
    assert calc.batting_average(100, 3) == 33.33
    assert calc.bowling_average(100, 3) == 33.33
    assert calc.economy_rate(25, 4) == 6.25
    assert calc.bowling_strike_rate(60, 4) == 15.0


def test_rates_are_numbers_not_strings():
    value = calc.batting_average(10, 3)
    assert isinstance(value, float)
    assert value == 3.33


@pytest.mark.parametrize("value", [0, 1, 99])
def test_wicketless_bowling_rates_are_zero(value):
    assert calc.bowling_average(value, 0) == 0
    assert calc.bowling_strike_rate(value, 0) == 0


def test_zero_denominators_and_missing_inputs():
    assert calc.batting_average(30, 0) == 0
    assert calc.economy_rate(30, 0) == 0
    assert calc.strike_rate(None, 10) == 0
    assert calc.economy_rate(12, None) == 0


def test_rounding_is_half_up():
    assert calc.round2(1.005) == 1.01
    assert calc.round2(2.675) == 2.68
    assert calc.round_half_up(66.5, 0) == 67
    assert calc.round_half_up(0.5, 0) == 1


def test_career_stats_bundle():
    stats = PlayerStats(matches=4, runs=120, balls=100, wickets=5, overs=10, runs_conceded=60)
    assert calc.career_stats(stats) == {
        "strike_rate": 120.0,
        "batting_average": 30.0,
        "bowling_average": 12.0,
        "economy_rate": 6.0,
        "bowling_strike_rate": 20.0,
    }
    assert calc.career_stats(None)["strike_rate"] == 0


# ------------------------ career updates ------------------------
def test_update_with_empty_match_only_bumps_matches():
    current = PlayerStats(matches=2, runs=40, balls=30, wickets=3, overs=6.0, catches=1)
    updated = calc.update_player_stats(current, {})
    assert updated.model_dump() == {**current.model_dump(), "matches": 3}


def test_update_sums_every_block():
    current = PlayerStats(matches=1, runs=10, balls=8, wickets=1, overs=2, runs_conceded=12)
    updated = calc.update_player_stats(current, {
        "batting": {"runs": 25, "balls": 20, "fours": 3, "sixes": 1},
        "bowling": {"wickets": 2, "overs": 4, "runs": 18, "maidens": 1},
        "fielding": {"catches": 2, "stumpings": 1, "runOuts": 1},
    })
    assert updated.matches == 2
    assert updated.runs == 35
    assert updated.balls == 28
    assert updated.fours == 3
    assert updated.sixes == 1
    assert updated.wickets == 3
    assert updated.overs == 6
    assert updated.runs_conceded == 30
    assert updated.maidens == 1
    assert (updated.catches, updated.stumpings, updated.run_outs) == (2, 1, 1)


def test_update_tolerates_missing_current_and_partial_blocks():
    updated = calc.update_player_stats(None, {"batting": {"runs": "12"}, "bowling": None})
    assert updated.matches == 1
    assert updated.runs == 12
    assert updated.wickets == 0


def test_update_does_not_mutate_current():
    current = PlayerStats(runs=5)
    calc.update_player_stats(current, {"batting": {"runs": 10}})
    assert current.runs == 5


def test_performance_contribution_feeds_update():
    perf = Performance(player_id="p1", runs=30, balls=20, wickets=2, overs=4, runs_conceded=22, catches=1)
    updated = calc.update_player_stats(PlayerStats(), calc.performance_contribution(perf))
    assert (updated.runs, updated.wickets, updated.runs_conceded, updated.catches) == (30, 2, 22, 1)


# ------------------------ leaderboards ------------------------
def test_leaderboard_sorts_descending_without_mutating_input():
    players = [_player("A", runs=10), _player("B", runs=30), _player("C", runs=20)]
    board = calc.leaderboard(players, "runs")
    assert [p.stats.runs for p in board] == [30, 20, 10]
    assert [p.name for p in players] == ["A", "B", "C"]


def test_leaderboard_ties_keep_input_order_and_truncates():
    players = [_player(f"P{i}", wickets=w) for i, w in enumerate([3, 5, 3, 1, 5, 0, 2])]
    board = calc.leaderboard(players, "wickets")
    assert [p.name for p in board] == ["P1", "P4", "P0", "P2", "P6"]


def test_leaderboard_rejects_unknown_metric():
    with pytest.raises(ValueError):
        calc.leaderboard([], "goals")


def test_top_performers():
    players = [_player("A", runs=10, catches=4), _player("B", runs=30, wickets=2)]
    top = calc.top_performers(players)
    assert top["batsman"].name == "B"
    assert top["bowler"].name == "B"
    assert top["fielder"].name == "A"
    assert calc.top_performers([]) == {"batsman": None, "bowler": None, "fielder": None}


def test_filter_players_by_name_and_role():
    players = [
        Player(name="Zed Khan", role="Bowler"),
        Player(name="amy Lee", role="Batsman"),
        Player(name="Kane Roy", role="Batsman"),
    ]
    assert [p.name for p in calc.filter_players(players)] == ["amy Lee", "Kane Roy", "Zed Khan"]
    assert [p.name for p in calc.filter_players(players, "AN")] == ["Kane Roy", "Zed Khan"]
    assert [p.name for p in calc.filter_players(players, role="Batsman")] == ["amy Lee", "Kane Roy"]


def test_player_match_history_and_man_of_the_match():
    m = Match(opponent="X", performances=[
        Performance(player_id="a", player_name="A", runs=40, wickets=0),
        Performance(player_id="b", player_name="B", runs=5, wickets=2),
        Performance(player_id="c", player_name="C", runs=45, wickets=0),
    ])
    other = Match(opponent="Y", performances=[Performance(player_id="c", runs=1)])
    history = calc.player_match_history("b", [m, other])
    assert len(history) == 1
    assert history[0]["opponent"] == "X"
    assert history[0]["performance"].wickets == 2
    assert calc.man_of_the_match(m).player_id == "b"
    assert calc.man_of_the_match(Match()) is None


# ------------------------ trends ------------------------
def test_trends_empty():
    assert calc.runs_trend([]) == calc.TrendSeries([], [])
    assert calc.run_rate_trend([]) == calc.TrendSeries([], [])
    assert calc.extras_ratio([]) == 0


@pytest.mark.parametrize("count", [1, 2, 3, 4, 5])
def test_trend_labels_align_with_values(count):
    matches = [_match(f"2025-01-{i + 1:02d}", runs=[10 * (i + 1)], overs=[2]) for i in range(count)]
    series = calc.runs_trend(matches)
    assert series.labels == [f"M{i}" for i in range(1, count + 1)]
    assert len(series.values) == count


def test_trend_uses_last_five_by_date():
    matches = [_match(f"2025-02-{d:02d}", runs=[d]) for d in (7, 1, 3, 6, 2, 5, 4)]
    series = calc.runs_trend(matches)
    assert series.values == [3, 4, 5, 6, 7]
    assert series.labels == ["M1", "M2", "M3", "M4", "M5"]


def test_run_rate_counts_extras_and_guards_zero_overs():
    m = _match("2025-03-01", runs=[30, 10], overs=[3, 2], wides=3, no_balls=2)
    assert calc.run_rate(m) == 9.0
    assert calc.run_rate(_match("2025-03-02", runs=[30], overs=[0])) == 0
    assert calc.run_rate_trend([m]).values == [9.0]


def test_extras_ratio_over_all_matches():
    matches = [
        _match("2025-01-01", runs=[60], wides=4, no_balls=2),
        _match("2025-01-02", runs=[40], wides=3, no_balls=1),
    ]
    assert calc.extras_ratio(matches) == 0.0909
    assert calc.extras_ratio([_match("2025-01-03")]) == 0


# ------------------------ win rate & summaries ------------------------
def test_win_rate_counts_wins_by_result():
    matches = [Match(result="Win"), Match(result="Loss"), Match(result="We won again")]
    assert calc.win_rate(matches) == 67
    assert calc.win_rate([]) == 0


def test_win_rate_accepts_plain_records():
    assert calc.win_rate([{"result": "Win"}, {"result": "Draw"}]) == 50


def test_filter_matches_by_result():
    matches = [Match(result="Win"), Match(result="Loss"), Match(result="Draw"), Match(result="Win")]
    assert len(calc.filter_matches_by_result(matches, "ALL")) == 4
    assert len(calc.filter_matches_by_result(matches, "win")) == 2
    assert [m.result for m in calc.filter_matches_by_result(matches, "LOSS")] == [MatchResult.LOSS]
    with pytest.raises(ValueError):
        calc.filter_matches_by_result(matches, "ABANDONED")


def test_player_sums_and_match_sums_stay_separate():
    players = [_player("A", runs=100, balls=80, wickets=2, overs=4, runs_conceded=30)]
    matches = [_match("2025-01-01", runs=[20, 15], result="Win"), _match("2025-01-02", runs=[5], result="Loss")]
    summary = calc.team_summary(players, matches)
    assert summary["total_runs"] == 100
    assert summary["total_wickets"] == 2
    assert summary["strike_rate"] == 125.0
    assert summary["economy"] == 7.5
    assert summary["win_rate"] == 50
    assert summary["avg_runs"] == 50
    assert summary["matches_played"] == 2
    assert calc.match_totals(matches) == {"total_matches": 2, "total_runs": 40, "total_wickets": 0}


def test_team_summary_with_nothing():
    summary = calc.team_summary([], [])
    assert summary["win_rate"] == 0
    assert summary["avg_runs"] == 0
    assert summary["strike_rate"] == 0


# ------------------------ standings ------------------------
def _fixture(team1, opponent, result):
    return TournamentMatch(tournament_id="t1", team1=team1, opponent=opponent, result=result)


def test_standings_win_and_draw():
    table = calc.compute_standings([_fixture("A", "B", "Win"), _fixture("A", "B", "Draw")])
    a, b = table
    assert (a.team, a.played, a.won, a.lost, a.draw, a.points, a.position) == ("A", 2, 1, 0, 1, 3, 1)
    assert (b.team, b.played, b.won, b.lost, b.draw, b.points, b.position) == ("B", 2, 0, 1, 1, 1, 2)


def test_standings_loss_credits_opponent():
    table = calc.compute_standings([_fixture("A", "B", "Loss")])
    assert [s.team for s in table] == ["B", "A"]
    assert table[0].won == 1 and table[0].points == 2
    assert table[1].lost == 1 and table[1].points == 0


def test_standings_tiebreaks_on_wins_then_losses():
    fixtures = [
        _fixture("A", "B", "Win"),   # A 2pts
        _fixture("C", "D", "Draw"),  # C 1, D 1
        _fixture("C", "E", "Draw"),  # C 2, E 1
        _fixture("D", "E", "Draw"),  # D 2, E 2
    ]
    table = calc.compute_standings(fixtures)
    assert [s.team for s in table][:4] == ["A", "C", "D", "E"]
    assert [s.position for s in table] == [1, 2, 3, 4, 5]
    assert table[-1].team == "B"


def test_standings_empty_and_placeholder_team(monkeypatch):
    monkeypatch.delenv("CRICKBOARD_TEAM_NAME", raising=False)
    assert calc.compute_standings([]) == []
    table = calc.compute_standings([_fixture(None, "B", "Win")], default_team="Us")
    assert table[0].team == "Us"
    table = calc.compute_standings([_fixture(None, "B", "Win")])
    assert table[0].team == "Home Team"


@pytest.mark.parametrize("text", ["We won", "win", "lost on DLS", "WIN", ""])
def test_standings_count_free_text_results_as_draws(text):
    table = calc.compute_standings([_fixture("A", "B", text)])
    for s in table:
        assert (s.played, s.won, s.lost, s.draw, s.points) == (1, 0, 0, 1, 1)


def test_leaderboard_accepts_any_stat_field():
    players = [_player("A", maidens=1), _player("B", maidens=3)]
    assert [p.name for p in calc.leaderboard(players, "maidens")] == ["B", "A"]
