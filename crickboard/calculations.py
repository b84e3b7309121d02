# crickboard/calculations.py
# Statistics engine: pure reducers over player and match records.
#
# Nothing here touches the store. Callers pass validated records from
# crickboard.models; every function returns a plain value and never raises
# on empty or zero inputs.

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from crickboard import config
from crickboard.models import (
    STAT_FIELDS,
    Match,
    MatchResult,
    Performance,
    Player,
    PlayerStats,
    Standing,
    TournamentMatch,
    classify_result,
    exact_result,
    to_number,
)

LEADERBOARD_SIZE = 5
TREND_WINDOW = 5


def _num(x) -> float:
    return 0 if x is None else x


def round_half_up(value: float, places: int = 2):
    """Round half-up (not banker's) and return a number, never a string."""
    q = Decimal(1).scaleb(-places)
    d = Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP)
    return int(d) if places == 0 else float(d)


def round2(value: float) -> float:
    return round_half_up(value, 2)


# ------------------------ Batting ------------------------
def strike_rate(runs, balls) -> float:
    runs, balls = _num(runs), _num(balls)
    if balls == 0:
        return 0
    return round2(runs / balls * 100)


def batting_average(runs, matches) -> float:
    runs, matches = _num(runs), _num(matches)
    if matches == 0:
        return 0
    return round2(runs / matches)


# ------------------------ Bowling ------------------------
def bowling_average(runs_conceded, wickets) -> float:
    runs_conceded, wickets = _num(runs_conceded), _num(wickets)
    if wickets == 0:
        return 0
    return round2(runs_conceded / wickets)


def economy_rate(runs_conceded, overs) -> float:
    runs_conceded, overs = _num(runs_conceded), _num(overs)
    if overs == 0:
        return 0
    return round2(runs_conceded / overs)


def bowling_strike_rate(balls, wickets) -> float:
    balls, wickets = _num(balls), _num(wickets)
    if wickets == 0:
        return 0
    return round2(balls / wickets)


def career_stats(stats: Optional[PlayerStats]) -> Dict[str, float]:
    s = stats or PlayerStats()
    return {
        "strike_rate": strike_rate(s.runs, s.balls),
        "batting_average": batting_average(s.runs, s.matches),
        "bowling_average": bowling_average(s.runs_conceded, s.wickets),
        "economy_rate": economy_rate(s.runs_conceded, s.overs),
        "bowling_strike_rate": bowling_strike_rate(s.balls, s.wickets),
    }


# --------------------- Career updates --------------------
def _block(match_stats: Optional[Mapping], name: str) -> Mapping:
    block = (match_stats or {}).get(name)
    return block if isinstance(block, Mapping) else {}


def update_player_stats(current, match_stats: Optional[Mapping]) -> PlayerStats:
    """Fold one match's batting/bowling/fielding blocks into career stats.

    ``current`` may be a PlayerStats, a mapping or None. Absent blocks and
    fields add nothing; ``matches`` always goes up by one.
    """
    if isinstance(current, PlayerStats):
        base = current
    else:
        base = PlayerStats.model_validate(current or {})

    batting = _block(match_stats, "batting")
    bowling = _block(match_stats, "bowling")
    fielding = _block(match_stats, "fielding")

    return PlayerStats(
        matches=base.matches + 1,
        runs=base.runs + to_number(batting.get("runs")),
        balls=base.balls + to_number(batting.get("balls")),
        fours=base.fours + to_number(batting.get("fours")),
        sixes=base.sixes + to_number(batting.get("sixes")),
        wickets=base.wickets + to_number(bowling.get("wickets")),
        overs=base.overs + to_number(bowling.get("overs")),
        runs_conceded=base.runs_conceded + to_number(bowling.get("runs")),
        maidens=base.maidens + to_number(bowling.get("maidens")),
        catches=base.catches + to_number(fielding.get("catches")),
        stumpings=base.stumpings + to_number(fielding.get("stumpings")),
        run_outs=base.run_outs + to_number(fielding.get("runOuts")),
    )


def performance_contribution(perf: Performance) -> Dict[str, Dict[str, float]]:
    """Reshape a flat match performance into the nested blocks update_player_stats reads."""
    return {
        "batting": {"runs": perf.runs, "balls": perf.balls, "fours": perf.fours, "sixes": perf.sixes},
        "bowling": {
            "wickets": perf.wickets,
            "overs": perf.overs,
            "runs": perf.runs_conceded,
            "maidens": perf.maidens,
        },
        "fielding": {"catches": perf.catches, "stumpings": perf.stumpings, "runOuts": perf.run_outs},
    }


# ---------------------- Leaderboards ---------------------
def leaderboard(players: Iterable[Player], metric: str, limit: int = LEADERBOARD_SIZE) -> List[Player]:
    """Top `limit` players by `metric`, which may be any PlayerStats field (STAT_FIELDS).

    The pages use runs, wickets and catches. Ties keep input order.
    """
    if metric not in STAT_FIELDS:
        raise ValueError(f"unknown stat: {metric}")
    ranked = [p for p in players if p is not None and p.stats is not None]
    # sorted() is stable and works on a copy
    ranked = sorted(ranked, key=lambda p: getattr(p.stats, metric), reverse=True)
    return ranked[:limit]


def top_performers(players: Sequence[Player]) -> Dict[str, Optional[Player]]:
    def first(metric):
        board = leaderboard(players, metric, limit=1)
        return board[0] if board else None

    return {
        "batsman": first("runs"),
        "bowler": first("wickets"),
        "fielder": first("catches"),
    }


def filter_players(players: Iterable[Player], query: str = "", role: str = "All") -> List[Player]:
    q = (query or "").strip().lower()
    out = [p for p in players if p.name]
    if q:
        out = [p for p in out if q in p.name.lower()]
    if role and role != "All":
        out = [p for p in out if p.role == role]
    return sorted(out, key=lambda p: p.name.lower())


def player_match_history(player_id: str, matches: Iterable[Match]) -> List[dict]:
    history = []
    for m in matches:
        perf = next((p for p in m.performances if p.player_id == player_id), None)
        if perf is None:
            continue
        history.append({
            "id": m.id,
            "date": m.date,
            "opponent": m.opponent,
            "result": m.result,
            "performance": perf,
        })
    return history


def man_of_the_match(match: Match) -> Optional[Performance]:
    best = None
    for perf in match.performances:
        if best is None or perf.runs + perf.wickets * 20 > best.runs + best.wickets * 20:
            best = perf
    return best


# ---------------------- Match trends ---------------------
@dataclass
class TrendSeries:
    labels: List[str] = field(default_factory=list)
    values: List[float] = field(default_factory=list)


def match_runs(match: Match) -> int:
    return sum(p.runs for p in match.performances)


def match_overs(match: Match) -> float:
    return sum(p.overs for p in match.performances)


def match_extras(match: Match) -> int:
    return match.wides + match.no_balls


def _latest(matches: Iterable[Match]) -> List[Match]:
    ordered = sorted(matches, key=lambda m: m.date)
    return ordered[-TREND_WINDOW:]


def _series(values: List[float]) -> TrendSeries:
    return TrendSeries(labels=[f"M{i}" for i in range(1, len(values) + 1)], values=values)


def runs_trend(matches: Iterable[Match]) -> TrendSeries:
    return _series([match_runs(m) for m in _latest(matches)])


def run_rate(match: Match) -> float:
    overs = match_overs(match)
    if overs == 0:
        return 0
    return round2((match_runs(match) + match_extras(match)) / overs)


def run_rate_trend(matches: Iterable[Match]) -> TrendSeries:
    return _series([run_rate(m) for m in _latest(matches)])


def extras_ratio(matches: Iterable[Match]) -> float:
    """Share of all runs (extras included) that came from wides and no-balls."""
    total_extras = 0
    total_runs = 0
    for m in matches:
        total_extras += match_extras(m)
        total_runs += match_runs(m)
    total_runs += total_extras
    if total_runs == 0:
        return 0
    return round_half_up(total_extras / total_runs, 4)


# ----------------- Win rate & summaries ------------------
def is_win(match) -> bool:
    if isinstance(match, Mapping):
        result = match.get("result")
    else:
        result = getattr(match, "result", None)
    return classify_result(result) is MatchResult.WIN


def win_rate(matches: Sequence[Match]) -> int:
    total = len(matches)
    if total == 0:
        return 0
    wins = sum(1 for m in matches if is_win(m))
    return round_half_up(wins / total * 100, 0)


RESULT_FILTERS = ("ALL", "WIN", "LOSS", "DRAW")


def filter_matches_by_result(matches: Iterable[Match], result_filter: str = "ALL") -> List[Match]:
    key = (result_filter or "ALL").upper()
    if key == "ALL":
        return list(matches)
    if key not in RESULT_FILTERS:
        raise ValueError(f"unknown result filter: {result_filter}")
    wanted = MatchResult[key]
    return [m for m in matches if classify_result(m.result) is wanted]


def match_totals(matches: Iterable[Match]) -> Dict[str, int]:
    """Runs and wickets as recorded on the match sheets."""
    runs = wickets = count = 0
    for m in matches:
        count += 1
        runs += match_runs(m)
        wickets += sum(p.wickets for p in m.performances)
    return {"total_matches": count, "total_runs": runs, "total_wickets": wickets}


def team_summary(players: Sequence[Player], matches: Sequence[Match]) -> Dict[str, float]:
    """Headline numbers for the dashboard.

    Runs and wickets here are sums of player career stats, not of match sheets;
    see match_totals for the other view. The two are not reconciled.
    """
    total_runs = sum(p.stats.runs for p in players)
    total_wickets = sum(p.stats.wickets for p in players)
    total_balls = sum(p.stats.balls for p in players)
    total_overs = sum(p.stats.overs for p in players)
    total_conceded = sum(p.stats.runs_conceded for p in players)
    played = len(matches)
    return {
        "total_runs": total_runs,
        "total_wickets": total_wickets,
        "strike_rate": strike_rate(total_runs, total_balls),
        "economy": economy_rate(total_conceded, total_overs),
        "win_rate": win_rate(matches),
        "avg_runs": round_half_up(total_runs / played, 0) if played else 0,
        "matches_played": played,
    }


# ------------------ Tournament standings -----------------
def compute_standings(matches: Iterable[TournamentMatch], default_team: Optional[str] = None) -> List[Standing]:
    """League table from fixture results. Only exact Win/Loss decide a fixture; anything else is a draw."""
    placeholder = default_team or config.team_name()
    table: Dict[str, Standing] = {}

    def row(team: str) -> Standing:
        if team not in table:
            table[team] = Standing(team=team)
        return table[team]

    for m in matches:
        home = row(m.team1 or placeholder)
        away = row(m.opponent)
        home.played += 1
        away.played += 1
        result = exact_result(m.result)
        if result is MatchResult.WIN:
            winner, loser = home, away
        elif result is MatchResult.LOSS:
            winner, loser = away, home
        else:
            home.draw += 1
            away.draw += 1
            home.points += 1
            away.points += 1
            continue
        winner.won += 1
        winner.points += 2
        loser.lost += 1

    ordered = sorted(table.values(), key=lambda s: (-s.points, -s.won, s.lost))
    for i, s in enumerate(ordered, start=1):
        s.position = i
    return ordered
