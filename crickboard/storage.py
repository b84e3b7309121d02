# crickboard/storage.py
# Data access for players, matches, victory posts and tournaments.
#
# Every call takes the acting user's id explicitly. Reads return validated
# models and fall back to [] on any store error; writes log failures and
# return None/False instead of raising.

import sqlite3
from contextlib import contextmanager
from typing import List, Optional, Tuple

from pydantic import ValidationError

from crickboard.app_logger import get_logger
from crickboard.calculations import performance_contribution, update_player_stats
from crickboard.db_connection import STAT_COLUMNS, get_conn, insert_rows
from crickboard.models import (
    Match,
    Player,
    PlayerStats,
    Tournament,
    TournamentMatch,
    VictoryPost,
    now_iso,
)

log = get_logger("storage")

STAT_NAMES = [c for c, _ in STAT_COLUMNS]
STORE_ERRORS = (sqlite3.Error, ValidationError)


# ----------------- DB helpers -----------------
def run_query(sql: str, params: Tuple = (), fetch: bool = False):
    """Execute a SQL statement using a fresh connection."""
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(sql, params)
        rows = cur.fetchall() if fetch else None
        conn.commit()
        return rows
    finally:
        conn.close()


@contextmanager
def transaction():
    conn = get_conn()
    try:
        yield conn.cursor()
        conn.commit()
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


def _as(model, obj):
    return obj if isinstance(obj, model) else model.model_validate(obj)


# ----------------- row mapping -----------------
def _player_from_row(row) -> Player:
    data = dict(row)
    data["stats"] = {k: data.pop(k, 0) for k in STAT_NAMES}
    return Player.model_validate(data)


def _player_row(user_id: str, p: Player) -> dict:
    row = {
        "id": p.id,
        "user_id": user_id,
        "name": p.name,
        "role": p.role,
        "team": p.team,
        "created_at": p.created_at,
        "updated_at": p.updated_at,
    }
    row.update(p.stats.model_dump())
    return row


def _perf_rows(m: Match) -> List[dict]:
    rows = []
    for perf in m.performances:
        row = perf.model_dump()
        row["match_id"] = m.id
        rows.append(row)
    return rows


def _stats_update(cur, user_id: str, player_id: str, stats: PlayerStats) -> int:
    set_clause = ", ".join(f"{c}=?" for c in STAT_NAMES)
    values = tuple(getattr(stats, c) for c in STAT_NAMES)
    cur.execute(
        f"UPDATE players SET {set_clause}, updated_at=? WHERE id=? AND user_id=?",
        values + (now_iso(), player_id, user_id),
    )
    return cur.rowcount


# ----------------- players -----------------
def get_players(user_id: str) -> List[Player]:
    try:
        rows = run_query(
            "SELECT * FROM players WHERE user_id=? ORDER BY name COLLATE NOCASE",
            (user_id,),
            fetch=True,
        )
        return [_player_from_row(r) for r in rows]
    except STORE_ERRORS:
        log.exception("Error getting players")
        return []


def get_player(user_id: str, player_id: str) -> Optional[Player]:
    return next((p for p in get_players(user_id) if p.id == player_id), None)


def add_player(user_id: str, player) -> Optional[Player]:
    try:
        p = _as(Player, player)
        with transaction() as cur:
            insert_rows(cur, "players", [_player_row(user_id, p)])
        log.info("Added player %s (%s)", p.name, p.id)
        return p
    except STORE_ERRORS:
        log.exception("Error adding player")
        return None


def update_player(user_id: str, player) -> bool:
    """Replace the stored player wholesale; no field-level merge."""
    try:
        p = _as(Player, player).model_copy(update={"updated_at": now_iso()})
        row = _player_row(user_id, p)
        cols = [c for c in row if c not in ("id", "user_id", "created_at")]
        set_clause = ", ".join(f"{c}=?" for c in cols)
        with transaction() as cur:
            cur.execute(
                f"UPDATE players SET {set_clause} WHERE id=? AND user_id=?",
                tuple(row[c] for c in cols) + (p.id, user_id),
            )
            updated = cur.rowcount
        if not updated:
            log.warning("Player %s not found for update", p.id)
        return bool(updated)
    except STORE_ERRORS:
        log.exception("Error updating player")
        return False


def delete_player(user_id: str, player_id: str) -> bool:
    try:
        with transaction() as cur:
            cur.execute("DELETE FROM players WHERE id=? AND user_id=?", (player_id, user_id))
            return cur.rowcount > 0
    except STORE_ERRORS:
        log.exception("Error deleting player")
        return False


# ----------------- matches -----------------
def get_matches(user_id: str) -> List[Match]:
    """Matches newest first, each with its performances."""
    try:
        conn = get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "SELECT * FROM matches WHERE user_id=? ORDER BY date DESC, created_at DESC",
                (user_id,),
            )
            match_rows = cur.fetchall()
            cur.execute(
                """
                SELECT p.* FROM performances p
                  JOIN matches m ON m.id = p.match_id
                 WHERE m.user_id = ?
                 ORDER BY p.id
                """,
                (user_id,),
            )
            perf_rows = cur.fetchall()
        finally:
            conn.close()

        by_match = {}
        for r in perf_rows:
            by_match.setdefault(r["match_id"], []).append(dict(r))
        matches = []
        for r in match_rows:
            data = dict(r)
            data["performances"] = by_match.get(data["id"], [])
            matches.append(Match.model_validate(data))
        return matches
    except STORE_ERRORS:
        log.exception("Error getting matches")
        return []


def get_match(user_id: str, match_id: str) -> Optional[Match]:
    return next((m for m in get_matches(user_id) if m.id == match_id), None)


def _insert_match(cur, user_id: str, m: Match) -> None:
    row = m.model_dump(exclude={"performances"})
    row["user_id"] = user_id
    insert_rows(cur, "matches", [row])
    insert_rows(cur, "performances", _perf_rows(m))


def add_match(user_id: str, match) -> Optional[Match]:
    try:
        m = _as(Match, match)
        with transaction() as cur:
            _insert_match(cur, user_id, m)
        log.info("Added match vs %s on %s", m.opponent, m.date)
        return m
    except STORE_ERRORS:
        log.exception("Error adding match")
        return None


def record_match(user_id: str, match, update_players: bool = True) -> Optional[Match]:
    """Store a match and, by default, fold each performance into its player's career stats.

    Match, performances and stat updates are written in one transaction.
    """
    try:
        m = _as(Match, match)
        current = {p.id: p for p in get_players(user_id)} if update_players else {}
        with transaction() as cur:
            _insert_match(cur, user_id, m)
            for perf in m.performances:
                player = current.get(perf.player_id)
                if player is None:
                    continue
                stats = update_player_stats(player.stats, performance_contribution(perf))
                _stats_update(cur, user_id, player.id, stats)
        log.info("Recorded match vs %s with %d performances", m.opponent, len(m.performances))
        return m
    except STORE_ERRORS:
        log.exception("Error recording match")
        return None


def delete_match(user_id: str, match_id: str) -> bool:
    try:
        with transaction() as cur:
            cur.execute("DELETE FROM matches WHERE id=? AND user_id=?", (match_id, user_id))
            deleted = cur.rowcount > 0
            if deleted:
                cur.execute("DELETE FROM performances WHERE match_id=?", (match_id,))
        return deleted
    except STORE_ERRORS:
        log.exception("Error deleting match")
        return False


# ----------------- victory posts -----------------
def get_victory_posts() -> List[VictoryPost]:
    """All posts from every author, newest first."""
    try:
        rows = run_query(
            "SELECT * FROM victory_posts ORDER BY created_at DESC, rowid DESC",
            fetch=True,
        )
        return [VictoryPost.model_validate(dict(r)) for r in rows]
    except STORE_ERRORS:
        log.exception("Error getting victory posts")
        return []


def add_victory_post(user_id: str, post) -> Optional[VictoryPost]:
    """Publish a post as ``user_id``; an earlier post of theirs for the same match is replaced."""
    try:
        data = post.model_dump() if isinstance(post, VictoryPost) else dict(post)
        data["author_id"] = user_id
        data.pop("authorId", None)
        vp = VictoryPost.model_validate(data)
        with transaction() as cur:
            cur.execute(
                "DELETE FROM victory_posts WHERE match_id=? AND author_id=?",
                (vp.match_id, user_id),
            )
            insert_rows(cur, "victory_posts", [vp.model_dump()])
        return vp
    except STORE_ERRORS:
        log.exception("Error adding victory post")
        return None


def victory_post_from_match(match: Match, caption: str = "", image_uri: Optional[str] = None) -> dict:
    return {
        "match_id": match.id,
        "opponent": match.opponent,
        "result": match.result,
        "date": match.date,
        "caption": caption.strip() or f"Victory against {match.opponent}!",
        "image_uri": image_uri,
    }


def delete_victory_post(user_id: str, post_id: str) -> bool:
    """Only the author may delete a post."""
    try:
        rows = run_query("SELECT author_id FROM victory_posts WHERE id=?", (post_id,), fetch=True)
        if not rows:
            return False
        if rows[0]["author_id"] != user_id:
            log.warning("User %s may not delete victory post %s", user_id, post_id)
            return False
        run_query("DELETE FROM victory_posts WHERE id=? AND author_id=?", (post_id, user_id))
        return True
    except STORE_ERRORS:
        log.exception("Error deleting victory post")
        return False


# ----------------- tournaments -----------------
def get_tournaments(user_id: str) -> List[Tournament]:
    try:
        rows = run_query(
            "SELECT * FROM tournaments WHERE user_id=? ORDER BY created_at DESC, rowid DESC",
            (user_id,),
            fetch=True,
        )
        return [Tournament.model_validate(dict(r)) for r in rows]
    except STORE_ERRORS:
        log.exception("Error getting tournaments")
        return []


def add_tournament(user_id: str, tournament) -> Optional[Tournament]:
    try:
        t = _as(Tournament, tournament)
        row = t.model_dump()
        row["user_id"] = user_id
        with transaction() as cur:
            insert_rows(cur, "tournaments", [row])
        return t
    except STORE_ERRORS:
        log.exception("Error adding tournament")
        return None


def get_tournament_matches(user_id: str, tournament_id: str) -> List[TournamentMatch]:
    try:
        rows = run_query(
            "SELECT * FROM tournament_matches WHERE user_id=? AND tournament_id=? ORDER BY date, rowid",
            (user_id, tournament_id),
            fetch=True,
        )
        return [TournamentMatch.model_validate(dict(r)) for r in rows]
    except STORE_ERRORS:
        log.exception("Error getting tournament matches")
        return []


def add_tournament_match(user_id: str, fixture) -> Optional[TournamentMatch]:
    """Record a fixture result and bump the tournament's match count."""
    try:
        tm = _as(TournamentMatch, fixture)
        row = tm.model_dump()
        row["user_id"] = user_id
        with transaction() as cur:
            cur.execute(
                "SELECT teams FROM tournaments WHERE id=? AND user_id=?",
                (tm.tournament_id, user_id),
            )
            if cur.fetchone() is None:
                log.warning("Tournament %s not found", tm.tournament_id)
                return None
            insert_rows(cur, "tournament_matches", [row])
            cur.execute(
                """
                UPDATE tournaments
                   SET matches = COALESCE(matches, 0) + 1,
                       status = CASE WHEN status = 'upcoming' THEN 'ongoing' ELSE status END
                 WHERE id=? AND user_id=?
                """,
                (tm.tournament_id, user_id),
            )
        return tm
    except STORE_ERRORS:
        log.exception("Error adding tournament match")
        return None


# ----------------- utility -----------------
def clear_all_data(user_id: str) -> bool:
    """Drop the user's players, matches and tournaments. Victory posts stay."""
    try:
        with transaction() as cur:
            cur.execute(
                "DELETE FROM performances WHERE match_id IN (SELECT id FROM matches WHERE user_id=?)",
                (user_id,),
            )
            for table in ("matches", "players", "tournament_matches", "tournaments"):
                cur.execute(f"DELETE FROM {table} WHERE user_id=?", (user_id,))
        log.info("Cleared data for user %s", user_id)
        return True
    except STORE_ERRORS:
        log.exception("Error clearing data")
        return False


DEMO_PLAYERS = [
    {"name": "Arjun Mehta", "role": "Batsman", "team": "Riverside XI"},
    {"name": "Sam Carter", "role": "Bowler", "team": "Riverside XI"},
    {"name": "Dev Patel", "role": "All-rounder", "team": "Riverside XI"},
    {"name": "Liam Brooks", "role": "Wicket-keeper", "team": "Riverside XI"},
]

DEMO_MATCHES = [
    {"date": "2025-04-05", "opponent": "Hillside CC", "result": "Win", "wides": 6, "no_balls": 2,
     "lines": [(45, 38, 0, 0.0, 0, 1), (8, 10, 3, 4.0, 22, 0), (31, 27, 1, 3.0, 18, 2), (12, 15, 0, 0.0, 0, 3)]},
    {"date": "2025-04-12", "opponent": "Lakeside Strikers", "result": "Loss", "wides": 9, "no_balls": 1,
     "lines": [(22, 30, 0, 0.0, 0, 0), (3, 6, 2, 4.0, 31, 1), (40, 33, 2, 4.0, 27, 0), (18, 20, 0, 0.0, 0, 2)]},
    {"date": "2025-04-19", "opponent": "Old Town Rovers", "result": "Draw", "wides": 4, "no_balls": 0,
     "lines": [(60, 52, 0, 0.0, 0, 0), (0, 2, 4, 4.0, 19, 1), (15, 14, 1, 3.0, 24, 1), (25, 21, 0, 0.0, 0, 1)]},
]


def seed_demo_data_if_empty(user_id: str, force: bool = False) -> bool:
    """Give a fresh account a few players and matches so every page has rows."""
    if not force and get_players(user_id):
        return False
    players = [add_player(user_id, p) for p in DEMO_PLAYERS]
    players = [p for p in players if p is not None]
    for demo in DEMO_MATCHES:
        perfs = []
        for p, (runs, balls, wkts, overs, conceded, catches) in zip(players, demo["lines"]):
            perfs.append({
                "player_id": p.id, "player_name": p.name, "runs": runs, "balls": balls,
                "wickets": wkts, "overs": overs, "runs_conceded": conceded, "catches": catches,
            })
        data = {k: v for k, v in demo.items() if k != "lines"}
        data["performances"] = perfs
        record_match(user_id, data)

    t = add_tournament(user_id, {"name": "Summer League", "format": "round-robin", "teams": 4})
    if t is not None:
        for team1, opp, res in [
            (None, "Hillside CC", "Win"),
            ("Lakeside Strikers", "Old Town Rovers", "Loss"),
            (None, "Lakeside Strikers", "Draw"),
        ]:
            add_tournament_match(user_id, {"tournament_id": t.id, "team1": team1, "opponent": opp, "result": res})
    log.info("Seeded demo data for user %s", user_id)
    return True
