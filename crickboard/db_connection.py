# crickboard/db_connection.py
import re
import sqlite3
from pathlib import Path

from crickboard import config
from crickboard.app_logger import get_logger

log = get_logger("db")


def get_conn(db_file: str | Path | None = None) -> sqlite3.Connection:
    path = Path(db_file) if db_file else config.db_path()
    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


# ---------- helpers ----------
def _col_exists(cur, table: str, col: str) -> bool:
    cur.execute(f'PRAGMA table_info("{table}")')
    return any(r[1] == col for r in cur.fetchall())


def _table_cols(cur, table: str) -> set:
    cur.execute(f'PRAGMA table_info("{table}")')
    return {r[1] for r in cur.fetchall()}


def _safe_add_col(cur, table: str, name: str, decl: str) -> None:
    if not _col_exists(cur, table, name):
        cur.execute(f"ALTER TABLE {table} ADD COLUMN {name} {decl}")


def _safe_create_index(cur, idx_name: str, table: str, cols: list[str], unique: bool = False) -> None:
    if set(cols).issubset(_table_cols(cur, table)):
        kind = "UNIQUE INDEX" if unique else "INDEX"
        cur.execute(
            f'CREATE {kind} IF NOT EXISTS {idx_name} ON {table}({", ".join(cols)})'
        )


STAT_COLUMNS = [
    ("matches", "INTEGER"),
    ("runs", "INTEGER"),
    ("balls", "INTEGER"),
    ("fours", "INTEGER"),
    ("sixes", "INTEGER"),
    ("wickets", "INTEGER"),
    ("overs", "REAL"),
    ("runs_conceded", "INTEGER"),
    ("maidens", "INTEGER"),
    ("catches", "INTEGER"),
    ("stumpings", "INTEGER"),
    ("run_outs", "INTEGER"),
]

TABLES = (
    "users",
    "players",
    "matches",
    "performances",
    "victory_posts",
    "tournaments",
    "tournament_matches",
)


# ---------- schema ----------
def ensure_schema(db_file: str | Path | None = None):
    """Idempotent migrations: create tables and add any missing columns safely."""
    conn = get_conn(db_file)
    try:
        cur = conn.cursor()

        # -------- users --------
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT UNIQUE,
                name TEXT,
                password_hash TEXT,
                created_at TEXT
            )
            """
        )

        # -------- players --------
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id TEXT PRIMARY KEY,
                user_id TEXT,
                name TEXT,
                role TEXT,
                team TEXT,
                created_at TEXT,
                updated_at TEXT
            )
            """
        )
        for addcol, decl in STAT_COLUMNS:
            _safe_add_col(cur, "players", addcol, f"{decl} DEFAULT 0")
        _safe_create_index(cur, "idx_players_user", "players", ["user_id"])

        # -------- matches --------
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS matches (
                id TEXT PRIMARY KEY,
                user_id TEXT,
                date TEXT,
                opponent TEXT,
                venue TEXT,
                result TEXT,
                created_at TEXT
            )
            """
        )
        for addcol, decl in [
            ("wides", "INTEGER DEFAULT 0"),
            ("no_balls", "INTEGER DEFAULT 0"),
            ("notes", "TEXT"),
        ]:
            _safe_add_col(cur, "matches", addcol, decl)
        _safe_create_index(cur, "idx_matches_user_date", "matches", ["user_id", "date"])

        # -------- performances (one row per player per match) --------
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS performances (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                match_id TEXT,
                player_id TEXT,
                player_name TEXT
            )
            """
        )
        for addcol, decl in STAT_COLUMNS:
            if addcol == "matches":
                continue
            _safe_add_col(cur, "performances", addcol, f"{decl} DEFAULT 0")
        _safe_create_index(cur, "idx_perf_match_player", "performances", ["match_id", "player_id"], unique=True)

        # -------- victory_posts --------
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS victory_posts (
                id TEXT PRIMARY KEY,
                match_id TEXT,
                opponent TEXT,
                result TEXT,
                date TEXT,
                caption TEXT,
                image_uri TEXT,
                author_id TEXT,
                created_at TEXT
            )
            """
        )
        _safe_create_index(cur, "idx_posts_created", "victory_posts", ["created_at"])

        # -------- tournaments --------
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS tournaments (
                id TEXT PRIMARY KEY,
                user_id TEXT,
                name TEXT,
                format TEXT,
                teams INTEGER,
                matches INTEGER DEFAULT 0,
                status TEXT,
                created_at TEXT
            )
            """
        )
        _safe_add_col(cur, "tournaments", "progress", "REAL")

        # -------- tournament_matches --------
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS tournament_matches (
                id TEXT PRIMARY KEY,
                user_id TEXT,
                tournament_id TEXT,
                team1 TEXT,
                opponent TEXT,
                result TEXT,
                date TEXT
            )
            """
        )
        _safe_create_index(cur, "idx_tm_tournament", "tournament_matches", ["tournament_id"])

        conn.commit()
    finally:
        conn.close()


# ---------- tolerant insert utilities ----------
def _col_types(cur, table: str) -> dict[str, str]:
    cur.execute(f'PRAGMA table_info("{table}")')
    rows = cur.fetchall()
    return { (r["name"] if isinstance(r, sqlite3.Row) else r[1]) :
             ((r["type"] if isinstance(r, sqlite3.Row) else r[2]) or "").upper()
             for r in rows }

_num_pat = re.compile(r"-?\d+(?:\.\d+)?")

def _coerce_for_sqlite(value, decl: str):
    if value is None:
        return None
    t = (decl or "").upper()
    if "INT" in t:
        if isinstance(value, (int,)):
            return value
        if isinstance(value, float):
            return int(round(value))
        if isinstance(value, str):
            m = _num_pat.search(value)
            return int(m.group(0)) if m else None
        return int(value)
    if "REAL" in t or "FLOA" in t or "DOUB" in t:
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            m = _num_pat.search(value)
            return float(m.group(0)) if m else None
        return float(value)
    return str(value.value) if hasattr(value, "value") else str(value)

def insert_rows(cur, table: str, rows: list[dict], replace: bool = False):
    """Insert dict rows, keeping only keys that are real columns of ``table``."""
    if not rows:
        return
    types = _col_types(cur, table)
    use_cols = [c for c in rows[0].keys() if c in types]
    if not use_cols:
        return
    verb = "INSERT OR REPLACE" if replace else "INSERT"
    placeholders = ",".join(["?"] * len(use_cols))
    sql = f'{verb} INTO {table} ({",".join(use_cols)}) VALUES ({placeholders})'
    data = []
    for r in rows:
        vals = [_coerce_for_sqlite(r.get(c), types[c]) for c in use_cols]
        data.append(tuple(vals))
    cur.executemany(sql, data)


def table_counts(db_file: str | Path | None = None) -> dict[str, int]:
    conn = get_conn(db_file)
    try:
        cur = conn.cursor()
        out = {}
        for t in TABLES:
            cur.execute(f"SELECT COUNT(*) FROM {t}")
            out[t] = cur.fetchone()[0]
        return out
    finally:
        conn.close()

