# Maintenance commands for the CrickBoard database
#
#   python -m crickboard.manage check --columns --rows
#   python -m crickboard.manage seed --email coach@example.com
#   python -m crickboard.manage clear --email coach@example.com
#   python -m crickboard.manage verify

import argparse
import sqlite3
import sys

from crickboard import config, storage
from crickboard.db_connection import TABLES, ensure_schema, get_conn


def list_columns(conn, table):
    cur = conn.cursor()
    cur.execute(f"PRAGMA table_info({table});")
    # returns: cid, name, type, notnull, dflt_value, pk
    return [(r[1], r[2]) for r in cur.fetchall()]


def show_rows(conn, table, limit=10):
    cur = conn.cursor()
    cur.execute(f"SELECT * FROM {table} LIMIT {int(limit)};")
    return cur.fetchall()


def _user_id_for(email: str) -> str | None:
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM users WHERE email=?", (email.strip().lower(),))
        row = cur.fetchone()
        return row["id"] if row else None
    finally:
        conn.close()


def cmd_check(args) -> int:
    db_path = config.db_path()
    if not db_path.exists():
        print(f"Database '{db_path}' does NOT exist.")
        return 1

    conn = get_conn()
    try:
        for t in TABLES:
            try:
                n = conn.execute(f"SELECT COUNT(*) FROM {t}").fetchone()[0]
            except sqlite3.OperationalError:
                print(f"- {t}: missing")
                continue
            print(f"- {t}: {n} row(s)")
            if args.columns:
                for name, coltype in list_columns(conn, t):
                    print(f"    • {name} ({coltype})")
            if args.rows:
                for r in show_rows(conn, t, args.limit):
                    print(f"    • {dict(r)}")
    finally:
        conn.close()
    return 0


def cmd_seed(args) -> int:
    ensure_schema()
    user_id = _user_id_for(args.email)
    if user_id is None:
        print(f"No user registered with email '{args.email}'.")
        return 1
    if storage.seed_demo_data_if_empty(user_id, force=args.force):
        print("✅ Demo data added.")
    else:
        print("User already has players; nothing seeded (use --force).")
    return 0


def cmd_clear(args) -> int:
    user_id = _user_id_for(args.email)
    if user_id is None:
        print(f"No user registered with email '{args.email}'.")
        return 1
    if not storage.clear_all_data(user_id):
        print("❌ Clearing data failed, see log.")
        return 2
    print("✅ Players, matches and tournaments cleared.")
    return 0


def cmd_verify(args) -> int:
    try:
        ensure_schema()
        conn = get_conn()
        try:
            conn.execute("SELECT 1").fetchone()
        finally:
            conn.close()
    except sqlite3.Error as e:
        print(f"❌ Store not reachable at '{config.db_path()}': {e}")
        return 2
    print(f"✅ Store reachable at '{config.db_path()}'.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="crickboard.manage", description="CrickBoard database maintenance.")
    sub = p.add_subparsers(dest="command", required=True)

    c = sub.add_parser("check", help="Print tables and row counts")
    c.add_argument("--columns", action="store_true", help="Also print columns for each table")
    c.add_argument("--rows", action="store_true", help="Also print sample rows for each table")
    c.add_argument("--limit", type=int, default=10, help="Sample rows per table")
    c.set_defaults(func=cmd_check)

    s = sub.add_parser("seed", help="Add demo players, matches and a tournament for a user")
    s.add_argument("--email", required=True)
    s.add_argument("--force", action="store_true", help="Seed even if the user already has players")
    s.set_defaults(func=cmd_seed)

    cl = sub.add_parser("clear", help="Delete a user's players, matches and tournaments")
    cl.add_argument("--email", required=True)
    cl.set_defaults(func=cmd_clear)

    v = sub.add_parser("verify", help="Check that the store can be opened")
    v.set_defaults(func=cmd_verify)
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
