# crickboard/config.py
import os
from pathlib import Path

from dotenv import load_dotenv, find_dotenv

# =============================================================================
# Configuration: .env may contain
# CRICKBOARD_DB=crickboard.db
# CRICKBOARD_LOG_LEVEL=INFO
# CRICKBOARD_SEED_DEMO=1
# CRICKBOARD_TEAM_NAME=Home Team
# =============================================================================
load_dotenv(find_dotenv(usecwd=True), override=False)

DEFAULT_DB_FILE = "crickboard.db"
DEFAULT_TEAM_NAME = "Home Team"


def db_path() -> Path:
    return Path(os.getenv("CRICKBOARD_DB", "").strip() or DEFAULT_DB_FILE)


def log_level() -> str:
    return (os.getenv("CRICKBOARD_LOG_LEVEL", "INFO").strip() or "INFO").upper()


def seed_demo() -> bool:
    return os.getenv("CRICKBOARD_SEED_DEMO", "1").strip().lower() not in ("0", "false", "no", "off")


def team_name() -> str:
    return os.getenv("CRICKBOARD_TEAM_NAME", "").strip() or DEFAULT_TEAM_NAME
