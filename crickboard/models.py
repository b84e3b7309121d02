"""
Record schemas for CrickBoard

Each pydantic model here maps to one table in the store (see db_connection.py).
Rows are validated through these models on the way in and on the way out, so the
statistics code can rely on fully populated records with numeric fields.

Field names are snake_case; the camelCase aliases (runsConceded, noBalls, ...)
are accepted on input and produced by ``model_dump(by_alias=True)``.
"""
import re
import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ROLES = ("Batsman", "Bowler", "All-rounder", "Wicket-keeper")
TOURNAMENT_FORMATS = ("round-robin", "knockout", "league")
TOURNAMENT_STATUSES = ("upcoming", "ongoing", "completed")

_num_pat = re.compile(r"-?\d+(?:\.\d+)?")


def new_id() -> str:
    return uuid.uuid4().hex


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def today_iso() -> str:
    return date.today().isoformat()


def to_number(value) -> float:
    """Best-effort numeric coercion: None, blanks and junk become 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    m = _num_pat.search(str(value).replace(",", ""))
    return float(m.group(0)) if m else 0


def _to_int(value) -> int:
    return int(to_number(value))


def _to_float(value) -> float:
    return float(to_number(value))


class MatchResult(str, Enum):
    WIN = "Win"
    LOSS = "Loss"
    DRAW = "Draw"


_LOSS_WORDS = ("loss", "lost", "lose")
_WIN_WORDS = ("win", "won", "victory")


def classify_result(value) -> MatchResult:
    """Normalize a stored result (enum or legacy free text) to MatchResult.

    Exact names win first; otherwise loss words are checked before win words,
    and anything unrecognised is a draw.
    """
    if isinstance(value, MatchResult):
        return value
    text = str(value or "").strip().lower()
    for result in MatchResult:
        if text == result.value.lower():
            return result
    if any(w in text for w in _LOSS_WORDS):
        return MatchResult.LOSS
    if any(w in text for w in _WIN_WORDS):
        return MatchResult.WIN
    return MatchResult.DRAW


def exact_result(value) -> MatchResult:
    """Fixture results: only the exact names Win/Loss/Draw count; other text is a draw."""
    if isinstance(value, MatchResult):
        return value
    text = str(value or "").strip()
    for result in MatchResult:
        if text == result.value:
            return result
    return MatchResult.DRAW


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)


_INT_STATS = (
    "matches", "runs", "balls", "fours", "sixes", "wickets",
    "runs_conceded", "maidens", "catches", "stumpings", "run_outs",
)


class PlayerStats(_Record):
    matches: int = Field(0, ge=0)
    runs: int = Field(0, ge=0)
    balls: int = Field(0, ge=0)
    fours: int = Field(0, ge=0)
    sixes: int = Field(0, ge=0)
    wickets: int = Field(0, ge=0)
    overs: float = Field(0, ge=0, description="Overs bowled, e.g. 3.4")
    runs_conceded: int = Field(0, ge=0, alias="runsConceded")
    maidens: int = Field(0, ge=0)
    catches: int = Field(0, ge=0)
    stumpings: int = Field(0, ge=0)
    run_outs: int = Field(0, ge=0, alias="runOuts")

    @field_validator(*_INT_STATS, mode="before")
    @classmethod
    def _coerce_int(cls, v):
        return _to_int(v)

    @field_validator("overs", mode="before")
    @classmethod
    def _coerce_overs(cls, v):
        return _to_float(v)


STAT_FIELDS = tuple(PlayerStats.model_fields)


class Player(_Record):
    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=100, description="Player full name")
    role: Literal["Batsman", "Bowler", "All-rounder", "Wicket-keeper"] = "Batsman"
    team: Optional[str] = Field(None, max_length=100)
    stats: PlayerStats = Field(default_factory=PlayerStats)
    created_at: str = Field(default_factory=now_iso, alias="createdAt")
    updated_at: str = Field(default_factory=now_iso, alias="updatedAt")

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("stats", mode="before")
    @classmethod
    def _default_stats(cls, v):
        return {} if v is None else v


class Performance(_Record):
    player_id: str = Field(..., alias="playerId")
    player_name: str = Field("", alias="playerName")
    runs: int = Field(0, ge=0)
    balls: int = Field(0, ge=0)
    fours: int = Field(0, ge=0)
    sixes: int = Field(0, ge=0)
    wickets: int = Field(0, ge=0)
    overs: float = Field(0, ge=0)
    runs_conceded: int = Field(0, ge=0, alias="runsConceded")
    maidens: int = Field(0, ge=0)
    catches: int = Field(0, ge=0)
    stumpings: int = Field(0, ge=0)
    run_outs: int = Field(0, ge=0, alias="runOuts")

    @field_validator(
        "runs", "balls", "fours", "sixes", "wickets", "runs_conceded",
        "maidens", "catches", "stumpings", "run_outs", mode="before",
    )
    @classmethod
    def _coerce_int(cls, v):
        return _to_int(v)

    @field_validator("overs", mode="before")
    @classmethod
    def _coerce_overs(cls, v):
        return _to_float(v)


class Match(_Record):
    id: str = Field(default_factory=new_id)
    date: str = Field(default_factory=today_iso, description="ISO date of the match")
    opponent: str = "Friendly Fixture"
    venue: Optional[str] = "Home Ground"
    result: MatchResult = MatchResult.WIN
    wides: int = Field(0, ge=0)
    no_balls: int = Field(0, ge=0, alias="noBalls")
    performances: List[Performance] = Field(default_factory=list)
    notes: Optional[str] = None
    created_at: str = Field(default_factory=now_iso, alias="createdAt")

    @field_validator("result", mode="before")
    @classmethod
    def _classify(cls, v):
        return classify_result(v)

    @field_validator("wides", "no_balls", mode="before")
    @classmethod
    def _coerce_extras(cls, v):
        return _to_int(v)

    @field_validator("opponent", mode="before")
    @classmethod
    def _default_opponent(cls, v):
        return (v or "").strip() or "Friendly Fixture"

    @field_validator("venue", mode="before")
    @classmethod
    def _default_venue(cls, v):
        return (v or "").strip() or "Home Ground"

    @field_validator("date", mode="before")
    @classmethod
    def _iso_date(cls, v):
        if isinstance(v, (date, datetime)):
            return v.isoformat()
        return (v or "").strip() or today_iso()

    @model_validator(mode="after")
    def _unique_players(self):
        seen = set()
        for perf in self.performances:
            if perf.player_id in seen:
                raise ValueError(f"duplicate performance for player {perf.player_id}")
            seen.add(perf.player_id)
        return self


class VictoryPost(_Record):
    id: str = Field(default_factory=new_id)
    match_id: str = Field(..., alias="matchId")
    opponent: str = ""
    result: MatchResult = MatchResult.WIN
    date: str = ""
    caption: str = ""
    image_uri: Optional[str] = Field(None, alias="imageUri")
    author_id: str = Field(..., alias="authorId")
    created_at: str = Field(default_factory=now_iso, alias="createdAt")

    @field_validator("result", mode="before")
    @classmethod
    def _classify(cls, v):
        return classify_result(v)


class Tournament(_Record):
    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=100)
    format: Literal["round-robin", "knockout", "league"] = "round-robin"
    teams: int = Field(4, ge=2, description="Number of competing teams")
    matches: int = Field(0, ge=0, description="Fixtures recorded so far")
    status: Literal["upcoming", "ongoing", "completed"] = "upcoming"
    progress: Optional[float] = Field(None, ge=0, le=1)
    created_at: str = Field(default_factory=now_iso, alias="createdAt")

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class TournamentMatch(_Record):
    id: str = Field(default_factory=new_id)
    tournament_id: str = Field(..., alias="tournamentId")
    team1: Optional[str] = None
    opponent: str = Field(..., min_length=1)
    result: MatchResult = MatchResult.DRAW
    date: str = Field(default_factory=today_iso)

    @field_validator("result", mode="before")
    @classmethod
    def _classify(cls, v):
        return exact_result(v)


class Standing(_Record):
    team: str
    played: int = 0
    won: int = 0
    lost: int = 0
    draw: int = 0
    points: int = 0
    position: int = 0


class User(_Record):
    id: str = Field(default_factory=new_id)
    email: str
    name: str
    created_at: str = Field(default_factory=now_iso, alias="createdAt")
