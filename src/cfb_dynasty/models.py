from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4

from .config import INDEPENDENT


class SeasonStage(str, Enum):
    PRE_SEASON = "PRE_SEASON"
    REGULAR_SEASON = "REGULAR_SEASON"
    CONFERENCE_CHAMPIONSHIP = "CONFERENCE_CHAMPIONSHIP"
    POST_SEASON = "POST_SEASON"
    COACHING_CAROUSEL = "COACHING_CAROUSEL"
    RETENTION = "RETENTION"
    TRANSFER_PORTAL = "TRANSFER_PORTAL"


class ClassYear(str, Enum):
    FR = "FR"
    SO = "SO"
    JR = "JR"
    SR = "SR"

    def next(self) -> ClassYear:
        order = list(ClassYear)
        idx = order.index(self)
        return order[min(idx + 1, len(order) - 1)]


class LeavingStatus(str, Enum):
    GRADUATING = "GRADUATING"
    NFL = "NFL"
    TRANSFER = "TRANSFER"


@dataclass(frozen=True, slots=True)
class SeasonState:
    stage: SeasonStage = SeasonStage.PRE_SEASON
    week: int = 0
    portal_week: int = 0


@dataclass(slots=True)
class Player:
    name: str
    position: str
    year: ClassYear
    rating: int
    hometown: str = ""
    potential: int = 0
    player_id: str = field(default_factory=lambda: uuid4().hex)
    leaving_status: LeavingStatus | None = None

    @property
    def is_leaving(self) -> bool:
        return self.leaving_status is not None


@dataclass(slots=True)
class TeamRecord:
    wins: int = 0
    losses: int = 0
    conf_wins: int = 0
    conf_losses: int = 0
    points_for: int = 0
    points_against: int = 0
    rank: int = 0

    @property
    def point_diff(self) -> int:
        return self.points_for - self.points_against

    @property
    def summary(self) -> str:
        return f"{self.wins}-{self.losses}"

    def register_game(self, points_for: int, points_against: int, conference_game: bool) -> None:
        self.points_for += points_for
        self.points_against += points_against
        if points_for > points_against:
            self.wins += 1
            if conference_game:
                self.conf_wins += 1
        else:
            self.losses += 1
            if conference_game:
                self.conf_losses += 1

    def reset(self) -> None:
        self.wins = 0
        self.losses = 0
        self.conf_wins = 0
        self.conf_losses = 0
        self.points_for = 0
        self.points_against = 0
        self.rank = 0


@dataclass(slots=True)
class Team:
    team_id: str
    name: str
    prestige: int
    conference: str = INDEPENDENT
    nickname: str = ""
    abbreviation: str = ""
    record: TeamRecord = field(default_factory=TeamRecord)
    roster: list[Player] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 0 <= self.prestige <= 100:
            raise ValueError(f"{self.name} prestige {self.prestige} is outside 0-100.")

    @property
    def is_independent(self) -> bool:
        return self.conference == INDEPENDENT

    @property
    def stars(self) -> int:
        if self.prestige >= 90:
            return 6
        if self.prestige >= 80:
            return 5
        if self.prestige >= 65:
            return 4
        if self.prestige >= 50:
            return 3
        if self.prestige >= 35:
            return 2
        return 1


@dataclass(slots=True)
class Fixture:
    fixture_id: str
    week: int
    home_id: str
    away_id: str
    is_conference_game: bool = False
    is_playoff: bool = False
    label: str | None = None
    played: bool = False
    home_score: int | None = None
    away_score: int | None = None
    winner_id: str | None = None

    def involves(self, team_id: str) -> bool:
        return team_id in (self.home_id, self.away_id)

    def record_result(self, home_score: int, away_score: int) -> str:
        if self.played:
            raise ValueError(f"Fixture {self.fixture_id} has already been played.")
        self.home_score = home_score
        self.away_score = away_score
        self.winner_id = self.home_id if home_score > away_score else self.away_id
        self.played = True
        return self.winner_id


@dataclass(frozen=True, slots=True)
class ScoreOverride:
    """Externally computed final score for the controlled team's fixture."""

    home_score: int
    away_score: int


@dataclass(slots=True)
class RosterDelta:
    """Roster changes produced by the recruiting economy at a season boundary."""

    team_id: str
    incoming: list[Player] = field(default_factory=list)
    outgoing: list[str] = field(default_factory=list)
