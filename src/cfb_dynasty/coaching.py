"""Coach career bookkeeping at the season boundary.

The season engine only emits a :class:`CoachProgression`; the career record
that consumes it belongs to the caller.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Iterable

from .config import (
    COACH_PRESTIGE_MAX,
    COACH_PRESTIGE_MIN,
    CONFERENCE_CHAMPIONSHIP_WEEK,
    CONFERENCE_TITLE_BONUS,
    LEVEL_OFFER_BANDS,
    NATIONAL_TITLE_BONUS,
    OFFER_LIMIT,
    OFFER_WINDOW_ABOVE,
    OFFER_WINDOW_BELOW,
    PLAYOFF_FINAL_WEEK,
    PLAYOFF_FIRST_ROUND_WEEK,
    PLAYOFF_WIN_BONUS,
    WIN_ABOVE_EXPECTED_BONUS,
    WIN_BELOW_EXPECTED_PENALTY,
)
from .models import Fixture, Team


@dataclass(frozen=True, slots=True)
class CoachProgression:
    team_id: str
    wins: int
    losses: int
    expected_wins: int
    won_conference: bool
    playoff_wins: int
    won_national_title: bool
    prestige_delta: float


@dataclass(slots=True)
class CoachCareer:
    name: str
    alma_mater: str = ""
    level: int = 1
    prestige: float = 10
    wins: int = 0
    losses: int = 0
    conference_titles: int = 0
    national_titles: int = 0
    history: list[str] = field(default_factory=list)

    def apply(self, progression: CoachProgression, team_name: str, season: int) -> float:
        self.prestige = max(
            COACH_PRESTIGE_MIN,
            min(COACH_PRESTIGE_MAX, self.prestige + progression.prestige_delta),
        )
        self.level = level_for_prestige(self.prestige)
        self.wins += progression.wins
        self.losses += progression.losses
        self.conference_titles += int(progression.won_conference)
        self.national_titles += int(progression.won_national_title)
        self.history.append(f"Season {season}: {team_name} ({progression.wins}-{progression.losses})")
        return self.prestige


def level_for_prestige(prestige: float) -> int:
    return min(5, int(prestige // 20) + 1)


def expected_wins(prestige: int) -> int:
    # Half-up rounding: an 85-prestige program is expected to win 9.
    return max(1, math.floor(prestige / 10 + 0.5))


def compute_progression(team: Team, fixtures: Iterable[Fixture]) -> CoachProgression:
    played = [f for f in fixtures if f.played and f.involves(team.team_id)]
    won = [f for f in played if f.winner_id == team.team_id]

    wins = team.record.wins
    expected = expected_wins(team.prestige)
    diff = wins - expected
    delta = diff * WIN_ABOVE_EXPECTED_BONUS if diff > 0 else diff * WIN_BELOW_EXPECTED_PENALTY

    won_conference = any(f.week == CONFERENCE_CHAMPIONSHIP_WEEK for f in won)
    playoff_wins = sum(1 for f in won if f.is_playoff and f.week >= PLAYOFF_FIRST_ROUND_WEEK)
    won_title = any(f.is_playoff and f.week == PLAYOFF_FINAL_WEEK for f in won)
    if won_conference:
        delta += CONFERENCE_TITLE_BONUS
    delta += playoff_wins * PLAYOFF_WIN_BONUS
    if won_title:
        delta += NATIONAL_TITLE_BONUS

    return CoachProgression(
        team_id=team.team_id,
        wins=wins,
        losses=team.record.losses,
        expected_wins=expected,
        won_conference=won_conference,
        playoff_wins=playoff_wins,
        won_national_title=won_title,
        prestige_delta=delta,
    )


def job_offers(
    teams: Iterable[Team],
    coach_prestige: float,
    rng: random.Random,
    exclude_team_id: str | None = None,
    limit: int = OFFER_LIMIT,
) -> list[Team]:
    low = coach_prestige - OFFER_WINDOW_BELOW
    high = coach_prestige + OFFER_WINDOW_ABOVE
    pool = [t for t in teams if t.team_id != exclude_team_id and low <= t.prestige <= high]
    rng.shuffle(pool)
    return pool[:limit]


def initial_job_offers(
    level: int,
    teams: Iterable[Team],
    rng: random.Random,
    limit: int = OFFER_LIMIT,
) -> tuple[list[Team], int]:
    """Offers for a newly created coach; returns the offers and starting coach prestige."""
    low, high, starting_prestige = LEVEL_OFFER_BANDS.get(level, LEVEL_OFFER_BANDS[1])
    pool = [t for t in teams if low <= t.prestige <= high]
    rng.shuffle(pool)
    return pool[:limit], starting_prestige
