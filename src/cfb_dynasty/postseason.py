from __future__ import annotations

from typing import Iterable

from .config import (
    CONFERENCE_CHAMPIONSHIP_WEEK,
    INDEPENDENT,
    PLAYOFF_FIELD,
    PLAYOFF_FIRST_ROUND_PAIRS,
    PLAYOFF_FIRST_ROUND_WEEK,
)
from .models import Fixture, Team
from .rankings import cfp_ranking, conference_standings

PLAYOFF_FIRST_ROUND_LABEL = "CFP Rd 1"


def _conferences_in_league_order(teams: Iterable[Team]) -> list[str]:
    seen: list[str] = []
    for team in teams:
        if team.conference != INDEPENDENT and team.conference not in seen:
            seen.append(team.conference)
    return seen


def generate_conference_championships(teams: list[Team]) -> list[Fixture]:
    fixtures: list[Fixture] = []
    for conference in _conferences_in_league_order(teams):
        standings = conference_standings(teams, conference)
        if len(standings) < 2:
            continue
        first, second = standings[0], standings[1]
        fixtures.append(
            Fixture(
                fixture_id=f"ccg-{conference}-{first.team_id}-{second.team_id}",
                week=CONFERENCE_CHAMPIONSHIP_WEEK,
                home_id=first.team_id,
                away_id=second.team_id,
                is_conference_game=True,
                is_playoff=True,
                label=f"{conference} Championship",
            )
        )
    return fixtures


def playoff_seeds(teams: Iterable[Team]) -> list[Team]:
    """Top twelve of the CFP ranking, seed 1 first; empty if the field cannot be filled."""
    seeds = cfp_ranking(teams)[:PLAYOFF_FIELD]
    if len(seeds) < PLAYOFF_FIELD:
        return []
    return seeds


def generate_playoffs(teams: Iterable[Team]) -> list[Fixture]:
    seeds = playoff_seeds(teams)
    if not seeds:
        return []
    fixtures: list[Fixture] = []
    for high, low in PLAYOFF_FIRST_ROUND_PAIRS:
        host, visitor = seeds[high - 1], seeds[low - 1]
        fixtures.append(
            Fixture(
                fixture_id=f"cfp-r1-{high}v{low}",
                week=PLAYOFF_FIRST_ROUND_WEEK,
                home_id=host.team_id,
                away_id=visitor.team_id,
                is_playoff=True,
                label=PLAYOFF_FIRST_ROUND_LABEL,
            )
        )
    return fixtures
