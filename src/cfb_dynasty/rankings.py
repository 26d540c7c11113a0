"""Weekly polls and conference standings.

All functions here are pure: they read team records and return new lists.
``apply_weekly_ranks`` is the one exception and only writes ``record.rank``.
"""

from __future__ import annotations

from typing import Iterable

from .config import RANKING_SWITCH_WEEK, TOP_N
from .models import Team


def _poll_key(team: Team) -> tuple[int, int, int, int]:
    rec = team.record
    return (-rec.wins, rec.losses, -rec.point_diff, -team.prestige)


def cfp_score(team: Team) -> int:
    return team.record.wins * 100 - team.record.losses * 120 + team.prestige


def ap_top25(teams: Iterable[Team]) -> list[Team]:
    return sorted(teams, key=_poll_key)[:TOP_N]


def coaches_top25(teams: Iterable[Team]) -> list[Team]:
    # Coaches ballots follow the same ordering as the AP poll.
    return ap_top25(teams)


def cfp_ranking(teams: Iterable[Team]) -> list[Team]:
    return sorted(teams, key=cfp_score, reverse=True)


def cfp_top25(teams: Iterable[Team]) -> list[Team]:
    return cfp_ranking(teams)[:TOP_N]


def conference_standings(teams: Iterable[Team], conference: str) -> list[Team]:
    members = [t for t in teams if t.conference == conference]
    return sorted(
        members,
        key=lambda t: (t.record.conf_wins, t.record.wins, t.prestige),
        reverse=True,
    )


def ranking_in_effect(teams: Iterable[Team], week: int) -> list[Team]:
    return cfp_top25(teams) if week >= RANKING_SWITCH_WEEK else ap_top25(teams)


def apply_weekly_ranks(teams: list[Team], week: int) -> list[Team]:
    ranked = ranking_in_effect(teams, week)
    positions = {team.team_id: idx for idx, team in enumerate(ranked, start=1)}
    for team in teams:
        team.record.rank = positions.get(team.team_id, 0)
    return ranked
