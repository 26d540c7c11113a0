from __future__ import annotations

import logging
import random
from collections import Counter, defaultdict
from typing import Iterable, Iterator

from .config import (
    EARLY_WEEKS,
    FILL_PASSES,
    INDEPENDENT,
    LARGE_CONFERENCE_GAMES,
    LATE_WEEKS,
    ROUND_ROBIN_MAX_TEAMS,
    SAME_CONFERENCE_LOCKOUT_PASSES,
    TARGET_GAMES,
)
from .errors import UnknownFixtureReference
from .models import Fixture, Team

logger = logging.getLogger(__name__)


def pair_key(team_a: str, team_b: str) -> tuple[str, str]:
    return (team_a, team_b) if team_a <= team_b else (team_b, team_a)


class Schedule:
    """Append-only fixture collection indexed by week and by team."""

    def __init__(self, fixtures: Iterable[Fixture] = ()) -> None:
        self._fixtures: list[Fixture] = []
        self._by_id: dict[str, Fixture] = {}
        self._by_week: dict[int, list[Fixture]] = defaultdict(list)
        self._by_team: dict[str, list[Fixture]] = defaultdict(list)
        self._busy: set[tuple[str, int]] = set()
        self._pairs: Counter[tuple[str, str]] = Counter()
        self.extend(fixtures)

    def __len__(self) -> int:
        return len(self._fixtures)

    def __iter__(self) -> Iterator[Fixture]:
        return iter(self._fixtures)

    def add(self, fixture: Fixture) -> None:
        if fixture.fixture_id in self._by_id:
            raise ValueError(f"Duplicate fixture id {fixture.fixture_id}.")
        self._fixtures.append(fixture)
        self._by_id[fixture.fixture_id] = fixture
        self._by_week[fixture.week].append(fixture)
        for team_id in (fixture.home_id, fixture.away_id):
            self._by_team[team_id].append(fixture)
            self._busy.add((team_id, fixture.week))
        self._pairs[pair_key(fixture.home_id, fixture.away_id)] += 1

    def extend(self, fixtures: Iterable[Fixture]) -> None:
        for fixture in fixtures:
            self.add(fixture)

    def get(self, fixture_id: str) -> Fixture:
        try:
            return self._by_id[fixture_id]
        except KeyError:
            raise UnknownFixtureReference(fixture_id) from None

    def for_week(self, week: int) -> list[Fixture]:
        return list(self._by_week.get(week, []))

    def for_team(self, team_id: str) -> list[Fixture]:
        return list(self._by_team.get(team_id, []))

    def team_fixture_in_week(self, team_id: str, week: int) -> Fixture | None:
        if (team_id, week) not in self._busy:
            return None
        return next((f for f in self._by_week[week] if f.involves(team_id)), None)

    def is_team_free(self, team_id: str, week: int) -> bool:
        return (team_id, week) not in self._busy

    def game_count(self, team_id: str) -> int:
        return len(self._by_team.get(team_id, ()))

    def pair_count(self, team_a: str, team_b: str) -> int:
        return self._pairs.get(pair_key(team_a, team_b), 0)

    def duplicate_pairs(self) -> dict[tuple[str, str], int]:
        return {pair: count for pair, count in self._pairs.items() if count > 1}

    def weeks(self) -> list[int]:
        return sorted(week for week, games in self._by_week.items() if games)


def _shuffled(items: Iterable, rng: random.Random) -> list:
    out = list(items)
    rng.shuffle(out)
    return out


def round_robin_pairs(teams: list[Team]) -> list[tuple[Team, Team]]:
    """Every unordered pair once; the earlier team in league order hosts."""
    pairs: list[tuple[Team, Team]] = []
    for i, home in enumerate(teams):
        for away in teams[i + 1 :]:
            pairs.append((home, away))
    return pairs


def _large_conference_pairs(
    teams: list[Team],
    rng: random.Random,
    scheduled: set[tuple[str, str]],
) -> list[tuple[Team, Team]]:
    pairs: list[tuple[Team, Team]] = []
    conf_games = {team.team_id: 0 for team in teams}

    for _round in range(LARGE_CONFERENCE_GAMES):
        by_need = sorted(teams, key=lambda t: conf_games[t.team_id])
        unpaired = {t.team_id for t in by_need if conf_games[t.team_id] < LARGE_CONFERENCE_GAMES}
        for home in by_need:
            if home.team_id not in unpaired:
                continue
            candidates = [
                other
                for other in _shuffled(teams, rng)
                if other.team_id != home.team_id
                and other.team_id in unpaired
                and pair_key(home.team_id, other.team_id) not in scheduled
            ]
            if not candidates:
                continue
            away = candidates[0]
            pairs.append((home, away))
            scheduled.add(pair_key(home.team_id, away.team_id))
            conf_games[home.team_id] += 1
            conf_games[away.team_id] += 1
            unpaired.discard(home.team_id)
            unpaired.discard(away.team_id)
    return pairs


def _place(
    schedule: Schedule,
    home: Team,
    away: Team,
    weeks: Iterable[int],
    prefix: str,
) -> Fixture | None:
    for week in weeks:
        if schedule.is_team_free(home.team_id, week) and schedule.is_team_free(away.team_id, week):
            fixture = Fixture(
                fixture_id=f"{prefix}-{home.team_id}-{away.team_id}-w{week}",
                week=week,
                home_id=home.team_id,
                away_id=away.team_id,
                is_conference_game=home.conference == away.conference and not home.is_independent,
            )
            schedule.add(fixture)
            return fixture
    return None


def _teams_by_conference(teams: Iterable[Team]) -> dict[str, list[Team]]:
    grouped: dict[str, list[Team]] = {}
    for team in teams:
        grouped.setdefault(team.conference, []).append(team)
    return grouped


def generate_season_schedule(teams: Iterable[Team], rng: random.Random) -> Schedule:
    team_list = list(teams)
    schedule = Schedule()
    scheduled: set[tuple[str, str]] = set()
    dropped_conference_games = 0

    for conference, conf_teams in _teams_by_conference(team_list).items():
        if conference == INDEPENDENT:
            continue
        if len(conf_teams) <= ROUND_ROBIN_MAX_TEAMS:
            pairs = round_robin_pairs(conf_teams)
            scheduled.update(pair_key(h.team_id, a.team_id) for h, a in pairs)
        else:
            pairs = _large_conference_pairs(conf_teams, rng, scheduled)

        for home, away in pairs:
            weeks = _shuffled(LATE_WEEKS, rng) + _shuffled(EARLY_WEEKS, rng)
            if _place(schedule, home, away, weeks, "c") is None:
                dropped_conference_games += 1

    # Non-conference slots favour the opening weeks, then any open week.
    fill_weeks = list(EARLY_WEEKS) + _shuffled(LATE_WEEKS, rng)
    for fill_pass in range(FILL_PASSES):
        needing = [t for t in team_list if schedule.game_count(t.team_id) < TARGET_GAMES]
        if len(needing) < 2:
            break
        cross_only = fill_pass < SAME_CONFERENCE_LOCKOUT_PASSES
        for team in _shuffled(needing, rng):
            if schedule.game_count(team.team_id) >= TARGET_GAMES:
                continue
            candidates = [
                other
                for other in _shuffled(team_list, rng)
                if other.team_id != team.team_id
                and schedule.game_count(other.team_id) < TARGET_GAMES
                and pair_key(team.team_id, other.team_id) not in scheduled
                and (not cross_only or other.conference != team.conference)
            ]
            for opponent in candidates:
                if schedule.game_count(team.team_id) >= TARGET_GAMES:
                    break
                if _place(schedule, team, opponent, fill_weeks, "o") is not None:
                    scheduled.add(pair_key(team.team_id, opponent.team_id))

    short = [t.name for t in team_list if schedule.game_count(t.team_id) < TARGET_GAMES]
    logger.info(
        "Generated schedule: %d fixtures for %d teams, %d under %d games, %d conference pairings unplaced",
        len(schedule),
        len(team_list),
        len(short),
        TARGET_GAMES,
        dropped_conference_games,
    )
    if short:
        logger.debug("Under-filled teams: %s", ", ".join(short))
    return schedule
