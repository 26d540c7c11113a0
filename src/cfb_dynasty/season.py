"""Season progression.

``transition`` is the whole state machine as a pure function. ``SeasonSimulator``
owns the league, the schedule and the random stream, and executes the effects
``transition`` returns, one explicit ``advance`` call at a time.
"""

from __future__ import annotations

import logging
import math
import random
from collections import Counter
from dataclasses import dataclass, field, replace
from enum import Enum

from .coaching import (
    CoachCareer,
    CoachProgression,
    compute_progression,
    initial_job_offers,
    job_offers,
    level_for_prestige,
)
from .config import (
    CONFERENCE_CHAMPIONSHIP_WEEK,
    PERSUADE_COST,
    PLAYOFF_FIRST_ROUND_WEEK,
    POINTS_ROLLOVER_CAP,
    PORTAL_OPEN_BONUS,
    PORTAL_SCHOLARSHIP_BONUS,
    PORTAL_WEEK_BONUS,
    PORTAL_WEEKS,
    REGULAR_SEASON_WEEKS,
    SCHOLARSHIPS_MAX,
    WEEKLY_POINTS_BASE,
    WEEKLY_POINTS_PER_PRESTIGE,
)
from .engine import GameResult, simulate_game
from .errors import (
    InsufficientRecruitingPoints,
    InvalidScoreOverride,
    InvalidStageAction,
    UnhandledSeasonState,
    UnknownPlayerReference,
    UnknownTeamReference,
)
from .models import (
    Fixture,
    LeavingStatus,
    Player,
    RosterDelta,
    ScoreOverride,
    SeasonStage,
    SeasonState,
    Team,
)
from .names import NameGenerator
from .postseason import generate_conference_championships, generate_playoffs
from .rankings import apply_weekly_ranks
from .roster import apply_roster_delta, generate_balanced_roster, mark_departures, roll_roster
from .schedule import Schedule, generate_season_schedule

logger = logging.getLogger(__name__)


class Effect(str, Enum):
    SCORE_WEEK = "score_week"
    UPDATE_RANKS = "update_ranks"
    ROLLOVER_RECRUITING = "rollover_recruiting"
    CONFERENCE_CHAMPIONSHIPS = "conference_championships"
    PLAYOFFS = "playoffs"
    COACH_PROGRESSION = "coach_progression"
    MARK_DEPARTURES = "mark_departures"
    APPLY_ROSTER_DELTA = "apply_roster_delta"
    OPEN_TRANSFER_PORTAL = "open_transfer_portal"
    PORTAL_BUDGET = "portal_budget"
    ROLL_OVER_SEASON = "roll_over_season"


_WEEKLY = (Effect.SCORE_WEEK, Effect.UPDATE_RANKS, Effect.ROLLOVER_RECRUITING)


@dataclass(frozen=True, slots=True)
class AdvanceEvent:
    """What the caller knows when asking for the next step."""

    next_round_scheduled: bool = False


def transition(state: SeasonState, event: AdvanceEvent) -> tuple[SeasonState, tuple[Effect, ...]]:
    stage, week = state.stage, state.week

    if stage is SeasonStage.PRE_SEASON and week == 0:
        return replace(state, stage=SeasonStage.REGULAR_SEASON, week=1), ()

    if stage is SeasonStage.REGULAR_SEASON:
        if week == REGULAR_SEASON_WEEKS:
            return (
                replace(state, stage=SeasonStage.CONFERENCE_CHAMPIONSHIP, week=CONFERENCE_CHAMPIONSHIP_WEEK),
                (*_WEEKLY, Effect.CONFERENCE_CHAMPIONSHIPS),
            )
        if 1 <= week < REGULAR_SEASON_WEEKS:
            return replace(state, week=week + 1), _WEEKLY

    if stage is SeasonStage.CONFERENCE_CHAMPIONSHIP and week == CONFERENCE_CHAMPIONSHIP_WEEK:
        return (
            replace(state, stage=SeasonStage.POST_SEASON, week=PLAYOFF_FIRST_ROUND_WEEK),
            (*_WEEKLY, Effect.PLAYOFFS),
        )

    if stage is SeasonStage.POST_SEASON and week >= PLAYOFF_FIRST_ROUND_WEEK:
        if event.next_round_scheduled:
            return replace(state, week=week + 1), _WEEKLY
        return (
            replace(state, stage=SeasonStage.COACHING_CAROUSEL),
            (*_WEEKLY, Effect.COACH_PROGRESSION),
        )

    if stage is SeasonStage.COACHING_CAROUSEL:
        return (
            replace(state, stage=SeasonStage.RETENTION),
            (Effect.MARK_DEPARTURES, Effect.APPLY_ROSTER_DELTA),
        )

    if stage is SeasonStage.RETENTION:
        return (
            replace(state, stage=SeasonStage.TRANSFER_PORTAL, portal_week=1),
            (Effect.OPEN_TRANSFER_PORTAL,),
        )

    if stage is SeasonStage.TRANSFER_PORTAL:
        if 1 <= state.portal_week < PORTAL_WEEKS:
            return replace(state, portal_week=state.portal_week + 1), (Effect.PORTAL_BUDGET,)
        if state.portal_week == PORTAL_WEEKS:
            return SeasonState(), (Effect.ROLL_OVER_SEASON, Effect.APPLY_ROSTER_DELTA)

    raise UnhandledSeasonState(state)


def weekly_recruiting_points(prestige: int) -> int:
    return math.floor(WEEKLY_POINTS_BASE + prestige * WEEKLY_POINTS_PER_PRESTIGE)


def _still_on_roster(team: Team, delta: RosterDelta) -> RosterDelta:
    # Outgoing ids are validated before any effect runs; the season rollover may
    # already have dropped some of them.
    present = {p.player_id for p in team.roster}
    return RosterDelta(
        team_id=delta.team_id,
        incoming=delta.incoming,
        outgoing=[player_id for player_id in delta.outgoing if player_id in present],
    )


@dataclass(slots=True)
class AdvanceReport:
    previous: SeasonState
    state: SeasonState
    effects: tuple[Effect, ...]
    results: list[Fixture] = field(default_factory=list)
    generated: list[Fixture] = field(default_factory=list)
    progression: CoachProgression | None = None
    departures: dict[LeavingStatus, list[Player]] = field(default_factory=dict)


class SeasonSimulator:
    def __init__(
        self,
        teams: list[Team],
        seed: int | None = None,
        user_team_id: str | None = None,
        career: CoachCareer | None = None,
    ) -> None:
        counts = Counter(team.team_id for team in teams)
        duplicated = sorted(team_id for team_id, n in counts.items() if n > 1)
        if duplicated:
            raise ValueError(f"Duplicate team ids: {', '.join(duplicated)}")

        self.teams = teams
        self._teams_by_id = {team.team_id: team for team in teams}
        self._rng = random.Random(seed)
        self._name_generator = NameGenerator(seed=seed)
        self._name_generator.reserve([p.name for t in self.teams for p in t.roster])
        self.career = career
        self.state = SeasonState()
        self.season_number = 1
        self.user_team_id: str | None = None
        self.recruiting_points = 0
        self.scholarships = SCHOLARSHIPS_MAX
        self.job_offers: list[Team] = []
        self.last_progression: CoachProgression | None = None
        self.last_departures: dict[LeavingStatus, list[Player]] = {}
        self._offer_prestige: float | None = None
        self._initial_offer_level: int | None = None
        self._offers_refreshed = False
        self.schedule: Schedule = generate_season_schedule(self.teams, self._rng)
        if user_team_id is not None:
            self._take_over(self.get_team(user_team_id))

    @property
    def stage(self) -> SeasonStage:
        return self.state.stage

    @property
    def week(self) -> int:
        return self.state.week

    @property
    def user_team(self) -> Team | None:
        if self.user_team_id is None:
            return None
        return self._teams_by_id[self.user_team_id]

    def get_team(self, team_id: str) -> Team:
        try:
            return self._teams_by_id[team_id]
        except KeyError:
            raise UnknownTeamReference(team_id) from None

    def get_fixture(self, fixture_id: str) -> Fixture:
        return self.schedule.get(fixture_id)

    def week_fixtures(self, week: int | None = None) -> list[Fixture]:
        return self.schedule.for_week(self.state.week if week is None else week)

    def team_schedule(self, team_id: str) -> list[Fixture]:
        self.get_team(team_id)
        return sorted(self.schedule.for_team(team_id), key=lambda f: f.week)

    def user_fixture(self) -> Fixture | None:
        if self.user_team_id is None:
            return None
        return self.schedule.team_fixture_in_week(self.user_team_id, self.state.week)

    def accept_job(self, team_id: str) -> Team:
        if self.state.stage not in (SeasonStage.PRE_SEASON, SeasonStage.COACHING_CAROUSEL):
            raise InvalidStageAction("change jobs", self.state)
        team = self.get_team(team_id)
        previous = self.user_team
        self._take_over(team)
        self.job_offers = []
        self._offer_prestige = None
        self._initial_offer_level = None
        if self.career is not None:
            self.career.history.append(f"Season {self.season_number}: hired by {team.name}")
        logger.info(
            "Coach moved from %s to %s",
            previous.name if previous else "unemployed",
            team.name,
        )
        return team

    def create_coach(self, name: str, alma_mater: str = "", level: int = 1) -> CoachCareer:
        """Start a coaching career and open its level-banded first job offers."""
        if self.state.stage is not SeasonStage.PRE_SEASON:
            raise InvalidStageAction("create a coach", self.state)
        offers, prestige = initial_job_offers(level, self.teams, self._rng)
        self.career = CoachCareer(
            name=name,
            alma_mater=alma_mater,
            level=level_for_prestige(prestige),
            prestige=prestige,
        )
        self.job_offers = offers
        self._initial_offer_level = level
        self._offers_refreshed = False
        return self.career

    def refresh_job_offers(self) -> list[Team]:
        """Redraw the open offers once per offer window."""
        if self._offers_refreshed:
            raise InvalidStageAction("refresh job offers again", self.state)
        stage = self.state.stage
        if stage is SeasonStage.COACHING_CAROUSEL and self._offer_prestige is not None:
            self.job_offers = job_offers(
                self.teams, self._offer_prestige, self._rng, exclude_team_id=self.user_team_id
            )
        elif stage is SeasonStage.PRE_SEASON and self._initial_offer_level is not None:
            self.job_offers, _ = initial_job_offers(self._initial_offer_level, self.teams, self._rng)
        else:
            raise InvalidStageAction("refresh job offers", self.state)
        self._offers_refreshed = True
        return self.job_offers

    def persuade(self, player_id: str) -> bool:
        """Spend recruiting points to try to keep a transferring player; True if they stay."""
        if self.state.stage is not SeasonStage.RETENTION or self.user_team is None:
            raise InvalidStageAction("persuade players", self.state)
        team = self.user_team
        player = next(
            (p for p in team.roster if p.player_id == player_id and p.leaving_status is LeavingStatus.TRANSFER),
            None,
        )
        if player is None:
            raise UnknownPlayerReference(player_id, team.team_id)
        if self.recruiting_points < PERSUADE_COST:
            raise InsufficientRecruitingPoints(PERSUADE_COST, self.recruiting_points)

        self.recruiting_points -= PERSUADE_COST
        stayed = self._rng.random() < team.prestige / 100
        if stayed:
            status = player.leaving_status
            self.last_departures[status] = [p for p in self.last_departures.get(status, []) if p is not player]
            player.leaving_status = None
        logger.info("Persuading %s to stay at %s %s", player.name, team.name, "worked" if stayed else "failed")
        return stayed

    def _take_over(self, team: Team) -> None:
        self.user_team_id = team.team_id
        if not team.roster:
            team.roster = generate_balanced_roster(team, self._rng, self._name_generator)
        self.recruiting_points = weekly_recruiting_points(team.prestige)

    def advance(
        self,
        override: ScoreOverride | None = None,
        roster_delta: RosterDelta | None = None,
    ) -> AdvanceReport:
        if override is not None and (
            override.home_score < 0 or override.away_score < 0 or override.home_score == override.away_score
        ):
            raise InvalidScoreOverride(
                f"Override {override.home_score}-{override.away_score} must be non-negative and decisive."
            )
        delta_team = None
        if roster_delta is not None:
            delta_team = self.get_team(roster_delta.team_id)
            on_roster = {p.player_id for p in delta_team.roster}
            for player_id in roster_delta.outgoing:
                if player_id not in on_roster:
                    raise UnknownPlayerReference(player_id, delta_team.team_id)

        event = AdvanceEvent(next_round_scheduled=bool(self.schedule.for_week(self.state.week + 1)))
        previous = self.state
        next_state, effects = transition(previous, event)
        report = AdvanceReport(previous=previous, state=next_state, effects=effects)

        if override is not None and Effect.SCORE_WEEK not in effects:
            logger.warning("Score override ignored: no games are scored during %s", previous.stage.value)
        if roster_delta is not None and Effect.APPLY_ROSTER_DELTA not in effects:
            logger.warning("Roster delta ignored: rosters are closed during %s", previous.stage.value)

        for effect in effects:
            if effect is Effect.SCORE_WEEK:
                report.results = self._score_week(previous.week, override)
            elif effect is Effect.UPDATE_RANKS:
                apply_weekly_ranks(self.teams, previous.week)
            elif effect is Effect.ROLLOVER_RECRUITING:
                self._rollover_recruiting()
            elif effect is Effect.CONFERENCE_CHAMPIONSHIPS:
                report.generated = generate_conference_championships(self.teams)
                self.schedule.extend(report.generated)
            elif effect is Effect.PLAYOFFS:
                report.generated = generate_playoffs(self.teams)
                self.schedule.extend(report.generated)
            elif effect is Effect.COACH_PROGRESSION:
                report.progression = self._progress_coach()
            elif effect is Effect.MARK_DEPARTURES:
                report.departures = self._mark_departures()
            elif effect is Effect.APPLY_ROSTER_DELTA:
                if roster_delta is not None and delta_team is not None:
                    apply_roster_delta(delta_team, _still_on_roster(delta_team, roster_delta))
            elif effect is Effect.OPEN_TRANSFER_PORTAL:
                self.scholarships = min(SCHOLARSHIPS_MAX, self.scholarships + PORTAL_SCHOLARSHIP_BONUS)
                self.recruiting_points = self._weekly_points() + PORTAL_OPEN_BONUS
            elif effect is Effect.PORTAL_BUDGET:
                self.recruiting_points = self._weekly_points() + PORTAL_WEEK_BONUS
            elif effect is Effect.ROLL_OVER_SEASON:
                self._roll_over_season()

        self.state = next_state
        if previous.stage is not next_state.stage:
            logger.info(
                "Season %d: %s -> %s (week %d)",
                self.season_number,
                previous.stage.value,
                next_state.stage.value,
                next_state.week,
            )
        return report

    def advance_until(self, stage: SeasonStage, max_steps: int = 64) -> list[AdvanceReport]:
        reports: list[AdvanceReport] = []
        for _ in range(max_steps):
            if self.state.stage is stage:
                return reports
            reports.append(self.advance())
        if self.state.stage is not stage:
            raise RuntimeError(f"Did not reach {stage.value} within {max_steps} steps.")
        return reports

    def _weekly_points(self) -> int:
        team = self.user_team
        return weekly_recruiting_points(team.prestige) if team else 0

    def _rollover_recruiting(self) -> None:
        if self.user_team is None:
            return
        carried = min(self.recruiting_points, POINTS_ROLLOVER_CAP)
        self.recruiting_points = self._weekly_points() + carried

    def _score_week(self, week: int, override: ScoreOverride | None) -> list[Fixture]:
        due = [f for f in self.schedule.for_week(week) if not f.played]
        seen = Counter(team_id for f in due for team_id in (f.home_id, f.away_id))
        doubled = sorted(team_id for team_id, n in seen.items() if n > 1)
        if doubled:
            raise ValueError(f"Week {week} schedules teams more than once: {', '.join(doubled)}")

        override_used = False
        for fixture in due:
            home = self.get_team(fixture.home_id)
            away = self.get_team(fixture.away_id)
            if override is not None and self.user_team_id is not None and fixture.involves(self.user_team_id):
                result = GameResult(override.home_score, override.away_score)
                override_used = True
            else:
                result = simulate_game(home, away, self._rng)
            fixture.record_result(result.home_score, result.away_score)
            home.record.register_game(result.home_score, result.away_score, fixture.is_conference_game)
            away.record.register_game(result.away_score, result.home_score, fixture.is_conference_game)

        if override is not None and not override_used:
            logger.warning("Score override ignored: controlled team has no game in week %d", week)
        logger.debug("Scored %d fixtures in week %d", len(due), week)
        return due

    def _progress_coach(self) -> CoachProgression | None:
        team = self.user_team
        if team is None:
            return None
        progression = compute_progression(team, self.schedule.for_team(team.team_id))
        if self.career is not None:
            prestige = self.career.apply(progression, team.name, self.season_number)
        else:
            # No career record: the window centres on the program's adjusted prestige.
            prestige = team.prestige + progression.prestige_delta
        self.last_progression = progression
        self._offer_prestige = prestige
        self._offers_refreshed = False
        self.job_offers = job_offers(self.teams, prestige, self._rng, exclude_team_id=team.team_id)
        logger.info(
            "%s finished %d-%d (expected %d); prestige delta %+.1f, %d job offers",
            team.name,
            progression.wins,
            progression.losses,
            progression.expected_wins,
            progression.prestige_delta,
            len(self.job_offers),
        )
        return progression

    def _mark_departures(self) -> dict[LeavingStatus, list[Player]]:
        team = self.user_team
        if team is None:
            return {}
        self.last_departures = mark_departures(team, self._rng)
        return self.last_departures

    def _roll_over_season(self) -> None:
        for team in self.teams:
            roll_roster(team, self._rng, self._name_generator, controlled=team.team_id == self.user_team_id)
            team.record.reset()
        self.season_number += 1
        self.schedule = generate_season_schedule(self.teams, self._rng)
        self.recruiting_points = self._weekly_points()
        self.scholarships = SCHOLARSHIPS_MAX
        self.job_offers = []
        self.last_departures = {}
        self._offer_prestige = None
        self._offers_refreshed = False
