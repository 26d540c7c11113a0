import logging
import random

import pytest

from cfb_dynasty.coaching import CoachCareer
from cfb_dynasty.errors import (
    InsufficientRecruitingPoints,
    InvalidScoreOverride,
    InvalidStageAction,
    UnhandledSeasonState,
    UnknownFixtureReference,
    UnknownPlayerReference,
    UnknownTeamReference,
)
from cfb_dynasty.models import (
    ClassYear,
    Fixture,
    LeavingStatus,
    Player,
    RosterDelta,
    ScoreOverride,
    SeasonStage,
    SeasonState,
    Team,
)
from cfb_dynasty.names import NameGenerator
from cfb_dynasty.rankings import conference_standings
from cfb_dynasty.roster import generate_balanced_roster
from cfb_dynasty.season import AdvanceEvent, Effect, SeasonSimulator, transition, weekly_recruiting_points


def _conference(name: str, size: int, rosters: bool = False) -> list[Team]:
    teams = [Team(team_id=str(i + 1), name=f"{name} {i + 1}", prestige=60 + i, conference=name) for i in range(size)]
    if rosters:
        rng, names = random.Random(1), NameGenerator(seed=1)
        for team in teams:
            team.roster = generate_balanced_roster(team, rng, names)
    return teams


def _advance_to_user_game(sim: SeasonSimulator) -> Fixture:
    if sim.stage is SeasonStage.PRE_SEASON:
        sim.advance()
    while sim.user_fixture() is None:
        assert sim.week < 14
        sim.advance()
    fixture = sim.user_fixture()
    assert fixture is not None
    return fixture


WEEKLY = (Effect.SCORE_WEEK, Effect.UPDATE_RANKS, Effect.ROLLOVER_RECRUITING)


@pytest.mark.parametrize(
    ("state", "event", "expected_state", "expected_effects"),
    [
        (SeasonState(), AdvanceEvent(), SeasonState(SeasonStage.REGULAR_SEASON, 1), ()),
        (SeasonState(SeasonStage.REGULAR_SEASON, 7), AdvanceEvent(), SeasonState(SeasonStage.REGULAR_SEASON, 8), WEEKLY),
        (
            SeasonState(SeasonStage.REGULAR_SEASON, 14),
            AdvanceEvent(),
            SeasonState(SeasonStage.CONFERENCE_CHAMPIONSHIP, 15),
            (*WEEKLY, Effect.CONFERENCE_CHAMPIONSHIPS),
        ),
        (
            SeasonState(SeasonStage.CONFERENCE_CHAMPIONSHIP, 15),
            AdvanceEvent(),
            SeasonState(SeasonStage.POST_SEASON, 16),
            (*WEEKLY, Effect.PLAYOFFS),
        ),
        (
            SeasonState(SeasonStage.POST_SEASON, 16),
            AdvanceEvent(next_round_scheduled=True),
            SeasonState(SeasonStage.POST_SEASON, 17),
            WEEKLY,
        ),
        (
            SeasonState(SeasonStage.POST_SEASON, 16),
            AdvanceEvent(),
            SeasonState(SeasonStage.COACHING_CAROUSEL, 16),
            (*WEEKLY, Effect.COACH_PROGRESSION),
        ),
        (
            SeasonState(SeasonStage.COACHING_CAROUSEL, 16),
            AdvanceEvent(),
            SeasonState(SeasonStage.RETENTION, 16),
            (Effect.MARK_DEPARTURES, Effect.APPLY_ROSTER_DELTA),
        ),
        (
            SeasonState(SeasonStage.RETENTION, 16),
            AdvanceEvent(),
            SeasonState(SeasonStage.TRANSFER_PORTAL, 16, 1),
            (Effect.OPEN_TRANSFER_PORTAL,),
        ),
        (
            SeasonState(SeasonStage.TRANSFER_PORTAL, 16, 1),
            AdvanceEvent(),
            SeasonState(SeasonStage.TRANSFER_PORTAL, 16, 2),
            (Effect.PORTAL_BUDGET,),
        ),
        (
            SeasonState(SeasonStage.TRANSFER_PORTAL, 16, 2),
            AdvanceEvent(),
            SeasonState(),
            (Effect.ROLL_OVER_SEASON, Effect.APPLY_ROSTER_DELTA),
        ),
    ],
)
def test_transition_table(state, event, expected_state, expected_effects) -> None:
    assert transition(state, event) == (expected_state, expected_effects)


@pytest.mark.parametrize(
    "state",
    [
        SeasonState(SeasonStage.PRE_SEASON, 3),
        SeasonState(SeasonStage.REGULAR_SEASON, 0),
        SeasonState(SeasonStage.REGULAR_SEASON, 15),
        SeasonState(SeasonStage.CONFERENCE_CHAMPIONSHIP, 14),
        SeasonState(SeasonStage.POST_SEASON, 15),
        SeasonState(SeasonStage.TRANSFER_PORTAL, 16, 0),
        SeasonState(SeasonStage.TRANSFER_PORTAL, 16, 3),
    ],
)
def test_transition_rejects_unknown_states(state: SeasonState) -> None:
    with pytest.raises(UnhandledSeasonState):
        transition(state, AdvanceEvent())


def test_weekly_recruiting_points() -> None:
    assert weekly_recruiting_points(75) == 212
    assert weekly_recruiting_points(96) == 244


def test_duplicate_team_ids_rejected() -> None:
    teams = _conference("SEC", 3)
    teams.append(Team(team_id="1", name="Impostor", prestige=50, conference="SEC"))
    with pytest.raises(ValueError):
        SeasonSimulator(teams, seed=1)


def test_unknown_team_lookup() -> None:
    sim = SeasonSimulator(_conference("SEC", 4), seed=1)
    with pytest.raises(UnknownTeamReference):
        sim.get_team("404")
    with pytest.raises(UnknownFixtureReference):
        sim.get_fixture("c-404-405-w1")


def test_sixteen_team_conference_plays_one_championship() -> None:
    teams = _conference("SEC", 16)
    sim = SeasonSimulator(teams, seed=21)

    sim.advance_until(SeasonStage.CONFERENCE_CHAMPIONSHIP)
    assert sim.week == 15
    championship = sim.week_fixtures(15)
    assert len(championship) == 1
    game = championship[0]
    assert game.label == "SEC Championship"
    assert sim.get_fixture(game.fixture_id) is game
    assert game.home_id == conference_standings(teams, "SEC")[0].team_id
    assert game.away_id == conference_standings(teams, "SEC")[1].team_id

    report = sim.advance()
    assert sim.stage is SeasonStage.POST_SEASON
    assert game.played
    assert len(report.generated) == 4
    assert all(f.week == 16 for f in report.generated)

    sim.advance()
    assert sim.stage is SeasonStage.COACHING_CAROUSEL
    assert all(f.played for f in sim.schedule)
    assert all(t.record.rank > 0 for t in teams)


def test_records_match_played_fixtures() -> None:
    teams = _conference("Big 12", 8)
    sim = SeasonSimulator(teams, seed=3)
    sim.advance_until(SeasonStage.CONFERENCE_CHAMPIONSHIP)

    for team in teams:
        played = [f for f in sim.schedule.for_team(team.team_id) if f.played]
        wins = sum(1 for f in played if f.winner_id == team.team_id)
        assert team.record.wins == wins
        assert team.record.losses == len(played) - wins
        assert team.record.conf_wins == wins
        assert team.record.points_for == sum(
            f.home_score if f.home_id == team.team_id else f.away_score for f in played
        )


def test_score_override_applies_to_controlled_fixture() -> None:
    sim = SeasonSimulator(_conference("SEC", 12), seed=5, user_team_id="3")
    fixture = _advance_to_user_game(sim)
    user_home = fixture.home_id == "3"
    override = ScoreOverride(42, 7) if user_home else ScoreOverride(7, 42)
    user_team = sim.get_team("3")
    wins_before = user_team.record.wins

    report = sim.advance(override=override)

    assert fixture in report.results
    assert (fixture.home_score, fixture.away_score) == (override.home_score, override.away_score)
    assert fixture.winner_id == "3"
    assert user_team.record.wins == wins_before + 1


def test_invalid_override_leaves_state_untouched() -> None:
    sim = SeasonSimulator(_conference("SEC", 12), seed=5, user_team_id="3")
    _advance_to_user_game(sim)
    state = sim.state
    with pytest.raises(InvalidScoreOverride):
        sim.advance(override=ScoreOverride(21, 21))
    with pytest.raises(InvalidScoreOverride):
        sim.advance(override=ScoreOverride(-3, 10))
    assert sim.state == state
    assert not any(f.played for f in sim.week_fixtures())


def test_override_ignored_on_bye_week(caplog) -> None:
    sim = SeasonSimulator(_conference("Pac-12", 4), seed=2, user_team_id="1")
    sim.advance()
    assert sim.user_fixture() is None

    with caplog.at_level(logging.WARNING, logger="cfb_dynasty.season"):
        sim.advance(override=ScoreOverride(10, 3))
    assert "override ignored" in caplog.text
    assert sim.week == 2


def test_team_scheduled_twice_in_a_week_is_rejected() -> None:
    sim = SeasonSimulator(_conference("Pac-12", 4), seed=2)
    sim.schedule.add(Fixture(fixture_id="x-1-2-w1", week=1, home_id="1", away_id="2"))
    sim.schedule.add(Fixture(fixture_id="x-1-3-w1", week=1, home_id="1", away_id="3"))
    sim.advance()
    with pytest.raises(ValueError):
        sim.advance()


def test_recruiting_points_roll_over_weekly() -> None:
    sim = SeasonSimulator(_conference("SEC", 6), seed=4, user_team_id="6")
    weekly = weekly_recruiting_points(sim.get_team("6").prestige)
    assert sim.recruiting_points == weekly
    sim.advance()
    sim.advance()
    assert sim.recruiting_points == weekly + 20

    sim.recruiting_points = 5
    sim.advance()
    assert sim.recruiting_points == weekly + 5


def test_accept_job_only_between_seasons() -> None:
    sim = SeasonSimulator(_conference("SEC", 6), seed=4)
    team = sim.accept_job("2")
    assert sim.user_team is team
    assert len(team.roster) == 50
    sim.advance()
    with pytest.raises(InvalidStageAction):
        sim.accept_job("3")


@pytest.mark.regression
def test_full_cycle_returns_to_pre_season() -> None:
    teams = _conference("SEC", 14, rosters=True)
    career = CoachCareer(name="Pat Example", prestige=40)
    sim = SeasonSimulator(teams, seed=11, user_team_id="10", career=career)
    user = sim.get_team("10")
    weekly = weekly_recruiting_points(user.prestige)

    sim.advance_until(SeasonStage.COACHING_CAROUSEL)
    assert sim.last_progression is not None
    assert sim.last_progression.team_id == "10"
    assert career.history[-1].startswith("Season 1: SEC 10")
    assert 5 <= career.prestige <= 99
    assert all(t.team_id != "10" for t in sim.job_offers)

    seniors = {p.player_id for p in user.roster if p.year is ClassYear.SR}
    transfer_out = next(p for p in user.roster if p.year is ClassYear.FR)
    report = sim.advance(roster_delta=RosterDelta(team_id="10", outgoing=[transfer_out.player_id]))
    assert sim.stage is SeasonStage.RETENTION
    assert {p.player_id for p in report.departures[LeavingStatus.GRADUATING]} == seniors
    assert transfer_out.player_id not in {p.player_id for p in user.roster}

    sim.advance()
    assert sim.stage is SeasonStage.TRANSFER_PORTAL
    assert sim.state.portal_week == 1
    assert sim.recruiting_points == weekly + 200
    assert sim.scholarships == 25

    sim.advance()
    assert sim.state.portal_week == 2
    assert sim.recruiting_points == weekly + 100

    recruit = Player(name="Incoming Recruit", position="QB", year=ClassYear.FR, rating=78, potential=90)
    sim.advance(roster_delta=RosterDelta(team_id="10", incoming=[recruit]))
    assert sim.state == SeasonState()
    assert sim.season_number == 2
    assert sim.recruiting_points == weekly
    assert sim.scholarships == 25
    assert sim.job_offers == []
    assert not any(p.player_id in seniors for p in user.roster)
    assert user.roster[-1] is recruit
    assert recruit.year is ClassYear.FR
    assert all(t.record.wins == 0 and t.record.losses == 0 for t in teams)
    assert len(sim.schedule) > 0
    assert not any(f.played for f in sim.schedule)
    assert all(len(t.roster) >= 45 for t in teams if t.team_id != "10")


def test_roster_delta_with_unknown_player_is_rejected_before_any_change() -> None:
    teams = _conference("SEC", 14, rosters=True)
    sim = SeasonSimulator(teams, seed=11, user_team_id="10")
    sim.advance_until(SeasonStage.COACHING_CAROUSEL)
    with pytest.raises(UnknownPlayerReference):
        sim.advance(roster_delta=RosterDelta(team_id="10", outgoing=["nobody"]))
    assert sim.stage is SeasonStage.COACHING_CAROUSEL
    assert all(p.leaving_status is None for p in sim.get_team("10").roster)


@pytest.mark.regression
def test_portal_close_accepts_outgoing_senior() -> None:
    teams = _conference("SEC", 14, rosters=True)
    sim = SeasonSimulator(teams, seed=11, user_team_id="10")
    user = sim.get_team("10")
    sim.advance_until(SeasonStage.TRANSFER_PORTAL)
    sim.advance()
    assert sim.state.portal_week == 2

    senior = next(p for p in user.roster if p.leaving_status is LeavingStatus.GRADUATING)
    walk_out = next(p for p in user.roster if p.year is ClassYear.FR and not p.is_leaving)
    sim.advance(roster_delta=RosterDelta(team_id="10", outgoing=[senior.player_id, walk_out.player_id]))

    assert sim.state == SeasonState()
    assert sim.season_number == 2
    remaining = {p.player_id for p in user.roster}
    assert senior.player_id not in remaining
    assert walk_out.player_id not in remaining


def _retention_sim(prestige: int) -> tuple[SeasonSimulator, Player]:
    sim = SeasonSimulator(_conference("SEC", 14, rosters=True), seed=11, user_team_id="10")
    sim.advance_until(SeasonStage.RETENTION)
    user = sim.get_team("10")
    user.prestige = prestige
    player = next(p for p in user.roster if p.year is ClassYear.FR and not p.is_leaving)
    player.leaving_status = LeavingStatus.TRANSFER
    sim.last_departures.setdefault(LeavingStatus.TRANSFER, []).append(player)
    sim.recruiting_points = 120
    return sim, player


def test_persuade_keeps_transfer_at_full_prestige() -> None:
    sim, player = _retention_sim(prestige=100)

    assert sim.persuade(player.player_id) is True
    assert player.leaving_status is None
    assert sim.recruiting_points == 70
    assert player not in sim.last_departures[LeavingStatus.TRANSFER]

    sim.advance_until(SeasonStage.PRE_SEASON)
    assert player in sim.get_team("10").roster


def test_persuade_fails_at_zero_prestige() -> None:
    sim, player = _retention_sim(prestige=0)

    assert sim.persuade(player.player_id) is False
    assert player.leaving_status is LeavingStatus.TRANSFER
    assert sim.recruiting_points == 70
    assert player in sim.last_departures[LeavingStatus.TRANSFER]


def test_persuade_needs_fifty_points() -> None:
    sim, player = _retention_sim(prestige=100)
    sim.recruiting_points = 49

    with pytest.raises(InsufficientRecruitingPoints):
        sim.persuade(player.player_id)
    assert sim.recruiting_points == 49
    assert player.leaving_status is LeavingStatus.TRANSFER


def test_persuade_rejects_players_not_transferring() -> None:
    sim, _ = _retention_sim(prestige=100)
    user = sim.get_team("10")
    staying = next(p for p in user.roster if not p.is_leaving)
    senior = next(p for p in user.roster if p.leaving_status is LeavingStatus.GRADUATING)

    for player_id in (staying.player_id, senior.player_id, "nobody"):
        with pytest.raises(UnknownPlayerReference):
            sim.persuade(player_id)
    assert sim.recruiting_points == 120


def test_persuade_only_during_retention() -> None:
    sim = SeasonSimulator(_conference("SEC", 6, rosters=True), seed=4, user_team_id="2")
    sim.recruiting_points = 500
    player = sim.get_team("2").roster[0]
    player.leaving_status = LeavingStatus.TRANSFER

    with pytest.raises(InvalidStageAction):
        sim.persuade(player.player_id)
    assert sim.recruiting_points == 500


def test_create_coach_opens_level_band_offers() -> None:
    sim = SeasonSimulator(_conference("SEC", 14), seed=8)
    career = sim.create_coach("Pat Example", alma_mater="SEC 3", level=2)

    assert sim.career is career
    assert career.prestige == 30
    assert 0 < len(sim.job_offers) <= 5
    assert all(50 <= t.prestige <= 75 for t in sim.job_offers)

    sim.advance()
    with pytest.raises(InvalidStageAction):
        sim.create_coach("Too Late")


def test_offers_refresh_once_per_window() -> None:
    sim = SeasonSimulator(_conference("SEC", 14, rosters=True), seed=11)
    with pytest.raises(InvalidStageAction):
        sim.refresh_job_offers()

    sim.create_coach("Pat Example", level=2)
    refreshed = sim.refresh_job_offers()
    assert refreshed is sim.job_offers
    assert all(50 <= t.prestige <= 75 for t in refreshed)
    with pytest.raises(InvalidStageAction):
        sim.refresh_job_offers()

    sim.accept_job("10")
    sim.advance_until(SeasonStage.COACHING_CAROUSEL)
    prestige = sim.career.prestige
    offers = sim.refresh_job_offers()
    assert all(t.team_id != "10" for t in offers)
    assert all(prestige - 15 <= t.prestige <= prestige + 10 for t in offers)
    with pytest.raises(InvalidStageAction):
        sim.refresh_job_offers()

    sim.advance()
    assert sim.stage is SeasonStage.RETENTION
    with pytest.raises(InvalidStageAction):
        sim.refresh_job_offers()


def test_offers_without_career_centre_on_adjusted_program_prestige() -> None:
    sim = SeasonSimulator(_conference("SEC", 14, rosters=True), seed=11, user_team_id="10")
    user = sim.get_team("10")
    sim.advance_until(SeasonStage.COACHING_CAROUSEL)

    assert sim.career is None
    progression = sim.last_progression
    assert progression is not None
    centre = user.prestige + progression.prestige_delta
    pool = {t.team_id for t in sim.teams if t.team_id != "10" and centre - 15 <= t.prestige <= centre + 10}
    offered = {t.team_id for t in sim.job_offers}
    assert offered <= pool
    assert len(offered) == min(5, len(pool))
