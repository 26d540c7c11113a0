from __future__ import annotations

import logging
import os
from threading import Lock
from typing import Any, NoReturn

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .app import POLLS, build_default_teams, conferences
from .config import INDEPENDENT
from .errors import SimulationError
from .models import ClassYear, Fixture, Player, RosterDelta, ScoreOverride, Team
from .rankings import conference_standings
from .season import AdvanceReport, SeasonSimulator

logger = logging.getLogger(__name__)

SEED_ENV = "CFB_DYNASTY_SEED"


class ScoreOverrideSelection(BaseModel):
    home_score: int
    away_score: int


class PlayerSelection(BaseModel):
    name: str
    position: str
    year: ClassYear = ClassYear.FR
    rating: int
    hometown: str = ""
    potential: int | None = None
    player_id: str | None = None


class RosterDeltaSelection(BaseModel):
    team_id: str | None = None
    incoming: list[PlayerSelection] = []
    outgoing: list[str] = []


class AdvanceSelection(BaseModel):
    override: ScoreOverrideSelection | None = None
    roster_delta: RosterDeltaSelection | None = None


class CoachCreation(BaseModel):
    name: str
    alma_mater: str = ""
    level: int = 1


class JobSelection(BaseModel):
    team_id: str


class PersuadeSelection(BaseModel):
    player_id: str


def _seed_from_env() -> int | None:
    raw = os.environ.get(SEED_ENV, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", SEED_ENV, raw)
        return None


def _raise_http(exc: SimulationError) -> NoReturn:
    status = 404 if isinstance(exc, LookupError) else 400
    raise HTTPException(status_code=status, detail=str(exc)) from exc


class SimService:
    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed if seed is not None else _seed_from_env()
        self._init_fresh_state()
        self._lock = Lock()

    def _init_fresh_state(self) -> None:
        self.simulator = SeasonSimulator(teams=build_default_teams(seed=self.seed), seed=self.seed)
        self.last_results: list[dict[str, Any]] = []

    def _team(self, team_id: str) -> Team:
        try:
            return self.simulator.get_team(team_id)
        except SimulationError as exc:
            _raise_http(exc)

    def _team_to_dict(self, team: Team) -> dict[str, Any]:
        rec = team.record
        return {
            "team_id": team.team_id,
            "name": team.name,
            "nickname": team.nickname,
            "abbreviation": team.abbreviation,
            "conference": team.conference,
            "prestige": team.prestige,
            "stars": team.stars,
            "wins": rec.wins,
            "losses": rec.losses,
            "conf_wins": rec.conf_wins,
            "conf_losses": rec.conf_losses,
            "points_for": rec.points_for,
            "points_against": rec.points_against,
            "rank": rec.rank,
        }

    def _fixture_to_dict(self, fixture: Fixture) -> dict[str, Any]:
        home = self.simulator.get_team(fixture.home_id)
        away = self.simulator.get_team(fixture.away_id)
        return {
            "fixture_id": fixture.fixture_id,
            "week": fixture.week,
            "home_id": home.team_id,
            "home": home.name,
            "away_id": away.team_id,
            "away": away.name,
            "is_conference_game": fixture.is_conference_game,
            "is_playoff": fixture.is_playoff,
            "label": fixture.label,
            "played": fixture.played,
            "home_score": fixture.home_score,
            "away_score": fixture.away_score,
            "winner_id": fixture.winner_id,
        }

    def _career_to_dict(self) -> dict[str, Any] | None:
        career = self.simulator.career
        if career is None:
            return None
        return {
            "name": career.name,
            "alma_mater": career.alma_mater,
            "level": career.level,
            "prestige": career.prestige,
            "wins": career.wins,
            "losses": career.losses,
            "conference_titles": career.conference_titles,
            "national_titles": career.national_titles,
            "history": list(career.history),
        }

    def meta(self) -> dict[str, Any]:
        sim = self.simulator
        user_team = sim.user_team
        return {
            "stage": sim.state.stage.value,
            "week": sim.state.week,
            "portal_week": sim.state.portal_week,
            "season": sim.season_number,
            "user_team_id": user_team.team_id if user_team else None,
            "user_team": user_team.name if user_team else "",
            "recruiting_points": sim.recruiting_points,
            "scholarships": sim.scholarships,
            "conferences": conferences(sim.teams),
            "polls": sorted(POLLS),
            "coach": self._career_to_dict(),
        }

    def schedule(self, week: int | None, team_id: str | None) -> list[dict[str, Any]]:
        if team_id is not None:
            self._team(team_id)
            fixtures = self.simulator.team_schedule(team_id)
            if week is not None:
                fixtures = [f for f in fixtures if f.week == week]
        else:
            fixtures = self.simulator.week_fixtures(week)
        return [self._fixture_to_dict(f) for f in fixtures]

    def rankings(self, poll: str) -> dict[str, Any]:
        ranker = POLLS.get(poll)
        if ranker is None:
            raise HTTPException(status_code=400, detail=f"Unknown poll {poll!r}")
        rows = [
            {"position": idx, **self._team_to_dict(team)}
            for idx, team in enumerate(ranker(self.simulator.teams), start=1)
        ]
        return {"poll": poll, "week": self.simulator.state.week, "rows": rows}

    def standings(self, conference: str | None) -> dict[str, Any]:
        teams = self.simulator.teams
        if conference is None:
            groups = {
                conf: [self._team_to_dict(t) for t in conference_standings(teams, conf)]
                for conf in conferences(teams)
                if conf != INDEPENDENT
            }
            return {"mode": "league", "groups": groups}
        if conference not in conferences(teams):
            raise HTTPException(status_code=404, detail="Conference not found")
        rows = [self._team_to_dict(t) for t in conference_standings(teams, conference)]
        return {"mode": "conference", "conference": conference, "rows": rows}

    def create_coach(self, payload: CoachCreation) -> dict[str, Any]:
        if not payload.name.strip():
            raise HTTPException(status_code=400, detail="Coach name is required")
        try:
            self.simulator.create_coach(payload.name.strip(), payload.alma_mater, payload.level)
        except SimulationError as exc:
            _raise_http(exc)
        return {"coach": self._career_to_dict(), "offers": self.offers()}

    def offers(self) -> list[dict[str, Any]]:
        return [self._team_to_dict(t) for t in self.simulator.job_offers]

    def refresh_offers(self) -> list[dict[str, Any]]:
        try:
            self.simulator.refresh_job_offers()
        except SimulationError as exc:
            _raise_http(exc)
        return self.offers()

    def take_job(self, team_id: str) -> dict[str, Any]:
        offered = self.simulator.job_offers
        if offered and team_id not in {t.team_id for t in offered}:
            raise HTTPException(status_code=400, detail="Team has not offered a job")
        try:
            self.simulator.accept_job(team_id)
        except SimulationError as exc:
            _raise_http(exc)
        return self.meta()

    def persuade(self, player_id: str) -> dict[str, Any]:
        try:
            stayed = self.simulator.persuade(player_id)
        except SimulationError as exc:
            _raise_http(exc)
        return {
            "player_id": player_id,
            "stayed": stayed,
            "recruiting_points": self.simulator.recruiting_points,
        }

    def advance(self, payload: AdvanceSelection | None = None) -> dict[str, Any]:
        payload = payload or AdvanceSelection()
        override = None
        if payload.override is not None:
            override = ScoreOverride(payload.override.home_score, payload.override.away_score)
        delta = None
        if payload.roster_delta is not None:
            delta = self._roster_delta(payload.roster_delta)
        try:
            report = self.simulator.advance(override=override, roster_delta=delta)
        except SimulationError as exc:
            _raise_http(exc)
        return self._report_to_dict(report)

    def _roster_delta(self, payload: RosterDeltaSelection) -> RosterDelta:
        team_id = payload.team_id or self.simulator.user_team_id
        if team_id is None:
            raise HTTPException(status_code=400, detail="No team selected")
        incoming = []
        for row in payload.incoming:
            player = Player(
                name=row.name,
                position=row.position,
                year=row.year,
                rating=row.rating,
                hometown=row.hometown,
                potential=row.potential if row.potential is not None else row.rating,
            )
            if row.player_id:
                player.player_id = row.player_id
            incoming.append(player)
        return RosterDelta(team_id=team_id, incoming=incoming, outgoing=list(payload.outgoing))

    def _report_to_dict(self, report: AdvanceReport) -> dict[str, Any]:
        self.last_results = [self._fixture_to_dict(f) for f in report.results]
        progression = report.progression
        return {
            "previous": {"stage": report.previous.stage.value, "week": report.previous.week},
            "effects": [effect.value for effect in report.effects],
            "results": self.last_results,
            "generated": [self._fixture_to_dict(f) for f in report.generated],
            "progression": None
            if progression is None
            else {
                "team_id": progression.team_id,
                "wins": progression.wins,
                "losses": progression.losses,
                "expected_wins": progression.expected_wins,
                "won_conference": progression.won_conference,
                "playoff_wins": progression.playoff_wins,
                "won_national_title": progression.won_national_title,
                "prestige_delta": progression.prestige_delta,
            },
            "departures": {
                status.value: [p.name for p in players] for status, players in report.departures.items()
            },
            "meta": self.meta(),
        }

    def reset(self) -> dict[str, Any]:
        self._init_fresh_state()
        return self.meta()


service = SimService()
app = FastAPI(title="College Football Dynasty API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/meta")
def meta() -> dict[str, Any]:
    with service._lock:
        return service.meta()


@app.get("/api/schedule")
def schedule(week: int | None = None, team: str | None = None) -> list[dict[str, Any]]:
    with service._lock:
        return service.schedule(week=week, team_id=team)


@app.get("/api/rankings")
def rankings(poll: str = "ap") -> dict[str, Any]:
    with service._lock:
        return service.rankings(poll.lower())


@app.get("/api/standings")
def standings(conference: str | None = None) -> dict[str, Any]:
    with service._lock:
        return service.standings(conference)


@app.post("/api/coach")
def create_coach(payload: CoachCreation) -> dict[str, Any]:
    with service._lock:
        return service.create_coach(payload)


@app.get("/api/offers")
def offers() -> list[dict[str, Any]]:
    with service._lock:
        return service.offers()


@app.post("/api/offers/refresh")
def refresh_offers() -> list[dict[str, Any]]:
    with service._lock:
        return service.refresh_offers()


@app.post("/api/job")
def take_job(payload: JobSelection) -> dict[str, Any]:
    with service._lock:
        return service.take_job(payload.team_id)


@app.post("/api/persuade")
def persuade(payload: PersuadeSelection) -> dict[str, Any]:
    with service._lock:
        return service.persuade(payload.player_id)


@app.post("/api/advance")
def advance(payload: AdvanceSelection | None = None) -> dict[str, Any]:
    with service._lock:
        return service.advance(payload)


@app.post("/api/reset")
def reset() -> dict[str, Any]:
    with service._lock:
        return service.reset()
