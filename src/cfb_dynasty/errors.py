from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import SeasonState


class SimulationError(Exception):
    """Base class for contract violations raised by the season engine."""


class UnknownTeamReference(SimulationError, LookupError):
    def __init__(self, team_id: str) -> None:
        super().__init__(f"Unknown team id: {team_id!r}")
        self.team_id = team_id


class UnknownFixtureReference(SimulationError, LookupError):
    def __init__(self, fixture_id: str) -> None:
        super().__init__(f"Unknown fixture id: {fixture_id!r}")
        self.fixture_id = fixture_id


class UnknownPlayerReference(SimulationError, LookupError):
    def __init__(self, player_id: str, team_id: str) -> None:
        super().__init__(f"Player {player_id!r} is not on the roster of {team_id!r}")
        self.player_id = player_id
        self.team_id = team_id


class UnhandledSeasonState(SimulationError):
    def __init__(self, state: SeasonState) -> None:
        super().__init__(
            f"No transition defined for stage={state.stage.value} week={state.week} "
            f"portal_week={state.portal_week}"
        )
        self.state = state


class InvalidScoreOverride(SimulationError, ValueError):
    pass


class InvalidStageAction(SimulationError):
    def __init__(self, action: str, state: SeasonState) -> None:
        super().__init__(f"Cannot {action} during {state.stage.value} (week {state.week})")
        self.action = action
        self.state = state


class InsufficientRecruitingPoints(SimulationError):
    def __init__(self, needed: int, available: int) -> None:
        super().__init__(f"Need {needed} recruiting points, have {available}")
        self.needed = needed
        self.available = available
