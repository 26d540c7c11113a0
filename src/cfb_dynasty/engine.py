from __future__ import annotations

import math
import random
from dataclasses import dataclass

from .config import BASE_SCORE, BASE_SCORE_SPREAD, HOME_ADVANTAGE, MAX_FORCED_MARGIN
from .models import Team


@dataclass(frozen=True, slots=True)
class GameResult:
    home_score: int
    away_score: int

    @property
    def home_won(self) -> bool:
        return self.home_score > self.away_score

    @property
    def margin(self) -> int:
        return abs(self.home_score - self.away_score)


def home_win_probability(home: Team, away: Team) -> float:
    # Prestige gap plus home field, one point per percent. Not clamped.
    return 0.5 + (home.prestige - away.prestige + HOME_ADVANTAGE) / 100


def simulate_game(home: Team, away: Team, rng: random.Random) -> GameResult:
    diff = home.prestige - away.prestige
    home_win = rng.random() < home_win_probability(home, away)

    base = BASE_SCORE + (rng.random() * (2 * BASE_SCORE_SPREAD) - BASE_SCORE_SPREAD)
    home_raw = base + diff / 2
    away_raw = base - diff / 2
    if home_win and home_raw <= away_raw:
        home_raw = away_raw + rng.randint(1, MAX_FORCED_MARGIN)
    elif not home_win and away_raw <= home_raw:
        away_raw = home_raw + rng.randint(1, MAX_FORCED_MARGIN)

    home_score = max(0, math.floor(home_raw))
    away_score = max(0, math.floor(away_raw))
    # Flooring a fractional prestige gap can erase a narrow raw margin.
    if home_win and home_score <= away_score:
        home_score = away_score + 1
    elif not home_win and away_score <= home_score:
        away_score = home_score + 1
    return GameResult(home_score=home_score, away_score=away_score)
