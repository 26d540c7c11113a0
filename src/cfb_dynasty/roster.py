from __future__ import annotations

import random

from .config import (
    HOMETOWNS,
    MAX_PLAYER_RATING,
    MIN_ROSTER_SIZE,
    POSITIONS,
    ROSTER_DISTRIBUTION,
)
from .errors import UnknownPlayerReference
from .models import ClassYear, LeavingStatus, Player, RosterDelta, Team
from .names import NameGenerator

EARLY_ENTRY_RATING = 92
EARLY_ENTRY_CHANCE = 0.70
BASE_TRANSFER_CHANCE = 0.05
BURIED_TRANSFER_CHANCE = 0.15
BURIED_RATING = 75
BURIED_PROGRAM_PRESTIGE = 80
CPU_STAR_RATING = 94
CPU_STAR_EXIT_CHANCE = 0.80
CPU_ATTRITION_CHANCE = 0.10
MAX_OFFSEASON_GAIN = 3
WALK_ON_RATING = (60, 75)


def generate_random_player(
    rng: random.Random,
    name_gen: NameGenerator,
    position: str | None = None,
    min_rating: int = 60,
    max_rating: int = 90,
) -> Player:
    rating = rng.randint(min_rating, max_rating)
    return Player(
        name=name_gen.next_name(),
        position=position or rng.choice(POSITIONS),
        year=rng.choice(list(ClassYear)),
        rating=rating,
        hometown=rng.choice(HOMETOWNS),
        potential=rating + rng.randint(0, 19),
        player_id=f"p{rng.getrandbits(48):012x}",
    )


def generate_balanced_roster(team: Team, rng: random.Random, name_gen: NameGenerator) -> list[Player]:
    min_rating = max(50, team.prestige - 10)
    max_rating = max(min_rating, min(MAX_PLAYER_RATING, team.prestige + 5))
    roster: list[Player] = []
    for position, count in ROSTER_DISTRIBUTION.items():
        for _ in range(count):
            roster.append(generate_random_player(rng, name_gen, position, min_rating, max_rating))
    return roster


def departure_status(player: Player, program_prestige: int, rng: random.Random) -> LeavingStatus | None:
    if player.year is ClassYear.SR:
        return LeavingStatus.GRADUATING
    if player.rating > EARLY_ENTRY_RATING and player.year in (ClassYear.SO, ClassYear.JR):
        return LeavingStatus.NFL if rng.random() < EARLY_ENTRY_CHANCE else None
    chance = BASE_TRANSFER_CHANCE
    if player.rating < BURIED_RATING and program_prestige > BURIED_PROGRAM_PRESTIGE:
        chance = BURIED_TRANSFER_CHANCE
    return LeavingStatus.TRANSFER if rng.random() < chance else None


def mark_departures(team: Team, rng: random.Random) -> dict[LeavingStatus, list[Player]]:
    """Flag graduating, early-entry and transferring players on ``team``."""
    departures: dict[LeavingStatus, list[Player]] = {status: [] for status in LeavingStatus}
    for player in team.roster:
        player.leaving_status = departure_status(player, team.prestige, rng)
        if player.leaving_status is not None:
            departures[player.leaving_status].append(player)
    return departures


def apply_roster_delta(team: Team, delta: RosterDelta) -> None:
    if delta.outgoing:
        by_id = {p.player_id for p in team.roster}
        for player_id in delta.outgoing:
            if player_id not in by_id:
                raise UnknownPlayerReference(player_id, team.team_id)
        removing = set(delta.outgoing)
        team.roster = [p for p in team.roster if p.player_id not in removing]
    team.roster.extend(delta.incoming)


def _cpu_keeps(player: Player, rng: random.Random) -> bool:
    if player.year is ClassYear.SR:
        return False
    if player.rating > CPU_STAR_RATING and rng.random() < CPU_STAR_EXIT_CHANCE:
        return False
    if rng.random() < CPU_ATTRITION_CHANCE:
        return False
    return True


def roll_roster(
    team: Team,
    rng: random.Random,
    name_gen: NameGenerator,
    controlled: bool = False,
) -> None:
    """Advance ``team`` one academic year.

    The controlled program loses exactly the players flagged during retention.
    Other programs lose seniors plus random early entries and attrition, then
    are topped up with walk-ons.
    """
    if controlled:
        kept = [p for p in team.roster if not p.is_leaving]
    else:
        kept = [p for p in team.roster if _cpu_keeps(p, rng)]

    for player in kept:
        player.year = player.year.next()
        player.rating = min(MAX_PLAYER_RATING, player.rating + rng.randint(0, MAX_OFFSEASON_GAIN))
        player.leaving_status = None
    team.roster = kept

    if not controlled:
        low, high = WALK_ON_RATING
        while len(team.roster) < MIN_ROSTER_SIZE:
            team.roster.append(generate_random_player(rng, name_gen, None, low, high))
