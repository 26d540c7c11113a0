from __future__ import annotations

import random

FIRST_NAMES = [
    "James", "John", "Robert", "Michael", "William", "David", "Richard", "Joseph", "Thomas", "Charles",
    "Christopher", "Daniel", "Matthew", "Anthony", "Mark", "Donald", "Steven", "Paul", "Andrew", "Joshua",
    "Kevin", "Brian", "George", "Edward", "Ronald", "Timothy", "Jason", "Jeffrey", "Ryan", "Jacob",
    "Gary", "Nicholas", "Eric", "Jonathan", "Stephen", "Larry", "Justin", "Scott", "Brandon", "Benjamin",
    "Jalen", "Jaylen", "Marcus", "DeShawn", "Tyrell", "Caleb", "Bryce", "Trey", "Darius", "Malik",
    "Jamal", "Cam", "Devin", "Quinton", "Kendrick", "Isaiah", "Xavier", "Jaxon", "Deion", "Tre",
    "Zion", "Carson", "Drew", "Hunter", "Garrett", "Tanner", "Colt", "Brock", "Landon", "Cooper",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez", "Martinez",
    "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin",
    "Lee", "Perez", "Thompson", "White", "Harris", "Sanchez", "Clark", "Ramirez", "Lewis", "Robinson",
    "Walker", "Young", "Allen", "King", "Wright", "Scott", "Torres", "Nguyen", "Hill", "Flores",
    "Washington", "Jefferson", "Coleman", "Bryant", "Simmons", "Henderson", "Patterson", "Hayes", "Griffin", "Russell",
    "Mitchell", "Carter", "Brooks", "Sanders", "Price", "Bennett", "Wood", "Barnes", "Ross", "Powell",
]


class NameGenerator:
    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)
        self._used: set[str] = set()
        self._pool = [f"{first} {last}" for first in FIRST_NAMES for last in LAST_NAMES]
        self._rng.shuffle(self._pool)
        self._idx = 0

    def reserve(self, names: list[str]) -> None:
        self._used.update(names)

    def next_name(self) -> str:
        while self._idx < len(self._pool):
            name = self._pool[self._idx]
            self._idx += 1
            if name not in self._used:
                self._used.add(name)
                return name

        # Pool exhausted: reuse a base name with a generational suffix.
        suffix = 2
        while True:
            base = self._pool[self._rng.randrange(0, len(self._pool))]
            candidate = f"{base} {_roman(suffix)}"
            if candidate not in self._used:
                self._used.add(candidate)
                return candidate
            suffix += 1


def _roman(value: int) -> str:
    numerals = ((10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"))
    out = []
    for amount, symbol in numerals:
        while value >= amount:
            out.append(symbol)
            value -= amount
    return "".join(out)
