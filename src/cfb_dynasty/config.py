"""Static simulation configuration constants."""

REGULAR_SEASON_WEEKS = 14
CONFERENCE_CHAMPIONSHIP_WEEK = 15
PLAYOFF_FIRST_ROUND_WEEK = 16
PLAYOFF_FINAL_WEEK = 18
RANKING_SWITCH_WEEK = 8

TARGET_GAMES = 12
ROUND_ROBIN_MAX_TEAMS = 10
LARGE_CONFERENCE_GAMES = 9
FILL_PASSES = 5
SAME_CONFERENCE_LOCKOUT_PASSES = 2
EARLY_WEEKS: tuple[int, ...] = (1, 2, 3, 4)
LATE_WEEKS: tuple[int, ...] = (5, 6, 7, 8, 9, 10, 11, 12, 13, 14)

INDEPENDENT = "Independent"

HOME_ADVANTAGE = 3
BASE_SCORE = 24
BASE_SCORE_SPREAD = 7
MAX_FORCED_MARGIN = 7

TOP_N = 25
PLAYOFF_FIELD = 12
PLAYOFF_FIRST_ROUND_PAIRS: tuple[tuple[int, int], ...] = ((5, 12), (6, 11), (7, 10), (8, 9))

# Recruiting budget (points) for the controlled program.
WEEKLY_POINTS_BASE = 100
WEEKLY_POINTS_PER_PRESTIGE = 1.5
POINTS_ROLLOVER_CAP = 20
PORTAL_OPEN_BONUS = 200
PORTAL_WEEK_BONUS = 100
PORTAL_WEEKS = 2
SCHOLARSHIPS_MAX = 25
PORTAL_SCHOLARSHIP_BONUS = 5
PERSUADE_COST = 50

# Coach career progression.
WIN_ABOVE_EXPECTED_BONUS = 2.5
WIN_BELOW_EXPECTED_PENALTY = 1.5
CONFERENCE_TITLE_BONUS = 10
PLAYOFF_WIN_BONUS = 8
NATIONAL_TITLE_BONUS = 15
COACH_PRESTIGE_MIN = 5
COACH_PRESTIGE_MAX = 99
OFFER_WINDOW_BELOW = 15
OFFER_WINDOW_ABOVE = 10
OFFER_LIMIT = 5

# (min team prestige, max team prestige, starting coach prestige) per coach level.
LEVEL_OFFER_BANDS: dict[int, tuple[int, int, int]] = {
    1: (45, 60, 15),
    2: (50, 75, 30),
    3: (65, 85, 50),
    4: (75, 90, 70),
    5: (85, 99, 90),
}

POSITIONS: tuple[str, ...] = ("QB", "RB", "WR", "OL", "DL", "LB", "DB", "K")
ROSTER_DISTRIBUTION: dict[str, int] = {
    "QB": 3,
    "RB": 5,
    "WR": 8,
    "OL": 10,
    "DL": 8,
    "LB": 6,
    "DB": 8,
    "K": 2,
}
MIN_ROSTER_SIZE = 45
MAX_PLAYER_RATING = 99

HOMETOWNS: tuple[str, ...] = (
    "Austin, TX",
    "Miami, FL",
    "Columbus, OH",
    "Los Angeles, CA",
    "Atlanta, GA",
    "Dallas, TX",
    "New Orleans, LA",
    "Chicago, IL",
    "Houston, TX",
    "Phoenix, AZ",
    "Orlando, FL",
    "Charlotte, NC",
    "Nashville, TN",
    "Seattle, WA",
    "Denver, CO",
    "Detroit, MI",
    "Philadelphia, PA",
    "San Antonio, TX",
    "San Diego, CA",
    "Las Vegas, NV",
    "Tampa, FL",
    "Jacksonville, FL",
    "Indianapolis, IN",
    "Birmingham, AL",
    "Baton Rouge, LA",
)
