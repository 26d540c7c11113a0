from __future__ import annotations

import random

from .config import INDEPENDENT
from .models import Team
from .names import NameGenerator
from .rankings import ap_top25, cfp_top25, coaches_top25, conference_standings
from .roster import generate_balanced_roster
from .season import SeasonSimulator

# (team_id, name, nickname, abbreviation, prestige, conference)
DEFAULT_TEAMS: tuple[tuple[str, str, str, str, int, str], ...] = (
    ("1", "Alabama", "Crimson Tide", "ALA", 95, "SEC"),
    ("2", "Georgia", "Bulldogs", "UGA", 96, "SEC"),
    ("3", "Texas", "Longhorns", "TEX", 94, "SEC"),
    ("4", "Oklahoma", "Sooners", "OU", 91, "SEC"),
    ("5", "LSU", "Tigers", "LSU", 92, "SEC"),
    ("6", "Ole Miss", "Rebels", "MISS", 89, "SEC"),
    ("7", "Tennessee", "Volunteers", "TENN", 90, "SEC"),
    ("8", "Missouri", "Tigers", "MIZZ", 86, "SEC"),
    ("9", "Texas A&M", "Aggies", "TAMU", 87, "SEC"),
    ("10", "Auburn", "Tigers", "AUB", 83, "SEC"),
    ("11", "Florida", "Gators", "FLA", 84, "SEC"),
    ("12", "Kentucky", "Wildcats", "UK", 81, "SEC"),
    ("13", "South Carolina", "Gamecocks", "USC", 80, "SEC"),
    ("14", "Arkansas", "Razorbacks", "ARK", 79, "SEC"),
    ("15", "Mississippi State", "Bulldogs", "MSST", 76, "SEC"),
    ("16", "Vanderbilt", "Commodores", "VANDY", 72, "SEC"),
    ("17", "Ohio State", "Buckeyes", "OSU", 95, "Big Ten"),
    ("18", "Oregon", "Ducks", "ORE", 94, "Big Ten"),
    ("19", "Michigan", "Wolverines", "MICH", 91, "Big Ten"),
    ("20", "Penn State", "Nittany Lions", "PSU", 90, "Big Ten"),
    ("21", "USC", "Trojans", "USC", 89, "Big Ten"),
    ("22", "Washington", "Huskies", "WASH", 86, "Big Ten"),
    ("23", "Iowa", "Hawkeyes", "IOWA", 83, "Big Ten"),
    ("24", "Wisconsin", "Badgers", "WIS", 82, "Big Ten"),
    ("25", "Nebraska", "Cornhuskers", "NEB", 81, "Big Ten"),
    ("26", "Michigan State", "Spartans", "MSU", 78, "Big Ten"),
    ("27", "UCLA", "Bruins", "UCLA", 79, "Big Ten"),
    ("28", "Minnesota", "Golden Gophers", "MINN", 77, "Big Ten"),
    ("29", "Illinois", "Fighting Illini", "ILL", 76, "Big Ten"),
    ("30", "Maryland", "Terrapins", "MD", 75, "Big Ten"),
    ("31", "Rutgers", "Scarlet Knights", "RUT", 74, "Big Ten"),
    ("32", "Northwestern", "Wildcats", "NW", 73, "Big Ten"),
    ("33", "Purdue", "Boilermakers", "PUR", 72, "Big Ten"),
    ("34", "Indiana", "Hoosiers", "IND", 71, "Big Ten"),
    ("35", "Utah", "Utes", "UTAH", 88, "Big 12"),
    ("36", "Kansas State", "Wildcats", "KSU", 87, "Big 12"),
    ("37", "Oklahoma State", "Cowboys", "OKST", 85, "Big 12"),
    ("38", "Kansas", "Jayhawks", "KU", 84, "Big 12"),
    ("39", "Arizona", "Wildcats", "ARIZ", 82, "Big 12"),
    ("40", "West Virginia", "Mountaineers", "WVU", 81, "Big 12"),
    ("41", "Iowa State", "Cyclones", "ISU", 80, "Big 12"),
    ("42", "UCF", "Knights", "UCF", 81, "Big 12"),
    ("43", "TCU", "Horned Frogs", "TCU", 79, "Big 12"),
    ("44", "Texas Tech", "Red Raiders", "TTU", 78, "Big 12"),
    ("45", "Baylor", "Bears", "BAY", 77, "Big 12"),
    ("46", "Houston", "Cougars", "HOU", 76, "Big 12"),
    ("47", "BYU", "Cougars", "BYU", 78, "Big 12"),
    ("48", "Cincinnati", "Bearcats", "CIN", 75, "Big 12"),
    ("49", "Arizona State", "Sun Devils", "ASU", 74, "Big 12"),
    ("50", "Colorado", "Buffaloes", "COLO", 83, "Big 12"),
    ("51", "Florida State", "Seminoles", "FSU", 90, "ACC"),
    ("52", "Clemson", "Tigers", "CLEM", 89, "ACC"),
    ("53", "Miami", "Hurricanes", "MIA", 88, "ACC"),
    ("54", "Louisville", "Cardinals", "LOU", 85, "ACC"),
    ("55", "NC State", "Wolfpack", "NCST", 82, "ACC"),
    ("56", "Virginia Tech", "Hokies", "VT", 81, "ACC"),
    ("57", "SMU", "Mustangs", "SMU", 83, "ACC"),
    ("58", "North Carolina", "Tar Heels", "UNC", 80, "ACC"),
    ("59", "Georgia Tech", "Yellow Jackets", "GT", 78, "ACC"),
    ("60", "Cal", "Golden Bears", "CAL", 77, "ACC"),
    ("61", "Stanford", "Cardinal", "STAN", 76, "ACC"),
    ("62", "Pitt", "Panthers", "PITT", 77, "ACC"),
    ("63", "Boston College", "Eagles", "BC", 75, "ACC"),
    ("64", "Wake Forest", "Demon Deacons", "WAKE", 74, "ACC"),
    ("65", "Virginia", "Cavaliers", "UVA", 73, "ACC"),
    ("66", "Duke", "Blue Devils", "DUKE", 76, "ACC"),
    ("67", "Syracuse", "Orange", "SYR", 74, "ACC"),
    ("68", "Oregon State", "Beavers", "ORST", 82, "Pac-12"),
    ("69", "Washington State", "Cougars", "WAST", 81, "Pac-12"),
    ("70", "Boise State", "Broncos", "BSU", 84, "Pac-12"),
    ("71", "San Diego State", "Aztecs", "SDSU", 77, "Pac-12"),
    ("72", "Colorado State", "Rams", "CSU", 76, "Pac-12"),
    ("73", "Fresno State", "Bulldogs", "FRES", 78, "Pac-12"),
    ("74", "Utah State", "Aggies", "USU", 73, "Pac-12"),
    ("75", "Memphis", "Tigers", "MEM", 79, "AAC"),
    ("76", "Tulane", "Green Wave", "TUL", 80, "AAC"),
    ("77", "USF", "Bulls", "USF", 76, "AAC"),
    ("78", "UTSA", "Roadrunners", "UTSA", 77, "AAC"),
    ("79", "FAU", "Owls", "FAU", 72, "AAC"),
    ("80", "Charlotte", "49ers", "CLT", 68, "AAC"),
    ("81", "ECU", "Pirates", "ECU", 71, "AAC"),
    ("82", "North Texas", "Mean Green", "UNT", 70, "AAC"),
    ("83", "Rice", "Owls", "RICE", 65, "AAC"),
    ("84", "Temple", "Owls", "TEMP", 64, "AAC"),
    ("85", "UAB", "Blazers", "UAB", 69, "AAC"),
    ("86", "Navy", "Midshipmen", "NAVY", 72, "AAC"),
    ("87", "Army", "Black Knights", "ARMY", 73, "AAC"),
    ("88", "App State", "Mountaineers", "APP", 78, "Sun Belt"),
    ("89", "James Madison", "Dukes", "JMU", 79, "Sun Belt"),
    ("90", "Coastal Carolina", "Chanticleers", "CCU", 75, "Sun Belt"),
    ("91", "Georgia Southern", "Eagles", "GASO", 73, "Sun Belt"),
    ("92", "Georgia State", "Panthers", "GAST", 68, "Sun Belt"),
    ("93", "Marshall", "Thundering Herd", "MARSH", 74, "Sun Belt"),
    ("94", "Old Dominion", "Monarchs", "ODU", 67, "Sun Belt"),
    ("95", "Troy", "Trojans", "TROY", 76, "Sun Belt"),
    ("96", "South Alabama", "Jaguars", "USA", 72, "Sun Belt"),
    ("97", "Southern Miss", "Golden Eagles", "USM", 66, "Sun Belt"),
    ("98", "Texas State", "Bobcats", "TXST", 74, "Sun Belt"),
    ("99", "Louisiana", "Ragin Cajuns", "UL", 73, "Sun Belt"),
    ("100", "ULM", "Warhawks", "ULM", 62, "Sun Belt"),
    ("101", "Arkansas State", "Red Wolves", "ARKST", 68, "Sun Belt"),
    ("102", "Toledo", "Rockets", "TOL", 76, "MAC"),
    ("103", "Miami (OH)", "RedHawks", "MIOH", 75, "MAC"),
    ("104", "Northern Illinois", "Huskies", "NIU", 72, "MAC"),
    ("105", "Bowling Green", "Falcons", "BGSU", 70, "MAC"),
    ("106", "Western Michigan", "Broncos", "WMU", 69, "MAC"),
    ("107", "Central Michigan", "Chippewas", "CMU", 68, "MAC"),
    ("108", "Eastern Michigan", "Eagles", "EMU", 67, "MAC"),
    ("109", "Akron", "Zips", "AKR", 61, "MAC"),
    ("110", "Buffalo", "Bulls", "BUFF", 64, "MAC"),
    ("111", "Kent State", "Golden Flashes", "KENT", 60, "MAC"),
    ("112", "Ohio", "Bobcats", "OHIO", 73, "MAC"),
    ("113", "Ball State", "Cardinals", "BALL", 63, "MAC"),
    ("114", "UMass", "Minutemen", "UMASS", 62, "MAC"),
    ("115", "Air Force", "Falcons", "AF", 74, "Mountain West"),
    ("116", "Nevada", "Wolf Pack", "NEV", 66, "Mountain West"),
    ("117", "New Mexico", "Lobos", "UNM", 64, "Mountain West"),
    ("118", "San Jose State", "Spartans", "SJSU", 71, "Mountain West"),
    ("119", "UNLV", "Rebels", "UNLV", 78, "Mountain West"),
    ("120", "Wyoming", "Cowboys", "WYO", 72, "Mountain West"),
    ("121", "Hawaii", "Rainbow Warriors", "HAW", 67, "Mountain West"),
    ("122", "Liberty", "Flames", "LIB", 81, "CUSA"),
    ("123", "WKU", "Hilltoppers", "WKU", 75, "CUSA"),
    ("124", "Jacksonville State", "Gamecocks", "JSU", 74, "CUSA"),
    ("125", "MTSU", "Blue Raiders", "MTSU", 66, "CUSA"),
    ("126", "NMSU", "Aggies", "NMSU", 68, "CUSA"),
    ("127", "SHSU", "Bearkats", "SHSU", 67, "CUSA"),
    ("128", "FIU", "Panthers", "FIU", 63, "CUSA"),
    ("129", "Louisiana Tech", "Bulldogs", "LTECH", 68, "CUSA"),
    ("130", "UTEP", "Miners", "UTEP", 62, "CUSA"),
    ("131", "Kennesaw State", "Owls", "KSU", 60, "CUSA"),
    ("132", "Delaware", "Blue Hens", "DEL", 65, "CUSA"),
    ("133", "Notre Dame", "Fighting Irish", "ND", 92, "Independent"),
    ("134", "UConn", "Huskies", "CONN", 68, "Independent"),
)

POLLS = {
    "ap": ap_top25,
    "coaches": coaches_top25,
    "cfp": cfp_top25,
}


def build_default_teams(seed: int | None = 7, with_rosters: bool = True) -> list[Team]:
    name_gen = NameGenerator(seed=seed)
    teams: list[Team] = []
    for team_id, name, nickname, abbreviation, prestige, conference in DEFAULT_TEAMS:
        team = Team(
            team_id=team_id,
            name=name,
            prestige=prestige,
            conference=conference,
            nickname=nickname,
            abbreviation=abbreviation,
        )
        if with_rosters:
            rng = random.Random(f"roster:{name}:{seed}")
            team.roster = generate_balanced_roster(team, rng, name_gen)
        teams.append(team)
    return teams


def conferences(teams: list[Team]) -> list[str]:
    seen: list[str] = []
    for team in teams:
        if team.conference not in seen:
            seen.append(team.conference)
    return seen


def format_rankings(simulator: SeasonSimulator, poll: str = "ap") -> str:
    lines = ["Rk Team                   Conf             Rec   PF  PA  Pres"]
    for idx, team in enumerate(POLLS[poll](simulator.teams), start=1):
        rec = team.record
        lines.append(
            f"{idx:>2} {team.name:<22} {team.conference:<16} {rec.summary:<5}"
            f" {rec.points_for:>3} {rec.points_against:>3} {team.prestige:>4}"
        )
    return "\n".join(lines)


def format_standings(simulator: SeasonSimulator, conference: str) -> str:
    if conference == INDEPENDENT:
        members = [t for t in simulator.teams if t.is_independent]
    else:
        members = conference_standings(simulator.teams, conference)
    lines = [conference, "Pos Team                   Conf  Overall  Rk"]
    for idx, team in enumerate(members, start=1):
        rec = team.record
        rank = str(rec.rank) if rec.rank else "-"
        lines.append(
            f"{idx:>3} {team.name:<22} {rec.conf_wins:>2}-{rec.conf_losses:<2} {rec.summary:>7} {rank:>3}"
        )
    return "\n".join(lines)
