"""Reshape TheSportsDB records into the compact shapes the app consumes.

Upstream fields carry verbose prefixes (strTeam, idLeague, intHomeScore...)
and empty strings for missing values; everything here maps them to short
names and null.
"""

from typing import Any

# Positions that belong to coaching/management staff rather than the squad
STAFF_POSITIONS = {
    "Manager",
    "Head Coach",
    "Assistant Coach",
    "Coach",
    "Goalkeeping Coach",
    "Fitness Coach",
    "Director of Football",
}


def records(data: Any, *keys: str) -> list[dict]:
    """First list found under any of `keys`.

    Envelope names are pluralized inconsistently across endpoints
    (results/events, player/players, countries/countrys/leagues).
    """
    if not isinstance(data, dict):
        return []
    for key in keys:
        value = data.get(key)
        if isinstance(value, list):
            return [r for r in value if isinstance(r, dict)]
    return []


def _opt(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _int(value: Any) -> int | None:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def normalize_team(t: dict) -> dict:
    return {
        "id": _opt(t.get("idTeam")),
        "name": _opt(t.get("strTeam")),
        "shortName": _opt(t.get("strTeamShort")),
        "sport": _opt(t.get("strSport")),
        "league": _opt(t.get("strLeague")),
        "leagueId": _opt(t.get("idLeague")),
        "stadium": _opt(t.get("strStadium")),
        "country": _opt(t.get("strCountry")),
        "badge": _opt(t.get("strBadge")),
        "logo": _opt(t.get("strLogo")),
        "banner": _opt(t.get("strTeamBanner")),
    }


def normalize_event(e: dict) -> dict:
    return {
        "id": _opt(e.get("idEvent")),
        "date": _opt(e.get("dateEvent")),
        "time": _opt(e.get("strTime")),
        "season": _opt(e.get("strSeason")),
        "round": _opt(e.get("intRound")),
        "league": _opt(e.get("strLeague")),
        "leagueId": _opt(e.get("idLeague")),
        "homeTeam": {
            "id": _opt(e.get("idHomeTeam")),
            "name": _opt(e.get("strHomeTeam")),
            "score": _opt(e.get("intHomeScore")),
        },
        "awayTeam": {
            "id": _opt(e.get("idAwayTeam")),
            "name": _opt(e.get("strAwayTeam")),
            "score": _opt(e.get("intAwayScore")),
        },
        "venue": _opt(e.get("strVenue")),
        "status": _opt(e.get("strStatus")),
        "thumb": _opt(e.get("strThumb")),
    }


def normalize_player(p: dict) -> dict:
    return {
        "id": _opt(p.get("idPlayer")),
        "name": _opt(p.get("strPlayer")),
        "team": _opt(p.get("strTeam")),
        "teamId": _opt(p.get("idTeam")),
        "sport": _opt(p.get("strSport")),
        "position": _opt(p.get("strPosition")),
        "nationality": _opt(p.get("strNationality")),
        "dateBorn": _opt(p.get("dateBorn")),
        "number": _opt(p.get("strNumber")),
        "wage": _opt(p.get("strWage")),
        "thumb": _opt(p.get("strThumb")),
        "cutout": _opt(p.get("strCutout")),
        "height": _opt(p.get("strHeight")),
        "weight": _opt(p.get("strWeight")),
        "signing": _opt(p.get("strSigning")),
        "description": _opt(p.get("strDescriptionEN")),
    }


def _table_team_name(r: dict) -> str | None:
    for key in ("name", "strTeam", "strTeamName"):
        if r.get(key) is not None:
            return str(r[key])
    return None


def normalize_table_row(r: dict) -> dict:
    return {
        "teamId": _opt(r.get("idTeam")),
        "teamName": _table_team_name(r),
        "rank": _int(r.get("intRank")),
        "played": _int(r.get("intPlayed")),
        "win": _int(r.get("intWin")),
        "draw": _int(r.get("intDraw")),
        "loss": _int(r.get("intLoss")),
        "goalsFor": _int(r.get("intGoalsFor")),
        "goalsAgainst": _int(r.get("intGoalsAgainst")),
        "goalDiff": _int(r.get("intGoalDifference")),
        "points": _int(r.get("intPoints")),
        "form": _opt(r.get("strForm")),
        "badge": _opt(r.get("strTeamBadge")) or _opt(r.get("strBadge")),
    }


def normalize_table_row_compact(r: dict) -> dict:
    """Standings row trimmed for the team hub."""
    row = normalize_table_row(r)
    return {
        key: row[key]
        for key in ("teamId", "teamName", "rank", "played", "points", "goalDiff", "form", "badge")
    }


def is_staff_entry(position: str | None) -> bool:
    if not position:
        return False
    p = position.lower()
    return position in STAFF_POSITIONS or "coach" in p or "manager" in p or "director" in p


def split_roster(roster: list[dict]) -> tuple[list[dict], list[dict]]:
    """Split normalized roster entries into (players, staff)."""
    players = [p for p in roster if not is_staff_entry(p["position"])]
    staff = [p for p in roster if is_staff_entry(p["position"])]
    return players, staff


def filter_team_events(events: list[dict], team_id: str) -> list[dict]:
    """Keep normalized events where `team_id` plays home or away."""
    team_id = str(team_id)
    return [e for e in events if team_id in (e["homeTeam"]["id"], e["awayTeam"]["id"])]
