"""
Shared pytest fixtures.
The upstream sports API is replaced by httpx.MockTransport, no network.
"""
from pathlib import Path
from typing import Any

import httpx
import pytest


# ---------------------------------------------------------------------------
# Canned upstream records (TheSportsDB field names)
# ---------------------------------------------------------------------------
ARSENAL = {
    "idTeam": "133604",
    "strTeam": "Arsenal",
    "strTeamShort": "ARS",
    "strSport": "Soccer",
    "strLeague": "English Premier League",
    "idLeague": "4328",
    "strStadium": "Emirates Stadium",
    "strCountry": "England",
    "strBadge": "https://r2.thesportsdb.com/images/media/team/badge/arsenal.png",
    "strLogo": "",
    "strTeamBanner": None,
}

CHELSEA = {
    "idTeam": "133610",
    "strTeam": "Chelsea",
    "strTeamShort": "CHE",
    "strSport": "Soccer",
    "strLeague": "English Premier League",
    "idLeague": "4328",
    "strStadium": "Stamford Bridge",
    "strCountry": "England",
    "strBadge": "https://r2.thesportsdb.com/images/media/team/badge/chelsea.png",
    "strLogo": None,
    "strTeamBanner": None,
}


def make_event(event_id: str, home: dict, away: dict, date: str = "2025-10-04", **extra) -> dict:
    event = {
        "idEvent": event_id,
        "dateEvent": date,
        "strTime": "14:00:00",
        "strSeason": "2025-2026",
        "intRound": "7",
        "strLeague": "English Premier League",
        "idLeague": "4328",
        "idHomeTeam": home["idTeam"],
        "strHomeTeam": home["strTeam"],
        "intHomeScore": None,
        "idAwayTeam": away["idTeam"],
        "strAwayTeam": away["strTeam"],
        "intAwayScore": None,
        "strVenue": home.get("strStadium"),
        "strStatus": "Not Started",
        "strThumb": "",
    }
    event.update(extra)
    return event


WEST_HAM = {"idTeam": "133636", "strTeam": "West Ham", "idLeague": "4328"}
SPURS = {"idTeam": "133616", "strTeam": "Tottenham", "idLeague": "4328"}


class FakeUpstream:
    """Canned TheSportsDB responses keyed by endpoint file name and params.

    A payload that is an exception instance is raised instead, and an
    int `status` other than 200 produces that HTTP status.
    """

    def __init__(self):
        self._responses: dict[tuple, tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, endpoint: str, payload: Any = None, status: int = 200, **params: str) -> None:
        self._responses[(endpoint, tuple(sorted(params.items())))] = (status, payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = request.url.path.rsplit("/", 1)[-1]
        params = dict(request.url.params)
        params.pop("_", None)

        for key in ((endpoint, tuple(sorted(params.items()))), (endpoint, ())):
            if key in self._responses:
                status, payload = self._responses[key]
                if isinstance(payload, Exception):
                    raise payload
                return httpx.Response(status, json=payload)
        return httpx.Response(404, json={"error": f"no fixture for {endpoint} {params}"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, endpoint: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/" + endpoint)]


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def follows_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "follows.json"
