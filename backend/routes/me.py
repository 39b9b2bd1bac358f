"""Per-client routes, keyed by the X-Client-Id header.

GET  /me/follows        Followed IDs and team snapshots
POST /me/follows        Replace the followed ID list
POST /me/follows/add    Follow teams, storing their snapshots
GET  /me/feed           Last + next events per followed team
GET  /me/schedule       Season schedule per followed team
POST /me/reset          Forget everything this client follows
GET  /me/debug          Raw follow state
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from config import Settings
from dependencies import get_settings, get_sportsdb, get_store, require_client_id
from errors import MissingParameterError
from services.feed import build_feed, build_schedules
from services.follow_store import FollowStore
from services.models import CamelModel, Team
from services.normalize import normalize_team
from services.sportsdb import SportsDBClient

router = APIRouter(prefix="/me", tags=["me"])


class SetFollowsRequest(CamelModel):
    team_ids: list[str]


class AddTeamsRequest(CamelModel):
    teams: list[dict[str, Any]] = []


def _team_from_body(record: dict[str, Any]) -> Team:
    """Accept either a raw upstream team record or an already normalized one."""
    if "idTeam" in record:
        record = normalize_team(record)
    return Team.model_validate(record)


@router.get("/follows")
async def get_follows(
    client_id: str = Depends(require_client_id),
    store: FollowStore = Depends(get_store),
) -> dict:
    state = await store.get(client_id)
    return {
        "teamIds": state.team_ids,
        "teams": [t.to_json_dict() for t in state.followed_teams()],
    }


@router.post("/follows")
async def set_follows(
    body: SetFollowsRequest,
    client_id: str = Depends(require_client_id),
    store: FollowStore = Depends(get_store),
) -> dict:
    state = await store.set_team_ids(client_id, body.team_ids)
    return {"ok": True, "teamIds": state.team_ids}


@router.post("/follows/add")
async def add_follows(
    body: AddTeamsRequest,
    client_id: str = Depends(require_client_id),
    store: FollowStore = Depends(get_store),
) -> dict:
    if not body.teams:
        raise ValueError("Missing body.teams[]")

    teams = [_team_from_body(t) for t in body.teams]
    state = await store.add_teams(client_id, teams)
    return {"ok": True, "teamIds": state.team_ids}


@router.get("/feed")
async def feed(
    season: str = Query(""),
    client_id: str = Depends(require_client_id),
    store: FollowStore = Depends(get_store),
    sportsdb: SportsDBClient = Depends(get_sportsdb),
    settings: Settings = Depends(get_settings),
) -> dict:
    state = await store.get(client_id)
    if not state.team_ids:
        return {"items": []}

    items = await build_feed(sportsdb, state, season.strip() or settings.default_season)
    return {"items": [item.to_json_dict() for item in items]}


@router.get("/schedule")
async def schedule(
    season: str = Query(""),
    client_id: str = Depends(require_client_id),
    store: FollowStore = Depends(get_store),
    sportsdb: SportsDBClient = Depends(get_sportsdb),
) -> dict:
    season = season.strip()
    if not season:
        raise MissingParameterError("season")

    state = await store.get(client_id)
    schedules = await build_schedules(sportsdb, state, season)
    return {"schedules": [s.to_json_dict() for s in schedules]}


@router.post("/reset")
async def reset(
    client_id: str = Depends(require_client_id),
    store: FollowStore = Depends(get_store),
) -> dict:
    await store.clear(client_id)
    return {"ok": True}


@router.get("/debug")
async def debug(
    client_id: str = Depends(require_client_id),
    store: FollowStore = Depends(get_store),
) -> dict:
    state = await store.get(client_id)
    return {"clientId": client_id, "teamIds": state.team_ids}
