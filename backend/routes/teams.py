"""Team routes: search, details, fixtures, roster and the team hub.

GET /teams/search?q=            Search teams by name (onboarding)
GET /teams?league=              All teams in a league
GET /teams/{id}                 Followed team snapshot for this client
GET /teams/{id}/events/next     Upcoming games
GET /teams/{id}/events/last     Past games
GET /teams/{id}/schedule        League season filtered to the team
GET /teams/{id}/players         Roster split into players and staff
GET /teams/{id}/hub             Team screen aggregation
"""


from fastapi import APIRouter, Depends, Query

from dependencies import get_sportsdb, get_store, require_client_id
from errors import MissingParameterError, NotFoundError
from services.feed import build_team_hub, last_events, next_events
from services.follow_store import FollowStore
from services.normalize import filter_team_events, normalize_event, normalize_player, normalize_team, records, split_roster
from services.sportsdb import SportsDBClient

router = APIRouter(prefix="/teams", tags=["teams"])


@router.get("/search")
async def search_teams(
    q: str = Query(""),
    sportsdb: SportsDBClient = Depends(get_sportsdb),
) -> dict:
    q = q.strip()
    if not q:
        raise MissingParameterError("q")

    data = await sportsdb.search_teams(q)
    return {"teams": [normalize_team(t) for t in records(data, "teams")]}


@router.get("")
async def teams_in_league(
    league: str = Query(""),
    sportsdb: SportsDBClient = Depends(get_sportsdb),
) -> dict:
    league = league.strip()
    if not league:
        raise MissingParameterError("league", "Use ?league=English_Premier_League")

    data = await sportsdb.search_all_teams(league)
    return {"teams": [normalize_team(t) for t in records(data, "teams")]}


@router.get("/{team_id}")
async def followed_team(
    team_id: str,
    client_id: str = Depends(require_client_id),
    store: FollowStore = Depends(get_store),
) -> dict:
    state = await store.get(client_id)
    team = state.teams_by_id.get(team_id)
    if team is None:
        raise NotFoundError(
            "Team not found in your follows. Search and follow the team first.",
            teamId=team_id,
        )
    return {"team": team.to_json_dict()}


@router.get("/{team_id}/events/next")
async def team_next_events(team_id: str, sportsdb: SportsDBClient = Depends(get_sportsdb)) -> dict:
    return {"events": next_events(await sportsdb.events_next(team_id))}


@router.get("/{team_id}/events/last")
async def team_last_events(team_id: str, sportsdb: SportsDBClient = Depends(get_sportsdb)) -> dict:
    return {"events": last_events(await sportsdb.events_last(team_id))}


@router.get("/{team_id}/schedule")
async def team_schedule(
    team_id: str,
    season: str = Query(""),
    client_id: str = Depends(require_client_id),
    store: FollowStore = Depends(get_store),
    sportsdb: SportsDBClient = Depends(get_sportsdb),
) -> dict:
    """Season fixtures, using the league ID from the followed snapshot."""
    season = season.strip()
    if not season:
        raise MissingParameterError("season")

    state = await store.get(client_id)
    team = state.teams_by_id.get(team_id)
    if team is None:
        raise NotFoundError(
            "Team not found in user store. Follow/search the team first.",
            teamId=team_id,
        )

    data = await sportsdb.events_season(team.league_id, season)
    events = [normalize_event(e) for e in records(data, "events")]

    return {
        "team": team.to_json_dict(),
        "season": season,
        "leagueId": team.league_id,
        "events": filter_team_events(events, team_id),
        "note": "Free key may return limited events.",
    }


@router.get("/{team_id}/players")
async def team_players(team_id: str, sportsdb: SportsDBClient = Depends(get_sportsdb)) -> dict:
    data = await sportsdb.lookup_all_players(team_id)
    roster = [normalize_player(p) for p in records(data, "player", "players")]
    players, staff = split_roster(roster)
    return {"teamId": team_id, "players": players, "staff": staff}


@router.get("/{team_id}/hub")
async def team_hub(
    team_id: str,
    season: str = Query(""),
    sportsdb: SportsDBClient = Depends(get_sportsdb),
) -> dict:
    return await build_team_hub(sportsdb, team_id, season.strip() or None)
