"""Sports, leagues, seasons and standings routes."""

from fastapi import APIRouter, Depends, Query

from dependencies import get_sportsdb
from errors import MissingParameterError
from services.normalize import normalize_table_row, records
from services.sportsdb import SportsDBClient

router = APIRouter(tags=["leagues"])


@router.get("/sports")
async def sports(sportsdb: SportsDBClient = Depends(get_sportsdb)) -> dict:
    data = await sportsdb.all_sports()
    return {"sports": records(data, "sports")}


@router.get("/leagues")
async def leagues(
    country: str = Query(""),
    sport: str = Query(""),
    sportsdb: SportsDBClient = Depends(get_sportsdb),
) -> dict:
    """Leagues by country and sport, e.g. England + Soccer."""
    country, sport = country.strip(), sport.strip()
    if not country or not sport:
        raise MissingParameterError("country", "Use ?country=England&sport=Soccer")

    data = await sportsdb.search_all_leagues(country, sport)
    return {"leagues": records(data, "countries", "countrys", "leagues")}


@router.get("/leagues/{league_id}/seasons")
async def seasons(league_id: str, sportsdb: SportsDBClient = Depends(get_sportsdb)) -> dict:
    data = await sportsdb.search_all_seasons(league_id)
    return {"seasons": records(data, "seasons")}


@router.get("/leagues/{league_id}/table")
async def table(
    league_id: str,
    season: str = Query(""),
    sportsdb: SportsDBClient = Depends(get_sportsdb),
) -> dict:
    season = season.strip()
    if not season:
        raise MissingParameterError("season")

    data = await sportsdb.lookup_table(league_id, season)
    return {
        "leagueId": league_id,
        "season": season,
        "table": [normalize_table_row(r) for r in records(data, "table")],
    }
