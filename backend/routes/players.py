"""Player detail route."""

from fastapi import APIRouter, Depends

from dependencies import get_sportsdb
from errors import NotFoundError
from services.normalize import normalize_player, records
from services.sportsdb import SportsDBClient

router = APIRouter(tags=["players"])


@router.get("/players/{player_id}")
async def player(player_id: str, sportsdb: SportsDBClient = Depends(get_sportsdb)) -> dict:
    data = await sportsdb.lookup_player(player_id)
    found = records(data, "players", "player")
    if not found:
        raise NotFoundError("Player not found", playerId=player_id)
    return {"player": normalize_player(found[0])}
