"""TheSportsDB v1 client: cached JSON GETs against the public API.

Responses are cached by full request URL. TTLs are per endpoint, from a
couple of minutes for fixtures up to a day for near-static metadata.
Team lookups always go to the network.
"""

import copy
import logging
import time
from typing import Any

import httpx

from errors import TeamMismatchError, UpstreamError
from services.cache import TTLCache

logger = logging.getLogger(__name__)

DAY = 24 * 3600

# Cache lifetimes in seconds
TTL_SEARCH_TEAMS = 600
TTL_EVENTS_NEXT = 120
TTL_EVENTS_LAST = 300
TTL_EVENTS_SEASON = 900
TTL_TABLE = 900
TTL_ROSTER = 6 * 3600
TTL_PLAYER = DAY
TTL_METADATA = DAY


class SportsDBClient:
    def __init__(
        self,
        base_url: str,
        cache: TTLCache,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self.timeout = timeout
        self._transport = transport

    def url_for(self, path: str, params: dict[str, Any] | None = None) -> str:
        """Exact request URL, which is also the cache key."""
        return str(httpx.URL(f"{self.base_url}{path}", params=params or None))

    async def fetch(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        ttl_seconds: float = 300,
        use_cache: bool = True,
    ) -> dict:
        url = self.url_for(path, params)

        if use_cache:
            cached = self.cache.get(url)
            if cached is not None:
                logger.debug("Cache hit: %s", path)
                return copy.deepcopy(cached)

        logger.info("Fetching %s %s", path, params or "")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(url)
                resp.raise_for_status()
                data = resp.json() if resp.content.strip() else None
        except httpx.HTTPError as e:
            logger.warning("SportsDB request failed for %s: %s", path, e)
            raise UpstreamError(f"SportsDB request failed: {path}") from e
        except ValueError as e:
            logger.warning("SportsDB returned invalid JSON for %s: %s", path, e)
            raise UpstreamError(f"SportsDB returned invalid JSON: {path}") from e

        if data is None:
            data = {}
        # Callers get their own copy; cached entries are never shared
        if use_cache:
            self.cache.set(url, copy.deepcopy(data), ttl_seconds=ttl_seconds)
        return data

    async def search_teams(self, name: str) -> dict:
        return await self.fetch("/searchteams.php", {"t": name}, TTL_SEARCH_TEAMS)

    async def lookup_team(self, team_id: str) -> dict | None:
        """Raw team record for `team_id`, or None if upstream has no such team.

        Uncached, with a cache-buster: upstream (or something between us and
        it) has been seen answering every lookup with the same team, so a
        record with a different idTeam is rejected instead of returned.
        """
        team_id = str(team_id)
        data = await self.fetch(
            "/lookupteam.php",
            {"id": team_id, "_": int(time.time() * 1000)},
            use_cache=False,
        )
        teams = data.get("teams") if isinstance(data, dict) else None
        if not teams:
            return None
        team = teams[0]
        got = team.get("idTeam") if isinstance(team, dict) else None
        if got is None or str(got) != team_id:
            raise TeamMismatchError(team_id, None if got is None else str(got))
        return team

    async def events_next(self, team_id: str) -> dict:
        return await self.fetch("/eventsnext.php", {"id": team_id}, TTL_EVENTS_NEXT)

    async def events_last(self, team_id: str) -> dict:
        return await self.fetch("/eventslast.php", {"id": team_id}, TTL_EVENTS_LAST)

    async def events_season(self, league_id: str, season: str) -> dict:
        return await self.fetch("/eventsseason.php", {"id": league_id, "s": season}, TTL_EVENTS_SEASON)

    async def all_sports(self) -> dict:
        return await self.fetch("/all_sports.php", ttl_seconds=TTL_METADATA)

    async def search_all_leagues(self, country: str, sport: str) -> dict:
        return await self.fetch("/search_all_leagues.php", {"c": country, "s": sport}, TTL_METADATA)

    async def search_all_teams(self, league: str) -> dict:
        return await self.fetch("/search_all_teams.php", {"l": league}, TTL_METADATA)

    async def search_all_seasons(self, league_id: str) -> dict:
        return await self.fetch("/search_all_seasons.php", {"id": league_id}, TTL_METADATA)

    async def lookup_table(self, league_id: str, season: str) -> dict:
        return await self.fetch("/lookuptable.php", {"l": league_id, "s": season}, TTL_TABLE)

    async def lookup_all_players(self, team_id: str) -> dict:
        return await self.fetch("/lookup_all_players.php", {"id": team_id}, TTL_ROSTER)

    async def lookup_player(self, player_id: str) -> dict:
        return await self.fetch("/lookupplayer.php", {"id": player_id}, TTL_PLAYER)
