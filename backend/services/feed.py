"""Aggregations over several upstream calls: feed, schedules, team hub.

One team's upstream failure never fails the whole response. Instead the
affected item is marked "unavailable" and its lists are left empty, so the
client can tell "no events" apart from "could not fetch events".
"""

import asyncio
import logging
from typing import Any, Awaitable

from errors import NotFoundError, UpstreamError
from services.models import FeedItem, FollowState, ScheduleItem, Team
from services.normalize import (
    filter_team_events,
    normalize_event,
    normalize_player,
    normalize_table_row_compact,
    normalize_team,
    records,
    split_roster,
)
from services.sportsdb import SportsDBClient

logger = logging.getLogger(__name__)


async def _settle(call: Awaitable[Any]) -> Any | None:
    """Await an upstream call; None if it failed."""
    try:
        return await call
    except UpstreamError as e:
        logger.warning("Degrading upstream call: %s", e)
        return None


def next_events(data: Any) -> list[dict]:
    return [normalize_event(e) for e in records(data, "events")]


def last_events(data: Any) -> list[dict]:
    return [normalize_event(e) for e in records(data, "results", "events")]


async def build_feed(sportsdb: SportsDBClient, state: FollowState, season: str) -> list[FeedItem]:
    """Last and next events for every followed team, in follow order."""
    items: list[FeedItem] = []

    for team_id in state.team_ids:
        team = state.teams_by_id.get(team_id)
        if team is None:
            items.append(FeedItem(team=Team(id=team_id, name="Unknown"), season=season, status="unavailable"))
            continue

        next_data, last_data = await asyncio.gather(
            _settle(sportsdb.events_next(team_id)),
            _settle(sportsdb.events_last(team_id)),
        )
        items.append(FeedItem(
            team=team,
            next=next_events(next_data),
            last=last_events(last_data),
            season=season,
            status="unavailable" if next_data is None or last_data is None else "fetched",
        ))

    return items


async def build_schedules(sportsdb: SportsDBClient, state: FollowState, season: str) -> list[ScheduleItem]:
    """Each followed team's games in its league's season."""
    schedules: list[ScheduleItem] = []

    for team_id in state.team_ids:
        try:
            raw = await sportsdb.lookup_team(team_id)
            if raw is None:
                schedules.append(ScheduleItem(team=Team(id=team_id), season=season, status="unavailable"))
                continue
            team = Team.model_validate(normalize_team(raw))
            season_data = await sportsdb.events_season(team.league_id, season)
        except UpstreamError as e:
            logger.warning("Schedule unavailable for team %s: %s", team_id, e)
            schedules.append(ScheduleItem(team=Team(id=team_id), season=season, status="unavailable"))
            continue

        events = [normalize_event(e) for e in records(season_data, "events")]
        schedules.append(ScheduleItem(team=team, season=season, events=filter_team_events(events, team_id)))

    return schedules


async def build_team_hub(sportsdb: SportsDBClient, team_id: str, season: str | None) -> dict:
    """Everything the team screen shows, fetched in one concurrent batch."""
    raw = await sportsdb.lookup_team(team_id)
    if raw is None:
        raise NotFoundError("Team not found", teamId=team_id)
    team = normalize_team(raw)

    calls = {
        "next": sportsdb.events_next(team_id),
        "last": sportsdb.events_last(team_id),
        "roster": sportsdb.lookup_all_players(team_id),
    }
    if season:
        calls["table"] = sportsdb.lookup_table(team["leagueId"], season)
        calls["schedule"] = sportsdb.events_season(team["leagueId"], season)

    results = dict(zip(calls, await asyncio.gather(*(_settle(c) for c in calls.values()))))

    roster = [normalize_player(p) for p in records(results["roster"], "player", "players")]
    players, staff = split_roster(roster)

    table = None
    schedule = None
    if season:
        table = [normalize_table_row_compact(r) for r in records(results["table"], "table")]
        season_events = [normalize_event(e) for e in records(results["schedule"], "events")]
        schedule = filter_team_events(season_events, team_id)

    return {
        "team": team,
        "season": season or None,
        "next": next_events(results["next"]),
        "last": last_events(results["last"]),
        "players": players,
        "staff": staff,
        "table": table,
        "schedule": schedule,
        "unavailable": [name for name, data in results.items() if data is None],
        "limits": {
            "schedule": "Free key may return partial season events; cache and degrade gracefully.",
        },
    }
