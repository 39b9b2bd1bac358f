"""
Data models shared by the follow store and the aggregation layer.
Serialized with camelCase keys, which is what the mobile client and the
state file both use.
"""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ItemStatus = Literal["fetched", "unavailable"]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class Team(CamelModel):
    """Denormalized team snapshot, captured when the client follows the team.

    Not refreshed afterwards, so it can drift from upstream.
    """
    id: str
    name: str | None = None
    short_name: str | None = None
    sport: str | None = None
    league: str | None = None
    league_id: str | None = None
    stadium: str | None = None
    country: str | None = None
    badge: str | None = None
    logo: str | None = None
    banner: str | None = None


class FollowState(CamelModel):
    """One client's followed teams."""
    team_ids: list[str] = Field(default_factory=list)
    teams_by_id: dict[str, Team] = Field(default_factory=dict)

    def followed_teams(self) -> list[Team]:
        """Snapshots in follow order; IDs without a snapshot are skipped."""
        return [self.teams_by_id[tid] for tid in self.team_ids if tid in self.teams_by_id]


class FeedItem(CamelModel):
    team: Team
    next: list[dict[str, Any]] = Field(default_factory=list)
    last: list[dict[str, Any]] = Field(default_factory=list)
    season: str | None = None
    status: ItemStatus = "fetched"


class ScheduleItem(CamelModel):
    team: Team
    season: str
    events: list[dict[str, Any]] = Field(default_factory=list)
    status: ItemStatus = "fetched"
