"""Per-client followed-teams storage backed by a single JSON file.

Every read goes to disk; there is no in-memory copy of the state. Every
mutation is a full read-modify-write of the document for all clients,
serialized by a process-local lock and committed with an atomic rename.
A second process writing the same file can still lose updates.

File layout (schema v3):

    {"schemaVersion": 3,
     "clients": {"<clientId>": {"teamIds": [...], "teamsById": {...}}}}

Older layouts are read and upgraded on the next write:
    v1  {"teamIds": [...]}                      single global profile
    v2  {"<clientId>": {"teamIds": [...]}}      per-client, no snapshots
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Callable, Iterable

from pydantic import ValidationError

from errors import MissingClientIdError
from services.models import FollowState, Team

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 3


def dedupe(ids: Iterable[Any]) -> list[str]:
    """Stringify and de-duplicate, keeping first-occurrence order."""
    return list(dict.fromkeys(str(i) for i in ids))


def _state_from_raw(client_id: str, raw: Any) -> FollowState:
    if not isinstance(raw, dict):
        logger.warning("Ignoring malformed follow state for client %s", client_id)
        return FollowState()

    team_ids = raw.get("teamIds")
    snapshots = raw.get("teamsById")

    teams_by_id: dict[str, Team] = {}
    if isinstance(snapshots, dict):
        for team_id, snapshot in snapshots.items():
            try:
                teams_by_id[str(team_id)] = Team.model_validate(snapshot)
            except ValidationError as e:
                logger.warning("Dropping malformed snapshot %s for client %s: %s", team_id, client_id, e)

    return FollowState(
        team_ids=dedupe(team_ids) if isinstance(team_ids, list) else [],
        teams_by_id=teams_by_id,
    )


def migrate_document(doc: Any, legacy_client_id: str) -> dict[str, FollowState]:
    """Read any known layout of the state file into {client_id: FollowState}."""
    if not isinstance(doc, dict):
        return {}

    if isinstance(doc.get("schemaVersion"), int):
        clients = doc.get("clients")
        if not isinstance(clients, dict):
            return {}
    elif isinstance(doc.get("teamIds"), list):
        clients = {legacy_client_id: {"teamIds": doc["teamIds"]}}
    else:
        clients = doc

    return {str(cid): _state_from_raw(str(cid), raw) for cid, raw in clients.items()}


def _require_client_id(client_id: str | None) -> str:
    client_id = (client_id or "").strip()
    if not client_id:
        raise MissingClientIdError()
    return client_id


class FollowStore:
    def __init__(self, path: str | Path, legacy_client_id: str = "default"):
        self.path = Path(path)
        self.legacy_client_id = legacy_client_id
        self._lock = asyncio.Lock()

    async def get(self, client_id: str) -> FollowState:
        """Stored state, or the empty state for a client never seen before."""
        client_id = _require_client_id(client_id)
        clients = await asyncio.to_thread(self._read_all)
        return clients.get(client_id, FollowState())

    async def client_ids(self) -> list[str]:
        clients = await asyncio.to_thread(self._read_all)
        return list(clients)

    async def set_team_ids(self, client_id: str, team_ids: Iterable[Any]) -> FollowState:
        """Overwrite the followed ID list. Snapshots are left alone."""
        ids = dedupe(team_ids)

        def apply(state: FollowState) -> None:
            state.team_ids = ids

        return await self._mutate(client_id, apply, "set")

    async def add_teams(self, client_id: str, teams: Iterable[Team]) -> FollowState:
        """Upsert snapshots and append their IDs; re-adding keeps position."""
        teams = list(teams)

        def apply(state: FollowState) -> None:
            for team in teams:
                state.teams_by_id[team.id] = team
                state.team_ids.append(team.id)
            state.team_ids = dedupe(state.team_ids)

        return await self._mutate(client_id, apply, "add")

    async def clear(self, client_id: str) -> FollowState:
        """Empty the client's state. The client key stays in the file."""

        def apply(state: FollowState) -> None:
            state.team_ids = []
            state.teams_by_id = {}

        return await self._mutate(client_id, apply, "clear")

    async def _mutate(self, client_id: str, apply: Callable[[FollowState], None], op: str) -> FollowState:
        client_id = _require_client_id(client_id)
        async with self._lock:
            clients = await asyncio.to_thread(self._read_all)
            state = clients.get(client_id, FollowState())
            apply(state)
            clients[client_id] = state
            await asyncio.to_thread(self._write_all, clients)

        logger.info("Follow state %s for client %s: %d team(s)", op, client_id, len(state.team_ids))
        return state

    def _read_all(self) -> dict[str, FollowState]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read follow state %s, treating as empty: %s", self.path, e)
            return {}

        try:
            doc = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Corrupt follow state %s, treating as empty: %s", self.path, e)
            return {}

        return migrate_document(doc, self.legacy_client_id)

    def _write_all(self, clients: dict[str, FollowState]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        doc = {
            "schemaVersion": SCHEMA_VERSION,
            "clients": {cid: state.to_json_dict() for cid, state in clients.items()},
        }
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(doc, indent=2), encoding="utf-8")
        tmp.replace(self.path)
