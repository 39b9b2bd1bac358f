"""Unit tests for services/follow_store.py (FollowStore)"""
import asyncio
import json
from pathlib import Path

import pytest

from errors import MissingClientIdError
from services.follow_store import SCHEMA_VERSION, FollowStore, dedupe, migrate_document
from services.models import FollowState, Team


def _team(team_id: str, name: str, **extra) -> Team:
    return Team(id=team_id, name=name, sport="Soccer", league_id="4328", **extra)


@pytest.fixture
def store(follows_file: Path) -> FollowStore:
    return FollowStore(follows_file)


@pytest.mark.unit
class TestFollowStore:
    def test_unknown_client_gets_empty_state(self, store: FollowStore):
        state = asyncio.run(store.get("never-seen-id"))
        assert state.team_ids == []
        assert state.teams_by_id == {}

    def test_get_does_not_create_file(self, store: FollowStore):
        asyncio.run(store.get("never-seen-id"))
        assert not store.path.exists()

    def test_set_dedupes_in_first_occurrence_order(self, store: FollowStore):
        state = asyncio.run(store.set_team_ids("c1", ["A", "A", "B"]))
        assert state.team_ids == ["A", "B"]
        assert asyncio.run(store.get("c1")).team_ids == ["A", "B"]

    def test_set_stringifies_ids(self, store: FollowStore):
        state = asyncio.run(store.set_team_ids("c1", [133604, "133604", 133610]))
        assert state.team_ids == ["133604", "133610"]

    def test_set_overwrites_and_keeps_snapshots(self, store: FollowStore):
        asyncio.run(store.add_teams("c1", [_team("1", "Arsenal")]))
        state = asyncio.run(store.set_team_ids("c1", ["2"]))
        assert state.team_ids == ["2"]
        assert "1" in state.teams_by_id

    def test_add_accumulates(self, store: FollowStore):
        asyncio.run(store.add_teams("c1", [_team("A", "Arsenal")]))
        state = asyncio.run(store.add_teams("c1", [_team("B", "Chelsea")]))
        assert state.team_ids == ["A", "B"]
        assert set(state.teams_by_id) == {"A", "B"}

    def test_readd_updates_snapshot_in_place(self, store: FollowStore):
        asyncio.run(store.add_teams("c1", [_team("A", "Arsenal"), _team("B", "Chelsea")]))
        state = asyncio.run(store.add_teams("c1", [_team("A", "Arsenal FC", stadium="Emirates")]))
        assert state.team_ids == ["A", "B"]
        assert state.teams_by_id["A"].name == "Arsenal FC"
        assert state.teams_by_id["A"].stadium == "Emirates"

    def test_clear_resets_but_keeps_client(self, store: FollowStore):
        asyncio.run(store.add_teams("c1", [_team("A", "Arsenal")]))
        asyncio.run(store.clear("c1"))

        cleared = asyncio.run(store.get("c1"))
        unseen = asyncio.run(store.get("never-seen"))
        assert cleared == unseen == FollowState()
        assert "c1" in asyncio.run(store.client_ids())

    def test_repopulate_after_clear(self, store: FollowStore):
        asyncio.run(store.set_team_ids("c1", ["A"]))
        asyncio.run(store.clear("c1"))
        state = asyncio.run(store.set_team_ids("c1", ["B"]))
        assert state.team_ids == ["B"]

    def test_clients_are_isolated(self, store: FollowStore):
        asyncio.run(store.set_team_ids("c1", ["A"]))
        asyncio.run(store.set_team_ids("c2", ["B"]))
        assert asyncio.run(store.get("c1")).team_ids == ["A"]
        assert asyncio.run(store.get("c2")).team_ids == ["B"]

    def test_persistence_round_trip(self, store: FollowStore, follows_file: Path):
        asyncio.run(store.add_teams("c1", [_team("A", "Arsenal", badge="a.png")]))
        asyncio.run(store.add_teams("c1", [_team("B", "Chelsea")]))
        written = asyncio.run(store.get("c1"))

        reloaded = asyncio.run(FollowStore(follows_file).get("c1"))
        assert reloaded == written

    def test_writes_versioned_document(self, store: FollowStore, follows_file: Path):
        asyncio.run(store.add_teams("c1", [_team("A", "Arsenal")]))
        doc = json.loads(follows_file.read_text())
        assert doc["schemaVersion"] == SCHEMA_VERSION
        assert doc["clients"]["c1"]["teamIds"] == ["A"]
        assert doc["clients"]["c1"]["teamsById"]["A"]["leagueId"] == "4328"
        assert not list(follows_file.parent.glob("*.tmp"))

    @pytest.mark.parametrize("client_id", ["", "   ", None])
    def test_missing_client_id_rejected(self, store: FollowStore, client_id):
        with pytest.raises(MissingClientIdError):
            asyncio.run(store.get(client_id))
        with pytest.raises(MissingClientIdError):
            asyncio.run(store.set_team_ids(client_id, ["A"]))

    @pytest.mark.parametrize("contents", ["", "{not json", "[1, 2, 3]", "null", '"text"'])
    def test_corrupt_file_reads_as_empty(self, store: FollowStore, follows_file: Path, contents: str):
        follows_file.parent.mkdir(parents=True)
        follows_file.write_text(contents)
        assert asyncio.run(store.get("c1")) == FollowState()

    def test_corrupt_file_is_replaced_on_write(self, store: FollowStore, follows_file: Path):
        follows_file.parent.mkdir(parents=True)
        follows_file.write_text("{not json")
        asyncio.run(store.set_team_ids("c1", ["A"]))
        assert asyncio.run(store.get("c1")).team_ids == ["A"]

    def test_concurrent_writers_do_not_lose_updates(self, store: FollowStore):
        async def main():
            await asyncio.gather(*(store.set_team_ids(f"c{i}", [str(i)]) for i in range(10)))

        asyncio.run(main())
        assert sorted(asyncio.run(store.client_ids())) == sorted(f"c{i}" for i in range(10))


@pytest.mark.unit
class TestMigrateDocument:
    def test_v1_global_profile_goes_to_legacy_client(self):
        clients = migrate_document({"teamIds": [1, "2", "2"]}, legacy_client_id="default")
        assert list(clients) == ["default"]
        assert clients["default"].team_ids == ["1", "2"]
        assert clients["default"].teams_by_id == {}

    def test_v2_per_client_ids_without_snapshots(self):
        clients = migrate_document({"phone": {"teamIds": ["A"]}, "tablet": {}}, "default")
        assert clients["phone"].team_ids == ["A"]
        assert clients["phone"].teams_by_id == {}
        assert clients["tablet"] == FollowState()

    @pytest.mark.parametrize("odd_client", ["clients", "schemaVersion"])
    def test_v2_client_named_like_v3_keys_keeps_everyone(self, odd_client):
        doc = {odd_client: {"teamIds": ["1"]}, "phone": {"teamIds": ["2"]}}
        clients = migrate_document(doc, "default")
        assert clients[odd_client].team_ids == ["1"]
        assert clients["phone"].team_ids == ["2"]

    def test_v3_with_non_dict_clients_is_empty(self):
        assert migrate_document({"schemaVersion": 3, "clients": []}, "default") == {}

    def test_unversioned_v3_with_snapshots(self):
        doc = {"phone": {"teamIds": ["A"], "teamsById": {"A": {"id": "A", "name": "Arsenal", "leagueId": 4328}}}}
        clients = migrate_document(doc, "default")
        assert clients["phone"].teams_by_id["A"].league_id == "4328"

    def test_malformed_entries_degrade_per_client(self):
        doc = {
            "schemaVersion": 3,
            "clients": {
                "bad": "nope",
                "partial": {"teamIds": "A", "teamsById": {"A": {"name": "no id"}, "B": {"id": "B"}}},
            },
        }
        clients = migrate_document(doc, "default")
        assert clients["bad"] == FollowState()
        assert clients["partial"].team_ids == []
        assert list(clients["partial"].teams_by_id) == ["B"]

    def test_legacy_file_migrates_on_next_write(self, follows_file: Path):
        follows_file.parent.mkdir(parents=True)
        follows_file.write_text(json.dumps({"teamIds": ["A"]}))
        store = FollowStore(follows_file, legacy_client_id="me")

        assert asyncio.run(store.get("me")).team_ids == ["A"]
        asyncio.run(store.set_team_ids("other", ["B"]))

        doc = json.loads(follows_file.read_text())
        assert doc["schemaVersion"] == SCHEMA_VERSION
        assert doc["clients"]["me"]["teamIds"] == ["A"]
        assert doc["clients"]["other"]["teamIds"] == ["B"]


@pytest.mark.unit
def test_dedupe_keeps_first_occurrence():
    assert dedupe(["b", "a", "b", 1, "1"]) == ["b", "a", "1"]
