import pytest

from scout_desk.schemas.player import Position
from scout_desk.services.kv_store import JsonFileKeyValueStore, RemoteKeyValueStore
from scout_desk.services.shadow_team import (
    FORMATION_SLOTS,
    MAX_CANDIDATES_PER_SLOT,
    ShadowSquad,
    ShadowTeamService,
    SlotCapacityError,
    UnknownSlotError,
    players_in_slot,
    search_candidates,
)
from scout_desk.services.store_client import StoreReadError


def test_formation_has_eleven_slots():
    assert len(FORMATION_SLOTS) == 11
    assert FORMATION_SLOTS["gol"] == Position.GOL


def test_adding_same_player_twice_is_a_noop():
    squad = ShadowSquad()
    assert squad.add("ata", "p1") is True
    assert squad.add("ata", "p1") is False
    assert squad.candidates("ata") == ["p1"]


def test_fifth_candidate_is_rejected():
    squad = ShadowSquad({"zag1": ["a", "b", "c", "d"]})
    with pytest.raises(SlotCapacityError):
        squad.add("zag1", "e")
    assert squad.candidates("zag1") == ["a", "b", "c", "d"]
    assert len(squad.candidates("zag1")) == MAX_CANDIDATES_PER_SLOT


def test_unknown_slot():
    with pytest.raises(UnknownSlotError):
        ShadowSquad().add("libero", "p1")


def test_promote_second_keeper_to_starter():
    squad = ShadowSquad({"gol": ["p1", "p2"]})
    assert squad.promote("gol", 1) is True
    assert squad.candidates("gol") == ["p2", "p1"]


@pytest.mark.parametrize("index", [1, 2, 3])
def test_promote_shifts_earlier_candidates_down(index):
    ids = ["a", "b", "c", "d"]
    squad = ShadowSquad({"mei": ids})
    squad.promote("mei", index)
    assert squad.candidates("mei") == [ids[index]] + ids[:index] + ids[index + 1:]


@pytest.mark.parametrize("from_index,to_index", [(0, 0), (5, 0), (0, 5), (-1, 0)])
def test_out_of_range_or_same_index_move_changes_nothing(from_index, to_index):
    squad = ShadowSquad({"vol1": ["a", "b"]})
    assert squad.move("vol1", from_index, to_index) is False
    assert squad.candidates("vol1") == ["a", "b"]


def test_remove_keeps_relative_order():
    squad = ShadowSquad({"lte": ["a", "b", "c"]})
    assert squad.remove("lte", "b") is True
    assert squad.remove("lte", "zz") is False
    assert squad.candidates("lte") == ["a", "c"]


def test_loading_sanitises_stored_data():
    squad = ShadowSquad.from_dict({"ata": ["a", "a", 3, "b"], "libero": ["x"], "gol": "oops"})
    assert squad.to_dict() == {"ata": ["a", "b"]}
    assert ShadowSquad.from_dict(["not", "a", "dict"]).to_dict() == {}


def test_dangling_ids_are_skipped(make_player):
    keeper = make_player(id="k1", position1=Position.GOL)
    squad = ShadowSquad({"gol": ["gone", "k1"]})
    assert players_in_slot(squad, "gol", [keeper]) == [keeper]


def test_search_excludes_players_already_in_slot(make_player):
    a = make_player(id="a", name="Rafael", position1=Position.ATA)
    b = make_player(id="b", name="Rafinha", position1=Position.EXT)
    c = make_player(id="c", name="Gustavo", club="Rafa FC", position1=Position.ATA)
    squad = ShadowSquad({"ata": ["a"]})
    assert search_candidates(squad, "ata", [a, b, c], "raf") == [b, c]
    assert search_candidates(squad, "ata", [a, b, c], "", Position.ATA) == [c]
    assert search_candidates(squad, "ata", [a, b, c], "ext") == [b]


def test_service_persists_every_change(kv):
    service = ShadowTeamService(kv, "u1")
    service.add("gol", "p1")
    service.add("gol", "p2")
    service.promote("gol", 1)

    assert ShadowTeamService(kv, "u1").load().candidates("gol") == ["p2", "p1"]
    assert kv.get("pvfc_shadow_team_u1") == {"gol": ["p2", "p1"]}


def test_squads_are_private_per_viewer(kv):
    ShadowTeamService(kv, "u1").add("ata", "p1")
    assert ShadowTeamService(kv, "u2").load().candidates("ata") == []


def test_capacity_error_does_not_save(kv):
    service = ShadowTeamService(kv, "u1")
    for pid in "abcd":
        service.add("ext_esq", pid)
    with pytest.raises(SlotCapacityError):
        service.add("ext_esq", "e")
    assert service.load().candidates("ext_esq") == list("abcd")


def test_squad_survives_restart_with_file_store(tmp_path):
    path = tmp_path / "storage.json"
    ShadowTeamService(JsonFileKeyValueStore(path), "u1").add("zag2", "p9")
    reopened = ShadowTeamService(JsonFileKeyValueStore(path), "u1")
    assert reopened.load().candidates("zag2") == ["p9"]


def test_failed_remote_read_never_overwrites_squad(fake_client):
    store = RemoteKeyValueStore(prefix="shadow_squads", client=fake_client)
    service = ShadowTeamService(store, "u1")
    service.add("gol", "a")
    service.add("gol", "b")
    service.add("ata", "c")

    fake_client.fail_reads = True
    with pytest.raises(StoreReadError):
        service.add("zag1", "d")
    fake_client.fail_reads = False

    assert fake_client.data["shadow_squads"]["pvfc_shadow_team_u1"] == {"gol": ["a", "b"], "ata": ["c"]}
    assert service.load().candidates("gol") == ["a", "b"]


def test_missing_remote_squad_loads_empty(fake_client):
    store = RemoteKeyValueStore(prefix="shadow_squads", client=fake_client)
    assert ShadowTeamService(store, "new-viewer").load().to_dict() == {}
