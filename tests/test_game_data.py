import json

import pytest

from training_guide.costs import CostItem
from training_guide.data_loader import DataLoader
from training_guide.game_data import GameDataRepository

from tests.sample_data import CHARACTERS, TALENTS, WEAPONS


class FakeResponse:
    def __init__(self, payload):
        self._payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, payloads):
        self.payloads = payloads
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        return FakeResponse(self.payloads[url.rsplit("/", 1)[-1]])


def test_traveler_is_excluded(game_data):
    assert game_data.character_names() == ["Amber", "Fischl", "Xiangling"]


def test_character_ascension_merges_phases(game_data):
    costs = game_data.character_ascension_costs("Amber", range(2, 4))
    assert costs == [CostItem("Mora", 100_000), CostItem("Agnidus Agate Fragment", 9)]
    assert game_data.character_ascension_costs("Amber", range(1, 1)) == []


def test_unknown_identifiers_return_none(game_data):
    assert game_data.character_ascension_costs("Paimon", range(1, 7)) is None
    assert game_data.character_ascension_costs("Aether", range(1, 7)) is None
    assert game_data.weapon_ascension_costs("Wooden Stick", range(1, 7)) is None
    assert game_data.talent_costs("Xiangling", 1, 9) is None


def test_weapon_lookups(game_data):
    assert game_data.weapon_rarity("Amos' Bow") == 5
    assert game_data.weapon_rarity("Mystery Bow") is None
    assert game_data.weapon_ascension_costs("Mystery Bow", range(1, 7)) == []
    assert game_data.character_weapon_type("Fischl") == "WEAPON_BOW"
    assert game_data.weapon_type("The Catch") == "WEAPON_POLE"
    assert game_data.weapon_type("Wooden Stick") is None


def test_talent_costs_are_per_level(game_data):
    assert game_data.talent_costs("Amber", 1, 3) == [CostItem("Mora", 5_000), CostItem("Guide to Freedom", 2)]
    assert game_data.talent_costs("Amber", 9, 9) == []


def test_talent_names_fall_back_to_generic_labels(game_data):
    assert game_data.talent_names("Amber") == {
        "normalAttack": "Sharpshooter",
        "skill": "Explosive Puppet",
        "burst": "Fiery Rain",
    }
    assert game_data.talent_names("Fischl")["burst"] == "Elemental Burst"
    assert game_data.talent_names("Xiangling")["normalAttack"] == "Normal Attack"


def test_loader_reads_local_directory(tmp_path):
    for name, payload in (("characters", CHARACTERS), ("weapons", WEAPONS), ("talents", TALENTS)):
        (tmp_path / f"{name}.json").write_text(json.dumps(payload), encoding="utf-8")

    repository = GameDataRepository.from_loader(DataLoader(base_url=str(tmp_path)))
    assert repository.weapon_names() == ["Amos' Bow", "Mystery Bow", "Silver Sword", "The Catch", "The Stringless"]


def test_loader_fetches_http_once_per_dataset():
    session = FakeSession({"characters.json": CHARACTERS})
    loader = DataLoader(base_url="https://data.example/", session=session)

    assert loader.fetch_json("characters") is loader.fetch_json("characters")
    assert session.requested == ["https://data.example/characters.json"]


def test_loader_rejects_unknown_dataset():
    with pytest.raises(KeyError):
        DataLoader().fetch_json("artifacts")
