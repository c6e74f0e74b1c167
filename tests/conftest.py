"""Shared fixtures: a small in-memory game dataset and stores built on it."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app import create_app
from training_guide.game_data import GameDataRepository
from training_guide.storage import MemoryStorage
from training_guide.store import GoalStore

from tests.sample_data import CHARACTERS, TALENTS, WEAPONS


@pytest.fixture()
def game_data() -> GameDataRepository:
    return GameDataRepository(CHARACTERS, WEAPONS, TALENTS)


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def store(game_data, storage) -> GoalStore:
    goal_store = GoalStore(game_data, storage)
    goal_store.load()
    return goal_store


@pytest.fixture()
def client(game_data, storage):
    app = create_app(provider=game_data, storage=storage)
    with TestClient(app) as test_client:
        yield test_client
