"""Tools for planning character upgrades and the materials they need."""

from .config import Settings
from .data_loader import DataLoader
from .game_data import GameDataRepository
from .store import GoalStore

__all__ = ["DataLoader", "GameDataRepository", "GoalStore", "Settings"]
