"""FastAPI backend for the character training guide."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Literal, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from training_guide.config import Settings
from training_guide.data_loader import DataLoader
from training_guide.game_data import GameDataProvider, GameDataRepository
from training_guide.goals import ARTIFACT_SLOTS, MAIN_STAT_OPTIONS, SUBSTAT_OPTIONS, TALENT_KEYS, GoalRecord
from training_guide.phases import ARTIFACT_LEVELS, CHARACTER_LEVELS, TALENT_LEVELS, WEAPON_LEVELS
from training_guide.storage import JsonFileStorage, Storage
from training_guide.store import GoalStore, GoalStoreError, UnknownCharacterError
from training_guide.totals import goal_costs, roster_totals

logger = logging.getLogger("training_guide.app")


class LevelsModel(BaseModel):
    character: List[int]
    weapon: List[int]
    artifact: List[int]
    talent: List[int]


class InitResponse(BaseModel):
    characters: List[str]
    weapons: List[str]
    levels: LevelsModel
    artifact_slots: List[str]
    main_stats: Dict[str, List[str]]
    substats: List[str]
    talent_keys: List[str]


class StateResponse(BaseModel):
    ownedCharacters: List[str]
    characterGoals: Dict[str, Dict[str, Any]]
    selectedCharacter: Optional[str] = None
    ownershipMode: bool = False
    revision: int = 0


class OwnershipModeRequest(BaseModel):
    enabled: bool


class LevelRequest(BaseModel):
    dimension: Literal["character", "weapon"]
    field: Literal["currentLevel", "targetLevel"]
    value: int


class WeaponRequest(BaseModel):
    weapon: Optional[str] = None


class ArtifactRequest(BaseModel):
    field: Literal["currentLevel", "targetLevel", "mainStat", "substat", "targetSubstatCount"]
    value: int | str | None = None


class TalentRequest(BaseModel):
    talent: Literal["normalAttack", "skill", "burst"]
    field: Literal["currentLevel", "targetLevel"]
    value: int = Field(..., ge=1, le=10)


def _build_provider(settings: Settings) -> GameDataRepository:
    loader = DataLoader(base_url=settings.data_base_url, timeout=settings.request_timeout)
    return GameDataRepository.from_loader(loader)


def get_store(request: Request) -> GoalStore:
    return request.app.state.store


def _goal_or_default(store: GoalStore, character: str) -> GoalRecord:
    """The stored goal, or the defaults a first edit would create."""

    if character not in store.known_characters:
        raise UnknownCharacterError(f"Unknown character: {character!r}")
    return store.goal(character) or GoalRecord()


def _state(store: GoalStore) -> StateResponse:
    return StateResponse(
        **store.export_document(),
        ownershipMode=store.ownership_mode,
        revision=store.revision,
    )


def create_app(
    provider: GameDataProvider | None = None,
    storage: Storage | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the API around one goal store that lives as long as the application."""

    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        data = provider or _build_provider(settings)
        store = GoalStore(data, storage or JsonFileStorage(settings.storage_path))
        errors = store.load()
        if errors:
            logger.warning("Ignoring saved state: %s", "; ".join(str(error) for error in errors[:5]))
        app.state.store = store
        try:
            yield
        finally:
            store.teardown()

    app = FastAPI(title="Training Guide API", lifespan=lifespan)

    @app.exception_handler(UnknownCharacterError)
    async def unknown_character(request: Request, exc: UnknownCharacterError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(GoalStoreError)
    async def bad_mutation(request: Request, exc: GoalStoreError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.get("/api/init", response_model=InitResponse)
    async def api_init(store: GoalStore = Depends(get_store)) -> InitResponse:
        return InitResponse(
            characters=sorted(store.known_characters),
            weapons=sorted(store.known_weapons),
            levels=LevelsModel(
                character=list(CHARACTER_LEVELS),
                weapon=list(WEAPON_LEVELS),
                artifact=list(ARTIFACT_LEVELS),
                talent=list(TALENT_LEVELS),
            ),
            artifact_slots=list(ARTIFACT_SLOTS),
            main_stats={slot: list(options) for slot, options in MAIN_STAT_OPTIONS.items()},
            substats=list(SUBSTAT_OPTIONS),
            talent_keys=list(TALENT_KEYS),
        )

    @app.get("/api/state", response_model=StateResponse)
    async def api_state(store: GoalStore = Depends(get_store)) -> StateResponse:
        return _state(store)

    @app.post("/api/characters/{character}/select", response_model=StateResponse)
    async def api_select(character: str, store: GoalStore = Depends(get_store)) -> StateResponse:
        store.select(character)
        return _state(store)

    @app.post("/api/characters/{character}/ownership", response_model=StateResponse)
    async def api_toggle_ownership(character: str, store: GoalStore = Depends(get_store)) -> StateResponse:
        store.toggle_ownership(character)
        return _state(store)

    @app.put("/api/ownership-mode", response_model=StateResponse)
    async def api_ownership_mode(
        payload: OwnershipModeRequest, store: GoalStore = Depends(get_store)
    ) -> StateResponse:
        store.set_ownership_mode(payload.enabled)
        return _state(store)

    @app.get("/api/goals/{character}")
    async def api_goal(character: str, store: GoalStore = Depends(get_store)) -> Dict[str, Any]:
        return {
            "character": character,
            "goal": _goal_or_default(store, character).to_dict(),
            "talentNames": store.provider.talent_names(character),
            "weapons": store.compatible_weapons(character),
        }

    @app.patch("/api/goals/{character}/level")
    async def api_level(
        character: str, payload: LevelRequest, store: GoalStore = Depends(get_store)
    ) -> Dict[str, Any]:
        return store.set_level(character, payload.dimension, payload.field, payload.value).to_dict()

    @app.put("/api/goals/{character}/weapon")
    async def api_weapon(
        character: str, payload: WeaponRequest, store: GoalStore = Depends(get_store)
    ) -> Dict[str, Any]:
        return store.set_weapon(character, payload.weapon).to_dict()

    @app.patch("/api/goals/{character}/artifacts/{slot_index}")
    async def api_artifact(
        character: str, slot_index: int, payload: ArtifactRequest, store: GoalStore = Depends(get_store)
    ) -> Dict[str, Any]:
        return store.set_artifact_field(character, slot_index, payload.field, payload.value).to_dict()

    @app.patch("/api/goals/{character}/talents")
    async def api_talent(
        character: str, payload: TalentRequest, store: GoalStore = Depends(get_store)
    ) -> Dict[str, Any]:
        return store.set_talent_level(character, payload.talent, payload.field, payload.value).to_dict()

    @app.get("/api/goals/{character}/costs")
    async def api_goal_costs(character: str, store: GoalStore = Depends(get_store)) -> Dict[str, Any]:
        return goal_costs(character, _goal_or_default(store, character), store.provider).to_dict()

    @app.get("/api/totals")
    async def api_totals(store: GoalStore = Depends(get_store)) -> Dict[str, Any]:
        return roster_totals(store).to_dict()

    @app.get("/api/export")
    async def api_export(store: GoalStore = Depends(get_store)) -> JSONResponse:
        return JSONResponse(
            content=store.export_document(),
            headers={"Content-Disposition": 'attachment; filename="training-guide.json"'},
        )

    @app.post("/api/import")
    async def api_import(request: Request, store: GoalStore = Depends(get_store)) -> JSONResponse:
        errors = store.import_json(await request.body())
        if errors:
            return JSONResponse(status_code=400, content={"errors": [error.to_dict() for error in errors]})
        return JSONResponse(content=_state(store).model_dump())

    return app


logging.basicConfig(
    level=Settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
app = create_app()
