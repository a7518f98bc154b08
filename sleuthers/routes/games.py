"""
Module routes/games.py
Rôle:
- Endpoints de jeu pour un joueur authentifié (HTTP Basic, cf. deps/auth.py).

Endpoints:
- GET    /game                → mes parties (id, nom, étape)
- PUT    /game                → création (le demandeur devient propriétaire)
- GET    /game/{id}           → vue de la partie filtrée pour le demandeur
- POST   /game/{id}           → action de tour
- POST   /game/{id}/guess     → pose / remplace une déduction
- DELETE /game/{id}/guess     → retire une déduction

Intégrations:
- services.dealer / turn_engine / guesses / projection.
- Les erreurs métier (GameError) sont traduites en HTTP par main.py.
"""
import random
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from sleuthers.deps.auth import current_user
from sleuthers.models.action import (
    ActionRequest,
    ActionResult,
    GameCreateRequest,
    GameSummary,
    GuessDeleteRequest,
    GuessRequest,
)
from sleuthers.models.view import GameView
from sleuthers.services import dealer, guesses, projection, turn_engine
from sleuthers.services.game_store import GameStore, get_game_store
from sleuthers.services.user_store import UserStore, get_user_store

router = APIRouter(prefix="/game", tags=["game"])


def get_rng() -> Optional[random.Random]:
    """Source d'aléa des routes; None = entropie système à chaque appel."""
    return None


@router.get("", response_model=List[GameSummary])
def my_games(
    user: Dict[str, Any] = Depends(current_user),
    store: GameStore = Depends(get_game_store),
):
    return projection.list_games(user["id"], store=store)


@router.put("", status_code=201)
def create(
    payload: GameCreateRequest,
    user: Dict[str, Any] = Depends(current_user),
    store: GameStore = Depends(get_game_store),
    users: UserStore = Depends(get_user_store),
    rng: Optional[random.Random] = Depends(get_rng),
):
    game_id = dealer.create_game(
        user["id"], payload.name, payload.user_ids, store=store, users=users, rng=rng
    )
    return {"id": game_id}


@router.get("/{game_id}", response_model=GameView, response_model_exclude_none=True)
def view(
    game_id: str,
    user: Dict[str, Any] = Depends(current_user),
    store: GameStore = Depends(get_game_store),
    users: UserStore = Depends(get_user_store),
):
    return projection.project_view(game_id, user["id"], store=store, users=users)


@router.post("/{game_id}", response_model=ActionResult)
def act(
    game_id: str,
    payload: ActionRequest,
    user: Dict[str, Any] = Depends(current_user),
    store: GameStore = Depends(get_game_store),
    rng: Optional[random.Random] = Depends(get_rng),
):
    return turn_engine.apply_action(game_id, user["id"], payload, store=store, rng=rng)


@router.post("/{game_id}/guess")
def put_guess(
    game_id: str,
    payload: GuessRequest,
    user: Dict[str, Any] = Depends(current_user),
    store: GameStore = Depends(get_game_store),
):
    stage = guesses.upsert_guess(
        game_id, user["id"], payload.character_id, payload.user_id, payload.guess, store=store
    )
    return {"ok": True, "stage": stage}


@router.delete("/{game_id}/guess")
def remove_guess(
    game_id: str,
    payload: GuessDeleteRequest,
    user: Dict[str, Any] = Depends(current_user),
    store: GameStore = Depends(get_game_store),
):
    stage = guesses.delete_guess(game_id, user["id"], payload.character_id, payload.user_id, store=store)
    return {"ok": True, "stage": stage}
