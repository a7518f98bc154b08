"""
Service: guesses.py
Rôle:
- Enregistrer / retirer les déductions d'un joueur: "le joueur X contrôle (ou non) tel personnage".
- Après chaque modification, la partie passe en FINISHED si toutes les déductions sont posées.

Notes:
- Une seule affirmation par triple (joueur, cible, personnage): upsert.
- Les votes sont figés une fois la partie terminée.
"""
from __future__ import annotations

import logging

from sleuthers.models.game import GameRecord, GameStage, PlayerState
from . import catalog
from .errors import Forbidden, InvalidAction, InvalidArgument, NotFound
from .game_store import GameStore, get_game_store
from .stage import finish_if_deduced

logger = logging.getLogger(__name__)


def _check(game: GameRecord, user_id: str, target_user_id: str, character_id: str) -> PlayerState:
    player = game.player(user_id)
    if player is None:
        raise Forbidden(f"User {user_id} is not playing game {game.id}")
    if game.stage == GameStage.FINISHED:
        raise InvalidAction("Game is finished, guesses are frozen")
    if game.player(target_user_id) is None:
        raise NotFound(f"User {target_user_id} not found")
    if target_user_id == user_id:
        raise InvalidArgument("Cannot guess your own character")
    if catalog.get_character(character_id) is None:
        raise NotFound(f"Character {character_id} not found")
    return player


def upsert_guess(
    game_id: str,
    user_id: str,
    character_id: str,
    target_user_id: str,
    guess: bool,
    *,
    store: GameStore | None = None,
) -> GameStage:
    """Pose (ou remplace) une déduction; renvoie l'étape de la partie après coup."""
    store = store or get_game_store()
    with store.transaction(game_id) as game:
        player = _check(game, user_id, target_user_id, character_id)
        player.guesses.setdefault(target_user_id, {})[character_id] = bool(guess)
        finish_if_deduced(game)
        stage = game.stage

    logger.debug("guess recorded", extra={"game_id": game_id, "user_id": user_id})
    return stage


def delete_guess(
    game_id: str,
    user_id: str,
    character_id: str,
    target_user_id: str,
    *,
    store: GameStore | None = None,
) -> GameStage:
    """Retire une déduction (sans effet si elle n'existe pas)."""
    store = store or get_game_store()
    with store.transaction(game_id) as game:
        player = _check(game, user_id, target_user_id, character_id)
        claims = player.guesses.get(target_user_id)
        if claims is not None:
            claims.pop(character_id, None)
            if not claims:
                del player.guesses[target_user_id]
        finish_if_deduced(game)
        stage = game.stage

    logger.debug("guess deleted", extra={"game_id": game_id, "user_id": user_id})
    return stage
