"""
Service: resolvers.py
Rôle:
- Appliquer l'effet d'une action de carte (phases 3 et 4) une fois la carte validée.
- Chaque résolveur ajoute exactement une entrée au journal, avec de quoi rejouer l'action.

Résolveurs:
- MOVE           : déplace un personnage (case différente de l'actuelle, distance libre).
- ELIMINATE      : écarte au hasard un personnage non contrôlé; si tous le sont déjà,
                   la pile est remise à zéro avant un nouveau tirage.
- PICK_TOKEN     : prend un jeton présent sous le personnage du joueur.
- SPECIFIC_TOKEN : prend le jeton imprimé sur la carte, sans condition de case.
- SIGHT          : le personnage de la carte voit-il celui du joueur visé (ligne/colonne) ?

Valeur renvoyée: personnage éliminé (ELIMINATE), visibilité (SIGHT), sinon None.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from sleuthers.models.action import ActionRequest
from sleuthers.models.game import (
    ActionType,
    CardAction,
    CharacterState,
    GameRecord,
    PlayerState,
)
from sleuthers.utils.board import in_sight
from sleuthers.utils.randomness import pick
from .errors import InternalInvariantViolation, InvalidAction, InvalidArgument, NotFound

logger = logging.getLogger(__name__)

ActionValue = Optional[Union[bool, str]]


@dataclass
class ActionContext:
    game: GameRecord
    player: PlayerState
    request: ActionRequest
    card_id: str
    slot: CardAction
    rng: Optional[random.Random] = None


# -------------------- utilitaires --------------------

def get_character(game: GameRecord, character_id: str) -> CharacterState:
    character = game.characters.get(character_id)
    if character is None:
        raise NotFound(f"Character {character_id} not found")
    return character


def _own_location(game: GameRecord, player: PlayerState) -> int:
    character = game.characters.get(player.character)
    if character is None:
        raise InternalInvariantViolation(f"Character of {player.user_id} missing from game {game.id}")
    return character.location


def _eliminable(game: GameRecord) -> List[CharacterState]:
    controlled = game.controlled_characters()
    return [c for c in game.characters.values() if not c.eliminated and c.character not in controlled]


def _take_token(ctx: ActionContext, token_id: str, action: ActionType) -> None:
    game, player = ctx.game, ctx.player
    token = game.tokens.get(token_id)
    if token is None:
        if action == ActionType.SPECIFIC_TOKEN:
            raise InternalInvariantViolation(f"Card token {token_id} missing from game {game.id}")
        raise NotFound(f"Token {token_id} not found")
    if action == ActionType.PICK_TOKEN and _own_location(game, player) not in token.locations:
        raise InvalidAction(f"You cannot pick up a {token_id}")
    if token.stock < 1:
        raise InvalidAction(f"No {token_id} left")

    game.append_log(player.user_id, action, card=ctx.card_id, token=token_id)
    player.tokens[token_id] = player.tokens.get(token_id, 0) + 1
    token.stock -= 1


# -------------------- résolveurs --------------------

def resolve_move(ctx: ActionContext) -> ActionValue:
    req = ctx.request
    if req.move_to is None:
        raise InvalidArgument("`move_to` is required for MOVE action")
    if not req.character_id:
        raise InvalidArgument("`character_id` is required for MOVE action")
    character = get_character(ctx.game, req.character_id)
    if req.move_to == character.location:
        raise InvalidAction("Must move to a different space")

    ctx.game.append_log(
        ctx.player.user_id,
        ActionType.MOVE,
        card=ctx.card_id,
        character=character.character,
        move_from=character.location,
    )
    character.location = req.move_to
    return None


def resolve_eliminate(ctx: ActionContext) -> ActionValue:
    game = ctx.game
    candidates = _eliminable(game)
    if not candidates:
        # on repasse toute la pile
        for character in game.characters.values():
            character.eliminated = False
        candidates = _eliminable(game)
        if not candidates:
            raise InternalInvariantViolation(f"Game {game.id} has no uncontrolled character")
        logger.debug("elimination pool reset", extra={"game_id": game.id})

    chosen = pick(candidates, ctx.rng)
    game.append_log(ctx.player.user_id, ActionType.ELIMINATE, card=ctx.card_id, character=chosen.character)
    chosen.eliminated = True
    return chosen.character


def resolve_pick_token(ctx: ActionContext) -> ActionValue:
    if not ctx.request.token_id:
        raise InvalidArgument("`token_id` is required for PICK_TOKEN action")
    _take_token(ctx, ctx.request.token_id, ActionType.PICK_TOKEN)
    return None


def resolve_specific_token(ctx: ActionContext) -> ActionValue:
    if not ctx.slot.token:
        raise InternalInvariantViolation("Expected token to be set")
    _take_token(ctx, ctx.slot.token, ActionType.SPECIFIC_TOKEN)
    return None


def resolve_sight(ctx: ActionContext) -> ActionValue:
    game = ctx.game
    sight_user_id = ctx.request.sight_user_id
    if not sight_user_id:
        raise InvalidArgument("`sight_user_id` is required for SIGHT action")
    if not ctx.slot.character:
        raise InternalInvariantViolation("Expected character to be set")
    target = game.player(sight_user_id)
    if target is None:
        raise NotFound(f"User {sight_user_id} not found")

    watcher = game.characters.get(ctx.slot.character)
    watched = game.characters.get(target.character)
    if watcher is None or watched is None:
        raise InternalInvariantViolation(f"Sight characters missing from game {game.id}")
    can_see = in_sight(watcher.location, watched.location)

    game.append_log(
        ctx.player.user_id,
        ActionType.SIGHT,
        card=ctx.card_id,
        character=watcher.character,
        sight_user=target.user_id,
        sight_result=can_see,
    )
    return can_see


RESOLVERS: Dict[ActionType, Callable[[ActionContext], ActionValue]] = {
    ActionType.MOVE: resolve_move,
    ActionType.ELIMINATE: resolve_eliminate,
    ActionType.PICK_TOKEN: resolve_pick_token,
    ActionType.SPECIFIC_TOKEN: resolve_specific_token,
    ActionType.SIGHT: resolve_sight,
}


def resolve(ctx: ActionContext) -> ActionValue:
    """Aiguille vers le résolveur du type d'action demandé."""
    resolver = RESOLVERS.get(ctx.request.type)
    if resolver is None:
        raise InvalidAction(f"Unexpected action type: {ctx.request.type.value}")
    value = resolver(ctx)
    logger.debug(
        "action resolved",
        extra={"game_id": ctx.game.id, "action": ctx.request.type.value, "user_id": ctx.player.user_id},
    )
    return value
