"""
Service: turn_engine.py
Rôle:
- Point d'entrée unique des actions de tour: `apply_action(game_id, user_id, action)`.
- Valide l'action contre le tour courant (joueur actif, phase, dés, carte) puis délègue
  l'effet au résolveur adéquat, le tout dans une transaction du GameStore.

Tour d'un joueur (phase = nb d'entrées consécutives du joueur actif en fin de journal):
- phase 1 : ROLL déjà journalisé → 1er MOVE (personnage d'un des deux dés, distance 1)
- phase 2 : 2e MOVE (les deux personnages déplacés couvrent les deux dés, dans un ordre ou l'autre)
- phase 3 : première moitié d'une carte de la main
- phase 4 : seconde moitié de la même carte, puis fin de tour (si la partie continue)

Un dé "sans résultat" (None) accepte n'importe quel personnage.

Intégrations:
- Persistance: services.game_store (transaction = tout ou rien).
- Effets: services.resolvers ; fin de tour / étapes: services.stage.
"""
from __future__ import annotations

import logging
import random
from typing import Optional

from sleuthers.models.action import ActionRequest, ActionResult
from sleuthers.models.game import ActionType, Card, GameRecord, GameStage, PlayerState, TurnState
from sleuthers.utils.board import distance, is_valid_cell
from .errors import Forbidden, InternalInvariantViolation, InvalidAction, InvalidArgument, NotFound
from .game_store import GameStore, get_game_store
from .resolvers import ActionContext, get_character, resolve
from .stage import settle_card_action

logger = logging.getLogger(__name__)

MOVE_PHASES = (1, 2)
CARD_PHASES = (3, 4)


# -------------------- dés --------------------

def move_matches(character_id: str, die: Optional[str]) -> bool:
    return die is None or die == character_id


def moves_match(move1: str, move2: str, die1: Optional[str], die2: Optional[str]) -> bool:
    """Les deux déplacements du tour couvrent-ils les deux dés (dans un ordre ou l'autre) ?"""
    return (move_matches(move1, die1) and move_matches(move2, die2)) or (
        move_matches(move1, die2) and move_matches(move2, die1)
    )


# -------------------- état du tour --------------------

def derive_turn_state(game: GameRecord) -> TurnState:
    """
    Etat du tour tel que matérialisé, contrôlé contre le journal.
    Un écart signifie un enregistrement corrompu.
    """
    derived = TurnState.from_log(game.log)
    if derived is None:
        raise InternalInvariantViolation(f"Game {game.id} has an empty log")
    if game.turn != derived:
        raise InternalInvariantViolation(f"Game {game.id}: turn snapshot disagrees with the log")
    if derived.phase not in MOVE_PHASES + CARD_PHASES:
        raise InternalInvariantViolation(f"Unexpected turn count: {derived.phase}")
    return derived


def _active_player(game: GameRecord, turn: TurnState) -> PlayerState:
    player = game.player(turn.active_player)
    if player is None:
        raise InternalInvariantViolation(f"Bad user state in game {game.id}")
    return player


# -------------------- phases --------------------

def _play_move(game: GameRecord, player: PlayerState, turn: TurnState, action: ActionRequest) -> None:
    if action.type != ActionType.MOVE:
        raise InvalidAction("First two turn actions must be MOVE")
    if action.move_to is None:
        raise InvalidArgument("`move_to` is required for MOVE action")
    if not action.character_id:
        raise InvalidArgument("`character_id` is required for MOVE action")

    if turn.phase == 2:
        legal = moves_match(turn.last_character or "", action.character_id, turn.die1, turn.die2)
    else:
        legal = move_matches(action.character_id, turn.die1) or move_matches(action.character_id, turn.die2)
    if not legal:
        raise InvalidAction("Invalid move")

    character = get_character(game, action.character_id)
    if distance(character.location, action.move_to) != 1:
        raise InvalidAction("Must move exactly 1 space")

    game.append_log(
        player.user_id,
        ActionType.MOVE,
        character=character.character,
        move_from=character.location,
    )
    character.location = action.move_to


def _card_in_hand(game: GameRecord, player: PlayerState, card_id: Optional[str]) -> Card:
    if not card_id:
        raise InvalidArgument("Must select card")
    card = game.cards.get(card_id)
    if card is None or card_id not in player.hand:
        raise NotFound(f"Card {card_id} not found")
    if card.action1.type == card.action2.type:
        raise InternalInvariantViolation(f"Card {card_id}: cannot distinguish actions")
    return card


def _play_card(
    game: GameRecord,
    player: PlayerState,
    turn: TurnState,
    action: ActionRequest,
    rng: Optional[random.Random],
):
    if turn.phase == 4 and action.card_id != turn.card:
        raise InvalidAction("Card did not match previous action")
    card = _card_in_hand(game, player, action.card_id)

    kinds = {card.action1.type, card.action2.type}
    if turn.phase == 4:
        legal = {turn.last_action, action.type} == kinds
    else:
        legal = action.type in kinds
    if not legal:
        raise InvalidAction("Invalid action")

    slot = card.slot_for(action.type)
    ctx = ActionContext(game=game, player=player, request=action, card_id=card.id, slot=slot, rng=rng)
    value = resolve(ctx)
    settle_card_action(game, player, turn.phase, card.id, rng)
    return value


# -------------------- point d'entrée --------------------

def apply_action(
    game_id: str,
    user_id: str,
    action: ActionRequest,
    *,
    store: GameStore | None = None,
    rng: Optional[random.Random] = None,
) -> ActionResult:
    """
    Valide et applique une action du joueur `user_id`.
    Lève: Forbidden (pas participant / pas son tour), InvalidAction (règle du jeu),
    InvalidArgument (champ manquant / case hors plateau), NotFound (référence inconnue),
    InternalInvariantViolation (état corrompu). Rien n'est écrit en cas d'erreur.
    """
    store = store or get_game_store()
    with store.transaction(game_id) as game:
        if game.player(user_id) is None:
            raise Forbidden(f"User {user_id} is not playing game {game_id}")

        turn = derive_turn_state(game)
        player = _active_player(game, turn)
        if player.user_id != user_id:
            raise Forbidden("Not your turn")
        if game.stage != GameStage.PLAYING:
            raise InvalidAction(f"Game is {game.stage.value}, no more turn actions")

        if action.move_to is not None and not is_valid_cell(action.move_to):
            raise InvalidArgument("`move_to` must be an integer from 0 to 11")
        if action.character_id:
            get_character(game, action.character_id)

        phase = turn.phase
        if phase in MOVE_PHASES:
            _play_move(game, player, turn, action)
            value = None
        else:
            value = _play_card(game, player, turn, action, rng)

        result = ActionResult(
            action=action.type,
            phase=phase,
            result=value,
            stage=game.stage,
            active_player=game.turn.active_player,
            next_phase=game.turn.phase,
        )

    logger.info(
        "action applied",
        extra={"game_id": game_id, "user_id": user_id, "action": action.type.value, "phase": phase},
    )
    return result
