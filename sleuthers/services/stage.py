"""
Service: stage.py
Rôle:
- Décider des transitions d'étape PLAYING → GUESSING → FINISHED.
- Clore un tour complet (phase 4): nouveau lancer, joueur suivant, défausse, pioche.

Règles:
- Dès qu'un type de jeton n'a plus de stock, la partie passe en GUESSING
  (ou directement FINISHED si les déductions sont déjà complètes).
- Déductions complètes: pour chaque couple ordonné (A, B) de joueurs distincts,
  A a exactement UNE affirmation `True` au sujet de B.
- FINISHED est définitif.
"""
from __future__ import annotations

import logging
import random
from typing import Optional

from sleuthers.models.game import ActionType, Card, GameRecord, GameStage, PlayerState
from sleuthers.utils.randomness import roll_for
from .errors import InternalInvariantViolation

logger = logging.getLogger(__name__)


def min_stock(game: GameRecord) -> int:
    """Plus petit stock restant parmi les types de jetons de la partie."""
    if not game.tokens:
        raise InternalInvariantViolation(f"Game {game.id} has no tokens")
    return min(token.stock for token in game.tokens.values())


def is_finished(game: GameRecord) -> bool:
    """Vrai si chaque joueur a désigné exactement un personnage pour chacun des autres."""
    for player in game.players:
        for target in game.players:
            if target.user_id == player.user_id:
                continue
            claims = player.guesses.get(target.user_id, {})
            if sum(1 for guess in claims.values() if guess) != 1:
                return False
    return True


def set_stage(game: GameRecord, stage: GameStage) -> None:
    """Change d'étape sans jamais quitter FINISHED."""
    if game.stage == GameStage.FINISHED or game.stage == stage:
        return
    logger.info(
        "stage transition",
        extra={"game_id": game.id, "from_stage": game.stage.value, "to_stage": stage.value},
    )
    game.stage = stage


def finish_if_deduced(game: GameRecord) -> bool:
    """Passe la partie en FINISHED si les déductions sont complètes; renvoie l'état final."""
    if is_finished(game):
        set_stage(game, GameStage.FINISHED)
    return game.stage == GameStage.FINISHED


def next_player(game: GameRecord, current: PlayerState) -> PlayerState:
    """Joueur d'ordre suivant (retour à 0 après le dernier)."""
    following = game.player_by_order(current.order + 1) or game.player_by_order(0)
    if following is None:
        raise InternalInvariantViolation(f"Game {game.id} has no player of order 0")
    return following


def draw_card(game: GameRecord, player: PlayerState) -> Card:
    """Pioche la carte d'ordre le plus bas dans la main de `player`."""
    deck = game.deck()
    if not deck:
        # pas de remélange de la défausse: la partie ne peut pas continuer
        raise InternalInvariantViolation(f"Game {game.id}: deck exhausted")
    card = deck[0]
    card.deck_order = None
    player.hand.append(card.id)
    return card


def discard(player: PlayerState, card_id: str) -> None:
    if card_id not in player.hand:
        raise InternalInvariantViolation(f"Card {card_id} is not in the hand of {player.user_id}")
    player.hand.remove(card_id)


def advance_turn(
    game: GameRecord,
    player: PlayerState,
    card_id: str,
    rng: Optional[random.Random] = None,
) -> PlayerState:
    """Ouvre le tour du joueur suivant puis remplace la carte jouée par `player`."""
    die1, die2 = roll_for(list(game.characters), rng)
    following = next_player(game, player)
    game.append_log(following.user_id, ActionType.ROLL, die1=die1, die2=die2)

    discard(player, card_id)
    drawn = draw_card(game, player)

    logger.info(
        "turn advanced",
        extra={"game_id": game.id, "next_player": following.user_id, "drawn_card": drawn.id},
    )
    return following


def settle_card_action(
    game: GameRecord,
    player: PlayerState,
    phase: int,
    card_id: str,
    rng: Optional[random.Random] = None,
) -> None:
    """Après une action de carte (phase 3 ou 4): pénurie de jetons, sinon fin de tour en phase 4."""
    if min_stock(game) < 1:
        set_stage(game, GameStage.FINISHED if is_finished(game) else GameStage.GUESSING)
    elif phase == 4:
        advance_turn(game, player, card_id, rng)
