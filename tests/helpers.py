"""Mise en place d'états de partie cohérents (journal + tour matérialisé) pour les tests."""
from __future__ import annotations

from typing import Callable, Optional

from sleuthers.models.game import Card, GameRecord, PlayerState
from sleuthers.services.game_store import GameStore


def rig(store: GameStore, game_id: str, mutate: Callable[[GameRecord], None]) -> GameRecord:
    with store.transaction(game_id) as game:
        mutate(game)
    return store.load(game_id)


def set_dice(game: GameRecord, die1: Optional[str], die2: Optional[str]) -> None:
    """Remplace les dés du tour courant (entrée ROLL et projection du tour)."""
    opening = game.log[-game.turn.phase]
    opening.die1, opening.die2 = die1, die2
    game.turn.die1, game.turn.die2 = die1, die2


def neighbour(location: int) -> int:
    return location + 1 if location % 4 != 3 else location - 1


def find_card(game: GameRecord, predicate: Callable[[Card], bool]) -> Card:
    return next(card for card in game.cards.values() if predicate(card))


def give_card(game: GameRecord, player: PlayerState, card_id: str) -> None:
    """Met `card_id` dans la main de `player` en échangeant avec sa première carte."""
    if card_id in player.hand:
        return
    old_id = player.hand[0]
    card, old = game.cards[card_id], game.cards[old_id]
    holder = next((p for p in game.players if card_id in p.hand), None)
    if holder is not None:
        holder.hand[holder.hand.index(card_id)] = old_id
    old.deck_order, card.deck_order = card.deck_order, None
    player.hand[0] = card_id
