"""
Service: dealer.py
Rôle:
- Construire l'état initial d'une partie (une seule fois par partie):
  jetons, pioche, premier lancer de dés, positions de départ, personnages secrets, mains.

Déroulé (create_game):
1) Stock par jeton = nb joueurs + 2, emplacements fixes du catalogue.
2) Pioche de 28 cartes: 2 génériques, 2 par jeton, 2 par personnage (SIGHT).
3) Mélange des personnages + lancer de dés → entrée ROLL d'ouverture (id 0) au 1er joueur.
4) Nouveau mélange pour lier les cartes SIGHT, puis un autre pour les cases de départ
   (0..4 puis 7..11).
5) Mélange de la pioche, ordre de tirage séquentiel.
6) Nouveau mélange pour attribuer les personnages secrets dans l'ordre des joueurs.
7) Distribution: 2 cartes par joueur, prises en fin de pioche.

Toutes les validations ont lieu avant la moindre écriture.
"""
from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence
from uuid import uuid4

from sleuthers.config.settings import settings
from sleuthers.models.game import (
    ActionType,
    Card,
    CardAction,
    CharacterState,
    GameRecord,
    GameStage,
    PlayerState,
    TokenState,
)
from sleuthers.utils.board import starting_location
from sleuthers.utils.randomness import resolve_rng, roll_dice, shuffle
from . import catalog
from .errors import InvalidArgument, NotFound
from .game_store import GameStore, get_game_store
from .user_store import UserStore, get_user_store

logger = logging.getLogger(__name__)

CARDS_PER_HAND = 2


def _validate(name: str, player_ids: Sequence[str], users: UserStore) -> None:
    if not (name or "").strip():
        raise InvalidArgument("`name` is required")
    if not player_ids:
        raise InvalidArgument("`user_ids` are required")
    count = len(player_ids)
    if count < settings.MIN_PLAYERS or count > settings.MAX_PLAYERS:
        raise InvalidArgument(
            f"Player count must be {settings.MIN_PLAYERS}-{settings.MAX_PLAYERS}: {count}"
        )
    if len(set(player_ids)) != count:
        raise InvalidArgument("`user_ids` must not contain duplicates")
    for user_id in player_ids:
        if not users.exists(user_id):
            raise NotFound(f"User {user_id} not found")


def build_deck(characters: Sequence[str]) -> List[Card]:
    """
    Construit les 28 cartes (non mélangées, sans ordre de pioche).
    `characters` fixe l'ordre de liaison des cartes SIGHT: index pair → MOVE, impair → ELIMINATE.
    """
    cards: List[Card] = [
        Card(
            id=str(uuid4()),
            action1=CardAction(type=ActionType.PICK_TOKEN),
            action2=CardAction(type=ActionType.MOVE),
        ),
        Card(
            id=str(uuid4()),
            action1=CardAction(type=ActionType.PICK_TOKEN),
            action2=CardAction(type=ActionType.ELIMINATE),
        ),
    ]
    for token_id in catalog.token_ids():
        for other in (ActionType.MOVE, ActionType.ELIMINATE):
            cards.append(
                Card(
                    id=str(uuid4()),
                    action1=CardAction(type=ActionType.SPECIFIC_TOKEN, token=token_id),
                    action2=CardAction(type=other),
                )
            )
    for i, character_id in enumerate(characters):
        cards.append(
            Card(
                id=str(uuid4()),
                action1=CardAction(type=ActionType.PICK_TOKEN),
                action2=CardAction(type=ActionType.SIGHT, character=character_id),
            )
        )
        cards.append(
            Card(
                id=str(uuid4()),
                action1=CardAction(type=ActionType.MOVE if i % 2 == 0 else ActionType.ELIMINATE),
                action2=CardAction(type=ActionType.SIGHT, character=character_id),
            )
        )
    return cards


def deal_game(
    owner_id: str,
    name: str,
    player_ids: Sequence[str],
    rng: Optional[random.Random] = None,
) -> GameRecord:
    """Construit le `GameRecord` initial (pur: aucune persistance, aucune validation d'ids)."""
    r = resolve_rng(rng)
    game = GameRecord(id=str(uuid4()), owner=owner_id, name=name.strip(), stage=GameStage.PLAYING)

    # jetons: stock selon le nombre de joueurs, emplacements figés
    stock = len(player_ids) + 2
    game.tokens = {
        token_id: TokenState(token=token_id, stock=stock, locations=list(catalog.TOKEN_LOCATIONS[token_id]))
        for token_id in catalog.token_ids()
    }

    characters = catalog.character_ids()

    # premier lancer de dés
    die1, die2 = roll_dice(characters, r)
    game.append_log(player_ids[0], ActionType.ROLL, die1=die1, die2=die2)

    # cartes différentes à chaque partie
    shuffle(characters, r)
    cards = build_deck(characters)

    # positions de départ différentes à chaque partie
    shuffle(characters, r)
    game.characters = {
        character_id: CharacterState(character=character_id, location=starting_location(i))
        for i, character_id in enumerate(characters)
    }

    # pioche
    shuffle(cards, r)
    for i, card in enumerate(cards):
        card.deck_order = i
    game.cards = {card.id: card for card in cards}

    # personnages secrets + mains
    shuffle(characters, r)
    for order, user_id in enumerate(player_ids):
        player = PlayerState(user_id=user_id, character=characters[order], order=order)
        for _ in range(CARDS_PER_HAND):
            card = cards.pop()
            card.deck_order = None
            player.hand.append(card.id)
        game.players.append(player)

    return game


def create_game(
    owner_id: str,
    name: str,
    player_ids: Sequence[str],
    *,
    store: GameStore | None = None,
    users: UserStore | None = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Valide, distribue et persiste une nouvelle partie; renvoie son id."""
    users = users or get_user_store()
    store = store or get_game_store()
    player_ids = list(player_ids or [])
    _validate(name, player_ids, users)

    game = deal_game(owner_id, name, player_ids, rng=rng)
    store.create(game)

    logger.info(
        "game created",
        extra={"game_id": game.id, "owner": owner_id, "players": len(player_ids)},
    )
    return game.id

