"""
Service: projection.py
Rôle:
- Construire la vue d'une partie pour un joueur (`project_view`) et la liste de ses parties.

Droits de lecture (ViewerRole):
- SELF     : son propre joueur → personnage secret, cartes en main, déductions.
- FINISHED : un autre joueur, partie terminée → ses déductions en plus.
- OTHER    : un autre joueur, partie en cours → infos publiques seulement
             (ordre, jetons, joueur actif).

Journal:
- SIGHT: le résultat n'est visible que par l'auteur de l'action.
- ELIMINATE: le personnage écarté est visible par l'auteur, puis par tous une fois FINISHED.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional

from sleuthers.models.action import GameSummary
from sleuthers.models.game import (
    ActionType,
    Card,
    CardAction,
    GameRecord,
    GameStage,
    LogEntry,
    PlayerState,
    TurnState,
)
from sleuthers.models.view import (
    CardSlotView,
    CardView,
    CharacterView,
    GameView,
    LogEntryView,
    PlayerView,
    TokenView,
)
from . import catalog
from .errors import Forbidden, InternalInvariantViolation
from .game_store import GameStore, get_game_store
from .user_store import UserStore, get_user_store

logger = logging.getLogger(__name__)

TOKEN_ACTIONS = (ActionType.PICK_TOKEN, ActionType.SPECIFIC_TOKEN)


class ViewerRole(str, Enum):
    SELF = "self"
    OTHER = "other"
    FINISHED = "finished"


def role_for(game: GameRecord, viewer_id: str, player: PlayerState) -> ViewerRole:
    if player.user_id == viewer_id:
        return ViewerRole.SELF
    if game.stage == GameStage.FINISHED:
        return ViewerRole.FINISHED
    return ViewerRole.OTHER


# -------------------- entités --------------------

def _slot_view(slot: CardAction) -> CardSlotView:
    return CardSlotView(
        type=slot.type,
        character=slot.character if slot.type == ActionType.SIGHT else None,
        token=slot.token if slot.type == ActionType.SPECIFIC_TOKEN else None,
    )


def project_card(card: Card) -> CardView:
    return CardView(id=card.id, action1=_slot_view(card.action1), action2=_slot_view(card.action2))


def project_player(
    game: GameRecord,
    player: PlayerState,
    role: ViewerRole,
    username: str,
    turn: TurnState,
) -> PlayerView:
    view = PlayerView(
        user_id=player.user_id,
        username=username,
        order=player.order,
        tokens=dict(player.tokens),
    )
    if player.user_id == turn.active_player:
        view.active = True
        view.phase = turn.phase

    if role == ViewerRole.SELF:
        view.is_self = True
        view.character = player.character
        view.cards = [project_card(game.cards[card_id]) for card_id in player.hand if card_id in game.cards]
    if role in (ViewerRole.SELF, ViewerRole.FINISHED):
        view.guesses = {target: dict(claims) for target, claims in player.guesses.items()}
    return view


def project_log_entry(entry: LogEntry, viewer_id: str, stage: GameStage) -> LogEntryView:
    view = LogEntryView(id=entry.id, user=entry.user, time=entry.time, action=entry.action, card=entry.card)
    own = entry.user == viewer_id

    if entry.action == ActionType.ROLL:
        view.die1, view.die2 = entry.die1, entry.die2
    elif entry.action == ActionType.MOVE:
        view.character, view.move_from = entry.character, entry.move_from
    elif entry.action == ActionType.SIGHT:
        view.character, view.sight_user = entry.character, entry.sight_user
        if own:
            view.sight_result = entry.sight_result
    elif entry.action == ActionType.ELIMINATE:
        if own or stage == GameStage.FINISHED:
            view.character = entry.character
    elif entry.action in TOKEN_ACTIONS:
        view.token = entry.token
    return view


def _characters(game: GameRecord) -> List[CharacterView]:
    views: List[CharacterView] = []
    for state in game.characters.values():
        meta = catalog.get_character(state.character)
        if meta is None:
            raise InternalInvariantViolation(f"Unknown character {state.character} in game {game.id}")
        views.append(
            CharacterView(
                id=meta.id,
                name=meta.name,
                location=state.location,
                bg_color=meta.bg_color,
                image_url=meta.image_url,
            )
        )
    return views


def _tokens(game: GameRecord) -> List[TokenView]:
    views: List[TokenView] = []
    for state in game.tokens.values():
        meta = catalog.get_token(state.token)
        if meta is None:
            raise InternalInvariantViolation(f"Unknown token {state.token} in game {game.id}")
        views.append(
            TokenView(
                id=meta.id,
                name=meta.name,
                stock=state.stock,
                image_url=meta.image_url,
                locations=list(state.locations),
            )
        )
    return views


# -------------------- partie --------------------

def project_game(game: GameRecord, viewer_id: str, usernames: Optional[Dict[str, str]] = None) -> GameView:
    """Vue pure d'un enregistrement déjà chargé (aucun accès disque)."""
    if game.player(viewer_id) is None:
        raise Forbidden(f"User {viewer_id} is not playing game {game.id}")
    if game.turn is None:
        raise InternalInvariantViolation(f"Game {game.id} has no turn state")
    usernames = usernames or {}

    players = sorted(game.players, key=lambda p: p.order)
    return GameView(
        id=game.id,
        name=game.name,
        stage=game.stage,
        players=[
            project_player(game, p, role_for(game, viewer_id, p), usernames.get(p.user_id, ""), game.turn)
            for p in players
        ],
        characters=_characters(game),
        tokens=_tokens(game),
        log=[project_log_entry(entry, viewer_id, game.stage) for entry in game.log],
    )


def project_view(
    game_id: str,
    viewer_id: str,
    *,
    store: GameStore | None = None,
    users: UserStore | None = None,
) -> GameView:
    """Lecture seule: vue de `game_id` pour `viewer_id` (Forbidden si non participant)."""
    store = store or get_game_store()
    users = users or get_user_store()
    game = store.load(game_id)

    usernames: Dict[str, str] = {}
    for player in game.players:
        user = users.get(player.user_id)
        usernames[player.user_id] = user.get("username", "") if user else ""
    return project_game(game, viewer_id, usernames)


def list_games(user_id: str, *, store: GameStore | None = None) -> List[GameSummary]:
    store = store or get_game_store()
    return [GameSummary(id=g.id, name=g.name, stage=g.stage) for g in store.list_for_user(user_id)]
