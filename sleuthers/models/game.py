"""
Models / game.py
Rôle:
- Modèles Pydantic de l'état persistant d'une partie (un `GameRecord` par partie).
- Le journal (`log`) est append-only et reste la source de vérité du tour courant.
- `TurnState` est la projection matérialisée (joueur actif, phase, dés du tour) mise à jour
  à chaque ajout au journal, sans re-parcours.

Champs principaux:
- GameRecord.players: joueurs triés par `order` (0..N-1).
- GameRecord.characters / tokens / cards: indexés par id.
- Card.deck_order: position dans la pioche, None si la carte est en main ou défaussée.
- PlayerState.guesses: {target_user_id: {character_id: bool}}.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActionType(str, Enum):
    ROLL = "ROLL"
    MOVE = "MOVE"
    SIGHT = "SIGHT"
    ELIMINATE = "ELIMINATE"
    PICK_TOKEN = "PICK_TOKEN"
    SPECIFIC_TOKEN = "SPECIFIC_TOKEN"


class GameStage(str, Enum):
    PLAYING = "PLAYING"
    GUESSING = "GUESSING"
    FINISHED = "FINISHED"


class CardAction(BaseModel):
    """Une des deux moitiés d'une carte; `character` pour SIGHT, `token` pour SPECIFIC_TOKEN."""
    type: ActionType
    character: Optional[str] = None
    token: Optional[str] = None


class Card(BaseModel):
    id: str
    action1: CardAction
    action2: CardAction
    deck_order: Optional[int] = None

    def slot_for(self, action: ActionType) -> Optional[CardAction]:
        """Moitié de carte correspondant à `action` (la première si les deux correspondent)."""
        if self.action1.type == action:
            return self.action1
        if self.action2.type == action:
            return self.action2
        return None


class CharacterState(BaseModel):
    character: str
    location: int
    eliminated: bool = False


class TokenState(BaseModel):
    token: str
    stock: int
    locations: List[int] = Field(default_factory=list)


class PlayerState(BaseModel):
    user_id: str
    character: str
    order: int
    hand: List[str] = Field(default_factory=list)  # ids de cartes
    tokens: Dict[str, int] = Field(default_factory=dict)
    guesses: Dict[str, Dict[str, bool]] = Field(default_factory=dict)


class LogEntry(BaseModel):
    """Entrée du journal; seuls les champs utiles à l'action sont renseignés."""
    id: int
    time: datetime = Field(default_factory=utcnow)
    user: str
    action: ActionType
    die1: Optional[str] = None
    die2: Optional[str] = None
    card: Optional[str] = None
    character: Optional[str] = None
    token: Optional[str] = None
    move_from: Optional[int] = None
    sight_user: Optional[str] = None
    sight_result: Optional[bool] = None


class TurnState(BaseModel):
    """
    Projection "qui joue / à quelle phase".
    - phase = nombre d'entrées consécutives du joueur actif en fin de journal (1..4),
    - die1/die2 = dés de l'entrée qui ouvre cette série (le ROLL du tour),
    - card/last_action/last_character = dernière entrée (utile aux phases 2 et 4).
    """
    active_player: str
    phase: int = 1
    die1: Optional[str] = None
    die2: Optional[str] = None
    card: Optional[str] = None
    last_action: ActionType = ActionType.ROLL
    last_character: Optional[str] = None

    @classmethod
    def opening(cls, entry: LogEntry) -> "TurnState":
        return cls(
            active_player=entry.user,
            phase=1,
            die1=entry.die1,
            die2=entry.die2,
            card=entry.card,
            last_action=entry.action,
            last_character=entry.character,
        )

    @classmethod
    def from_log(cls, log: Sequence[LogEntry]) -> Optional["TurnState"]:
        """Recalcule la projection en remontant la fin du journal (audit / relecture)."""
        if not log:
            return None
        last = log[-1]
        phase = 1
        while phase < len(log) and log[-phase - 1].user == last.user:
            phase += 1
        first = log[-phase]
        return cls(
            active_player=last.user,
            phase=phase,
            die1=first.die1,
            die2=first.die2,
            card=last.card,
            last_action=last.action,
            last_character=last.character,
        )

    def advance(self, entry: LogEntry) -> None:
        """Mise à jour incrémentale après l'ajout de `entry` au journal."""
        if entry.user == self.active_player:
            self.phase += 1
        else:
            self.active_player = entry.user
            self.phase = 1
            self.die1 = entry.die1
            self.die2 = entry.die2
        self.card = entry.card
        self.last_action = entry.action
        self.last_character = entry.character


class GameRecord(BaseModel):
    """Etat complet d'une partie, tel que persisté par le GameStore."""
    id: str
    owner: str
    name: str
    stage: GameStage = GameStage.PLAYING
    created: datetime = Field(default_factory=utcnow)
    modified: datetime = Field(default_factory=utcnow)
    version: int = 0
    players: List[PlayerState] = Field(default_factory=list)
    characters: Dict[str, CharacterState] = Field(default_factory=dict)
    tokens: Dict[str, TokenState] = Field(default_factory=dict)
    cards: Dict[str, Card] = Field(default_factory=dict)
    log: List[LogEntry] = Field(default_factory=list)
    turn: Optional[TurnState] = None

    # -----------------------------
    # Joueurs
    # -----------------------------
    def player(self, user_id: Optional[str]) -> Optional[PlayerState]:
        for p in self.players:
            if p.user_id == user_id:
                return p
        return None

    def player_by_order(self, order: int) -> Optional[PlayerState]:
        for p in self.players:
            if p.order == order:
                return p
        return None

    def controlled_characters(self) -> set[str]:
        return {p.character for p in self.players}

    # -----------------------------
    # Cartes
    # -----------------------------
    def deck(self) -> List[Card]:
        """Pioche triée par ordre de tirage croissant."""
        pile = [c for c in self.cards.values() if c.deck_order is not None]
        return sorted(pile, key=lambda c: c.deck_order)

    # -----------------------------
    # Journal
    # -----------------------------
    def append_log(self, user: str, action: ActionType, **payload) -> LogEntry:
        """Ajoute une entrée (id = dernier id + 1) et fait avancer la projection du tour."""
        next_id = self.log[-1].id + 1 if self.log else 0
        entry = LogEntry(id=next_id, user=user, action=action, **payload)
        self.log.append(entry)
        if self.turn is None:
            self.turn = TurnState.opening(entry)
        else:
            self.turn.advance(entry)
        return entry
