"""
Models / view.py
Rôle:
- Vues renvoyées aux joueurs: une partie telle qu'un joueur donné a le droit de la voir.
- Les champs optionnels absents (None) sont masqués à la sérialisation HTTP.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from sleuthers.models.game import ActionType, GameStage


class CardSlotView(BaseModel):
    type: ActionType
    character: Optional[str] = None
    token: Optional[str] = None


class CardView(BaseModel):
    id: str
    action1: CardSlotView
    action2: CardSlotView


class PlayerView(BaseModel):
    user_id: str
    username: str
    order: int
    tokens: Dict[str, int] = Field(default_factory=dict)
    active: bool = False
    phase: Optional[int] = None
    is_self: bool = False
    character: Optional[str] = None
    cards: Optional[List[CardView]] = None
    guesses: Optional[Dict[str, Dict[str, bool]]] = None


class CharacterView(BaseModel):
    id: str
    name: str
    location: int
    bg_color: str
    image_url: str


class TokenView(BaseModel):
    id: str
    name: str
    stock: int
    image_url: str
    locations: List[int] = Field(default_factory=list)


class LogEntryView(BaseModel):
    id: int
    user: str
    time: datetime
    action: ActionType
    card: Optional[str] = None
    die1: Optional[str] = None
    die2: Optional[str] = None
    character: Optional[str] = None
    token: Optional[str] = None
    move_from: Optional[int] = None
    sight_user: Optional[str] = None
    sight_result: Optional[bool] = None


class GameView(BaseModel):
    id: str
    name: str
    stage: GameStage
    players: List[PlayerView] = Field(default_factory=list)
    characters: List[CharacterView] = Field(default_factory=list)
    tokens: List[TokenView] = Field(default_factory=list)
    log: List[LogEntryView] = Field(default_factory=list)
