"""
Models / action.py
Rôle:
- Payloads d'entrée du moteur (action de tour, vote) et résultat renvoyé après une action.

Notes:
- Les champs optionnels dépendent du type d'action (voir `turn_engine`); leur présence est
  contrôlée par le moteur, pas ici, pour que les erreurs suivent la taxonomie du jeu.
- `move_to` hors plateau est refusé par le moteur (InvalidArgument).
"""
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from sleuthers.models.game import ActionType, GameStage


class ActionRequest(BaseModel):
    type: ActionType
    card_id: Optional[str] = None
    character_id: Optional[str] = None
    token_id: Optional[str] = None
    move_to: Optional[int] = None
    sight_user_id: Optional[str] = None


class ActionResult(BaseModel):
    """Retour d'une action: valeur propre au résolveur + état du tour après commit."""
    action: ActionType
    phase: int  # phase jouée (1..4)
    result: Optional[Union[bool, str]] = None  # SIGHT -> bool, ELIMINATE -> character id
    stage: GameStage
    active_player: str
    next_phase: int


class GuessDeleteRequest(BaseModel):
    character_id: str
    user_id: str = Field(..., description="Joueur visé par la déduction")


class GuessRequest(GuessDeleteRequest):
    guess: bool


class GameCreateRequest(BaseModel):
    name: str = ""
    user_ids: List[str] = Field(default_factory=list)


class GameSummary(BaseModel):
    id: str
    name: str
    stage: GameStage
