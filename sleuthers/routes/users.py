"""
Module routes/users.py
Rôle:
- Inscription des joueurs (username unique + mot de passe hashé bcrypt).

Garde-fous:
- username déjà pris → 409, champs vides → 400 (via le handler GameError de main.py).
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sleuthers.services.user_store import UserStore, get_user_store

router = APIRouter(prefix="/users", tags=["users"])


class RegisterPayload(BaseModel):
    username: str
    password: str


@router.post("", status_code=201)
def register(payload: RegisterPayload, users: UserStore = Depends(get_user_store)):
    """Crée le compte et renvoie son id (jamais le hash)."""
    user = users.register(payload.username, payload.password)
    return {"id": user["id"], "username": user["username"]}
