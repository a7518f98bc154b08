"""
Dépendances d'authentification joueurs
======================================

Objectif
--------
Fournir une *dependency* FastAPI `current_user` qui authentifie chaque requête de jeu
via **HTTP Basic** (username + mot de passe vérifié avec bcrypt dans le UserStore).

Comportement & codes retour
---------------------------
- 401 (+ header `WWW-Authenticate: Basic`) si credentials absents ou invalides.
- Sinon l'enregistrement utilisateur (`id`, `username`, ...), sans le hash.

Notes
-----
- `HTTPBasic(auto_error=False)` pour renvoyer un 401 homogène nous-mêmes.
- Le store est injecté via `Depends(get_user_store)` (surchargé dans les tests).
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from sleuthers.services.user_store import UserStore, get_user_store

basic = HTTPBasic(auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=401,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Basic"},
    )


def current_user(
    credentials: Optional[HTTPBasicCredentials] = Depends(basic),
    users: UserStore = Depends(get_user_store),
) -> Dict[str, Any]:
    if credentials is None:
        raise _unauthorized()
    user = users.authenticate(credentials.username, credentials.password)
    if user is None:
        raise _unauthorized()
    return {k: v for k, v in user.items() if k != "password_hash"}
