"""
Service: user_store.py
Rôle:
- Registre des utilisateurs (id, username, password_hash, created) persisté dans `users.json`.
- Hash et vérification des mots de passe avec `bcrypt`.

Garde-fous:
- Unicité du `username` (insensible à la casse / espaces) → `Conflict`.
- username / password vides → `InvalidArgument`.

Concurrency:
- Protégé par un RLock (inscriptions simultanées).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Optional
from uuid import uuid4

import bcrypt

from sleuthers.config.settings import settings
from sleuthers.models.game import utcnow
from .errors import Conflict, InvalidArgument
from .io_utils import read_json, write_json

logger = logging.getLogger(__name__)

USERS_FILENAME = "users.json"


def hash_password(pw: str) -> str:
    return bcrypt.hashpw(pw.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # hash illisible (mauvais format)
        return False


def _normalize_name(name: str) -> str:
    return (name or "").strip().lower()


@dataclass
class UserStore:
    path: Path
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)
    users: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def load(self) -> None:
        """Charge les utilisateurs depuis le disque (dict vide si absent)."""
        with self._lock:
            self.users = read_json(self.path) or {}

    def save(self) -> None:
        with self._lock:
            write_json(self.path, self.users)

    # -----------------------------
    # Lecture
    # -----------------------------
    def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self.users.get(user_id)

    def exists(self, user_id: str) -> bool:
        return self.get(user_id) is not None

    def find_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        target = _normalize_name(username)
        if not target:
            return None
        with self._lock:
            for user in self.users.values():
                if _normalize_name(user.get("username", "")) == target:
                    return user
        return None

    # -----------------------------
    # Inscription / authentification
    # -----------------------------
    def register(self, username: str, password: str) -> Dict[str, Any]:
        """Crée un utilisateur et renvoie son enregistrement (sans re-hash ultérieur)."""
        name = (username or "").strip()
        if not name:
            raise InvalidArgument("`username` is required")
        if not password:
            raise InvalidArgument("`password` is required")
        with self._lock:
            if self.find_by_username(name):
                raise Conflict(f"Username {name} already taken")
            uid = str(uuid4())
            user = {
                "id": uid,
                "username": name,
                "password_hash": hash_password(password),
                "created": utcnow().isoformat(),
            }
            self.users[uid] = user
            self.save()
        logger.info("user registered", extra={"user_id": uid})
        return user

    def authenticate(self, username: str, password: str) -> Optional[Dict[str, Any]]:
        """Renvoie l'utilisateur si les credentials sont valides, sinon None."""
        user = self.find_by_username(username)
        if not user:
            return None
        if not verify_password(password or "", user.get("password_hash", "")):
            return None
        return user


# -----------------------------
# Singleton global
# -----------------------------
_instance: Optional[UserStore] = None
_INSTANCE_LOCK = RLock()


def get_user_store() -> UserStore:
    """Instance partagée, chargée à la première utilisation."""
    global _instance
    with _INSTANCE_LOCK:
        if _instance is None:
            _instance = UserStore(Path(settings.DATA_DIR) / USERS_FILENAME)
            _instance.load()
        return _instance
