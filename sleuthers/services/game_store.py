"""
Service: game_store.py
Rôle :
- Persister les parties (`GameRecord`) et fournir des transactions atomiques par partie.
- Fournir un singleton `get_game_store()` basé sur `settings.DATA_DIR`.

Stockage :
- `<DATA_DIR>/games/<game_id>.json` (état complet, journal inclus)

Transactions :
- `with store.transaction(game_id) as game:` prend le verrou de la partie, recharge l'état
  depuis le disque et donne une copie de travail.
- Si le bloc lève une exception, rien n'est écrit (aucun effet partiel).
- Au commit, la `version` sur disque doit être celle lue au début, sinon `Conflict`
  (écriture concurrente). La version est ensuite incrémentée.
- Un id inconnu lève `NotFound` avant toute création de verrou.

Concurrence :
- Les verrous sont en mémoire : le backend tourne dans un seul processus (un worker uvicorn).
- Le contrôle de version ne protège pas contre deux processus qui écrivent au même instant.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Dict, Iterator, List, Optional

from sleuthers.config.settings import settings
from sleuthers.models.game import GameRecord, utcnow
from .errors import Conflict, NotFound
from .io_utils import read_json, write_json

logger = logging.getLogger(__name__)

GAMES_DIRNAME = "games"


class GameStore:
    """Registre des parties sur disque, un fichier JSON par partie."""

    def __init__(self, base_dir: Path | str) -> None:
        self.base_dir = Path(base_dir)
        self._lock = RLock()
        self._game_locks: Dict[str, RLock] = {}

    # -----------------------------
    # Chemins / verrous
    # -----------------------------
    def _path(self, game_id: str) -> Path:
        return self.base_dir / f"{game_id}.json"

    def _game_lock(self, game_id: str) -> RLock:
        with self._lock:
            lock = self._game_locks.get(game_id)
            if lock is None:
                lock = RLock()
                self._game_locks[game_id] = lock
            return lock

    def _is_safe_id(self, game_id: str) -> bool:
        return bool(game_id) and "/" not in game_id and "\\" not in game_id and not game_id.startswith(".")

    # -----------------------------
    # Lecture
    # -----------------------------
    def load(self, game_id: str) -> GameRecord:
        """Charge une copie fraîche de la partie (NotFound si absente)."""
        if not self._is_safe_id(game_id):
            raise NotFound(f"Game {game_id} not found")
        raw = read_json(self._path(game_id))
        if raw is None:
            raise NotFound(f"Game {game_id} not found")
        return GameRecord.model_validate(raw)

    def list_ids(self) -> List[str]:
        if not self.base_dir.exists():
            return []
        return sorted(p.stem for p in self.base_dir.glob("*.json") if not p.name.startswith("."))

    def list_for_user(self, user_id: str) -> List[GameRecord]:
        """Parties auxquelles `user_id` participe."""
        games: List[GameRecord] = []
        for game_id in self.list_ids():
            try:
                game = self.load(game_id)
            except NotFound:
                continue
            if game.player(user_id) is not None:
                games.append(game)
        return games

    # -----------------------------
    # Ecriture
    # -----------------------------
    def _write(self, game: GameRecord) -> None:
        write_json(self._path(game.id), game.model_dump(mode="json"))

    def create(self, game: GameRecord) -> GameRecord:
        """Persiste une nouvelle partie (Conflict si l'id existe déjà)."""
        if not self._is_safe_id(game.id):
            raise Conflict(f"Invalid game id {game.id}")
        with self._game_lock(game.id):
            if self._path(game.id).exists():
                raise Conflict(f"Duplicate game {game.id}")
            self._write(game)
        logger.debug("game persisted", extra={"game_id": game.id})
        return game

    @contextmanager
    def transaction(self, game_id: str) -> Iterator[GameRecord]:
        """Copie de travail verrouillée; écrite uniquement si le bloc se termine sans erreur."""
        if not self._is_safe_id(game_id) or not self._path(game_id).exists():
            raise NotFound(f"Game {game_id} not found")
        with self._game_lock(game_id):
            game = self.load(game_id)
            read_version = game.version
            yield game
            current = read_json(self._path(game_id)) or {}
            if current.get("version", 0) != read_version:
                logger.warning(
                    "concurrent write detected",
                    extra={"game_id": game_id, "read_version": read_version},
                )
                raise Conflict(f"Game {game_id} was modified concurrently")
            game.version = read_version + 1
            game.modified = utcnow()
            self._write(game)


# -----------------------------
# Singleton global
# -----------------------------
_instance: Optional[GameStore] = None
_INSTANCE_LOCK = RLock()


def get_game_store() -> GameStore:
    """Garantit une unique instance `GameStore` pour tout le backend (lazy)."""
    global _instance
    with _INSTANCE_LOCK:
        if _instance is None:
            _instance = GameStore(Path(settings.DATA_DIR) / GAMES_DIRNAME)
        return _instance
