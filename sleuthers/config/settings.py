"""
Configuration de l'application (Settings)
=========================================

Rôle
----
- Centraliser les paramètres du backend Sleuthers (nom, host/port, chemins, logs, règles).
- Les valeurs par défaut conviennent pour un environnement de dev local.
- Les variables peuvent être surchargées via un fichier `.env` ou l'environnement.

Intégrations
------------
- `pydantic-settings` charge automatiquement les variables d'env et `.env`.
- Les services/routers importent `from sleuthers.config.settings import settings`.

Notes
-----
- `DATA_DIR` calcule un chemin relatif au package : `<repo>/sleuthers/data`.
  On y trouve `games/<game_id>.json` (une partie par fichier) et `users.json`.
- `MIN_PLAYERS` / `MAX_PLAYERS` bornent la taille d'une table (2 à 6 par défaut).

Exemples de `.env`
------------------
APP_NAME="Sleuthers Backend (Staging)"
HOST="0.0.0.0"
PORT=3000
DATA_DIR="/var/opt/sleuthers/data"
LOG_LEVEL="DEBUG"
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
import os


class Settings(BaseSettings):
    # Nom du service (apparaît dans /health)
    APP_NAME: str = "Sleuthers Backend"
    # Bind réseau (FastAPI / Uvicorn)
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Répertoire des fichiers persistés (parties, utilisateurs)
    # Par défaut: <repo>/sleuthers/data
    DATA_DIR: str = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")

    # Niveau du logger racine (DEBUG, INFO, WARNING...)
    LOG_LEVEL: str = "INFO"

    # Bornes du nombre de joueurs par partie
    MIN_PLAYERS: int = 2
    MAX_PLAYERS: int = 6

    # Paramétrage pydantic-settings :
    # - lit le fichier .env (UTF-8) si présent
    # - ignore les clés supplémentaires pour éviter les erreurs
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


# Instance unique importable partout : `settings`
settings = Settings()
