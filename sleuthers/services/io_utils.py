"""
Utilitaires IO JSON (rapides) basés sur orjson.
- read_json(Path)  → Any | None (None si fichier manquant)
- write_json(Path, data) → écriture atomique (fichier temporaire puis `os.replace`)

Attention:
- orjson renvoie/attend des bytes; on lit/écrit en mode binaire.
- Un lecteur concurrent voit soit l'ancien fichier complet, soit le nouveau: jamais un
  fichier tronqué.
"""
import orjson as json
import os
from pathlib import Path
from typing import Any
from uuid import uuid4


def read_json(path: Path) -> Any:
    """Lit un fichier JSON (ou None s'il n'existe pas)."""
    if not path.exists():
        return None
    with path.open("rb") as f:
        return json.loads(f.read())


def write_json(path: Path, data: Any) -> None:
    """Écrit un fichier JSON de manière atomique (dossier parent créé si absent)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.{uuid4().hex}.tmp")
    try:
        with tmp.open("wb") as f:
            f.write(json.dumps(data, option=json.OPT_INDENT_2))
        os.replace(tmp, path)
    finally:
        if tmp.exists():
            tmp.unlink()
