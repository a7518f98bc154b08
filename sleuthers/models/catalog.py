"""
Models / catalog.py
Rôle:
- Entités partagées entre toutes les parties: personnages et jetons.

Champs:
- CatalogCharacter: id (uuid), name, bg_color (couleur de fond du pion), image_url.
- CatalogToken: id (uuid), name, image_url.
"""
from pydantic import BaseModel, ConfigDict


class CatalogCharacter(BaseModel):
    """Personnage jouable (identique dans toutes les parties)."""
    id: str
    name: str
    bg_color: str
    image_url: str

    model_config = ConfigDict(frozen=True)


class CatalogToken(BaseModel):
    """Type de jeton à collecter."""
    id: str
    name: str
    image_url: str

    model_config = ConfigDict(frozen=True)
