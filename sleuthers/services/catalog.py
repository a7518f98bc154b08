"""
Service: catalog.py
Rôle:
- Catalogue figé des 10 personnages et des 3 jetons, et emplacements des jetons sur le plateau.

Notes:
- Les emplacements de jetons sont fixes (ils ne dépendent pas du nombre de joueurs).
- Les identifiants sont des uuid stables: ils apparaissent dans les cartes, le journal et les votes.
"""
from typing import Dict, List, Optional

from sleuthers.models.catalog import CatalogCharacter, CatalogToken

DIAMOND = "5df859ba-791f-411a-838d-f7615a7b3e17"
RUBY = "3022189f-3702-4678-a16d-0eea5fbbcc74"
EMERALD = "a41fda70-5b68-4ded-940a-63f8ae7ac987"

TOKENS: List[CatalogToken] = [
    CatalogToken(id=DIAMOND, name="diamond", image_url="diamond.png"),
    CatalogToken(id=RUBY, name="ruby", image_url="ruby.png"),
    CatalogToken(id=EMERALD, name="emerald", image_url="emerald.png"),
]

TOKEN_LOCATIONS: Dict[str, List[int]] = {
    DIAMOND: [1, 2, 4, 6, 7, 8, 11],
    RUBY: [0, 1, 3, 5, 6, 8, 10],
    EMERALD: [2, 3, 4, 5, 9, 10, 11],
}

CHARACTERS: List[CatalogCharacter] = [
    CatalogCharacter(id="53b104c4-15cc-411f-bd68-97c84d200b20", name="Mildred Wellington", bg_color="#b4be35", image_url="mildred-wellington.png"),
    CatalogCharacter(id="6062b068-48b7-4aa5-81bf-5a137a936ba9", name="Remy La Rocque", bg_color="#bdbbbb", image_url="remy-la-rocque.png"),
    CatalogCharacter(id="2b2cc145-937b-49d0-ad10-67aa51f2eda2", name="Trudie Mudge", bg_color="#0082b5", image_url="trudie-mudge.png"),
    CatalogCharacter(id="9a9de24b-05ab-4181-92d1-dbc4cdb0287a", name="Buford Barnswallow", bg_color="#fae300", image_url="buford-barnswallow.png"),
    CatalogCharacter(id="ba4fea2c-cf3b-4be0-8252-73cf77f873e8", name="Viola Chung", bg_color="#d9272d", image_url="viola-chung.png"),
    CatalogCharacter(id="d2ed6bb6-134d-4655-ba57-1adb8de316a1", name="Earl of Volesworthy", bg_color="#672e6b", image_url="earl-of-volesworthy.png"),
    CatalogCharacter(id="e0908190-3e04-402a-95c3-34993097d31c", name="Nadia Bwalya", bg_color="#ffffff", image_url="nadia-bwalya.png"),
    CatalogCharacter(id="a9bcf5d2-71bf-4d32-8de2-dec571768424", name="Dr. Ashraf Najem", bg_color="#f5a81c", image_url="dr-ashraf-najem.png"),
    CatalogCharacter(id="e9f2b5d7-514e-4f18-9e18-67a02afecc56", name="Lily Nesbitt", bg_color="#f8baca", image_url="lily-nesbitt.png"),
    CatalogCharacter(id="07817c98-5d35-4acf-aa67-d9bb5caab84b", name="Stefano Laconi", bg_color="#ba772a", image_url="stefano-laconi.png"),
]

_CHARACTERS_BY_ID: Dict[str, CatalogCharacter] = {c.id: c for c in CHARACTERS}
_TOKENS_BY_ID: Dict[str, CatalogToken] = {t.id: t for t in TOKENS}


def character_ids() -> List[str]:
    """Ids des personnages dans l'ordre du catalogue (copie modifiable)."""
    return [c.id for c in CHARACTERS]


def token_ids() -> List[str]:
    return [t.id for t in TOKENS]


def get_character(character_id: str) -> Optional[CatalogCharacter]:
    return _CHARACTERS_BY_ID.get(character_id)


def get_token(token_id: str) -> Optional[CatalogToken]:
    return _TOKENS_BY_ID.get(token_id)
