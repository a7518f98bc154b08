"""
Utils: board.py
Rôle:
- Géométrie du plateau 4×3 (12 cases numérotées de 0 à 11, ligne par ligne).

Plateau:

        Col:  0    1    2    3
            ┌────┬────┬────┬────┐
    Row 0   │  0 │  1 │  2 │  3 │
            ├────┼────┼────┼────┤
    Row 1   │  4 │  5 │  6 │  7 │
            ├────┼────┼────┼────┤
    Row 2   │  8 │  9 │ 10 │ 11 │
            └────┴────┴────┴────┘

Notes:
- Fonctions pures, sans état: utilisables depuis le moteur de tour comme depuis les tests.
- La visibilité (SIGHT) est un simple alignement ligne/colonne, sans obstacle.
"""
from typing import Tuple

BOARD_COLS = 4
BOARD_ROWS = 3
CELL_COUNT = BOARD_COLS * BOARD_ROWS


def is_valid_cell(location) -> bool:
    """True si `location` est un entier (hors bool) désignant une case du plateau."""
    return isinstance(location, int) and not isinstance(location, bool) and 0 <= location < CELL_COUNT


def coords(location: int) -> Tuple[int, int]:
    """Convertit un index de case en (colonne, ligne)."""
    return location % BOARD_COLS, location // BOARD_COLS


def distance(location1: int, location2: int) -> int:
    """Distance de Manhattan entre deux cases."""
    x1, y1 = coords(location1)
    x2, y2 = coords(location2)
    return abs(x1 - x2) + abs(y1 - y2)


def in_sight(location1: int, location2: int) -> bool:
    """Deux cases se voient si elles partagent une ligne ou une colonne."""
    x1, y1 = coords(location1)
    x2, y2 = coords(location2)
    return x1 == x2 or y1 == y2


def starting_location(index: int) -> int:
    """
    Case de départ du i-ème personnage tiré.
    Les 5 premiers occupent 0..4, les 5 suivants 7..11 (les cases 5 et 6 restent libres).
    """
    return index if index < 5 else index + 2
