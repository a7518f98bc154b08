"""
Utils: randomness.py
Rôle:
- Mélange uniforme et lancer de dés du jeu.

Comportement:
- Chaque fonction accepte un `rng` optionnel (instance de `random.Random`).
  Sans `rng`, on tire sur `random.SystemRandom` : entropie fraîche à chaque appel.
- Un dé "touche" un personnage avec une probabilité 5/6, sinon il ne donne rien (None).
  Les deux dés visent les deux premiers personnages du mélange: ils ne désignent jamais
  le même personnage.
"""
import random
from typing import List, MutableSequence, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

NO_RESULT_PROBABILITY = 1 / 6

_SYSTEM_RNG = random.SystemRandom()


def resolve_rng(rng: Optional[random.Random] = None) -> random.Random:
    """RNG injectée (tests, simulations) ou source système par défaut."""
    return rng if rng is not None else _SYSTEM_RNG


def shuffle(items: MutableSequence[T], rng: Optional[random.Random] = None) -> None:
    """Mélange uniforme en place (Fisher-Yates de la stdlib)."""
    resolve_rng(rng).shuffle(items)


def pick(items: Sequence[T], rng: Optional[random.Random] = None) -> T:
    """Tire un élément uniformément."""
    return resolve_rng(rng).choice(items)


def roll_dice(
    characters: MutableSequence[str],
    rng: Optional[random.Random] = None,
) -> Tuple[Optional[str], Optional[str]]:
    """
    Lance les deux dés sur la liste de personnages.
    La liste est mélangée en place, puis chaque dé garde son personnage sauf tirage "vide".
    """
    if len(characters) < 2:
        raise ValueError("At least two characters are required to roll dice")
    r = resolve_rng(rng)
    r.shuffle(characters)
    die1 = None if r.random() < NO_RESULT_PROBABILITY else characters[0]
    die2 = None if r.random() < NO_RESULT_PROBABILITY else characters[1]
    return die1, die2


def roll_for(characters: Sequence[str], rng: Optional[random.Random] = None) -> Tuple[Optional[str], Optional[str]]:
    """Variante sans effet de bord: travaille sur une copie de `characters`."""
    pool: List[str] = list(characters)
    return roll_dice(pool, rng)
