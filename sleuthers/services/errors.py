"""
Service: errors.py
Rôle:
- Taxonomie des erreurs du moteur de jeu, indépendante du transport HTTP.

Chaque erreur porte:
- `kind`   : identifiant snake_case stable (renvoyé aux clients),
- `status` : code HTTP suggéré (utilisé par le handler de `sleuthers.main`),
- `message`: texte lisible.

`InternalInvariantViolation` signale un état corrompu (journal incohérent, carte ambiguë,
pioche vide...). Elle n'est jamais "rattrapée" localement: la transaction est annulée et le
client ne reçoit qu'un message générique.
"""


class GameError(Exception):
    """Erreur de base du moteur."""

    kind = "game_error"
    status = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(GameError):
    """Référence inconnue (partie, utilisateur, carte, jeton, personnage)."""

    kind = "not_found"
    status = 404


class Forbidden(GameError):
    """Pas votre tour, ou pas participant de la partie."""

    kind = "forbidden"
    status = 403


class InvalidArgument(GameError):
    """Entrée mal formée (case hors plateau, nombre de joueurs, champ manquant)."""

    kind = "invalid_argument"
    status = 400


class InvalidAction(GameError):
    """Forme valide mais règle du jeu violée."""

    kind = "invalid_action"
    status = 400


class Conflict(GameError):
    """Doublon ou écriture concurrente détectée au commit."""

    kind = "conflict"
    status = 409


class InternalInvariantViolation(GameError):
    """État interne corrompu; jamais récupérable localement."""

    kind = "internal_error"
    status = 500
