"""Calcul du score de similarité entre deux noms de produit."""

from __future__ import annotations

from collections.abc import Callable

from rapidfuzz import fuzz

NameScorer = Callable[[str, str], float]


def _words(name: str) -> set[str]:
    return set(name.split("-"))


def _jaccard(n1: str, n2: str) -> float:
    words1 = _words(n1)
    words2 = _words(n2)
    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)


TOKEN_SET_CAP = 0.89


def _token_set(n1: str, n2: str) -> float:
    words1 = _words(n1)
    words2 = _words(n2)
    if words1 == words2:
        return 1.0
    # token_set_ratio vaut 100 dès qu'un ensemble de mots est inclus dans l'autre
    ratio = fuzz.token_set_ratio(" ".join(sorted(words1)), " ".join(sorted(words2))) / 100.0
    return min(ratio, TOKEN_SET_CAP)


def _score(name1: str, name2: str, fallback: NameScorer) -> float:
    if not name1 or not name2:
        return 0.0

    n1 = name1.lower()
    n2 = name2.lower()

    if n1 == n2:
        return 1.0
    if n1 in n2 or n2 in n1:
        return 0.9

    return min(max(fallback(n1, n2), 0.0), 1.0)


def name_similarity(name1: str, name2: str) -> float:
    """
    Score de similarité (0-1) entre deux noms déjà extraits.

    - identiques (casse ignorée) : 1.0
    - l'un contient l'autre : 0.9
    - sinon indice de Jaccard sur les mots séparés par des tirets
    - 0.0 si l'un des noms est vide
    """
    return _score(name1, name2, _jaccard)


def token_set_similarity(name1: str, name2: str) -> float:
    """
    Variante de name_similarity() : le repli Jaccard est remplacé par token_set_ratio de rapidfuzz.

    1.0 seulement si les ensembles de mots sont égaux ; sinon le score est plafonné
    à TOKEN_SET_CAP, sous le score d'inclusion (0.9).
    """
    return _score(name1, name2, _token_set)


_SCORERS: dict[str, NameScorer] = {
    "jaccard": name_similarity,
    "token_set": token_set_similarity,
}


def get_scorer(method: str) -> NameScorer:
    """Retourne la fonction de score pour une méthode de config (jaccard, token_set)."""
    try:
        return _SCORERS[method]
    except KeyError:
        raise ValueError(f"Méthode de score inconnue: {method!r}. Valides: {sorted(_SCORERS)}") from None
