"""Détection des redirections en boucle (ancienne et nouvelle URL identiques)."""

from __future__ import annotations

from lapasserelle.matching.schema import LoopCheck
from lapasserelle.normalize import normalize_path_for_compare


def check_loop(old_url: str, new_url: str) -> LoopCheck:
    """
    Indique si une redirection old_url -> new_url ne mènerait nulle part.

    Les deux URL sont comparées sur leur chemin seul, en minuscules, sans slash final.
    Une URL non analysable n'est pas une boucle ; l'erreur est renvoyée dans le résultat.
    """
    try:
        old_path = normalize_path_for_compare(old_url)
        new_path = normalize_path_for_compare(new_url)
    except ValueError as e:
        return LoopCheck(is_loop=False, error=f"Comparaison impossible {old_url!r} / {new_url!r}: {e}")

    if old_path == new_path:
        return LoopCheck(is_loop=True)
    # /a et /a/ désignent la même page
    if old_path + "/" == new_path or old_path == new_path + "/":
        return LoopCheck(is_loop=True)
    return LoopCheck(is_loop=False)


def is_loop(old_url: str, new_url: str) -> bool:
    return check_loop(old_url, new_url).is_loop
