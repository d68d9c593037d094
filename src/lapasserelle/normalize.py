"""Normalisation d'URL et extraction du nom de produit."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from lapasserelle.matching.schema import NameResult

PLACEHOLDER_HOST = "https://example.com"

_NAME_CLEANUPS = [
    re.compile(r"-[0-9]$"),
    re.compile(r"-\d+x\d+x\d+"),
    re.compile(r"-\d+x\d+"),
    re.compile(r"-\d+-?mil"),
    re.compile(r"-\d+-?inch"),
    re.compile(r"-\d+-?oz"),
    re.compile(r"-\d+-?lb"),
    re.compile(r"-\d+-?gal"),
    re.compile(r"-+$"),
]


def absolutize(url: str) -> str:
    """Rattache une URL sans schéma à l'hôte fictif pour un parsing uniforme."""
    url = url.strip()
    if urlsplit(url).scheme in ("http", "https"):
        return url
    if not url.startswith("/"):
        url = "/" + url
    return PLACEHOLDER_HOST + url


def url_path(url: str) -> str:
    """
    Retourne le chemin d'une URL (absolue ou relative).

    Raises:
        ValueError: Si l'URL ne peut pas être analysée (ex. hôte IPv6 mal formé).
    """
    return urlsplit(absolutize(url)).path


def path_segments(url: str) -> list[str]:
    """Segments non vides du chemin. Lève ValueError comme url_path()."""
    return [s for s in url_path(url).split("/") if s]


def clean_product_name(name: str) -> str:
    """
    Retire les suffixes de spécification d'un nom de produit.

    Dans l'ordre : chiffre isolé final (-5), dimensions (-24x18x12, -24x18),
    unités (-2mil, -3-inch, -16oz, -5lb, -55gal), tirets finaux.
    Seule la première occurrence de chaque motif est retirée.
    """
    if not name:
        return ""
    cleaned = name
    for pattern in _NAME_CLEANUPS:
        cleaned = pattern.sub("", cleaned, count=1)
    return cleaned


def extract_product_name(url: str, product_marker: str = "product") -> NameResult:
    """
    Extrait le nom de produit canonique du chemin d'une URL.

    Par défaut le dernier segment ; si le marqueur produit (ex. "product") est
    présent et n'est pas le dernier segment, le segment qui le suit.

    Returns:
        NameResult avec le nom nettoyé (vide si non extractible) ou l'erreur de parsing.
    """
    try:
        segments = path_segments(url)
    except ValueError as e:
        return NameResult(error=f"URL invalide {url!r}: {e}")
    if not segments:
        return NameResult()

    name = segments[-1]
    if product_marker and product_marker in segments:
        idx = segments.index(product_marker)
        if idx < len(segments) - 1:
            name = segments[idx + 1]

    return NameResult(name=clean_product_name(name))


def normalize_path_for_compare(url: str) -> str:
    """Chemin en minuscules sans slash final. Lève ValueError comme url_path()."""
    return url_path(url).rstrip("/").lower()
