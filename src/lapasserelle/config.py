"""Configuration et chargement du fichier config JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

VALID_NAME_SCORERS = frozenset({"jaccard", "token_set"})

DEFAULT_PRODUCT_URL_PATTERNS = ["/product/"]
DEFAULT_CATEGORY_URL_PATTERNS = ["/product-category/"]
DEFAULT_CATEGORY_MAPPINGS = {
    "corrugate": "/product-category/corrugated-boxes/",
    "stretch-film": "/product-category/stretch-wrap-film/",
    "tapes-adhesives": "/product-category/tapes-adhesives/",
    "shipping-mailing": "/product-category/shipping-supplies/",
    "health-safety": "/product-category/safety-supplies/",
    "janitorial": "/product-category/janitorial-supplies/",
    "labelling": "/product-category/labels/",
    "plastic-poly": "/product-category/poly-bags/",
    "protective-packaging": "/product-category/protective-packaging/",
    "strapping": "/product-category/strapping/",
    "material-handling": "/product-category/material-handling/",
    "keygifts": "/keygifts/",
}


class LaPasserelleError(Exception):
    """Exception de base pour LaPasserelle."""


class ConfigError(LaPasserelleError, ValueError):
    """Erreur de validation de la configuration."""


class ConfigFileError(LaPasserelleError):
    """Erreur de chargement du fichier de configuration (fichier absent, JSON invalide)."""


def _is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _str_list(d: dict[str, Any], key: str, default: list[str]) -> list[str]:
    value = d.get(key, default)
    if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
        raise ConfigError(f"{key} doit être une liste de chaînes non vides (got {value!r})")
    return list(value)


def _str_value(d: dict[str, Any], key: str, default: str, *, allow_empty: bool = False) -> str:
    value = d.get(key, default)
    if not isinstance(value, str) or (not value and not allow_empty):
        kind = "une chaîne" if allow_empty else "une chaîne non vide"
        raise ConfigError(f"{key} doit être {kind} (got {value!r})")
    return value


def _threshold(d: dict[str, Any], key: str, default: float) -> float:
    try:
        value = float(d.get(key, default))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} doit être un nombre (got {d.get(key)!r})") from e
    if not 0 <= value <= 1:
        raise ConfigError(f"{key} doit être entre 0 et 1 (got {value})")
    return value


@dataclass
class Config:
    """Configuration principale de LaPasserelle."""

    old_file: str = ""
    new_file: str = ""
    output_dir: str = "."
    mapping_file: str = "complete-url-mapping.csv"
    loops_file: str = "skipped-loops.csv"

    product_url_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_PRODUCT_URL_PATTERNS))
    category_url_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_CATEGORY_URL_PATTERNS))
    product_marker: str = "product"
    category_mappings: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CATEGORY_MAPPINGS))
    new_site_base_url: str = "https://example.com"

    similarity_threshold: float = 0.5
    high_confidence_threshold: float = 0.8
    medium_confidence_threshold: float = 0.6
    name_scorer: str = "jaccard"  # jaccard, token_set
    batch_size: int = 250

    has_header: bool | None = None  # None = détection automatique
    fetch_timeout: float = 30.0

    @classmethod
    def from_dict(cls, d: dict[str, Any], *, require_files: bool = True) -> Config:
        old_file = _str_value(d, "old_file", "", allow_empty=True)
        new_file = _str_value(d, "new_file", "", allow_empty=True)
        if require_files and (not old_file or not new_file):
            raise ConfigError("old_file et new_file requis")

        similarity_threshold = _threshold(d, "similarity_threshold", 0.5)
        high = _threshold(d, "high_confidence_threshold", 0.8)
        medium = _threshold(d, "medium_confidence_threshold", 0.6)
        if not similarity_threshold <= medium <= high:
            raise ConfigError(
                "Seuils incohérents: similarity_threshold <= medium_confidence_threshold "
                f"<= high_confidence_threshold requis (got {similarity_threshold}, {medium}, {high})"
            )

        try:
            batch_size = int(d.get("batch_size", 250))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"batch_size doit être un entier (got {d.get('batch_size')!r})") from e
        if batch_size < 1:
            raise ConfigError(f"batch_size doit être >= 1 (got {batch_size})")

        name_scorer = d.get("name_scorer", "jaccard")
        if name_scorer not in VALID_NAME_SCORERS:
            raise ConfigError(f"name_scorer invalide: {name_scorer!r}. Valides: {sorted(VALID_NAME_SCORERS)}")

        category_mappings = d.get("category_mappings", DEFAULT_CATEGORY_MAPPINGS)
        if not isinstance(category_mappings, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in category_mappings.items()
        ):
            raise ConfigError("category_mappings doit être un objet {slug: chemin}")

        has_header = d.get("has_header")
        if has_header is not None and not isinstance(has_header, bool):
            raise ConfigError(f"has_header doit être true, false ou null (got {has_header!r})")

        try:
            fetch_timeout = float(d.get("fetch_timeout", 30.0))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"fetch_timeout doit être un nombre (got {d.get('fetch_timeout')!r})") from e
        if fetch_timeout <= 0:
            raise ConfigError(f"fetch_timeout doit être > 0 (got {fetch_timeout})")

        return cls(
            old_file=old_file,
            new_file=new_file,
            output_dir=_str_value(d, "output_dir", "."),
            mapping_file=_str_value(d, "mapping_file", "complete-url-mapping.csv"),
            loops_file=_str_value(d, "loops_file", "skipped-loops.csv"),
            product_url_patterns=_str_list(d, "product_url_patterns", DEFAULT_PRODUCT_URL_PATTERNS),
            category_url_patterns=_str_list(d, "category_url_patterns", DEFAULT_CATEGORY_URL_PATTERNS),
            product_marker=_str_value(d, "product_marker", "product"),
            category_mappings=dict(category_mappings),
            new_site_base_url=_str_value(d, "new_site_base_url", "https://example.com", allow_empty=True),
            similarity_threshold=similarity_threshold,
            high_confidence_threshold=high,
            medium_confidence_threshold=medium,
            name_scorer=name_scorer,
            batch_size=batch_size,
            has_header=has_header,
            fetch_timeout=fetch_timeout,
        )

    @classmethod
    def load(cls, path: str | Path, *, require_files: bool = True) -> Config:
        """
        Charge la configuration depuis un fichier JSON.

        Raises:
            ConfigFileError: Si le fichier est absent ou le JSON invalide.
            ConfigError: Si la configuration est invalide.
        """
        path = Path(path).resolve()
        if not path.exists():
            raise ConfigFileError(f"Fichier de configuration introuvable: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                d = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"JSON invalide dans {path}: {e}") from e
        except OSError as e:
            raise ConfigFileError(f"Impossible de lire {path}: {e}") from e

        if not isinstance(d, dict):
            raise ConfigFileError(f"Fichier de configuration invalide: {path} doit contenir un objet JSON")

        config = cls.from_dict(d, require_files=require_files)
        config.resolve_paths(path.parent)
        return config

    def resolve_paths(self, base_dir: Path) -> None:
        """
        Résout les chemins relatifs par rapport au répertoire de base (ex. dossier du fichier config).

        Les sources distantes (http/https) sont laissées telles quelles.
        """
        base = Path(base_dir)
        if self.old_file and not _is_remote(self.old_file) and not Path(self.old_file).is_absolute():
            self.old_file = str((base / self.old_file).resolve())
        if self.new_file and not _is_remote(self.new_file) and not Path(self.new_file).is_absolute():
            self.new_file = str((base / self.new_file).resolve())
        if self.output_dir and not Path(self.output_dir).is_absolute():
            self.output_dir = str((base / self.output_dir).resolve())
