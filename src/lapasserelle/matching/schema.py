"""Schémas et types pour le matching d'URL."""

from __future__ import annotations

from dataclasses import dataclass, field

SKU_MATCH = "sku_match"
EXACT_MATCH = "exact_match"
HIGH_CONFIDENCE_MATCH = "high_confidence_match"
MEDIUM_CONFIDENCE_MATCH = "medium_confidence_match"
LOW_CONFIDENCE_MATCH = "low_confidence_match"
CATEGORY_REDIRECT = "category_redirect"

LOOP_IDENTICAL_URLS = "identical_urls"
LOOP_IDENTICAL_CATEGORY = "identical_category"
LOOP_IDENTICAL_PRODUCT = "identical_product"


@dataclass(frozen=True)
class Record:
    """Une ligne d'une des deux listes (ancien ou nouveau site)."""

    identifier: str
    url: str


@dataclass(frozen=True)
class NameResult:
    """Résultat de l'extraction d'un nom : nom (vide = non extractible) ou erreur."""

    name: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.name)


@dataclass(frozen=True)
class LoopCheck:
    """Résultat de la détection de boucle entre deux URL."""

    is_loop: bool
    error: str | None = None


@dataclass
class MatchResult:
    """Redirection produit retenue pour une ancienne URL."""

    old_url: str
    new_url: str
    old_name: str
    new_name: str
    match_type: str  # sku_match, exact_match, high/medium/low_confidence_match
    similarity: str  # 2 décimales, ex. "0.67"
    identifier: str = ""


@dataclass
class CategoryEntry:
    """Redirection de catégorie (résolue) ou simple observation (non résolue)."""

    old_url: str
    new_url: str | None = None
    match_type: str | None = None
    similarity: str | None = None
    category: str | None = None  # segments joints, si non résolue

    @property
    def resolved(self) -> bool:
        return self.new_url is not None


@dataclass
class LoopEntry:
    """Redirection candidate rejetée car elle pointerait sur elle-même."""

    old_url: str
    new_url: str
    reason: str  # identical_urls, identical_category, identical_product
    old_name: str = ""
    new_name: str = ""
    identifier: str = ""


@dataclass
class MappingOutcome:
    """Les collections de sortie du matching, dans l'ordre des anciennes URL."""

    mappings: list[MatchResult] = field(default_factory=list)
    unmapped: list[str] = field(default_factory=list)
    categories: list[CategoryEntry] = field(default_factory=list)
    loops: list[LoopEntry] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)  # ni produit ni catégorie

    def extend(self, other: MappingOutcome) -> None:
        """Concatène les collections d'un autre résultat (ex. un lot) à la suite."""
        self.mappings.extend(other.mappings)
        self.unmapped.extend(other.unmapped)
        self.categories.extend(other.categories)
        self.loops.extend(other.loops)
        self.dropped.extend(other.dropped)

    @property
    def total(self) -> int:
        return len(self.mappings) + len(self.unmapped) + len(self.categories) + len(self.loops) + len(self.dropped)
