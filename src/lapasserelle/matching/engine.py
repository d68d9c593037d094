"""Moteur de matching : identifiant, nom exact, nom approché, catégorie."""

from __future__ import annotations

import logging

from lapasserelle.config import Config
from lapasserelle.matching.index import Indices
from lapasserelle.matching.loops import check_loop
from lapasserelle.matching.schema import (
    CATEGORY_REDIRECT,
    EXACT_MATCH,
    HIGH_CONFIDENCE_MATCH,
    LOOP_IDENTICAL_CATEGORY,
    LOOP_IDENTICAL_PRODUCT,
    LOOP_IDENTICAL_URLS,
    LOW_CONFIDENCE_MATCH,
    MEDIUM_CONFIDENCE_MATCH,
    SKU_MATCH,
    CategoryEntry,
    LoopEntry,
    MappingOutcome,
    MatchResult,
    Record,
)
from lapasserelle.matching.scorers import get_scorer
from lapasserelle.normalize import extract_product_name, path_segments, url_path

logger = logging.getLogger(__name__)


class UrlMapper:
    """Moteur de matching des anciennes URL vers le nouveau site."""

    def __init__(self, config: Config, indices: Indices) -> None:
        self.config = config
        self.indices = indices
        self.product_marker = config.product_marker
        self.product_patterns = tuple(config.product_url_patterns)
        self.category_patterns = tuple(config.category_url_patterns)
        self.category_mappings = dict(config.category_mappings)
        self.base_url = config.new_site_base_url
        self.similarity_threshold = config.similarity_threshold
        self.high_threshold = config.high_confidence_threshold
        self.medium_threshold = config.medium_confidence_threshold
        self.score = get_scorer(config.name_scorer)

    def process_batch(self, records: list[Record]) -> MappingOutcome:
        """
        Traite un lot d'anciennes URL.

        Returns:
            MappingOutcome dont chaque collection suit l'ordre de `records`.
        """
        outcome = MappingOutcome()
        for record in records:
            self.map_record(record, outcome)
        return outcome

    def map_record(self, record: Record, outcome: MappingOutcome) -> None:
        """Applique la politique de matching à une ancienne URL et range le résultat dans `outcome`."""
        if record.identifier and record.identifier in self.indices.by_identifier:
            self._map_by_identifier(record, self.indices.by_identifier[record.identifier], outcome)
            return

        try:
            path = url_path(record.url)
        except ValueError as e:
            logger.warning("URL ignorée (non analysable) %r: %s", record.url, e)
            outcome.dropped.append(record.url)
            return

        is_product = any(p in path for p in self.product_patterns)
        is_category = any(p in path for p in self.category_patterns)

        if is_product:
            self._map_by_name(record, outcome)
        elif is_category:
            self._map_category(record, outcome)
        else:
            logger.info("URL ignorée (ni produit ni catégorie): %s", record.url)
            outcome.dropped.append(record.url)

    def _map_by_identifier(self, record: Record, target: Record, outcome: MappingOutcome) -> None:
        loop = check_loop(record.url, target.url)
        if loop.error:
            logger.warning(loop.error)
        if loop.is_loop:
            outcome.loops.append(
                LoopEntry(
                    old_url=record.url,
                    new_url=target.url,
                    reason=LOOP_IDENTICAL_URLS,
                    identifier=record.identifier,
                )
            )
            return

        outcome.mappings.append(
            MatchResult(
                old_url=record.url,
                new_url=target.url,
                old_name=extract_product_name(record.url, self.product_marker).name,
                new_name=extract_product_name(target.url, self.product_marker).name,
                match_type=SKU_MATCH,
                similarity="1.00",
                identifier=record.identifier,
            )
        )

    def find_candidates(self, name: str) -> tuple[Record, ...]:
        """
        Candidats du nouveau site pour un nom extrait.

        Correspondance exacte dans l'index, sinon la clé la plus proche dont le score
        dépasse strictement le seuil (à égalité, la première clé de l'index).
        """
        exact = self.indices.by_name.get(name)
        if exact:
            return exact

        scored: list[tuple[float, tuple[Record, ...]]] = []
        for key, records in self.indices.by_name.items():
            similarity = self.score(name, key)
            if similarity > self.similarity_threshold:
                scored.append((similarity, records))

        if not scored:
            return ()
        # tri stable : l'ordre de l'index départage les égalités
        scored.sort(key=lambda s: s[0], reverse=True)
        return scored[0][1]

    def classify(self, similarity: float) -> str:
        if similarity == 1.0:
            return EXACT_MATCH
        if similarity >= self.high_threshold:
            return HIGH_CONFIDENCE_MATCH
        if similarity >= self.medium_threshold:
            return MEDIUM_CONFIDENCE_MATCH
        return LOW_CONFIDENCE_MATCH

    def _map_by_name(self, record: Record, outcome: MappingOutcome) -> None:
        extracted = extract_product_name(record.url, self.product_marker)
        if extracted.error:
            logger.warning(extracted.error)
        if not extracted.ok:
            outcome.unmapped.append(record.url)
            return

        candidates = self.find_candidates(extracted.name)
        if not candidates:
            logger.info("Aucun candidat pour %s (nom %r)", record.url, extracted.name)
            outcome.unmapped.append(record.url)
            return

        best = candidates[0]
        new_name = extract_product_name(best.url, self.product_marker).name

        loop = check_loop(record.url, best.url)
        if loop.error:
            logger.warning(loop.error)
        if loop.is_loop:
            outcome.loops.append(
                LoopEntry(
                    old_url=record.url,
                    new_url=best.url,
                    reason=LOOP_IDENTICAL_PRODUCT,
                    old_name=extracted.name,
                    new_name=new_name,
                )
            )
            return

        similarity = self.score(extracted.name, new_name)
        outcome.mappings.append(
            MatchResult(
                old_url=record.url,
                new_url=best.url,
                old_name=extracted.name,
                new_name=new_name,
                match_type=self.classify(similarity),
                similarity=f"{similarity:.2f}",
            )
        )

    def _map_category(self, record: Record, outcome: MappingOutcome) -> None:
        try:
            segments = path_segments(record.url)
        except ValueError as e:
            logger.warning("URL de catégorie ignorée %r: %s", record.url, e)
            outcome.dropped.append(record.url)
            return

        slug = next((s for s in segments if s in self.category_mappings), None)
        if slug is None:
            outcome.categories.append(CategoryEntry(old_url=record.url, category="/".join(segments)))
            return

        new_url = f"{self.base_url}{self.category_mappings[slug]}"
        loop = check_loop(record.url, new_url)
        if loop.error:
            logger.warning(loop.error)
        if loop.is_loop:
            outcome.loops.append(LoopEntry(old_url=record.url, new_url=new_url, reason=LOOP_IDENTICAL_CATEGORY))
            return

        outcome.categories.append(
            CategoryEntry(
                old_url=record.url,
                new_url=new_url,
                match_type=CATEGORY_REDIRECT,
                similarity="1.00",
            )
        )
