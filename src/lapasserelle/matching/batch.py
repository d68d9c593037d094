"""Découpage des anciennes URL en lots de taille fixe."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator

from lapasserelle.matching.engine import UrlMapper
from lapasserelle.matching.schema import MappingOutcome, Record

ProgressCallback = Callable[[int, int, MappingOutcome], None]


def iter_batches(records: list[Record], batch_size: int) -> Iterator[list[Record]]:
    """Lots contigus de `batch_size` Records (le dernier peut être plus court)."""
    if batch_size < 1:
        raise ValueError(f"batch_size doit être >= 1 (got {batch_size})")
    for start in range(0, len(records), batch_size):
        yield records[start : start + batch_size]


def run_batches(
    records: list[Record],
    mapper: UrlMapper,
    batch_size: int,
    progress: ProgressCallback | None = None,
) -> MappingOutcome:
    """
    Exécute le moteur lot par lot et concatène les résultats.

    L'ordre de sortie est celui de `records`, quelle que soit la taille des lots.

    Args:
        records: Anciennes URL.
        mapper: Moteur déjà construit sur les index complets du nouveau site.
        batch_size: Taille des lots (>= 1).
        progress: Appelé après chaque lot avec (numéro 1-based, nombre de lots, résultat du lot).

    Returns:
        MappingOutcome global.
    """
    total_batches = math.ceil(len(records) / batch_size) if records else 0
    outcome = MappingOutcome()
    for batch_num, batch in enumerate(iter_batches(records, batch_size), start=1):
        batch_outcome = mapper.process_batch(batch)
        if progress is not None:
            progress(batch_num, total_batches, batch_outcome)
        outcome.extend(batch_outcome)
    return outcome
