"""Écriture des fichiers de redirections et résumé console."""

from __future__ import annotations

import csv
from collections import Counter
from datetime import datetime
from pathlib import Path

import pandas as pd

from lapasserelle import __version__
from lapasserelle.matching.schema import LoopEntry, MappingOutcome, MatchResult

MAPPING_COLUMNS = ["old_url", "new_url", "old_name", "new_name", "match_type", "similarity", "identifier"]
LOOPS_COLUMNS = ["old_url", "new_url", "reason", "old_name", "new_name", "identifier"]


def build_mapping_df(outcome: MappingOutcome) -> pd.DataFrame:
    """
    Construit la table des redirections.

    Les redirections produit d'abord, puis les catégories résolues (nom et identifiant vides).
    """
    rows = [
        (m.old_url, m.new_url, m.old_name, m.new_name, m.match_type, m.similarity, m.identifier)
        for m in outcome.mappings
    ]
    rows.extend(
        (c.old_url, c.new_url, "", "", c.match_type or "", c.similarity or "", "")
        for c in outcome.categories
        if c.resolved
    )
    return pd.DataFrame(rows, columns=MAPPING_COLUMNS, dtype=str)


def build_loops_df(loops: list[LoopEntry]) -> pd.DataFrame:
    rows = [(lp.old_url, lp.new_url, lp.reason, lp.old_name, lp.new_name, lp.identifier) for lp in loops]
    return pd.DataFrame(rows, columns=LOOPS_COLUMNS, dtype=str)


def _write_csv(df: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # en-tête sans guillemets, valeurs toutes entre guillemets
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(",".join(df.columns) + "\n")
        df.to_csv(f, index=False, header=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


def write_mapping_csv(outcome: MappingOutcome, path: str | Path) -> Path:
    """Écrit le fichier de redirections (toutes les valeurs entre guillemets)."""
    path = Path(path)
    _write_csv(build_mapping_df(outcome), path)
    return path


def write_loops_csv(outcome: MappingOutcome, path: str | Path) -> Path | None:
    """Écrit le fichier des boucles détectées ; rien n'est écrit s'il n'y en a pas."""
    if not outcome.loops:
        return None
    path = Path(path)
    _write_csv(build_loops_df(outcome.loops), path)
    return path


def match_type_distribution(mappings: list[MatchResult]) -> list[tuple[str, int, int]]:
    """(type, nombre, pourcentage arrondi) triés par nombre décroissant."""
    counts = Counter(m.match_type for m in mappings)
    total = len(mappings)
    return [(t, n, round(n / total * 100)) for t, n in counts.most_common()]


def print_batch_progress(batch_num: int, total_batches: int, batch: MappingOutcome) -> None:
    """Affiche les compteurs d'un lot."""
    print(f"Lot {batch_num}/{total_batches}:")
    print(f"  - Redirigées:  {len(batch.mappings)}")
    print(f"  - Sans match:  {len(batch.unmapped)}")
    print(f"  - Catégories:  {len(batch.categories)}")
    print(f"  - Boucles:     {len(batch.loops)}")


def print_report_console(outcome: MappingOutcome) -> None:
    """Affiche un résumé du rapport en console."""
    n_resolved = sum(1 for c in outcome.categories if c.resolved)

    print("\n=== LaPasserelle Report ===")
    print(f"  Anciennes URL:       {outcome.total}")
    print(f"  Redirigées (prod.):  {len(outcome.mappings)}")
    print(f"  Sans correspondance: {len(outcome.unmapped)}")
    print(f"  Catégories:          {len(outcome.categories)} (dont {n_resolved} redirigées)")
    print(f"  Boucles évitées:     {len(outcome.loops)}")
    print(f"  Ignorées:            {len(outcome.dropped)}")

    if outcome.mappings:
        print("\n  Répartition des types de match:")
        for match_type, count, pct in match_type_distribution(outcome.mappings):
            print(f"    - {match_type}: {count} ({pct}%)")

        print("\n  Exemples de redirections:")
        for m in outcome.mappings[:10]:
            print(f"    - {m.old_url} → {m.new_url}")
            suffix = f", identifiant: {m.identifier}" if m.identifier else ""
            print(f'      "{m.old_name}" → "{m.new_name}" ({m.match_type}, {m.similarity}{suffix})')

    if outcome.unmapped:
        print("\n  Exemples sans correspondance:")
        for url in outcome.unmapped[:5]:
            print(f"    - {url}")

    if outcome.loops:
        print("\n  Exemples de boucles évitées:")
        for lp in outcome.loops[:5]:
            print(f"    - {lp.old_url} → {lp.new_url} ({lp.reason})")

    print(f"\n  Version:             {__version__}")
    print(f"  Timestamp:           {datetime.now().isoformat()}")
    print("===========================\n")
