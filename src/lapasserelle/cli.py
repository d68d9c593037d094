"""Interface en ligne de commande LaPasserelle."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from lapasserelle import __version__
from lapasserelle.config import Config, LaPasserelleError
from lapasserelle.io_records import is_remote, load_old_new
from lapasserelle.matching.batch import run_batches
from lapasserelle.matching.engine import UrlMapper
from lapasserelle.matching.index import build_indices
from lapasserelle.matching.schema import MappingOutcome
from lapasserelle.normalize import extract_product_name
from lapasserelle.report import print_batch_progress, print_report_console, write_loops_csv, write_mapping_csv


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.ERROR,
        format="%(levelname)s | %(name)s | %(message)s",
        force=True,
    )


def run_mapping(config: Config, *, verbose: bool = False) -> MappingOutcome:
    """Charge les deux listes, construit les index et exécute le matching par lots."""
    old_records, new_records = load_old_new(config)
    print(f"{len(old_records)} anciennes URL, {len(new_records)} nouvelles URL")

    indices = build_indices(new_records, config.product_marker)
    print(f"Index: {len(indices.by_identifier)} identifiants, {len(indices.by_name)} noms de produit")

    mapper = UrlMapper(config, indices)
    return run_batches(
        old_records,
        mapper,
        config.batch_size,
        progress=print_batch_progress if verbose else None,
    )


def cmd_run(
    config_path: str | None,
    *,
    old_file: str | None = None,
    new_file: str | None = None,
    output_dir: str | None = None,
    dry_run: bool = False,
    verbose: bool = False,
) -> int:
    """Exécute le pipeline LaPasserelle."""
    try:
        if config_path:
            config = Config.load(config_path, require_files=False)
        else:
            config = Config()
            config.resolve_paths(Path.cwd())
        if old_file:
            config.old_file = old_file if is_remote(old_file) else str(Path(old_file).resolve())
        if new_file:
            config.new_file = new_file if is_remote(new_file) else str(Path(new_file).resolve())
        if output_dir:
            config.output_dir = str(Path(output_dir).resolve())
        if not config.old_file or not config.new_file:
            print("Erreur: old_file et new_file requis (config ou --old/--new).")
            return 1

        outcome = run_mapping(config, verbose=verbose)
    except LaPasserelleError as e:
        print(f"Erreur: {e}")
        return 1

    print_report_console(outcome)

    if dry_run:
        print("Mode dry-run: pas d'écriture des fichiers de sortie.")
        return 0

    out_dir = Path(config.output_dir)
    mapping_path = write_mapping_csv(outcome, out_dir / config.mapping_file)
    print(f"Redirections écrites: {mapping_path}")
    loops_path = write_loops_csv(outcome, out_dir / config.loops_file)
    if loops_path is not None:
        print(f"Boucles évitées écrites: {loops_path}")
    return 0


def cmd_extract_name(urls: list[str], product_marker: str) -> int:
    """Affiche le nom de produit extrait de chaque URL."""
    status = 0
    for url in urls:
        result = extract_product_name(url, product_marker)
        if result.error:
            print(f"{url}\t(erreur: {result.error})")
            status = 1
        else:
            print(f"{url}\t{result.name or '(aucun nom)'}")
    return status


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="lapasserelle",
        description="Table de redirections 301 entre l'ancien et le nouveau site",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Commandes")

    # run
    p_run = subparsers.add_parser("run", help="Générer la table de redirections")
    p_run.add_argument("--config", "-c", help="Fichier config JSON")
    p_run.add_argument("--old", help="Liste des URL de l'ancien site (remplace old_file)")
    p_run.add_argument("--new", help="Liste des URL du nouveau site (remplace new_file)")
    p_run.add_argument("--output-dir", "-o", help="Dossier des fichiers de sortie")
    p_run.add_argument("--dry-run", action="store_true", help="Ne pas écrire les fichiers de sortie")
    p_run.add_argument("--verbose", "-v", action="store_true", help="Avertissements par URL et progression par lot")

    # extract-name
    p_name = subparsers.add_parser("extract-name", help="Afficher le nom de produit extrait d'URL")
    p_name.add_argument("urls", nargs="+", help="URL à analyser")
    p_name.add_argument("--marker", default="product", help="Segment marqueur produit")

    args = parser.parse_args()

    if args.command == "run":
        _configure_logging(args.verbose)
        return cmd_run(
            args.config,
            old_file=args.old,
            new_file=args.new,
            output_dir=args.output_dir,
            dry_run=args.dry_run,
            verbose=args.verbose,
        )

    if args.command == "extract-name":
        return cmd_extract_name(args.urls, args.marker)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
