"""Lecture des listes d'URL (CSV/TSV, texte, tableurs, URL distantes)."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

import pandas as pd
import requests

from lapasserelle.config import Config, LaPasserelleError
from lapasserelle.matching.schema import Record

logger = logging.getLogger(__name__)

DELIMITERS = (",", "\t", ";")
SPREADSHEET_EXTENSIONS = (".xlsx", ".xls", ".ods")
IDENTIFIER_LIKE = re.compile(r"^[A-Z]{2}\.\d+\.\d+")


class InputError(LaPasserelleError):
    """Erreur de lecture d'une liste d'URL."""


class InputNotFoundError(InputError):
    """Fichier source introuvable."""


class FetchError(InputError):
    """Échec du téléchargement d'une liste distante."""


class EmptyInputError(InputError):
    """Aucune ligne exploitable dans une liste d'URL."""


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _get_engine(path: Path) -> str | None:
    """Retourne le moteur pandas selon l'extension, ou None pour auto."""
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        return "openpyxl"
    if suffix == ".xls":
        return "xlrd"
    if suffix == ".ods":
        return "odf"
    return None


def fetch_text(url: str, *, timeout: float = 30.0) -> str:
    """
    Télécharge une liste distante.

    Raises:
        FetchError: Erreur réseau ou statut HTTP hors 2xx.
    """
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"Téléchargement impossible de {url}: {e}") from e
    logger.info("Téléchargé %s (%d octets)", url, len(response.content))
    return response.text


def read_text(path: str | Path) -> str:
    """
    Lit un fichier texte local en UTF-8 (repli latin-1).

    Raises:
        InputNotFoundError: Fichier absent.
        InputError: Fichier illisible.
    """
    path = Path(path)
    if not path.is_file():
        raise InputNotFoundError(f"Fichier introuvable: {path}")
    try:
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            return path.read_text(encoding="latin-1")
    except OSError as e:
        raise InputError(f"Impossible de lire {path}: {e}") from e


def read_lines(source: str | Path, *, timeout: float = 30.0) -> list[str]:
    """Lignes non vides d'une source locale ou distante (http/https)."""
    source = str(source)
    text = fetch_text(source, timeout=timeout) if is_remote(source) else read_text(source)
    return [line for line in text.splitlines() if line.strip()]


def _clean_field(value: str) -> str:
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def split_line(line: str) -> list[str] | None:
    """
    Découpe une ligne selon le premier séparateur présent (virgule, tabulation, point-virgule).

    Sans séparateur, le premier espace sépare l'identifiant du reste.
    Retourne None si la ligne ne peut pas être découpée.
    """
    line = line.strip()
    for delimiter in DELIMITERS:
        if delimiter in line:
            return [_clean_field(p) for p in line.split(delimiter)]
    space = line.find(" ")
    if space > 0:
        return [_clean_field(line[:space]), _clean_field(line[space + 1 :])]
    return None


def looks_like_header(line: str, product_url_patterns: Iterable[str]) -> bool:
    """Une première ligne sans motif produit, sans "http" et sans identifiant type "AB.12.34" est un en-tête."""
    if any(p in line for p in product_url_patterns):
        return False
    if "http" in line:
        return False
    return IDENTIFIER_LIKE.match(line.strip()) is None


def _to_record(fields: Sequence[str] | None, raw: str) -> Record | None:
    if fields is None:
        logger.warning("Ligne non découpable ignorée: %s", raw)
        return None
    if len(fields) < 2:
        logger.warning("Ligne avec colonnes insuffisantes ignorée: %s", raw)
        return None
    if not fields[1]:
        logger.warning("Ligne sans URL ignorée: %s", raw)
        return None
    return Record(identifier=fields[0], url=fields[1])


def parse_records(
    lines: Sequence[str],
    *,
    product_url_patterns: Iterable[str] = ("/product/",),
    has_header: bool | None = None,
) -> list[Record]:
    """
    Convertit des lignes brutes en Records (identifiant, URL).

    Args:
        lines: Lignes non vides.
        product_url_patterns: Motifs servant à reconnaître une ligne de données.
        has_header: True/False force la présence d'un en-tête, None = détection.

    Returns:
        Records dans l'ordre des lignes ; les lignes mal formées sont ignorées.
    """
    lines = [line for line in lines if line.strip()]
    start = 0
    if lines:
        header = looks_like_header(lines[0], product_url_patterns) if has_header is None else has_header
        if header:
            logger.info("En-tête ignoré: %s", lines[0].strip())
            start = 1

    records: list[Record] = []
    for line in lines[start:]:
        record = _to_record(split_line(line), line)
        if record is not None:
            records.append(record)
    return records


def load_spreadsheet_records(
    path: str | Path,
    *,
    product_url_patterns: Iterable[str] = ("/product/",),
    has_header: bool | None = None,
) -> list[Record]:
    """
    Charge les Records depuis la première feuille d'un tableur (2 premières colonnes).

    Raises:
        InputNotFoundError: Fichier absent.
        InputError: Tableur illisible.
    """
    path = Path(path)
    if not path.is_file():
        raise InputNotFoundError(f"Fichier introuvable: {path}")
    engine = _get_engine(path)
    try:
        df = pd.read_excel(path, sheet_name=0, header=None, dtype=str, engine=engine)
    except ImportError as e:
        if engine == "xlrd":
            raise InputError(f"Format .xls requis: pip install xlrd. Détail: {e}") from e
        if engine == "odf":
            raise InputError(f"Format ODS requis: pip install odfpy. Détail: {e}") from e
        raise InputError(f"Moteur de lecture manquant pour {path.suffix}: {e}") from e
    except Exception as e:
        raise InputError(f"Impossible de lire le tableur {path}: {e}") from e

    df = df.fillna("")
    rows = [[str(v).strip() for v in row] for row in df.itertuples(index=False, name=None)]
    rows = [row for row in rows if any(row)]

    start = 0
    if rows:
        first = ",".join(rows[0])
        header = looks_like_header(first, product_url_patterns) if has_header is None else has_header
        if header:
            logger.info("En-tête ignoré: %s", first)
            start = 1

    records: list[Record] = []
    for row in rows[start:]:
        record = _to_record([_clean_field(v) for v in row], ",".join(row))
        if record is not None:
            records.append(record)
    return records


def load_records(source: str | Path, config: Config) -> list[Record]:
    """Charge les Records d'une source (fichier texte, tableur ou URL distante)."""
    source = str(source)
    if not is_remote(source) and Path(source).suffix.lower() in SPREADSHEET_EXTENSIONS:
        records = load_spreadsheet_records(
            source,
            product_url_patterns=config.product_url_patterns,
            has_header=config.has_header,
        )
    else:
        lines = read_lines(source, timeout=config.fetch_timeout)
        records = parse_records(
            lines,
            product_url_patterns=config.product_url_patterns,
            has_header=config.has_header,
        )
    logger.info("%d entrées lues depuis %s", len(records), source)
    return records


def load_old_new(config: Config) -> tuple[list[Record], list[Record]]:
    """
    Charge les listes de l'ancien et du nouveau site selon la configuration.

    Returns:
        (old_records, new_records)

    Raises:
        InputError: Source absente ou illisible.
        EmptyInputError: Une des deux listes ne contient aucune entrée exploitable.
    """
    old_records = load_records(config.old_file, config)
    new_records = load_records(config.new_file, config)
    if not old_records:
        raise EmptyInputError(f"Aucune entrée exploitable dans {config.old_file}")
    if not new_records:
        raise EmptyInputError(f"Aucune entrée exploitable dans {config.new_file}")
    return old_records, new_records
