"""Index de recherche sur les URL du nouveau site (par identifiant, par nom)."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from lapasserelle.matching.schema import Record
from lapasserelle.normalize import extract_product_name


@dataclass(frozen=True)
class Indices:
    """Index construits une fois, en lecture seule pendant le matching."""

    by_identifier: Mapping[str, Record]
    by_name: Mapping[str, tuple[Record, ...]]


def build_identifier_index(records: Iterable[Record]) -> dict[str, Record]:
    """
    Construit l'index identifiant -> Record.

    Les identifiants vides sont ignorés. En cas de doublon, le dernier Record l'emporte.
    """
    index: dict[str, Record] = {}
    for record in records:
        if record.identifier:
            index[record.identifier] = record
    return index


def build_name_index(records: Iterable[Record], product_marker: str = "product") -> dict[str, list[Record]]:
    """
    Construit l'index nom extrait -> liste de Records, dans l'ordre d'insertion.

    Les Records dont le nom n'est pas extractible sont ignorés.
    """
    index: dict[str, list[Record]] = {}
    for record in records:
        name = extract_product_name(record.url, product_marker).name
        if not name:
            continue
        if name not in index:
            index[name] = []
        index[name].append(record)
    return index


def build_indices(records: list[Record], product_marker: str = "product") -> Indices:
    """Construit les deux index à partir de la liste du nouveau site."""
    by_identifier = build_identifier_index(records)
    by_name = {k: tuple(v) for k, v in build_name_index(records, product_marker).items()}
    return Indices(
        by_identifier=MappingProxyType(by_identifier),
        by_name=MappingProxyType(by_name),
    )
