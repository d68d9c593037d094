"""Tests des index du nouveau site."""

import pytest

from lapasserelle.matching.index import build_identifier_index, build_indices, build_name_index
from lapasserelle.matching.schema import Record


@pytest.fixture
def new_records() -> list[Record]:
    return [
        Record("A1", "/products/widget"),
        Record("", "/products/widget-2"),
        Record("A1", "/products/gadget"),
        Record("B2", "/"),
    ]


def test_identifier_index_last_writer_wins(new_records: list[Record]) -> None:
    index = build_identifier_index(new_records)
    assert list(index) == ["A1", "B2"]
    assert index["A1"] == Record("A1", "/products/gadget")


def test_identifier_index_skips_empty(new_records: list[Record]) -> None:
    assert "" not in build_identifier_index(new_records)


def test_name_index_insertion_order(new_records: list[Record]) -> None:
    index = build_name_index(new_records)
    assert list(index) == ["widget", "gadget"]
    assert index["widget"] == [Record("A1", "/products/widget"), Record("", "/products/widget-2")]


def test_name_index_skips_unextractable(new_records: list[Record]) -> None:
    index = build_name_index(new_records)
    assert all(Record("B2", "/") not in v for v in index.values())


def test_build_indices_read_only(new_records: list[Record]) -> None:
    indices = build_indices(new_records)
    assert indices.by_name["widget"][0].url == "/products/widget"
    with pytest.raises(TypeError):
        indices.by_identifier["Z9"] = Record("Z9", "/x")  # type: ignore[index]
    with pytest.raises(TypeError):
        indices.by_name["new"] = ()  # type: ignore[index]
