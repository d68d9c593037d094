"""Tests du module report."""

from pathlib import Path

import pytest

from lapasserelle.matching.schema import CategoryEntry, LoopEntry, MappingOutcome, MatchResult
from lapasserelle.report import (
    build_mapping_df,
    match_type_distribution,
    print_batch_progress,
    print_report_console,
    write_loops_csv,
    write_mapping_csv,
)


@pytest.fixture
def sample_outcome() -> MappingOutcome:
    return MappingOutcome(
        mappings=[
            MatchResult("/product/widget-5", "/products/widget", "widget", "widget", "sku_match", "1.00", "123"),
            MatchResult("/product/steel-box", "/products/steel-box", "steel-box", "steel-box", "exact_match", "1.00"),
            MatchResult("/product/box-pro", "/products/box", "box-pro", "box", "high_confidence_match", "0.90"),
            MatchResult("/product/lid", "/products/lid", "lid", "lid", "exact_match", "1.00"),
        ],
        unmapped=["/product/unknown-thing"],
        categories=[
            CategoryEntry(
                "/product-category/corrugate",
                "https://example.com/product-category/corrugated-boxes/",
                "category_redirect",
                "1.00",
            ),
            CategoryEntry("/product-category/misc", category="product-category/misc"),
        ],
        loops=[LoopEntry("/product/abc", "/product/abc", "identical_product", "abc", "abc")],
        dropped=["/about-us"],
    )


def test_build_mapping_df_includes_resolved_categories_only(sample_outcome: MappingOutcome) -> None:
    df = build_mapping_df(sample_outcome)
    assert len(df) == 5
    assert df.iloc[-1]["match_type"] == "category_redirect"
    assert df.iloc[-1]["old_name"] == ""
    assert "/product-category/misc" not in df["old_url"].tolist()


def test_write_mapping_csv_format(tmp_path: Path) -> None:
    outcome = MappingOutcome(
        mappings=[MatchResult("/product/a", "/products/a", "a", "a", "exact_match", "1.00")],
        categories=[
            CategoryEntry(
                "/product-category/corrugate",
                "https://example.com/product-category/corrugated-boxes/",
                "category_redirect",
                "1.00",
            )
        ],
    )
    path = write_mapping_csv(outcome, tmp_path / "out" / "mapping.csv")
    assert path.read_text(encoding="utf-8") == (
        "old_url,new_url,old_name,new_name,match_type,similarity,identifier\n"
        '"/product/a","/products/a","a","a","exact_match","1.00",""\n'
        '"/product-category/corrugate","https://example.com/product-category/corrugated-boxes/",'
        '"","","category_redirect","1.00",""\n'
    )


def test_write_mapping_csv_escapes_quotes_and_commas(tmp_path: Path) -> None:
    outcome = MappingOutcome(
        mappings=[MatchResult('/product/a"b', "/products/a,b", 'a"b', "a,b", "low_confidence_match", "0.55")]
    )
    path = write_mapping_csv(outcome, tmp_path / "mapping.csv")
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[1] == '"/product/a""b","/products/a,b","a""b","a,b","low_confidence_match","0.55",""'


def test_write_mapping_csv_empty(tmp_path: Path) -> None:
    path = write_mapping_csv(MappingOutcome(), tmp_path / "mapping.csv")
    assert path.read_text(encoding="utf-8") == "old_url,new_url,old_name,new_name,match_type,similarity,identifier\n"


def test_write_loops_csv(sample_outcome: MappingOutcome, tmp_path: Path) -> None:
    path = write_loops_csv(sample_outcome, tmp_path / "loops.csv")
    assert path is not None
    assert path.read_text(encoding="utf-8") == (
        "old_url,new_url,reason,old_name,new_name,identifier\n"
        '"/product/abc","/product/abc","identical_product","abc","abc",""\n'
    )


def test_write_loops_csv_skipped_without_loops(tmp_path: Path) -> None:
    assert write_loops_csv(MappingOutcome(), tmp_path / "loops.csv") is None
    assert not (tmp_path / "loops.csv").exists()


def test_match_type_distribution(sample_outcome: MappingOutcome) -> None:
    assert match_type_distribution(sample_outcome.mappings) == [
        ("exact_match", 2, 50),
        ("sku_match", 1, 25),
        ("high_confidence_match", 1, 25),
    ]


def test_print_report_console(sample_outcome: MappingOutcome, capsys: pytest.CaptureFixture) -> None:
    print_report_console(sample_outcome)
    out = capsys.readouterr().out
    assert "LaPasserelle Report" in out
    assert "Redirigées (prod.):  4" in out
    assert "Boucles évitées:     1" in out
    assert "Ignorées:            1" in out
    assert "exact_match: 2 (50%)" in out
    assert "identifiant: 123" in out
    assert "/product/unknown-thing" in out


def test_print_batch_progress(sample_outcome: MappingOutcome, capsys: pytest.CaptureFixture) -> None:
    print_batch_progress(2, 3, sample_outcome)
    out = capsys.readouterr().out
    assert "Lot 2/3" in out
    assert "Redirigées:  4" in out
