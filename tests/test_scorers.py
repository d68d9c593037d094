"""Tests du score de similarité entre noms."""

import itertools

import pytest

from lapasserelle.matching.scorers import TOKEN_SET_CAP, get_scorer, name_similarity, token_set_similarity

NAMES = ["steel-box", "Steel-Box", "steel-box-large", "red-steel-box", "blue-steel-box", "widget", "", "a--b"]


def test_identical_case_insensitive() -> None:
    assert name_similarity("abc", "ABC") == 1.0


def test_substring() -> None:
    assert name_similarity("steel-box", "steel-box-large") == 0.9
    assert name_similarity("steel-box-large", "steel-box") == 0.9


def test_jaccard_over_words() -> None:
    assert name_similarity("red-steel-box", "blue-steel-box") == 0.5
    assert name_similarity("a-b", "c-d") == 0.0


def test_empty_names() -> None:
    assert name_similarity("", "abc") == 0.0
    assert name_similarity("abc", "") == 0.0
    assert name_similarity("", "") == 0.0


@pytest.mark.parametrize("scorer", [name_similarity, token_set_similarity])
def test_bounds_and_symmetry(scorer) -> None:
    for a, b in itertools.product(NAMES, repeat=2):
        score = scorer(a, b)
        assert 0.0 <= score <= 1.0
        assert score == scorer(b, a)


@pytest.mark.parametrize("scorer", [name_similarity, token_set_similarity])
def test_self_similarity(scorer) -> None:
    for name in NAMES:
        if name:
            assert scorer(name, name) == 1.0


def test_token_set_fallback_more_lenient() -> None:
    jaccard = name_similarity("steel-box-red", "steel-box-blue")
    token_set = token_set_similarity("steel-box-red", "steel-box-blue")
    assert jaccard == 0.5
    assert jaccard < token_set < 1.0


def test_token_set_word_subset_is_not_exact() -> None:
    # "red-box" n'est pas une sous-chaîne de "red-steel-box" mais ses mots y sont tous
    assert "red-box" not in "red-steel-box"
    score = token_set_similarity("red-box", "red-steel-box")
    assert score == TOKEN_SET_CAP
    assert score < 0.9
    assert token_set_similarity("red-steel-box", "red-box") == score


def test_token_set_same_words_reordered() -> None:
    assert token_set_similarity("box-steel-red", "red-steel-box") == 1.0


def test_get_scorer() -> None:
    assert get_scorer("jaccard") is name_similarity
    assert get_scorer("token_set") is token_set_similarity
    with pytest.raises(ValueError, match="inconnue"):
        get_scorer("levenshtein")
