# tests/test_lexical.py

import pytest

from conftest import make_record
from gallery_search.search import (
    ContainsMatch,
    ExactMatch,
    FuzzyMatch,
    PrefixMatch,
    is_whole_word_match,
    string_similarity,
    text_score,
)


def test_exact_mode_scenario():
    record = make_record("img/1", labels="Dog,Cat")
    scorer = ExactMatch().score

    assert text_score(record, ["dog"], scorer) == 1.0
    assert text_score(record, ["doghouse"], scorer) == 0.0


@pytest.mark.parametrize(
    "token, label, expected",
    [
        ("handbag", "handbag", 1.0),
        ("hand", "handbag", 0.7 + 0.3 * (4 / 7)),
        ("handbag", "hand", 0.8),
        ("h", "handbag", 0.0),
        ("handbag", "h", 0.0),
        ("bag", "handbag", 0.0),
    ],
)
def test_prefix_scores(token, label, expected):
    assert PrefixMatch().score(token, label) == pytest.approx(expected)


def test_prefix_mode_scenario():
    record = make_record("img/1", labels="Handbag")
    assert text_score(record, ["hand"], PrefixMatch().score) == pytest.approx(0.8714, abs=1e-4)


@pytest.mark.parametrize(
    "token, label, expected",
    [
        ("cat", "cat", 1.0),
        ("bag", "handbag", 0.7),
        ("cats", "cat", 0.5),
        ("cat", "a", 0.0),
        ("dog", "cat", 0.0),
    ],
)
def test_contains_scores(token, label, expected):
    assert ContainsMatch().score(token, label) == pytest.approx(expected)


@pytest.mark.parametrize(
    "token, label, expected",
    [
        ("sunset", "sunset", 1.0),
        ("hand", "handbag", 0.7 + 0.2 * (4 / 7)),
        ("bags", "bag", 0.6),
        ("sunset", "beach sunset", 0.8),
        ("sunsex", "sunset", 0.0),
        ("sunset", "redsunsets", 0.3),
        ("dog", "cat", 0.0),
    ],
)
def test_fuzzy_scores(token, label, expected):
    assert FuzzyMatch().score(token, label) == pytest.approx(expected)


def test_fuzzy_typo_below_threshold():
    """A one-letter typo in a six letter label stays under the 0.85 similarity cut-off"""
    assert string_similarity("sunset", "sunst") == pytest.approx(5 / 6)
    assert FuzzyMatch().score("sunst", "sunset") == 0.0


def test_fuzzy_similarity_threshold_is_strict():
    label = "abcdefghijklmnopqrst"
    at_threshold = "abcdefghijklmnopqxyz"  # 3 edits over 20 chars -> exactly 0.85
    above_threshold = "abcdefghijklmnopqryz"  # 2 edits -> 0.9

    assert string_similarity(label, at_threshold) == 0.85
    assert FuzzyMatch().score(at_threshold, label) == 0.0
    assert FuzzyMatch().score(above_threshold, label) == 0.4


def test_unmatched_tokens_still_count_in_average():
    record = make_record("img/1", labels="dog")
    assert text_score(record, ["dog", "zebra"], ExactMatch().score) == 0.5


def test_best_label_wins_per_token():
    record = make_record("img/1", labels="handbag,hand")
    assert text_score(record, ["hand"], PrefixMatch().score) == 1.0


def test_labels_are_trimmed_and_lowercased():
    record = make_record("img/1", labels=" Dog , CAT ,, ")

    assert record.label_list() == ["dog", "cat"]
    assert text_score(record, ["cat"], ExactMatch().score) == 1.0


@pytest.mark.parametrize("labels, tokens", [("", ["dog"]), ("  ", ["dog"]), ("dog", [])])
def test_empty_inputs_score_zero(labels, tokens):
    assert text_score(make_record("img/1", labels=labels), tokens, FuzzyMatch().score) == 0.0


def test_whole_word_match_escapes_token():
    assert is_whole_word_match("beach sunset", "sunset")
    assert not is_whole_word_match("sunsets", "sunset")
    assert not is_whole_word_match("axb", "a.b")


def test_string_similarity_edge_cases():
    assert string_similarity("", "") == 1.0
    assert string_similarity("abc", "") == 0.0
    assert string_similarity("kitten", "sitting") == pytest.approx(4 / 7)
