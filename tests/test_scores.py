from __future__ import annotations

from core.scores import parse_score_slots, parse_scores


def test_plain_list() -> None:
    assert parse_scores("85, 42, 10") == [85, 42, 10]


def test_invalid_tokens_are_dropped() -> None:
    assert parse_scores("85, not-a-number, 40") == [85, 40]


def test_out_of_range_values_are_dropped() -> None:
    assert parse_scores("101, -5, 0, 100") == [0, 100]


def test_leading_integer_of_a_token_is_used() -> None:
    assert parse_scores("85%, 40 (weak), about 3") == [85, 40]


def test_empty_and_blank_replies() -> None:
    assert parse_scores("") == []
    assert parse_scores(" , ,") == []


def test_custom_range() -> None:
    assert parse_scores("1, 5, 11", low=1, high=10) == [1, 5]


def test_slots_keep_positions_of_invalid_tokens() -> None:
    assert parse_score_slots("85, not-a-number, 40") == [85, None, 40]
    assert parse_score_slots("") == []
    assert parse_score_slots("7") == [7]
