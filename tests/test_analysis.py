import logging

import pytest

from qrengine.analysis import (
    EMPTY_INPUT_NOTICE, KANJI_DOWNGRADE_NOTICE, analyze_data, compare_encoding_costs,
    count_characters, data_bit_length, detect_character_mode, select_mode,
)

KANJI = '龍'


@pytest.mark.parametrize("char,mode", [
    ('0', 'numeric'),
    ('9', 'numeric'),
    ('A', 'alphanumeric'),
    (' ', 'alphanumeric'),
    ('$', 'alphanumeric'),
    (':', 'alphanumeric'),
    ('a', 'byte'),
    ('#', 'byte'),
    ('é', 'byte'),
    (KANJI, 'kanji'),
])
def test_detect_character_mode(char: str, mode: str) -> None:
    assert detect_character_mode(char) == mode


@pytest.mark.parametrize("text,mode", [
    ("0123", 'numeric'),
    ("HELLO WORLD", 'alphanumeric'),
    ("A1B2", 'alphanumeric'),
    ("hello", 'byte'),
    ("Hello 123", 'byte'),
    (KANJI * 2, 'kanji'),
    (KANJI + "1", 'byte'),
])
def test_select_mode(text: str, mode: str) -> None:
    assert select_mode(text) == mode


def test_analyze_numeric() -> None:
    result = analyze_data("01234567", "H")
    assert result.mode == 'numeric'
    assert result.minimum_version == 1
    assert result.character_count == 8
    assert result.is_valid
    assert result.notices == ()


@pytest.mark.parametrize("text,version", [
    ("1" * 41, 1),
    ("1" * 42, 2),
    ("A" * 25, 1),
    ("A" * 26, 2),
    ("a" * 17, 1),
    ("a" * 18, 2),
])
def test_minimum_version_boundaries_at_level_l(text: str, version: int) -> None:
    assert analyze_data(text, 'L').minimum_version == version


def test_byte_mode_counts_utf8_bytes() -> None:
    result = analyze_data("ñandú", 'M')
    assert result.mode == 'byte'
    assert result.character_count == 7
    assert count_characters("ñ", 'byte') == 2
    assert data_bit_length("ñ", 'byte') == 16


def test_largest_byte_payload_at_version_40() -> None:
    assert analyze_data("a" * 2953, 'L').minimum_version == 40
    assert analyze_data("a" * 2953, 'L').is_valid


def test_data_too_large() -> None:
    result = analyze_data("a" * 2954, 'L')
    assert not result.is_valid
    assert result.minimum_version == 40


def test_kanji_downgrades_to_byte(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="qrengine.analysis"):
        result = analyze_data(KANJI * 2, 'M')
    assert result.mode == 'byte'
    assert result.character_count == 6
    assert result.is_valid
    assert result.notices == (KANJI_DOWNGRADE_NOTICE,)
    assert KANJI_DOWNGRADE_NOTICE in caplog.text


def test_empty_input() -> None:
    result = analyze_data("", 'M')
    assert not result.is_valid
    assert result.mode == 'byte'
    assert result.minimum_version == 1
    assert result.notices == (EMPTY_INPUT_NOTICE,)


def test_invalid_level() -> None:
    with pytest.raises(ValueError):
        analyze_data("123", 'X')


@pytest.mark.parametrize("text,bits", [
    ("1", 4), ("12", 7), ("123", 10), ("1234", 14), ("12345678", 27),
])
def test_numeric_data_bits(text: str, bits: int) -> None:
    assert data_bit_length(text, 'numeric') == bits


def test_compare_encoding_costs_numeric() -> None:
    costs = compare_encoding_costs("12345", 1)
    assert list(costs) == ['numeric', 'alphanumeric', 'byte']
    assert costs['numeric'].total == 4 + 10 + 17
    assert costs['alphanumeric'].total == 4 + 9 + 28
    assert costs['byte'].total == 4 + 8 + 40


def test_compare_encoding_costs_uses_version_band() -> None:
    costs = compare_encoding_costs("HELLO", 10)
    assert list(costs) == ['alphanumeric', 'byte']
    assert costs['alphanumeric'].character_count == 11
    assert costs['byte'].character_count == 16


def test_compare_encoding_costs_byte_only() -> None:
    assert list(compare_encoding_costs("hello", 1)) == ['byte']
