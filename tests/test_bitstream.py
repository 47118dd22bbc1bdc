import pytest

from qrengine.bitstream import (
    add_pad_codewords, add_terminator, encode_alphanumeric, encode_byte, encode_data,
    encode_numeric, pad_to_byte,
)


def test_numeric_scenario_version_1_h() -> None:
    encoded = encode_data("01234567", "numeric", 1, 72)
    assert encoded.mode_indicator == '0001'
    assert encoded.character_count == '0000001000'
    assert encoded.data == '000000110001010110011000011'
    assert encoded.total_bits == 72
    # 41 bits + 4 terminator + 3 byte padding, then pad codewords
    assert encoded.bit_stream[41:48] == '0000000'
    assert encoded.bit_stream[48:] == '11101100' '00010001' '11101100'


def test_alphanumeric_pairs() -> None:
    assert encode_alphanumeric("AC-42") == '00111001110' '11100111001' '000010'


def test_byte_mode_uses_utf8() -> None:
    assert encode_byte("é") == '11000011' '10101001'
    assert encode_byte("A") == '01000001'


def test_numeric_partial_groups() -> None:
    assert encode_numeric("1") == '0001'
    assert encode_numeric("12") == '0001100'
    assert encode_numeric("123") == '0001111011'


def test_count_indicator_width_changes_with_version() -> None:
    assert len(encode_data("AB", "alphanumeric", 9, 1000).character_count) == 9
    assert len(encode_data("AB", "alphanumeric", 10, 1000).character_count) == 11
    assert len(encode_data("AB", "alphanumeric", 27, 1000).character_count) == 13
    assert len(encode_data("ab", "byte", 10, 1000).character_count) == 16


def test_terminator_is_truncated_at_capacity() -> None:
    assert add_terminator('1' * 70, 72) == '1' * 70 + '00'
    assert add_terminator('1' * 72, 72) == '1' * 72
    assert add_terminator('1', 72) == '10000'


def test_pad_to_byte() -> None:
    assert pad_to_byte('1') == '10000000'
    assert pad_to_byte('1' * 8) == '1' * 8


def test_pad_codewords_alternate_and_stop_at_capacity() -> None:
    assert add_pad_codewords('', 32) == '11101100' '00010001' '11101100' '00010001'
    assert add_pad_codewords('', 12) == '11101100' '0001'
    assert add_pad_codewords('1' * 8, 8) == '1' * 8


@pytest.mark.parametrize("text,mode,capacity", [
    ("1" * 41, "numeric", 152),
    ("A" * 25, "alphanumeric", 152),
    ("a" * 17, "byte", 152),
])
def test_stream_always_fills_capacity(text: str, mode: str, capacity: int) -> None:
    encoded = encode_data(text, mode, 1, capacity)
    assert len(encoded.bit_stream) == capacity
    assert len(encoded.bit_stream) % 8 == 0


def test_overflow_raises() -> None:
    with pytest.raises(ValueError):
        encode_data("a" * 18, "byte", 1, 152)


def test_kanji_mode_is_not_packed() -> None:
    with pytest.raises(ValueError):
        encode_data("龍", "kanji", 1, 152)
