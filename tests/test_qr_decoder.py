import pytest

from qrengine import DecodeFailure, DecodedSymbol, decode_symbol, make_qr
from qrengine.bitstream import encode_alphanumeric, encode_numeric
from qrengine.functional_areas import (
    build_function_matrix, format_info_positions, version_info_positions,
)
from qrengine.info_coder import decode_format_info, version_info
from qrengine.placement import data_module_coords
from qrengine.qr_decoder import (
    FORMAT_UNREADABLE, INVALID_DATA, UNCORRECTABLE, UNSUPPORTED_MODE, VERSION_MISMATCH,
    DecodedSegment, decode_segments,
)
from qrengine.reed_solomon import bits_to_codewords

ROUND_TRIP_CASES = [
    ("01234567", 'H', 1),
    ("HELLO WORLD", 'Q', 1),
    ("Hello, world!", 'M', 2),
    ("https://example.com/qr?id=12345", 'L', 7),
    ("THE QUICK BROWN FOX JUMPS OVER THE LAZY DOG", 'H', 27),
    ("año 2024 · ñandú", 'Q', 'auto'),
]


def _codewords(bits: str):
    bits += '0' * (-len(bits) % 8)
    return bits_to_codewords(bits)


def _damage(symbol, codeword_indices):
    grid = [list(row) for row in symbol.matrix]
    coords = data_module_coords(build_function_matrix(symbol.version))
    for index in codeword_indices:
        for r, c in coords[index * 8:index * 8 + 8]:
            grid[r][c] ^= 1
    return grid


def _write_bits(grid, positions, value: int) -> None:
    for i, (r, c) in enumerate(positions):
        grid[r][c] = (value >> i) & 1


@pytest.mark.parametrize("text,ecc,version", ROUND_TRIP_CASES)
@pytest.mark.parametrize("mask", [2, 5])
def test_round_trip(text: str, ecc: str, version, mask: int) -> None:
    symbol = make_qr(text, ecc=ecc, version=version, mask=mask)
    result = decode_symbol(symbol.matrix)
    assert isinstance(result, DecodedSymbol)
    assert result.text == text
    assert result.designator == symbol.designator
    assert result.mask_pattern == mask
    assert result.corrected_errors == 0


def test_decoded_stages() -> None:
    result = decode_symbol(make_qr("HELLO", version=7).matrix)
    assert [stage.name for stage in result.intermediate_stages] == [
        'format_info', 'version_info', 'unmasked', 'codewords',
        'error_correction', 'data_codewords', 'segments',
    ]
    assert result.stage('version_info').version == 7
    assert result.segments == (DecodedSegment('alphanumeric', 5, 'HELLO'),)
    with pytest.raises(KeyError):
        result.stage('missing')


def test_unmasked_stage_matches_placed_matrix() -> None:
    symbol = make_qr("HELLO WORLD", ecc='Q', mask=3)
    result = decode_symbol(symbol.matrix)
    placed = symbol.stage('data_placement')
    unmasked = result.stage('unmasked')
    data = [(r, c) for r, row in enumerate(placed.types) for c, t in enumerate(row) if t == 'data']
    assert all(unmasked.modules[r][c] == placed.modules[r][c] for r, c in data)


def test_corrects_damaged_codewords_in_single_block() -> None:
    symbol = make_qr("HELLO WORLD", ecc='M', version=1)
    # 1-M: one block with 10 EC codewords
    result = decode_symbol(_damage(symbol, [0, 4, 9, 17, 25]))
    assert result.text == "HELLO WORLD"
    assert result.corrected_errors == 5
    assert result.stage('error_correction')[0].error_positions == (0, 4, 9, 17, 25)


def test_corrects_damaged_codewords_in_every_block() -> None:
    symbol = make_qr("MULTI BLOCK SYMBOL 12345", ecc='Q', version=5)
    # 5-Q: four blocks with 18 EC codewords; the first 36 interleaved
    # codewords hit each block nine times
    result = decode_symbol(_damage(symbol, range(36)))
    assert result.text == "MULTI BLOCK SYMBOL 12345"
    assert result.corrected_errors == 36
    assert [c.error_count for c in result.stage('error_correction')] == [9, 9, 9, 9]


def test_too_many_damaged_codewords() -> None:
    symbol = make_qr("HELLO", ecc='H', version=1)
    result = decode_symbol(_damage(symbol, range(12)))
    assert isinstance(result, DecodeFailure)
    assert result.reason == UNCORRECTABLE
    assert [stage.name for stage in result.intermediate_stages][-1] == 'error_correction'


def test_damaged_format_copy_is_tolerated() -> None:
    symbol = make_qr("HELLO WORLD", ecc='Q', mask=6)
    grid = [list(row) for row in symbol.matrix]
    first, _ = format_info_positions(len(grid))
    for r, c in first[:5]:
        grid[r][c] ^= 1
    result = decode_symbol(grid)
    assert result.text == "HELLO WORLD"
    assert result.stage('format_info').error_bits == 0


def test_unreadable_format_information() -> None:
    symbol = make_qr("HELLO WORLD")
    grid = [list(row) for row in symbol.matrix]
    unreadable = next(w for w in range(1 << 15) if decode_format_info(w).error_bits < 0)
    first, second = format_info_positions(len(grid))
    _write_bits(grid, first, unreadable)
    _write_bits(grid, second, unreadable)
    result = decode_symbol(grid)
    assert isinstance(result, DecodeFailure)
    assert result.reason == FORMAT_UNREADABLE
    assert result.message.startswith(FORMAT_UNREADABLE)


def test_version_information_must_match_size() -> None:
    symbol = make_qr("HELLO", version=7)
    grid = [list(row) for row in symbol.matrix]
    bottom_left, top_right = version_info_positions(len(grid))
    _write_bits(grid, bottom_left, version_info(8))
    _write_bits(grid, top_right, version_info(8))
    result = decode_symbol(grid)
    assert isinstance(result, DecodeFailure)
    assert result.reason == VERSION_MISMATCH


@pytest.mark.parametrize("grid", [
    [[0] * 22 for _ in range(22)],
    [[0] * 21 for _ in range(20)] + [[0] * 20],
    [[2] * 21 for _ in range(21)],
    [[None] * 21 for _ in range(21)],
])
def test_rejects_malformed_grid(grid) -> None:
    with pytest.raises(ValueError):
        decode_symbol(grid)


def test_decode_segments_annex_i() -> None:
    codewords = [0x10, 0x20, 0x0C, 0x56, 0x61, 0x80] + [0xEC, 0x11] * 5
    result = decode_segments(codewords, 1)
    assert result.error is None
    assert result.segments == (DecodedSegment('numeric', 8, '01234567'),)


def test_decode_segments_multiple_modes() -> None:
    bits = ('0001' + format(3, '010b') + encode_numeric('123')
            + '0010' + format(2, '09b') + encode_alphanumeric('AB') + '0000')
    result = decode_segments(_codewords(bits) + (0xEC,), 1)
    assert result.text == '123AB'
    assert [s.mode for s in result.segments] == ['numeric', 'alphanumeric']


def test_decode_segments_kanji() -> None:
    bits = '1000' + format(2, '08b') + '0110110011111' + '1101010101010' + '0000'
    result = decode_segments(_codewords(bits), 1)
    assert result.segments == (DecodedSegment('kanji', 2, '点茗'),)


def test_decode_segments_latin1_bytes() -> None:
    bits = '0100' + format(2, '08b') + format(0xE9, '08b') + format(0x41, '08b') + '0000'
    assert decode_segments(_codewords(bits), 1).text == 'éA'


def test_decode_segments_terminator_may_be_cut_short() -> None:
    # 1-H capacity is 72 bits: 4 + 10 + 10 * 5 + 7 leaves one bit, no room for a terminator
    bits = '0001' + format(17, '010b') + encode_numeric('1' * 17) + '0'
    assert len(bits) == 72
    assert decode_segments(bits_to_codewords(bits), 1).text == '1' * 17


@pytest.mark.parametrize("bits,reason", [
    ('0111' + '00000001', UNSUPPORTED_MODE),
    ('0001' + format(3, '010b') + format(1000, '010b'), INVALID_DATA),
    ('0010' + format(1, '09b') + format(45, '06b'), INVALID_DATA),
    ('0100' + format(200, '08b') + format(0x41, '08b'), INVALID_DATA),
])
def test_decode_segments_stops_on_bad_data(bits: str, reason: str) -> None:
    result = decode_segments(_codewords(bits), 1)
    assert result.error == reason
    assert result.segments == ()
