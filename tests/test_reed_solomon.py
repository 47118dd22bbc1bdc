import pytest

from qrengine.bitstream import encode_data
from qrengine.functional_areas import build_function_matrix
from qrengine.galois import GF256
from qrengine.reed_solomon import (
    berlekamp_massey, bits_to_codewords, calculate_syndromes, correct_block, deinterleave,
    generate_ecc, generator_polynomial, interleave, run_error_correction, split_blocks,
)
from qrengine.tables import (
    DATA_CODEWORDS, EC_BLOCK_TABLE, ERROR_LEVELS, REMAINDER_BITS, data_capacity_bits,
    total_codewords,
)

ALL_PLANS = sorted(EC_BLOCK_TABLE)


@pytest.mark.parametrize("degree", range(1, 31))
def test_generator_polynomial_shape(degree: int) -> None:
    poly = generator_polynomial(degree)
    assert len(poly) == degree + 1
    assert poly[0] == 1
    assert all(0 <= c <= 255 for c in poly)


@pytest.mark.parametrize("degree,exponents", [
    (7, [0, 87, 229, 146, 149, 238, 102, 21]),
    (10, [0, 251, 67, 46, 61, 118, 70, 64, 94, 32, 45]),
])
def test_generator_polynomial_known_exponents(degree: int, exponents: list) -> None:
    assert [GF256.log[c] for c in generator_polynomial(degree)] == exponents


def test_generator_polynomial_rejects_negative_degree() -> None:
    with pytest.raises(ValueError):
        generator_polynomial(-1)


def test_annex_i_codewords() -> None:
    # "01234567" encoded as 1-M
    encoded = encode_data("01234567", "numeric", 1, data_capacity_bits(1, 'M'))
    result = run_error_correction(encoded.bit_stream, 1, 'M')
    assert list(result.data_codewords) == [
        16, 32, 12, 86, 97, 128, 236, 17, 236, 17, 236, 17, 236, 17, 236, 17,
    ]
    assert list(result.ec_codewords) == [165, 36, 212, 193, 237, 54, 199, 135, 44, 85]
    assert list(result.interleaved_codewords) == list(result.data_codewords) + list(result.ec_codewords)
    assert result.remainder_bits == 0


@pytest.mark.parametrize("ec_count", [7, 10, 13, 17, 22, 30])
def test_generate_ecc_length(ec_count: int) -> None:
    data = list(range(1, 20))
    assert len(generate_ecc(data, ec_count)) == ec_count


def test_generate_ecc_of_zero_block_is_zero() -> None:
    assert generate_ecc([0] * 10, 7) == (0,) * 7


def test_interleave_example() -> None:
    assert interleave([[1, 3], [2, 4]], [[5, 7], [6, 8]]) == (1, 2, 3, 4, 5, 6, 7, 8)


def test_interleave_skips_exhausted_blocks() -> None:
    assert interleave([[1, 2], [3, 4, 5]], [[6], [7]]) == (1, 3, 2, 4, 5, 6, 7)


@pytest.mark.parametrize("key", ALL_PLANS)
def test_block_plan_matches_data_capacity(key) -> None:
    assert EC_BLOCK_TABLE[key].total_data_codewords == DATA_CODEWORDS[key]


@pytest.mark.parametrize("version", range(1, 41))
def test_total_codewords_equal_for_every_level(version: int) -> None:
    totals = {
        EC_BLOCK_TABLE[(version, level)].total_data_codewords
        + EC_BLOCK_TABLE[(version, level)].total_ec_codewords
        for level in ERROR_LEVELS
    }
    assert totals == {total_codewords(version)}


@pytest.mark.parametrize("version", [1, 2, 6, 7, 14, 21, 28, 35, 40])
def test_codewords_fill_the_data_modules(version: int) -> None:
    matrix = build_function_matrix(version)
    data_modules = sum(row.count('data') for row in matrix.types)
    assert total_codewords(version) * 8 + REMAINDER_BITS[version] == data_modules


def test_split_blocks_follows_group_order() -> None:
    plan = EC_BLOCK_TABLE[(5, 'Q')]
    blocks = split_blocks(list(range(62)), plan)
    assert [len(b) for b in blocks] == [15, 15, 16, 16]
    assert blocks[0][0] == 0
    assert blocks[2][0] == 30
    assert blocks[3][-1] == 61


def test_split_blocks_rejects_wrong_length() -> None:
    with pytest.raises(ValueError):
        split_blocks(list(range(61)), EC_BLOCK_TABLE[(5, 'Q')])


def test_run_error_correction_with_two_groups() -> None:
    bit_stream = '0' * data_capacity_bits(5, 'Q')
    result = run_error_correction(bit_stream, 5, 'Q')
    assert len(result.data_blocks) == 4
    assert all(len(b) == 18 for b in result.ec_blocks)
    assert len(result.interleaved_codewords) == total_codewords(5)
    assert len(result.final_bit_stream) == total_codewords(5) * 8 + 7


def test_blocks_are_independent() -> None:
    plan = EC_BLOCK_TABLE[(5, 'Q')]
    data = [0] * 62
    data[0] = 1
    bit_stream = ''.join(format(cw, '08b') for cw in data)
    result = run_error_correction(bit_stream, 5, 'Q')
    assert result.ec_blocks[0] == generate_ecc(result.data_blocks[0], plan.ec_codewords_per_block)
    assert result.ec_blocks[1] == (0,) * 18


def test_bits_to_codewords() -> None:
    assert bits_to_codewords('0000000111111111') == (1, 255)
    with pytest.raises(ValueError):
        bits_to_codewords('0101')


HELLO_WORLD_1M = [32, 91, 11, 120, 209, 114, 220, 77, 67, 64, 236, 17, 236, 17, 236, 17]


def _received_block(errors) -> list:
    block = HELLO_WORLD_1M + list(generate_ecc(HELLO_WORLD_1M, 10))
    for position, value in errors:
        block[position] ^= value
    return block


@pytest.mark.parametrize("key", [(5, 'Q'), (10, 'M'), (40, 'H')])
def test_deinterleave_reverses_interleave(key) -> None:
    plan = EC_BLOCK_TABLE[key]
    codewords = [i % 256 for i in range(plan.total_data_codewords)]
    data_blocks = split_blocks(codewords, plan)
    ec_blocks = tuple(generate_ecc(b, plan.ec_codewords_per_block) for b in data_blocks)
    assert deinterleave(interleave(data_blocks, ec_blocks), plan) == (data_blocks, ec_blocks)


def test_deinterleave_rejects_wrong_length() -> None:
    with pytest.raises(ValueError):
        deinterleave(list(range(10)), EC_BLOCK_TABLE[(1, 'M')])


def test_syndromes_of_valid_block_are_zero() -> None:
    assert calculate_syndromes(_received_block([]), 10) == (0,) * 10
    assert any(calculate_syndromes(_received_block([(0, 1)]), 10))


def test_berlekamp_massey_degree_counts_errors() -> None:
    syndromes = calculate_syndromes(_received_block([(2, 0x10), (20, 0xA5)]), 10)
    locator = berlekamp_massey(syndromes)
    assert locator[0] == 1
    assert len(locator) == 3


def test_correct_block_without_errors() -> None:
    block = _received_block([])
    result = correct_block(block, 10)
    assert result.is_corrected
    assert result.codewords == tuple(block)
    assert result.error_count == 0


@pytest.mark.parametrize("errors", [
    [(3, 0x55)],
    [(0, 0xFF), (25, 0x01)],
    [(1, 0x80), (8, 0x3C), (15, 0x02), (19, 0x99), (24, 0x7E)],
])
def test_correct_block_repairs_up_to_half_the_ec_codewords(errors) -> None:
    result = correct_block(_received_block(errors), 10)
    assert result.is_corrected
    assert result.codewords == tuple(_received_block([]))
    assert result.error_positions == tuple(sorted(p for p, _ in errors))


def test_correct_block_gives_up_beyond_capacity() -> None:
    errors = [(i, 0x5A) for i in (0, 3, 6, 9, 12, 15)]
    block = _received_block(errors)
    result = correct_block(block, 10)
    assert not result.is_corrected
    assert result.codewords == tuple(block)
