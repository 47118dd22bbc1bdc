# -*- coding: utf-8 -*-
"""
Reed-Solomon Error Correction Module

This module produces the error correction codewords of a QR Code symbol
according to ISO/IEC 18004:2015 section 7.5. The data codewords are split
into blocks following the (version, level) block plan, each block gets its
own Reed-Solomon codewords, and the blocks are interleaved into the final
codeword sequence. The decoding half reverses this: de-interleave the
read-back codewords and repair each block with the Berlekamp-Massey
algorithm, Chien search and Forney's formula.

Functions:
    generator_polynomial: Build the generator polynomial for n EC codewords
    generate_ecc: Compute the EC codewords of one block
    split_blocks: Slice data codewords into blocks per the block plan
    interleave: Column-major interleaving of data and EC blocks
    run_error_correction: Complete error correction stage
    deinterleave: Split read-back codewords into their data and EC blocks
    calculate_syndromes: Syndromes of a received block
    berlekamp_massey: Error locator polynomial from the syndromes
    find_error_positions: Chien search over the locator polynomial
    error_magnitudes: Forney error values at the located positions
    correct_block: Locate and repair errors in one received block
"""

import logging
from functools import lru_cache
from typing import List, NamedTuple, Optional, Sequence, Tuple

from .galois import GF256, GaloisField, gf_divide, gf_multiply
from .tables import EC_BLOCK_TABLE, REMAINDER_BITS, ECBlockPlan

logger = logging.getLogger(__name__)


class ErrorCorrectionData(NamedTuple):
    """Output of the error correction stage."""
    data_codewords: Tuple[int, ...]
    data_blocks: Tuple[Tuple[int, ...], ...]
    ec_blocks: Tuple[Tuple[int, ...], ...]
    interleaved_codewords: Tuple[int, ...]
    remainder_bits: int

    @property
    def ec_codewords(self) -> Tuple[int, ...]:
        return tuple(cw for block in self.ec_blocks for cw in block)

    @property
    def final_bit_stream(self) -> str:
        """Interleaved codewords MSB-first, followed by the remainder bits."""
        bits = ''.join(format(cw, '08b') for cw in self.interleaved_codewords)
        return bits + '0' * self.remainder_bits


def _multiply_polynomials(a: Sequence[int], b: Sequence[int], field: GaloisField) -> List[int]:
    result = [0] * (len(a) + len(b) - 1)
    for i, x in enumerate(a):
        for j, y in enumerate(b):
            result[i + j] ^= gf_multiply(x, y, field)
    return result


@lru_cache(maxsize=None)
def _cached_generator(degree: int) -> Tuple[int, ...]:
    return tuple(_build_generator(degree, GF256))


def _build_generator(degree: int, field: GaloisField) -> List[int]:
    poly = [1]
    for i in range(degree):
        poly = _multiply_polynomials(poly, [1, field.exp[i]], field)
    return poly


def generator_polynomial(degree: int, field: GaloisField = GF256) -> Tuple[int, ...]:
    """
    Build the Reed-Solomon generator polynomial of the given degree.

    The polynomial is (x - a^0)(x - a^1)...(x - a^(degree-1)); coefficients
    are returned highest power first, so the leading coefficient is 1 and
    the result holds ``degree + 1`` values.

    Args:
        degree (int): Number of error correction codewords

    Returns:
        Tuple[int, ...]: Generator coefficients, each in 0..255

    Example:
        >>> generator_polynomial(2)
        (1, 3, 2)
    """
    if degree < 0:
        raise ValueError(f"Invalid generator degree: {degree}")
    if field is GF256:
        return _cached_generator(degree)
    return tuple(_build_generator(degree, field))


def generate_ecc(data: Sequence[int], ec_count: int, field: GaloisField = GF256) -> Tuple[int, ...]:
    """
    Compute the error correction codewords of a single block.

    The data polynomial is multiplied by x^n (n zero codewords appended) and
    divided by the generator polynomial; the remainder is the EC sequence.

    Args:
        data (Sequence[int]): Data codewords of one block
        ec_count (int): Number of EC codewords to produce

    Returns:
        Tuple[int, ...]: ``ec_count`` error correction codewords
    """
    generator = generator_polynomial(ec_count, field)
    remainder = list(data) + [0] * ec_count
    for i in range(len(data)):
        coef = remainder[i]
        if coef != 0:
            for j, g in enumerate(generator):
                remainder[i + j] ^= gf_multiply(g, coef, field)
    return tuple(remainder[len(data):])


def split_blocks(codewords: Sequence[int], plan: ECBlockPlan) -> Tuple[Tuple[int, ...], ...]:
    """Slice the data codewords sequentially into the plan's blocks, group by group."""
    blocks = []
    offset = 0
    for group in plan.groups:
        for _ in range(group.block_count):
            blocks.append(tuple(codewords[offset:offset + group.data_codewords]))
            offset += group.data_codewords
    if offset != len(codewords):
        raise ValueError(
            f"Block plan holds {offset} data codewords, got {len(codewords)}"
        )
    return tuple(blocks)


def _interleave_blocks(blocks: Sequence[Sequence[int]]) -> List[int]:
    result = []
    longest = max((len(b) for b in blocks), default=0)
    for position in range(longest):
        for block in blocks:
            if position < len(block):
                result.append(block[position])
    return result


def interleave(data_blocks: Sequence[Sequence[int]], ec_blocks: Sequence[Sequence[int]]) -> Tuple[int, ...]:
    """
    Interleave data blocks, then EC blocks, column by column.

    Data blocks may differ in length; a block that is exhausted is skipped
    for the remaining columns.

    Example:
        >>> interleave([[1, 3], [2, 4]], [[5, 7], [6, 8]])
        (1, 2, 3, 4, 5, 6, 7, 8)
    """
    return tuple(_interleave_blocks(data_blocks) + _interleave_blocks(ec_blocks))


def bits_to_codewords(bit_stream: str) -> Tuple[int, ...]:
    if len(bit_stream) % 8:
        raise ValueError(f"Bit-stream length {len(bit_stream)} is not a multiple of 8")
    return tuple(int(bit_stream[i:i + 8], 2) for i in range(0, len(bit_stream), 8))


def run_error_correction(bit_stream: str, version: int, level: str,
                         field: GaloisField = GF256) -> ErrorCorrectionData:
    """
    Run the complete error correction stage on a padded data bit-stream.

    Args:
        bit_stream (str): Data bit-stream filling the symbol's data capacity
        version (int): QR Code version (1-40)
        level (str): Error correction level ('L', 'M', 'Q', 'H')

    Returns:
        ErrorCorrectionData: Blocks, interleaved codewords and remainder bits
    """
    plan = EC_BLOCK_TABLE[(version, level)]
    codewords = bits_to_codewords(bit_stream)
    data_blocks = split_blocks(codewords, plan)
    ec_blocks = tuple(generate_ecc(block, plan.ec_codewords_per_block, field) for block in data_blocks)
    logger.debug("Version %d-%s: %d blocks, %d EC codewords per block",
                 version, level, len(data_blocks), plan.ec_codewords_per_block)
    return ErrorCorrectionData(
        data_codewords=codewords,
        data_blocks=data_blocks,
        ec_blocks=ec_blocks,
        interleaved_codewords=interleave(data_blocks, ec_blocks),
        remainder_bits=REMAINDER_BITS[version],
    )


class BlockCorrection(NamedTuple):
    """Outcome of repairing one received block (data plus EC codewords)."""
    codewords: Tuple[int, ...]
    error_positions: Tuple[int, ...]
    is_corrected: bool

    @property
    def error_count(self) -> int:
        return len(self.error_positions)


def _split_columns(stream: Sequence[int], sizes: Sequence[int]) -> Tuple[Tuple[int, ...], ...]:
    blocks = [[] for _ in sizes]
    values = iter(stream)
    for position in range(max(sizes, default=0)):
        for block, size in zip(blocks, sizes):
            if position < size:
                block.append(next(values))
    return tuple(tuple(block) for block in blocks)


def deinterleave(codewords: Sequence[int], plan: ECBlockPlan
                 ) -> Tuple[Tuple[Tuple[int, ...], ...], Tuple[Tuple[int, ...], ...]]:
    """
    Undo the column-major interleaving of a symbol's codewords.

    Args:
        codewords (Sequence[int]): Codewords in placement order, without
            remainder bits
        plan (ECBlockPlan): Block plan of the symbol's (version, level)

    Returns:
        Tuple: (data_blocks, ec_blocks) in block order

    Example:
        >>> plan = ECBlockPlan(2, (BlockGroup(2, 2),))
        >>> deinterleave([1, 2, 3, 4, 5, 6, 7, 8], plan)
        (((1, 3), (2, 4)), ((5, 7), (6, 8)))
    """
    sizes = [group.data_codewords for group in plan.groups for _ in range(group.block_count)]
    data_total = sum(sizes)
    if len(codewords) != data_total + plan.total_ec_codewords:
        raise ValueError(
            f"Block plan holds {data_total + plan.total_ec_codewords} codewords, "
            f"got {len(codewords)}"
        )
    data_blocks = _split_columns(codewords[:data_total], sizes)
    ec_blocks = _split_columns(codewords[data_total:], [plan.ec_codewords_per_block] * len(sizes))
    return data_blocks, ec_blocks


def _evaluate(poly: Sequence[int], x: int, field: GaloisField) -> int:
    # coefficients lowest power first
    value = 0
    for coef in reversed(poly):
        value = gf_multiply(value, x, field) ^ coef
    return value


def calculate_syndromes(block: Sequence[int], ec_count: int,
                        field: GaloisField = GF256) -> Tuple[int, ...]:
    """
    Evaluate the received block at the generator roots a^0 .. a^(ec_count-1).

    The first codeword is the highest power term. All syndromes are zero for
    an undamaged block.
    """
    syndromes = []
    for i in range(ec_count):
        alpha = field.exp[i % 255]
        value = 0
        for codeword in block:
            value = gf_multiply(value, alpha, field) ^ codeword
        syndromes.append(value)
    return tuple(syndromes)


def berlekamp_massey(syndromes: Sequence[int], field: GaloisField = GF256) -> Tuple[int, ...]:
    """
    Shortest error locator polynomial generating the syndrome sequence.

    Args:
        syndromes (Sequence[int]): Block syndromes S0, S1, ...

    Returns:
        Tuple[int, ...]: Locator coefficients, lowest power first, starting
            with 1; its degree is the number of errors
    """
    locator = [1]
    previous = [1]
    length = 0
    shift = 1
    last_discrepancy = 1

    for n, syndrome in enumerate(syndromes):
        discrepancy = syndrome
        for i in range(1, min(len(locator), n + 1)):
            discrepancy ^= gf_multiply(locator[i], syndromes[n - i], field)
        if discrepancy == 0:
            shift += 1
            continue

        coef = gf_divide(discrepancy, last_discrepancy, field)
        updated = locator + [0] * max(0, len(previous) + shift - len(locator))
        for i, value in enumerate(previous):
            updated[i + shift] ^= gf_multiply(coef, value, field)

        if 2 * length <= n:
            previous = locator
            length = n + 1 - length
            last_discrepancy = discrepancy
            shift = 1
        else:
            shift += 1
        locator = updated

    while len(locator) > 1 and locator[-1] == 0:
        locator.pop()
    return tuple(locator)


def find_error_positions(locator: Sequence[int], length: int,
                         field: GaloisField = GF256) -> Optional[Tuple[int, ...]]:
    """
    Chien search: block indices whose locator value X satisfies L(1/X) = 0.

    Index 0 is the first codeword of the block, i.e. the term of power
    ``length - 1``. None is returned when the number of roots inside the
    block differs from the locator degree, which means the damage is beyond
    what the block can repair.
    """
    positions = []
    for power in range(length):
        if _evaluate(locator, field.exp[(255 - power) % 255], field) == 0:
            positions.append(length - 1 - power)
    if len(positions) != len(locator) - 1:
        return None
    return tuple(sorted(positions))


def error_magnitudes(syndromes: Sequence[int], locator: Sequence[int],
                     positions: Sequence[int], length: int,
                     field: GaloisField = GF256) -> Optional[Tuple[int, ...]]:
    """
    Error values at the located positions by Forney's formula.

    With the generator roots starting at a^0 the value at locator X is
    X * W(1/X) / L'(1/X), where W = S * L mod x^(number of syndromes).
    """
    evaluator = [0] * len(syndromes)
    for i, s in enumerate(syndromes):
        for j, coef in enumerate(locator):
            if i + j < len(syndromes):
                evaluator[i + j] ^= gf_multiply(s, coef, field)
    # formal derivative over GF(2^8): only odd powers survive
    derivative = [coef if j % 2 else 0 for j, coef in enumerate(locator)][1:]

    magnitudes = []
    for position in positions:
        power = length - 1 - position
        x_inv = field.exp[(255 - power) % 255]
        denominator = _evaluate(derivative, x_inv, field)
        if denominator == 0:
            return None
        value = gf_divide(_evaluate(evaluator, x_inv, field), denominator, field)
        magnitudes.append(gf_multiply(field.exp[power % 255], value, field))
    return tuple(magnitudes)


def correct_block(block: Sequence[int], ec_count: int,
                  field: GaloisField = GF256) -> BlockCorrection:
    """
    Locate and repair errors in one received block.

    Up to ``ec_count // 2`` wrong codewords are corrected. A block with more
    damage comes back unchanged with ``is_corrected`` False.

    Args:
        block (Sequence[int]): Data codewords followed by EC codewords
        ec_count (int): Number of EC codewords in the block

    Returns:
        BlockCorrection: Repaired codewords and the indices that were changed

    Example:
        >>> data = [32, 91, 11, 120, 209, 114, 220, 77, 67, 64, 236, 17, 236, 17, 236, 17]
        >>> block = data + list(generate_ecc(data, 10))
        >>> block[3] ^= 0x55
        >>> correct_block(block, 10).error_positions
        (3,)
    """
    received = tuple(block)
    failure = BlockCorrection(received, (), False)
    syndromes = calculate_syndromes(received, ec_count, field)
    if not any(syndromes):
        return BlockCorrection(received, (), True)

    locator = berlekamp_massey(syndromes, field)
    if len(locator) - 1 > ec_count // 2:
        logger.debug("Block needs %d corrections, capacity is %d",
                     len(locator) - 1, ec_count // 2)
        return failure
    positions = find_error_positions(locator, len(received), field)
    if positions is None:
        logger.debug("Error locator roots fall outside the block")
        return failure
    magnitudes = error_magnitudes(syndromes, locator, positions, len(received), field)
    if magnitudes is None:
        return failure

    repaired = list(received)
    for position, magnitude in zip(positions, magnitudes):
        repaired[position] ^= magnitude
    if any(calculate_syndromes(repaired, ec_count, field)):
        logger.debug("Block still inconsistent after correction")
        return failure
    return BlockCorrection(tuple(repaired), positions, True)
