# -*- coding: utf-8 -*-
"""
QR Code Format and Version Information Module

BCH encoding, placement and decoding of the format information (15,5) and
the version information (18,6) of ISO/IEC 18004:2015 sections 7.9 and 7.10.

Decoding corrects up to three bit errors: the syndrome of the received word
is looked up in a table of single-bit error syndromes, and if it is not
found all two-bit and then all three-bit flip patterns are tried.

Functions:
    format_info: 15-bit format information for (level, mask)
    version_info: 18-bit version information, None below version 7
    place_format_info: Write both format copies into a matrix
    place_version_info: Write both version blocks into a matrix
    decode_format_info: Correct and decode a received 15-bit word
    decode_version_info: Correct and decode a received 18-bit word
    read_format_info: Read and decode the format information of a symbol
    read_version_info: Read and decode the version information of a symbol
"""

import logging
from itertools import combinations
from typing import Dict, NamedTuple, Optional, Sequence, Tuple

from .functional_areas import SymbolMatrix, format_info_positions, version_info_positions
from .tables import MAX_VERSION, VERSION_INFO_TABLE

logger = logging.getLogger(__name__)

FORMAT_GENERATOR = 0b10100110111
FORMAT_MASK = 0b101010000010010
FORMAT_BITS = 15

VERSION_GENERATOR = 0b1111100100101
VERSION_BITS = 18
MIN_INFO_VERSION = 7

MAX_CORRECTABLE_BITS = 3

# ISO/IEC 18004 Table 12
ERROR_LEVEL_BITS = {'L': 0b01, 'M': 0b00, 'Q': 0b11, 'H': 0b10}
_LEVEL_FROM_BITS = {bits: level for level, bits in ERROR_LEVEL_BITS.items()}


class FormatDecodeResult(NamedTuple):
    """Decoded format information; all fields None and error_bits -1 when uncorrectable."""
    error_level: Optional[str]
    mask_pattern: Optional[int]
    error_bits: int


class VersionDecodeResult(NamedTuple):
    """Decoded version information; version None and error_bits -1 when uncorrectable."""
    version: Optional[int]
    error_bits: int


FORMAT_DECODE_FAILURE = FormatDecodeResult(None, None, -1)
VERSION_DECODE_FAILURE = VersionDecodeResult(None, -1)


def bch_remainder(value: int, generator: int) -> int:
    """Remainder of the polynomial division of ``value`` by ``generator`` over GF(2)."""
    degree = generator.bit_length() - 1
    while value.bit_length() > degree:
        value ^= generator << (value.bit_length() - generator.bit_length())
    return value


def _single_error_syndromes(length: int, generator: int) -> Dict[int, int]:
    return {bch_remainder(1 << i, generator): i for i in range(length)}


FORMAT_SYNDROMES = _single_error_syndromes(FORMAT_BITS, FORMAT_GENERATOR)
VERSION_SYNDROMES = _single_error_syndromes(VERSION_BITS, VERSION_GENERATOR)


def format_info(level: str, mask_pattern: int) -> int:
    """
    Build the 15-bit format information.

    Args:
        level (str): Error correction level ('L', 'M', 'Q', 'H')
        mask_pattern (int): Mask pattern (0-7)

    Returns:
        int: BCH(15,5) codeword XORed with 101010000010010

    Example:
        >>> hex(format_info('M', 0))
        '0x5412'
    """
    if level not in ERROR_LEVEL_BITS:
        raise ValueError(f"Invalid error correction level: {level!r}")
    if not 0 <= mask_pattern <= 7:
        raise ValueError(f"Mask pattern must be between 0 and 7, got {mask_pattern}")
    data = ERROR_LEVEL_BITS[level] << 3 | mask_pattern
    return ((data << 10) | bch_remainder(data << 10, FORMAT_GENERATOR)) ^ FORMAT_MASK


def version_info(version: int) -> Optional[int]:
    """
    Build the 18-bit version information.

    Versions 1-6 carry no version information; None is returned for them.

    Example:
        >>> hex(version_info(7))
        '0x7c94'
    """
    if version < MIN_INFO_VERSION:
        return None
    if version > MAX_VERSION:
        raise ValueError(f"Version must be at most {MAX_VERSION}, got {version}")
    return (version << 12) | bch_remainder(version << 12, VERSION_GENERATOR)


def _set_bits(matrix: SymbolMatrix, positions: Sequence[Tuple[int, int]],
              value: int, module_type: str) -> Tuple[list, list]:
    modules, types = matrix.thaw()
    for i, (r, c) in enumerate(positions):
        modules[r][c] = (value >> i) & 1
        types[r][c] = module_type
    return modules, types


def place_format_info(matrix: SymbolMatrix, value: int) -> SymbolMatrix:
    """
    Write the format information into both copies.

    The most significant bit lands next to the finder edge: (8, 0) in the
    first copy and (size-1, 8) in the second.
    """
    first, second = format_info_positions(matrix.size)
    modules, types = _set_bits(matrix, first + second, (value << FORMAT_BITS) | value, 'format')
    return SymbolMatrix.freeze(modules, types)


def place_version_info(matrix: SymbolMatrix, value: Optional[int]) -> SymbolMatrix:
    """Write the version information, least significant bit first, into both blocks."""
    if value is None:
        return matrix
    bottom_left, top_right = version_info_positions(matrix.size)
    modules, types = _set_bits(
        matrix, bottom_left + top_right, (value << VERSION_BITS) | value, 'version'
    )
    return SymbolMatrix.freeze(modules, types)


def correct_bch(received: int, generator: int, length: int,
                single_errors: Dict[int, int]) -> Tuple[Optional[int], int]:
    """
    Correct up to three bit errors in a received BCH codeword.

    Args:
        received (int): Received word
        generator (int): Generator polynomial of the code
        length (int): Codeword length in bits
        single_errors (Dict[int, int]): Syndrome -> flipped bit index

    Returns:
        Tuple[Optional[int], int]: (codeword, corrected bits) or (None, -1)
    """
    syndrome = bch_remainder(received, generator)
    if syndrome == 0:
        return received, 0
    if syndrome in single_errors:
        return received ^ (1 << single_errors[syndrome]), 1

    for count in range(2, MAX_CORRECTABLE_BITS + 1):
        for bits in combinations(range(length), count):
            candidate = received
            for bit in bits:
                candidate ^= 1 << bit
            if bch_remainder(candidate, generator) == 0:
                return candidate, count
    return None, -1


def decode_format_info(received: int) -> FormatDecodeResult:
    """
    Decode a received 15-bit format information word.

    Example:
        >>> decode_format_info(0x5412 ^ 0b100)
        FormatDecodeResult(error_level='M', mask_pattern=0, error_bits=1)
    """
    codeword, error_bits = correct_bch(
        (received & 0x7FFF) ^ FORMAT_MASK, FORMAT_GENERATOR, FORMAT_BITS, FORMAT_SYNDROMES
    )
    if codeword is None:
        logger.debug("Format information %s is uncorrectable", format(received, '015b'))
        return FORMAT_DECODE_FAILURE
    data = codeword >> 10
    return FormatDecodeResult(_LEVEL_FROM_BITS[data >> 3], data & 0b111, error_bits)


def decode_version_info(received: int) -> VersionDecodeResult:
    """
    Decode a received 18-bit version information word.

    The corrected codeword is only accepted when it equals the reference
    codeword of a version between 7 and 40.

    Example:
        >>> decode_version_info(0x07C94 ^ 0b101)
        VersionDecodeResult(version=7, error_bits=2)
    """
    codeword, error_bits = correct_bch(
        received & 0x3FFFF, VERSION_GENERATOR, VERSION_BITS, VERSION_SYNDROMES
    )
    if codeword is None:
        logger.debug("Version information %s is uncorrectable", format(received, '018b'))
        return VERSION_DECODE_FAILURE
    version = codeword >> 12
    if VERSION_INFO_TABLE.get(version) != codeword:
        logger.debug("Corrected version information %s names no valid version",
                     format(codeword, '018b'))
        return VERSION_DECODE_FAILURE
    return VersionDecodeResult(version, error_bits)


def _read_bits(grid: Sequence[Sequence[int]], positions: Sequence[Tuple[int, int]]) -> int:
    value = 0
    for i, (r, c) in enumerate(positions):
        if grid[r][c]:
            value |= 1 << i
    return value


def _best(results, failure):
    valid = [r for r in results if r.error_bits >= 0]
    if not valid:
        return failure
    return min(valid, key=lambda r: r.error_bits)


def read_format_info(grid: Sequence[Sequence[int]]) -> FormatDecodeResult:
    """
    Read both format information copies of a symbol and decode them.

    Args:
        grid (Sequence[Sequence[int]]): Final symbol modules (1 dark, 0 light)

    Returns:
        FormatDecodeResult: The copy needing the fewest corrections
    """
    first, second = format_info_positions(len(grid))
    return _best(
        [decode_format_info(_read_bits(grid, first)), decode_format_info(_read_bits(grid, second))],
        FORMAT_DECODE_FAILURE,
    )


def read_version_info(grid: Sequence[Sequence[int]]) -> Optional[VersionDecodeResult]:
    """
    Read both version information blocks of a symbol and decode them.

    Returns None for symbols smaller than version 7, which carry no version
    information.
    """
    size = len(grid)
    if (size - 17) // 4 < MIN_INFO_VERSION:
        return None
    bottom_left, top_right = version_info_positions(size)
    return _best(
        [decode_version_info(_read_bits(grid, bottom_left)),
         decode_version_info(_read_bits(grid, top_right))],
        VERSION_DECODE_FAILURE,
    )
