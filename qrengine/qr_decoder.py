# -*- coding: utf-8 -*-
"""
QR Code Decoder Module

Reads the text back out of an already sampled symbol matrix. The steps
mirror the generator in reverse: format and version information, mask
removal, zigzag read-back, de-interleaving, Reed-Solomon correction of each
block and finally parsing of the mode segments. Image detection and
sampling are not part of this module; the input is a grid of 0/1 modules.

Functions:
    decode_segments: Parse mode segments out of the data codewords
    decode_symbol: Decode a complete symbol matrix to its text
"""

import logging
from typing import Any, Callable, Dict, NamedTuple, Optional, Sequence, Tuple, Union

from .analysis import character_count_bits
from .functional_areas import SymbolMatrix, build_function_matrix
from .info_coder import read_format_info, read_version_info
from .masking import apply_mask
from .placement import data_module_coords
from .qr_generator import Stage
from .reed_solomon import bits_to_codewords, correct_block, deinterleave
from .tables import (
    ALPHANUMERIC_CHARS, EC_BLOCK_TABLE, MAX_VERSION, MIN_VERSION, MODE_INDICATORS, MODES,
    symbol_size, total_codewords,
)

logger = logging.getLogger(__name__)

FORMAT_UNREADABLE = 'format_unreadable'
VERSION_UNREADABLE = 'version_unreadable'
VERSION_MISMATCH = 'version_mismatch'
UNCORRECTABLE = 'uncorrectable'
UNSUPPORTED_MODE = 'unsupported_mode'
INVALID_DATA = 'invalid_data'

TERMINATOR = 0b0000

_MODE_BY_INDICATOR = {int(MODE_INDICATORS[mode], 2): mode for mode in MODES}


class DecodedSegment(NamedTuple):
    """One mode segment read from the data codewords."""
    mode: str
    character_count: int
    data: str


class SegmentDecodeResult(NamedTuple):
    """Segments parsed so far; ``error`` names the reason parsing stopped early."""
    segments: Tuple[DecodedSegment, ...]
    error: Optional[str] = None

    @property
    def text(self) -> str:
        return ''.join(segment.data for segment in self.segments)


class DecodeFailure(NamedTuple):
    """
    Returned instead of a decoded symbol when the matrix cannot be read.

    ``intermediate_stages`` holds every stage that completed before the
    failure, so the point where decoding broke down can be inspected.
    """
    reason: str
    detail: str
    intermediate_stages: Tuple[Stage, ...] = ()

    @property
    def message(self) -> str:
        return f"{self.reason}: {self.detail}"


class DecodedSymbol(NamedTuple):
    """Text read from a symbol together with the decoding stages."""
    text: str
    version: int
    error_level: str
    mask_pattern: int
    segments: Tuple[DecodedSegment, ...]
    corrected_errors: int
    intermediate_stages: Tuple[Stage, ...]

    @property
    def designator(self) -> str:
        return f"{self.version}-{self.error_level}"

    def stage(self, name: str) -> Any:
        for stage in self.intermediate_stages:
            if stage.name == name:
                return stage.value
        raise KeyError(name)


class _BitReader:
    """Sequential reader over a '0'/'1' string."""

    def __init__(self, bits: str):
        self.bits = bits
        self.position = 0

    @property
    def remaining(self) -> int:
        return len(self.bits) - self.position

    def read(self, width: int) -> Optional[int]:
        if width > self.remaining:
            return None
        chunk = self.bits[self.position:self.position + width]
        self.position += width
        return int(chunk, 2) if chunk else 0


def _read_numeric(reader: _BitReader, count: int) -> Optional[str]:
    digits = []
    remaining = count
    while remaining > 0:
        take = min(3, remaining)
        value = reader.read({3: 10, 2: 7, 1: 4}[take])
        if value is None or value >= 10 ** take:
            return None
        digits.append(str(value).zfill(take))
        remaining -= take
    return ''.join(digits)


def _read_alphanumeric(reader: _BitReader, count: int) -> Optional[str]:
    chars = []
    for _ in range(count // 2):
        value = reader.read(11)
        if value is None or value >= 45 * 45:
            return None
        chars.append(ALPHANUMERIC_CHARS[value // 45] + ALPHANUMERIC_CHARS[value % 45])
    if count % 2:
        value = reader.read(6)
        if value is None or value >= 45:
            return None
        chars.append(ALPHANUMERIC_CHARS[value])
    return ''.join(chars)


def _read_byte(reader: _BitReader, count: int) -> Optional[str]:
    raw = bytearray()
    for _ in range(count):
        value = reader.read(8)
        if value is None:
            return None
        raw.append(value)
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError:
        # ISO/IEC 18004 default interpretation for byte mode
        return raw.decode('latin-1')


def _read_kanji(reader: _BitReader, count: int) -> Optional[str]:
    raw = bytearray()
    for _ in range(count):
        value = reader.read(13)
        if value is None:
            return None
        code = (value // 0xC0) << 8 | value % 0xC0
        code += 0x8140 if code < 0x1F00 else 0xC140
        raw += code.to_bytes(2, 'big')
    try:
        return raw.decode('shift_jis')
    except UnicodeDecodeError:
        return None


_SEGMENT_READERS: Dict[str, Callable[[_BitReader, int], Optional[str]]] = {
    'numeric': _read_numeric,
    'alphanumeric': _read_alphanumeric,
    'byte': _read_byte,
    'kanji': _read_kanji,
}


def decode_segments(codewords: Sequence[int], version: int) -> SegmentDecodeResult:
    """
    Parse mode segments out of corrected data codewords.

    Reading stops at the terminator or when fewer than four bits are left;
    the pad codewords after the terminator are ignored.

    Args:
        codewords (Sequence[int]): Data codewords in block order
        version (int): Symbol version, selects the count indicator widths

    Returns:
        SegmentDecodeResult: Segments read, with ``error`` set to
            'unsupported_mode' or 'invalid_data' when parsing stopped early

    Example:
        >>> decode_segments([0x10, 0x20, 0x0C, 0x56, 0x61, 0x80] + [0xEC, 0x11] * 5, 1).text
        '01234567'
    """
    reader = _BitReader(''.join(format(cw, '08b') for cw in codewords))
    segments = []
    while reader.remaining >= 4:
        indicator = reader.read(4)
        if indicator == TERMINATOR:
            break
        mode = _MODE_BY_INDICATOR.get(indicator)
        if mode is None:
            logger.debug("Mode indicator %s is not supported", format(indicator, '04b'))
            return SegmentDecodeResult(tuple(segments), UNSUPPORTED_MODE)
        count = reader.read(character_count_bits(mode, version))
        data = None if count is None else _SEGMENT_READERS[mode](reader, count)
        if data is None:
            logger.debug("Malformed %s segment at bit %d", mode, reader.position)
            return SegmentDecodeResult(tuple(segments), INVALID_DATA)
        segments.append(DecodedSegment(mode, count, data))
    return SegmentDecodeResult(tuple(segments))


def _check_grid(grid: Sequence[Sequence[int]]) -> Tuple[Tuple[int, ...], ...]:
    size = len(grid)
    if size not in {symbol_size(v) for v in range(MIN_VERSION, MAX_VERSION + 1)}:
        raise ValueError(f"Matrix size {size} is not a QR Code symbol size")
    rows = []
    for row in grid:
        if len(row) != size:
            raise ValueError("Matrix must be square")
        if any(value not in (0, 1) for value in row):
            raise ValueError("Matrix modules must be 0 or 1")
        rows.append(tuple(int(value) for value in row))
    return tuple(rows)


def decode_symbol(grid: Sequence[Sequence[int]]) -> Union[DecodedSymbol, DecodeFailure]:
    """
    Decode a sampled symbol matrix back to its text.

    The version follows from the matrix size; from version 7 on the version
    information must agree with it. Each Reed-Solomon block corrects up to
    half as many wrong codewords as it has EC codewords.

    Args:
        grid (Sequence[Sequence[int]]): Square grid of modules, 1 dark and
            0 light, without quiet zone

    Returns:
        Union[DecodedSymbol, DecodeFailure]: The text and decoding stages, or
            a failure value naming the stage that could not be completed

    Raises:
        ValueError: If the grid is not a square 0/1 grid of a symbol size

    Example:
        >>> from qrengine import make_qr
        >>> decode_symbol(make_qr("HELLO WORLD", ecc='Q').matrix).text
        'HELLO WORLD'
    """
    modules = _check_grid(grid)
    version = (len(modules) - 17) // 4
    stages = []

    def failure(reason: str, detail: str) -> DecodeFailure:
        logger.debug("Decoding failed (%s): %s", reason, detail)
        return DecodeFailure(reason, detail, tuple(stages))

    fmt = read_format_info(modules)
    stages.append(Stage('format_info', fmt))
    if fmt.error_bits < 0:
        return failure(FORMAT_UNREADABLE, "Both format information copies are uncorrectable")

    ver = read_version_info(modules)
    stages.append(Stage('version_info', ver))
    if ver is not None:
        if ver.error_bits < 0:
            return failure(VERSION_UNREADABLE, "Both version information blocks are uncorrectable")
        if ver.version != version:
            return failure(VERSION_MISMATCH,
                           f"Version information says {ver.version}, matrix size says {version}")

    function = build_function_matrix(version)
    unmasked = apply_mask(SymbolMatrix(modules, function.types), fmt.mask_pattern)
    stages.append(Stage('unmasked', unmasked))

    bit_stream = ''.join(str(unmasked.modules[r][c]) for r, c in data_module_coords(function))
    codewords = bits_to_codewords(bit_stream[:total_codewords(version) * 8])
    stages.append(Stage('codewords', codewords))

    plan = EC_BLOCK_TABLE[(version, fmt.error_level)]
    data_blocks, ec_blocks = deinterleave(codewords, plan)
    corrections = tuple(
        correct_block(data + ec, plan.ec_codewords_per_block)
        for data, ec in zip(data_blocks, ec_blocks)
    )
    stages.append(Stage('error_correction', corrections))
    failed = [i for i, c in enumerate(corrections) if not c.is_corrected]
    if failed:
        return failure(UNCORRECTABLE, f"Blocks {failed} exceed their correction capacity")

    data_codewords = tuple(
        cw for correction, data in zip(corrections, data_blocks)
        for cw in correction.codewords[:len(data)]
    )
    stages.append(Stage('data_codewords', data_codewords))

    result = decode_segments(data_codewords, version)
    stages.append(Stage('segments', result.segments))
    if result.error is not None:
        return failure(result.error, f"Segment parsing stopped after {len(result.segments)} segments")

    corrected = sum(c.error_count for c in corrections)
    logger.debug("Decoded %d-%s symbol with mask %d, %d codewords corrected",
                 version, fmt.error_level, fmt.mask_pattern, corrected)
    return DecodedSymbol(
        text=result.text,
        version=version,
        error_level=fmt.error_level,
        mask_pattern=fmt.mask_pattern,
        segments=result.segments,
        corrected_errors=corrected,
        intermediate_stages=tuple(stages),
    )
