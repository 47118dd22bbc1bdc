# -*- coding: utf-8 -*-
"""
QR Code Bit-Stream Module

Packs the input text into the data bit-stream of a symbol: mode indicator,
character count indicator, mode-specific data bits, terminator, byte
boundary padding and alternating pad codewords (ISO/IEC 18004:2015 7.4).

Bit-streams are plain strings of '0' and '1' characters, most significant
bit first.

Functions:
    encode_numeric: Pack digits in groups of three
    encode_alphanumeric: Pack alphanumeric characters in pairs
    encode_byte: Pack UTF-8 bytes
    add_terminator: Append up to four zero bits
    pad_to_byte: Pad with zeros to the next multiple of 8
    add_pad_codewords: Fill the remaining capacity with 0xEC/0x11
    encode_data: Complete packing stage
"""

import logging
from typing import NamedTuple

from .analysis import character_count_bits, count_characters
from .tables import ALPHANUMERIC_CHARS, MODE_INDICATORS, PAD_CODEWORDS

logger = logging.getLogger(__name__)


class EncodedData(NamedTuple):
    """Output of the packing stage, each segment kept for inspection."""
    mode_indicator: str
    character_count: str
    data: str
    bit_stream: str

    @property
    def total_bits(self) -> int:
        return len(self.bit_stream)


def _bits(value: int, width: int) -> str:
    return format(value, '0{}b'.format(width))


def encode_numeric(text: str) -> str:
    """
    Example:
        >>> encode_numeric("01234567")
        '000000110001010110011000011'
    """
    out = []
    for i in range(0, len(text), 3):
        group = text[i:i + 3]
        out.append(_bits(int(group), (4, 7, 10)[len(group) - 1]))
    return ''.join(out)


def encode_alphanumeric(text: str) -> str:
    out = []
    for i in range(0, len(text), 2):
        pair = text[i:i + 2]
        if len(pair) == 2:
            value = 45 * ALPHANUMERIC_CHARS.index(pair[0]) + ALPHANUMERIC_CHARS.index(pair[1])
            out.append(_bits(value, 11))
        else:
            out.append(_bits(ALPHANUMERIC_CHARS.index(pair), 6))
    return ''.join(out)


def encode_byte(text: str) -> str:
    return ''.join(_bits(b, 8) for b in text.encode('utf-8'))


_ENCODERS = {
    'numeric': encode_numeric,
    'alphanumeric': encode_alphanumeric,
    'byte': encode_byte,
}


def add_terminator(bit_stream: str, capacity_bits: int) -> str:
    """Append up to four zero bits, never more than the remaining capacity."""
    return bit_stream + '0' * min(4, max(0, capacity_bits - len(bit_stream)))


def pad_to_byte(bit_stream: str) -> str:
    return bit_stream + '0' * (-len(bit_stream) % 8)


def add_pad_codewords(bit_stream: str, capacity_bits: int) -> str:
    """Repeat 11101100 00010001 until the stream exactly fills the capacity."""
    out = [bit_stream]
    length = len(bit_stream)
    i = 0
    while length < capacity_bits:
        pad = PAD_CODEWORDS[i % 2][:capacity_bits - length]
        out.append(pad)
        length += len(pad)
        i += 1
    return ''.join(out)


def encode_data(text: str, mode: str, version: int, capacity_bits: int) -> EncodedData:
    """
    Build the complete data bit-stream for one symbol.

    Args:
        text (str): Input text, already validated for ``mode``
        mode (str): 'numeric', 'alphanumeric' or 'byte'
        version (int): QR Code version, selects the count indicator width
        capacity_bits (int): Data capacity of the (version, level) pair

    Returns:
        EncodedData: Segments and the padded bit-stream of ``capacity_bits`` bits

    Raises:
        ValueError: If the mode is not supported or the data exceeds the capacity

    Example:
        >>> encoded = encode_data("01234567", "numeric", 1, 72)
        >>> encoded.mode_indicator, encoded.character_count
        ('0001', '0000001000')
    """
    if mode not in _ENCODERS:
        raise ValueError(f"Unsupported mode: {mode!r}")
    mode_indicator = MODE_INDICATORS[mode]
    count = _bits(count_characters(text, mode), character_count_bits(mode, version))
    data = _ENCODERS[mode](text)

    bit_stream = mode_indicator + count + data
    if len(bit_stream) > capacity_bits:
        raise ValueError(
            f"{len(bit_stream)} bits do not fit a capacity of {capacity_bits} bits"
        )
    bit_stream = add_terminator(bit_stream, capacity_bits)
    bit_stream = pad_to_byte(bit_stream)
    bit_stream = add_pad_codewords(bit_stream, capacity_bits)
    logger.debug("Packed %d data bits into %d bits", len(data), len(bit_stream))
    return EncodedData(mode_indicator, count, data, bit_stream)
