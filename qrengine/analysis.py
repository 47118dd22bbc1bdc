# -*- coding: utf-8 -*-
"""
QR Code Data Analysis Module

Classifies the input text, picks a single encoding mode for the whole input
and finds the smallest version whose data capacity holds the encoded bits.

Functions:
    detect_character_mode: Classify one character
    select_mode: Pick the single dominant mode for a text
    count_characters: Character count as written into the count indicator
    data_bit_length: Number of data bits a text needs in a mode
    analyze_data: Complete analysis (mode, minimum version, validity)
    compare_encoding_costs: Bit cost breakdown for every usable mode
"""

import logging
from typing import Dict, NamedTuple, Tuple

from .tables import (
    ALPHANUMERIC_CHARS, CHARACTER_COUNT_BITS, ERROR_LEVELS, MAX_VERSION,
    MIN_VERSION, data_capacity_bits, version_band,
)

logger = logging.getLogger(__name__)

MODE_INDICATOR_BITS = 4

KANJI_DOWNGRADE_NOTICE = "Kanji mode is not supported; encoding in byte mode instead"
EMPTY_INPUT_NOTICE = "No data to encode"


class DataAnalysis(NamedTuple):
    """Result of analysing the input text for one error correction level."""
    mode: str
    minimum_version: int
    character_count: int
    is_valid: bool
    notices: Tuple[str, ...] = ()


class EncodingCost(NamedTuple):
    mode: str
    mode_indicator: int
    character_count: int
    data: int

    @property
    def total(self) -> int:
        return self.mode_indicator + self.character_count + self.data


def _is_kanji(char: str) -> bool:
    code = ord(char)
    return 0x8140 <= code <= 0x9FFC or 0xE040 <= code <= 0xEBBF


def detect_character_mode(char: str) -> str:
    """Return the narrowest mode able to represent ``char``."""
    if '0' <= char <= '9':
        return 'numeric'
    if char in ALPHANUMERIC_CHARS:
        return 'alphanumeric'
    if _is_kanji(char):
        return 'kanji'
    return 'byte'


def select_mode(text: str) -> str:
    """
    Pick one mode for the whole text.

    A single shared class wins; a mix of numeric and alphanumeric characters
    is encoded as alphanumeric; anything else falls back to byte mode.
    """
    modes = {detect_character_mode(c) for c in text}
    if len(modes) == 1:
        return modes.pop()
    if modes == {'numeric', 'alphanumeric'}:
        return 'alphanumeric'
    return 'byte'


def count_characters(text: str, mode: str) -> int:
    """Characters for numeric/alphanumeric, UTF-8 bytes for byte mode."""
    if mode == 'byte':
        return len(text.encode('utf-8'))
    return len(text)


def character_count_bits(mode: str, version: int) -> int:
    try:
        return CHARACTER_COUNT_BITS[mode][version_band(version)]
    except KeyError:
        raise ValueError(f"Unsupported mode: {mode!r}") from None


def data_bit_length(text: str, mode: str) -> int:
    length = count_characters(text, mode)
    if mode == 'numeric':
        return (length // 3) * 10 + (0, 4, 7)[length % 3]
    if mode == 'alphanumeric':
        return (length // 2) * 11 + (length % 2) * 6
    if mode == 'byte':
        return length * 8
    if mode == 'kanji':
        return length * 13
    raise ValueError(f"Unsupported mode: {mode!r}")


def required_bits(text: str, mode: str, version: int) -> int:
    return MODE_INDICATOR_BITS + character_count_bits(mode, version) + data_bit_length(text, mode)


def analyze_data(text: str, level: str = 'M') -> DataAnalysis:
    """
    Analyse ``text`` and determine mode and minimum version.

    Versions are searched in ascending order; the first one whose data
    capacity at ``level`` holds mode indicator, character count and data is
    the minimum version. When no version fits, ``is_valid`` is False and
    ``minimum_version`` is reported as 40 for display purposes only.

    Args:
        text (str): Input text
        level (str): Error correction level ('L', 'M', 'Q', 'H')

    Returns:
        DataAnalysis: Mode, minimum version, character count and notices

    Example:
        >>> analyze_data("01234567", "H")
        DataAnalysis(mode='numeric', minimum_version=1, character_count=8, is_valid=True, notices=())
    """
    if level not in ERROR_LEVELS:
        raise ValueError(f"Invalid error correction level: {level!r}")
    if not text:
        return DataAnalysis('byte', MIN_VERSION, 0, False, (EMPTY_INPUT_NOTICE,))

    notices = []
    mode = select_mode(text)
    if mode == 'kanji':
        logger.warning(KANJI_DOWNGRADE_NOTICE)
        notices.append(KANJI_DOWNGRADE_NOTICE)
        mode = 'byte'

    for version in range(MIN_VERSION, MAX_VERSION + 1):
        if required_bits(text, mode, version) <= data_capacity_bits(version, level):
            logger.debug("Mode %s fits version %d-%s", mode, version, level)
            return DataAnalysis(mode, version, count_characters(text, mode), True, tuple(notices))

    logger.debug("No version holds %d characters in %s mode at level %s",
                 len(text), mode, level)
    return DataAnalysis(mode, MAX_VERSION, count_characters(text, mode), False, tuple(notices))


def compare_encoding_costs(text: str, version: int = 1) -> Dict[str, EncodingCost]:
    """Bit cost of ``text`` in every mode that can represent all of its characters."""
    classes = {detect_character_mode(c) for c in text}
    usable = ['byte']
    if classes <= {'numeric', 'alphanumeric'}:
        usable.insert(0, 'alphanumeric')
    if classes <= {'numeric'}:
        usable.insert(0, 'numeric')
    return {
        mode: EncodingCost(mode, MODE_INDICATOR_BITS, character_count_bits(mode, version),
                           data_bit_length(text, mode))
        for mode in usable
    }
