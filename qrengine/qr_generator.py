# -*- coding: utf-8 -*-
"""
QR Code Generator Module

This module wires the pipeline stages together: data analysis, bit-stream
packing, Reed-Solomon error correction, function pattern layout, module
placement, mask selection and format/version information. Every stage
output is kept on the returned symbol so it can be inspected or rendered.

Functions:
    make_qr: Generate a QR Code symbol with the specified parameters
    evaluate_all_masks: Penalty score of all mask patterns for a text
"""

import logging
from typing import Any, Dict, NamedTuple, Optional, Tuple, Union

from .analysis import DataAnalysis, analyze_data, required_bits
from .bitstream import encode_data
from .functional_areas import function_pattern_stages
from .info_coder import format_info, place_format_info, place_version_info, version_info
from .masking import MaskEvaluation, evaluate_masks, select_best_mask
from .placement import place_data_bits
from .reed_solomon import run_error_correction
from .tables import ERROR_LEVELS, MAX_VERSION, MIN_VERSION, data_capacity_bits

logger = logging.getLogger(__name__)

DATA_TOO_LARGE = 'data_too_large'
EMPTY_INPUT = 'empty_input'


class Stage(NamedTuple):
    """One named intermediate result of the pipeline."""
    name: str
    value: Any


class AnalysisFailure(NamedTuple):
    """
    Returned instead of a symbol when the text cannot be encoded.

    ``reason`` is 'data_too_large' when no version (or not the requested
    version) holds the data at the requested level, 'empty_input' for an
    empty text.
    """
    reason: str
    analysis: DataAnalysis
    error_level: str
    requested_version: Optional[int] = None

    @property
    def message(self) -> str:
        if self.reason == EMPTY_INPUT:
            return "No data to encode"
        if self.requested_version is not None:
            return (f"Data does not fit version {self.requested_version}-{self.error_level}; "
                    f"minimum version is {self.analysis.minimum_version}")
        return f"Data does not fit any version at error correction level {self.error_level}"


class FinalSymbol(NamedTuple):
    """A complete QR Code symbol together with its intermediate stages."""
    final_matrix: Tuple[Tuple[int, ...], ...]
    version: int
    error_level: str
    mode: str
    selected_mask_pattern: int
    format_info: int
    version_info: Optional[int]
    mask_evaluations: Tuple[MaskEvaluation, ...]
    intermediate_stages: Tuple[Stage, ...]

    @property
    def matrix(self) -> Tuple[Tuple[int, ...], ...]:
        return self.final_matrix

    @property
    def size(self) -> int:
        return len(self.final_matrix)

    @property
    def designator(self) -> str:
        return f"{self.version}-{self.error_level}"

    def stage(self, name: str) -> Any:
        """Value of the intermediate stage called ``name``."""
        for stage in self.intermediate_stages:
            if stage.name == name:
                return stage.value
        raise KeyError(name)

    @property
    def mask_scores(self) -> Dict[int, int]:
        return {e.pattern: e.penalty.total for e in self.mask_evaluations}


def _normalize_ecc(ecc: str) -> str:
    level = (ecc or 'M').strip().upper()
    if level not in ERROR_LEVELS:
        raise ValueError(f"Invalid error correction level: {ecc!r}, use one of L, M, Q, H")
    return level


def _normalize_version(version: Optional[Union[int, str]]) -> Optional[int]:
    if version is None or version == 'auto':
        return None
    try:
        value = int(version)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid version: {version!r}") from None
    if not MIN_VERSION <= value <= MAX_VERSION:
        raise ValueError(f"Version must be between {MIN_VERSION} and {MAX_VERSION}, got {value}")
    return value


def _normalize_mask(mask: Optional[Union[int, str]]) -> Optional[int]:
    if mask is None or mask == 'auto':
        return None
    try:
        value = int(mask)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid mask: {mask!r}") from None
    if not 0 <= value <= 7:
        raise ValueError(f"Mask pattern must be between 0 and 7, got {value}")
    return value


def make_qr(
    text: str,
    ecc: str = 'M',
    version: Optional[Union[int, str]] = 'auto',
    mask: Union[str, int] = 'auto'
) -> Union[FinalSymbol, AnalysisFailure]:
    """
    Generate a QR Code symbol with specified parameters.

    The text is encoded in a single mode (numeric, alphanumeric or byte)
    chosen by the data analysis. All eight mask patterns are always scored;
    the lowest total penalty wins unless ``mask`` forces one.

    Args:
        text (str): The data to encode in the QR code
        ecc (str): Error correction level ('L', 'M', 'Q', 'H')
            - L: ~7% recovery capability
            - M: ~15% recovery capability
            - Q: ~25% recovery capability
            - H: ~30% recovery capability
        version (Optional[Union[int, str]]): QR code version (1-40) or 'auto'
            - 'auto': Select minimum version that fits the data
            - int: Force specific version (1=21x21, 40=177x177)
        mask (Union[str, int]): Mask pattern
            - 'auto': Lowest penalty score, ties go to the lower pattern
            - int: Use specific mask pattern (0-7)

    Returns:
        Union[FinalSymbol, AnalysisFailure]: The symbol, or a failure value
            when the data does not fit or is empty

    Raises:
        ValueError: If ecc, version or mask are invalid
        StructuralInconsistencyError: If placement and capacity tables disagree

    Example:
        >>> symbol = make_qr("01234567", ecc='H', version=1)
        >>> symbol.mode, symbol.size
        ('numeric', 21)
    """
    level = _normalize_ecc(ecc)
    requested_version = _normalize_version(version)
    forced_mask = _normalize_mask(mask)
    stages = []

    analysis = analyze_data(text, level)
    stages.append(Stage('analysis', analysis))
    if not analysis.is_valid:
        reason = EMPTY_INPUT if not text else DATA_TOO_LARGE
        logger.debug("Analysis failed: %s", reason)
        return AnalysisFailure(reason, analysis, level, requested_version)

    symbol_version = analysis.minimum_version if requested_version is None else requested_version
    capacity = data_capacity_bits(symbol_version, level)
    if required_bits(text, analysis.mode, symbol_version) > capacity:
        logger.debug("Data needs version %d-%s, version %d requested",
                     analysis.minimum_version, level, symbol_version)
        return AnalysisFailure(DATA_TOO_LARGE, analysis, level, requested_version)

    encoded = encode_data(text, analysis.mode, symbol_version, capacity)
    stages.append(Stage('bit_stream', encoded))

    error_correction = run_error_correction(encoded.bit_stream, symbol_version, level)
    stages.append(Stage('error_correction', error_correction))

    for name, matrix in function_pattern_stages(symbol_version):
        stages.append(Stage(name, matrix))

    placed = place_data_bits(matrix, error_correction.final_bit_stream)
    stages.append(Stage('data_placement', placed))

    evaluations = evaluate_masks(placed)
    best = select_best_mask(evaluations)
    chosen = best.pattern if forced_mask is None else forced_mask
    masked = evaluations[chosen].matrix
    stages.append(Stage('masked', masked))

    fmt = format_info(level, chosen)
    with_format = place_format_info(masked, fmt)
    stages.append(Stage('format_info', with_format))

    ver = version_info(symbol_version)
    final = place_version_info(with_format, ver)
    stages.append(Stage('version_info', final))

    logger.debug("Built %d-%s symbol in %s mode with mask %d (penalty %d)",
                 symbol_version, level, analysis.mode, chosen,
                 evaluations[chosen].penalty.total)
    return FinalSymbol(
        final_matrix=final.modules,
        version=symbol_version,
        error_level=level,
        mode=analysis.mode,
        selected_mask_pattern=chosen,
        format_info=fmt,
        version_info=ver,
        mask_evaluations=evaluations,
        intermediate_stages=tuple(stages),
    )


def evaluate_all_masks(
    text: str,
    ecc: str = 'M',
    version: Optional[Union[int, str]] = 'auto'
) -> Tuple[Optional[int], Optional[int], Dict[int, int]]:
    """
    Evaluate all mask patterns (0-7) to find the optimal one.

    Args:
        text (str): The data to encode
        ecc (str): Error correction level ('L', 'M', 'Q', 'H')
        version (Optional[Union[int, str]]): QR code version (1-40) or 'auto'

    Returns:
        Tuple[Optional[int], Optional[int], Dict[int, int]]: (best_mask, best_score, all_scores)
            - best_mask: Mask pattern with lowest penalty (0-7)
            - best_score: Penalty score of the best mask
            - all_scores: Dictionary mapping mask -> penalty score
            All three are None/empty when the text cannot be encoded.

    Example:
        >>> best_mask, best_score, scores = evaluate_all_masks("HELLO WORLD", ecc='Q')
        >>> sorted(scores)
        [0, 1, 2, 3, 4, 5, 6, 7]
    """
    symbol = make_qr(text, ecc=ecc, version=version)
    if isinstance(symbol, AnalysisFailure):
        return None, None, {}
    best = select_best_mask(symbol.mask_evaluations)
    return best.pattern, best.penalty.total, symbol.mask_scores
