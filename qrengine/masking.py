# -*- coding: utf-8 -*-
"""
QR Code Masking Module

Applies the eight data mask patterns of ISO/IEC 18004:2015 section 7.8.2 and
selects the pattern with the lowest penalty score. Only modules typed 'data'
are ever inverted; function patterns, reserved information areas and the
dark module keep their values.

Functions:
    mask_grid: Boolean grid of one mask pattern
    apply_mask: XOR a mask pattern onto the data modules
    evaluate_masks: Score all eight candidates
    select_best_mask: Pick the candidate with the lowest total
"""

import logging
from typing import Tuple, NamedTuple, Sequence

import numpy as np

from .functional_areas import SymbolMatrix
from .penalties import PenaltyScore, compute_mask_penalty

logger = logging.getLogger(__name__)

# i = row, j = column; a module is inverted where the condition holds.
# Works on plain ints and on numpy index arrays alike.
MASK_PATTERNS = (
    lambda i, j: (i + j) % 2 == 0,
    lambda i, j: i % 2 == 0,
    lambda i, j: j % 3 == 0,
    lambda i, j: (i + j) % 3 == 0,
    lambda i, j: (i // 2 + j // 3) % 2 == 0,
    lambda i, j: (i * j) % 2 + (i * j) % 3 == 0,
    lambda i, j: ((i * j) % 2 + (i * j) % 3) % 2 == 0,
    lambda i, j: ((i + j) % 2 + (i * j) % 3) % 2 == 0,
)


class MaskEvaluation(NamedTuple):
    pattern: int
    matrix: SymbolMatrix
    penalty: PenaltyScore


def _check_pattern(pattern: int) -> int:
    if not 0 <= pattern < len(MASK_PATTERNS):
        raise ValueError(f"Mask pattern must be between 0 and 7, got {pattern}")
    return pattern


def mask_grid(pattern: int, size: int) -> np.ndarray:
    """
    Boolean size x size grid, True where ``pattern`` inverts a module.

    Example:
        >>> mask_grid(1, 3).astype(int).tolist()
        [[1, 1, 1], [0, 0, 0], [1, 1, 1]]
    """
    i, j = np.indices((size, size))
    return MASK_PATTERNS[_check_pattern(pattern)](i, j)


def apply_mask(matrix: SymbolMatrix, pattern: int) -> SymbolMatrix:
    """
    XOR a mask pattern onto the data modules of a matrix.

    Applying the same pattern twice restores the original matrix, so this
    also removes a mask.

    Args:
        matrix (SymbolMatrix): Matrix with data modules placed
        pattern (int): Mask pattern (0-7)

    Returns:
        SymbolMatrix: New masked matrix sharing the same types grid
    """
    values = np.array(
        [[-1 if v is None else v for v in row] for row in matrix.modules], dtype=np.int8
    )
    data = np.array(matrix.types) == 'data'
    flip = mask_grid(pattern, matrix.size) & data & (values >= 0)
    masked = np.where(flip, 1 - values, values)
    modules = tuple(
        tuple(None if v < 0 else v for v in row) for row in masked.tolist()
    )
    return SymbolMatrix(modules, matrix.types)


def evaluate_masks(matrix: SymbolMatrix) -> Tuple[MaskEvaluation, ...]:
    """
    Mask the pre-mask matrix with each pattern and score the result.

    Returns:
        Tuple[MaskEvaluation, ...]: One evaluation per pattern, indexed by pattern
    """
    evaluations = []
    for pattern in range(len(MASK_PATTERNS)):
        candidate = apply_mask(matrix, pattern)
        penalty = compute_mask_penalty(candidate.modules)
        logger.debug("Mask %d: N1=%d N2=%d N3=%d N4=%d total=%d",
                     pattern, penalty.n1, penalty.n2, penalty.n3, penalty.n4, penalty.total)
        evaluations.append(MaskEvaluation(pattern, candidate, penalty))
    return tuple(evaluations)


def select_best_mask(evaluations: Sequence[MaskEvaluation]) -> MaskEvaluation:
    """Lowest total penalty; on a tie the lowest pattern number wins."""
    return min(evaluations, key=lambda e: (e.penalty.total, e.pattern))
