# -*- coding: utf-8 -*-
"""
QR Code Mask Penalty Evaluation Module

This module implements the mask pattern evaluation rules of ISO/IEC
18004:2015 section 7.8.3. Each candidate matrix receives four penalty
scores (N1-N4); the mask with the lowest total is selected.

Cells that hold None (not yet filled) never take part in a penalty: they
break runs, blocks and windows and are left out of the dark ratio.

Functions:
    penalty_N1: Runs of five or more same-colored modules (Rule N1)
    penalty_N2: 2x2 blocks of same color (Rule N2)
    penalty_N3: Finder-like 1:1:3:1:1 patterns (Rule N3)
    penalty_N4: Dark/light module ratio (Rule N4)
    compute_mask_penalty: All four scores and their total
"""

from typing import List, NamedTuple, Optional, Sequence

import numpy as np

FINDER_LIKE = (1, 0, 1, 1, 1, 0, 1)


class PenaltyScore(NamedTuple):
    n1: int
    n2: int
    n3: int
    n4: int

    @property
    def total(self) -> int:
        return self.n1 + self.n2 + self.n3 + self.n4


def _as_array(rows: Sequence[Sequence[Optional[int]]]) -> np.ndarray:
    """Integer array with -1 standing for empty cells."""
    return np.array([[-1 if v is None else int(v) for v in row] for row in rows], dtype=np.int8)


def _lines(rows: Sequence[Sequence[Optional[int]]]) -> List[Sequence[Optional[int]]]:
    return [list(row) for row in rows] + [list(col) for col in zip(*rows)]


def _run_penalty(line: Sequence[Optional[int]]) -> int:
    score = 0
    prev = None
    run = 0
    for value in line:
        if value is not None and value == prev:
            run += 1
            continue
        if run >= 5:
            score += 3 + (run - 5)
        prev = value
        run = 0 if value is None else 1
    if run >= 5:
        score += 3 + (run - 5)
    return score


def penalty_N1(rows: Sequence[Sequence[Optional[int]]]) -> int:
    """
    Calculate penalty for adjacent modules in runs (Rule N1).

    Every maximal run of 5 or more identical modules in a row or a column
    adds 3 + (run_length - 5).

    Example:
        >>> penalty_N1([[1, 1, 1, 1, 1, 0]])
        3
    """
    return sum(_run_penalty(line) for line in _lines(rows))


def penalty_N2(rows: Sequence[Sequence[Optional[int]]]) -> int:
    """
    Calculate penalty for 2x2 blocks of same color (Rule N2).

    Each block adds 3, overlapping blocks are counted independently.

    Example:
        >>> penalty_N2([[1, 1, 1], [1, 1, 1]])
        6
    """
    grid = _as_array(rows)
    if grid.shape[0] < 2 or grid.shape[1] < 2:
        return 0
    top_left = grid[:-1, :-1]
    same = (
        (top_left >= 0)
        & (top_left == grid[:-1, 1:])
        & (top_left == grid[1:, :-1])
        & (top_left == grid[1:, 1:])
    )
    return 3 * int(same.sum())


def penalty_N3(rows: Sequence[Sequence[Optional[int]]]) -> int:
    """
    Calculate penalty for finder-like patterns (Rule N3).

    Each 7-module window, horizontal or vertical, reading
    dark-light-dark-dark-dark-light-dark adds 40.
    """
    score = 0
    for line in _lines(rows):
        for i in range(len(line) - 6):
            if tuple(line[i:i + 7]) == FINDER_LIKE:
                score += 40
    return score


def penalty_N4(rows: Sequence[Sequence[Optional[int]]]) -> int:
    """
    Calculate penalty for dark/light module ratio (Rule N4).

    10 * floor(abs(dark_percent - 50) / 5), computed in integers.

    Example:
        >>> penalty_N4([[1, 1, 1, 0]])  # 75% dark
        50
    """
    grid = _as_array(rows)
    total = int((grid >= 0).sum())
    if total == 0:
        return 0
    dark = int((grid == 1).sum())
    return 10 * (abs(dark * 100 - 50 * total) // (5 * total))


def compute_mask_penalty(matrix: Sequence[Sequence[Optional[int]]]) -> PenaltyScore:
    """
    Calculate the complete mask penalty of a candidate matrix.

    Args:
        matrix (Sequence[Sequence[Optional[int]]]): Module values (1 dark, 0 light)

    Returns:
        PenaltyScore: N1-N4 sub-scores; ``total`` is the selection criterion
    """
    return PenaltyScore(
        penalty_N1(matrix),
        penalty_N2(matrix),
        penalty_N3(matrix),
        penalty_N4(matrix),
    )
