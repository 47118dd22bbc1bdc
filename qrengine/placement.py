# -*- coding: utf-8 -*-
"""
QR Code Module Placement Module

Places the final bit-stream into the data modules of a function-pattern
matrix following the zigzag scan of ISO/IEC 18004:2015 section 7.7.3.

Functions:
    data_module_coords: Data module coordinates in placement order
    place_data_bits: Fill every data module with one bit of the stream
"""

import logging
from typing import List, Tuple

from .exceptions import StructuralInconsistencyError
from .functional_areas import SymbolMatrix

logger = logging.getLogger(__name__)


def data_module_coords(matrix: SymbolMatrix) -> List[Tuple[int, int]]:
    """
    Get coordinates of the empty data modules in standard placement order.

    Data is placed in two-module wide columns from right to left, skipping
    column 6 (vertical timing pattern). The scan runs upward in the first
    column pair and alternates direction for each following pair; within a
    row the right module of the pair comes before the left one.

    Args:
        matrix (SymbolMatrix): Matrix with function patterns already placed

    Returns:
        List[Tuple[int, int]]: (row, col) coordinates in placement order
    """
    size = matrix.size
    coords = []
    upward = True
    col = size - 1

    while col > 0:
        if col == 6:
            col -= 1

        for i in range(size):
            r = (size - 1 - i) if upward else i
            for c in (col, col - 1):
                if matrix.types[r][c] == 'data' and matrix.modules[r][c] is None:
                    coords.append((r, c))

        upward = not upward
        col -= 2

    return coords


def place_data_bits(matrix: SymbolMatrix, bit_stream: str) -> SymbolMatrix:
    """
    Place the interleaved codewords plus remainder bits into the matrix.

    Args:
        matrix (SymbolMatrix): Function-pattern matrix of the symbol's version
        bit_stream (str): Final bit-stream ('0'/'1' characters)

    Returns:
        SymbolMatrix: New matrix with every data module set

    Raises:
        StructuralInconsistencyError: If the stream length and the number of
            data modules differ
    """
    coords = data_module_coords(matrix)
    if len(bit_stream) != len(coords):
        placed = min(len(bit_stream), len(coords))
        logger.error("Placement mismatch for version %d: %d bits, %d data modules",
                     matrix.version, len(bit_stream), len(coords))
        raise StructuralInconsistencyError(matrix.version, placed, len(bit_stream), len(coords))

    modules, types = matrix.thaw()
    for (r, c), bit in zip(coords, bit_stream):
        modules[r][c] = 1 if bit == '1' else 0
    return SymbolMatrix.freeze(modules, types)
