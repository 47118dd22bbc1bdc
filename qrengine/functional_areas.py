# -*- coding: utf-8 -*-
"""
QR Code Functional Areas Module

Builds the function patterns of a QR Code symbol according to ISO/IEC
18004:2015 section 7.3: finder patterns with their separators, timing
patterns, alignment patterns, the reserved format and version information
areas and the dark module.

Every builder step takes a ``SymbolMatrix`` and returns a new one, so each
intermediate layout stays valid for inspection after the next step ran.

Functions:
    create_empty_matrix: Allocate a size x size grid for a version
    place_finder_patterns: Stamp the three finder patterns and separators
    place_timing_patterns: Stamp the row 6 / column 6 timing lines
    place_alignment_patterns: Stamp the version's alignment patterns
    reserve_info_areas: Reserve format/version areas, set the dark module
    mark_data_modules: Type every remaining cell as data
    function_pattern_stages: All of the above, stage by stage
    build_function_matrix: Final function-pattern layout of a version
"""

from typing import List, NamedTuple, Optional, Tuple

from .tables import ALIGNMENT_PATTERN_POSITIONS, MAX_VERSION, MIN_VERSION, symbol_size

Grid = Tuple[Tuple[Optional[int], ...], ...]
TypeGrid = Tuple[Tuple[str, ...], ...]


class SymbolMatrix(NamedTuple):
    """
    Module values paired with a parallel module type grid.

    ``modules[r][c]`` is 1 (dark), 0 (light) or None (not yet filled);
    ``types[r][c]`` is one of 'finder', 'separator', 'timing', 'alignment',
    'format', 'version', 'data' or 'empty'.
    """
    modules: Grid
    types: TypeGrid

    @property
    def size(self) -> int:
        return len(self.modules)

    @property
    def version(self) -> int:
        return (self.size - 17) // 4

    def thaw(self) -> Tuple[List[List[Optional[int]]], List[List[str]]]:
        """Mutable copies of both grids."""
        return [list(row) for row in self.modules], [list(row) for row in self.types]

    @classmethod
    def freeze(cls, modules: List[List[Optional[int]]], types: List[List[str]]) -> 'SymbolMatrix':
        return cls(tuple(tuple(row) for row in modules), tuple(tuple(row) for row in types))


def create_empty_matrix(version: int) -> SymbolMatrix:
    if not MIN_VERSION <= version <= MAX_VERSION:
        raise ValueError(f"Version must be between {MIN_VERSION} and {MAX_VERSION}, got {version}")
    size = symbol_size(version)
    return SymbolMatrix(
        tuple((None,) * size for _ in range(size)),
        tuple(('empty',) * size for _ in range(size)),
    )


def place_finder_patterns(matrix: SymbolMatrix) -> SymbolMatrix:
    """
    Stamp the finder patterns at the three corners other than bottom-right.

    Pattern: 1111111
             1000001
             1011101
             1011101
             1011101
             1000001
             1111111

    The 1-module light border around each finder is typed 'separator'.
    """
    modules, types = matrix.thaw()
    size = matrix.size
    for (r0, c0) in ((0, 0), (0, size - 7), (size - 7, 0)):
        for r in range(r0 - 1, r0 + 8):
            for c in range(c0 - 1, c0 + 8):
                if not (0 <= r < size and 0 <= c < size):
                    continue
                dr, dc = r - r0, c - c0
                if 0 <= dr <= 6 and 0 <= dc <= 6:
                    ring = max(abs(dr - 3), abs(dc - 3))
                    modules[r][c] = 0 if ring == 2 else 1
                    types[r][c] = 'finder'
                else:
                    modules[r][c] = 0
                    types[r][c] = 'separator'
    return SymbolMatrix.freeze(modules, types)


def place_timing_patterns(matrix: SymbolMatrix) -> SymbolMatrix:
    """Alternate dark/light along row 6 and column 6 between the separators, dark on even indices."""
    modules, types = matrix.thaw()
    size = matrix.size
    for i in range(8, size - 8):
        bit = 1 if i % 2 == 0 else 0
        modules[6][i] = bit
        types[6][i] = 'timing'
        modules[i][6] = bit
        types[i][6] = 'timing'
    return SymbolMatrix.freeze(modules, types)


def alignment_pattern_centers(version: int) -> List[Tuple[int, int]]:
    """
    Centre coordinates of the alignment patterns actually drawn for a version.

    Every pairing of the version's coordinates is a centre, except the three
    that would fall on a finder pattern.

    Example:
        >>> alignment_pattern_centers(7)
        [(6, 22), (22, 6), (22, 22), (22, 38), (38, 22), (38, 38)]
    """
    positions = ALIGNMENT_PATTERN_POSITIONS[version]
    if not positions:
        return []
    first, last = positions[0], positions[-1]
    skipped = {(first, first), (first, last), (last, first)}
    return [(r, c) for r in positions for c in positions if (r, c) not in skipped]


def place_alignment_patterns(matrix: SymbolMatrix) -> SymbolMatrix:
    """
    Stamp the 5x5 alignment patterns of the matrix's version.

    Pattern: 11111
             10001
             10101
             10001
             11111

    Alignment patterns on row or column 6 overwrite the timing modules there.
    """
    modules, types = matrix.thaw()
    for (cy, cx) in alignment_pattern_centers(matrix.version):
        for dr in range(-2, 3):
            for dc in range(-2, 3):
                modules[cy + dr][cx + dc] = 0 if max(abs(dr), abs(dc)) == 1 else 1
                types[cy + dr][cx + dc] = 'alignment'
    return SymbolMatrix.freeze(modules, types)


def format_info_positions(size: int) -> Tuple[List[Tuple[int, int]], List[Tuple[int, int]]]:
    """
    Module positions of both format information copies.

    Index ``i`` of each list holds format bit ``i`` (bit 0 = least significant).
    The first copy wraps around the top-left finder, the second is split
    between the top-right and bottom-left finders.
    """
    first = [(i, 8) for i in range(6)] + [(7, 8), (8, 8), (8, 7)]
    first += [(8, 14 - i) for i in range(9, 15)]
    second = [(8, size - 1 - i) for i in range(8)]
    second += [(size - 15 + i, 8) for i in range(8, 15)]
    return first, second


def version_info_positions(size: int) -> Tuple[List[Tuple[int, int]], List[Tuple[int, int]]]:
    """
    Module positions of both version information blocks.

    Index ``i`` holds version bit ``i`` (bit 0 = least significant); the first
    list is the 3x6 block above the bottom-left finder, the second the 6x3
    block left of the top-right finder.
    """
    bottom_left = [(size - 11 + i % 3, i // 3) for i in range(18)]
    top_right = [(i // 3, size - 11 + i % 3) for i in range(18)]
    return bottom_left, top_right


def dark_module_position(version: int) -> Tuple[int, int]:
    return 4 * version + 9, 8


def reserve_info_areas(matrix: SymbolMatrix) -> SymbolMatrix:
    """
    Reserve the format (and for version 7+ the version) information areas.

    Reserved modules hold 0 until the real information is written after
    masking. The dark module is set to 1 and typed 'format'.
    """
    modules, types = matrix.thaw()
    size = matrix.size
    first, second = format_info_positions(size)
    for (r, c) in first + second:
        modules[r][c] = 0
        types[r][c] = 'format'

    if matrix.version >= 7:
        bottom_left, top_right = version_info_positions(size)
        for (r, c) in bottom_left + top_right:
            modules[r][c] = 0
            types[r][c] = 'version'

    r, c = dark_module_position(matrix.version)
    modules[r][c] = 1
    types[r][c] = 'format'
    return SymbolMatrix.freeze(modules, types)


def mark_data_modules(matrix: SymbolMatrix) -> SymbolMatrix:
    types = tuple(
        tuple('data' if t == 'empty' else t for t in row) for row in matrix.types
    )
    return SymbolMatrix(matrix.modules, types)


def function_pattern_stages(version: int) -> Tuple[Tuple[str, SymbolMatrix], ...]:
    """
    Build the function patterns of ``version`` and keep every step.

    Returns:
        Tuple[Tuple[str, SymbolMatrix], ...]: (stage name, matrix) in build order
    """
    stages = []
    matrix = create_empty_matrix(version)
    for name, step in (
        ('finder_patterns', place_finder_patterns),
        ('timing_patterns', place_timing_patterns),
        ('alignment_patterns', place_alignment_patterns),
        ('reserved_areas', reserve_info_areas),
        ('function_patterns', mark_data_modules),
    ):
        matrix = step(matrix)
        stages.append((name, matrix))
    return tuple(stages)


def build_function_matrix(version: int) -> SymbolMatrix:
    """
    Build the complete function-pattern layout of a version.

    Args:
        version (int): QR Code version (1-40)

    Returns:
        SymbolMatrix: Function modules set, all other cells typed 'data' and None

    Example:
        >>> matrix = build_function_matrix(1)
        >>> matrix.size
        21
        >>> sum(row.count('data') for row in matrix.types)
        208
    """
    return function_pattern_stages(version)[-1][1]
