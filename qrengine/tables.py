# -*- coding: utf-8 -*-
"""
QR Code Reference Tables

Static constants taken from ISO/IEC 18004:2015. Nothing in here is derived at
runtime; the engine consumes these tables as configuration data.

Tables:
    EC_BLOCK_TABLE: Reed-Solomon block plan per (version, level)
    DATA_CODEWORDS: Data capacity in codewords per (version, level)
    ALIGNMENT_PATTERN_POSITIONS: Alignment pattern centre coordinates per version
    VERSION_INFO_TABLE: Canonical 18-bit version information per version (7-40)
    REMAINDER_BITS: Remainder bits appended after the final codeword
"""

from typing import Dict, NamedTuple, Tuple


ERROR_LEVELS = ('L', 'M', 'Q', 'H')
MODES = ('numeric', 'alphanumeric', 'byte', 'kanji')
MIN_VERSION = 1
MAX_VERSION = 40

# ISO/IEC 18004 Table 2
MODE_INDICATORS = {
    'numeric': '0001',
    'alphanumeric': '0010',
    'byte': '0100',
    'kanji': '1000',
}

# ISO/IEC 18004 Table 3, keyed by version band (1-9, 10-26, 27-40)
CHARACTER_COUNT_BITS = {
    'numeric': (10, 12, 14),
    'alphanumeric': (9, 11, 13),
    'byte': (8, 16, 16),
    'kanji': (8, 10, 12),
}

ALPHANUMERIC_CHARS = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ $%*+-./:'

PAD_CODEWORDS = ('11101100', '00010001')


class BlockGroup(NamedTuple):
    """A run of equally sized Reed-Solomon blocks."""
    block_count: int
    data_codewords: int


class ECBlockPlan(NamedTuple):
    """Block structure for one (version, level) pair."""
    ec_codewords_per_block: int
    groups: Tuple[BlockGroup, ...]

    @property
    def block_count(self) -> int:
        return sum(g.block_count for g in self.groups)

    @property
    def total_data_codewords(self) -> int:
        return sum(g.block_count * g.data_codewords for g in self.groups)

    @property
    def total_ec_codewords(self) -> int:
        return self.block_count * self.ec_codewords_per_block


# ISO/IEC 18004 Table 9
# version: {level: (ec codewords per block, (blocks, data codewords), ...)}
_EC_BLOCKS = {
    1: {'L': (7, (1, 19),), 'M': (10, (1, 16),), 'Q': (13, (1, 13),), 'H': (17, (1, 9),)},
    2: {'L': (10, (1, 34),), 'M': (16, (1, 28),), 'Q': (22, (1, 22),), 'H': (28, (1, 16),)},
    3: {'L': (15, (1, 55),), 'M': (26, (1, 44),), 'Q': (18, (2, 17),), 'H': (22, (2, 13),)},
    4: {'L': (20, (1, 80),), 'M': (18, (2, 32),), 'Q': (26, (2, 24),), 'H': (16, (4, 9),)},
    5: {'L': (26, (1, 108),), 'M': (24, (2, 43),), 'Q': (18, (2, 15), (2, 16)), 'H': (22, (2, 11), (2, 12))},
    6: {'L': (18, (2, 68),), 'M': (16, (4, 27),), 'Q': (24, (4, 19),), 'H': (28, (4, 15),)},
    7: {'L': (20, (2, 78),), 'M': (18, (4, 31),), 'Q': (18, (2, 14), (4, 15)), 'H': (26, (4, 13), (1, 14))},
    8: {'L': (24, (2, 97),), 'M': (22, (2, 38), (2, 39)), 'Q': (22, (4, 18), (2, 19)), 'H': (26, (4, 14), (2, 15))},
    9: {'L': (30, (2, 116),), 'M': (22, (3, 36), (2, 37)), 'Q': (20, (4, 16), (4, 17)), 'H': (24, (4, 12), (4, 13))},
    10: {'L': (18, (2, 68), (2, 69)), 'M': (26, (4, 43), (1, 44)), 'Q': (24, (6, 19), (2, 20)), 'H': (28, (6, 15), (2, 16))},
    11: {'L': (20, (4, 81),), 'M': (30, (1, 50), (4, 51)), 'Q': (28, (4, 22), (4, 23)), 'H': (24, (3, 12), (8, 13))},
    12: {'L': (24, (2, 92), (2, 93)), 'M': (22, (6, 36), (2, 37)), 'Q': (26, (4, 20), (6, 21)), 'H': (28, (7, 14), (4, 15))},
    13: {'L': (26, (4, 107),), 'M': (22, (8, 37), (1, 38)), 'Q': (24, (8, 20), (4, 21)), 'H': (22, (12, 11), (4, 12))},
    14: {'L': (30, (3, 115), (1, 116)), 'M': (24, (4, 40), (5, 41)), 'Q': (20, (11, 16), (5, 17)), 'H': (24, (11, 12), (5, 13))},
    15: {'L': (22, (5, 87), (1, 88)), 'M': (24, (5, 41), (5, 42)), 'Q': (30, (5, 24), (7, 25)), 'H': (24, (11, 12), (7, 13))},
    16: {'L': (24, (5, 98), (1, 99)), 'M': (28, (7, 45), (3, 46)), 'Q': (24, (15, 19), (2, 20)), 'H': (30, (3, 15), (13, 16))},
    17: {'L': (28, (1, 107), (5, 108)), 'M': (28, (10, 46), (1, 47)), 'Q': (28, (1, 22), (15, 23)), 'H': (28, (2, 14), (17, 15))},
    18: {'L': (30, (5, 120), (1, 121)), 'M': (26, (9, 43), (4, 44)), 'Q': (28, (17, 22), (1, 23)), 'H': (28, (2, 14), (19, 15))},
    19: {'L': (28, (3, 113), (4, 114)), 'M': (26, (3, 44), (11, 45)), 'Q': (26, (17, 21), (4, 22)), 'H': (26, (9, 13), (16, 14))},
    20: {'L': (28, (3, 107), (5, 108)), 'M': (26, (3, 41), (13, 42)), 'Q': (30, (15, 24), (5, 25)), 'H': (28, (15, 15), (10, 16))},
    21: {'L': (28, (4, 116), (4, 117)), 'M': (26, (17, 42),), 'Q': (28, (17, 22), (6, 23)), 'H': (30, (19, 16), (6, 17))},
    22: {'L': (28, (2, 111), (7, 112)), 'M': (28, (17, 46),), 'Q': (30, (7, 24), (16, 25)), 'H': (24, (34, 13),)},
    23: {'L': (30, (4, 121), (5, 122)), 'M': (28, (4, 47), (14, 48)), 'Q': (30, (11, 24), (14, 25)), 'H': (30, (16, 15), (14, 16))},
    24: {'L': (30, (6, 117), (4, 118)), 'M': (28, (6, 45), (14, 46)), 'Q': (30, (11, 24), (16, 25)), 'H': (30, (30, 16), (2, 17))},
    25: {'L': (26, (8, 106), (4, 107)), 'M': (28, (8, 47), (13, 48)), 'Q': (30, (7, 24), (22, 25)), 'H': (30, (22, 15), (13, 16))},
    26: {'L': (28, (10, 114), (2, 115)), 'M': (28, (19, 46), (4, 47)), 'Q': (28, (28, 22), (6, 23)), 'H': (30, (33, 16), (4, 17))},
    27: {'L': (30, (8, 122), (4, 123)), 'M': (28, (22, 45), (3, 46)), 'Q': (30, (8, 23), (26, 24)), 'H': (30, (12, 15), (28, 16))},
    28: {'L': (30, (3, 117), (10, 118)), 'M': (28, (3, 45), (23, 46)), 'Q': (30, (4, 24), (31, 25)), 'H': (30, (11, 15), (31, 16))},
    29: {'L': (30, (7, 116), (7, 117)), 'M': (28, (21, 45), (7, 46)), 'Q': (30, (1, 23), (37, 24)), 'H': (30, (19, 15), (26, 16))},
    30: {'L': (30, (5, 115), (10, 116)), 'M': (28, (19, 47), (10, 48)), 'Q': (30, (15, 24), (25, 25)), 'H': (30, (23, 15), (25, 16))},
    31: {'L': (30, (13, 115), (3, 116)), 'M': (28, (2, 46), (29, 47)), 'Q': (30, (42, 24), (1, 25)), 'H': (30, (23, 15), (28, 16))},
    32: {'L': (30, (17, 115),), 'M': (28, (10, 46), (23, 47)), 'Q': (30, (10, 24), (35, 25)), 'H': (30, (19, 15), (35, 16))},
    33: {'L': (30, (17, 115), (1, 116)), 'M': (28, (14, 46), (21, 47)), 'Q': (30, (29, 24), (19, 25)), 'H': (30, (11, 15), (46, 16))},
    34: {'L': (30, (13, 115), (6, 116)), 'M': (28, (14, 46), (23, 47)), 'Q': (30, (44, 24), (7, 25)), 'H': (30, (59, 16), (1, 17))},
    35: {'L': (30, (12, 121), (7, 122)), 'M': (28, (12, 47), (26, 48)), 'Q': (30, (39, 24), (14, 25)), 'H': (30, (22, 15), (41, 16))},
    36: {'L': (30, (6, 121), (14, 122)), 'M': (28, (6, 47), (34, 48)), 'Q': (30, (46, 24), (10, 25)), 'H': (30, (2, 15), (64, 16))},
    37: {'L': (30, (17, 122), (4, 123)), 'M': (28, (29, 46), (14, 47)), 'Q': (30, (49, 24), (10, 25)), 'H': (30, (24, 15), (46, 16))},
    38: {'L': (30, (4, 122), (18, 123)), 'M': (28, (13, 46), (32, 47)), 'Q': (30, (48, 24), (14, 25)), 'H': (30, (42, 15), (32, 16))},
    39: {'L': (30, (20, 117), (4, 118)), 'M': (28, (40, 47), (7, 48)), 'Q': (30, (43, 24), (22, 25)), 'H': (30, (10, 15), (67, 16))},
    40: {'L': (30, (19, 118), (6, 119)), 'M': (28, (18, 47), (31, 48)), 'Q': (30, (34, 24), (34, 25)), 'H': (30, (20, 15), (61, 16))},
}

EC_BLOCK_TABLE: Dict[Tuple[int, str], ECBlockPlan] = {
    (version, level): ECBlockPlan(entry[0], tuple(BlockGroup(*g) for g in entry[1:]))
    for version, levels in _EC_BLOCKS.items()
    for level, entry in levels.items()
}

# ISO/IEC 18004 Table 7, number of data codewords (L, M, Q, H)
_DATA_CODEWORDS = {
    1: (19, 16, 13, 9),
    2: (34, 28, 22, 16),
    3: (55, 44, 34, 26),
    4: (80, 64, 48, 36),
    5: (108, 86, 62, 46),
    6: (136, 108, 76, 60),
    7: (156, 124, 88, 66),
    8: (194, 154, 110, 86),
    9: (232, 182, 132, 100),
    10: (274, 216, 154, 122),
    11: (324, 254, 180, 140),
    12: (370, 290, 206, 158),
    13: (428, 334, 244, 180),
    14: (461, 365, 261, 197),
    15: (523, 415, 295, 223),
    16: (589, 453, 325, 253),
    17: (647, 507, 367, 283),
    18: (721, 563, 397, 313),
    19: (795, 627, 445, 341),
    20: (861, 669, 485, 385),
    21: (932, 714, 512, 406),
    22: (1006, 782, 568, 442),
    23: (1094, 860, 614, 464),
    24: (1174, 914, 664, 514),
    25: (1276, 1000, 718, 538),
    26: (1370, 1062, 754, 596),
    27: (1468, 1128, 808, 628),
    28: (1531, 1193, 871, 661),
    29: (1631, 1267, 911, 701),
    30: (1735, 1373, 985, 745),
    31: (1843, 1455, 1033, 793),
    32: (1955, 1541, 1115, 845),
    33: (2071, 1631, 1171, 901),
    34: (2191, 1725, 1231, 961),
    35: (2306, 1812, 1286, 986),
    36: (2434, 1914, 1354, 1054),
    37: (2566, 1992, 1426, 1096),
    38: (2702, 2102, 1502, 1142),
    39: (2812, 2216, 1582, 1222),
    40: (2956, 2334, 1666, 1276),
}

DATA_CODEWORDS: Dict[Tuple[int, str], int] = {
    (version, level): counts[i]
    for version, counts in _DATA_CODEWORDS.items()
    for i, level in enumerate(ERROR_LEVELS)
}

# ISO/IEC 18004 Annex E
ALIGNMENT_PATTERN_POSITIONS: Dict[int, Tuple[int, ...]] = {
    1: (),
    2: (6, 18),
    3: (6, 22),
    4: (6, 26),
    5: (6, 30),
    6: (6, 34),
    7: (6, 22, 38),
    8: (6, 24, 42),
    9: (6, 26, 46),
    10: (6, 28, 50),
    11: (6, 30, 54),
    12: (6, 32, 58),
    13: (6, 34, 62),
    14: (6, 26, 46, 66),
    15: (6, 26, 48, 70),
    16: (6, 26, 50, 74),
    17: (6, 30, 54, 78),
    18: (6, 30, 56, 82),
    19: (6, 30, 58, 86),
    20: (6, 34, 62, 90),
    21: (6, 28, 50, 72, 94),
    22: (6, 26, 50, 74, 98),
    23: (6, 30, 54, 78, 102),
    24: (6, 28, 54, 80, 106),
    25: (6, 32, 58, 84, 110),
    26: (6, 30, 58, 86, 114),
    27: (6, 34, 62, 90, 118),
    28: (6, 26, 50, 74, 98, 122),
    29: (6, 30, 54, 78, 102, 126),
    30: (6, 26, 52, 78, 104, 130),
    31: (6, 30, 56, 82, 108, 134),
    32: (6, 34, 60, 86, 112, 138),
    33: (6, 30, 58, 86, 114, 142),
    34: (6, 34, 62, 90, 118, 146),
    35: (6, 30, 54, 78, 102, 126, 150),
    36: (6, 24, 50, 76, 102, 128, 154),
    37: (6, 28, 54, 80, 106, 132, 158),
    38: (6, 32, 58, 84, 110, 136, 162),
    39: (6, 26, 54, 82, 110, 138, 166),
    40: (6, 30, 58, 86, 114, 142, 170),
}

# ISO/IEC 18004 Annex D, Table D.1
VERSION_INFO_TABLE: Dict[int, int] = {
    7: 0x07C94,
    8: 0x085BC,
    9: 0x09A99,
    10: 0x0A4D3,
    11: 0x0BBF6,
    12: 0x0C762,
    13: 0x0D847,
    14: 0x0E60D,
    15: 0x0F928,
    16: 0x10B78,
    17: 0x1145D,
    18: 0x12A17,
    19: 0x13532,
    20: 0x149A6,
    21: 0x15683,
    22: 0x168C9,
    23: 0x177EC,
    24: 0x18EC4,
    25: 0x191E1,
    26: 0x1AFAB,
    27: 0x1B08E,
    28: 0x1CC1A,
    29: 0x1D33F,
    30: 0x1ED75,
    31: 0x1F250,
    32: 0x209D5,
    33: 0x216F0,
    34: 0x228BA,
    35: 0x2379F,
    36: 0x24B0B,
    37: 0x2542E,
    38: 0x26A64,
    39: 0x27541,
    40: 0x28C69,
}

REMAINDER_BITS: Dict[int, int] = {
    1: 0, 2: 7, 3: 7, 4: 7, 5: 7, 6: 7, 7: 0, 8: 0, 9: 0, 10: 0,
    11: 0, 12: 0, 13: 0, 14: 3, 15: 3, 16: 3, 17: 3, 18: 3, 19: 3, 20: 3,
    21: 4, 22: 4, 23: 4, 24: 4, 25: 4, 26: 4, 27: 4, 28: 3, 29: 3, 30: 3,
    31: 3, 32: 3, 33: 3, 34: 3, 35: 0, 36: 0, 37: 0, 38: 0, 39: 0, 40: 0,
}


def version_band(version: int) -> int:
    """Index of the character-count band for ``version`` (0: 1-9, 1: 10-26, 2: 27-40)."""
    if version <= 9:
        return 0
    if version <= 26:
        return 1
    return 2


def symbol_size(version: int) -> int:
    return 4 * version + 17


def data_capacity_bits(version: int, level: str) -> int:
    return DATA_CODEWORDS[(version, level)] * 8


def total_codewords(version: int) -> int:
    plan = EC_BLOCK_TABLE[(version, 'L')]
    return plan.total_data_codewords + plan.total_ec_codewords
