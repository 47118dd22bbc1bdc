# -*- coding: utf-8 -*-
"""
Galois Field GF(256) Module

Arithmetic over GF(2^8) as used by the QR Code Reed-Solomon code. The field
is generated by the primitive polynomial x^8 + x^4 + x^3 + x^2 + 1 (0x11D)
with alpha = 2.

The exponent and logarithm tables are built once when the module is first
imported and are stored as tuples, so every caller shares the same read-only
instance. Functions accept an explicit ``field`` argument for callers that
want to pass the tables around themselves.

Functions:
    build_field: Construct the exponent/log tables
    gf_multiply: Multiply two field elements
    gf_divide: Divide two field elements
"""

from typing import NamedTuple, Tuple


PRIMITIVE_POLYNOMIAL = 0x11D


class GaloisField(NamedTuple):
    """Immutable exponent/log lookup tables for GF(256)."""
    exp: Tuple[int, ...]
    log: Tuple[int, ...]


def build_field(primitive: int = PRIMITIVE_POLYNOMIAL) -> GaloisField:
    """
    Build exponent and logarithm tables for GF(256).

    Starting at 1, each step shifts left by one (multiplies by alpha) and
    reduces by the primitive polynomial when the value overflows 8 bits.
    ``exp`` holds 256 entries with ``exp[255] == exp[0] == 1``; ``log[0]`` is
    unused and left at 0.

    Args:
        primitive (int): Primitive polynomial including the x^8 term

    Returns:
        GaloisField: The lookup tables
    """
    exp = [0] * 256
    log = [0] * 256
    x = 1
    for i in range(255):
        exp[i] = x
        log[x] = i
        x <<= 1
        if x & 0x100:
            x ^= primitive
    exp[255] = exp[0]
    return GaloisField(tuple(exp), tuple(log))


GF256 = build_field()


def gf_multiply(a: int, b: int, field: GaloisField = GF256) -> int:
    if a == 0 or b == 0:
        return 0
    return field.exp[(field.log[a] + field.log[b]) % 255]


def gf_divide(a: int, b: int, field: GaloisField = GF256) -> int:
    if b == 0:
        raise ZeroDivisionError("Division by zero in GF(256)")
    if a == 0:
        return 0
    return field.exp[(field.log[a] - field.log[b]) % 255]
