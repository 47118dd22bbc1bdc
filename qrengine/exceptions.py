# -*- coding: utf-8 -*-
"""
QR Engine Exceptions

Only failures that indicate a bug or a caller mistake are raised. Expected
outcomes such as "data does not fit" or "format bits are uncorrectable" are
returned as values by the modules that produce them.
"""


class QREngineError(Exception):
    """Base class for errors raised by the engine."""


class StructuralInconsistencyError(QREngineError, RuntimeError):
    """
    Raised when module placement and the bit-stream disagree.

    The placement scan either ran out of data modules before the bit-stream
    was exhausted or finished with data modules left unfilled. This means the
    capacity tables and the matrix layout are out of sync; the symbol cannot
    be trusted and the call must not be retried.
    """

    def __init__(self, version: int, placed: int, expected: int, data_modules: int):
        self.version = version
        self.placed = placed
        self.expected = expected
        self.data_modules = data_modules
        super().__init__(
            f"Version {version}: placed {placed} of {expected} bits "
            f"into {data_modules} data modules"
        )
