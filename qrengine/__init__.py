# -*- coding: utf-8 -*-
"""
QR Engine - Core Module

This package builds QR Code symbols (ISO/IEC 18004) from scratch: mode
selection, bit-stream packing, Reed-Solomon error correction, module
placement, mask selection and BCH coded format/version information,
including decoding of the format and version fields and of complete
symbol matrices back to text.

Modules:
    tables: Static ISO/IEC 18004 reference tables
    analysis: Mode selection and minimum version search
    bitstream: Data bit-stream packing
    galois: GF(256) arithmetic
    reed_solomon: Error correction codewords, blocks and interleaving
    functional_areas: Function pattern layout
    placement: Zigzag module placement
    penalties: Mask penalty rules N1-N4
    masking: Mask patterns and mask selection
    info_coder: Format/version information encoding and decoding
    qr_generator: Main QR code generation functions
    qr_decoder: Symbol matrix to text decoding with error correction
    renderer: PNG/SVG rendering with optional zone coloring
"""

__version__ = "1.0.0"
__author__ = "QR Generator Advanced Team"

from .exceptions import QREngineError, StructuralInconsistencyError
from .qr_generator import AnalysisFailure, FinalSymbol, make_qr, evaluate_all_masks
from .qr_decoder import DecodeFailure, DecodedSymbol, decode_symbol
from .analysis import analyze_data, compare_encoding_costs
from .info_coder import (
    decode_format_info, decode_version_info, read_format_info, read_version_info,
)
from .masking import apply_mask
from .penalties import compute_mask_penalty
from .renderer import render_png, render_svg

__all__ = [
    'make_qr',
    'evaluate_all_masks',
    'AnalysisFailure',
    'FinalSymbol',
    'decode_symbol',
    'DecodeFailure',
    'DecodedSymbol',
    'analyze_data',
    'compare_encoding_costs',
    'decode_format_info',
    'decode_version_info',
    'read_format_info',
    'read_version_info',
    'apply_mask',
    'compute_mask_penalty',
    'render_png',
    'render_svg',
    'QREngineError',
    'StructuralInconsistencyError',
]
