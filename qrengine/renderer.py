# -*- coding: utf-8 -*-
"""
QR Code Renderer Module

This module draws finished symbols as PNG or SVG. The plain variant is black
on white; the colored variant paints every module by its zone (finder,
timing, alignment, format, version) and splits the encoding region into
data and error correction codewords following the placement order.

Functions:
    module_zones: Zone name of every module of a symbol
    render_png: Generate a PNG (base64) plus module metrics
    render_svg: Generate an SVG document
"""

import base64
from io import BytesIO
from typing import Any, Dict, List, Tuple

from PIL import Image, ImageDraw

from .placement import data_module_coords
from .qr_generator import FinalSymbol
from .tables import DATA_CODEWORDS


# Color palette for QR code zone visualization
PALETTE = {
    'background': (255, 255, 255),    # White background
    'dark': (0, 0, 0),                # Plain rendering
    'finder': (128, 0, 128),          # Purple - Finder patterns (3 corners)
    'separator': (230, 230, 230),     # Light gray - Visual separators
    'timing': (255, 165, 0),          # Orange - Timing patterns (row/col 6)
    'alignment': (0, 128, 128),       # Teal - Alignment patterns
    'format': (255, 0, 0),            # Red - Format information bits
    'version': (180, 0, 0),           # Dark red - Version information (v>=7)
    'data': (35, 35, 35),             # Dark gray - Data codewords
    'ecc': (20, 90, 160),             # Blue - Error correction codewords
}


def module_zones(symbol: FinalSymbol) -> List[List[str]]:
    """
    Zone name of every module.

    Function modules take their type; encoding-region modules are 'data' for
    the bits of the data codewords and 'ecc' for everything placed after
    them (EC codewords and remainder bits).
    """
    layout = symbol.stage('function_patterns')
    zones = [list(row) for row in layout.types]
    coords = data_module_coords(layout)
    data_bits = DATA_CODEWORDS[(symbol.version, symbol.error_level)] * 8
    for index, (r, c) in enumerate(coords):
        zones[r][c] = 'data' if index < data_bits else 'ecc'
    return zones


def _module_fill(zone: str, is_dark: bool, colored: bool):
    if not colored:
        return PALETTE['dark'] if is_dark else None
    if zone == 'separator':
        return PALETTE['separator']
    return PALETTE[zone] if is_dark else None


def _iter_fills(symbol: FinalSymbol, colored: bool):
    zones = module_zones(symbol) if colored else None
    for r, row in enumerate(symbol.final_matrix):
        for c, value in enumerate(row):
            fill = _module_fill(zones[r][c] if colored else '', bool(value), colored)
            if fill is not None:
                yield r, c, fill


def render_png(
    symbol: FinalSymbol,
    border: int = 4,
    scale: int = 6,
    colored: bool = False
) -> Tuple[str, Dict[str, Any]]:
    """
    Render a symbol as PNG.

    Args:
        symbol (FinalSymbol): Symbol returned by make_qr
        border (int): Quiet zone size in modules (recommended: 4+)
        scale (int): Pixel size per module
        colored (bool): Paint modules by zone instead of black

    Returns:
        Tuple[str, Dict[str, Any]]: (base64_png, metrics_dict)
            - base64_png: Base64-encoded PNG image
            - metrics_dict: Contains size, module counts, etc.

    Example:
        >>> b64, metrics = render_png(make_qr("HELLO"), colored=True)
        >>> metrics['size']
        21
    """
    size = symbol.size
    img_px = (size + 2 * border) * scale
    img = Image.new('RGB', (img_px, img_px), PALETTE['background'])
    draw = ImageDraw.Draw(img)

    for r, c, fill in _iter_fills(symbol, colored):
        x0 = (c + border) * scale
        y0 = (r + border) * scale
        draw.rectangle([x0, y0, x0 + scale - 1, y0 + scale - 1], fill=fill)

    buf = BytesIO()
    img.save(buf, format='PNG')
    b64 = base64.b64encode(buf.getvalue()).decode('ascii')

    types = symbol.stage('function_patterns').types
    data_modules = sum(row.count('data') for row in types)
    return b64, {
        'size': size,
        'modules': size * size,
        'dark_modules': sum(sum(row) for row in symbol.final_matrix),
        'functional_modules': size * size - data_modules,
        'data_modules': data_modules,
        'border': border,
        'image_px': img_px,
    }


def render_svg(
    symbol: FinalSymbol,
    border: int = 4,
    scale: int = 10,
    colored: bool = False
) -> bytes:
    """
    Render a symbol as SVG.

    Args:
        symbol (FinalSymbol): Symbol returned by make_qr
        border (int): Quiet zone size in modules
        scale (int): Pixel size per module
        colored (bool): Paint modules by zone instead of black

    Returns:
        bytes: UTF-8 encoded SVG content
    """
    px = (symbol.size + 2 * border) * scale
    out = []
    out.append('<?xml version="1.0" encoding="UTF-8"?>')
    out.append(f'<svg xmlns="http://www.w3.org/2000/svg" width="{px}" height="{px}" viewBox="0 0 {px} {px}">')
    out.append(f'<rect width="{px}" height="{px}" fill="rgb{PALETTE["background"]}"/>')

    for r, c, fill in _iter_fills(symbol, colored):
        x = (c + border) * scale
        y = (r + border) * scale
        out.append(f'<rect x="{x}" y="{y}" width="{scale}" height="{scale}" fill="rgb{fill}"/>')

    out.append('</svg>')
    return "\n".join(out).encode("utf-8")
