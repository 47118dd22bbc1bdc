import base64
from io import BytesIO

from PIL import Image

from qrengine import make_qr
from qrengine.renderer import PALETTE, module_zones, render_png, render_svg


def test_png_size_and_metrics() -> None:
    symbol = make_qr("01234567", ecc='H', version=1)
    b64, metrics = render_png(symbol, border=4, scale=6)
    img = Image.open(BytesIO(base64.b64decode(b64)))
    assert img.format == 'PNG'
    assert img.size == (174, 174)
    assert metrics['size'] == 21
    assert metrics['modules'] == 441
    assert metrics['data_modules'] == 208
    assert metrics['functional_modules'] == 233
    assert metrics['dark_modules'] == sum(sum(row) for row in symbol.matrix)


def test_plain_png_is_black_and_white() -> None:
    symbol = make_qr("HELLO")
    b64, _ = render_png(symbol, border=2, scale=3)
    img = Image.open(BytesIO(base64.b64decode(b64))).convert('RGB')
    assert img.getpixel((0, 0)) == PALETTE['background']
    assert img.getpixel((2 * 3, 2 * 3)) == (0, 0, 0)


def test_colored_png_paints_finder() -> None:
    symbol = make_qr("HELLO")
    b64, _ = render_png(symbol, border=4, scale=6, colored=True)
    img = Image.open(BytesIO(base64.b64decode(b64))).convert('RGB')
    assert img.getpixel((24, 24)) == PALETTE['finder']
    # separator at (7, 0) is light gray
    assert img.getpixel((24, (7 + 4) * 6)) == PALETTE['separator']


def test_zones_split_data_and_ecc() -> None:
    symbol = make_qr("01234567", ecc='H', version=1)
    zones = module_zones(symbol)
    flat = [z for row in zones for z in row]
    assert flat.count('data') == 9 * 8
    assert flat.count('ecc') == 17 * 8
    assert zones[20][20] == 'data'
    assert zones[0][0] == 'finder'


def test_svg_output() -> None:
    symbol = make_qr("HELLO")
    svg = render_svg(symbol, border=4, scale=10)
    text = svg.decode('utf-8')
    assert text.startswith('<?xml')
    assert 'width="290"' in text
    dark = sum(sum(row) for row in symbol.matrix)
    assert text.count('<rect') == dark + 1


def test_colored_svg_uses_palette() -> None:
    symbol = make_qr("HELLO", version=7)
    text = render_svg(symbol, colored=True).decode('utf-8')
    assert 'rgb(128, 0, 128)' in text
    assert 'rgb(20, 90, 160)' in text
