#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
QR Engine - Flask Web Application

Routes:
    /                    Preview page (form + colored PNG + mask scores)
    /api/encode          Symbol as JSON
    /api/decode/format   Decode a 15-bit format information word
    /api/decode/version  Decode an 18-bit version information word
    /api/decode/symbol   Decode a symbol matrix back to its text
    /export/png          PNG download
    /export/svg          SVG download

Configuration is read from QRENGINE_* environment variables, e.g.
QRENGINE_DEFAULT_ECC=Q or QRENGINE_LOG_LEVEL=DEBUG.
"""

import base64
import logging
from io import BytesIO
from typing import Tuple

from flask import Flask, current_app, jsonify, render_template_string, request, send_file

from qrengine import (
    AnalysisFailure, DecodeFailure, compare_encoding_costs, decode_format_info,
    decode_symbol, decode_version_info, make_qr, read_format_info, read_version_info,
    render_png, render_svg,
)
from qrengine.renderer import PALETTE

app = Flask(__name__)
app.config.update(
    DEFAULT_ECC='M',
    DEFAULT_BORDER=4,
    MAX_SCALE=40,
    LOG_LEVEL='INFO',
)
app.config.from_prefixed_env("QRENGINE")

# Configure logging
logging.basicConfig(level=app.config['LOG_LEVEL'])
logger = logging.getLogger(__name__)

TEMPLATE = """
<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <title>QR Engine</title>
  <style>
    body{font-family:Inter, Arial, sans-serif; padding:18px; background:#fff}
    .card{display:inline-block;border:1px solid #ddd;padding:10px;border-radius:8px;vertical-align:top;margin-right:12px}
    img{display:block;margin:6px 0;border:1px solid #ccc}
    .metrics{font-size:12px;color:#333}
    .error{color:#b00;font-weight:600}
    .notice{color:#a60}
    .best{font-weight:700}
    input[type="text"]{font-family:monospace;width:420px}
    .sw{display:inline-block;width:18px;height:12px;border:1px solid #aaa;margin-right:8px}
  </style>
</head>
<body>
  <h2>QR Engine</h2>
  <form method="post">
    <input type="text" name="text" value="{{ text }}" placeholder="Texto a codificar">
    <select name="ecc">
      {% for level in ['L', 'M', 'Q', 'H'] %}
      <option value="{{ level }}" {% if level == ecc %}selected{% endif %}>{{ level }}</option>
      {% endfor %}
    </select>
    <input type="text" name="version" value="{{ version }}" size="4" style="width:60px">
    <input type="text" name="mask" value="{{ mask }}" size="4" style="width:60px">
    <input type="text" name="border" value="{{ border }}" size="3" style="width:40px">
    <button type="submit">Generar</button>
  </form>

  {% if error %}<p class="error">{{ error }}</p>{% endif %}
  {% for notice in notices %}<p class="notice">{{ notice }}</p>{% endfor %}

  {% if qr %}
  <div class="card">
    <img src="data:image/png;base64,{{ qr.img_b64 }}" alt="QR">
    <div class="metrics">
      Version {{ qr.designator }} ({{ qr.size }}x{{ qr.size }}), modo {{ qr.mode }}, mascara {{ qr.mask }}<br>
      Format info: {{ qr.format_info }} &middot; Version info: {{ qr.version_info or '-' }}<br>
      Modulos: {{ qr.modules }} &middot; oscuros: {{ qr.dark_modules }} &middot;
      funcionales: {{ qr.functional_modules }} &middot; datos: {{ qr.data_modules }}
    </div>
  </div>
  <div class="card metrics">
    <b>Penalizaciones por mascara</b>
    <table>
      <tr><th>Mask</th><th>N1</th><th>N2</th><th>N3</th><th>N4</th><th>Total</th></tr>
      {% for e in qr.evaluations %}
      <tr class="{{ 'best' if e.pattern == qr.mask else '' }}">
        <td>{{ e.pattern }}</td><td>{{ e.penalty.n1 }}</td><td>{{ e.penalty.n2 }}</td>
        <td>{{ e.penalty.n3 }}</td><td>{{ e.penalty.n4 }}</td><td>{{ e.penalty.total }}</td>
      </tr>
      {% endfor %}
    </table>
    <b>Coste por modo (bits)</b>
    <table>
      {% for mode, cost in qr.costs.items() %}
      <tr><td>{{ mode }}</td><td>{{ cost.total }}</td></tr>
      {% endfor %}
    </table>
    <p>
      <a href="/export/png?text={{ text|urlencode }}&ecc={{ ecc }}&version={{ version }}&mask={{ mask }}&border={{ border }}">PNG</a> &middot;
      <a href="/export/svg?text={{ text|urlencode }}&ecc={{ ecc }}&version={{ version }}&mask={{ mask }}&border={{ border }}&colored=true">SVG por zonas</a>
    </p>
  </div>
  <div class="legend metrics">
    {% for zone, rgb in palette.items() %}
    <div><span class="sw" style="background:rgb{{ rgb }}"></span>{{ zone }}</div>
    {% endfor %}
  </div>
  {% endif %}
</body>
</html>
"""


def _read_params(req) -> Tuple[str, str, str, str, int, int, bool]:
    """Extract and validate QR generation parameters from Flask request."""
    config = current_app.config
    text = req.values.get('text') or ""
    ecc = (req.values.get('ecc') or config['DEFAULT_ECC']).strip().upper()
    version = (req.values.get('version') or "auto").strip().lower()
    mask = (req.values.get('mask') or "auto").strip().lower()
    colored = req.values.get('colored') == 'true'

    try:
        border = int(req.values.get('border') or config['DEFAULT_BORDER'])
        if border < 0 or border > 20:
            border = config['DEFAULT_BORDER']
    except (ValueError, TypeError):
        border = config['DEFAULT_BORDER']

    try:
        scale = int(req.values.get('scale') or 10)
        scale = min(max(scale, 1), config['MAX_SCALE'])
    except (ValueError, TypeError):
        scale = 10

    return text, ecc, version, mask, border, scale, colored


def _parse_bits(raw: str, width: int) -> int:
    """Parse a decimal, 0b... or 0x... integer that fits in ``width`` bits."""
    if not raw:
        raise ValueError("Missing 'bits' parameter")
    value = int(raw.strip(), 0)
    if not 0 <= value < (1 << width):
        raise ValueError(f"'bits' must fit in {width} bits")
    return value


def _failure_response(failure: AnalysisFailure):
    return jsonify({
        'error': failure.message,
        'reason': failure.reason,
        'minimum_version': failure.analysis.minimum_version,
        'mode': failure.analysis.mode,
    }), 422


def _symbol_json(symbol) -> dict:
    analysis = symbol.stage('analysis')
    error_correction = symbol.stage('error_correction')
    return {
        'version': symbol.version,
        'error_level': symbol.error_level,
        'mode': symbol.mode,
        'size': symbol.size,
        'mask': symbol.selected_mask_pattern,
        'format_info': symbol.format_info,
        'version_info': symbol.version_info,
        'mask_scores': {str(k): v for k, v in symbol.mask_scores.items()},
        'notices': list(analysis.notices),
        'data_codewords': list(error_correction.data_codewords),
        'ec_codewords': list(error_correction.ec_codewords),
        'matrix': [list(row) for row in symbol.matrix],
    }


@app.errorhandler(ValueError)
def handle_value_error(ex):
    logger.warning(f"Rejected request: {ex}")
    return jsonify({'error': str(ex)}), 400


@app.route('/', methods=['GET', 'POST'])
def index():
    text, ecc, version, mask, border, scale, colored = _read_params(request)
    qr_view = None
    error = None
    notices = []

    if request.method == 'POST':
        if not text.strip():
            error = "Debes ingresar el texto raw que quieres codificar."
        else:
            try:
                logger.info(f"Generating QR code with parameters: ecc={ecc}, version={version}, mask={mask}")
                symbol = make_qr(text, ecc=ecc, version=version, mask=mask)
            except ValueError as ex:
                error = f"No se pudo generar el QR con los parámetros elegidos: {ex}"
                logger.error(f"QR generation failed: {ex}")
                symbol = None

            if isinstance(symbol, AnalysisFailure):
                error = symbol.message
                notices = list(symbol.analysis.notices)
            elif symbol is not None:
                notices = list(symbol.stage('analysis').notices)
                b64, metrics = render_png(symbol, border=border, scale=6, colored=True)
                qr_view = dict(
                    metrics,
                    img_b64=b64,
                    designator=symbol.designator,
                    mode=symbol.mode,
                    mask=symbol.selected_mask_pattern,
                    format_info=format(symbol.format_info, '015b'),
                    version_info=format(symbol.version_info, '018b') if symbol.version_info is not None else None,
                    evaluations=symbol.mask_evaluations,
                    costs=compare_encoding_costs(text, symbol.version),
                )
                logger.info(f"Successfully generated QR code version {symbol.designator}")

    return render_template_string(
        TEMPLATE, text=text, ecc=ecc, version=version, mask=mask, border=border,
        qr=qr_view, error=error, notices=notices, palette=PALETTE,
    )


@app.route('/api/encode', methods=['GET', 'POST'])
def api_encode():
    text, ecc, version, mask, border, scale, colored = _read_params(request)
    if not text.strip():
        return jsonify({'error': "Missing 'text' parameter"}), 400
    symbol = make_qr(text, ecc=ecc, version=version, mask=mask)
    if isinstance(symbol, AnalysisFailure):
        return _failure_response(symbol)
    logger.info(f"Encoded {len(text)} characters as {symbol.designator}, mask {symbol.selected_mask_pattern}")
    payload = _symbol_json(symbol)
    read_back = read_format_info(symbol.matrix)
    payload['format_check'] = read_back._asdict()
    version_check = read_version_info(symbol.matrix)
    payload['version_check'] = version_check._asdict() if version_check is not None else None
    return jsonify(payload)


@app.route('/api/decode/format', methods=['GET'])
def api_decode_format():
    result = decode_format_info(_parse_bits(request.args.get('bits', ''), 15))
    return jsonify(result._asdict())


@app.route('/api/decode/version', methods=['GET'])
def api_decode_version():
    result = decode_version_info(_parse_bits(request.args.get('bits', ''), 18))
    return jsonify(result._asdict())


@app.route('/api/decode/symbol', methods=['POST'])
def api_decode_symbol():
    payload = request.get_json(silent=True) or {}
    matrix = payload.get('matrix')
    if not isinstance(matrix, list) or not all(isinstance(row, list) for row in matrix):
        return jsonify({'error': "Missing 'matrix' list of rows"}), 400
    result = decode_symbol(matrix)
    if isinstance(result, DecodeFailure):
        logger.info(f"Symbol decode failed: {result.message}")
        return jsonify({'error': result.message, 'reason': result.reason}), 422
    return jsonify({
        'text': result.text,
        'version': result.version,
        'error_level': result.error_level,
        'mask': result.mask_pattern,
        'corrected_errors': result.corrected_errors,
        'segments': [segment._asdict() for segment in result.segments],
    })


@app.route('/export/png', methods=['GET'])
def export_png():
    text, ecc, version, mask, border, scale, colored = _read_params(request)
    if not text.strip():
        return "Falta texto", 400
    symbol = make_qr(text, ecc=ecc, version=version, mask=mask)
    if isinstance(symbol, AnalysisFailure):
        return _failure_response(symbol)
    b64, _ = render_png(symbol, border=border, scale=scale, colored=colored)
    buf = BytesIO(base64.b64decode(b64))
    name = 'qr_colored_zones.png' if colored else 'qr_bw.png'
    return send_file(buf, as_attachment=True, download_name=name, mimetype='image/png')


@app.route('/export/svg', methods=['GET'])
def export_svg():
    text, ecc, version, mask, border, scale, colored = _read_params(request)
    if not text.strip():
        return "Falta texto", 400
    symbol = make_qr(text, ecc=ecc, version=version, mask=mask)
    if isinstance(symbol, AnalysisFailure):
        return _failure_response(symbol)
    svg_bytes = render_svg(symbol, border=border, scale=scale, colored=colored)
    name = 'qr_colored_zones.svg' if colored else 'qr_bw.svg'
    return send_file(BytesIO(svg_bytes), as_attachment=True,
                     download_name=name, mimetype='image/svg+xml')


if __name__ == "__main__":
    app.run(debug=True)
