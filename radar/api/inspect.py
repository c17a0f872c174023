"""
Inspection endpoints - pointer events forwarded by the map client.

Provides endpoints for:
- GET /api/inspect - Current overlay
- POST /api/inspect/move - Pointer moved, returns cursor style
- POST /api/inspect/click - Map clicked, returns overlay
- POST /api/inspect/close - Close button pressed, returns hidden overlay
"""

import logging
from typing import Optional, Tuple

from flask import Blueprint, current_app, jsonify, request

from radar.models import Position

logger = logging.getLogger(__name__)

inspect_bp = Blueprint('inspect', __name__, url_prefix='/api/inspect')


def _read_pixel(data: dict) -> Optional[Tuple[float, float]]:
    try:
        return (float(data['x']), float(data['y']))
    except (KeyError, TypeError, ValueError):
        return None


def _read_coordinate(data: dict) -> Optional[Position]:
    if data.get('longitude') is None or data.get('latitude') is None:
        return None
    try:
        return Position(longitude=float(data['longitude']), latitude=float(data['latitude']))
    except (TypeError, ValueError):
        return None


@inspect_bp.route('', methods=['GET'])
def get_overlay():
    tracker = current_app.config['TRACKER']
    return jsonify(tracker.inspection.overlay.to_dict())


@inspect_bp.route('/move', methods=['POST'])
def pointer_move():
    """
    Report the cursor style for a pointer position.

    Body: {"x": float, "y": float}
    """
    data = request.get_json(silent=True) or {}
    pixel = _read_pixel(data)
    if pixel is None:
        return jsonify({'error': 'x and y required'}), 400

    tracker = current_app.config['TRACKER']
    cursor = tracker.inspection.move(pixel)
    return jsonify({'cursor': cursor.value})


@inspect_bp.route('/click', methods=['POST'])
def pointer_click():
    """
    Inspect the aircraft under a click, or hide the popup on a miss.

    Body: {"x": float, "y": float, "longitude": float, "latitude": float}
    The map coordinate is optional; it is derived from the pixel when
    omitted.
    """
    data = request.get_json(silent=True) or {}
    pixel = _read_pixel(data)
    if pixel is None:
        return jsonify({'error': 'x and y required'}), 400

    tracker = current_app.config['TRACKER']
    coordinate = _read_coordinate(data) or tracker.surface.pixel_to_position(pixel)

    overlay = tracker.inspection.click(pixel, coordinate)
    return jsonify(overlay.to_dict())


@inspect_bp.route('/close', methods=['POST'])
def close_overlay():
    tracker = current_app.config['TRACKER']
    return jsonify(tracker.inspection.close().to_dict())
