"""
Live aircraft endpoints.

Provides endpoints for:
- GET /api/aircraft - Aircraft in the live snapshot
- GET /api/aircraft/geojson - Same snapshot as a GeoJSON FeatureCollection
"""

import logging

from flask import Blueprint, current_app, jsonify

from radar.models import Snapshot

logger = logging.getLogger(__name__)

aircraft_bp = Blueprint('aircraft', __name__, url_prefix='/api/aircraft')


def _live_snapshot() -> Snapshot:
    tracker = current_app.config['TRACKER']
    snapshot = tracker.scheduler.current
    return snapshot if snapshot is not None else Snapshot()


@aircraft_bp.route('', methods=['GET'])
def list_aircraft():
    """
    List every aircraft currently on the map.

    Returns the snapshot metadata and, per aircraft, the callsign,
    origin, position, heading and the raw state vector.
    """
    return jsonify(_live_snapshot().to_dict())


@aircraft_bp.route('/geojson', methods=['GET'])
def aircraft_geojson():
    """Live snapshot as point features for a map layer."""
    return jsonify(_live_snapshot().to_geojson())
