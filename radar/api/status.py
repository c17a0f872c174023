"""
Status endpoint.

Provides endpoints for:
- GET /api/status - Refresh loop health, map center and configuration
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

from radar.config import config

logger = logging.getLogger(__name__)

status_bp = Blueprint('status', __name__, url_prefix='/api/status')


@status_bp.route('', methods=['GET'])
def get_status():
    """
    Get refresh loop health and status information.

    Returns:
    - Refresh loop state and counters
    - Map center and zoom
    - Refresh configuration
    """
    start_time = time.perf_counter()

    tracker = current_app.config['TRACKER']
    refresh_stats = tracker.scheduler.stats
    surface = tracker.surface

    healthy = tracker.started and refresh_stats['state'] != 'failed'

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'status': 'healthy' if healthy else 'degraded',
        'refresh': refresh_stats,
        'map': {
            'center': surface.center.to_dict(),
            'zoom': surface.zoom,
        },
        'config': {
            'telemetry_url': config.telemetry.url,
            'interval_ms': config.refresh.interval_ms,
            'on_error': config.refresh.on_error,
        },
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })
