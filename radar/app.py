"""
Aircraft Radar Flask Application.

Main entry point for the web application. Initializes:
- Tracker (map surface, refresh loop, inspection controller)
- API routes

Usage:
    python -m radar.app

Or with gunicorn:
    gunicorn 'radar.app:create_app()'
"""

import logging
import os
import sys
from typing import Optional

from flask import Flask
from flask_cors import CORS

from radar.api import aircraft_bp, inspect_bp, status_bp
from radar.config import config
from radar.exceptions import StartupError
from radar.tracker import Tracker

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def create_app(start_tracker: bool = True, tracker: Optional[Tracker] = None) -> Flask:
    """
    Application factory for Flask.

    Args:
        start_tracker: Whether to bootstrap the map and start refreshing.
                       Set to False for testing.
        tracker: Pre-built tracker (created from config if None)

    Returns:
        Configured Flask application instance.

    Raises:
        StartupError if the tracker cannot start.
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    # Register API blueprints
    app.register_blueprint(aircraft_bp)
    app.register_blueprint(inspect_bp)
    app.register_blueprint(status_bp)

    tracker = tracker or Tracker()
    app.config['TRACKER'] = tracker

    if start_tracker:
        try:
            tracker.start()
        except StartupError as e:
            logger.error(f'Startup failed: {e}')
            raise
        logger.info(f'Tracking aircraft every {tracker.scheduler.interval_ms}ms')

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    try:
        app = create_app()
    except StartupError:
        sys.exit(1)

    # Get port from environment or default
    port = int(os.environ.get('PORT', 5000))

    logger.info(f'Starting Aircraft Radar on http://localhost:{port}')

    app.run(
        host='0.0.0.0',
        port=port,
        debug=config.debug,
        use_reloader=False,  # Disable reloader to prevent duplicate refresh threads
    )


if __name__ == '__main__':
    run_development_server()
