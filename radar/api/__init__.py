"""
API module for Aircraft Radar.

Provides REST endpoints for:
- The live aircraft snapshot
- Pointer events and the inspection overlay
- Refresh loop status
"""

from radar.api.aircraft import aircraft_bp
from radar.api.inspect import inspect_bp
from radar.api.status import status_bp

__all__ = ['aircraft_bp', 'inspect_bp', 'status_bp']
