"""
Error taxonomy for the refresh pipeline.

Per-record parse failures are not errors; invalid state vectors are
simply left out of the snapshot. Everything here propagates.
"""

from typing import Optional


class RadarError(Exception):
    """Base class for all Aircraft Radar errors."""


class TransportError(RadarError):
    """Network failure or non-success HTTP response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedPayloadError(RadarError):
    """Response body is not shaped like {'states': [...]}."""


class StartupError(RadarError):
    """Bootstrap geolocation or the first fetch failed; the map never renders."""
