"""
Startup geolocation.

Finds where to center the map before the first refresh. A configured
USER_LOCATION wins; otherwise the caller's IP address is looked up once
against the geolocation endpoint, which answers with an object carrying
`latitude` and `longitude`.

Any failure here is fatal to startup.
"""

import logging
from typing import Optional, Tuple

import requests

from radar.config import config
from radar.exceptions import StartupError
from radar.models import Position

logger = logging.getLogger(__name__)


class GeoLocator:
    """Resolves the initial map center."""

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        user_location: Optional[Tuple[float, float]] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or config.geolocation.url
        self.api_key = api_key if api_key is not None else config.geolocation.api_key
        self.user_location = user_location if user_location is not None else config.user_location
        self.timeout = timeout or config.geolocation.timeout_seconds
        self.session = session or requests.Session()

    def locate(self) -> Position:
        """
        Get the starting map coordinate.

        Raises:
            StartupError if the lookup fails or the answer has no position
        """
        if self.user_location:
            lat, lon = self.user_location
            logger.info(f'Using configured location ({lat:.4f}, {lon:.4f})')
            return Position(longitude=lon, latitude=lat)

        params = {'api-key': self.api_key} if self.api_key else {}

        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise StartupError(f'Geolocation request failed: {e}') from e
        except ValueError as e:
            raise StartupError(f'Geolocation response is not JSON: {e}') from e

        if not isinstance(data, dict):
            raise StartupError('Geolocation response is not an object')

        try:
            lat = float(data['latitude'])
            lon = float(data['longitude'])
        except (KeyError, TypeError, ValueError) as e:
            raise StartupError(f'Geolocation response has no usable position: {e}') from e

        logger.info(f'Auto-detected location: ({lat:.4f}, {lon:.4f}) {data.get("city") or ""}')
        return Position(longitude=lon, latitude=lat)
