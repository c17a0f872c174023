"""
Aircraft state feed client.

Performs one GET against the configured state vector endpoint and hands
back the raw payload. Retries and backoff are the refresh loop's job,
not this module's.

Expected response shape (OpenSky /states/all):
    {"time": 1714765200, "states": [[...], [...], ...]}

"states" is null when the feed has no aircraft to report.
"""

import logging
from typing import Optional

import requests

from radar.config import config
from radar.exceptions import MalformedPayloadError, TransportError
from radar.models import RawSnapshot

logger = logging.getLogger(__name__)


class TelemetrySource:
    """
    Client for the aircraft state endpoint.

    Handles:
    - GET requests to the configured URL
    - Mapping network and HTTP failures to TransportError
    - Validating the top-level payload shape
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or config.telemetry.url
        self.timeout = timeout or config.telemetry.timeout_seconds
        self.session = session or requests.Session()

    def fetch_snapshot(self) -> RawSnapshot:
        """
        Fetch the current state vectors.

        Returns:
            RawSnapshot with the unparsed state vectors and feed timestamp

        Raises:
            TransportError on network failure or non-success status
            MalformedPayloadError if the body is not {'states': [...]}
        """
        logger.debug(f'Fetching states: {self.url}')

        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            logger.error('Telemetry request timed out')
            raise TransportError(f'Telemetry request timed out: {e}') from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status == 429:
                logger.warning('Telemetry rate limit exceeded')
            else:
                logger.error(f'Telemetry API error: {status}')
            raise TransportError(f'Telemetry endpoint returned HTTP {status}', status) from e
        except requests.exceptions.RequestException as e:
            logger.error(f'Telemetry request failed: {e}')
            raise TransportError(f'Telemetry request failed: {e}') from e

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedPayloadError(f'Telemetry response is not JSON: {e}') from e

        if not isinstance(data, dict) or 'states' not in data:
            raise MalformedPayloadError('Telemetry response has no "states" field')

        states = data['states']
        if states is None:
            states = []
        elif not isinstance(states, list):
            raise MalformedPayloadError(
                f'Telemetry "states" must be a list, got {type(states).__name__}'
            )

        logger.info(f'Received {len(states)} state vectors')

        return RawSnapshot(states=states, time=data.get('time'))
