"""
Tracker - top-level controller.

Owns the map surface, the telemetry source, the refresh scheduler and
the inspection controller, and wires them together. Nothing in the
package keeps the map, the overlay or the live snapshot in module
globals; everything hangs off a Tracker instance.

Startup sequence:
1. Locate the user to pick the initial map center
2. Center the map
3. Run the first refresh cycle synchronously
4. Hand over to the background refresh loop

A failure in steps 1-3 raises StartupError and nothing is rendered.
"""

import logging
from typing import Optional

from radar.bootstrap import GeoLocator
from radar.exceptions import RadarError, StartupError
from radar.inspection import InspectionController
from radar.ingestion import RefreshScheduler, RetryPolicy, TelemetrySource
from radar.ingestion.scheduler import Clock
from radar.surface import LayerSurface

logger = logging.getLogger(__name__)


class Tracker:
    """
    Context object shared by the refresh loop and the HTTP layer.

    The HTTP layer reads the view (center, zoom, pixel mapping) from the
    surface, so it must be a LayerSurface.
    """

    def __init__(
        self,
        surface: Optional[LayerSurface] = None,
        source: Optional[TelemetrySource] = None,
        locator: Optional[GeoLocator] = None,
        interval_ms: Optional[int] = None,
        retry_policy: Optional[RetryPolicy] = None,
        clock: Optional[Clock] = None,
    ):
        self.surface = surface or LayerSurface()
        self.source = source or TelemetrySource()
        self.locator = locator or GeoLocator()
        self.scheduler = RefreshScheduler(
            source=self.source,
            surface=self.surface,
            interval_ms=interval_ms,
            retry_policy=retry_policy,
            clock=clock,
        )
        self.inspection = InspectionController(self.surface)
        self.started = False

    def start(self, background: bool = True) -> None:
        """
        Bootstrap the map and begin refreshing.

        Raises:
            StartupError if geolocation or the first fetch fails
        """
        logger.info('Getting your IP address')
        center = self.locator.locate()
        self.surface.set_center(center)

        logger.info('Getting airplane data')
        try:
            self.scheduler.run_cycle()
        except RadarError as e:
            raise StartupError(f'Initial aircraft fetch failed: {e}') from e

        self.started = True
        if background:
            self.scheduler.start_background()

    def stop(self) -> None:
        self.scheduler.stop()
