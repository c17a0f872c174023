import threading

import pytest

from radar.models import Position, RawSnapshot
from radar.surface import LayerSurface


def make_state(callsign='ABC123  ', country='USA', lon=10.5, lat=20.3, heading=45.7):
    """OpenSky-shaped state vector with the fields the tests care about."""
    return [
        '4b1814',  # icao24
        callsign,
        country,
        1714765198,  # time_position
        1714765200,  # last_contact
        lon,
        lat,
        3657.6,  # baro_altitude
        False,  # on_ground
        164.6,  # velocity
        heading,  # true_track
        2.0,  # vertical_rate
        None,  # sensors
        3700.0,  # geo_altitude
        '7000',  # squawk
        False,  # spi
        0,  # position_source
    ]


class FakeClock:
    """Records requested waits instead of sleeping."""

    def __init__(self, stop_after_waits=None):
        self.waits = []
        self.stop_after_waits = stop_after_waits

    def wait(self, seconds, stop_event):
        self.waits.append(seconds)
        if self.stop_after_waits is not None and len(self.waits) >= self.stop_after_waits:
            stop_event.set()


class FakeSource:
    """Replays queued raw snapshots; queued exceptions are raised."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0
        self._lock = threading.Lock()

    def fetch_snapshot(self):
        with self._lock:
            self.calls += 1
            if not self.results:
                return RawSnapshot(states=[])
            result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


class FakeLocator:

    def __init__(self, position=None, error=None):
        self.position = position or Position(longitude=10.5, latitude=20.3)
        self.error = error

    def locate(self):
        if self.error:
            raise self.error
        return self.position


@pytest.fixture
def surface():
    return LayerSurface(
        center=Position(longitude=10.5, latitude=20.3),
        zoom=9,
        viewport=(1280, 800),
        icon_radius_px=12.8,
        tile_size=256,
    )


@pytest.fixture
def clock():
    return FakeClock()
