import pytest
import requests

from radar.bootstrap import GeoLocator
from radar.exceptions import StartupError
from radar.models import Position

from test_telemetry_source import StubSession, make_response

URL = 'https://geo.example.test/'


def test_configured_location_skips_lookup():
    session = StubSession(error=AssertionError('should not be called'))
    locator = GeoLocator(url=URL, user_location=(51.47, -0.45), session=session)

    assert locator.locate() == Position(longitude=-0.45, latitude=51.47)
    assert session.requests == []


def test_lookup_by_ip():
    session = StubSession(make_response(body={'latitude': 40.64, 'longitude': -73.78, 'city': 'New York'}))
    locator = GeoLocator(url=URL, api_key='test', session=session)

    position = locator.locate()

    assert position == Position(longitude=-73.78, latitude=40.64)
    url, kwargs = session.requests[0]
    assert url == URL
    assert kwargs['params'] == {'api-key': 'test'}


@pytest.mark.parametrize('session', [
    StubSession(error=requests.exceptions.ConnectionError('offline')),
    StubSession(make_response(status=401, text='bad key')),
    StubSession(make_response(text='not json')),
    StubSession(make_response(body=['latitude', 'longitude'])),
    StubSession(make_response(body={'city': 'Nowhere'})),
    StubSession(make_response(body={'latitude': None, 'longitude': 2.0})),
])
def test_lookup_failures_raise_startup_error(session):
    locator = GeoLocator(url=URL, api_key='test', session=session)

    with pytest.raises(StartupError):
        locator.locate()
