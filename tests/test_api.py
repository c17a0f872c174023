import pytest

from radar.app import create_app
from radar.ingestion.scheduler import RetryPolicy
from radar.models import RawSnapshot
from radar.tracker import Tracker

from conftest import FakeClock, FakeLocator, FakeSource, make_state


@pytest.fixture
def tracker(surface):
    source = FakeSource(RawSnapshot(
        states=[make_state(callsign='ABC123  '), make_state(callsign='NOHEAD', heading=0)],
        time=1714765200,
    ))
    tracker = Tracker(
        surface=surface,
        source=source,
        locator=FakeLocator(),
        interval_ms=5000,
        retry_policy=RetryPolicy(),
        clock=FakeClock(),
    )
    tracker.start(background=False)
    return tracker


@pytest.fixture
def client(tracker):
    app = create_app(start_tracker=False, tracker=tracker)
    app.config['TESTING'] = True
    return app.test_client()


def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    assert response.get_json() == {'status': 'ok'}


def test_list_aircraft(client):
    data = client.get('/api/aircraft').get_json()

    assert data['count'] == 1
    assert data['api_time'] == 1714765200
    aircraft = data['aircraft'][0]
    assert aircraft['identity'] == 'ABC123'
    assert aircraft['position'] == {'longitude': 10.5, 'latitude': 20.3}
    assert aircraft['raw_telemetry'][0] == '4b1814'


def test_aircraft_geojson(client):
    data = client.get('/api/aircraft/geojson').get_json()

    assert data['type'] == 'FeatureCollection'
    feature = data['features'][0]
    assert feature['geometry'] == {'type': 'Point', 'coordinates': [10.5, 20.3]}
    assert feature['properties']['identity'] == 'ABC123'


def test_click_hit_and_miss(client):
    hit = client.post('/api/inspect/click', json={'x': 640, 'y': 400, 'longitude': 10.5, 'latitude': 20.3})

    assert hit.status_code == 200
    overlay = hit.get_json()
    assert overlay['visible'] is True
    assert overlay['rows'][0] == {'label': 'Callsign', 'value': 'ABC123  '}
    assert client.get('/api/inspect').get_json()['visible'] is True

    miss = client.post('/api/inspect/click', json={'x': 10, 'y': 10})

    assert miss.get_json()['visible'] is False
    assert client.get('/api/inspect').get_json()['visible'] is False


def test_click_without_coordinate_uses_pixel(client):
    overlay = client.post('/api/inspect/click', json={'x': 640, 'y': 400}).get_json()

    assert overlay['position']['longitude'] == pytest.approx(10.5)
    assert overlay['position']['latitude'] == pytest.approx(20.3)


def test_pointer_move_cursor(client):
    assert client.post('/api/inspect/move', json={'x': 640, 'y': 400}).get_json() == {'cursor': 'pointer'}
    assert client.post('/api/inspect/move', json={'x': 10, 'y': 10}).get_json() == {'cursor': 'auto'}


def test_close(client):
    client.post('/api/inspect/click', json={'x': 640, 'y': 400})

    response = client.post('/api/inspect/close')

    assert response.get_json()['visible'] is False


@pytest.mark.parametrize('path', ['/api/inspect/click', '/api/inspect/move'])
@pytest.mark.parametrize('body', [{}, {'x': 1}, {'x': 'left', 'y': 2}])
def test_pointer_events_require_pixel(client, path, body):
    response = client.post(path, json=body)

    assert response.status_code == 400
    assert 'error' in response.get_json()


def test_status(client):
    data = client.get('/api/status').get_json()

    assert data['status'] == 'healthy'
    assert data['refresh']['aircraft'] == 1
    assert data['refresh']['cycle_count'] == 1
    assert data['map']['center'] == {'longitude': 10.5, 'latitude': 20.3}


def test_unknown_route_is_json_404(client):
    response = client.get('/api/nope')

    assert response.status_code == 404
    assert response.get_json() == {'error': 'Not found'}


def test_aircraft_follows_latest_refresh(client, tracker):
    tracker.source.results = [RawSnapshot(states=[make_state(callsign='NEWER'), make_state(callsign='LATEST')])]
    tracker.scheduler.run_cycle()

    data = client.get('/api/aircraft').get_json()

    assert data['count'] == 2
    assert [a['identity'] for a in data['aircraft']] == ['NEWER', 'LATEST']
    assert data['api_time'] is None


def test_aircraft_before_first_refresh(surface):
    tracker = Tracker(surface=surface, source=FakeSource(), locator=FakeLocator(), clock=FakeClock())
    app = create_app(start_tracker=False, tracker=tracker)

    data = app.test_client().get('/api/aircraft').get_json()

    assert data['count'] == 0
    assert data['aircraft'] == []
