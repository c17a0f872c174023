import math

import pytest

from radar.ingestion.state_vectors import (
    degrees_to_radians,
    parse_state_vector,
    transform_snapshot,
)
from radar.models import Position, RawSnapshot

from conftest import make_state


def test_parses_documented_example():
    raw = [None, 'ABC123', 'USA', None, None, 10.5, 20.3, None, None, None, 45.7]

    entity = parse_state_vector(raw)

    assert entity is not None
    assert entity.identity == 'ABC123'
    assert entity.origin == 'USA'
    assert entity.position == Position(longitude=10.5, latitude=20.3)
    assert entity.heading_radians == pytest.approx(45 * math.pi / 180)
    assert entity.raw_telemetry is raw


def test_zero_heading_is_treated_as_missing():
    raw = [None, 'ABC123', 'USA', None, None, 10.5, 20.3, None, None, None, 0]

    assert parse_state_vector(raw) is None


@pytest.mark.parametrize('field, value', [
    (5, None),
    (6, None),
    (10, None),
    (5, 0),
    (6, 0.0),
    (10, ''),
    (5, 'east'),
    (6, float('nan')),
    (10, float('inf')),
    (10, True),
    (10, 10 ** 400),
    (6, -10 ** 400),
])
def test_unusable_position_or_heading_is_rejected(field, value):
    raw = make_state()
    raw[field] = value

    assert parse_state_vector(raw) is None


@pytest.mark.parametrize('raw', [
    None,
    'ABC123',
    {'callsign': 'ABC123'},
    [None, 'ABC123', 'USA', None, None, 10.5, 20.3],
])
def test_non_vector_records_are_rejected(raw):
    assert parse_state_vector(raw) is None


@pytest.mark.parametrize('degrees, whole', [
    (45.7, 45),
    (-45.7, 45),
    (359.99, 359),
    (0.5, 0),
    (180, 180),
])
def test_heading_drops_sign_and_fraction(degrees, whole):
    assert degrees_to_radians(degrees) == pytest.approx(whole * math.pi / 180)


def test_numeric_strings_are_coerced():
    entity = parse_state_vector(make_state(lon='10.5', lat='20.3', heading='90.2'))

    assert entity.position == Position(longitude=10.5, latitude=20.3)
    assert entity.heading_radians == pytest.approx(math.pi / 2)


def test_identity_is_trimmed_and_blanks_allowed():
    assert parse_state_vector(make_state(callsign='UAL839  ')).identity == 'UAL839'
    assert parse_state_vector(make_state(callsign=None)).identity == ''
    assert parse_state_vector(make_state(country=None)).origin == ''


def test_transform_keeps_valid_records_in_order():
    first = make_state(callsign='FIRST')
    invalid = make_state(callsign='BROKEN', lat=None)
    last = make_state(callsign='LAST')

    snapshot = transform_snapshot(RawSnapshot(states=[first, invalid, last], time=1714765200))

    assert [e.identity for e in snapshot] == ['FIRST', 'LAST']
    assert len(snapshot) == 2
    assert snapshot.api_time == 1714765200


def test_transform_counts_out_every_invalid_record():
    states = [make_state(heading=h) for h in (10, 0, 20, None, 30, 0.0)]

    snapshot = transform_snapshot(RawSnapshot(states=states))

    assert len(snapshot) == len(states) - 3
    assert [e.raw_telemetry[10] for e in snapshot] == [10, 20, 30]


def test_transform_empty_feed():
    snapshot = transform_snapshot(RawSnapshot(states=[]))

    assert len(snapshot) == 0
    assert snapshot.to_geojson() == {'type': 'FeatureCollection', 'features': []}
