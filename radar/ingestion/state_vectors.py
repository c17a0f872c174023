"""
State vector parsing.

Raw state vectors are fixed-position arrays; offsets are the contract.
Only the fields below are read, everything else stays opaque and
travels along untouched in AircraftEntity.raw_telemetry.

    1: callsign        - Callsign (padded to 8 chars)
    2: origin_country  - Country of registration
    5: longitude       - WGS84 longitude
    6: latitude        - WGS84 latitude
   10: true_track      - Track angle (degrees, 0=north)
"""

import logging
import math
from typing import Any, List, Optional

from radar.models import AircraftEntity, Position, RawSnapshot, Snapshot

logger = logging.getLogger(__name__)

CALLSIGN = 1
ORIGIN_COUNTRY = 2
LONGITUDE = 5
LATITUDE = 6
TRUE_TRACK = 10


def degrees_to_radians(degrees: float) -> float:
    """
    Rough conversion of decimal degrees to radians.

    Sign and fractional degrees are discarded before converting.
    """
    whole_degrees = int(abs(degrees))
    return whole_degrees * (math.pi / 180)


def _coerce(value: Any) -> Optional[float]:
    """
    Coerce a raw field to a usable number.

    Missing, zero, non-numeric and non-finite values all come back as
    None. A genuine zero heading is indistinguishable from a missing
    one and is dropped with it.
    """
    if not value or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number) or number == 0:
        return None
    return number


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ''


def parse_state_vector(raw: Any) -> Optional[AircraftEntity]:
    """
    Parse one raw state vector into an AircraftEntity.

    Returns None if longitude, latitude or heading is unusable, or if
    the record is not a list long enough to hold them.
    """
    if not isinstance(raw, (list, tuple)) or len(raw) <= TRUE_TRACK:
        return None

    longitude = _coerce(raw[LONGITUDE])
    latitude = _coerce(raw[LATITUDE])
    heading = _coerce(raw[TRUE_TRACK])

    if longitude is None or latitude is None or heading is None:
        return None

    return AircraftEntity(
        identity=_text(raw[CALLSIGN]),
        origin=_text(raw[ORIGIN_COUNTRY]),
        position=Position(longitude=longitude, latitude=latitude),
        heading_radians=degrees_to_radians(heading),
        raw_telemetry=raw,
    )


def parse_state_vectors(states: List[Any]) -> List[AircraftEntity]:
    """Parse every record, keeping valid ones in feed order."""
    entities = []
    for raw in states:
        entity = parse_state_vector(raw)
        if entity is not None:
            entities.append(entity)
    return entities


def transform_snapshot(raw_snapshot: RawSnapshot) -> Snapshot:
    """
    Build the renderable snapshot for one refresh cycle.

    Invalid records are skipped silently; an empty feed gives an empty
    snapshot.
    """
    entities = parse_state_vectors(raw_snapshot.states)

    logger.debug(f'Parsed {len(entities)} of {len(raw_snapshot)} state vectors')

    return Snapshot(entities=tuple(entities), api_time=raw_snapshot.time)
