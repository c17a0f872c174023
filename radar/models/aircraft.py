"""
Aircraft entities and snapshots.

A snapshot is the complete set of aircraft known as of one refresh cycle.
Each cycle's snapshot replaces the previous one wholesale: there is no
diffing, no entity reuse across cycles and no identity continuity.

Entities keep the raw state vector they were built from so the inspection
overlay can show fields the entity itself does not model.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Position:
    """WGS84 position in decimal degrees."""
    longitude: float
    latitude: float

    def to_dict(self) -> dict:
        return {'longitude': self.longitude, 'latitude': self.latitude}


@dataclass
class AircraftEntity:
    """
    Renderable, validated aircraft.

    Only built when longitude, latitude and heading are all present,
    so position and heading_radians are always finite.
    """
    identity: str
    origin: str
    position: Position
    heading_radians: float
    raw_telemetry: List[Any]

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'identity': self.identity,
            'origin': self.origin,
            'position': self.position.to_dict(),
            'heading_radians': self.heading_radians,
            'raw_telemetry': self.raw_telemetry,
        }

    def to_geojson_feature(self) -> dict:
        """GeoJSON point feature with the icon rotation as a property."""
        return {
            'type': 'Feature',
            'geometry': {
                'type': 'Point',
                'coordinates': [self.position.longitude, self.position.latitude],
            },
            'properties': {
                'identity': self.identity,
                'origin': self.origin,
                'rotation': self.heading_radians,
            },
        }


@dataclass
class RawSnapshot:
    """State vectors exactly as received from the feed."""
    states: List[Any]
    time: Optional[int] = None

    def __len__(self) -> int:
        return len(self.states)


@dataclass
class Snapshot:
    """Entities produced from one fetch cycle, in feed order."""
    entities: Tuple[AircraftEntity, ...] = ()
    api_time: Optional[int] = None
    fetched_at: float = field(default_factory=time.time)

    def __len__(self) -> int:
        return len(self.entities)

    def __iter__(self) -> Iterator[AircraftEntity]:
        return iter(self.entities)

    def to_dict(self) -> dict:
        return {
            'count': len(self.entities),
            'api_time': self.api_time,
            'fetched_at': self.fetched_at,
            'aircraft': [entity.to_dict() for entity in self.entities],
        }

    def to_geojson(self) -> dict:
        return {
            'type': 'FeatureCollection',
            'features': [entity.to_geojson_feature() for entity in self.entities],
        }
