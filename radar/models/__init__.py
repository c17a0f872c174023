"""
Data models for Aircraft Radar.

Plain dataclasses; nothing here is persisted. Snapshots live only until
the next refresh cycle replaces them.
"""

from radar.models.aircraft import AircraftEntity, Position, RawSnapshot, Snapshot
from radar.models.inspection import (
    CloseRequested,
    CursorStyle,
    InspectionEvent,
    InspectionState,
    Overlay,
    PointerClick,
    PointerMove,
)

__all__ = [
    'AircraftEntity',
    'Position',
    'RawSnapshot',
    'Snapshot',
    'CloseRequested',
    'CursorStyle',
    'InspectionEvent',
    'InspectionState',
    'Overlay',
    'PointerClick',
    'PointerMove',
]
