"""
Inspection events and view models.

Pointer interactions are delivered as explicit event objects and
consumed one at a time by the InspectionController. The controller keeps
at most one InspectionState; the Overlay is derived from it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from radar.models.aircraft import AircraftEntity, Position

# Screen location in CSS pixels, origin at the top-left of the map
Pixel = Tuple[float, float]


class CursorStyle(str, Enum):
    """Cursor affordance over the map."""
    POINTER = 'pointer'
    AUTO = 'auto'


@dataclass(frozen=True)
class PointerMove:
    pixel: Pixel


@dataclass(frozen=True)
class PointerClick:
    pixel: Pixel
    coordinate: Position  # map coordinate under the click, anchors the overlay


@dataclass(frozen=True)
class CloseRequested:
    pass


InspectionEvent = Union[PointerMove, PointerClick, CloseRequested]


@dataclass(frozen=True)
class InspectionState:
    """
    The one selected aircraft.

    References the entity from the snapshot that was live when the click
    happened; it is not refreshed when newer snapshots arrive.
    """
    entity: AircraftEntity
    coordinate: Position


@dataclass
class Overlay:
    """Popup showing basic aircraft information."""
    position: Optional[Position] = None
    rows: List[Tuple[str, object]] = field(default_factory=list)

    @property
    def visible(self) -> bool:
        return self.position is not None

    def to_dict(self) -> dict:
        return {
            'visible': self.visible,
            'position': self.position.to_dict() if self.position else None,
            'rows': [{'label': label, 'value': value} for label, value in self.rows],
        }
