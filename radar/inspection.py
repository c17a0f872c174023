"""
Inspection controller - click an aircraft to see its telemetry.

Each pointer event goes through three separate steps:
1. Hit-test: ask the map surface which aircraft is under the pointer
2. Reduce: compute the new InspectionState (pure)
3. Render: derive the Overlay from that state (pure) and anchor it

The controller never touches the refresh timing. It reads whatever
snapshot is live on the surface when the event arrives.
"""

import logging
import threading
from typing import Optional, Tuple

from radar.models import AircraftEntity, InspectionState, Overlay
from radar.models.inspection import (
    CloseRequested,
    CursorStyle,
    InspectionEvent,
    PointerClick,
    PointerMove,
)
from radar.surface import MapSurface

logger = logging.getLogger(__name__)

# Popup rows, read straight from the raw state vector. Latitude is shown
# from offset 5 and Longitude from 6, the reverse of what the parser reads.
OVERLAY_FIELDS = (
    ('Callsign', 1),
    ('From', 2),
    ('Latitude', 5),
    ('Longitude', 6),
)


def reduce_inspection(
    state: Optional[InspectionState],
    event: InspectionEvent,
    hit: Optional[AircraftEntity],
) -> Optional[InspectionState]:
    """Next inspection state for an event and its hit-test result."""
    if isinstance(event, PointerClick):
        if hit is None:
            return None
        return InspectionState(entity=hit, coordinate=event.coordinate)
    if isinstance(event, CloseRequested):
        return None
    return state


def render_overlay(state: Optional[InspectionState]) -> Overlay:
    """Overlay view for an inspection state; hidden when there is none."""
    if state is None:
        return Overlay()

    raw = state.entity.raw_telemetry
    rows = [(label, raw[index]) for label, index in OVERLAY_FIELDS]
    return Overlay(position=state.coordinate, rows=rows)


class InspectionController:
    """
    Consumes pointer events against the live map surface.

    Events are handled one at a time; concurrent callers queue on a lock.
    """

    def __init__(self, surface: MapSurface):
        self.surface = surface
        self.state: Optional[InspectionState] = None
        self.cursor = CursorStyle.AUTO
        self._overlay = Overlay()
        self._lock = threading.Lock()

    def dispatch(self, event: InspectionEvent) -> Overlay:
        """Handle one pointer event and return the resulting overlay."""
        overlay, _ = self._handle(event)
        return overlay

    def _handle(self, event: InspectionEvent) -> Tuple[Overlay, CursorStyle]:
        """Process an event; the returned pair is read under the lock."""
        with self._lock:
            hit = None
            if isinstance(event, (PointerMove, PointerClick)):
                hit = self.surface.hit_test(event.pixel)

            if isinstance(event, PointerMove):
                self.cursor = CursorStyle.POINTER if hit is not None else CursorStyle.AUTO
                return self._overlay, self.cursor

            self.state = reduce_inspection(self.state, event, hit)
            self._overlay = render_overlay(self.state)
            self.surface.set_overlay_position(self._overlay.position)

            if self.state is not None:
                logger.debug(f'Inspecting {self.state.entity.identity or "<no callsign>"}')

            return self._overlay, self.cursor

    def move(self, pixel) -> CursorStyle:
        _, cursor = self._handle(PointerMove(pixel=pixel))
        return cursor

    def click(self, pixel, coordinate) -> Overlay:
        return self.dispatch(PointerClick(pixel=pixel, coordinate=coordinate))

    def close(self) -> Overlay:
        return self.dispatch(CloseRequested())

    @property
    def overlay(self) -> Overlay:
        return self._overlay
