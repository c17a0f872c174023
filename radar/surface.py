"""
Map rendering surface.

The refresh pipeline and the inspection controller touch the map only
through the five MapSurface operations:

    attach_entities(snapshot)       draw a snapshot as a new layer
    detach_entities(snapshot)       remove a previously attached layer
    hit_test(pixel)                 entity under a screen pixel, if any
    set_center(position)            move the view
    set_overlay_position(position)  anchor the popup, None hides it

LayerSurface is the in-process implementation. It keeps attached
snapshots as a stack of layers, projects their positions to Web
Mercator world pixels once per layer, and hit-tests against the
circular footprint of the aircraft icon.

Only the most recently attached layer answers hit-tests. During a
render-swap the old layer is still attached for a moment after the new
one goes on top, but it is never queryable once the new one is there.

Layer writes come from the refresh thread and reads from request
threads, so the layer stack is guarded by an RLock.
"""

import logging
import math
import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from radar.config import config
from radar.models import AircraftEntity, Position, Snapshot
from radar.models.inspection import Pixel

logger = logging.getLogger(__name__)

# Web Mercator is undefined at the poles
MAX_LATITUDE = 85.05112878


def world_scale(zoom: int, tile_size: int = 256) -> float:
    """Width of the whole world in pixels at a zoom level."""
    return tile_size * (2 ** zoom)


def project(longitudes, latitudes, zoom: int, tile_size: int = 256) -> np.ndarray:
    """
    Project WGS84 coordinates to Web Mercator world pixels.

    Returns an (N, 2) array of x, y with y growing southwards.
    """
    scale = world_scale(zoom, tile_size)
    lon = np.asarray(longitudes, dtype=float)
    lat = np.clip(np.asarray(latitudes, dtype=float), -MAX_LATITUDE, MAX_LATITUDE)

    x = (lon + 180.0) / 360.0 * scale
    sin_lat = np.sin(np.radians(lat))
    y = (0.5 - np.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * scale

    return np.column_stack((x, y))


def unproject(x: float, y: float, zoom: int, tile_size: int = 256) -> Position:
    """Inverse of project() for a single world pixel."""
    scale = world_scale(zoom, tile_size)
    lon = x / scale * 360.0 - 180.0
    lat = math.degrees(math.atan(math.sinh(math.pi * (1 - 2 * y / scale))))
    return Position(longitude=lon, latitude=lat)


class MapSurface:
    """Rendering boundary the core depends on."""

    def attach_entities(self, snapshot: Snapshot) -> None:
        raise NotImplementedError

    def detach_entities(self, snapshot: Snapshot) -> None:
        raise NotImplementedError

    def hit_test(self, pixel: Pixel) -> Optional[AircraftEntity]:
        raise NotImplementedError

    def set_center(self, position: Position) -> None:
        raise NotImplementedError

    def set_overlay_position(self, position: Optional[Position]) -> None:
        raise NotImplementedError


@dataclass
class _Layer:
    snapshot: Snapshot
    world_px: np.ndarray


class LayerSurface(MapSurface):
    """
    In-memory map surface with a fixed zoom and viewport.

    Screen pixels are relative to the top-left corner of the viewport,
    which is centered on `center`.
    """

    def __init__(
        self,
        center: Optional[Position] = None,
        zoom: Optional[int] = None,
        viewport: Optional[Tuple[int, int]] = None,
        icon_radius_px: Optional[float] = None,
        tile_size: Optional[int] = None,
    ):
        self.center = center or Position(longitude=0.0, latitude=0.0)
        self.zoom = zoom if zoom is not None else config.map.initial_zoom
        self.viewport = viewport or config.map.viewport
        self.icon_radius_px = icon_radius_px or config.map.icon_radius_px
        self.tile_size = tile_size or config.map.tile_size

        self.overlay_position: Optional[Position] = None

        self._layers: List[_Layer] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # MapSurface operations
    # ------------------------------------------------------------------

    def attach_entities(self, snapshot: Snapshot) -> None:
        world_px = project(
            [e.position.longitude for e in snapshot],
            [e.position.latitude for e in snapshot],
            self.zoom,
            self.tile_size,
        )
        with self._lock:
            self._layers.append(_Layer(snapshot=snapshot, world_px=world_px))
        logger.debug(f'Attached layer with {len(snapshot)} aircraft')

    def detach_entities(self, snapshot: Snapshot) -> None:
        with self._lock:
            before = len(self._layers)
            self._layers = [layer for layer in self._layers if layer.snapshot is not snapshot]
            removed = before - len(self._layers)

        if not removed:
            logger.debug('Detach requested for a layer that is not attached')

    def hit_test(self, pixel: Pixel) -> Optional[AircraftEntity]:
        """
        Find the aircraft whose icon covers a screen pixel.

        When icons overlap, the one closest to the pixel wins.
        """
        with self._lock:
            if not self._layers:
                return None
            layer = self._layers[-1]
            target = self._screen_to_world(pixel)

        if not len(layer.snapshot):
            return None

        distances = np.hypot(layer.world_px[:, 0] - target[0], layer.world_px[:, 1] - target[1])
        nearest = int(np.argmin(distances))
        if distances[nearest] > self.icon_radius_px:
            return None

        return layer.snapshot.entities[nearest]

    def set_center(self, position: Position) -> None:
        with self._lock:
            self.center = position
        logger.info(f'Map centered on ({position.latitude:.4f}, {position.longitude:.4f})')

    def set_overlay_position(self, position: Optional[Position]) -> None:
        with self._lock:
            self.overlay_position = position

    # ------------------------------------------------------------------
    # Read helpers for the HTTP layer
    # ------------------------------------------------------------------

    @property
    def current_snapshot(self) -> Optional[Snapshot]:
        """The snapshot answering hit-tests, or None before the first render."""
        with self._lock:
            return self._layers[-1].snapshot if self._layers else None

    @property
    def layer_count(self) -> int:
        with self._lock:
            return len(self._layers)

    def pixel_to_position(self, pixel: Pixel) -> Position:
        """Map coordinate under a screen pixel."""
        with self._lock:
            x, y = self._screen_to_world(pixel)
        return unproject(x, y, self.zoom, self.tile_size)

    def _screen_to_world(self, pixel: Pixel) -> Tuple[float, float]:
        center = project([self.center.longitude], [self.center.latitude], self.zoom, self.tile_size)[0]
        width, height = self.viewport
        return (
            float(center[0]) + pixel[0] - width / 2,
            float(center[1]) + pixel[1] - height / 2,
        )

    def screen_pixel(self, position: Position) -> Pixel:
        """Screen pixel where a map coordinate is drawn."""
        world = project([position.longitude], [position.latitude], self.zoom, self.tile_size)[0]
        with self._lock:
            center = project([self.center.longitude], [self.center.latitude], self.zoom, self.tile_size)[0]
        width, height = self.viewport
        return (
            float(world[0] - center[0]) + width / 2,
            float(world[1] - center[1]) + height / 2,
        )
