"""Mutable viewport state: center, zoom and derived tile-space position."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from geo.mercator import (
    lat_from_tile_y,
    lon_from_tile_x,
    lonlat_from_pixel_offset,
    pixel_offset_from_lonlat,
    tile_x_from_lon,
    tile_y_from_lat,
    wrap_tile,
)
from shared.constants import (
    DEFAULT_HEIGHT_PX,
    DEFAULT_LAT,
    DEFAULT_LON,
    DEFAULT_WIDTH_PX,
    DEFAULT_ZOOM,
    TILE_SIZE,
)

if TYPE_CHECKING:
    from domain.models import TileServerDescriptor

logger = logging.getLogger(__name__)


class ViewportState:
    """
    Current view of the map.

    ``position`` is always the tile-space projection of the center at the
    current zoom, with x wrapped into ``[0, 2**zoom)``. The y coordinate is
    left as is; rows beyond the poles are filtered out by the planner.
    """

    def __init__(
        self,
        descriptor: TileServerDescriptor,
        *,
        lon: float = DEFAULT_LON,
        lat: float = DEFAULT_LAT,
        zoom: int = DEFAULT_ZOOM,
        extent: tuple[int, int] = (DEFAULT_WIDTH_PX, DEFAULT_HEIGHT_PX),
        tile_size: int = TILE_SIZE,
    ):
        self.descriptor = descriptor
        self.center_lon = float(lon)
        self.center_lat = float(lat)
        self.zoom = descriptor.clamp_zoom(zoom)
        self.extent = (int(extent[0]), int(extent[1]))
        self.tile_size = tile_size
        self.position: tuple[float, float] = (0.0, 0.0)
        self._refresh()

    def _refresh(self) -> None:
        self.position = (
            wrap_tile(tile_x_from_lon(self.center_lon, self.zoom), self.zoom),
            tile_y_from_lat(self.center_lat, self.zoom),
        )

    def set_host(self, descriptor: TileServerDescriptor) -> None:
        self.descriptor = descriptor
        self.set_zoom(self.zoom)

    def set_view(self, lon: float, lat: float) -> None:
        self.center_lon = float(lon)
        self.center_lat = float(lat)
        self._refresh()

    def set_zoom(self, zoom: float) -> None:
        clamped = self.descriptor.clamp_zoom(zoom)
        if clamped != zoom:
            logger.debug(
                'Zoom %s clamped to %d for %s', zoom, clamped, self.descriptor.name
            )
        self.zoom = clamped
        self._refresh()

    def set_extent(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            msg = f'Viewport extent must be positive, got {width}x{height}'
            raise ValueError(msg)
        self.extent = (int(width), int(height))

    def pan_by(self, dx: float, dy: float) -> None:
        """Shift the view by a pixel delta, linearly in tile space."""
        x = wrap_tile(self.position[0] + dx / self.tile_size, self.zoom)
        y = self.position[1] + dy / self.tile_size
        self.center_lon = lon_from_tile_x(x, self.zoom)
        self.center_lat = lat_from_tile_y(y, self.zoom)
        self._refresh()

    def pixel_offset_from_lonlat(self, lon: float, lat: float) -> tuple[float, float]:
        return pixel_offset_from_lonlat(
            lon, lat, zoom=self.zoom, position=self.position, tile_size=self.tile_size
        )

    def lonlat_from_pixel_offset(self, dx: float, dy: float) -> tuple[float, float]:
        return lonlat_from_pixel_offset(
            dx, dy, zoom=self.zoom, position=self.position, tile_size=self.tile_size
        )

    def raster_xy_from_lonlat(self, lon: float, lat: float) -> tuple[float, float]:
        """Pixel position inside the rendered raster (origin top-left)."""
        dx, dy = self.pixel_offset_from_lonlat(lon, lat)
        return dx + self.extent[0] / 2, dy + self.extent[1] / 2

    def lonlat_from_raster_xy(self, x: float, y: float) -> tuple[float, float]:
        return self.lonlat_from_pixel_offset(
            x - self.extent[0] / 2, y - self.extent[1] / 2
        )
