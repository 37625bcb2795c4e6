"""
Slippy map facade used by the host.

Combines viewport state, tile grid planning, asynchronous tile loading and
the attribution overlay behind a small set of mutators and ``render()``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from domain.tile_servers import TILE_SERVERS, get_tile_server
from domain.viewport import ViewportState
from geo.mercator import distance_km
from imaging.attribution import AttributionOverlay
from infrastructure.http.client import make_http_session
from render.session import RenderSession
from shared.constants import (
    DEFAULT_HEIGHT_PX,
    DEFAULT_HOST,
    DEFAULT_LAT,
    DEFAULT_LON,
    DEFAULT_WIDTH_PX,
    DEFAULT_ZOOM,
    TILE_SIZE,
)
from tiles.fetcher import TileFetcher, make_tile_loader
from tiles.planner import plan_tiles

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    import aiohttp
    from PIL import Image

    from domain.models import TileServerDescriptor
    from tiles.fetcher import ImageLoader

logger = logging.getLogger(__name__)


class WorldMap:
    """
    A slippy map of a fixed pixel extent.

    Mutators change the view only; nothing is fetched until ``render()``.
    ``image`` is the raster of the newest completed render, so a host can
    keep showing it while the next render is still loading.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        *,
        catalog: Mapping[str, TileServerDescriptor] = TILE_SERVERS,
        loader: ImageLoader | None = None,
        lon: float = DEFAULT_LON,
        lat: float = DEFAULT_LAT,
        zoom: int = DEFAULT_ZOOM,
        extent: tuple[int, int] = (DEFAULT_WIDTH_PX, DEFAULT_HEIGHT_PX),
        tile_size: int = TILE_SIZE,
        on_complete: Callable[[RenderSession], None] | None = None,
    ):
        self.catalog = catalog
        descriptor = get_tile_server(host, catalog)
        self.viewport = ViewportState(
            descriptor, lon=lon, lat=lat, zoom=zoom, extent=extent, tile_size=tile_size
        )
        self.overlay = AttributionOverlay(descriptor.attribution)
        self.on_complete = on_complete
        self.image: Image.Image | None = None
        self.last_session: RenderSession | None = None
        self._shown_session_id = 0
        self._loader = loader
        self._owns_loader = loader is None
        self._client: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> WorldMap:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
        if self._owns_loader:
            self._loader = None

    # --- view mutators -------------------------------------------------

    @property
    def descriptor(self) -> TileServerDescriptor:
        return self.viewport.descriptor

    @property
    def tile_servers(self) -> list[str]:
        return list(self.catalog)

    def set_host(self, name: str) -> None:
        """Switch tile server; raises UnknownTileServerError for unknown names."""
        descriptor = get_tile_server(name, self.catalog)
        self.viewport.set_host(descriptor)
        self.overlay = AttributionOverlay(descriptor.attribution)
        logger.info('Tile server set to %s (zoom %d)', name, self.viewport.zoom)

    def set_view(self, lon: float, lat: float) -> None:
        self.viewport.set_view(lon, lat)

    def set_zoom(self, zoom: float) -> None:
        self.viewport.set_zoom(zoom)

    def set_extent(self, width: int, height: int) -> None:
        self.viewport.set_extent(width, height)

    def pan_by(self, dx: float, dy: float) -> None:
        self.viewport.pan_by(dx, dy)

    # --- accessors -----------------------------------------------------

    @property
    def lon(self) -> float:
        return self.viewport.center_lon

    @property
    def lat(self) -> float:
        return self.viewport.center_lat

    @property
    def zoom(self) -> int:
        return self.viewport.zoom

    @property
    def position(self) -> tuple[float, float]:
        return self.viewport.position

    @property
    def extent(self) -> tuple[int, int]:
        return self.viewport.extent

    def pixel_offset_from_lonlat(self, lon: float, lat: float) -> tuple[float, float]:
        return self.viewport.pixel_offset_from_lonlat(lon, lat)

    def lonlat_from_pixel_offset(self, dx: float, dy: float) -> tuple[float, float]:
        return self.viewport.lonlat_from_pixel_offset(dx, dy)

    def raster_xy_from_lonlat(self, lon: float, lat: float) -> tuple[float, float]:
        return self.viewport.raster_xy_from_lonlat(lon, lat)

    def lonlat_from_raster_xy(self, x: float, y: float) -> tuple[float, float]:
        return self.viewport.lonlat_from_raster_xy(x, y)

    @staticmethod
    def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        return distance_km(lat1, lon1, lat2, lon2)

    # --- rendering -----------------------------------------------------

    def _get_loader(self) -> ImageLoader:
        if self._loader is None:
            self._client = make_http_session()
            self._loader = make_tile_loader(self._client)
        return self._loader

    def render(self) -> RenderSession:
        """
        Start a render session and return it without waiting.

        Must be called from a running event loop. Previous sessions keep
        loading; they finish on their own rasters and never replace a newer
        image.
        """
        asyncio.get_running_loop()
        planned = plan_tiles(self.viewport)
        session = RenderSession(
            planned,
            extent=self.viewport.extent,
            tile_size=self.viewport.tile_size,
            fetcher=TileFetcher(self._get_loader()),
            overlay=self.overlay,
            on_complete=self._session_complete,
        )
        self.last_session = session
        return session.start()

    async def render_and_wait(self) -> Image.Image:
        return await self.render().wait()

    def _session_complete(self, session: RenderSession) -> None:
        if session.id < self._shown_session_id:
            logger.debug('Discarding stale render session %d', session.id)
        else:
            self._shown_session_id = session.id
            self.image = session.raster
        if self.on_complete is not None:
            self.on_complete(session)
