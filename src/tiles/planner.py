"""Planning of the tile grid that covers the viewport."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from domain.models import PlannedTile, TileIdentity
from geo.mercator import wrap_tile, world_tiles

if TYPE_CHECKING:
    from domain.models import TileServerDescriptor
    from domain.viewport import ViewportState

logger = logging.getLogger(__name__)


def grid_span(extent_px: int, tile_size: int) -> int:
    """Number of grid cells along one axis, including partial edge tiles."""
    return math.ceil(extent_px / tile_size) + 2


def plan_tiles(
    viewport: ViewportState,
    descriptor: TileServerDescriptor | None = None,
) -> list[PlannedTile]:
    """
    Compute the tiles needed to cover the viewport and their pixel offsets.

    The tile under the viewport center is anchored first; the grid is then
    padded outwards far enough to reach every edge. Columns wrap around
    the antimeridian, rows outside ``[0, 2**zoom)`` lie beyond the poles and
    are skipped. Cells are emitted column by column, and subdomains are
    assigned round-robin in emission order.
    """
    descriptor = descriptor or viewport.descriptor
    zoom = viewport.zoom
    size = viewport.tile_size
    width, height = viewport.extent
    pos_x, pos_y = viewport.position
    max_tiles = world_tiles(zoom)

    origin_col = math.floor(pos_x)
    origin_row = math.floor(pos_y)
    # Pixel offset of the tile containing the viewport center
    anchor_x = width / 2 - (pos_x - origin_col) * size
    anchor_y = height / 2 - (pos_y - origin_row) * size
    dist_x = math.floor(anchor_x / size) + 1
    dist_y = math.floor(anchor_y / size) + 1
    map_origin_x = round(anchor_x - dist_x * size)
    map_origin_y = round(anchor_y - dist_y * size)

    planned: list[PlannedTile] = []
    for x in range(grid_span(width, size)):
        col = int(wrap_tile(origin_col + x - dist_x, zoom))
        for y in range(grid_span(height, size)):
            row = origin_row + y - dist_y
            if not (0 <= row < max_tiles):
                continue
            index = len(planned)
            subdomain = descriptor.subdomain_for(index)
            planned.append(
                PlannedTile(
                    tile=TileIdentity(zoom=zoom, col=col, row=row),
                    px=map_origin_x + x * size,
                    py=map_origin_y + y * size,
                    index=index,
                    url=descriptor.tile_url(zoom, col, row, subdomain=subdomain),
                    subdomain=subdomain,
                )
            )
    logger.debug(
        'Planned %d tile(s) at zoom %d around (%.4f, %.4f)',
        len(planned),
        zoom,
        pos_x,
        pos_y,
    )
    return planned
