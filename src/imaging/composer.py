"""Image composition - drawing tiles into the session raster."""

import logging

from PIL import Image

from shared.constants import RASTER_BACKGROUND, RASTER_MODE, TILE_SIZE

logger = logging.getLogger(__name__)


def clip_rect(
    x: int,
    y: int,
    w: int,
    h: int,
    canvas_size: tuple[int, int],
) -> tuple[tuple[int, int, int, int], tuple[int, int]] | None:
    """
    Intersect a ``w x h`` rectangle placed at ``(x, y)`` with the canvas.

    Returns ``(source_box, destination_xy)`` in the rectangle's and the
    canvas' coordinates, or ``None`` when nothing is visible.
    """
    cw, ch = canvas_size
    x0 = max(x, 0)
    y0 = max(y, 0)
    x1 = min(x + w, cw)
    y1 = min(y + h, ch)
    if x1 <= x0 or y1 <= y0:
        return None
    return (x0 - x, y0 - y, x1 - x, y1 - y), (x0, y0)


class Compositor:
    """
    Owns the output raster of one render session.

    A new raster is allocated for every session; the previous one may still
    be on display while tiles of the new one arrive.
    """

    def __init__(self, extent: tuple[int, int], *, tile_size: int = TILE_SIZE):
        self.tile_size = tile_size
        self.raster = Image.new(RASTER_MODE, extent, RASTER_BACKGROUND)

    @property
    def size(self) -> tuple[int, int]:
        return self.raster.size

    def draw_tile(self, image: Image.Image, px: int, py: int) -> None:
        """Blit a tile opaquely at ``(px, py)``, clipping at the raster edges."""
        if image.size != (self.tile_size, self.tile_size):
            image = image.resize(
                (self.tile_size, self.tile_size), Image.Resampling.LANCZOS
            )
        clipped = clip_rect(px, py, image.width, image.height, self.raster.size)
        if clipped is None:
            logger.debug('Tile at (%d, %d) lies outside the raster', px, py)
            return
        box, dest = clipped
        tile_crop = image.crop(box)
        if tile_crop.mode != self.raster.mode:
            tile_crop = tile_crop.convert(self.raster.mode)
        self.raster.paste(tile_crop, dest)
        tile_crop.close()
