"""Credits label drawn over the bottom-right corner of a finished map."""

from __future__ import annotations

import logging

from PIL import Image

from imaging.composer import clip_rect
from imaging.text import render_label
from shared.constants import (
    ATTRIBUTION_BG_ALPHA,
    ATTRIBUTION_BG_COLOR,
    ATTRIBUTION_FONT_SIZE,
)

logger = logging.getLogger(__name__)


def _blend_at(raster: Image.Image, overlay: Image.Image, x: int, y: int) -> None:
    clipped = clip_rect(x, y, overlay.width, overlay.height, raster.size)
    if clipped is None:
        return
    box, dest = clipped
    raster.alpha_composite(overlay, dest=dest, source=box)


class AttributionOverlay:
    """
    Label and translucent background prepared once per tile server.

    ``apply`` is cheap: the text is rendered in the constructor, so a host
    switch creates a new overlay while renders reuse the existing one.
    """

    def __init__(
        self,
        text: str,
        *,
        font_size: int = ATTRIBUTION_FONT_SIZE,
        bg_alpha: float = ATTRIBUTION_BG_ALPHA,
    ):
        self.text = f' {text} '
        self.label = render_label(self.text, font_size)
        alpha = round(255 * bg_alpha)
        self.background = Image.new(
            'RGBA', self.label.size, (*ATTRIBUTION_BG_COLOR, alpha)
        )

    @property
    def size(self) -> tuple[int, int]:
        return self.label.size

    def apply(self, raster: Image.Image) -> None:
        if raster.mode != 'RGBA':
            msg = f'Attribution needs an RGBA raster, got {raster.mode}'
            raise ValueError(msg)
        x = raster.width - self.label.width
        y = raster.height - self.label.height
        _blend_at(raster, self.background, x, y)
        _blend_at(raster, self.label, x, y)
        logger.debug('Attribution drawn at (%d, %d)', x, y)
