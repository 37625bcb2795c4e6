"""Imaging package - raster composition and the attribution label."""

from imaging.attribution import AttributionOverlay
from imaging.composer import Compositor, clip_rect
from imaging.text import load_label_font, render_label

__all__ = [
    'AttributionOverlay',
    'Compositor',
    'clip_rect',
    'load_label_font',
    'render_label',
]
