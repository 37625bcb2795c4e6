"""Tile grid planning and asynchronous tile loading.

This module provides:
- plan_tiles: tiles covering the viewport with their pixel offsets
- TileFetcher: one concurrent load per planned tile, failures tolerated
"""

from tiles.fetcher import FetchBatch, FetchProgress, TileFetcher, make_tile_loader
from tiles.planner import plan_tiles

__all__ = [
    'FetchBatch',
    'FetchProgress',
    'TileFetcher',
    'make_tile_loader',
    'plan_tiles',
]
