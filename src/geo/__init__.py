"""Geo module - Web Mercator transforms and great-circle distance."""

from .mercator import (
    distance_km,
    lat_from_tile_y,
    lon_from_tile_x,
    lonlat_from_pixel_offset,
    pixel_offset_from_lonlat,
    tile_x_from_lon,
    tile_y_from_lat,
    wrap_tile,
)

__all__ = [
    'distance_km',
    'lat_from_tile_y',
    'lon_from_tile_x',
    'lonlat_from_pixel_offset',
    'pixel_offset_from_lonlat',
    'tile_x_from_lon',
    'tile_y_from_lat',
    'wrap_tile',
]
