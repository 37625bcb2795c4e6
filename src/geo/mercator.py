"""
Web Mercator conversions between geodetic, tile and viewport pixel space.

Tile space is continuous: one unit equals one tile width at the given zoom,
x grows eastward from the antimeridian, y grows southward from the north
edge of the projection.
"""

from __future__ import annotations

import math

from shared.constants import (
    EARTH_RADIUS_KM,
    WORLD_LNG_HALF_SPAN_DEG,
    WORLD_LNG_SPAN_DEG,
)

# atan(sinh(±40)) is already ±π/2 in float; exp() overflows past ~709
_MERCATOR_N_MAX = 40.0


def world_tiles(zoom: int) -> int:
    """Number of tiles along one axis at the given zoom."""
    return 2**zoom


def tile_x_from_lon(lon: float, zoom: int) -> float:
    return (float(lon) + WORLD_LNG_HALF_SPAN_DEG) / WORLD_LNG_SPAN_DEG * 2**zoom


def tile_y_from_lat(lat: float, zoom: int) -> float:
    phi = math.radians(float(lat))
    # asinh(tan φ) == ln(tan φ + sec φ), but stays finite at the poles
    return (1 - math.asinh(math.tan(phi)) / math.pi) / 2 * 2**zoom


def lon_from_tile_x(x: float, zoom: int) -> float:
    return x / 2**zoom * WORLD_LNG_SPAN_DEG - WORLD_LNG_HALF_SPAN_DEG


def lat_from_tile_y(y: float, zoom: int) -> float:
    n = math.pi - 2 * math.pi * y / 2**zoom
    n = max(-_MERCATOR_N_MAX, min(_MERCATOR_N_MAX, n))
    return math.degrees(math.atan(0.5 * (math.exp(n) - math.exp(-n))))


def wrap_tile(n: float, zoom: int) -> float:
    """
    Wrap a tile-space x coordinate into ``[0, 2**zoom)``.

    Works for any real ``n``; a float remainder that rounds up to the
    upper bound is folded back to zero.
    """
    size = 2**zoom
    wrapped = n % size
    if wrapped >= size:
        return wrapped - size
    return wrapped


def pixel_offset_from_lonlat(
    lon: float,
    lat: float,
    *,
    zoom: int,
    position: tuple[float, float],
    tile_size: int,
) -> tuple[float, float]:
    """Pixel offset of a geodetic point from the viewport center (y down)."""
    px, py = position
    return (
        (tile_x_from_lon(lon, zoom) - px) * tile_size,
        (tile_y_from_lat(lat, zoom) - py) * tile_size,
    )


def lonlat_from_pixel_offset(
    dx: float,
    dy: float,
    *,
    zoom: int,
    position: tuple[float, float],
    tile_size: int,
) -> tuple[float, float]:
    """Inverse of :func:`pixel_offset_from_lonlat`."""
    px, py = position
    return (
        lon_from_tile_x(px + dx / tile_size, zoom),
        lat_from_tile_y(py + dy / tile_size, zoom),
    )


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance by the haversine formula."""
    d_lat = math.radians(float(lat2) - float(lat1))
    d_lon = math.radians(float(lon2) - float(lon1))
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(float(lat1)))
        * math.cos(math.radians(float(lat2)))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
