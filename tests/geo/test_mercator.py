"""Tests for geo.mercator module."""

import math

import pytest

from geo.mercator import (
    distance_km,
    lat_from_tile_y,
    lon_from_tile_x,
    lonlat_from_pixel_offset,
    pixel_offset_from_lonlat,
    tile_x_from_lon,
    tile_y_from_lat,
    wrap_tile,
)


class TestProjection:
    """Forward and inverse Web Mercator."""

    def test_origin_maps_to_world_center(self):
        assert tile_x_from_lon(0, 1) == pytest.approx(1.0)
        assert tile_y_from_lat(0, 1) == pytest.approx(1.0)

    def test_antimeridian_is_left_edge(self):
        assert tile_x_from_lon(-180, 5) == pytest.approx(0.0)
        assert lon_from_tile_x(0, 5) == pytest.approx(-180.0)

    def test_known_tile_berkeley(self):
        """Berkeley at zoom 13 lies in tile 1313/3163."""
        assert math.floor(tile_x_from_lon(-122.257852, 13)) == 1313
        assert math.floor(tile_y_from_lat(37.872099, 13)) == 3163

    def test_north_is_smaller_y(self):
        assert tile_y_from_lat(60, 4) < tile_y_from_lat(0, 4) < tile_y_from_lat(-60, 4)

    @pytest.mark.parametrize('zoom', [0, 1, 7, 13, 19])
    @pytest.mark.parametrize('lon', [-179.999, -122.257852, -0.5, 0.0, 45.25, 179.999])
    def test_lon_round_trip(self, zoom, lon):
        assert lon_from_tile_x(tile_x_from_lon(lon, zoom), zoom) == pytest.approx(
            lon, abs=1e-6
        )

    @pytest.mark.parametrize('zoom', [0, 1, 7, 13, 19])
    @pytest.mark.parametrize('lat', [-84.99, -37.872099, 0.0, 12.5, 60.0, 84.99])
    def test_lat_round_trip(self, zoom, lat):
        assert lat_from_tile_y(tile_y_from_lat(lat, zoom), zoom) == pytest.approx(
            lat, abs=1e-6
        )

    @pytest.mark.parametrize('y, expected', [(-200.0, 90.0), (1e6, -90.0)])
    def test_lat_saturates_far_beyond_poles(self, y, expected):
        assert lat_from_tile_y(y, 0) == pytest.approx(expected)

    def test_accepts_numeric_strings(self):
        assert tile_x_from_lon('0', 1) == pytest.approx(1.0)


class TestWrapTile:
    """Tests for wrap_tile."""

    def test_inside_range_unchanged(self):
        assert wrap_tile(2.5, 2) == 2.5

    def test_negative_wraps(self):
        assert wrap_tile(-1, 2) == 3

    def test_far_negative_wraps(self):
        assert wrap_tile(-9, 2) == 3

    def test_upper_bound_wraps_to_zero(self):
        assert wrap_tile(4.0, 2) == 0.0

    def test_tiny_negative_never_returns_upper_bound(self):
        result = wrap_tile(-1e-20, 3)
        assert 0 <= result < 8


class TestPixelOffsets:
    """Center-relative pixel conversions."""

    def test_center_is_zero_offset(self):
        zoom = 13
        position = (tile_x_from_lon(10.0, zoom), tile_y_from_lat(50.0, zoom))
        dx, dy = pixel_offset_from_lonlat(
            10.0, 50.0, zoom=zoom, position=position, tile_size=256
        )
        assert dx == pytest.approx(0.0)
        assert dy == pytest.approx(0.0)

    def test_round_trip(self):
        zoom = 10
        position = (100.25, 300.75)
        lon, lat = lonlat_from_pixel_offset(
            37.0, -81.0, zoom=zoom, position=position, tile_size=256
        )
        dx, dy = pixel_offset_from_lonlat(
            lon, lat, zoom=zoom, position=position, tile_size=256
        )
        assert dx == pytest.approx(37.0, abs=1e-6)
        assert dy == pytest.approx(-81.0, abs=1e-6)

    def test_one_tile_east_is_tile_size_pixels(self):
        zoom = 3
        position = (4.0, 4.0)
        lon = lon_from_tile_x(5.0, zoom)
        dx, _ = pixel_offset_from_lonlat(
            lon, 0.0, zoom=zoom, position=position, tile_size=256
        )
        assert dx == pytest.approx(256.0)


class TestDistanceKm:
    """Tests for haversine distance."""

    def test_same_point_is_zero(self):
        assert distance_km(37.8, -122.4, 37.8, -122.4) == 0

    def test_symmetric(self):
        a = distance_km(37.8, -122.4, 51.5, -0.12)
        b = distance_km(51.5, -0.12, 37.8, -122.4)
        assert a == b

    def test_one_degree_of_latitude(self):
        assert distance_km(0, 0, 1, 0) == pytest.approx(111.195, rel=1e-3)

    def test_antipodes(self):
        assert distance_km(0, 0, 0, 180) == pytest.approx(math.pi * 6371.0)
