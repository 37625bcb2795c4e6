"""Tests for tiles.planner module."""

import pytest

from domain.models import TileServerDescriptor
from domain.tile_servers import get_tile_server
from domain.viewport import ViewportState
from tiles.planner import grid_span, plan_tiles


def covering(planned, x, y, size=256):
    return [t for t in planned if t.px <= x < t.px + size and t.py <= y < t.py + size]


def make_viewport(host='OpenStreetMap', **kwargs):
    return ViewportState(get_tile_server(host), **kwargs)


class TestGridSpan:
    """Tests for grid_span."""

    def test_exact_multiple(self):
        assert grid_span(512, 256) == 4

    def test_partial_tile(self):
        assert grid_span(480, 256) == 4
        assert grid_span(360, 256) == 4
        assert grid_span(10, 256) == 3


class TestPlanTiles:
    """Tests for plan_tiles."""

    def test_center_pixel_in_exactly_one_tile(self):
        vp = make_viewport(lon=-122.257852, lat=37.872099, zoom=13, extent=(480, 360))
        planned = plan_tiles(vp)
        hits = covering(planned, 240, 180)
        assert len(hits) == 1
        assert (hits[0].tile.col, hits[0].tile.row) == (1313, 3163)

    def test_center_tile_offset_matches_fraction(self):
        vp = make_viewport(extent=(480, 360))
        planned = plan_tiles(vp)
        hit = covering(planned, 240, 180)[0]
        frac_x = vp.position[0] - int(vp.position[0])
        assert hit.px == round(240 - frac_x * 256)

    @pytest.mark.parametrize(
        ('lon', 'lat', 'zoom', 'extent'),
        [
            (-122.257852, 37.872099, 13, (480, 360)),
            (0.0, 0.0, 4, (800, 600)),
            (179.9, -33.0, 6, (300, 700)),
            (-179.9, 51.5, 10, (256, 256)),
            (12.34, 56.78, 17, (1, 1)),
        ],
    )
    def test_full_coverage(self, lon, lat, zoom, extent):
        vp = make_viewport(lon=lon, lat=lat, zoom=zoom, extent=extent)
        planned = plan_tiles(vp)
        w, h = extent
        xs = sorted({*range(0, w, 17), w - 1})
        ys = sorted({*range(0, h, 17), h - 1})
        for x in xs:
            for y in ys:
                assert covering(planned, x, y), f'pixel ({x}, {y}) not covered'

    def test_tiles_do_not_overlap(self):
        planned = plan_tiles(make_viewport())
        offsets = [(t.px, t.py) for t in planned]
        assert len(offsets) == len(set(offsets))
        for t in planned:
            assert (t.px - planned[0].px) % 256 == 0
            assert (t.py - planned[0].py) % 256 == 0

    def test_all_tiles_valid(self):
        planned = plan_tiles(make_viewport(lon=179.99, lat=-84.9, zoom=3))
        assert planned
        assert all(t.tile.is_valid for t in planned)

    def test_rows_beyond_poles_are_excluded(self):
        vp = make_viewport(lon=0.0, lat=0.0, zoom=0, extent=(480, 360))
        planned = plan_tiles(vp)
        assert len(planned) == 4
        assert {(t.tile.col, t.tile.row) for t in planned} == {(0, 0)}
        assert {t.py for t in planned} == {52}
        assert [t.px for t in planned] == [-144, 112, 368, 624]
        # The band above the world stays uncovered
        assert not covering(planned, 240, 10)

    def test_empty_plan_beyond_pole(self):
        vp = make_viewport(lon=0.0, lat=89.9, zoom=2, extent=(10, 10))
        assert plan_tiles(vp) == []

    def test_columns_wrap_at_antimeridian(self):
        vp = make_viewport(lon=179.99, lat=0.0, zoom=2, extent=(480, 360))
        cols = {t.tile.col for t in plan_tiles(vp)}
        assert 0 in cols
        assert 3 in cols
        assert all(0 <= c < 4 for c in cols)

    def test_column_major_emission(self):
        planned = plan_tiles(make_viewport())
        indices = [t.index for t in planned]
        assert indices == list(range(len(planned)))
        pxs = [t.px for t in planned]
        assert pxs == sorted(pxs)
        assert planned[0].py < planned[1].py

    def test_subdomains_round_robin(self):
        planned = plan_tiles(make_viewport())
        assert len(planned) >= 7
        assert [t.subdomain for t in planned[:7]] == ['a', 'b', 'c', 'a', 'b', 'c', 'a']
        assert planned[0].url.startswith('https://a.tile.openstreetmap.org/13/')
        assert planned[1].url.startswith('https://b.tile.openstreetmap.org/13/')

    def test_no_subdomains(self):
        planned = plan_tiles(make_viewport('Wikimedia'))
        assert all(t.subdomain is None for t in planned)
        assert all(
            t.url.startswith('https://maps.wikimedia.org/osm-intl/') for t in planned
        )

    def test_url_path_follows_index_order(self):
        planned = plan_tiles(make_viewport('Satellite'))
        t = planned[0]
        assert t.url.endswith(f'/tile/13/{t.tile.row}/{t.tile.col}.png')

    def test_descriptor_override(self):
        vp = make_viewport()
        xyz = TileServerDescriptor(
            name='Custom',
            url='example.org/t',
            index_order='xyz',
            subdomains=('s1', 's2', 's3'),
            key_suffix='?k=1',
        )
        planned = plan_tiles(vp, xyz)
        assert [t.subdomain for t in planned[:7]] == [
            's1', 's2', 's3', 's1', 's2', 's3', 's1',
        ]
        t = planned[0]
        assert t.url == f'https://s1.example.org/t/{t.tile.col}/{t.tile.row}/13.png?k=1'
