"""Tests for domain.tile_servers module."""

import pytest
from pydantic import ValidationError

from domain.models import IndexOrder
from domain.tile_servers import (
    TILE_SERVERS,
    UnknownTileServerError,
    get_tile_server,
    load_tile_servers,
)


class TestCatalog:
    """Tests for the built-in catalog."""

    def test_builtin_servers(self):
        assert len(TILE_SERVERS) == 10
        assert 'OpenStreetMap' in TILE_SERVERS
        assert 'Mapbox (experimental)' in TILE_SERVERS

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            TILE_SERVERS['Other'] = TILE_SERVERS['Wikimedia']

    def test_openstreetmap_has_subdomains(self):
        osm = get_tile_server('OpenStreetMap')
        assert osm.subdomains == ('a', 'b', 'c')
        assert osm.zoom_max == 19

    def test_arcgis_servers_use_zyx(self):
        for name in ('Satellite', 'Streets', 'Shading'):
            assert get_tile_server(name).index_order is IndexOrder.ZYX

    def test_mapbox_has_key_suffix(self):
        assert get_tile_server('Mapbox (experimental)').key_suffix.startswith(
            '?access_token='
        )

    def test_every_server_has_attribution(self):
        assert all(d.attribution for d in TILE_SERVERS.values())

    def test_unknown_server(self):
        with pytest.raises(UnknownTileServerError) as exc_info:
            get_tile_server('Nope')
        assert isinstance(exc_info.value, KeyError)
        assert 'Nope' in str(exc_info.value)
        assert 'OpenStreetMap' in exc_info.value.known


class TestLoadTileServers:
    """Tests for loading extra servers from TOML."""

    def test_load_and_merge(self, tmp_path):
        path = tmp_path / 'servers.toml'
        path.write_text(
            '[servers.Local]\n'
            'url = "localhost:8080/tiles"\n'
            'index_order = "xyz"\n'
            'subdomains = ["t1", "t2"]\n'
            'zoom_max = 12\n'
            'attribution = "Local tiles"\n',
            encoding='utf-8',
        )
        catalog = load_tile_servers(path)
        local = catalog['Local']
        assert local.index_order is IndexOrder.XYZ
        assert local.subdomains == ('t1', 't2')
        assert 'OpenStreetMap' in catalog
        assert 'Local' not in TILE_SERVERS

    def test_override_builtin(self, tmp_path):
        path = tmp_path / 'servers.toml'
        path.write_text(
            '[servers.Wikimedia]\nurl = "mirror.example.org"\n', encoding='utf-8'
        )
        catalog = load_tile_servers(path)
        assert catalog['Wikimedia'].url == 'mirror.example.org'
        assert TILE_SERVERS['Wikimedia'].url == 'maps.wikimedia.org/osm-intl'

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_tile_servers(tmp_path / 'missing.toml')

    def test_invalid_server(self, tmp_path):
        path = tmp_path / 'servers.toml'
        path.write_text(
            '[servers.Bad]\nurl = "x.org"\nzoom_min = 9\nzoom_max = 3\n',
            encoding='utf-8',
        )
        with pytest.raises(ValidationError):
            load_tile_servers(path)
