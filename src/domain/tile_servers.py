"""Built-in tile server catalog and loading of extra servers from TOML."""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import tomlkit

from domain.models import IndexOrder, TileServerDescriptor

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

_OSM_CREDITS = 'Map data © OpenStreetMap contributors, CC-BY-SA'
_STAMEN_CREDITS = f'{_OSM_CREDITS}, Imagery © Stamen, CC-BY-3.0.'
_ARCGIS_BASE = 'services.arcgisonline.com/ArcGIS/rest/services'

_BUILTIN_SERVERS: tuple[dict[str, Any], ...] = (
    {
        'name': 'OpenStreetMap',
        'url': 'tile.openstreetmap.org',
        'subdomains': ('a', 'b', 'c'),
        'zoom_max': 19,
        'attribution': f'{_OSM_CREDITS}, Imagery © Mapnik',
    },
    {
        'name': 'Wikimedia',
        'url': 'maps.wikimedia.org/osm-intl',
        'zoom_max': 19,
        'attribution': f'{_OSM_CREDITS}, Imagery © Wikimedia',
    },
    {
        'name': 'Watercolor',
        'url': 'stamen-tiles.a.ssl.fastly.net/watercolor',
        'zoom_max': 20,
        'attribution': _STAMEN_CREDITS,
    },
    {
        'name': 'Toner',
        'url': 'stamen-tiles.a.ssl.fastly.net/toner',
        'zoom_max': 20,
        'attribution': _STAMEN_CREDITS,
    },
    {
        'name': 'Terrain',
        'url': 'stamen-tiles.a.ssl.fastly.net/terrain',
        'zoom_max': 16,
        'attribution': _STAMEN_CREDITS,
    },
    {
        'name': 'Topographic',
        'url': 'tile.opentopomap.org',
        'zoom_max': 17,
        'attribution': f'{_OSM_CREDITS}, Imagery © Opentopomaps',
    },
    {
        'name': 'Satellite',
        'url': f'{_ARCGIS_BASE}/World_Imagery/MapServer/tile',
        'index_order': IndexOrder.ZYX,
        'zoom_max': 19,
        'attribution': 'Imagery © ArcGIS',
    },
    {
        'name': 'Streets',
        'url': f'{_ARCGIS_BASE}/World_Street_Map/MapServer/tile',
        'index_order': IndexOrder.ZYX,
        'zoom_max': 19,
        'attribution': 'Imagery © ArcGIS',
    },
    {
        'name': 'Shading',
        'url': f'{_ARCGIS_BASE}/World_Topo_Map/MapServer/tile',
        'index_order': IndexOrder.ZYX,
        'zoom_max': 19,
        'attribution': 'Imagery © ArcGIS',
    },
    {
        'name': 'Mapbox (experimental)',
        'url': 'api.tiles.mapbox.com/v4/mapbox.streets',
        'key_suffix': (
            '?access_token='
            'pk.eyJ1IjoibWFwYm94IiwiYSI6ImNpejY4NXVycTA2emYycX'
            'BndHRqcmZ3N3gifQ.rJcFIG214AriISLbB6B5aw'
        ),
        'zoom_max': 20,
        'attribution': f'{_OSM_CREDITS}, Imagery © Mapbox',
    },
)


class UnknownTileServerError(KeyError):
    """Requested tile server is not in the catalog."""

    def __init__(self, name: str, known: list[str]):
        self.name = name
        self.known = known
        super().__init__(name)

    def __str__(self) -> str:
        return f'Unknown tile server {self.name!r}; known: {", ".join(self.known)}'


def _build_catalog(
    entries: list[dict[str, Any]] | tuple[dict[str, Any], ...],
) -> dict[str, TileServerDescriptor]:
    catalog: dict[str, TileServerDescriptor] = {}
    for entry in entries:
        descriptor = TileServerDescriptor.model_validate(entry)
        catalog[descriptor.name] = descriptor
    return catalog


TILE_SERVERS: Mapping[str, TileServerDescriptor] = MappingProxyType(
    _build_catalog(_BUILTIN_SERVERS)
)


def get_tile_server(
    name: str,
    catalog: Mapping[str, TileServerDescriptor] = TILE_SERVERS,
) -> TileServerDescriptor:
    try:
        return catalog[name]
    except KeyError:
        raise UnknownTileServerError(name, list(catalog)) from None


def load_tile_servers(
    path: str | Path,
    base: Mapping[str, TileServerDescriptor] = TILE_SERVERS,
) -> Mapping[str, TileServerDescriptor]:
    """
    Load extra tile servers from a TOML file and merge them over ``base``.

    Each server is a table under ``[servers]``; the table key is the server
    name::

        [servers.Local]
        url = "localhost:8080/tiles"
        index_order = "zxy"
        zoom_max = 18
        attribution = "Local tiles"

    Returns a new read-only mapping; ``base`` is left untouched.
    """
    p = Path(path)
    if not p.exists():
        msg = f'Tile server file not found: {p}'
        raise FileNotFoundError(msg)
    data = tomlkit.parse(p.read_text(encoding='utf-8')).unwrap()
    servers = data.get('servers', {})
    entries = [{**fields, 'name': name} for name, fields in servers.items()]
    extra = _build_catalog(entries)
    logger.info('Loaded %d tile server(s) from %s', len(extra), p)
    return MappingProxyType({**base, **extra})
