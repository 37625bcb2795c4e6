"""Domain layer - tile server descriptors, viewport state and profiles."""
from domain.models import (
    IndexOrder,
    PlannedTile,
    TileIdentity,
    TileServerDescriptor,
    ViewSettings,
)
from domain.profiles import list_profiles, load_profile, save_profile
from domain.tile_servers import (
    TILE_SERVERS,
    UnknownTileServerError,
    get_tile_server,
    load_tile_servers,
)
from domain.viewport import ViewportState

__all__ = [
    'TILE_SERVERS',
    'IndexOrder',
    'PlannedTile',
    'TileIdentity',
    'TileServerDescriptor',
    'UnknownTileServerError',
    'ViewSettings',
    'ViewportState',
    'get_tile_server',
    'list_profiles',
    'load_profile',
    'load_tile_servers',
    'save_profile',
]
