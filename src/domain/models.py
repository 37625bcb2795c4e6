from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from shared.constants import (
    DEFAULT_HEIGHT_PX,
    DEFAULT_HOST,
    DEFAULT_LAT,
    DEFAULT_LON,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_WIDTH_PX,
    DEFAULT_ZOOM,
)


class IndexOrder(str, Enum):
    """Порядок индексов тайла в пути URL."""

    ZXY = 'zxy'
    ZYX = 'zyx'
    XYZ = 'xyz'

    def format_path(self, zoom: int, col: int, row: int) -> str:
        if self is IndexOrder.ZXY:
            return f'{zoom}/{col}/{row}'
        if self is IndexOrder.ZYX:
            return f'{zoom}/{row}/{col}'
        if self is IndexOrder.XYZ:
            return f'{col}/{row}/{zoom}'
        msg = f'Unsupported index order: {self!r}'
        raise ValueError(msg)


class TileServerDescriptor(BaseModel):
    """Описание тайлового сервера (неизменяемое)."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    name: str
    # Хост и путь без схемы, например 'tile.openstreetmap.org'
    url: str
    index_order: IndexOrder = IndexOrder.ZXY
    # Поддомены для распределения запросов между хостами CDN
    subdomains: tuple[str, ...] | None = None
    # Суффикс запроса, например '?access_token=...'
    key_suffix: str | None = None
    zoom_min: int = 0
    zoom_max: int = 19
    attribution: str = ''

    @field_validator('url')
    @classmethod
    def strip_url(cls, v: str) -> str:
        v = v.strip().strip('/')
        if not v:
            msg = 'Tile server url must not be empty'
            raise ValueError(msg)
        return v

    @field_validator('subdomains')
    @classmethod
    def empty_subdomains_to_none(
        cls, v: tuple[str, ...] | None
    ) -> tuple[str, ...] | None:
        return v or None

    @model_validator(mode='after')
    def check_zoom_bounds(self) -> TileServerDescriptor:
        if not (0 <= self.zoom_min <= self.zoom_max):
            msg = (
                f'Invalid zoom bounds for {self.name}: '
                f'[{self.zoom_min}, {self.zoom_max}]'
            )
            raise ValueError(msg)
        return self

    def clamp_zoom(self, zoom: float) -> int:
        """Floor a requested zoom and clamp it into the server's bounds."""
        return max(min(self.zoom_max, math.floor(zoom)), self.zoom_min)

    def subdomain_for(self, index: int) -> str | None:
        if not self.subdomains:
            return None
        return self.subdomains[index % len(self.subdomains)]

    def tile_url(
        self, zoom: int, col: int, row: int, *, subdomain: str | None = None
    ) -> str:
        host = f'{subdomain}.{self.url}' if subdomain else self.url
        path = self.index_order.format_path(zoom, col, row)
        return f'https://{host}/{path}.png{self.key_suffix or ""}'


@dataclass(frozen=True)
class TileIdentity:
    zoom: int
    col: int
    row: int

    @property
    def is_valid(self) -> bool:
        size = 2**self.zoom
        return 0 <= self.col < size and 0 <= self.row < size


@dataclass(frozen=True)
class PlannedTile:
    """Тайл с заранее вычисленным смещением в пикселях растра."""

    tile: TileIdentity
    px: int
    py: int
    index: int
    url: str
    subdomain: str | None = None


class ViewSettings(BaseModel):
    """Параметры вида карты, загружаемые из TOML-профиля."""

    model_config = {
        'extra': 'ignore',
    }

    host: str = DEFAULT_HOST
    lon: float = DEFAULT_LON
    lat: float = DEFAULT_LAT
    zoom: int = DEFAULT_ZOOM
    width: int = DEFAULT_WIDTH_PX
    height: int = DEFAULT_HEIGHT_PX
    output_path: str = DEFAULT_OUTPUT_PATH

    @field_validator('width', 'height')
    @classmethod
    def validate_extent(cls, v: int) -> int:
        if v <= 0:
            msg = 'Размер вида должен быть положительным'
            raise ValueError(msg)
        return v

    @field_validator('lat')
    @classmethod
    def validate_lat(cls, v: float) -> float:
        if not (-90.0 < v < 90.0):
            msg = 'Широта должна быть в диапазоне (-90, 90)'
            raise ValueError(msg)
        return v
