from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from http import HTTPStatus
from io import BytesIO
from typing import TYPE_CHECKING

import aiohttp
from PIL import Image

from shared.constants import HTTP_TIMEOUT_DEFAULT

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from domain.models import PlannedTile

    ImageLoader = Callable[[str], Awaitable[Image.Image]]
    TileSink = Callable[[Image.Image, int, int], None]

logger = logging.getLogger(__name__)


def redact_url(url: str) -> str:
    """Strip the query string (API keys) before a URL goes to the log."""
    return url.split('?', 1)[0]


async def async_fetch_tile_image(
    client: aiohttp.ClientSession,
    url: str,
    *,
    async_timeout: float = HTTP_TIMEOUT_DEFAULT,
) -> Image.Image:
    """
    Загружает один тайл и возвращает декодированный PIL.Image (RGBA).

    Любой ответ кроме 200, пустое тело или ошибка декодирования приводят
    к исключению; повторных попыток нет.
    """
    timeout = aiohttp.ClientTimeout(total=async_timeout)
    async with client.get(url, timeout=timeout) as resp:
        if resp.status != HTTPStatus.OK:
            msg = f'HTTP {resp.status} for tile {redact_url(url)}'
            raise RuntimeError(msg)
        data = await resp.read()
    if not data:
        msg = f'Empty response body for tile {redact_url(url)}'
        raise RuntimeError(msg)
    # Image.open is lazy; convert() forces the decode here
    with Image.open(BytesIO(data)) as img:
        return img.convert('RGBA')


def make_tile_loader(
    client: aiohttp.ClientSession,
    *,
    async_timeout: float = HTTP_TIMEOUT_DEFAULT,
) -> ImageLoader:
    """Bind an HTTP session into a ``load(url) -> Image`` coroutine."""

    async def _load(url: str) -> Image.Image:
        return await async_fetch_tile_image(client, url, async_timeout=async_timeout)

    return _load


@dataclass
class FetchProgress:
    """Outstanding/finished counters of one batch of tile loads."""

    total: int
    pending: int
    loaded: int = 0
    failed: int = 0

    @property
    def done(self) -> bool:
        return self.pending == 0


@dataclass
class FetchBatch:
    progress: FetchProgress
    tasks: list[asyncio.Task[None]]
    join: asyncio.Future[list[None]]


class TileFetcher:
    """Issues one independent load per planned tile, all at once."""

    def __init__(self, load: ImageLoader):
        self._load = load

    async def fetch_one(self, planned: PlannedTile) -> Image.Image | None:
        """Load a single tile; any failure yields ``None``."""
        try:
            return await self._load(planned.url)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.debug(
                'Tile %s/%s/%s failed (%s): %s',
                planned.tile.zoom,
                planned.tile.col,
                planned.tile.row,
                redact_url(planned.url),
                e,
            )
            return None

    def start(self, planned: Sequence[PlannedTile], on_tile: TileSink) -> FetchBatch:
        """
        Schedule every load on the running loop and return immediately.

        The counter is set to the full plan size before any task exists, so
        it can only reach zero after the last resolution. ``join`` resolves
        once every load has resolved, successfully or not.
        """
        loop = asyncio.get_running_loop()
        progress = FetchProgress(total=len(planned), pending=len(planned))

        async def _worker(tile: PlannedTile) -> None:
            img = await self.fetch_one(tile)
            try:
                if img is None:
                    progress.failed += 1
                    return
                try:
                    on_tile(img, tile.px, tile.py)
                except Exception:
                    logger.warning(
                        'Failed to draw tile %s', redact_url(tile.url), exc_info=True
                    )
                    progress.failed += 1
                else:
                    progress.loaded += 1
            finally:
                progress.pending -= 1

        tasks = [loop.create_task(_worker(t)) for t in planned]
        join = asyncio.gather(*tasks)
        return FetchBatch(progress=progress, tasks=tasks, join=join)
