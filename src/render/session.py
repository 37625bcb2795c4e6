from __future__ import annotations

import asyncio
import itertools
import logging
import time
from typing import TYPE_CHECKING

from imaging.composer import Compositor

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from PIL import Image

    from domain.models import PlannedTile
    from imaging.attribution import AttributionOverlay
    from tiles.fetcher import FetchBatch, TileFetcher

logger = logging.getLogger(__name__)

_session_ids = itertools.count(1)


class RenderSession:
    """
    One render pass: a fresh raster, a fixed plan and its own counter.

    Nothing here is shared with other sessions, so overlapping renders
    cannot corrupt each other's completion. A session completes exactly
    once, after every planned load has resolved; the attribution is drawn
    at that moment.
    """

    def __init__(
        self,
        planned: Sequence[PlannedTile],
        *,
        extent: tuple[int, int],
        tile_size: int,
        fetcher: TileFetcher,
        overlay: AttributionOverlay | None,
        on_complete: Callable[[RenderSession], None] | None = None,
    ):
        self.id = next(_session_ids)
        self.planned: tuple[PlannedTile, ...] = tuple(planned)
        self.compositor = Compositor(extent, tile_size=tile_size)
        self._fetcher = fetcher
        self._overlay = overlay
        self._on_complete = on_complete
        self._batch: FetchBatch | None = None
        self._completed: asyncio.Future[RenderSession] | None = None
        self._started_at = 0.0

    @property
    def raster(self) -> Image.Image:
        return self.compositor.raster

    @property
    def pending(self) -> int:
        if self._batch is None:
            return len(self.planned)
        return self._batch.progress.pending

    @property
    def loaded(self) -> int:
        return self._batch.progress.loaded if self._batch else 0

    @property
    def failed(self) -> int:
        return self._batch.progress.failed if self._batch else 0

    @property
    def complete(self) -> bool:
        return self._completed is not None and self._completed.done()

    def start(self) -> RenderSession:
        """Issue all loads on the running loop and return without waiting."""
        if self._batch is not None:
            msg = f'Render session {self.id} already started'
            raise RuntimeError(msg)
        loop = asyncio.get_running_loop()
        self._started_at = time.monotonic()
        self._completed = loop.create_future()
        self._batch = self._fetcher.start(self.planned, self.compositor.draw_tile)
        logger.info('Render session %d: %d tile(s) issued', self.id, len(self.planned))
        self._batch.join.add_done_callback(self._finish)
        return self

    def _finish(self, join: asyncio.Future[list[None]]) -> None:
        assert self._completed is not None
        if join.cancelled():
            self._completed.cancel()
            return
        exc = join.exception()
        if exc is not None:
            self._completed.set_exception(exc)
            return
        if self._overlay is not None:
            try:
                self._overlay.apply(self.raster)
            except Exception as e:
                logger.exception('Render session %d: attribution failed', self.id)
                self._completed.set_exception(e)
                return
        logger.info(
            'Render session %d complete: %d loaded, %d failed in %.2fs',
            self.id,
            self.loaded,
            self.failed,
            time.monotonic() - self._started_at,
        )
        self._completed.set_result(self)
        if self._on_complete is not None:
            self._on_complete(self)

    async def wait(self) -> Image.Image:
        """Wait for completion and return the finished raster."""
        if self._completed is None:
            msg = f'Render session {self.id} was not started'
            raise RuntimeError(msg)
        await asyncio.shield(self._completed)
        return self.raster
