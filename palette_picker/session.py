"""Async controller tying extraction, state and clipboard together.

One extraction task runs per selection. Submitting a new image cancels the
in-flight task and bumps the state generation, so a late result from the
old image can never overwrite the new one.
"""

from __future__ import annotations

import asyncio

from loguru import logger

from palette_picker import registry
from palette_picker.clipboard import Clipboard, SystemClipboard
from palette_picker.core import filters as palette_filters
from palette_picker.core.config import Settings
from palette_picker.core.errors import PaletteError
from palette_picker.core.types import SourceImage
from palette_picker.extractor import extract_async
from palette_picker.state import AppState, StateStore


class PaletteSession:
    def __init__(
        self,
        settings: Settings | None = None,
        store: StateStore | None = None,
        clipboard: Clipboard | None = None,
    ):
        self.settings = settings or Settings()
        self.store = store or StateStore()
        self.clipboard = clipboard or SystemClipboard()
        registry.get(self.settings.quantizer)
        self._filters = palette_filters.resolve(self.settings.filters)
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> AppState:
        return self.store.state

    def _cancel_inflight(self) -> None:
        if self._task is not None and not self._task.done():
            logger.debug('Cancelling stale extraction (generation {})', self.store.state.generation)
            self._task.cancel()
        self._task = None

    def submit(self, source: SourceImage | bytes) -> asyncio.Task:
        """Select an image and start extracting. Must be called from a running loop."""
        if not isinstance(source, SourceImage):
            source = SourceImage(data=bytes(source))
        self._cancel_inflight()
        gen = self.store.select_image(source)
        logger.info('Selected {} ({} bytes), generation {}', source.name or '<bytes>', len(source), gen)
        self._task = asyncio.get_running_loop().create_task(self._run(gen, source))
        return self._task

    async def select(self, source: SourceImage | bytes) -> AppState:
        """Select an image and wait until its palette (or a newer one) is settled."""
        self.submit(source)
        return await self.wait()

    async def wait(self) -> AppState:
        """Wait until no extraction is in flight, following any newer submission."""
        while self._task is not None:
            task = self._task
            await asyncio.wait([task])
            if task is self._task:
                if not task.cancelled():
                    task.result()
                break
        return self.store.state

    def clear(self) -> None:
        """Remove the selected image and its palette."""
        self._cancel_inflight()
        self.store.clear_image()
        logger.info('Selection cleared')

    def copy_swatch(self, index: int) -> str:
        """Copy swatch `index`'s hex code to the clipboard. Returns the notice text."""
        palette = self.store.state.palette
        if not 0 <= index < len(palette):
            raise IndexError(f'Swatch {index} out of range (palette has {len(palette)} colours)')
        hex_code = palette[index].hex
        self.clipboard.set_text(hex_code)
        logger.debug('Copied {} to clipboard', hex_code)
        return f'{hex_code} copied to clipboard!'

    async def _run(self, generation: int, source: SourceImage) -> None:
        s = self.settings
        try:
            palette = await extract_async(source.data, s.size, s.max_colors, s.quantizer, self._filters)
        except asyncio.CancelledError:
            logger.debug('Extraction for generation {} cancelled', generation)
            raise
        except PaletteError as e:
            logger.warning('Extraction failed for {}: {}', source.name or '<bytes>', e)
            self.store.extraction_failed(generation, str(e))
            return
        except Exception as e:
            logger.exception('Unexpected failure extracting {}', source.name or '<bytes>')
            self.store.extraction_failed(generation, f'Extraction failed: {e!r}')
            raise

        if self.store.palette_computed(generation, palette):
            logger.info('Palette ready: {} colours ({})', len(palette), palette.quantizer)
        else:
            logger.debug('Discarded stale palette for generation {}', generation)
