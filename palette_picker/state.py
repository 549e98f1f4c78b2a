"""Application state for the palette screen.

AppState is immutable. The only way to change it is through a transition on
StateStore:

  select_image(source)             new selection; palette cleared, generation bumped
  clear_image()                    remove the selection; generation bumped
  palette_computed(gen, palette)   apply a result if gen is still current
  extraction_failed(gen, error)    drop the selection, record the error

Each selection gets a generation number. Results tagged with an older
generation are ignored, so the last submitted image always wins.
Subscribers are called with the new state after every applied transition.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace

from palette_picker.core.types import Palette, SourceImage

Listener = Callable[['AppState'], None]


@dataclass(frozen=True)
class AppState:
    image: SourceImage | None = None
    palette: Palette = field(default_factory=Palette.empty)
    error: str | None = None
    generation: int = 0
    pending: bool = False

    @property
    def has_image(self) -> bool:
        return self.image is not None

    @property
    def count(self) -> int:
        return len(self.palette)


class StateStore:
    """Holds the current AppState and notifies subscribers on change."""

    def __init__(self, initial: AppState | None = None):
        self._state = initial or AppState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, state: AppState) -> AppState:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
        return state

    def select_image(self, source: SourceImage) -> int:
        """Start a new selection. Returns its generation."""
        gen = self._state.generation + 1
        self._set(AppState(image=source, generation=gen, pending=True))
        return gen

    def clear_image(self) -> None:
        self._set(AppState(generation=self._state.generation + 1))

    def palette_computed(self, generation: int, palette: Palette) -> bool:
        """Apply a finished palette. Returns False if the result is stale."""
        if generation != self._state.generation or not self._state.pending:
            return False
        self._set(replace(self._state, palette=palette, error=None, pending=False))
        return True

    def extraction_failed(self, generation: int, error: str) -> bool:
        """Record a failed extraction. Returns False if the result is stale."""
        if generation != self._state.generation or not self._state.pending:
            return False
        self._set(AppState(error=error, generation=generation))
        return True
