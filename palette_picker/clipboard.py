"""Write-only clipboard access."""

from typing import Protocol

import pyperclip


class Clipboard(Protocol):
    def set_text(self, text: str) -> None: ...


class SystemClipboard:
    """The OS clipboard, through pyperclip.

    Raises pyperclip.PyperclipException when no clipboard mechanism is
    available (e.g. a headless Linux box without xclip/xsel/wl-copy).
    """

    def set_text(self, text: str) -> None:
        pyperclip.copy(text)


class MemoryClipboard:
    """Keeps the last written text. For tests and headless use."""

    def __init__(self) -> None:
        self.text: str | None = None
        self.history: list[str] = []

    def set_text(self, text: str) -> None:
        self.text = text
        self.history.append(text)
