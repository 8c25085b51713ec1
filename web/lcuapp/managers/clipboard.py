"""
Clipboard adapter for the web front end.

The server cannot reach the operator's clipboard, so "copy" hands the text
back to the browser, which writes it with `navigator.clipboard`. This
adapter keeps the last copied text so the route can return it.
"""

from __future__ import annotations

import threading
from typing import Optional


class BrowserClipboard:
    """ClipboardPort that stages text for the requesting browser."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._text: Optional[str] = None

    def write_text(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError("clipboard text must be a string")
        with self._lock:
            self._text = text

    @property
    def last_text(self) -> Optional[str]:
        with self._lock:
            return self._text
