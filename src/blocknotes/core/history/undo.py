"""Bounded undo/redo history over one text buffer."""

import threading
from collections import deque

from blocknotes.config import UNDO_HISTORY_LIMIT


class UndoManager:
    """Dual-stack history for a continuously edited string.

    Recording a new state discards the redo history. The undo stack keeps at
    most ``limit`` entries, evicting the oldest first. Each public operation
    runs under the instance lock.
    """

    def __init__(self, initial_content: str = "", *, limit: int = UNDO_HISTORY_LIMIT) -> None:
        if limit < 1:
            msg = f"History limit must be at least 1, got {limit}"
            raise ValueError(msg)
        self._current = initial_content
        self._undo: deque[str] = deque(maxlen=limit)
        self._redo: list[str] = []
        self._lock = threading.Lock()

    @property
    def current(self) -> str:
        return self._current

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    def record_state(self, content: str) -> None:
        """Make ``content`` current; a no-op if it equals the current value."""
        with self._lock:
            if content == self._current:
                return
            self._undo.append(self._current)
            self._redo.clear()
            self._current = content

    def undo(self) -> str | None:
        """Step back. Returns the restored content, or None if there is no history."""
        with self._lock:
            if not self._undo:
                return None
            self._redo.append(self._current)
            self._current = self._undo.pop()
            return self._current

    def redo(self) -> str | None:
        """Step forward. Returns the restored content, or None if nothing was undone."""
        with self._lock:
            if not self._redo:
                return None
            self._undo.append(self._current)
            self._current = self._redo.pop()
            return self._current

    def replace_current(self, content: str) -> None:
        """Overwrite the current content without recording history (external reloads)."""
        with self._lock:
            self._current = content

    def clear(self) -> None:
        """Drop all history and reset the buffer to empty."""
        with self._lock:
            self._undo.clear()
            self._redo.clear()
            self._current = ""
