"""Bounded buffer of recently typed characters."""

from __future__ import annotations


class KeyBuffer:
    """Keeps at most ``max_size`` characters, dropping the oldest first."""

    def __init__(self, max_size: int = 60) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self._text = ""

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def append(self, chars: str) -> None:
        self._text = (self._text + chars)[-self.max_size :]

    def backspace(self) -> None:
        self._text = self._text[:-1]

    def clear(self) -> None:
        self._text = ""

    def tail(self, length: int, skip: int = 0) -> str:
        """Return ``length`` characters ending ``skip`` characters before the end."""
        end = len(self._text) - skip
        start = max(end - length, 0)
        return self._text[start:end]

    def char_before_tail(self, length: int) -> str | None:
        """Character immediately preceding the last ``length`` characters."""
        if len(self._text) <= length:
            return None
        return self._text[-length - 1]
