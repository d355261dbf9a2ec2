"""Editable-text host contract and an in-memory implementation."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from hotstring.services.hotstring_engine import HotstringEngine

ChangeListener = Callable[[], None]

INSERT_TEXT = "insertText"
INSERT_LINE_BREAK = "insertLineBreak"
INSERT_PARAGRAPH = "insertParagraph"
INSERT_REPLACEMENT_TEXT = "insertReplacementText"
INSERT_FROM_PASTE = "insertFromPaste"
DELETE_BY_CUT = "deleteByCut"
DELETE_CONTENT_BACKWARD = "deleteContentBackward"
HISTORY_UNDO = "historyUndo"
HISTORY_REDO = "historyRedo"

CONTROL_CHAR_KEYS = {"\n": "Enter", "\t": "Tab", "\b": "Backspace"}


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """A key press as delivered by the host: a printable character or a key name."""

    key: str
    ctrl: bool = False
    alt: bool = False
    meta: bool = False

    @property
    def has_modifier(self) -> bool:
        return self.ctrl or self.alt or self.meta

    @property
    def is_printable(self) -> bool:
        return len(self.key) == 1


class TextHost(Protocol):
    @property
    def selection_start(self) -> int: ...

    @property
    def selection_end(self) -> int: ...

    def set_range_text(self, text: str, start: int, end: int) -> None:
        """Replace ``[start, end)`` with ``text`` and leave the caret after it."""
        ...

    def set_caret(self, position: int) -> None: ...

    def notify_change(self) -> None: ...

    def subscribe(self, listener: ChangeListener) -> None: ...


class MemoryTextHost:
    """A string with a selection, standing in for a text field."""

    def __init__(self, text: str = "", caret: int | None = None) -> None:
        self.text = text
        position = len(text) if caret is None else caret
        self._start = self._end = self._clamp(position)
        self._listeners: list[ChangeListener] = []

    def __repr__(self) -> str:
        return f"MemoryTextHost(text={self.text!r}, selection=({self._start}, {self._end}))"

    @property
    def selection_start(self) -> int:
        return self._start

    @property
    def selection_end(self) -> int:
        return self._end

    def _clamp(self, position: int) -> int:
        return max(0, min(position, len(self.text)))

    def select(self, start: int, end: int) -> None:
        self._start, self._end = sorted((self._clamp(start), self._clamp(end)))

    def set_caret(self, position: int) -> None:
        self._start = self._end = self._clamp(position)

    def set_range_text(self, text: str, start: int, end: int) -> None:
        start, end = self._clamp(start), self._clamp(end)
        self.text = self.text[:start] + text + self.text[end:]
        self.set_caret(start + len(text))

    def subscribe(self, listener: ChangeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def notify_change(self) -> None:
        for listener in list(self._listeners):
            listener()

    def apply_default(self, event: KeyEvent) -> tuple[str, str | None] | None:
        """Perform a key's default edit. Returns the resulting input event, if any."""
        if event.has_modifier:
            return None
        if event.is_printable:
            self.set_range_text(event.key, self._start, self._end)
            return INSERT_TEXT, event.key
        if event.key == "Enter":
            self.set_range_text("\n", self._start, self._end)
            return INSERT_LINE_BREAK, None
        if event.key == "Backspace":
            if self._start == self._end and self._start > 0:
                self.set_range_text("", self._start - 1, self._start)
            else:
                self.set_range_text("", self._start, self._end)
            return DELETE_CONTENT_BACKWARD, None
        moves = {
            "ArrowLeft": self._start - 1,
            "ArrowRight": self._end + 1,
            "Home": 0,
            "End": len(self.text),
        }
        if event.key in moves:
            self.set_caret(moves[event.key])
        return None


def _as_event(key: str | KeyEvent) -> KeyEvent:
    if isinstance(key, KeyEvent):
        return key
    return KeyEvent(CONTROL_CHAR_KEYS.get(key, key))


def type_keys(engine: HotstringEngine, host: MemoryTextHost, keys: Iterable[str | KeyEvent]) -> None:
    """Feed keys through the keydown / default action / input sequence of a text field.

    A plain string is typed character by character; ``"\\n"``, ``"\\t"`` and
    ``"\\b"`` stand for Enter, Tab and Backspace.
    """
    for key in keys:
        event = _as_event(key)
        if engine.handle_key(event):
            continue
        if (result := host.apply_default(event)) is not None:
            engine.handle_input(*result)
