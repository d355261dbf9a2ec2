"""Hotstring detection and replacement for one editable text host."""

from __future__ import annotations

import asyncio
import dataclasses
import re
from collections.abc import Callable, Iterable
from typing import Any

from hotstring.config import EngineSettings
from hotstring.core.buffer import KeyBuffer
from hotstring.core.definition import (
    CallbackReplacement,
    Definition,
    HotstringOptions,
    Kind,
    PatternOptions,
    TextReplacement,
    anchor_to_end,
    parse_definition,
)
from hotstring.core.events import BufferSnapshot, EngineObserver
from hotstring.core.registry import HotstringRegistry
from hotstring.core.state import EngineState
from hotstring.host import (
    DELETE_BY_CUT,
    HISTORY_REDO,
    HISTORY_UNDO,
    INSERT_FROM_PASTE,
    INSERT_LINE_BREAK,
    INSERT_PARAGRAPH,
    INSERT_REPLACEMENT_TEXT,
    KeyEvent,
    TextHost,
)
from hotstring.logging import get_logger
from hotstring.services.executor import ActionExecutor
from hotstring.services.importer import ImportResult, import_script
from hotstring.services.matcher import LiteralMatch, Matcher, PatternMatch

NAVIGATION_KEYS = frozenset(
    {"ArrowLeft", "ArrowRight", "ArrowUp", "ArrowDown", "PageUp", "PageDown", "Home", "End", "Escape"}
)
RESET_INPUT_TYPES = frozenset({INSERT_FROM_PASTE, DELETE_BY_CUT, HISTORY_UNDO, HISTORY_REDO})
LINE_BREAK_INPUT_TYPES = frozenset({INSERT_LINE_BREAK, INSERT_PARAGRAPH})
LOCK_CAPTURE_KEYS = frozenset({"Enter", "Tab", "Backspace"})

PatternHandler = Callable[..., Any]


class HotstringEngine:
    def __init__(
        self,
        settings: EngineSettings,
        host: TextHost,
        observer: EngineObserver | None = None,
    ) -> None:
        self.settings = settings
        self.host = host
        self.observer = observer or EngineObserver()
        self.logger = get_logger("hotstring-engine")
        self.registry = HotstringRegistry()
        self.state = EngineState()
        self.buffer = KeyBuffer(settings.max_buffer)
        self._end_chars = "".join(dict.fromkeys(settings.end_chars))
        self.matcher = Matcher(self.registry, self._end_chars)
        self.reset_on_pointer = settings.reset_on_pointer
        self.executor = ActionExecutor(
            host,
            self.state,
            self.buffer,
            self.observer,
            reset_buffer=self._reset_buffer,
            publish_buffer=self._publish_buffer,
        )

    # Registration

    def register(self, definition: str, replacement: str | Callable[[], Any]) -> Definition:
        """Register ``:OPTIONS:TRIGGER`` with literal text or a callback.

        Callback replacements always run as ``X`` definitions.
        """
        parsed = parse_definition(definition)
        options = parsed.options
        if callable(replacement):
            options = dataclasses.replace(options, execute=True)
            value: TextReplacement | CallbackReplacement = CallbackReplacement(replacement)
        else:
            value = TextReplacement(replacement)

        hotstring = Definition(
            kind=Kind.LITERAL,
            trigger=parsed.trigger,
            replacement=value,
            options=options,
            label=definition,
        )
        self.registry.register(hotstring)
        self.logger.debug("Registered {}", definition)
        return hotstring

    def register_pattern(
        self,
        pattern: str | re.Pattern[str],
        handler: PatternHandler,
        *,
        priority: int = 0,
        run_async: bool = False,
        block_input: bool = True,
        timeout: int = 3000,
    ) -> Definition:
        """Register a regular expression matched against the end of the buffer.

        ``handler`` receives the full match followed by each group. If it
        returns a non-empty value the matched text is replaced by it. It may
        return an awaitable, which is awaited without blocking input.
        """
        if not callable(handler):
            raise TypeError(f"pattern handler must be callable, got {type(handler).__name__}")
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        anchored = anchor_to_end(compiled)

        hotstring = Definition(
            kind=Kind.PATTERN,
            trigger=anchored,
            replacement=CallbackReplacement(handler),
            options=HotstringOptions(priority=priority),
            pattern_options=PatternOptions(
                priority=priority, run_async=run_async, block_input=block_input, timeout=timeout
            ),
        )
        self.registry.register(hotstring)
        self.logger.debug("Registered pattern {}", compiled.pattern)
        return hotstring

    def import_script(self, text: str, stop_on_error: bool = False) -> ImportResult:
        return import_script(text, self.register, stop_on_error=stop_on_error)

    def clear_all(self) -> None:
        self.registry.clear()
        self.logger.info("All hotstrings cleared")

    # Lookup

    def trigger(self, label: str) -> None:
        """Run a literal definition's action as if typed, without backspacing."""
        definition = self.registry.find(lambda d: d.label == label)
        if definition is None:
            self.logger.warning("Hotstring definition not found: {}", label)
            return
        self.executor.fire_literal(
            LiteralMatch(definition, end_char="", trigger_length=0, end_char_length=0, typed="")
        )

    def search(self, query: str | re.Pattern[str]) -> list[str]:
        """Labels of definitions whose replacement contains ``query``.

        Strings match case-insensitively as substrings; compiled patterns are
        searched as given. Callback replacements are searched by their source.
        """
        needle = query.lower() if isinstance(query, str) else ""
        results = []
        for definition in self.registry:
            content = definition.replacement.describe()
            if isinstance(query, re.Pattern):
                found = query.search(content) is not None
            else:
                found = needle in content.lower()
            if found:
                results.append(definition.display_name)
        return results

    # Modes

    @property
    def end_chars(self) -> str:
        return self._end_chars

    def set_end_chars(self, chars: Iterable[str]) -> None:
        self._end_chars = "".join(dict.fromkeys(chars))
        self.matcher.end_chars = frozenset(self._end_chars)

    def set_boundary_reset_on_pointer(self, enabled: bool) -> None:
        self.reset_on_pointer = enabled

    def set_no_mouse(self, enabled: bool) -> None:
        self.set_boundary_reset_on_pointer(not enabled)

    def set_mute_mode(self, enabled: bool) -> None:
        self.state.set_muted(enabled)
        self.logger.info("Mute mode {}", "on" if enabled else "off")
        self._publish_buffer()

    def toggle_suspend(self) -> bool:
        self.state.suspended = not self.state.suspended
        self.logger.info("Hotstrings {}", "suspended" if self.state.suspended else "resumed")
        return self.state.suspended

    def reset_buffer(self, reason: str = "Manual Reset") -> None:
        self._reset_buffer(reason)

    @property
    def typing_task(self) -> asyncio.Task[None] | None:
        return self.executor.typing_task

    async def wait_idle(self) -> None:
        """Wait for timed typing and pending pattern callbacks to finish."""
        while True:
            tasks = [t for t in self.executor.pending_callbacks if not t.done()]
            if self.typing_task is not None and not self.typing_task.done():
                tasks.append(self.typing_task)
            if not tasks:
                return
            await asyncio.gather(*tasks)

    # Host events

    def handle_key(self, event: KeyEvent) -> bool:
        """Process a key press. Returns True when the host must not apply it."""
        if self.state.locked:
            if event.is_printable or event.key in LOCK_CAPTURE_KEYS:
                self.state.locked_keys.append(event.key)
            return True

        if event.has_modifier:
            self._reset_buffer(f"Modifier: {event.key}")
            return False

        if event.key in NAVIGATION_KEYS:
            self._reset_buffer(f"Nav: {event.key}")

        if self.state.muted:
            return self._handle_mute_key(event)

        if event.key == "Tab":
            self.host.set_range_text("\t", self.host.selection_start, self.host.selection_end)
            self._process_input("\t")
            return True

        if event.key == "Backspace":
            self.buffer.backspace()
            self._publish_buffer()
        return False

    def handle_input(self, input_type: str, data: str | None = None) -> None:
        """Process a content change the host applied after a key press."""
        if self.state.locked or self.state.muted or self.state.replacing:
            return
        if input_type in RESET_INPUT_TYPES:
            self._reset_buffer(f"Action: {input_type}")
            return
        if not data and input_type in LINE_BREAK_INPUT_TYPES:
            data = "\n"
        self._process_input(data)

    def handle_change(self) -> None:
        """Absorb the host's change notification for engine edits; it carries no text."""
        self.handle_input(INSERT_REPLACEMENT_TEXT)

    def handle_blur(self) -> None:
        self._reset_buffer("Focus Lost")

    def handle_pointer_down(self) -> None:
        if self.reset_on_pointer:
            self._reset_buffer("Mouse Click")

    def _handle_mute_key(self, event: KeyEvent) -> bool:
        if event.is_printable:
            if event.key in self.matcher.end_chars:
                text = self.state.mute_buffer + event.key
                self.state.mute_buffer = ""
                start = self.host.selection_start
                self.host.set_range_text(text, start, start)
            else:
                self.state.mute_buffer += event.key
            self._publish_buffer()
            return True
        if event.key == "Backspace":
            self.state.mute_buffer = self.state.mute_buffer[:-1]
            self._publish_buffer()
            return True
        return False

    def _process_input(self, data: str | None) -> None:
        if not data:
            return
        self.buffer.append(data)
        self._publish_buffer()

        match = self.matcher.scan(self.buffer, data, suspended=self.state.suspended)
        if match is None:
            return
        if isinstance(match, PatternMatch):
            self.executor.fire_pattern(match)
        else:
            self.executor.fire_literal(match)

    def _reset_buffer(self, reason: str | None) -> None:
        self.buffer.clear()
        if reason:
            self.logger.debug("Buffer reset: {}", reason)
        self._publish_buffer(reason)

    def _publish_buffer(self, reason: str | None = None) -> None:
        self.observer.on_buffer(
            BufferSnapshot(
                buffer=self.state.mute_buffer if self.state.muted else self.buffer.text,
                muted=self.state.muted,
                locked=self.state.locked,
                reset_reason=reason,
            )
        )
