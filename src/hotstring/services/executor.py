"""Replacement output: backspacing, case conformity, instant and timed sends."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from hotstring.core.buffer import KeyBuffer
from hotstring.core.definition import CallbackReplacement
from hotstring.core.events import STATUS_LOCKED, STATUS_READY, STATUS_REPLAYING, EngineObserver
from hotstring.core.state import EngineState, Phase
from hotstring.host import TextHost
from hotstring.logging import get_logger
from hotstring.services.matcher import LiteralMatch, PatternMatch
from hotstring.utils.text import conform_case, expand_send_keys, extract_caret_offset

REPLAY_KEYS = {"Enter": "\n", "Tab": "\t", "Backspace": ""}


class ActionExecutor:
    def __init__(
        self,
        host: TextHost,
        state: EngineState,
        buffer: KeyBuffer,
        observer: EngineObserver,
        reset_buffer: Callable[[str | None], None],
        publish_buffer: Callable[[], None],
    ) -> None:
        self.host = host
        self.state = state
        self.buffer = buffer
        self.observer = observer
        self._reset_buffer = reset_buffer
        self._publish_buffer = publish_buffer
        self.logger = get_logger("executor")
        self._typing_task: asyncio.Task[None] | None = None
        self._pending_callbacks: set[asyncio.Task[None]] = set()

    @property
    def typing_task(self) -> asyncio.Task[None] | None:
        return self._typing_task

    @property
    def pending_callbacks(self) -> frozenset[asyncio.Task[None]]:
        return frozenset(self._pending_callbacks)

    def fire_literal(self, match: LiteralMatch) -> None:
        definition = match.definition
        options = definition.options
        self._reset_buffer(None)

        backspaces = 0 if options.no_backspace else match.trigger_length + match.end_char_length
        replacement = definition.replacement

        if isinstance(replacement, CallbackReplacement):
            self.delete_before_caret(backspaces)
            self.logger.info("Running callback for {}", definition.display_name)
            replacement.callback()
            self.observer.on_fire(definition)
            return

        text = replacement.text
        if not options.case_sensitive and not options.no_conformity and match.typed:
            text = conform_case(match.typed, text)
        if not options.fire_immediately and not options.omit_end_char:
            text += match.end_char

        self.logger.info("Expanding {}", definition.display_name)
        if options.uses_timed_typing:
            self.start_typing(backspaces, text, options.key_delay, options.raw_mode)
        else:
            self.replace_instant(backspaces, text, options.raw_mode)
        self.observer.on_fire(definition)

    def fire_pattern(self, match: PatternMatch) -> None:
        definition = match.definition
        self._reset_buffer(None)

        span = len(match.match.group(0))
        self.logger.info("Pattern {} matched {!r}", definition.display_name, match.match.group(0))
        result = definition.replacement.callback(match.match.group(0), *match.match.groups())
        if inspect.isawaitable(result):
            self._schedule_pattern_result(result, span)
        else:
            self._apply_pattern_result(result, span)
        self.observer.on_fire(definition)

    def _apply_pattern_result(self, result: Any, span: int) -> None:
        if not result:
            return
        self.replace_instant(span, str(result), raw=False)

    def _schedule_pattern_result(self, result: Awaitable[Any], span: int) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.logger.warning("Pattern handler returned an awaitable but no event loop is running")
            if inspect.iscoroutine(result):
                result.close()
            return

        async def finish() -> None:
            self._apply_pattern_result(await result, span)

        task = loop.create_task(finish())
        self._pending_callbacks.add(task)
        task.add_done_callback(self._pending_callbacks.discard)
        task.add_done_callback(self._log_pattern_failure)

    def _log_pattern_failure(self, task: asyncio.Task[None]) -> None:
        if task.cancelled() or task.exception() is None:
            return
        exc = task.exception()
        self.logger.opt(exception=exc).error("Pattern handler failed: {!r}", exc)

    def delete_before_caret(self, count: int) -> None:
        if count <= 0:
            return
        start = self.host.selection_start
        self.host.set_range_text("", max(start - count, 0), start)

    def replace_instant(self, backspaces: int, text: str, raw: bool) -> bool:
        """Delete ``backspaces`` characters before the caret and insert ``text`` in one edit."""
        self.state.replacing = True
        try:
            start = self.host.selection_start
            if start < backspaces:
                self.logger.warning(
                    "Caret at {} is too close to the start to remove {} characters", start, backspaces
                )
                return False
            self.host.set_range_text("", start - backspaces, start)

            text, move_left = extract_caret_offset(text)
            output = text if raw else expand_send_keys(text)
            position = self.host.selection_start
            self.host.set_range_text(output, position, position)
            if move_left > 0:
                self.host.set_caret(self.host.selection_end - move_left)

            self.host.notify_change()
            return True
        finally:
            self.state.replacing = False

    def start_typing(self, backspaces: int, text: str, delay_ms: int, raw: bool) -> None:
        if self.state.phase in (Phase.LOCKED, Phase.REPLAYING):
            self.logger.warning("Timed typing already running; sending instantly instead")
            self.replace_instant(backspaces, text, raw)
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.logger.warning("No running event loop for timed typing; sending instantly instead")
            self.replace_instant(backspaces, text, raw)
            return

        self.state.lock()
        self.observer.on_status(STATUS_LOCKED)
        self._publish_buffer()
        self.delete_before_caret(backspaces)
        self._typing_task = loop.create_task(self._type_text(text, delay_ms, raw))

    async def _type_text(self, text: str, delay_ms: int, raw: bool) -> None:
        content = text if raw else expand_send_keys(text)
        try:
            for char in content:
                position = self.host.selection_start
                self.host.set_range_text(char, position, position)
                await asyncio.sleep(delay_ms / 1000)
        finally:
            self._replay()

    def _replay(self) -> None:
        keys = self.state.begin_replay()
        self.observer.on_status(STATUS_REPLAYING)
        replay_text = "".join(REPLAY_KEYS.get(key, key) for key in keys)
        if replay_text:
            self.logger.debug("Replaying {} keys captured while typing", len(keys))
            position = self.host.selection_start
            self.host.set_range_text(replay_text, position, position)
            self.buffer.append(replay_text)
        self.state.finish_replay()
        self._publish_buffer()
        self.observer.on_status(STATUS_READY)
